"""Device layer: input events, backend protocol, controller and preview device."""

from loupedeck_linux.devices.controller import DeviceController
from loupedeck_linux.devices.preview import PreviewDevice
from loupedeck_linux.devices.protocols import (
    ButtonDownEvent,
    ButtonUpEvent,
    DeviceBackend,
    DeviceEvent,
    DeviceObserver,
    DisplaySink,
    KnobDownEvent,
    KnobRotateEvent,
    RenderCallback,
    TouchEndEvent,
    TouchEvent,
    TouchMoveEvent,
    TouchPoint,
    TouchStartEvent,
)

__all__ = [
    "ButtonDownEvent",
    "ButtonUpEvent",
    "DeviceBackend",
    "DeviceController",
    "DeviceEvent",
    "DeviceObserver",
    "DisplaySink",
    "KnobDownEvent",
    "KnobRotateEvent",
    "PreviewDevice",
    "RenderCallback",
    "TouchEndEvent",
    "TouchEvent",
    "TouchMoveEvent",
    "TouchPoint",
    "TouchStartEvent",
]
