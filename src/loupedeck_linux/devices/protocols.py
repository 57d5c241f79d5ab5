"""Device events and protocols for the hardware collaborator.

The hardware driver (USB transport, screen buffer encoding, discovery)
lives outside this package. A driver plugs in by implementing
DeviceBackend and reporting input as the DeviceEvent subclasses below.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from PIL import ImageDraw

    from loupedeck_linux.models import Color, DeviceMetadata

# Draw callback handed to the display: receives the frame's drawing surface
RenderCallback = Callable[["ImageDraw.ImageDraw"], None]


@dataclass(frozen=True)
class TouchPoint:
    """One finger on the touch screen, in screen pixels."""

    x: float
    y: float
    touch_id: int = 0


class DeviceEvent:
    """Generic device event (input from hardware)."""

    pass


class ButtonDownEvent(DeviceEvent):
    """Physical button was pressed."""

    def __init__(self, button_id: int):
        self.button_id = button_id

    def __repr__(self) -> str:
        return f"ButtonDownEvent(button_id={self.button_id})"


class ButtonUpEvent(DeviceEvent):
    """Physical button was released."""

    def __init__(self, button_id: int):
        self.button_id = button_id

    def __repr__(self) -> str:
        return f"ButtonUpEvent(button_id={self.button_id})"


class KnobDownEvent(DeviceEvent):
    """Knob was pushed."""

    def __init__(self, knob_id: str):
        self.knob_id = knob_id

    def __repr__(self) -> str:
        return f"KnobDownEvent(knob_id={self.knob_id!r})"


class KnobRotateEvent(DeviceEvent):
    """Knob was turned; delta is +1 per detent clockwise, -1 counter-clockwise."""

    def __init__(self, knob_id: str, delta: int):
        self.knob_id = knob_id
        self.delta = delta

    def __repr__(self) -> str:
        return f"KnobRotateEvent(knob_id={self.knob_id!r}, delta={self.delta})"


class TouchEvent(DeviceEvent):
    """Batch of touch points reported in one hardware event."""

    def __init__(self, touches: Sequence[TouchPoint]):
        self.touches = list(touches)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(touches={self.touches})"


class TouchStartEvent(TouchEvent):
    """Finger(s) touched the screen."""

    pass


class TouchMoveEvent(TouchEvent):
    """Finger(s) moved on the screen."""

    pass


class TouchEndEvent(TouchEvent):
    """Finger(s) left the screen."""

    pass


@runtime_checkable
class DisplaySink(Protocol):
    """Anything that can put a frame on the screen."""

    async def draw(self, render: RenderCallback) -> None:
        """Create a frame surface, call ``render`` on it and show the result."""
        ...


@runtime_checkable
class DeviceBackend(Protocol):
    """Protocol implemented by a hardware driver (or the preview device)."""

    @property
    def metadata(self) -> DeviceMetadata:
        """Static screen/grid description of the connected device."""
        ...

    async def connect(self) -> None:
        """Open the device."""
        ...

    async def disconnect(self) -> None:
        """Close the device."""
        ...

    async def draw_screen(self, render: RenderCallback) -> None:
        """Render a full frame with ``render`` and push it to the screen."""
        ...

    async def set_button_color(self, button_id: int, color: Color) -> None:
        """Set the LED color of a physical button."""
        ...

    async def vibrate(self, pattern: Sequence[int]) -> None:
        """Play a haptic pattern (durations in ms, vibrate/pause alternating)."""
        ...

    def on_event(self, callback: Callable[[DeviceEvent], None]) -> None:
        """Register the callback that receives every input event."""
        ...


class DeviceObserver(Protocol):
    """Receives input events from the DeviceController."""

    def on_device_event(self, event: DeviceEvent) -> None:
        ...


