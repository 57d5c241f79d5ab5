"""Data models for loupedeck-linux."""

from .color import Color, HexColor
from .constants import (
    COMPONENT_TYPES,
    DEFAULT_LED_COLORS,
    VIBRATION_PATTERNS,
    ComponentType,
)
from .device import DEVICE_PRESETS, LOUPEDECK_LIVE, LOUPEDECK_LIVE_S, DeviceMetadata
from .grid import CellCoord, GridPosition
from .pages import (
    ButtonOptions,
    ClockOptions,
    ComponentConfig,
    MediaDisplayOptions,
    MediaPlayPauseOptions,
    NotificationDisplayOptions,
    PageConfig,
    PageMeta,
    PagesConfig,
    VolumeDisplayOptions,
    WorkspaceOptions,
)
from .settings import AppSettings, KnobAssignments

__all__ = [
    "AppSettings",
    "ButtonOptions",
    "COMPONENT_TYPES",
    "CellCoord",
    "ClockOptions",
    "Color",
    "ComponentConfig",
    "ComponentType",
    "DEFAULT_LED_COLORS",
    "DEVICE_PRESETS",
    "DeviceMetadata",
    "GridPosition",
    "HexColor",
    "KnobAssignments",
    "LOUPEDECK_LIVE",
    "LOUPEDECK_LIVE_S",
    "MediaDisplayOptions",
    "MediaPlayPauseOptions",
    "NotificationDisplayOptions",
    "PageConfig",
    "PageMeta",
    "PagesConfig",
    "VIBRATION_PATTERNS",
    "VolumeDisplayOptions",
    "WorkspaceOptions",
]
