"""Constants shared by the page configuration, handlers and the HTTP API."""

from typing import Literal

ComponentType = Literal[
    "clock",
    "button",
    "volumeDisplay",
    "mediaDisplay",
    "mediaPlayPause",
    "workspace",
    "notificationDisplay",
]

COMPONENT_TYPES: tuple[str, ...] = (
    "clock",
    "button",
    "volumeDisplay",
    "mediaDisplay",
    "mediaPlayPause",
    "workspace",
    "notificationDisplay",
)

# Component types that draw on top of a base component and are only shown temporarily
OVERLAY_TYPES: frozenset[str] = frozenset({"volumeDisplay", "mediaDisplay", "notificationDisplay"})

# Vibration patterns in milliseconds (vibrate, pause, vibrate, ...)
VIBRATION_PATTERNS: dict[str, tuple[int, ...]] = {
    "tap": (30,),
    "doubleTap": (30, 50, 30),
    "success": (50, 80, 50),
    "error": (200,),
    "warning": (100, 80, 100),
    "connect": (30, 50, 50, 50, 70),
    "longPress": (150,),
    "notification": (50, 100, 50, 100, 50),
}

DEFAULT_LED_COLORS: dict[int, str] = {
    0: "#FFFFFF",
    1: "#FF0000",
    2: "#00FF00",
    3: "#0000FF",
}

# Page holding the physical button definitions ("button0" ... "button3")
PHYSICAL_BUTTON_PAGE = "1"
PHYSICAL_BUTTON_PREFIX = "button"

# Command prefix that switches pages instead of launching a process
PAGE_COMMAND_PREFIX = "page:"

WORKSPACE_MIN = 1
WORKSPACE_MAX = 10

# Desktop notifications
NOTIFICATION_DISPLAY_TIMEOUT_MS = 5000
NOTIFICATION_MAX_TITLE_LENGTH = 12
NOTIFICATION_MAX_BODY_LENGTH = 15
