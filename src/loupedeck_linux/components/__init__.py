"""Screen components and the factory that builds them from page configuration."""

from loupedeck_linux.components.button import ButtonComponent
from loupedeck_linux.components.clock import ClockComponent
from loupedeck_linux.components.context import ComponentServices
from loupedeck_linux.components.factory import ComponentFactory
from loupedeck_linux.components.media import MediaDisplay, MediaPlayPauseButton
from loupedeck_linux.components.notification import NotificationDisplay
from loupedeck_linux.components.volume_display import VolumeDisplay
from loupedeck_linux.components.workspace import WorkspaceButton

__all__ = [
    "ButtonComponent",
    "ClockComponent",
    "ComponentFactory",
    "ComponentServices",
    "MediaDisplay",
    "MediaPlayPauseButton",
    "NotificationDisplay",
    "VolumeDisplay",
    "WorkspaceButton",
]
