"""Handlers for knobs and physical buttons."""

from loupedeck_linux.handlers.base import InputHandler
from loupedeck_linux.handlers.button_handler import PhysicalButtonHandler
from loupedeck_linux.handlers.media_handler import MediaHandler
from loupedeck_linux.handlers.page_handler import PageHandler
from loupedeck_linux.handlers.volume_handler import VolumeHandler
from loupedeck_linux.handlers.workspace_handler import WorkspaceHandler, wrap_workspace

__all__ = [
    "InputHandler",
    "MediaHandler",
    "PageHandler",
    "PhysicalButtonHandler",
    "VolumeHandler",
    "WorkspaceHandler",
    "wrap_workspace",
]
