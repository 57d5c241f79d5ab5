"""Adapters for the desktop: audio, media players, Hyprland, notifications, app launching, haptics."""

from loupedeck_linux.system.actions import ActionRunner
from loupedeck_linux.system.hyprland import HyprlandControl, WorkspaceTracker
from loupedeck_linux.system.launcher import AppLauncher
from loupedeck_linux.system.media import MediaControl, MediaMetadata
from loupedeck_linux.system.notifications import Notification, NotificationListener
from loupedeck_linux.system.process import CommandRunner, run_command
from loupedeck_linux.system.vibration import VibrationService
from loupedeck_linux.system.volume import VolumeControl, VolumeState

__all__ = [
    "ActionRunner",
    "AppLauncher",
    "CommandRunner",
    "HyprlandControl",
    "MediaControl",
    "MediaMetadata",
    "Notification",
    "NotificationListener",
    "VibrationService",
    "VolumeControl",
    "VolumeState",
    "WorkspaceTracker",
    "run_command",
]
