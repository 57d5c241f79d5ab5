"""Services handed to components when a page is built."""

from dataclasses import dataclass

from loupedeck_linux.layout.overlay import Scheduler
from loupedeck_linux.system import (
    ActionRunner,
    MediaControl,
    VibrationService,
    VolumeControl,
    WorkspaceTracker,
)


@dataclass
class ComponentServices:
    """Everything a component may call while handling touches or updating."""

    vibration: VibrationService
    actions: ActionRunner
    volume: VolumeControl
    media: MediaControl
    workspaces: WorkspaceTracker
    overlay_timeout_ms: int = 2000
    scheduler: Scheduler | None = None
