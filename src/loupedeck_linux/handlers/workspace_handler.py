"""Workspace knob: turn to cycle Hyprland workspaces 1-10."""

import logging

from loupedeck_linux.exceptions import SystemControlError
from loupedeck_linux.handlers.base import InputHandler
from loupedeck_linux.layout import LayoutCompositor
from loupedeck_linux.models.constants import WORKSPACE_MAX, WORKSPACE_MIN
from loupedeck_linux.system import VibrationService, WorkspaceTracker

logger = logging.getLogger(__name__)


def wrap_workspace(current: int, delta: int) -> int:
    """Next (delta > 0) or previous workspace, wrapping within 1..10."""
    span = WORKSPACE_MAX - WORKSPACE_MIN + 1
    step = 1 if delta > 0 else -1
    return (current - WORKSPACE_MIN + step) % span + WORKSPACE_MIN


class WorkspaceHandler(InputHandler):
    def __init__(
        self,
        knob_id: str,
        workspaces: WorkspaceTracker,
        compositor: LayoutCompositor,
        vibration: VibrationService,
    ):
        self.knob_id = knob_id
        self._workspaces = workspaces
        self._compositor = compositor
        self._vibration = vibration

    async def handle_rotate(self, knob_id: str, delta: int) -> bool:
        if knob_id != self.knob_id or delta == 0:
            return False

        if not await self._workspaces.control.is_available():
            logger.warning("Hyprland is not available")
            await self._vibration.vibrate("error")
            return True

        current = await self._workspaces.refresh() or WORKSPACE_MIN
        target = wrap_workspace(current, delta)
        try:
            await self._workspaces.switch(target)
        except SystemControlError as e:
            logger.error(f"Switching to workspace {target} failed: {e.technical_message}")
            await self._vibration.vibrate("error")
            return True

        await self._vibration.vibrate("tap")
        await self._compositor.redraw()
        return True
