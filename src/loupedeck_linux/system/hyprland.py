"""Hyprland workspace control through hyprctl."""

import asyncio
import json
import logging
import os

from loupedeck_linux.exceptions import SystemControlError
from loupedeck_linux.system.process import CommandRunner, run_command

logger = logging.getLogger(__name__)


class HyprlandControl:
    """Queries and switches Hyprland workspaces."""

    def __init__(self, runner: CommandRunner = run_command):
        self._run = runner
        self._available: bool | None = None

    async def is_available(self) -> bool:
        """True when hyprctl can reach a running compositor (checked once)."""
        if self._available is None:
            if not os.environ.get("HYPRLAND_INSTANCE_SIGNATURE"):
                self._available = False
            else:
                try:
                    await self._run(["hyprctl", "version"])
                    self._available = True
                except SystemControlError as e:
                    logger.info(f"Hyprland not available: {e.detail}")
                    self._available = False
        return self._available

    async def current_workspace(self) -> int | None:
        """Id of the focused workspace, or None when it cannot be determined."""
        try:
            output = await self._run(["hyprctl", "activeworkspace", "-j"])
            return int(json.loads(output)["id"])
        except SystemControlError as e:
            logger.debug(f"Cannot read active workspace: {e.detail}")
        except (ValueError, KeyError, TypeError) as e:
            logger.warning(f"Unexpected hyprctl activeworkspace output: {e}")
        return None

    async def switch_workspace(self, workspace_id: int) -> None:
        """
        Focus workspace ``workspace_id``.

        Raises:
            SystemControlError: If hyprctl fails
        """
        await self._run(["hyprctl", "dispatch", "workspace", str(workspace_id)])
        logger.info(f"Switched to workspace {workspace_id}")


class WorkspaceTracker:
    """
    Shared view of the active workspace.

    Every WorkspaceButton on a page refreshes through the same tracker, so
    refreshes closer together than ``min_interval`` seconds reuse the last
    answer instead of running hyprctl once per button.
    """

    def __init__(self, control: HyprlandControl, min_interval: float = 0.25):
        self.control = control
        self.min_interval = min_interval
        self.active: int | None = None
        self._last_refresh: float | None = None

    async def refresh(self) -> int | None:
        now = asyncio.get_running_loop().time()
        if self._last_refresh is not None and now - self._last_refresh < self.min_interval:
            return self.active
        self._last_refresh = now
        workspace = await self.control.current_workspace()
        if workspace is not None:
            self.active = workspace
        return self.active

    async def switch(self, workspace_id: int) -> None:
        """
        Focus a workspace and remember it as active.

        Raises:
            SystemControlError: If hyprctl fails
        """
        await self.control.switch_workspace(workspace_id)
        self.active = workspace_id
        self._last_refresh = asyncio.get_running_loop().time()
