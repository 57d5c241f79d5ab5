"""Executes the ``command`` string of buttons.

``page:N`` switches to page N; anything else is launched as a shell
command; an empty command does nothing.
"""

import logging
from collections.abc import Awaitable, Callable

from loupedeck_linux.models.constants import PAGE_COMMAND_PREFIX
from loupedeck_linux.system.launcher import AppLauncher

logger = logging.getLogger(__name__)

PageNavigator = Callable[[str], Awaitable[bool]]


class ActionRunner:
    """Runs button commands."""

    def __init__(self, launcher: AppLauncher, navigate: PageNavigator | None = None):
        self._launcher = launcher
        self._navigate = navigate

    @staticmethod
    def page_target(command: str) -> str | None:
        """Page id of a ``page:N`` command, otherwise None."""
        command = command.strip()
        if not command.startswith(PAGE_COMMAND_PREFIX):
            return None
        return command[len(PAGE_COMMAND_PREFIX):].strip() or None

    async def execute(self, command: str | None) -> bool:
        """
        Run one command.

        Returns:
            True when the page switch or launch succeeded
        """
        if not command or not command.strip():
            logger.debug("No command configured")
            return False

        if command.strip().startswith(PAGE_COMMAND_PREFIX):
            page_id = self.page_target(command)
            if page_id is None or self._navigate is None:
                logger.warning(f"Cannot run page command {command!r}")
                return False
            return await self._navigate(page_id)

        return await self._launcher.launch(command)
