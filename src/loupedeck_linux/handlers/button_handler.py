"""Physical buttons below the screen."""

import logging

from loupedeck_linux.handlers.base import InputHandler
from loupedeck_linux.models import ComponentConfig
from loupedeck_linux.system import ActionRunner, VibrationService

logger = logging.getLogger(__name__)


class PhysicalButtonHandler(InputHandler):
    """
    Runs the command configured for a physical button.

    Button ``i`` is configured by the ``button{i}`` entry of page 1.
    """

    def __init__(
        self,
        actions: ActionRunner,
        vibration: VibrationService,
        buttons: dict[int, ComponentConfig] | None = None,
    ):
        self._actions = actions
        self._vibration = vibration
        self._buttons: dict[int, ComponentConfig] = dict(buttons or {})

    def set_buttons(self, buttons: dict[int, ComponentConfig]) -> None:
        """Replace the button configuration (after a config reload)."""
        self._buttons = dict(buttons)
        logger.debug(f"Physical buttons configured: {sorted(self._buttons)}")

    async def handle_button_down(self, button_id: int) -> bool:
        config = self._buttons.get(button_id)
        if config is None:
            logger.debug(f"Button {button_id} has no configuration")
            return False

        if not config.command or not config.command.strip():
            logger.debug(f"Button {button_id} has no command")
            return False

        logger.info(f"Button {button_id}: {config.command}")
        if await self._actions.execute(config.command):
            pattern = config.options.get("vibrationPattern") or config.options.get("vibration_pattern") or "tap"
            await self._vibration.vibrate(pattern)
        else:
            await self._vibration.vibrate("error")
        return True
