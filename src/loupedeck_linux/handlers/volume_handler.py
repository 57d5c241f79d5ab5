"""Volume knob: turn to change the volume, press to toggle mute."""

import logging

from loupedeck_linux.exceptions import SystemControlError
from loupedeck_linux.handlers.base import InputHandler
from loupedeck_linux.layout import LayoutCompositor
from loupedeck_linux.system import VibrationService, VolumeControl

logger = logging.getLogger(__name__)


class VolumeHandler(InputHandler):
    """
    Args:
        knob_id: Knob that controls the volume
        volume: System volume control
        compositor: Used to find volume overlays on the current page and redraw
        vibration: Haptic feedback
        step_percent: Volume change per detent
    """

    def __init__(
        self,
        knob_id: str,
        volume: VolumeControl,
        compositor: LayoutCompositor,
        vibration: VibrationService,
        step_percent: int = 5,
    ):
        self.knob_id = knob_id
        self._volume = volume
        self._compositor = compositor
        self._vibration = vibration
        self.step_percent = step_percent

    async def handle_rotate(self, knob_id: str, delta: int) -> bool:
        if knob_id != self.knob_id:
            return False

        try:
            await self._volume.adjust_volume(delta * self.step_percent)
            state = await self._volume.get_state()
        except SystemControlError as e:
            logger.warning(f"Volume change failed: {e.technical_message}")
            await self._vibration.vibrate("error")
            return True

        logger.info(f"Volume: {state.volume}%{' (muted)' if state.muted else ''}")
        self._show(state.volume, state.muted)
        await self._vibration.vibrate("tap")
        await self._compositor.redraw()
        return True

    async def handle_knob_down(self, knob_id: str) -> bool:
        if knob_id != self.knob_id:
            return False

        try:
            muted = await self._volume.toggle_mute()
            state = await self._volume.get_state()
        except SystemControlError as e:
            logger.warning(f"Mute toggle failed: {e.technical_message}")
            await self._vibration.vibrate("error")
            return True

        self._show(state.volume, muted)
        await self._vibration.vibrate("warning" if muted else "success")
        await self._compositor.redraw()
        return True

    def _show(self, volume: int, muted: bool) -> None:
        for display in self._compositor.registry.find_kind("volumeDisplay"):
            display.set_state(volume, muted)
            display.show_temporarily()
