"""Media knob: turn to skip tracks, press to toggle play/pause."""

import logging

from loupedeck_linux.exceptions import SystemControlError
from loupedeck_linux.handlers.base import InputHandler
from loupedeck_linux.layout import LayoutCompositor
from loupedeck_linux.system import MediaControl, VibrationService
from loupedeck_linux.system.media import PLAYING

logger = logging.getLogger(__name__)


class MediaHandler(InputHandler):
    """
    Args:
        knob_id: Knob that controls the media player
        media: playerctl wrapper
        compositor: Used to find now-playing overlays on the current page and redraw
        vibration: Haptic feedback
    """

    def __init__(
        self,
        knob_id: str,
        media: MediaControl,
        compositor: LayoutCompositor,
        vibration: VibrationService,
    ):
        self.knob_id = knob_id
        self._media = media
        self._compositor = compositor
        self._vibration = vibration

    async def handle_rotate(self, knob_id: str, delta: int) -> bool:
        if knob_id != self.knob_id or delta == 0:
            return False

        try:
            if delta > 0:
                await self._media.next()
                logger.info("Next track")
            else:
                await self._media.previous()
                logger.info("Previous track")
        except SystemControlError as e:
            logger.warning(f"Track change failed: {e.technical_message}")
            await self._vibration.vibrate("error")
            return True

        await self._show_with_feedback("tap")
        return True

    async def handle_knob_down(self, knob_id: str) -> bool:
        if knob_id != self.knob_id:
            return False

        try:
            status = await self._media.toggle_play_pause()
        except SystemControlError as e:
            logger.warning(f"Play/pause failed: {e.technical_message}")
            await self._vibration.vibrate("error")
            return True

        logger.info(f"Media status: {status}")
        await self._show_with_feedback("success" if status == PLAYING else "warning")
        return True

    async def _show_with_feedback(self, pattern: str) -> None:
        displays = self._compositor.registry.find_kind("mediaDisplay")
        for display in displays:
            display.show_temporarily()
        await self._vibration.vibrate(pattern)
        for display in displays:
            await display.refresh()
        await self._compositor.redraw()
