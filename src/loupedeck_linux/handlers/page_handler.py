"""Page knob: turn to go to the next/previous page, press to return to the first page."""

import logging

from loupedeck_linux.handlers.base import InputHandler
from loupedeck_linux.layout import LayoutCompositor
from loupedeck_linux.system import VibrationService
from loupedeck_linux.system.actions import PageNavigator

logger = logging.getLogger(__name__)


class PageHandler(InputHandler):
    """
    Cycles through all configured pages, wrapping at both ends.

    Args:
        knob_id: Knob that switches pages
        compositor: Source of the page list and the current page
        navigate: Coroutine that shows a page (switch + refresh + redraw)
        vibration: Haptic feedback
    """

    def __init__(
        self,
        knob_id: str,
        compositor: LayoutCompositor,
        navigate: PageNavigator,
        vibration: VibrationService,
    ):
        self.knob_id = knob_id
        self._compositor = compositor
        self._navigate = navigate
        self._vibration = vibration

    async def handle_rotate(self, knob_id: str, delta: int) -> bool:
        if knob_id != self.knob_id or delta == 0:
            return False

        if len(self._compositor.page_ids) < 2:
            logger.debug("Only one page configured")
            await self._vibration.vibrate("warning")
            return True

        target = self._compositor.next_page_id(1 if delta > 0 else -1)
        logger.info(f"Page {self._compositor.current_page} -> {target}")
        await self._navigate(target)
        await self._vibration.vibrate("tap")
        return True

    async def handle_knob_down(self, knob_id: str) -> bool:
        if knob_id != self.knob_id:
            return False

        first = self._compositor.page_ids[0]
        if self._compositor.current_page == first:
            await self._vibration.vibrate("warning")
            return True

        await self._navigate(first)
        await self._vibration.vibrate("tap")
        return True
