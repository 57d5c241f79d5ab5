"""Full-screen redraw and touch routing across pages."""

import asyncio
import logging
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING

from loupedeck_linux.devices.protocols import DisplaySink, TouchPoint
from loupedeck_linux.exceptions import DeviceError
from loupedeck_linux.layout.geometry import GridGeometry
from loupedeck_linux.layout.periodic import PeriodicTask
from loupedeck_linux.layout.registry import ComponentRegistry
from loupedeck_linux.layout.touch import TouchMapper

if TYPE_CHECKING:
    from PIL import ImageDraw

logger = logging.getLogger(__name__)


def _page_order(page_id: str) -> tuple[int, str]:
    return (int(page_id), "") if page_id.isdigit() else (1 << 30, page_id)


class LayoutCompositor:
    """
    Draws the active page and routes touches to it.

    Holds one ComponentRegistry per page. ``replace_pages`` swaps the whole
    mapping in one assignment, so a redraw or dispatch in flight keeps
    working on the registry it started with.

    Args:
        geometry: Cell layout of the device screen
        sink: Display that receives each finished frame
        pages: Initial registries keyed by page id
        background_color: Fill color for the whole screen
        grid_color: Color of cell borders
        draw_grid: Whether to draw cell borders
        display_timeout: Seconds before a frame submission is abandoned
    """

    def __init__(
        self,
        geometry: GridGeometry,
        sink: DisplaySink,
        pages: Mapping[str, ComponentRegistry] | None = None,
        background_color: str = "#000000",
        grid_color: str = "#222222",
        draw_grid: bool = True,
        display_timeout: float = 5.0,
    ):
        self.geometry = geometry
        self.mapper = TouchMapper(geometry)
        self._sink = sink
        self.background_color = background_color
        self.grid_color = grid_color
        self.draw_grid = draw_grid
        self.display_timeout = display_timeout

        self._pages: dict[str, ComponentRegistry] = dict(pages or {"1": ComponentRegistry("page 1")})
        self._current_page = self.page_ids[0]

    # =================================================================
    # Pages
    # =================================================================

    @property
    def page_ids(self) -> list[str]:
        """Page ids in numeric order."""
        return sorted(self._pages, key=_page_order)

    @property
    def current_page(self) -> str:
        return self._current_page

    @property
    def registry(self) -> ComponentRegistry:
        """Registry of the page currently on screen."""
        return self._pages[self._current_page]

    def page(self, page_id: str) -> ComponentRegistry | None:
        return self._pages.get(page_id)

    def switch_page(self, page_id: str) -> bool:
        """
        Make ``page_id`` the active page. Does not redraw.

        Returns:
            False when the page does not exist
        """
        if page_id not in self._pages:
            logger.warning(f"Cannot switch to unknown page {page_id!r} (pages: {self.page_ids})")
            return False
        if page_id != self._current_page:
            logger.info(f"Switched page {self._current_page} -> {page_id}")
            self._current_page = page_id
        return True

    def next_page_id(self, step: int) -> str:
        """Page ``step`` positions away from the current one, wrapping around."""
        ids = self.page_ids
        index = ids.index(self._current_page)
        return ids[(index + step) % len(ids)]

    def replace_pages(self, pages: Mapping[str, ComponentRegistry]) -> None:
        """
        Swap in a new set of page registries and close the old ones.

        Stays on the current page when it still exists, otherwise falls
        back to the first page.
        """
        if not pages:
            raise ValueError("at least one page is required")

        old_pages = self._pages
        new_pages = dict(pages)
        current = self._current_page if self._current_page in new_pages else None

        self._pages = new_pages
        self._current_page = current or self.page_ids[0]

        for registry in old_pages.values():
            if registry not in new_pages.values():
                registry.close()

        logger.info(f"Loaded {len(new_pages)} page(s), showing page {self._current_page}")

    def close(self) -> None:
        """Close every page registry."""
        for registry in self._pages.values():
            registry.close()

    # =================================================================
    # Drawing
    # =================================================================

    def render(self, canvas: "ImageDraw.ImageDraw") -> None:
        """Paint one complete frame of the active page onto ``canvas``."""
        registry = self.registry
        width, height = self.geometry.screen_size
        canvas.rectangle((0, 0, width - 1, height - 1), fill=self.background_color)

        if self.draw_grid:
            for position in self.geometry.positions():
                cell = self.geometry.rect_for(position)
                canvas.rectangle(
                    (cell.x, cell.y, cell.right - 1, cell.bottom - 1),
                    outline=self.grid_color,
                    width=1,
                )

        registry.draw_all(canvas, self.geometry)

    async def redraw(self) -> bool:
        """
        Draw the active page and submit it to the display.

        A display that fails or does not answer within ``display_timeout``
        is logged as a warning; the previous frame stays on screen.

        Returns:
            True when the frame was submitted
        """
        try:
            await asyncio.wait_for(self._sink.draw(self.render), timeout=self.display_timeout)
        except TimeoutError:
            logger.warning(f"Display did not accept frame within {self.display_timeout}s")
            return False
        except DeviceError as e:
            logger.warning(f"Display update failed: {e.technical_message}")
            return False
        return True

    def start_auto_redraw(self, interval: float) -> PeriodicTask:
        """
        Redraw every ``interval`` seconds.

        Returns:
            Handle whose ``cancel()`` / ``stop()`` ends the schedule
        """
        return PeriodicTask(self.redraw, interval, name="auto-redraw").start()

    # =================================================================
    # Touch
    # =================================================================

    async def handle_touch(self, x: float, y: float) -> bool:
        """
        Route one touch point to the active page. Never redraws.

        Returns:
            True when a component handled the touch
        """
        position = self.mapper.map_touch(x, y)
        if position is None:
            return False
        return await self.registry.dispatch_touch(position)

    async def handle_touches(self, points: Iterable[TouchPoint]) -> list[bool]:
        """Dispatch every point of one touch event, in the order reported."""
        return [await self.handle_touch(point.x, point.y) for point in points]
