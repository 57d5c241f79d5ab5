"""Media tiles: play/pause button and now-playing overlay."""

import logging
from typing import TYPE_CHECKING

from loupedeck_linux.components.context import ComponentServices
from loupedeck_linux.components.rendering import (
    draw_cell_background,
    draw_centered_text,
    draw_pause_icon,
    draw_play_icon,
    draw_stop_icon,
    ellipsis_text,
    fit_font,
    load_font,
)
from loupedeck_linux.exceptions import SystemControlError
from loupedeck_linux.layout.component import Capability, GridComponent
from loupedeck_linux.layout.overlay import OverlayTimer
from loupedeck_linux.models import CellCoord, GridPosition, MediaDisplayOptions, MediaPlayPauseOptions
from loupedeck_linux.system.media import PAUSED, PLAYING, STOPPED, MediaMetadata

if TYPE_CHECKING:
    from PIL import ImageDraw

logger = logging.getLogger(__name__)


def _draw_status_icon(canvas, status: str, center: tuple[float, float], size: float, fill: str) -> None:
    if status == PLAYING:
        draw_play_icon(canvas, center, size, fill)
    elif status == PAUSED:
        draw_pause_icon(canvas, center, size, fill)
    else:
        draw_stop_icon(canvas, center, size * 0.8, fill)


class MediaPlayPauseButton(GridComponent):
    """Toggles playback; the icon shows what a tap will do."""

    kind = "mediaPlayPause"
    capabilities = frozenset({Capability.DRAWABLE, Capability.TOUCHABLE, Capability.UPDATABLE})

    def __init__(
        self,
        position: GridPosition,
        services: ComponentServices,
        options: MediaPlayPauseOptions | None = None,
        name: str | None = None,
    ):
        super().__init__(position, name)
        self.options = options or MediaPlayPauseOptions()
        self._services = services
        self.status = STOPPED

    async def update(self) -> None:
        self.status = await self._services.media.status()

    def draw(self, canvas: "ImageDraw.ImageDraw", cell: CellCoord) -> None:
        opts = self.options
        draw_cell_background(canvas, cell, opts.bg_color, opts.border_color)
        cx, cy = cell.center
        icon_center = (cx, cy - cell.height * 0.08)
        if self.status == PLAYING:
            draw_pause_icon(canvas, icon_center, cell.width * 0.3, opts.icon_color)
        else:
            draw_play_icon(canvas, icon_center, cell.width * 0.3, opts.icon_color)
        draw_centered_text(canvas, (cx, cell.bottom - cell.height * 0.17), self.status.upper(), load_font(10), opts.text_color)

    async def handle_touch(self, position: GridPosition) -> bool:
        await self._services.vibration.vibrate(self.options.vibration_pattern)
        try:
            self.status = await self._services.media.toggle_play_pause()
        except SystemControlError as e:
            logger.warning(f"Play/pause failed: {e.technical_message}")
            await self._services.vibration.vibrate("error")
            return True
        logger.info(f"Media status: {self.status}")
        await self._services.vibration.vibrate("success" if self.status == PLAYING else "warning")
        return True


class MediaDisplay(GridComponent):
    """
    Now-playing overlay.

    Shown by the media knob or a tap. A tap while hidden shows it and
    fetches the track metadata; a tap while visible hides it again.
    """

    kind = "mediaDisplay"
    capabilities = frozenset({Capability.DRAWABLE, Capability.TOUCHABLE, Capability.OVERLAY})

    def __init__(
        self,
        position: GridPosition,
        services: ComponentServices,
        options: MediaDisplayOptions | None = None,
        name: str | None = None,
    ):
        super().__init__(position, name)
        self.options = options or MediaDisplayOptions()
        self._services = services
        self.metadata = MediaMetadata()
        self.timer = OverlayTimer(
            self.options.display_timeout or services.overlay_timeout_ms,
            scheduler=services.scheduler,
            name=f"{self.name} overlay",
        )

    @property
    def visible(self) -> bool:
        return self.timer.visible

    def show_temporarily(self, duration_ms: int | None = None) -> None:
        self.timer.show_temporarily(duration_ms)

    async def refresh(self) -> None:
        """Re-read title, artist and status of the current track."""
        self.metadata = await self._services.media.metadata()

    def hide(self) -> None:
        self.timer.hide()

    def draw(self, canvas: "ImageDraw.ImageDraw", cell: CellCoord) -> None:
        if not self.visible:
            return

        opts = self.options
        meta = self.metadata
        draw_cell_background(canvas, cell, opts.cell_bg_color, opts.cell_border_color)
        cx, _ = cell.center

        _draw_status_icon(canvas, meta.status, (cx, cell.y + cell.height * 0.2), cell.width * 0.16, opts.icon_color)

        title = ellipsis_text(meta.title or "No media", 12)
        title_font = fit_font(canvas, title, cell.width - 10, initial_size=12, min_size=9)
        draw_centered_text(canvas, (cx, cell.y + cell.height * 0.45), title, title_font, opts.title_color)
        if meta.artist:
            draw_centered_text(canvas, (cx, cell.y + cell.height * 0.64), ellipsis_text(meta.artist, 15), load_font(9), opts.artist_color)
        draw_centered_text(canvas, (cx, cell.y + cell.height * 0.83), meta.status.upper(), load_font(8), opts.status_color)

    async def handle_touch(self, position: GridPosition) -> bool:
        if self.visible:
            logger.info("Media overlay dismissed")
            self.hide()
        else:
            self.show_temporarily()
            await self.refresh()
        return True

    def close(self) -> None:
        self.timer.close()
