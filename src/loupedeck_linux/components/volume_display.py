"""Volume overlay: a bar showing the output volume for a short time."""

import logging
from typing import TYPE_CHECKING

from loupedeck_linux.components.context import ComponentServices
from loupedeck_linux.components.rendering import draw_cell_background, draw_centered_text, load_font
from loupedeck_linux.exceptions import SystemControlError
from loupedeck_linux.layout.component import Capability, GridComponent
from loupedeck_linux.layout.overlay import OverlayTimer
from loupedeck_linux.models import CellCoord, GridPosition, VolumeDisplayOptions

if TYPE_CHECKING:
    from PIL import ImageDraw

logger = logging.getLogger(__name__)


class VolumeDisplay(GridComponent):
    """
    Overlay with the current volume and mute state.

    Hidden until ``show_temporarily`` is called by the volume knob. A tap
    extends the display and toggles mute.
    """

    kind = "volumeDisplay"
    capabilities = frozenset(
        {Capability.DRAWABLE, Capability.TOUCHABLE, Capability.UPDATABLE, Capability.OVERLAY}
    )

    def __init__(
        self,
        position: GridPosition,
        services: ComponentServices,
        options: VolumeDisplayOptions | None = None,
        name: str | None = None,
    ):
        super().__init__(position, name)
        self.options = options or VolumeDisplayOptions()
        self._services = services
        self.volume = 0
        self.muted = False
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

    def hide(self) -> None:
        self.timer.hide()

    def set_state(self, volume: int, muted: bool) -> None:
        self.volume = max(0, min(100, volume))
        self.muted = muted

    async def update(self) -> None:
        """Re-read volume and mute state from the system."""
        try:
            state = await self._services.volume.get_state()
        except SystemControlError as e:
            logger.debug(f"Volume state unavailable: {e.technical_message}")
            return
        self.set_state(state.volume, state.muted)

    def draw(self, canvas: "ImageDraw.ImageDraw", cell: CellCoord) -> None:
        if not self.visible:
            return

        opts = self.options
        draw_cell_background(canvas, cell, opts.cell_bg_color, opts.cell_border_color)
        cx, _ = cell.center

        label = "MUTE" if self.muted else f"{self.volume}%"
        draw_centered_text(canvas, (cx, cell.y + cell.height * 0.32), label, load_font(20), opts.text_color)

        bar_left = cell.x + 12
        bar_right = cell.right - 12
        bar_top = cell.y + cell.height * 0.6
        bar_bottom = bar_top + 10
        canvas.rectangle((bar_left, bar_top, bar_right, bar_bottom), outline=opts.cell_border_color)
        fill_right = bar_left + (bar_right - bar_left) * self.volume / 100
        if self.volume > 0:
            fill = opts.muted_color if self.muted else opts.bar_fill_color
            canvas.rectangle((bar_left, bar_top, fill_right, bar_bottom), fill=fill)

    async def handle_touch(self, position: GridPosition) -> bool:
        logger.info("Volume overlay tapped, toggling mute")
        self.show_temporarily()
        try:
            self.muted = await self._services.volume.toggle_mute()
        except SystemControlError as e:
            logger.warning(f"Could not toggle mute: {e.technical_message}")
            await self._services.vibration.vibrate("error")
            return True

        await self._services.vibration.vibrate("warning" if self.muted else "success")
        return True

    def close(self) -> None:
        self.timer.close()
