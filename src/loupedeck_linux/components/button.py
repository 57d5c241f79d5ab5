"""Launcher button tile."""

import logging
from typing import TYPE_CHECKING

from loupedeck_linux.components.context import ComponentServices
from loupedeck_linux.components.rendering import (
    draw_cell_background,
    draw_centered_text,
    ellipsis_text,
    fit_font,
    load_font,
)
from loupedeck_linux.layout.component import Capability, GridComponent
from loupedeck_linux.models import ButtonOptions, CellCoord, GridPosition

if TYPE_CHECKING:
    from PIL import ImageDraw

logger = logging.getLogger(__name__)


class ButtonComponent(GridComponent):
    """Runs its command when touched (``page:N`` or a shell command)."""

    kind = "button"
    capabilities = frozenset({Capability.DRAWABLE, Capability.TOUCHABLE})

    def __init__(
        self,
        position: GridPosition,
        services: ComponentServices,
        options: ButtonOptions | None = None,
        command: str | None = None,
        name: str | None = None,
    ):
        super().__init__(position, name)
        self.options = options or ButtonOptions()
        self.command = command
        self._services = services

    @property
    def label(self) -> str:
        return ellipsis_text(self.options.label or self.name, self.options.max_label_length)

    def draw(self, canvas: "ImageDraw.ImageDraw", cell: CellCoord) -> None:
        opts = self.options
        draw_cell_background(canvas, cell, opts.bg_color, opts.border_color)
        cx, cy = cell.center

        label_font = fit_font(canvas, self.label, cell.width - 12, initial_size=14, min_size=9)
        if opts.icon:
            draw_centered_text(canvas, (cx, cy - cell.height * 0.12), opts.icon, load_font(opts.icon_size), opts.text_color)
            draw_centered_text(canvas, (cx, cell.bottom - cell.height * 0.2), self.label, label_font, opts.text_color)
        else:
            draw_centered_text(canvas, (cx, cy), self.label, label_font, opts.text_color)

    async def handle_touch(self, position: GridPosition) -> bool:
        logger.info(f"Button {self.name!r} pressed")
        await self._services.vibration.vibrate(self.options.vibration_pattern)
        if self.command and self.command.strip():
            if not await self._services.actions.execute(self.command):
                await self._services.vibration.vibrate("error")
        return True
