"""Hyprland workspace tile."""

import logging
from typing import TYPE_CHECKING

from loupedeck_linux.components.context import ComponentServices
from loupedeck_linux.components.rendering import draw_cell_background, draw_centered_text, fit_font
from loupedeck_linux.exceptions import SystemControlError
from loupedeck_linux.layout.component import Capability, GridComponent
from loupedeck_linux.models import CellCoord, GridPosition, WorkspaceOptions

if TYPE_CHECKING:
    from PIL import ImageDraw

logger = logging.getLogger(__name__)


class WorkspaceButton(GridComponent):
    """Switches to one workspace; highlighted while that workspace is focused."""

    kind = "workspace"
    capabilities = frozenset({Capability.DRAWABLE, Capability.TOUCHABLE, Capability.UPDATABLE})

    def __init__(
        self,
        position: GridPosition,
        services: ComponentServices,
        options: WorkspaceOptions,
        name: str | None = None,
    ):
        super().__init__(position, name)
        self.options = options
        self.workspace_id = options.workspace_id
        self._services = services

    @property
    def active(self) -> bool:
        return self._services.workspaces.active == self.workspace_id

    async def update(self) -> None:
        await self._services.workspaces.refresh()

    def draw(self, canvas: "ImageDraw.ImageDraw", cell: CellCoord) -> None:
        opts = self.options
        if self.active:
            draw_cell_background(canvas, cell, opts.active_bg_color, opts.active_border_color, width=3)
        else:
            draw_cell_background(canvas, cell, opts.bg_color, opts.border_color)

        label = opts.label or str(self.workspace_id)
        font = fit_font(canvas, label, cell.width - 12, initial_size=32, min_size=10)
        draw_centered_text(canvas, cell.center, label, font, opts.text_color)

    async def handle_touch(self, position: GridPosition) -> bool:
        workspaces = self._services.workspaces
        if not await workspaces.control.is_available():
            logger.warning("Hyprland is not available")
            await self._services.vibration.vibrate("error")
            return True

        try:
            await workspaces.switch(self.workspace_id)
        except SystemControlError as e:
            logger.error(f"Switching to workspace {self.workspace_id} failed: {e.technical_message}")
            await self._services.vibration.vibrate("error")
            return True

        await self._services.vibration.vibrate("tap")
        return True
