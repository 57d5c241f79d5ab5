"""Clock tile: time and date."""

from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING

from loupedeck_linux.components.rendering import draw_cell_background, draw_centered_text, fit_font, load_font
from loupedeck_linux.layout.component import Capability, GridComponent
from loupedeck_linux.models import CellCoord, ClockOptions, GridPosition

if TYPE_CHECKING:
    from PIL import ImageDraw


def format_time(moment: datetime, show_seconds: bool = True) -> str:
    return moment.strftime("%H:%M:%S" if show_seconds else "%H:%M")


def format_date(moment: datetime) -> str:
    return moment.strftime("%m/%d")


class ClockComponent(GridComponent):
    """Shows the current time; redrawn by the periodic screen refresh."""

    kind = "clock"
    capabilities = frozenset({Capability.DRAWABLE})

    def __init__(
        self,
        position: GridPosition,
        options: ClockOptions | None = None,
        name: str | None = None,
        now: Callable[[], datetime] = datetime.now,
    ):
        super().__init__(position, name)
        self.options = options or ClockOptions()
        self._now = now

    def draw(self, canvas: "ImageDraw.ImageDraw", cell: CellCoord) -> None:
        opts = self.options
        moment = self._now()
        draw_cell_background(canvas, cell, opts.cell_bg_color, opts.cell_border_color)

        cx, cy = cell.center
        time_text = format_time(moment, opts.show_seconds)
        time_font = fit_font(canvas, time_text, cell.width - 14, initial_size=22, min_size=12)
        draw_centered_text(canvas, (cx, cy - cell.height * 0.1), time_text, time_font, opts.time_color)
        draw_centered_text(canvas, (cx, cy + cell.height * 0.22), format_date(moment), load_font(14), opts.date_color)
