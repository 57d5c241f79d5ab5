"""Drawing helpers shared by the components."""

from functools import lru_cache
from typing import TYPE_CHECKING

from PIL import ImageFont

from loupedeck_linux.models import CellCoord

if TYPE_CHECKING:
    from PIL import ImageDraw

CELL_INSET = 3
CELL_RADIUS = 8


@lru_cache(maxsize=64)
def load_font(size: int) -> ImageFont.ImageFont | ImageFont.FreeTypeFont:
    """Pillow's bundled font at ``size`` pixels."""
    return ImageFont.load_default(size=size)


def ellipsis_text(text: str, max_length: int) -> str:
    """Cut ``text`` to ``max_length`` characters and append ``...`` when cut."""
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."


def text_width(canvas: "ImageDraw.ImageDraw", text: str, font) -> float:
    left, _, right, _ = canvas.textbbox((0, 0), text, font=font)
    return right - left


def fit_font(
    canvas: "ImageDraw.ImageDraw",
    text: str,
    max_width: float,
    initial_size: int = 24,
    min_size: int = 10,
):
    """Largest font between ``min_size`` and ``initial_size`` that fits ``max_width``."""
    size = initial_size
    font = load_font(size)
    while size > min_size and text_width(canvas, text, font) > max_width:
        size -= 1
        font = load_font(size)
    return font


def draw_centered_text(
    canvas: "ImageDraw.ImageDraw",
    center: tuple[float, float],
    text: str,
    font,
    fill: str,
) -> None:
    """Draw ``text`` centered on ``center``."""
    if not text:
        return
    left, top, right, bottom = canvas.textbbox((0, 0), text, font=font)
    x = center[0] - (left + right) / 2
    y = center[1] - (top + bottom) / 2
    canvas.text((x, y), text, fill=fill, font=font)


def draw_cell_background(
    canvas: "ImageDraw.ImageDraw",
    cell: CellCoord,
    fill: str,
    outline: str | None = None,
    width: int = 2,
) -> None:
    """Rounded tile filling the cell, leaving the grid lines visible."""
    canvas.rounded_rectangle(
        cell.inset(CELL_INSET),
        radius=CELL_RADIUS,
        fill=fill,
        outline=outline,
        width=width if outline else 0,
    )


def draw_play_icon(canvas: "ImageDraw.ImageDraw", center: tuple[float, float], size: float, fill: str) -> None:
    cx, cy = center
    half = size / 2
    canvas.polygon(
        [(cx - half * 0.8, cy - half), (cx - half * 0.8, cy + half), (cx + half, cy)],
        fill=fill,
    )


def draw_pause_icon(canvas: "ImageDraw.ImageDraw", center: tuple[float, float], size: float, fill: str) -> None:
    cx, cy = center
    half = size / 2
    bar = size / 3
    canvas.rectangle((cx - half, cy - half, cx - half + bar, cy + half), fill=fill)
    canvas.rectangle((cx + half - bar, cy - half, cx + half, cy + half), fill=fill)


def draw_stop_icon(canvas: "ImageDraw.ImageDraw", center: tuple[float, float], size: float, fill: str) -> None:
    cx, cy = center
    half = size / 2
    canvas.rectangle((cx - half, cy - half, cx + half, cy + half), fill=fill)
