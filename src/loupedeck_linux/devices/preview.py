"""Pillow-backed stand-in for the hardware.

Renders frames into an in-memory image (optionally mirrored to
``screen.png``), records LED colors and vibrations, and lets callers inject
input events. Used by ``loupedeck-linux run --backend preview`` and by the
tests.
"""

import asyncio
import logging
from collections.abc import Callable, Sequence
from pathlib import Path

from PIL import Image, ImageDraw

from loupedeck_linux.devices.protocols import (
    DeviceEvent,
    KnobDownEvent,
    KnobRotateEvent,
    RenderCallback,
    TouchPoint,
    TouchStartEvent,
)
from loupedeck_linux.models import LOUPEDECK_LIVE_S, Color, DeviceMetadata

logger = logging.getLogger(__name__)


class PreviewDevice:
    """Virtual Loupedeck that draws into a Pillow image."""

    def __init__(self, metadata: DeviceMetadata = LOUPEDECK_LIVE_S, frame_dir: Path | None = None):
        self._metadata = metadata
        self.frame_dir = frame_dir
        self.connected = False
        self.last_frame: Image.Image | None = None
        self.frame_count = 0
        self.button_colors: dict[int, Color] = {}
        self.vibrations: list[tuple[int, ...]] = []
        self._callbacks: list[Callable[[DeviceEvent], None]] = []

    @property
    def metadata(self) -> DeviceMetadata:
        return self._metadata

    async def connect(self) -> None:
        self.connected = True
        if self.frame_dir is not None:
            self.frame_dir.mkdir(parents=True, exist_ok=True)
            logger.info(f"Preview frames are written to {self.frame_dir / 'screen.png'}")

    async def disconnect(self) -> None:
        self.connected = False

    async def draw_screen(self, render: RenderCallback) -> None:
        image = Image.new("RGB", (self._metadata.screen_width, self._metadata.screen_height), "#000000")
        render(ImageDraw.Draw(image))
        self.last_frame = image
        self.frame_count += 1
        if self.frame_dir is not None:
            await asyncio.to_thread(self._write_frame, image.copy())

    def _write_frame(self, image: Image.Image) -> None:
        target = self.frame_dir / "screen.png"
        temp = target.with_suffix(".png.tmp")
        image.save(temp, format="PNG")
        temp.replace(target)

    async def set_button_color(self, button_id: int, color: Color) -> None:
        self.button_colors[button_id] = color

    async def vibrate(self, pattern: Sequence[int]) -> None:
        self.vibrations.append(tuple(pattern))

    def on_event(self, callback: Callable[[DeviceEvent], None]) -> None:
        self._callbacks.append(callback)

    # Input injection

    def emit(self, event: DeviceEvent) -> None:
        """Deliver an input event as the hardware would."""
        for callback in list(self._callbacks):
            callback(event)

    def touch(self, *points: tuple[float, float]) -> None:
        self.emit(TouchStartEvent([TouchPoint(x, y, touch_id=i) for i, (x, y) in enumerate(points)]))

    def rotate(self, knob_id: str, delta: int) -> None:
        self.emit(KnobRotateEvent(knob_id, delta))

    def press_knob(self, knob_id: str) -> None:
        self.emit(KnobDownEvent(knob_id))
