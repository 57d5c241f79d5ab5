"""Named haptic feedback patterns."""

import logging
from collections.abc import Sequence
from typing import Protocol

from loupedeck_linux.models.constants import VIBRATION_PATTERNS

logger = logging.getLogger(__name__)


class Vibrator(Protocol):
    async def vibrate(self, pattern: Sequence[int]) -> None:
        ...


class VibrationService:
    """Plays vibration patterns by name (``tap``, ``success``, ``warning``, ...)."""

    def __init__(self, device: Vibrator, patterns: dict[str, tuple[int, ...]] | None = None):
        self._device = device
        self._patterns = dict(patterns or VIBRATION_PATTERNS)

    async def vibrate(self, pattern_name: str) -> None:
        """Play a named pattern; unknown names are logged and ignored."""
        pattern = self._patterns.get(pattern_name)
        if pattern is None:
            logger.warning(f"Unknown vibration pattern {pattern_name!r}")
            return
        await self._device.vibrate(pattern)
