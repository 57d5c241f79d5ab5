"""Maps raw touch coordinates to grid cells."""

import logging
import math
from collections.abc import Iterable

from loupedeck_linux.devices.protocols import TouchPoint
from loupedeck_linux.layout.geometry import GridGeometry
from loupedeck_linux.models import GridPosition

logger = logging.getLogger(__name__)


class TouchMapper:
    """Converts pixel touch points into grid positions."""

    def __init__(self, geometry: GridGeometry):
        self._geometry = geometry

    def map_touch(self, x: float, y: float) -> GridPosition | None:
        """
        Find the cell under a touch point.

        Args:
            x: Horizontal pixel coordinate on the screen
            y: Vertical pixel coordinate on the screen

        Returns:
            The touched cell, or None when the point lies in the side
            margins or below the grid
        """
        geometry = self._geometry
        col = math.floor((x - geometry.margin_x) / geometry.key_size)
        row = math.floor((y - geometry.margin_y) / geometry.key_size)

        if not (0 <= col < geometry.columns and 0 <= row < geometry.rows):
            logger.debug(f"Touch at ({x}, {y}) is outside the grid (col={col}, row={row})")
            return None

        return GridPosition(col=col, row=row)

    def map_touches(self, points: Iterable[TouchPoint]) -> list[GridPosition]:
        """
        Map a batch of touch points in arrival order.

        Points outside the grid are dropped, so the result may be shorter
        than the input (or empty).
        """
        hits: list[GridPosition] = []
        for point in points:
            position = self.map_touch(point.x, point.y)
            if position is not None:
                hits.append(position)
        return hits
