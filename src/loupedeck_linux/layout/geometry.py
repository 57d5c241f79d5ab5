"""Screen geometry: where each grid cell sits on the touch screen.

The key grid is centered horizontally and anchored to the top edge::

    |<- margin_x ->|<-------- key_size * columns -------->|<- margin_x ->|

so ``margin_x = (screen_width - key_size * columns) / 2`` and the vertical
margin is always 0.
"""

import logging
from collections.abc import Iterator

from loupedeck_linux.exceptions import GeometryError
from loupedeck_linux.models import CellCoord, DeviceMetadata, GridPosition

logger = logging.getLogger(__name__)


class GridGeometry:
    """
    Resolves grid positions to pixel rectangles for one device.

    Stateless after construction; rectangles are computed on demand.

    Raises:
        GeometryError: If the key grid is wider or taller than the screen
    """

    def __init__(self, metadata: DeviceMetadata):
        self.metadata = metadata
        self.key_size = metadata.key_size
        self.columns = metadata.columns
        self.rows = metadata.rows
        self.total_width = metadata.key_size * metadata.columns
        self.total_height = metadata.key_size * metadata.rows

        if self.total_width > metadata.screen_width:
            raise GeometryError(
                metadata.name,
                f"{metadata.columns} columns x {metadata.key_size}px = {self.total_width}px "
                f"exceeds screen width {metadata.screen_width}px",
            )
        if self.total_height > metadata.screen_height:
            raise GeometryError(
                metadata.name,
                f"{metadata.rows} rows x {metadata.key_size}px = {self.total_height}px "
                f"exceeds screen height {metadata.screen_height}px",
            )

        self.margin_x = (metadata.screen_width - self.total_width) / 2
        self.margin_y = 0

        logger.debug(
            f"Geometry for {metadata.name}: {self.columns}x{self.rows} keys of {self.key_size}px, "
            f"margin_x={self.margin_x}"
        )

    @property
    def screen_size(self) -> tuple[int, int]:
        return (self.metadata.screen_width, self.metadata.screen_height)

    def contains(self, position: GridPosition) -> bool:
        """True when the position addresses a cell of this grid."""
        return position.col < self.columns and position.row < self.rows

    def cell_rect(self, col: int, row: int) -> CellCoord:
        """
        Pixel rectangle of the cell at (col, row).

        Raises:
            ValueError: If the cell is outside the grid
        """
        if not (0 <= col < self.columns and 0 <= row < self.rows):
            raise ValueError(
                f"Cell ({col}, {row}) is outside the {self.columns}x{self.rows} grid"
            )
        return CellCoord(
            x=self.margin_x + col * self.key_size,
            y=self.margin_y + row * self.key_size,
            width=self.key_size,
            height=self.key_size,
        )

    def rect_for(self, position: GridPosition) -> CellCoord:
        return self.cell_rect(position.col, position.row)

    def positions(self) -> Iterator[GridPosition]:
        """All cells, row by row."""
        for row in range(self.rows):
            for col in range(self.columns):
                yield GridPosition(col=col, row=row)
