"""Grid addressing models."""

from pydantic import BaseModel, ConfigDict, Field


class GridPosition(BaseModel):
    """Zero-based (col, row) address of one cell on the touch screen."""

    model_config = ConfigDict(frozen=True)

    col: int = Field(ge=0, description="Column index (0-based, left to right)")
    row: int = Field(ge=0, description="Row index (0-based, top to bottom)")

    @property
    def key(self) -> str:
        """Registry key for this cell, e.g. ``"2_1"``."""
        return f"{self.col}_{self.row}"

    @classmethod
    def from_key(cls, key: str) -> "GridPosition":
        """Parse a ``"{col}_{row}"`` key back into a position."""
        col, _, row = key.partition("_")
        return cls(col=int(col), row=int(row))

    def __str__(self) -> str:
        return f"({self.col}, {self.row})"


class CellCoord(BaseModel):
    """Pixel rectangle of one grid cell."""

    model_config = ConfigDict(frozen=True)

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> tuple[float, float]:
        return (self.x + self.width / 2, self.y + self.height / 2)

    def contains(self, px: float, py: float) -> bool:
        """True when the point lies inside the half-open rectangle."""
        return self.x <= px < self.right and self.y <= py < self.bottom

    def inset(self, amount: float) -> tuple[float, float, float, float]:
        """Bounding box shrunk by ``amount`` on every side, as Pillow expects."""
        return (
            self.x + amount,
            self.y + amount,
            self.right - 1 - amount,
            self.bottom - 1 - amount,
        )
