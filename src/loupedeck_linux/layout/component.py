"""Grid component base class and capability flags.

Every component on the screen owns exactly one grid cell and declares
which capabilities it has. The registry and the application decide what
to do with a component by looking at ``capabilities``, never at its class.
"""

from enum import Enum
from typing import TYPE_CHECKING, ClassVar

from loupedeck_linux.models import CellCoord, GridPosition

if TYPE_CHECKING:
    from PIL import ImageDraw


class Capability(Enum):
    """What a component can do."""

    DRAWABLE = "drawable"  # draws itself into its cell
    TOUCHABLE = "touchable"  # handles touches on its cell
    UPDATABLE = "updatable"  # refreshes cached state periodically
    OVERLAY = "overlay"  # shares a cell with a base component, shown temporarily


class GridComponent:
    """
    Base class for everything drawn on the touch screen.

    Subclasses set ``capabilities`` and override the matching methods:
    ``draw`` for DRAWABLE, ``handle_touch`` for TOUCHABLE, ``update`` for
    UPDATABLE. OVERLAY components also expose ``visible`` and must skip
    drawing while hidden.
    """

    capabilities: ClassVar[frozenset[Capability]] = frozenset({Capability.DRAWABLE})
    # Component type name as used in the page configuration
    kind: ClassVar[str] = "component"

    def __init__(self, position: GridPosition, name: str | None = None):
        self.position = position
        self.name = name or type(self).__name__

    @property
    def key(self) -> str:
        return self.position.key

    def has(self, capability: Capability) -> bool:
        return capability in self.capabilities

    def draw(self, canvas: "ImageDraw.ImageDraw", cell: CellCoord) -> None:
        """Draw into ``cell``. Called inside the display's render callback."""
        raise NotImplementedError

    async def handle_touch(self, position: GridPosition) -> bool:
        """Handle a touch on this component's cell; return True when handled."""
        return False

    async def update(self) -> None:
        """Refresh cached state from the outside world."""
        return None

    def close(self) -> None:
        """Release timers and other resources. Safe to call more than once."""
        return None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, position={self.position})"
