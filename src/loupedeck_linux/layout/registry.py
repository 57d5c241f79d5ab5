"""Ordered collection of the components on one page."""

import logging
from collections.abc import Iterator
from typing import TYPE_CHECKING

from loupedeck_linux.layout.component import Capability, GridComponent
from loupedeck_linux.layout.geometry import GridGeometry
from loupedeck_linux.models import GridPosition

if TYPE_CHECKING:
    from PIL import ImageDraw

logger = logging.getLogger(__name__)


class ComponentRegistry:
    """
    Components of one page in registration order.

    Drawing walks every component in the order they were registered, so a
    component registered later paints over an earlier one in the same
    cell. Touches go to exactly one component per cell: the most recently
    registered TOUCHABLE one.

    Registration is a setup step. A hot reload builds a fresh registry
    instead of mutating one that is being drawn or dispatched.
    """

    def __init__(self, name: str = "page"):
        self.name = name
        self._components: list[GridComponent] = []
        self._touch_targets: dict[str, GridComponent] = {}

    def register(self, component: GridComponent) -> None:
        """Append a component; it shadows older touch targets in its cell."""
        self._components.append(component)

        if component.has(Capability.TOUCHABLE):
            shadowed = self._touch_targets.get(component.key)
            if shadowed is not None:
                logger.debug(f"{self.name}: {component!r} shadows {shadowed!r} for touches")
            self._touch_targets[component.key] = component

        logger.debug(f"{self.name}: registered {component!r}")

    def touch_target(self, position: GridPosition) -> GridComponent | None:
        return self._touch_targets.get(position.key)

    async def dispatch_touch(self, position: GridPosition) -> bool:
        """
        Send a touch to the target at ``position``.

        Returns:
            What the component's handler reported, or False when the cell
            has no touch target. A handler that raises is logged and counts
            as not handled.
        """
        target = self._touch_targets.get(position.key)
        if target is None:
            logger.debug(f"{self.name}: no touch target at {position}")
            return False

        try:
            handled = await target.handle_touch(position)
        except Exception as e:
            logger.error(f"{self.name}: touch handler of {target!r} failed: {e}", exc_info=True)
            return False

        logger.debug(f"{self.name}: touch at {position} -> {target!r} (handled={handled})")
        return bool(handled)

    def draw_all(self, canvas: "ImageDraw.ImageDraw", geometry: GridGeometry) -> None:
        """
        Draw every drawable component into its cell, in registration order.

        A component that fails to draw is logged and skipped so the rest
        of the frame is still produced.
        """
        for component in self._components:
            if not component.has(Capability.DRAWABLE):
                continue
            try:
                component.draw(canvas, geometry.rect_for(component.position))
            except Exception as e:
                logger.error(f"{self.name}: drawing {component!r} failed: {e}", exc_info=True)

    async def update_all(self) -> None:
        """Refresh every UPDATABLE component; failures are logged per component."""
        for component in self._components:
            if not component.has(Capability.UPDATABLE):
                continue
            try:
                await component.update()
            except Exception as e:
                logger.warning(f"{self.name}: updating {component!r} failed: {e}")

    def find(self, capability: Capability) -> list[GridComponent]:
        """Components declaring ``capability``, in registration order."""
        return [c for c in self._components if c.has(capability)]

    def find_kind(self, kind: str) -> list[GridComponent]:
        """Components of one configured type, in registration order."""
        return [c for c in self._components if c.kind == kind]

    def close(self) -> None:
        """Close every component (cancels pending overlay timers)."""
        for component in self._components:
            try:
                component.close()
            except Exception as e:
                logger.error(f"{self.name}: closing {component!r} failed: {e}", exc_info=True)

    @property
    def components(self) -> list[GridComponent]:
        return list(self._components)

    def __iter__(self) -> Iterator[GridComponent]:
        return iter(list(self._components))

    def __len__(self) -> int:
        return len(self._components)
