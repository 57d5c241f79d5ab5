"""Touch grid layout: geometry, touch mapping, component registry, compositing.

Data flow for a touch::

    TouchStartEvent -> TouchMapper.map_touches -> ComponentRegistry.dispatch_touch
        -> component.handle_touch -> (caller) LayoutCompositor.redraw
"""

from loupedeck_linux.layout.component import Capability, GridComponent
from loupedeck_linux.layout.compositor import LayoutCompositor
from loupedeck_linux.layout.geometry import GridGeometry
from loupedeck_linux.layout.overlay import OverlayTimer, Scheduler
from loupedeck_linux.layout.periodic import PeriodicTask
from loupedeck_linux.layout.registry import ComponentRegistry
from loupedeck_linux.layout.touch import TouchMapper

__all__ = [
    "Capability",
    "ComponentRegistry",
    "GridComponent",
    "GridGeometry",
    "LayoutCompositor",
    "OverlayTimer",
    "PeriodicTask",
    "Scheduler",
    "TouchMapper",
]
