"""Builds page registries from the page configuration."""

import logging
from collections.abc import Callable

from loupedeck_linux.components.button import ButtonComponent
from loupedeck_linux.components.clock import ClockComponent
from loupedeck_linux.components.context import ComponentServices
from loupedeck_linux.components.media import MediaDisplay, MediaPlayPauseButton
from loupedeck_linux.components.notification import NotificationDisplay
from loupedeck_linux.components.volume_display import VolumeDisplay
from loupedeck_linux.components.workspace import WorkspaceButton
from loupedeck_linux.exceptions import collect_errors
from loupedeck_linux.layout.component import GridComponent
from loupedeck_linux.layout.geometry import GridGeometry
from loupedeck_linux.layout.registry import ComponentRegistry
from loupedeck_linux.models import ComponentConfig, GridPosition, PageConfig, PagesConfig
from loupedeck_linux.models.pages import is_physical_button_key

logger = logging.getLogger(__name__)

Builder = Callable[[str, GridPosition, ComponentConfig], GridComponent]


class ComponentFactory:
    """
    Turns page descriptors into components.

    Within a page, base components are registered first and overlays last
    (each group in document order) so overlays draw on top and receive the
    touches of the cell they share.
    """

    def __init__(self, services: ComponentServices, geometry: GridGeometry):
        self.services = services
        self.geometry = geometry
        self._builders: dict[str, Builder] = {
            "clock": self._build_clock,
            "button": self._build_button,
            "volumeDisplay": self._build_volume_display,
            "mediaDisplay": self._build_media_display,
            "mediaPlayPause": self._build_media_play_pause,
            "workspace": self._build_workspace,
            "notificationDisplay": self._build_notification_display,
        }

    def build_pages(self, config: PagesConfig) -> dict[str, ComponentRegistry]:
        """One registry per page id."""
        return {
            page_id: self.build_page(page_id, config.pages[page_id])
            for page_id in config.page_ids()
        }

    def build_page(self, page_id: str, page: PageConfig) -> ComponentRegistry:
        """
        Build the registry for one page.

        Components that cannot be placed (no position, outside the grid) or
        fail to build are logged and left out; the rest of the page is built.
        """
        registry = ComponentRegistry(name=f"page {page_id}")
        collector = collect_errors(f"build page {page_id}")

        entries = [
            (name, component)
            for name, component in page.components.items()
            if not is_physical_button_key(page_id, name)
        ]
        ordered = [e for e in entries if not e[1].is_overlay] + [e for e in entries if e[1].is_overlay]

        for name, component in ordered:
            if component.position is None:
                logger.warning(f"Page {page_id}: component {name!r} has no position, skipped")
                continue
            if not self.geometry.contains(component.position):
                logger.warning(
                    f"Page {page_id}: component {name!r} at {component.position} is outside the "
                    f"{self.geometry.columns}x{self.geometry.rows} grid, skipped"
                )
                continue
            with collector.try_operation(name):
                registry.register(self.build(name, component))

        if collector.has_errors:
            logger.warning(collector.get_summary())
        logger.info(f"Page {page_id}: {len(registry)} component(s)")
        return registry

    def build(self, name: str, component: ComponentConfig) -> GridComponent:
        """Build one component (position must be set)."""
        builder = self._builders[component.type]
        return builder(name, component.position, component)

    # =================================================================
    # Builders
    # =================================================================

    def _build_clock(self, name: str, position: GridPosition, cfg: ComponentConfig) -> GridComponent:
        return ClockComponent(position, cfg.parsed_options(), name=name)

    def _build_button(self, name: str, position: GridPosition, cfg: ComponentConfig) -> GridComponent:
        return ButtonComponent(position, self.services, cfg.parsed_options(), command=cfg.command, name=name)

    def _build_volume_display(self, name: str, position: GridPosition, cfg: ComponentConfig) -> GridComponent:
        return VolumeDisplay(position, self.services, cfg.parsed_options(), name=name)

    def _build_media_display(self, name: str, position: GridPosition, cfg: ComponentConfig) -> GridComponent:
        return MediaDisplay(position, self.services, cfg.parsed_options(), name=name)

    def _build_media_play_pause(self, name: str, position: GridPosition, cfg: ComponentConfig) -> GridComponent:
        return MediaPlayPauseButton(position, self.services, cfg.parsed_options(), name=name)

    def _build_workspace(self, name: str, position: GridPosition, cfg: ComponentConfig) -> GridComponent:
        return WorkspaceButton(position, self.services, cfg.parsed_options(), name=name)

    def _build_notification_display(self, name: str, position: GridPosition, cfg: ComponentConfig) -> GridComponent:
        return NotificationDisplay(position, self.services, cfg.parsed_options(), name=name)
