"""Page configuration state: the single owner of the page document."""

import logging
from enum import Enum
from pathlib import Path
from threading import Lock
from typing import Any, Protocol

from loupedeck_linux.exceptions import ConfigValidationError, PageNotFoundError
from loupedeck_linux.model_manager import ObserverManager, PydanticPersistence
from loupedeck_linux.models import PageConfig, PageMeta, PagesConfig
from loupedeck_linux.services.defaults import default_pages_config
from loupedeck_linux.utils.paths import pages_config_path

logger = logging.getLogger(__name__)


class ConfigEvent(Enum):
    """Events from page configuration changes."""

    CONFIG_LOADED = "config_loaded"  # reloaded from disk (hot reload)
    CONFIG_UPDATED = "config_updated"  # changed through the service (API)


class ConfigObserver(Protocol):
    def on_config_event(self, event: ConfigEvent, config: PagesConfig) -> None:
        """
        Called after the page document changed.

        Args:
            event: What changed it
            config: Deep copy of the new document
        """
        ...


class PageConfigService:
    """
    Owns the page document and persists every change.

    The HTTP API mutates the document through this service; the config
    watcher asks it to reload after external edits. Observers (the
    application) rebuild their page registries from the copy they receive.

    Threading:
        State is guarded by a lock that is released before observers run.
    """

    def __init__(self, config: PagesConfig | None = None, path: Path | None = None):
        self._config = config or default_pages_config()
        self.path = path or pages_config_path()
        self._lock = Lock()
        self._observers = ObserverManager[ConfigObserver](lock=None, observer_type_name="config")

    @classmethod
    def load_or_create(cls, path: Path | None = None) -> "PageConfigService":
        """
        Load the page document, writing the default layout on first run.

        A corrupted file is left untouched and the default layout is used.
        """
        path = path or pages_config_path()
        config = PydanticPersistence.ensure_valid_or_create(path, PagesConfig, default_pages_config)
        logger.info(f"Page configuration: {path} ({len(config.pages)} page(s))")
        return cls(config, path)

    # =================================================================
    # Event System
    # =================================================================

    def register_observer(self, observer: ConfigObserver) -> None:
        self._observers.register(observer)

    def unregister_observer(self, observer: ConfigObserver) -> None:
        self._observers.unregister(observer)

    def _notify(self, event: ConfigEvent) -> None:
        self._observers.notify("on_config_event", event, self.config)

    # =================================================================
    # Access
    # =================================================================

    @property
    def config(self) -> PagesConfig:
        """Deep copy of the current document."""
        with self._lock:
            return self._config.model_copy(deep=True)

    def page(self, page_id: str) -> PageConfig:
        """
        Raises:
            PageNotFoundError: If the page does not exist
        """
        with self._lock:
            page = self._config.pages.get(page_id)
            if page is None:
                raise PageNotFoundError(page_id)
            return page.model_copy(deep=True)

    # =================================================================
    # Mutation
    # =================================================================

    def replace(self, data: PagesConfig | dict[str, Any]) -> PagesConfig:
        """
        Validate, store and persist a complete page document.

        Raises:
            ConfigValidationError: If ``data`` is not a valid document
                (``issues`` lists every problem)
        """
        config = (
            data.model_copy(deep=True)
            if isinstance(data, PagesConfig)
            else PydanticPersistence.validate_data(data, PagesConfig, source=str(self.path))
        )
        with self._lock:
            self._config = config
        self._save_and_notify()
        logger.info(f"Page configuration replaced ({len(config.pages)} page(s))")
        return self.config

    def create_page(self, title: str = "", description: str = "") -> str:
        """Append an empty page. Returns the new page id."""
        with self._lock:
            page_id = self._config.next_page_id()
            meta = PageMeta(title=title or f"Page {page_id}", description=description)
            self._config.pages[page_id] = PageConfig(meta=meta)
        self._save_and_notify()
        logger.info(f"Created page {page_id}")
        return page_id

    def delete_page(self, page_id: str) -> None:
        """
        Remove a page.

        Raises:
            PageNotFoundError: If the page does not exist
            ConfigValidationError: If it is the only page
        """
        with self._lock:
            if page_id not in self._config.pages:
                raise PageNotFoundError(page_id)
            if len(self._config.pages) == 1:
                raise ConfigValidationError(
                    field=f"pages.{page_id}",
                    value=page_id,
                    error_msg="the last remaining page cannot be deleted",
                    file_path=str(self.path),
                )
            del self._config.pages[page_id]
        self._save_and_notify()
        logger.info(f"Deleted page {page_id}")

    def update_page_meta(
        self, page_id: str, title: str | None = None, description: str | None = None
    ) -> PageMeta:
        """
        Change the title and/or description of a page.

        Raises:
            PageNotFoundError: If the page does not exist
        """
        with self._lock:
            page = self._config.pages.get(page_id)
            if page is None:
                raise PageNotFoundError(page_id)
            if title is not None:
                page.meta.title = title
            if description is not None:
                page.meta.description = description
            meta = page.meta.model_copy()
        self._save_and_notify()
        return meta

    # =================================================================
    # Persistence
    # =================================================================

    def save(self) -> None:
        """Write the document to ``path`` (atomic, with ``.bak``)."""
        PydanticPersistence.save_json(self.config, self.path)
        logger.debug(f"Page configuration saved to {self.path}")

    def reload(self) -> bool:
        """
        Re-read the document from disk.

        Returns:
            True when the file content differs from the current document
            (observers were notified), False when unchanged

        Raises:
            ConfigFileInvalidError: If the file is not valid JSON
            ConfigValidationError: If the content is invalid
        """
        config = PydanticPersistence.load_json(self.path, PagesConfig)
        with self._lock:
            if config == self._config:
                logger.debug("Page configuration unchanged on disk")
                return False
            self._config = config
        logger.info(f"Page configuration reloaded from {self.path}")
        self._notify(ConfigEvent.CONFIG_LOADED)
        return True

    def _save_and_notify(self) -> None:
        self.save()
        self._notify(ConfigEvent.CONFIG_UPDATED)
