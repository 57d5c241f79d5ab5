"""Services owning application state: page configuration and its file watcher."""

from loupedeck_linux.services.config_watcher import ConfigWatcher
from loupedeck_linux.services.defaults import default_pages_config
from loupedeck_linux.services.page_config_service import (
    ConfigEvent,
    ConfigObserver,
    PageConfigService,
)

__all__ = [
    "ConfigEvent",
    "ConfigObserver",
    "ConfigWatcher",
    "PageConfigService",
    "default_pages_config",
]
