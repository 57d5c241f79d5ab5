"""Watches the page configuration file for external edits."""

import asyncio
import logging
from collections.abc import Callable
from pathlib import Path

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

logger = logging.getLogger(__name__)


class ConfigWatcher(FileSystemEventHandler):
    """
    Calls ``on_change`` on the event loop after the file changed.

    Watchdog reports from its own thread; events are handed to the loop
    with ``call_soon_threadsafe`` and debounced there, so a burst of
    writes (temp file, rename, backup) triggers one reload.

    Args:
        path: File to watch (its directory is observed)
        on_change: Called on the loop thread, without arguments
        loop: Loop that runs ``on_change``
        debounce: Quiet period in seconds before ``on_change`` runs
    """

    def __init__(
        self,
        path: Path,
        on_change: Callable[[], None],
        loop: asyncio.AbstractEventLoop,
        debounce: float = 0.3,
    ):
        super().__init__()
        self.path = path.resolve()
        self._on_change = on_change
        self._loop = loop
        self._debounce = debounce
        self._observer: Observer | None = None
        self._pending: asyncio.TimerHandle | None = None

    @property
    def running(self) -> bool:
        return self._observer is not None

    def start(self) -> None:
        if self._observer is not None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        observer = Observer()
        observer.schedule(self, str(self.path.parent), recursive=False)
        observer.start()
        self._observer = observer
        logger.info(f"Watching {self.path} for changes")

    def stop(self, timeout: float = 5.0) -> None:
        observer = self._observer
        if observer is None:
            return
        self._observer = None
        observer.stop()
        observer.join(timeout)
        if observer.is_alive():
            logger.warning(f"Config watcher thread did not stop within {timeout}s")
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
        logger.debug("Config watcher stopped")

    # Watchdog thread

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        paths = [event.src_path, getattr(event, "dest_path", "")]
        if not any(p and Path(p).resolve() == self.path for p in paths):
            return
        logger.debug(f"Config file event: {event.event_type}")
        self._loop.call_soon_threadsafe(self._schedule)

    # Loop thread

    def _schedule(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
        self._pending = self._loop.call_later(self._debounce, self._fire)

    def _fire(self) -> None:
        self._pending = None
        self._on_change()
