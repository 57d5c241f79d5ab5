"""Generic observer list.

The device controller and the page configuration service both publish
events to a list of observers. ObserverManager keeps that list and calls
every observer in turn, isolating failures so that one broken observer
does not prevent the others from being notified.

Registration may happen from the config watcher thread, so the list is
guarded by a lock that is released before any callback runs.
"""

import logging
from threading import Lock
from typing import Any

logger = logging.getLogger(__name__)


class ObserverManager[T: object]:
    """
    Thread-safe observer registry with per-observer error isolation.

    Example:
        ```python
        self._observers = ObserverManager[DeviceObserver](observer_type_name="device")
        self._observers.register(app)
        self._observers.notify("on_device_event", event)
        ```
    """

    def __init__(self, lock: "Lock | None" = None, observer_type_name: str = "observer"):
        """
        Args:
            lock: Optional lock shared with the owner. If None, creates a new lock.
            observer_type_name: Name used in log messages (e.g., "device", "config")
        """
        self._observers: list[T] = []
        self._lock = lock or Lock()
        self._observer_type_name = observer_type_name

    def register(self, observer: T) -> None:
        """Register an observer; registering twice is a no-op."""
        with self._lock:
            if observer in self._observers:
                logger.debug(f"{self._observer_type_name} observer already registered: {observer}")
                return
            self._observers.append(observer)
        logger.info(f"Registered {self._observer_type_name} observer: {observer}")

    def unregister(self, observer: T) -> None:
        """Remove an observer; unknown observers are logged and ignored."""
        with self._lock:
            if observer not in self._observers:
                logger.warning(
                    f"Attempted to unregister unknown {self._observer_type_name} observer: {observer}"
                )
                return
            self._observers.remove(observer)
        logger.debug(f"Unregistered {self._observer_type_name} observer: {observer}")

    def notify(self, callback_name: str, *args: Any, **kwargs: Any) -> None:
        """
        Call ``callback_name`` on every observer.

        Exceptions raised by an observer are logged with traceback and do
        not reach the caller or the remaining observers.
        """
        with self._lock:
            observers = list(self._observers)

        for observer in observers:
            callback = getattr(observer, callback_name, None)
            if callback is None:
                logger.error(
                    f"{self._observer_type_name} observer {observer} has no method '{callback_name}'"
                )
                continue
            try:
                callback(*args, **kwargs)
            except Exception as e:
                logger.error(
                    f"Error notifying {self._observer_type_name} observer {observer} via {callback_name}: {e}",
                    exc_info=True,
                )

    def clear(self) -> None:
        with self._lock:
            count = len(self._observers)
            self._observers.clear()
        if count > 0:
            logger.info(f"Cleared {count} {self._observer_type_name} observer(s)")

    def __contains__(self, observer: T) -> bool:
        with self._lock:
            return observer in self._observers

    def __len__(self) -> int:
        with self._lock:
            return len(self._observers)
