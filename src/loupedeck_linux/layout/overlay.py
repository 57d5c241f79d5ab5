"""One-shot visibility timer for overlay components.

State machine::

    hidden --show_temporarily--> visible
    visible --show_temporarily--> visible   (hide timer restarted)
    visible --timer expired / hide()--> hidden

The timer handle is owned here so closing the component always cancels it.
"""

import asyncio
import logging
from collections.abc import Callable
from typing import Any, Protocol

logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    def cancel(self) -> None:
        ...


class Scheduler(Protocol):
    """The part of ``asyncio.AbstractEventLoop`` used for delayed callbacks."""

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> TimerHandle:
        ...


class OverlayTimer:
    """
    Visibility flag that turns itself off after a fixed duration.

    Args:
        duration_ms: Default visible time for ``show_temporarily``
        scheduler: Object with ``call_later``; defaults to the running event loop
        name: Used in log messages
        on_expire: Called after the timer hid the overlay (not after ``hide()``)
    """

    def __init__(
        self,
        duration_ms: int = 2000,
        scheduler: Scheduler | None = None,
        name: str = "overlay",
        on_expire: Callable[[], None] | None = None,
    ):
        if duration_ms <= 0:
            raise ValueError(f"duration_ms must be positive, got {duration_ms}")
        self.duration_ms = duration_ms
        self.name = name
        self._scheduler = scheduler
        self._visible = False
        self._handle: TimerHandle | None = None
        self._closed = False
        self._on_expire = on_expire

    @property
    def visible(self) -> bool:
        return self._visible

    @property
    def pending(self) -> bool:
        """True while a hide timer is scheduled."""
        return self._handle is not None

    def show_temporarily(self, duration_ms: int | None = None) -> None:
        """
        Become visible now and hide ``duration_ms`` after this call.

        Calling again before the timer fires restarts the window from the
        new call; windows never stack.
        """
        if self._closed:
            logger.debug(f"{self.name}: show ignored after close")
            return

        duration = duration_ms if duration_ms is not None else self.duration_ms
        self._cancel_pending()
        self._visible = True
        scheduler = self._scheduler or asyncio.get_running_loop()
        self._handle = scheduler.call_later(duration / 1000, self._expire)
        logger.debug(f"{self.name}: visible for {duration}ms")

    def hide(self) -> None:
        """Hide immediately and drop any pending timer."""
        self._cancel_pending()
        self._visible = False

    def close(self) -> None:
        """Cancel the pending timer; later expirations are no-ops."""
        self._cancel_pending()
        self._visible = False
        self._closed = True

    def _expire(self) -> None:
        self._handle = None
        if self._closed:
            return
        self._visible = False
        logger.debug(f"{self.name}: hidden after timeout")
        if self._on_expire is not None:
            self._on_expire()

    def _cancel_pending(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
