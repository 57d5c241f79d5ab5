"""Notification overlay: desktop notifications shown one at a time."""

import asyncio
import logging
from collections import deque
from typing import TYPE_CHECKING

from loupedeck_linux.components.context import ComponentServices
from loupedeck_linux.components.rendering import (
    draw_cell_background,
    draw_centered_text,
    ellipsis_text,
    fit_font,
    load_font,
)
from loupedeck_linux.layout.component import Capability, GridComponent
from loupedeck_linux.layout.overlay import OverlayTimer, TimerHandle
from loupedeck_linux.models import CellCoord, GridPosition, NotificationDisplayOptions
from loupedeck_linux.models.constants import NOTIFICATION_MAX_BODY_LENGTH, NOTIFICATION_MAX_TITLE_LENGTH
from loupedeck_linux.system.notifications import Notification

if TYPE_CHECKING:
    from PIL import ImageDraw

logger = logging.getLogger(__name__)

# Pause between a dismissed notification and the next queued one
DISMISS_GAP_MS = 300


class NotificationDisplay(GridComponent):
    """
    Overlay with the app name, summary and body of a notification.

    Notifications arriving while one is visible are queued and shown in
    order once the current one times out or is dismissed with a tap.
    """

    kind = "notificationDisplay"
    capabilities = frozenset({Capability.DRAWABLE, Capability.TOUCHABLE, Capability.OVERLAY})

    def __init__(
        self,
        position: GridPosition,
        services: ComponentServices,
        options: NotificationDisplayOptions | None = None,
        name: str | None = None,
    ):
        super().__init__(position, name)
        self.options = options or NotificationDisplayOptions()
        self._scheduler = services.scheduler
        self.current: Notification | None = None
        self._queue: deque[Notification] = deque()
        self._next_handle: TimerHandle | None = None
        self._closed = False
        self.timer = OverlayTimer(
            self.options.display_timeout,
            scheduler=services.scheduler,
            name=f"{self.name} overlay",
            on_expire=self._on_expired,
        )

    @property
    def visible(self) -> bool:
        return self.timer.visible

    @property
    def queued(self) -> int:
        return len(self._queue)

    def show_notification(self, notification: Notification) -> bool:
        """
        Show ``notification`` now, or queue it behind the one on screen.

        Returns:
            True when it became visible immediately
        """
        if self._closed:
            return False
        if self.visible or self._next_handle is not None:
            self._queue.append(notification)
            logger.debug(f"{self.name}: queued notification ({len(self._queue)} waiting)")
            return False

        self.current = notification
        self.timer.show_temporarily()
        return True

    def hide(self) -> None:
        """Dismiss the current notification; the next queued one follows shortly."""
        self.timer.hide()
        self.current = None
        self._schedule_next(DISMISS_GAP_MS)

    def draw(self, canvas: "ImageDraw.ImageDraw", cell: CellCoord) -> None:
        if not self.visible or self.current is None:
            return

        opts = self.options
        notification = self.current
        draw_cell_background(canvas, cell, opts.cell_bg_color, opts.cell_border_color)
        cx, _ = cell.center
        row = cell.height / 3

        app_name = ellipsis_text(notification.app_name or "App", NOTIFICATION_MAX_BODY_LENGTH)
        draw_centered_text(canvas, (cx, cell.y + row * 0.5), app_name, load_font(9), opts.app_name_color)

        title = ellipsis_text(notification.summary, NOTIFICATION_MAX_TITLE_LENGTH)
        title_font = fit_font(canvas, title or " ", cell.width - 10, initial_size=13, min_size=9)
        draw_centered_text(canvas, (cx, cell.y + row * 1.5), title, title_font, opts.title_color)

        body = ellipsis_text(notification.body.replace("\n", " "), NOTIFICATION_MAX_BODY_LENGTH)
        draw_centered_text(canvas, (cx, cell.y + row * 2.5), body, load_font(9), opts.body_color)

    async def handle_touch(self, position: GridPosition) -> bool:
        if not self.visible:
            return False
        logger.info(f"{self.name}: notification dismissed")
        self.hide()
        return True

    def close(self) -> None:
        self._closed = True
        if self._next_handle is not None:
            self._next_handle.cancel()
            self._next_handle = None
        self._queue.clear()
        self.current = None
        self.timer.close()

    def _on_expired(self) -> None:
        self.current = None
        self._show_next()

    def _schedule_next(self, delay_ms: int) -> None:
        if not self._queue or self._next_handle is not None:
            return
        scheduler = self._scheduler or asyncio.get_running_loop()
        self._next_handle = scheduler.call_later(delay_ms / 1000, self._show_next)

    def _show_next(self) -> None:
        self._next_handle = None
        if self._queue and not self._closed:
            self.show_notification(self._queue.popleft())
