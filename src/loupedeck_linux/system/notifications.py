"""Desktop notifications read from the D-Bus session bus.

The listener turns its own bus connection into a monitor for
``org.freedesktop.Notifications.Notify`` calls. Every notification sent to
the desktop's notification daemon is seen this way while the daemon keeps
working as before.
"""

import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Any, Protocol

from dbus_fast import BusType, Message, MessageType
from dbus_fast.aio import MessageBus
from dbus_fast.errors import AuthError

from loupedeck_linux.exceptions import SystemControlError
from loupedeck_linux.model_manager import ObserverManager

logger = logging.getLogger(__name__)

NOTIFICATIONS_INTERFACE = "org.freedesktop.Notifications"
NOTIFY_MATCH_RULE = (
    "type='method_call',member='Notify',"
    "path='/org/freedesktop/Notifications',interface='org.freedesktop.Notifications'"
)

_BECOME_MONITOR = ["dbus", "BecomeMonitor"]


@dataclass(frozen=True)
class Notification:
    app_name: str = ""
    summary: str = ""
    body: str = ""
    icon: str = ""
    replaces_id: int = 0

    @classmethod
    def from_notify_args(cls, args: Sequence[Any]) -> "Notification | None":
        """Build from the arguments of a ``Notify`` call; None when they are incomplete."""
        if len(args) < 5:
            return None
        return cls(
            app_name=str(args[0] or ""),
            replaces_id=int(args[1] or 0),
            icon=str(args[2] or ""),
            summary=str(args[3] or ""),
            body=str(args[4] or ""),
        )


class NotificationObserver(Protocol):
    def on_notification(self, notification: Notification) -> None:
        ...


BusFactory = Callable[[], Awaitable[MessageBus]]


async def connect_session_bus() -> MessageBus:
    return await MessageBus(bus_type=BusType.SESSION).connect()


class NotificationListener:
    """
    Publishes desktop notifications to observers.

    Observers are called on the event loop that runs the bus connection.

    Args:
        bus_factory: Coroutine returning a connected MessageBus (tests inject a fake)
    """

    def __init__(self, bus_factory: BusFactory = connect_session_bus):
        self._bus_factory = bus_factory
        self._bus: MessageBus | None = None
        self._observers = ObserverManager[NotificationObserver](observer_type_name="notification")

    @property
    def running(self) -> bool:
        return self._bus is not None

    def register_observer(self, observer: NotificationObserver) -> None:
        self._observers.register(observer)

    def unregister_observer(self, observer: NotificationObserver) -> None:
        self._observers.unregister(observer)

    async def start(self) -> None:
        """
        Connect to the session bus and start monitoring.

        Raises:
            SystemControlError: If the bus is unreachable or refuses to monitor
        """
        if self._bus is not None:
            logger.warning("Notification listener already running")
            return

        try:
            bus = await self._bus_factory()
        except (OSError, ValueError, AuthError) as e:
            raise SystemControlError(_BECOME_MONITOR, f"cannot connect to the session bus: {e}") from e

        reply = await bus.call(
            Message(
                destination="org.freedesktop.DBus",
                path="/org/freedesktop/DBus",
                interface="org.freedesktop.DBus.Monitoring",
                member="BecomeMonitor",
                signature="asu",
                body=[[NOTIFY_MATCH_RULE], 0],
            )
        )
        if reply is None or reply.message_type == MessageType.ERROR:
            detail = reply.error_name if reply is not None else "no reply"
            bus.disconnect()
            raise SystemControlError(_BECOME_MONITOR, f"monitoring refused: {detail}")

        bus.add_message_handler(self._on_message)
        self._bus = bus
        logger.info("Listening for desktop notifications")

    async def stop(self) -> None:
        if self._bus is None:
            return
        bus, self._bus = self._bus, None
        bus.remove_message_handler(self._on_message)
        bus.disconnect()
        logger.info("Notification listener stopped")

    def _on_message(self, message: Message) -> bool:
        if message.message_type != MessageType.METHOD_CALL:
            return False

        if message.member == "Notify" and message.interface == NOTIFICATIONS_INTERFACE:
            notification = Notification.from_notify_args(message.body)
            if notification is not None:
                logger.debug(f"Notification from {notification.app_name!r}: {notification.summary}")
                self._observers.notify("on_notification", notification)

        # A monitor must never answer the calls it observes
        return True
