"""Pytest fixtures for tests."""

import asyncio
from pathlib import Path
from tempfile import TemporaryDirectory
from unittest.mock import AsyncMock, Mock

import pytest

from loupedeck_linux.components import ComponentServices
from loupedeck_linux.layout import GridGeometry
from loupedeck_linux.models import LOUPEDECK_LIVE_S
from loupedeck_linux.system import MediaMetadata, VolumeState


class FakeTimer:
    """Handle returned by FakeScheduler.call_later."""

    def __init__(self, scheduler: "FakeScheduler", when: float, callback):
        self._scheduler = scheduler
        self.when = when
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeScheduler:
    """Manual clock implementing ``call_later`` (seconds)."""

    def __init__(self):
        self.now = 0.0
        self.timers: list[FakeTimer] = []

    def call_later(self, delay, callback, *args):
        timer = FakeTimer(self, self.now + delay, lambda: callback(*args))
        self.timers.append(timer)
        return timer

    @property
    def pending(self) -> list[FakeTimer]:
        return [t for t in self.timers if not t.cancelled and t.when > self.now]

    def advance(self, seconds: float) -> None:
        """Move the clock forward and fire every timer that came due."""
        target = self.now + seconds
        for timer in sorted(self.pending, key=lambda t: t.when):
            if timer.when <= target and not timer.cancelled:
                self.now = timer.when
                timer.cancelled = True
                timer.callback()
        self.now = target


class FakeSink:
    """Display sink that runs the render callback on a Mock canvas."""

    def __init__(self, delay: float = 0.0, error: Exception | None = None):
        self.delay = delay
        self.error = error
        self.frames = 0
        self.canvas = Mock()

    async def draw(self, render) -> None:
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        render(self.canvas)
        self.frames += 1


@pytest.fixture
def temp_dir():
    """Create a temporary directory that gets cleaned up."""
    with TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def sink():
    return FakeSink()


@pytest.fixture
def make_sink():
    """Factory for sinks that are slow or fail."""
    return FakeSink


@pytest.fixture
def geometry():
    """Loupedeck Live S: 480x270, 5x3 keys of 90px."""
    return GridGeometry(LOUPEDECK_LIVE_S)


@pytest.fixture
def services(scheduler):
    """ComponentServices with every system collaborator mocked."""
    vibration = Mock()
    vibration.vibrate = AsyncMock()

    actions = Mock()
    actions.execute = AsyncMock(return_value=True)

    volume = Mock()
    volume.get_state = AsyncMock(return_value=VolumeState(volume=50, muted=False))
    volume.toggle_mute = AsyncMock(return_value=True)
    volume.adjust_volume = AsyncMock(return_value=55)

    media = Mock()
    media.status = AsyncMock(return_value="Paused")
    media.metadata = AsyncMock(return_value=MediaMetadata(title="Song", artist="Artist", status="Playing"))
    media.toggle_play_pause = AsyncMock(return_value="Playing")

    workspaces = Mock()
    workspaces.active = 1
    workspaces.refresh = AsyncMock(return_value=1)
    workspaces.switch = AsyncMock()
    workspaces.control.is_available = AsyncMock(return_value=True)

    return ComponentServices(
        vibration=vibration,
        actions=actions,
        volume=volume,
        media=media,
        workspaces=workspaces,
        overlay_timeout_ms=2000,
        scheduler=scheduler,
    )


@pytest.fixture
def fake_runner():
    """
    Command runner answering from a table of ``argv prefix -> output``.

    Unknown commands raise SystemControlError like a missing program would.
    """
    from loupedeck_linux.exceptions import SystemControlError

    class FakeRunner:
        def __init__(self):
            self.responses: dict[tuple[str, ...], str | Exception] = {}
            self.calls: list[list[str]] = []

        def respond(self, argv, output) -> None:
            self.responses[tuple(argv)] = output

        async def __call__(self, argv) -> str:
            argv = list(argv)
            self.calls.append(argv)
            for length in range(len(argv), 0, -1):
                response = self.responses.get(tuple(argv[:length]))
                if response is None:
                    continue
                if isinstance(response, Exception):
                    raise response
                return response
            raise SystemControlError(argv, "program not found")

    return FakeRunner()


class FakeBus:
    """Stand-in for a connected dbus_fast MessageBus."""

    def __init__(self, reply=None):
        from dbus_fast import MessageType

        self.reply = reply if reply is not None else Mock(message_type=MessageType.METHOD_RETURN)
        self.sent = []
        self.handlers = []
        self.connected = True

    async def call(self, message):
        self.sent.append(message)
        return self.reply

    def add_message_handler(self, handler) -> None:
        self.handlers.append(handler)

    def remove_message_handler(self, handler) -> None:
        self.handlers.remove(handler)

    def disconnect(self) -> None:
        self.connected = False

    def deliver(self, message) -> list[bool]:
        return [handler(message) for handler in self.handlers]


@pytest.fixture
def fake_bus():
    return FakeBus()


@pytest.fixture
def notify_message():
    """Factory for ``Notify`` method calls as the notification daemon receives them."""
    from dbus_fast import Message

    def build(app_name: str = "firefox", summary: str = "Download complete", body: str = "file.zip"):
        return Message(
            destination="org.freedesktop.Notifications",
            path="/org/freedesktop/Notifications",
            interface="org.freedesktop.Notifications",
            member="Notify",
            signature="susssasa{sv}i",
            body=[app_name, 0, "", summary, body, [], {}, 5000],
        )

    return build
