"""Tests for OS integration: commands, volume, media, Hyprland, launcher, notifications."""

from unittest.mock import AsyncMock, Mock, patch

import pytest
from dbus_fast import Message, MessageType

from loupedeck_linux.exceptions import SystemControlError
from loupedeck_linux.system import (
    ActionRunner,
    AppLauncher,
    HyprlandControl,
    MediaControl,
    Notification,
    NotificationListener,
    VibrationService,
    VolumeControl,
    WorkspaceTracker,
    run_command,
)
from loupedeck_linux.system.volume import clamp_volume


@pytest.mark.unit
class TestRunCommand:
    @pytest.mark.asyncio
    async def test_returns_stripped_stdout(self):
        assert await run_command(["echo", "  hello  "]) == "hello"

    @pytest.mark.asyncio
    async def test_missing_program(self):
        with pytest.raises(SystemControlError) as exc_info:
            await run_command(["definitely-not-a-program-xyz"])
        assert exc_info.value.detail == "program not found"

    @pytest.mark.asyncio
    async def test_non_zero_exit(self):
        with pytest.raises(SystemControlError) as exc_info:
            await run_command(["sh", "-c", "echo oops >&2; exit 3"])
        assert "oops" in exc_info.value.detail

    @pytest.mark.asyncio
    async def test_timeout(self):
        with pytest.raises(SystemControlError) as exc_info:
            await run_command(["sleep", "5"], timeout=0.1)
        assert "timed out" in exc_info.value.detail

    def test_hint_for_known_programs(self):
        assert "playerctl" in SystemControlError(["playerctl", "status"], "x").recovery_hint


@pytest.mark.unit
class TestVolumeControl:
    @pytest.mark.asyncio
    async def test_wpctl_state(self, fake_runner):
        fake_runner.respond(["wpctl", "get-volume"], "Volume: 0.45 [MUTED]")
        control = VolumeControl("wpctl", runner=fake_runner)

        state = await control.get_state()

        assert state.volume == 45
        assert state.muted is True

    @pytest.mark.asyncio
    async def test_wpctl_adjust_clamps(self, fake_runner):
        fake_runner.respond(["wpctl", "get-volume"], "Volume: 0.98")
        fake_runner.respond(["wpctl", "set-volume"], "")
        control = VolumeControl("wpctl", runner=fake_runner)

        assert await control.adjust_volume(5) == 100
        assert fake_runner.calls[-1] == ["wpctl", "set-volume", "@DEFAULT_AUDIO_SINK@", "1.00"]

    @pytest.mark.asyncio
    async def test_wpctl_toggle_mute(self, fake_runner):
        fake_runner.respond(["wpctl", "set-mute"], "")
        fake_runner.respond(["wpctl", "get-volume"], "Volume: 0.30")
        control = VolumeControl("wpctl", runner=fake_runner)

        assert await control.toggle_mute() is False
        assert ["wpctl", "set-mute", "@DEFAULT_AUDIO_SINK@", "toggle"] in fake_runner.calls

    @pytest.mark.asyncio
    async def test_wpctl_unexpected_output(self, fake_runner):
        fake_runner.respond(["wpctl", "get-volume"], "garbage")
        with pytest.raises(SystemControlError):
            await VolumeControl("wpctl", runner=fake_runner).get_state()

    @pytest.mark.asyncio
    async def test_pactl_state_and_set(self, fake_runner):
        fake_runner.respond(
            ["pactl", "get-sink-volume"],
            "Volume: front-left: 32768 /  50% / -18.06 dB,   front-right: 32768 /  50% / -18.06 dB",
        )
        fake_runner.respond(["pactl", "get-sink-mute"], "Mute: no")
        fake_runner.respond(["pactl", "set-sink-volume"], "")
        control = VolumeControl("pactl", runner=fake_runner)

        state = await control.get_state()
        assert (state.volume, state.muted) == (50, False)

        await control.set_volume(-20)
        assert fake_runner.calls[-1] == ["pactl", "set-sink-volume", "@DEFAULT_SINK@", "0%"]

    @pytest.mark.asyncio
    async def test_no_backend(self, fake_runner):
        with patch("loupedeck_linux.system.volume.detect_backend", return_value=None):
            control = VolumeControl(runner=fake_runner)
        assert not control.available
        with pytest.raises(SystemControlError):
            await control.get_state()

    @pytest.mark.parametrize("value,expected", [(-5, 0), (0, 0), (49.6, 50), (100, 100), (130, 100)])
    def test_clamp_volume(self, value, expected):
        assert clamp_volume(value) == expected


@pytest.mark.unit
class TestMediaControl:
    @pytest.mark.asyncio
    async def test_status(self, fake_runner):
        fake_runner.respond(["playerctl", "status"], "Playing")
        assert await MediaControl(fake_runner).status() == "Playing"

    @pytest.mark.asyncio
    async def test_status_without_player(self, fake_runner):
        assert await MediaControl(fake_runner).status() == "Stopped"

    @pytest.mark.asyncio
    async def test_metadata(self, fake_runner):
        fake_runner.respond(["playerctl", "status"], "Paused")
        fake_runner.respond(["playerctl", "metadata"], "Song\tArtist\tAlbum")

        meta = await MediaControl(fake_runner).metadata()

        assert (meta.title, meta.artist, meta.album, meta.status) == ("Song", "Artist", "Album", "Paused")

    @pytest.mark.asyncio
    async def test_metadata_partial(self, fake_runner):
        fake_runner.respond(["playerctl", "status"], "Playing")
        fake_runner.respond(["playerctl", "metadata"], "Only Title")

        meta = await MediaControl(fake_runner).metadata()
        assert meta.title == "Only Title"
        assert meta.artist == ""

    @pytest.mark.asyncio
    async def test_toggle_returns_new_status(self, fake_runner):
        fake_runner.respond(["playerctl", "play-pause"], "")
        fake_runner.respond(["playerctl", "status"], "Paused")
        assert await MediaControl(fake_runner).toggle_play_pause() == "Paused"

    @pytest.mark.asyncio
    async def test_next_and_previous(self, fake_runner):
        fake_runner.respond(["playerctl", "next"], "")
        fake_runner.respond(["playerctl", "previous"], "")
        control = MediaControl(fake_runner)

        await control.next()
        await control.previous()

        assert fake_runner.calls == [["playerctl", "next"], ["playerctl", "previous"]]


@pytest.mark.unit
class TestHyprland:
    @pytest.mark.asyncio
    async def test_unavailable_without_session(self, fake_runner, monkeypatch):
        monkeypatch.delenv("HYPRLAND_INSTANCE_SIGNATURE", raising=False)
        assert await HyprlandControl(fake_runner).is_available() is False
        assert fake_runner.calls == []

    @pytest.mark.asyncio
    async def test_available_checked_once(self, fake_runner, monkeypatch):
        monkeypatch.setenv("HYPRLAND_INSTANCE_SIGNATURE", "abc")
        fake_runner.respond(["hyprctl", "version"], "Hyprland 0.40")
        control = HyprlandControl(fake_runner)

        assert await control.is_available() is True
        assert await control.is_available() is True
        assert len(fake_runner.calls) == 1

    @pytest.mark.asyncio
    async def test_current_workspace(self, fake_runner):
        fake_runner.respond(["hyprctl", "activeworkspace"], '{"id": 3, "name": "3"}')
        assert await HyprlandControl(fake_runner).current_workspace() == 3

    @pytest.mark.asyncio
    async def test_current_workspace_bad_output(self, fake_runner):
        fake_runner.respond(["hyprctl", "activeworkspace"], "not json")
        assert await HyprlandControl(fake_runner).current_workspace() is None

    @pytest.mark.asyncio
    async def test_switch(self, fake_runner):
        fake_runner.respond(["hyprctl", "dispatch"], "ok")
        await HyprlandControl(fake_runner).switch_workspace(7)
        assert fake_runner.calls == [["hyprctl", "dispatch", "workspace", "7"]]

    @pytest.mark.asyncio
    async def test_tracker_coalesces_refreshes(self, fake_runner):
        fake_runner.respond(["hyprctl", "activeworkspace"], '{"id": 2}')
        tracker = WorkspaceTracker(HyprlandControl(fake_runner), min_interval=10)

        for _ in range(5):
            await tracker.refresh()

        assert tracker.active == 2
        assert len(fake_runner.calls) == 1

    @pytest.mark.asyncio
    async def test_tracker_switch_updates_active(self, fake_runner):
        fake_runner.respond(["hyprctl", "dispatch"], "ok")
        tracker = WorkspaceTracker(HyprlandControl(fake_runner))
        await tracker.switch(5)
        assert tracker.active == 5


@pytest.mark.unit
class TestLauncherAndActions:
    @pytest.mark.asyncio
    async def test_empty_command_not_launched(self):
        assert await AppLauncher().launch("   ") is False

    @pytest.mark.asyncio
    async def test_launch_detaches(self, monkeypatch):
        monkeypatch.setenv("WAYLAND_DISPLAY", "wayland-1")
        process = Mock()
        process.wait = AsyncMock(return_value=0)
        with patch(
            "loupedeck_linux.system.launcher.asyncio.create_subprocess_shell",
            AsyncMock(return_value=process),
        ) as spawn:
            assert await AppLauncher().launch("firefox") is True

        shell_command = spawn.await_args.args[0]
        assert shell_command.startswith("setsid firefox")
        assert shell_command.endswith("&")

    @pytest.mark.asyncio
    async def test_launch_warns_without_display(self, monkeypatch, caplog):
        monkeypatch.delenv("DISPLAY", raising=False)
        monkeypatch.delenv("WAYLAND_DISPLAY", raising=False)
        process = Mock()
        process.wait = AsyncMock(return_value=0)
        with patch(
            "loupedeck_linux.system.launcher.asyncio.create_subprocess_shell",
            AsyncMock(return_value=process),
        ):
            await AppLauncher().launch("firefox")
        assert "WAYLAND_DISPLAY" in caplog.text

    @pytest.mark.parametrize(
        "command,expected",
        [("page:2", "2"), (" page: 3 ", "3"), ("page:", None), ("firefox", None)],
    )
    def test_page_target(self, command, expected):
        assert ActionRunner.page_target(command) == expected

    @pytest.mark.asyncio
    async def test_page_command_uses_navigator(self):
        launcher = Mock()
        launcher.launch = AsyncMock()
        navigate = AsyncMock(return_value=True)
        runner = ActionRunner(launcher, navigate)

        assert await runner.execute("page:2") is True
        navigate.assert_awaited_once_with("2")
        launcher.launch.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_page_command_without_navigator(self):
        runner = ActionRunner(Mock())
        assert await runner.execute("page:2") is False

    @pytest.mark.asyncio
    async def test_shell_command_uses_launcher(self):
        launcher = Mock()
        launcher.launch = AsyncMock(return_value=True)
        assert await ActionRunner(launcher).execute("thunderbird") is True
        launcher.launch.assert_awaited_once_with("thunderbird")

    @pytest.mark.asyncio
    async def test_empty_command(self):
        assert await ActionRunner(Mock()).execute(None) is False


@pytest.mark.unit
class TestVibrationService:
    @pytest.mark.asyncio
    async def test_named_pattern(self):
        device = Mock()
        device.vibrate = AsyncMock()
        await VibrationService(device).vibrate("doubleTap")
        device.vibrate.assert_awaited_once_with((30, 50, 30))

    @pytest.mark.asyncio
    async def test_unknown_pattern_ignored(self, caplog):
        device = Mock()
        device.vibrate = AsyncMock()
        await VibrationService(device).vibrate("drumroll")
        device.vibrate.assert_not_awaited()
        assert "drumroll" in caplog.text


@pytest.mark.unit
class TestNotification:
    def test_from_notify_args(self):
        notification = Notification.from_notify_args(["firefox", 7, "icon", "Done", "file.zip", [], {}, -1])

        assert notification == Notification(
            app_name="firefox", summary="Done", body="file.zip", icon="icon", replaces_id=7
        )

    def test_incomplete_args(self):
        assert Notification.from_notify_args(["firefox", 0, ""]) is None


@pytest.mark.unit
@pytest.mark.asyncio
class TestNotificationListener:
    @staticmethod
    def _listener(bus):
        async def connect():
            return bus

        return NotificationListener(bus_factory=connect)

    async def test_start_becomes_monitor(self, fake_bus):
        listener = self._listener(fake_bus)

        await listener.start()

        assert listener.running
        (call,) = fake_bus.sent
        assert (call.interface, call.member) == ("org.freedesktop.DBus.Monitoring", "BecomeMonitor")
        rules, flags = call.body
        assert "member='Notify'" in rules[0]
        assert flags == 0
        assert fake_bus.handlers == [listener._on_message]

    async def test_notify_call_reaches_observers(self, fake_bus, notify_message):
        listener = self._listener(fake_bus)
        observer = Mock()
        listener.register_observer(observer)
        await listener.start()

        assert fake_bus.deliver(notify_message("firefox", "Download complete", "file.zip")) == [True]

        observer.on_notification.assert_called_once_with(
            Notification(app_name="firefox", summary="Download complete", body="file.zip")
        )

    async def test_other_messages_ignored(self, fake_bus):
        listener = self._listener(fake_bus)
        observer = Mock()
        listener.register_observer(observer)
        await listener.start()

        other_call = Message(
            path="/org/freedesktop/Notifications",
            interface="org.freedesktop.Notifications",
            member="CloseNotification",
            signature="u",
            body=[3],
        )
        # Every method call is claimed so the monitor never replies to it
        assert fake_bus.deliver(other_call) == [True]
        assert fake_bus.deliver(Mock(message_type=MessageType.METHOD_RETURN)) == [False]
        observer.on_notification.assert_not_called()

    async def test_refused_monitoring_raises(self, fake_bus):
        fake_bus.reply = Mock(message_type=MessageType.ERROR, error_name="org.freedesktop.DBus.Error.AccessDenied")
        listener = self._listener(fake_bus)

        with pytest.raises(SystemControlError) as exc_info:
            await listener.start()

        assert "org.freedesktop.DBus.Error.AccessDenied" in exc_info.value.detail
        assert not listener.running
        assert not fake_bus.connected

    async def test_unreachable_bus_raises_with_hint(self):
        async def connect():
            raise FileNotFoundError("/run/user/1000/bus")

        listener = NotificationListener(bus_factory=connect)

        with pytest.raises(SystemControlError) as exc_info:
            await listener.start()

        assert "DBUS_SESSION_BUS_ADDRESS" in exc_info.value.recovery_hint
        assert not listener.running

    async def test_stop_disconnects(self, fake_bus):
        listener = self._listener(fake_bus)
        await listener.start()

        await listener.stop()
        await listener.stop()

        assert not listener.running
        assert not fake_bus.connected
        assert fake_bus.handlers == []

