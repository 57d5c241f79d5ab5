"""Tests for the screen components and the component factory."""

from datetime import datetime
from unittest.mock import AsyncMock

import pytest
from PIL import Image, ImageDraw

from loupedeck_linux.components import (
    ButtonComponent,
    ClockComponent,
    ComponentFactory,
    MediaDisplay,
    MediaPlayPauseButton,
    NotificationDisplay,
    VolumeDisplay,
    WorkspaceButton,
)
from loupedeck_linux.components.clock import format_date, format_time
from loupedeck_linux.components.rendering import ellipsis_text
from loupedeck_linux.exceptions import SystemControlError
from loupedeck_linux.layout import Capability
from loupedeck_linux.models import (
    ButtonOptions,
    ComponentConfig,
    GridPosition,
    NotificationDisplayOptions,
    PageConfig,
    VolumeDisplayOptions,
    WorkspaceOptions,
)
from loupedeck_linux.services import default_pages_config
from loupedeck_linux.system import Notification

ORIGIN = GridPosition(col=0, row=0)


def canvas() -> ImageDraw.ImageDraw:
    return ImageDraw.Draw(Image.new("RGB", (480, 270)))


@pytest.mark.unit
class TestTextHelpers:
    def test_ellipsis_text(self):
        assert ellipsis_text("Firefox", 15) == "Firefox"
        assert ellipsis_text("A very long application name", 10) == "A very lon..."

    def test_clock_formatting(self):
        moment = datetime(2024, 1, 2, 3, 4, 5)
        assert format_time(moment) == "03:04:05"
        assert format_time(moment, show_seconds=False) == "03:04"
        assert format_date(moment) == "01/02"


@pytest.mark.unit
class TestButtonComponent:
    @pytest.mark.asyncio
    async def test_touch_vibrates_and_runs_command(self, services):
        button = ButtonComponent(ORIGIN, services, ButtonOptions(vibrationPattern="doubleTap"), command="firefox")

        assert await button.handle_touch(ORIGIN) is True

        services.vibration.vibrate.assert_awaited_once_with("doubleTap")
        services.actions.execute.assert_awaited_once_with("firefox")

    @pytest.mark.asyncio
    async def test_failed_command_vibrates_error(self, services):
        services.actions.execute = AsyncMock(return_value=False)
        button = ButtonComponent(ORIGIN, services, command="missing-app")

        await button.handle_touch(ORIGIN)

        assert [c.args[0] for c in services.vibration.vibrate.await_args_list] == ["tap", "error"]

    @pytest.mark.asyncio
    async def test_empty_command_only_vibrates(self, services):
        button = ButtonComponent(ORIGIN, services, command="  ")
        assert await button.handle_touch(ORIGIN) is True
        services.actions.execute.assert_not_awaited()

    def test_label_defaults_to_name(self, services):
        assert ButtonComponent(ORIGIN, services, name="terminal").label == "terminal"

    def test_draw_with_icon(self, services, geometry):
        button = ButtonComponent(ORIGIN, services, ButtonOptions(label="Mail", icon="@"))
        button.draw(canvas(), geometry.rect_for(ORIGIN))


@pytest.mark.unit
class TestVolumeDisplay:
    def test_is_overlay_and_hidden_initially(self, services):
        display = VolumeDisplay(ORIGIN, services)
        assert display.has(Capability.OVERLAY)
        assert not display.visible

    @pytest.mark.asyncio
    async def test_hidden_tap_shows_and_toggles_mute(self, services, scheduler):
        display = VolumeDisplay(ORIGIN, services)

        assert await display.handle_touch(ORIGIN) is True

        assert display.visible
        services.volume.toggle_mute.assert_awaited_once()
        assert display.muted is True
        services.vibration.vibrate.assert_awaited_with("warning")

        scheduler.advance(2.0)
        assert not display.visible

    @pytest.mark.asyncio
    async def test_visible_tap_extends_and_toggles_mute(self, services, scheduler):
        display = VolumeDisplay(ORIGIN, services)
        display.show_temporarily()
        scheduler.advance(1.5)

        await display.handle_touch(ORIGIN)
        scheduler.advance(1.5)

        assert display.visible
        services.volume.toggle_mute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_unmute_vibrates_success(self, services):
        services.volume.toggle_mute = AsyncMock(return_value=False)
        display = VolumeDisplay(ORIGIN, services)

        await display.handle_touch(ORIGIN)

        assert display.muted is False
        services.vibration.vibrate.assert_awaited_with("success")

    @pytest.mark.asyncio
    async def test_mute_failure_vibrates_error(self, services):
        services.volume.toggle_mute = AsyncMock(side_effect=SystemControlError(["wpctl"], "boom"))
        display = VolumeDisplay(ORIGIN, services)
        display.show_temporarily()

        assert await display.handle_touch(ORIGIN) is True
        services.vibration.vibrate.assert_awaited_with("error")

    def test_display_timeout_option_overrides_default(self, services, scheduler):
        display = VolumeDisplay(ORIGIN, services, VolumeDisplayOptions(displayTimeout=500))
        display.show_temporarily()
        scheduler.advance(0.5)
        assert not display.visible

    def test_set_state_clamps(self, services):
        display = VolumeDisplay(ORIGIN, services)
        display.set_state(150, False)
        assert display.volume == 100

    @pytest.mark.asyncio
    async def test_update_ignores_unavailable_backend(self, services):
        services.volume.get_state = AsyncMock(side_effect=SystemControlError(["wpctl"], "not found"))
        display = VolumeDisplay(ORIGIN, services)
        await display.update()
        assert display.volume == 0

    def test_close_cancels_timer(self, services, scheduler):
        display = VolumeDisplay(ORIGIN, services)
        display.show_temporarily()
        display.close()
        assert scheduler.pending == []
        assert not display.visible

    def test_draw_only_when_visible(self, services, geometry):
        image = Image.new("RGB", (480, 270))
        display = VolumeDisplay(ORIGIN, services)
        display.draw(ImageDraw.Draw(image), geometry.rect_for(ORIGIN))
        assert image.getbbox() is None

        display.show_temporarily()
        display.draw(ImageDraw.Draw(image), geometry.rect_for(ORIGIN))
        assert image.getbbox() is not None


@pytest.mark.unit
class TestMediaComponents:
    @pytest.mark.asyncio
    async def test_play_pause_toggles(self, services):
        button = MediaPlayPauseButton(ORIGIN, services)

        await button.handle_touch(ORIGIN)

        assert button.status == "Playing"
        services.vibration.vibrate.assert_awaited_with("success")

    @pytest.mark.asyncio
    async def test_play_pause_update(self, services):
        button = MediaPlayPauseButton(ORIGIN, services)
        await button.update()
        assert button.status == "Paused"

    @pytest.mark.asyncio
    async def test_media_display_tap_shows_then_hides(self, services):
        display = MediaDisplay(ORIGIN, services)

        await display.handle_touch(ORIGIN)
        assert display.visible
        assert display.metadata.title == "Song"

        await display.handle_touch(ORIGIN)
        assert not display.visible

    def test_media_display_show_is_immediate(self, services, scheduler):
        display = MediaDisplay(ORIGIN, services)

        display.show_temporarily()

        assert display.visible
        services.media.metadata.assert_not_awaited()
        scheduler.advance(2.0)
        assert not display.visible

    @pytest.mark.asyncio
    async def test_media_display_refresh_loads_metadata(self, services, geometry):
        display = MediaDisplay(ORIGIN, services)
        display.show_temporarily()

        await display.refresh()

        assert display.metadata.artist == "Artist"
        image = Image.new("RGB", (480, 270))
        display.draw(ImageDraw.Draw(image), geometry.rect_for(ORIGIN))
        assert image.getbbox() is not None


@pytest.mark.unit
class TestNotificationDisplay:
    FIRST = Notification(app_name="firefox", summary="Download complete", body="file.zip")
    SECOND = Notification(app_name="thunderbird", summary="New mail", body="Meeting at 3")

    def test_shows_until_timeout(self, services, scheduler):
        display = NotificationDisplay(ORIGIN, services)

        assert display.show_notification(self.FIRST) is True
        assert display.visible
        assert display.current == self.FIRST

        scheduler.advance(5.0)
        assert not display.visible
        assert display.current is None

    def test_queued_notification_follows_expiry(self, services, scheduler):
        display = NotificationDisplay(ORIGIN, services)
        display.show_notification(self.FIRST)

        assert display.show_notification(self.SECOND) is False
        assert display.queued == 1

        scheduler.advance(5.0)
        assert display.visible
        assert display.current == self.SECOND
        assert display.queued == 0

    @pytest.mark.asyncio
    async def test_tap_dismisses_and_next_follows_after_gap(self, services, scheduler):
        display = NotificationDisplay(ORIGIN, services)
        display.show_notification(self.FIRST)
        display.show_notification(self.SECOND)

        assert await display.handle_touch(ORIGIN) is True
        assert not display.visible

        # Arrivals during the gap wait their turn
        third = Notification(summary="Third")
        assert display.show_notification(third) is False

        scheduler.advance(0.3)
        assert display.current == self.SECOND
        assert display.queued == 1

    @pytest.mark.asyncio
    async def test_hidden_tap_not_handled(self, services):
        display = NotificationDisplay(ORIGIN, services)
        assert await display.handle_touch(ORIGIN) is False

    def test_display_timeout_option(self, services, scheduler):
        display = NotificationDisplay(ORIGIN, services, NotificationDisplayOptions(displayTimeout=1000))
        display.show_notification(self.FIRST)

        scheduler.advance(1.0)
        assert not display.visible

    def test_close_drops_queue_and_timers(self, services, scheduler):
        display = NotificationDisplay(ORIGIN, services)
        display.show_notification(self.FIRST)
        display.show_notification(self.SECOND)

        display.close()

        assert scheduler.pending == []
        assert not display.visible
        assert display.queued == 0
        assert display.show_notification(self.FIRST) is False

    def test_draw_only_when_visible(self, services, geometry):
        image = Image.new("RGB", (480, 270))
        display = NotificationDisplay(ORIGIN, services)
        display.draw(ImageDraw.Draw(image), geometry.rect_for(ORIGIN))
        assert image.getbbox() is None

        display.show_notification(Notification(app_name="", summary="A very long notification title", body="line\nbreak"))
        display.draw(ImageDraw.Draw(image), geometry.rect_for(ORIGIN))
        assert image.getbbox() is not None


@pytest.mark.unit
class TestWorkspaceButton:
    def test_active_follows_tracker(self, services):
        one = WorkspaceButton(ORIGIN, services, WorkspaceOptions(workspaceId=1))
        two = WorkspaceButton(ORIGIN, services, WorkspaceOptions(workspaceId=2))
        assert one.active
        assert not two.active

    @pytest.mark.asyncio
    async def test_touch_switches_workspace(self, services):
        button = WorkspaceButton(ORIGIN, services, WorkspaceOptions(workspaceId=4))

        await button.handle_touch(ORIGIN)

        services.workspaces.switch.assert_awaited_once_with(4)
        services.vibration.vibrate.assert_awaited_with("tap")

    @pytest.mark.asyncio
    async def test_touch_without_hyprland(self, services):
        services.workspaces.control.is_available = AsyncMock(return_value=False)
        button = WorkspaceButton(ORIGIN, services, WorkspaceOptions(workspaceId=4))

        await button.handle_touch(ORIGIN)

        services.workspaces.switch.assert_not_awaited()
        services.vibration.vibrate.assert_awaited_with("error")


@pytest.mark.unit
class TestClockComponent:
    def test_draw(self, geometry):
        clock = ClockComponent(ORIGIN, now=lambda: datetime(2024, 1, 1, 9, 0, 0))
        clock.draw(canvas(), geometry.rect_for(ORIGIN))
        assert clock.capabilities == frozenset({Capability.DRAWABLE})


@pytest.mark.unit
class TestComponentFactory:
    def test_overlays_registered_after_base_components(self, services, geometry):
        page = PageConfig(
            components={
                "volume": ComponentConfig(type="volumeDisplay", position=ORIGIN),
                "clock": ComponentConfig(type="clock", position=ORIGIN),
            }
        )
        registry = ComponentFactory(services, geometry).build_page("2", page)

        assert [c.kind for c in registry] == ["clock", "volumeDisplay"]
        assert registry.touch_target(ORIGIN).kind == "volumeDisplay"

    def test_physical_buttons_are_not_screen_components(self, services, geometry):
        page = PageConfig(
            components={
                "button0": ComponentConfig(type="button", command="page:2"),
                "button1": ComponentConfig(type="button", position=ORIGIN, command="page:2"),
            }
        )
        assert len(ComponentFactory(services, geometry).build_page("1", page)) == 0
        # Only page 1 configures physical buttons
        assert len(ComponentFactory(services, geometry).build_page("2", page)) == 1

    def test_unplaceable_components_skipped(self, services, geometry, caplog):
        page = PageConfig(
            components={
                "nowhere": ComponentConfig(type="clock"),
                "offgrid": ComponentConfig(type="clock", position=GridPosition(col=7, row=0)),
                "ok": ComponentConfig(type="clock", position=ORIGIN),
            }
        )
        registry = ComponentFactory(services, geometry).build_page("2", page)

        assert [c.name for c in registry] == ["ok"]
        assert "outside" in caplog.text

    def test_default_layout_builds(self, services, geometry):
        pages = ComponentFactory(services, geometry).build_pages(default_pages_config())

        assert list(pages) == ["1", "2"]
        assert len(pages["2"].find_kind("workspace")) == 10
        assert pages["1"].touch_target(ORIGIN).kind == "volumeDisplay"
        assert pages["1"].touch_target(GridPosition(col=0, row=1)).kind == "mediaDisplay"
        assert [c.name for c in pages["1"].find_kind("notificationDisplay")] == ["notifications"]
