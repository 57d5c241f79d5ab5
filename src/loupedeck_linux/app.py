"""
Application: wires the device, pages, handlers and services together.

::

    DeviceController ──events──> LoupedeckApp ──> handlers / LayoutCompositor
                                     ^
    PageConfigService ──config──────┘   (API edits and hot reload)

Everything runs on one asyncio loop. Device events, config changes and
periodic redraws are scheduled as tasks on that loop; the config watcher
thread only hands work over with ``call_soon_threadsafe``.
"""

import asyncio
import logging
import signal
from collections.abc import Awaitable, Callable, Coroutine
from typing import Any

from loupedeck_linux.components import ComponentFactory, ComponentServices
from loupedeck_linux.devices import (
    ButtonDownEvent,
    DeviceBackend,
    DeviceController,
    DeviceEvent,
    KnobDownEvent,
    KnobRotateEvent,
    TouchStartEvent,
)
from loupedeck_linux.exceptions import ConfigurationError, ErrorContext, SystemControlError
from loupedeck_linux.handlers import (
    InputHandler,
    MediaHandler,
    PageHandler,
    PhysicalButtonHandler,
    VolumeHandler,
    WorkspaceHandler,
)
from loupedeck_linux.layout import GridGeometry, LayoutCompositor, PeriodicTask, Scheduler
from loupedeck_linux.models import AppSettings, PagesConfig
from loupedeck_linux.server import ApiServer, create_api
from loupedeck_linux.services import ConfigEvent, ConfigWatcher, PageConfigService
from loupedeck_linux.system import (
    ActionRunner,
    AppLauncher,
    CommandRunner,
    HyprlandControl,
    MediaControl,
    Notification,
    NotificationListener,
    VibrationService,
    VolumeControl,
    WorkspaceTracker,
    run_command,
)

logger = logging.getLogger(__name__)


class LoupedeckApp:
    """
    The running control surface.

    Construction validates the grid against the device (GeometryError) and
    builds the object graph; ``start()`` talks to the device.

    Architecture:
        LoupedeckApp
        ├── Device: controller (wraps the backend)
        ├── Layout: geometry, compositor (one registry per page)
        ├── Input: volume/page/workspace/media knob handlers, physical buttons
        ├── System: volume, media, Hyprland, notifications, launcher, vibration
        └── Config: PageConfigService, ConfigWatcher, ApiServer
    """

    def __init__(
        self,
        backend: DeviceBackend,
        settings: AppSettings,
        config_service: PageConfigService,
        runner: CommandRunner = run_command,
        scheduler: Scheduler | None = None,
        notifications: NotificationListener | None = None,
    ):
        """
        Args:
            backend: Hardware driver or preview device
            settings: Application settings
            config_service: Owner of the page document
            runner: Command runner for system controls (tests inject a fake)
            scheduler: Timer source for overlays (defaults to the running loop)
            notifications: Desktop notification source (defaults to the D-Bus session bus)

        Raises:
            GeometryError: If the grid does not fit the device screen
        """
        self.settings = settings
        self.config_service = config_service

        # Device and layout
        self.controller = DeviceController(backend, operation_timeout=settings.display_timeout)
        self.metadata = self.controller.metadata
        self.geometry = GridGeometry(self.metadata)
        self.compositor = LayoutCompositor(
            self.geometry,
            self.controller,
            background_color=settings.background_color,
            grid_color=settings.grid_color,
            draw_grid=settings.draw_grid,
            display_timeout=settings.display_timeout,
        )

        # System services
        self.vibration = VibrationService(self.controller)
        self.actions = ActionRunner(AppLauncher(), navigate=self.go_to_page)
        self.volume = VolumeControl(runner=runner)
        self.media = MediaControl(runner=runner)
        self.hyprland = HyprlandControl(runner=runner)
        self.workspaces = WorkspaceTracker(self.hyprland)
        self.notifications = notifications or NotificationListener()

        self.factory = ComponentFactory(
            ComponentServices(
                vibration=self.vibration,
                actions=self.actions,
                volume=self.volume,
                media=self.media,
                workspaces=self.workspaces,
                overlay_timeout_ms=settings.overlay_timeout_ms,
                scheduler=scheduler,
            ),
            self.geometry,
        )

        # Input handlers
        self.button_handler = PhysicalButtonHandler(self.actions, self.vibration)
        self.knob_handlers: list[InputHandler] = self._create_knob_handlers()

        # Runtime state
        self._tasks: set[asyncio.Task[Any]] = set()
        self._redraw_task: PeriodicTask | None = None
        self._update_task: PeriodicTask | None = None
        self._api: ApiServer | None = None
        self._watcher: ConfigWatcher | None = None
        self._stop: asyncio.Event | None = None
        self._started = False

    def _create_knob_handlers(self) -> list[InputHandler]:
        knobs = self.settings.knobs
        handlers: list[InputHandler] = []

        assigned = [k for k in (knobs.volume, knobs.page, knobs.workspace, knobs.media) if k is not None]
        for knob_id in sorted({k for k in assigned if assigned.count(k) > 1}):
            logger.warning(f"Knob {knob_id!r} is assigned twice; every matching handler will run")

        def usable(role: str, knob_id: str | None) -> bool:
            if knob_id is None:
                return False
            if knob_id not in self.metadata.knob_ids:
                logger.warning(f"{role} knob {knob_id!r} does not exist on {self.metadata.name}; disabled")
                return False
            return True

        if usable("Volume", knobs.volume):
            handlers.append(
                VolumeHandler(
                    knobs.volume,
                    self.volume,
                    self.compositor,
                    self.vibration,
                    step_percent=self.settings.volume_step_percent,
                )
            )
        if usable("Page", knobs.page):
            handlers.append(PageHandler(knobs.page, self.compositor, self.go_to_page, self.vibration))
        if usable("Workspace", knobs.workspace):
            handlers.append(WorkspaceHandler(knobs.workspace, self.workspaces, self.compositor, self.vibration))
        if usable("Media", knobs.media):
            handlers.append(MediaHandler(knobs.media, self.media, self.compositor, self.vibration))
        return handlers

    # =================================================================
    # Lifecycle
    # =================================================================

    async def start(self) -> None:
        """
        Connect the device and bring the surface up.

        Raises:
            DeviceError: If the device cannot be connected
        """
        logger.info("Starting Loupedeck application")
        await self.controller.connect()
        self.controller.register_observer(self)

        config = self.config_service.config
        self._apply_pages(config)
        await self._apply_leds(config)
        await self.compositor.registry.update_all()
        await self.compositor.redraw()

        self._redraw_task = self.compositor.start_auto_redraw(self.settings.auto_update_interval_ms / 1000)
        self._update_task = PeriodicTask(
            self._update_components,
            self.settings.component_update_interval_ms / 1000,
            name="component-updates",
        ).start()

        self.config_service.register_observer(self)
        if self.settings.api_enabled:
            await self._start_api()
        if self.settings.watch_config:
            self._start_watcher()
        if self.settings.notifications_enabled:
            await self._start_notifications()

        await self.vibration.vibrate("connect")
        self._started = True
        logger.info(f"Ready: {len(self.compositor.page_ids)} page(s) on {self.metadata.name}")

    async def _start_api(self) -> None:
        app = create_api(self.config_service, self.settings, self.metadata)
        api = ApiServer(app, self.settings.api_host, self.settings.api_port)
        try:
            await api.start()
        except OSError as e:
            logger.error(f"Config API not available: {e}")
            return
        self._api = api

    def _start_watcher(self) -> None:
        watcher = ConfigWatcher(
            self.config_service.path,
            self._on_config_file_changed,
            asyncio.get_running_loop(),
        )
        try:
            watcher.start()
        except OSError as e:
            logger.error(f"Config hot reload not available: {e}")
            return
        self._watcher = watcher

    async def _start_notifications(self) -> None:
        try:
            await self.notifications.start()
        except SystemControlError as e:
            logger.warning(f"Desktop notifications not available: {e.technical_message}")
            return
        self.notifications.register_observer(self)

    async def shutdown(self) -> None:
        """
        Stop everything and leave the device dark.

        Each step is bounded by ``shutdown_step_timeout``; a failing or
        hanging step is logged and the next one still runs.
        """
        logger.info("Shutting down Loupedeck application")
        if self._started:
            self.config_service.unregister_observer(self)
            self._started = False

        steps: list[tuple[str, Callable[[], Awaitable[None]]]] = [
            ("stop auto-redraw", self._stop_periodic_tasks),
            ("cancel pending events", self._cancel_tasks),
            ("stop notification listener", self._stop_notifications),
            ("close pages", self._close_pages),
            ("stop config watcher", self._stop_watcher),
            ("stop config API", self._stop_api),
            ("disconnect device", self.controller.disconnect),
        ]
        timeout = self.settings.shutdown_step_timeout
        for name, step in steps:
            with ErrorContext(name, logger, re_raise=False):
                try:
                    await asyncio.wait_for(step(), timeout)
                except TimeoutError:
                    raise TimeoutError(f"timed out after {timeout}s") from None
        logger.info("Shutdown complete")

    async def _stop_periodic_tasks(self) -> None:
        for task in (self._redraw_task, self._update_task):
            if task is not None:
                await task.stop()
        self._redraw_task = self._update_task = None

    async def _cancel_tasks(self) -> None:
        tasks = [task for task in self._tasks if task is not asyncio.current_task()]
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    async def _stop_notifications(self) -> None:
        if self.notifications.running:
            self.notifications.unregister_observer(self)
            await self.notifications.stop()

    async def _close_pages(self) -> None:
        self.compositor.close()

    async def _stop_watcher(self) -> None:
        if self._watcher is not None:
            watcher, self._watcher = self._watcher, None
            await asyncio.to_thread(watcher.stop)

    async def _stop_api(self) -> None:
        if self._api is not None:
            api, self._api = self._api, None
            await api.stop()

    async def run(self) -> None:
        """Start, wait for SIGINT/SIGTERM (or ``request_stop()``), shut down."""
        loop = asyncio.get_running_loop()
        self._stop = asyncio.Event()
        signals = (signal.SIGINT, signal.SIGTERM)
        for sig in signals:
            loop.add_signal_handler(sig, self.request_stop)
        try:
            await self.start()
            await self._stop.wait()
            logger.info("Stop requested")
        finally:
            for sig in signals:
                loop.remove_signal_handler(sig)
            await self.shutdown()

    def request_stop(self) -> None:
        if self._stop is not None:
            self._stop.set()

    # =================================================================
    # Device events
    # =================================================================

    def on_device_event(self, event: DeviceEvent) -> None:
        """Schedule the handlers for one input event; never blocks the driver."""
        logger.debug(f"Device event: {event!r}")
        if isinstance(event, TouchStartEvent):
            self._spawn(self._handle_touch(event), "touch")
        elif isinstance(event, KnobRotateEvent):
            for handler in self.knob_handlers:
                self._spawn(handler.handle_rotate(event.knob_id, event.delta), f"rotate {event.knob_id}")
        elif isinstance(event, KnobDownEvent):
            for handler in self.knob_handlers:
                self._spawn(handler.handle_knob_down(event.knob_id), f"press {event.knob_id}")
        elif isinstance(event, ButtonDownEvent):
            self._spawn(self.button_handler.handle_button_down(event.button_id), f"button {event.button_id}")

    def on_notification(self, notification: Notification) -> None:
        """Show a desktop notification on the current page's notification overlays."""
        displays = self.compositor.registry.find_kind("notificationDisplay")
        if not displays:
            logger.debug(f"No notification overlay on page {self.compositor.current_page}")
            return
        shown = [display.show_notification(notification) for display in displays]
        if any(shown):
            self._spawn(self._announce_notification(), "notification")

    async def _announce_notification(self) -> None:
        await self.vibration.vibrate("notification")
        await self.compositor.redraw()

    async def _handle_touch(self, event: TouchStartEvent) -> None:
        handled = await self.compositor.handle_touches(event.touches)
        if any(handled):
            await self.compositor.redraw()

    def _spawn(self, coro: Coroutine[Any, Any, Any], name: str) -> asyncio.Task[Any]:
        task = asyncio.get_running_loop().create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._task_done)
        return task

    def _task_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(f"Task '{task.get_name()}' failed: {error}", exc_info=error)

    # =================================================================
    # Pages
    # =================================================================

    async def go_to_page(self, page_id: str) -> bool:
        """Show a page: switch, refresh its components, redraw."""
        if not self.compositor.switch_page(page_id):
            return False
        await self.compositor.registry.update_all()
        await self.compositor.redraw()
        return True

    async def _update_components(self) -> None:
        await self.compositor.registry.update_all()

    def _apply_pages(self, config: PagesConfig) -> None:
        self.compositor.replace_pages(self.factory.build_pages(config))
        self.button_handler.set_buttons(config.physical_buttons())

    async def _apply_leds(self, config: PagesConfig) -> None:
        for button_id, color in config.led_colors(self.metadata.button_ids).items():
            await self.controller.set_button_color(button_id, color)

    async def _refresh_after_config_change(self, config: PagesConfig) -> None:
        await self._apply_leds(config)
        await self.compositor.registry.update_all()
        await self.compositor.redraw()

    # =================================================================
    # Configuration changes
    # =================================================================

    def on_config_event(self, event: ConfigEvent, config: PagesConfig) -> None:
        """Rebuild every page from the new document and swap them in."""
        logger.info(f"Applying page configuration ({event.value})")
        self._apply_pages(config)
        self._spawn(self._refresh_after_config_change(config), "config refresh")

    def _on_config_file_changed(self) -> None:
        try:
            self.config_service.reload()
        except ConfigurationError as e:
            logger.error(f"Ignoring invalid config file, keeping current pages: {e.get_full_message()}")
