"""
Device controller: the application's single entry point to the hardware.

::

    LoupedeckApp ──observer──> DeviceController ──> DeviceBackend
         ^                          │                (driver or PreviewDevice)
         └──── on_device_event ─────┘

The controller adds what every backend needs: a connection flag, a
timeout around every call into the driver, retries for LED updates,
observer fan-out of input events, and a disconnect that leaves the device
dark.
"""

import asyncio
import logging
from collections.abc import Awaitable, Sequence
from typing import TypeVar

from loupedeck_linux.devices.protocols import (
    DeviceBackend,
    DeviceEvent,
    DeviceObserver,
    RenderCallback,
)
from loupedeck_linux.exceptions import DeviceError, DeviceNotConnectedError, DisplayTimeoutError
from loupedeck_linux.model_manager import ObserverManager
from loupedeck_linux.models import Color, DeviceMetadata

logger = logging.getLogger(__name__)

R = TypeVar("R")


class DeviceController:
    """
    Wraps a DeviceBackend with timeouts, retries and event fan-out.

    Implements the DisplaySink protocol used by the LayoutCompositor.
    """

    # ================================================================
    # INITIALIZATION
    # ================================================================

    def __init__(
        self,
        backend: DeviceBackend,
        operation_timeout: float = 5.0,
        button_color_retries: int = 3,
    ):
        """
        Args:
            backend: Hardware driver or preview device
            operation_timeout: Seconds allowed for each call into the backend
            button_color_retries: Attempts for each LED color update
        """
        self._backend = backend
        self._timeout = operation_timeout
        self._retries = max(1, button_color_retries)
        self._connected = False
        self._observers = ObserverManager[DeviceObserver](observer_type_name="device")

    @property
    def metadata(self) -> DeviceMetadata:
        return self._backend.metadata

    @property
    def is_connected(self) -> bool:
        return self._connected

    # ================================================================
    # LIFECYCLE MANAGEMENT
    # ================================================================

    async def connect(self) -> None:
        """
        Open the device and start receiving events.

        Raises:
            DeviceError: If the backend fails or does not answer in time
        """
        if self._connected:
            return
        logger.info(f"Connecting to {self.metadata.name}")
        await self._bounded(self._backend.connect(), "connect")
        self._backend.on_event(self._handle_event)
        self._connected = True
        logger.info(f"Connected to {self.metadata.name}")

    async def disconnect(self) -> None:
        """
        Turn off LEDs, blank the screen and close the device.

        Every step is bounded by the operation timeout; a failing step is
        logged and the next one still runs.
        """
        if not self._connected:
            return

        for button_id in self.metadata.button_ids:
            try:
                await self._bounded(self._backend.set_button_color(button_id, Color.off()), "clear LED")
            except DeviceError as e:
                logger.warning(f"Could not clear LED {button_id}: {e.technical_message}")

        width, height = self.metadata.screen_width, self.metadata.screen_height

        def blank(canvas) -> None:
            canvas.rectangle((0, 0, width - 1, height - 1), fill="#000000")

        try:
            await self._bounded(self._backend.draw_screen(blank), "clear screen")
        except DeviceError as e:
            logger.warning(f"Could not clear screen: {e.technical_message}")

        try:
            await self._bounded(self._backend.disconnect(), "disconnect")
        except DeviceError as e:
            logger.warning(f"Disconnect did not complete cleanly: {e.technical_message}")
        finally:
            self._connected = False

        logger.info(f"Disconnected from {self.metadata.name}")

    async def __aenter__(self) -> "DeviceController":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.disconnect()

    # ================================================================
    # OUTPUT
    # ================================================================

    async def draw(self, render: RenderCallback) -> None:
        """
        Render and push one screen frame.

        Raises:
            DeviceNotConnectedError: If the device is not connected
            DeviceError: If the backend rejects the frame
        """
        if not self._connected:
            raise DeviceNotConnectedError(self.metadata.name)
        try:
            await self._backend.draw_screen(render)
        except DeviceError:
            raise
        except OSError as e:
            raise DeviceError(
                user_message="Failed to update the device screen",
                technical_message=f"draw_screen failed: {e}",
                device_name=self.metadata.name,
            ) from e

    async def set_button_color(self, button_id: int, color: Color | str) -> bool:
        """
        Set a button LED, retrying on failure.

        Returns:
            True when the color was applied
        """
        if not self._connected:
            logger.debug(f"Ignoring LED update for button {button_id}: not connected")
            return False
        if isinstance(color, str):
            color = Color.from_hex(color)

        for attempt in range(1, self._retries + 1):
            try:
                await self._bounded(self._backend.set_button_color(button_id, color), "set button color")
                logger.debug(f"Button {button_id} LED set to {color.to_hex()}")
                return True
            except (DeviceError, OSError) as e:
                logger.warning(
                    f"Setting LED of button {button_id} failed (attempt {attempt}/{self._retries}): {e}"
                )
        return False

    async def vibrate(self, pattern: Sequence[int]) -> None:
        """Play a haptic pattern; failures are logged and otherwise ignored."""
        if not self._connected:
            return
        try:
            await self._bounded(self._backend.vibrate(pattern), "vibrate")
        except (DeviceError, OSError) as e:
            logger.warning(f"Vibration failed: {e}")

    # ================================================================
    # INPUT / OBSERVERS
    # ================================================================

    def register_observer(self, observer: DeviceObserver) -> None:
        self._observers.register(observer)

    def unregister_observer(self, observer: DeviceObserver) -> None:
        self._observers.unregister(observer)

    def _handle_event(self, event: DeviceEvent) -> None:
        logger.debug(f"Device event: {event!r}")
        self._observers.notify("on_device_event", event)

    # ================================================================
    # HELPERS
    # ================================================================

    async def _bounded(self, awaitable: Awaitable[R], operation: str) -> R:
        try:
            return await asyncio.wait_for(awaitable, timeout=self._timeout)
        except TimeoutError as e:
            raise DisplayTimeoutError(operation, self._timeout, self.metadata.name) from e
