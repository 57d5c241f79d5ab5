"""Device-related exceptions.

- DeviceError: Base class for hardware and display sink failures
- DeviceNotConnectedError: Operation attempted before connect() / after disconnect()
- DisplayTimeoutError: The device did not answer within the configured timeout
- SystemControlError: An OS helper command (wpctl, playerctl, hyprctl) failed
"""

from typing import Optional

from .base import LoupedeckError


class DeviceError(LoupedeckError):
    """Hardware device or display sink failure."""

    def __init__(
        self,
        user_message: str,
        technical_message: Optional[str] = None,
        recoverable: bool = True,
        recovery_hint: Optional[str] = None,
        device_name: Optional[str] = None,
    ):
        super().__init__(
            user_message=user_message,
            technical_message=technical_message,
            recoverable=recoverable,
            recovery_hint=recovery_hint,
        )
        self.device_name = device_name


class DeviceNotConnectedError(DeviceError):
    """Device is not connected."""

    def __init__(self, device_name: str):
        super().__init__(
            user_message=f"{device_name} is not connected",
            technical_message=f"Operation on disconnected device {device_name}",
            recoverable=True,
            recovery_hint="Check the USB cable and that no other program holds the device",
            device_name=device_name,
        )


class DisplayTimeoutError(DeviceError):
    """Device operation exceeded its time budget."""

    def __init__(self, operation: str, timeout: float, device_name: Optional[str] = None):
        super().__init__(
            user_message=f"Device did not respond to {operation} in time",
            technical_message=f"{operation} timed out after {timeout:.1f}s",
            recoverable=True,
            device_name=device_name,
        )
        self.operation = operation
        self.timeout = timeout


class SystemControlError(LoupedeckError):
    """An external system command failed."""

    def __init__(self, command: list[str], detail: str):
        """
        Initialize system control error.

        Args:
            command: The argv that was executed
            detail: stderr output or the reason it could not run
        """
        program = command[0] if command else "<empty>"
        hint = None
        if program in ("wpctl", "pactl"):
            hint = "Install PipeWire (wpctl) or PulseAudio utilities (pactl)"
        elif program == "playerctl":
            hint = "Install playerctl and make sure a media player is running"
        elif program == "hyprctl":
            hint = "Workspace control requires a running Hyprland session"
        elif program == "dbus":
            hint = "Desktop notifications need a D-Bus session bus (DBUS_SESSION_BUS_ADDRESS)"

        super().__init__(
            user_message=f"Command '{program}' failed",
            technical_message=f"Command {' '.join(command)!r} failed: {detail}",
            recoverable=True,
            recovery_hint=hint,
        )
        self.command = command
        self.detail = detail
