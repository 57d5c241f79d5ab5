"""Configuration-related exceptions.

- ConfigurationError: Base class for configuration errors
- ConfigFileInvalidError: Config file has invalid JSON syntax
- ConfigValidationError: Config values fail validation
- GeometryError: Device grid does not fit on the device screen
- PageNotFoundError: A page id does not exist in the page configuration
"""

from typing import Any, Optional

from .base import LoupedeckError


class ConfigurationError(LoupedeckError):
    """Configuration is invalid or cannot be loaded."""
    pass


class ConfigFileInvalidError(ConfigurationError):
    """Configuration file has invalid JSON syntax."""

    def __init__(self, file_path: str, parse_error: str):
        """
        Initialize config file invalid error.

        Args:
            file_path: Path to the invalid config file
            parse_error: The parsing error message
        """
        user_msg = "Configuration file has invalid syntax"
        recovery = "Check for common JSON errors:\n"
        recovery += "  - Trailing commas (remove commas after last item)\n"
        recovery += "  - Missing quotes around strings or keys\n"
        recovery += "  - Unclosed braces or brackets\n"
        recovery += f"  - Edit: {file_path}"

        if "trailing comma" in parse_error.lower():
            user_msg = "Configuration file has a trailing comma"
            recovery = (
                f"Remove the trailing comma from {file_path}\n"
                "JSON doesn't allow commas after the last item in an object or array"
            )
        elif "empty" in parse_error.lower():
            user_msg = "Configuration file is empty"
            recovery = (
                f"Delete {file_path} to have it recreated with defaults, "
                "or restore it from the .bak copy next to it"
            )

        super().__init__(
            user_message=user_msg,
            technical_message=f"JSON parse error in {file_path}: {parse_error}",
            recoverable=True,
            recovery_hint=recovery,
        )
        self.file_path = file_path
        self.parse_error = parse_error


class ConfigValidationError(ConfigurationError):
    """Configuration values fail validation."""

    def __init__(
        self,
        field: str,
        value: Any,
        error_msg: str,
        file_path: Optional[str] = None,
        issues: Optional[list[dict[str, Any]]] = None,
    ):
        """
        Initialize config validation error.

        Args:
            field: The configuration field that failed validation
            value: The invalid value
            error_msg: Why the value is invalid
            file_path: Path to the config file (optional)
            issues: Structured list of ``{"path", "message"}`` problems (optional)
        """
        user_msg = f"Invalid configuration value for '{field}': {error_msg}"

        recovery = f"Update the '{field}' value in your configuration"
        if file_path:
            recovery += f"\nConfig file: {file_path}"

        if "position" in field:
            recovery += "\nPositions are zero-based grid cells, e.g. {\"col\": 0, \"row\": 0}"
        elif "type" in field:
            recovery += (
                "\nValid component types: clock, button, volumeDisplay, "
                "mediaDisplay, mediaPlayPause, workspace"
            )
        elif "color" in field.lower():
            recovery += "\nColors are hex strings like \"#1a1a3e\""

        super().__init__(
            user_message=user_msg,
            technical_message=f"Config validation failed for {field}={value!r}: {error_msg}",
            recoverable=True,
            recovery_hint=recovery,
        )
        self.field = field
        self.value = value
        self.file_path = file_path
        self.issues = issues or [{"path": field, "message": error_msg}]


class GeometryError(ConfigurationError):
    """The key grid does not fit on the device screen."""

    def __init__(self, device_name: str, detail: str):
        """
        Initialize geometry error.

        Args:
            device_name: Name of the device whose metadata is inconsistent
            detail: Which dimension overflows and by how much
        """
        super().__init__(
            user_message=f"Screen layout for {device_name} does not fit on the display",
            technical_message=f"Invalid geometry for {device_name}: {detail}",
            recoverable=False,
            recovery_hint=(
                "Check key_size, columns and rows against the screen size "
                "in the device preset"
            ),
        )
        self.device_name = device_name
        self.detail = detail


class PageNotFoundError(ConfigurationError):
    """Requested page does not exist."""

    def __init__(self, page_id: str):
        super().__init__(
            user_message=f"Page {page_id} does not exist",
            technical_message=f"Unknown page id: {page_id!r}",
            recoverable=True,
        )
        self.page_id = page_id
