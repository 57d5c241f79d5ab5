"""Application settings model."""

from pathlib import Path

from pydantic import BaseModel, Field, field_serializer, field_validator

from loupedeck_linux.model_manager.persistence import PydanticPersistence
from loupedeck_linux.models.color import HexColor
from loupedeck_linux.models.device import DEVICE_PRESETS, DeviceMetadata
from loupedeck_linux.utils.paths import settings_path


class KnobAssignments(BaseModel):
    """Which knob drives which handler (None disables the handler)."""

    volume: str | None = Field(default="knobTL", description="Knob that changes the volume")
    page: str | None = Field(default="knobCL", description="Knob that switches pages")
    workspace: str | None = Field(
        default=None, description="Knob that cycles Hyprland workspaces"
    )
    media: str | None = Field(
        default=None, description="Knob that skips tracks and toggles play/pause"
    )


class AppSettings(BaseModel):
    """Application settings (everything except the page layout)."""

    # Device
    device: str = Field(default="live-s", description="Device preset name")

    # Screen
    background_color: HexColor = Field(default="#000000", description="Screen background color")
    grid_color: HexColor = Field(default="#222222", description="Color of the cell border lines")
    draw_grid: bool = Field(default=True, description="Draw cell borders under the components")

    # Timing
    auto_update_interval_ms: int = Field(
        default=1000, ge=50, description="Interval of the periodic full-screen redraw (ms)"
    )
    component_update_interval_ms: int = Field(
        default=2000, ge=100, description="Interval for polling component state (volume, media, workspace)"
    )
    overlay_timeout_ms: int = Field(
        default=2000, gt=0, description="How long overlays stay visible after a trigger (ms)"
    )
    display_timeout: float = Field(
        default=5.0, gt=0, description="Timeout for one display/driver call (seconds)"
    )
    shutdown_step_timeout: float = Field(
        default=5.0, gt=0, description="Timeout for each shutdown step (seconds)"
    )

    # Handlers
    volume_step_percent: int = Field(default=5, ge=1, le=50, description="Volume change per knob detent")
    knobs: KnobAssignments = Field(default_factory=KnobAssignments)

    # HTTP config API
    api_enabled: bool = Field(default=True, description="Serve the config API")
    api_host: str = Field(default="127.0.0.1", description="Bind address of the config API")
    api_port: int = Field(default=9876, ge=1, le=65535, description="Port of the config API")

    # Desktop notifications
    notifications_enabled: bool = Field(
        default=True, description="Show desktop notifications on notificationDisplay overlays"
    )

    # Config hot reload
    watch_config: bool = Field(default=True, description="Reload pages when config.json changes")

    # Preview device
    preview_dir: Path | None = Field(
        default=None, description="Directory where the preview device writes screen.png"
    )

    @field_validator("device")
    @classmethod
    def validate_device(cls, v: str) -> str:
        if v not in DEVICE_PRESETS:
            raise ValueError(f"unknown device preset {v!r}, expected one of {sorted(DEVICE_PRESETS)}")
        return v

    @field_serializer("preview_dir")
    def serialize_path(self, path: Path | None) -> str | None:
        return str(path) if path is not None else None

    @property
    def device_metadata(self) -> DeviceMetadata:
        return DEVICE_PRESETS[self.device]

    @classmethod
    def load_or_default(cls, path: Path | None = None) -> "AppSettings":
        """
        Load settings from file or return defaults.

        Args:
            path: Settings file. If None, uses
                  ``$XDG_CONFIG_HOME/loupedeck-linux/settings.json``.

        Raises:
            ConfigFileInvalidError: If the file has invalid JSON syntax
            ConfigValidationError: If values fail validation
        """
        return PydanticPersistence.load_json_or_default(path or settings_path(), cls)

    def save(self, path: Path | None = None) -> None:
        """Save settings to file."""
        PydanticPersistence.save_json(self, path or settings_path())
