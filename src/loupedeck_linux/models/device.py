"""Device metadata models."""

from pydantic import BaseModel, ConfigDict, Field


class DeviceMetadata(BaseModel):
    """
    Static description of a control surface.

    Read once after connect; geometry and touch mapping are derived from it.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Human readable device type")
    screen_width: int = Field(gt=0, description="Touch screen width in pixels")
    screen_height: int = Field(gt=0, description="Touch screen height in pixels")
    key_size: int = Field(gt=0, description="Edge length of one square key cell in pixels")
    columns: int = Field(gt=0, description="Number of key columns")
    rows: int = Field(gt=0, description="Number of key rows")
    knob_ids: tuple[str, ...] = Field(default=(), description="Identifiers of the rotary knobs")
    button_ids: tuple[int, ...] = Field(default=(), description="Identifiers of the physical buttons")


LOUPEDECK_LIVE_S = DeviceMetadata(
    name="Loupedeck Live S",
    screen_width=480,
    screen_height=270,
    key_size=90,
    columns=5,
    rows=3,
    knob_ids=("knobTL", "knobCL"),
    button_ids=(0, 1, 2, 3),
)

LOUPEDECK_LIVE = DeviceMetadata(
    name="Loupedeck Live",
    screen_width=480,
    screen_height=270,
    key_size=90,
    columns=4,
    rows=3,
    knob_ids=("knobTL", "knobCL", "knobBL", "knobTR", "knobCR", "knobBR"),
    button_ids=(0, 1, 2, 3, 4, 5, 6, 7),
)

DEVICE_PRESETS: dict[str, DeviceMetadata] = {
    "live-s": LOUPEDECK_LIVE_S,
    "live": LOUPEDECK_LIVE,
}
