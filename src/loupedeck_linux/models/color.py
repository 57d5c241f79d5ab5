"""Color model for button LEDs and hex color validation."""

from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, Field


def _normalize_hex(value: str) -> str:
    text = value.strip()
    if not text.startswith("#"):
        raise ValueError("color must start with '#'")
    digits = text[1:]
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    if len(digits) != 6:
        raise ValueError("color must be #RGB or #RRGGBB")
    try:
        int(digits, 16)
    except ValueError:
        raise ValueError(f"invalid hex digits in color {value!r}") from None
    return f"#{digits}"


# Hex color string accepted in page configuration ("#1a1a3e", "#fff")
HexColor = Annotated[str, AfterValidator(_normalize_hex)]


class Color(BaseModel):
    """Standard 8-bit RGB color."""

    model_config = ConfigDict(frozen=True)

    r: int = Field(ge=0, le=255, description="Red (0-255)")
    g: int = Field(ge=0, le=255, description="Green (0-255)")
    b: int = Field(ge=0, le=255, description="Blue (0-255)")

    @classmethod
    def off(cls) -> "Color":
        """Create off (black) color."""
        return cls(r=0, g=0, b=0)

    @classmethod
    def from_hex(cls, value: str) -> "Color":
        """Parse ``#RGB`` or ``#RRGGBB``.

        Raises:
            ValueError: If the string is not a hex color
        """
        digits = _normalize_hex(value)[1:]
        return cls(r=int(digits[0:2], 16), g=int(digits[2:4], 16), b=int(digits[4:6], 16))

    def to_rgb_tuple(self) -> tuple[int, int, int]:
        return (self.r, self.g, self.b)

    def to_hex(self) -> str:
        """Convert to CSS hex color string (e.g., '#FF0000')."""
        return f"#{self.r:02X}{self.g:02X}{self.b:02X}"
