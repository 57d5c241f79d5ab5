"""Page configuration models.

The page document is the JSON file edited by the web dashboard::

    {
      "pages": {
        "1": {
          "_meta": {"title": "Main", "description": ""},
          "clock": {"type": "clock", "position": {"col": 0, "row": 0}, "options": {...}},
          "button0": {"type": "button", "command": "page:2", "options": {"ledColor": "#FF0000"}}
        }
      }
    }

Each page maps component names to component descriptors next to a
reserved ``_meta`` entry. Keys ``button0``..``buttonN`` on page ``1``
configure the physical buttons below the screen instead of grid cells.
"""

import re
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_serializer,
    model_validator,
)
from pydantic.alias_generators import to_camel

from loupedeck_linux.models.color import HexColor
from loupedeck_linux.models.constants import (
    DEFAULT_LED_COLORS,
    NOTIFICATION_DISPLAY_TIMEOUT_MS,
    OVERLAY_TYPES,
    PHYSICAL_BUTTON_PAGE,
    PHYSICAL_BUTTON_PREFIX,
    VIBRATION_PATTERNS,
    WORKSPACE_MAX,
    WORKSPACE_MIN,
    ComponentType,
)
from loupedeck_linux.models.grid import GridPosition

META_KEY = "_meta"

_PHYSICAL_KEY = re.compile(rf"^{PHYSICAL_BUTTON_PREFIX}(\d+)$")


class _Options(BaseModel):
    """Base for per-type component options (camelCase in JSON)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class ClockOptions(_Options):
    cell_bg_color: HexColor = "#1a1a3e"
    cell_border_color: HexColor = "#4466AA"
    time_color: HexColor = "#FFFFFF"
    date_color: HexColor = "#88AAFF"
    show_seconds: bool = True


class ButtonOptions(_Options):
    label: str = ""
    icon: str | None = Field(default=None, description="Short glyph drawn above the label")
    icon_size: int = Field(default=28, ge=8, le=90)
    bg_color: HexColor = "#2a4a6a"
    border_color: HexColor = "#4a7a9a"
    text_color: HexColor = "#FFFFFF"
    vibration_pattern: str = "tap"
    max_label_length: int = Field(default=15, ge=1)
    led_color: HexColor | None = Field(default=None, description="LED color for physical buttons")

    @field_validator("vibration_pattern")
    @classmethod
    def validate_pattern(cls, v: str) -> str:
        if v not in VIBRATION_PATTERNS:
            raise ValueError(f"unknown vibration pattern {v!r}, expected one of {sorted(VIBRATION_PATTERNS)}")
        return v


class VolumeDisplayOptions(_Options):
    cell_bg_color: HexColor = "#1a1a2e"
    cell_border_color: HexColor = "#4a6a8a"
    bar_fill_color: HexColor = "#4a9eff"
    muted_color: HexColor = "#AA4444"
    text_color: HexColor = "#FFFFFF"
    display_timeout: int | None = Field(
        default=None, gt=0, description="Milliseconds the overlay stays visible (None = app default)"
    )


class MediaDisplayOptions(_Options):
    cell_bg_color: HexColor = "#1a1a2e"
    cell_border_color: HexColor = "#8a4a6a"
    title_color: HexColor = "#FFFFFF"
    artist_color: HexColor = "#FF88AA"
    status_color: HexColor = "#AAAAAA"
    icon_color: HexColor = "#FF88AA"
    display_timeout: int | None = Field(default=None, gt=0)


class NotificationDisplayOptions(_Options):
    cell_bg_color: HexColor = "#1a1a2e"
    cell_border_color: HexColor = "#6a4a8a"
    app_name_color: HexColor = "#AA88FF"
    title_color: HexColor = "#FFFFFF"
    body_color: HexColor = "#CCCCCC"
    display_timeout: int = Field(default=NOTIFICATION_DISPLAY_TIMEOUT_MS, gt=0)


class MediaPlayPauseOptions(_Options):
    bg_color: HexColor = "#2a2a4a"
    border_color: HexColor = "#5a5a8a"
    icon_color: HexColor = "#FFFFFF"
    text_color: HexColor = "#AAAACC"
    vibration_pattern: str = "tap"

    @field_validator("vibration_pattern")
    @classmethod
    def validate_pattern(cls, v: str) -> str:
        if v not in VIBRATION_PATTERNS:
            raise ValueError(f"unknown vibration pattern {v!r}")
        return v


class WorkspaceOptions(_Options):
    workspace_id: int = Field(ge=WORKSPACE_MIN, le=WORKSPACE_MAX)
    label: str | None = None
    bg_color: HexColor = "#1e3a5f"
    active_bg_color: HexColor = "#4a9eff"
    border_color: HexColor = "#3a5a7f"
    active_border_color: HexColor = "#6abfff"
    text_color: HexColor = "#FFFFFF"


OPTIONS_MODELS: dict[str, type[_Options]] = {
    "clock": ClockOptions,
    "button": ButtonOptions,
    "volumeDisplay": VolumeDisplayOptions,
    "mediaDisplay": MediaDisplayOptions,
    "mediaPlayPause": MediaPlayPauseOptions,
    "workspace": WorkspaceOptions,
    "notificationDisplay": NotificationDisplayOptions,
}


class ComponentConfig(BaseModel):
    """One component descriptor on a page."""

    model_config = ConfigDict(populate_by_name=True)

    type: ComponentType
    position: GridPosition | None = None
    options: dict[str, Any] = Field(default_factory=dict)
    command: str | None = None
    app_name: str | None = Field(default=None, alias="appName")

    @model_validator(mode="after")
    def validate_options(self) -> "ComponentConfig":
        """Check options against the schema of this component type."""
        try:
            OPTIONS_MODELS[self.type].model_validate(self.options)
        except ValidationError as e:
            details = "; ".join(
                f"{'.'.join(str(loc) for loc in err['loc']) or 'options'}: {err['msg']}"
                for err in e.errors()
            )
            raise ValueError(f"invalid options for {self.type}: {details}") from None
        return self

    @property
    def is_overlay(self) -> bool:
        return self.type in OVERLAY_TYPES

    def parsed_options(self) -> Any:
        """Options validated into the model for this component type."""
        return OPTIONS_MODELS[self.type].model_validate(self.options)


class PageMeta(BaseModel):
    """Page title and description shown in the dashboard."""

    title: str = ""
    description: str = ""


class PageConfig(BaseModel):
    """A page: metadata plus named components, stored flat in JSON."""

    meta: PageMeta = Field(default_factory=PageMeta)
    components: dict[str, ComponentConfig] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def split_flat_document(cls, data: Any) -> Any:
        """Accept the flat ``{"_meta": ..., "<name>": {...}}`` JSON shape."""
        if isinstance(data, dict) and "components" not in data:
            data = dict(data)
            meta = data.pop(META_KEY, None) or {}
            return {"meta": meta, "components": data}
        return data

    @model_serializer
    def serialize_flat(self) -> dict[str, Any]:
        data: dict[str, Any] = {META_KEY: self.meta.model_dump()}
        for name, component in self.components.items():
            data[name] = component.model_dump(by_alias=True, exclude_none=True)
        return data


class PagesConfig(BaseModel):
    """The full page document."""

    pages: dict[str, PageConfig] = Field(default_factory=lambda: {"1": PageConfig()})

    @field_validator("pages")
    @classmethod
    def validate_page_ids(cls, v: dict[str, PageConfig]) -> dict[str, PageConfig]:
        if not v:
            raise ValueError("at least one page is required")
        for page_id in v:
            if not page_id.isdigit() or int(page_id) < 1:
                raise ValueError(f"page ids must be positive integers, got {page_id!r}")
        return v

    def page_ids(self) -> list[str]:
        """Page ids in numeric order."""
        return sorted(self.pages, key=int)

    def next_page_id(self) -> str:
        """Id for a newly created page (one past the highest)."""
        return str(max(int(page_id) for page_id in self.pages) + 1)

    def physical_buttons(self) -> dict[int, ComponentConfig]:
        """``button{i}`` descriptors from the physical button page, keyed by button id."""
        page = self.pages.get(PHYSICAL_BUTTON_PAGE)
        if page is None:
            return {}
        buttons: dict[int, ComponentConfig] = {}
        for name, component in page.components.items():
            match = _PHYSICAL_KEY.match(name)
            if match:
                buttons[int(match.group(1))] = component
        return buttons

    def led_colors(self, button_ids: tuple[int, ...] | list[int]) -> dict[int, str]:
        """LED color per physical button, falling back to the default palette."""
        configured = self.physical_buttons()
        colors: dict[int, str] = {}
        for button_id in button_ids:
            color = None
            component = configured.get(button_id)
            if component is not None:
                color = component.options.get("ledColor") or component.options.get("led_color")
            colors[button_id] = color or DEFAULT_LED_COLORS.get(button_id, "#FFFFFF")
        return colors


def is_physical_button_key(page_id: str, name: str) -> bool:
    """True when ``name`` on ``page_id`` configures a physical button."""
    return page_id == PHYSICAL_BUTTON_PAGE and _PHYSICAL_KEY.match(name) is not None
