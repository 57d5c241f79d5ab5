"""Unit tests for Pydantic models."""

import json

import pytest
from pydantic import ValidationError

from loupedeck_linux.models import (
    AppSettings,
    ButtonOptions,
    Color,
    ComponentConfig,
    GridPosition,
    LOUPEDECK_LIVE_S,
    PageConfig,
    PagesConfig,
)
from loupedeck_linux.models.pages import is_physical_button_key
from loupedeck_linux.services import default_pages_config


class TestColor:
    """Test Color model."""

    @pytest.mark.unit
    def test_create_color(self):
        color = Color(r=100, g=50, b=25)
        assert color.to_rgb_tuple() == (100, 50, 25)

    @pytest.mark.unit
    def test_rgb_range_validation(self):
        with pytest.raises(ValueError):
            Color(r=256, g=0, b=0)

        with pytest.raises(ValueError):
            Color(r=0, g=-1, b=0)

    @pytest.mark.unit
    def test_preset_color_off(self):
        assert Color.off() == Color(r=0, g=0, b=0)

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "text,expected",
        [("#FF8000", (255, 128, 0)), ("#fff", (255, 255, 255)), (" #000000 ", (0, 0, 0))],
    )
    def test_from_hex(self, text, expected):
        assert Color.from_hex(text).to_rgb_tuple() == expected

    @pytest.mark.unit
    @pytest.mark.parametrize("text", ["FF0000", "#12345", "#GGGGGG", ""])
    def test_from_hex_rejects_garbage(self, text):
        with pytest.raises(ValueError):
            Color.from_hex(text)

    @pytest.mark.unit
    def test_to_hex(self):
        assert Color(r=255, g=0, b=16).to_hex() == "#FF0010"


class TestGridPosition:
    """Test GridPosition model."""

    @pytest.mark.unit
    def test_key_round_trip(self):
        position = GridPosition(col=3, row=2)
        assert position.key == "3_2"
        assert GridPosition.from_key("3_2") == position

    @pytest.mark.unit
    def test_negative_rejected(self):
        with pytest.raises(ValidationError):
            GridPosition(col=-1, row=0)


class TestComponentConfig:
    """Test component descriptors."""

    @pytest.mark.unit
    def test_app_name_alias(self):
        component = ComponentConfig.model_validate(
            {"type": "button", "command": "firefox", "appName": "Firefox"}
        )
        assert component.app_name == "Firefox"
        assert component.model_dump(by_alias=True, exclude_none=True)["appName"] == "Firefox"

    @pytest.mark.unit
    def test_unknown_type_rejected(self):
        with pytest.raises(ValidationError):
            ComponentConfig.model_validate({"type": "slider"})

    @pytest.mark.unit
    def test_invalid_color_option_rejected(self):
        with pytest.raises(ValidationError, match="bgColor"):
            ComponentConfig.model_validate({"type": "button", "options": {"bgColor": "red"}})

    @pytest.mark.unit
    def test_unknown_vibration_pattern_rejected(self):
        with pytest.raises(ValidationError, match="vibration"):
            ComponentConfig.model_validate(
                {"type": "button", "options": {"vibrationPattern": "drumroll"}}
            )

    @pytest.mark.unit
    def test_workspace_requires_id_in_range(self):
        with pytest.raises(ValidationError):
            ComponentConfig.model_validate({"type": "workspace", "options": {}})
        with pytest.raises(ValidationError):
            ComponentConfig.model_validate({"type": "workspace", "options": {"workspaceId": 11}})

    @pytest.mark.unit
    def test_parsed_options(self):
        component = ComponentConfig.model_validate(
            {"type": "button", "options": {"label": "Mail", "bgColor": "#abc"}}
        )
        options = component.parsed_options()
        assert isinstance(options, ButtonOptions)
        assert options.label == "Mail"
        assert options.bg_color == "#aabbcc"
        assert options.vibration_pattern == "tap"

    @pytest.mark.unit
    def test_overlay_flag(self):
        assert ComponentConfig(type="volumeDisplay").is_overlay
        assert not ComponentConfig(type="clock").is_overlay


class TestPagesConfig:
    """Test the page document."""

    @pytest.mark.unit
    def test_flat_page_document(self):
        page = PageConfig.model_validate(
            {
                "_meta": {"title": "Main", "description": "home"},
                "clock": {"type": "clock", "position": {"col": 0, "row": 0}},
            }
        )
        assert page.meta.title == "Main"
        assert list(page.components) == ["clock"]
        assert page.components["clock"].position == GridPosition(col=0, row=0)

    @pytest.mark.unit
    def test_serializes_flat(self):
        page = PageConfig.model_validate(
            {"_meta": {"title": "Main"}, "mail": {"type": "button", "appName": "Mail"}}
        )
        data = json.loads(PagesConfig(pages={"1": page}).model_dump_json())

        assert data["pages"]["1"]["_meta"] == {"title": "Main", "description": ""}
        assert data["pages"]["1"]["mail"] == {"type": "button", "options": {}, "appName": "Mail"}

    @pytest.mark.unit
    def test_page_without_meta(self):
        page = PageConfig.model_validate({"clock": {"type": "clock"}})
        assert page.meta.title == ""

    @pytest.mark.unit
    def test_default_document_round_trips(self):
        config = default_pages_config()
        reloaded = PagesConfig.model_validate_json(config.model_dump_json())
        assert reloaded == config

    @pytest.mark.unit
    @pytest.mark.parametrize("page_id", ["0", "main", "-1", ""])
    def test_page_ids_must_be_positive_integers(self, page_id):
        with pytest.raises(ValidationError):
            PagesConfig.model_validate({"pages": {page_id: {}}})

    @pytest.mark.unit
    def test_at_least_one_page(self):
        with pytest.raises(ValidationError):
            PagesConfig.model_validate({"pages": {}})

    @pytest.mark.unit
    def test_page_ids_numeric_order(self):
        config = PagesConfig.model_validate({"pages": {"10": {}, "2": {}, "1": {}}})
        assert config.page_ids() == ["1", "2", "10"]
        assert config.next_page_id() == "11"

    @pytest.mark.unit
    def test_physical_buttons_only_on_first_page(self):
        config = PagesConfig.model_validate(
            {
                "pages": {
                    "1": {"button0": {"type": "button", "command": "page:1"}, "clock": {"type": "clock"}},
                    "2": {"button1": {"type": "button", "command": "page:2"}},
                }
            }
        )
        assert list(config.physical_buttons()) == [0]
        assert is_physical_button_key("1", "button3")
        assert not is_physical_button_key("2", "button3")
        assert not is_physical_button_key("1", "buttonA")

    @pytest.mark.unit
    def test_led_colors_fall_back_to_defaults(self):
        config = PagesConfig.model_validate(
            {"pages": {"1": {"button2": {"type": "button", "options": {"ledColor": "#123456"}}}}}
        )
        colors = config.led_colors(LOUPEDECK_LIVE_S.button_ids)
        assert colors == {0: "#FFFFFF", 1: "#FF0000", 2: "#123456", 3: "#0000FF"}


class TestAppSettings:
    """Test application settings."""

    @pytest.mark.unit
    def test_defaults(self):
        settings = AppSettings()
        assert settings.device_metadata == LOUPEDECK_LIVE_S
        assert settings.knobs.volume == "knobTL"
        assert settings.knobs.page == "knobCL"
        assert settings.knobs.workspace is None
        assert settings.knobs.media is None
        assert settings.notifications_enabled is True
        assert settings.overlay_timeout_ms == 2000

    @pytest.mark.unit
    def test_unknown_device_rejected(self):
        with pytest.raises(ValidationError, match="unknown device preset"):
            AppSettings(device="stream-deck")

    @pytest.mark.unit
    def test_invalid_port_rejected(self):
        with pytest.raises(ValidationError):
            AppSettings(api_port=70000)

    @pytest.mark.unit
    def test_load_or_default_missing(self, temp_dir):
        settings = AppSettings.load_or_default(temp_dir / "settings.json")
        assert settings == AppSettings()

    @pytest.mark.unit
    def test_save_and_load(self, temp_dir):
        path = temp_dir / "settings.json"
        AppSettings(api_port=8080, preview_dir=temp_dir, knobs={"workspace": "knobCL", "page": None}).save(path)

        loaded = AppSettings.load_or_default(path)
        assert loaded.api_port == 8080
        assert loaded.preview_dir == temp_dir
        assert loaded.knobs.workspace == "knobCL"
        assert loaded.knobs.page is None
