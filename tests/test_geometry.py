"""Tests for grid geometry and touch coordinate mapping."""

import pytest

from loupedeck_linux.devices import TouchPoint
from loupedeck_linux.exceptions import ConfigurationError, GeometryError
from loupedeck_linux.layout import GridGeometry, TouchMapper
from loupedeck_linux.models import LOUPEDECK_LIVE, DeviceMetadata, GridPosition


def wide_screen() -> DeviceMetadata:
    return DeviceMetadata(name="Wide", screen_width=600, screen_height=270, key_size=90, columns=5, rows=3)


@pytest.mark.unit
class TestGridGeometry:
    """Cell rectangles and margins."""

    def test_live_s_margins(self, geometry):
        assert geometry.total_width == 450
        assert geometry.margin_x == 15
        assert geometry.margin_y == 0

    def test_centered_margin_on_wide_screen(self):
        geometry = GridGeometry(wide_screen())
        assert geometry.total_width == 450
        assert geometry.margin_x == 75

    def test_cell_rect(self, geometry):
        cell = geometry.cell_rect(2, 1)
        assert (cell.x, cell.y, cell.width, cell.height) == (195, 90, 90, 90)
        assert cell.right == 285
        assert cell.bottom == 180

    def test_cell_rect_outside_grid_raises(self, geometry):
        with pytest.raises(ValueError):
            geometry.cell_rect(5, 0)
        with pytest.raises(ValueError):
            geometry.cell_rect(0, 3)

    def test_positions_cover_grid_row_by_row(self, geometry):
        positions = list(geometry.positions())
        assert len(positions) == 15
        assert positions[0] == GridPosition(col=0, row=0)
        assert positions[5] == GridPosition(col=0, row=1)
        assert positions[-1] == GridPosition(col=4, row=2)

    def test_contains(self, geometry):
        assert geometry.contains(GridPosition(col=4, row=2))
        assert not geometry.contains(GridPosition(col=5, row=0))
        assert not geometry.contains(GridPosition(col=0, row=3))

    def test_live_preset_is_valid(self):
        geometry = GridGeometry(LOUPEDECK_LIVE)
        assert geometry.columns == 4
        assert geometry.margin_x >= 0

    def test_grid_wider_than_screen_fails_fast(self):
        metadata = DeviceMetadata(name="Broken", screen_width=400, screen_height=270, key_size=90, columns=5, rows=3)
        with pytest.raises(GeometryError) as exc_info:
            GridGeometry(metadata)
        assert "exceeds screen width" in exc_info.value.technical_message
        assert isinstance(exc_info.value, ConfigurationError)

    def test_grid_taller_than_screen_fails_fast(self):
        metadata = DeviceMetadata(name="Broken", screen_width=480, screen_height=200, key_size=90, columns=5, rows=3)
        with pytest.raises(GeometryError):
            GridGeometry(metadata)


@pytest.mark.unit
class TestTouchMapper:
    """Pixel to cell mapping."""

    def test_wide_screen_scenario(self):
        mapper = TouchMapper(GridGeometry(wide_screen()))
        assert mapper.map_touch(80, 10) == GridPosition(col=0, row=0)
        assert mapper.map_touch(70, 10) is None
        assert mapper.map_touch(600, 10) is None

    def test_every_point_inside_a_cell_maps_to_it(self, geometry):
        mapper = TouchMapper(geometry)
        for position in geometry.positions():
            cell = geometry.rect_for(position)
            for dx in (1, 45, 89):
                for dy in (1, 45, 89):
                    assert mapper.map_touch(cell.x + dx, cell.y + dy) == position

    def test_cell_edges_are_half_open(self, geometry):
        mapper = TouchMapper(geometry)
        assert mapper.map_touch(15, 0) == GridPosition(col=0, row=0)
        assert mapper.map_touch(105, 0) == GridPosition(col=1, row=0)
        assert mapper.map_touch(104.9, 89.9) == GridPosition(col=0, row=0)

    @pytest.mark.parametrize(
        "x,y",
        [
            (0, 10),  # left margin
            (14.9, 100),  # left margin edge
            (465, 10),  # right margin starts at margin_x + total_width
            (479, 200),
            (100, 270),  # below the grid
            (-1, -1),
        ],
    )
    def test_points_outside_grid_map_to_none(self, geometry, x, y):
        assert TouchMapper(geometry).map_touch(x, y) is None

    def test_map_touches_keeps_order_and_drops_misses(self, geometry):
        mapper = TouchMapper(geometry)
        points = [TouchPoint(400, 200), TouchPoint(2, 2), TouchPoint(20, 20)]
        assert mapper.map_touches(points) == [GridPosition(col=4, row=2), GridPosition(col=0, row=0)]

    def test_map_touches_empty(self, geometry):
        assert TouchMapper(geometry).map_touches([]) == []
