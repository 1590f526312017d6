import math

import pytest

from cycle_core.graph import CoordinateGraph
from cycle_core.layout import HexLayout


@pytest.fixture
def layout():
    return HexLayout(1280, 720, rows=8, cols=32, padding=40, sensitivity=0.8)


def test_grid_fits_the_canvas(layout):
    last = layout.center((7, 31))
    assert last[0] + layout.radius <= 1280
    assert last[1] + layout.radius <= 720


def test_odd_rows_are_shifted_half_a_cell(layout):
    even = layout.center((2, 5))
    odd = layout.center((3, 5))
    step = layout.center((2, 6))[0] - even[0]
    assert odd[0] - even[0] == pytest.approx(step / 2)


def test_centres_resolve_to_their_cell(layout):
    for cell in CoordinateGraph(8, 32).cells():
        assert layout.cell_at(*layout.center(cell)) == cell


def test_sensitivity_shrinks_the_hit_radius(layout):
    cx, cy = layout.center((4, 16))
    inside = layout.radius * 0.75
    outside = layout.radius * 0.85
    assert layout.cell_at(cx, cy + inside) == (4, 16)
    assert layout.cell_at(cx, cy + outside) is None


def test_points_outside_the_grid_resolve_to_nothing(layout):
    assert layout.cell_at(2, 2) is None
    assert layout.cell_at(5000, 5000) is None


def test_polygon_is_pointy_top(layout):
    pts = layout.polygon((0, 0))
    cx, cy = layout.center((0, 0))
    assert len(pts) == 6
    assert pts[2] == pytest.approx((cx, cy + layout.radius))
    for x, y in pts:
        assert math.hypot(x - cx, y - cy) == pytest.approx(layout.radius)


def test_relayout_changes_the_diameter(layout):
    before = layout.diameter
    layout.relayout(640, 360)
    assert layout.diameter < before


def test_bad_sensitivity_is_rejected():
    with pytest.raises(ValueError):
        HexLayout(100, 100, 3, 3, sensitivity=0)
