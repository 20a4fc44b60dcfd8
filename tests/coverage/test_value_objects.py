"""Tests for coverage value objects: Voxel, Boundary, CoverageStats.

Domain objects are constructed directly; no fixtures beyond tests/conftest.py.
"""

from __future__ import annotations

import math

import numpy as np
import pytest
from pydantic import ValidationError

from domain.coverage.errors import InvalidCoordinateError
from domain.coverage.value_objects import (
    Boundary,
    Point,
    Voxel,
    create_coverage_stats,
    voxel_key,
)


# ===========================================================================
# Voxel quantization
# ===========================================================================
def test_from_world_floors_to_grid_index():
    voxel = Voxel.from_world(1.00, 1.00, 0.05)

    assert (voxel.grid_x, voxel.grid_y) == (20, 20)
    assert voxel.area == pytest.approx(0.0025)


def test_points_in_same_cell_share_key():
    """1.00 and 1.02 both floor to index 20 at 5 cm."""
    a = Voxel.from_world(1.00, 1.00, 0.05)
    b = Voxel.from_world(1.02, 1.02, 0.05)

    assert a.key == b.key
    assert a == b


def test_negative_coordinates_floor_downwards():
    voxel = Voxel.from_world(-0.01, -0.26, 0.05)

    assert voxel.grid_x == -1
    assert voxel.grid_y == -6


def test_world_coordinates_are_cell_centers():
    voxel = Voxel(grid_x=2, grid_y=3, voxel_size=0.5)

    assert voxel.world_x == pytest.approx(1.25)
    assert voxel.world_y == pytest.approx(1.75)


def test_direct_construction_matches_quantized_voxel():
    assert Voxel(grid_x=20, grid_y=20, voxel_size=0.05) == Voxel.from_world(
        1.01, 1.04, 0.05
    )


def test_keys_are_unique_across_signs():
    keys = {voxel_key(x, y) for x in range(-3, 4) for y in range(-3, 4)}

    assert len(keys) == 49


def test_key_matches_between_python_and_numpy():
    gx = np.array([-5, 0, 7], dtype=np.int64)
    gy = np.array([3, -1, -9], dtype=np.int64)

    packed = voxel_key(gx, gy)

    for i in range(3):
        assert int(packed[i]) == Voxel(grid_x=int(gx[i]), grid_y=int(gy[i]), voxel_size=1).key


@pytest.mark.parametrize("x, y", [(math.nan, 0.0), (0.0, math.inf), (-math.inf, 1.0)])
def test_non_finite_coordinate_rejected(x, y):
    with pytest.raises(InvalidCoordinateError) as exc_info:
        Voxel.from_world(x, y, 0.05)

    assert isinstance(exc_info.value, ValueError)


def test_floor_is_taken_on_the_float_quotient():
    """2.3 / 0.05 evaluates to 45.999..., so 2.3 sits in cell 45, not 46."""
    assert Voxel.from_world(1.5, 2.3, 0.05).grid_y == 45
    assert Voxel.from_world(1.51, 2.31, 0.05).grid_y == 46
    assert Voxel.from_world(1.52, 2.32, 0.05) == Voxel.from_world(1.53, 2.33, 0.05)


@pytest.mark.parametrize("voxel_size", [0.0, -0.05, math.inf, math.nan])
def test_from_world_rejects_invalid_voxel_size(voxel_size):
    with pytest.raises(ValueError, match="voxel_size"):
        Voxel.from_world(1.0, 1.0, voxel_size)


def test_grid_index_outside_32_bit_range_rejected():
    with pytest.raises(ValidationError):
        Voxel(grid_x=2**31, grid_y=0, voxel_size=1.0)


def test_voxel_is_immutable():
    voxel = Voxel(grid_x=1, grid_y=1, voxel_size=0.1)

    with pytest.raises(ValidationError):
        voxel.grid_x = 2


# ===========================================================================
# Boundary construction
# ===========================================================================
def test_boundary_requires_three_points():
    with pytest.raises(ValidationError):
        Boundary.from_points([(0, 0), (1, 1)])


def test_from_rectangle_builds_four_corners():
    boundary = Boundary.from_rectangle(Point(x=0, y=0), Point(x=2, y=3))

    assert boundary.points == (
        Point(x=0, y=0),
        Point(x=2, y=0),
        Point(x=2, y=3),
        Point(x=0, y=3),
    )


def test_from_points_accepts_mappings_and_pairs():
    boundary = Boundary.from_points([{"x": 0, "y": 0}, (4, 0), Point(x=0, y=3)])

    assert len(boundary.points) == 3


def test_bounding_box(two_meter_square):
    assert (two_meter_square.min_x, two_meter_square.max_x) == (0, 2)
    assert (two_meter_square.min_y, two_meter_square.max_y) == (0, 2)


# ===========================================================================
# Boundary area
# ===========================================================================
def test_rectangle_area(two_meter_square):
    assert two_meter_square.area == pytest.approx(4.0)


def test_triangle_area():
    assert Boundary.from_points([(0, 0), (4, 0), (0, 3)]).area == pytest.approx(6.0)


def test_area_independent_of_winding():
    ccw = Boundary.from_points([(0, 0), (3, 0), (3, 2), (0, 2)])
    cw = Boundary.from_points([(0, 0), (0, 2), (3, 2), (3, 0)])

    assert ccw.area == pytest.approx(cw.area) == pytest.approx(6.0)


# ===========================================================================
# Boundary containment
# ===========================================================================
def test_rectangle_contains_inside_and_outside(two_meter_square):
    assert two_meter_square.contains(1, 1) is True
    assert two_meter_square.contains(5, 5) is False


@pytest.fixture
def l_shape() -> Boundary:
    return Boundary.from_points([(0, 0), (2, 0), (2, 1), (1, 1), (1, 2), (0, 2)])


def test_non_convex_containment(l_shape):
    assert l_shape.contains(0.5, 1.5)
    assert l_shape.contains(1.5, 0.5)
    assert not l_shape.contains(1.5, 1.5)  # Notch, inside the bounding box
    assert l_shape.area == pytest.approx(3.0)


@pytest.mark.parametrize("x, y", [(0, 1), (2, 1), (1, 0), (1, 2), (0, 0), (2, 2)])
def test_points_on_edges_and_vertices_are_inside(two_meter_square, x, y):
    assert two_meter_square.contains(x, y)


def test_point_just_outside_edge(two_meter_square):
    assert not two_meter_square.contains(2.0001, 1)
    assert not two_meter_square.contains(1, -0.0001)


def test_contains_many_agrees_with_contains(l_shape):
    xs, ys = np.meshgrid(np.linspace(-0.5, 2.5, 13), np.linspace(-0.5, 2.5, 13))

    result = l_shape.contains_many(xs, ys)

    assert result.shape == xs.shape
    for x, y, inside in zip(xs.ravel(), ys.ravel(), result.ravel()):
        assert l_shape.contains(float(x), float(y)) == bool(inside)


# ===========================================================================
# CoverageStats
# ===========================================================================
def test_stats_factory_area_and_percent():
    stats = create_coverage_stats(voxel_count=100, voxel_size=0.05, boundary_area=0.5)

    assert stats.covered_area_m2 == pytest.approx(0.25)
    assert stats.coverage_percent == pytest.approx(50.0)
    assert stats.expected_area_m2 == 0.5
    assert stats.is_complete is False


def test_stats_without_boundary_have_no_percentage():
    stats = create_coverage_stats(voxel_count=10, voxel_size=0.1, boundary_area=None)

    assert stats.coverage_percent is None
    assert stats.expected_area_m2 is None
    assert stats.is_complete is False


def test_stats_with_zero_boundary_area_have_no_percentage():
    stats = create_coverage_stats(voxel_count=10, voxel_size=0.1, boundary_area=0.0)

    assert stats.coverage_percent is None


def test_stats_percentage_capped_at_100():
    stats = create_coverage_stats(voxel_count=1000, voxel_size=0.05, boundary_area=1.0)

    assert stats.coverage_percent == 100.0
    assert stats.is_complete is True


def test_completion_threshold():
    assert create_coverage_stats(395, 0.05, 1.0).is_complete is True  # ~98.75 %
    assert create_coverage_stats(388, 0.05, 1.0).is_complete is False  # ~97 %
