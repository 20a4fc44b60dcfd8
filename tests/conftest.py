"""Root pytest configuration for all tests.

Shared fixtures build domain objects directly; no I/O is needed except in
tests/infrastructure, which writes GeoTIFFs under tmp_path.
"""

from __future__ import annotations

import pytest

from domain.coverage.entities import CoverageSession
from domain.coverage.value_objects import Boundary, Point
from domain.terrain.entities import ElevationGrid
from domain.terrain.value_objects import ElevationSource, create_elevation_sample


@pytest.fixture
def unit_square() -> Boundary:
    """1 m x 1 m square with corners (0, 0) and (1, 1)."""
    return Boundary.from_points([(0, 0), (1, 0), (1, 1), (0, 1)])


@pytest.fixture
def two_meter_square() -> Boundary:
    return Boundary.from_rectangle(Point(x=0, y=0), Point(x=2, y=2))


@pytest.fixture
def session() -> CoverageSession:
    """Fresh session with 5 cm voxels."""
    return CoverageSession("session-test", voxel_size=0.05)


@pytest.fixture
def sloped_grid() -> ElevationGrid:
    """Four barometer samples on a plane rising 0.1 m per meter east."""
    grid = ElevationGrid(cell_size=0.25)
    for x, y in [(0.0, 0.0), (1.0, 0.0), (0.0, 1.0), (1.0, 1.0)]:
        grid.add_sample(
            create_elevation_sample(
                x=x,
                y=y,
                elevation=10.0 + 0.1 * x,
                accuracy=0.5,
                source=ElevationSource.BAROMETER,
            )
        )
    return grid
