"""Coverage Bounded Context - Value Objects.

Immutable data structures for grid-based coverage tracking.
All validation occurs at construction time via Pydantic.

Coordinates are meters in a local east/north frame supplied by the caller.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray
from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from domain.coverage.defaults import AUTO_COMPLETE_THRESHOLD, MIN_BOUNDARY_POINTS
from domain.coverage.errors import InvalidCoordinateError

# ---------------------------------------------------------------------------
# Numeric Constants
# ---------------------------------------------------------------------------
# Grid indices must fit a signed 32-bit integer so two of them pack into one key
GRID_INDEX_MIN = -(2**31)
GRID_INDEX_MAX = 2**31 - 1
_KEY_MASK = 0xFFFFFFFF

# Cross-product tolerance (m^2) for treating a point as lying on an edge
EDGE_TOLERANCE = 1e-9


def voxel_key(grid_x: int, grid_y: int) -> int:
    """Pack two signed 32-bit grid indices into a single integer key.

    Works identically on Python ints and numpy int64 arrays, so keys built
    by the analyzer's vectorised search match ``Voxel.key``.
    """
    return (grid_x << 32) | (grid_y & _KEY_MASK)


# ---------------------------------------------------------------------------
# Point
# ---------------------------------------------------------------------------
class Point(BaseModel):
    """2D coordinate in local meters (Value Object)."""

    x: float = Field(allow_inf_nan=False)
    y: float = Field(allow_inf_nan=False)

    model_config = ConfigDict(frozen=True)

    @classmethod
    def coerce(cls, value: Point | Mapping[str, float] | Iterable[float]) -> Point:
        """Build a Point from a Point, an ``{"x", "y"}`` mapping or an (x, y) pair."""
        if isinstance(value, Point):
            return value
        if isinstance(value, Mapping):
            return cls(x=value["x"], y=value["y"])
        x, y = value
        return cls(x=x, y=y)


# ---------------------------------------------------------------------------
# Voxel
# ---------------------------------------------------------------------------
class Voxel(BaseModel):
    """Discrete grid cell identity (Value Object).

    The representative world coordinate of a voxel is its cell CENTER,
    ``(grid + 0.5) * voxel_size``. Every distance and containment check on a
    voxel goes through ``world_x``/``world_y``.
    """

    grid_x: int = Field(ge=GRID_INDEX_MIN, le=GRID_INDEX_MAX)
    grid_y: int = Field(ge=GRID_INDEX_MIN, le=GRID_INDEX_MAX)
    voxel_size: float = Field(gt=0, allow_inf_nan=False)

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_world(cls, x: float, y: float, voxel_size: float) -> Voxel:
        """Quantize a world coordinate to the cell containing it.

        The index is ``floor(x / voxel_size)`` evaluated in binary floating
        point, so a coordinate on a nominal cell edge may land in the cell
        below it (2.3 / 0.05 is 45.999...).

        Raises:
            InvalidCoordinateError: If x or y is NaN or infinite
            ValueError: If voxel_size is not positive and finite
        """
        if not (math.isfinite(voxel_size) and voxel_size > 0):
            raise ValueError(f"voxel_size must be positive and finite, got {voxel_size}")
        if not (math.isfinite(x) and math.isfinite(y)):
            raise InvalidCoordinateError(x, y)
        return cls(
            grid_x=math.floor(x / voxel_size),
            grid_y=math.floor(y / voxel_size),
            voxel_size=voxel_size,
        )

    @property
    def key(self) -> int:
        """Packed 64-bit key, unique per (grid_x, grid_y)."""
        return voxel_key(self.grid_x, self.grid_y)

    @property
    def world_x(self) -> float:
        return (self.grid_x + 0.5) * self.voxel_size

    @property
    def world_y(self) -> float:
        return (self.grid_y + 0.5) * self.voxel_size

    @property
    def area(self) -> float:
        """Cell area in square meters."""
        return self.voxel_size * self.voxel_size


# ---------------------------------------------------------------------------
# Boundary
# ---------------------------------------------------------------------------
class Boundary(BaseModel):
    """Closed survey polygon (Value Object).

    The last point connects back to the first. Points lying on an edge or a
    vertex (within EDGE_TOLERANCE) count as inside.
    """

    points: tuple[Point, ...] = Field(min_length=MIN_BOUNDARY_POINTS)

    model_config = ConfigDict(frozen=True)

    _xs: tuple[float, ...] = PrivateAttr()
    _ys: tuple[float, ...] = PrivateAttr()
    _bbox: tuple[float, float, float, float] = PrivateAttr()

    def model_post_init(self, __context: Any) -> None:
        self._xs = tuple(p.x for p in self.points)
        self._ys = tuple(p.y for p in self.points)
        self._bbox = (min(self._xs), max(self._xs), min(self._ys), max(self._ys))

    @classmethod
    def from_points(
        cls, points: Iterable[Point | Mapping[str, float] | Iterable[float]]
    ) -> Boundary:
        """Build a boundary from Points, ``{"x", "y"}`` mappings or (x, y) pairs."""
        return cls(points=tuple(Point.coerce(p) for p in points))

    @classmethod
    def from_rectangle(cls, corner1: Point, corner2: Point) -> Boundary:
        """Axis-aligned rectangle spanned by two opposite corners."""
        c1 = Point.coerce(corner1)
        c2 = Point.coerce(corner2)
        return cls(
            points=(
                c1,
                Point(x=c2.x, y=c1.y),
                c2,
                Point(x=c1.x, y=c2.y),
            )
        )

    @property
    def min_x(self) -> float:
        return self._bbox[0]

    @property
    def max_x(self) -> float:
        return self._bbox[1]

    @property
    def min_y(self) -> float:
        return self._bbox[2]

    @property
    def max_y(self) -> float:
        return self._bbox[3]

    @property
    def area(self) -> float:
        """Absolute shoelace area in square meters."""
        xs = np.asarray(self._xs, dtype=np.float64)
        ys = np.asarray(self._ys, dtype=np.float64)
        twice_area = np.dot(xs, np.roll(ys, -1)) - np.dot(np.roll(xs, -1), ys)
        return float(abs(twice_area) / 2.0)

    def contains(self, x: float, y: float) -> bool:
        """Even-odd point-in-polygon test, inclusive of edges."""
        return bool(self.contains_many([x], [y])[0])

    def contains_many(self, xs: ArrayLike, ys: ArrayLike) -> NDArray[np.bool_]:
        """Vectorised ``contains`` over equally shaped coordinate arrays."""
        px = np.asarray(xs, dtype=np.float64)
        py = np.asarray(ys, dtype=np.float64)

        in_bbox = (
            (px >= self.min_x)
            & (px <= self.max_x)
            & (py >= self.min_y)
            & (py <= self.max_y)
        )

        inside = np.zeros(px.shape, dtype=bool)
        on_edge = np.zeros(px.shape, dtype=bool)

        n = len(self._xs)
        for i in range(n):
            x1, y1 = self._xs[i], self._ys[i]
            x2, y2 = self._xs[i - 1], self._ys[i - 1]

            # Collinear with the edge and between its endpoints
            cross = (px - x1) * (y2 - y1) - (py - y1) * (x2 - x1)
            dot = (px - x1) * (x2 - x1) + (py - y1) * (y2 - y1)
            seg_len2 = (x2 - x1) ** 2 + (y2 - y1) ** 2
            on_edge |= (np.abs(cross) <= EDGE_TOLERANCE) & (dot >= 0) & (dot <= seg_len2)

            straddles = (y1 > py) != (y2 > py)
            with np.errstate(divide="ignore", invalid="ignore"):
                x_cross = (x2 - x1) * (py - y1) / (y2 - y1) + x1
            inside ^= straddles & (px < x_cross)

        return in_bbox & (inside | on_edge)


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------
class PaintResult(BaseModel):
    """Outcome of painting one world coordinate."""

    is_new: bool  # Voxel was not covered before this paint
    voxel: Voxel
    is_inside_boundary: bool  # True when no boundary is set

    model_config = ConfigDict(frozen=True)


class GapInfo(BaseModel):
    """Single uncovered grid cell inside the boundary."""

    grid_x: int
    grid_y: int
    center_x: float
    center_y: float
    area_m2: float = Field(gt=0)

    model_config = ConfigDict(frozen=True)

    def distance_to(self, x: float, y: float) -> float:
        return math.hypot(self.center_x - x, self.center_y - y)


class CoverageStats(BaseModel):
    """Coverage figures derived from a session (Value Object).

    coverage_percent and expected_area_m2 are None when no boundary is set.
    """

    voxel_count: int = Field(ge=0)
    covered_area_m2: float = Field(ge=0)
    coverage_percent: float | None = None
    expected_area_m2: float | None = None
    is_complete: bool = False

    model_config = ConfigDict(frozen=True)


def create_coverage_stats(
    voxel_count: int, voxel_size: float, boundary_area: float | None
) -> CoverageStats:
    """Derive CoverageStats from a voxel count and optional boundary area.

    Example:
        >>> stats = create_coverage_stats(100, 0.05, 0.5)
        >>> round(stats.covered_area_m2, 6), round(stats.coverage_percent, 1)
        (0.25, 50.0)
    """
    covered_area_m2 = voxel_count * (voxel_size * voxel_size)

    coverage_percent: float | None = None
    if boundary_area is not None and boundary_area > 0:
        coverage_percent = min(100.0, covered_area_m2 / boundary_area * 100.0)

    return CoverageStats(
        voxel_count=voxel_count,
        covered_area_m2=covered_area_m2,
        coverage_percent=coverage_percent,
        expected_area_m2=boundary_area,
        is_complete=(
            coverage_percent is not None and coverage_percent >= AUTO_COMPLETE_THRESHOLD
        ),
    )
