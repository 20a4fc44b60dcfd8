"""Terrain Bounded Context - Value Objects.

Immutable data structures representing elevation measurements and
geographic concepts. All validation occurs at construction time via Pydantic.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from domain.coverage.defaults import MIN_BOUNDARY_POINTS
from domain.coverage.value_objects import Boundary, Point


# ---------------------------------------------------------------------------
# ElevationSample
# ---------------------------------------------------------------------------
class ElevationSource(str, Enum):
    """Sensor that produced an elevation reading."""

    BAROMETER = "barometer"
    GPS = "gps"
    LIDAR = "lidar"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ElevationSample(BaseModel):
    """Single height reading at a local position (Value Object).

    accuracy is the sensor's +/- error in meters: smaller is better. It is
    squared into the interpolation weight, so precise sensors dominate.
    """

    x: float = Field(allow_inf_nan=False)  # Local meters east of origin
    y: float = Field(allow_inf_nan=False)  # Local meters north of origin
    elevation: float = Field(allow_inf_nan=False)  # Meters, relative to session start
    accuracy: float = Field(gt=0, allow_inf_nan=False)
    source: ElevationSource
    timestamp: datetime = Field(default_factory=_utc_now)

    model_config = ConfigDict(frozen=True)


def create_elevation_sample(
    x: float,
    y: float,
    elevation: float,
    accuracy: float,
    source: ElevationSource | str,
    timestamp: datetime | None = None,
) -> ElevationSample:
    """Build a validated ElevationSample.

    Raises:
        ValueError: If accuracy is not positive, a coordinate is not finite,
            or source is not a known sensor
    """
    fields: dict[str, Any] = {
        "x": x,
        "y": y,
        "elevation": elevation,
        "accuracy": accuracy,
        "source": source,
    }
    if timestamp is not None:
        fields["timestamp"] = timestamp
    return ElevationSample(**fields)


# ---------------------------------------------------------------------------
# Grid Queries
# ---------------------------------------------------------------------------
class GridBounds(BaseModel):
    """Extent of an elevation sample set in x, y and z."""

    min_x: float
    max_x: float
    min_y: float
    max_y: float
    min_z: float
    max_z: float

    model_config = ConfigDict(frozen=True)

    @property
    def relief(self) -> float:
        """Elevation range max_z - min_z in meters."""
        return self.max_z - self.min_z


class SlopeVector(BaseModel):
    """Surface gradient (rise over run) along x and y."""

    dx: float
    dy: float

    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# GeoPoint
# ---------------------------------------------------------------------------
class GeoPoint(BaseModel):
    """Geographic coordinate in WGS84 (Value Object).

    Note on __eq__ and __hash__: Pydantic frozen models compare by value automatically.
    """

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)

    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# GeoPolygon
# ---------------------------------------------------------------------------
class GeoPolygon(BaseModel):
    """Survey polygon with WGS84 vertices (Value Object).

    Containment is evaluated in lon/lat space with the same inclusive
    ray-casting rule as ``Boundary``. Conversion to a local meter frame lives
    in ``domain.terrain.services``.
    """

    vertices: tuple[GeoPoint, ...] = Field(min_length=MIN_BOUNDARY_POINTS)

    model_config = ConfigDict(frozen=True)

    _planar: Boundary = PrivateAttr()

    def model_post_init(self, __context: Any) -> None:
        self._planar = Boundary.from_points(
            (v.longitude, v.latitude) for v in self.vertices
        )

    @classmethod
    def from_lat_lon(cls, pairs: Iterable[tuple[float, float]]) -> GeoPolygon:
        """Build from (latitude, longitude) pairs."""
        return cls(
            vertices=tuple(GeoPoint(latitude=lat, longitude=lon) for lat, lon in pairs)
        )

    def contains(self, latitude: float, longitude: float) -> bool:
        return self._planar.contains(longitude, latitude)

    @property
    def centroid(self) -> GeoPoint:
        """Arithmetic mean of the vertices (adequate for small survey plots)."""
        n = len(self.vertices)
        return GeoPoint(
            latitude=sum(v.latitude for v in self.vertices) / n,
            longitude=sum(v.longitude for v in self.vertices) / n,
        )

    def bounds(self) -> tuple[float, float, float, float]:
        """Return (min_lat, max_lat, min_lon, max_lon)."""
        return (
            self._planar.min_y,
            self._planar.max_y,
            self._planar.min_x,
            self._planar.max_x,
        )

    # services imports this module, so projection helpers are imported lazily
    def to_local_meters(self, origin: GeoPoint) -> list[Point]:
        from domain.terrain.services import polygon_to_local_meters

        return polygon_to_local_meters(self, origin)

    def to_boundary(self, origin: GeoPoint) -> Boundary:
        """Local-frame Boundary anchored at origin."""
        from domain.terrain.services import polygon_to_boundary

        return polygon_to_boundary(self, origin)

    @property
    def area_square_meters(self) -> float:
        from domain.terrain.services import polygon_area_m2

        return polygon_area_m2(self)
