"""Terrain Bounded Context - Domain Services.

Geodetic conversions between WGS84 and the local east/north meter frame that
the coverage and elevation models work in. No I/O.
"""

from __future__ import annotations

from functools import lru_cache

from pyproj import Geod, Proj

from domain.coverage.value_objects import Boundary, Point
from domain.terrain.value_objects import GeoPoint, GeoPolygon

# WGS84 ellipsoid for geodesic calculations (same as GPS, EPSG:4326)
_geod = Geod(ellps="WGS84")


@lru_cache(maxsize=64)
def _local_projection(latitude: float, longitude: float) -> Proj:
    """Azimuthal equidistant projection centred on (latitude, longitude)."""
    return Proj(proj="aeqd", lat_0=latitude, lon_0=longitude, datum="WGS84", units="m")


def local_crs_proj4(origin: GeoPoint) -> str:
    """PROJ string of the local meter frame anchored at origin."""
    return (
        f"+proj=aeqd +lat_0={origin.latitude} +lon_0={origin.longitude} "
        "+datum=WGS84 +units=m +no_defs"
    )


# ---------------------------------------------------------------------------
# Geodesic Distance
# ---------------------------------------------------------------------------
def geodesic_distance(start: GeoPoint, end: GeoPoint) -> float:
    """Calculate geodesic distance between two points in meters.

    Uses WGS84 ellipsoid for millimeter-level precision.
    """
    if start == end:
        return 0.0
    _, _, distance = _geod.inv(
        start.longitude, start.latitude, end.longitude, end.latitude
    )
    return float(abs(distance))


# ---------------------------------------------------------------------------
# Local Frame Conversion
# ---------------------------------------------------------------------------
def latlon_to_local_meters(origin: GeoPoint, point: GeoPoint) -> Point:
    """Project point into meters east (x) and north (y) of origin."""
    proj = _local_projection(origin.latitude, origin.longitude)
    x, y = proj(point.longitude, point.latitude)
    return Point(x=float(x), y=float(y))


def local_meters_to_latlon(origin: GeoPoint, point: Point) -> GeoPoint:
    """Inverse of ``latlon_to_local_meters``."""
    proj = _local_projection(origin.latitude, origin.longitude)
    lon, lat = proj(point.x, point.y, inverse=True)
    return GeoPoint(latitude=float(lat), longitude=float(lon))


def polygon_to_local_meters(polygon: GeoPolygon, origin: GeoPoint) -> list[Point]:
    return [latlon_to_local_meters(origin, v) for v in polygon.vertices]


def polygon_to_boundary(polygon: GeoPolygon, origin: GeoPoint) -> Boundary:
    """Local-frame Boundary for a geographic polygon, ready for a CoverageSession."""
    return Boundary(points=tuple(polygon_to_local_meters(polygon, origin)))


def polygon_area_m2(polygon: GeoPolygon) -> float:
    """Planar area in square meters, measured in a frame anchored at the first vertex."""
    return polygon_to_boundary(polygon, polygon.vertices[0]).area
