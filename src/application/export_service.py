"""Export of survey results to report text, OBJ mesh and DEM CSV.

Stateless free functions; each returns the rendered text and performs no I/O.
GeoTIFF output lives in infrastructure (``GeoTiffDemWriter``).
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
from typing import Literal

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field

from domain.coverage.value_objects import Point
from domain.terrain.entities import ElevationGrid
from domain.terrain.value_objects import GeoPoint

RULE = "=" * 50
REPORT_TITLE = "STREET SURFACE SCAN REPORT"


class ExportData(BaseModel):
    """Everything a scan report needs."""

    site_address: str
    area_square_meters: float = Field(ge=0)
    coverage_percent: float = Field(ge=0, le=100)
    validation_status: Literal["pass", "warning", "fail"]
    calibration_accuracy: float = Field(ge=0)  # +/- percent
    boundary: tuple[Point, ...] = ()
    elevation_grid: ElevationGrid | None = None
    timestamp: AwareDatetime

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)


def _iso(ts: datetime) -> str:
    if ts.tzinfo is None or ts.utcoffset() is None:
        raise ValueError("timestamp must be timezone-aware")
    return ts.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


# ---------------------------------------------------------------------------
# Text report
# ---------------------------------------------------------------------------
def to_report_text(data: ExportData) -> str:
    """Fixed-layout plain-text report of measurements, boundary and elevation."""
    lines = [
        RULE,
        REPORT_TITLE,
        RULE,
        "",
        f"Site: {data.site_address}",
        f"Date: {_iso(data.timestamp)}",
        "",
        "--- MEASUREMENTS ---",
        f"Area: {data.area_square_meters:.2f} m²",
        f"Coverage: {data.coverage_percent:.1f}%",
        f"Validation: {data.validation_status.upper()}",
        f"Accuracy: ±{data.calibration_accuracy:.1f}%",
        "",
        "--- BOUNDARY ---",
    ]
    lines.extend(
        f"  Point {i}: ({p.x:.2f}, {p.y:.2f})" for i, p in enumerate(data.boundary, 1)
    )
    lines.extend(["", "--- ELEVATION ---"])

    bounds = data.elevation_grid.get_bounds() if data.elevation_grid else None
    if bounds is not None:
        lines.append(f"  Min: {bounds.min_z:.2f} m")
        lines.append(f"  Max: {bounds.max_z:.2f} m")
        lines.append(f"  Delta: {bounds.relief * 100:.0f} cm")
    else:
        lines.append("  No elevation data")

    lines.extend(["", RULE])
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# OBJ mesh
# ---------------------------------------------------------------------------
def to_obj(
    boundary: Iterable[Point | Mapping[str, float] | Iterable[float]],
    generated_at: datetime | None = None,
) -> str:
    """Wavefront OBJ of the boundary as one flat (z=0) polygon face.

    The face line is omitted when there are fewer than 3 points.

    Raises:
        ValueError: If generated_at is a naive datetime
    """
    points = [Point.coerce(p) for p in boundary]
    generated_at = generated_at or datetime.now(timezone.utc)

    lines = ["# Street Survey Scan Mesh", f"# Generated: {_iso(generated_at)}", ""]
    z = 0.0
    lines.extend(f"v {p.x:.4f} {p.y:.4f} {z:.4f}" for p in points)
    lines.append("")

    if len(points) >= 3:
        lines.append("f " + " ".join(str(i) for i in range(1, len(points) + 1)))

    return "\n".join(lines)


# ---------------------------------------------------------------------------
# DEM CSV
# ---------------------------------------------------------------------------
def to_dem_csv(grid: ElevationGrid, origin: GeoPoint) -> str:
    """DEM as '#'-prefixed header lines followed by comma-separated raster rows.

    Rows follow ``ElevationGrid.to_raster()`` order (first row = min y).
    """
    bounds = grid.get_bounds()
    min_x = bounds.min_x if bounds else 0
    max_x = bounds.max_x if bounds else 0
    min_y = bounds.min_y if bounds else 0
    max_y = bounds.max_y if bounds else 0

    lines = [
        f"# DEM Export - Origin: {origin.latitude}, {origin.longitude}",
        f"# Cell Size: {grid.cell_size} m",
        f"# Bounds: X[{min_x}, {max_x}] Y[{min_y}, {max_y}]",
        "",
    ]
    lines.extend(",".join(f"{v:.3f}" for v in row) for row in grid.to_raster())
    return "\n".join(lines)
