"""Domain Port(s) for Terrain I/O.

Defines interfaces (Protocols) that infrastructure adapters must implement.
No concrete I/O here.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from .entities import ElevationGrid
from .value_objects import GeoPoint


class DemWriter(Protocol):
    """Port for persisting an ElevationGrid as a raster DEM.

    Implementations live in infrastructure (e.g., GeoTIFF writer).
    """

    def write_dem(
        self, grid: ElevationGrid, file_path: Path | str, origin: GeoPoint | None = None
    ) -> Path:
        """Write the grid's raster and return the path written."""
        ...
