"""GeoTIFF adapter for DemWriter.

Writes an ElevationGrid's interpolated raster to a single-band float32
GeoTIFF using rasterio.

Lifecycle (to avoid resource leaks):
1) Validate target path (extension allowlist, no symlinks, parent exists)
2) Rasterize the grid and check the memory budget
3) Flip rows to north-up order and build the affine transform
4) Open dataset for writing inside rasterio.Env and write band 1
5) Exit contexts to release GDAL handles
6) Return the written path
"""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
import rasterio
from affine import Affine
from rasterio.crs import CRS

from domain.terrain.entities import ElevationGrid
from domain.terrain.errors import (
    DemWriteError,
    EmptyElevationGridError,
    RasterTooLargeError,
)
from domain.terrain.services import local_crs_proj4
from domain.terrain.value_objects import GeoPoint

# Module-level logger (reused across all calls)
logger = logging.getLogger(__name__)

_ALLOWED_SUFFIXES = (".tif", ".tiff")


def dem_transform(grid: ElevationGrid, rows: int) -> Affine:
    """Affine transform mapping (col, row) of a north-up raster to local meters.

    Raster values are sampled at cell centers, so the outer edge sits half a
    cell beyond the outermost sample.
    """
    bounds = grid.get_bounds()
    if bounds is None:
        raise EmptyElevationGridError("Elevation grid has no samples")
    cell = grid.cell_size
    top = bounds.min_y + (rows - 1) * cell
    return Affine.translation(bounds.min_x - cell / 2, top + cell / 2) @ Affine.scale(
        cell, -cell
    )


class GeoTiffDemWriter:
    """Infrastructure adapter for writing DEMs to GeoTIFF files (``DemWriter`` port).

    Parameters
    ----------
    max_bytes: int | None
        Optional memory budget for the float32 raster (rows*cols*4). If the
        estimated size exceeds it, RasterTooLargeError is raised before the
        grid is rasterized.
    """

    def __init__(self, max_bytes: int | None = None) -> None:
        self.max_bytes = max_bytes

    def write_dem(
        self, grid: ElevationGrid, file_path: Path | str, origin: GeoPoint | None = None
    ) -> Path:
        """Write the grid's raster as GeoTIFF.

        Args:
            grid: Elevation grid with at least one sample
            file_path: Target .tif/.tiff path; overwritten if present
            origin: Geographic anchor of the local frame. When given, the
                file carries a local azimuthal-equidistant CRS.

        Returns:
            The path written

        Raises:
            EmptyElevationGridError: If the grid has no samples
            RasterTooLargeError: If the raster exceeds max_bytes
            DemWriteError: On unsupported extension, symlink target or
                rasterio failure
            FileNotFoundError: If the parent directory does not exist
        """
        path = Path(file_path)

        if path.suffix.lower() not in _ALLOWED_SUFFIXES:
            raise DemWriteError(f"Unsupported file extension: {path.suffix}")
        if path.is_symlink():
            raise DemWriteError("Symlinks are not permitted")
        if not path.parent.is_dir():
            raise FileNotFoundError(str(path.parent))

        if grid.sample_count == 0:
            raise EmptyElevationGridError("Elevation grid has no samples")

        rows, cols = grid.raster_shape()
        # Memory budget check BEFORE rasterizing
        if self.max_bytes is not None:
            est_bytes = rows * cols * 4  # float32 = 4 bytes
            if est_bytes > self.max_bytes:
                raise RasterTooLargeError(
                    f"Estimated raster size {est_bytes}B exceeds budget {self.max_bytes}B"
                )

        # to_raster() puts min y in row 0; GeoTIFF rows run north to south
        data = np.ascontiguousarray(np.flipud(grid.to_raster()), dtype=np.float32)
        transform = dem_transform(grid, rows)
        crs = CRS.from_proj4(local_crs_proj4(origin)) if origin is not None else None

        try:
            with rasterio.Env():
                with rasterio.open(
                    path,
                    "w",
                    driver="GTiff",
                    height=rows,
                    width=cols,
                    count=1,
                    dtype="float32",
                    crs=crs,
                    transform=transform,
                ) as dst:
                    dst.write(data, 1)
        except PermissionError as e:
            # Re-raise with filename only to avoid leaking full path in logs
            raise PermissionError(path.name) from e
        except rasterio.errors.RasterioError as e:
            raise DemWriteError(f"Failed to write DEM: {e}") from e

        logger.info(
            "DEM %s: wrote %dx%d grid (cell %.3f m, %d samples)",
            path.name,
            cols,
            rows,
            grid.cell_size,
            grid.sample_count,
        )
        return path
