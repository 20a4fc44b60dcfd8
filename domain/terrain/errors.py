"""Terrain Bounded Context - Error Hierarchy.

Custom exceptions for elevation and DEM operations. Missing samples are
reported as None from grid queries; these errors cover export failures.
"""

from __future__ import annotations


class TerrainError(Exception):
    """Base error for terrain operations."""


class EmptyElevationGridError(TerrainError):
    """Grid holds no samples, so there is no raster to export."""


class DemWriteError(TerrainError):
    """DEM could not be written to the target file."""


class RasterTooLargeError(TerrainError):
    """Raster would exceed the configured memory budget."""
