"""Infrastructure adapters for the terrain bounded context.

This module provides the infrastructure layer implementations for terrain
operations, including writing DEMs to GeoTIFF files.

Adapter exported for simplified imports.
"""

from .geotiff_dem_writer import GeoTiffDemWriter

__all__ = ["GeoTiffDemWriter"]
