"""Street Survey Domain Layer.

This package contains the core business logic organized by bounded contexts:
- coverage: Voxel grid coverage, survey boundary, gap detection
- terrain: Elevation samples, IDW elevation grid, geodesy
"""

# Imports alphabetized per project style (isort)
from domain import coverage, terrain

__all__ = ["coverage", "terrain"]
