"""Coverage Bounded Context - Default Configuration.

Module-level constants shared by the coverage value objects, the session
aggregate and the in-memory adapter. Per-instance overrides are passed as
constructor/function arguments.
"""

from __future__ import annotations

# Grid cell edge length in meters (5 cm, survey-grade)
DEFAULT_VOXEL_SIZE = 0.05

# Coverage percentage at or above which a session counts as complete
AUTO_COMPLETE_THRESHOLD = 98.0

# A boundary polygon needs at least this many vertices
MIN_BOUNDARY_POINTS = 3

# Upper bound on candidate cells enumerated by a single gap search
DEFAULT_MAX_GAP_SEARCH_CELLS = 4_000_000
