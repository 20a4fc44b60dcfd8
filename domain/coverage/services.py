"""Coverage Bounded Context - Domain Services.

Stateless gap analysis over a boundary, a voxel size and a set of covered
voxel keys. Pure functions, no I/O.

Cost of a gap search grows with bounding-box area / voxel_size^2. A small
voxel size on a large boundary is guarded by a cell budget (max_cells).
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping

import numpy as np

from domain.coverage.defaults import DEFAULT_MAX_GAP_SEARCH_CELLS
from domain.coverage.entities import CoverageSession
from domain.coverage.errors import BoundaryNotSetError, GapSearchTooLargeError
from domain.coverage.value_objects import Boundary, GapInfo, Point, voxel_key

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Expected Cell Count
# ---------------------------------------------------------------------------
def expected_voxel_count(boundary: Boundary, voxel_size: float) -> int:
    """Number of cells needed to tile the boundary area: ceil(area / size^2).

    Independent of which cells a session has actually enumerated, so it is
    usable as a progress denominator.
    """
    if not voxel_size > 0:
        raise ValueError(f"voxel_size must be positive, got {voxel_size}")
    return math.ceil(boundary.area / (voxel_size * voxel_size))


# ---------------------------------------------------------------------------
# Gap Search
# ---------------------------------------------------------------------------
def find_gaps(
    boundary: Boundary,
    voxel_size: float,
    covered_keys: Iterable[int],
    *,
    max_cells: int | None = DEFAULT_MAX_GAP_SEARCH_CELLS,
) -> list[GapInfo]:
    """Find every uncovered cell whose center lies inside the boundary.

    Candidate cells span floor(min / size) .. ceil(max / size) on each axis
    of the boundary's bounding box. Each gap is reported as a single cell;
    contiguous gaps are not merged.

    Args:
        boundary: Survey polygon
        voxel_size: Grid cell edge in meters
        covered_keys: Packed keys (``Voxel.key``) of already covered cells
        max_cells: Budget on candidate cells; None disables the check

    Returns:
        Gaps ordered by (grid_x, grid_y). Empty when fully covered.

    Raises:
        ValueError: If voxel_size is not positive
        GapSearchTooLargeError: If the candidate cell count exceeds max_cells
    """
    if not voxel_size > 0:
        raise ValueError(f"voxel_size must be positive, got {voxel_size}")

    start_x = math.floor(boundary.min_x / voxel_size)
    end_x = math.ceil(boundary.max_x / voxel_size)
    start_y = math.floor(boundary.min_y / voxel_size)
    end_y = math.ceil(boundary.max_y / voxel_size)

    cell_count = (end_x - start_x + 1) * (end_y - start_y + 1)
    # Budget check BEFORE allocation
    if max_cells is not None and cell_count > max_cells:
        raise GapSearchTooLargeError(cell_count, max_cells)

    gx, gy = np.meshgrid(
        np.arange(start_x, end_x + 1, dtype=np.int64),
        np.arange(start_y, end_y + 1, dtype=np.int64),
        indexing="ij",
    )
    gx = gx.ravel()
    gy = gy.ravel()

    center_x = (gx + 0.5) * voxel_size
    center_y = (gy + 0.5) * voxel_size
    mask = boundary.contains_many(center_x, center_y)

    covered = np.fromiter(covered_keys, dtype=np.int64)
    if covered.size:
        mask &= ~np.isin(voxel_key(gx, gy), covered)

    area_m2 = voxel_size * voxel_size
    gaps = [
        GapInfo(
            grid_x=int(x),
            grid_y=int(y),
            center_x=float(cx),
            center_y=float(cy),
            area_m2=area_m2,
        )
        for x, y, cx, cy in zip(gx[mask], gy[mask], center_x[mask], center_y[mask])
    ]

    logger.debug(
        "Gap search: %d candidate cells, %d covered keys, %d gaps",
        cell_count,
        covered.size,
        len(gaps),
    )
    return gaps


def find_nearest_gap(
    gaps: Iterable[GapInfo],
    position: Point | Mapping[str, float] | Iterable[float],
) -> GapInfo | None:
    """Return the gap whose center is closest to position, or None if no gaps.

    Ties keep the earliest gap in iteration order.
    """
    here = Point.coerce(position)
    nearest: GapInfo | None = None
    best = math.inf
    for gap in gaps:
        dist = gap.distance_to(here.x, here.y)
        if dist < best:
            best = dist
            nearest = gap
    return nearest


# ---------------------------------------------------------------------------
# Session-level helpers
# ---------------------------------------------------------------------------
def _require_boundary(session: CoverageSession) -> Boundary:
    if session.boundary is None:
        raise BoundaryNotSetError(f"Session {session.id} has no boundary")
    return session.boundary


def find_session_gaps(
    session: CoverageSession,
    *,
    max_cells: int | None = DEFAULT_MAX_GAP_SEARCH_CELLS,
) -> list[GapInfo]:
    """``find_gaps`` over a session's boundary, voxel size and covered set.

    Raises:
        BoundaryNotSetError: If the session has no boundary
    """
    boundary = _require_boundary(session)
    return find_gaps(
        boundary, session.voxel_size, session.covered_keys(), max_cells=max_cells
    )


def find_nearest_session_gap(
    session: CoverageSession,
    position: Point | Mapping[str, float] | Iterable[float],
    *,
    max_cells: int | None = DEFAULT_MAX_GAP_SEARCH_CELLS,
) -> GapInfo | None:
    """Nearest uncovered cell to position within the session's boundary.

    Raises:
        BoundaryNotSetError: If the session has no boundary
    """
    return find_nearest_gap(find_session_gaps(session, max_cells=max_cells), position)


def coverage_progress(session: CoverageSession) -> float:
    """Fraction (0..1) of the expected cell count covered inside the boundary.

    Raises:
        BoundaryNotSetError: If the session has no boundary
    """
    boundary = _require_boundary(session)
    expected = expected_voxel_count(boundary, session.voxel_size)
    if expected == 0:
        return 0.0
    return min(1.0, session.count_inside_boundary() / expected)
