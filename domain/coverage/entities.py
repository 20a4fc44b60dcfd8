"""Coverage Bounded Context - Entities.

CoverageSession is the aggregate root of the coverage context: it owns the
covered voxel set and the optional survey boundary.

Concurrency: not thread-safe. ``paint`` checks and inserts in two steps, so
hosts driving it from several callers must serialize access themselves.
"""

from __future__ import annotations

import logging
import math

from domain.coverage.defaults import DEFAULT_VOXEL_SIZE
from domain.coverage.value_objects import (
    Boundary,
    CoverageStats,
    PaintResult,
    Voxel,
    create_coverage_stats,
)

logger = logging.getLogger(__name__)


class CoverageSession:
    """Live record of one survey's painted voxels and boundary.

    Parameters
    ----------
    session_id: str
        Identifier assigned by the owning adapter.
    voxel_size: float
        Grid cell edge in meters. Fixed for the lifetime of the session.
    """

    def __init__(self, session_id: str, voxel_size: float = DEFAULT_VOXEL_SIZE) -> None:
        if not (math.isfinite(voxel_size) and voxel_size > 0):
            raise ValueError(f"voxel_size must be positive and finite, got {voxel_size}")
        self._id = session_id
        self._voxel_size = float(voxel_size)
        self._covered: dict[int, Voxel] = {}
        self._boundary: Boundary | None = None

    def __repr__(self) -> str:
        return (
            f"CoverageSession(id={self._id!r}, voxel_size={self._voxel_size}, "
            f"voxels={len(self._covered)}, boundary={self._boundary is not None})"
        )

    @property
    def id(self) -> str:
        return self._id

    @property
    def voxel_size(self) -> float:
        return self._voxel_size

    @property
    def boundary(self) -> Boundary | None:
        return self._boundary

    # -----------------------------------------------------------------------
    # Painting
    # -----------------------------------------------------------------------
    def paint(self, x: float, y: float) -> PaintResult:
        """Mark the cell containing (x, y) as covered.

        The cell is recorded even when the point lies outside the boundary;
        ``get_stats`` does the boundary filtering.

        Raises:
            InvalidCoordinateError: If x or y is not finite
        """
        voxel = Voxel.from_world(x, y, self._voxel_size)
        key = voxel.key
        is_new = key not in self._covered
        if is_new:
            self._covered[key] = voxel

        return PaintResult(
            is_new=is_new,
            voxel=voxel,
            is_inside_boundary=self.is_inside_boundary(x, y),
        )

    # -----------------------------------------------------------------------
    # Boundary
    # -----------------------------------------------------------------------
    def set_boundary(self, boundary: Boundary) -> None:
        self._boundary = boundary
        logger.debug(
            "Session %s: boundary set (%d points, %.3f m2)",
            self._id,
            len(boundary.points),
            boundary.area,
        )

    def clear_boundary(self) -> None:
        self._boundary = None
        logger.debug("Session %s: boundary cleared", self._id)

    def is_inside_boundary(self, x: float, y: float) -> bool:
        """True when no boundary is set or the boundary contains (x, y)."""
        if self._boundary is None:
            return True
        return self._boundary.contains(x, y)

    # -----------------------------------------------------------------------
    # Queries
    # -----------------------------------------------------------------------
    def get_stats(self) -> CoverageStats:
        """Coverage statistics over the voxels whose center is inside the boundary.

        Without a boundary every covered voxel counts and the percentage
        fields are None.
        """
        if self._boundary is None:
            return create_coverage_stats(len(self._covered), self._voxel_size, None)

        return create_coverage_stats(
            self._count_inside(self._boundary),
            self._voxel_size,
            self._boundary.area,
        )

    def count_inside_boundary(self) -> int:
        """Number of covered voxels whose center lies inside the boundary."""
        if self._boundary is None:
            return len(self._covered)
        return self._count_inside(self._boundary)

    def get_voxels(self) -> list[Voxel]:
        return list(self._covered.values())

    def get_voxel_count(self) -> int:
        return len(self._covered)

    def covered_keys(self) -> frozenset[int]:
        """Snapshot of the packed keys of every covered voxel."""
        return frozenset(self._covered)

    def get_area(self) -> float:
        """Covered area in m2 over ALL painted voxels, ignoring the boundary.

        Differs from ``get_stats().covered_area_m2`` once voxels have been
        painted outside the boundary.
        """
        return len(self._covered) * (self._voxel_size * self._voxel_size)

    # -----------------------------------------------------------------------
    # Lifecycle
    # -----------------------------------------------------------------------
    def reset(self) -> None:
        """Forget all painted voxels; keep the boundary."""
        self._covered.clear()
        logger.debug("Session %s: voxels reset", self._id)

    def full_reset(self) -> None:
        """Forget painted voxels and the boundary."""
        self._covered.clear()
        self._boundary = None
        logger.debug("Session %s: full reset", self._id)

    def _count_inside(self, boundary: Boundary) -> int:
        if not self._covered:
            return 0
        voxels = self._covered.values()
        xs = [v.world_x for v in voxels]
        ys = [v.world_y for v in voxels]
        return int(boundary.contains_many(xs, ys).sum())
