"""In-memory adapter for CoverageSessionPort.

Holds at most one active CoverageSession per adapter instance. Creating a
session discards the previous one. Nothing is shared between adapter
instances and nothing is persisted.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from domain.coverage.defaults import DEFAULT_VOXEL_SIZE
from domain.coverage.entities import CoverageSession
from domain.coverage.value_objects import (
    Boundary,
    CoverageStats,
    PaintResult,
    Point,
    Voxel,
)

# Module-level logger (reused across all calls)
logger = logging.getLogger(__name__)


class InMemoryCoverageAdapter:
    """Session factory plus the handle of the current session.

    Without an active session, queries return None (``get_voxels`` returns
    an empty list, ``is_inside_boundary`` returns True) and mutators do
    nothing.
    """

    def __init__(self) -> None:
        self._session: CoverageSession | None = None
        self._session_counter = 0

    def create_session(self, voxel_size: float = DEFAULT_VOXEL_SIZE) -> CoverageSession:
        """Start a new session, replacing the current one, and return it."""
        self._session_counter += 1
        previous = self._session
        self._session = CoverageSession(f"session-{self._session_counter}", voxel_size)
        if previous is not None:
            logger.debug(
                "Discarding session %s (%d voxels)",
                previous.id,
                previous.get_voxel_count(),
            )
        logger.info(
            "Created coverage session %s (voxel_size=%.3f m)",
            self._session.id,
            voxel_size,
        )
        return self._session

    def get_current_session(self) -> CoverageSession | None:
        return self._session

    # -----------------------------------------------------------------------
    # Mutators
    # -----------------------------------------------------------------------
    def paint(self, x: float, y: float) -> PaintResult | None:
        if self._session is None:
            return None
        return self._session.paint(x, y)

    def set_boundary(
        self, points: Iterable[Point | Mapping[str, float] | Iterable[float]]
    ) -> None:
        """Replace the boundary with a polygon built from points.

        Raises:
            ValueError: If fewer than 3 points are given
        """
        if self._session is None:
            logger.warning("set_boundary ignored: no active session")
            return
        self._session.set_boundary(Boundary.from_points(points))

    def clear_boundary(self) -> None:
        if self._session is None:
            logger.warning("clear_boundary ignored: no active session")
            return
        self._session.clear_boundary()

    def reset(self) -> None:
        if self._session is None:
            logger.warning("reset ignored: no active session")
            return
        self._session.reset()

    def full_reset(self) -> None:
        if self._session is None:
            logger.warning("full_reset ignored: no active session")
            return
        self._session.full_reset()

    # -----------------------------------------------------------------------
    # Queries
    # -----------------------------------------------------------------------
    def get_stats(self) -> CoverageStats | None:
        if self._session is None:
            return None
        return self._session.get_stats()

    def get_voxels(self) -> list[Voxel]:
        if self._session is None:
            return []
        return self._session.get_voxels()

    def get_boundary(self) -> Boundary | None:
        if self._session is None:
            return None
        return self._session.boundary

    def is_inside_boundary(self, x: float, y: float) -> bool:
        if self._session is None:
            return True
        return self._session.is_inside_boundary(x, y)


def create_coverage_service(
    voxel_size: float = DEFAULT_VOXEL_SIZE,
) -> InMemoryCoverageAdapter:
    """Return an in-memory adapter with a fresh session already active.

    Example:
        >>> service = create_coverage_service(0.05)
        >>> service.paint(1.52, 2.32).is_new
        True
    """
    adapter = InMemoryCoverageAdapter()
    adapter.create_session(voxel_size)
    return adapter
