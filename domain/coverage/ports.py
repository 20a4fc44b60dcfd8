"""Domain Port(s) for coverage session management.

Defines the interface (Protocol) that session-holding adapters implement.
No concrete state here.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Protocol

from .entities import CoverageSession
from .value_objects import Boundary, CoverageStats, PaintResult, Point, Voxel


class CoverageSessionPort(Protocol):
    """Port through which the sampling/UI layer drives a single active session.

    Implementations live in infrastructure (e.g., the in-memory adapter).
    Session-dependent queries return None (or an empty list) when no
    session is active; mutators are then no-ops.
    """

    def create_session(self, voxel_size: float = ...) -> CoverageSession:
        """Start a new session, replacing any current one."""
        ...

    def paint(self, x: float, y: float) -> PaintResult | None: ...

    def set_boundary(
        self, points: Iterable[Point | Mapping[str, float] | Iterable[float]]
    ) -> None: ...

    def clear_boundary(self) -> None: ...

    def get_stats(self) -> CoverageStats | None: ...

    def get_voxels(self) -> list[Voxel]: ...

    def get_boundary(self) -> Boundary | None: ...

    def reset(self) -> None:
        """Clear painted voxels, keep the boundary."""
        ...

    def full_reset(self) -> None:
        """Clear painted voxels and the boundary."""
        ...

    def is_inside_boundary(self, x: float, y: float) -> bool: ...

    def get_current_session(self) -> CoverageSession | None: ...
