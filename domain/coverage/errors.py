"""Coverage Bounded Context - Error Hierarchy.

Custom exceptions for coverage operations. Absence of data (no session, no
gaps) is reported through sentinel return values, not through these.
"""

from __future__ import annotations


class CoverageError(Exception):
    """Base error for coverage operations."""


class InvalidCoordinateError(CoverageError, ValueError):
    """World coordinate is NaN or infinite and cannot be quantized."""

    def __init__(self, x: float, y: float) -> None:
        self.x = x
        self.y = y
        super().__init__(f"Cannot quantize non-finite coordinate ({x}, {y})")


class BoundaryNotSetError(CoverageError):
    """Operation needs a boundary but the session has none."""


class GapSearchTooLargeError(CoverageError):
    """Gap search would enumerate more candidate cells than allowed.

    Attributes:
        cell_count: Number of cells in the boundary's bounding box
        max_cells: The configured budget
    """

    def __init__(self, cell_count: int, max_cells: int) -> None:
        self.cell_count = cell_count
        self.max_cells = max_cells
        super().__init__(
            f"Gap search needs {cell_count} cells, budget is {max_cells}; "
            "use a larger voxel size or raise max_cells"
        )
