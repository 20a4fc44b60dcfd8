"""Terrain Bounded Context - Entities.

ElevationGrid accumulates irregularly spaced height samples and answers
interpolation, slope, bounds and raster queries using Inverse Distance
Weighting (IDW), with each sample's weight further divided by its squared
sensor accuracy.
"""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import ArrayLike, NDArray

from domain.terrain.value_objects import ElevationSample, GridBounds, SlopeVector

# ---------------------------------------------------------------------------
# Numeric Constants
# ---------------------------------------------------------------------------
DEFAULT_CELL_SIZE = 0.1  # 10 cm raster cells
IDW_POWER = 2  # Standard IDW power parameter
EXACT_MATCH_EPSILON = 0.001  # 1 mm - query this close to a sample returns it verbatim

# Digits kept when dividing a span by the cell size, before ceil()
_SPAN_ROUND_DIGITS = 9


class ElevationGrid:
    """Append-only elevation sample store with IDW interpolation.

    Parameters
    ----------
    cell_size: float
        Raster resolution in meters, also the finite-difference step for slopes.
    """

    def __init__(self, cell_size: float = DEFAULT_CELL_SIZE) -> None:
        if not cell_size > 0:
            raise ValueError(f"cell_size must be positive, got {cell_size}")
        self.cell_size = float(cell_size)
        self._samples: list[ElevationSample] = []

    def __repr__(self) -> str:
        return f"ElevationGrid(cell_size={self.cell_size}, samples={len(self._samples)})"

    @property
    def sample_count(self) -> int:
        return len(self._samples)

    @property
    def samples(self) -> tuple[ElevationSample, ...]:
        return tuple(self._samples)

    def add_sample(self, sample: ElevationSample) -> None:
        """Append a sample. Duplicates are kept."""
        self._samples.append(sample)

    # -----------------------------------------------------------------------
    # Interpolation
    # -----------------------------------------------------------------------
    def interpolate(self, x: float, y: float) -> float | None:
        """Elevation at (x, y), or None when the grid holds no samples.

        A sample within EXACT_MATCH_EPSILON of the query is returned as-is
        (the first such sample in insertion order). Otherwise the result is
        the IDW average with weight 1 / ((d + eps)^2 * accuracy^2).
        """
        if not self._samples:
            return None
        return float(self._interpolate_many(np.array([x]), np.array([y]))[0])

    def get_slope(self, x: float, y: float) -> SlopeVector | None:
        """Forward-difference gradient at (x, y) with cell_size as the step.

        Returns None with fewer than two samples.
        """
        if len(self._samples) < 2:
            return None

        delta = self.cell_size
        z0 = self.interpolate(x, y)
        z_x = self.interpolate(x + delta, y)
        z_y = self.interpolate(x, y + delta)

        if z0 is None or z_x is None or z_y is None:
            return None

        return SlopeVector(dx=(z_x - z0) / delta, dy=(z_y - z0) / delta)

    # -----------------------------------------------------------------------
    # Extent and Raster
    # -----------------------------------------------------------------------
    def get_bounds(self) -> GridBounds | None:
        if not self._samples:
            return None

        xs = [s.x for s in self._samples]
        ys = [s.y for s in self._samples]
        zs = [s.elevation for s in self._samples]
        return GridBounds(
            min_x=min(xs),
            max_x=max(xs),
            min_y=min(ys),
            max_y=max(ys),
            min_z=min(zs),
            max_z=max(zs),
        )

    def raster_shape(self) -> tuple[int, int]:
        """(rows, cols) of ``to_raster()``; (0, 0) without samples."""
        bounds = self.get_bounds()
        if bounds is None:
            return (0, 0)
        return (
            self._cells_spanning(bounds.max_y - bounds.min_y) + 1,
            self._cells_spanning(bounds.max_x - bounds.min_x) + 1,
        )

    def to_raster(self) -> NDArray[np.float64]:
        """Interpolated elevations over the sample bounding box.

        Cell (row, col) holds the value at
        (min_x + col * cell_size, min_y + row * cell_size); row 0 is the
        southern (min y) edge. Empty samples give a (0, 0) array.
        """
        bounds = self.get_bounds()
        rows, cols = self.raster_shape()
        raster = np.zeros((rows, cols), dtype=np.float64)
        if bounds is None:
            return raster

        xs = bounds.min_x + np.arange(cols, dtype=np.float64) * self.cell_size
        # One row at a time keeps the distance matrix at cols x samples
        for row in range(rows):
            y = bounds.min_y + row * self.cell_size
            values = self._interpolate_many(xs, np.full(cols, y))
            raster[row] = np.nan_to_num(values, nan=0.0)

        return raster

    # -----------------------------------------------------------------------
    # Private helpers
    # -----------------------------------------------------------------------
    def _cells_spanning(self, span: float) -> int:
        return math.ceil(round(span / self.cell_size, _SPAN_ROUND_DIGITS))

    def _interpolate_many(
        self, xs: ArrayLike, ys: ArrayLike
    ) -> NDArray[np.float64]:
        qx = np.asarray(xs, dtype=np.float64)[:, np.newaxis]
        qy = np.asarray(ys, dtype=np.float64)[:, np.newaxis]

        sx = np.fromiter((s.x for s in self._samples), dtype=np.float64)
        sy = np.fromiter((s.y for s in self._samples), dtype=np.float64)
        sz = np.fromiter((s.elevation for s in self._samples), dtype=np.float64)
        acc = np.fromiter((s.accuracy for s in self._samples), dtype=np.float64)

        dist = np.hypot(sx - qx, sy - qy)  # (queries, samples)

        # weight = 1 / ((d + eps)^p * acc^2), built in log space and scaled so
        # each row's largest weight is 1; extreme distances or accuracies
        # would otherwise underflow every weight to 0 (or overflow to inf)
        log_weights = -(
            IDW_POWER * np.log(dist + EXACT_MATCH_EPSILON) + 2.0 * np.log(acc)
        )
        weights = np.exp(log_weights - log_weights.max(axis=1, keepdims=True))
        values = (weights * sz).sum(axis=1) / weights.sum(axis=1)

        near = dist < EXACT_MATCH_EPSILON
        has_near = near.any(axis=1)
        if has_near.any():
            first_near = near.argmax(axis=1)
            values = np.where(has_near, sz[first_near], values)

        return values
