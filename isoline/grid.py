"""grid.py — immutable 2-D grid of scalar samples.

The grid is the input to everything else in the package: the spatial index is
built over it once, and every threshold is extracted against it.

Key concepts
------------
- Samples are stored row-major; sample (x, y) lives at ``y * width + x``.
- Lookups outside the grid return ``None`` ("absent") rather than raising.
  An absent sample marks the edge of the data, not an error.
- A marching-squares *cell* is identified by its top-left sample (x, y) and
  spans the samples at offsets (0,0), (1,0), (0,1), (1,1).

Design notes
------------
- Backed by a read-only float64 NumPy array of shape (height, width).
- Malformed input fails fast in the constructor; nothing is padded or cut.
"""
from __future__ import annotations

from typing import Optional, Sequence

import numpy as np

# Corner offsets in classification order: top-left, top-right, bottom-left, bottom-right.
CELL_OFFSETS: tuple[tuple[int, int], ...] = ((0, 0), (1, 0), (0, 1), (1, 1))


class Grid:
    """Rectangular grid of scalar samples.

    Parameters
    ----------
    width, height : int
        Grid dimensions in samples. Both must be positive.
    samples : sequence of float or np.ndarray
        Row-major samples; exactly ``width * height`` values.
    """

    __slots__ = ("width", "height", "_data")

    def __init__(self, width: int, height: int, samples: Sequence[float] | np.ndarray) -> None:
        width = int(width)
        height = int(height)
        if width <= 0 or height <= 0:
            raise ValueError(f"Invalid grid size {width}x{height}: both dimensions must be positive")
        data = np.array(samples, dtype=float).ravel()
        if data.size != width * height:
            raise ValueError(
                f"Sample count mismatch: got {data.size}, expected {width}*{height}={width * height}"
            )
        if not np.all(np.isfinite(data)):
            raise ValueError("Grid samples must be finite (found NaN or inf)")
        data = data.reshape(height, width)
        data.flags.writeable = False
        self.width = width
        self.height = height
        self._data = data

    @classmethod
    def from_array(cls, array) -> "Grid":
        """Build a grid from a 2-D array-like indexed as ``[y, x]``."""
        arr = np.asarray(array, dtype=float)
        if arr.ndim != 2:
            raise ValueError(f"Grid.from_array expects a 2-D array, got shape {arr.shape}")
        h, w = arr.shape
        return cls(w, h, arr.ravel())

    # ----- lookup -----
    @property
    def data(self) -> np.ndarray:
        """Read-only (height, width) view of the samples."""
        return self._data

    def contains(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get(self, x: int, y: int) -> Optional[float]:
        """Return the sample at (x, y), or None when outside the grid."""
        if not self.contains(x, y):
            return None
        return float(self._data[y, x])

    def cell_corners(self, x: int, y: int) -> tuple[Optional[float], ...]:
        """Return the 4 corner samples of cell (x, y) as (tl, tr, bl, br)."""
        return tuple(self.get(x + dx, y + dy) for dx, dy in CELL_OFFSETS)

    # ----- shape / stats -----
    @property
    def cell_shape(self) -> tuple[int, int]:
        """(columns, rows) of cells whose four corners are all present."""
        return (max(0, self.width - 1), max(0, self.height - 1))

    def min(self) -> float:
        return float(self._data.min())

    def max(self) -> float:
        return float(self._data.max())

    def __len__(self) -> int:
        return self.width * self.height

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"Grid({self.width}x{self.height}, range=[{self.min():.6g}, {self.max():.6g}])"


__all__ = ["CELL_OFFSETS", "Grid"]
