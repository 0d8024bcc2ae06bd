"""extract.py — per-threshold and multi-threshold isoline drivers.

This module connects the grid, the spatial index, the classifier and the
tracer. Each threshold is independent: it reads only the shared, read-only
Grid and SpatialIndex and builds its own fragment map and visited set, so
thresholds can run on worker threads without locking.

Key APIs
--------
- isoline(grid, index, threshold): one IsolineLayer.
- extract(grid, index, thresholds, workers=...): one layer per threshold, in
  input order regardless of completion order.
- evenly_spaced_thresholds(grid, n): n levels strictly inside the data range.
"""
from __future__ import annotations

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

import numpy as np

from .grid import Grid
from .marching import classify_cells
from .quadtree import SpatialIndex
from .tracer import DEFAULT_PRECISION, Polyline, trace

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class IsolineLayer:
    """All polylines for one threshold."""

    threshold: float
    paths: List[Polyline] = field(default_factory=list)

    def count_closed(self) -> int:
        return sum(1 for p in self.paths if p.closed)

    def count_points(self) -> int:
        return sum(len(p.points) for p in self.paths)


def isoline(
    grid: Grid,
    index: SpatialIndex,
    threshold: float,
    *,
    precision: float = DEFAULT_PRECISION,
) -> IsolineLayer:
    """Extract the isolines of `grid` at `threshold`.

    Steps: index query → classify every candidate cell → trace.
    """
    threshold = float(threshold)
    cells = index.query_may_cross(threshold)
    fragments = classify_cells(grid, cells, threshold)
    cols, rows = grid.cell_shape
    paths = trace(fragments, width=cols, height=rows, precision=precision)
    logger.debug(
        "threshold=%g candidates=%d active=%d fragments=%d",
        threshold, len(cells), len(fragments), sum(len(f) for f in fragments.values()),
    )
    return IsolineLayer(threshold, paths)


def extract(
    grid: Grid,
    index: SpatialIndex,
    thresholds: Sequence[float],
    *,
    workers: Optional[int] = None,
    precision: float = DEFAULT_PRECISION,
) -> List[IsolineLayer]:
    """Run ``isoline`` for every threshold; results follow input order.

    Parameters
    ----------
    workers : int, optional
        Thread count. None uses ``min(cpu_count, len(thresholds))``; 1 runs
        sequentially in the calling thread.
    precision : float
        Quantisation step used when matching fragment end points.
    """
    if index.grid is not grid:
        raise ValueError("index was built for a different grid")
    if workers is not None and workers < 1:
        raise ValueError(f"workers must be >= 1, got {workers}")
    if precision <= 0:
        raise ValueError(f"precision must be positive, got {precision}")

    levels = [float(t) for t in thresholds]
    if not levels:
        return []
    n = min(os.cpu_count() or 1, len(levels)) if workers is None else min(workers, len(levels))

    def one(t: float) -> IsolineLayer:
        return isoline(grid, index, t, precision=precision)

    if n > 1:
        with ThreadPoolExecutor(max_workers=n) as executor:
            layers = list(executor.map(one, levels))
    else:
        layers = [one(t) for t in levels]

    for layer in layers:
        logger.info(
            "threshold %g: paths=%d closed=%d points=%d",
            layer.threshold, len(layer.paths), layer.count_closed(), layer.count_points(),
        )
    return layers


def evenly_spaced_thresholds(grid: Grid, n: int) -> List[float]:
    """Return `n` equally spaced thresholds strictly between grid min and max."""
    if n < 1:
        raise ValueError(f"Need at least one threshold, got {n}")
    lo, hi = grid.min(), grid.max()
    return [float(v) for v in np.linspace(lo, hi, n + 2)[1:-1]]


__all__ = ["IsolineLayer", "isoline", "extract", "evenly_spaced_thresholds"]
