"""quadtree.py — min/max range quadtree over marching-squares cells.

The index answers "which cells might contain a crossing of threshold T?"
without visiting every cell. Each node stores the minimum and maximum corner
sample over all cells in its region; a subtree whose maximum is below T cannot
contain a crossing and is skipped wholesale.

Key concepts
------------
- IndexNode: axis-aligned region [x, x+width) × [y, y+height) in *cell* units,
  with ``lower_bound``/``upper_bound`` and optional children.
- SpatialIndex: owns the root node for one Grid and runs queries.

Design notes
------------
- Children order is [TL, TR, BL, BR] (top-left, top-right, bottom-left,
  bottom-right); absent quadrants are simply omitted.
- A region is split at ``ceil(extent / 2)`` in each dimension whose extent is
  greater than one. Odd extents therefore produce children that differ in size
  by one, with no gaps and no overlaps.
- "Leaf" means a region of exactly one cell (2×2 samples).
- Per-cell bounds are computed once, vectorised, from the four shifted corner
  planes of the grid; internal bounds are folded from the children, so a node
  is never wider than its leaves.
- Pruning is one-sided: only subtrees entirely *below* T are skipped. Cells
  entirely above T are still returned and rejected by the classifier.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

import numpy as np

from .grid import Grid

logger = logging.getLogger(__name__)

CellCoord = tuple[int, int]


@dataclass(slots=True)
class IndexNode:
    """A rectangular block of cells in the range quadtree.

    Attributes
    ----------
    x, y : int
        Top-left cell of the region.
    width, height : int
        Region extent in cells (both >= 1).
    lower_bound, upper_bound : float
        Min / max corner sample across every cell in the region.
    depth : int
        0 for the root, increases by 1 per split.
    children : Optional[List[IndexNode]]
        None for a leaf; otherwise 1, 2 or 4 children in [TL, TR, BL, BR] order.
    """

    x: int
    y: int
    width: int
    height: int
    lower_bound: float
    upper_bound: float
    depth: int = 0
    children: Optional[List["IndexNode"]] = None

    def is_leaf(self) -> bool:
        return self.children is None

    @property
    def origin(self) -> CellCoord:
        return (self.x, self.y)

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return (
            f"IndexNode(({self.x},{self.y}) {self.width}x{self.height}, depth={self.depth}, "
            f"[{self.lower_bound:.6g},{self.upper_bound:.6g}], leaf={self.is_leaf()})"
        )


def _split(extent: int) -> int:
    """Size of the first half when splitting `extent` cells."""
    return (extent + 1) // 2 if extent > 1 else extent


def cell_bounds(grid: Grid) -> tuple[np.ndarray, np.ndarray]:
    """Return (lo, hi) arrays of shape (rows, cols) with per-cell corner min/max.

    Uses a single vectorised pass over the four corner planes.
    """
    d = grid.data
    tl, tr = d[:-1, :-1], d[:-1, 1:]
    bl, br = d[1:, :-1], d[1:, 1:]
    lo = np.minimum(np.minimum(tl, tr), np.minimum(bl, br))
    hi = np.maximum(np.maximum(tl, tr), np.maximum(bl, br))
    return lo, hi


class SpatialIndex:
    """Range quadtree over the cells of one Grid.

    Parameters
    ----------
    grid : Grid
        The grid to index. Grids narrower or shorter than 2 samples have no
        complete cells; the index is then empty and every query returns [].
    """

    __slots__ = ("grid", "root", "_count")

    def __init__(self, grid: Grid) -> None:
        self.grid = grid
        self._count = 0
        cols, rows = grid.cell_shape
        if cols == 0 or rows == 0:
            self.root: Optional[IndexNode] = None
        else:
            lo, hi = cell_bounds(grid)
            self.root = self._build(lo, hi, 0, 0, cols, rows, 0)
        logger.debug("built index over %dx%d cells: %d nodes, depth %d",
                     cols, rows, self._count, self.max_depth())

    # ----- construction -----
    def _build(self, lo: np.ndarray, hi: np.ndarray, x: int, y: int,
               width: int, height: int, depth: int) -> IndexNode:
        self._count += 1
        if width == 1 and height == 1:
            return IndexNode(x, y, 1, 1, float(lo[y, x]), float(hi[y, x]), depth=depth)

        w0 = _split(width)
        h0 = _split(height)
        d = depth + 1
        children = [self._build(lo, hi, x, y, w0, h0, d)]                                # TL
        if width > 1:
            children.append(self._build(lo, hi, x + w0, y, width - w0, h0, d))           # TR
        if height > 1:
            children.append(self._build(lo, hi, x, y + h0, w0, height - h0, d))          # BL
        if width > 1 and height > 1:
            children.append(self._build(lo, hi, x + w0, y + h0, width - w0, height - h0, d))  # BR

        return IndexNode(
            x, y, width, height,
            min(c.lower_bound for c in children),
            max(c.upper_bound for c in children),
            depth=depth,
            children=children,
        )

    # ----- queries -----
    def query_may_cross(self, threshold: float) -> List[CellCoord]:
        """Return every cell that may contain a crossing of `threshold`.

        The result is a superset of the cells whose corners straddle the
        threshold: only subtrees with ``upper_bound < threshold`` are pruned.
        Cells are listed in depth-first [TL, TR, BL, BR] order.
        """
        out: List[CellCoord] = []
        if self.root is None or self.root.upper_bound < threshold:
            return out
        stack: List[IndexNode] = [self.root]
        while stack:
            node = stack.pop()
            if node.children is None:
                out.append(node.origin)
                continue
            # reversed so the TL child is popped first
            stack.extend(c for c in reversed(node.children) if c.upper_bound >= threshold)
        return out

    # ----- traversal / stats -----
    def nodes(self) -> Iterable[IndexNode]:
        stack: List[IndexNode] = [] if self.root is None else [self.root]
        while stack:
            n = stack.pop()
            yield n
            if n.children is not None:
                stack.extend(reversed(n.children))

    def leaf_nodes(self) -> List[IndexNode]:
        """Return all leaves (one per cell) in depth-first order."""
        return [n for n in self.nodes() if n.children is None]

    def count_nodes(self) -> int:
        return self._count

    def max_depth(self) -> int:
        return max((n.depth for n in self.nodes()), default=0)


def build_index(grid: Grid) -> SpatialIndex:
    """Build the spatial index for `grid`; done once and reused for every threshold."""
    return SpatialIndex(grid)


__all__ = ["IndexNode", "SpatialIndex", "build_index", "cell_bounds"]


if __name__ == "__main__":  # quick smoke test
    g = Grid(4, 4, np.arange(16, dtype=float))
    index = build_index(g)
    print("nodes:", index.count_nodes(), "leaves:", len(index.leaf_nodes()), "depth:", index.max_depth())
    print("cells that may cross 10:", index.query_may_cross(10.0))
