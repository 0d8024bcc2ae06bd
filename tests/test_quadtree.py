"""Tests for the range quadtree."""

import itertools

import numpy as np
import pytest

from isoline.grid import Grid
from isoline.quadtree import IndexNode, build_index, cell_bounds

from conftest import random_grids


class TestCellBounds:
    """Tests for vectorised per-cell bounds."""

    def test_three_by_three(self):
        """Each cell's bounds are the min/max of its four corners."""
        grid = Grid(3, 3, range(1, 10))
        lo, hi = cell_bounds(grid)
        assert lo.tolist() == [[1, 2], [4, 5]]
        assert hi.tolist() == [[5, 6], [8, 9]]


class TestBuild:
    """Tests for index construction."""

    def test_even_tree(self):
        """2x2 cells split into four single-cell leaves."""
        index = build_index(Grid(3, 3, range(1, 10)))
        root = index.root
        assert (root.lower_bound, root.upper_bound) == (1, 9)
        assert len(root.children) == 4
        tl, tr, bl, br = root.children
        assert [c.origin for c in root.children] == [(0, 0), (1, 0), (0, 1), (1, 1)]
        assert all(c.is_leaf() for c in root.children)
        assert (tl.lower_bound, tl.upper_bound) == (1, 5)
        assert (tr.lower_bound, tr.upper_bound) == (2, 6)
        assert (bl.lower_bound, bl.upper_bound) == (4, 8)
        assert (br.lower_bound, br.upper_bound) == (5, 9)

    def test_uneven_tree(self):
        """Odd extents split at ceil(extent/2): children differ by one cell."""
        index = build_index(Grid(4, 4, range(16)))
        tl, tr, bl, br = index.root.children
        assert (tl.origin, tl.width, tl.height) == ((0, 0), 2, 2)
        assert (tr.origin, tr.width, tr.height) == ((2, 0), 1, 2)
        assert (bl.origin, bl.width, bl.height) == ((0, 2), 2, 1)
        assert (br.origin, br.width, br.height) == ((2, 2), 1, 1)
        assert br.is_leaf()

    def test_single_row_of_cells(self):
        """A one-cell-high region only splits horizontally."""
        index = build_index(Grid(5, 2, range(10)))
        root = index.root
        assert (root.width, root.height) == (4, 1)
        assert [(c.origin, c.width) for c in root.children] == [((0, 0), 2), ((2, 0), 2)]

    def test_degenerate_grid(self):
        """Grids without complete cells give an empty index."""
        index = build_index(Grid(1, 6, range(6)))
        assert index.root is None
        assert index.query_may_cross(0.0) == []
        assert index.leaf_nodes() == []
        assert index.max_depth() == 0

    @pytest.mark.parametrize("w,h", [(2, 2), (3, 7), (9, 4), (17, 17), (8, 8)])
    def test_leaves_tile_cells(self, w, h):
        """Every cell is covered by exactly one leaf."""
        index = build_index(Grid(w, h, np.arange(w * h)))
        leaves = [leaf.origin for leaf in index.leaf_nodes()]
        assert len(leaves) == (w - 1) * (h - 1)
        assert set(leaves) == set(itertools.product(range(w - 1), range(h - 1)))
        assert all(leaf.width == 1 and leaf.height == 1 for leaf in index.leaf_nodes())
        assert index.count_nodes() == sum(1 for _ in index.nodes())

    def test_bounds_are_exact(self):
        """Internal bounds equal the min/max over their leaves, never wider."""
        for _, grid in random_grids(count=8, seed=3):
            index = build_index(grid)

            def check(node: IndexNode):
                if node.is_leaf():
                    return node.lower_bound, node.upper_bound
                ranges = [check(c) for c in node.children]
                assert node.lower_bound == min(r[0] for r in ranges)
                assert node.upper_bound == max(r[1] for r in ranges)
                return node.lower_bound, node.upper_bound

            check(index.root)


class TestQuery:
    """Tests for query_may_cross."""

    def test_prunes_cells_below(self):
        """Only cells whose maximum reaches the threshold are returned."""
        index = build_index(Grid(3, 3, range(1, 10)))
        assert index.query_may_cross(6) == [(1, 0), (0, 1), (1, 1)]
        assert index.query_may_cross(9) == [(1, 1)]
        assert index.query_may_cross(9.5) == []

    def test_keeps_cells_entirely_above(self):
        """Pruning is one-sided: cells above the threshold are still candidates."""
        index = build_index(Grid(3, 3, range(1, 10)))
        assert index.query_may_cross(0) == [(0, 0), (1, 0), (0, 1), (1, 1)]

    def test_peak_candidates(self, peak_grid):
        """Threshold 7 on the peak leaves only the 3x3 block around the summit."""
        cells = build_index(peak_grid).query_may_cross(7)
        assert sorted(cells) == sorted(itertools.product(range(2, 5), range(2, 5)))

    def test_no_false_negatives(self):
        """The candidate set always contains every straddling cell."""
        for _, grid in random_grids(count=15, seed=11):
            index = build_index(grid)
            lo, hi = cell_bounds(grid)
            for t in np.linspace(grid.min() - 0.1, grid.max() + 0.1, 9):
                got = index.query_may_cross(t)
                assert len(got) == len(set(got))
                got = set(got)
                rows, cols = lo.shape
                straddling = {(x, y) for y in range(rows) for x in range(cols)
                              if lo[y, x] <= t <= hi[y, x]}
                reaching = {(x, y) for y in range(rows) for x in range(cols) if hi[y, x] >= t}
                assert straddling <= got
                assert got == reaching
