"""Pytest configuration and shared grids for isoline tests."""

import sys
from pathlib import Path

import numpy as np
import pytest

# Add repository root to path for imports
root_path = Path(__file__).parent.parent
sys.path.insert(0, str(root_path))

from isoline.grid import Grid  # noqa: E402

PEAK_8X8 = [
    1, 2, 3, 4, 4, 3, 2, 1,
    2, 3, 4, 5, 5, 4, 3, 2,
    3, 4, 5, 6, 6, 5, 4, 3,
    4, 5, 6, 8, 8, 6, 5, 4,
    4, 5, 6, 8, 8, 6, 5, 4,
    3, 4, 5, 6, 6, 5, 4, 3,
    2, 3, 4, 5, 5, 4, 3, 2,
    1, 2, 3, 4, 4, 3, 2, 1,
]

STEPPED_8X4 = [
    1, 2, 5, 6, 2, 2, 2, 2,
    3, 4, 7, 8, 2, 2, 2, 2,
    3, 3, 3, 3, 4, 4, 4, 4,
    3, 3, 3, 3, 4, 4, 4, 4,
]


@pytest.fixture
def peak_grid():
    """8x8 grid with a single radially symmetric peak of height 8."""
    return Grid(8, 8, PEAK_8X8)


@pytest.fixture
def four_peaks_grid():
    """16x16 grid made of the 8x8 peak tiled 2x2."""
    tile = np.array(PEAK_8X8, dtype=float).reshape(8, 8)
    return Grid.from_array(np.tile(tile, (2, 2)))


@pytest.fixture
def stepped_grid():
    """8x4 grid with a few distinct plateaus."""
    return Grid(8, 4, STEPPED_8X4)


def random_grids(count=12, seed=0):
    """Yield (seed, Grid) pairs of random sizes and values for property checks."""
    rng = np.random.default_rng(seed)
    for i in range(count):
        w = int(rng.integers(2, 18))
        h = int(rng.integers(2, 18))
        yield i, Grid.from_array(rng.normal(size=(h, w)))
