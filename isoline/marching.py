"""marching.py — per-cell marching-squares classification.

For one cell and one threshold, decide which cell edges the isoline crosses,
where along each edge it crosses (linear interpolation), and how the crossings
pair up into directed fragments.

Conventions
-----------
- Image coordinates: x grows to the right, y grows downwards.
- Corner order is [TL, TR, BL, BR]; the 4-bit code is ``0b<tl><tr><bl><br>``
  where a bit is 1 when the corner is present and ``>= threshold``.
- Fragments are directed so that the above-threshold side lies to the right
  of start → end. In image coordinates this walks closed loops clockwise
  around high ground.
- ``exit_direction`` is the edge the fragment ends on, which is also the
  direction of the neighbouring cell holding the continuation.

Each edge is interpolated in a fixed direction (left→right for Top/Bottom,
top→bottom for Left/Right), so two cells sharing an edge compute the same
crossing point.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Dict, Iterable, List, NamedTuple, Optional, Sequence

from .grid import Grid

TL, TR, BL, BR = 0, 1, 2, 3


class Point(NamedTuple):
    x: float
    y: float


class Direction(enum.Enum):
    """Compass direction of a cell edge and of the neighbour across it."""

    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @property
    def dx(self) -> int:
        return self.value[0]

    @property
    def dy(self) -> int:
        return self.value[1]

    def step(self, cell: tuple[int, int]) -> tuple[int, int]:
        """Coordinate of the neighbouring cell in this direction."""
        return (cell[0] + self.dx, cell[1] + self.dy)


UP, DOWN, LEFT, RIGHT = Direction.UP, Direction.DOWN, Direction.LEFT, Direction.RIGHT

# Corner pair (a, b) interpolated along each edge.
EDGE_CORNERS: Dict[Direction, tuple[int, int]] = {
    UP: (TL, TR),
    DOWN: (BL, BR),
    LEFT: (TL, BL),
    RIGHT: (TR, BR),
}

# Unambiguous codes -> (start edge, end edge).
SEGMENT_TABLE: Dict[int, tuple[Direction, Direction]] = {
    0b0001: (DOWN, RIGHT),
    0b0010: (LEFT, DOWN),
    0b0011: (LEFT, RIGHT),
    0b0100: (RIGHT, UP),
    0b0101: (DOWN, UP),
    0b0111: (LEFT, UP),
    0b1000: (UP, LEFT),
    0b1010: (UP, DOWN),
    0b1011: (UP, RIGHT),
    0b1100: (RIGHT, LEFT),
    0b1101: (DOWN, LEFT),
    0b1110: (RIGHT, DOWN),
}

# Saddle codes -> (pairs when the centre is high, pairs when it is low).
SADDLE_TABLE: Dict[int, tuple[tuple[tuple[Direction, Direction], ...], tuple[tuple[Direction, Direction], ...]]] = {
    0b0110: (((LEFT, UP), (RIGHT, DOWN)), ((RIGHT, UP), (LEFT, DOWN))),
    0b1001: (((UP, RIGHT), (DOWN, LEFT)), ((DOWN, RIGHT), (UP, LEFT))),
}

EMPTY_CODES = frozenset({0b0000, 0b1111})


@dataclass(frozen=True, slots=True)
class EdgeFragment:
    """One directed isoline segment inside a single cell."""

    start: Point
    end: Point
    cell: tuple[int, int]
    exit_direction: Direction


def cell_code(corners: Sequence[Optional[float]], threshold: float) -> int:
    """4-bit code for corners ordered [TL, TR, BL, BR]. Absent corners count as 0."""
    code = 0
    for v in corners:
        code = (code << 1) | (1 if (v is not None and v >= threshold) else 0)
    return code


def edge_fraction(threshold: float, va: Optional[float], vb: Optional[float]) -> float:
    """Fraction of the way from corner a to corner b where `threshold` is crossed.

    An absent ``a`` puts the crossing on ``b`` (1.0); an absent ``b`` puts it on
    ``a`` (0.0). Exact hits on either sample short-circuit to 0.0 / 1.0.
    """
    if va is None:
        return 1.0
    if vb is None:
        return 0.0
    if threshold == va:
        return 0.0
    if threshold == vb:
        return 1.0
    return (threshold - va) / (vb - va)


def _edge_point(cell: tuple[int, int], edge: Direction, t: float) -> Point:
    x, y = cell
    if edge is UP:
        return Point(x + t, float(y))
    if edge is DOWN:
        return Point(x + t, float(y + 1))
    if edge is LEFT:
        return Point(float(x), y + t)
    return Point(float(x + 1), y + t)


def classify(grid: Grid, cell: tuple[int, int], threshold: float) -> List[EdgeFragment]:
    """Return the 0, 1 or 2 fragments of the isoline at `threshold` in `cell`."""
    corners = grid.cell_corners(*cell)
    code = cell_code(corners, threshold)
    if code in EMPTY_CODES:
        return []

    if code in SEGMENT_TABLE:
        pairs: Iterable[tuple[Direction, Direction]] = (SEGMENT_TABLE[code],)
    elif code in SADDLE_TABLE:
        present = [v for v in corners if v is not None]
        mean = sum(present) / len(present)
        high, low = SADDLE_TABLE[code]
        pairs = high if mean > threshold else low
    else:
        raise AssertionError(f"unhandled marching-squares code {code:#06b} for cell {cell}")

    def crossing(edge: Direction) -> Point:
        a, b = EDGE_CORNERS[edge]
        return _edge_point(cell, edge, edge_fraction(threshold, corners[a], corners[b]))

    return [EdgeFragment(crossing(s), crossing(e), cell, e) for s, e in pairs]


def classify_cells(
    grid: Grid, cells: Iterable[tuple[int, int]], threshold: float
) -> Dict[tuple[int, int], List[EdgeFragment]]:
    """Classify each cell; return fragments grouped by cell, empty cells omitted.

    The mapping keeps the order in which `cells` were given.
    """
    grouped: Dict[tuple[int, int], List[EdgeFragment]] = {}
    for cell in cells:
        frags = classify(grid, cell, threshold)
        if frags:
            grouped[cell] = frags
    return grouped


__all__ = [
    "Point",
    "Direction",
    "EdgeFragment",
    "cell_code",
    "edge_fraction",
    "classify",
    "classify_cells",
]
