"""tracer.py — stitch per-cell fragments into polylines.

Starting from an unvisited fragment, follow ``exit_direction`` into the
neighbouring cell and look there for the fragment whose start coincides with
the current end point. The walk stops when

1. the neighbour lies outside the grid (or holds no matching fragment):
   the path is open;
2. the matching fragment was already visited: the path is closed if that
   fragment is the path's own seed, otherwise it is an open path that ran
   into territory traced earlier.

Seeds are taken from chain heads (fragments nothing leads into) first, then
from whatever is left, which can only be loops. Every fragment ends up in
exactly one path. A path holds ``fragments + 1``
points: the seed contributes its start and end, every later fragment its end.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Mapping, Optional, Sequence

from .marching import EdgeFragment, Point

logger = logging.getLogger(__name__)

DEFAULT_PRECISION = 1e-4


@dataclass(slots=True)
class Polyline:
    """Ordered isoline points; ``closed`` marks a loop back to the first point."""

    points: List[Point] = field(default_factory=list)
    closed: bool = False

    def __len__(self) -> int:
        return len(self.points)


def quantize(p: Point, precision: float = DEFAULT_PRECISION) -> tuple[int, int]:
    """Integer key for `p`; two points are equal iff their keys are equal."""
    return (round(p.x / precision), round(p.y / precision))


def _find_successor(
    candidates: Sequence[EdgeFragment],
    key: tuple[int, int],
    visited: set,
    precision: float,
) -> Optional[EdgeFragment]:
    match = None
    for frag in candidates:
        if quantize(frag.start, precision) != key:
            continue
        if id(frag) not in visited:
            return frag
        if match is None:
            match = frag
    return match


def _seed_order(
    fragments: Mapping[tuple[int, int], Sequence[EdgeFragment]],
    heads_first: bool,
    precision: float,
) -> List[EdgeFragment]:
    ordered = [f for frags in fragments.values() for f in frags]
    if not heads_first:
        return ordered
    # (cell, start) pairs that some fragment leads into
    entered = {(g.exit_direction.step(g.cell), quantize(g.end, precision)) for g in ordered}
    heads = [f for f in ordered if (f.cell, quantize(f.start, precision)) not in entered]
    return heads + ordered


def trace(
    fragments: Mapping[tuple[int, int], Sequence[EdgeFragment]],
    *,
    width: Optional[int] = None,
    height: Optional[int] = None,
    precision: float = DEFAULT_PRECISION,
    heads_first: bool = True,
) -> List[Polyline]:
    """Link the fragments of one threshold into polylines.

    Parameters
    ----------
    fragments : mapping
        Fragments grouped by cell coordinate, as built by ``classify_cells``.
    width, height : int, optional
        Cell-domain size. A step outside ``[0, width) × [0, height)`` ends a
        path. When omitted, any cell missing from `fragments` ends it.
    precision : float
        Quantisation step for matching end points to start points.
    heads_first : bool
        Seed paths from fragments nothing leads into before the rest, so open
        chains come out whole instead of split where a later seed runs into
        them. With False, seeds follow the mapping's iteration order.
    """
    if precision <= 0:
        raise ValueError(f"precision must be positive, got {precision}")

    visited: set = set()
    paths: List[Polyline] = []

    for seed in _seed_order(fragments, heads_first, precision):
        if id(seed) in visited:
            continue
        visited.add(id(seed))
        path = Polyline([seed.start, seed.end])
        current = seed
        while True:
            nx, ny = current.exit_direction.step(current.cell)
            if width is not None and height is not None and not (0 <= nx < width and 0 <= ny < height):
                break
            candidates = fragments.get((nx, ny), ())
            nxt = _find_successor(candidates, quantize(current.end, precision), visited, precision)
            if nxt is None:
                if candidates:
                    logger.debug("no continuation for %s in cell %s", current.end, (nx, ny))
                break
            if id(nxt) in visited:
                path.closed = nxt is seed
                break
            visited.add(id(nxt))
            path.points.append(nxt.end)
            current = nxt
        paths.append(path)

    return paths


__all__ = ["DEFAULT_PRECISION", "Polyline", "quantize", "trace"]
