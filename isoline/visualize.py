"""visualize.py — matplotlib helpers for grids, the index, and isolines.

- plot_grid(grid, ax=None, cmap="terrain")
    Show the raw samples as an image (sample centres on integer coordinates).

- plot_index(index, ax=None, threshold=None, max_depth=None)
    Wireframe of index nodes; with a threshold, shade the candidate cells the
    index returns for it.

- plot_layers(layers, ax=None, cmap="viridis")
    Draw every polyline of every layer, one colour per threshold.

All plots use image orientation (y grows downwards) so they line up with the
SVG output.
"""
from __future__ import annotations

from typing import List, Optional, Sequence

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.collections import LineCollection, PatchCollection
from matplotlib.patches import Rectangle
from matplotlib.colors import Normalize

from .extract import IsolineLayer
from .grid import Grid
from .quadtree import SpatialIndex


# --------------------------
# Helpers
# --------------------------
def _ax(ax=None):
    if ax is None:
        fig, ax = plt.subplots(figsize=(6, 6))
    return ax


def _set_equal_box(ax, width: float, height: float):
    ax.set_aspect("equal", adjustable="box")
    ax.set_xlim(-0.5, width - 0.5)
    ax.set_ylim(height - 0.5, -0.5)


# --------------------------
# Public plotting functions
# --------------------------
def plot_grid(grid: Grid, ax=None, *, cmap: str = "terrain", colorbar: bool = True):
    """Image of the grid samples."""
    ax = _ax(ax)
    im = ax.imshow(grid.data, cmap=cmap, origin="upper", interpolation="nearest")
    if colorbar:
        plt.colorbar(im, ax=ax, label="sample")
    _set_equal_box(ax, grid.width, grid.height)
    ax.set_title("Grid samples")
    ax.set_xlabel("x")
    ax.set_ylabel("y")
    return ax


def plot_index(
    index: SpatialIndex,
    ax=None,
    *,
    threshold: Optional[float] = None,
    max_depth: Optional[int] = None,
    linewidth: float = 0.5,
):
    """Wireframe of index nodes (down to `max_depth`), optionally shading candidates."""
    ax = _ax(ax)
    grid = index.grid
    lines = []
    for n in index.nodes():
        if max_depth is not None and n.depth > max_depth:
            continue
        x0, y0 = n.x, n.y
        x1, y1 = n.x + n.width, n.y + n.height
        lines.extend([
            [(x0, y0), (x1, y0)],  # top
            [(x0, y1), (x1, y1)],  # bottom
            [(x0, y0), (x0, y1)],  # left
            [(x1, y0), (x1, y1)],  # right
        ])
    if lines:
        ax.add_collection(LineCollection(lines, linewidths=linewidth, colors="0.4"))

    if threshold is not None:
        patches: List[Rectangle] = [Rectangle(c, 1, 1) for c in index.query_may_cross(threshold)]
        pc = PatchCollection(patches, facecolor="tab:orange", alpha=0.4, linewidths=0.0)
        ax.add_collection(pc)
        ax.set_title(f"Index candidates for T={threshold:g} ({len(patches)} cells)")
    else:
        ax.set_title("Range quadtree (wireframe)")

    _set_equal_box(ax, grid.width, grid.height)
    ax.set_xlabel("x")
    ax.set_ylabel("y")
    return ax


def plot_layers(
    layers: Sequence[IsolineLayer],
    ax=None,
    *,
    cmap: str = "viridis",
    linewidth: float = 1.0,
    bounds: Optional[tuple[int, int]] = None,
):
    """Draw each layer's polylines; closed paths are drawn back to their start."""
    ax = _ax(ax)
    if not layers:
        return ax
    levels = np.array([layer.threshold for layer in layers], dtype=float)
    vmin, vmax = float(levels.min()), float(levels.max())
    if vmin == vmax:
        vmax = vmin + 1e-12
    norm = Normalize(vmin=vmin, vmax=vmax)
    colormap = plt.get_cmap(cmap)

    for layer in layers:
        segs = []
        for p in layer.paths:
            pts = [(q.x, q.y) for q in p.points]
            if p.closed and pts and pts[0] != pts[-1]:
                pts.append(pts[0])
            segs.append(pts)
        if segs:
            ax.add_collection(LineCollection(segs, linewidths=linewidth,
                                             colors=[colormap(norm(layer.threshold))],
                                             label=f"T={layer.threshold:g}"))
    if bounds is not None:
        _set_equal_box(ax, *bounds)
    else:
        ax.autoscale_view()
        ax.set_aspect("equal", adjustable="box")
        if not ax.yaxis_inverted():
            ax.invert_yaxis()
    ax.set_title("Isolines")
    ax.set_xlabel("x")
    ax.set_ylabel("y")
    return ax


__all__ = ["plot_grid", "plot_index", "plot_layers"]
