"""svg.py — serialise isoline layers into an SVG document.

Each polyline becomes a move-to / line-to command run, closed with ``Z`` when
the polyline is a loop. Each layer becomes one ``<path>`` element whose class
names the threshold's position in the input (``threshold_<i>_path``). The
``viewBox`` spans the grid in sample units.
"""
from __future__ import annotations

from pathlib import Path
from typing import List, Sequence

from .extract import IsolineLayer
from .tracer import Polyline


def _num(v: float) -> str:
    return f"{v:.6g}"


def path_commands(path: Polyline) -> List[str]:
    """Return ['M x,y', 'L x,y', ..., optional 'Z'] for one polyline."""
    if not path.points:
        return []
    first, *rest = path.points
    cmds = [f"M{_num(first.x)},{_num(first.y)}"]
    cmds.extend(f"L{_num(p.x)},{_num(p.y)}" for p in rest)
    if path.closed:
        cmds.append("Z")
    return cmds


def layer_path_data(layer: IsolineLayer) -> str:
    """Concatenate the commands of every polyline in `layer`."""
    return " ".join(" ".join(path_commands(p)) for p in layer.paths if p.points)


def layers_to_svg(layers: Sequence[IsolineLayer], width: int, height: int, *,
                  stroke: str = "black", stroke_width: float = 1.0) -> str:
    """Build a standalone SVG document for `layers` over a width × height grid."""
    lines = [f'<svg viewBox="0 0 {width} {height}" xmlns="http://www.w3.org/2000/svg">']
    for i, layer in enumerate(layers):
        lines.append(
            f'\t<path fill="none" stroke="{stroke}" stroke-width="{_num(stroke_width)}" '
            f'class="threshold_{i}_path" data-threshold="{_num(layer.threshold)}" '
            f'd="{layer_path_data(layer)}" />'
        )
    lines.append("</svg>")
    return "\n".join(lines)


def write_svg(path: str | Path, layers: Sequence[IsolineLayer], width: int, height: int,
              **kwargs) -> Path:
    """Write ``layers_to_svg(...)`` to `path` (UTF-8) and return the path."""
    out = Path(path)
    out.write_text(layers_to_svg(layers, width, height, **kwargs) + "\n", encoding="utf-8")
    return out


__all__ = ["path_commands", "layer_path_data", "layers_to_svg", "write_svg"]
