"""run_demo.py — command-line driver for isoline extraction.

Examples
--------
Contour a synthetic Gaussian peak at three levels and show grid + isolines:

    python run_demo.py --field gaussian --size 64 64 --thresholds 0.25 0.5 0.75 --plot grid isolines

Contour a DEM GeoTIFF with 9 evenly spaced levels and write an SVG:

    python run_demo.py --input dem.tif --num-lines 9 --svg dem_contours.svg

Notes
-----
- If neither --thresholds nor --num-lines is given, 5 evenly spaced levels
  between the grid's min and max are used.
- --workers 1 disables the thread pool.
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import List

from isoline.domain import DEFAULT_BOUNDS, FIELD_NAMES, make_field, sample_grid
from isoline.extract import evenly_spaced_thresholds, extract
from isoline.quadtree import build_index
from isoline.raster import load_grid
from isoline.svg import write_svg
from isoline.tracer import DEFAULT_PRECISION

logger = logging.getLogger("run_demo")

PLOT_CHOICES = ["grid", "index", "isolines"]


def _add_source_args(parser: argparse.ArgumentParser) -> None:
    g = parser.add_argument_group("source")
    g.add_argument("--input", type=str, default=None,
                   help="Raster file (TIFF/PNG/...); overrides --field")
    g.add_argument("--band", type=int, default=0, help="Band of a multi-band raster")
    g.add_argument("--field", type=str, default="gaussian",
                   help="Synthetic field: " + ", ".join(FIELD_NAMES))
    g.add_argument("--size", type=int, nargs=2, default=[64, 64], metavar=("W", "H"),
                   help="Synthetic grid size in samples")
    g.add_argument("--bounds", type=float, nargs=4, default=list(DEFAULT_BOUNDS),
                   metavar=("x0", "x1", "y0", "y1"), help="Field domain")
    # Common params (only some apply depending on field)
    g.add_argument("--x0", type=float, default=0.5)
    g.add_argument("--y0", type=float, default=0.5)
    g.add_argument("--sigma", type=float, default=0.15)
    g.add_argument("--A", type=float, default=1.0)
    g.add_argument("--cx", type=float, default=0.5)
    g.add_argument("--cy", type=float, default=0.5)
    g.add_argument("--r", type=float, default=0.25)


def _add_extract_args(parser: argparse.ArgumentParser) -> None:
    g = parser.add_argument_group("extract")
    levels = g.add_mutually_exclusive_group()
    levels.add_argument("--thresholds", type=float, nargs="+", default=None,
                        help="Explicit threshold values")
    levels.add_argument("--num-lines", type=int, default=None,
                        help="Number of evenly spaced thresholds")
    g.add_argument("--workers", type=int, default=None,
                   help="Worker threads (default: one per CPU, capped at #thresholds)")
    g.add_argument("--precision", type=float, default=DEFAULT_PRECISION,
                   help="Point matching precision")


def _add_output_args(parser: argparse.ArgumentParser) -> None:
    g = parser.add_argument_group("output")
    g.add_argument("--svg", type=str, default=None, help="Write isolines to this SVG file")
    g.add_argument("--plot", type=str, nargs="*", default=[],
                   choices=PLOT_CHOICES, help="What to plot")
    g.add_argument("--save", type=str, default=None, help="Save figure to path")
    g.add_argument("-v", "--verbose", action="store_true", help="Debug logging")


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def main(argv: List[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Isoline extraction demo")
    _add_source_args(parser)
    _add_extract_args(parser)
    _add_output_args(parser)

    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    if args.workers is not None and args.workers < 1:
        parser.error("--workers must be >= 1")
    if args.num_lines is not None and args.num_lines < 1:
        parser.error("--num-lines must be >= 1")

    # Grid
    if args.input:
        grid = load_grid(args.input, band=args.band)
        logger.info("Loaded %s: %dx%d", args.input, grid.width, grid.height)
    else:
        field_kwargs = dict(x0=args.x0, y0=args.y0, sigma=args.sigma, A=args.A,
                            cx=args.cx, cy=args.cy, r=args.r)
        try:
            field = make_field(args.field, **field_kwargs)
        except ValueError as exc:
            parser.error(str(exc))
        grid = sample_grid(field, args.size[0], args.size[1], bounds=tuple(args.bounds))
        logger.info("Sampled field %r on %dx%d grid", field.name, grid.width, grid.height)

    # Thresholds
    if args.thresholds is not None:
        thresholds = args.thresholds
    else:
        thresholds = evenly_spaced_thresholds(grid, args.num_lines or 5)

    index = build_index(grid)
    layers = extract(grid, index, thresholds, workers=args.workers, precision=args.precision)

    if args.svg:
        out = write_svg(args.svg, layers, grid.width, grid.height)
        logger.info("Wrote %d layers to %s", len(layers), out)

    if args.plot:
        import matplotlib.pyplot as plt
        from isoline.visualize import plot_grid, plot_index, plot_layers

        nplots = len(args.plot)
        fig, axes = plt.subplots(1, nplots, figsize=(6 * nplots, 6), squeeze=False)
        for k, what in enumerate(args.plot):
            ax = axes[0, k]
            if what == "grid":
                plot_grid(grid, ax=ax)
            elif what == "index":
                plot_index(index, ax=ax, threshold=thresholds[0])
            elif what == "isolines":
                plot_grid(grid, ax=ax, cmap="Greys", colorbar=False)
                plot_layers(layers, ax=ax, bounds=(grid.width, grid.height))
        fig.tight_layout()
        if args.save:
            fig.savefig(args.save, dpi=200, bbox_inches="tight")
            logger.info("Saved figure to %s", args.save)
        else:
            plt.show()

    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
