"""domain.py — synthetic scalar fields and grid sampling.

Real inputs come from rasters (see ``raster.py``); for demos and tests it is
handier to sample an analytic field f(x, y) onto a regular grid. Fields are
vectorised with NumPy so a whole lattice is evaluated in one call.

Main entry points
-----------------
- ScalarField2D: callable wrapper around a vectorised f(x, y).
- make_field(name, **kwargs): factory returning a ScalarField2D.
- sample_grid(field, width, height, bounds): evaluate a field into a Grid.
- Built-in fields:
    * gaussian_peak(x, y, x0=0.5, y0=0.5, sigma=0.15, A=1.0)
    * cone(x, y, x0=0.5, y0=0.5, A=1.0, slope=2.0)
    * step_x(x, y, x0=0.5, low=0.0, high=1.0)
    * circle_step(x, y, cx=0.5, cy=0.5, r=0.25, inside=1.0, outside=0.0)
    * saddle(x, y, x0=0.5, y0=0.5, A=1.0)

Default bounds are the unit square (0, 1) × (0, 1). Sample row 0 is y0 of
the bounds, i.e. the grid keeps image orientation (y grows downwards).
"""
from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

import numpy as np

from .grid import Grid

# (x_min, x_max, y_min, y_max)
DEFAULT_BOUNDS: tuple[float, float, float, float] = (0.0, 1.0, 0.0, 1.0)


def _asfloat(a):
    return np.asarray(a, dtype=float)


@dataclass(slots=True)
class ScalarField2D:
    """Lightweight wrapper for a 2D scalar field f(x, y).

    Parameters
    ----------
    func : Callable[[np.ndarray, np.ndarray], np.ndarray]
        Vectorised function that maps (x, y) → f.
    name : str, optional
        Human-readable name for the field (e.g., 'gaussian').
    params : dict, optional
        Parameters used to build the field; kept as metadata.
    """

    func: Callable[[np.ndarray, np.ndarray], np.ndarray]
    name: str = "custom"
    params: Optional[Dict[str, Any]] = None

    def __call__(self, x, y):  # type: ignore[override]
        return self.func(_asfloat(x), _asfloat(y))

    def __repr__(self) -> str:  # pragma: no cover - simple metadata repr
        p = {} if self.params is None else dict(self.params)
        return f"ScalarField2D(name={self.name!r}, params={p})"


# --------------------------
# Built-in scalar fields
# --------------------------

def gaussian_peak(x, y, *, x0: float = 0.5, y0: float = 0.5, sigma: float = 0.15,
                  A: float = 1.0, **_: dict) -> np.ndarray:
    """Gaussian bump, A * exp(-r² / 2σ²). Isolines are concentric circles."""
    X = _asfloat(x)
    Y = _asfloat(y)
    s2 = max(float(sigma) ** 2, np.finfo(float).tiny)
    r2 = (X - x0) ** 2 + (Y - y0) ** 2
    return A * np.exp(-0.5 * r2 / s2)


def cone(x, y, *, x0: float = 0.5, y0: float = 0.5, A: float = 1.0,
         slope: float = 2.0, **_: dict) -> np.ndarray:
    """Linear peak, A - slope * r."""
    X = _asfloat(x)
    Y = _asfloat(y)
    return A - slope * np.hypot(X - x0, Y - y0)


def step_x(x, y, *, x0: float = 0.5, low: float = 0.0, high: float = 1.0,  # noqa: ARG001
           **_: dict) -> np.ndarray:
    """Step across the vertical line x = x0: `low` left of it, `high` from x0 on."""
    X = _asfloat(x)
    Y = _asfloat(y)
    return np.where(X + 0.0 * Y < x0, low, high)


def circle_step(x, y, *, cx: float = 0.5, cy: float = 0.5, r: float = 0.25,
                inside: float = 1.0, outside: float = 0.0, **_: dict) -> np.ndarray:
    """Binary disc of radius r."""
    X = _asfloat(x)
    Y = _asfloat(y)
    return np.where((X - cx) ** 2 + (Y - cy) ** 2 < r ** 2, inside, outside)


def saddle(x, y, *, x0: float = 0.5, y0: float = 0.5, A: float = 1.0, **_: dict) -> np.ndarray:
    """Hyperbolic saddle A * (x-x0) * (y-y0); exercises the ambiguous cells."""
    X = _asfloat(x)
    Y = _asfloat(y)
    return A * (X - x0) * (Y - y0)


# --------------------------
# Factory
# --------------------------

def _filter_kwargs(func: Callable, kwargs: Dict[str, Any]) -> Dict[str, Any]:
    """Return only kwargs accepted by `func` (drop extras)."""
    sig = inspect.signature(func)
    return {k: v for k, v in kwargs.items() if k in sig.parameters}


_FIELDS: Dict[str, tuple[Callable[..., np.ndarray], frozenset]] = {
    "gaussian": (gaussian_peak, frozenset({"gaussian", "gauss", "peak", "gaussian_peak"})),
    "cone": (cone, frozenset({"cone", "pyramid", "radial"})),
    "step_x": (step_x, frozenset({"step_x", "step", "xstep"})),
    "circle_step": (circle_step, frozenset({"circle_step", "disc", "disk", "circle"})),
    "saddle": (saddle, frozenset({"saddle", "hyperbolic"})),
}

FIELD_NAMES = tuple(_FIELDS)


def make_field(name: str, **kwargs) -> ScalarField2D:
    """Create a ScalarField2D by name.

    Parameters
    ----------
    name : str
        One of FIELD_NAMES. Case-insensitive; common aliases are accepted.
    **kwargs
        Passed through to the field function; keys it doesn't take are ignored.
    """
    key = name.strip().lower()
    for canonical, (fn, aliases) in _FIELDS.items():
        if key in aliases:
            params = _filter_kwargs(fn, kwargs)
            func = lambda X, Y, _f=fn, _p=params: _f(X, Y, **_p)  # noqa: E731
            return ScalarField2D(func, name=canonical, params=params)

    raise ValueError(
        f"Unknown field '{name}'. Available: {', '.join(repr(n) for n in FIELD_NAMES)}."
    )


def sample_grid(field: ScalarField2D, width: int, height: int,
                bounds: tuple[float, float, float, float] = DEFAULT_BOUNDS) -> Grid:
    """Evaluate `field` on a width × height lattice spanning `bounds`."""
    if width < 1 or height < 1:
        raise ValueError(f"Invalid lattice size {width}x{height}")
    x0, x1, y0, y1 = bounds
    xs = np.linspace(x0, x1, int(width))
    ys = np.linspace(y0, y1, int(height))
    X, Y = np.meshgrid(xs, ys, indexing="xy")
    Z = np.broadcast_to(field(X, Y), X.shape)
    return Grid.from_array(Z)


__all__ = [
    "ScalarField2D",
    "DEFAULT_BOUNDS",
    "FIELD_NAMES",
    "gaussian_peak",
    "cone",
    "step_x",
    "circle_step",
    "saddle",
    "make_field",
    "sample_grid",
]
