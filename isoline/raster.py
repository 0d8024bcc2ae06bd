"""raster.py — decode a raster file into a Grid.

Anything Pillow can open works (single-band float/int TIFFs from DEM
exports, 8/16-bit greyscale PNGs, RGB images). Multi-band images are reduced
to one band, selected by `band`.
"""
from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
from PIL import Image

from .grid import Grid

logger = logging.getLogger(__name__)


def image_to_array(img: Image.Image, band: int = 0) -> np.ndarray:
    """Return the samples of `img` as a float64 (height, width) array."""
    arr = np.asarray(img, dtype=float)
    if arr.ndim == 3:
        if not 0 <= band < arr.shape[2]:
            raise ValueError(f"band {band} out of range for {arr.shape[2]}-band image")
        arr = arr[:, :, band]
    if arr.ndim != 2:
        raise ValueError(f"Unsupported raster shape {arr.shape}")
    return arr


def load_grid(path: str | Path, band: int = 0) -> Grid:
    """Open `path` with Pillow and return its samples as a Grid."""
    with Image.open(path) as img:
        logger.debug("decoding %s: mode=%s size=%s", path, img.mode, img.size)
        arr = image_to_array(img, band=band)
    return Grid.from_array(arr)


__all__ = ["image_to_array", "load_grid"]
