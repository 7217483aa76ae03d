from __future__ import annotations

from functools import lru_cache
import math
from typing import Sequence

import numpy as np

from rusplot.raster.canvas import RGBA, blend_region


def stroke_subpaths(dst: np.ndarray, subpaths: Sequence[np.ndarray], color: RGBA, width: float = 1.0) -> None:
    """Stroke each `(k, 2)` pixel-space subpath with a round brush.

    Subpaths are never joined to each other. A single-point subpath leaves a
    round dot, the way a round line cap renders a zero-length stroke. Coverage
    is accumulated first so overlapping brush stamps blend exactly once.
    """
    if not subpaths:
        return
    coverage = np.zeros(dst.shape[:2], dtype=bool)
    brush = _disc_brush(float(width))
    for path in subpaths:
        if path.shape[0] == 0:
            continue
        pts = np.rint(path).astype(np.int64)
        if pts.shape[0] == 1:
            _stamp(coverage, int(pts[0, 0]), int(pts[0, 1]), brush)
            continue
        for i in range(pts.shape[0] - 1):
            _rasterize_segment(coverage, int(pts[i, 0]), int(pts[i, 1]), int(pts[i + 1, 0]), int(pts[i + 1, 1]), brush)
    blend_region(dst, color, coverage)


def _rasterize_segment(coverage: np.ndarray, x0: int, y0: int, x1: int, y1: int, brush: np.ndarray) -> None:
    dx = abs(x1 - x0)
    sx = 1 if x0 < x1 else -1
    dy = -abs(y1 - y0)
    sy = 1 if y0 < y1 else -1
    err = dx + dy

    while True:
        _stamp(coverage, x0, y0, brush)
        if x0 == x1 and y0 == y1:
            break
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x0 += sx
        if e2 <= dx:
            err += dx
            y0 += sy


def _stamp(coverage: np.ndarray, x: int, y: int, brush: np.ndarray) -> None:
    r = brush.shape[0] // 2
    h, w = coverage.shape
    x0, y0 = x - r, y - r
    x1, y1 = x + r + 1, y + r + 1
    cx0, cy0 = max(0, x0), max(0, y0)
    cx1, cy1 = min(w, x1), min(h, y1)
    if cx1 <= cx0 or cy1 <= cy0:
        return
    patch = brush[cy0 - y0 : cy1 - y0, cx0 - x0 : cx1 - x0]
    np.logical_or(coverage[cy0:cy1, cx0:cx1], patch, out=coverage[cy0:cy1, cx0:cx1])


@lru_cache(maxsize=32)
def _disc_brush(width: float) -> np.ndarray:
    radius = max(0.5, width / 2.0)
    r = int(math.ceil(radius)) if width > 1.0 else 0
    offsets = np.arange(-r, r + 1)
    dy, dx = np.meshgrid(offsets, offsets, indexing="ij")
    brush = (dx * dx + dy * dy) <= radius * radius + 0.5
    brush.flags.writeable = False
    return brush
