from __future__ import annotations

import numpy as np


RGBA = tuple[int, int, int, int]


def new_canvas(width: int, height: int, color: RGBA = (0, 0, 0, 255)) -> np.ndarray:
    if width <= 0 or height <= 0:
        raise ValueError("canvas width/height must be > 0")
    canvas = np.empty((height, width, 4), dtype=np.uint8)
    canvas[:, :] = np.asarray(color, dtype=np.uint8)
    return canvas


def fill(dst: np.ndarray, color: RGBA) -> None:
    dst[:, :] = np.asarray(color, dtype=np.uint8)


def blend_region(dst: np.ndarray, color: RGBA, mask: np.ndarray | None = None) -> None:
    """Source-over blend a flat colour into `dst`, optionally through a boolean mask."""
    a = color[3] / 255.0
    if a <= 0.0:
        return
    src = np.asarray(color[0:3], dtype=np.float32)
    if mask is None:
        if a >= 1.0:
            dst[:, :, :3] = src.astype(np.uint8)
        else:
            dst[:, :, :3] = (src * a + dst[:, :, :3].astype(np.float32) * (1.0 - a)).astype(np.uint8)
        dst[:, :, 3] = 255
        return
    if not np.any(mask):
        return
    current = dst[mask][:, :3].astype(np.float32)
    blended = (src * a + current * (1.0 - a)).astype(np.uint8)
    dst[mask, :3] = blended
    dst[mask, 3] = 255


def fill_rect(dst: np.ndarray, x0: int, y0: int, x1: int, y1: int, color: RGBA) -> None:
    """Fill the half-open pixel rectangle [x0, x1) x [y0, y1)."""
    left = max(0, min(int(x0), int(x1)))
    right = min(dst.shape[1], max(int(x0), int(x1)))
    top = max(0, min(int(y0), int(y1)))
    bottom = min(dst.shape[0], max(int(y0), int(y1)))
    if right <= left or bottom <= top:
        return
    blend_region(dst[top:bottom, left:right], color)

