from __future__ import annotations

import io
from typing import Literal

import numpy as np
from PIL import Image

from rusplot.raster.canvas import RGBA, fill, fill_rect, new_canvas
from rusplot.raster.draw_lines import stroke_subpaths
from rusplot.raster.draw_text import DEFAULT_FONT_FAMILY, draw_text, text_size


HAlign = Literal["left", "center", "right"]
VAlign = Literal["top", "middle", "bottom"]


class RasterSurface:
    """RGBA drawing surface with canvas-style path, rect and text primitives."""

    def __init__(
        self,
        width: int,
        height: int,
        background: RGBA = (0, 0, 0, 255),
        *,
        font_family: str = DEFAULT_FONT_FAMILY,
    ) -> None:
        self._rgba = new_canvas(width, height, color=background)
        self.font_family = font_family
        self._subpaths: list[list[tuple[float, float]]] = []

    @property
    def width(self) -> int:
        return int(self._rgba.shape[1])

    @property
    def height(self) -> int:
        return int(self._rgba.shape[0])

    @property
    def rgba(self) -> np.ndarray:
        """Live pixel buffer; use snapshot() for a stable copy."""
        return self._rgba

    def resize(self, width: int, height: int, background: RGBA = (0, 0, 0, 255)) -> None:
        if (width, height) == (self.width, self.height):
            return
        self._rgba = new_canvas(width, height, color=background)
        self._subpaths = []

    def clear(self, color: RGBA) -> None:
        fill(self._rgba, color)
        self._subpaths = []

    def fill_rect(self, x: float, y: float, width: float, height: float, color: RGBA) -> None:
        x0 = int(round(x))
        y0 = int(round(y))
        fill_rect(self._rgba, x0, y0, x0 + int(round(width)), y0 + int(round(height)), color)

    def begin_path(self) -> None:
        self._subpaths = []

    def move_to(self, x: float, y: float) -> None:
        self._subpaths.append([(float(x), float(y))])

    def line_to(self, x: float, y: float) -> None:
        if not self._subpaths:
            self.move_to(x, y)
            return
        self._subpaths[-1].append((float(x), float(y)))

    def subpath_count(self) -> int:
        return len(self._subpaths)

    def stroke(self, color: RGBA, width: float = 1.0) -> None:
        paths = [np.asarray(sp, dtype=np.float64) for sp in self._subpaths if sp]
        stroke_subpaths(self._rgba, paths, color, width)

    def measure_text(self, text: str, font_px: float, *, rotate_deg: int = 0) -> tuple[int, int]:
        return text_size(text, font_family=self.font_family, font_size_px=font_px, rotate_deg=rotate_deg)

    def fill_text(
        self,
        x: float,
        y: float,
        text: str,
        color: RGBA,
        *,
        font_px: float,
        align: HAlign = "left",
        baseline: VAlign = "top",
        background: RGBA | None = None,
        background_pad: int = 0,
        rotate_deg: int = 0,
    ) -> tuple[int, int, int, int]:
        w, h = self.measure_text(text, font_px, rotate_deg=rotate_deg)
        left = x
        if align == "center":
            left = x - w / 2.0
        elif align == "right":
            left = x - w
        top = y
        if baseline == "middle":
            top = y - h / 2.0
        elif baseline == "bottom":
            top = y - h
        return draw_text(
            self._rgba,
            int(round(left)),
            int(round(top)),
            text,
            color,
            font_family=self.font_family,
            font_size_px=font_px,
            background_color=background,
            background_pad=background_pad,
            rotate_deg=rotate_deg,
        )

    def snapshot(self) -> np.ndarray:
        return self._rgba.copy()

    def encode_png(self) -> bytes:
        return encode_png(self._rgba)


def encode_png(rgba: np.ndarray) -> bytes:
    if rgba.dtype != np.uint8 or rgba.ndim != 3 or rgba.shape[2] != 4:
        raise ValueError("frame must be a uint8 (H, W, 4) array")
    buf = io.BytesIO()
    Image.fromarray(np.ascontiguousarray(rgba)).save(buf, format="PNG")
    return buf.getvalue()


def decode_png(data: bytes) -> np.ndarray:
    with Image.open(io.BytesIO(data)) as image:
        return np.asarray(image.convert("RGBA"), dtype=np.uint8)
