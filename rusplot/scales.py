from __future__ import annotations

from dataclasses import dataclass, field
import logging

import numpy as np

from rusplot.config import BoundsProfile
from rusplot.errors import DegenerateRangeWarning, EmptyDataError
from rusplot.series import PlotSet


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class Bounds:
    x_min: float
    x_max: float
    y_min: float
    y_max: float
    corrections: tuple[DegenerateRangeWarning, ...] = field(default=(), compare=False)

    @property
    def x_span(self) -> float:
        return self.x_max - self.x_min

    @property
    def y_span(self) -> float:
        return self.y_max - self.y_min

    def contains(self, x: float, y: float) -> bool:
        return self.x_min <= x <= self.x_max and self.y_min <= y <= self.y_max


def finite_points(plot_set: PlotSet) -> np.ndarray:
    chunks = [s.points[s.finite_mask] for s in plot_set if s.point_count]
    if not chunks:
        return np.empty((0, 2), dtype=np.float64)
    return np.concatenate(chunks, axis=0)


def _half_span(lo: float, hi: float) -> float:
    """Half of `hi - lo`, finite for any pair of finite floats."""
    return hi * 0.5 - lo * 0.5


def compute_bounds(
    plot_set: PlotSet,
    *,
    profile: BoundsProfile = "padded",
    padding_ratio: float = 0.1,
    epsilon: float = 1.0,
) -> Bounds:
    """Derive the visible data rectangle from every finite point in the set.

    Raises EmptyDataError when no series contains a finite point.
    """
    pts = finite_points(plot_set)
    if pts.shape[0] == 0:
        raise EmptyDataError("plot set contains no finite points")

    corrections: list[DegenerateRangeWarning] = []
    axes = []
    for axis, values in (("x", pts[:, 0]), ("y", pts[:, 1])):
        lo = float(np.min(values))
        hi = float(np.max(values))
        if profile == "symmetric":
            lo, hi = _symmetric_axis(axis, lo, hi, padding_ratio, epsilon, corrections)
        else:
            lo, hi = _padded_axis(axis, lo, hi, padding_ratio, epsilon, corrections)
        axes.append((lo, hi))

    for warning in corrections:
        LOGGER.debug("bounds corrected: %s", warning)
    (x_min, x_max), (y_min, y_max) = axes
    return Bounds(x_min=x_min, x_max=x_max, y_min=y_min, y_max=y_max, corrections=tuple(corrections))


def _padded_axis(
    axis: str,
    lo: float,
    hi: float,
    ratio: float,
    epsilon: float,
    corrections: list[DegenerateRangeWarning],
) -> tuple[float, float]:
    if lo == hi:
        corrections.append(DegenerateRangeWarning(axis, lo, epsilon))
        return _widen(lo, epsilon)
    pad = _half_span(lo, hi) * (2.0 * ratio)
    if not np.isfinite(pad) or not np.isfinite(lo - pad) or not np.isfinite(hi + pad):
        return (lo, hi)
    return (lo - pad, hi + pad)


def _symmetric_axis(
    axis: str,
    lo: float,
    hi: float,
    ratio: float,
    epsilon: float,
    corrections: list[DegenerateRangeWarning],
) -> tuple[float, float]:
    extent = max(abs(lo), abs(hi))
    if extent == 0.0:
        corrections.append(DegenerateRangeWarning(axis, 0.0, epsilon))
        return _widen(0.0, epsilon)
    padded = extent * (1.0 + ratio)
    if not np.isfinite(padded):
        padded = extent
    return (-padded, padded)


def _widen(value: float, epsilon: float) -> tuple[float, float]:
    lo = value - epsilon
    hi = value + epsilon
    # Large magnitudes can absorb epsilon entirely.
    if not lo < hi:
        lo = float(np.nextafter(value, -np.inf))
        hi = float(np.nextafter(value, np.inf))
    return (lo, hi)


@dataclass(frozen=True)
class CoordinateMapper:
    """Affine data-space to pixel-space transform.

    The plot rectangle is the surface minus `inset` on every side. Pixel y
    grows downward, so data y is flipped.
    """

    bounds: Bounds
    width: int
    height: int
    inset: float
    _sx: float = field(init=False, repr=False)
    _sy: float = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.width <= 2 * self.inset or self.height <= 2 * self.inset:
            raise ValueError("viewport must be larger than twice the inset")
        b = self.bounds
        if not b.x_max > b.x_min or not b.y_max > b.y_min:
            raise ValueError("bounds must have a positive span on both axes")
        # Scales are pixels per two data units so spans near the float limit stay finite.
        object.__setattr__(self, "_sx", (self.width - 2 * self.inset) / _half_span(b.x_min, b.x_max))
        object.__setattr__(self, "_sy", (self.height - 2 * self.inset) / _half_span(b.y_min, b.y_max))

    @property
    def plot_rect(self) -> tuple[float, float, float, float]:
        """(left, top, right, bottom) in pixels."""
        return (self.inset, self.inset, self.width - self.inset, self.height - self.inset)

    def to_pixel_x(self, x: float) -> float:
        return self.inset + (x * 0.5 - self.bounds.x_min * 0.5) * self._sx

    def to_pixel_y(self, y: float) -> float:
        return (self.height - self.inset) - (y * 0.5 - self.bounds.y_min * 0.5) * self._sy

    def to_data_x(self, px: float) -> float:
        half = (px - self.inset) / self._sx
        return self.bounds.x_min + half + half

    def to_data_y(self, py: float) -> float:
        half = ((self.height - self.inset) - py) / self._sy
        return self.bounds.y_min + half + half

    def map_points(self, points: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        px = self.inset + (points[:, 0] * 0.5 - self.bounds.x_min * 0.5) * self._sx
        py = (self.height - self.inset) - (points[:, 1] * 0.5 - self.bounds.y_min * 0.5) * self._sy
        return px, py

    def inside(self, px: np.ndarray, py: np.ndarray) -> np.ndarray:
        left, top, right, bottom = self.plot_rect
        eps = 1e-9
        with np.errstate(invalid="ignore"):
            return (px >= left - eps) & (px <= right + eps) & (py >= top - eps) & (py <= bottom + eps)


def tick_values(lo: float, hi: float, intervals: int) -> np.ndarray:
    if intervals <= 0:
        raise ValueError("intervals must be > 0")
    step = _half_span(lo, hi) / intervals
    offsets = np.arange(intervals + 1, dtype=np.float64) * step
    ticks = lo + offsets + offsets
    ticks[-1] = hi
    return ticks


def tick_decimals(lo: float, hi: float) -> int:
    return 1 if abs(hi - lo) >= 10.0 else 2


def format_tick(value: float, decimals: int) -> str:
    if not np.isfinite(value):
        return str(value)
    out = f"{value:.{decimals}f}"
    # Normalise negative zero such as "-0.00".
    if out.startswith("-") and float(out) == 0.0:
        out = out[1:]
    return out


def format_ticks_for_axis(ticks: np.ndarray) -> list[str]:
    if ticks.size == 0:
        return []
    decimals = tick_decimals(float(ticks[0]), float(ticks[-1]))
    return [format_tick(float(v), decimals) for v in ticks]
