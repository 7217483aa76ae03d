from __future__ import annotations

from dataclasses import dataclass, field
import itertools
from typing import Iterator, Literal, Sequence

import numpy as np


RGBA = tuple[int, int, int, int]
ThemeName = Literal["dark", "light"]

_PLOT_SET_VERSIONS = itertools.count(1)


def _freeze_points(points: np.ndarray) -> np.ndarray:
    arr = np.array(points, dtype=np.float64, copy=True)
    if arr.size == 0:
        arr = arr.reshape(0, 2)
    if arr.ndim != 2 or arr.shape[1] != 2:
        raise ValueError("points must have shape (N, 2)")
    arr.flags.writeable = False
    return arr


@dataclass(frozen=True, eq=False)
class PlotSeries:
    """One named, coloured sequence of (x, y) samples.

    Non-finite coordinates mean "no data at this index": they are kept so the
    stroke breaks at that position, but never plotted or used for bounds.
    """

    points: np.ndarray
    label: str = ""
    color: str | RGBA | None = None
    timestamp_ms: int | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "points", _freeze_points(self.points))

    @property
    def x(self) -> np.ndarray:
        return self.points[:, 0]

    @property
    def y(self) -> np.ndarray:
        return self.points[:, 1]

    @property
    def finite_mask(self) -> np.ndarray:
        return np.isfinite(self.points).all(axis=1)

    @property
    def point_count(self) -> int:
        return int(self.points.shape[0])

    def has_finite_points(self) -> bool:
        return bool(np.any(self.finite_mask))


@dataclass(frozen=True, eq=False)
class PlotSet:
    """Immutable snapshot of every series produced by one program run.

    Order is both z-order (later series on top) and legend order. `version`
    identifies the snapshot; a new run always produces a new version.
    """

    series: tuple[PlotSeries, ...] = ()
    version: int = field(default_factory=lambda: next(_PLOT_SET_VERSIONS))

    @classmethod
    def of(cls, series: Sequence[PlotSeries]) -> "PlotSet":
        return cls(series=tuple(series))

    def __len__(self) -> int:
        return len(self.series)

    def __iter__(self) -> Iterator[PlotSeries]:
        return iter(self.series)

    def has_finite_points(self) -> bool:
        return any(s.has_finite_points() for s in self.series)


@dataclass(frozen=True)
class ViewState:
    zoom_factor: float = 1.0
    theme: ThemeName = "dark"
    visible: bool = True


def panel_caption(plot_set: PlotSet | None) -> str:
    if plot_set is None or len(plot_set) == 0:
        return "Graph (waiting for data...)"
    count = len(plot_set)
    noun = "function" if count == 1 else "functions"
    return f"Graph ({count} {noun})"


def series_summary(plot_set: PlotSet | None) -> list[str]:
    if plot_set is None:
        return []
    return [f"{s.label}: {s.point_count} points" for s in plot_set]
