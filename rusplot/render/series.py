from __future__ import annotations

from dataclasses import dataclass
import logging

import numpy as np

from rusplot.render.context import RenderContext
from rusplot.scales import CoordinateMapper
from rusplot.series import RGBA, PlotSeries, PlotSet
from rusplot.theme import SERIES_PALETTE, series_color


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class SeriesStroke:
    label: str
    color: RGBA
    subpaths: tuple[np.ndarray, ...]


def contiguous_true_runs(mask: np.ndarray) -> list[tuple[int, int]]:
    """Half-open (start, stop) index ranges of consecutive True values."""
    idx = np.flatnonzero(mask)
    if idx.size == 0:
        return []
    runs: list[tuple[int, int]] = []
    start = int(idx[0])
    prev = int(idx[0])
    for v in idx[1:]:
        iv = int(v)
        if iv == prev + 1:
            prev = iv
            continue
        runs.append((start, prev + 1))
        start = iv
        prev = iv
    runs.append((start, prev + 1))
    return runs


def build_subpaths(series: PlotSeries, mapper: CoordinateMapper) -> tuple[np.ndarray, ...]:
    """Split a series into pixel-space subpaths.

    A point breaks the stroke when either coordinate is non-finite or when it
    maps outside the plot rectangle; the next usable point starts a new
    subpath instead of connecting across the gap.
    """
    if series.point_count == 0:
        return ()
    with np.errstate(invalid="ignore", over="ignore"):
        px, py = mapper.map_points(series.points)
    keep = series.finite_mask & np.isfinite(px) & np.isfinite(py) & mapper.inside(px, py)
    return tuple(np.column_stack([px[a:b], py[a:b]]) for a, b in contiguous_true_runs(keep))


def resolve_series_colors(plot_set: PlotSet) -> list[RGBA]:
    colors: list[RGBA] = []
    for i, series in enumerate(plot_set):
        try:
            colors.append(series_color(i, series.color))
        except ValueError:
            fallback = SERIES_PALETTE[i % len(SERIES_PALETTE)]
            LOGGER.warning("series %r has invalid color %r; using palette color", series.label, series.color)
            colors.append(fallback)
    return colors


class SeriesRenderer:
    def draw(self, ctx: RenderContext, plot_set: PlotSet, colors: list[RGBA]) -> list[SeriesStroke]:
        width = ctx.px(ctx.config.line_width_px)
        strokes: list[SeriesStroke] = []
        for series, color in zip(plot_set, colors, strict=True):
            subpaths = build_subpaths(series, ctx.mapper)
            ctx.surface.begin_path()
            for path in subpaths:
                ctx.surface.move_to(path[0, 0], path[0, 1])
                for x, y in path[1:].tolist():
                    ctx.surface.line_to(x, y)
            ctx.surface.stroke(color, width)
            strokes.append(SeriesStroke(label=series.label, color=color, subpaths=subpaths))
        return strokes
