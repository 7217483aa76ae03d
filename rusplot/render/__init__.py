from .context import RenderContext
from .empty import draw_empty_state
from .grid import AxisLayout, GridAndAxisRenderer, TickMark, compute_ticks
from .legend import LegendRenderer, LegendRow
from .series import SeriesRenderer, SeriesStroke, build_subpaths, resolve_series_colors

__all__ = [
    "AxisLayout",
    "GridAndAxisRenderer",
    "LegendRenderer",
    "LegendRow",
    "RenderContext",
    "SeriesRenderer",
    "SeriesStroke",
    "TickMark",
    "build_subpaths",
    "compute_ticks",
    "draw_empty_state",
    "resolve_series_colors",
]
