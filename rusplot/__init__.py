from rusplot.adapters import make_series, sample_function
from rusplot.config import DEFAULT_CONFIG, EngineConfig, load_config, validate_config
from rusplot.engine import PlotEngine, ViewportResizer
from rusplot.errors import (
    DegenerateRangeWarning,
    EmptyDataError,
    ExportError,
    PlotDataError,
    PlotError,
    RunInProgressError,
)
from rusplot.export import ExportService, FileSystemWriter, FixedPathPicker
from rusplot.scales import Bounds, CoordinateMapper, compute_bounds
from rusplot.series import PlotSeries, PlotSet, ViewState, panel_caption, series_summary
from rusplot.session import ExecutionResult, RunCoordinator
from rusplot.theme import ThemeManager
from rusplot.zoom import ZoomController

__all__ = [
    "Bounds",
    "CoordinateMapper",
    "DEFAULT_CONFIG",
    "DegenerateRangeWarning",
    "EmptyDataError",
    "EngineConfig",
    "ExecutionResult",
    "ExportError",
    "ExportService",
    "FileSystemWriter",
    "FixedPathPicker",
    "PlotDataError",
    "PlotEngine",
    "PlotError",
    "PlotSeries",
    "PlotSet",
    "RunCoordinator",
    "RunInProgressError",
    "ThemeManager",
    "ViewState",
    "ViewportResizer",
    "ZoomController",
    "compute_bounds",
    "load_config",
    "make_series",
    "panel_caption",
    "sample_function",
    "series_summary",
    "validate_config",
]
