from __future__ import annotations

from dataclasses import dataclass, replace
import logging
from typing import Callable, Literal

import numpy as np

from rusplot.compile import FrameUpdate, compile_frame_update
from rusplot.config import DEFAULT_CONFIG, EngineConfig
from rusplot.errors import EmptyDataError
from rusplot.raster.surface import RasterSurface, encode_png
from rusplot.render import (
    AxisLayout,
    GridAndAxisRenderer,
    LegendRenderer,
    LegendRow,
    RenderContext,
    SeriesRenderer,
    SeriesStroke,
    draw_empty_state,
    resolve_series_colors,
)
from rusplot.scales import Bounds, CoordinateMapper, compute_bounds
from rusplot.series import PlotSet, ThemeName, ViewState
from rusplot.theme import ThemeManager
from rusplot.zoom import ZoomController


LOGGER = logging.getLogger(__name__)

EngineStatus = Literal["empty", "rendered"]
FrameListener = Callable[[FrameUpdate], None]


@dataclass(frozen=True)
class RenderKey:
    """Structural identity of a frame; equal keys produce identical pixels."""

    plot_version: int | None
    bounds: Bounds | None
    zoom_factor: float
    theme: ThemeName
    raster_size: tuple[int, int]


@dataclass(frozen=True)
class FrameInfo:
    revision: int
    key: RenderKey
    status: EngineStatus
    axes: AxisLayout | None = None
    strokes: tuple[SeriesStroke, ...] = ()
    legend: tuple[LegendRow, ...] = ()


class ViewportResizer:
    """Reacts to host container size changes.

    Only the mapper's viewport extents are rebuilt; bounds, plot set, zoom and
    theme are left alone.
    """

    def __init__(self, engine: "PlotEngine", *, min_width: int, min_height: int) -> None:
        self._engine = engine
        self.min_width = min_width
        self.min_height = min_height

    def on_resize(self, width: int, height: int) -> bool:
        w = max(self.min_width, int(width))
        h = max(self.min_height, int(height))
        if (w, h) != (int(width), int(height)):
            LOGGER.warning("viewport %dx%d clamped to %dx%d", width, height, w, h)
        if (w, h) == self._engine.viewport:
            return False
        self._engine._apply_viewport(w, h)
        return True


class PlotEngine:
    """Single owner of the visualisation state and the draw pipeline.

    Every state change (plot set, zoom, theme, viewport) re-runs the pipeline;
    a redraw is skipped when its RenderKey equals the last drawn one.
    """

    def __init__(
        self,
        config: EngineConfig = DEFAULT_CONFIG,
        *,
        theme_manager: ThemeManager | None = None,
    ) -> None:
        self.config = config
        self._themes = theme_manager or ThemeManager()
        self._zoom = ZoomController()
        self._view = ViewState(zoom_factor=self._zoom.factor, theme=config.theme, visible=True)
        self._viewport = (config.width, config.height)
        self._plot_set: PlotSet | None = None
        self._bounds: Bounds | None = None
        self._mapper: CoordinateMapper | None = None
        theme = self._themes.resolve(self._view.theme)
        w, h = self.raster_size
        self._surface = RasterSurface(w, h, theme.background, font_family=config.font_family)
        self._listeners: list[FrameListener] = []
        self._revision = 0
        self._frame: FrameInfo | None = None
        self._grid = GridAndAxisRenderer()
        self._series = SeriesRenderer()
        self._legend = LegendRenderer()
        self.resizer = ViewportResizer(self, min_width=config.min_width, min_height=config.min_height)
        self.render()

    @property
    def status(self) -> EngineStatus:
        return "empty" if self._bounds is None else "rendered"

    @property
    def plot_set(self) -> PlotSet | None:
        return self._plot_set

    @property
    def view_state(self) -> ViewState:
        return self._view

    @property
    def bounds(self) -> Bounds | None:
        return self._bounds

    @property
    def mapper(self) -> CoordinateMapper | None:
        return self._mapper

    @property
    def viewport(self) -> tuple[int, int]:
        return self._viewport

    @property
    def raster_size(self) -> tuple[int, int]:
        return self._zoom.raster_size(*self._viewport)

    @property
    def revision(self) -> int:
        return self._revision

    @property
    def last_frame(self) -> FrameInfo | None:
        return self._frame

    def subscribe(self, listener: FrameListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def set_plot_set(self, plot_set: PlotSet | None) -> None:
        """Replace the whole plot set; there is no merging with the previous one."""
        self._plot_set = plot_set
        self._bounds = self._compute_bounds(plot_set)
        self._rebuild_mapper()
        self.render()

    def clear(self) -> None:
        self.set_plot_set(None)

    def set_zoom(self, value: float) -> float:
        return self._apply_zoom(self._zoom.set_zoom, value)

    def zoom_in(self) -> float:
        return self._apply_zoom(self._zoom.zoom_in)

    def zoom_out(self) -> float:
        return self._apply_zoom(self._zoom.zoom_out)

    def reset_zoom(self) -> float:
        return self._apply_zoom(self._zoom.reset)

    def set_theme(self, theme: ThemeName) -> None:
        self._themes.resolve(theme)
        if theme == self._view.theme:
            return
        self._view = replace(self._view, theme=theme)
        self.render()

    def toggle_theme(self) -> ThemeName:
        self.set_theme(ThemeManager.toggled(self._view.theme))
        return self._view.theme

    def set_visible(self, visible: bool) -> None:
        self._view = replace(self._view, visible=bool(visible))
        self.render()

    def apply_view_state(self, view: ViewState) -> None:
        self._themes.resolve(view.theme)
        zoom = self._zoom.set_zoom(view.zoom_factor)
        zoom_changed = zoom != self._view.zoom_factor
        self._view = replace(view, zoom_factor=zoom)
        if zoom_changed:
            self._rebuild_mapper()
        self.render()

    def snapshot(self) -> np.ndarray:
        """Copy of the current frame, drawn first if it is stale."""
        key = self._render_key()
        if self._frame is None or self._frame.key != key:
            self._draw(key)
        return self._surface.snapshot()

    def encode_png(self) -> bytes:
        return encode_png(self.snapshot())

    def render(self, *, force: bool = False) -> bool:
        if not self._view.visible:
            LOGGER.debug("render skipped: panel hidden")
            return False
        key = self._render_key()
        if not force and self._frame is not None and self._frame.key == key:
            LOGGER.debug("render skipped: frame key unchanged (revision %d)", self._revision)
            return False
        self._draw(key)
        return True

    def _apply_zoom(self, op: Callable[..., float], *args: float) -> float:
        before = self._zoom.factor
        after = op(*args)
        if after != before:
            self._view = replace(self._view, zoom_factor=after)
            self._rebuild_mapper()
            self.render()
        return after

    def _apply_viewport(self, width: int, height: int) -> None:
        self._viewport = (width, height)
        self._rebuild_mapper()
        self.render()

    def _compute_bounds(self, plot_set: PlotSet | None) -> Bounds | None:
        if plot_set is None:
            return None
        try:
            bounds = compute_bounds(
                plot_set,
                profile=self.config.bounds_profile,
                padding_ratio=self.config.padding_ratio,
                epsilon=self.config.degenerate_epsilon,
            )
        except EmptyDataError:
            LOGGER.debug("plot set %d has no finite points; showing empty state", plot_set.version)
            return None
        LOGGER.debug("bounds for plot set %d: %s", plot_set.version, bounds)
        return bounds

    def _rebuild_mapper(self) -> None:
        if self._bounds is None:
            self._mapper = None
            return
        w, h = self.raster_size
        self._mapper = CoordinateMapper(
            bounds=self._bounds,
            width=w,
            height=h,
            inset=self.config.inset * self._zoom.factor,
        )

    def _render_key(self) -> RenderKey:
        return RenderKey(
            plot_version=None if self._plot_set is None else self._plot_set.version,
            bounds=self._bounds,
            zoom_factor=self._zoom.factor,
            theme=self._view.theme,
            raster_size=self.raster_size,
        )

    def _draw(self, key: RenderKey) -> None:
        theme = self._themes.resolve(key.theme)
        scale = key.zoom_factor
        self._surface.resize(*key.raster_size, background=theme.background)
        if self._mapper is None or self._plot_set is None:
            draw_empty_state(
                self._surface,
                theme,
                self.config.empty_hint,
                font_px=self.config.title_font_px * scale,
            )
            info = FrameInfo(revision=self._revision + 1, key=key, status="empty")
        else:
            self._surface.clear(theme.background)
            ctx = RenderContext(surface=self._surface, mapper=self._mapper, theme=theme, config=self.config, scale=scale)
            colors = resolve_series_colors(self._plot_set)
            axes = self._grid.draw(ctx)
            strokes = self._series.draw(ctx, self._plot_set, colors)
            legend = self._legend.draw(ctx, self._plot_set, colors)
            info = FrameInfo(
                revision=self._revision + 1,
                key=key,
                status="rendered",
                axes=axes,
                strokes=tuple(strokes),
                legend=tuple(legend),
            )
        self._revision = info.revision
        self._frame = info
        self._publish(info)

    def _publish(self, info: FrameInfo) -> None:
        if not self._listeners:
            return
        update = compile_frame_update(self._surface.rgba, info.revision, empty=info.status == "empty")
        for listener in list(self._listeners):
            try:
                listener(update)
            except Exception:
                LOGGER.exception("frame listener %r failed", listener)
