from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from rusplot.render.context import RenderContext
from rusplot.scales import CoordinateMapper, format_ticks_for_axis, tick_values


@dataclass(frozen=True)
class TickMark:
    axis: str
    value: float
    pixel: float
    label: str


@dataclass(frozen=True)
class AxisLayout:
    x_ticks: tuple[TickMark, ...]
    y_ticks: tuple[TickMark, ...]
    origin_px: tuple[float, float]


def compute_ticks(mapper: CoordinateMapper, intervals: int) -> tuple[tuple[TickMark, ...], tuple[TickMark, ...]]:
    b = mapper.bounds
    xs = tick_values(b.x_min, b.x_max, intervals)
    ys = tick_values(b.y_min, b.y_max, intervals)
    x_ticks = tuple(
        TickMark("x", float(v), mapper.to_pixel_x(float(v)), label)
        for v, label in zip(xs.tolist(), format_ticks_for_axis(xs), strict=True)
    )
    y_ticks = tuple(
        TickMark("y", float(v), mapper.to_pixel_y(float(v)), label)
        for v, label in zip(ys.tolist(), format_ticks_for_axis(ys), strict=True)
    )
    return x_ticks, y_ticks


def axis_origin(mapper: CoordinateMapper, through_zero: bool) -> tuple[float, float]:
    left, _, _, bottom = mapper.plot_rect
    if through_zero and mapper.bounds.contains(0.0, 0.0):
        return (mapper.to_pixel_x(0.0), mapper.to_pixel_y(0.0))
    return (left, bottom)


def grid_offsets(extent: float, cell: float) -> np.ndarray:
    """Pixel offsets of grid lines from the plot origin, inclusive of `extent`."""
    if cell <= 0:
        raise ValueError("grid cell must be > 0")
    count = int(np.floor(extent / cell + 1e-9))
    return np.arange(count + 1, dtype=np.float64) * cell


class GridAndAxisRenderer:
    """Minor grid, major grid, arrowed axes, tick labels, then axis titles."""

    tick_len_px = 4.0
    label_gap_px = 8.0
    arrow_px = 8.0
    x_title_offset_px = 30.0
    y_title_offset_px = 52.0

    def draw(self, ctx: RenderContext) -> AxisLayout:
        mapper = ctx.mapper
        left, top, right, bottom = mapper.plot_rect
        cell = ctx.px(ctx.config.minor_cell_px)
        every = ctx.config.major_every
        x_offsets = grid_offsets(right - left, cell)
        y_offsets = grid_offsets(bottom - top, cell)

        for major in (False, True):
            color = ctx.theme.grid_major if major else ctx.theme.grid_minor
            ctx.surface.begin_path()
            for k, off in enumerate(x_offsets.tolist()):
                if (k % every == 0) == major:
                    x = round(left + off)
                    ctx.surface.move_to(x, top)
                    ctx.surface.line_to(x, bottom)
            for k, off in enumerate(y_offsets.tolist()):
                if (k % every == 0) == major:
                    y = round(bottom - off)
                    ctx.surface.move_to(left, y)
                    ctx.surface.line_to(right, y)
            ctx.surface.stroke(color, 1.0)

        origin = axis_origin(mapper, through_zero=ctx.config.bounds_profile == "symmetric")
        self._draw_axes(ctx, origin)
        x_ticks, y_ticks = compute_ticks(mapper, ctx.config.tick_intervals)
        self._draw_tick_labels(ctx, x_ticks, y_ticks)
        self._draw_titles(ctx)
        return AxisLayout(x_ticks=x_ticks, y_ticks=y_ticks, origin_px=origin)

    def _draw_axes(self, ctx: RenderContext, origin: tuple[float, float]) -> None:
        left, top, right, bottom = ctx.mapper.plot_rect
        ox, oy = round(origin[0]), round(origin[1])
        a = ctx.px(self.arrow_px)
        s = ctx.surface
        s.begin_path()
        s.move_to(left, oy)
        s.line_to(right, oy)
        s.move_to(right - a, oy - a / 2.0)
        s.line_to(right, oy)
        s.line_to(right - a, oy + a / 2.0)
        s.move_to(ox, bottom)
        s.line_to(ox, top)
        s.move_to(ox - a / 2.0, top + a)
        s.line_to(ox, top)
        s.line_to(ox + a / 2.0, top + a)
        s.stroke(ctx.theme.axis, ctx.px(ctx.config.axis_width_px))

    def _draw_tick_labels(
        self,
        ctx: RenderContext,
        x_ticks: tuple[TickMark, ...],
        y_ticks: tuple[TickMark, ...],
    ) -> None:
        left, _, _, bottom = ctx.mapper.plot_rect
        s = ctx.surface
        tick = ctx.px(self.tick_len_px)
        gap = ctx.px(self.label_gap_px)
        font = ctx.px(ctx.config.tick_font_px)
        pad = max(1, int(round(ctx.px(2.0))))

        s.begin_path()
        for t in x_ticks:
            s.move_to(round(t.pixel), bottom)
            s.line_to(round(t.pixel), bottom + tick)
        for t in y_ticks:
            s.move_to(left - tick, round(t.pixel))
            s.line_to(left, round(t.pixel))
        s.stroke(ctx.theme.axis, 1.0)

        for t in x_ticks:
            s.fill_text(
                t.pixel,
                bottom + gap,
                t.label,
                ctx.theme.text,
                font_px=font,
                align="center",
                background=ctx.theme.text_background,
                background_pad=pad,
            )
        for t in y_ticks:
            s.fill_text(
                left - gap,
                t.pixel,
                t.label,
                ctx.theme.text,
                font_px=font,
                align="right",
                baseline="middle",
                background=ctx.theme.text_background,
                background_pad=pad,
            )

    def _draw_titles(self, ctx: RenderContext) -> None:
        left, top, right, bottom = ctx.mapper.plot_rect
        font = ctx.px(ctx.config.title_font_px)
        ctx.surface.fill_text(
            (left + right) / 2.0,
            bottom + ctx.px(self.x_title_offset_px),
            "X",
            ctx.theme.text,
            font_px=font,
            align="center",
        )
        ctx.surface.fill_text(
            left - ctx.px(self.y_title_offset_px),
            (top + bottom) / 2.0,
            "Y",
            ctx.theme.text,
            font_px=font,
            align="center",
            baseline="middle",
            rotate_deg=90,
        )
