from __future__ import annotations

from dataclasses import dataclass

from rusplot.render.context import RenderContext
from rusplot.series import RGBA, PlotSet


@dataclass(frozen=True)
class LegendRow:
    label: str
    color: RGBA
    x: float
    y: float


class LegendRenderer:
    """One row per series in plot-set order, anchored near the top-right corner.

    Rows are not moved out of the way of data; overlap with dense series is
    accepted.
    """

    swatch_width_px = 3.0
    label_gap_px = 10.0
    patch_pad_px = 6.0

    def layout(self, ctx: RenderContext, plot_set: PlotSet, colors: list[RGBA]) -> list[LegendRow]:
        _, top, right, _ = ctx.mapper.plot_rect
        x = right - ctx.px(ctx.config.legend_offset_px)
        y0 = top + ctx.px(ctx.config.legend_top_px)
        spacing = ctx.px(ctx.config.legend_row_spacing_px)
        return [
            LegendRow(label=series.label, color=color, x=x, y=y0 + i * spacing)
            for i, (series, color) in enumerate(zip(plot_set, colors, strict=True))
        ]

    def draw(self, ctx: RenderContext, plot_set: PlotSet, colors: list[RGBA]) -> list[LegendRow]:
        rows = self.layout(ctx, plot_set, colors)
        s = ctx.surface
        font = ctx.px(ctx.config.legend_font_px)
        swatch = ctx.px(ctx.config.legend_swatch_px)
        gap = ctx.px(self.label_gap_px)
        pad = ctx.px(self.patch_pad_px)
        for row in rows:
            text_w, text_h = s.measure_text(row.label, font)
            row_h = max(float(text_h), ctx.px(self.swatch_width_px)) + 2 * pad
            s.fill_rect(row.x - pad, row.y - row_h / 2.0, swatch + gap + text_w + 2 * pad, row_h, ctx.theme.text_background)
            s.begin_path()
            s.move_to(row.x, row.y)
            s.line_to(row.x + swatch, row.y)
            s.stroke(row.color, ctx.px(self.swatch_width_px))
            s.fill_text(row.x + swatch + gap, row.y, row.label, ctx.theme.text, font_px=font, baseline="middle")
        return rows
