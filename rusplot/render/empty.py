from __future__ import annotations

from rusplot.raster.surface import RasterSurface
from rusplot.theme import Theme


def draw_empty_state(surface: RasterSurface, theme: Theme, hint: str, *, font_px: float) -> None:
    surface.clear(theme.background)
    if hint:
        surface.fill_text(
            surface.width / 2.0,
            surface.height / 2.0,
            hint,
            theme.text,
            font_px=font_px,
            align="center",
            baseline="middle",
        )
