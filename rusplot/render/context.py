from __future__ import annotations

from dataclasses import dataclass

from rusplot.config import EngineConfig
from rusplot.raster.surface import RasterSurface
from rusplot.scales import CoordinateMapper
from rusplot.theme import Theme


@dataclass(frozen=True)
class RenderContext:
    """Everything one redraw needs, resolved once and passed to each renderer."""

    surface: RasterSurface
    mapper: CoordinateMapper
    theme: Theme
    config: EngineConfig
    scale: float = 1.0

    def px(self, base: float) -> float:
        return base * self.scale
