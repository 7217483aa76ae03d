from __future__ import annotations


ZOOM_MIN = 0.5
ZOOM_MAX = 3.0
ZOOM_STEP = 0.2
ZOOM_DEFAULT = 1.0


def clamp_zoom(value: float) -> float:
    if value != value:  # NaN
        return ZOOM_DEFAULT
    # Round away float drift from repeated +/- steps.
    return round(max(ZOOM_MIN, min(ZOOM_MAX, float(value))), 6)


class ZoomController:
    """Owns the zoom factor; out-of-range requests clamp silently."""

    def __init__(self, factor: float = ZOOM_DEFAULT) -> None:
        self._factor = clamp_zoom(factor)

    @property
    def factor(self) -> float:
        return self._factor

    def set_zoom(self, value: float) -> float:
        self._factor = clamp_zoom(value)
        return self._factor

    def zoom_in(self) -> float:
        return self.set_zoom(self._factor + ZOOM_STEP)

    def zoom_out(self) -> float:
        return self.set_zoom(self._factor - ZOOM_STEP)

    def reset(self) -> float:
        return self.set_zoom(ZOOM_DEFAULT)

    def scaled(self, base_px: float) -> float:
        return base_px * self._factor

    def raster_size(self, width: int, height: int) -> tuple[int, int]:
        """Output resolution for a logical viewport at the current zoom."""
        return (max(1, int(round(width * self._factor))), max(1, int(round(height * self._factor))))
