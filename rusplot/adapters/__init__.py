from .normalize import make_series, normalize_points, plot_set_from_payload, sample_function, series_from_payload

__all__ = [
    "make_series",
    "normalize_points",
    "plot_set_from_payload",
    "sample_function",
    "series_from_payload",
]
