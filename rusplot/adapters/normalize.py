from __future__ import annotations

from collections.abc import Mapping, Sequence
from decimal import Decimal
import math
import time
from typing import Any, Callable

import numpy as np
import torch

from rusplot.errors import PlotDataError
from rusplot.series import RGBA, PlotSeries, PlotSet


DEFAULT_SAMPLE_STEPS = 200
DEFAULT_SAMPLE_COLOR = "#0066cc"


def normalize_points(points: Any, *, label: str = "points") -> np.ndarray:
    if isinstance(points, torch.Tensor):
        tensor = points.detach()
        if tensor.is_cuda:
            tensor = tensor.cpu()
        return _check_shape(tensor.to(torch.float64).numpy(), label=label)

    if isinstance(points, np.ndarray):
        return _check_shape(_coerce_ndarray(points, label=label), label=label)

    if isinstance(points, Sequence) and not isinstance(points, (str, bytes, bytearray)):
        out = np.empty((len(points), 2), dtype=np.float64)
        for i, pair in enumerate(points):
            if isinstance(pair, (str, bytes, bytearray)) or not isinstance(pair, Sequence) or len(pair) != 2:
                raise PlotDataError(f"{label}[{i}] must be an (x, y) pair, got {pair!r}")
            out[i, 0] = _coerce_scalar(pair[0], label=f"{label}[{i}].x")
            out[i, 1] = _coerce_scalar(pair[1], label=f"{label}[{i}].y")
        return out

    raise PlotDataError(f"unsupported {label} input type: {type(points)!r}")


def make_series(
    points: Any,
    *,
    label: str = "",
    color: str | RGBA | None = None,
    timestamp_ms: int | None = None,
) -> PlotSeries:
    arr = normalize_points(points, label=label or "points")
    return PlotSeries(points=arr, label=label, color=color, timestamp_ms=timestamp_ms)


def series_from_payload(payload: Mapping[str, Any], *, index: int = 0) -> PlotSeries:
    if not isinstance(payload, Mapping):
        raise PlotDataError(f"plot #{index} must be an object, got {type(payload)!r}")
    if "points" not in payload:
        raise PlotDataError(f"plot #{index} has no points")
    label = payload.get("label")
    label = f"series {index + 1}" if label is None else str(label)
    color = payload.get("color")
    if color is not None and not isinstance(color, str):
        try:
            color = tuple(int(c) for c in color)  # type: ignore[assignment]
        except (TypeError, ValueError, OverflowError) as exc:
            raise PlotDataError(f"plot #{index} has invalid color {color!r}") from exc
    timestamp = payload.get("timestamp")
    if timestamp is not None:
        try:
            timestamp = int(timestamp)
        except (TypeError, ValueError, OverflowError) as exc:
            raise PlotDataError(f"plot #{index} has invalid timestamp {timestamp!r}") from exc
    return make_series(payload["points"], label=label, color=color, timestamp_ms=timestamp)


def plot_set_from_payload(plots: Sequence[Mapping[str, Any]] | None) -> PlotSet:
    if plots is None:
        return PlotSet.of([])
    if isinstance(plots, (str, bytes, bytearray, Mapping)) or not isinstance(plots, Sequence):
        raise PlotDataError("plots must be a list of plot objects")
    return PlotSet.of([series_from_payload(p, index=i) for i, p in enumerate(plots)])


def sample_function(
    fn: Callable[[float], Any],
    start: float,
    stop: float,
    *,
    steps: int = DEFAULT_SAMPLE_STEPS,
    label: str | None = None,
    color: str | RGBA | None = DEFAULT_SAMPLE_COLOR,
) -> PlotSeries:
    """Evaluate `fn` at `steps + 1` evenly spaced x values in [start, stop].

    Samples whose result is not a finite number are dropped.
    """
    if steps <= 0:
        raise ValueError("steps must be > 0")
    step = (float(stop) - float(start)) / steps
    points: list[tuple[float, float]] = []
    for i in range(steps + 1):
        x = float(start) + i * step
        y = fn(x)
        if isinstance(y, bool) or not isinstance(y, (int, float, Decimal, np.floating, np.integer)):
            continue
        y = float(y)
        if math.isfinite(y):
            points.append((x, y))
    name = label if label is not None else getattr(fn, "__name__", "f")
    return make_series(points, label=name, color=color, timestamp_ms=time.time_ns() // 1_000_000)


def _check_shape(arr: np.ndarray, *, label: str) -> np.ndarray:
    if arr.size == 0:
        return np.empty((0, 2), dtype=np.float64)
    if arr.ndim != 2 or arr.shape[1] != 2:
        raise PlotDataError(f"{label} must have shape (N, 2), got {tuple(arr.shape)}")
    return arr


def _coerce_ndarray(arr: np.ndarray, *, label: str) -> np.ndarray:
    if arr.dtype.kind in {"i", "u", "f", "b"}:
        return arr.astype(np.float64, copy=False)
    flat = arr.reshape(-1)
    out = np.empty(flat.shape[0], dtype=np.float64)
    for i, raw in enumerate(flat.tolist()):
        out[i] = _coerce_scalar(raw, label=f"{label}[{i}]")
    return out.reshape(arr.shape)


def _coerce_scalar(raw: Any, *, label: str) -> float:
    if raw is None:
        return math.nan
    if isinstance(raw, Decimal):
        return float(raw)
    if isinstance(raw, str):
        raise PlotDataError(f"{label} is not numeric: {raw!r}")
    try:
        return float(raw)
    except (TypeError, ValueError) as exc:
        raise PlotDataError(f"{label} is not numeric: {raw!r}") from exc
