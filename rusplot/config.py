from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from pathlib import Path
import tomllib
from typing import Any, Literal, Mapping


BoundsProfile = Literal["padded", "symmetric"]


@dataclass(frozen=True)
class EngineConfig:
    """Pipeline constants. Pixel sizes are given at zoom 1.0."""

    width: int = 800
    height: int = 500
    min_width: int = 200
    min_height: int = 160
    inset: int = 60
    minor_cell_px: int = 20
    major_every: int = 5
    tick_intervals: int = 10
    line_width_px: float = 2.5
    axis_width_px: float = 2.0
    legend_row_spacing_px: int = 30
    legend_swatch_px: int = 40
    legend_offset_px: int = 160
    legend_top_px: int = 20
    padding_ratio: float = 0.1
    degenerate_epsilon: float = 1.0
    bounds_profile: BoundsProfile = "padded"
    theme: Literal["dark", "light"] = "dark"
    font_family: str = "DejaVu Sans Mono"
    tick_font_px: float = 12.0
    title_font_px: float = 14.0
    legend_font_px: float = 13.0
    export_filename: str = "plot.png"
    empty_hint: str = "Run a program that calls plot() to display a graph"


DEFAULT_CONFIG = EngineConfig()

_POSITIVE_INTS = (
    "width",
    "height",
    "min_width",
    "min_height",
    "minor_cell_px",
    "major_every",
    "tick_intervals",
    "legend_row_spacing_px",
    "legend_swatch_px",
)
_NON_NEGATIVE_INTS = ("inset", "legend_offset_px", "legend_top_px")
_POSITIVE_FLOATS = (
    "line_width_px",
    "axis_width_px",
    "degenerate_epsilon",
    "tick_font_px",
    "title_font_px",
    "legend_font_px",
)


def validate_config(overrides: Mapping[str, Any] | None = None, *, base: EngineConfig = DEFAULT_CONFIG) -> EngineConfig:
    """Merge overrides into `base`, rejecting unknown keys and invalid values."""

    raw: dict[str, Any] = asdict(base)
    if overrides:
        for key, value in overrides.items():
            if key not in raw:
                raise ValueError(f"Unknown config key: {key}")
            raw[key] = value

    for key in _POSITIVE_INTS:
        if isinstance(raw[key], bool) or not isinstance(raw[key], int) or raw[key] <= 0:
            raise ValueError(f"Config `{key}` must be a positive integer")
    for key in _NON_NEGATIVE_INTS:
        if isinstance(raw[key], bool) or not isinstance(raw[key], int) or raw[key] < 0:
            raise ValueError(f"Config `{key}` must be a non-negative integer")
    for key in _POSITIVE_FLOATS:
        if isinstance(raw[key], bool) or not isinstance(raw[key], (int, float)) or float(raw[key]) <= 0:
            raise ValueError(f"Config `{key}` must be a positive number")
        raw[key] = float(raw[key])
    if not isinstance(raw["padding_ratio"], (int, float)) or float(raw["padding_ratio"]) < 0:
        raise ValueError("Config `padding_ratio` must be >= 0")
    raw["padding_ratio"] = float(raw["padding_ratio"])
    if raw["bounds_profile"] not in ("padded", "symmetric"):
        raise ValueError("Config `bounds_profile` must be 'padded' or 'symmetric'")
    if raw["theme"] not in ("dark", "light"):
        raise ValueError("Config `theme` must be 'dark' or 'light'")
    if raw["min_width"] <= 2 * raw["inset"] or raw["min_height"] <= 2 * raw["inset"]:
        raise ValueError("Config `min_width`/`min_height` must leave room inside the inset")
    if raw["width"] < raw["min_width"] or raw["height"] < raw["min_height"]:
        raise ValueError("Config `width`/`height` must be >= min_width/min_height")
    for key in ("font_family", "export_filename"):
        if not isinstance(raw[key], str) or not raw[key].strip():
            raise ValueError(f"Config `{key}` must be a non-empty string")
    if not isinstance(raw["empty_hint"], str):
        raise ValueError("Config `empty_hint` must be a string")

    return EngineConfig(**{f.name: raw[f.name] for f in fields(EngineConfig)})


def load_config(path: Path, overrides: Mapping[str, Any] | None = None) -> EngineConfig:
    with path.open("rb") as f:
        raw = tomllib.load(f)
    table = raw.get("plot", raw)
    if not isinstance(table, dict):
        raise ValueError("`plot` table must be a TOML table")
    merged = dict(table)
    if overrides:
        merged.update(overrides)
    return validate_config(merged)
