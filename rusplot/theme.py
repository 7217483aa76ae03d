from __future__ import annotations

from dataclasses import asdict, dataclass
import re
from typing import Any, Mapping

from rusplot.series import RGBA, ThemeName


_HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")

THEME_NAMES: tuple[ThemeName, ...] = ("dark", "light")

# Cycled by series index when a series carries no colour of its own.
SERIES_PALETTE: tuple[RGBA, ...] = (
    (0, 102, 204, 255),
    (230, 126, 34, 255),
    (46, 204, 113, 255),
    (231, 76, 60, 255),
    (155, 89, 182, 255),
    (241, 196, 15, 255),
    (26, 188, 156, 255),
    (236, 64, 122, 255),
)


def parse_color(value: str | tuple[int, ...]) -> RGBA:
    """Parse `#rgb`, `#rrggbb`, `#rrggbbaa` or an RGB/RGBA tuple."""
    if isinstance(value, str):
        if not _HEX_COLOR.match(value):
            raise ValueError(f"not a hex color: {value!r}")
        digits = value[1:]
        if len(digits) == 3:
            digits = "".join(ch * 2 for ch in digits)
        if len(digits) == 6:
            digits += "ff"
        return (int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16), int(digits[6:8], 16))
    if len(value) not in (3, 4) or any(not isinstance(c, int) or c < 0 or c > 255 for c in value):
        raise ValueError(f"color tuple must hold 3 or 4 ints in [0, 255]: {value!r}")
    if len(value) == 3:
        return (value[0], value[1], value[2], 255)
    return (value[0], value[1], value[2], value[3])


def series_color(index: int, explicit: str | tuple[int, ...] | None = None) -> RGBA:
    if explicit is not None:
        return parse_color(explicit)
    return SERIES_PALETTE[index % len(SERIES_PALETTE)]


@dataclass(frozen=True)
class Theme:
    """Logical colour roles consumed by the renderers."""

    name: str
    background: RGBA
    grid_major: RGBA
    grid_minor: RGBA
    axis: RGBA
    text: RGBA
    text_background: RGBA


PALETTES: dict[str, Theme] = {
    "dark": Theme(
        name="dark",
        background=(30, 30, 30, 255),
        grid_major=(70, 70, 74, 255),
        grid_minor=(45, 45, 48, 255),
        axis=(140, 140, 140, 255),
        text=(212, 212, 212, 255),
        text_background=(30, 30, 30, 200),
    ),
    "light": Theme(
        name="light",
        background=(255, 255, 255, 255),
        grid_major=(200, 204, 210, 255),
        grid_minor=(234, 236, 240, 255),
        axis=(85, 85, 85, 255),
        text=(34, 34, 34, 255),
        text_background=(255, 255, 255, 200),
    ),
}

_ROLES = ("background", "grid_major", "grid_minor", "axis", "text", "text_background")


def validate_palette(name: ThemeName, overrides: Mapping[str, Any] | None = None) -> Theme:
    """Merge hex-colour overrides into the named built-in palette."""
    if name not in PALETTES:
        raise ValueError(f"Unknown theme: {name}")
    raw: dict[str, Any] = asdict(PALETTES[name])
    if overrides:
        for key, value in overrides.items():
            if key not in _ROLES:
                raise ValueError(f"Unknown theme role: {key}")
            if not isinstance(value, str) or not _HEX_COLOR.match(value):
                raise ValueError(f"Role `{key}` must be a hex color (#RGB, #RRGGBB or #RRGGBBAA)")
            raw[key] = parse_color(value)
    return Theme(name=name, **{role: tuple(raw[role]) for role in _ROLES})


class ThemeManager:
    """Holds the two named palettes and resolves the active one."""

    def __init__(self, overrides: Mapping[str, Mapping[str, Any]] | None = None) -> None:
        overrides = overrides or {}
        unknown = set(overrides) - set(THEME_NAMES)
        if unknown:
            raise ValueError(f"Unknown theme: {sorted(unknown)[0]}")
        self._palettes = {name: validate_palette(name, overrides.get(name)) for name in THEME_NAMES}

    def resolve(self, name: ThemeName) -> Theme:
        try:
            return self._palettes[name]
        except KeyError:
            raise ValueError(f"Unknown theme: {name}") from None

    @staticmethod
    def toggled(name: ThemeName) -> ThemeName:
        return "light" if name == "dark" else "dark"
