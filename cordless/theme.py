"""Colours and the colour theme of the user interface."""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Optional

from cordless.config import get_config_directory


@dataclass(frozen=True)
class Color:
    """An RGB colour; the optional name is informational only."""

    r: int
    g: int
    b: int
    name: Optional[str] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        for component in (self.r, self.g, self.b):
            if not 0 <= component <= 0xFF:
                raise ValueError(f"colour component {component} out of range")

    def to_hex(self) -> str:
        """Return the colour as ``#rrggbb``."""
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}"


def new_rgb_color(r: int, g: int, b: int) -> Color:
    """Create a colour from its components, keeping the low eight bits of each."""
    return Color(r & 0xFF, g & 0xFF, b & 0xFF)


_HEX_PATTERN = re.compile(r"[0-9a-fA-F]{6}")


def color_from_hex(hex_string: str) -> Color:
    """Parse a colour written as ``#rrggbb`` or ``rrggbb``."""
    trimmed = hex_string.strip()
    if trimmed.startswith("#"):
        trimmed = trimmed[1:]
    if not _HEX_PATTERN.fullmatch(trimmed):
        raise ValueError(f"invalid hex colour {hex_string!r}")
    value = int(trimmed, 16)
    return Color((value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF)


def color_to_hex(color: Color) -> str:
    """Return the colour as ``#rrggbb``."""
    return color.to_hex()


def _named(name: str, value: int) -> Color:
    return Color((value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF, name=name)


BLACK = _named("black", 0x000000)
MAROON = _named("maroon", 0x800000)
GREEN = _named("green", 0x008000)
OLIVE = _named("olive", 0x808000)
NAVY = _named("navy", 0x000080)
PURPLE = _named("purple", 0x800080)
TEAL = _named("teal", 0x008080)
SILVER = _named("silver", 0xC0C0C0)
GRAY = _named("gray", 0x808080)
RED = _named("red", 0xFF0000)
LIME = _named("lime", 0x00FF00)
YELLOW = _named("yellow", 0xFFFF00)
BLUE = _named("blue", 0x0000FF)
FUCHSIA = _named("fuchsia", 0xFF00FF)
AQUA = _named("aqua", 0x00FFFF)
WHITE = _named("white", 0xFFFFFF)
DARK_CYAN = _named("darkcyan", 0x008B8B)
ORANGE = _named("orange", 0xFFA500)

_NAMED_COLORS = {
    color.name: color
    for color in (
        BLACK, MAROON, GREEN, OLIVE, NAVY, PURPLE, TEAL, SILVER, GRAY,
        RED, LIME, YELLOW, BLUE, FUCHSIA, AQUA, WHITE, DARK_CYAN, ORANGE,
    )
}

_NONESCAPE_PATTERN = re.compile(r'(\[[a-zA-Z0-9_,;: \-\."#]+\[*)\]')


def escape(text: str) -> str:
    """Escape square-bracket tags so they are shown literally."""
    return _NONESCAPE_PATTERN.sub(r"\1[]", text)


def _parse_color(value: Any) -> Color:
    if not isinstance(value, str):
        raise ValueError(f"colour must be a string, not {value!r}")
    named = _NAMED_COLORS.get(value.strip().lower().replace(" ", ""))
    if named is not None:
        return named
    return color_from_hex(value)


def _json_key(name: str) -> str:
    return "".join(part.capitalize() for part in name.split("_"))


@dataclass(frozen=True)
class Theme:
    """The colours used throughout the user interface."""

    primitive_background_color: Color
    contrast_background_color: Color
    more_contrast_background_color: Color
    border_color: Color
    border_focus_color: Color
    title_color: Color
    graphics_color: Color
    primary_text_color: Color
    secondary_text_color: Color
    tertiary_text_color: Color
    inverse_text_color: Color
    contrast_secondary_text_color: Color
    blocked_user_color: Color
    info_message_color: Color
    bot_color: Color
    message_time_color: Color
    default_user_color: Color
    link_color: Color
    attention_color: Color
    error_color: Color
    random_user_colors: tuple[Color, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        """Return the theme in its JSON form, colours as hex strings."""
        result: dict[str, Any] = {}
        for theme_field in fields(self):
            value = getattr(self, theme_field.name)
            if theme_field.name == "random_user_colors":
                result[_json_key(theme_field.name)] = [color.to_hex() for color in value]
            else:
                result[_json_key(theme_field.name)] = value.to_hex()
        return result


def _merged(base: Theme, data: Any) -> Theme:
    if not isinstance(data, Mapping):
        raise ValueError("theme must be a JSON object")

    by_key = {_json_key(f.name).lower(): f.name for f in fields(Theme)}
    changes: dict[str, Any] = {}
    for key, value in data.items():
        name = by_key.get(str(key).lower())
        if name is None:
            continue
        if name == "random_user_colors":
            if value is None:
                changes[name] = ()
            elif isinstance(value, list):
                changes[name] = tuple(_parse_color(item) for item in value)
            else:
                raise ValueError("RandomUserColors must be a list")
        elif value is not None:
            changes[name] = _parse_color(value)
    return replace(base, **changes)


def theme_from_dict(data: Any) -> Theme:
    """Build a theme from JSON data; missing entries keep their defaults."""
    return _merged(default_theme(), data)


_RANDOM_USER_COLORS = (
    (0xD8, 0x50, 0x4E),
    (0xD8, 0x7E, 0x4E),
    (0xD8, 0xA5, 0x4E),
    (0xD8, 0xC6, 0x4E),
    (0xB8, 0xD8, 0x4E),
    (0x91, 0xD8, 0x4E),
    (0x67, 0xD8, 0x4E),
    (0x4E, 0xD8, 0x7C),
    (0x4E, 0xD8, 0xAA),
    (0x4E, 0xD8, 0xCF),
    (0x4E, 0xB6, 0xD8),
    (0x4E, 0x57, 0xD8),
    (0x75, 0x4E, 0xD8),
    (0xA3, 0x4E, 0xD8),
    (0xCF, 0x4E, 0xD8),
    (0xD8, 0x4E, 0x9C),
)


def _chat_colors() -> dict[str, Any]:
    return {
        "blocked_user_color": GRAY,
        "info_message_color": GRAY,
        "bot_color": new_rgb_color(0x94, 0x96, 0xFC),
        "message_time_color": GRAY,
        "link_color": DARK_CYAN,
        "default_user_color": new_rgb_color(0x44, 0xE5, 0x44),
        "attention_color": ORANGE,
        "error_color": RED,
        "random_user_colors": tuple(new_rgb_color(*rgb) for rgb in _RANDOM_USER_COLORS),
    }


def default_theme() -> Theme:
    """Return the built-in default theme."""
    return Theme(
        primitive_background_color=BLACK,
        contrast_background_color=BLUE,
        more_contrast_background_color=GREEN,
        border_color=WHITE,
        border_focus_color=BLUE,
        title_color=WHITE,
        graphics_color=WHITE,
        primary_text_color=WHITE,
        secondary_text_color=YELLOW,
        tertiary_text_color=GREEN,
        inverse_text_color=BLUE,
        contrast_secondary_text_color=DARK_CYAN,
        **_chat_colors(),
    )


def alternative_theme() -> Theme:
    """Return the grey alternative theme shipped as an example."""
    accent = new_rgb_color(104, 142, 196)
    return Theme(
        primitive_background_color=new_rgb_color(70, 70, 70),
        contrast_background_color=accent,
        more_contrast_background_color=new_rgb_color(79, 79, 79),
        border_color=new_rgb_color(213, 220, 229),
        border_focus_color=accent,
        title_color=WHITE,
        graphics_color=WHITE,
        primary_text_color=WHITE,
        secondary_text_color=WHITE,
        tertiary_text_color=WHITE,
        inverse_text_color=accent,
        contrast_secondary_text_color=accent,
        **_chat_colors(),
    )


_theme = default_theme()


def get_theme() -> Theme:
    """Return the currently loaded theme."""
    return _theme


def get_theme_file() -> Path:
    """Return the path of the theme file."""
    return get_config_directory() / "theme.json"


def load_theme() -> Theme:
    """Apply the user's theme file, if any, and return the current theme."""
    global _theme
    path = get_theme_file()
    try:
        text = path.read_text(encoding="utf-8").lstrip()
    except FileNotFoundError:
        return _theme

    if text:
        data, _ = json.JSONDecoder().raw_decode(text)
        if data is not None:
            _theme = _merged(_theme, data)
    return _theme