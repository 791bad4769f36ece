"""A syntax highlighting formatter that produces colour markup tags."""

from __future__ import annotations

import math
from typing import IO, Iterable, Mapping, Tuple, Union

from pygments import highlight
from pygments.formatter import Formatter
from pygments.lexers import get_lexer_by_name
from pygments.style import Style, StyleMeta
from pygments.styles import get_style_by_name
from pygments.token import _TokenType

# Colours of the eight colour terminal palette and the markup used for each.
COLOUR_TABLE: dict[str, str] = {
    "#000000": "[#000000]", "#7f0000": "[#7f0000]", "#007f00": "[#3baf3b]", "#7f7fe0": "[#7f7fe0]",
    "#00007f": "[#2d2db7]", "#7f007f": "[#7f007f]", "#007f7f": "[#3ea8a8]", "#e5e5e5": "[#e5e5e5]",
    "#555555": "[#555555]", "#ff0000": "[#d16666]", "#00ff00": "[#80dd80]", "#ffff00": "[#efef8b]",
    "#0000ff": "[#5757f2]", "#ff00ff": "[#d36bd3]", "#00ffff": "[#7ed3d3]", "#ffffff": "[#ffffff]",
}


def _rgb(colour: str) -> Tuple[int, int, int]:
    text = colour.strip().lstrip("#")
    if len(text) == 3:
        text = "".join(char * 2 for char in text)
    if len(text) != 6:
        raise ValueError(f"invalid colour {colour!r}")
    value = int(text, 16)
    return (value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF


def _distance(one: Tuple[int, int, int], two: Tuple[int, int, int]) -> float:
    rmean = (one[0] + two[0]) // 2
    r = one[0] - two[0]
    g = one[1] - two[1]
    b = one[2] - two[2]
    return math.sqrt((((512 + rmean) * r * r) >> 8) + 4 * g * g + (((767 - rmean) * b * b) >> 8))


def find_closest(colour: str) -> str:
    """Return the palette colour closest to the given hex colour."""
    seeking = _rgb(colour)
    closest = "#000000"
    closest_distance = math.inf
    for candidate in COLOUR_TABLE:
        distance = _distance(_rgb(candidate), seeking)
        if distance < closest_distance:
            closest_distance = distance
            closest = candidate
    return closest


def _lookup_style(style: Union[str, StyleMeta]) -> StyleMeta:
    return get_style_by_name(style) if isinstance(style, str) else style


def style_to_markup(style: Union[str, StyleMeta]) -> dict[_TokenType, str]:
    """Map every token type of a style to its colour markup, empty if uncoloured."""
    markup: dict[_TokenType, str] = {}
    for token_type, definition in _lookup_style(style):
        colour = definition.get("color")
        markup[token_type] = COLOUR_TABLE[find_closest(colour)] if colour else ""
    return markup


class TviewFormatter(Formatter):
    """Writes tokens prefixed by colour tags taken from the eight colour palette."""

    name = "tview-8bit"
    aliases = ["tview-8bit"]
    filenames: list[str] = []

    def __init__(self, **options: object) -> None:
        super().__init__(**options)
        self._markup: Mapping[_TokenType, str] = style_to_markup(self.style)

    def _markup_for(self, token_type: _TokenType) -> str:
        current = token_type
        while current is not None:
            found = self._markup.get(current)
            if found is not None:
                return found
            current = current.parent
        return ""

    def format(self, tokensource: Iterable[Tuple[_TokenType, str]], outfile: IO[str]) -> None:
        for token_type, value in tokensource:
            markup = self._markup_for(token_type)
            if markup:
                outfile.write(markup)
            outfile.write(value)


def highlight_code(code: str, language: str, style_name: str = "monokai") -> str:
    """Highlight code of the named language with the named style.

    Raises ``pygments.util.ClassNotFound`` for an unknown language or style.
    """
    lexer = get_lexer_by_name(language)
    return highlight(code, lexer, TviewFormatter(style=style_name))


__all__ = [
    "COLOUR_TABLE",
    "Style",
    "TviewFormatter",
    "find_closest",
    "highlight_code",
    "style_to_markup",
]