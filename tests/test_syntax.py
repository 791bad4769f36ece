import io
import re

import pytest
from pygments.style import Style
from pygments.token import Keyword, Name, Text, Token
from pygments.util import ClassNotFound

from cordless.syntax import (
    COLOUR_TABLE,
    TviewFormatter,
    find_closest,
    highlight_code,
    style_to_markup,
)

MARKUP = re.compile(r"\[#[0-9a-f]{6}\]")


class RedKeywords(Style):
    styles = {
        Token: "",
        Keyword: "#ff0000",
    }


@pytest.mark.parametrize("colour", list(COLOUR_TABLE))
def test_palette_colours_map_to_themselves(colour):
    assert find_closest(colour) == colour


def test_near_colour_maps_to_palette_entry():
    assert find_closest("#fe0101") == "#ff0000"
    assert find_closest("fe0101") == "#ff0000"


def test_find_closest_rejects_garbage():
    with pytest.raises(ValueError):
        find_closest("#12")


def test_style_markup_values_come_from_table():
    markup = style_to_markup("monokai")
    allowed = set(COLOUR_TABLE.values()) | {""}
    assert markup
    assert set(markup.values()) <= allowed


def test_style_markup_for_custom_style():
    markup = style_to_markup(RedKeywords)
    assert markup[Keyword] == "[#d16666]"
    assert markup[Text] == ""


def test_formatter_prefixes_coloured_tokens():
    formatter = TviewFormatter(style=RedKeywords)
    out = io.StringIO()
    formatter.format([(Keyword, "def"), (Text, " x"), (Keyword.Constant, "None")], out)
    assert out.getvalue() == "[#d16666]def x[#d16666]None"


def test_formatter_falls_back_to_parent_type():
    formatter = TviewFormatter(style=RedKeywords)
    out = io.StringIO()
    formatter.format([(Name.Function, "f")], out)
    assert out.getvalue() == "f"


def test_highlight_keeps_text():
    code = "def greet(name):\n    return name + 1\n"
    result = highlight_code(code, "python")
    assert MARKUP.sub("", result) == code
    assert MARKUP.search(result) is not None


def test_highlight_unknown_language():
    with pytest.raises(ClassNotFound):
        highlight_code("x", "no-such-language-at-all")