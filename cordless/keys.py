"""Key events, their comparison and their human readable form."""

from __future__ import annotations

import string
from dataclasses import dataclass
from enum import IntEnum, IntFlag
from typing import Optional, TypeVar, Union

from cordless.theme import escape


def _key_members() -> list[tuple[str, int]]:
    members = [
        ("BACKSPACE", 8),
        ("TAB", 9),
        ("ENTER", 13),
        ("ESC", 27),
        ("BACKSPACE2", 127),
        ("CTRL_SPACE", 0),
    ]
    members += [
        (f"CTRL_{letter}", code)
        for code, letter in enumerate(string.ascii_uppercase, start=1)
    ]
    members += [
        ("CTRL_LEFT_SQ", 27),
        ("CTRL_BACKSLASH", 28),
        ("CTRL_RIGHT_SQ", 29),
        ("CTRL_CARAT", 30),
        ("CTRL_UNDERSCORE", 31),
    ]
    specials = [
        "RUNE", "UP", "DOWN", "RIGHT", "LEFT", "UP_LEFT", "UP_RIGHT",
        "DOWN_LEFT", "DOWN_RIGHT", "CENTER", "PGUP", "PGDN", "HOME", "END",
        "INSERT", "DELETE", "HELP", "EXIT", "CLEAR", "CANCEL", "PRINT",
        "PAUSE", "BACKTAB",
    ] + [f"F{number}" for number in range(1, 65)]
    members += [(name, code) for code, name in enumerate(specials, start=256)]
    return members


Key = IntEnum("Key", _key_members(), module=__name__)
Key.__doc__ = "Key codes of keyboard events; RUNE means a printable character."


class ModMask(IntFlag):
    """Modifier keys held during a key event."""

    NONE = 0
    SHIFT = 1
    CTRL = 2
    ALT = 4
    META = 8


KEY_NAMES: dict[int, str] = {
    Key.ENTER: "Enter",
    Key.BACKSPACE: "Backspace",
    Key.TAB: "Tab",
    Key.BACKTAB: "Backtab",
    Key.ESC: "Esc",
    Key.BACKSPACE2: "Backspace2",
    Key.DELETE: "Delete",
    Key.INSERT: "Insert",
    Key.UP: "Up",
    Key.DOWN: "Down",
    Key.LEFT: "Left",
    Key.RIGHT: "Right",
    Key.HOME: "Home",
    Key.END: "End",
    Key.UP_LEFT: "UpLeft",
    Key.UP_RIGHT: "UpRight",
    Key.DOWN_LEFT: "DownLeft",
    Key.DOWN_RIGHT: "DownRight",
    Key.CENTER: "Center",
    Key.PGDN: "PgDn",
    Key.PGUP: "PgUp",
    Key.CLEAR: "Clear",
    Key.EXIT: "Exit",
    Key.CANCEL: "Cancel",
    Key.PAUSE: "Pause",
    Key.PRINT: "Print",
    Key.CTRL_SPACE: "Ctrl-Space",
    Key.CTRL_UNDERSCORE: "Ctrl-_",
    Key.CTRL_RIGHT_SQ: "Ctrl-]",
    Key.CTRL_BACKSLASH: "Ctrl-\\",
    Key.CTRL_CARAT: "Ctrl-^",
}
KEY_NAMES.update({Key[f"F{number}"]: f"F{number}" for number in range(1, 65)})
# Ctrl-H, Ctrl-I and Ctrl-M share their codes with Backspace, Tab and Enter.
KEY_NAMES.update(
    {
        Key[f"CTRL_{letter}"]: f"Ctrl-{letter}"
        for letter in string.ascii_uppercase
        if letter not in "HIM"
    }
)

# Control characters that are typed without holding Ctrl.
_DIRECTLY_TYPEABLE = frozenset({Key.BACKSPACE, Key.TAB, Key.ESC, Key.ENTER})

_E = TypeVar("_E")


def _as_enum(kind: type, value: int) -> int:
    try:
        return kind(value)
    except ValueError:
        return value


@dataclass(frozen=True)
class KeyEvent:
    """A key press: key code, character and modifiers.

    Control characters given as runes are turned into their key codes, and
    most of them imply the Ctrl modifier.
    """

    key: int
    rune: Union[int, str] = 0
    mod: int = ModMask.NONE

    def __post_init__(self) -> None:
        rune = self.rune
        if isinstance(rune, str):
            if len(rune) != 1:
                raise ValueError(f"a rune must be a single character, not {rune!r}")
            rune = ord(rune)
        rune = int(rune)
        key = int(self.key)
        mod = int(self.mod)

        if key == Key.RUNE and (rune < 0x20 or rune == 0x7F):
            key = rune
            if mod == ModMask.NONE and rune < 0x20 and rune not in _DIRECTLY_TYPEABLE:
                mod = ModMask.CTRL

        object.__setattr__(self, "key", _as_enum(Key, key))
        object.__setattr__(self, "rune", rune)
        object.__setattr__(self, "mod", _as_enum(ModMask, mod))


def events_equal(event_one: Optional[KeyEvent], event_two: Optional[KeyEvent]) -> bool:
    """Compare two events by key, rune and modifiers."""
    if event_one is None or event_two is None:
        return event_one is None and event_two is None
    return (
        event_one.rune == event_two.rune
        and event_one.mod == event_two.mod
        and event_one.key == event_two.key
    )


def _rune_text(rune: int) -> str:
    if 0 <= rune <= 0x10FFFF and not 0xD800 <= rune <= 0xDFFF:
        return chr(rune)
    return "\ufffd"


def _upper(char: str) -> str:
    upper = char.upper()
    return upper if len(upper) == 1 else char


def event_to_string(event: Optional[KeyEvent]) -> str:
    """Render an event as human readable text, e.g. ``Ctrl+Shift+Left``."""
    if event is None:
        return ""

    mod = int(event.mod)
    modifiers = [
        label
        for flag, label in (
            (ModMask.CTRL, "Ctrl"),
            (ModMask.SHIFT, "Shift"),
            (ModMask.ALT, "Alt"),
            (ModMask.META, "Meta"),
        )
        if mod & flag
    ]

    text = KEY_NAMES.get(int(event.key))
    if text is None:
        if event.key == Key.RUNE:
            char = _rune_text(event.rune)
            text = "Shift+" + char if "A" <= char <= "Z" else _upper(char)
        else:
            text = f"Key[{int(event.key)},{event.rune}]"

    if modifiers:
        if mod & ModMask.CTRL and text.startswith("Ctrl-"):
            text = text[5:]
        return "+".join(modifiers) + "+" + text

    return escape(text)