"""The command interface and the parser for command-line input."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, Sequence, TextIO

# Characters treated as surrounding whitespace when trimming input.
_WHITESPACE = (
    "\t\n\v\f\r \x85\xa0\u1680"
    + "".join(chr(code) for code in range(0x2000, 0x200B))
    + "\u2028\u2029\u202f\u205f\u3000"
)


class Command(ABC):
    """A command that the user can execute from the command input."""

    #: Primary name, also used for listing the command.
    name: str = ""
    #: Alternative names for the command; there might be none.
    aliases: tuple[str, ...] = ()

    @abstractmethod
    def execute(self, writer: TextIO, parameters: Sequence[str]) -> None:
        """Run the command, writing its output into ``writer``."""

    @abstractmethod
    def print_help(self, writer: TextIO) -> None:
        """Write a static help page for this command."""


def _find_closing_quote(text: str, start: int) -> Optional[int]:
    return next(
        (
            position
            for position in range(start, len(text))
            if text[position] == '"' and text[position - 1] != "\\"
        ),
        None,
    )


def parse_command(text: str) -> list[str]:
    """Split raw input into parameters; the first one is the command itself."""
    trimmed = text.strip(_WHITESPACE)
    if not trimmed:
        return []

    if " " not in text:
        return [text]

    parameters: list[str] = []
    current: list[str] = []
    length = len(trimmed)
    index = 0

    while index < length:
        char = trimmed[index]
        if char == " ":
            if current:
                parameters.append("".join(current))
                current = []
        elif char == "\\":
            if index == length - 1:
                current.append(char)
            elif trimmed[index + 1] == '"':
                current.append('"')
                index += 1
        elif char == '"':
            closing = _find_closing_quote(trimmed, index + 1)
            if closing is None:
                current.append(char)
            else:
                quoted = trimmed[index + 1 : closing]
                parameters.append(quoted.replace('\\"', '"'))
                current = []
                index = closing
        else:
            current.append(char)
        index += 1

    if current:
        parameters.append("".join(current))

    return parameters