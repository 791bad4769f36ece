"""The command that switches and sizes the fixed layout."""

from __future__ import annotations

import re
from typing import Callable, Optional, Protocol, Sequence, TextIO

from cordless import config
from cordless.commands.base import Command
from cordless.theme import color_to_hex, get_theme

_TRUE_WORDS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_WORDS = frozenset({"0", "f", "F", "FALSE", "false", "False"})
_INT64 = re.compile(r"[+-]?[0-9]+")


class LayoutWindow(Protocol):
    """Something whose layout can be refreshed."""

    def refresh_layout(self) -> None:
        ...


def _documentation() -> str:
    error = "[" + color_to_hex(get_theme().error_color) + "]"
    return f"""[orange]# fixlayout[white]

The fixlayout command allows adjusting the layout of the application to a certain degree. By default most components take a flexible amount of space. By activating the fixlayout, those components will instead use a fixed amount of space.

You can [green]enable[white] or {error}disable[white] the fixlayout by using this:
    [-]fixlayout <[green]true[-]/{error}false[-]>

[white]In order to specify the width of a component, use this:
    [-]fixlayout <left/right> <[blue]N[-]>
[white]where [blue]N[white] is the width of the component.
"""


def _parse_bool(text: str) -> Optional[bool]:
    if text in _TRUE_WORDS:
        return True
    if text in _FALSE_WORDS:
        return False
    return None


def _parse_int64(text: str) -> Optional[int]:
    if not _INT64.fullmatch(text):
        return None
    value = int(text)
    if not -(1 << 63) <= value < (1 << 63):
        return None
    return value


class FixLayoutCommand(Command):
    """Enables the fixed layout or sets the width of its sides."""

    name = "fixlayout"
    aliases = ("fix-layout",)

    def __init__(
        self,
        window: LayoutWindow,
        configuration: Optional[config.Config] = None,
        persist: Optional[Callable[[], None]] = None,
    ) -> None:
        self._window = window
        self._config = configuration if configuration is not None else config.get_config()
        self._persist = persist if persist is not None else config.persist_config

    def _save(self, writer: TextIO) -> bool:
        try:
            self._persist()
        except OSError as error:
            writer.write(f"Error saving configuration: {error}\n")
            return False
        return True

    def execute(self, writer: TextIO, parameters: Sequence[str]) -> None:
        if len(parameters) == 1:
            choice = _parse_bool(parameters[0])
            if choice is None:
                writer.write(
                    "The given input was incorrect, there has to be only one parameter, "
                    "which can only be of the value 'true' or 'false'\n"
                )
                return

            self._config.use_fixed_layout = choice
            self._window.refresh_layout()
            if not self._save(writer):
                return
            writer.write("FixLayout has been enabled\n" if choice else "FixLayout has been disabled\n")
        elif len(parameters) == 2:
            size = _parse_int64(parameters[1])
            if size is None:
                writer.write("The given input was invalid, it has to be an integral number greater than -1\n")
                return
            if size < 0:
                writer.write("The given input was out of bounds, it has to be bigger than -1\n")
                return

            sub_command = parameters[0]
            if sub_command == "left":
                self._config.fixed_size_left = size
                success = f"The left side of the layout was set to {size}"
            elif sub_command == "right":
                self._config.fixed_size_right = size
                success = f"The right side of the layout was set to {size}"
            else:
                writer.write(f"The subcommand '{sub_command}' does not exist\n")
                return

            self._window.refresh_layout()
            if not self._save(writer):
                return
            writer.write(success + "\n")
        else:
            self.print_help(writer)

    def print_help(self, writer: TextIO) -> None:
        writer.write(_documentation() + "\n")