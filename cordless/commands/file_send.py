"""The command that sends local files to the current channel."""

from __future__ import annotations

import io
import os
from pathlib import Path
from typing import BinaryIO, Optional, Protocol, Sequence, TextIO

from cordless.commands.base import Command
from cordless.models import Channel
from cordless.theme import color_to_hex, get_theme

FILE_SEND_DOCUMENTATION = """[::b]NAME
	file-send - send files from your local machine

[::b]SYNOPSIS
	[::b]file-send <FILE_PATH>...

[::b]DESCRIPTION
	The file-send command allows you to send multiple files to your current channel.

[::b]EXAMPLES
	[gray]$ file-send ~/file.txt
	[gray]$ file-send ~/file1.txt ~/file2.txt
	[gray]$ file-send "~/file one.txt" ~/file2.txt"""


class ChannelWindow(Protocol):
    """Something that knows the currently selected channel."""

    selected_channel: Optional[Channel]


class FileSendSession(Protocol):
    """A session able to upload files to a channel."""

    def channel_file_send(self, channel_id: str, name: str, reader: BinaryIO) -> object:
        ...


def _error_tag() -> str:
    return "[" + color_to_hex(get_theme().error_color) + "]"


def _resolve(parameter: str) -> str:
    if not parameter.startswith("~"):
        return parameter
    home = str(Path.home())
    rest = parameter[1:].lstrip("/" + os.sep)
    return os.path.normpath(os.path.join(home, rest))


class FileSendCommand(Command):
    """Sends one or more files to the current channel."""

    name = "file-send"
    aliases = ("filesend",)

    def __init__(self, session: FileSendSession, window: ChannelWindow) -> None:
        self._session = session
        self._window = window

    def execute(self, writer: TextIO, parameters: Sequence[str]) -> None:
        channel = self._window.selected_channel
        tag = _error_tag()
        if channel is None:
            writer.write(tag + "In order to use this command, you have to be in a channel.\n")
            return

        if not parameters:
            self.print_help(writer)
            return

        for parameter in parameters:
            try:
                resolved = _resolve(parameter)
            except (RuntimeError, KeyError) as error:
                writer.write(f"{tag}Error resolving path:\n\t{tag}{error}\n")
                continue

            if not os.path.isabs(resolved):
                writer.write(f"{tag}Error reading file:\n\t{tag}the path is not absolute\n")
                continue

            try:
                data = Path(resolved).read_bytes()
            except OSError as error:
                writer.write(f"{tag}Error reading file:\n\t{tag}{error}\n")
                continue

            try:
                self._session.channel_file_send(channel.id, os.path.basename(resolved), io.BytesIO(data))
            except Exception as error:
                writer.write(f"{tag}Error sending file:\n\t{tag}{error}\n")

    def print_help(self, writer: TextIO) -> None:
        writer.write(FILE_SEND_DOCUMENTATION)