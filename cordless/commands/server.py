"""Commands for joining and leaving servers."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Iterable, Protocol, Sequence, TextIO

from cordless.commands.base import Command
from cordless.theme import color_to_hex, get_theme

SERVER_HELP_PAGE = """[::b]NAME
	server - allows you to join or leave a server

[::b]SYNPOSIS
	[::b]server[::-] <subcommand <args>>

[::b]DESCRIPTION
	The server command allows you to join a new server or leave one that you
	are already a part of. What this command can't do is administrating a
	server in any way.

[::]SUBCOMMANDS
	[::b]server-join
		joins the server using the given invitation
	[::b]server-leave
		leaves the given server"""

SERVER_JOIN_HELP_PAGE = """[::b]NAME
	server-join - allows you to join a server

[::b]SYNPOSIS
	[::b]server-join[::-] <InviteCode|InviteURL>

[::b]DESCRIPTION
	This command will take a invite code or an invite URl and attempt joining
	the server behind it.

[::b]EXAMPLES
	[gray]$ server-join [messaging-link]
	[gray]$ server-join [messaging-link]
	[gray]$ server-join JDScUK"""

SERVER_LEAVE_HELP_PAGE = """[::b]NAME
	server-leaves - allows you to leave a server

[::b]SYNPOSIS
	[::b]server-leave[::-] <ID|Name>

[::b]DESCRIPTION
	This command will take a server ID or it's name and leave that server.

[::b]EXAMPLES
	[gray]$ server-leave 118456055842734083
	[gray]$ server-leave "Discord Gophers"
	[gray]$ server-leave Nirvana"""

_JOIN_WORDS = frozenset({"join", "accept", "enter"})
_LEAVE_WORDS = frozenset({"leave", "exit", "quit"})


class ServerSession(Protocol):
    """A session that knows the joined guilds and can join or leave them."""

    state: Any

    def invite_accept(self, invite_id: str) -> Any:
        ...

    def guild_leave(self, guild_id: str) -> object:
        ...


def _error_tag() -> str:
    return "[" + color_to_hex(get_theme().error_color) + "]"


def _guilds_of(state: Any) -> Iterable[Any]:
    guilds = getattr(state, "guilds", None) or ()
    if isinstance(guilds, Mapping):
        return guilds.values()
    return guilds


class ServerJoinCommand(Command):
    """Joins a server through an invite code or invite URL."""

    name = "server-join"
    aliases = ("guild-join", "guild-accept", "guild-enter", "server-accept", "server-enter")

    def __init__(self, window: object, session: ServerSession) -> None:
        self._window = window
        self._session = session

    def execute(self, writer: TextIO, parameters: Sequence[str]) -> None:
        if len(parameters) != 1:
            self.print_help(writer)
            return

        invite_id = parameters[0].rpartition("/")[2]
        tag = _error_tag()
        try:
            invite = self._session.invite_accept(invite_id)
        except Exception as error:
            writer.write(f"{tag}Error accepting invite with ID '{invite_id}':\n\t{tag}{error}\n")
            return
        writer.write(f"Joined server '{invite.guild.name}'\n")

    def print_help(self, writer: TextIO) -> None:
        writer.write(SERVER_JOIN_HELP_PAGE + "\n")


class ServerLeaveCommand(Command):
    """Leaves a server given by ID or name."""

    name = "server-leave"
    aliases = ("guild-leave", "guild-exit", "guild-quit", "server-exit", "server-quit")

    def __init__(self, window: object, session: ServerSession) -> None:
        self._window = window
        self._session = session

    def execute(self, writer: TextIO, parameters: Sequence[str]) -> None:
        if len(parameters) != 1:
            self.print_help(writer)
            return

        text = parameters[0]
        tag = _error_tag()
        matches = [
            guild
            for guild in _guilds_of(self._session.state)
            if guild.id == text or guild.name == text
        ]

        if len(matches) == 1:
            guild = matches[0]
            try:
                self._session.guild_leave(guild.id)
            except Exception as error:
                writer.write(f"{tag}Error leaving server '{guild.name}':\n\t{tag}{error}\n")
            else:
                writer.write(f"Left server '{guild.name}'.\n")
        elif not matches:
            writer.write(f"{tag}No server with the ID or Name '{text}' was found.\n")
        else:
            writer.write(f"Multiple matches were found for '{text}'. Please be more precise.\n")
            writer.write("The following matches were found:\n")
            for guild in matches:
                writer.write(f"ID: {guild.id}\tName: {guild.name}\n")

    def print_help(self, writer: TextIO) -> None:
        writer.write(SERVER_LEAVE_HELP_PAGE + "\n")


class ServerCommand(Command):
    """Dispatches to joining or leaving a server."""

    name = "server"
    aliases = ("guild",)

    def __init__(self, server_join: ServerJoinCommand, server_leave: ServerLeaveCommand) -> None:
        self._server_join = server_join
        self._server_leave = server_leave

    def execute(self, writer: TextIO, parameters: Sequence[str]) -> None:
        parameters = list(parameters)
        if not parameters:
            self.print_help(writer)
            return

        sub_command = parameters[0]
        if sub_command in _JOIN_WORDS:
            self._server_join.execute(writer, parameters[1:])
        elif sub_command in _LEAVE_WORDS:
            self._server_leave.execute(writer, parameters[1:])
        else:
            self.print_help(writer)

    def print_help(self, writer: TextIO) -> None:
        writer.write(SERVER_HELP_PAGE + "\n")