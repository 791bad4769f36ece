"""Commands for viewing and changing the online status."""

from __future__ import annotations

from typing import Optional, Protocol, Sequence, TextIO

from cordless.commands.base import Command
from cordless.models import Settings, State, Status
from cordless.theme import color_to_hex, get_theme

STATUS_HELP_PAGE = """[::b]NAME
	status - view your or others status or update your own

[::b]SYNPOSIS
	[::b]status [subcommand]

[::b]DESCRPTION
	This command allows to either update your status or view a users status.
	For more information check the help pages of the subcommands.

[::]SUBCOMMANDS
	[::b]status-get (default)
		prints the status of the given user or yourself
	[::b]set-set
		updates your current status"""

STATUS_SET_HELP_PAGE = """[::b]NAME
	status-set - allows updating your own status

[::b]SYNPOSIS
	[::b]status-set[::-] <online|idle|dnd|invisible>

[::b]DESCRPTION
	This command can be used to set your current online status to the
	value passed as the first parameter. Other users will immediately
	see your status update.

[::b]EXAMPLES
	[gray]$ status-set invisible"""

_STATUS_WORDS = {
    "online": Status.ONLINE,
    "available": Status.ONLINE,
    "dnd": Status.DO_NOT_DISTURB,
    "donotdisturb": Status.DO_NOT_DISTURB,
    "busy": Status.DO_NOT_DISTURB,
    "idle": Status.IDLE,
    "invisible": Status.INVISIBLE,
}


class StatusSession(Protocol):
    """A session that holds the state and can update the user's status."""

    state: State

    def user_update_status(self, status: Status) -> Optional[Settings]:
        ...


def _error_tag() -> str:
    return "[" + color_to_hex(get_theme().error_color) + "]"


def _status_get_help_page() -> str:
    return f"""[::b]NAME
	status-get - prints your current status or the status of the given user

[::b]SYNPOSIS
	[::b]status-get[::-] [Username|Username#NNNN|UserID[]

[::b]DESCRPTION
	This command prints either your current status of no value was passed
	or the status of the passed user, if the presence for that user could
	be found. Due to a problem with the presences, this command might randomly
	fail when trying to query specific users.

[::b]EXAMPLES
	[gray]$ status-get
	[yellow]idle

	[gray]$ status-get Marcel#7299
	{_error_tag()}Do not disturb"""


def status_to_string(status: object) -> str:
    """Render a status as coloured text."""
    if status == Status.ONLINE:
        return "[green]Online[white]"
    if status == Status.DO_NOT_DISTURB:
        return _error_tag() + "Do not disturb[white]"
    if status == Status.IDLE:
        return "[yellow]Idle[white]"
    if status == Status.INVISIBLE:
        return "[gray]Invisible[white]"
    if status == Status.OFFLINE:
        return "[gray]Offline[white]"
    return "Unknown status"


class StatusGetCommand(Command):
    """Prints the own status or that of another user."""

    name = "status-get"
    aliases = ()

    def __init__(self, session: StatusSession) -> None:
        self._session = session

    def execute(self, writer: TextIO, parameters: Sequence[str]) -> None:
        if len(parameters) > 1:
            writer.write(_error_tag() + "Invalid parameters\n")
            self.print_help(writer)
            return

        state = self._session.state
        if not parameters:
            writer.write(status_to_string(state.settings.status) + "\n")
            return

        text = parameters[0]
        matches = [
            presence
            for presence in state.presences
            if presence.user.id == text
            or presence.user.username == text
            or str(presence.user) == text
        ]

        if not matches:
            writer.write(f"{_error_tag()}No match for '{text}'.\n")
        elif len(matches) > 1:
            writer.write(f"Multiple matches were found for '{text}'. Please be more precise.\n")
            writer.write("The following matches were found:\n")
            for presence in matches:
                writer.write(f"\t{presence.user}\n")
        else:
            writer.write(status_to_string(matches[0].status) + "\n")

    def print_help(self, writer: TextIO) -> None:
        writer.write(_status_get_help_page() + "\n")


class StatusSetCommand(Command):
    """Updates the own status."""

    name = "status-set"
    aliases = ("status-update",)

    def __init__(self, session: StatusSession) -> None:
        self._session = session

    def execute(self, writer: TextIO, parameters: Sequence[str]) -> None:
        tag = _error_tag()
        if len(parameters) != 1:
            writer.write(tag + "Invalid parameters\n")
            self.print_help(writer)
            return

        word = parameters[0].lower()
        status = _STATUS_WORDS.get(word)
        if status is None:
            writer.write(f"{tag}Invalid status: '{word}'\n")
            self.print_help(writer)
            return

        try:
            updated = self._session.user_update_status(status)
        except Exception as error:
            writer.write(f"{tag}Error setting status:\n\t{tag}'{error}'\n")
            return
        if updated is not None:
            self._session.state.settings = updated

    def print_help(self, writer: TextIO) -> None:
        writer.write(STATUS_SET_HELP_PAGE + "\n")


class StatusCommand(Command):
    """Dispatches to getting or setting the status; getting is the default."""

    name = "status"
    aliases = ()

    def __init__(self, status_get: StatusGetCommand, status_set: StatusSetCommand) -> None:
        self._status_get = status_get
        self._status_set = status_set

    def execute(self, writer: TextIO, parameters: Sequence[str]) -> None:
        parameters = list(parameters)
        if parameters and parameters[0] in ("set", "update"):
            self._status_set.execute(writer, parameters[1:])
        elif parameters and parameters[0] == "get":
            self._status_get.execute(writer, parameters[1:])
        else:
            self._status_get.execute(writer, parameters)

    def print_help(self, writer: TextIO) -> None:
        writer.write(STATUS_HELP_PAGE + "\n")