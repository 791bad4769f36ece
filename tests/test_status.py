import io

import pytest

from cordless.commands.status import (
    STATUS_HELP_PAGE,
    STATUS_SET_HELP_PAGE,
    StatusCommand,
    StatusGetCommand,
    StatusSetCommand,
    status_to_string,
)
from cordless.models import Presence, Settings, State, Status, User
from cordless.theme import color_to_hex, get_theme


class FakeSession:
    def __init__(self, state, fail=None):
        self.state = state
        self.fail = fail
        self.updates = []

    def user_update_status(self, status):
        self.updates.append(status)
        if self.fail is not None:
            raise RuntimeError(self.fail)
        return Settings(status=status)


def error_tag():
    return "[" + color_to_hex(get_theme().error_color) + "]"


def make_state():
    return State(
        settings=Settings(status=Status.IDLE),
        presences=[
            Presence(user=User(id="1", username="alice", discriminator="0001"), status=Status.ONLINE),
            Presence(user=User(id="2", username="bob", discriminator="0002"), status=Status.DO_NOT_DISTURB),
            Presence(user=User(id="3", username="bob", discriminator="0003"), status=Status.OFFLINE),
        ],
    )


def run(command, *parameters):
    out = io.StringIO()
    command.execute(out, list(parameters))
    return out.getvalue()


@pytest.mark.parametrize(
    "status, expected",
    [
        (Status.ONLINE, "[green]Online[white]"),
        (Status.IDLE, "[yellow]Idle[white]"),
        (Status.INVISIBLE, "[gray]Invisible[white]"),
        (Status.OFFLINE, "[gray]Offline[white]"),
        ("weird", "Unknown status"),
    ],
)
def test_status_to_string(status, expected):
    assert status_to_string(status) == expected


def test_do_not_disturb_uses_error_colour():
    assert status_to_string(Status.DO_NOT_DISTURB) == error_tag() + "Do not disturb[white]"


def test_get_own_status():
    command = StatusGetCommand(FakeSession(make_state()))
    assert run(command) == "[yellow]Idle[white]\n"


def test_get_other_status_by_name():
    command = StatusGetCommand(FakeSession(make_state()))
    assert run(command, "alice") == "[green]Online[white]\n"


def test_get_no_match():
    command = StatusGetCommand(FakeSession(make_state()))
    assert run(command, "zed") == error_tag() + "No match for 'zed'.\n"


def test_get_multiple_matches():
    command = StatusGetCommand(FakeSession(make_state()))
    assert run(command, "bob") == (
        "Multiple matches were found for 'bob'. Please be more precise.\n"
        "The following matches were found:\n"
        "\tbob#0002\n\tbob#0003\n"
    )


def test_get_too_many_parameters():
    command = StatusGetCommand(FakeSession(make_state()))
    output = run(command, "a", "b")
    assert output.startswith(error_tag() + "Invalid parameters\n")
    assert "status-get - prints your current status" in output


@pytest.mark.parametrize(
    "word, status",
    [
        ("online", Status.ONLINE),
        ("Available", Status.ONLINE),
        ("busy", Status.DO_NOT_DISTURB),
        ("DND", Status.DO_NOT_DISTURB),
        ("idle", Status.IDLE),
        ("invisible", Status.INVISIBLE),
    ],
)
def test_set_updates_settings(word, status):
    session = FakeSession(make_state())
    output = run(StatusSetCommand(session), word)
    assert output == ""
    assert session.updates == [status]
    assert session.state.settings.status == status


def test_set_invalid_status():
    session = FakeSession(make_state())
    output = run(StatusSetCommand(session), "Sleepy")
    assert output == error_tag() + "Invalid status: 'sleepy'\n" + STATUS_SET_HELP_PAGE + "\n"
    assert session.updates == []


def test_set_requires_exactly_one_parameter():
    session = FakeSession(make_state())
    output = run(StatusSetCommand(session))
    assert output == error_tag() + "Invalid parameters\n" + STATUS_SET_HELP_PAGE + "\n"


def test_set_error_keeps_settings():
    session = FakeSession(make_state(), fail="denied")
    output = run(StatusSetCommand(session), "online")
    tag = error_tag()
    assert output == f"{tag}Error setting status:\n\t{tag}'denied'\n"
    assert session.state.settings.status == Status.IDLE


def test_status_dispatch():
    session = FakeSession(make_state())
    command = StatusCommand(StatusGetCommand(session), StatusSetCommand(session))
    assert run(command) == "[yellow]Idle[white]\n"
    assert run(command, "get", "alice") == "[green]Online[white]\n"
    assert run(command, "alice") == "[green]Online[white]\n"
    run(command, "update", "invisible")
    assert session.state.settings.status == Status.INVISIBLE


def test_status_help():
    session = FakeSession(make_state())
    command = StatusCommand(StatusGetCommand(session), StatusSetCommand(session))
    out = io.StringIO()
    command.print_help(out)
    assert out.getvalue() == STATUS_HELP_PAGE + "\n"