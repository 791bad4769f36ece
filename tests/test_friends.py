import io

import pytest

from cordless.commands.friends import FRIENDS_DOCUMENTATION, FriendsCommand
from cordless.models import Channel, ChannelType, Relationship, RelationshipType, State, User


class FakeSession:
    def __init__(self, state, fail=None):
        self.state = state
        self.fail = fail
        self.calls = []

    def _call(self, name, user_id):
        self.calls.append((name, user_id))
        if self.fail is not None:
            raise RuntimeError(self.fail)

    def relationship_delete(self, user_id):
        self._call("delete", user_id)

    def relationship_friend_request_accept(self, user_id):
        self._call("accept", user_id)

    def relationship_friend_request_send(self, user_id):
        self._call("send", user_id)


ALICE = User(id="1", username="alice", discriminator="0001")
ALICIA = User(id="2", username="alicia", discriminator="0002")
BOB = User(id="3", username="bob", discriminator="0003")
CAROL = User(id="4", username="carol", discriminator="0004")


def make_state():
    return State(
        relationships=[
            Relationship(type=RelationshipType.FRIEND, user=ALICE),
            Relationship(type=RelationshipType.FRIEND, user=ALICIA),
            Relationship(type=RelationshipType.INCOMING_REQUEST, user=BOB),
            Relationship(type=RelationshipType.BLOCKED, user=CAROL),
        ]
    )


def run(session, *parameters):
    out = io.StringIO()
    FriendsCommand(session).execute(out, list(parameters))
    return out.getvalue()


def test_no_parameters_prints_help():
    assert run(FakeSession(make_state())) == FRIENDS_DOCUMENTATION + "\n"


def test_unknown_subcommand_prints_help():
    assert run(FakeSession(make_state()), "nonsense") == FRIENDS_DOCUMENTATION + "\n"


@pytest.mark.parametrize("word", ["list", "show", "which"])
def test_list_shows_only_friends(word):
    assert run(FakeSession(make_state()), word) == "Friends:\n  alice\n  alicia\n"


def test_remove_single_match():
    session = FakeSession(make_state())
    output = run(session, "remove", "alice")
    assert session.calls == [("delete", "1")]
    assert output == f"Removing friend {ALICE}\n{ALICE} has been removed as your friend.\n"


def test_remove_incoming_request_by_full_name():
    session = FakeSession(make_state())
    run(session, "decline", str(BOB))
    assert session.calls == [("delete", "3")]


def test_remove_blocked_user_is_not_matched():
    session = FakeSession(make_state())
    output = run(session, "remove", "carol")
    assert output == "No matches for 'carol' found.\n"
    assert session.calls == []


def test_remove_error_is_reported():
    session = FakeSession(make_state(), fail="boom")
    output = run(session, "unfriend", "1")
    assert output.endswith("Error removing friend (boom).\n")


def test_remove_usage():
    assert run(FakeSession(make_state()), "remove") == (
        "Usage: friends remove <Username|Username#NNNN|UserID>\n"
    )


def test_requests_listing():
    output = run(FakeSession(make_state()), "requests")
    assert output == (
        "Incomming requests:\n"
        f"  {BOB}\n\n"
        "Outgoing requests:\n"
        "No outgoing requests.\n"
    )


def test_requests_empty():
    output = run(FakeSession(State()), "invites")
    assert output == (
        "Incomming requests:\nNo incomming requests.\n"
        "Outgoing requests:\nNo outgoing requests.\n"
    )


def test_accept_incoming_request():
    session = FakeSession(make_state())
    output = run(session, "accept", "bob")
    assert session.calls == [("accept", "3")]
    assert output == f"Accepting friends request of {BOB}\n{BOB} is now your friend.\n"


def test_accept_does_not_match_friends():
    session = FakeSession(make_state())
    assert run(session, "agree", "alice") == "No matches for 'alice' found.\n"
    assert session.calls == []


def test_search_lists_partial_matches():
    output = run(FakeSession(make_state()), "search", "ali")
    assert output == f"The following matches were found:\n  {ALICE}\n  {ALICIA}\n"


def test_search_without_match():
    assert run(FakeSession(make_state()), "find", "zed") == "No matches were found for 'zed'.\n"


def test_remove_multiple_matches_are_listed():
    twin = User(id="9", username="alice", discriminator="0009")
    state = make_state()
    state.relationships.append(Relationship(type=RelationshipType.FRIEND, user=twin))
    session = FakeSession(state)
    output = run(session, "remove", "alice")
    assert session.calls == []
    assert output == (
        "Multiple matches were found for 'alice'. Please be more precise.\n"
        "The following matches were found:\n"
        f"  {ALICE}\n  {twin}\n"
    )


def _state_with_known_users():
    state = make_state()
    state.private_channels.append(
        Channel(id="c", type=ChannelType.DM, recipients=[CAROL])
    )
    return state


def test_befriend_known_user():
    session = FakeSession(_state_with_known_users())
    output = run(session, "add", "carol")
    assert session.calls == [("send", "4")]
    assert output == f"A friends-reuest has been sent to '{CAROL}'.\n"


def test_befriend_unknown_numeric_id():
    session = FakeSession(_state_with_known_users())
    output = run(session, "befriend", "123456")
    assert session.calls == [("send", "123456")]
    assert output == "Friends-request has been sent.\n"


def test_befriend_unknown_name():
    session = FakeSession(_state_with_known_users())
    output = run(session, "invite", "zed")
    assert session.calls == []
    assert output.startswith("No matches for 'zed' found.")


def test_befriend_error_is_reported():
    session = FakeSession(_state_with_known_users(), fail="nope")
    assert run(session, "send", "42") == "Error sending friends-request (nope).\n"