"""The command for managing friends and friend requests."""

from __future__ import annotations

import unicodedata
from typing import Protocol, Sequence, TextIO

from cordless.commands.base import Command
from cordless.models import Relationship, RelationshipType, State, User

FRIENDS_DOCUMENTATION = """[orange][::u]# friends[white]

The friends command allows you to manage your friends on discord. You can add
new friends by sending or accepting friendsrequests. You can also see your
current requests, that goes for the incomming and the outgoing ones.

The friend currently command offers the following subcommands:
  * accept   - accept a friends-request
  * befriend - send a friends-request
  * requests - shows all current requests
  * search   - finds friends by name, name#discriminator or id
  * list     - shows all friends
  * remove   - removes a friend from your friendslist

The following features are currently unsupported:
  * Blocking users
  * Unblocking users
"""

_LIST = frozenset({"list", "show", "which"})
_REMOVE = frozenset({"delete", "unfriend", "remove", "decline"})
_REQUESTS = frozenset({"requests", "invites", "outstanding", "unanswered"})
_ACCEPT = frozenset({"accept", "agree"})
_SEARCH = frozenset({"search", "find"})
_BEFRIEND = frozenset({"befriend", "add", "send", "ask", "invite", "request"})

_REMOVABLE = frozenset(
    {
        RelationshipType.FRIEND,
        RelationshipType.OUTGOING_REQUEST,
        RelationshipType.INCOMING_REQUEST,
    }
)


class FriendsSession(Protocol):
    """A session that holds the state and can manage relationships."""

    state: State

    def relationship_delete(self, user_id: str) -> object:
        ...

    def relationship_friend_request_accept(self, user_id: str) -> object:
        ...

    def relationship_friend_request_send(self, user_id: str) -> object:
        ...


def _identifies(user: User, text: str) -> bool:
    return user.id == text or user.username == text or str(user) == text


def _is_number(text: str) -> bool:
    return all(unicodedata.category(char).startswith("N") for char in text)


def _write_multiple(writer: TextIO, text: str, users: Sequence[User]) -> None:
    writer.write(f"Multiple matches were found for '{text}'. Please be more precise.\n")
    writer.write("The following matches were found:\n")
    for user in users:
        writer.write(f"  {user}\n")


class FriendsCommand(Command):
    """Lists, searches, adds, accepts and removes friends."""

    name = "friends"
    aliases = ()

    def __init__(self, session: FriendsSession) -> None:
        self._session = session

    @property
    def _relationships(self) -> list[Relationship]:
        return self._session.state.relationships

    def execute(self, writer: TextIO, parameters: Sequence[str]) -> None:
        if not parameters:
            self.print_help(writer)
            return

        sub_command = parameters[0]
        if sub_command in _LIST:
            self._list(writer)
        elif sub_command in _REMOVE:
            self._remove(writer, parameters)
        elif sub_command in _REQUESTS:
            self._requests(writer)
        elif sub_command in _ACCEPT:
            self._accept(writer, parameters)
        elif sub_command in _SEARCH:
            self._search(writer, parameters)
        elif sub_command in _BEFRIEND:
            self._befriend(writer, parameters)
        else:
            self.print_help(writer)

    def _list(self, writer: TextIO) -> None:
        writer.write("Friends:\n")
        for relationship in self._relationships:
            if relationship.type == RelationshipType.FRIEND:
                writer.write(f"  {relationship.user.username}\n")

    def _remove(self, writer: TextIO, parameters: Sequence[str]) -> None:
        if len(parameters) != 2:
            writer.write("Usage: friends remove <Username|Username#NNNN|UserID>\n")
            return

        text = parameters[1]
        matches = [
            relationship.user
            for relationship in self._relationships
            if relationship.type in _REMOVABLE and _identifies(relationship.user, text)
        ]

        if not matches:
            writer.write(f"No matches for '{text}' found.\n")
        elif len(matches) == 1:
            user = matches[0]
            writer.write(f"Removing friend {user}\n")
            try:
                self._session.relationship_delete(user.id)
            except Exception as error:
                writer.write(f"Error removing friend ({error}).\n")
            else:
                writer.write(f"{user} has been removed as your friend.\n")
        else:
            _write_multiple(writer, text, matches)

    def _requests(self, writer: TextIO) -> None:
        incoming = ""
        outgoing = ""
        for relationship in self._relationships:
            if relationship.type == RelationshipType.INCOMING_REQUEST:
                incoming += f"  {relationship.user}\n"
            elif relationship.type == RelationshipType.OUTGOING_REQUEST:
                outgoing += f"  {relationship.user}\n"

        writer.write("Incomming requests:\n")
        writer.write((incoming or "No incomming requests.") + "\n")
        writer.write("Outgoing requests:\n")
        writer.write((outgoing or "No outgoing requests.") + "\n")

    def _accept(self, writer: TextIO, parameters: Sequence[str]) -> None:
        if len(parameters) != 2:
            writer.write("Usage: friends accept <Username|Username#NNNN|UserID\n")
            return

        text = parameters[1]
        matches = [
            relationship.user
            for relationship in self._relationships
            if relationship.type == RelationshipType.INCOMING_REQUEST
            and _identifies(relationship.user, text)
        ]

        if not matches:
            writer.write(f"No matches for '{text}' found.\n")
        elif len(matches) == 1:
            user = matches[0]
            writer.write(f"Accepting friends request of {user}\n")
            try:
                self._session.relationship_friend_request_accept(user.id)
            except Exception as error:
                writer.write(f"Error accepting friendsrequest ({error}).\n")
            else:
                writer.write(f"{user} is now your friend.\n")
        else:
            _write_multiple(writer, text, matches)

    def _search(self, writer: TextIO, parameters: Sequence[str]) -> None:
        if len(parameters) != 2:
            writer.write("Usage: friends find <Username|Username#NNNN|UserID\n")
            return

        text = parameters[1]
        matches = [
            relationship.user
            for relationship in self._relationships
            if relationship.type == RelationshipType.FRIEND
            and (
                text in relationship.user.id
                or text in relationship.user.username
                or text in str(relationship.user)
            )
        ]

        if not matches:
            writer.write(f"No matches were found for '{text}'.\n")
            return
        writer.write("The following matches were found:\n")
        for user in matches:
            writer.write(f"  {user}\n")

    def _befriend(self, writer: TextIO, parameters: Sequence[str]) -> None:
        if len(parameters) != 2:
            writer.write("Usage: friends befriend <Username|Username#NNNN|UserID\n")
            return

        text = parameters[1]
        try:
            users = self._session.state.users()
        except Exception as error:
            writer.write(f"An error occured during commandexecution ({error}).\n")
            return

        matches = [user for user in users if _identifies(user, text)]

        if not matches:
            if not _is_number(text):
                writer.write(
                    f"No matches for '{text}' found. Please ask that person to add you "
                    "or find out the UserID.\n"
                )
                return
            try:
                self._session.relationship_friend_request_send(text)
            except Exception as error:
                writer.write(f"Error sending friends-request ({error}).\n")
            else:
                writer.write("Friends-request has been sent.\n")
        elif len(matches) == 1:
            user = matches[0]
            try:
                self._session.relationship_friend_request_send(user.id)
            except Exception as error:
                writer.write(f"Error sending friends-request ({error}).\n")
            else:
                writer.write(f"A friends-reuest has been sent to '{user}'.\n")
        else:
            _write_multiple(writer, text, matches)

    def print_help(self, writer: TextIO) -> None:
        writer.write(FRIENDS_DOCUMENTATION + "\n")