"""Configurable keyboard shortcuts and their persistence."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union

from cordless.config import get_config_directory
from cordless.keys import Key, KeyEvent, ModMask, events_equal


@dataclass(frozen=True)
class Scope:
    """Where a shortcut applies; a child scope overrides its parent."""

    identifier: str
    name: str
    parent: Optional[Scope] = None


@dataclass(eq=False)
class Shortcut:
    """A named key combination inside a scope."""

    identifier: str
    name: str
    scope: Scope
    event: Optional[KeyEvent]
    default_event: Optional[KeyEvent] = field(default=None, repr=False)

    def equals(self, event: Optional[KeyEvent]) -> bool:
        """Tell whether the event triggers this shortcut."""
        return events_equal(self.event, event)

    def reset(self) -> None:
        """Restore the default key combination."""
        self.event = self.default_event

    def to_dict(self) -> dict[str, Any]:
        """Return the persisted form; scopes are referred to by identifier."""
        if self.event is None:
            key = mod = rune = -1
        else:
            key, mod, rune = int(self.event.key), int(self.event.mod), int(self.event.rune)
        return {
            "Identifier": self.identifier,
            "ScopeIdentifier": self.scope.identifier,
            "EventKey": key,
            "EventMod": mod,
            "EventRune": rune,
        }


SCOPES: list[Scope] = []
SHORTCUTS: list[Shortcut] = []


def _add_scope(identifier: str, name: str, parent: Optional[Scope]) -> Scope:
    scope = Scope(identifier=identifier, name=name, parent=parent)
    SCOPES.append(scope)
    return scope


def _add_shortcut(identifier: str, name: str, scope: Scope, event: KeyEvent) -> Shortcut:
    shortcut = Shortcut(identifier, name, scope, event, default_event=event)
    SHORTCUTS.append(shortcut)
    return shortcut


GLOBAL_SCOPE = _add_scope("global", "Application wide", None)
MULTILINE_TEXT_INPUT = _add_scope("multiline_text_input", "Multiline text input", GLOBAL_SCOPE)
CHATVIEW = _add_scope("chatview", "Chatview", GLOBAL_SCOPE)

QUOTE_SELECTED_MESSAGE = _add_shortcut(
    "quote_selected_message", "Quote selected message",
    CHATVIEW, KeyEvent(Key.RUNE, "q", ModMask.NONE))
EDIT_SELECTED_MESSAGE = _add_shortcut(
    "edit_selected_message", "Edit selected message",
    CHATVIEW, KeyEvent(Key.RUNE, "e", ModMask.NONE))
REPLY_SELECTED_MESSAGE = _add_shortcut(
    "reply_selected_message", "Reply to author selected message",
    CHATVIEW, KeyEvent(Key.RUNE, "r", ModMask.NONE))
COPY_SELECTED_MESSAGE_LINK = _add_shortcut(
    "copy_selected_message_link", "Copy link to selected message",
    CHATVIEW, KeyEvent(Key.RUNE, "l", ModMask.NONE))
COPY_SELECTED_MESSAGE = _add_shortcut(
    "copy_selected_message", "Copy content of selected message",
    CHATVIEW, KeyEvent(Key.RUNE, "c", ModMask.NONE))
TOGGLE_SELECTED_MESSAGE_SPOILERS = _add_shortcut(
    "toggle_selected_message_spoilers", "Toggle spoilers in selected message",
    CHATVIEW, KeyEvent(Key.RUNE, "s", ModMask.NONE))
DELETE_SELECTED_MESSAGE = _add_shortcut(
    "toggle_selected_message_spoilers", "Toggle spoilers in selected message",
    CHATVIEW, KeyEvent(Key.DELETE, 0, ModMask.NONE))

EXPAND_SELECTION_TO_LEFT = _add_shortcut(
    "expand_selection_word_to_left", "Expand selection word to left",
    MULTILINE_TEXT_INPUT, KeyEvent(Key.LEFT, 0, ModMask.SHIFT))
EXPAND_SELECTION_TO_RIGHT = _add_shortcut(
    "expand_selection_word_to_right", "Expand selection word to right",
    MULTILINE_TEXT_INPUT, KeyEvent(Key.RIGHT, 0, ModMask.SHIFT))
SELECT_ALL = _add_shortcut(
    "select_all", "Select all",
    MULTILINE_TEXT_INPUT, KeyEvent(Key.CTRL_A, int(Key.CTRL_A), ModMask.CTRL))
SELECT_WORD_LEFT = _add_shortcut(
    "select_word_to_left", "Select word to left",
    MULTILINE_TEXT_INPUT, KeyEvent(Key.LEFT, 0, ModMask.CTRL | ModMask.SHIFT))
SELECT_WORD_RIGHT = _add_shortcut(
    "select_word_to_right", "Select word to right",
    MULTILINE_TEXT_INPUT, KeyEvent(Key.RIGHT, 0, ModMask.CTRL | ModMask.SHIFT))

MOVE_CURSOR_LEFT = _add_shortcut(
    "move_cursor_to_left", "Move cursor to left",
    MULTILINE_TEXT_INPUT, KeyEvent(Key.LEFT, 0, ModMask.NONE))
MOVE_CURSOR_RIGHT = _add_shortcut(
    "move_cursor_to_right", "Move cursor to right",
    MULTILINE_TEXT_INPUT, KeyEvent(Key.RIGHT, 0, ModMask.NONE))
MOVE_CURSOR_WORD_LEFT = _add_shortcut(
    "move_cursor_to_word_left", "Move cursor to word left",
    MULTILINE_TEXT_INPUT, KeyEvent(Key.LEFT, 0, ModMask.CTRL))
MOVE_CURSOR_WORD_RIGHT = _add_shortcut(
    "move_cursor_to_word_right", "Move cursor to word right",
    MULTILINE_TEXT_INPUT, KeyEvent(Key.RIGHT, 0, ModMask.CTRL))

DELETE_RIGHT = _add_shortcut(
    "delete_right", "Delete right",
    MULTILINE_TEXT_INPUT, KeyEvent(Key.DELETE, 0, ModMask.NONE))
INPUT_NEW_LINE = _add_shortcut(
    "add_new_line_character", "Add new line character",
    MULTILINE_TEXT_INPUT, KeyEvent(Key.ENTER, int(Key.ENTER), ModMask.ALT))

COPY_SELECTION = _add_shortcut(
    "copy_selection", "Copy selected text",
    MULTILINE_TEXT_INPUT, KeyEvent(Key.RUNE, "C", ModMask.ALT))
PASTE_AT_SELECTION = _add_shortcut(
    "paste_at_selectiom", "Paste clipboard content",
    MULTILINE_TEXT_INPUT, KeyEvent(Key.CTRL_V, int(Key.CTRL_V), ModMask.CTRL))

SEND_MESSAGE = _add_shortcut(
    "send_message", "Sends the typed message",
    MULTILINE_TEXT_INPUT, KeyEvent(Key.ENTER, int(Key.ENTER), ModMask.NONE))

ADD_NEW_LINE_IN_CODE_BLOCK = _add_shortcut(
    "add_new_line_in_code_block", "Adds a new line inside a code block",
    MULTILINE_TEXT_INPUT, KeyEvent(Key.ENTER, int(Key.ENTER), ModMask.NONE))

EXIT_APPLICATION = _add_shortcut(
    "exit_application", "Exit application",
    GLOBAL_SCOPE, KeyEvent(Key.CTRL_C, int(Key.CTRL_C), ModMask.CTRL))

FOCUS_CHANNEL_CONTAINER = _add_shortcut(
    "focus_channel_container", "Focus channel container",
    GLOBAL_SCOPE, KeyEvent(Key.RUNE, "c", ModMask.ALT))
FOCUS_USER_CONTAINER = _add_shortcut(
    "focus_user_container", "Focus user container",
    GLOBAL_SCOPE, KeyEvent(Key.RUNE, "u", ModMask.ALT))
FOCUS_GUILD_CONTAINER = _add_shortcut(
    "focus_guild_container", "Focus guild container",
    GLOBAL_SCOPE, KeyEvent(Key.RUNE, "s", ModMask.ALT))
FOCUS_PRIVATE_CHAT_PAGE = _add_shortcut(
    "focus_private_chat_page", "Focus private chat page",
    GLOBAL_SCOPE, KeyEvent(Key.RUNE, "p", ModMask.ALT))
SWITCH_TO_PREVIOUS_CHANNEL = _add_shortcut(
    "switch_to_previous_channel", "Switch to previous channel",
    GLOBAL_SCOPE, KeyEvent(Key.RUNE, "l", ModMask.ALT))
FOCUS_MESSAGE_INPUT = _add_shortcut(
    "focus_message_input", "Focus message input",
    GLOBAL_SCOPE, KeyEvent(Key.RUNE, "m", ModMask.ALT))
FOCUS_MESSAGE_CONTAINER = _add_shortcut(
    "focus_message_container", "Focus message container",
    GLOBAL_SCOPE, KeyEvent(Key.RUNE, "t", ModMask.ALT))
FOCUS_COMMAND_INPUT = _add_shortcut(
    "focus_command_input", "Focus command input",
    GLOBAL_SCOPE, KeyEvent(Key.CTRL_I, int(Key.CTRL_I), ModMask.NONE))
FOCUS_COMMAND_OUTPUT = _add_shortcut(
    "focus_command_output", "Focus command output",
    GLOBAL_SCOPE, KeyEvent(Key.CTRL_O, int(Key.CTRL_O), ModMask.CTRL))

TOGGLE_USER_CONTAINER = _add_shortcut(
    "toggle_user_container", "Toggle user container",
    GLOBAL_SCOPE, KeyEvent(Key.RUNE, "U", ModMask.ALT))
TOGGLE_COMMAND_VIEW = _add_shortcut(
    "toggle_command_view", "Toggle command view",
    GLOBAL_SCOPE, KeyEvent(Key.RUNE, ".", ModMask.ALT))


def _int_field(values: Mapping[str, Any], key: str) -> int:
    value = values.get(key.lower(), 0)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{key} must be an integer")
    return value


def shortcut_from_dict(data: Any) -> Shortcut:
    """Rebuild a shortcut from its persisted form.

    Raises ``ValueError`` if the data is malformed or names an unknown scope.
    """
    if not isinstance(data, Mapping):
        raise ValueError("a shortcut must be a JSON object")
    values = {str(key).lower(): value for key, value in data.items()}

    identifier = values.get("identifier") or ""
    scope_identifier = values.get("scopeidentifier") or ""
    if not isinstance(identifier, str) or not isinstance(scope_identifier, str):
        raise ValueError("shortcut identifiers must be strings")

    key = _int_field(values, "EventKey")
    mod = _int_field(values, "EventMod")
    rune = _int_field(values, "EventRune")
    event = None if key == mod == rune == -1 else KeyEvent(key, rune, mod)

    scope = next((s for s in SCOPES if s.identifier == scope_identifier), None)
    if scope is None:
        raise ValueError(f"error finding scope '{scope_identifier}'")

    return Shortcut(identifier=identifier, name="", scope=scope, event=event)


def get_shortcuts_path() -> Path:
    """Return the path of the shortcuts file in the configuration directory."""
    return get_config_directory() / "shortcuts.json"


def load(path: Union[str, Path, None] = None) -> None:
    """Apply the persisted key combinations to the known shortcuts.

    A missing file changes nothing and a malformed one is ignored; an empty
    file raises ``ValueError``.
    """
    file_path = Path(path) if path is not None else get_shortcuts_path()
    try:
        text = file_path.read_text(encoding="utf-8").lstrip()
    except FileNotFoundError:
        return

    if not text:
        raise ValueError(f"shortcuts file {file_path} is empty")

    try:
        data, _ = json.JSONDecoder().raw_decode(text)
        if data is None:
            return
        if not isinstance(data, list):
            return
        loaded = [shortcut_from_dict(item) for item in data if item is not None]
    except ValueError:
        return

    for shortcut in loaded:
        target = next(
            (
                known
                for known in SHORTCUTS
                if known.identifier == shortcut.identifier
                and known.scope.identifier == shortcut.scope.identifier
            ),
            None,
        )
        if target is not None:
            target.event = shortcut.event


def persist(path: Union[str, Path, None] = None) -> None:
    """Write the current key combinations of all shortcuts to disk."""
    file_path = Path(path) if path is not None else get_shortcuts_path()
    file_path.write_text(
        json.dumps([shortcut.to_dict() for shortcut in SHORTCUTS], indent=4, ensure_ascii=False),
        encoding="utf-8",
    )