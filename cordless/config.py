"""Application configuration and its location on disk."""

from __future__ import annotations

import json
import os
import sys
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from enum import IntEnum
from pathlib import Path
from typing import Any, Optional

APP_NAME = "Cordless"
APP_NAME_LOWERCASE = "cordless"


class ConfigError(ValueError):
    """The configuration data has the wrong shape."""


class TimeFormat(IntEnum):
    """How message times are displayed."""

    HOUR_MINUTE_AND_SECONDS = 0
    HOUR_AND_MINUTE = 1
    NO_TIME = 2


class OnTypeInListBehaviour(IntEnum):
    """What happens when the user types while a list has focus."""

    DO_NOTHING = 0
    SEARCH = 1
    FOCUS_MESSAGE_INPUT = 2


@dataclass
class Account:
    """A saved account; the name only serves the user's recognition."""

    name: str = ""
    token: str = ""


def _json_key(name: str) -> str:
    return "".join(part.capitalize() for part in name.split("_"))


@dataclass
class Config:
    """All configurable settings of the application."""

    token: str = ""
    times: int = TimeFormat.HOUR_MINUTE_AND_SECONDS
    use_random_user_colors: bool = False
    focus_channel_after_guild_selection: bool = True
    focus_message_input_after_channel_selection: bool = True
    show_user_container: bool = True
    use_fixed_layout: bool = False
    fixed_size_left: int = 12
    fixed_size_right: int = 12
    on_type_in_list_behaviour: int = OnTypeInListBehaviour.SEARCH
    mouse_enabled: bool = True
    shorten_links: bool = False
    shortener_port: int = 63212
    desktop_notifications: bool = True
    show_placeholder_for_blocked_messages: bool = True
    accounts: list[Account] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Return the configuration in its on-disk JSON form."""
        result: dict[str, Any] = {}
        for config_field in fields(self):
            value = getattr(self, config_field.name)
            if config_field.name == "accounts":
                value = [{"Name": account.name, "Token": account.token} for account in value]
            elif isinstance(value, IntEnum):
                value = int(value)
            result[_json_key(config_field.name)] = value
        return result

    def update_from_dict(self, data: Any) -> None:
        """Apply the known settings in ``data``; keys match case-insensitively."""
        if not isinstance(data, Mapping):
            raise ConfigError("configuration must be a JSON object")

        by_key = {_json_key(f.name).lower(): f.name for f in fields(self)}
        changes: dict[str, Any] = {}
        for key, value in data.items():
            name = by_key.get(str(key).lower())
            if name is None:
                continue
            if value is None:
                if name == "accounts":
                    changes[name] = []
                continue
            changes[name] = _coerce(name, value)

        for name, value in changes.items():
            setattr(self, name, value)


_FIELD_KINDS: dict[str, type] = {
    "token": str,
    "times": TimeFormat,
    "use_random_user_colors": bool,
    "focus_channel_after_guild_selection": bool,
    "focus_message_input_after_channel_selection": bool,
    "show_user_container": bool,
    "use_fixed_layout": bool,
    "fixed_size_left": int,
    "fixed_size_right": int,
    "on_type_in_list_behaviour": OnTypeInListBehaviour,
    "mouse_enabled": bool,
    "shorten_links": bool,
    "shortener_port": int,
    "desktop_notifications": bool,
    "show_placeholder_for_blocked_messages": bool,
    "accounts": list,
}


def _coerce(name: str, value: Any) -> Any:
    kind = _FIELD_KINDS[name]
    if kind is bool:
        if not isinstance(value, bool):
            raise ConfigError(f"{_json_key(name)} must be a boolean")
        return value
    if kind is str:
        if not isinstance(value, str):
            raise ConfigError(f"{_json_key(name)} must be a string")
        return value
    if kind is list:
        return _parse_accounts(value)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{_json_key(name)} must be an integer")
    if kind is int:
        return value
    try:
        return kind(value)
    except ValueError:
        return value


def _parse_accounts(value: Any) -> list[Account]:
    if not isinstance(value, list):
        raise ConfigError("Accounts must be a list")
    accounts = []
    for item in value:
        if not isinstance(item, Mapping):
            raise ConfigError("each account must be a JSON object")
        lowered = {str(key).lower(): entry for key, entry in item.items()}
        name = lowered.get("name") or ""
        token = lowered.get("token") or ""
        if not isinstance(name, str) or not isinstance(token, str):
            raise ConfigError("account name and token must be strings")
        accounts.append(Account(name=name, token=token))
    return accounts


_current_config = Config()
_cached_config_dir: Optional[Path] = None
_cached_script_dir: Optional[Path] = None


def _platform_config_directory() -> Path:
    if sys.platform == "darwin":
        return Path.home() / f".{APP_NAME_LOWERCASE}"
    if sys.platform == "win32":
        appdata = os.environ.get("APPDATA", "")
        if appdata:
            return Path(appdata) / APP_NAME_LOWERCASE
        return Path.home() / "AppData" / "Roaming" / APP_NAME_LOWERCASE
    xdg_dir = os.environ.get("XDG_CONFIG_DIR", "")
    if xdg_dir:
        return Path(xdg_dir)
    return Path.home() / ".config" / APP_NAME_LOWERCASE


def get_config_directory() -> Path:
    """Return the directory holding the settings, creating it if needed."""
    global _cached_config_dir
    if _cached_config_dir is not None:
        return _cached_config_dir

    directory = _platform_config_directory()
    try:
        os.stat(directory)
    except FileNotFoundError:
        directory.mkdir(mode=0o766, parents=True, exist_ok=True)

    _cached_config_dir = directory
    return directory


def get_config_file() -> Path:
    """Return the path of the configuration file."""
    return get_config_directory() / "config.json"


def get_script_directory() -> Path:
    """Return the directory at which external scripts lie."""
    global _cached_script_dir
    if _cached_script_dir is None:
        base = _cached_config_dir if _cached_config_dir is not None else Path()
        _cached_script_dir = base / "scripts"
    return _cached_script_dir


def get_config() -> Config:
    """Return the currently loaded configuration."""
    return _current_config


def _read_json_document(path: Path) -> Any:
    text = path.read_text(encoding="utf-8").lstrip()
    if not text:
        return None
    value, _ = json.JSONDecoder().raw_decode(text)
    return value


def load_config() -> Config:
    """Load the configuration file into the current configuration."""
    path = get_config_file()
    try:
        data = _read_json_document(path)
    except FileNotFoundError:
        return get_config()

    if data is not None:
        _current_config.update_from_dict(data)
    return get_config()


def persist_config() -> None:
    """Write the current configuration to the configuration file."""
    path = get_config_file()
    path.write_text(
        json.dumps(_current_config.to_dict(), indent=4, ensure_ascii=False),
        encoding="utf-8",
    )