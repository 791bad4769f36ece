"""Helpers for presenting and ordering chat entities."""

from __future__ import annotations

import random
import re
from datetime import datetime, timedelta, timezone
from typing import Optional, Protocol, Sequence

from cordless.models import (
    PERMISSION_READ_MESSAGES,
    Channel,
    ChannelType,
    Guild,
    Member,
    Message,
    RelationshipType,
    Role,
    Settings,
    State,
    StateCacheError,
    User,
    UserGuild,
)
from cordless.theme import color_to_hex, escape, get_theme

BOT_PREFIX = escape("[BOT]")

_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1
_SIGNED_DECIMAL = re.compile(r"[+-]?[0-9]+")
_RFC3339 = re.compile(
    r"([0-9]{4})-([0-9]{2})-([0-9]{2})[Tt]([0-9]{2}):([0-9]{2}):([0-9]{2})"
    r"(?:\.([0-9]+))?([Zz]|[+-][0-9]{2}:[0-9]{2})"
)

_user_color_cache: dict[str, str] = {}
_last_random_index = -1


class GuildLoader(Protocol):
    """Something that can list the current user's guilds page by page."""

    def user_guilds(self, limit: int, before_id: str, after_id: str) -> Optional[Sequence[UserGuild]]:
        ...


def _parse_int64(text: str) -> Optional[int]:
    if not _SIGNED_DECIMAL.fullmatch(text):
        return None
    value = int(text)
    if not _INT64_MIN <= value <= _INT64_MAX:
        return None
    return value


def _parse_timestamp(text: str) -> datetime:
    match = _RFC3339.fullmatch(text)
    if match is None:
        raise ValueError(f"invalid timestamp {text!r}")
    year, month, day, hour, minute, second, fraction, zone = match.groups()
    microsecond = int((fraction or "0")[:6].ljust(6, "0"))
    if zone in ("Z", "z"):
        tz = timezone.utc
    else:
        sign = -1 if zone[0] == "-" else 1
        offset = timedelta(hours=int(zone[1:3]), minutes=int(zone[4:6]))
        tz = timezone(sign * offset)
    return datetime(
        int(year), int(month), int(day), int(hour), int(minute), int(second), microsecond, tzinfo=tz
    )


def get_channel_name_for_tree(channel: Channel) -> str:
    """Return the name shown for a channel in the channel tree."""
    if channel.nsfw:
        return "🔞" + channel.name
    return channel.name


def sort_messages_by_timestamp(messages: list[Message]) -> None:
    """Sort messages in place by creation time; unparsable ones go last."""

    def key(message: Message) -> tuple[int, float]:
        try:
            return (0, _parse_timestamp(message.timestamp).timestamp())
        except ValueError:
            return (1, 0.0)

    messages.sort(key=key)


def get_private_channel_name(channel: Channel) -> str:
    """Generate the display name of a private channel."""
    name = ""
    if channel.type == ChannelType.DM:
        name = channel.recipients[0].username
    elif channel.type == ChannelType.GROUP_DM:
        name = channel.name or ", ".join(user.username for user in channel.recipients)

    return escape(name or "Unnamed")


def compare_channels(a: Channel, b: Channel) -> bool:
    """Tell whether ``a`` has the more recent message than ``b``."""
    message_a = _parse_int64(a.last_message_id)
    if message_a is None:
        return False
    message_b = _parse_int64(b.last_message_id)
    if message_b is None:
        return True
    return message_a > message_b


def sort_private_channels(channels: list[Channel]) -> None:
    """Sort channels in place, most recent message first."""

    def key(channel: Channel) -> tuple[int, int]:
        value = _parse_int64(channel.last_message_id)
        return (1, 0) if value is None else (0, -value)

    channels.sort(key=key)


def has_read_messages_permission(channel_id: str, state: State) -> bool:
    """Tell whether the current user may view the channel."""
    try:
        permissions = state.user_channel_permissions(state.user.id, channel_id)
    except StateCacheError:
        return False
    return permissions & PERMISSION_READ_MESSAGES > 0


def load_guilds(guild_loader: GuildLoader) -> list[UserGuild]:
    """Load every guild the current user belongs to, oldest first."""
    guilds: list[UserGuild] = []
    before_id = ""
    while True:
        new_guilds = list(guild_loader.user_guilds(100, before_id, "") or [])
        if not new_guilds:
            return guilds
        guilds = new_guilds + guilds
        if len(new_guilds) != 100:
            return guilds
        before_id = new_guilds[0].id


def sort_guilds(settings: Settings, guilds: list[Guild]) -> None:
    """Sort guilds in place in the order of the user's settings."""
    positions: dict[str, int] = {}
    for index, guild_id in enumerate(settings.guild_positions):
        positions.setdefault(guild_id, index)
    unknown = len(settings.guild_positions)
    guilds.sort(key=lambda guild: positions.get(guild.id, unknown))


def _random_color_string() -> str:
    global _last_random_index
    theme = get_theme()
    colors = theme.random_user_colors
    if not colors:
        return "[" + color_to_hex(theme.default_user_color) + "]"
    if len(colors) == 1:
        return color_to_hex(colors[0])

    index = _last_random_index
    while index == _last_random_index:
        index = random.randrange(len(colors))
    _last_random_index = index
    return color_to_hex(colors[index])


def get_user_color(user: User) -> str:
    """Return the user's colour for this session, picking one if needed."""
    if user.bot:
        return color_to_hex(get_theme().bot_color)

    cached = _user_color_cache.get(user.id)
    if cached is not None:
        return cached

    color = _random_color_string()
    _user_color_cache[user.id] = color
    return color


def _user_name(name: str, bot: bool) -> str:
    escaped = escape(name)
    return BOT_PREFIX + escaped if bot else escaped


def get_member_name(member: Member) -> str:
    """Return the nickname or username, with the bot prefix for bots."""
    if member.nick:
        return _user_name(member.nick, member.user.bot)
    return get_user_name(member.user)


def get_user_name(user: User) -> str:
    """Return the username, with the bot prefix for bots."""
    return _user_name(user.username, user.bot)


def sort_user_roles(roles: list[str], guild_roles: Sequence[Role]) -> None:
    """Sort role IDs in place, highest role first; unknown roles go first."""
    by_id: dict[str, Role] = {}
    for role in guild_roles:
        by_id.setdefault(role.id, role)

    def key(role_id: str) -> tuple[int, int]:
        role = by_id.get(role_id)
        return (0, 0) if role is None else (1, -role.position)

    roles.sort(key=key)


def is_blocked(state: State, user: User) -> bool:
    """Tell whether the state holds a block relationship with the user."""
    return any(
        relationship.user.id == user.id and relationship.type == RelationshipType.BLOCKED
        for relationship in state.relationships
    )