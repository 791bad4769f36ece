"""Chat entities and the locally cached session state."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Callable, Optional, TypeVar

PERMISSION_CREATE_INSTANT_INVITE = 1 << 0
PERMISSION_KICK_MEMBERS = 1 << 1
PERMISSION_BAN_MEMBERS = 1 << 2
PERMISSION_ADMINISTRATOR = 1 << 3
PERMISSION_MANAGE_CHANNELS = 1 << 4
PERMISSION_MANAGE_SERVER = 1 << 5
PERMISSION_ADD_REACTIONS = 1 << 6
PERMISSION_VIEW_AUDIT_LOGS = 1 << 7
PERMISSION_READ_MESSAGES = 1 << 10
PERMISSION_SEND_MESSAGES = 1 << 11
PERMISSION_SEND_TTS_MESSAGES = 1 << 12
PERMISSION_MANAGE_MESSAGES = 1 << 13
PERMISSION_EMBED_LINKS = 1 << 14
PERMISSION_ATTACH_FILES = 1 << 15
PERMISSION_READ_MESSAGE_HISTORY = 1 << 16
PERMISSION_MENTION_EVERYONE = 1 << 17
PERMISSION_USE_EXTERNAL_EMOJIS = 1 << 18
PERMISSION_VOICE_CONNECT = 1 << 20
PERMISSION_VOICE_SPEAK = 1 << 21
PERMISSION_VOICE_MUTE_MEMBERS = 1 << 22
PERMISSION_VOICE_DEAFEN_MEMBERS = 1 << 23
PERMISSION_VOICE_MOVE_MEMBERS = 1 << 24
PERMISSION_VOICE_USE_VAD = 1 << 25
PERMISSION_CHANGE_NICKNAME = 1 << 26
PERMISSION_MANAGE_NICKNAMES = 1 << 27
PERMISSION_MANAGE_ROLES = 1 << 28
PERMISSION_MANAGE_WEBHOOKS = 1 << 29
PERMISSION_MANAGE_EMOJIS = 1 << 30

PERMISSION_ALL_TEXT = (
    PERMISSION_READ_MESSAGES
    | PERMISSION_SEND_MESSAGES
    | PERMISSION_SEND_TTS_MESSAGES
    | PERMISSION_MANAGE_MESSAGES
    | PERMISSION_EMBED_LINKS
    | PERMISSION_ATTACH_FILES
    | PERMISSION_READ_MESSAGE_HISTORY
    | PERMISSION_MENTION_EVERYONE
)
PERMISSION_ALL_VOICE = (
    PERMISSION_VOICE_CONNECT
    | PERMISSION_VOICE_SPEAK
    | PERMISSION_VOICE_MUTE_MEMBERS
    | PERMISSION_VOICE_DEAFEN_MEMBERS
    | PERMISSION_VOICE_MOVE_MEMBERS
    | PERMISSION_VOICE_USE_VAD
)
PERMISSION_ALL_CHANNEL = (
    PERMISSION_ALL_TEXT
    | PERMISSION_ALL_VOICE
    | PERMISSION_CREATE_INSTANT_INVITE
    | PERMISSION_MANAGE_ROLES
    | PERMISSION_MANAGE_CHANNELS
    | PERMISSION_ADD_REACTIONS
    | PERMISSION_VIEW_AUDIT_LOGS
)
PERMISSION_ALL = (
    PERMISSION_ALL_CHANNEL
    | PERMISSION_KICK_MEMBERS
    | PERMISSION_BAN_MEMBERS
    | PERMISSION_MANAGE_SERVER
    | PERMISSION_ADMINISTRATOR
    | PERMISSION_MANAGE_WEBHOOKS
    | PERMISSION_MANAGE_EMOJIS
)


class ChannelType(IntEnum):
    """The kind of a channel."""

    GUILD_TEXT = 0
    DM = 1
    GUILD_VOICE = 2
    GROUP_DM = 3
    GUILD_CATEGORY = 4


class RelationshipType(IntEnum):
    """How the current user relates to another user."""

    FRIEND = 1
    BLOCKED = 2
    INCOMING_REQUEST = 3
    OUTGOING_REQUEST = 4


class Status(str, Enum):
    """Online status of a user."""

    ONLINE = "online"
    IDLE = "idle"
    DO_NOT_DISTURB = "dnd"
    INVISIBLE = "invisible"
    OFFLINE = "offline"


@dataclass
class User:
    """A chat user."""

    id: str = ""
    username: str = ""
    discriminator: str = ""
    bot: bool = False

    def __str__(self) -> str:
        return f"{self.username}#{self.discriminator}"


@dataclass
class Role:
    """A role inside a guild."""

    id: str = ""
    name: str = ""
    position: int = 0
    permissions: int = 0


@dataclass
class PermissionOverwrite:
    """A channel specific permission change for a role or a member."""

    id: str = ""
    type: str = ""
    allow: int = 0
    deny: int = 0


@dataclass
class Message:
    """A message; the timestamp is kept in its RFC 3339 text form."""

    id: str = ""
    channel_id: str = ""
    content: str = ""
    timestamp: str = ""
    author: Optional[User] = None


@dataclass
class Channel:
    """A guild or private channel."""

    id: str = ""
    guild_id: str = ""
    name: str = ""
    topic: str = ""
    type: ChannelType = ChannelType.GUILD_TEXT
    last_message_id: str = ""
    nsfw: bool = False
    position: int = 0
    parent_id: str = ""
    recipients: list[User] = field(default_factory=list)
    messages: list[Message] = field(default_factory=list)
    permission_overwrites: list[PermissionOverwrite] = field(default_factory=list)


@dataclass
class Member:
    """A user's membership in a guild."""

    guild_id: str = ""
    user: Optional[User] = None
    nick: str = ""
    roles: list[str] = field(default_factory=list)


@dataclass
class Guild:
    """A server with its channels, roles and members."""

    id: str = ""
    name: str = ""
    owner_id: str = ""
    channels: list[Channel] = field(default_factory=list)
    roles: list[Role] = field(default_factory=list)
    members: list[Member] = field(default_factory=list)


@dataclass
class UserGuild:
    """The short form of a guild as listed for the current user."""

    id: str = ""
    name: str = ""
    owner: bool = False
    permissions: int = 0


@dataclass
class Relationship:
    """A friendship, block or pending friend request."""

    id: str = ""
    type: RelationshipType = RelationshipType.FRIEND
    user: Optional[User] = None


@dataclass
class Presence:
    """The status of another user."""

    user: Optional[User] = None
    status: Status = Status.OFFLINE


@dataclass
class Settings:
    """The current user's client settings."""

    status: Status = Status.ONLINE
    guild_positions: list[str] = field(default_factory=list)


@dataclass
class ChannelOverride:
    """Notification settings for a single channel."""

    channel_id: str = ""
    muted: bool = False


@dataclass
class UserGuildSettings:
    """Notification settings for a guild; private channels use an empty ID."""

    guild_id: str = ""
    muted: bool = False
    channel_overrides: list[ChannelOverride] = field(default_factory=list)


@dataclass
class ReadState:
    """The last message the server knows the user has read in a channel."""

    id: str = ""
    last_message_id: str = ""
    mention_count: int = 0


class StateCacheError(LookupError):
    """The requested entity is not in the local state."""


_T = TypeVar("_T")


def _replace_or_append(items: list[_T], item: _T, key: Callable[[_T], str]) -> None:
    wanted = key(item)
    for position, existing in enumerate(items):
        if key(existing) == wanted:
            items[position] = item
            return
    items.append(item)


def _member_user_id(member: Member) -> str:
    return member.user.id if member.user is not None else ""


@dataclass
class State:
    """Everything the session knows locally about guilds, channels and users."""

    user: Optional[User] = None
    guilds: list[Guild] = field(default_factory=list)
    private_channels: list[Channel] = field(default_factory=list)
    relationships: list[Relationship] = field(default_factory=list)
    presences: list[Presence] = field(default_factory=list)
    settings: Settings = field(default_factory=Settings)
    read_state: list[ReadState] = field(default_factory=list)
    user_guild_settings: list[UserGuildSettings] = field(default_factory=list)

    def guild(self, guild_id: str) -> Guild:
        """Return the guild with the given ID."""
        for guild in self.guilds:
            if guild.id == guild_id:
                return guild
        raise StateCacheError(f"guild {guild_id!r} not found")

    def channel(self, channel_id: str) -> Channel:
        """Return the private or guild channel with the given ID."""
        for channel in self.private_channels:
            if channel.id == channel_id:
                return channel
        for guild in self.guilds:
            for channel in guild.channels:
                if channel.id == channel_id:
                    return channel
        raise StateCacheError(f"channel {channel_id!r} not found")

    def add_guild(self, guild: Guild) -> None:
        """Add a guild, replacing one with the same ID."""
        for channel in guild.channels:
            channel.guild_id = guild.id
        for member in guild.members:
            member.guild_id = guild.id
        _replace_or_append(self.guilds, guild, lambda g: g.id)

    def add_channel(self, channel: Channel) -> None:
        """Add a channel to its guild, or to the private channels if it has none."""
        if not channel.guild_id:
            _replace_or_append(self.private_channels, channel, lambda c: c.id)
            return
        guild = self.guild(channel.guild_id)
        _replace_or_append(guild.channels, channel, lambda c: c.id)

    def add_role(self, guild_id: str, role: Role) -> None:
        """Add a role to a guild, replacing one with the same ID."""
        _replace_or_append(self.guild(guild_id).roles, role, lambda r: r.id)

    def add_member(self, member: Member) -> None:
        """Add a member to its guild, replacing the same user's membership."""
        _replace_or_append(self.guild(member.guild_id).members, member, _member_user_id)

    def users(self) -> list[User]:
        """Return every known user from guild members and private channels."""
        found: dict[str, User] = {}
        for guild in self.guilds:
            for member in guild.members:
                if member.user is not None:
                    found.setdefault(member.user.id, member.user)
        for channel in self.private_channels:
            for recipient in channel.recipients:
                found.setdefault(recipient.id, recipient)
        return list(found.values())

    def user_channel_permissions(self, user_id: str, channel_id: str) -> int:
        """Return the permission bits the user has in a guild channel."""
        channel = self.channel(channel_id)
        guild = self.guild(channel.guild_id)
        member = next(
            (m for m in guild.members if _member_user_id(m) == user_id), None
        )
        if member is None:
            raise StateCacheError(f"member {user_id!r} not found in guild {guild.id!r}")
        return _member_permissions(guild, channel, user_id, member.roles)


def _member_permissions(guild: Guild, channel: Channel, user_id: str, member_roles: list[str]) -> int:
    if user_id == guild.owner_id:
        return PERMISSION_ALL

    permissions = 0
    everyone = next((role for role in guild.roles if role.id == guild.id), None)
    if everyone is not None:
        permissions |= everyone.permissions

    for role in guild.roles:
        if role.id in member_roles:
            permissions |= role.permissions

    if permissions & PERMISSION_ADMINISTRATOR:
        permissions |= PERMISSION_ALL

    everyone_overwrite = next(
        (o for o in channel.permission_overwrites if o.id == guild.id), None
    )
    if everyone_overwrite is not None:
        permissions &= ~everyone_overwrite.deny
        permissions |= everyone_overwrite.allow

    denies = 0
    allows = 0
    for overwrite in channel.permission_overwrites:
        if overwrite.type == "role" and overwrite.id in member_roles:
            denies |= overwrite.deny
            allows |= overwrite.allow
    permissions &= ~denies
    permissions |= allows

    member_overwrite = next(
        (
            o
            for o in channel.permission_overwrites
            if o.type == "member" and o.id == user_id
        ),
        None,
    )
    if member_overwrite is not None:
        permissions &= ~member_overwrite.deny
        permissions |= member_overwrite.allow

    if permissions & PERMISSION_ADMINISTRATOR:
        permissions |= PERMISSION_ALL_CHANNEL

    return permissions