"""Tracking of read markers and their acknowledgement."""

from __future__ import annotations

import logging
import re
import threading
from dataclasses import dataclass
from typing import Optional, Protocol

from cordless.discordutil import has_read_messages_permission
from cordless.models import Channel, State, StateCacheError

_log = logging.getLogger(__name__)

_UNSIGNED_DECIMAL = re.compile(r"[0-9]+")
_UINT64_MAX = (1 << 64) - 1


class AckSession(Protocol):
    """A session able to acknowledge read messages."""

    def channel_message_ack(self, channel_id: str, message_id: str, last_token: str) -> object:
        ...


def _parse_uint64(text: str) -> Optional[int]:
    if not _UNSIGNED_DECIMAL.fullmatch(text):
        return None
    value = int(text)
    return value if value <= _UINT64_MAX else None


@dataclass
class _PendingAck:
    timer: threading.Timer
    session: AckSession
    channel: Channel
    last_message_id: str


class ReadMarkers:
    """Remembers the last read message per channel."""

    def __init__(self, ack_delay: float = 4.0) -> None:
        self._data: dict[str, int] = {}
        self._lock = threading.Lock()
        self._ack_timers: dict[str, _PendingAck] = {}
        self._state: Optional[State] = None
        self._ack_delay = ack_delay

    def _session_state(self) -> State:
        if self._state is None:
            raise RuntimeError("read markers have not been loaded")
        return self._state

    def load(self, state: State) -> None:
        """Take over the read markers the server sent with the session state."""
        for channel_state in state.read_state:
            if not channel_state.last_message_id:
                continue
            parsed = _parse_uint64(channel_state.last_message_id)
            if parsed is None:
                continue
            self._data[channel_state.id] = parsed
        self._state = state

    def clear_read_state_for(self, channel_id: str) -> None:
        """Forget everything stored for the channel."""
        with self._lock:
            self._data.pop(channel_id, None)
            self._ack_timers.pop(channel_id, None)

    def update_read_local(self, channel_id: str, last_message_id: str) -> bool:
        """Store a newer read marker without telling the server."""
        parsed = _parse_uint64(last_message_id)
        if parsed is None:
            return False
        old = self._data.get(channel_id)
        if old is None or old < parsed:
            self._data[channel_id] = parsed
            return True
        return False

    def update_read(self, session: AckSession, channel: Channel, last_message_id: str) -> None:
        """Mark the channel as read and acknowledge it unless it already is."""
        if self.has_been_read(channel, last_message_id):
            return
        parsed = _parse_uint64(last_message_id)
        if parsed is None:
            raise ValueError(f"invalid message ID {last_message_id!r}")
        self._data[channel.id] = parsed
        session.channel_message_ack(channel.id, last_message_id, "")

    def update_read_buffered(self, session: AckSession, channel: Channel, last_message_id: str) -> None:
        """Acknowledge after a delay; calls within the delay restart it."""
        with self._lock:
            pending = self._ack_timers.get(channel.id)
            if pending is None:
                pending = _PendingAck(
                    self._new_timer(channel.id), session, channel, last_message_id
                )
                self._ack_timers[channel.id] = pending
            else:
                pending.timer.cancel()
                pending.timer = self._new_timer(channel.id)
            pending.timer.start()

    def _new_timer(self, channel_id: str) -> threading.Timer:
        timer = threading.Timer(self._ack_delay, self._fire, args=(channel_id,))
        timer.daemon = True
        return timer

    def _fire(self, channel_id: str) -> None:
        with self._lock:
            pending = self._ack_timers.pop(channel_id, None)
        if pending is None:
            return
        try:
            self.update_read(pending.session, pending.channel, pending.last_message_id)
        except Exception:
            _log.warning("acknowledging channel %s failed", channel_id, exc_info=True)

    def is_guild_muted(self, guild_id: str) -> bool:
        """Tell whether the user muted the guild."""
        for settings in self._session_state().user_guild_settings:
            if settings.guild_id == guild_id:
                return settings.muted
        return False

    def has_guild_been_read(self, guild_id: str) -> bool:
        """Tell whether the guild has no unread visible channel or is muted."""
        if self.is_guild_muted(guild_id):
            return True

        state = self._session_state()
        try:
            guild = state.guild(guild_id)
        except StateCacheError:
            return True

        return all(
            self.has_been_read(channel, channel.last_message_id)
            for channel in guild.channels
            if has_read_messages_permission(channel.id, state)
        )

    def is_channel_muted(self, channel: Channel) -> bool:
        """Tell whether a guild or private channel is muted."""
        for settings in self._session_state().user_guild_settings:
            if settings.guild_id != channel.guild_id:
                continue
            override = next(
                (o for o in settings.channel_overrides if o.channel_id == channel.id),
                None,
            )
            if override is not None and override.muted:
                return True
            # Private channels may be spread over several settings entries.
            if channel.guild_id:
                break
        return False

    def has_been_read(self, channel: Channel, last_message_id: str) -> bool:
        """Tell whether the channel has no unread message."""
        if not last_message_id:
            return True
        if self.is_channel_muted(channel):
            return True

        state = self._session_state()
        if channel.messages and channel.messages[-1].author.id == state.user.id:
            return True

        stored = self._data.get(channel.id)
        if stored is None:
            return False

        parsed = _parse_uint64(last_message_id)
        if parsed is None:
            return True
        return stored >= parsed


markers = ReadMarkers()