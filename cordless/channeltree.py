"""The tree of channels of the currently loaded guild."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from cordless import readstate
from cordless.config import OnTypeInListBehaviour, get_config
from cordless.discordutil import get_channel_name_for_tree, has_read_messages_permission
from cordless.models import Channel, ChannelType, State
from cordless.theme import Color, get_theme


class ChannelState(Enum):
    """Display state of a channel node."""

    LOADED = 0
    UNREAD = 1
    MENTIONED = 2
    READ = 3


@dataclass(eq=False)
class TreeNode:
    """A node of the channel tree; the reference is the channel ID."""

    text: str = ""
    reference: Optional[str] = None
    color: Optional[Color] = None
    selectable: bool = True
    expanded: bool = True
    children: list[TreeNode] = field(default_factory=list)

    def add_child(self, child: TreeNode) -> TreeNode:
        """Append a child node and return this node."""
        self.children.append(child)
        return self

    def walk(self, callback: Callable[[TreeNode, Optional[TreeNode]], bool]) -> None:
        """Visit this node and its descendants depth first.

        The callback receives the node and its parent; returning ``False``
        skips the node's children but keeps walking the rest of the tree.
        """
        stack: list[tuple[TreeNode, Optional[TreeNode]]] = [(self, None)]
        while stack:
            node, parent = stack.pop()
            if not callback(node, parent):
                continue
            stack.extend((child, node) for child in reversed(node.children))


class ChannelTree:
    """The channel hierarchy of a guild and the interactions with it."""

    def __init__(self, state: State, read_markers: Optional[readstate.ReadMarkers] = None) -> None:
        self.state = state
        self._markers = read_markers if read_markers is not None else readstate.markers
        self.root = TreeNode("")
        self.current_node: TreeNode = self.root
        self.channel_states: dict[TreeNode, ChannelState] = {}
        self.channel_position: dict[str, int] = {}
        self.vim_bindings_enabled = (
            get_config().on_type_in_list_behaviour == OnTypeInListBehaviour.DO_NOTHING
        )
        self.cycle_selection = True
        self.top_level = 1
        self._on_channel_select: Optional[Callable[[str], None]] = None
        self._lock = threading.Lock()

    def __enter__(self) -> ChannelTree:
        self._lock.acquire()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self._lock.release()

    def clear(self) -> None:
        """Reset all current state and remove every node."""
        self.channel_states = {}
        self.channel_position = {}
        self.root.children = []

    @staticmethod
    def _new_node(channel: Channel) -> TreeNode:
        return TreeNode(
            text=get_channel_name_for_tree(channel),
            reference=channel.id,
            color=get_theme().primary_text_color,
        )

    def _visible(self, channel: Channel) -> bool:
        return has_read_messages_permission(channel.id, self.state)

    def _mark_unread_if_needed(self, node: TreeNode, channel: Channel) -> None:
        if not self._markers.has_been_read(channel, channel.last_message_id):
            self.channel_states[node] = ChannelState.UNREAD
            node.color = get_theme().attention_color

    def load_guild(self, guild_id: str) -> None:
        """Load all locally known channels of the guild into the tree.

        Raises ``StateCacheError`` if the guild is unknown.
        """
        guild = self.state.guild(guild_id)
        self.clear()

        channels = guild.channels
        channels.sort(key=lambda channel: channel.position)

        for channel in channels:
            if channel.type == ChannelType.GUILD_TEXT and not channel.parent_id and self._visible(channel):
                node = self._new_node(channel)
                self._mark_unread_if_needed(node, channel)
                self.root.add_child(node)

        for channel in channels:
            if channel.type == ChannelType.GUILD_CATEGORY and not channel.parent_id and self._visible(channel):
                node = self._new_node(channel)
                node.selectable = False
                self.root.add_child(node)

        for channel in channels:
            if channel.type == ChannelType.GUILD_TEXT and channel.parent_id and self._visible(channel):
                self._add_second_level(channel)

        self.current_node = self.root

    def _add_second_level(self, channel: Channel) -> None:
        node = self._new_node(channel)
        parent = next(
            (child for child in self.root.children if child.reference == channel.parent_id),
            None,
        )
        if parent is None:
            return
        self._mark_unread_if_needed(node, channel)
        parent.add_child(node)

    def add_or_update_channel(self, channel: Channel) -> None:
        """Update the channel's node, or add a node if it has none yet."""
        updated = False

        def visit(node: TreeNode, parent: Optional[TreeNode]) -> bool:
            nonlocal updated
            if node.reference == channel.id:
                updated = True
                node.text = get_channel_name_for_tree(channel)
                return False
            return True

        self.root.walk(visit)
        if updated:
            return

        node = self._new_node(channel)
        if not channel.parent_id:
            self.root.add_child(node)
        else:
            for child in self.root.children:
                if child.reference == channel.parent_id:
                    child.add_child(node)

    def remove_channel(self, channel: Channel) -> None:
        """Remove the channel's node; a category's children move to the top level."""
        channel_id = channel.id

        if channel.type == ChannelType.GUILD_TEXT:
            def visit(node: TreeNode, parent: Optional[TreeNode]) -> bool:
                if node.reference == channel_id and parent is not None:
                    self._remove_node(node, parent, channel_id)
                    return False
                return True

            self.root.walk(visit)
        elif channel.type == ChannelType.GUILD_CATEGORY:
            for node in list(self.root.children):
                if node.reference == channel_id:
                    old_children = node.children
                    node.children = []
                    self._remove_node(node, self.root, channel_id)
                    self.root.children = self.root.children + old_children
                    break

    def _remove_node(self, node: TreeNode, parent: TreeNode, channel_id: str) -> None:
        self.channel_states.pop(node, None)
        self.channel_position.pop(channel_id, None)
        parent.children = [child for child in parent.children if child is not node]

    def _for_channel(self, channel_id: str, action: Callable[[TreeNode], None]) -> None:
        def visit(node: TreeNode, parent: Optional[TreeNode]) -> bool:
            if node.reference == channel_id:
                action(node)
                return False
            return True

        self.root.walk(visit)

    def _refresh_text(self, node: TreeNode, channel_id: str, prefix: str = "") -> None:
        try:
            channel = self.state.channel(channel_id)
        except LookupError:
            return
        node.text = prefix + get_channel_name_for_tree(channel)

    def mark_channel_as_unread(self, channel_id: str) -> None:
        """Mark a channel as unread."""

        def action(node: TreeNode) -> None:
            self.channel_states[node] = ChannelState.UNREAD
            node.color = get_theme().attention_color

        self._for_channel(channel_id, action)

    def mark_channel_as_read(self, channel_id: str) -> None:
        """Mark a channel as read unless it is the loaded one."""

        def action(node: TreeNode) -> None:
            self._refresh_text(node, channel_id)
            # Nodes without a recorded state count as loaded.
            if self.channel_states.get(node, ChannelState.LOADED) != ChannelState.LOADED:
                self.channel_states[node] = ChannelState.READ
                node.color = get_theme().primary_text_color

        self._for_channel(channel_id, action)

    def mark_channel_as_mentioned(self, channel_id: str) -> None:
        """Mark a channel as mentioning the current user."""

        def action(node: TreeNode) -> None:
            self.channel_states[node] = ChannelState.MENTIONED
            self._refresh_text(node, channel_id, "(@You) ")
            node.color = get_theme().attention_color

        self._for_channel(channel_id, action)

    def mark_channel_as_loaded(self, channel_id: str) -> None:
        """Mark a channel as loaded; the previously loaded one becomes read."""
        for node, channel_state in self.channel_states.items():
            if channel_state == ChannelState.LOADED:
                self.channel_states[node] = ChannelState.READ
                node.color = get_theme().primary_text_color
                break

        def action(node: TreeNode) -> None:
            self.channel_states[node] = ChannelState.LOADED
            self._refresh_text(node, channel_id)
            node.color = get_theme().contrast_background_color

        self._for_channel(channel_id, action)

    def set_on_channel_select(self, handler: Optional[Callable[[str], None]]) -> None:
        """Set the handler called with the ID of a selected channel."""
        self._on_channel_select = handler

    def select(self, node: TreeNode) -> None:
        """Select a node, notifying the handler if it is a selectable channel."""
        self.current_node = node
        if node.selectable and isinstance(node.reference, str) and self._on_channel_select is not None:
            self._on_channel_select(node.reference)

    def render_lines(self) -> list[str]:
        """Return the visible node texts, indented by two spaces per level."""
        lines: list[str] = []

        def visit(node: TreeNode, depth: int) -> None:
            for child in node.children:
                lines.append("  " * depth + child.text)
                if child.expanded:
                    visit(child, depth + 1)

        visit(self.root, 0)
        return lines