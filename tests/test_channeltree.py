import pytest

from cordless.channeltree import ChannelState, ChannelTree, TreeNode
from cordless.models import (
    PERMISSION_READ_MESSAGES,
    Channel,
    ChannelType,
    Guild,
    Member,
    PermissionOverwrite,
    Role,
    State,
    StateCacheError,
    User,
)
from cordless.readstate import ReadMarkers
from cordless.theme import get_theme


def build_state(extra_channels=()):
    state = State()
    c1 = Channel(id="C1", name="C1", position=2)
    c2 = Channel(id="C2", name="C2", position=1)
    c3 = Channel(
        id="C3",
        name="C3",
        position=3,
        permission_overwrites=[
            PermissionOverwrite(id="R1", type="role", deny=PERMISSION_READ_MESSAGES)
        ],
    )
    g1 = Guild(id="G1", name="G1", channels=[c1, c2, c3, *extra_channels])
    state.add_guild(g1)
    state.add_channel(c1)
    state.add_channel(c2)
    state.user = User(id="U1")
    state.add_role("G1", Role(id="R1", name="Rollo", permissions=PERMISSION_READ_MESSAGES))
    state.add_member(Member(guild_id="G1", user=state.user, roles=["R1"]))
    return state


def build_tree(state):
    markers = ReadMarkers()
    markers.load(state)
    return ChannelTree(state, read_markers=markers)


def find(tree, channel_id):
    found = []
    tree.root.walk(lambda node, parent: found.append(node) or True)
    return next(node for node in found if node.reference == channel_id)


def test_load_guild_orders_by_position_and_hides_unreadable():
    tree = build_tree(build_state())
    tree.load_guild("G1")
    assert tree.render_lines() == ["C2", "C1"]
    assert tree.current_node is tree.root


def test_unknown_guild_raises():
    tree = build_tree(build_state())
    with pytest.raises(StateCacheError):
        tree.load_guild("nope")


def test_unread_channel_is_highlighted():
    state = build_state()
    state.channel("C1").last_message_id = "10"
    tree = build_tree(state)
    tree.load_guild("G1")
    node = find(tree, "C1")
    assert node.color == get_theme().attention_color
    assert tree.channel_states[node] == ChannelState.UNREAD
    assert find(tree, "C2") not in tree.channel_states


def test_categories_hold_second_level_channels():
    category = Channel(id="K1", name="K1", type=ChannelType.GUILD_CATEGORY, position=0)
    child = Channel(id="C4", name="C4", parent_id="K1", position=0)
    tree = build_tree(build_state([category, child]))
    tree.load_guild("G1")
    assert [node.text for node in tree.root.children] == ["C2", "C1", "K1"]
    category_node = tree.root.children[-1]
    assert category_node.selectable is False
    assert [node.text for node in category_node.children] == ["C4"]


def test_select_calls_handler_only_for_selectable_nodes():
    category = Channel(id="K1", name="K1", type=ChannelType.GUILD_CATEGORY)
    tree = build_tree(build_state([category]))
    tree.load_guild("G1")
    selected = []
    tree.set_on_channel_select(selected.append)
    tree.select(find(tree, "C1"))
    tree.select(find(tree, "K1"))
    assert selected == ["C1"]
    assert tree.current_node is find(tree, "K1")


def test_nsfw_channel_name():
    nsfw = Channel(id="C5", name="adult", nsfw=True, position=9)
    tree = build_tree(build_state([nsfw]))
    tree.load_guild("G1")
    assert find(tree, "C5").text == "🔞adult"


def test_mark_mentioned_then_read():
    tree = build_tree(build_state())
    tree.load_guild("G1")
    tree.mark_channel_as_mentioned("C1")
    node = find(tree, "C1")
    assert node.text == "(@You) C1"
    assert node.color == get_theme().attention_color
    tree.mark_channel_as_read("C1")
    assert node.text == "C1"
    assert tree.channel_states[node] == ChannelState.READ
    assert node.color == get_theme().primary_text_color


def test_mark_unread():
    tree = build_tree(build_state())
    tree.load_guild("G1")
    tree.mark_channel_as_unread("C2")
    node = find(tree, "C2")
    assert tree.channel_states[node] == ChannelState.UNREAD
    assert node.color == get_theme().attention_color


def test_mark_loaded_moves_loaded_state():
    tree = build_tree(build_state())
    tree.load_guild("G1")
    tree.mark_channel_as_loaded("C1")
    first = find(tree, "C1")
    assert tree.channel_states[first] == ChannelState.LOADED
    assert first.color == get_theme().contrast_background_color
    tree.mark_channel_as_loaded("C2")
    assert tree.channel_states[first] == ChannelState.READ
    assert first.color == get_theme().primary_text_color
    assert tree.channel_states[find(tree, "C2")] == ChannelState.LOADED


def test_read_does_not_touch_loaded_channel():
    tree = build_tree(build_state())
    tree.load_guild("G1")
    tree.mark_channel_as_loaded("C1")
    tree.mark_channel_as_read("C1")
    assert tree.channel_states[find(tree, "C1")] == ChannelState.LOADED


def test_remove_text_channel():
    state = build_state()
    tree = build_tree(state)
    tree.load_guild("G1")
    tree.remove_channel(state.channel("C1"))
    assert tree.render_lines() == ["C2"]


def test_remove_category_moves_children_to_top_level():
    category = Channel(id="K1", name="K1", type=ChannelType.GUILD_CATEGORY)
    child = Channel(id="C4", name="C4", parent_id="K1")
    tree = build_tree(build_state([category, child]))
    tree.load_guild("G1")
    tree.remove_channel(category)
    assert [node.text for node in tree.root.children] == ["C2", "C1", "C4"]


def test_add_or_update_channel():
    tree = build_tree(build_state())
    tree.load_guild("G1")
    tree.add_or_update_channel(Channel(id="C1", name="renamed"))
    assert find(tree, "C1").text == "renamed"
    tree.add_or_update_channel(Channel(id="C9", name="new"))
    assert tree.render_lines() == ["C2", "renamed", "new"]


def test_clear_removes_everything():
    tree = build_tree(build_state())
    tree.load_guild("G1")
    tree.mark_channel_as_unread("C1")
    tree.clear()
    assert tree.render_lines() == []
    assert tree.channel_states == {}


def test_walk_skips_children_when_callback_returns_false():
    root = TreeNode("root")
    child = TreeNode("child")
    child.add_child(TreeNode("grandchild"))
    returned = root.add_child(child)
    assert returned is root
    returned.add_child(TreeNode("sibling"))
    assert [node.text for node in root.children] == ["child", "sibling"]
    seen = []

    def visit(node, parent):
        seen.append(node.text)
        return node.text != "child"

    root.walk(visit)
    assert seen == ["root", "child", "sibling"]