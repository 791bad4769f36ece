import pytest

from cordless.models import (
    PERMISSION_ADMINISTRATOR,
    PERMISSION_ALL,
    PERMISSION_READ_MESSAGES,
    PERMISSION_SEND_MESSAGES,
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


def _state_with_guild(roles=None, overwrites=None, member_roles=None, owner_id=""):
    me = User(id="U1", username="me")
    channel = Channel(
        id="C1",
        name="C1",
        permission_overwrites=list(overwrites or []),
    )
    guild = Guild(
        id="G1",
        name="G1",
        owner_id=owner_id,
        channels=[channel],
        roles=list(roles or []),
        members=[Member(user=me, roles=list(member_roles or []))],
    )
    state = State(user=me)
    state.add_guild(guild)
    return state


def test_user_string_joins_name_and_discriminator():
    assert str(User(id="1", username="Maruseru", discriminator="1234")) == "Maruseru#1234"


def test_guild_lookup_and_missing_guild():
    state = _state_with_guild()
    assert state.guild("G1").name == "G1"
    with pytest.raises(StateCacheError):
        state.guild("missing")


def test_add_guild_assigns_guild_id_to_channels_and_members():
    state = _state_with_guild()
    assert state.channel("C1").guild_id == "G1"
    assert state.guild("G1").members[0].guild_id == "G1"


def test_channel_lookup_missing_raises():
    with pytest.raises(StateCacheError):
        State().channel("nope")


def test_add_channel_replaces_existing_and_adds_private():
    state = _state_with_guild()
    state.add_channel(Channel(id="C1", guild_id="G1", name="renamed"))
    assert state.channel("C1").name == "renamed"
    assert len(state.guild("G1").channels) == 1

    state.add_channel(Channel(id="P1", type=ChannelType.DM))
    assert state.channel("P1") is state.private_channels[0]


def test_add_channel_to_unknown_guild_raises():
    with pytest.raises(StateCacheError):
        State().add_channel(Channel(id="C9", guild_id="nowhere"))


def test_add_role_and_member_replace_by_id():
    state = _state_with_guild()
    state.add_role("G1", Role(id="R1", position=1))
    state.add_role("G1", Role(id="R1", position=5))
    assert [role.position for role in state.guild("G1").roles] == [5]

    state.add_member(Member(guild_id="G1", user=User(id="U1"), nick="nick"))
    members = state.guild("G1").members
    assert len(members) == 1
    assert members[0].nick == "nick"

    with pytest.raises(StateCacheError):
        state.add_role("missing", Role(id="R2"))


def test_users_are_deduplicated():
    shared = User(id="U2", username="shared")
    state = _state_with_guild()
    state.add_member(Member(guild_id="G1", user=shared))
    state.add_channel(Channel(id="P1", type=ChannelType.DM, recipients=[shared]))
    ids = [user.id for user in state.users()]
    assert sorted(ids) == ["U1", "U2"]


def test_owner_has_all_permissions():
    state = _state_with_guild(owner_id="U1")
    assert state.user_channel_permissions("U1", "C1") == PERMISSION_ALL


def test_role_permissions_and_role_overwrite_deny():
    role = Role(id="R1", permissions=PERMISSION_READ_MESSAGES | PERMISSION_SEND_MESSAGES)
    allowed = _state_with_guild(roles=[role], member_roles=["R1"])
    allowed_permissions = allowed.user_channel_permissions("U1", "C1")
    assert (allowed_permissions & PERMISSION_READ_MESSAGES) == PERMISSION_READ_MESSAGES

    denied = _state_with_guild(
        roles=[role],
        member_roles=["R1"],
        overwrites=[PermissionOverwrite(id="R1", type="role", deny=PERMISSION_READ_MESSAGES)],
    )
    permissions = denied.user_channel_permissions("U1", "C1")
    assert (permissions & PERMISSION_READ_MESSAGES) == 0
    assert (permissions & PERMISSION_SEND_MESSAGES) == PERMISSION_SEND_MESSAGES


def test_everyone_role_and_member_overwrite():
    everyone = Role(id="G1", permissions=PERMISSION_READ_MESSAGES)
    state = _state_with_guild(
        roles=[everyone],
        overwrites=[
            PermissionOverwrite(id="G1", type="role", deny=PERMISSION_READ_MESSAGES),
        ],
    )
    denied_permissions = state.user_channel_permissions("U1", "C1")
    assert (denied_permissions & PERMISSION_READ_MESSAGES) == 0

    state.channel("C1").permission_overwrites.append(
        PermissionOverwrite(id="U1", type="member", allow=PERMISSION_READ_MESSAGES)
    )
    allowed_permissions = state.user_channel_permissions("U1", "C1")
    assert (allowed_permissions & PERMISSION_READ_MESSAGES) == PERMISSION_READ_MESSAGES


def test_administrator_cannot_be_denied_channel_permissions():
    admin = Role(id="R1", permissions=PERMISSION_ADMINISTRATOR)
    state = _state_with_guild(
        roles=[admin],
        member_roles=["R1"],
        overwrites=[PermissionOverwrite(id="R1", type="role", deny=PERMISSION_READ_MESSAGES)],
    )
    permissions = state.user_channel_permissions("U1", "C1")
    assert (permissions & PERMISSION_READ_MESSAGES) == PERMISSION_READ_MESSAGES


def test_permissions_for_non_member_raise():
    state = _state_with_guild()
    with pytest.raises(StateCacheError):
        state.user_channel_permissions("stranger", "C1")