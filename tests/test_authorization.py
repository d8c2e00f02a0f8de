# tests/test_authorization.py

"""Unit tests for the authorization rules."""

from dataclasses import dataclass, field

import pytest
from picklerank.exceptions import AuthorizationError
from picklerank.services.authorization import (
    MatchAction,
    authorize_match_mutation,
    authorize_player_delete,
    authorize_player_update,
    authorize_venue_mutation,
    can_manage_owned,
    require_group_admin,
)


# Use simple dataclasses to stand in for the SQLAlchemy models
@dataclass
class MockActor:
    id: str
    system_role: str = "USER"
    email: str | None = None
    memberships: dict[str, str] = field(default_factory=dict)


@dataclass
class MockMatch:
    id: str = "m1"
    user_id: str | None = "creator"
    group_id: str | None = None


@dataclass
class MockVenue:
    id: str = "v1"
    created_by_user_id: str | None = "creator"
    group_id: str | None = None


@dataclass
class MockPlayer:
    id: str = "p1"
    email: str | None = None
    user_id: str | None = None


GROUP_X_ADMIN = MockActor(id="gx", memberships={"X": "GROUP_ADMIN"})


# =============================================================================
# Match rules
# =============================================================================


def test_anyone_may_create_a_match():
    stranger = MockActor(id="stranger")

    authorize_match_mutation(stranger, MockMatch(), MatchAction.CREATE)


def test_system_admin_may_delete_any_match():
    admin = MockActor(id="root", system_role="ADMIN")

    authorize_match_mutation(admin, MockMatch(group_id=None), MatchAction.DELETE)


def test_creator_may_delete_own_match():
    creator = MockActor(id="creator")

    authorize_match_mutation(creator, MockMatch(), MatchAction.DELETE)


def test_group_admin_may_delete_other_users_match_in_their_group():
    match = MockMatch(user_id="someone-else", group_id="X")

    authorize_match_mutation(GROUP_X_ADMIN, match, MatchAction.DELETE)


@pytest.mark.parametrize("group_id", ["Y", None])
def test_group_admin_may_not_delete_match_outside_their_group(group_id):
    match = MockMatch(user_id="someone-else", group_id=group_id)

    with pytest.raises(AuthorizationError):
        authorize_match_mutation(GROUP_X_ADMIN, match, MatchAction.DELETE)


def test_group_admin_may_delete_own_group_less_match():
    """Being the creator is enough even when the group rule does not apply."""
    match = MockMatch(user_id=GROUP_X_ADMIN.id, group_id=None)

    authorize_match_mutation(GROUP_X_ADMIN, match, MatchAction.DELETE)


def test_plain_member_may_not_delete_group_match():
    member = MockActor(id="m", memberships={"X": "MEMBER"})
    match = MockMatch(user_id="someone-else", group_id="X")

    with pytest.raises(AuthorizationError) as exc_info:
        authorize_match_mutation(member, match, MatchAction.DELETE)

    assert exc_info.value.details == {"actor_id": "m", "resource_id": "m1"}


def test_update_follows_the_delete_rule():
    stranger = MockActor(id="stranger")

    with pytest.raises(AuthorizationError):
        authorize_match_mutation(stranger, MockMatch(), MatchAction.UPDATE)
    authorize_match_mutation(MockActor(id="creator"), MockMatch(), MatchAction.UPDATE)


def test_match_without_creator_needs_admin_rights():
    match = MockMatch(user_id=None, group_id=None)

    assert not can_manage_owned(MockActor(id="x"), match.user_id, match.group_id)


# =============================================================================
# Venue, group and player rules
# =============================================================================


def test_venue_rule_uses_creator_and_group():
    authorize_venue_mutation(MockActor(id="creator"), MockVenue())
    group_venue = MockVenue(created_by_user_id="o", group_id="X")
    authorize_venue_mutation(GROUP_X_ADMIN, group_venue)

    with pytest.raises(AuthorizationError):
        authorize_venue_mutation(
            GROUP_X_ADMIN, MockVenue(created_by_user_id="o", group_id="Y")
        )


def test_require_group_admin():
    require_group_admin(GROUP_X_ADMIN, "X")
    require_group_admin(MockActor(id="root", system_role="ADMIN"), "anything")

    with pytest.raises(AuthorizationError):
        require_group_admin(GROUP_X_ADMIN, "Y")
    with pytest.raises(AuthorizationError):
        require_group_admin(MockActor(id="m", memberships={"X": "MEMBER"}), "X")


def test_player_update_matches_email_case_insensitively():
    owner = MockActor(id="u1", email="Pat@Example.com")

    authorize_player_update(owner, MockPlayer(email="pat@example.com"))

    with pytest.raises(AuthorizationError):
        authorize_player_update(owner, MockPlayer(email="someone@example.com"))
    with pytest.raises(AuthorizationError):
        authorize_player_update(MockActor(id="u2"), MockPlayer(email=None))


def test_memberships_are_read_fresh_each_call():
    """Revoking a role takes effect on the next check."""
    actor = MockActor(id="gx2", memberships={"X": "GROUP_ADMIN"})
    match = MockMatch(user_id="other", group_id="X")
    authorize_match_mutation(actor, match, MatchAction.DELETE)

    actor.memberships = {"X": "MEMBER"}

    with pytest.raises(AuthorizationError):
        authorize_match_mutation(actor, match, MatchAction.DELETE)


def test_player_delete_allowed_for_admin_owner_and_linked_user():
    player = MockPlayer(email="pat@example.com", user_id="linked")

    authorize_player_delete(MockActor(id="root", system_role="ADMIN"), player)
    authorize_player_delete(MockActor(id="u1", email="PAT@example.com"), player)
    authorize_player_delete(MockActor(id="linked", email="other@example.com"), player)


def test_player_delete_refused_for_others():
    player = MockPlayer(email="pat@example.com", user_id="linked")
    stranger = MockActor(id="u9", email="u9@example.com")

    with pytest.raises(AuthorizationError) as exc_info:
        authorize_player_delete(stranger, player)

    assert exc_info.value.details == {"actor_id": "u9", "resource_id": "p1"}
    # A group admin is not enough either
    with pytest.raises(AuthorizationError):
        authorize_player_delete(GROUP_X_ADMIN, MockPlayer())
