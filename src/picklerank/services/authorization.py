# src/picklerank/services/authorization.py

"""Authorization rules for mutating matches, venues, players and groups.

Every rule is a pure function of the actor record and the target resource.
The actor's system role and its full memberships mapping are read off the
object passed in; nothing is looked up or cached between calls.
"""

from __future__ import annotations

from enum import Enum
from typing import Protocol

from picklerank.db.models import GroupRole, SystemRole
from picklerank.exceptions import AuthorizationError


class Actor(Protocol):
    id: str
    email: str | None
    system_role: str
    memberships: dict


class MatchAction(str, Enum):
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


def is_system_admin(actor: Actor) -> bool:
    return actor.system_role == SystemRole.ADMIN.value


def group_role(actor: Actor, group_id: str | None) -> GroupRole | None:
    """The actor's role in a group, or None when not a member."""
    if group_id is None or not actor.memberships:
        return None
    role = actor.memberships.get(group_id)
    return GroupRole(role) if role is not None else None


def is_group_admin(actor: Actor, group_id: str | None) -> bool:
    return group_role(actor, group_id) == GroupRole.GROUP_ADMIN


def can_manage_owned(
    actor: Actor, creator_id: str | None, group_id: str | None
) -> bool:
    """System admin, the recorded creator, or a group admin of the owning group."""
    if is_system_admin(actor):
        return True
    if creator_id is not None and creator_id == actor.id:
        return True
    return is_group_admin(actor, group_id)


def authorize_match_mutation(actor: Actor, match, action: MatchAction) -> None:
    """Raise AuthorizationError unless the actor may perform the action.

    Creation is open to any authenticated actor. Update and delete need
    the ownership rule of can_manage_owned.
    """
    if action == MatchAction.CREATE:
        return
    if not can_manage_owned(actor, match.user_id, match.group_id):
        raise AuthorizationError(
            f"Unauthorized: you cannot {action.value.lower()} this match",
            actor_id=actor.id,
            resource_id=match.id,
        )


def authorize_venue_mutation(actor: Actor, venue) -> None:
    if not can_manage_owned(actor, venue.created_by_user_id, venue.group_id):
        raise AuthorizationError(
            "Unauthorized: you can only manage venues you created "
            "or manage as a group admin",
            actor_id=actor.id,
            resource_id=venue.id,
        )


def require_group_admin(actor: Actor, group_id: str) -> None:
    """Raise unless the actor is a system admin or an admin of the group."""
    if not (is_system_admin(actor) or is_group_admin(actor, group_id)):
        raise AuthorizationError(
            "Unauthorized: you must be a group admin to perform this action",
            actor_id=actor.id,
            resource_id=group_id,
        )


def is_player_owner(actor: Actor, player) -> bool:
    """A player belongs to the actor whose email matches, ignoring case."""
    return (
        player.email is not None
        and actor.email is not None
        and player.email.lower() == actor.email.lower()
    )


def authorize_player_update(actor: Actor, player) -> None:
    if not (is_system_admin(actor) or is_player_owner(actor, player)):
        raise AuthorizationError(
            "Unauthorized: you can only update your own player profile",
            actor_id=actor.id,
            resource_id=player.id,
        )


def authorize_player_delete(actor: Actor, player) -> None:
    """System admins, the owner by email, or the user the player is linked to."""
    linked = player.user_id is not None and player.user_id == actor.id
    if not (is_system_admin(actor) or is_player_owner(actor, player) or linked):
        raise AuthorizationError(
            "Unauthorized: you can only delete your own player profile",
            actor_id=actor.id,
            resource_id=player.id,
        )
