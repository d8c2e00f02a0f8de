# src/picklerank/services/player_service.py

"""Business logic for player registration and group membership."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from sqlalchemy.ext.asyncio import AsyncSession

from picklerank.db import models
from picklerank.exceptions import (
    AuthorizationError,
    DuplicateEmailError,
    PlayerNotFoundError,
)
from picklerank.schemas import player as player_schema
from picklerank.services.authorization import (
    authorize_player_delete,
    authorize_player_update,
    is_system_admin,
    require_group_admin,
)

logger = logging.getLogger(__name__)


async def get_player(db: AsyncSession, player_id: str) -> models.Player:
    player = await db.get(models.Player, player_id)
    if player is None:
        raise PlayerNotFoundError(player_id)
    return player


async def _sync_roles_to_user(
    db: AsyncSession, player: models.Player, group_ids: Iterable[str]
) -> None:
    """
    Mirrors the player's role in each of `group_ids` onto the linked user.

    The user is found by player.user_id, or failing that by matching email,
    in which case the player gets linked to it.
    """
    user = None
    if player.user_id is not None:
        user = await db.get(models.User, player.user_id)

    if user is None and player.email is not None:
        user = await models.User.find_by_email(db, player.email)
        if user is not None:
            player.user_id = user.id

    if user is None:
        return

    player_roles = player.memberships or {}
    memberships = dict(user.memberships or {})
    for group_id in group_ids:
        if group_id in player_roles:
            memberships[group_id] = player_roles[group_id]
        else:
            memberships.pop(group_id, None)

    if memberships != (user.memberships or {}):
        user.memberships = memberships
        db.add(user)
        logger.debug(
            "Synced player memberships to user",
            extra={"player_id": player.id, "user_id": user.id},
        )


async def create_player(
    db: AsyncSession,
    player_in: player_schema.PlayerCreate,
    actor: models.User,
) -> models.Player:
    """
    Registers a player, optionally straight into a group.

    Raises:
        DuplicateEmailError: If another player already uses the email
        AuthorizationError: If a group is given and the actor can't manage it
    """
    if player_in.email is not None:
        existing = await models.Player.find_by_email(db, player_in.email)
        if existing is not None:
            raise DuplicateEmailError(player_in.email)

    memberships: dict[str, str] = {}
    if player_in.group_id is not None:
        require_group_admin(actor, player_in.group_id)
        memberships[player_in.group_id] = player_in.role.value

    player = models.Player(
        id=models.new_id(),
        **player_in.model_dump(exclude={"group_id", "role"}),
        memberships=memberships,
    )
    db.add(player)
    await db.flush()
    await _sync_roles_to_user(db, player, memberships)
    await db.commit()

    logger.info(
        "Player created",
        extra={"player_id": player.id, "group_id": player_in.group_id},
    )
    return player


async def update_player(
    db: AsyncSession,
    player_id: str,
    player_in: player_schema.PlayerUpdate,
    actor: models.User,
) -> models.Player:
    """Updates profile fields. Only system admins may change the email."""
    player = await get_player(db, player_id)
    authorize_player_update(actor, player)

    player.name = player_in.name
    player.contact_number = player_in.contact_number
    player.social_media = player_in.social_media

    if is_system_admin(actor) and player_in.email is not None:
        if player_in.email != player.email:
            other = await models.Player.find_by_email(db, player_in.email)
            if other is not None:
                raise DuplicateEmailError(player_in.email)
        player.email = player_in.email

    await _sync_roles_to_user(db, player, player.memberships or {})
    await db.commit()
    return player


async def delete_player(db: AsyncSession, player_id: str, actor: models.User) -> None:
    """
    Deletes a player profile.

    Ratings of other players and match rosters are left alone; rosters keep
    the raw id, which is shown in place of the name from then on.

    Raises:
        PlayerNotFoundError: If the player does not exist
        AuthorizationError: If the actor is not admin or the player's owner
    """
    player = await get_player(db, player_id)

    try:
        authorize_player_delete(actor, player)
    except AuthorizationError:
        logger.warning(
            "Player deletion refused",
            extra={"player_id": player_id, "user_id": actor.id},
        )
        raise

    await db.delete(player)
    await db.commit()
    logger.info("Player deleted", extra={"player_id": player_id, "user_id": actor.id})


async def add_player_to_group(
    db: AsyncSession,
    player_id: str,
    group_id: str,
    role: models.GroupRole,
    actor: models.User,
) -> models.Player:
    require_group_admin(actor, group_id)
    player = await get_player(db, player_id)

    memberships = dict(player.memberships or {})
    memberships[group_id] = role.value
    player.memberships = memberships

    await _sync_roles_to_user(db, player, [group_id])
    await db.commit()
    logger.info(
        "Player added to group",
        extra={"player_id": player_id, "group_id": group_id, "role": role.value},
    )
    return player


async def remove_player_from_group(
    db: AsyncSession, player_id: str, group_id: str, actor: models.User
) -> models.Player:
    require_group_admin(actor, group_id)
    player = await get_player(db, player_id)

    if player.memberships and group_id in player.memberships:
        memberships = dict(player.memberships)
        del memberships[group_id]
        player.memberships = memberships
        await _sync_roles_to_user(db, player, [group_id])
        await db.commit()
        logger.info(
            "Player removed from group",
            extra={"player_id": player_id, "group_id": group_id},
        )
    return player
