# src/picklerank/services/group_service.py

"""Business logic for groups and their user rosters."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from picklerank.db import models
from picklerank.exceptions import (
    DuplicateGroupNameError,
    GroupNotFoundError,
    InvalidMembershipError,
    UserNotFoundError,
)
from picklerank.schemas import group as group_schema
from picklerank.services.authorization import require_group_admin

logger = logging.getLogger(__name__)


async def get_group(db: AsyncSession, group_id: str) -> models.Group:
    group = await db.get(models.Group, group_id)
    if group is None:
        raise GroupNotFoundError(group_id)
    return group


async def create_group(
    db: AsyncSession, group_in: group_schema.GroupCreate, actor: models.User
) -> models.Group:
    """Creates a group and makes its creator the group admin."""
    result = await db.execute(
        select(models.Group.id).where(models.Group.name == group_in.name)
    )
    if result.scalar_one_or_none() is not None:
        raise DuplicateGroupNameError(group_in.name)

    group = models.Group(id=models.new_id(), name=group_in.name)
    db.add(group)

    memberships = dict(actor.memberships or {})
    memberships[group.id] = models.GroupRole.GROUP_ADMIN.value
    actor.memberships = memberships
    db.add(actor)

    await db.commit()
    logger.info("Group created", extra={"group_id": group.id, "user_id": actor.id})
    return group


async def add_member(
    db: AsyncSession,
    group_id: str,
    member_in: group_schema.GroupMemberAdd,
    actor: models.User,
) -> models.User:
    """
    Grants a user a role in the group.

    Raises:
        AuthorizationError: If the actor is not an admin of the group
        GroupNotFoundError / UserNotFoundError: If either does not exist
        InvalidMembershipError: If a group admin would have no email
    """
    require_group_admin(actor, group_id)
    await get_group(db, group_id)

    user = await db.get(models.User, member_in.user_id)
    if user is None:
        raise UserNotFoundError(member_in.user_id)

    has_email = bool((user.email or "").strip())
    if member_in.role == models.GroupRole.GROUP_ADMIN and not has_email:
        raise InvalidMembershipError(
            user.id, group_id, "a group admin must have a valid email address"
        )

    memberships = dict(user.memberships or {})
    memberships[group_id] = member_in.role.value
    user.memberships = memberships
    await db.commit()

    logger.info(
        "Group member added",
        extra={"group_id": group_id, "user_id": user.id, "role": member_in.role.value},
    )
    return user


async def remove_member(
    db: AsyncSession, group_id: str, user_id: str, actor: models.User
) -> None:
    require_group_admin(actor, group_id)
    await get_group(db, group_id)

    user = await db.get(models.User, user_id)
    if user is None:
        raise UserNotFoundError(user_id)

    if user.memberships and group_id in user.memberships:
        memberships = dict(user.memberships)
        del memberships[group_id]
        user.memberships = memberships
        await db.commit()
        logger.info(
            "Group member removed", extra={"group_id": group_id, "user_id": user_id}
        )
