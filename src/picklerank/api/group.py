# src/picklerank/api/group.py

"""API endpoints for managing groups."""

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from picklerank.api.deps import get_current_user
from picklerank.db.models import Group, User
from picklerank.db.session import get_db
from picklerank.schemas import group as group_schema
from picklerank.schemas import user as user_schema
from picklerank.services import group_service

router = APIRouter(prefix="/groups", tags=["Groups"])


@router.post(
    "/", response_model=group_schema.GroupRead, status_code=status.HTTP_201_CREATED
)
async def create_group(
    group_in: group_schema.GroupCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
) -> Group:
    """Create a group; the caller becomes its group admin."""
    return await group_service.create_group(db, group_in, user)


@router.get("/", response_model=list[group_schema.GroupRead])
async def read_groups(db: AsyncSession = Depends(get_db)) -> list[Group]:
    """List all groups by name."""
    result = await db.execute(select(Group).order_by(Group.name))
    return list(result.scalars().all())


@router.get("/{group_id}", response_model=group_schema.GroupRead)
async def read_group(group_id: str, db: AsyncSession = Depends(get_db)) -> Group:
    return await group_service.get_group(db, group_id)


@router.post("/{group_id}/members", response_model=user_schema.UserRead)
async def add_group_member(
    group_id: str,
    member_in: group_schema.GroupMemberAdd,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
) -> User:
    """
    Grant a user a role in the group.

    Raises:
        403: If the caller is not a group admin (or system admin)
        404: If the group or user doesn't exist
        422: If a GROUP_ADMIN grant targets a user without an email
    """
    return await group_service.add_member(db, group_id, member_in, user)


@router.delete("/{group_id}/members/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_group_member(
    group_id: str,
    user_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
) -> None:
    await group_service.remove_member(db, group_id, user_id, user)
    return None
