# src/picklerank/schemas/group.py

"""Pydantic schemas for the Group resource."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from picklerank.db.models import GroupRole


class GroupCreate(BaseModel):
    """Properties to receive via API on create."""

    name: str = Field(..., min_length=1)


class GroupRead(BaseModel):
    """Properties to return to the client."""

    id: str
    name: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class GroupMemberAdd(BaseModel):
    """Grant a user a role in a group."""

    user_id: str
    role: GroupRole = GroupRole.MEMBER
