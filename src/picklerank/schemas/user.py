# src/picklerank/schemas/user.py

"""Pydantic schemas for the User resource."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from picklerank.db.models import GroupRole, SystemRole


class UserCreate(BaseModel):
    """Properties to receive via API on registration.

    New accounts always start with the USER system role.
    """

    name: str = Field(..., min_length=1)
    email: str | None = None


class UserRead(BaseModel):
    """Properties to return to the client."""

    id: str
    name: str
    email: str | None = None
    system_role: SystemRole
    memberships: dict[str, GroupRole] = Field(default_factory=dict)
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
