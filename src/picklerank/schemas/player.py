# src/picklerank/schemas/player.py

"""Pydantic schemas for the Player resource."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from picklerank.db.models import DEFAULT_RATING, GroupRole


# ===============================================
# Base Schema: Defines shared attributes for creation
# ===============================================
class PlayerBase(BaseModel):
    """Shared properties for a player."""

    name: str = Field(..., min_length=1)
    email: str | None = None
    contact_number: str | None = None
    social_media: str | None = None


# ===============================================
# Create Schema: optional group placement
# ===============================================
class PlayerCreate(PlayerBase):
    """Properties to receive via API on create.

    When group_id is given the caller must be an admin of that group and
    the player is enrolled with `role` (MEMBER by default).
    """

    group_id: str | None = None
    role: GroupRole = GroupRole.MEMBER


# ===============================================
# Update Schema
# ===============================================
class PlayerUpdate(BaseModel):
    """Properties to receive via API on update.

    The email is only applied when the caller is a system admin.
    """

    name: str = Field(..., min_length=1)
    contact_number: str | None = None
    social_media: str | None = None
    email: str | None = None


class PlayerMembershipUpdate(BaseModel):
    role: GroupRole = GroupRole.MEMBER


# ===============================================
# Read Schema: Defines attributes for returning data
# ===============================================
class PlayerRead(PlayerBase):
    """Properties to return to the client."""

    id: str
    user_id: str | None = None
    rating: float = DEFAULT_RATING
    memberships: dict[str, GroupRole] = Field(default_factory=dict)
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("rating", mode="before")
    @classmethod
    def _unrated_reads_as_default(cls, value: float | None) -> float:
        return DEFAULT_RATING if value is None else value

    @field_validator("memberships", mode="before")
    @classmethod
    def _no_memberships(cls, value: dict | None) -> dict:
        return value or {}
