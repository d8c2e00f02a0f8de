# src/picklerank/schemas/venue.py

"""Pydantic schemas for the Venue resource."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class VenueBase(BaseModel):
    """Shared properties for a venue."""

    name: str = Field(..., min_length=1)
    location: str | None = None
    court_count: int | None = Field(default=None, ge=0)


class VenueCreate(VenueBase):
    """Properties to receive via API on create."""

    group_id: str | None = None


class VenueUpdate(VenueBase):
    """Properties to receive via API on update. Ownership fields are fixed."""

    pass


class VenueRead(VenueBase):
    """Properties to return to the client."""

    id: str
    group_id: str | None = None
    created_by_user_id: str | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
