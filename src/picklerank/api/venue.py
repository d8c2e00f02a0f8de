# src/picklerank/api/venue.py

"""API endpoints for managing venues."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from picklerank.api.deps import get_current_user
from picklerank.db.models import User, Venue
from picklerank.db.session import get_db
from picklerank.schemas import venue as venue_schema
from picklerank.services import venue_service

router = APIRouter(prefix="/venues", tags=["Venues"])


@router.post(
    "/", response_model=venue_schema.VenueRead, status_code=status.HTTP_201_CREATED
)
async def create_venue(
    venue_in: venue_schema.VenueCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
) -> Venue:
    return await venue_service.create_venue(db, venue_in, user)


@router.get("/", response_model=list[venue_schema.VenueRead])
async def read_venues(
    group_id: str | None = Query(None, description="Filter by group ID"),
    db: AsyncSession = Depends(get_db),
) -> list[Venue]:
    """List venues, optionally only those of one group."""
    query = select(Venue).order_by(Venue.name)
    if group_id is not None:
        query = query.where(Venue.group_id == group_id)
    result = await db.execute(query)
    return list(result.scalars().all())


@router.get("/{venue_id}", response_model=venue_schema.VenueRead)
async def read_venue(venue_id: str, db: AsyncSession = Depends(get_db)) -> Venue:
    return await venue_service.get_venue(db, venue_id)


@router.put("/{venue_id}", response_model=venue_schema.VenueRead)
async def update_venue(
    venue_id: str,
    venue_in: venue_schema.VenueUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
) -> Venue:
    """
    Update a venue's name, location and court count.

    Allowed for system admins, the venue's creator, or an admin of its group.
    """
    return await venue_service.update_venue(db, venue_id, venue_in, user)


@router.delete("/{venue_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_venue(
    venue_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
) -> None:
    """
    Delete a venue. Matches played there are kept with venue_id "UNKNOWN".
    """
    await venue_service.delete_venue(db, venue_id, user)
    return None
