# src/picklerank/services/venue_service.py

"""Business logic for venue management."""

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from picklerank.db import models
from picklerank.exceptions import VenueNotFoundError
from picklerank.schemas import venue as venue_schema
from picklerank.services.authorization import authorize_venue_mutation

logger = logging.getLogger(__name__)


async def get_venue(db: AsyncSession, venue_id: str) -> models.Venue:
    venue = await db.get(models.Venue, venue_id)
    if venue is None:
        raise VenueNotFoundError(venue_id)
    return venue


async def create_venue(
    db: AsyncSession, venue_in: venue_schema.VenueCreate, actor: models.User
) -> models.Venue:
    """Creates a venue owned by the actor and, optionally, a group."""
    venue = models.Venue(
        id=models.new_id(),
        **venue_in.model_dump(),
        created_by_user_id=actor.id,
    )
    db.add(venue)
    await db.commit()
    logger.info(
        "Venue created",
        extra={"venue_id": venue.id, "user_id": actor.id, "group_id": venue.group_id},
    )
    return venue


async def update_venue(
    db: AsyncSession,
    venue_id: str,
    venue_in: venue_schema.VenueUpdate,
    actor: models.User,
) -> models.Venue:
    venue = await get_venue(db, venue_id)
    authorize_venue_mutation(actor, venue)

    venue.name = venue_in.name
    venue.location = venue_in.location
    venue.court_count = venue_in.court_count
    await db.commit()
    return venue


async def delete_venue(db: AsyncSession, venue_id: str, actor: models.User) -> None:
    """
    Deletes a venue after checking ownership.

    Matches played there are kept and pointed at the UNKNOWN venue marker.
    """
    venue = await get_venue(db, venue_id)
    authorize_venue_mutation(actor, venue)

    matches = await models.Match.find_by_venue_id(db, venue_id)
    for match in matches:
        match.venue_id = models.UNKNOWN_VENUE_ID

    await db.delete(venue)
    await db.commit()
    logger.info(
        "Venue deleted",
        extra={"venue_id": venue_id, "reassigned_matches": len(matches)},
    )
