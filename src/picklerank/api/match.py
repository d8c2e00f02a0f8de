# src/picklerank/api/match.py

"""API endpoints for managing matches."""

from datetime import datetime

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from picklerank.api.deps import get_current_user
from picklerank.db.models import Match, User
from picklerank.db.session import get_db
from picklerank.schemas import match as match_schema
from picklerank.schemas.pagination import (
    MatchSortField,
    PageParams,
    PaginatedResponse,
    SortOrder,
)
from picklerank.services import match_service

# Create an APIRouter instance for matches
router = APIRouter(prefix="/matches", tags=["Matches"])


@router.get("/", response_model=PaginatedResponse[match_schema.MatchResponse])
async def read_matches(
    page: PageParams = Depends(),
    sort_by: MatchSortField = Query(MatchSortField.DATE, description="Sort field"),
    sort_order: SortOrder = Query(SortOrder.DESC, description="Sort direction"),
    group_id: str | None = Query(None, description="Filter by group ID"),
    venue_id: str | None = Query(None, description="Filter by venue ID"),
    player_id: str | None = Query(None, description="Filter by player"),
    played_after: datetime | None = Query(None, description="After this date"),
    played_before: datetime | None = Query(None, description="Before this date"),
    db: AsyncSession = Depends(get_db),
) -> PaginatedResponse:
    """
    Retrieve a paginated list of matches, newest first by default.

    - **sort_by**: date (when played) or created_at
    - **player_id**: only matches with this player on either roster
    - **played_after** / **played_before**: inclusive date bounds
      (offsets are honored; stored dates are UTC)
    """
    played_after = match_schema.to_naive_utc(played_after)
    played_before = match_schema.to_naive_utc(played_before)

    base_query = select(Match)

    if group_id is not None:
        base_query = base_query.where(Match.group_id == group_id)

    if venue_id is not None:
        base_query = base_query.where(Match.venue_id == venue_id)

    if played_after is not None:
        base_query = base_query.where(Match.date >= played_after)

    if played_before is not None:
        base_query = base_query.where(Match.date <= played_before)

    sort_column = getattr(Match, sort_by.value)
    if sort_order == SortOrder.DESC:
        sort_column = sort_column.desc()
    ordered = base_query.order_by(sort_column, Match.id)

    if player_id is not None:
        # Rosters are JSON lists, so roster membership is checked here
        candidates = (await db.execute(ordered)).scalars().all()
        matching = [m for m in candidates if player_id in m.player_ids]
        total = len(matching)
        rows = page.slice(matching)
    else:
        count_query = select(func.count()).select_from(base_query.subquery())
        total = (await db.execute(count_query)).scalar_one()
        result = await db.execute(ordered.offset(page.skip).limit(page.limit))
        rows = list(result.scalars().all())

    items = [await match_service.render_match(db, m) for m in rows]
    return PaginatedResponse.build(items, total, page)


@router.post(
    "/",
    response_model=match_schema.MatchResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_match(
    match_in: match_schema.MatchCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
) -> match_schema.MatchResponse:
    """
    Record a new match, apply rating changes, and return it with team names.

    Rosters with no resolvable players on either side are recorded but not
    rated (rating_status SKIPPED).

    Raises:
        401: If the caller is not authenticated
        500: If the match was stored but its ratings could not be applied;
             the body carries the match_id, which stays PENDING
    """
    return await match_service.create_match(db, match_in, user)


@router.post("/reconcile", response_model=match_schema.ReconcileSummary)
async def reconcile_ratings(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
) -> match_schema.ReconcileSummary:
    """
    Apply ratings to every match left PENDING by an earlier failure.

    System admins only.
    """
    return await match_service.reconcile_pending_ratings(db, user)


@router.get("/{match_id}", response_model=match_schema.MatchResponse)
async def read_match(
    match_id: str, db: AsyncSession = Depends(get_db)
) -> match_schema.MatchResponse:
    """
    Retrieve a single match by its ID, with team names resolved.
    """
    match = await match_service.get_match(db, match_id)
    return await match_service.render_match(db, match)


@router.delete("/{match_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_match(
    match_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
) -> None:
    """
    Delete a match by its ID.

    Allowed for system admins, the match's creator, or an admin of the
    match's group. Player ratings are not reverted.
    """
    await match_service.delete_match(db, match_id, user)
    return None
