# src/picklerank/api/player.py

"""API endpoints for managing players."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from picklerank.api.deps import get_current_user
from picklerank.db.models import DEFAULT_RATING, Player, User
from picklerank.db.session import get_db
from picklerank.exceptions import PlayerNotFoundError
from picklerank.schemas import player as player_schema
from picklerank.schemas.pagination import (
    PageParams,
    PaginatedResponse,
    PlayerSortField,
    SortOrder,
)
from picklerank.services import player_service

# Create an APIRouter instance for players
# - prefix="/players": All routes here will be prefixed with /players
# - tags=["Players"]: Groups these endpoints under "Players" in the API docs
router = APIRouter(prefix="/players", tags=["Players"])

# Unrated players sort as if they held the default rating
effective_rating = func.coalesce(Player.rating, DEFAULT_RATING)


@router.post(
    "/",
    response_model=player_schema.PlayerRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_player(
    player_in: player_schema.PlayerCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
) -> Player:
    """
    Register a new player.

    - **email**: Must be unique across all players when given.
    - **group_id** / **role**: Enroll the player in a group. Requires the
      caller to be an admin of that group.

    Raises:
        403: If a group is given and the caller cannot manage it.
        409: If a player with the same email already exists.
    """
    return await player_service.create_player(db, player_in, user)


@router.get("/", response_model=PaginatedResponse[player_schema.PlayerRead])
async def read_players(
    page: PageParams = Depends(),
    sort_by: PlayerSortField = Query(PlayerSortField.NAME, description="Sort field"),
    sort_order: SortOrder = Query(SortOrder.ASC, description="Sort direction"),
    db: AsyncSession = Depends(get_db),
) -> PaginatedResponse:
    """
    Retrieve a paginated list of players.

    - **sort_by**: name, rating or created_at
    - **sort_order**: asc or desc
    """
    total = (await db.execute(select(func.count(Player.id)))).scalar_one()

    if sort_by == PlayerSortField.RATING:
        sort_column = effective_rating
    else:
        sort_column = getattr(Player, sort_by.value)
    if sort_order == SortOrder.DESC:
        sort_column = sort_column.desc()

    query = (
        select(Player)
        .order_by(sort_column, Player.id)
        .offset(page.skip)
        .limit(page.limit)
    )
    items = (await db.execute(query)).scalars().all()
    return PaginatedResponse.build(items, total, page)


@router.get("/leaderboard", response_model=list[player_schema.PlayerRead])
async def read_leaderboard(
    group_id: str | None = Query(None, description="Only members of this group"),
    limit: int = Query(50, ge=1, le=500, description="Max entries to return"),
    db: AsyncSession = Depends(get_db),
) -> list[Player]:
    """
    Players ordered by rating, highest first.

    Players that were never rated rank at the default rating.
    """
    query = select(Player).order_by(effective_rating.desc(), Player.name)
    players = list((await db.execute(query)).scalars().all())

    # Memberships live in a JSON column, so the group filter runs here
    if group_id is not None:
        players = [p for p in players if group_id in (p.memberships or {})]

    return players[:limit]


@router.get("/by-email", response_model=player_schema.PlayerRead)
async def read_player_by_email(
    email: str = Query(..., description="Player email address"),
    db: AsyncSession = Depends(get_db),
) -> Player:
    player = await Player.find_by_email(db, email)
    if player is None:
        raise PlayerNotFoundError(email)
    return player


@router.get("/{player_id}", response_model=player_schema.PlayerRead)
async def read_player(player_id: str, db: AsyncSession = Depends(get_db)) -> Player:
    return await player_service.get_player(db, player_id)


@router.put("/{player_id}", response_model=player_schema.PlayerRead)
async def update_player(
    player_id: str,
    player_in: player_schema.PlayerUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
) -> Player:
    """
    Update a player's profile.

    Allowed for system admins and for the user whose email matches the
    player's. Only system admins can change the email itself.
    """
    return await player_service.update_player(db, player_id, player_in, user)


@router.delete("/{player_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_player(
    player_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
) -> None:
    """
    Delete a player profile.

    Allowed for system admins, the user whose email matches the player's,
    and the user the player is linked to. Matches and ratings are kept.
    """
    await player_service.delete_player(db, player_id, user)
    return None


@router.put("/{player_id}/groups/{group_id}", response_model=player_schema.PlayerRead)
async def add_player_to_group(
    player_id: str,
    group_id: str,
    membership_in: player_schema.PlayerMembershipUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
) -> Player:
    """Enroll a player in a group (or change their role). Group admins only."""
    return await player_service.add_player_to_group(
        db, player_id, group_id, membership_in.role, user
    )


@router.delete(
    "/{player_id}/groups/{group_id}", response_model=player_schema.PlayerRead
)
async def remove_player_from_group(
    player_id: str,
    group_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
) -> Player:
    return await player_service.remove_player_from_group(db, player_id, group_id, user)
