# src/picklerank/schemas/__init__.py

"""Pydantic schemas for API validation and serialization."""

from .group import GroupCreate, GroupMemberAdd, GroupRead
from .match import MatchBase, MatchCreate, MatchResponse, ReconcileSummary
from .pagination import (
    MatchSortField,
    PageParams,
    PaginatedResponse,
    PlayerSortField,
    SortOrder,
)
from .player import (
    PlayerBase,
    PlayerCreate,
    PlayerMembershipUpdate,
    PlayerRead,
    PlayerUpdate,
)
from .user import UserCreate, UserRead
from .venue import VenueBase, VenueCreate, VenueRead, VenueUpdate

__all__ = [
    # Group
    "GroupCreate",
    "GroupMemberAdd",
    "GroupRead",
    # Match
    "MatchBase",
    "MatchCreate",
    "MatchResponse",
    "ReconcileSummary",
    # Pagination
    "MatchSortField",
    "PageParams",
    "PaginatedResponse",
    "PlayerSortField",
    "SortOrder",
    # Player
    "PlayerBase",
    "PlayerCreate",
    "PlayerMembershipUpdate",
    "PlayerRead",
    "PlayerUpdate",
    # User
    "UserCreate",
    "UserRead",
    # Venue
    "VenueBase",
    "VenueCreate",
    "VenueRead",
    "VenueUpdate",
]
