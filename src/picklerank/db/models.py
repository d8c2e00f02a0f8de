# src/picklerank/db/models.py

"""Database models for the PickleRank application."""

from __future__ import annotations

import uuid
from collections.abc import Iterable
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from sqlalchemy import JSON, Float, String, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Mapped, declarative_base, mapped_column

Base = declarative_base()

# Rating assumed for any player whose rating has never been recorded.
DEFAULT_RATING = 1200.0

# Venue marker left on matches whose venue was deleted.
UNKNOWN_VENUE_ID = "UNKNOWN"


def new_id() -> str:
    """Generate an opaque unique identifier."""
    return uuid.uuid4().hex


# ===============================================
# Role and Status Vocabularies
# ===============================================


class SystemRole(str, Enum):
    """System-wide role held by every user."""

    ADMIN = "ADMIN"
    USER = "USER"


class GroupRole(str, Enum):
    """Per-group role, keyed by group id in a memberships mapping."""

    MEMBER = "MEMBER"
    GROUP_ADMIN = "GROUP_ADMIN"


class MatchType(str, Enum):
    """Match format. Team sizes are not enforced against it."""

    SINGLES = "SINGLES"
    DOUBLES = "DOUBLES"


class RatingStatus(str, Enum):
    """Rating phase of a match.

    PENDING: persisted, ratings not yet applied
    RATED: delta applied to every resolved player
    SKIPPED: a roster was empty or unresolvable, nothing applied
    """

    PENDING = "PENDING"
    RATED = "RATED"
    SKIPPED = "SKIPPED"


# ===============================================
# Mixins for Common Columns
# ===============================================


class TimestampMixin:
    """Mixin providing created_at and updated_at timestamp columns."""

    created_at: Mapped[datetime] = mapped_column(
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        default=None,
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=True,
    )


# ===============================================
# Directory Tables: User, Group, Player, Venue
# ===============================================


class User(Base, TimestampMixin):
    """An authenticated account.

    Attributes:
        system_role: ADMIN or USER (see SystemRole)
        memberships: {group_id: GroupRole value}
    """

    __tablename__ = "users"
    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String, nullable=False)
    email: Mapped[str | None] = mapped_column(String, unique=True, nullable=True)
    system_role: Mapped[str] = mapped_column(
        String, default=SystemRole.USER.value, nullable=False
    )
    memberships: Mapped[dict] = mapped_column(JSON, default=lambda: {})

    def __init__(self, **kw: Any):
        super().__init__(**kw)

    @classmethod
    async def find_by_email(cls, db: AsyncSession, email: str) -> "User | None":
        """Find a user by email address."""
        result = await db.execute(select(cls).where(cls.email == email))
        return result.scalar_one_or_none()


class Group(Base, TimestampMixin):
    """A club or ladder that players, venues and matches can belong to."""

    __tablename__ = "groups"
    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String, unique=True, nullable=False)

    def __init__(self, **kw: Any):
        super().__init__(**kw)


class Player(Base, TimestampMixin):
    """A person who appears on match rosters.

    The version column is SQLAlchemy's version counter: an UPDATE that
    races another writer raises StaleDataError at flush.
    """

    __tablename__ = "players"
    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String, nullable=False)
    email: Mapped[str | None] = mapped_column(
        String, unique=True, nullable=True, index=True
    )
    contact_number: Mapped[str | None] = mapped_column(String, nullable=True)
    social_media: Mapped[str | None] = mapped_column(String, nullable=True)
    user_id: Mapped[str | None] = mapped_column(String(32), nullable=True, index=True)

    # None means "never rated" and reads as DEFAULT_RATING
    rating: Mapped[float | None] = mapped_column(Float, nullable=True)
    memberships: Mapped[dict] = mapped_column(JSON, default=lambda: {})
    version: Mapped[int] = mapped_column(nullable=False)

    __mapper_args__ = {"version_id_col": version}

    def __init__(self, **kw: Any):
        super().__init__(**kw)

    @property
    def effective_rating(self) -> float:
        return DEFAULT_RATING if self.rating is None else self.rating

    @classmethod
    async def find_by_ids(
        cls, db: AsyncSession, player_ids: Iterable[str]
    ) -> list["Player"]:
        """Batch lookup. Order is not preserved and unknown ids are omitted."""
        ids = {pid for pid in player_ids if pid is not None}
        if not ids:
            return []
        result = await db.execute(select(cls).where(cls.id.in_(ids)))
        return list(result.scalars().all())

    @classmethod
    async def find_by_email(cls, db: AsyncSession, email: str) -> "Player | None":
        """Find a player by email address."""
        result = await db.execute(select(cls).where(cls.email == email))
        return result.scalar_one_or_none()


class Venue(Base, TimestampMixin):
    """A place with courts where matches are played."""

    __tablename__ = "venues"
    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String, nullable=False)
    location: Mapped[str | None] = mapped_column(String, nullable=True)
    court_count: Mapped[int | None] = mapped_column(nullable=True)
    created_by_user_id: Mapped[str | None] = mapped_column(String(32), nullable=True)
    group_id: Mapped[str | None] = mapped_column(String(32), nullable=True, index=True)

    def __init__(self, **kw: Any):
        super().__init__(**kw)


# ===============================================
# Match Table
# ===============================================


class Match(Base, TimestampMixin):
    """A recorded match between two teams.

    Rosters and scores are fixed at creation and feed exactly one rating
    computation, tracked by rating_status.
    """

    __tablename__ = "matches"
    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    # Business timestamp: when the match was actually played
    date: Mapped[datetime] = mapped_column(
        default=lambda: datetime.now(timezone.utc), index=True
    )
    type: Mapped[str] = mapped_column(
        String, default=MatchType.DOUBLES.value, nullable=False
    )

    # Ordered player id lists; duplicates are kept as submitted
    team_a: Mapped[list | None] = mapped_column(JSON, nullable=True)
    team_b: Mapped[list | None] = mapped_column(JSON, nullable=True)
    score_a: Mapped[int] = mapped_column(default=0, nullable=False)
    score_b: Mapped[int] = mapped_column(default=0, nullable=False)

    venue_id: Mapped[str | None] = mapped_column(String(32), nullable=True, index=True)
    court_number: Mapped[int | None] = mapped_column(nullable=True)
    notes: Mapped[str | None] = mapped_column(String, nullable=True)
    group_id: Mapped[str | None] = mapped_column(String(32), nullable=True, index=True)
    user_id: Mapped[str | None] = mapped_column(String(32), nullable=True, index=True)

    rating_status: Mapped[str] = mapped_column(
        String, default=RatingStatus.PENDING.value, nullable=False, index=True
    )
    # Signed delta applied to team A (team B received the negation)
    rating_delta: Mapped[float | None] = mapped_column(Float, nullable=True)

    def __init__(self, **kw: Any):
        super().__init__(**kw)

    @property
    def player_ids(self) -> list[str]:
        """All roster ids, team A first, in submission order."""
        return list(self.team_a or []) + list(self.team_b or [])

    @classmethod
    async def find_by_venue_id(cls, db: AsyncSession, venue_id: str) -> list["Match"]:
        """Find every match played at a venue."""
        result = await db.execute(select(cls).where(cls.venue_id == venue_id))
        return list(result.scalars().all())
