"""Initial schema: users, groups, players, venues, matches

Revision ID: 20261019_initial
Revises:
Create Date: 2026-10-19

Creates every table with:
- created_at / updated_at timestamps
- players.version for optimistic locking of rating updates
- matches.rating_status / rating_delta tracking the rating phase
- Indexes on the lookup columns (emails, group, venue, creator)
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "20261019_initial"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
    ]


def upgrade() -> None:
    """Create all PickleRank tables."""
    # === USERS ===
    op.create_table(
        "users",
        sa.Column("id", sa.String(32), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=True, unique=True),
        sa.Column("system_role", sa.String(), nullable=False, server_default="USER"),
        sa.Column("memberships", sa.JSON(), nullable=True),
        *_timestamps(),
    )

    # === GROUPS ===
    op.create_table(
        "groups",
        sa.Column("id", sa.String(32), primary_key=True),
        sa.Column("name", sa.String(), nullable=False, unique=True),
        *_timestamps(),
    )

    # === PLAYERS ===
    op.create_table(
        "players",
        sa.Column("id", sa.String(32), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=True, unique=True),
        sa.Column("contact_number", sa.String(), nullable=True),
        sa.Column("social_media", sa.String(), nullable=True),
        sa.Column("user_id", sa.String(32), nullable=True),
        sa.Column("rating", sa.Float(), nullable=True),
        sa.Column("memberships", sa.JSON(), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False, server_default="1"),
        *_timestamps(),
    )
    op.create_index("ix_players_email", "players", ["email"])
    op.create_index("ix_players_user_id", "players", ["user_id"])

    # === VENUES ===
    op.create_table(
        "venues",
        sa.Column("id", sa.String(32), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("location", sa.String(), nullable=True),
        sa.Column("court_count", sa.Integer(), nullable=True),
        sa.Column("created_by_user_id", sa.String(32), nullable=True),
        sa.Column("group_id", sa.String(32), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_venues_group_id", "venues", ["group_id"])

    # === MATCHES ===
    op.create_table(
        "matches",
        sa.Column("id", sa.String(32), primary_key=True),
        sa.Column("date", sa.DateTime(), nullable=False),
        sa.Column("type", sa.String(), nullable=False, server_default="DOUBLES"),
        sa.Column("team_a", sa.JSON(), nullable=True),
        sa.Column("team_b", sa.JSON(), nullable=True),
        sa.Column("score_a", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("score_b", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("venue_id", sa.String(32), nullable=True),
        sa.Column("court_number", sa.Integer(), nullable=True),
        sa.Column("notes", sa.String(), nullable=True),
        sa.Column("group_id", sa.String(32), nullable=True),
        sa.Column("user_id", sa.String(32), nullable=True),
        sa.Column(
            "rating_status", sa.String(), nullable=False, server_default="PENDING"
        ),
        sa.Column("rating_delta", sa.Float(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_matches_date", "matches", ["date"])
    op.create_index("ix_matches_venue_id", "matches", ["venue_id"])
    op.create_index("ix_matches_group_id", "matches", ["group_id"])
    op.create_index("ix_matches_user_id", "matches", ["user_id"])
    op.create_index("ix_matches_rating_status", "matches", ["rating_status"])


def downgrade() -> None:
    """Drop all PickleRank tables."""
    op.drop_table("matches")
    op.drop_table("venues")
    op.drop_table("players")
    op.drop_table("groups")
    op.drop_table("users")
