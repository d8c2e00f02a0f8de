# src/picklerank/schemas/match.py

"""Pydantic schemas for the Match resource."""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator

from picklerank.db.models import MatchType, RatingStatus


def to_naive_utc(value: datetime | None) -> datetime | None:
    """Match dates are stored as naive UTC; offset-aware input is converted."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


# ===============================================
# == Match Schemas
# ===============================================


class MatchBase(BaseModel):
    """Shared properties for a match."""

    type: MatchType = MatchType.DOUBLES
    score_a: int = Field(..., ge=0)
    score_b: int = Field(..., ge=0)
    venue_id: str | None = None
    court_number: int | None = Field(default=None, ge=1)
    notes: str | None = None
    group_id: str | None = None


class MatchCreate(MatchBase):
    """
    Properties to receive via API on create.

    Rosters are player ids. Team sizes are not checked against `type`, and
    ids that resolve to no player are kept on the record but ignored when
    rating.
    """

    # Optional: when the match was played (defaults to now if not provided)
    date: datetime | None = Field(
        default=None,
        description="When the match was played (ISO format). Defaults to current time.",
    )
    team_a: list[str]
    team_b: list[str]

    @field_validator("date")
    @classmethod
    def _date_as_utc(cls, value: datetime | None) -> datetime | None:
        return to_naive_utc(value)


class MatchResponse(MatchBase):
    """A match with team member ids resolved to display names."""

    id: str
    date: datetime
    team_a: list[str] = Field(default_factory=list)
    team_b: list[str] = Field(default_factory=list)
    team_a_names: list[str] = Field(default_factory=list)
    team_b_names: list[str] = Field(default_factory=list)
    user_id: str | None = None
    rating_status: RatingStatus
    rating_delta: float | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ReconcileSummary(BaseModel):
    """Result of a sweep over matches whose ratings were never applied."""

    rated: int = 0
    skipped: int = 0
    failed: list[str] = Field(default_factory=list)
