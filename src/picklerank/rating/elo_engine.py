# src/picklerank/rating/elo_engine.py

"""
Team Elo rating engine.

Each team is represented by the arithmetic mean of its players' ratings.
The match produces a single delta which every team-A player gains and
every team-B player loses, regardless of individual pre-match ratings.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from picklerank.db import models

logger = logging.getLogger(__name__)

# Elo K-factor, fixed for every deployment
K_FACTOR = 32.0

# ===============================================
# == Elo Core Implementation
# ===============================================


@dataclass(frozen=True)
class MatchRatingResult:
    """Outcome of rating one match, seen from team A."""

    rating_a: float
    rating_b: float
    expected_a: float
    expected_b: float
    actual_a: float
    delta: float


class EloEngine:
    """Encapsulates the team Elo calculation."""

    def __init__(
        self,
        k_factor: float = K_FACTOR,
        default_rating: float = models.DEFAULT_RATING,
        scale: float = 400.0,
    ):
        self._k_factor = k_factor
        self._default_rating = default_rating
        self._scale = scale

    def team_average(self, ratings: Sequence[float | None]) -> float:
        """Mean team rating, reading missing ratings as the default."""
        if not ratings:
            return self._default_rating
        values = [self._default_rating if r is None else r for r in ratings]
        return sum(values) / len(values)

    def expected_score(self, rating: float, opponent_rating: float) -> float:
        """Probability of winning against the opponent rating."""
        return 1.0 / (1.0 + 10 ** ((opponent_rating - rating) / self._scale))

    @staticmethod
    def actual_score(score_a: int, score_b: int) -> float:
        """Team A scores 1.0 only on a strict win; a tie counts as a loss."""
        return 1.0 if score_a > score_b else 0.0

    def rate(
        self,
        team_a_ratings: Sequence[float | None],
        team_b_ratings: Sequence[float | None],
        score_a: int,
        score_b: int,
    ) -> MatchRatingResult:
        """Compute the delta for team A; team B receives its negation."""
        rating_a = self.team_average(team_a_ratings)
        rating_b = self.team_average(team_b_ratings)

        # Both sides use the same formula mirrored, so the two only sum to
        # 1.0 up to floating-point rounding.
        expected_a = self.expected_score(rating_a, rating_b)
        expected_b = self.expected_score(rating_b, rating_a)

        actual_a = self.actual_score(score_a, score_b)
        delta = self._k_factor * (actual_a - expected_a)

        return MatchRatingResult(
            rating_a=rating_a,
            rating_b=rating_b,
            expected_a=expected_a,
            expected_b=expected_b,
            actual_a=actual_a,
            delta=delta,
        )

    def apply(self, players: Sequence[models.Player], delta: float) -> None:
        """Add the same delta to every player."""
        for player in players:
            current = self._default_rating if player.rating is None else player.rating
            player.rating = current + delta


# ===============================================
# == PickleRank Integration
# ===============================================


def _mark_skipped(match: models.Match, reason: str) -> None:
    match.rating_status = models.RatingStatus.SKIPPED.value
    logger.info(
        "Skipping rating update",
        extra={"match_id": match.id, "reason": reason},
    )


async def update_ratings_for_match(
    db: AsyncSession,
    match: models.Match,
    engine: EloEngine | None = None,
) -> MatchRatingResult | None:
    """
    Applies the team Elo update for a persisted match.

    Returns None without touching any player when the match is not PENDING,
    or when either roster is empty before or after resolving player ids.
    The match's rating_status is moved to RATED or SKIPPED alongside the
    player updates. Changes are flushed, not committed, so the caller owns
    the transaction.
    """
    if match.rating_status != models.RatingStatus.PENDING.value:
        logger.warning(
            "Ratings already settled for match, not re-applying",
            extra={"match_id": match.id, "rating_status": match.rating_status},
        )
        return None

    if not match.team_a or not match.team_b:
        _mark_skipped(match, "empty roster")
        await db.flush()
        return None

    # 1. Resolve rosters; unknown ids are dropped silently
    team_a_players = await models.Player.find_by_ids(db, match.team_a)
    team_b_players = await models.Player.find_by_ids(db, match.team_b)

    if not team_a_players or not team_b_players:
        _mark_skipped(match, "unresolvable roster")
        await db.flush()
        return None

    # 2. Compute the single team delta
    engine = engine or EloEngine()
    result = engine.rate(
        [p.rating for p in team_a_players],
        [p.rating for p in team_b_players],
        match.score_a,
        match.score_b,
    )

    # 3. Apply it with opposite signs
    engine.apply(team_a_players, result.delta)
    engine.apply(team_b_players, -result.delta)

    match.rating_status = models.RatingStatus.RATED.value
    match.rating_delta = result.delta

    db.add_all(team_a_players)
    db.add_all(team_b_players)
    db.add(match)

    # Flush so version conflicts on players surface here
    await db.flush()

    logger.debug(
        "Ratings applied",
        extra={
            "match_id": match.id,
            "delta": round(result.delta, 4),
            "expected_a": round(result.expected_a, 4),
            "team_a_size": len(team_a_players),
            "team_b_size": len(team_b_players),
        },
    )
    return result
