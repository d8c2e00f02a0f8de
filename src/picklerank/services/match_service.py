# src/picklerank/services/match_service.py

"""Business logic for match-related operations."""

from __future__ import annotations

import logging
import os

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from picklerank.db import models
from picklerank.exceptions import (
    AuthorizationError,
    MatchNotFoundError,
    PickleRankError,
    RatingApplicationError,
    RatingConflictError,
)
from picklerank.rating import elo_engine
from picklerank.schemas import match as match_schema
from picklerank.services.authorization import (
    MatchAction,
    authorize_match_mutation,
    is_system_admin,
)

logger = logging.getLogger(__name__)

# Attempts at the read-compute-save cycle before a version conflict is fatal
RATING_MAX_ATTEMPTS = int(os.getenv("RATING_MAX_ATTEMPTS", "3"))


async def render_match(
    db: AsyncSession, match: models.Match
) -> match_schema.MatchResponse:
    """
    Builds the response for a match, resolving roster ids to player names.

    Ids with no matching player are shown as the raw id.
    """
    players = await models.Player.find_by_ids(db, match.player_ids)
    id_to_name = {p.id: p.name for p in players}

    team_a = list(match.team_a or [])
    team_b = list(match.team_b or [])
    return match_schema.MatchResponse(
        id=match.id,
        date=match.date,
        type=match.type,
        team_a=team_a,
        team_b=team_b,
        team_a_names=[id_to_name.get(pid, pid) for pid in team_a],
        team_b_names=[id_to_name.get(pid, pid) for pid in team_b],
        score_a=match.score_a,
        score_b=match.score_b,
        venue_id=match.venue_id,
        court_number=match.court_number,
        notes=match.notes,
        group_id=match.group_id,
        user_id=match.user_id,
        rating_status=match.rating_status,
        rating_delta=match.rating_delta,
        created_at=match.created_at,
    )


async def get_match(db: AsyncSession, match_id: str) -> models.Match:
    match = await db.get(models.Match, match_id)
    if match is None:
        raise MatchNotFoundError(match_id)
    return match


async def apply_match_ratings(
    db: AsyncSession,
    match_id: str,
    max_attempts: int = RATING_MAX_ATTEMPTS,
) -> models.RatingStatus | None:
    """
    Runs the rating engine for one match inside its own transaction.

    Returns the status this call moved the match to (RATED or SKIPPED), or
    None when the match had already been settled elsewhere.

    The player updates and the match's rating_status change commit
    together. A version conflict on any player rolls the attempt back and
    re-reads fresh ratings; any other failure is logged and raised as
    RatingApplicationError, leaving the match PENDING.

    Raises:
        MatchNotFoundError: If the match does not exist
        RatingConflictError: If every attempt hit a version conflict
        RatingApplicationError: If the ratings could not be persisted
    """
    for attempt in range(1, max_attempts + 1):
        match = await db.get(models.Match, match_id, populate_existing=True)
        if match is None:
            raise MatchNotFoundError(match_id)
        was_pending = match.rating_status == models.RatingStatus.PENDING.value

        try:
            await elo_engine.update_ratings_for_match(db, match)
            await db.commit()
            if not was_pending:
                return None
            return models.RatingStatus(match.rating_status)

        except StaleDataError:
            await db.rollback()
            logger.warning(
                "Rating update conflicted with a concurrent write, retrying",
                extra={"match_id": match_id, "attempt": attempt},
            )

        except PickleRankError:
            await db.rollback()
            logger.error(
                "Rating update failed; match left pending",
                extra={"match_id": match_id},
                exc_info=True,
            )
            raise

        except Exception as e:
            await db.rollback()
            logger.error(
                "Rating update failed; match left pending",
                extra={"match_id": match_id, "error": str(e)},
                exc_info=True,
            )
            raise RatingApplicationError(match_id, str(e)) from e

    logger.error(
        "Rating update gave up after repeated conflicts",
        extra={"match_id": match_id, "attempts": max_attempts},
    )
    raise RatingConflictError(match_id, max_attempts)


async def create_match(
    db: AsyncSession, match_in: match_schema.MatchCreate, actor: models.User
) -> match_schema.MatchResponse:
    """
    Records a new match and rates it.

    This service is responsible for:
    1. Assigning a fresh id and stamping the creator
    2. Committing the match in the PENDING rating state
    3. Running the rating engine exactly once for it
    4. Rendering the response with team names resolved

    The match is committed before ratings are applied. If rating fails the
    match remains PENDING and the error propagates to the caller.
    """
    authorize_match_mutation(actor, None, MatchAction.CREATE)

    # Exclude 'date' if None to let the model use its default (now).
    match_data = match_in.model_dump(exclude_none=True)
    match_data["type"] = match_in.type.value
    new_match = models.Match(
        **match_data,
        id=models.new_id(),
        user_id=actor.id,
        rating_status=models.RatingStatus.PENDING.value,
    )

    try:
        db.add(new_match)
        await db.commit()
    except Exception:
        logger.error(
            "Failed to persist match",
            extra={"user_id": actor.id},
            exc_info=True,
        )
        await db.rollback()
        raise

    match_id = new_match.id
    logger.info(
        "Match recorded",
        extra={
            "match_id": match_id,
            "user_id": actor.id,
            "group_id": new_match.group_id,
        },
    )

    await apply_match_ratings(db, match_id)

    match = await get_match(db, match_id)
    return await render_match(db, match)


async def delete_match(db: AsyncSession, match_id: str, actor: models.User) -> None:
    """
    Deletes a match after checking the actor may do so.

    Ratings the match contributed are left in place.

    Raises:
        MatchNotFoundError: If the match does not exist
        AuthorizationError: If the actor is not admin, creator or group admin
    """
    match = await get_match(db, match_id)

    try:
        authorize_match_mutation(actor, match, MatchAction.DELETE)
    except AuthorizationError:
        logger.warning(
            "Match deletion refused",
            extra={"match_id": match_id, "user_id": actor.id},
        )
        raise

    await db.delete(match)
    await db.commit()
    logger.info("Match deleted", extra={"match_id": match_id, "user_id": actor.id})


async def reconcile_pending_ratings(
    db: AsyncSession, actor: models.User
) -> match_schema.ReconcileSummary:
    """
    Applies ratings to every match still PENDING, oldest first.

    A failing match is recorded and the sweep continues with the next one.
    Matches deleted or settled by another request meanwhile are not counted.
    """
    if not is_system_admin(actor):
        raise AuthorizationError(
            "Unauthorized: only system admins can reconcile ratings",
            actor_id=actor.id,
        )

    result = await db.execute(
        select(models.Match.id)
        .where(models.Match.rating_status == models.RatingStatus.PENDING.value)
        .order_by(models.Match.date, models.Match.created_at)
    )
    pending_ids = list(result.scalars().all())
    summary = match_schema.ReconcileSummary()

    for match_id in pending_ids:
        try:
            status = await apply_match_ratings(db, match_id)
        except MatchNotFoundError:
            logger.info(
                "Pending match deleted before it was reconciled",
                extra={"match_id": match_id},
            )
            continue
        except (RatingApplicationError, RatingConflictError):
            summary.failed.append(match_id)
            continue

        # None means another request settled the match first
        if status == models.RatingStatus.RATED:
            summary.rated += 1
        elif status == models.RatingStatus.SKIPPED:
            summary.skipped += 1

    logger.info(
        "Reconciled pending ratings",
        extra={
            "rated": summary.rated,
            "skipped": summary.skipped,
            "failed": len(summary.failed),
        },
    )
    return summary
