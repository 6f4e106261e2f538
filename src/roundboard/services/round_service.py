# src/roundboard/services/round_service.py

"""Business logic for closing rounds and the winners history."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from roundboard.db import models
from roundboard.exceptions import FinalizeAbortedError, RoundInProgressError
from roundboard.services import ranking_service

logger = logging.getLogger(__name__)

# How many users per table are recorded as winners of a round
TOP_WINNERS = 3

# Held for the whole close; never awaited while contended, see close_round
_round_lock = asyncio.Lock()


def is_round_closing() -> bool:
    """True while a round close is running in this process."""
    return _round_lock.locked()


async def _next_round_number(db: AsyncSession) -> int:
    query = select(func.coalesce(func.max(models.Winner.round_number), 0))
    return int((await db.execute(query)).scalar_one()) + 1


async def _save_winner(db: AsyncSession, winner: models.Winner) -> None:
    db.add(winner)
    await db.commit()


async def reset_scores(db: AsyncSession) -> int:
    """
    Sets every user's score and coins back to zero.

    Safe to run again on its own if a close failed after the winners were
    saved. Returns the number of users touched.
    """
    stmt = (
        update(models.User)
        .values(score=0.0, coins_total=0.0)
        .execution_options(synchronize_session=False)
    )
    result = await db.execute(stmt)
    await db.commit()
    return result.rowcount


async def close_round(db: AsyncSession, now: datetime | None = None) -> models.Winner:
    """
    Closes the current round.

    Steps:
    1. Read the top three users by score and by coins
    2. Save a Winner snapshot and commit it
    3. Reset every user's score and coins to zero

    The snapshot is committed before the reset starts, so a failure in step 3
    leaves the round recorded and the reset can simply be retried. If step 2
    fails nothing is reset.

    Raises:
        RoundInProgressError: If another close is already running
        FinalizeAbortedError: If the winner snapshot could not be saved
    """
    # Fail fast instead of queueing behind a running close
    if _round_lock.locked():
        raise RoundInProgressError()

    async with _round_lock:
        return await _finalize(db, now or models.utcnow())


async def _finalize(db: AsyncSession, now: datetime) -> models.Winner:
    # 1. Read the winners of both tables independently
    by_score = await ranking_service.top_users(db, models.User.score, TOP_WINNERS)
    by_coins = await ranking_service.top_users(
        db, models.User.coins_total, TOP_WINNERS
    )

    # 2. Persist the snapshot
    top_scores: list[models.ScoreWinner] = [
        {"username": u.username, "score": u.score} for u in by_score
    ]
    top_coins: list[models.CoinsWinner] = [
        {"username": u.username, "coinsTotal": u.coins_total} for u in by_coins
    ]
    round_number = await _next_round_number(db)
    winner = models.Winner(
        round_number=round_number,
        round_end=now,
        top_scores=top_scores,
        top_coins=top_coins,
    )
    try:
        await _save_winner(db, winner)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(
            "Winner snapshot failed, scores left untouched",
            extra={"round_number": round_number},
            exc_info=True,
        )
        raise FinalizeAbortedError(str(e)) from e

    logger.info(
        "Winners saved for round",
        extra={
            "round_number": winner.round_number,
            "top_scores": winner.top_scores,
            "top_coins": winner.top_coins,
        },
    )

    # 3. Reset the round
    reset_count = await reset_scores(db)
    logger.info(
        "Round closed and scores reset",
        extra={"round_number": winner.round_number, "users_reset": reset_count},
    )
    return winner


async def list_winners(db: AsyncSession, limit: int = 5) -> list[models.Winner]:
    """Most recent winner records first."""
    query = (
        select(models.Winner)
        .order_by(models.Winner.round_end.desc(), models.Winner.id.desc())
        .limit(limit)
    )
    result = await db.execute(query)
    return list(result.scalars().all())
