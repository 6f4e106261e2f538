# src/roundboard/services/ranking_service.py

"""Ranking queries over the users table.

All ranks use standard competition ranking: a user's rank is one more than
the number of users with a strictly greater value, so tied users share a
rank ("1, 2, 2, 4"). This holds both for the top-N tables and for the
requesting user's own standing.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute

from roundboard.db import models
from roundboard.schemas.leaderboard import (
    CoinsEntry,
    LeaderboardRead,
    ScoreEntry,
    UserStanding,
)

logger = logging.getLogger(__name__)

LEADERBOARD_SIZE = 15


async def top_users(
    db: AsyncSession, metric: InstrumentedAttribute, limit: int
) -> list[models.User]:
    """Users with the highest ``metric``, best first.

    Ties are ordered by username so the listing is stable between calls.
    """
    query = (
        select(models.User)
        .order_by(metric.desc(), models.User.username.asc())
        .limit(limit)
        .execution_options(populate_existing=True)
    )
    result = await db.execute(query)
    return list(result.scalars().all())


def competition_ranks(values: Sequence[float]) -> list[int]:
    """Ranks for a sequence already sorted in descending order.

    >>> competition_ranks([90, 80, 80, 70])
    [1, 2, 2, 4]
    """
    ranks: list[int] = []
    for position, value in enumerate(values):
        if position and value == values[position - 1]:
            ranks.append(ranks[-1])
        else:
            ranks.append(position + 1)
    return ranks


async def rank_of(db: AsyncSession, metric: InstrumentedAttribute, value: float) -> int:
    """1 + the number of users whose ``metric`` is strictly greater than ``value``."""
    query = select(func.count()).select_from(models.User).where(metric > value)
    greater = (await db.execute(query)).scalar_one()
    return int(greater) + 1


async def get_leaderboard(
    db: AsyncSession, username: str, limit: int = LEADERBOARD_SIZE
) -> LeaderboardRead:
    """
    Builds both leaderboards and the requesting user's standing.

    An unknown ``username`` is not an error; the ``user`` section is
    simply ``None``.
    """
    by_score = await top_users(db, models.User.score, limit)
    by_coins = await top_users(db, models.User.coins_total, limit)

    highscores = [
        ScoreEntry(rank=rank, username=u.username, score=u.score)
        for u, rank in zip(by_score, competition_ranks([u.score for u in by_score]))
    ]
    coins = [
        CoinsEntry(rank=rank, username=u.username, coins_total=u.coins_total)
        for u, rank in zip(
            by_coins, competition_ranks([u.coins_total for u in by_coins])
        )
    ]

    user = await models.User.find_by_username(db, username)
    if user is None:
        logger.debug("Leaderboard requested for unknown user", extra={"username": username})
        return LeaderboardRead(highscores=highscores, coins=coins, user=None)

    standing = UserStanding(
        username=user.username,
        score=user.score,
        coins_total=user.coins_total,
        score_rank=await rank_of(db, models.User.score, user.score),
        coins_rank=await rank_of(db, models.User.coins_total, user.coins_total),
    )
    return LeaderboardRead(highscores=highscores, coins=coins, user=standing)
