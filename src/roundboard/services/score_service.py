# src/roundboard/services/score_service.py

"""Business logic for score and coin submissions."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from sqlalchemy import case, or_, update
from sqlalchemy.ext.asyncio import AsyncSession

from roundboard.db import models
from roundboard.exceptions import (
    ImplausibleValueError,
    InvalidInputError,
    RateLimitedError,
    RoundInProgressError,
    UserNotFoundError,
)
from roundboard.services import round_service

logger = logging.getLogger(__name__)

# Anti-cheat ceilings for a single game session
MAX_SCORE = 500
MAX_COINS = 200

# Minimum time between two accepted submissions from the same user
SUBMIT_COOLDOWN = timedelta(milliseconds=5000)


@dataclass(frozen=True)
class StoredScore:
    """A user's values right after an accepted submission."""

    score: float
    coins_total: float


def _as_number(field: str, value: Any) -> float:
    # bool is an int subclass, but true/false is never a score
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidInputError(field)
    if isinstance(value, float) and not math.isfinite(value):
        raise InvalidInputError(field)
    try:
        return float(value)
    except OverflowError:
        # An int beyond float range is far past any ceiling
        return math.copysign(math.inf, value)


def validate_submission(score: Any, coins: Any) -> tuple[float, float]:
    """
    Checks types and bounds of a submission without touching the database.

    Raises:
        InvalidInputError: If score or coins is not a finite number
        ImplausibleValueError: If either value is negative or above its ceiling
    """
    checked_score = _as_number("score", score)
    checked_coins = _as_number("coins", coins)

    if not (0 <= checked_score <= MAX_SCORE and 0 <= checked_coins <= MAX_COINS):
        raise ImplausibleValueError(checked_score, checked_coins)

    return checked_score, checked_coins


def _utc(value: datetime) -> datetime:
    # SQLite hands timestamps back without tzinfo; they are stored in UTC
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


async def submit_score(
    db: AsyncSession,
    username: Any,
    score: Any,
    coins: Any,
    now: datetime | None = None,
) -> StoredScore:
    """
    Records a finished game session for a user.

    The stored score becomes max(stored, submitted) and the submitted coins
    are added to the running total. The cooldown check and the mutation are a
    single UPDATE, so concurrent submissions for one user cannot both pass
    the cooldown or lose each other's coins.

    Raises:
        InvalidInputError: If username is blank or score or coins is not a number
        ImplausibleValueError: If score or coins is out of bounds
        RoundInProgressError: If a round close is running
        UserNotFoundError: If the username has no record
        RateLimitedError: If the previous submission is under 5 seconds old
    """
    if not isinstance(username, str) or not username.strip():
        raise InvalidInputError("username")
    checked_score, checked_coins = validate_submission(score, coins)

    if round_service.is_round_closing():
        raise RoundInProgressError()

    now = now or models.utcnow()
    cutoff = now - SUBMIT_COOLDOWN
    User = models.User

    stmt = (
        update(User)
        .where(User.username == username)
        .where(or_(User.last_update_at.is_(None), User.last_update_at <= cutoff))
        .values(
            score=case((User.score < checked_score, checked_score), else_=User.score),
            coins_total=User.coins_total + checked_coins,
            last_update_at=now,
        )
        .returning(User.score, User.coins_total)
        .execution_options(synchronize_session=False)
    )
    row = (await db.execute(stmt)).one_or_none()

    if row is None:
        await db.rollback()
        # Nothing matched: either no such user or still cooling down
        user = await User.find_by_username(db, username)
        if user is None:
            raise UserNotFoundError(username)

        last_update = _utc(user.last_update_at) if user.last_update_at else now
        retry_after = (SUBMIT_COOLDOWN - (now - last_update)).total_seconds()
        logger.info(
            "Rejected score submission during cooldown",
            extra={"username": username, "retry_after": retry_after},
        )
        raise RateLimitedError(username, max(retry_after, 0.0))

    await db.commit()

    logger.info(
        "Score saved",
        extra={
            "username": username,
            "submitted_score": checked_score,
            "submitted_coins": checked_coins,
            "score": row.score,
            "coins_total": row.coins_total,
        },
    )
    return StoredScore(score=row.score, coins_total=row.coins_total)
