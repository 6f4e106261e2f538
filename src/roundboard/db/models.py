# src/roundboard/db/models.py

"""Database models for the Roundboard application."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, TypedDict

from sqlalchemy import JSON, CheckConstraint, DateTime, Float, String, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Mapped, declarative_base, mapped_column

Base = declarative_base()


def utcnow() -> datetime:
    """Timezone-aware current time used for every timestamp column."""
    return datetime.now(timezone.utc)


# ===============================================
# Type Definitions for JSON Fields
# ===============================================


class ScoreWinner(TypedDict):
    """One entry of ``Winner.top_scores``."""

    username: str
    score: float


class CoinsWinner(TypedDict):
    """One entry of ``Winner.top_coins``.

    The key is camelCase because the stored snapshot is returned verbatim
    to clients.
    """

    username: str
    coinsTotal: float


# ===============================================
# Users
# ===============================================


class User(Base):
    """A player account and its standing in the current round.

    Attributes:
        score: Best score submitted during the current round.
        coins_total: Coins accumulated during the current round.
        last_update_at: When the last accepted submission was stored;
            drives the per-user submission cooldown.
    """

    __tablename__ = "users"
    id: Mapped[int] = mapped_column(primary_key=True)
    username: Mapped[str] = mapped_column(String, unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String, nullable=False)
    wallet: Mapped[str] = mapped_column(String, nullable=False)

    # Both metrics are ranked, so they are indexed
    score: Mapped[float] = mapped_column(Float, default=0.0, nullable=False, index=True)
    coins_total: Mapped[float] = mapped_column(
        Float, default=0.0, nullable=False, index=True
    )

    last_update_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), default=None, nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    __table_args__ = (
        CheckConstraint("score >= 0", name="ck_users_score_non_negative"),
        CheckConstraint("coins_total >= 0", name="ck_users_coins_non_negative"),
    )

    def __init__(self, username: str, **kw: Any):
        kw.setdefault("score", 0.0)
        kw.setdefault("coins_total", 0.0)
        super().__init__(**kw)
        self.username = username

    @classmethod
    async def find_by_username(cls, db: AsyncSession, username: str) -> "User | None":
        """Find a user by username, bypassing any stale identity-map state."""
        query = (
            select(cls)
            .where(cls.username == username)
            .execution_options(populate_existing=True)
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()


# ===============================================
# Round History
# ===============================================


class Winner(Base):
    """Immutable snapshot of the top performers at the end of a round.

    ``round_number`` is unique, so two finalizers racing on the same epoch
    cannot both record it.
    """

    __tablename__ = "winners"
    id: Mapped[int] = mapped_column(primary_key=True)
    round_number: Mapped[int] = mapped_column(unique=True, nullable=False)
    round_end: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False, index=True
    )

    # Lists of ScoreWinner / CoinsWinner, best first, at most three each
    top_scores: Mapped[list] = mapped_column(
        JSON, default=lambda: [], nullable=False
    )
    top_coins: Mapped[list] = mapped_column(
        JSON, default=lambda: [], nullable=False
    )

    def __init__(self, **kw: Any):
        super().__init__(**kw)
