# tests/test_round_service.py

"""Unit tests for closing rounds."""

import asyncio
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest
from roundboard.db.models import User, Winner
from roundboard.exceptions import FinalizeAbortedError, RoundInProgressError
from roundboard.services import round_service
from sqlalchemy import select
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

T0 = datetime(2026, 10, 19, 18, 0, 0, tzinfo=timezone.utc)


# =============================================================================
# Helper Functions
# =============================================================================


async def all_users(db: AsyncSession) -> list[User]:
    result = await db.execute(
        select(User).order_by(User.username).execution_options(populate_existing=True)
    )
    return list(result.scalars().all())


async def count_winners(db: AsyncSession) -> int:
    result = await db.execute(select(Winner))
    return len(list(result.scalars().all()))


# =============================================================================
# Round Close Tests
# =============================================================================


@pytest.mark.asyncio
async def test_close_round_snapshots_top_three_and_resets(
    db_session: AsyncSession, make_user
):
    await make_user("A", score=100, coins_total=5)
    await make_user("B", score=90, coins_total=60)
    await make_user("C", score=80, coins_total=40)
    await make_user("D", score=70, coins_total=50)

    winner = await round_service.close_round(db_session, now=T0)

    assert winner.round_number == 1
    assert winner.top_scores == [
        {"username": "A", "score": 100},
        {"username": "B", "score": 90},
        {"username": "C", "score": 80},
    ]
    assert [w["username"] for w in winner.top_coins] == ["B", "D", "C"]

    for user in await all_users(db_session):
        assert user.score == 0
        assert user.coins_total == 0


@pytest.mark.asyncio
async def test_close_round_with_fewer_than_three_users(
    db_session: AsyncSession, make_user
):
    await make_user("Solo", score=12, coins_total=3)

    winner = await round_service.close_round(db_session, now=T0)

    assert winner.top_scores == [{"username": "Solo", "score": 12}]
    assert winner.top_coins == [{"username": "Solo", "coinsTotal": 3}]


@pytest.mark.asyncio
async def test_close_round_on_empty_store(db_session: AsyncSession):
    winner = await round_service.close_round(db_session, now=T0)

    assert winner.top_scores == []
    assert winner.top_coins == []
    assert await count_winners(db_session) == 1


@pytest.mark.asyncio
async def test_closing_twice_records_two_rounds(db_session: AsyncSession, make_user):
    """Not idempotent: the second close records a round of zeroes."""
    await make_user("A", score=100, coins_total=5)

    first = await round_service.close_round(db_session, now=T0)
    second = await round_service.close_round(db_session, now=T0 + timedelta(hours=1))

    assert (first.round_number, second.round_number) == (1, 2)
    assert second.top_scores == [{"username": "A", "score": 0}]
    assert await count_winners(db_session) == 2


@pytest.mark.asyncio
async def test_failed_snapshot_leaves_scores_untouched(
    db_session: AsyncSession, make_user
):
    await make_user("A", score=100, coins_total=5)
    await make_user("B", score=90, coins_total=60)

    with patch(
        "roundboard.services.round_service._save_winner",
        side_effect=OperationalError("INSERT", {}, Exception("disk I/O error")),
    ):
        with pytest.raises(FinalizeAbortedError):
            await round_service.close_round(db_session, now=T0)

    users = await all_users(db_session)
    assert [(u.username, u.score, u.coins_total) for u in users] == [
        ("A", 100, 5),
        ("B", 90, 60),
    ]
    assert await count_winners(db_session) == 0
    assert round_service.is_round_closing() is False


@pytest.mark.asyncio
async def test_reset_scores_can_be_rerun(db_session: AsyncSession, make_user):
    await make_user("A", score=100, coins_total=5)
    await make_user("B", score=0, coins_total=0)

    assert await round_service.reset_scores(db_session) == 2
    assert await round_service.reset_scores(db_session) == 2

    for user in await all_users(db_session):
        assert (user.score, user.coins_total) == (0, 0)


@pytest.mark.asyncio
async def test_close_round_rejected_while_another_is_running(db_session: AsyncSession):
    async with round_service._round_lock:
        with pytest.raises(RoundInProgressError):
            await round_service.close_round(db_session, now=T0)

    assert await count_winners(db_session) == 0


@pytest.mark.asyncio
async def test_concurrent_closes_record_one_round(
    session_factory: async_sessionmaker[AsyncSession], make_user
):
    await make_user("A", score=100, coins_total=5)

    async def close_in_own_session() -> Winner:
        async with session_factory() as session:
            return await round_service.close_round(session, now=T0)

    results = await asyncio.gather(
        close_in_own_session(), close_in_own_session(), return_exceptions=True
    )

    winners = [r for r in results if isinstance(r, Winner)]
    rejected = [r for r in results if isinstance(r, RoundInProgressError)]
    assert len(winners) == 1
    assert len(rejected) == 1
    assert winners[0].top_scores == [{"username": "A", "score": 100}]


# =============================================================================
# Winners History
# =============================================================================


@pytest.mark.asyncio
async def test_list_winners_newest_first(db_session: AsyncSession, make_user):
    await make_user("A", score=1)
    for hours in range(4):
        await round_service.close_round(db_session, now=T0 + timedelta(hours=hours))

    latest = await round_service.list_winners(db_session, limit=3)

    assert [w.round_number for w in latest] == [4, 3, 2]
