# tests/test_api_winners.py

"""Tests for round closing and winners history endpoints."""

from unittest.mock import patch

import pytest
from httpx import AsyncClient
from roundboard.db.models import User
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession


@pytest.mark.asyncio
async def test_close_round_endpoint(
    async_client: AsyncClient, db_session: AsyncSession, make_user
):
    await make_user("A", score=100, coins_total=1)
    await make_user("B", score=90, coins_total=3)
    await make_user("C", score=80, coins_total=2)
    await make_user("D", score=70, coins_total=0)

    response = await async_client.post("/winners/close-round")

    assert response.status_code == 200
    data = response.json()
    assert "Round closed" in data["message"]
    winners = data["winners"]
    assert winners["roundNumber"] == 1
    assert "roundEnd" in winners
    assert [w["username"] for w in winners["topScores"]] == ["A", "B", "C"]
    assert winners["topCoins"] == [
        {"username": "B", "coinsTotal": 3},
        {"username": "C", "coinsTotal": 2},
        {"username": "A", "coinsTotal": 1},
    ]

    for name in ["A", "B", "C", "D"]:
        user = await User.find_by_username(db_session, name)
        assert user is not None
        assert (user.score, user.coins_total) == (0, 0)


@pytest.mark.asyncio
async def test_close_round_failure_returns_500_without_reset(
    async_client: AsyncClient, db_session: AsyncSession, make_user
):
    await make_user("A", score=100, coins_total=1)

    with patch(
        "roundboard.services.round_service._save_winner",
        side_effect=OperationalError("INSERT", {}, Exception("database is locked")),
    ):
        response = await async_client.post("/winners/close-round")

    assert response.status_code == 500
    assert response.json()["error_type"] == "FinalizeAbortedError"

    user = await User.find_by_username(db_session, "A")
    assert user is not None
    assert (user.score, user.coins_total) == (100, 1)

    history = await async_client.get("/winners")
    assert history.json() == []


@pytest.mark.asyncio
async def test_list_winners_newest_first_with_limit(
    async_client: AsyncClient, make_user
):
    await make_user("A", score=5)
    for _ in range(3):
        res = await async_client.post("/winners/close-round")
        assert res.status_code == 200

    default = await async_client.get("/winners")
    limited = await async_client.get("/winners", params={"limit": 2})

    assert [w["roundNumber"] for w in default.json()] == [3, 2, 1]
    assert [w["roundNumber"] for w in limited.json()] == [3, 2]


@pytest.mark.asyncio
async def test_list_winners_rejects_bad_limit(async_client: AsyncClient):
    response = await async_client.get("/winners", params={"limit": 0})

    assert response.status_code == 422
