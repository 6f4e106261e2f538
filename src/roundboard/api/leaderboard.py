# src/roundboard/api/leaderboard.py

"""API endpoint for the leaderboards."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from roundboard.db.session import get_db
from roundboard.schemas.leaderboard import LeaderboardRead
from roundboard.services import ranking_service

router = APIRouter(prefix="/leaderboard", tags=["Leaderboard"])


@router.get("/{username}", response_model=LeaderboardRead)
async def get_leaderboard(
    username: str, db: AsyncSession = Depends(get_db)
) -> LeaderboardRead:
    """
    Get the top 15 by score and by coins, plus the requesting user's ranks.

    Tied users share a rank. `user` is null if the username is unknown.
    """
    return await ranking_service.get_leaderboard(db, username)
