# src/roundboard/api/winners.py

"""API endpoints for closing rounds and reading past winners."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from roundboard.db.models import Winner
from roundboard.db.session import get_db
from roundboard.schemas import winner as winner_schema
from roundboard.services import round_service

router = APIRouter(prefix="/winners", tags=["Winners"])


@router.get("", response_model=list[winner_schema.WinnerRead])
async def read_winners(
    limit: int = Query(5, ge=1, le=50, description="Max rounds to return"),
    db: AsyncSession = Depends(get_db),
) -> list[Winner]:
    """
    Retrieve the most recently closed rounds, newest first.
    """
    return await round_service.list_winners(db, limit=limit)


@router.post("/close-round", response_model=winner_schema.CloseRoundResponse)
async def close_round(
    db: AsyncSession = Depends(get_db),
) -> winner_schema.CloseRoundResponse:
    """
    Close the current round.

    Saves the top three by score and by coins, then resets every player's
    score and coins to zero.

    Raises:
        409 Conflict: If a close is already running.
        500: If the winners could not be saved (nothing is reset).
    """
    winner = await round_service.close_round(db)
    return winner_schema.CloseRoundResponse(
        message="Round closed, winners saved and scores reset!",
        winners=winner_schema.WinnerRead.model_validate(winner),
    )
