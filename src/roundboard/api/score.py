# src/roundboard/api/score.py

"""API endpoint for submitting scores."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from roundboard.db.session import get_db
from roundboard.schemas import score as score_schema
from roundboard.services import score_service

router = APIRouter(prefix="/score", tags=["Scores"])


@router.post("", response_model=score_schema.ScoreResult)
async def submit_score(
    submission: score_schema.ScoreSubmit, db: AsyncSession = Depends(get_db)
) -> score_schema.ScoreResult:
    """
    Submit the result of one game session.

    - **score**: Score of the session (0-500); only kept if it beats the
      stored high score.
    - **coins**: Coins earned in the session (0-200); added to the total.

    Raises:
        400 Bad Request: If score or coins is not a number or out of range.
        404 Not Found: If the user doesn't exist.
        409 Conflict: If the round is being closed.
        429 Too Many Requests: If the last submission is under 5 seconds old.
    """
    stored = await score_service.submit_score(
        db,
        username=submission.username,
        score=submission.score,
        coins=submission.coins,
    )
    return score_schema.ScoreResult(score=stored.score, coins_total=stored.coins_total)
