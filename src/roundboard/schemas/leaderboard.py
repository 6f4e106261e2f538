# src/roundboard/schemas/leaderboard.py

"""Leaderboard schemas for score and coin rankings."""

from pydantic import Field

from .common import CamelModel


class ScoreEntry(CamelModel):
    """Single row of the high score table.

    Attributes:
        rank: 1 + number of users with a strictly higher score
        username: The player's username
        score: Best score of the current round
    """

    rank: int = Field(..., ge=1, description="Competition rank (ties share a rank)")
    username: str
    score: float


class CoinsEntry(CamelModel):
    """Single row of the coins table."""

    rank: int = Field(..., ge=1, description="Competition rank (ties share a rank)")
    username: str
    coins_total: float


class UserStanding(CamelModel):
    """Where the requesting user stands on both tables."""

    username: str
    score: float
    coins_total: float
    score_rank: int = Field(..., ge=1)
    coins_rank: int = Field(..., ge=1)


class LeaderboardRead(CamelModel):
    """Top of both tables plus the requesting user's standing, if known."""

    highscores: list[ScoreEntry]
    coins: list[CoinsEntry]
    user: UserStanding | None = None
