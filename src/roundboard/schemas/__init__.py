# src/roundboard/schemas/__init__.py

"""Pydantic schemas for API validation and serialization."""

from .common import CamelModel
from .leaderboard import CoinsEntry, LeaderboardRead, ScoreEntry, UserStanding
from .score import ScoreResult, ScoreSubmit
from .user import LoginResponse, SignupResponse, UserCreate, UserCredentials
from .winner import CloseRoundResponse, CoinsWinnerRead, ScoreWinnerRead, WinnerRead

__all__ = [
    # Common
    "CamelModel",
    # Leaderboard
    "CoinsEntry",
    "LeaderboardRead",
    "ScoreEntry",
    "UserStanding",
    # Score
    "ScoreResult",
    "ScoreSubmit",
    # User
    "LoginResponse",
    "SignupResponse",
    "UserCreate",
    "UserCredentials",
    # Winner
    "CloseRoundResponse",
    "CoinsWinnerRead",
    "ScoreWinnerRead",
    "WinnerRead",
]
