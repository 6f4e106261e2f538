# src/roundboard/schemas/winner.py

"""Pydantic schemas for round winners."""

from datetime import datetime

from .common import CamelModel


class ScoreWinnerRead(CamelModel):
    username: str
    score: float


class CoinsWinnerRead(CamelModel):
    username: str
    coins_total: float


class WinnerRead(CamelModel):
    """A closed round and its top three on each table."""

    id: int
    round_number: int
    round_end: datetime
    top_scores: list[ScoreWinnerRead]
    top_coins: list[CoinsWinnerRead]


class CloseRoundResponse(CamelModel):
    message: str
    winners: WinnerRead
