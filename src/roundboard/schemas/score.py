# src/roundboard/schemas/score.py

"""Pydantic schemas for score submission."""

from typing import Any

from pydantic import BaseModel, Field

from .common import CamelModel


class ScoreSubmit(BaseModel):
    """A score/coins submission for one finished game session.

    All fields are left untyped here; the score service does the type and
    range checks so every rejection is a 400 with one error format.
    """

    username: Any = None
    score: Any = None
    coins: Any = Field(None, description="Coins earned in this session, not a total")


class ScoreResult(CamelModel):
    """Stored values after an accepted submission."""

    message: str = "Score saved"
    score: float
    coins_total: float
