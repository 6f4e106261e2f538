# src/roundboard/schemas/user.py

"""Pydantic schemas for signup and login."""

from pydantic import BaseModel

from .common import CamelModel


class UserCredentials(BaseModel):
    """Username and password pair sent on login."""

    username: str
    password: str


class UserCreate(UserCredentials):
    """Properties to receive via API on signup.

    ``wallet`` is optional at the schema level so that a missing wallet is
    reported with the same message the client already handles.
    """

    wallet: str | None = None


class SignupResponse(CamelModel):
    message: str
    username: str
    wallet: str


class LoginResponse(CamelModel):
    message: str
    username: str
    score: float
    wallet: str
