# src/roundboard/services/user_service.py

"""Business logic for signup and login."""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from roundboard.db import models
from roundboard.exceptions import (
    InvalidCredentialsError,
    InvalidInputError,
    MissingWalletError,
    UsernameTakenError,
)
from roundboard.security import hash_password_async, verify_password_async

logger = logging.getLogger(__name__)


async def create_user(
    db: AsyncSession, username: str, password: str, wallet: str | None
) -> models.User:
    """
    Registers a new player with zeroed score and coins.

    Raises:
        InvalidInputError: If username or password is blank
        MissingWalletError: If no wallet address was given
        UsernameTakenError: If the username already exists
    """
    username = username.strip()
    if not username:
        raise InvalidInputError("username", "Username is required!")
    if not password:
        raise InvalidInputError("password", "Password is required!")

    existing = await models.User.find_by_username(db, username)
    if existing is not None:
        raise UsernameTakenError(username)

    if not wallet or not wallet.strip():
        raise MissingWalletError(username)

    user = models.User(
        username=username,
        password_hash=await hash_password_async(password),
        wallet=wallet.strip(),
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        # Lost a race against a concurrent signup for the same name
        await db.rollback()
        raise UsernameTakenError(username)
    await db.refresh(user)

    logger.info("Created user", extra={"username": username, "user_id": user.id})
    return user


async def authenticate(db: AsyncSession, username: str, password: str) -> models.User:
    """
    Checks a username/password pair and returns the matching user.

    Raises:
        InvalidCredentialsError: If the user is unknown or the password is wrong
    """
    user = await models.User.find_by_username(db, username)
    if user is None:
        raise InvalidCredentialsError(username, unknown_user=True)

    if not await verify_password_async(password, user.password_hash):
        raise InvalidCredentialsError(username, unknown_user=False)

    logger.debug("User logged in", extra={"username": username})
    return user
