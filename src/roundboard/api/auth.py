# src/roundboard/api/auth.py

"""API endpoints for signup and login."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from roundboard.db.session import get_db
from roundboard.schemas import user as user_schema
from roundboard.services import user_service

router = APIRouter(tags=["Auth"])


@router.post(
    "/signup",
    response_model=user_schema.SignupResponse,
    status_code=status.HTTP_201_CREATED,
)
async def signup(
    user_in: user_schema.UserCreate, db: AsyncSession = Depends(get_db)
) -> user_schema.SignupResponse:
    """
    Create a new account.

    - **username**: The unique name of the player.
    - **password**: Stored as a bcrypt hash.
    - **wallet**: The player's wallet address (required).

    Raises:
        400 Bad Request: If the wallet is missing.
        409 Conflict: If the username is already taken.
    """
    user = await user_service.create_user(
        db, username=user_in.username, password=user_in.password, wallet=user_in.wallet
    )
    return user_schema.SignupResponse(
        message="Account created successfully!",
        username=user.username,
        wallet=user.wallet,
    )


@router.post("/login", response_model=user_schema.LoginResponse)
async def login(
    credentials: user_schema.UserCredentials, db: AsyncSession = Depends(get_db)
) -> user_schema.LoginResponse:
    """
    Check credentials and return the player's profile.

    No token is issued; the client keeps the returned username.
    """
    user = await user_service.authenticate(
        db, username=credentials.username, password=credentials.password
    )
    return user_schema.LoginResponse(
        message="Login successful!",
        username=user.username,
        score=user.score,
        wallet=user.wallet,
    )
