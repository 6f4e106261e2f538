# src/roundboard/exceptions.py

"""Custom exception hierarchy for Roundboard.

Every error raised by the service layer derives from ``RoundboardError`` and
carries a human readable ``message`` plus a ``details`` dict for logging.
The API maps the intermediate base classes to HTTP status codes:

1. ``ResourceNotFoundError`` -> 404
2. ``ValidationError`` -> 400
3. ``ConflictError`` -> 409
4. ``RateLimitedError`` -> 429
5. ``RoundError`` -> 500
"""

from __future__ import annotations


class RoundboardError(Exception):
    """Base exception for all Roundboard errors.

    Attributes:
        message: Human-readable error description
        details: Optional dict with additional context for logging/debugging
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)


# =============================================================================
# Resource Not Found Errors (HTTP 404)
# =============================================================================


class ResourceNotFoundError(RoundboardError):
    """Base class for resource not found errors."""

    pass


class UserNotFoundError(ResourceNotFoundError):
    """Raised when a username has no record."""

    def __init__(self, username: str) -> None:
        super().__init__(
            message="User not found",
            details={"username": username},
        )


# =============================================================================
# Validation Errors (HTTP 400)
# =============================================================================


class ValidationError(RoundboardError):
    """Base class for rejected input."""

    pass


class InvalidInputError(ValidationError):
    """Raised when a submitted field is missing or has the wrong type."""

    def __init__(self, field: str, reason: str = "Invalid data") -> None:
        super().__init__(
            message=reason,
            details={"field": field},
        )


class ImplausibleValueError(ValidationError):
    """Raised when a submitted score or coin amount is outside the allowed range."""

    def __init__(self, score: float, coins: float) -> None:
        super().__init__(
            message="Impossible score detected",
            details={"score": score, "coins": coins},
        )


class MissingWalletError(ValidationError):
    """Raised when signing up without a wallet address."""

    def __init__(self, username: str) -> None:
        super().__init__(
            message="Wallet address is required!",
            details={"username": username},
        )


class InvalidCredentialsError(ValidationError):
    """Raised when a login attempt fails.

    The message tells the two cases apart, matching what the game client
    displays to the player.
    """

    def __init__(self, username: str, unknown_user: bool) -> None:
        super().__init__(
            message="Incorrect username!" if unknown_user else "Incorrect password!",
            details={"username": username},
        )


# =============================================================================
# Conflict Errors (HTTP 409)
# =============================================================================


class ConflictError(RoundboardError):
    """Base class for requests that clash with current state."""

    pass


class UsernameTakenError(ConflictError):
    """Raised when signing up with a username that already exists."""

    def __init__(self, username: str) -> None:
        super().__init__(
            message="Username already taken!",
            details={"username": username},
        )


class RoundInProgressError(ConflictError):
    """Raised while a round close is running.

    Covers both a second concurrent close and score submissions that arrive
    between the winner snapshot and the reset.
    """

    def __init__(self) -> None:
        super().__init__(message="Round is closing, try again shortly")


# =============================================================================
# Rate Limiting (HTTP 429)
# =============================================================================


class RateLimitedError(RoundboardError):
    """Raised when a user submits again before the cooldown has elapsed."""

    def __init__(self, username: str, retry_after: float) -> None:
        super().__init__(
            message="Too many score updates",
            details={"username": username, "retry_after": round(retry_after, 3)},
        )
        self.retry_after = retry_after


# =============================================================================
# Round Errors (HTTP 500)
# =============================================================================


class RoundError(RoundboardError):
    """Base class for round finalization failures."""

    pass


class FinalizeAbortedError(RoundError):
    """Raised when the winner snapshot could not be written.

    No user record is reset when this is raised.
    """

    def __init__(self, reason: str) -> None:
        super().__init__(
            message="Round close aborted, winners could not be saved",
            details={"reason": reason},
        )
