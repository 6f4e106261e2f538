# src/roundboard/security.py

"""Password hashing with bcrypt.

bcrypt is CPU bound, so the async helpers push the work onto Starlette's
threadpool instead of blocking the event loop.
"""

import logging
import os

import bcrypt
from fastapi.concurrency import run_in_threadpool

logger = logging.getLogger(__name__)

# Cost factor; 10 keeps hashes compatible with accounts created by the old service
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "10"))


def hash_password(password: str, rounds: int | None = None) -> str:
    """Return a bcrypt hash of ``password`` as text."""
    salt = bcrypt.gensalt(rounds=rounds or BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check ``password`` against a stored bcrypt hash.

    A malformed stored hash counts as a mismatch.
    """
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        logger.warning("Stored password hash is not a valid bcrypt hash")
        return False


async def hash_password_async(password: str) -> str:
    return await run_in_threadpool(hash_password, password)


async def verify_password_async(password: str, password_hash: str) -> bool:
    return await run_in_threadpool(verify_password, password, password_hash)
