"""Password Hashing — bcrypt hashing and constant-time verification.

Invariants:
    - Plaintext passwords are never logged or stored
    - Verification uses bcrypt.checkpw (constant-time comparison of the derived hash)
    - Verification runs in a worker thread: bcrypt is CPU-bound and would stall the loop
    - A malformed stored hash or an over-long password verifies as False, never raises

Design Decisions:
    - bcrypt with configurable work factor (12 in production, lower in tests)
    - DUMMY hash verification for unknown users: rejection of an unknown email
      costs the same bcrypt work as a wrong password
"""

import asyncio
import logging
from functools import lru_cache

import bcrypt

logger = logging.getLogger(__name__)

DEFAULT_ROUNDS = 12
_DUMMY_PASSWORD = b"invoice-desk-dummy-password"


def hash_password(password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """Hash a password using bcrypt."""
    if not password:
        raise ValueError("Password cannot be empty")
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def check_password(password: str, password_hash: str) -> bool:
    """Synchronous bcrypt comparison. Prefer verify_password in async code."""
    try:
        return bcrypt.checkpw(
            password.encode("utf-8"), password_hash.encode("utf-8"),
        )
    except ValueError as e:
        # Invalid salt, or a password beyond bcrypt's 72-byte input limit
        logger.warning(f"Password verification rejected input: {e}")
        return False


async def verify_password(password: str, password_hash: str) -> bool:
    """Compare plaintext against a stored bcrypt hash off the event loop."""
    return await asyncio.to_thread(check_password, password, password_hash)


@lru_cache(maxsize=4)
def dummy_hash(rounds: int = DEFAULT_ROUNDS) -> str:
    return bcrypt.hashpw(
        _DUMMY_PASSWORD, bcrypt.gensalt(rounds=rounds),
    ).decode("utf-8")


async def burn_verification(password: str, rounds: int = DEFAULT_ROUNDS) -> None:
    """Spend one verification's worth of work for a user that does not exist."""
    await verify_password(password, dummy_hash(rounds))
