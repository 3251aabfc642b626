"""Credential Verification — email + password in, Identity or rejection out.

Invariants:
    - Malformed input (bad email, password < 6 chars) is rejected before the store is touched
    - Unknown email and wrong password are indistinguishable to the caller (both None)
    - Unknown email still costs one bcrypt verification (dummy hash)
    - Store failures propagate as CredentialLookupError — never turned into None
    - No state is created; the only side effect is the read

Design Decisions:
    - None as the rejection value: callers branch on identity-or-not, with no
      reason attached that could leak which accounts exist
"""

import logging

from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from invoice_desk.core.domain_types import Identity
from invoice_desk.core.errors import ErrorCategory
from invoice_desk.infrastructure.password_hashing import (
    DEFAULT_ROUNDS, burn_verification, verify_password,
)
from invoice_desk.schemas.auth import SignInCredentials
from invoice_desk.services.credential_store import get_user_by_email

logger = logging.getLogger(__name__)

_REJECTION_LOG = {"category": ErrorCategory.AUTHENTICATION.value}


async def verify_credentials(
    db: AsyncSession,
    email: str,
    password: str,
    dummy_rounds: int = DEFAULT_ROUNDS,
) -> Identity | None:
    """Return the matching Identity, or None for any rejection."""
    try:
        credentials = SignInCredentials(email=email, password=password)
    except ValidationError:
        logger.info("Invalid credentials", extra=_REJECTION_LOG)
        return None

    identity = await get_user_by_email(db, credentials.email)
    if identity is None:
        await burn_verification(credentials.password, dummy_rounds)
        logger.info("Invalid credentials", extra=_REJECTION_LOG)
        return None

    if not await verify_password(credentials.password, identity.password_hash):
        logger.info("Invalid credentials", extra=_REJECTION_LOG)
        return None

    logger.info("User signed in", extra={"user_id": str(identity.id)})
    return identity
