"""Credential Store Accessor — keyed read of a user by email.

Invariants:
    - Returns None only when no row matches; a store failure is NEVER None
    - Store failures raise CredentialLookupError (logged with traceback)
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from invoice_desk.core.domain_types import Identity
from invoice_desk.core.errors import CredentialLookupError
from invoice_desk.models.user import User

logger = logging.getLogger(__name__)


async def get_user_by_email(db: AsyncSession, email: str) -> Identity | None:
    """Look up a user by email. None means not registered."""
    try:
        result = await db.execute(select(User).where(User.email == email))
        user = result.scalar_one_or_none()
    except SQLAlchemyError as e:
        logger.error(f"Failed to fetch user: {e}", exc_info=True)
        raise CredentialLookupError() from e
    return user.to_identity() if user else None
