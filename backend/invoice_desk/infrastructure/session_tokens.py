"""Session Tokens — mint and resolve signed session tokens (HS256 JWT).

Invariants:
    - Tokens are opaque to clients; the server keeps no session state
    - resolve_session_token never raises on bad input: expired, tampered,
      malformed or wrong-type tokens all resolve to None
    - Secret and lifetime are explicit parameters, never read from globals here

Design Decisions:
    - PyJWT over a hand-rolled signature: standard claims (sub/iat/exp) and
      expiry checking come for free
    - "typ": "session" claim: a token minted for another purpose never
      resolves as a session
"""

import logging
from datetime import datetime, timedelta, timezone
from uuid import UUID

import jwt

from invoice_desk.core.domain_types import Identity, SessionSubject, UserId

logger = logging.getLogger(__name__)

SESSION_ALGORITHM = "HS256"
SESSION_TOKEN_TYPE = "session"


def mint_session_token(
    identity: Identity,
    *,
    secret: str,
    ttl_minutes: int,
    now: datetime | None = None,
) -> str:
    """Create a signed session token for an authenticated identity."""
    issued_at = now or datetime.now(timezone.utc)
    payload = {
        "sub": str(identity.id),
        "email": identity.email,
        "iat": issued_at,
        "exp": issued_at + timedelta(minutes=ttl_minutes),
        "typ": SESSION_TOKEN_TYPE,
    }
    return jwt.encode(payload, secret, algorithm=SESSION_ALGORITHM)


def resolve_session_token(
    token: str | None, *, secret: str,
) -> SessionSubject | None:
    """Resolve a session token to its subject, or None if it is not valid."""
    if not token:
        return None
    try:
        payload = jwt.decode(
            token, secret, algorithms=[SESSION_ALGORITHM],
            options={"require": ["sub", "iat", "exp"]},
        )
    except jwt.InvalidTokenError as e:
        logger.debug(f"Session token rejected: {e}")
        return None
    if payload.get("typ") != SESSION_TOKEN_TYPE:
        return None
    try:
        user_id = UserId(UUID(payload["sub"]))
    except (TypeError, ValueError):
        return None
    return SessionSubject(
        user_id=user_id,
        email=payload.get("email", ""),
        issued_at=datetime.fromtimestamp(payload["iat"], timezone.utc),
        expires_at=datetime.fromtimestamp(payload["exp"], timezone.utc),
    )
