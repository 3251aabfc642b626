"""Sign-in / Sign-out — credential submission and session cookie handling.

Invariants:
    - POST /login accepts form-encoded email + password (+ optional redirectTo)
    - Every rejection is the same 401 body; no field-level detail
    - Store failures are NOT rejections: CredentialLookupError reaches the
      global handler as a 500
    - redirectTo is honoured only for local paths
    - POST /logout clears the cookie; the token itself simply expires

Design Decisions:
    - Form fields default to "" so a missing field is a credential rejection,
      not a request-validation error that would name the field
"""

import logging

from fastapi import APIRouter, Depends, Form, status
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from invoice_desk.config import Settings, get_settings
from invoice_desk.core.domain_types import SIGN_IN_PATH
from invoice_desk.core.route_guard import safe_return_path
from invoice_desk.infrastructure.database import get_db
from invoice_desk.infrastructure.session_tokens import mint_session_token
from invoice_desk.schemas.auth import SignInRejected
from invoice_desk.services.authenticate import verify_credentials

logger = logging.getLogger(__name__)
router = APIRouter(tags=["auth"])


@router.post(SIGN_IN_PATH)
async def sign_in(
    email: str = Form(""),
    password: str = Form(""),
    redirect_to: str | None = Form(None, alias="redirectTo"),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Verify credentials and start a session."""
    identity = await verify_credentials(
        db, email, password, dummy_rounds=settings.password_hash_rounds,
    )
    if identity is None:
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content=SignInRejected().model_dump(),
        )

    token = mint_session_token(
        identity,
        secret=settings.session_secret,
        ttl_minutes=settings.session_ttl_minutes,
    )
    response = RedirectResponse(
        safe_return_path(redirect_to), status_code=status.HTTP_303_SEE_OTHER,
    )
    response.set_cookie(
        settings.session_cookie_name,
        token,
        max_age=settings.session_ttl_minutes * 60,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )
    return response


@router.post("/logout")
async def sign_out(settings: Settings = Depends(get_settings)):
    """End the session by discarding the cookie."""
    response = RedirectResponse(
        SIGN_IN_PATH, status_code=status.HTTP_303_SEE_OTHER,
    )
    response.delete_cookie(settings.session_cookie_name)
    return response
