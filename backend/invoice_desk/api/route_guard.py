"""Route Guard Middleware — admission control ahead of every request.

Invariants:
    - Runs before routing, so before any data fetch or handler for guarded paths
    - Excluded paths never read the cookie nor resolve a session
    - The cookie value and secret are passed explicitly into resolve/decide;
      the resolved subject is exposed as request.state.subject
    - No state survives a request

Design Decisions:
    - BaseHTTPMiddleware: plain async dispatch, ordering controlled in main.py
    - 303 See Other for guard redirects: the follow-up is always a GET
"""

import logging

from fastapi import Request, status
from fastapi.responses import RedirectResponse
from starlette.middleware.base import BaseHTTPMiddleware

from invoice_desk.core.errors import ErrorCategory
from invoice_desk.core.route_guard import GuardAction, decide_admission, is_guarded
from invoice_desk.infrastructure.session_tokens import resolve_session_token

logger = logging.getLogger(__name__)


class RouteGuardMiddleware(BaseHTTPMiddleware):
    """Allow, redirect to sign-in, or pass through — decided per request."""

    def __init__(self, app, *, secret: str, cookie_name: str):
        super().__init__(app)
        self.secret = secret
        self.cookie_name = cookie_name

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        subject = None
        if is_guarded(path):
            subject = resolve_session_token(
                request.cookies.get(self.cookie_name), secret=self.secret,
            )
        request.state.subject = subject

        decision = decide_admission(path, request.url.query, subject)
        if decision.action is GuardAction.REDIRECT:
            logger.info(
                f"Route guard redirect to {decision.location}",
                extra={"path": path, "category": ErrorCategory.AUTHORIZATION.value},
            )
            return RedirectResponse(
                decision.location, status_code=status.HTTP_303_SEE_OTHER,
            )
        return await call_next(request)
