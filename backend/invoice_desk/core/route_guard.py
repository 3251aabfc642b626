"""Route Guard Policy — pure admission decision for every inbound request.

Invariants:
    - All functions are PURE: the caller resolves the session and passes the subject in
    - Excluded paths are classified BEFORE the subject is looked at; the caller
      can skip session resolution entirely via is_guarded()
    - Unauthenticated requests under /dashboard always redirect to sign-in with the
      original path (and query) preserved in callbackUrl
    - Authenticated users on the sign-in page are sent to the dashboard
    - Stateless: same (path, query, subject) always yields the same decision

Design Decisions:
    - Exclusion as one compiled pattern: static assets, images and /api bypass
      the guard, mirroring the asset/API matcher of the sign-in flow
    - Decision as a value (GuardDecision) over raising/redirecting here: the
      middleware renders it, tests assert on it directly
"""

import re
from dataclasses import dataclass
from enum import Enum
from urllib.parse import urlencode

from invoice_desk.core.domain_types import (
    DASHBOARD_PATH, SIGN_IN_PATH, SessionSubject,
)

CALLBACK_PARAM = "callbackUrl"

GUARD_EXCLUDED = re.compile(
    r"^/(?:api|static|_next/static|_next/image)(?:/|$)|\.png$",
)


class GuardAction(str, Enum):
    """What the middleware does with the request."""
    PASS_THROUGH = "pass_through"
    ALLOW = "allow"
    REDIRECT = "redirect"


@dataclass(frozen=True)
class GuardDecision:
    action: GuardAction
    location: str | None = None


PASS_THROUGH = GuardDecision(GuardAction.PASS_THROUGH)
ALLOW = GuardDecision(GuardAction.ALLOW)


def is_guarded(path: str) -> bool:
    """False for paths that bypass the guard entirely."""
    return GUARD_EXCLUDED.search(path) is None


def is_protected(path: str) -> bool:
    return path == DASHBOARD_PATH or path.startswith(DASHBOARD_PATH + "/")


def sign_in_redirect(path: str, query: str = "") -> str:
    """Sign-in location carrying the originally requested path."""
    original = f"{path}?{query}" if query else path
    return f"{SIGN_IN_PATH}?{urlencode({CALLBACK_PARAM: original})}"


def safe_return_path(candidate: str | None, default: str = DASHBOARD_PATH) -> str:
    """Accept only local absolute paths as post-login destinations."""
    if not candidate or not candidate.startswith("/"):
        return default
    if candidate.startswith("//") or candidate.startswith("/\\"):
        return default
    return candidate


def decide_admission(
    path: str, query: str, subject: SessionSubject | None,
) -> GuardDecision:
    """Classify the request and decide allow / redirect / pass-through."""
    if not is_guarded(path):
        return PASS_THROUGH
    if is_protected(path):
        if subject is not None:
            return ALLOW
        return GuardDecision(GuardAction.REDIRECT, sign_in_redirect(path, query))
    if subject is not None and path == SIGN_IN_PATH:
        return GuardDecision(GuardAction.REDIRECT, DASHBOARD_PATH)
    return ALLOW
