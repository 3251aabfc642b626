"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - UserId, CustomerId, InvoiceId wrap UUIDs — never use bare UUID in domain logic
    - Invoice status is exactly one of InvoiceStatus — no raw string matching
    - Identity carries the stored password hash; SessionSubject never does

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON and compare against form strings directly
    - Frozen dataclasses for Identity/SessionSubject: passed across layers, never mutated
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", UUID)
CustomerId = NewType("CustomerId", UUID)
InvoiceId = NewType("InvoiceId", UUID)


# ─── Paths ───────────────────────────────────────────────────────

DASHBOARD_PATH = "/dashboard"
INVOICES_PATH = "/dashboard/invoices"
SIGN_IN_PATH = "/login"


# ─── Enums ───────────────────────────────────────────────────────

class InvoiceStatus(str, Enum):
    """Invoice payment states — maps to DB `status` column."""
    PENDING = "pending"
    PAID = "paid"


# ─── Principals ──────────────────────────────────────────────────

@dataclass(frozen=True)
class Identity:
    """Authenticated user as read from the credential store."""
    id: UserId
    email: str
    name: str
    password_hash: str


@dataclass(frozen=True)
class SessionSubject:
    """Who a session token speaks for, and for how long."""
    user_id: UserId
    email: str
    issued_at: datetime
    expires_at: datetime
