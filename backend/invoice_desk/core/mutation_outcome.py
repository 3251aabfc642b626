"""Mutation Outcome — tagged result of every invoice create/update/delete.

Invariants:
    - Exactly three shapes: Navigate (success), FormState (recoverable, show
      message/errors), Fault (fatal, surfaced to the top-level error boundary)
    - Navigation is a returned value, never raised: a failure boundary around
      persistence therefore cannot intercept it

Design Decisions:
    - Frozen dataclasses + isinstance dispatch at the HTTP edge: the renderer
      is the only place that turns outcomes into responses
"""

from dataclasses import dataclass, field

from invoice_desk.core.errors import ErrorCategory


@dataclass(frozen=True)
class Navigate:
    """Mutation persisted and caches invalidated — send the client to location."""
    location: str


@dataclass(frozen=True)
class FormState:
    """Mutation rejected before or during persistence; the user can retry."""
    message: str
    category: ErrorCategory
    errors: dict[str, list[str]] = field(default_factory=dict)


@dataclass(frozen=True)
class Fault:
    """Mutation failed in an unexpected way. Never shown field-by-field."""
    operation: str
    error: BaseException


MutationOutcome = Navigate | FormState | Fault


def validation_failed(action: str, errors: dict[str, list[str]]) -> FormState:
    """FormState for a form that never reached persistence."""
    return FormState(
        message=f"Missing Fields. Failed to {action} Invoice.",
        category=ErrorCategory.VALIDATION,
        errors=errors,
    )


def database_failed(action: str) -> FormState:
    """FormState for a store-level failure, details withheld."""
    return FormState(
        message=f"Database Error: Failed to {action} Invoice.",
        category=ErrorCategory.DATABASE,
    )
