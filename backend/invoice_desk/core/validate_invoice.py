"""Invoice Form Validation — declarative rule table, evaluated field by field.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - Every field is evaluated; errors are collected, never short-circuited
    - Each field runs two stages: coercion (raw -> typed value), then constraints
      on the coerced value. Messages from both stages land in the same list
    - Empty or non-numeric amount coerces to 0 and then fails the positive constraint
    - The positive constraint is checked on the rounded minor-unit value, so an
      amount that passes here never rounds to 0 cents at the store
    - Amount stays in major units here; minor-unit conversion is the caller's job

Design Decisions:
    - Rule table over a pydantic model: pydantic stops a field at its first
      failing stage, while the form contract reports coercion AND constraint
      messages together for the same field
    - Return values (InvoiceFields | FieldErrors) over exceptions: the mutation
      pipeline branches on the type, keeping the error path a plain value
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any

from invoice_desk.core.domain_types import InvoiceStatus
from invoice_desk.core.money import to_minor_units

CUSTOMER_REQUIRED = "Please select a customer."
AMOUNT_NOT_NUMERIC = "Amount must be a number."
AMOUNT_NOT_POSITIVE = "Please enter an amount greater than $0."
STATUS_INVALID = "Please select an invoice status."


@dataclass(frozen=True)
class InvoiceFields:
    """Validated, typed invoice form values ready for persistence."""
    customer_id: str
    amount: Decimal
    status: InvoiceStatus


@dataclass(frozen=True)
class FieldErrors:
    """Per-field validation messages. Keys are form field names."""
    errors: dict[str, list[str]] = field(default_factory=dict)


# A coercer returns (typed value, coercion messages).
Coercer = Callable[[Any], tuple[Any, list[str]]]
Constraint = tuple[Callable[[Any], bool], str]


@dataclass(frozen=True)
class FieldRule:
    """One form field: where it lives, how it is coerced, what it must satisfy."""
    name: str
    attribute: str
    coerce: Coercer
    constraints: tuple[Constraint, ...] = ()


def _coerce_text(raw: Any) -> tuple[str, list[str]]:
    if raw is None:
        return "", []
    return str(raw).strip(), []


def _coerce_amount(raw: Any) -> tuple[Decimal, list[str]]:
    text = "" if raw is None else str(raw).strip()
    if not text:
        return Decimal(0), []
    try:
        value = Decimal(text)
    except InvalidOperation:
        return Decimal(0), [AMOUNT_NOT_NUMERIC]
    if not value.is_finite():
        return Decimal(0), [AMOUNT_NOT_NUMERIC]
    return value, []


def _coerce_status(raw: Any) -> tuple[InvoiceStatus | None, list[str]]:
    try:
        return InvoiceStatus(raw), []
    except ValueError:
        return None, []


INVOICE_FORM_RULES: tuple[FieldRule, ...] = (
    FieldRule(
        "customerId", "customer_id", _coerce_text,
        ((lambda v: bool(v), CUSTOMER_REQUIRED),),
    ),
    FieldRule(
        "amount", "amount", _coerce_amount,
        ((lambda v: to_minor_units(v) >= 1, AMOUNT_NOT_POSITIVE),),
    ),
    FieldRule(
        "status", "status", _coerce_status,
        ((lambda v: v is not None, STATUS_INVALID),),
    ),
)


def validate_field(rule: FieldRule, raw: Any) -> tuple[Any, list[str]]:
    """Run one rule: coercion messages first, then every failing constraint."""
    value, messages = rule.coerce(raw)
    for check, message in rule.constraints:
        if not check(value):
            messages.append(message)
    return value, messages


def validate_invoice_form(
    raw: Mapping[str, Any],
    rules: tuple[FieldRule, ...] = INVOICE_FORM_RULES,
) -> InvoiceFields | FieldErrors:
    """Validate raw form fields. Returns typed fields or every field error."""
    values: dict[str, Any] = {}
    errors: dict[str, list[str]] = {}
    for rule in rules:
        value, messages = validate_field(rule, raw.get(rule.name))
        if messages:
            errors[rule.name] = messages
        values[rule.attribute] = value
    if errors:
        return FieldErrors(errors=errors)
    return InvoiceFields(**values)
