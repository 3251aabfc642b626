"""Invoice Form Validation — tests for the rule table and field-by-field collection.

Tests cover:
    - valid form yields typed InvoiceFields (Decimal amount, InvoiceStatus)
    - empty / missing / non-numeric / non-positive amounts fail on amount
    - non-numeric amount reports BOTH the coercion and the positive message
    - amounts that round to 0 cents fail on amount; half a cent rounds up and passes
    - status outside {pending, paid} fails on status
    - every invalid field is reported together (no short-circuit)
"""

from decimal import Decimal

import pytest

from invoice_desk.core.domain_types import InvoiceStatus
from invoice_desk.core.validate_invoice import (
    AMOUNT_NOT_NUMERIC,
    AMOUNT_NOT_POSITIVE,
    CUSTOMER_REQUIRED,
    STATUS_INVALID,
    FieldErrors,
    InvoiceFields,
    validate_invoice_form,
)

CUSTOMER = "3958dc9e-712f-4377-85e9-fec4b6a6442a"


def _form(**overrides) -> dict:
    form = {"customerId": CUSTOMER, "amount": "125.50", "status": "pending"}
    form.update(overrides)
    return form


# ─── success ─────────────────────────────────────────────────────

def test_valid_form_returns_typed_fields():
    result = validate_invoice_form(_form())
    assert isinstance(result, InvoiceFields)
    assert result.customer_id == CUSTOMER
    assert result.amount == Decimal("125.50")
    assert result.status is InvoiceStatus.PENDING


def test_paid_status_accepted():
    result = validate_invoice_form(_form(status="paid"))
    assert result.status is InvoiceStatus.PAID


def test_amount_is_not_scaled_by_validator():
    result = validate_invoice_form(_form(amount="3"))
    assert result.amount == Decimal("3")


def test_surrounding_whitespace_is_ignored():
    result = validate_invoice_form(_form(customerId=f"  {CUSTOMER} ", amount=" 10 "))
    assert isinstance(result, InvoiceFields)
    assert result.customer_id == CUSTOMER


# ─── amount ──────────────────────────────────────────────────────

@pytest.mark.parametrize("amount", ["", None, "0", "-5", "0.00", "   "])
def test_non_positive_amount_fails_on_amount(amount):
    result = validate_invoice_form(_form(amount=amount))
    assert isinstance(result, FieldErrors)
    assert result.errors == {"amount": [AMOUNT_NOT_POSITIVE]}


@pytest.mark.parametrize("amount", ["0.004", "0.001", "0.0049"])
def test_amount_rounding_to_zero_cents_fails_on_amount(amount):
    result = validate_invoice_form(_form(amount=amount))
    assert isinstance(result, FieldErrors)
    assert result.errors == {"amount": [AMOUNT_NOT_POSITIVE]}


def test_half_cent_rounds_up_to_one_cent():
    result = validate_invoice_form(_form(amount="0.005"))
    assert isinstance(result, InvoiceFields)
    assert result.amount == Decimal("0.005")


@pytest.mark.parametrize("amount", ["abc", "12,50", "NaN", "Infinity"])
def test_non_numeric_amount_reports_coercion_and_constraint(amount):
    result = validate_invoice_form(_form(amount=amount))
    assert isinstance(result, FieldErrors)
    assert result.errors["amount"] == [AMOUNT_NOT_NUMERIC, AMOUNT_NOT_POSITIVE]


def test_missing_amount_key_coerces_to_zero():
    form = _form()
    del form["amount"]
    result = validate_invoice_form(form)
    assert result.errors == {"amount": [AMOUNT_NOT_POSITIVE]}


# ─── status ──────────────────────────────────────────────────────

@pytest.mark.parametrize("status", ["", None, "overdue", "PAID", " paid"])
def test_status_outside_enum_fails_on_status(status):
    result = validate_invoice_form(_form(status=status))
    assert isinstance(result, FieldErrors)
    assert result.errors == {"status": [STATUS_INVALID]}


# ─── customer ────────────────────────────────────────────────────

@pytest.mark.parametrize("customer", ["", None, "   "])
def test_missing_customer_fails_on_customer(customer):
    result = validate_invoice_form(_form(customerId=customer))
    assert result.errors == {"customerId": [CUSTOMER_REQUIRED]}


# ─── collection ──────────────────────────────────────────────────

def test_all_field_errors_reported_together():
    result = validate_invoice_form({})
    assert isinstance(result, FieldErrors)
    assert result.errors == {
        "customerId": [CUSTOMER_REQUIRED],
        "amount": [AMOUNT_NOT_POSITIVE],
        "status": [STATUS_INVALID],
    }


def test_unknown_fields_are_ignored():
    result = validate_invoice_form(_form(id="forged", date="1999-01-01"))
    assert isinstance(result, InvoiceFields)
