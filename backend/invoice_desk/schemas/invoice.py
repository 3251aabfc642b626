"""Invoice Schemas — response shapes for mutations and read-side views.

Invariants:
    - Form-state bodies always carry a summary message; errors is keyed by form
      field name (customerId, amount, status)
    - Amounts leave the API in minor units except on the edit prefill, which
      mirrors what the user typed (major units)
"""

import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel


class InvoiceFormState(BaseModel):
    """Body returned when a mutation does not redirect."""
    message: str
    errors: dict[str, list[str]] = {}


class CustomerField(BaseModel):
    id: UUID
    name: str


class InvoiceForm(BaseModel):
    """Prefill values for the edit form."""
    id: UUID
    customer_id: UUID
    amount: Decimal
    status: str


class InvoiceListItem(BaseModel):
    id: UUID
    customer_id: UUID
    name: str
    email: str
    image_url: str
    amount: int
    status: str
    date: datetime.date


class InvoiceListing(BaseModel):
    invoices: list[InvoiceListItem]
    query: str
    page: int
    total_pages: int


class EditInvoiceView(BaseModel):
    invoice: InvoiceForm
    customers: list[CustomerField]
