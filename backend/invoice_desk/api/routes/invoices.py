"""Invoice Routes — listing, form prefill, and the create/update/delete actions.

Invariants:
    - All paths live under /dashboard: the route guard has admitted the request
      before any handler here runs; handlers do not re-check the session
    - Mutation handlers only translate MutationOutcome into HTTP:
        Navigate  -> 303 to location
        FormState -> 422 (validation) / 503 (database) with message + errors
        Fault     -> InvoiceMutationFault, rendered by the global handler
    - The listing is served read-through from the ViewCache, keyed by path and
      (query, page); mutations invalidate it before redirecting here

Design Decisions:
    - Raw form mapping handed to the service: coercion belongs to the validator,
      not to FastAPI Form() parameter typing
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from invoice_desk.core.domain_types import INVOICES_PATH, InvoiceId
from invoice_desk.core.errors import (
    ErrorCategory, ErrorContext, InvoiceMutationFault, ResourceNotFoundError,
)
from invoice_desk.core.mutation_outcome import (
    Fault, FormState, MutationOutcome, Navigate,
)
from invoice_desk.infrastructure.database import get_db
from invoice_desk.infrastructure.view_cache import ViewCache, get_view_cache
from invoice_desk.schemas.invoice import (
    CustomerField, EditInvoiceView, InvoiceFormState, InvoiceListing,
)
from invoice_desk.services.invoice_mutations import InvoiceMutations
from invoice_desk.services.invoice_queries import (
    fetch_customers, fetch_filtered_invoices, fetch_invoice_by_id,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix=INVOICES_PATH, tags=["invoices"])

INVOICE_FORM_FIELDS = ("customerId", "amount", "status")

_FORM_STATE_STATUS = {
    ErrorCategory.VALIDATION: status.HTTP_422_UNPROCESSABLE_CONTENT,
    ErrorCategory.DATABASE: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def render_outcome(outcome: MutationOutcome, invoice_id: str | None = None):
    """Turn a mutation outcome into an HTTP response (or raise for faults)."""
    if isinstance(outcome, Navigate):
        return RedirectResponse(
            outcome.location, status_code=status.HTTP_303_SEE_OTHER,
        )
    if isinstance(outcome, FormState):
        body = InvoiceFormState(message=outcome.message, errors=outcome.errors)
        return JSONResponse(
            status_code=_FORM_STATE_STATUS.get(
                outcome.category, status.HTTP_400_BAD_REQUEST,
            ),
            content=body.model_dump(),
        )
    if isinstance(outcome, Fault):
        raise InvoiceMutationFault(
            outcome.operation, ErrorContext(invoice_id=invoice_id),
        ) from outcome.error
    raise TypeError(f"Unknown mutation outcome: {outcome!r}")


async def _read_invoice_form(request: Request) -> dict:
    form = await request.form()
    return {name: form.get(name) for name in INVOICE_FORM_FIELDS}


@router.get("", response_model=InvoiceListing)
async def list_invoices(
    query: str = Query(""),
    page: int = Query(1, ge=1),
    db: AsyncSession = Depends(get_db),
    cache: ViewCache = Depends(get_view_cache),
):
    """Invoices listing, served from cache until a mutation invalidates it."""
    variant = (query, page)
    cached = cache.get(INVOICES_PATH, variant)
    if cached is not None:
        return cached
    # Captured before the read: a mutation committing meanwhile voids the put
    generation = cache.generation(INVOICES_PATH)
    listing = jsonable_encoder(await fetch_filtered_invoices(db, query, page))
    cache.put(INVOICES_PATH, variant, listing, generation)
    return listing


@router.get("/create", response_model=list[CustomerField])
async def create_invoice_form(db: AsyncSession = Depends(get_db)):
    """Customers to choose from on the create form."""
    return await fetch_customers(db)


@router.post("/create")
async def create_invoice(
    request: Request,
    db: AsyncSession = Depends(get_db),
    cache: ViewCache = Depends(get_view_cache),
):
    raw = await _read_invoice_form(request)
    outcome = await InvoiceMutations(db, cache).create(raw)
    return render_outcome(outcome)


@router.get("/{invoice_id}/edit", response_model=EditInvoiceView)
async def edit_invoice_form(
    invoice_id: UUID, db: AsyncSession = Depends(get_db),
):
    """Prefill for the edit form: the invoice and the customer choices."""
    invoice = await fetch_invoice_by_id(db, InvoiceId(invoice_id))
    if invoice is None:
        raise ResourceNotFoundError("Invoice", str(invoice_id))
    customers = await fetch_customers(db)
    return {"invoice": invoice, "customers": customers}


@router.post("/{invoice_id}/edit")
async def update_invoice(
    invoice_id: UUID,
    request: Request,
    db: AsyncSession = Depends(get_db),
    cache: ViewCache = Depends(get_view_cache),
):
    raw = await _read_invoice_form(request)
    outcome = await InvoiceMutations(db, cache).update(InvoiceId(invoice_id), raw)
    return render_outcome(outcome, str(invoice_id))


@router.post("/{invoice_id}/delete")
async def delete_invoice(
    invoice_id: UUID,
    db: AsyncSession = Depends(get_db),
    cache: ViewCache = Depends(get_view_cache),
):
    outcome = await InvoiceMutations(db, cache).delete(InvoiceId(invoice_id))
    return render_outcome(outcome, str(invoice_id))
