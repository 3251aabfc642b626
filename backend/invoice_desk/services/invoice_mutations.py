"""Invoice Mutations — validated create/update/delete of invoice rows.

Invariants:
    - create/update validate first; a FieldErrors result never reaches the store
    - Each mutation is ONE statement plus commit, inside its own failure boundary
    - The boundary covers persistence only: SQLAlchemyError -> rollback +
      "Database Error" FormState; anything else -> rollback + Fault
    - Post-mutation effects (invalidate, then Navigate) run only after commit,
      outside the boundary
    - create assigns a fresh UUID and today's UTC date; update never touches id or date
    - delete of a missing id is not an error (no row matched, still Navigate)

Design Decisions:
    - Outcomes as values (Navigate | FormState | Fault): nothing the success
      path produces looks like an exception to the boundary
    - Core insert/update/delete statements over ORM load-modify-flush: one
      round trip, last-write-wins at the row, no read-before-write
"""

import logging
import uuid
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import delete, insert, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from invoice_desk.core.domain_types import InvoiceId
from invoice_desk.core.money import to_minor_units
from invoice_desk.core.mutation_outcome import (
    Fault, FormState, MutationOutcome, database_failed, validation_failed,
)
from invoice_desk.core.validate_invoice import FieldErrors, validate_invoice_form
from invoice_desk.infrastructure.view_cache import ViewCache
from invoice_desk.models.invoice import Invoice
from invoice_desk.services.post_mutation import revalidate_and_redirect

logger = logging.getLogger(__name__)


def _today() -> datetime:
    return datetime.now(timezone.utc)


class InvoiceMutations:
    """Create, update and delete invoices for one request."""

    def __init__(self, db: AsyncSession, cache: ViewCache):
        self.db = db
        self.cache = cache

    async def create(self, raw: Mapping[str, Any]) -> MutationOutcome:
        """Validate the form and insert a new invoice dated today."""
        fields = validate_invoice_form(raw)
        if isinstance(fields, FieldErrors):
            return validation_failed("Create", fields.errors)

        invoice_id = uuid.uuid4()
        statement = insert(Invoice).values(
            id=invoice_id,
            customer_id=_parse_customer_id(fields.customer_id),
            amount=to_minor_units(fields.amount),
            status=fields.status.value,
            date=_today().date(),
        )
        failure = await self._persist(statement, "Create", str(invoice_id))
        if failure is not None:
            return failure
        return revalidate_and_redirect(self.cache)

    async def update(
        self, invoice_id: InvoiceId, raw: Mapping[str, Any],
    ) -> MutationOutcome:
        """Validate the form and overwrite customer, amount and status."""
        fields = validate_invoice_form(raw)
        if isinstance(fields, FieldErrors):
            return validation_failed("Update", fields.errors)

        statement = (
            update(Invoice)
            .where(Invoice.id == invoice_id)
            .values(
                customer_id=_parse_customer_id(fields.customer_id),
                amount=to_minor_units(fields.amount),
                status=fields.status.value,
            )
        )
        failure = await self._persist(statement, "Update", str(invoice_id))
        if failure is not None:
            return failure
        return revalidate_and_redirect(self.cache)

    async def delete(self, invoice_id: InvoiceId) -> MutationOutcome:
        """Remove the invoice if it exists."""
        statement = delete(Invoice).where(Invoice.id == invoice_id)
        failure = await self._persist(statement, "Delete", str(invoice_id))
        if failure is not None:
            return failure
        return revalidate_and_redirect(self.cache)

    async def _persist(
        self, statement, action: str, invoice_id: str,
    ) -> FormState | Fault | None:
        """Execute + commit one statement. None on success."""
        log_extra = {"invoice_id": invoice_id, "operation": action.lower()}
        try:
            result = await self.db.execute(statement)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(
                f"Database error during invoice {action.lower()}: {e}",
                extra={**log_extra, "error_code": "DATABASE_ERROR"},
            )
            return database_failed(action)
        except Exception as e:
            await self.db.rollback()
            logger.error(
                f"Unexpected failure during invoice {action.lower()}: {e}",
                exc_info=True, extra=log_extra,
            )
            return Fault(operation=action.lower(), error=e)

        if action != "Create" and result.rowcount == 0:
            logger.info(f"Invoice {action.lower()} matched no row", extra=log_extra)
        else:
            logger.info(f"Invoice {action.lower()}d", extra=log_extra)
        return None


def _parse_customer_id(customer_id: str) -> uuid.UUID | str:
    """UUID when the reference parses; otherwise the raw string for the FK to reject."""
    try:
        return uuid.UUID(customer_id)
    except ValueError:
        return customer_id
