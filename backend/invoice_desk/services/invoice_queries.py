"""Invoice Queries — read-only projections for the listing and the edit form.

Invariants:
    - Read-only: no commits, no cache writes (the route owns caching)
    - Listing is newest-first, ITEMS_PER_PAGE rows per page, page numbers start at 1
    - Search matches customer name, customer email or status, case-insensitively
"""

import math

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from invoice_desk.core.domain_types import InvoiceId
from invoice_desk.core.money import to_major_units
from invoice_desk.models.customer import Customer
from invoice_desk.models.invoice import Invoice

ITEMS_PER_PAGE = 6


def _search_filter(query: str):
    pattern = f"%{query.lower()}%"
    return or_(
        func.lower(Customer.name).like(pattern),
        func.lower(Customer.email).like(pattern),
        func.lower(Invoice.status).like(pattern),
    )


async def fetch_filtered_invoices(
    db: AsyncSession, query: str = "", page: int = 1,
) -> dict:
    """One page of invoices joined with their customers, plus the page count."""
    page = max(page, 1)
    base = select(Invoice, Customer).join(Customer, Invoice.customer_id == Customer.id)
    count = select(func.count(Invoice.id)).join(
        Customer, Invoice.customer_id == Customer.id,
    )
    if query:
        base = base.where(_search_filter(query))
        count = count.where(_search_filter(query))

    result = await db.execute(
        base.order_by(Invoice.date.desc(), Invoice.id)
        .limit(ITEMS_PER_PAGE)
        .offset((page - 1) * ITEMS_PER_PAGE),
    )
    total = (await db.execute(count)).scalar_one()

    return {
        "invoices": [
            {
                "id": invoice.id,
                "customer_id": customer.id,
                "name": customer.name,
                "email": customer.email,
                "image_url": customer.image_url,
                "amount": invoice.amount,
                "status": invoice.status,
                "date": invoice.date,
            }
            for invoice, customer in result.all()
        ],
        "query": query,
        "page": page,
        "total_pages": math.ceil(total / ITEMS_PER_PAGE),
    }


async def fetch_invoice_by_id(db: AsyncSession, invoice_id: InvoiceId) -> dict | None:
    """Invoice prefill values with the amount back in major units."""
    invoice = await db.get(Invoice, invoice_id)
    if invoice is None:
        return None
    return {
        "id": invoice.id,
        "customer_id": invoice.customer_id,
        "amount": to_major_units(invoice.amount),
        "status": invoice.status,
    }


async def fetch_customers(db: AsyncSession) -> list[dict]:
    result = await db.execute(select(Customer).order_by(Customer.name))
    return [
        {"id": customer.id, "name": customer.name}
        for customer in result.scalars().all()
    ]
