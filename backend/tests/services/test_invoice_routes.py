"""Invoice Routes — create/update/delete over HTTP, listing cache, edit prefill.

Tests cover:
    - create: 303 to /dashboard/invoices, row stored with minor units and today's date
    - listing reflects a new row only once the mutation has invalidated the cache
    - a listing read overlapping a create never caches the pre-create rows
    - validation failure: 422 with field errors + summary, no redirect, no row
    - sub-cent amounts are a field error, not a store failure
    - unknown customer: 503 "Database Error" form state
    - update/delete: 303, row changed/removed; delete of missing id is still 303
    - unexpected failure in persistence: 500 fault envelope, not a form state
    - edit prefill returns major-unit amount and customers; 404 when missing
"""

import asyncio
from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import select

from invoice_desk.api.routes import invoices as invoice_routes
from invoice_desk.infrastructure.database import get_db
from invoice_desk.main import app
from invoice_desk.models.invoice import Invoice

LISTING = "/dashboard/invoices"


async def _invoices(db) -> list[Invoice]:
    result = await db.execute(
        select(Invoice).execution_options(populate_existing=True),
    )
    return list(result.scalars().all())


# ─── create ──────────────────────────────────────────────────────

async def test_create_redirects_to_listing(signed_in_client, seed_customers, test_db):
    res = await signed_in_client.post(f"{LISTING}/create", data={
        "customerId": str(seed_customers[0].id),
        "amount": "125.50",
        "status": "pending",
    })

    assert res.status_code == 303
    assert res.headers["location"] == LISTING
    [invoice] = await _invoices(test_db)
    assert invoice.amount == 12550
    assert invoice.status == "pending"
    assert invoice.date == datetime.now(timezone.utc).date()


async def test_listing_reflects_create_only_after_invalidation(
    signed_in_client, seed_invoice, seed_customers, test_db,
):
    first = await signed_in_client.get(LISTING)
    assert [i["id"] for i in first.json()["invoices"]] == [str(seed_invoice.id)]

    # Written behind the app's back: the cached listing must not see it
    test_db.add(Invoice(
        customer_id=seed_customers[1].id, amount=100, status="paid",
        date=datetime(2023, 1, 1).date(),
    ))
    await test_db.commit()
    cached = await signed_in_client.get(LISTING)
    assert cached.json() == first.json()

    await signed_in_client.post(f"{LISTING}/create", data={
        "customerId": str(seed_customers[0].id), "amount": "1", "status": "paid",
    })
    fresh = await signed_in_client.get(LISTING)
    assert len(fresh.json()["invoices"]) == 3


async def test_create_with_invalid_form_returns_field_errors(
    signed_in_client, seed_customers, test_db,
):
    res = await signed_in_client.post(f"{LISTING}/create", data={
        "customerId": str(seed_customers[0].id), "amount": "", "status": "overdue",
    })

    assert res.status_code == 422
    assert "location" not in res.headers
    assert res.json() == {
        "message": "Missing Fields. Failed to Create Invoice.",
        "errors": {
            "amount": ["Please enter an amount greater than $0."],
            "status": ["Please select an invoice status."],
        },
    }
    assert await _invoices(test_db) == []


async def test_create_for_unknown_customer_is_database_error(signed_in_client, seed_customers):
    res = await signed_in_client.post(f"{LISTING}/create", data={
        "customerId": str(uuid4()), "amount": "10", "status": "paid",
    })
    assert res.status_code == 503
    assert res.json() == {
        "message": "Database Error: Failed to Create Invoice.", "errors": {},
    }


# ─── update ──────────────────────────────────────────────────────

async def test_update_redirects_and_changes_row(
    signed_in_client, seed_invoice, seed_customers, test_db,
):
    res = await signed_in_client.post(f"{LISTING}/{seed_invoice.id}/edit", data={
        "customerId": str(seed_customers[1].id), "amount": "99.99", "status": "paid",
    })

    assert res.status_code == 303
    assert res.headers["location"] == LISTING
    [invoice] = await _invoices(test_db)
    assert invoice.amount == 9999
    assert invoice.status == "paid"
    assert invoice.customer_id == seed_customers[1].id


async def test_update_with_invalid_form_returns_field_errors(signed_in_client, seed_invoice):
    res = await signed_in_client.post(f"{LISTING}/{seed_invoice.id}/edit", data={
        "customerId": "", "amount": "abc", "status": "paid",
    })
    assert res.status_code == 422
    body = res.json()
    assert body["message"] == "Missing Fields. Failed to Update Invoice."
    assert body["errors"] == {
        "customerId": ["Please select a customer."],
        "amount": ["Amount must be a number.", "Please enter an amount greater than $0."],
    }


async def test_update_with_malformed_id_is_request_validation_error(signed_in_client):
    res = await signed_in_client.post(f"{LISTING}/not-a-uuid/edit", data={
        "customerId": str(uuid4()), "amount": "1", "status": "paid",
    })
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


# ─── delete ──────────────────────────────────────────────────────

async def test_delete_redirects_and_removes_row(signed_in_client, seed_invoice, test_db):
    res = await signed_in_client.post(f"{LISTING}/{seed_invoice.id}/delete")
    assert res.status_code == 303
    assert res.headers["location"] == LISTING
    assert await _invoices(test_db) == []


async def test_delete_missing_invoice_leaves_listing_intact(
    signed_in_client, seed_invoice, test_db,
):
    before = (await signed_in_client.get(LISTING)).json()

    res = await signed_in_client.post(f"{LISTING}/{uuid4()}/delete")

    assert res.status_code == 303
    after = (await signed_in_client.get(LISTING)).json()
    assert after == before
    [invoice] = await _invoices(test_db)
    assert invoice.id == seed_invoice.id


async def test_unexpected_persistence_failure_is_fault(signed_in_client):
    class _ExplodingSession:
        async def execute(self, *args, **kwargs):
            raise RuntimeError("failed to delete invoice")

        async def rollback(self):
            pass

    async def broken_db():
        yield _ExplodingSession()

    app.dependency_overrides[get_db] = broken_db
    invoice_id = uuid4()
    res = await signed_in_client.post(f"{LISTING}/{invoice_id}/delete")

    assert res.status_code == 500
    error = res.json()["error"]
    assert error["code"] == "INVOICE_MUTATION_FAULT"
    assert error["context"] == {"invoice_id": str(invoice_id), "operation": "delete"}
    assert "failed to delete invoice" not in res.text


# ─── read-side views ─────────────────────────────────────────────

async def test_edit_prefill_returns_invoice_and_customers(
    signed_in_client, seed_invoice, seed_customers,
):
    res = await signed_in_client.get(f"{LISTING}/{seed_invoice.id}/edit")
    assert res.status_code == 200
    body = res.json()
    assert body["invoice"]["id"] == str(seed_invoice.id)
    assert body["invoice"]["amount"] == "157.95"
    assert body["invoice"]["status"] == "pending"
    assert [c["name"] for c in body["customers"]] == [
        "Delba de Oliveira", "Lee Robinson",
    ]


async def test_edit_prefill_for_missing_invoice_is_404(signed_in_client):
    res = await signed_in_client.get(f"{LISTING}/{uuid4()}/edit")
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "RESOURCE_NOT_FOUND"


async def test_create_form_lists_customers(signed_in_client, seed_customers):
    res = await signed_in_client.get(f"{LISTING}/create")
    assert res.status_code == 200
    assert {c["id"] for c in res.json()} == {str(c.id) for c in seed_customers}


async def test_listing_read_overlapping_create_is_not_cached(
    signed_in_client, seed_customers, monkeypatch,
):
    fetched = asyncio.Event()
    release = asyncio.Event()
    real_fetch = invoice_routes.fetch_filtered_invoices

    async def parked_fetch(db, query="", page=1):
        listing = await real_fetch(db, query, page)
        fetched.set()
        await release.wait()
        return listing

    monkeypatch.setattr(invoice_routes, "fetch_filtered_invoices", parked_fetch)
    slow_read = asyncio.create_task(signed_in_client.get(LISTING))
    await fetched.wait()
    monkeypatch.setattr(invoice_routes, "fetch_filtered_invoices", real_fetch)

    created = await signed_in_client.post(f"{LISTING}/create", data={
        "customerId": str(seed_customers[0].id), "amount": "42", "status": "paid",
    })
    assert created.status_code == 303

    release.set()
    assert (await slow_read).json()["invoices"] == []

    listing = await signed_in_client.get(LISTING)
    assert len(listing.json()["invoices"]) == 1


async def test_create_with_sub_cent_amount_is_field_error(
    signed_in_client, seed_customers, test_db,
):
    res = await signed_in_client.post(f"{LISTING}/create", data={
        "customerId": str(seed_customers[0].id), "amount": "0.004", "status": "paid",
    })
    assert res.status_code == 422
    assert res.json()["errors"] == {
        "amount": ["Please enter an amount greater than $0."],
    }
    assert await _invoices(test_db) == []
