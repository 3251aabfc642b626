"""Service test fixtures — async DB, seeded users/customers, FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database with foreign keys enforced
    - get_db dependency overridden to use the test DB session
    - Every client gets a fresh ViewCache (no listing state leaks between tests)
    - signed_in_client carries a valid session cookie minted with the app secret

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
    - bcrypt at 4 rounds for seeded users: same algorithm, fraction of the cost
"""

from datetime import date

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from httpx import ASGITransport, AsyncClient

from invoice_desk.config import get_settings
from invoice_desk.db.base import Base
from invoice_desk.infrastructure.database import (
    DatabaseSessionManager, create_engine_for, get_db,
)
from invoice_desk.infrastructure.password_hashing import hash_password
from invoice_desk.infrastructure.session_tokens import mint_session_token
from invoice_desk.infrastructure.view_cache import ViewCache
from invoice_desk.models import Customer, Invoice, User
import invoice_desk.infrastructure.database as db_module
from invoice_desk.main import app

USER_EMAIL = "user@nextmail.io"
USER_PASSWORD = "123456"


@pytest.fixture
async def test_engine():
    engine = create_engine_for("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def view_cache():
    cache = ViewCache()
    app.state.view_cache = cache
    return cache


@pytest.fixture
async def client(test_engine, test_session_factory, view_cache):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
async def seed_user(test_db):
    user = User(
        name="User", email=USER_EMAIL,
        password_hash=hash_password(USER_PASSWORD, rounds=4),
    )
    test_db.add(user)
    await test_db.commit()
    await test_db.refresh(user)
    return user


@pytest.fixture
async def signed_in_client(client, seed_user):
    settings = get_settings()
    token = mint_session_token(
        seed_user.to_identity(),
        secret=settings.session_secret,
        ttl_minutes=settings.session_ttl_minutes,
    )
    client.cookies.set(settings.session_cookie_name, token)
    return client


@pytest.fixture
async def seed_customers(test_db):
    customers = [
        Customer(name="Delba de Oliveira", email="delba@oliveira.io"),
        Customer(name="Lee Robinson", email="lee@robinson.io"),
    ]
    test_db.add_all(customers)
    await test_db.commit()
    for customer in customers:
        await test_db.refresh(customer)
    return customers


@pytest.fixture
async def seed_invoice(test_db, seed_customers):
    invoice = Invoice(
        customer_id=seed_customers[0].id, amount=15795,
        status="pending", date=date(2022, 12, 6),
    )
    test_db.add(invoice)
    await test_db.commit()
    await test_db.refresh(invoice)
    return invoice
