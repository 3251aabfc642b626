"""Alembic environment — runs Invoice Desk migrations on the async engine.

Invariants:
    - The database URL comes from Settings (DATABASE_URL / .env), already
      normalised to postgresql+asyncpg://; alembic.ini carries no URL
    - Every ORM model is imported before target_metadata is read

Design Decisions:
    - compare_type on: column type changes (e.g. amount width) show up in
      autogenerate instead of being silently skipped
    - SQLite URLs migrate in batch mode, since SQLite cannot ALTER constraints
"""

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import create_async_engine

from invoice_desk.config import get_settings
from invoice_desk.db.base import Base
from invoice_desk.models import Customer, Invoice, User  # noqa: F401

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

DATABASE_URL = get_settings().database_url


def _configure(**kwargs) -> None:
    context.configure(
        target_metadata=Base.metadata,
        compare_type=True,
        render_as_batch=DATABASE_URL.startswith("sqlite"),
        **kwargs,
    )


def _migrate(connection: Connection) -> None:
    _configure(connection=connection)
    with context.begin_transaction():
        context.run_migrations()


async def _migrate_online() -> None:
    engine = create_async_engine(DATABASE_URL, poolclass=pool.NullPool)
    try:
        async with engine.connect() as connection:
            await connection.run_sync(_migrate)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    # Emit SQL for review instead of touching the database
    _configure(
        url=DATABASE_URL,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()
else:
    asyncio.run(_migrate_online())
