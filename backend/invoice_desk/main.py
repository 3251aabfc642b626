"""Invoice Desk API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - RouteGuardMiddleware is the innermost middleware: it runs after CORS and
      before routing, so guarded handlers never run for unauthenticated requests
    - Global error handlers map InvoiceDeskError → structured JSON responses
    - Database initialized on startup via lifespan context manager
    - One ViewCache per app instance (app.state.view_cache)

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Middleware configured from settings at import time; the secret and cookie
      name are handed to the guard explicitly
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from invoice_desk.api.error_handlers import register_error_handlers
from invoice_desk.api.route_guard import RouteGuardMiddleware
from invoice_desk.api.routes import auth, health, invoices
from invoice_desk.config import get_settings
from invoice_desk.infrastructure import database
from invoice_desk.infrastructure.observability import setup_logging
from invoice_desk.infrastructure.view_cache import ViewCache

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    manager = database.init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info("Invoice Desk API started")
    yield
    await manager.dispose()
    logger.info("Invoice Desk API shutting down")


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(title="Invoice Desk API", version="1.0.0", lifespan=lifespan)
    app.state.view_cache = ViewCache(settings.view_cache_max_variants)

    # Added first = innermost: guard runs after CORS, before routing
    app.add_middleware(
        RouteGuardMiddleware,
        secret=settings.session_secret,
        cookie_name=settings.session_cookie_name,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(invoices.router)

    register_error_handlers(app)
    return app


app = create_app()
