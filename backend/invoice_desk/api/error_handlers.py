"""Error Handlers — the top-level request boundary for everything not recovered locally.

Invariants:
    - InvoiceDeskError → its own http_status and to_response() envelope, logged at
      the level its severity names, with invoice/operation context as log extras
    - RequestValidationError → 400 with field-level details (malformed path ids)
    - Exception (catch-all) → 500 INTERNAL_ERROR, never leaks internal details
    - Form validation, store failures during mutations and credential rejection
      never reach here: they are values rendered by the routes

Design Decisions:
    - Plain module-level handlers registered through add_exception_handler, so
      each one can be exercised without building an app
    - Kept out of main.py so the app module stays a wiring list
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from invoice_desk.core.errors import (
    ErrorCategory, ErrorSeverity, InvoiceDeskError,
)

logger = logging.getLogger(__name__)

_LOG_LEVELS = {
    ErrorSeverity.INFO: logging.INFO,
    ErrorSeverity.WARNING: logging.WARNING,
    ErrorSeverity.ERROR: logging.ERROR,
    ErrorSeverity.CRITICAL: logging.CRITICAL,
}


async def handle_invoice_desk_error(request: Request, exc: InvoiceDeskError):
    logger.log(
        _LOG_LEVELS[exc.severity],
        f"{exc.code}: {exc.message}",
        exc_info=exc if exc.__cause__ is not None else None,
        extra={
            "error_code": exc.code,
            "category": exc.category.value,
            "path": request.url.path,
            "invoice_id": exc.context.invoice_id,
            "operation": exc.context.operation,
        },
    )
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


async def handle_request_validation_error(
    request: Request, exc: RequestValidationError,
):
    details = [
        {
            "field": ".".join(str(loc) for loc in e["loc"]),
            "message": e["msg"],
            "type": e["type"],
        }
        for e in exc.errors()
    ]
    logger.warning(
        f"Rejected malformed request: {[d['field'] for d in details]}",
        extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_envelope(
            "VALIDATION_ERROR", "Invalid request data",
            ErrorCategory.VALIDATION, ErrorSeverity.ERROR, details=details,
        ),
    )


async def handle_unexpected_error(request: Request, exc: Exception):
    logger.error(
        f"Unhandled {type(exc).__name__}",
        exc_info=exc,
        extra={"error_code": "INTERNAL_ERROR", "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=internal_error_body(),
    )


def internal_error_body() -> dict:
    return _envelope(
        "INTERNAL_ERROR", "An unexpected error occurred",
        ErrorCategory.INTERNAL, ErrorSeverity.CRITICAL,
    )


def _envelope(
    code: str, message: str, category: ErrorCategory, severity: ErrorSeverity,
    **extra,
) -> dict:
    return {
        "error": {
            "code": code,
            "message": message,
            "category": category.value,
            "severity": severity.value,
            **extra,
        },
    }


def register_error_handlers(app: FastAPI) -> None:
    """Install the domain, request-validation and catch-all handlers."""
    app.add_exception_handler(InvoiceDeskError, handle_invoice_desk_error)
    app.add_exception_handler(
        RequestValidationError, handle_request_validation_error,
    )
    app.add_exception_handler(Exception, handle_unexpected_error)
