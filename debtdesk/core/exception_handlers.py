"""Centralized exception handlers for the FastAPI app.

Register with register_exception_handlers(app). Maps domain and framework
exceptions to HTTP responses.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import DisconnectionError, InterfaceError, OperationalError
from starlette.exceptions import HTTPException as StarletteHTTPException

from debtdesk.core.config import get_settings
from debtdesk.domain.exceptions import DebtDeskException, StoreUnavailableException

logger = logging.getLogger(__name__)

# Map domain error_code to HTTP status
_ERROR_CODE_STATUS: dict[str, int] = {
    "RESOURCE_NOT_FOUND": 404,
    "SESSION_NOT_FOUND": 401,
    "SESSION_EXPIRED": 401,
    "DUPLICATE_GRANT": 409,
    "PRIMARY_GRANT_CONFLICT": 409,
    "INVALID_GRANT": 403,
    "NO_ACTIVE_ROLE": 403,
    "STORE_UNAVAILABLE": 503,
    "AUTHENTICATION_ERROR": 401,
    "PERMISSION_DENIED": 403,
    "VALIDATION_ERROR": 400,
}


def _debtdesk_exception_handler(
    request: Request, exc: DebtDeskException
) -> JSONResponse:
    """Return JSON from DebtDeskException.to_dict() with the mapped status code."""
    status = _ERROR_CODE_STATUS.get(exc.error_code, 400)
    headers = {"WWW-Authenticate": "Bearer"} if status == 401 else None
    return JSONResponse(status_code=status, content=exc.to_dict(), headers=headers)


def _store_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Connectivity errors raised outside repositories (e.g. at commit) fail closed as 503."""
    logger.error("Role store unavailable: %s", exc.__class__.__name__)
    return _debtdesk_exception_handler(
        request, StoreUnavailableException("commit")
    )


def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return 422 with validation error details."""
    return JSONResponse(
        status_code=422,
        content={
            "error": "VALIDATION_ERROR",
            "message": "Request validation failed",
            "details": exc.errors(),
        },
    )


def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Return JSON for Starlette HTTP exceptions (status + detail)."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": "HTTP_ERROR", "message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return 500; include detail only when debug is True."""
    logger.exception("Unhandled exception: %s", exc)
    settings = get_settings()
    detail: Any = str(exc) if settings.debug else "Internal server error"
    return JSONResponse(
        status_code=500,
        content={"error": "INTERNAL_ERROR", "message": detail},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app.

    Handlers: DebtDeskException (and subclasses), SQLAlchemy connectivity
    errors, RequestValidationError, StarletteHTTPException, generic Exception.
    """
    app.add_exception_handler(DebtDeskException, _debtdesk_exception_handler)
    for store_error in (OperationalError, InterfaceError, DisconnectionError):
        app.add_exception_handler(store_error, _store_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)
