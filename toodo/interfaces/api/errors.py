"""Map domain errors to HTTP responses.

Handlers are registered once on the app; routes never catch domain errors
themselves.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from toodo.domain.shared.errors import (
    ConflictError,
    NotFoundError,
    ToodoError,
    UnauthorizedActivityDeletionError,
)

logger = logging.getLogger(__name__)


def status_for(error: ToodoError) -> int:
    """HTTP status code for a domain error."""
    if isinstance(error, NotFoundError):
        return 404
    if isinstance(error, ConflictError):
        return 409
    if isinstance(error, UnauthorizedActivityDeletionError):
        return 403
    return 400


async def handle_toodo_error(request: Request, exc: ToodoError) -> JSONResponse:
    status_code = status_for(exc)
    logger.warning(f"{request.method} {request.url.path} -> {status_code} {exc.kind}: {exc.message}")
    return JSONResponse(
        status_code=status_code,
        content={"error": exc.kind, "detail": exc.message},
    )


async def handle_integrity_error(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.warning(f"{request.method} {request.url.path} -> 409 integrity error: {exc.orig}")
    return JSONResponse(
        status_code=409,
        content={"error": "conflict", "detail": "The change conflicts with existing data"},
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ToodoError, handle_toodo_error)
    app.add_exception_handler(IntegrityError, handle_integrity_error)
