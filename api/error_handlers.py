"""
Boundary error mapping.

Maps domain exceptions to HTTP status codes and a stable response body
``{"error_type", "message", "details"}``. Raw SQLAlchemy errors that reach
the boundary are mapped by type: a unique-constraint ``IntegrityError``
still becomes 409, everything else a generic 500.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from exceptions import (
    ConflictError,
    InternalError,
    NotFoundError,
    UnauthorizedError,
    UserServiceError,
)

logger = logging.getLogger(__name__)

EXCEPTION_STATUS_MAP = {
    ConflictError: status.HTTP_409_CONFLICT,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    UnauthorizedError: status.HTTP_401_UNAUTHORIZED,
    InternalError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_for(exc: UserServiceError) -> int:
    for exc_type in type(exc).__mro__:
        if exc_type in EXCEPTION_STATUS_MAP:
            return EXCEPTION_STATUS_MAP[exc_type]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def register_exception_handlers(app: FastAPI, debug: bool = False) -> None:
    """Attach the domain and store error handlers to ``app``."""

    @app.exception_handler(UserServiceError)
    async def handle_domain_error(request: Request, exc: UserServiceError):
        status_code = status_for(exc)
        headers = None
        if status_code == status.HTTP_401_UNAUTHORIZED:
            headers = {"WWW-Authenticate": "Bearer"}
        return JSONResponse(status_code=status_code, content=exc.to_dict(), headers=headers)

    @app.exception_handler(IntegrityError)
    async def handle_integrity_error(request: Request, exc: IntegrityError):
        logger.warning("Integrity error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content=ConflictError("Duplicate entry").to_dict(),
        )

    @app.exception_handler(SQLAlchemyError)
    async def handle_store_error(request: Request, exc: SQLAlchemyError):
        logger.exception("Store error on %s %s", request.method, request.url.path)
        body = InternalError().to_dict()
        if debug:
            body["details"] = {"error": str(exc)}
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=body)
