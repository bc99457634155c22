"""
Domain error taxonomy and global exception handlers.

Every domain error carries a numeric ``error_code`` and the HTTP status the
API layer answers with. The handlers keep stack traces away from clients.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

logger = logging.getLogger(__name__)


# ── Domain errors ───────────────────────────────────────────────────
class EmployeeManagementError(Exception):
    """Base class for every error raised by the employee management core."""

    error_code: int = 1000
    status_code: int = 500
    default_message = "An error occurred in the employee management system"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class EmployeeNotFoundError(EmployeeManagementError):
    error_code = 1001
    status_code = 404
    default_message = "Employee not found"

    @classmethod
    def for_id(cls, entity_id: int, entity: str = "Employee") -> EmployeeNotFoundError:
        return cls(f"{entity} with ID {entity_id} was not found")


class InvalidEmployeeDataError(EmployeeManagementError):
    """A business rule was violated by the supplied data."""

    error_code = 1002
    status_code = 400
    default_message = "Invalid employee data provided"

    def __init__(self, message: str | None = None, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or [self.message]


class InvalidArgumentError(InvalidEmployeeDataError, ValueError):
    """An argument is outside its allowed domain (e.g. a non-positive raise)."""


class InvalidOperationError(InvalidEmployeeDataError):
    """The argument is well-formed but the operation is not permitted."""

    error_code = 1003


class DuplicateRecordError(EmployeeManagementError):
    error_code = 1004
    status_code = 409
    default_message = "A record with the same unique number already exists"


class PersistenceError(EmployeeManagementError):
    error_code = 1005
    status_code = 500
    default_message = "Internal database error"


# ── Handlers ────────────────────────────────────────────────────────
async def _domain_error_handler(
    _request: Request, exc: EmployeeManagementError
) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s: %s", type(exc).__name__, exc, exc_info=exc.__cause__ or exc)
        detail = exc.default_message
    else:
        logger.warning("%s: %s", type(exc).__name__, exc.message)
        detail = exc.message
    content: dict = {"detail": detail, "success": False, "error_code": exc.error_code}
    if isinstance(exc, InvalidEmployeeDataError):
        content["errors"] = exc.errors
    return JSONResponse(status_code=exc.status_code, content=content)


async def _http_exception_handler(_request: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "success": False},
    )


async def _integrity_error_handler(_request: Request, exc: IntegrityError) -> JSONResponse:
    logger.error("Database integrity error: %s", exc, exc_info=True)
    return JSONResponse(
        status_code=409,
        content={"detail": "Database constraint violation", "success": False},
    )


async def _sqlalchemy_error_handler(_request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("Database error: %s", exc, exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal database error", "success": False},
    )


async def _generic_exception_handler(_request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception: %s", exc)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "success": False},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach all exception handlers to the FastAPI app."""
    app.add_exception_handler(EmployeeManagementError, _domain_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(HTTPException, _http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(IntegrityError, _integrity_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(SQLAlchemyError, _sqlalchemy_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _generic_exception_handler)
