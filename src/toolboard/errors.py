"""Error taxonomy and the app-level handlers that render it.

Services and dependencies raise these; handlers registered in main.py turn
them into `{"message": ...}` JSON bodies. Datastore failures are caught at
the same boundary, logged, and reported as a generic 500.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = structlog.get_logger()


class ToolboardError(Exception):
    """Base class for errors that map to an HTTP response."""

    status_code = 500
    message = "Internal server error"

    def __init__(self, message: str | None = None, status_code: int | None = None):
        super().__init__(message or self.message)
        if message:
            self.message = message
        if status_code:
            self.status_code = status_code


class AuthenticationError(ToolboardError):
    """Bad, missing, or expired credentials (401, or 403 for a rejected token)."""

    status_code = 401
    message = "Authentication failed"


class ValidationError(ToolboardError):
    status_code = 400
    message = "Missing or invalid fields"


class NotFoundError(ToolboardError):
    status_code = 404
    message = "Not found"


class StorageError(ToolboardError):
    status_code = 500
    message = "Internal server error"


async def _toolboard_error_handler(request: Request, exc: ToolboardError):
    headers = None
    if isinstance(exc, AuthenticationError) and exc.status_code == 401:
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.message},
        headers=headers,
    )


async def _validation_error_handler(request: Request, exc: RequestValidationError):
    errors = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ())[1:]),
            "error": err.get("msg", ""),
        }
        for err in exc.errors()
    ]
    logger.info("request.validation_failed", path=request.url.path, errors=errors)
    return JSONResponse(
        status_code=400,
        content={"message": ValidationError.message, "errors": errors},
    )


async def _storage_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("storage.error", path=request.url.path, error=str(exc))
    return JSONResponse(
        status_code=StorageError.status_code,
        content={"message": StorageError.message},
    )


def register_error_handlers(app: FastAPI) -> None:
    """Install the JSON error handlers on an app."""
    app.add_exception_handler(ToolboardError, _toolboard_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(SQLAlchemyError, _storage_error_handler)
