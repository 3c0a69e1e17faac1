"""Error Handlers: global exception handlers that render the response envelope.

Invariants:
    - TransactionRecordsError -> {status: {code, message}} with the error's HTTP status
    - RequestValidationError -> 400 with field-level details in result
    - Starlette HTTPException (unknown route, wrong method) -> same envelope shape
    - Exception (catch-all) -> 500 "Internal server error", never leaks internal details
    - 500-level errors are logged with traceback; 400-level with a warning

Design Decisions:
    - Four-layer handler: domain, validation, HTTP, catch-all
    - Kept out of main.py: registration is one call from the app factory
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from txn_records.core.errors import (
    INTERNAL_ERROR_MESSAGE, INVALID_INPUT_MESSAGE, TransactionRecordsError,
)

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_domain_error_handler(app)
    _register_validation_error_handler(app)
    _register_http_error_handler(app)
    _register_generic_error_handler(app)


def _register_domain_error_handler(app: FastAPI) -> None:
    """Register transaction domain/infrastructure error handler."""

    @app.exception_handler(TransactionRecordsError)
    async def domain_error_handler(request: Request, exc: TransactionRecordsError):
        extra = {"error_code": exc.code, "path": request.url.path}
        if exc.http_status >= 500:
            logger.error(
                f"{type(exc).__name__}: {exc.message}", extra=extra, exc_info=exc,
            )
        else:
            logger.warning(f"{type(exc).__name__}: {exc.message}", extra=extra)
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_validation_error_handler(app: FastAPI) -> None:
    """Register Pydantic validation error handler."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
            extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_build_validation_error_response(exc),
        )


def _register_http_error_handler(app: FastAPI) -> None:
    """Keep the envelope for framework-level HTTP errors (404 route, 405 method)."""

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        logger.warning(
            f"HTTP {exc.status_code} on {request.url.path}",
            extra={"path": request.url.path, "status_code": exc.status_code},
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={"status": {"code": exc.status_code, "message": str(exc.detail)}},
            headers=getattr(exc, "headers", None),
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all: never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            extra={"error_code": "INTERNAL_ERROR", "path": request.url.path},
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "status": {
                    "code": status.HTTP_500_INTERNAL_SERVER_ERROR,
                    "message": INTERNAL_ERROR_MESSAGE,
                },
            },
        )


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    """Build envelope with one entry per failed field."""
    return {
        "status": {
            "code": status.HTTP_400_BAD_REQUEST,
            "message": INVALID_INPUT_MESSAGE,
        },
        "result": [
            {
                "field": ".".join(str(loc) for loc in e["loc"]),
                "message": e["msg"],
                "type": e["type"],
            }
            for e in exc.errors()
        ],
    }
