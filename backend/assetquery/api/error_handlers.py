"""Error Handlers — global exception handlers for the asset query API.

Invariants:
    - AssetQueryError -> its own to_response() envelope and http_status
    - RequestValidationError -> 400 with field-level details (camelCase field names)
    - Exception (catch-all) -> 500, never leaks internal details

Design Decisions:
    - Three-layer handler: domain (AssetQueryError), validation (Pydantic), catch-all (Exception)
    - Domain errors below 500 log at WARNING, the rest at ERROR
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from assetquery.core.errors import AssetQueryError, ErrorCategory, ErrorSeverity

logger = logging.getLogger(__name__)

# Leading loc entries that name the request part rather than the field
_LOCATION_PREFIXES = {"query", "body", "path", "header"}


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_domain_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_domain_error_handler(app: FastAPI) -> None:

    @app.exception_handler(AssetQueryError)
    async def asset_query_error_handler(request: Request, exc: AssetQueryError):
        """Handle all asset query domain/infrastructure errors."""
        level = logging.WARNING if exc.http_status < 500 else logging.ERROR
        logger.log(
            level, f"AssetQueryError: {exc.message}",
            extra={"error_code": exc.code, "path": request.url.path},
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_validation_error_handler(app: FastAPI) -> None:

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
            content=build_validation_error_response(exc),
        )


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
            extra={"error_code": "INTERNAL_ERROR", "path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "An unexpected error occurred",
                    "category": ErrorCategory.INTERNAL.value,
                    "severity": ErrorSeverity.CRITICAL.value,
                },
            },
        )


def build_validation_error_response(exc: RequestValidationError) -> dict:
    """Structured 400 body listing each invalid field."""
    details = []
    for e in exc.errors():
        loc = [str(part) for part in e["loc"]]
        if loc and loc[0] in _LOCATION_PREFIXES:
            loc = loc[1:]
        details.append({
            "field": ".".join(loc),
            "message": e["msg"],
            "type": e["type"],
        })
    return {
        "error": {
            "code": "VALIDATION_ERROR",
            "message": "Invalid request data",
            "category": ErrorCategory.VALIDATION.value,
            "severity": ErrorSeverity.ERROR.value,
            "details": details,
        },
    }
