"""Error Handlers - global exception handlers for the exchange API.

Invariants:
    - CarbonExchangeError -> plain-text body (exc.message) with exc.http_status
    - 5xx domain errors (DatabaseError, InternalError) -> fixed "Internal server error"
      body; the detailed message goes to the log only
    - RequestValidationError -> 400 "Invalid request data"
    - Exception (catch-all) -> 500 "Internal server error", never leaks internal details
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse

from carbon_exchange.core.errors import CarbonExchangeError

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_domain_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_domain_error_handler(app: FastAPI) -> None:

    @app.exception_handler(CarbonExchangeError)
    async def domain_error_handler(request: Request, exc: CarbonExchangeError):
        """Handle all exchange domain/infrastructure errors."""
        extra = {
            "error_code": exc.code,
            "path": request.url.path,
            "user_id": exc.context.user_id,
            "project_id": exc.context.project_id,
        }
        if exc.http_status >= 500:
            logger.error(f"{exc.code}: {exc.message}", extra=extra)
            return PlainTextResponse(
                INTERNAL_ERROR_MESSAGE, status_code=exc.http_status,
            )
        logger.warning(f"{exc.code}: {exc.message}", extra=extra)
        return PlainTextResponse(exc.message, status_code=exc.http_status)


def _register_validation_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
        )
        return PlainTextResponse(
            "Invalid request data", status_code=status.HTTP_400_BAD_REQUEST,
        )


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all - never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return PlainTextResponse(
            INTERNAL_ERROR_MESSAGE,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
