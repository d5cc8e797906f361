"""Centralized exception handlers for the FastAPI application.

Registration errors are mapped to HTTP 400 with a ``detail``-only body:

    {"detail": "Invalid payload"}
    {"detail": "Email already registered"}

Anything unhandled becomes a 500 with a generic message and is logged
with its traceback. Sign-in failures never reach these handlers; the
engine turns them into error-page redirects.

Usage:
    from authgate.presentation.api.exception_handlers import (
        setup_exception_handlers,
    )

    app = FastAPI()
    setup_exception_handlers(app)
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from authgate_identity.domain.user import EmailAlreadyExistsError, InvalidPayloadError

logger = logging.getLogger(__name__)

EMAIL_TAKEN_DETAIL = "Email already registered"
INTERNAL_ERROR_DETAIL = "An internal error occurred"


def _create_error_response(status_code: int, message: str) -> JSONResponse:
    """Create a standardized error response."""
    return JSONResponse(status_code=status_code, content={"detail": message})


def setup_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI application.

    Parameters
    ----------
    app
        The FastAPI application instance
    """

    @app.exception_handler(InvalidPayloadError)
    async def invalid_payload_handler(
        request: Request,
        exc: InvalidPayloadError,
    ) -> JSONResponse:
        logger.warning(
            "Invalid payload on %s %s",
            request.method,
            request.url.path,
        )
        return _create_error_response(status.HTTP_400_BAD_REQUEST, exc.message)

    @app.exception_handler(EmailAlreadyExistsError)
    async def email_taken_handler(
        request: Request,
        exc: EmailAlreadyExistsError,
    ) -> JSONResponse:
        logger.warning(
            "Duplicate registration on %s %s",
            request.method,
            request.url.path,
        )
        return _create_error_response(status.HTTP_400_BAD_REQUEST, EMAIL_TAKEN_DETAIL)

    @app.exception_handler(Exception)
    async def global_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Handle unhandled exceptions with consistent error format.

        Store and network failures land here; no retry is attempted.
        """
        logger.exception(
            "Unhandled exception on %s %s: %s",
            request.method,
            request.url.path,
            exc,
        )
        return _create_error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            INTERNAL_ERROR_DETAIL,
        )
