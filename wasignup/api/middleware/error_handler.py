"""
Error handling for the HTTP API.

SignupError subclasses are turned into the ``{success: false, error}``
envelope by exception handlers; anything else is caught by the middleware,
logged with context and answered with a 500 in the same envelope.
"""

import traceback
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from starlette.middleware.base import BaseHTTPMiddleware

from wasignup.core.errors import SignupError, WebhookVerificationError
from wasignup.core.logging.logger import get_logger


def error_envelope(message: str) -> dict[str, Any]:
    return {"success": False, "error": message}


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Catches unhandled exceptions and answers with a structured 500.

    Internal details are only included in development.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            return await self._handle_unexpected_exception(request, exc)

    async def _handle_unexpected_exception(
        self, request: Request, exc: Exception
    ) -> JSONResponse:
        logger = get_logger(__name__)
        logger.error(
            f"Unhandled exception in {request.method} {request.url.path}: {exc}",
            exc_info=True,
        )

        content = error_envelope("Internal server error")
        settings = getattr(request.app.state, "settings", None)
        if settings is not None and settings.is_development:
            content["debug"] = {
                "exception_type": type(exc).__name__,
                "exception_message": str(exc),
                "traceback": traceback.format_exc().split("\n"),
            }
        return JSONResponse(status_code=500, content=content)


async def signup_error_handler(request: Request, exc: SignupError) -> Response:
    """Answer a service error with its status and the failure envelope."""
    logger = get_logger(__name__)
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(f"{request.method} {request.url.path} failed ({exc.status_code}): {exc}")

    if isinstance(exc, WebhookVerificationError):
        # The platform expects an empty 403 on a failed handshake
        return Response(status_code=exc.status_code)
    return JSONResponse(status_code=exc.status_code, content=error_envelope(str(exc)))


def format_validation_error(exc: RequestValidationError) -> str:
    """Flatten request validation errors into one readable message."""
    parts = []
    for error in exc.errors():
        location = " -> ".join(str(loc) for loc in error["loc"] if loc != "body")
        parts.append(f"{location}: {error['msg']}" if location else error["msg"])
    return "Invalid request: " + "; ".join(parts)


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    message = format_validation_error(exc)
    get_logger(__name__).warning(f"{request.method} {request.url.path}: {message}")
    return JSONResponse(status_code=400, content=error_envelope(message))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(SignupError, signup_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
