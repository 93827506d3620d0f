"""
Request and response logging middleware.

Logs method, path, status and duration for every request. Bodies are never
logged: they carry authorization codes and webhook payloads.
"""

import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from wasignup.core.logging.logger import get_logger

SKIP_PATHS = ("/health", "/docs", "/redoc", "/openapi.json", "/favicon.ico")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Timing and status logging for HTTP requests."""

    def __init__(self, app, log_requests: bool = True, log_responses: bool = True):
        super().__init__(app)
        self.log_requests = log_requests
        self.log_responses = log_responses
        self.logger = get_logger(__name__)

    async def dispatch(self, request: Request, call_next) -> Response:
        start_time = time.time()
        skip = self._should_skip_logging(request.url.path)

        if self.log_requests and not skip:
            client_host = request.client.host if request.client else "unknown"
            self.logger.info(
                f"Incoming {request.method} {request.url.path} from {client_host}"
            )

        response = await call_next(request)
        process_time_ms = round((time.time() - start_time) * 1000, 2)

        settings = getattr(request.app.state, "settings", None)
        if settings is not None and settings.is_development:
            response.headers["X-Process-Time"] = str(process_time_ms)

        if self.log_responses and not skip:
            self._log_response(request, response, process_time_ms)

        return response

    def _should_skip_logging(self, path: str) -> bool:
        return any(path.startswith(skip_path) for skip_path in SKIP_PATHS)

    def _log_response(
        self, request: Request, response: Response, process_time_ms: float
    ) -> None:
        status_code = response.status_code
        if status_code >= 500:
            log = self.logger.error
        elif status_code >= 400:
            log = self.logger.warning
        else:
            log = self.logger.info

        log(
            f"Response {status_code} for {request.method} {request.url.path} "
            f"({process_time_ms}ms)"
        )
