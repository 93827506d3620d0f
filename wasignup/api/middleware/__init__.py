"""
HTTP middleware and exception handlers.
"""

from .error_handler import ErrorHandlerMiddleware, register_exception_handlers
from .request_logging import RequestLoggingMiddleware

__all__ = [
    "ErrorHandlerMiddleware",
    "RequestLoggingMiddleware",
    "register_exception_handlers",
]
