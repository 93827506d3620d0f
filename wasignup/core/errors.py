"""
Error taxonomy for the onboarding service.

Every failure that reaches a caller is one of these exceptions. Each carries the
HTTP status the API layer answers with, so routes never map errors by hand.
"""

from typing import Any


class SignupError(Exception):
    """Base class for all service errors."""

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def __str__(self) -> str:
        return self.message


class ValidationError(SignupError):
    """Missing or malformed required input."""

    status_code = 400


class UpstreamError(SignupError):
    """A Graph API call failed.

    Attributes:
        upstream_status: HTTP status returned by the platform, if any
        graph_error: decoded ``error`` envelope, if the body carried one
        attempts: per-strategy failure messages (token exchange only)
    """

    status_code = 500

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        upstream_status: int | None = None,
        graph_error: dict[str, Any] | None = None,
        attempts: list[str] | None = None,
    ):
        super().__init__(message, status_code)
        self.upstream_status = upstream_status
        self.graph_error = graph_error
        self.attempts = attempts or []


class NotFoundError(SignupError):
    """Requested account or asset is absent."""

    status_code = 404


class PersistenceError(SignupError):
    """The account registry could not store a record."""

    status_code = 500


class ParseError(SignupError):
    """Inbound webhook body is not a valid event."""

    status_code = 400


class WebhookVerificationError(SignupError):
    """Webhook handshake rejected (wrong mode or verify token)."""

    status_code = 403
