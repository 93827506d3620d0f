"""
Graph API error handling utilities.

Decodes the platform error envelope so callers see every diagnostic field:

    {"error": {"message", "type", "code", "error_subcode", "fbtrace_id"}}
"""

import json
from typing import Any

from wasignup.core.errors import UpstreamError


def parse_graph_error(body: str) -> dict[str, Any] | None:
    """Return the ``error`` object of a Graph response body, if it has one."""
    try:
        data = json.loads(body)
    except (TypeError, ValueError):
        return None

    if not isinstance(data, dict):
        return None
    error = data.get("error")
    if isinstance(error, dict) and error.get("message"):
        return error
    return None


def format_graph_error(error: dict[str, Any]) -> str:
    """Render a decoded error envelope with all five fields."""
    return (
        f"{error.get('message', '')} "
        f"(type={error.get('type', '')} code={error.get('code', 0)} "
        f"subcode={error.get('error_subcode', 0)} trace={error.get('fbtrace_id', '')})"
    )


def describe_graph_error(body: str) -> str:
    """Decoded error message, or the raw body when there is no envelope."""
    error = parse_graph_error(body)
    if error is not None:
        return format_graph_error(error)
    return body


def is_authentication_error(error: UpstreamError) -> bool:
    """Check if an upstream failure indicates an invalid or expired token.

    Graph code 190 is OAuthException "invalid access token".
    """
    if error.upstream_status == 401:
        return True
    return bool(error.graph_error and error.graph_error.get("code") == 190)


def upstream_error(
    operation: str,
    status: int,
    body: str,
    status_code: int = 500,
) -> UpstreamError:
    """Build an UpstreamError for a non-200 Graph response.

    Args:
        operation: What failed, e.g. "phone numbers"
        status: HTTP status returned by the platform
        body: Raw response body
        status_code: Status the API layer should answer with
    """
    graph_error = parse_graph_error(body)
    detail = format_graph_error(graph_error) if graph_error else body
    return UpstreamError(
        f"{operation} failed ({status}): {detail}",
        status_code=status_code,
        upstream_status=status,
        graph_error=graph_error,
    )
