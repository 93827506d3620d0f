"""WhatsApp utilities."""

from .error_helpers import (
    describe_graph_error,
    format_graph_error,
    is_authentication_error,
    parse_graph_error,
    upstream_error,
)

__all__ = [
    "describe_graph_error",
    "format_graph_error",
    "is_authentication_error",
    "parse_graph_error",
    "upstream_error",
]
