"""In-memory persistence."""

from .account_registry import AccountRegistry

__all__ = ["AccountRegistry"]
