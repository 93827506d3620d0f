"""
wasignup core components.

Configuration, logging, the error taxonomy and the application factory.
"""

# Configuration & Settings
from .config.settings import Settings, settings

# Error taxonomy
from .errors import (
    NotFoundError,
    ParseError,
    PersistenceError,
    SignupError,
    UpstreamError,
    ValidationError,
    WebhookVerificationError,
)

# Logging System
from .logging import get_app_logger, get_logger, setup_app_logging

__all__ = [
    "NotFoundError",
    "ParseError",
    "PersistenceError",
    "Settings",
    "SignupError",
    "UpstreamError",
    "ValidationError",
    "WebhookVerificationError",
    "get_app_logger",
    "get_logger",
    "setup_app_logging",
    "settings",
]
