"""
FastAPI dependencies.
"""

from .service_dependencies import (
    get_orchestrator,
    get_registry,
    get_settings,
    get_webhook_ingestor,
)

__all__ = [
    "get_orchestrator",
    "get_registry",
    "get_settings",
    "get_webhook_ingestor",
]
