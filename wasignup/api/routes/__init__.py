"""
API routes.
"""

from .business import router as business_router
from .health import router as health_router
from .onboarding import router as onboarding_router
from .webhooks import router as webhooks_router

__all__ = [
    "business_router",
    "health_router",
    "onboarding_router",
    "webhooks_router",
]
