"""
wasignup - WhatsApp Business embedded signup backend.

Exchanges embedded signup authorization codes for access tokens, discovers
the business's WhatsApp assets, registers webhooks and keeps the onboarded
accounts in memory.
"""

from .core.app import create_app
from .core.config.settings import settings
from .webhooks.event_handler import WebhookEventHandler

__version__ = settings.version

__all__ = [
    "WebhookEventHandler",
    "create_app",
]
