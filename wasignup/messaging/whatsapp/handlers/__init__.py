"""WhatsApp service handlers."""

from .business_handler import WhatsAppBusinessHandler
from .message_handler import WhatsAppMessageHandler
from .oauth_handler import (
    TOKEN_EXCHANGE_STRATEGIES,
    TokenExchangeStrategy,
    WhatsAppOAuthHandler,
)
from .template_handler import WhatsAppTemplateHandler

__all__ = [
    "TOKEN_EXCHANGE_STRATEGIES",
    "TokenExchangeStrategy",
    "WhatsAppBusinessHandler",
    "WhatsAppMessageHandler",
    "WhatsAppOAuthHandler",
    "WhatsAppTemplateHandler",
]
