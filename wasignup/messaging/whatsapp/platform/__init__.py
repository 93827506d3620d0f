"""WhatsApp platform facade."""

from .whatsapp_platform import WhatsAppPlatform

__all__ = ["WhatsAppPlatform"]
