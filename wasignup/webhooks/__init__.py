"""
WhatsApp webhook verification and ingestion.
"""

from .event_handler import WebhookEventHandler
from .events import DeliveryStatusEvent, InboundMessageEvent
from .ingestor import WebhookIngestor
from .models import (
    Change,
    ChangeValue,
    DeliveryStatus,
    Entry,
    InboundMessage,
    WebhookEvent,
)

__all__ = [
    "Change",
    "ChangeValue",
    "DeliveryStatus",
    "DeliveryStatusEvent",
    "Entry",
    "InboundMessage",
    "InboundMessageEvent",
    "WebhookEvent",
    "WebhookEventHandler",
    "WebhookIngestor",
]
