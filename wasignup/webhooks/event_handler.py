"""
Webhook event handler extension point.

Subclass WebhookEventHandler and override ``process_message`` and/or
``process_status`` to act on webhook events. The base class logs every event
and keeps simple counters before handing it to the override.
"""

from collections import Counter
from datetime import datetime, timezone
from typing import Any

from wasignup.core.logging.logger import get_logger

from .events import DeliveryStatusEvent, InboundMessageEvent

TEXT_PREVIEW_LENGTH = 50


class WebhookEventHandler:
    """
    Base handler for inbound webhook events.

    The ingestor calls ``handle_message`` and ``handle_status``; both run the
    built-in logging and stats first, then the user hook.
    """

    def __init__(self):
        # Logger named after the subclass module, not this one
        self.logger = get_logger(self.__class__.__module__)
        self._stats: dict[str, Any] = self._empty_stats()

    @staticmethod
    def _empty_stats() -> dict[str, Any]:
        return {
            "total_messages": 0,
            "total_statuses": 0,
            "messages_by_type": Counter(),
            "statuses_by_value": Counter(),
            "last_event_at": None,
        }

    async def handle_message(self, event: InboundMessageEvent) -> None:
        self._stats["total_messages"] += 1
        self._stats["messages_by_type"][event.message.type or "unknown"] += 1
        self._stats["last_event_at"] = datetime.now(timezone.utc)

        preview = event.text[:TEXT_PREVIEW_LENGTH]
        self.logger.info(
            f"Message {event.message.id} ({event.message.type}) from {event.sender} "
            f"to {event.display_phone_number}: {preview!r}"
        )
        await self.process_message(event)

    async def process_message(self, event: InboundMessageEvent) -> None:
        """Custom message processing. No-op by default."""
        pass

    async def handle_status(self, event: DeliveryStatusEvent) -> None:
        self._stats["total_statuses"] += 1
        self._stats["statuses_by_value"][event.status.status or "unknown"] += 1
        self._stats["last_event_at"] = datetime.now(timezone.utc)

        self.logger.info(
            f"Message {event.status.id} to {event.status.recipient_id} "
            f"is {event.status.status}"
        )
        await self.process_status(event)

    async def process_status(self, event: DeliveryStatusEvent) -> None:
        """Custom status processing. No-op by default."""
        pass

    def get_stats(self) -> dict[str, Any]:
        """Snapshot of the event counters."""
        return {
            "total_messages": self._stats["total_messages"],
            "total_statuses": self._stats["total_statuses"],
            "messages_by_type": dict(self._stats["messages_by_type"]),
            "statuses_by_value": dict(self._stats["statuses_by_value"]),
            "last_event_at": self._stats["last_event_at"],
        }

    def reset_stats(self) -> None:
        self._stats = self._empty_stats()
