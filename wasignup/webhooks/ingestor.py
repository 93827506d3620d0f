"""
Webhook ingestion: verification handshake, parsing and dispatch.

The HTTP layer acknowledges a callback as soon as ``parse`` succeeds and runs
``dispatch`` afterwards, so a slow or failing handler never delays or fails
the acknowledgement.
"""

import json
import secrets

from pydantic import ValidationError as PydanticValidationError

from wasignup.core.errors import ParseError, WebhookVerificationError
from wasignup.core.logging.context import set_request_context
from wasignup.core.logging.logger import get_logger

from .event_handler import WebhookEventHandler
from .events import DeliveryStatusEvent, InboundMessageEvent
from .models import WebhookEvent

SUBSCRIBE_MODE = "subscribe"


class WebhookIngestor:
    """Verifies, parses and dispatches WhatsApp webhook callbacks."""

    def __init__(self, verify_token: str, handler: WebhookEventHandler):
        self.verify_token = verify_token
        self.handler = handler
        self.logger = get_logger(__name__)

    def verify(self, mode: str | None, verify_token: str | None, challenge: str) -> str:
        """
        Answer the subscription handshake.

        Returns:
            The challenge, verbatim

        Raises:
            WebhookVerificationError: Wrong mode, wrong token, or no verify
                token configured
        """
        if not self.verify_token:
            self.logger.warning("Webhook verification rejected: no verify token set")
            raise WebhookVerificationError("webhook verify token not configured")

        if mode != SUBSCRIBE_MODE or not secrets.compare_digest(
            (verify_token or "").encode(), self.verify_token.encode()
        ):
            self.logger.warning(f"Webhook verification failed (mode={mode})")
            raise WebhookVerificationError("webhook verification failed")

        self.logger.info("Webhook verified")
        return challenge

    def parse(self, body: bytes) -> WebhookEvent:
        """
        Decode a callback body.

        Raises:
            ParseError: Body is not JSON or does not fit the event shape
        """
        try:
            data = json.loads(body)
        except (TypeError, ValueError) as err:
            raise ParseError(f"invalid webhook payload: {err}") from err

        if not isinstance(data, dict):
            raise ParseError("invalid webhook payload: expected a JSON object")

        try:
            return WebhookEvent.model_validate(data)
        except PydanticValidationError as err:
            raise ParseError(f"invalid webhook payload: {err}") from err

    async def dispatch(self, event: WebhookEvent) -> int:
        """
        Deliver every message and status of an event to the handler.

        Handler failures are logged per event and never propagate.

        Returns:
            Number of events the handler processed without raising
        """
        delivered = 0
        for entry in event.entry:
            for change in entry.changes:
                value = change.value
                phone_id = value.metadata.phone_number_id
                display_phone = value.metadata.display_phone_number

                for message in value.messages:
                    set_request_context(waba_id=entry.id, user_id=message.from_)
                    message_event = InboundMessageEvent(
                        entry.id, phone_id, display_phone, message
                    )
                    if await self._deliver(self.handler.handle_message, message_event):
                        delivered += 1

                for status in value.statuses:
                    set_request_context(waba_id=entry.id, user_id=status.recipient_id)
                    status_event = DeliveryStatusEvent(
                        entry.id, phone_id, display_phone, status
                    )
                    if await self._deliver(self.handler.handle_status, status_event):
                        delivered += 1

        self.logger.debug(f"Dispatched {delivered} webhook events")
        return delivered

    async def _deliver(self, callback, event) -> bool:
        try:
            await callback(event)
            return True
        except Exception as err:
            self.logger.exception(
                f"Webhook handler failed on {type(event).__name__}: {err}"
            )
            return False
