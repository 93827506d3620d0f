"""
Events delivered to a WebhookEventHandler.

Each event carries one message or status together with the entry and change
it arrived in, so handlers never walk the raw payload.
"""

from dataclasses import dataclass

from .models import DeliveryStatus, InboundMessage


@dataclass(frozen=True)
class InboundMessageEvent:
    waba_id: str
    phone_number_id: str
    display_phone_number: str
    message: InboundMessage

    @property
    def sender(self) -> str:
        return self.message.from_

    @property
    def text(self) -> str:
        return self.message.text.body if self.message.text else ""


@dataclass(frozen=True)
class DeliveryStatusEvent:
    waba_id: str
    phone_number_id: str
    display_phone_number: str
    status: DeliveryStatus
