"""
WhatsApp webhook payload models.

Only the subset of the Cloud API callback shape this service reads is
modelled. Unknown fields are ignored and missing lists default to empty, so
new platform fields never break parsing.
"""

from pydantic import BaseModel, ConfigDict, Field


class _WebhookModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class TextContent(_WebhookModel):
    body: str = ""


class InboundMessage(_WebhookModel):
    """Message received by an onboarded phone number."""

    id: str = ""
    from_: str = Field(default="", alias="from")
    timestamp: str = ""
    type: str = ""
    text: TextContent | None = None


class DeliveryStatus(_WebhookModel):
    """Delivery update for a message this business sent."""

    id: str = ""
    recipient_id: str = ""
    status: str = ""
    timestamp: str = ""


class ChangeMetadata(_WebhookModel):
    display_phone_number: str = ""
    phone_number_id: str = ""


class ChangeValue(_WebhookModel):
    messaging_product: str = ""
    metadata: ChangeMetadata = Field(default_factory=ChangeMetadata)
    messages: list[InboundMessage] = Field(default_factory=list)
    statuses: list[DeliveryStatus] = Field(default_factory=list)


class Change(_WebhookModel):
    field: str = ""
    value: ChangeValue = Field(default_factory=ChangeValue)


class Entry(_WebhookModel):
    """One WABA's batch of changes; ``id`` is the WABA id."""

    id: str = ""
    time: int = 0
    changes: list[Change] = Field(default_factory=list)


class WebhookEvent(_WebhookModel):
    """Top-level webhook callback body."""

    object: str = ""
    entry: list[Entry] = Field(default_factory=list)
