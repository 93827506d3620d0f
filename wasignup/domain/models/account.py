"""
Onboarded business account models.

An Account is the persisted outcome of one onboarding run, keyed by its WhatsApp
Business Account id (``waba_id``).
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from wasignup.messaging.whatsapp.models.business_models import RemotePhoneNumber


class PhoneNumberRecord(BaseModel):
    """Phone number as stored on an Account."""

    id: str
    phone_number: str = ""
    display_name: str = ""
    status: str = ""
    quality_rating: str = ""
    is_verified: bool = False

    @classmethod
    def from_remote(cls, phone: RemotePhoneNumber) -> "PhoneNumberRecord":
        """Project a Graph phone number onto the stored shape."""
        return cls(
            id=phone.id,
            phone_number=phone.display_phone_number,
            display_name=phone.verified_name,
            status=phone.status,
            quality_rating=phone.quality_rating,
            is_verified=phone.is_verified,
        )


class AccountMetadata(BaseModel):
    """Facts captured while onboarding."""

    verification_status: str = ""
    profile_info: dict[str, Any] = Field(default_factory=dict)
    setup_source: str = "embedded_signup"
    redirect_uri: str = ""


class Account(BaseModel):
    """A WhatsApp Business Account onboarded through embedded signup.

    ``created_at`` and ``updated_at`` are owned by the AccountRegistry.
    """

    id: str
    waba_id: str = Field(..., min_length=1)
    business_name: str = ""
    phone_numbers: list[PhoneNumberRecord] = Field(default_factory=list)
    access_token: str = ""
    token_expires_at: datetime | None = None
    webhooks_enabled: bool = False
    setup_complete: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None
    metadata: AccountMetadata = Field(default_factory=AccountMetadata)

    def public_dump(self, include_token: bool = False) -> dict[str, Any]:
        """JSON-ready dict for API responses; the token is left out by default."""
        exclude = None if include_token else {"access_token"}
        return self.model_dump(mode="json", exclude=exclude)
