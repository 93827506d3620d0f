"""
Request and result models for the onboarding flows.

Field names are snake_case to match the JSON the frontend already sends.
"""

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from wasignup.domain.models.account import Account
from wasignup.messaging.whatsapp.models import AccessToken, Template

STANDARD_NEXT_STEPS = (
    "Business account is ready to send messages",
    "Configure message templates in WhatsApp Manager",
    "Test messaging functionality",
)
MANUAL_WEBHOOK_STEP = "Manual webhook configuration may be required"


class OnboardingRequest(BaseModel):
    """Payload posted by the embedded signup frontend."""

    model_config = ConfigDict(extra="ignore")

    authorization_code: str = ""
    redirect_uri: str = ""
    waba_id: str = ""
    phone_number_id: str = ""
    business_id: str = ""


class TemplatesRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    authorization_code: str = ""
    redirect_uri: str = ""
    waba_id: str = ""


class SendTestMessageRequest(BaseModel):
    """Send a text message from an already onboarded account."""

    model_config = ConfigDict(extra="ignore")

    waba_id: str = ""
    to: str = ""
    message: str = "Hello from WhatsApp Business Platform!"
    phone_number_id: str = ""


class TokenInfo(BaseModel):
    """Token summary returned to the caller instead of the raw token."""

    access_token_length: int
    access_token_preview: str
    token_type: str = ""
    expires_in: int = 0
    token_created_at: datetime
    full_access_token: str | None = None

    @classmethod
    def from_token(
        cls, token: AccessToken, expose_full_token: bool = False
    ) -> "TokenInfo":
        return cls(
            access_token_length=len(token.access_token),
            access_token_preview=token.preview,
            token_type=token.token_type,
            expires_in=token.expires_in,
            token_created_at=datetime.now(timezone.utc),
            full_access_token=token.access_token if expose_full_token else None,
        )

    def to_response(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class OnboardingResult(BaseModel):
    """Outcome of a successful onboarding run."""

    account: Account
    setup_status: str = "complete"
    next_steps: list[str] = Field(default_factory=list)
    token_info: TokenInfo

    def to_response(self, include_token: bool = False) -> dict[str, Any]:
        """Render the ``/api/whatsapp/setup`` response body."""
        return {
            "success": True,
            "message": "WhatsApp Business Account setup completed successfully",
            "business_info": self.account.public_dump(include_token=include_token),
            "setup_status": self.setup_status,
            "next_steps": list(self.next_steps),
            "token_info": self.token_info.to_response(),
        }


class TemplatesResult(BaseModel):
    templates: list[Template] = Field(default_factory=list)
    token_info: TokenInfo

    def to_response(self) -> dict[str, Any]:
        return {
            "success": True,
            "templates": [t.model_dump(mode="json") for t in self.templates],
            "token_info": self.token_info.to_response(),
        }
