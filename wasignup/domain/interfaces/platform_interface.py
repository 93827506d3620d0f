"""
Platform interface for the onboarding flow.

Defines the remote operations the orchestrator needs from the messaging
platform, so the orchestration can run against any implementation (the Graph
API client in production, scripted fakes in tests).
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from wasignup.messaging.whatsapp.models import (
        AccessToken,
        RemoteBusinessAccount,
        RemotePhoneNumber,
        Template,
    )


class IPlatformClient(ABC):
    """
    Remote platform operations used during onboarding.

    Every method raises ``UpstreamError`` on failure unless stated otherwise.
    """

    @abstractmethod
    async def exchange_token(self, auth_code: str, redirect_uri: str) -> "AccessToken":
        """Exchange an authorization code using the ordered strategy table."""

    @abstractmethod
    async def get_business_accounts(
        self, access_token: str
    ) -> list["RemoteBusinessAccount"]:
        """Business accounts of the token; ``[]`` when none are listed yet."""

    @abstractmethod
    async def get_phone_numbers(
        self, access_token: str, waba_id: str
    ) -> list["RemotePhoneNumber"]:
        """Phone numbers registered under a WABA."""

    @abstractmethod
    async def validate_token(self, access_token: str) -> bool:
        """Liveness check; False for a rejected token."""

    @abstractmethod
    async def subscribe_webhooks(self, access_token: str, waba_id: str) -> None:
        """Subscribe the app to the fixed webhook field set."""

    @abstractmethod
    async def get_business_profile(
        self, access_token: str, phone_number_id: str
    ) -> dict[str, Any]:
        """First business profile of a phone number, or ``{}``."""

    @abstractmethod
    async def list_templates(self, access_token: str, waba_id: str) -> list["Template"]:
        """All message templates of a WABA, every page in order."""

    @abstractmethod
    async def send_text_message(
        self, access_token: str, phone_number_id: str, recipient: str, body: str
    ) -> str:
        """Send a text message and return its platform id."""
