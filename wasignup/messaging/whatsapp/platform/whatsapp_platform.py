"""
WhatsApp implementation of the IPlatformClient interface.

Composes the per-concern handlers over one GraphClient:
- WhatsAppOAuthHandler: token exchange and validation
- WhatsAppBusinessHandler: accounts, phone numbers, webhooks, profile
- WhatsAppTemplateHandler: paginated template listing
- WhatsAppMessageHandler: text messages
"""

from typing import Any

import aiohttp

from wasignup.core.config.settings import Settings
from wasignup.domain.interfaces.platform_interface import IPlatformClient
from wasignup.messaging.whatsapp.client.graph_client import GraphClient
from wasignup.messaging.whatsapp.handlers.business_handler import (
    WhatsAppBusinessHandler,
)
from wasignup.messaging.whatsapp.handlers.message_handler import (
    WhatsAppMessageHandler,
)
from wasignup.messaging.whatsapp.handlers.oauth_handler import WhatsAppOAuthHandler
from wasignup.messaging.whatsapp.handlers.template_handler import (
    WhatsAppTemplateHandler,
)
from wasignup.messaging.whatsapp.models import (
    AccessToken,
    RemoteBusinessAccount,
    RemotePhoneNumber,
    Template,
)


class WhatsAppPlatform(IPlatformClient):
    """Graph API backed platform client."""

    def __init__(
        self,
        client: GraphClient,
        oauth_handler: WhatsAppOAuthHandler,
        business_handler: WhatsAppBusinessHandler,
        template_handler: WhatsAppTemplateHandler,
        message_handler: WhatsAppMessageHandler,
    ):
        self.client = client
        self.oauth_handler = oauth_handler
        self.business_handler = business_handler
        self.template_handler = template_handler
        self.message_handler = message_handler

    @classmethod
    def from_settings(
        cls, session: aiohttp.ClientSession, settings: Settings
    ) -> "WhatsAppPlatform":
        """Wire a platform client and its handlers from settings."""
        client = GraphClient(
            session=session,
            api_version=settings.api_version,
            base_url=settings.base_url,
        )
        return cls(
            client=client,
            oauth_handler=WhatsAppOAuthHandler(
                client, settings.facebook_app_id, settings.facebook_app_secret
            ),
            business_handler=WhatsAppBusinessHandler(
                client, settings.webhook_callback_url
            ),
            template_handler=WhatsAppTemplateHandler(client),
            message_handler=WhatsAppMessageHandler(client),
        )

    async def exchange_token(self, auth_code: str, redirect_uri: str) -> AccessToken:
        return await self.oauth_handler.exchange_token(auth_code, redirect_uri)

    async def validate_token(self, access_token: str) -> bool:
        return await self.oauth_handler.validate_token(access_token)

    async def get_business_accounts(
        self, access_token: str
    ) -> list[RemoteBusinessAccount]:
        return await self.business_handler.get_business_accounts(access_token)

    async def get_phone_numbers(
        self, access_token: str, waba_id: str
    ) -> list[RemotePhoneNumber]:
        return await self.business_handler.get_phone_numbers(access_token, waba_id)

    async def subscribe_webhooks(self, access_token: str, waba_id: str) -> None:
        await self.business_handler.subscribe_webhooks(access_token, waba_id)

    async def get_business_profile(
        self, access_token: str, phone_number_id: str
    ) -> dict[str, Any]:
        return await self.business_handler.get_business_profile(
            access_token, phone_number_id
        )

    async def list_templates(self, access_token: str, waba_id: str) -> list[Template]:
        return await self.template_handler.list_templates(access_token, waba_id)

    async def send_text_message(
        self, access_token: str, phone_number_id: str, recipient: str, body: str
    ) -> str:
        return await self.message_handler.send_text(
            access_token, phone_number_id, recipient, body
        )
