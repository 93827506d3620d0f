"""
WhatsApp business asset handler.

Discovers the assets created by embedded signup and wires them up:
- Business accounts linked to the token
- Phone numbers of a WhatsApp Business Account
- App subscription for webhook delivery
- WhatsApp business profile of a phone number
"""

from typing import Any

from pydantic import ValidationError as PydanticValidationError

from wasignup.core.errors import UpstreamError
from wasignup.core.logging.logger import get_logger
from wasignup.messaging.whatsapp.client.graph_client import (
    GraphClient,
    GraphResponse,
    path_segment,
)
from wasignup.messaging.whatsapp.models.business_models import (
    RemoteBusinessAccount,
    RemotePhoneNumber,
)
from wasignup.messaging.whatsapp.utils.error_helpers import (
    describe_graph_error,
    upstream_error,
)

BUSINESS_FIELDS = "id,name,verification_status,profile_picture_uri"
PHONE_NUMBER_FIELDS = (
    "id,display_phone_number,verified_name,quality_rating,status,"
    "code_verification_status"
)

# Fields the app subscribes to on every onboarded WABA
SUBSCRIBED_FIELDS = (
    "messages",
    "message_deliveries",
    "message_reads",
    "message_echoes",
    "message_template_status_update",
    "account_alerts",
)


def _data_list(response: GraphResponse, operation: str) -> list[dict[str, Any]]:
    """Decode the ``data`` collection of a successful response."""
    try:
        payload = response.json()
    except ValueError as err:
        raise UpstreamError(f"failed to decode {operation} response: {err}") from err

    data = payload.get("data") if isinstance(payload, dict) else None
    return data if isinstance(data, list) else []


class WhatsAppBusinessHandler:
    """
    Handler for business account, phone number, webhook and profile calls.

    Provides composition-based discovery functionality for WhatsAppPlatform.
    """

    def __init__(self, client: GraphClient, webhook_callback_url: str = ""):
        self.client = client
        self.webhook_callback_url = webhook_callback_url
        self.logger = get_logger(__name__)

    async def get_business_accounts(
        self, access_token: str
    ) -> list[RemoteBusinessAccount]:
        """
        Fetch business accounts associated with the token.

        An empty result is normal right after embedded signup: the WABA exists
        but is not listed under ``me/businesses`` yet. In that case the identity
        endpoint is probed for diagnostics and an empty list is returned; the
        caller is expected to supply the WABA id out of band.
        """
        response = await self.client.get(
            "me/businesses", access_token, params={"fields": BUSINESS_FIELDS}
        )
        if not response.ok:
            raise upstream_error("business accounts", response.status, response.body)

        try:
            accounts = [
                RemoteBusinessAccount.model_validate(item)
                for item in _data_list(response, "business accounts")
            ]
        except PydanticValidationError as err:
            raise UpstreamError(
                f"failed to decode business accounts response: {err}"
            ) from err

        self.logger.info(f"Found {len(accounts)} business accounts")
        if accounts:
            return accounts

        await self._probe_identity(access_token)
        return []

    async def _probe_identity(self, access_token: str) -> None:
        """Log who the token belongs to. Never fabricates an account."""
        try:
            response = await self.client.get(
                "me", access_token, params={"fields": "id,name"}
            )
        except UpstreamError as err:
            self.logger.warning(f"Identity probe failed: {err}")
            return

        if not response.ok:
            self.logger.warning(
                f"Identity probe failed ({response.status}): "
                f"{describe_graph_error(response.body)}"
            )
            return

        try:
            identity = response.json()
        except ValueError:
            identity = None
        if not isinstance(identity, dict):
            identity = {}
        self.logger.info(
            f"No business accounts listed for user id={identity.get('id')} "
            f"name={identity.get('name')}; waiting for an out-of-band WABA id"
        )

    async def get_phone_numbers(
        self, access_token: str, waba_id: str
    ) -> list[RemotePhoneNumber]:
        """Fetch the phone numbers registered under a WABA."""
        response = await self.client.get(
            f"{path_segment(waba_id)}/phone_numbers",
            access_token,
            params={"fields": PHONE_NUMBER_FIELDS},
        )
        if not response.ok:
            raise upstream_error("phone numbers", response.status, response.body)

        try:
            return [
                RemotePhoneNumber.model_validate(item)
                for item in _data_list(response, "phone numbers")
            ]
        except PydanticValidationError as err:
            raise UpstreamError(
                f"failed to decode phone numbers response: {err}"
            ) from err

    async def subscribe_webhooks(self, access_token: str, waba_id: str) -> None:
        """
        Subscribe the app to webhook delivery for a WABA.

        Raises:
            UpstreamError: If no callback URL is configured or the call fails
        """
        if not self.webhook_callback_url:
            raise UpstreamError("webhook callback URL not configured")

        response = await self.client.post_json(
            f"{path_segment(waba_id)}/subscribed_apps",
            access_token,
            {"subscribed_fields": list(SUBSCRIBED_FIELDS)},
        )
        if not response.ok:
            raise upstream_error("webhook setup", response.status, response.body)

        self.logger.info(f"Webhooks subscribed for WABA {waba_id}")

    async def get_business_profile(
        self, access_token: str, phone_number_id: str
    ) -> dict[str, Any]:
        """Return the first business profile of a phone number, or ``{}``."""
        response = await self.client.get(
            f"{path_segment(phone_number_id)}/whatsapp_business_profile",
            access_token,
        )
        if not response.ok:
            raise upstream_error("business profile", response.status, response.body)

        data = _data_list(response, "business profile")
        if not data or not isinstance(data[0], dict):
            return {}
        return data[0]
