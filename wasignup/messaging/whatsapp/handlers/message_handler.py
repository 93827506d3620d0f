"""
WhatsApp text message handler.

Sends a plain text message from an onboarded phone number, used to check that
a freshly onboarded account can actually message.
"""

from wasignup.core.errors import UpstreamError
from wasignup.core.logging.logger import get_logger
from wasignup.messaging.whatsapp.client.graph_client import GraphClient, path_segment
from wasignup.messaging.whatsapp.utils.error_helpers import upstream_error

SEND_MESSAGE_STATUS = 502


class WhatsAppMessageHandler:
    """Handler for sending text messages."""

    def __init__(self, client: GraphClient):
        self.client = client
        self.logger = get_logger(__name__)

    async def send_text(
        self,
        access_token: str,
        phone_number_id: str,
        recipient: str,
        body: str,
    ) -> str:
        """
        Send a text message.

        Args:
            access_token: Token of the onboarded account
            phone_number_id: Sending phone number id
            recipient: Recipient phone number in E.164 format
            body: Message text

        Returns:
            Platform message id

        Raises:
            UpstreamError: If the platform rejects the message
        """
        payload = {
            "messaging_product": "whatsapp",
            "to": recipient,
            "type": "text",
            "text": {"body": body},
        }
        response = await self.client.post_json(
            f"{path_segment(phone_number_id)}/messages", access_token, payload
        )
        if not response.ok:
            raise upstream_error(
                "send message",
                response.status,
                response.body,
                status_code=SEND_MESSAGE_STATUS,
            )

        try:
            messages = response.json().get("messages") or []
            message_id = messages[0].get("id", "") if messages else ""
        except (ValueError, AttributeError) as err:
            raise UpstreamError(
                f"failed to decode send message response: {err}",
                status_code=SEND_MESSAGE_STATUS,
            ) from err

        self.logger.info(f"Text message {message_id} sent to {recipient}")
        return message_id
