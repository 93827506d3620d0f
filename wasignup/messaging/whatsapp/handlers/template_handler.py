"""
WhatsApp template listing handler.

Lists the message templates of a WABA, following the Graph ``paging.next``
cursor until the platform reports no further page.
"""

from pydantic import ValidationError as PydanticValidationError

from wasignup.core.errors import UpstreamError
from wasignup.core.logging.logger import get_logger
from wasignup.messaging.whatsapp.client.graph_client import GraphClient, path_segment
from wasignup.messaging.whatsapp.models.template_models import Template
from wasignup.messaging.whatsapp.utils.error_helpers import upstream_error

TEMPLATE_FIELDS = "id,name,language,status,category,quality_score"
TEMPLATE_PAGE_SIZE = 100

# Template fetch failures are a bad gateway, not the caller's fault
TEMPLATES_STATUS = 502


class WhatsAppTemplateHandler:
    """Handler for WhatsApp message template listing."""

    def __init__(self, client: GraphClient):
        self.client = client
        self.logger = get_logger(__name__)

    async def list_templates(self, access_token: str, waba_id: str) -> list[Template]:
        """
        Fetch every message template of a WABA.

        Pages are accumulated in the order the platform returns them.

        Raises:
            UpstreamError: If any page fails or cannot be decoded
        """
        response = await self.client.get(
            f"{path_segment(waba_id)}/message_templates",
            access_token,
            params={"fields": TEMPLATE_FIELDS, "limit": TEMPLATE_PAGE_SIZE},
        )

        templates: list[Template] = []
        pages = 0
        while True:
            if not response.ok:
                raise upstream_error(
                    "templates",
                    response.status,
                    response.body,
                    status_code=TEMPLATES_STATUS,
                )

            try:
                payload = response.json()
                page = [
                    Template.model_validate(item)
                    for item in payload.get("data") or []
                ]
                next_url = (payload.get("paging") or {}).get("next")
            except (ValueError, AttributeError, PydanticValidationError) as err:
                raise UpstreamError(
                    f"decode templates: {err}", status_code=TEMPLATES_STATUS
                ) from err

            templates.extend(page)
            pages += 1

            if not next_url:
                break
            response = await self.client.get_url(next_url, access_token)

        self.logger.info(
            f"Fetched {len(templates)} templates in {pages} page(s) for WABA {waba_id}"
        )
        return templates
