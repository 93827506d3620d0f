"""
WhatsApp webhook routes.

GET answers the subscription handshake; POST acknowledges a callback once it
parses and dispatches it in the background.
"""

from fastapi import APIRouter, BackgroundTasks, Depends, Query, Request
from fastapi.responses import PlainTextResponse

from wasignup.api.dependencies import get_webhook_ingestor
from wasignup.webhooks.ingestor import WebhookIngestor

router = APIRouter(
    prefix="/api/whatsapp",
    tags=["Webhooks"],
    responses={
        400: {"description": "Bad Request - Invalid webhook payload"},
        403: {"description": "Forbidden - Webhook verification failed"},
    },
)


@router.get("/webhooks", response_class=PlainTextResponse)
async def verify_webhook(
    hub_mode: str | None = Query(None, alias="hub.mode"),
    hub_verify_token: str | None = Query(None, alias="hub.verify_token"),
    hub_challenge: str = Query("", alias="hub.challenge"),
    ingestor: WebhookIngestor = Depends(get_webhook_ingestor),
) -> PlainTextResponse:
    challenge = ingestor.verify(hub_mode, hub_verify_token, hub_challenge)
    return PlainTextResponse(content=challenge)


@router.post("/webhooks", response_class=PlainTextResponse)
async def receive_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    ingestor: WebhookIngestor = Depends(get_webhook_ingestor),
) -> PlainTextResponse:
    event = ingestor.parse(await request.body())
    background_tasks.add_task(ingestor.dispatch, event)
    return PlainTextResponse(content="OK")
