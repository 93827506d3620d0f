"""
Embedded signup routes.

- POST /api/whatsapp/setup: onboard a business from an authorization code
- POST /api/whatsapp/templates: list a WABA's message templates
- POST /api/whatsapp/test-message: send a text from an onboarded account
"""

from typing import Any

from fastapi import APIRouter, Depends

from wasignup.api.dependencies import get_orchestrator, get_settings
from wasignup.core.config.settings import Settings
from wasignup.core.logging.logger import get_api_logger
from wasignup.onboarding.models import (
    OnboardingRequest,
    SendTestMessageRequest,
    TemplatesRequest,
)
from wasignup.onboarding.orchestrator import OnboardingOrchestrator

logger = get_api_logger(__name__)

router = APIRouter(
    prefix="/api/whatsapp",
    tags=["Onboarding"],
    responses={
        400: {"description": "Bad Request - Missing input or rejected code"},
        404: {"description": "Not Found - No business account or phone numbers"},
        500: {"description": "Internal Server Error"},
        504: {"description": "Gateway Timeout - Onboarding deadline exceeded"},
    },
)


@router.post("/setup")
async def setup_account(
    request: OnboardingRequest,
    orchestrator: OnboardingOrchestrator = Depends(get_orchestrator),
    settings: Settings = Depends(get_settings),
) -> dict[str, Any]:
    """Run the full onboarding sequence for an embedded signup code."""
    result = await orchestrator.onboard(request)
    return result.to_response(include_token=settings.expose_full_token)


@router.post("/templates")
async def list_templates(
    request: TemplatesRequest,
    orchestrator: OnboardingOrchestrator = Depends(get_orchestrator),
) -> dict[str, Any]:
    result = await orchestrator.list_templates(request)
    return result.to_response()


@router.post("/test-message")
async def send_test_message(
    request: SendTestMessageRequest,
    orchestrator: OnboardingOrchestrator = Depends(get_orchestrator),
) -> dict[str, Any]:
    message_id = await orchestrator.send_test_message(request)
    logger.info(f"Test message {message_id} sent for WABA {request.waba_id}")
    return {"success": True, "message_id": message_id}
