"""
Onboarded account routes.

Read-only views over the account registry plus a JSON backup export.
"""

from typing import Any

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from wasignup.api.dependencies import get_registry, get_settings
from wasignup.core.config.settings import Settings
from wasignup.core.errors import ValidationError
from wasignup.domain.interfaces.account_repository import IAccountRepository

EXPORT_FILENAME = "whatsapp_accounts.json"

router = APIRouter(prefix="/api/business", tags=["Business Accounts"])


@router.get("/accounts")
async def list_accounts(
    registry: IAccountRepository = Depends(get_registry),
    settings: Settings = Depends(get_settings),
) -> dict[str, Any]:
    accounts = registry.list()
    return {
        "success": True,
        "accounts": [
            account.public_dump(include_token=settings.expose_full_token)
            for account in accounts
        ],
        "count": len(accounts),
    }


@router.get("/account")
async def get_account(
    waba_id: str = Query("", description="WhatsApp Business Account id"),
    registry: IAccountRepository = Depends(get_registry),
    settings: Settings = Depends(get_settings),
) -> dict[str, Any]:
    if not waba_id:
        raise ValidationError("WABA ID is required")
    account = registry.get(waba_id)
    return {
        "success": True,
        "account": account.public_dump(include_token=settings.expose_full_token),
    }


@router.get("/export")
async def export_accounts(
    registry: IAccountRepository = Depends(get_registry),
) -> Response:
    """Download every account, tokens included, as a JSON attachment."""
    return Response(
        content=registry.export(),
        media_type="application/json",
        headers={"Content-Disposition": f"attachment; filename={EXPORT_FILENAME}"},
    )
