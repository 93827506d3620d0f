"""
Onboarding orchestrator.

Drives the embedded signup sequence end to end:

1. exchange the authorization code for an access token
2. discover the business account (or synthesize one from the request)
3. list its phone numbers
4. subscribe webhooks (best effort)
5. fetch the business profile (best effort)
6. persist the resulting Account

Fatal steps raise SignupError subclasses; best-effort steps only degrade the
result.
"""

import asyncio
import uuid
from datetime import datetime, timedelta, timezone

from wasignup.core.config.settings import Settings
from wasignup.core.errors import (
    NotFoundError,
    SignupError,
    UpstreamError,
    ValidationError,
)
from wasignup.core.logging.context import set_request_context
from wasignup.core.logging.logger import get_logger
from wasignup.domain.interfaces.account_repository import IAccountRepository
from wasignup.domain.interfaces.platform_interface import IPlatformClient
from wasignup.domain.models.account import Account, AccountMetadata, PhoneNumberRecord
from wasignup.messaging.whatsapp.models import AccessToken, RemoteBusinessAccount
from wasignup.messaging.whatsapp.utils.error_helpers import is_authentication_error

from .models import (
    MANUAL_WEBHOOK_STEP,
    STANDARD_NEXT_STEPS,
    OnboardingRequest,
    OnboardingResult,
    SendTestMessageRequest,
    TemplatesRequest,
    TemplatesResult,
    TokenInfo,
)

PLACEHOLDER_BUSINESS_NAME = "WhatsApp Business Account (Embedded Signup)"
DEADLINE_STATUS = 504


def new_account_id() -> str:
    return f"ba_{uuid.uuid4().hex}"


class OnboardingOrchestrator:
    """
    Runs onboarding and template flows against a platform client.

    Both collaborators are injected; the orchestrator keeps no state between
    calls and is safe to share across concurrent requests.
    """

    def __init__(
        self,
        platform: IPlatformClient,
        registry: IAccountRepository,
        settings: Settings,
    ):
        self.platform = platform
        self.registry = registry
        self.settings = settings
        self.logger = get_logger(__name__)

    async def onboard(
        self, request: OnboardingRequest, timeout: float | None = None
    ) -> OnboardingResult:
        """
        Onboard a business from an embedded signup authorization code.

        Args:
            request: Signup payload from the frontend
            timeout: Overall deadline in seconds (defaults to ONBOARDING_TIMEOUT)

        Raises:
            ValidationError: If the authorization code is missing
            UpstreamError: Token exchange or discovery failed, or the deadline
                expired (504)
            NotFoundError: No business account or no phone numbers
            PersistenceError: The account could not be stored
        """
        if not request.authorization_code:
            raise ValidationError("Authorization code is required")

        deadline = timeout if timeout is not None else self.settings.onboarding_timeout
        try:
            return await asyncio.wait_for(self._run_onboarding(request), deadline)
        except TimeoutError as err:
            self.logger.error(f"Onboarding timed out after {deadline}s")
            raise UpstreamError(
                f"onboarding did not complete within {deadline}s",
                status_code=DEADLINE_STATUS,
            ) from err

    async def _run_onboarding(self, request: OnboardingRequest) -> OnboardingResult:
        if request.waba_id:
            set_request_context(waba_id=request.waba_id)

        redirect_uri = request.redirect_uri or self.settings.facebook_redirect_uri
        self.logger.info(
            f"Starting onboarding (redirect_uri={redirect_uri or '<none>'}, "
            f"business_id={request.business_id or '<none>'})"
        )

        token = await self.platform.exchange_token(
            request.authorization_code, redirect_uri
        )
        self.logger.info(
            f"Token exchanged: length={len(token.access_token)}, "
            f"type={token.token_type}, expires_in={token.expires_in}"
        )

        business = await self._discover_business(token, request.waba_id)
        set_request_context(waba_id=business.id)

        phones = await self.platform.get_phone_numbers(token.access_token, business.id)
        if not phones:
            raise NotFoundError("No phone numbers found for this business account")
        self.logger.info(f"Found {len(phones)} phone numbers")

        webhooks_enabled = True
        try:
            await self.platform.subscribe_webhooks(token.access_token, business.id)
        except SignupError as err:
            webhooks_enabled = False
            self.logger.warning(f"Webhook subscription failed: {err}")

        try:
            profile = await self.platform.get_business_profile(
                token.access_token, phones[0].id
            )
        except SignupError as err:
            profile = {}
            self.logger.warning(f"Business profile unavailable: {err}")

        account = Account(
            id=new_account_id(),
            waba_id=business.id,
            business_name=business.name,
            phone_numbers=[PhoneNumberRecord.from_remote(p) for p in phones],
            access_token=token.access_token,
            token_expires_at=datetime.now(timezone.utc)
            + timedelta(seconds=token.expires_in),
            webhooks_enabled=webhooks_enabled,
            setup_complete=True,
            metadata=AccountMetadata(
                verification_status=business.verification_status,
                profile_info=profile,
                redirect_uri=redirect_uri,
            ),
        )
        account = self.registry.save(account)
        self.logger.info(f"Account {account.id} onboarded")

        next_steps = list(STANDARD_NEXT_STEPS)
        if not webhooks_enabled:
            next_steps.append(MANUAL_WEBHOOK_STEP)

        return OnboardingResult(
            account=account,
            setup_status="complete",
            next_steps=next_steps,
            token_info=TokenInfo.from_token(token, self.settings.expose_full_token),
        )

    async def _discover_business(
        self, token: AccessToken, requested_waba_id: str
    ) -> RemoteBusinessAccount:
        """First business account of the token, else a placeholder for the WABA."""
        businesses = await self.platform.get_business_accounts(token.access_token)
        if businesses:
            if len(businesses) > 1:
                self.logger.info(
                    f"Token sees {len(businesses)} businesses, using {businesses[0].id}"
                )
            return businesses[0]

        if requested_waba_id:
            # Embedded signup tokens often cannot list businesses
            self.logger.info(
                f"No businesses listed, continuing with WABA {requested_waba_id}"
            )
            return RemoteBusinessAccount(
                id=requested_waba_id,
                name=PLACEHOLDER_BUSINESS_NAME,
                verification_status="pending",
            )

        raise NotFoundError("No business accounts found")

    async def list_templates(self, request: TemplatesRequest) -> TemplatesResult:
        """
        List the message templates of a WABA.

        The code is exchanged with the request's redirect URI as given; no
        configured fallback applies here.
        """
        if not request.waba_id:
            raise ValidationError("WABA ID is required")
        if not request.authorization_code:
            raise ValidationError("Authorization code is required")

        set_request_context(waba_id=request.waba_id)
        token = await self.platform.exchange_token(
            request.authorization_code, request.redirect_uri
        )
        templates = await self.platform.list_templates(
            token.access_token, request.waba_id
        )
        self.logger.info(f"Fetched {len(templates)} templates")

        return TemplatesResult(
            templates=templates,
            token_info=TokenInfo.from_token(token, self.settings.expose_full_token),
        )

    async def send_test_message(self, request: SendTestMessageRequest) -> str:
        """
        Send a text message from a stored account.

        Returns:
            Platform message id
        """
        if not request.waba_id:
            raise ValidationError("WABA ID is required")
        if not request.to:
            raise ValidationError("Recipient phone number is required")

        set_request_context(waba_id=request.waba_id)
        account = self.registry.get(request.waba_id)

        phone_number_id = request.phone_number_id
        if not phone_number_id:
            if not account.phone_numbers:
                raise NotFoundError("Account has no phone numbers")
            phone_number_id = account.phone_numbers[0].id

        try:
            return await self.platform.send_text_message(
                account.access_token, phone_number_id, request.to, request.message
            )
        except UpstreamError as err:
            if is_authentication_error(err):
                self.logger.warning(
                    "Stored access token was rejected; the business must onboard again"
                )
            raise
