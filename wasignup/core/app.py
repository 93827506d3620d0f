"""
FastAPI application factory.

The lifespan owns every long-lived resource: the pooled aiohttp session, the
account registry, the platform client, the onboarding orchestrator and the
webhook ingestor. They are kept on ``app.state`` and reach routes through
dependencies.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import aiohttp
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from wasignup.api.middleware import (
    ErrorHandlerMiddleware,
    RequestLoggingMiddleware,
    register_exception_handlers,
)
from wasignup.api.routes import (
    business_router,
    health_router,
    onboarding_router,
    webhooks_router,
)
from wasignup.core.config.settings import Settings
from wasignup.core.logging.logger import get_app_logger, setup_app_logging
from wasignup.domain.interfaces.account_repository import IAccountRepository
from wasignup.domain.interfaces.platform_interface import IPlatformClient
from wasignup.messaging.whatsapp.platform.whatsapp_platform import WhatsAppPlatform
from wasignup.onboarding.orchestrator import OnboardingOrchestrator
from wasignup.persistence.memory.account_registry import AccountRegistry
from wasignup.webhooks.event_handler import WebhookEventHandler
from wasignup.webhooks.ingestor import WebhookIngestor

CORS_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
CORS_HEADERS = ["Content-Type", "Authorization", "X-Requested-With"]


def create_http_session(settings: Settings) -> aiohttp.ClientSession:
    """Pooled session shared by every outbound Graph API call."""
    connector = aiohttp.TCPConnector(
        limit=100,
        keepalive_timeout=settings.http_keepalive,
        enable_cleanup_closed=True,
    )
    timeout = aiohttp.ClientTimeout(
        total=settings.http_timeout, connect=settings.http_connect_timeout
    )
    return aiohttp.ClientSession(connector=connector, timeout=timeout)


def create_app(
    settings: Settings | None = None,
    *,
    platform: IPlatformClient | None = None,
    registry: IAccountRepository | None = None,
    event_handler: WebhookEventHandler | None = None,
) -> FastAPI:
    """
    Build the onboarding service.

    Args:
        settings: Service settings (defaults to the process-wide settings)
        platform: Platform client to use instead of the Graph API one
        registry: Account store to use instead of a fresh in-memory registry
        event_handler: Webhook event handler (defaults to the logging one)

    Returns:
        Configured FastAPI application; resources are created on startup
    """
    if settings is None:
        from wasignup.core.config.settings import settings

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        setup_app_logging(settings)
        logger = get_app_logger()
        logger.info(f"Starting wasignup v{settings.version} ({settings.environment})")

        settings.validate_platform_credentials()
        if not settings.has_webhook_callback:
            logger.warning(
                "WEBHOOK_CALLBACK_URL not set - webhook subscription will be skipped"
            )
        if not settings.webhook_verify_token:
            logger.warning(
                "WEBHOOK_VERIFY_TOKEN not set - webhook verification will be rejected"
            )

        session = None
        active_platform = platform
        if active_platform is None:
            session = create_http_session(settings)
            active_platform = WhatsAppPlatform.from_settings(session, settings)
            logger.info(
                f"HTTP session created - connections: 100, "
                f"keepalive: {settings.http_keepalive}s, "
                f"timeout: {settings.http_timeout}s"
            )
        active_registry = registry if registry is not None else AccountRegistry()

        app.state.settings = settings
        app.state.http_session = session
        app.state.registry = active_registry
        app.state.orchestrator = OnboardingOrchestrator(
            active_platform, active_registry, settings
        )
        app.state.webhook_ingestor = WebhookIngestor(
            settings.webhook_verify_token, event_handler or WebhookEventHandler()
        )
        logger.info(f"Serving on port {settings.port}, API {settings.api_version}")

        try:
            yield
        finally:
            if session is not None:
                await session.close()
                logger.info("HTTP session closed")
            if registry is None:
                active_registry.close()
            logger.info("wasignup shutdown complete")

    app = FastAPI(
        title="wasignup",
        description="WhatsApp Business embedded signup backend",
        version=settings.version,
        lifespan=lifespan,
    )
    # Available to middleware before startup completes
    app.state.settings = settings

    # Last added runs outermost
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(ErrorHandlerMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=CORS_METHODS,
        allow_headers=CORS_HEADERS,
    )
    register_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(onboarding_router)
    app.include_router(business_router)
    app.include_router(webhooks_router)

    return app
