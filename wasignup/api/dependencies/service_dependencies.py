"""
Service dependency injection for API routes.

Everything is created in the application lifespan and kept on ``app.state``;
these helpers hand it to the routes.
"""

from fastapi import Request

from wasignup.core.config.settings import Settings
from wasignup.domain.interfaces.account_repository import IAccountRepository
from wasignup.onboarding.orchestrator import OnboardingOrchestrator
from wasignup.webhooks.ingestor import WebhookIngestor


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_registry(request: Request) -> IAccountRepository:
    """Account registry created at startup."""
    return request.app.state.registry


def get_orchestrator(request: Request) -> OnboardingOrchestrator:
    return request.app.state.orchestrator


def get_webhook_ingestor(request: Request) -> WebhookIngestor:
    return request.app.state.webhook_ingestor
