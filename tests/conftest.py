"""
Pytest configuration and common fixtures for wasignup tests.

Provides a scripted aiohttp session for the Graph client, a scripted platform
for the orchestrator and settings built from a clean test environment.
"""

import asyncio
import json
from typing import Any

import pytest

from wasignup.core.config.settings import Settings
from wasignup.core.logging.context import clear_request_context
from wasignup.domain.interfaces.platform_interface import IPlatformClient
from wasignup.messaging.whatsapp.client.graph_client import GraphClient
from wasignup.messaging.whatsapp.models import (
    AccessToken,
    RemoteBusinessAccount,
    RemotePhoneNumber,
    Template,
)
from wasignup.persistence.memory.account_registry import AccountRegistry

TEST_BASE_URL = "https://graph.test/"
TEST_API_VERSION = "v23.0"


class FakeResponse:
    """Async context manager standing in for an aiohttp response."""

    def __init__(self, status: int, body: str):
        self.status = status
        self._body = body

    async def text(self) -> str:
        return self._body

    async def __aenter__(self) -> "FakeResponse":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        return None


class FakeSession:
    """
    Scripted replacement for ``aiohttp.ClientSession``.

    Responses are consumed in the order they were queued; every request is
    recorded in ``calls`` as ``{"method", "url", **kwargs}``.
    """

    def __init__(self):
        self._script: list[Any] = []
        self.calls: list[dict[str, Any]] = []

    def queue(self, status: int, body: Any = "") -> "FakeSession":
        if not isinstance(body, str):
            body = json.dumps(body)
        self._script.append(FakeResponse(status, body))
        return self

    def queue_error(self, error: Exception) -> "FakeSession":
        self._script.append(error)
        return self

    def request(self, method: str, url: str, **kwargs) -> FakeResponse:
        self.calls.append({"method": method, "url": url, **kwargs})
        if not self._script:
            raise AssertionError(f"unexpected request: {method} {url}")
        item = self._script.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    @property
    def remaining(self) -> int:
        return len(self._script)


class FakePlatform(IPlatformClient):
    """Scripted platform client; set attributes to shape each step."""

    def __init__(self):
        self.token = AccessToken(
            access_token="EAAG" + "x" * 60, token_type="bearer", expires_in=5184000
        )
        self.exchange_error: Exception | None = None
        self.exchange_delay = 0.0
        self.businesses = [
            RemoteBusinessAccount(
                id="waba-1", name="Acme Foods", verification_status="verified"
            )
        ]
        self.phones = [
            RemotePhoneNumber(
                id="phone-1",
                display_phone_number="+1 555 0100",
                verified_name="Acme",
                quality_rating="GREEN",
                status="CONNECTED",
                code_verification_status="VERIFIED",
            )
        ]
        self.subscribe_error: Exception | None = None
        self.profile: dict[str, Any] = {"about": "Fresh food"}
        self.profile_error: Exception | None = None
        self.templates: list[Template] = []
        self.send_error: Exception | None = None
        self.message_id = "wamid.TEST"
        self.calls: list[tuple] = []

    async def exchange_token(self, auth_code: str, redirect_uri: str) -> AccessToken:
        self.calls.append(("exchange_token", auth_code, redirect_uri))
        if self.exchange_delay:
            await asyncio.sleep(self.exchange_delay)
        if self.exchange_error:
            raise self.exchange_error
        return self.token

    async def get_business_accounts(self, access_token: str):
        self.calls.append(("get_business_accounts", access_token))
        return list(self.businesses)

    async def get_phone_numbers(self, access_token: str, waba_id: str):
        self.calls.append(("get_phone_numbers", waba_id))
        return list(self.phones)

    async def validate_token(self, access_token: str) -> bool:
        self.calls.append(("validate_token", access_token))
        return True

    async def subscribe_webhooks(self, access_token: str, waba_id: str) -> None:
        self.calls.append(("subscribe_webhooks", waba_id))
        if self.subscribe_error:
            raise self.subscribe_error

    async def get_business_profile(self, access_token: str, phone_number_id: str):
        self.calls.append(("get_business_profile", phone_number_id))
        if self.profile_error:
            raise self.profile_error
        return dict(self.profile)

    async def list_templates(self, access_token: str, waba_id: str):
        self.calls.append(("list_templates", waba_id))
        return list(self.templates)

    async def send_text_message(
        self, access_token: str, phone_number_id: str, recipient: str, body: str
    ) -> str:
        self.calls.append(
            ("send_text_message", access_token, phone_number_id, recipient, body)
        )
        if self.send_error:
            raise self.send_error
        return self.message_id

    def called(self, name: str) -> list[tuple]:
        return [call for call in self.calls if call[0] == name]


# Environment setup for tests
@pytest.fixture(autouse=True)
def setup_test_env(monkeypatch):
    """Set up a deterministic test environment."""
    monkeypatch.setenv("FACEBOOK_APP_ID", "test-app-id")
    monkeypatch.setenv("FACEBOOK_APP_SECRET", "test-app-secret")
    monkeypatch.setenv("FACEBOOK_REDIRECT_URI", "https://app.test/callback")
    monkeypatch.setenv("WEBHOOK_VERIFY_TOKEN", "test-verify-token")
    monkeypatch.setenv("WEBHOOK_CALLBACK_URL", "https://api.test/webhooks")
    monkeypatch.setenv("CLIENT_URL", "http://localhost:3001")
    monkeypatch.setenv("ALLOWED_ORIGINS", "")
    monkeypatch.setenv("LOG_LEVEL", "INFO")
    monkeypatch.setenv("ENVIRONMENT", "PROD")
    monkeypatch.setenv("EXPOSE_FULL_TOKEN", "false")
    monkeypatch.setenv("ONBOARDING_TIMEOUT", "60")
    yield
    clear_request_context()


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def graph_client(fake_session: FakeSession) -> GraphClient:
    return GraphClient(
        session=fake_session, api_version=TEST_API_VERSION, base_url=TEST_BASE_URL
    )


@pytest.fixture
def fake_platform() -> FakePlatform:
    return FakePlatform()


@pytest.fixture
def registry():
    registry = AccountRegistry()
    yield registry
    registry.close()
