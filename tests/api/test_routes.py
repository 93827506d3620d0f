"""
HTTP API tests through the FastAPI TestClient.
"""

import json

import pytest
from fastapi.testclient import TestClient

from wasignup.core.app import create_app
from wasignup.core.errors import UpstreamError
from wasignup.domain.models.account import Account, PhoneNumberRecord
from wasignup.messaging.whatsapp.models import Template
from wasignup.webhooks import WebhookEventHandler

WEBHOOK_PATH = "/api/whatsapp/webhooks"


class CollectingHandler(WebhookEventHandler):
    def __init__(self):
        super().__init__()
        self.message_ids: list[str] = []

    async def process_message(self, event) -> None:
        self.message_ids.append(event.message.id)


@pytest.fixture
def event_handler() -> CollectingHandler:
    return CollectingHandler()


@pytest.fixture
def client(settings, fake_platform, registry, event_handler):
    app = create_app(
        settings,
        platform=fake_platform,
        registry=registry,
        event_handler=event_handler,
    )
    with TestClient(app) as test_client:
        yield test_client


def store_account(registry, waba_id: str = "waba-1") -> Account:
    return registry.save(
        Account(
            id=f"ba_{waba_id}",
            waba_id=waba_id,
            business_name="Acme",
            access_token="stored-secret",
            phone_numbers=[PhoneNumberRecord(id="phone-1")],
        )
    )


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["timestamp"]


class TestSetup:
    def test_setup_success(self, client, registry):
        response = client.post(
            "/api/whatsapp/setup", json={"authorization_code": "code-1"}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["setup_status"] == "complete"
        assert body["business_info"]["waba_id"] == "waba-1"
        assert "access_token" not in body["business_info"]
        assert "full_access_token" not in body["token_info"]
        assert body["token_info"]["access_token_preview"].endswith("...")
        assert len(body["next_steps"]) == 3
        assert registry.count() == 1

    def test_missing_code(self, client):
        response = client.post("/api/whatsapp/setup", json={})

        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "error": "Authorization code is required",
        }

    def test_invalid_json_body(self, client):
        response = client.post(
            "/api/whatsapp/setup",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_rejected_code(self, client, fake_platform):
        fake_platform.exchange_error = UpstreamError(
            "all token exchange strategies failed, last error: bad code",
            status_code=400,
        )

        response = client.post(
            "/api/whatsapp/setup", json={"authorization_code": "code-1"}
        )

        assert response.status_code == 400
        assert "all token exchange strategies failed" in response.json()["error"]

    def test_no_business_account(self, client, fake_platform):
        fake_platform.businesses = []

        response = client.post(
            "/api/whatsapp/setup", json={"authorization_code": "code-1"}
        )

        assert response.status_code == 404
        assert response.json()["success"] is False

    def test_unexpected_error_is_500_envelope(self, client, fake_platform):
        fake_platform.exchange_error = RuntimeError("boom")

        response = client.post(
            "/api/whatsapp/setup", json={"authorization_code": "code-1"}
        )

        assert response.status_code == 500
        assert response.json()["success"] is False
        assert response.json()["error"] == "Internal server error"


class TestTemplates:
    def test_lists_templates(self, client, fake_platform):
        fake_platform.templates = [Template(id="t1", name="welcome", status="APPROVED")]

        response = client.post(
            "/api/whatsapp/templates",
            json={"authorization_code": "code-1", "waba_id": "waba-1"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["templates"][0]["name"] == "welcome"
        assert "access_token_length" in body["token_info"]

    def test_requires_waba_id(self, client):
        response = client.post(
            "/api/whatsapp/templates", json={"authorization_code": "code-1"}
        )

        assert response.status_code == 400
        assert response.json()["error"] == "WABA ID is required"


class TestTestMessage:
    def test_sends_from_stored_account(self, client, registry, fake_platform):
        store_account(registry)

        response = client.post(
            "/api/whatsapp/test-message",
            json={"waba_id": "waba-1", "to": "+15550100"},
        )

        assert response.status_code == 200
        assert response.json() == {"success": True, "message_id": "wamid.TEST"}
        assert fake_platform.called("send_text_message")[0][1] == "stored-secret"


class TestBusinessAccounts:
    def test_list_accounts_hides_tokens(self, client, registry):
        store_account(registry, "waba-1")
        store_account(registry, "waba-2")

        response = client.get("/api/business/accounts")

        body = response.json()
        assert body["success"] is True
        assert body["count"] == 2
        assert all("access_token" not in account for account in body["accounts"])

    def test_get_account(self, client, registry):
        store_account(registry)

        response = client.get("/api/business/account", params={"waba_id": "waba-1"})

        assert response.status_code == 200
        assert response.json()["account"]["business_name"] == "Acme"

    def test_get_unknown_account(self, client):
        response = client.get("/api/business/account", params={"waba_id": "nope"})

        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "Account not found"}

    def test_get_account_requires_waba_id(self, client):
        response = client.get("/api/business/account")

        assert response.status_code == 400

    def test_export_attachment(self, client, registry):
        store_account(registry)

        response = client.get("/api/business/export")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/json")
        assert "whatsapp_accounts.json" in response.headers["content-disposition"]
        data = json.loads(response.text)
        assert data["waba-1"]["access_token"] == "stored-secret"


class TestWebhooks:
    def test_verification_returns_challenge(self, client):
        response = client.get(
            WEBHOOK_PATH,
            params={
                "hub.mode": "subscribe",
                "hub.verify_token": "test-verify-token",
                "hub.challenge": "1158201444",
            },
        )

        assert response.status_code == 200
        assert response.text == "1158201444"

    def test_verification_rejected_with_empty_body(self, client):
        response = client.get(
            WEBHOOK_PATH,
            params={
                "hub.mode": "subscribe",
                "hub.verify_token": "wrong",
                "hub.challenge": "1158201444",
            },
        )

        assert response.status_code == 403
        assert response.text == ""

    def test_event_acknowledged_and_dispatched(self, client, event_handler):
        payload = {
            "object": "whatsapp_business_account",
            "entry": [
                {
                    "id": "waba-1",
                    "changes": [
                        {
                            "field": "messages",
                            "value": {
                                "metadata": {"phone_number_id": "phone-1"},
                                "messages": [
                                    {"id": "wamid.1", "from": "1555", "type": "text"}
                                ],
                            },
                        }
                    ],
                }
            ],
        }

        response = client.post(WEBHOOK_PATH, json=payload)

        assert response.status_code == 200
        assert response.text == "OK"
        assert event_handler.message_ids == ["wamid.1"]

    def test_malformed_event(self, client, event_handler):
        response = client.post(
            WEBHOOK_PATH,
            content=b"not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["success"] is False
        assert event_handler.message_ids == []


class TestCors:
    def test_preflight_for_client_origin(self, client):
        response = client.options(
            "/api/whatsapp/setup",
            headers={
                "Origin": "http://localhost:3001",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "Content-Type",
            },
        )

        assert response.status_code == 200
        assert (
            response.headers["access-control-allow-origin"] == "http://localhost:3001"
        )
        assert response.headers["access-control-allow-credentials"] == "true"
