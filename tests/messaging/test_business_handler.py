"""
Tests for business account discovery, phone numbers, webhooks and profiles.
"""

import pytest

from wasignup.core.errors import UpstreamError, ValidationError
from wasignup.messaging.whatsapp.handlers.business_handler import (
    SUBSCRIBED_FIELDS,
    WhatsAppBusinessHandler,
)

CALLBACK_URL = "https://api.test/api/whatsapp/webhooks"


@pytest.fixture
def business_handler(graph_client) -> WhatsAppBusinessHandler:
    return WhatsAppBusinessHandler(graph_client, CALLBACK_URL)


class TestBusinessAccounts:
    @pytest.mark.asyncio
    async def test_lists_accounts(self, business_handler, fake_session):
        fake_session.queue(
            200,
            {
                "data": [
                    {"id": "biz-1", "name": "Acme", "verification_status": "verified"},
                    {"id": "biz-2", "name": "Other", "unexpected": True},
                ]
            },
        )

        accounts = await business_handler.get_business_accounts("tok")

        assert [a.id for a in accounts] == ["biz-1", "biz-2"]
        assert accounts[0].verification_status == "verified"
        assert len(fake_session.calls) == 1
        assert fake_session.calls[0]["url"].endswith("/v23.0/me/businesses")

    @pytest.mark.asyncio
    async def test_empty_list_probes_identity_without_inventing(
        self, business_handler, fake_session
    ):
        fake_session.queue(200, {"data": []}).queue(200, {"id": "u1", "name": "Owner"})

        accounts = await business_handler.get_business_accounts("tok")

        assert accounts == []
        assert fake_session.calls[1]["url"].endswith("/v23.0/me")

    @pytest.mark.asyncio
    async def test_identity_probe_failure_is_only_logged(
        self, business_handler, fake_session
    ):
        fake_session.queue(200, {"data": []}).queue(500, "boom")

        assert await business_handler.get_business_accounts("tok") == []

    @pytest.mark.asyncio
    async def test_non_200_raises(self, business_handler, fake_session):
        fake_session.queue(
            403, {"error": {"message": "Missing permission", "code": 200}}
        )

        with pytest.raises(UpstreamError) as exc_info:
            await business_handler.get_business_accounts("tok")

        assert exc_info.value.upstream_status == 403
        assert "Missing permission" in exc_info.value.message


class TestPhoneNumbers:
    @pytest.mark.asyncio
    async def test_lists_phone_numbers(self, business_handler, fake_session):
        fake_session.queue(
            200,
            {
                "data": [
                    {
                        "id": "phone-1",
                        "display_phone_number": "+1 555 0100",
                        "verified_name": "Acme",
                        "code_verification_status": "VERIFIED",
                    },
                    {"id": "phone-2", "code_verification_status": "NOT_VERIFIED"},
                ]
            },
        )

        phones = await business_handler.get_phone_numbers("tok", "waba-1")

        assert [p.id for p in phones] == ["phone-1", "phone-2"]
        assert phones[0].is_verified is True
        assert phones[1].is_verified is False
        assert fake_session.calls[0]["url"].endswith("/waba-1/phone_numbers")

    @pytest.mark.asyncio
    async def test_raw_body_surfaces_without_error_envelope(
        self, business_handler, fake_session
    ):
        fake_session.queue(502, "Bad Gateway")

        with pytest.raises(UpstreamError) as exc_info:
            await business_handler.get_phone_numbers("tok", "waba-1")

        assert "Bad Gateway" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_waba_id_is_quoted_as_one_segment(
        self, business_handler, fake_session
    ):
        fake_session.queue(200, {"data": []})

        await business_handler.get_phone_numbers("tok", "../me/businesses?x=")

        assert fake_session.calls[0]["url"] == (
            "https://graph.test/v23.0/..%2Fme%2Fbusinesses%3Fx%3D/phone_numbers"
        )

    @pytest.mark.asyncio
    @pytest.mark.parametrize("waba_id", ["", ".", ".."])
    async def test_dot_or_empty_waba_id_is_rejected(
        self, business_handler, fake_session, waba_id
    ):
        with pytest.raises(ValidationError):
            await business_handler.get_phone_numbers("tok", waba_id)

        assert fake_session.calls == []


class TestSubscribeWebhooks:
    @pytest.mark.asyncio
    async def test_subscribes_fixed_field_set(self, business_handler, fake_session):
        fake_session.queue(200, {"success": True})

        await business_handler.subscribe_webhooks("tok", "waba-1")

        call = fake_session.calls[0]
        assert call["method"] == "POST"
        assert call["url"].endswith("/waba-1/subscribed_apps")
        assert call["json"] == {"subscribed_fields": list(SUBSCRIBED_FIELDS)}
        assert len(SUBSCRIBED_FIELDS) == 6

    @pytest.mark.asyncio
    async def test_requires_callback_url(self, graph_client, fake_session):
        handler = WhatsAppBusinessHandler(graph_client, "")

        with pytest.raises(UpstreamError, match="callback URL not configured"):
            await handler.subscribe_webhooks("tok", "waba-1")
        assert fake_session.calls == []

    @pytest.mark.asyncio
    async def test_failure_raises(self, business_handler, fake_session):
        fake_session.queue(400, {"error": {"message": "Unsupported post request"}})

        with pytest.raises(UpstreamError, match="webhook setup failed"):
            await business_handler.subscribe_webhooks("tok", "waba-1")


class TestBusinessProfile:
    @pytest.mark.asyncio
    async def test_first_profile(self, business_handler, fake_session):
        fake_session.queue(200, {"data": [{"about": "Hi"}, {"about": "Ignored"}]})

        profile = await business_handler.get_business_profile("tok", "phone-1")

        assert profile == {"about": "Hi"}

    @pytest.mark.asyncio
    async def test_empty_profile(self, business_handler, fake_session):
        fake_session.queue(200, {"data": []})

        assert await business_handler.get_business_profile("tok", "phone-1") == {}
