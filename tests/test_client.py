"""Tests for the CodGuard API client."""

import httpx
import pytest

from codguard.api.client import CodGuardClient
from codguard.core.errors import OrderImportError
from tests.conftest import API_BASE, make_settings

ORDER = {
    "eshop_id": 12345,
    "email": "a@b.com",
    "code": "1001",
    "status": "completed",
    "outcome": "1",
    "phone": "",
    "country_code": "CZ",
    "postal_code": "11000",
    "address": "Main 1, Prague",
}


class TestCustomerRating:
    @pytest.mark.asyncio
    async def test_rating_returned(self, api_client, fake_api):
        fake_api.rating_body = {"rating": 0.42}
        rating = await api_client.get_customer_rating(make_settings(), "a@b.com")
        assert rating == pytest.approx(0.42)

    @pytest.mark.asyncio
    async def test_request_shape(self, api_client, fake_api):
        await api_client.get_customer_rating(make_settings(), "first+tag@b.com")

        request = fake_api.calls_to("/api/customer-rating/")[0]
        assert request.method == "GET"
        assert request.url.path == "/api/customer-rating/12345/first+tag@b.com"
        assert b"first%2Btag%40b.com" in request.url.raw_path
        assert request.headers["x-api-key"] == "pub_key_0123456789"
        assert request.headers["accept"] == "application/json"
        assert "x-api-private-key" not in request.headers

    @pytest.mark.asyncio
    async def test_unknown_customer_is_perfect(self, api_client, fake_api):
        fake_api.rating_status = 404
        assert await api_client.get_customer_rating(make_settings(), "new@b.com") == 1.0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [401, 403, 429, 500, 503])
    async def test_other_status_is_none(self, api_client, fake_api, status):
        fake_api.rating_status = status
        assert await api_client.get_customer_rating(make_settings(), "a@b.com") is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", ["not json", {"score": 0.5}, {"rating": None}, {"rating": "high"}, [0.5]])
    async def test_malformed_body_is_none(self, api_client, fake_api, body):
        fake_api.rating_body = body
        assert await api_client.get_customer_rating(make_settings(), "a@b.com") is None

    @pytest.mark.asyncio
    async def test_transport_error_is_none(self, api_client, fake_api):
        fake_api.fail_paths = ["/api/customer-rating/"]
        assert await api_client.get_customer_rating(make_settings(), "a@b.com") is None

    @pytest.mark.asyncio
    async def test_timeout_is_none(self, fake_api):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        client = CodGuardClient(API_BASE, client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))
        assert await client.get_customer_rating(make_settings(), "a@b.com") is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("override", [{"shop_id": ""}, {"public_key": ""}, {"private_key": ""}])
    async def test_incomplete_configuration_skips_request(self, api_client, fake_api, override):
        assert await api_client.get_customer_rating(make_settings(**override), "a@b.com") is None
        assert fake_api.requests == []


class TestFeedback:
    @pytest.mark.asyncio
    async def test_request_shape(self, api_client, fake_api):
        payload = {"eshop_id": 12345, "email": "a@b.com", "reputation": 0.2,
                   "threshold": 0.35, "action": "blocked"}
        response = await api_client.send_feedback(make_settings(), payload)

        assert response.status_code == 200
        request = fake_api.calls_to("/api/feedback")[0]
        assert request.method == "POST"
        assert request.headers["x-api-key"] == "pub_key_0123456789"
        assert request.headers["content-type"] == "application/json"
        assert fake_api.json_bodies("/api/feedback") == [payload]

    @pytest.mark.asyncio
    async def test_transport_error_raises(self, api_client, fake_api):
        fake_api.fail_paths = ["/api/feedback"]
        with pytest.raises(httpx.HTTPError):
            await api_client.send_feedback(make_settings(), {})


class TestImportOrders:
    @pytest.mark.asyncio
    async def test_success(self, api_client, fake_api):
        fake_api.import_body = {"imported": 1}
        result = await api_client.import_orders(make_settings(), [ORDER])

        assert result == {"imported": 1}
        request = fake_api.calls_to("/api/orders/import")[0]
        assert request.headers["x-api-public-key"] == "pub_key_0123456789"
        assert request.headers["x-api-private-key"] == "priv_key_0123456789"
        assert fake_api.json_bodies("/api/orders/import") == [{"orders": [ORDER]}]

    @pytest.mark.asyncio
    async def test_created_is_success(self, api_client, fake_api):
        fake_api.import_status = 201
        await api_client.import_orders(make_settings(), [ORDER])

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [202, 400, 500])
    async def test_unexpected_status(self, api_client, fake_api, status):
        fake_api.import_status = status
        with pytest.raises(OrderImportError) as exc_info:
            await api_client.import_orders(make_settings(), [ORDER])
        assert exc_info.value.status_code == status

    @pytest.mark.asyncio
    async def test_invalid_json(self, api_client, fake_api):
        fake_api.import_body = "<html>oops</html>"
        with pytest.raises(OrderImportError, match="Invalid JSON"):
            await api_client.import_orders(make_settings(), [ORDER])

    @pytest.mark.asyncio
    async def test_transport_error(self, api_client, fake_api):
        fake_api.fail_paths = ["/api/orders/import"]
        with pytest.raises(OrderImportError):
            await api_client.import_orders(make_settings(), [ORDER])

    @pytest.mark.asyncio
    async def test_empty_batch(self, api_client, fake_api):
        with pytest.raises(OrderImportError, match="No orders"):
            await api_client.import_orders(make_settings(), [])
        assert fake_api.requests == []


@pytest.mark.asyncio
async def test_close_keeps_injected_client(api_client):
    await api_client.close()
    assert api_client.client.is_closed is False
