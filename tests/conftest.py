"""Shared fixtures: in-memory store, fake CodGuard API and enabled shop settings."""

import json
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import httpx
import pytest

from codguard.api.client import CodGuardClient
from codguard.services.settings_manager import SettingsManager
from codguard.storage.memory_store import MemoryKeyValueStore

API_BASE = "https://api.codguard.test"

VALID_SETTINGS = {
    "shop_id": "12345",
    "public_key": "pub_key_0123456789",
    "private_key": "priv_key_0123456789",
    "cod_methods": ["cod"],
    "rating_tolerance": 35,
    "good_status": "completed",
    "refused_status": "cancelled",
    "rejection_message": "COD is not available for this order.",
}


class FakeClock:
    """Manually advanced time source (seconds since epoch)."""

    def __init__(self, start: float = 1_750_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def as_datetime(self) -> datetime:
        return datetime.fromtimestamp(self.now, timezone.utc)


class FakeCodGuardApi:
    """Answers CodGuard API requests and records them.

    Set ``rating_status`` / ``rating_body``, ``feedback_status`` and
    ``import_status`` / ``import_body`` per test; put a path prefix in
    ``fail_paths`` to raise a connection error for it.
    """

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.rating_status = 200
        self.rating_body: Any = {"rating": 0.9}
        self.feedback_status = 200
        self.import_status = 200
        self.import_body: Any = {"imported": True}
        self.fail_paths: List[str] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        for prefix in self.fail_paths:
            if path.startswith(prefix):
                raise httpx.ConnectError("connection refused", request=request)

        if path.startswith("/api/customer-rating/"):
            return self._respond(self.rating_status, self.rating_body)
        if path == "/api/feedback":
            return self._respond(self.feedback_status, {"ok": True})
        if path == "/api/orders/import":
            return self._respond(self.import_status, self.import_body)
        return httpx.Response(404, json={"error": "not found"})

    @staticmethod
    def _respond(status_code: int, body: Any) -> httpx.Response:
        if isinstance(body, str):
            return httpx.Response(status_code, text=body)
        return httpx.Response(status_code, json=body)

    def calls_to(self, path_prefix: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.url.path.startswith(path_prefix)]

    def json_bodies(self, path_prefix: str) -> List[Dict[str, Any]]:
        return [json.loads(r.content) for r in self.calls_to(path_prefix)]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock) -> MemoryKeyValueStore:
    return MemoryKeyValueStore(clock=clock)


@pytest.fixture
def fake_api() -> FakeCodGuardApi:
    return FakeCodGuardApi()


@pytest.fixture
def api_client(fake_api) -> CodGuardClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(fake_api.handler))
    return CodGuardClient(API_BASE, client=http)


@pytest.fixture
def settings_manager(store) -> SettingsManager:
    return SettingsManager(store)


@pytest.fixture
async def enabled_settings(settings_manager):
    """Store valid, enabled shop settings and return them."""
    return await settings_manager.update_settings(dict(VALID_SETTINGS))


def make_settings(**overrides: Optional[Any]):
    """ShopSettings built from the valid defaults plus overrides."""
    from codguard.models.shop_settings import ShopSettings

    data = dict(VALID_SETTINGS)
    data.update(overrides)
    return ShopSettings(**data)
