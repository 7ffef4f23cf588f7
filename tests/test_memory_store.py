"""Tests for the in-memory key-value store."""

import pytest

from codguard.core.errors import StoreError


class TestMemoryKeyValueStore:
    @pytest.mark.asyncio
    async def test_set_get_delete(self, store):
        await store.set("k", {"a": 1})
        assert await store.get("k") == {"a": 1}

        await store.delete("k")
        assert await store.get("k") is None

    @pytest.mark.asyncio
    async def test_delete_missing_key(self, store):
        await store.delete("missing")

    @pytest.mark.asyncio
    async def test_ttl_expiry(self, store, clock):
        await store.set("k", [1], ttl_seconds=60)
        clock.advance(59)
        assert await store.get("k") == [1]
        clock.advance(1)
        assert await store.get("k") is None

    @pytest.mark.asyncio
    async def test_values_are_copies(self, store):
        value = {"orders": [1]}
        await store.set("k", value)
        value["orders"].append(2)

        loaded = await store.get("k")
        loaded["orders"].append(3)
        assert await store.get("k") == {"orders": [1]}

    @pytest.mark.asyncio
    async def test_unserialisable_value(self, store):
        with pytest.raises(StoreError):
            await store.set("k", {"when": object()})
