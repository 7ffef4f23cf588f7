"""In-process key-value store.

Used for single-process deployments without Redis and in tests.
"""

import json
import time
from typing import Any, Callable, Dict, Optional, Tuple

from codguard.core.errors import StoreError
from codguard.storage.base import KeyValueStore


class MemoryKeyValueStore(KeyValueStore):
    """Dictionary-backed store with TTL support.

    Values are stored JSON-encoded, so callers never share mutable state
    with the store and non-serialisable values fail like they would in Redis.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self._data: Dict[str, Tuple[str, Optional[float]]] = {}
        self._clock = clock

    async def get(self, key: str) -> Optional[Any]:
        item = self._data.get(key)
        if item is None:
            return None

        raw, expires_at = item
        if expires_at is not None and self._clock() >= expires_at:
            del self._data[key]
            return None

        return json.loads(raw)

    async def set(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> None:
        try:
            raw = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise StoreError("set", key, str(e)) from e

        expires_at = self._clock() + ttl_seconds if ttl_seconds else None
        self._data[key] = (raw, expires_at)

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    async def health_check(self) -> bool:
        return True

    def ttl(self, key: str) -> Optional[float]:
        """Seconds until a key expires (None when missing or persistent)."""
        item = self._data.get(key)
        if item is None or item[1] is None:
            return None
        return item[1] - self._clock()
