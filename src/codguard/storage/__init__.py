"""Key-value storage backends for settings, the order queue and statistics."""

from codguard.storage.base import KeyValueStore
from codguard.storage.memory_store import MemoryKeyValueStore
from codguard.storage.redis_store import RedisKeyValueStore

__all__ = ["KeyValueStore", "MemoryKeyValueStore", "RedisKeyValueStore"]
