"""Redis key-value store.

Values are JSON encoded; expiring values are written with SETEX.
"""

import json
from typing import Any, Optional

import redis.asyncio as redis

from codguard.config.settings import settings
from codguard.core.errors import StoreError
from codguard.core.logger import setup_logger
from codguard.storage.base import KeyValueStore

logger = setup_logger(__name__)


class RedisKeyValueStore(KeyValueStore):
    """Redis-backed store shared by all service processes.

    Features:
    - Async Redis connection pool
    - JSON value encoding
    - Persistence failures raised as StoreError
    """

    def __init__(
        self,
        host: str = None,
        port: int = None,
        db: int = None,
        client: Optional[redis.Redis] = None,
    ):
        """Initialize Redis store client.

        Args:
            host: Redis host (default from settings)
            port: Redis port (default from settings)
            db: Redis database number (default from settings)
            client: Pre-built Redis client (skips pool creation)
        """
        self.host = host or settings.redis_host
        self.port = port or settings.redis_port
        self.db = db if db is not None else settings.redis_db
        self.pool = None

        if client is not None:
            self.redis = client
        else:
            self.pool = redis.ConnectionPool(
                host=self.host,
                port=self.port,
                db=self.db,
                decode_responses=True,
                max_connections=10,
                socket_timeout=5.0,
                socket_connect_timeout=5.0,
                retry_on_timeout=True
            )
            self.redis = redis.Redis(connection_pool=self.pool)

        logger.info(f"Redis store initialized: {self.host}:{self.port}/{self.db}")

    async def get(self, key: str) -> Optional[Any]:
        try:
            raw = await self.redis.get(key)
        except redis.RedisError as e:
            logger.error(f"Redis get failed for {key}: {e}")
            raise StoreError("get", key, str(e)) from e

        if raw is None:
            return None

        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            logger.error(f"Corrupt value stored under {key}: {e}")
            raise StoreError("get", key, "invalid JSON") from e

    async def set(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> None:
        try:
            raw = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise StoreError("set", key, str(e)) from e

        try:
            if ttl_seconds:
                await self.redis.setex(key, ttl_seconds, raw)
            else:
                await self.redis.set(key, raw)
        except redis.RedisError as e:
            logger.error(f"Redis set failed for {key}: {e}")
            raise StoreError("set", key, str(e)) from e

    async def delete(self, key: str) -> None:
        try:
            await self.redis.delete(key)
        except redis.RedisError as e:
            logger.error(f"Redis delete failed for {key}: {e}")
            raise StoreError("delete", key, str(e)) from e

    async def health_check(self) -> bool:
        """Check Redis connectivity.

        Returns:
            True if Redis is reachable, False otherwise
        """
        try:
            await self.redis.ping()
            return True
        except Exception as e:
            logger.error(f"Redis health check failed: {e}")
            return False

    async def close(self) -> None:
        """Close Redis connection pool."""
        try:
            await self.redis.close()
            if self.pool is not None:
                await self.pool.disconnect()
            logger.info("Redis store connection closed")
        except Exception as e:
            logger.error(f"Error closing Redis connection: {e}")
