"""Abstract base for key-value storage."""

from abc import ABC, abstractmethod
from typing import Any, Optional


class KeyValueStore(ABC):
    """Abstract key-value store holding JSON-serialisable values.

    This allows easy swapping between storage backends
    (Redis, in-process memory, etc.)
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        """Get a value.

        Args:
            key: Store key

        Returns:
            Decoded value, or None if the key is missing or expired
        """
        pass

    @abstractmethod
    async def set(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> None:
        """Store a value, replacing any previous one.

        Args:
            key: Store key
            value: JSON-serialisable value
            ttl_seconds: Expiry in seconds (None = never expires)

        Raises:
            StoreError: If the value could not be persisted
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove a key. Missing keys are ignored."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the storage backend is accessible.

        Returns:
            True if healthy, False otherwise
        """
        pass

    async def close(self) -> None:
        """Release backend resources."""
        return None
