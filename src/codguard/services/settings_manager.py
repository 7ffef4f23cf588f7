"""
Settings Manager

Reads and writes shop settings in the key-value store. Stored values are
merged over defaults on every read; writes are sanitized and validated.
"""

from typing import Any, Dict, Optional

from codguard.config.constants import SETTINGS_KEY
from codguard.core.errors import SettingsValidationError
from codguard.core.logger import setup_logger
from codguard.models.shop_settings import ShopSettings, sanitize_settings, validate_settings
from codguard.storage.base import KeyValueStore

logger = setup_logger(__name__)


class SettingsManager:
    """Handles all CRUD operations for shop settings."""

    def __init__(self, store: KeyValueStore, key: str = SETTINGS_KEY):
        self.store = store
        self.key = key

    async def get_settings(self) -> ShopSettings:
        """
        Get all settings.

        Returns:
            ShopSettings with defaults filled in for missing keys
        """
        stored = await self.store.get(self.key)
        if not isinstance(stored, dict):
            return ShopSettings()
        return ShopSettings(**stored)

    async def is_enabled(self) -> bool:
        settings = await self.get_settings()
        return settings.enabled

    async def update_settings(self, changes: Dict[str, Any]) -> ShopSettings:
        """
        Merge changes into the current settings, validate and save.

        Args:
            changes: Partial settings (unknown keys and ``enabled`` are ignored)

        Returns:
            Saved settings

        Raises:
            SettingsValidationError: If the merged settings are invalid
        """
        current = await self.get_settings()
        merged = current.model_dump(exclude={"enabled"})
        merged.update(sanitize_settings(changes))

        errors = validate_settings(merged)
        if errors:
            logger.warning(f"Settings rejected: {'; '.join(errors)}")
            raise SettingsValidationError(errors)

        updated = ShopSettings(**merged)
        await self._save(updated)

        logger.info(f"Settings saved successfully (enabled={updated.enabled})")
        return updated

    async def initialize(self, seed: Optional[Dict[str, Any]] = None) -> ShopSettings:
        """
        Write default settings if none are stored yet.

        Seed values (e.g. credentials from the environment) are applied on
        top of the defaults without full validation, so an incomplete setup
        simply stays disabled. A non-numeric shop ID is dropped.

        Args:
            seed: Initial values

        Returns:
            Current settings
        """
        stored = await self.store.get(self.key)
        if isinstance(stored, dict):
            return ShopSettings(**stored)

        data = ShopSettings().model_dump(exclude={"enabled"})
        data.update(sanitize_settings(seed or {}))

        if data["shop_id"] and not data["shop_id"].isdigit():
            logger.warning(
                f"Ignoring non-numeric shop ID \"{data['shop_id']}\" from the environment, "
                "CodGuard stays disabled until a valid one is saved"
            )
            data["shop_id"] = ""

        settings = ShopSettings(**data)
        await self._save(settings)

        logger.info(f"Initialized default settings (enabled={settings.enabled})")
        return settings

    async def _save(self, settings: ShopSettings) -> None:
        await self.store.set(self.key, settings.model_dump(exclude={"enabled"}))
