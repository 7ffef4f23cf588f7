"""Pydantic models for shop settings and orders."""

from codguard.models.order import OrderProjection, QueueEntry
from codguard.models.shop_settings import ShopSettings

__all__ = ["OrderProjection", "QueueEntry", "ShopSettings"]
