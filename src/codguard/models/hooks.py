"""Pydantic models for the commerce system hook endpoints."""

from typing import List, Optional

from pydantic import BaseModel, Field

from codguard.models.order import OrderProjection


class CheckoutRequest(BaseModel):
    """Checkout submission forwarded by the shop before placing the order."""

    payment_method: str = Field("", description="Chosen payment gateway ID")
    billing_email: str = Field("", description="Billing email entered by the shopper")

    class Config:
        extra = "allow"


class CheckoutResponse(BaseModel):
    """Gate decision returned to the shop."""

    decision: str
    allowed: bool
    errors: List[str] = Field(default_factory=list)
    rating: Optional[float] = None
    threshold: Optional[float] = None


class OrderStatusEvent(BaseModel):
    """Order status transition reported by the shop."""

    order: OrderProjection
    old_status: str = ""
    new_status: str
