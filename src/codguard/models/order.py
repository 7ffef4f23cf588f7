"""Pydantic models for order data."""

from typing import Literal, Optional

from pydantic import BaseModel, field_validator


class OrderProjection(BaseModel):
    """Read-only view of a commerce order, supplied by the shop system."""

    id: str
    order_number: Optional[str] = None
    status: str
    billing_email: Optional[str] = None
    billing_phone: Optional[str] = None
    billing_country: Optional[str] = None
    billing_postcode: Optional[str] = None
    billing_address_1: Optional[str] = None
    billing_address_2: Optional[str] = None
    billing_city: Optional[str] = None
    billing_state: Optional[str] = None

    class Config:
        extra = "ignore"
        frozen = True

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value):
        return str(value)

    @property
    def code(self) -> str:
        """Order number shown to the customer, falling back to the ID."""
        return self.order_number or self.id

    def format_address(self) -> str:
        """Join the non-empty billing address parts with commas."""
        parts = [
            self.billing_address_1,
            self.billing_address_2,
            self.billing_city,
            self.billing_state,
        ]
        return ", ".join(part.strip() for part in parts if part and part.strip())


class QueueEntry(BaseModel):
    """One order waiting in the bundled sync queue (wire format of the import API)."""

    eshop_id: int
    email: str
    code: str
    status: str
    outcome: Literal["-1", "1"]
    phone: str = ""
    country_code: str = ""
    postal_code: str = ""
    address: str = ""
