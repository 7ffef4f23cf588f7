"""Shop settings model with defaults, sanitizing and write-time validation."""

import re
from typing import Any, Dict, List

from pydantic import BaseModel, Field, computed_field

DEFAULT_REJECTION_MESSAGE = "Unfortunately, we cannot offer Cash on Delivery for this order."

MIN_KEY_LENGTH = 10
MAX_REJECTION_MESSAGE_LENGTH = 500

EMAIL_RE = re.compile(r"^[A-Za-z0-9.!#$%&'*+/=?^_`{|}~-]+@[A-Za-z0-9-]+(\.[A-Za-z0-9-]+)+$")


def is_valid_email(value: str) -> bool:
    """Check that a string looks like a deliverable email address."""
    if not value or len(value) > 254:
        return False
    return EMAIL_RE.match(value) is not None


class ShopSettings(BaseModel):
    """Settings for one shop, as read by the gate and the order sync.

    ``enabled`` is derived from the credentials and cannot be set.
    """

    shop_id: str = ""
    public_key: str = ""
    private_key: str = ""
    good_status: str = "completed"
    refused_status: str = "cancelled"
    cod_methods: List[str] = Field(default_factory=list)
    rating_tolerance: int = 35
    rejection_message: str = DEFAULT_REJECTION_MESSAGE
    notification_email: str = "info@codguard.com"

    class Config:
        extra = "ignore"

    @computed_field
    @property
    def enabled(self) -> bool:
        return bool(self.shop_id and self.public_key and self.private_key)

    @property
    def tolerance(self) -> float:
        """Rating tolerance as a 0.0-1.0 threshold."""
        return float(self.rating_tolerance) / 100

    @property
    def eshop_id(self) -> int:
        """Shop ID as sent on the wire."""
        return int(self.shop_id) if self.shop_id.isdigit() else 0

    def is_cod_method(self, payment_method: str) -> bool:
        return payment_method in self.cod_methods

    def masked(self) -> Dict[str, Any]:
        """Dump for display, with API keys shortened."""
        data = self.model_dump()
        for field in ("public_key", "private_key"):
            value = data[field]
            data[field] = f"{value[:4]}{'*' * max(len(value) - 4, 0)}" if value else ""
        return data


def sanitize_settings(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Normalize raw settings input before it is merged and validated."""
    clean: Dict[str, Any] = {}

    for field in ("shop_id", "public_key", "private_key", "good_status",
                  "refused_status", "rejection_message", "notification_email"):
        if field in raw and raw[field] is not None:
            clean[field] = str(raw[field]).strip()

    if "cod_methods" in raw:
        methods = raw["cod_methods"] if isinstance(raw["cod_methods"], (list, tuple, set)) else []
        seen = []
        for method in methods:
            method = str(method).strip()
            if method and method not in seen:
                seen.append(method)
        clean["cod_methods"] = seen

    if "rating_tolerance" in raw:
        try:
            tolerance = int(float(raw["rating_tolerance"]))
        except (TypeError, ValueError, OverflowError):
            # Left as-is so validation reports it (inf and nan included)
            clean["rating_tolerance"] = raw["rating_tolerance"]
        else:
            clean["rating_tolerance"] = max(0, min(100, tolerance))

    return clean


def validate_settings(data: Dict[str, Any]) -> List[str]:
    """
    Validate merged settings before saving.

    Args:
        data: Full settings mapping (defaults merged with changes)

    Returns:
        List of error messages (empty if valid)
    """
    errors = []

    shop_id = data.get("shop_id") or ""
    if not shop_id:
        errors.append("Shop ID is required.")
    elif not str(shop_id).isdigit():
        errors.append("Shop ID must be numeric.")

    for field, label in (("public_key", "Public Key"), ("private_key", "Private Key")):
        value = data.get(field) or ""
        if not value:
            errors.append(f"{label} is required.")
        elif len(value) < MIN_KEY_LENGTH:
            errors.append(f"{label} must be at least {MIN_KEY_LENGTH} characters long.")

    tolerance = data.get("rating_tolerance")
    if not isinstance(tolerance, (int, float)) or isinstance(tolerance, bool) or not 0 <= tolerance <= 100:
        errors.append("Rating Tolerance must be a number between 0 and 100.")

    message = data.get("rejection_message") or ""
    if not message:
        errors.append("Rejection Message is required.")
    elif len(message) > MAX_REJECTION_MESSAGE_LENGTH:
        errors.append(f"Rejection Message must not exceed {MAX_REJECTION_MESSAGE_LENGTH} characters.")

    email = data.get("notification_email") or ""
    if email and not is_valid_email(email):
        errors.append("Notification Email must be a valid email address.")

    return errors
