"""Feedback/outcome reporting to the CodGuard API.

Checkout decisions are posted fire-and-forget: failures are logged, never
retried and never shown to the shopper.
"""

from enum import Enum
from typing import Any, Dict, Optional

import httpx

from codguard.api.client import CodGuardClient
from codguard.config.constants import OUTCOME_REFUSED, OUTCOME_SUCCESSFUL
from codguard.core.logger import setup_logger
from codguard.models.shop_settings import ShopSettings

logger = setup_logger(__name__)


class FeedbackAction(str, Enum):
    """Action reported for a checkout decision."""

    BLOCKED = "blocked"
    ALLOWED = "allowed"


def build_feedback_payload(
    eshop_id: int,
    email: str,
    rating: float,
    threshold: float,
    action: FeedbackAction,
) -> Dict[str, Any]:
    """Build the feedback request body."""
    return {
        "eshop_id": int(eshop_id),
        "email": email,
        "reputation": float(rating),
        "threshold": float(threshold),
        "action": FeedbackAction(action).value,
    }


def action_for_decision(decision: Any) -> Optional[FeedbackAction]:
    """Map a gate decision to the reported action (None = nothing to report)."""
    value = getattr(decision, "value", decision)
    if value == "blocked":
        return FeedbackAction.BLOCKED
    if value == "allowed":
        return FeedbackAction.ALLOWED
    return None


def outcome_for_status(status: str, refused_status: str) -> str:
    """Outcome code for an order: "-1" if refused, "1" otherwise."""
    return OUTCOME_REFUSED if status == refused_status else OUTCOME_SUCCESSFUL


class FeedbackReporter:
    """Posts checkout decisions to the feedback endpoint."""

    def __init__(self, client: CodGuardClient):
        self.client = client

    async def report(
        self,
        shop: ShopSettings,
        email: str,
        rating: float,
        threshold: float,
        action: FeedbackAction,
    ) -> bool:
        """
        Send feedback for one checkout decision.

        Args:
            shop: Current shop settings
            email: Customer email
            rating: Rating returned by the API
            threshold: Tolerance the rating was compared against (0.0-1.0)
            action: Decision taken

        Returns:
            True if the API answered 200
        """
        if not shop.shop_id:
            logger.warning("Cannot send feedback: Shop ID is empty")
            return False

        if not shop.public_key:
            logger.warning("Cannot send feedback: API key is empty")
            return False

        payload = build_feedback_payload(shop.eshop_id, email, rating, threshold, action)

        try:
            response = await self.client.send_feedback(shop, payload)
        except httpx.HTTPError as e:
            logger.warning(f"Feedback API Error: {type(e).__name__}: {e}")
            return False

        if response.status_code == 200:
            logger.debug(f"Feedback sent successfully: {response.text}")
            return True

        logger.warning(f"Feedback API returned status {response.status_code}: {response.text}")
        return False
