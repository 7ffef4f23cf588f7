"""
Checkout Gate

Decides at checkout whether a cash-on-delivery payment method stays
available, based on the customer's CodGuard rating.

Every upstream failure resolves to allowing the payment: the gate only blocks
when it has a rating below the shop's tolerance.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from codguard.api.client import CodGuardClient
from codguard.core.errors import StoreError
from codguard.core.logger import setup_logger
from codguard.models.shop_settings import is_valid_email
from codguard.services.block_log import BlockLog
from codguard.services.feedback import FeedbackReporter, action_for_decision
from codguard.services.settings_manager import SettingsManager

logger = setup_logger(__name__)


class Decision(str, Enum):
    """Outcome of a checkout evaluation."""

    NOT_APPLICABLE = "not_applicable"
    ALLOWED = "allowed"
    BLOCKED = "blocked"
    INDETERMINATE = "indeterminate"

    @property
    def permits_payment(self) -> bool:
        return self is not Decision.BLOCKED


@dataclass
class CheckoutContext:
    """State of one checkout submission.

    Created per request and passed to every evaluation made while handling
    it, so the rating is fetched at most once per submission.
    """

    checked: bool = False
    result: Optional[Decision] = None
    rating: Optional[float] = None
    threshold: Optional[float] = None
    errors: List[str] = field(default_factory=list)


class CheckoutGate:
    """COD rating check run during checkout validation."""

    def __init__(
        self,
        settings_manager: SettingsManager,
        client: CodGuardClient,
        reporter: FeedbackReporter,
        block_log: BlockLog,
    ):
        self.settings_manager = settings_manager
        self.client = client
        self.reporter = reporter
        self.block_log = block_log

    async def evaluate(
        self,
        ctx: CheckoutContext,
        payment_method: str,
        billing_email: str,
    ) -> Decision:
        """
        Evaluate a checkout submission.

        Args:
            ctx: Request-scoped context (memo and checkout error collection)
            payment_method: Chosen payment gateway ID
            billing_email: Billing email entered by the shopper

        Returns:
            Decision; on BLOCKED the rejection message is added to ctx.errors
        """
        if ctx.checked:
            logger.debug("Rating already checked in this request, skipping.")
            return ctx.result

        try:
            settings = await self.settings_manager.get_settings()
        except StoreError as e:
            logger.error(f"Settings unavailable, allowing checkout (fail-open): {e}")
            return self._finish(ctx, Decision.NOT_APPLICABLE)

        if not settings.enabled:
            logger.debug("CodGuard is not enabled, skipping checkout validation.")
            return self._finish(ctx, Decision.NOT_APPLICABLE)

        payment_method = (payment_method or "").strip()
        logger.debug(f"Checkout validation triggered. Payment method: {payment_method}")
        logger.debug(f"Configured COD methods: {', '.join(settings.cod_methods)}")

        if not settings.is_cod_method(payment_method):
            logger.debug(
                f'Payment method "{payment_method}" is not in configured COD methods list, '
                "skipping validation."
            )
            return self._finish(ctx, Decision.NOT_APPLICABLE)

        email = (billing_email or "").strip()
        if not is_valid_email(email):
            logger.warning("No valid billing email found, allowing checkout.")
            return self._finish(ctx, Decision.NOT_APPLICABLE)

        logger.info(f"Checking customer rating for email: {email}")
        rating = await self.client.get_customer_rating(settings, email)

        if rating is None:
            logger.warning("API request failed or returned null, allowing checkout (fail-open).")
            return self._finish(ctx, Decision.INDETERMINATE)

        tolerance = settings.tolerance
        ctx.rating = rating
        ctx.threshold = tolerance

        logger.info(f"Customer rating received: {rating:.2f}")
        logger.debug(f"Comparing rating {rating:.2f} against tolerance {tolerance:.2f}")

        if rating < tolerance:
            logger.warning(
                f"Rating {rating:.2f} is below tolerance {tolerance:.2f} - BLOCKING COD payment"
            )

            try:
                await self.block_log.record(email, rating)
            except StoreError as e:
                logger.error(f"Failed to record block event: {e}")

            ctx.errors.append(settings.rejection_message)
            decision = Decision.BLOCKED
        else:
            logger.info(f"Rating {rating:.2f} meets tolerance {tolerance:.2f} - allowing COD payment")
            decision = Decision.ALLOWED

        await self.reporter.report(
            settings, email, rating, tolerance, action_for_decision(decision)
        )
        return self._finish(ctx, decision)

    @staticmethod
    def _finish(ctx: CheckoutContext, decision: Decision) -> Decision:
        ctx.checked = True
        ctx.result = decision
        return decision
