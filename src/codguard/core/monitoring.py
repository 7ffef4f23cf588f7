"""
GlitchTip Error Monitoring Utilities

Helper functions for error tracking and context management.
"""

from typing import Any, Dict, Optional

from codguard.core.logger import setup_logger

logger = setup_logger(__name__)


def init_monitoring(dsn: Optional[str], environment: str) -> bool:
    """
    Initialize GlitchTip (Sentry-compatible) error monitoring.

    Args:
        dsn: GlitchTip DSN, monitoring stays off when empty
        environment: Deployment environment name

    Returns:
        True if monitoring was initialized
    """
    if not dsn:
        return False

    try:
        import logging
        import sentry_sdk
        from sentry_sdk.integrations.fastapi import FastApiIntegration
        from sentry_sdk.integrations.logging import LoggingIntegration

        sentry_sdk.init(
            dsn=dsn,
            environment=environment,
            integrations=[
                FastApiIntegration(transaction_style="endpoint"),
                LoggingIntegration(
                    level=None,  # Capture all log levels as breadcrumbs
                    event_level=logging.ERROR  # Send ERROR logs as events
                ),
            ],
            traces_sample_rate=0.1,
            profiles_sample_rate=0.0,
            send_default_pii=False,  # Customer emails stay out of events
        )
        logger.info("GlitchTip error monitoring initialized")
        return True
    except Exception as e:
        logger.error(f"Failed to initialize GlitchTip: {e}")
        return False


def set_checkout_context(payment_method: str, decision: Optional[str] = None) -> None:
    """
    Set checkout-specific context for error tracking.

    Args:
        payment_method: Payment method chosen at checkout
        decision: Gate decision, when already known
    """
    try:
        import sentry_sdk

        sentry_sdk.set_tag("checkout.payment_method", payment_method)
        if decision:
            sentry_sdk.set_tag("checkout.decision", decision)
        sentry_sdk.set_context("checkout", {
            "payment_method": payment_method,
            "decision": decision,
        })
    except Exception as e:
        logger.warning(f"Failed to set checkout context: {e}")


def set_order_context(order_id: str, new_status: str) -> None:
    """
    Set order status change context for error tracking.

    Args:
        order_id: Order identifier
        new_status: Status the order moved into
    """
    try:
        import sentry_sdk

        sentry_sdk.set_tag("order.id", order_id)
        sentry_sdk.set_tag("order.status", new_status)
    except Exception as e:
        logger.warning(f"Failed to set order context: {e}")


def capture_exception(
    error: Exception,
    context: Optional[Dict[str, Any]] = None,
    level: str = "error"
) -> None:
    """
    Capture an exception and send to GlitchTip.

    Args:
        error: The exception to capture
        context: Additional context data
        level: Error level (error, warning, info)
    """
    try:
        import sentry_sdk

        if context:
            with sentry_sdk.push_scope() as scope:
                scope.set_context("custom", context)
                scope.level = level
                sentry_sdk.capture_exception(error)
        else:
            sentry_sdk.capture_exception(error)

    except Exception as e:
        logger.warning(f"Failed to capture exception in GlitchTip: {e}")
