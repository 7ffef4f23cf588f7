"""API routes for shop hooks and health."""

from fastapi import APIRouter, Depends, HTTPException, Request, status

from codguard.core.errors import StoreError
from codguard.core.logger import setup_logger
from codguard.core.monitoring import capture_exception, set_checkout_context, set_order_context
from codguard.models.hooks import CheckoutRequest, CheckoutResponse, OrderStatusEvent
from codguard.server.auth import verify_hook_key
from codguard.services.checkout_gate import CheckoutContext, Decision
from codguard.services.runtime import Runtime

logger = setup_logger(__name__)
router = APIRouter()


def get_runtime(request: Request) -> Runtime:
    """Runtime attached to the application at startup."""
    return request.app.state.runtime


@router.get("/")
async def root() -> dict:
    """Root endpoint with basic service info."""
    return {
        "service": "CodGuard Gate",
        "version": "2.2.0",
        "endpoints": {
            "checkout": "POST /hooks/checkout",
            "order_status": "POST /hooks/order-status",
            "health": "GET /health",
            "dashboard": "GET /api/dashboard/settings",
            "docs": "GET /docs",
        },
    }


@router.get("/health")
async def health_check(runtime: Runtime = Depends(get_runtime)) -> dict:
    """Health check endpoint for monitoring."""
    health_status = {
        "status": "healthy",
        "service": "codguard-gate",
        "checks": {},
    }

    store_ok = await runtime.store.health_check()
    health_status["checks"]["store"] = "ok" if store_ok else "unreachable"
    if not store_ok:
        health_status["status"] = "degraded"

    health_status["checks"]["scheduler"] = "running" if runtime.scheduler.is_running else "stopped"

    try:
        health_status["checks"]["enabled"] = await runtime.settings_manager.is_enabled()
    except StoreError:
        health_status["checks"]["enabled"] = None

    return health_status


@router.post("/hooks/checkout", response_model=CheckoutResponse)
async def checkout_hook(
    payload: CheckoutRequest,
    runtime: Runtime = Depends(get_runtime),
    _: bool = Depends(verify_hook_key),
) -> CheckoutResponse:
    """
    Validate a checkout submission.

    The shop aborts the checkout and shows ``errors`` when ``allowed`` is
    false. Any failure inside the gate answers with an allowed decision.
    """
    ctx = CheckoutContext()
    try:
        decision = await runtime.gate.evaluate(ctx, payload.payment_method, payload.billing_email)
    except Exception as e:
        logger.error(f"Checkout evaluation failed, allowing checkout: {e}", exc_info=True)
        capture_exception(e, {"payment_method": payload.payment_method})
        ctx = CheckoutContext()
        decision = Decision.NOT_APPLICABLE

    set_checkout_context(payload.payment_method, decision.value)

    return CheckoutResponse(
        decision=decision.value,
        allowed=decision.permits_payment,
        errors=ctx.errors,
        rating=ctx.rating,
        threshold=ctx.threshold,
    )


@router.post("/hooks/order-status")
async def order_status_hook(
    event: OrderStatusEvent,
    runtime: Runtime = Depends(get_runtime),
    _: bool = Depends(verify_hook_key),
) -> dict:
    """
    Queue an order status change for the bundled sync.

    Answers 503 when the queue could not be saved, so the shop can retry.
    """
    set_order_context(event.order.id, event.new_status)

    try:
        queued = await runtime.sync.on_order_status_changed(
            event.order, event.old_status, event.new_status
        )
    except StoreError as e:
        logger.error(f"Failed to queue order #{event.order.id}: {e}")
        capture_exception(e, {"order_id": event.order.id, "new_status": event.new_status})
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Order queue unavailable",
        )

    return {"queued": queued}
