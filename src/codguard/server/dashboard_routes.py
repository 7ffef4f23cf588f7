"""
Dashboard API Routes

REST API endpoints for shop settings, the order queue and block statistics.
"""

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status

from codguard.config.constants import SEND_TASK_NAME
from codguard.core.errors import SettingsValidationError
from codguard.core.logger import setup_logger
from codguard.server.auth import verify_api_key
from codguard.server.routes import get_runtime
from codguard.services.runtime import Runtime

logger = setup_logger(__name__)

# Router with /api/dashboard prefix
router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("/settings")
async def get_settings(
    runtime: Runtime = Depends(get_runtime),
    _: bool = Depends(verify_api_key),
) -> Dict[str, Any]:
    """Get current shop settings (API keys masked)."""
    settings = await runtime.settings_manager.get_settings()
    return settings.masked()


@router.put("/settings")
async def update_settings(
    changes: Dict[str, Any] = Body(...),
    runtime: Runtime = Depends(get_runtime),
    _: bool = Depends(verify_api_key),
) -> Dict[str, Any]:
    """
    Update shop settings.

    Returns 422 with the list of validation errors when the merged settings
    are invalid. Nothing is saved in that case.
    """
    try:
        settings = await runtime.settings_manager.update_settings(changes)
    except SettingsValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"errors": e.errors},
        )

    return {"success": True, "settings": settings.masked()}


@router.get("/queue")
async def get_queue_status(
    runtime: Runtime = Depends(get_runtime),
    _: bool = Depends(verify_api_key),
) -> Dict[str, Any]:
    """
    Get bundled sync status.

    Returns:
    - Number of orders waiting
    - Whether a bundled send is scheduled, and when
    """
    next_run = runtime.scheduler.next_run_time(SEND_TASK_NAME)
    return {
        "pending_orders": await runtime.queue.size(),
        "scheduled": runtime.scheduler.is_scheduled(SEND_TASK_NAME),
        "next_send": next_run.isoformat() if next_run else None,
    }


@router.post("/queue/flush")
async def flush_queue(
    runtime: Runtime = Depends(get_runtime),
    _: bool = Depends(verify_api_key),
) -> Dict[str, Any]:
    """Send the queued orders now instead of waiting for the schedule."""
    logger.info("Manual bundled send requested from dashboard")
    result = await runtime.sync.send_bundled_orders()
    return {
        "success": result.success,
        "orders_sent": result.orders_sent,
        "error": result.error,
    }


@router.get("/blocks")
async def get_block_statistics(
    limit: int = Query(default=100, ge=1, le=1000, description="Max events to return"),
    runtime: Runtime = Depends(get_runtime),
    _: bool = Depends(verify_api_key),
) -> Dict[str, Any]:
    """Get COD block counts (today, 7 days, 30 days, all) and latest events."""
    events = await runtime.block_log.events()
    return {
        "statistics": await runtime.block_log.statistics(),
        "events": list(reversed(events))[:limit],
    }


@router.get("/sync-history")
async def get_sync_history(
    runtime: Runtime = Depends(get_runtime),
    _: bool = Depends(verify_api_key),
) -> Dict[str, Any]:
    """Get the most recent bundled send attempts."""
    return {"history": await runtime.history.entries()}


@router.post("/deactivate")
async def deactivate(
    runtime: Runtime = Depends(get_runtime),
    _: bool = Depends(verify_api_key),
) -> Dict[str, Any]:
    """Cancel the scheduled bundled send and drop all queued orders."""
    await runtime.deactivate()
    return {"success": True}
