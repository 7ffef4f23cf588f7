"""
Authentication Middleware

Simple API key authentication for dashboard and hook endpoints.
"""

from typing import Optional

from fastapi import Header, HTTPException, status

from codguard.config.settings import settings


async def verify_api_key(x_api_key: str = Header(..., description="Dashboard API key")):
    """
    Verify API key from X-API-Key header.

    Args:
        x_api_key: API key from X-API-Key header

    Raises:
        HTTPException: If API key is missing, invalid, or dashboard is not configured

    Returns:
        True if authentication successful
    """
    expected_key = settings.dashboard_api_key

    # Check if dashboard is configured
    if not expected_key:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Dashboard not configured (DASHBOARD_API_KEY not set in environment)"
        )

    # Verify API key matches
    if x_api_key != expected_key:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid API key",
            headers={"WWW-Authenticate": "ApiKey"}
        )

    return True


async def verify_hook_key(
    x_hook_key: Optional[str] = Header(None, description="Shared secret of the shop system"),
):
    """
    Verify the X-Hook-Key header when HOOK_API_KEY is configured.

    Hooks stay open when no key is configured.

    Raises:
        HTTPException: If a key is configured and the header does not match
    """
    expected_key = settings.hook_api_key
    if expected_key and x_hook_key != expected_key:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid hook key",
        )
    return True
