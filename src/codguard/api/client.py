"""CodGuard API client."""

from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from codguard.config.constants import (
    CUSTOMER_RATING_PATH,
    FEEDBACK_PATH,
    FEEDBACK_TIMEOUT_SECONDS,
    ORDER_IMPORT_PATH,
    ORDER_IMPORT_SUCCESS_CODES,
    ORDER_IMPORT_TIMEOUT_SECONDS,
    RATING_TIMEOUT_SECONDS,
    UNKNOWN_CUSTOMER_RATING,
)
from codguard.core.errors import OrderImportError
from codguard.core.logger import mask_key, setup_logger
from codguard.models.shop_settings import ShopSettings

logger = setup_logger(__name__)


class CodGuardClient:
    """Async HTTP client for the CodGuard rating and order API."""

    def __init__(
        self,
        base_url: str = "https://api.codguard.com",
        client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize API client.

        Args:
            base_url: API host, without trailing slash
            client: Pre-built httpx client (the caller keeps ownership)
        """
        self.base_url = base_url.rstrip("/")
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=ORDER_IMPORT_TIMEOUT_SECONDS)

    async def get_customer_rating(self, shop: ShopSettings, email: str) -> Optional[float]:
        """
        Fetch a customer's rating.

        Customers unknown to CodGuard (HTTP 404) get a perfect rating.

        Args:
            shop: Shop settings holding shop ID and public key
            email: Customer billing email

        Returns:
            Rating between 0.0 and 1.0, or None if the lookup failed
        """
        if not shop.shop_id:
            return None

        if not shop.public_key or not shop.private_key:
            logger.error("API keys are empty or not configured properly")
            return None

        url = self.base_url + CUSTOMER_RATING_PATH.format(
            shop_id=quote(shop.shop_id, safe=""),
            email=quote(email, safe=""),
        )
        headers = {
            "Accept": "application/json",
            "x-api-key": shop.public_key,
        }

        logger.info(f"Calling CodGuard API: {url}")
        logger.debug(f"Request Headers - x-api-key (Public Key): {mask_key(shop.public_key)}")

        try:
            response = await self.client.get(url, headers=headers, timeout=RATING_TIMEOUT_SECONDS)
        except httpx.HTTPError as e:
            logger.error(f"API Error: {type(e).__name__}: {e}")
            return None

        logger.info(f"API Response: Status={response.status_code} Body={response.text}")

        if response.status_code == 404:
            return UNKNOWN_CUSTOMER_RATING

        if response.status_code != 200:
            logger.debug(f"Response Headers: {dict(response.headers)}")
            return None

        try:
            data = response.json()
        except ValueError:
            logger.warning("Rating response is not valid JSON")
            return None

        if not isinstance(data, dict) or data.get("rating") is None:
            return None

        try:
            return float(data["rating"])
        except (TypeError, ValueError):
            logger.warning(f"Rating response has non-numeric rating: {data['rating']!r}")
            return None

    async def send_feedback(self, shop: ShopSettings, payload: Dict[str, Any]) -> httpx.Response:
        """
        Post a checkout decision to the feedback endpoint.

        Args:
            shop: Shop settings holding the public key
            payload: Feedback body

        Returns:
            Raw HTTP response

        Raises:
            httpx.HTTPError: On transport errors and timeouts
        """
        headers = {
            "Content-Type": "application/json",
            "X-API-KEY": shop.public_key,
        }
        url = self.base_url + FEEDBACK_PATH

        logger.debug(f"Sending feedback to API: {url} (action: {payload.get('action')})")
        return await self.client.post(
            url,
            json=payload,
            headers=headers,
            timeout=FEEDBACK_TIMEOUT_SECONDS,
        )

    async def import_orders(self, shop: ShopSettings, orders: List[Dict[str, Any]]) -> Any:
        """
        Send a batch of orders to the import endpoint.

        Args:
            shop: Shop settings holding both API keys
            orders: Queue entries in wire format

        Returns:
            Decoded JSON response

        Raises:
            OrderImportError: On transport errors, unexpected status codes or invalid JSON
        """
        if not orders:
            raise OrderImportError("No orders to sync")

        headers = {
            "Content-Type": "application/json",
            "X-API-PUBLIC-KEY": shop.public_key,
            "X-API-PRIVATE-KEY": shop.private_key,
        }
        url = self.base_url + ORDER_IMPORT_PATH

        logger.debug(f"Sending {len(orders)} orders to API")

        try:
            response = await self.client.post(
                url,
                json={"orders": orders},
                headers=headers,
                timeout=ORDER_IMPORT_TIMEOUT_SECONDS,
            )
        except httpx.HTTPError as e:
            raise OrderImportError(f"{type(e).__name__}: {e}") from e

        logger.debug(f"API Response: Status {response.status_code}, Body: {response.text}")

        if response.status_code not in ORDER_IMPORT_SUCCESS_CODES:
            raise OrderImportError(
                f"API returned status code {response.status_code}: {response.text}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise OrderImportError(
                "Invalid JSON response from API",
                status_code=response.status_code,
            ) from e

    async def close(self) -> None:
        """Close HTTP client connection."""
        if self._owns_client:
            await self.client.aclose()
