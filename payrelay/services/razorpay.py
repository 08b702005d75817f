"""Razorpay Orders API client.

Only order creation is needed: checkout, capture and refunds happen between the
client and Razorpay and come back to us as callbacks and webhooks.
"""

from typing import Any

import httpx

from payrelay.config import Settings, validate_gateway_config
from payrelay.errors import GatewayError
from payrelay.logging import get_logger, sanitize_id_for_logging

logger = get_logger(__name__)


class RazorpayClient:
    """Async client for the Razorpay REST API."""

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient | None = None):
        self.settings = settings
        self.api_url = settings.api_url.rstrip("/")

        # HTTP client (lazy init unless injected)
        self._http_client: httpx.AsyncClient | None = http_client

    async def _get_http_client(self) -> httpx.AsyncClient:
        """Lazy creation of shared httpx client with timeouts."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                timeout=httpx.Timeout(10.0, connect=5.0, read=10.0, write=10.0),
                limits=httpx.Limits(max_connections=10, max_keepalive_connections=5),
            )
        return self._http_client

    @staticmethod
    def _error_detail(response: httpx.Response) -> str:
        try:
            data = response.json()
        except ValueError:
            return response.text[:200]
        error = data.get("error") if isinstance(data, dict) else None
        if isinstance(error, dict):
            return str(error.get("description") or error.get("code") or error)
        return str(data)[:200]

    async def create_order(
        self,
        amount_minor: int,
        currency: str,
        receipt: str | None = None,
        notes: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """
        Create an order at Razorpay.

        Args:
            amount_minor: Amount in the currency's minor unit (paise for INR)
            currency: ISO currency code
            receipt: Merchant receipt reference (max 40 chars)
            notes: Free-form key/value notes stored with the order

        Returns:
            Razorpay order entity (``id``, ``amount``, ``currency``, ``status``...)

        Raises:
            ServerMisconfigured: If key id or secret is missing
            GatewayError: On HTTP, transport or response-shape errors
        """
        key_id, key_secret = validate_gateway_config(self.settings)

        payload: dict[str, Any] = {"amount": amount_minor, "currency": currency}
        if receipt:
            payload["receipt"] = receipt[:40]
        if notes:
            payload["notes"] = notes

        logger.info("Razorpay order creation: amount=%s %s", amount_minor, currency)

        client = await self._get_http_client()
        try:
            response = await client.post(
                f"{self.api_url}/orders",
                auth=(key_id, key_secret),
                headers={"Accept": "application/json"},
                json=payload,
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            error_detail = self._error_detail(e.response)
            logger.error("Razorpay API error %s: %s", e.response.status_code, error_detail)
            raise GatewayError(f"Razorpay API error: {error_detail}") from e
        except httpx.RequestError as e:
            logger.exception("Razorpay network error")
            raise GatewayError(f"Failed to connect to Razorpay API: {e!s}") from e
        except ValueError as e:
            logger.error("Razorpay returned a non-JSON response")
            raise GatewayError("Invalid Razorpay response") from e

        if not isinstance(data, dict) or not data.get("id"):
            logger.error("Razorpay: order id not in response")
            raise GatewayError("Order id not found in Razorpay response")

        logger.info("Razorpay order created: %s", sanitize_id_for_logging(data["id"]))
        return data

    async def aclose(self) -> None:
        """Close http client if created."""
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None
