"""Catalog HTTP client for reading and decrementing product stock"""

import logging

import httpx
from crediario.domain.exceptions import RemoteServiceError
from crediario.config import settings
from crediario.infrastructure.observability.metrics import remote_call_failures_counter

logger = logging.getLogger(__name__)


class CatalogClient:
    """Client for the product catalog service"""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url or settings.catalog_api_base
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    async def get_stock(self, product_id: str) -> int:
        """
        Current stock of one product.

        Raises:
            RemoteServiceError: On timeout, HTTP errors, or invalid response
        """
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.get(f"{self.base_url}/products/{product_id}")
                if response.status_code == 404:
                    return 0
                response.raise_for_status()
                return int(response.json()["stock"])

            except httpx.TimeoutException as e:
                remote_call_failures_counter.labels(service="catalog").inc()
                raise RemoteServiceError("catalog", f"timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                remote_call_failures_counter.labels(service="catalog").inc()
                raise RemoteServiceError("catalog", f"error {e.response.status_code}") from e
            except httpx.RequestError as e:
                remote_call_failures_counter.labels(service="catalog").inc()
                raise RemoteServiceError("catalog", f"unreachable: {e}") from e
            except (KeyError, ValueError, TypeError) as e:
                raise RemoteServiceError("catalog", f"invalid stock data for {product_id}: {e}") from e

    async def decrement_stock(self, product_id: str, quantity: int) -> None:
        """
        Subtract ``quantity`` from a product's stock.

        Read-then-write without locking: concurrent operations on the same
        product can both pass validation and oversell.

        Raises:
            RemoteServiceError: On timeout, HTTP errors, or invalid response
        """
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                current = await self.get_stock(product_id)
                if quantity > current:
                    # stock never goes negative; the shortfall is only visible here
                    logger.warning(
                        "Stock oversold, clamping to zero",
                        extra={"product_id": product_id, "available": current, "requested": quantity},
                    )
                response = await client.patch(
                    f"{self.base_url}/products/{product_id}",
                    json={"stock": max(current - quantity, 0)},
                )
                response.raise_for_status()

            except httpx.TimeoutException as e:
                remote_call_failures_counter.labels(service="catalog").inc()
                raise RemoteServiceError("catalog", f"timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                remote_call_failures_counter.labels(service="catalog").inc()
                raise RemoteServiceError("catalog", f"error {e.response.status_code}") from e
            except httpx.RequestError as e:
                remote_call_failures_counter.labels(service="catalog").inc()
                raise RemoteServiceError("catalog", f"unreachable: {e}") from e
