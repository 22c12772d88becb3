"""Cash flow HTTP client for posting income/expense entries"""

import httpx
from crediario.config import settings
from crediario.domain.exceptions import RemoteServiceError
from crediario.domain.models import CashFlowEntry
from crediario.infrastructure.observability.metrics import cash_flow_latency_histogram, remote_call_failures_counter


class CashFlowClient:
    """Client for the cash flow ("fluxo de caixa") service"""

    def __init__(self, base_url: str | None = None, timeout: float | None = None):
        self.base_url = base_url or settings.cash_flow_api_base
        self.timeout = timeout or settings.http_timeout_seconds

    async def post_entry(self, entry: CashFlowEntry) -> None:
        """
        Post one entry. No retry: a failure is reported to the caller immediately.

        Raises:
            RemoteServiceError: On timeout, HTTP errors, or network failures
        """
        payload = {
            "type": entry.type,
            "amount": str(entry.amount),
            "description": entry.description,
            "date": entry.date.isoformat(),
            "category": entry.category,
            "payment_method": entry.payment_method,
            "user_id": entry.owner_id,
            "store_id": entry.store_id,
        }
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            try:
                with cash_flow_latency_histogram.time():
                    response = await client.post(f"{self.base_url}/fluxo-caixa", json=payload)
                    response.raise_for_status()

            except httpx.TimeoutException as e:
                remote_call_failures_counter.labels(service="cash_flow").inc()
                raise RemoteServiceError("cash_flow", f"timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                remote_call_failures_counter.labels(service="cash_flow").inc()
                raise RemoteServiceError("cash_flow", f"error {e.response.status_code}") from e
            except httpx.RequestError as e:
                remote_call_failures_counter.labels(service="cash_flow").inc()
                raise RemoteServiceError("cash_flow", f"unreachable: {e}") from e
