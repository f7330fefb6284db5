"""Fake provider adapter — deterministic provider for testing and development.

Configurable coverage, success/failure, exceptions and latency, so tests can
drive every degradation path of the aggregator and the dispatcher.
"""

import time
from datetime import UTC, datetime, timedelta
from uuid import uuid4

from delivery.provider.port import OrderContext, ProviderAdapter, ProviderAdapterResult, ProviderConfig


class FakeProvider(ProviderAdapter):
    """Fake provider that covers every postal code and always succeeds by default."""

    def __init__(self, config: ProviderConfig) -> None:
        super().__init__(config)
        self.available = True
        self.should_succeed = True
        self.failure_reason = "Provider unavailable"
        self.raise_errors = False
        self.delay_seconds = 0.0
        self.calls: list[dict] = []

    def configure(
        self,
        available: bool = True,
        should_succeed: bool = True,
        failure_reason: str = "Provider unavailable",
        raise_errors: bool = False,
        delay_seconds: float = 0.0,
    ) -> None:
        """Configure the fake provider behavior for testing."""
        self.available = available
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason
        self.raise_errors = raise_errors
        self.delay_seconds = delay_seconds

    def _simulate_upstream(self) -> None:
        if self.delay_seconds:
            time.sleep(self.delay_seconds)
        if self.raise_errors:
            raise ConnectionError(self.failure_reason)

    def check_availability(self, postal_code: str) -> bool:
        self.calls.append({"method": "check_availability", "postal_code": postal_code})
        self._simulate_upstream()
        return self.available

    def create_delivery(self, order: OrderContext) -> ProviderAdapterResult:
        self.calls.append({"method": "create_delivery", "order_id": order.order_id})
        self._simulate_upstream()

        if not self.should_succeed:
            return ProviderAdapterResult(success=False, provider_id=self.provider_id, error=self.failure_reason)

        return ProviderAdapterResult(
            success=True,
            provider_id=self.provider_id,
            tracking_id=f"FAKE-{uuid4().hex[:12].upper()}",
            estimated_delivery=datetime.now(UTC) + timedelta(minutes=self.config.estimated_minutes),
        )
