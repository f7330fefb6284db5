"""Local fleet adapter — same-day delivery by the farm's own drivers.

No external call: the job is tracked internally and handed to the driver
roster by the order-fulfillment flow.
"""

from datetime import UTC, datetime, timedelta
from uuid import uuid4

from delivery.provider.port import OrderContext, ProviderAdapter, ProviderAdapterResult
from delivery.shared.postal import matches_prefix


class LocalFleetAdapter(ProviderAdapter):
    def check_availability(self, postal_code: str) -> bool:
        return matches_prefix(postal_code, self.config.postal_prefixes)

    def create_delivery(self, order: OrderContext) -> ProviderAdapterResult:  # noqa: ARG002
        return ProviderAdapterResult(
            success=True,
            provider_id=self.provider_id,
            tracking_id=f"{self.config.tracking_prefix}-{uuid4().hex[:12].upper()}",
            estimated_delivery=datetime.now(UTC) + timedelta(minutes=self.config.estimated_minutes),
        )
