"""Courier adapters — DoorDash, Uber Eats and Grubhub.

Each adapter owns the translation from an ``OrderContext`` into the
courier's request shape. Coverage comes from the registry's postal-code
prefix allow-list. Submission is stubbed: no courier credentials are
provisioned, so ``submit`` returns a synthetic tracking id and an ETA from
the configured delivery time. A real integration overrides ``submit`` with
the HTTP call and keeps the rest.
"""

from datetime import UTC, datetime, timedelta
from uuid import uuid4

from delivery.provider.port import OrderContext, ProviderAdapter, ProviderAdapterResult
from delivery.shared.postal import matches_prefix


def _cents(amount: float) -> int:
    return int(round(amount * 100))


class CourierAdapter(ProviderAdapter):
    """Base for third-party couriers."""

    def check_availability(self, postal_code: str) -> bool:
        return matches_prefix(postal_code, self.config.postal_prefixes)

    def build_request(self, order: OrderContext) -> dict:
        raise NotImplementedError

    def submit(self, request: dict) -> ProviderAdapterResult:  # noqa: ARG002
        return ProviderAdapterResult(
            success=True,
            provider_id=self.provider_id,
            tracking_id=f"{self.config.tracking_prefix}-{uuid4().hex[:12].upper()}",
            estimated_delivery=datetime.now(UTC) + timedelta(minutes=self.config.estimated_minutes),
        )

    def create_delivery(self, order: OrderContext) -> ProviderAdapterResult:
        if not order.customer.address:
            return ProviderAdapterResult(
                success=False,
                provider_id=self.provider_id,
                error="customer address is required for courier delivery",
            )
        return self.submit(self.build_request(order))


class DoorDashAdapter(CourierAdapter):
    def build_request(self, order: OrderContext) -> dict:
        return {
            "external_delivery_id": f"order-{order.order_id}",
            "pickup_business_name": order.farm.name,
            "pickup_address": order.farm.address,
            "pickup_phone_number": order.farm.phone,
            "dropoff_contact_given_name": order.customer.name,
            "dropoff_address": order.customer.address,
            "dropoff_phone_number": order.customer.phone,
            "order_value": _cents(order.total_amount),
            "items": [{"name": item.name, "quantity": item.quantity} for item in order.items],
        }


class UberEatsAdapter(CourierAdapter):
    def build_request(self, order: OrderContext) -> dict:
        return {
            "external_id": str(order.order_id),
            "pickup": {
                "name": order.farm.name,
                "address": order.farm.address,
                "phone_number": order.farm.phone,
            },
            "dropoff": {
                "name": order.customer.name,
                "address": order.customer.address,
                "phone_number": order.customer.phone,
            },
            "manifest_items": [
                {"name": item.name, "quantity": item.quantity, "price": _cents(item.price)} for item in order.items
            ],
            "manifest_total_value": _cents(order.total_amount),
        }


class GrubhubAdapter(CourierAdapter):
    def build_request(self, order: OrderContext) -> dict:
        return {
            "order_id": order.order_id,
            "merchant": {"name": order.farm.name, "address": order.farm.address, "phone": order.farm.phone},
            "diner": {"name": order.customer.name, "address": order.customer.address, "phone": order.customer.phone},
            "line_items": [
                {"name": item.name, "quantity": item.quantity, "unit_price": item.price} for item in order.items
            ],
            "total": round(order.total_amount, 2),
        }
