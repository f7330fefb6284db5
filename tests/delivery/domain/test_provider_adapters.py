"""Tests for the provider adapter implementations."""

from datetime import UTC, datetime, timedelta

import pytest
from delivery.provider.couriers import DoorDashAdapter, GrubhubAdapter, UberEatsAdapter
from delivery.provider.fake_adapter import FakeProvider
from delivery.provider.local_fleet import LocalFleetAdapter
from delivery.provider.port import ContactInfo, OrderContext
from delivery.provider.registry import ProviderRegistry


@pytest.fixture()
def registry():
    return ProviderRegistry.from_configs()


class TestCourierCoverage:
    @pytest.mark.parametrize("provider_id", ["doordash", "uber_eats", "grubhub"])
    @pytest.mark.parametrize("postal_code", ["90012", "94102", "96150"])
    def test_california_zips_covered(self, registry, provider_id, postal_code):
        assert registry.adapter(provider_id).check_availability(postal_code) is True

    @pytest.mark.parametrize("provider_id", ["doordash", "uber_eats", "grubhub"])
    @pytest.mark.parametrize("postal_code", ["10001", "97201", "89101"])
    def test_other_zips_not_covered(self, registry, provider_id, postal_code):
        assert registry.adapter(provider_id).check_availability(postal_code) is False

    def test_malformed_zip_not_covered(self, registry):
        assert registry.adapter("doordash").check_availability("94") is False


class TestCourierDelivery:
    @pytest.mark.parametrize(
        "provider_id, prefix, minutes",
        [("doordash", "DD-", 35), ("uber_eats", "UE-", 30), ("grubhub", "GH-", 40)],
    )
    def test_create_delivery(self, registry, order_context, provider_id, prefix, minutes):
        before = datetime.now(UTC)
        result = registry.adapter(provider_id).create_delivery(order_context)
        assert result.success is True
        assert result.provider_id == provider_id
        assert result.tracking_id.startswith(prefix)
        assert result.error is None
        assert before + timedelta(minutes=minutes) <= result.estimated_delivery
        assert result.estimated_delivery <= datetime.now(UTC) + timedelta(minutes=minutes)

    def test_tracking_ids_are_unique(self, registry, order_context):
        adapter = registry.adapter("doordash")
        first = adapter.create_delivery(order_context)
        second = adapter.create_delivery(order_context)
        assert first.tracking_id != second.tracking_id

    def test_missing_customer_address_fails(self, registry, order_context):
        order = OrderContext(
            order_id=order_context.order_id,
            total_amount=order_context.total_amount,
            customer=ContactInfo(name="Dana Whitfield"),
            farm=order_context.farm,
            items=order_context.items,
        )
        result = registry.adapter("uber_eats").create_delivery(order)
        assert result.success is False
        assert "address" in result.error


class TestCourierRequests:
    def test_doordash_request(self, registry, order_context):
        request = registry.adapter("doordash").build_request(order_context)
        assert isinstance(registry.adapter("doordash"), DoorDashAdapter)
        assert request["external_delivery_id"] == "order-1042"
        assert request["dropoff_address"] == order_context.customer.address
        assert request["pickup_business_name"] == "Sunset Petal Farm"
        assert request["order_value"] == 3750
        assert request["items"] == [
            {"name": "Ranunculus bunch", "quantity": 2},
            {"name": "Sweet pea bouquet", "quantity": 1},
        ]

    def test_uber_eats_request(self, registry, order_context):
        request = registry.adapter("uber_eats").build_request(order_context)
        assert isinstance(registry.adapter("uber_eats"), UberEatsAdapter)
        assert request["external_id"] == "1042"
        assert request["pickup"]["name"] == "Sunset Petal Farm"
        assert request["dropoff"]["phone_number"] == "+1-415-555-0142"
        assert request["manifest_items"][0]["price"] == 1250
        assert request["manifest_total_value"] == 3750

    def test_grubhub_request(self, registry, order_context):
        request = registry.adapter("grubhub").build_request(order_context)
        assert isinstance(registry.adapter("grubhub"), GrubhubAdapter)
        assert request["order_id"] == 1042
        assert request["diner"]["name"] == "Dana Whitfield"
        assert request["total"] == 37.5
        assert len(request["line_items"]) == 2


class TestLocalFleet:
    def test_coverage(self, registry):
        adapter = registry.adapter("local_delivery")
        assert isinstance(adapter, LocalFleetAdapter)
        assert adapter.check_availability("94102") is True
        assert adapter.check_availability("10001") is False

    def test_create_delivery(self, registry, order_context):
        result = registry.adapter("local_delivery").create_delivery(order_context)
        assert result.success is True
        assert result.tracking_id.startswith("LOCAL-")
        assert result.estimated_delivery > datetime.now(UTC) + timedelta(minutes=89)


class TestFakeProvider:
    @pytest.fixture()
    def fake(self, registry):
        return FakeProvider(registry.config("doordash"))

    def test_defaults(self, fake, order_context):
        assert fake.check_availability("10001") is True
        result = fake.create_delivery(order_context)
        assert result.success is True
        assert result.tracking_id.startswith("FAKE-")

    def test_configured_failure(self, fake, order_context):
        fake.configure(should_succeed=False, failure_reason="Courier offline")
        result = fake.create_delivery(order_context)
        assert result.success is False
        assert result.error == "Courier offline"

    def test_configured_unavailable(self, fake):
        fake.configure(available=False)
        assert fake.check_availability("94102") is False

    def test_raise_errors(self, fake, order_context):
        fake.configure(raise_errors=True, failure_reason="connection reset")
        with pytest.raises(ConnectionError):
            fake.check_availability("94102")
        with pytest.raises(ConnectionError):
            fake.create_delivery(order_context)

    def test_records_calls(self, fake, order_context):
        fake.check_availability("94102")
        fake.create_delivery(order_context)
        assert [call["method"] for call in fake.calls] == ["check_availability", "create_delivery"]
