import pytest
from delivery.provider.couriers import DoorDashAdapter, GrubhubAdapter, UberEatsAdapter
from delivery.provider.fake_adapter import FakeProvider
from delivery.provider.local_fleet import LocalFleetAdapter
from delivery.provider.port import DeliveryKind, ProviderConfig
from delivery.provider.registry import DEFAULT_PROVIDERS, ProviderRegistry


def _config(provider_id, kind=DeliveryKind.THIRD_PARTY, fee=1.0):
    return ProviderConfig(
        id=provider_id,
        name=provider_id.title(),
        kind=kind,
        fee=fee,
        estimated_time="soon",
        estimated_minutes=10,
        description="",
    )


class TestDefaultRegistry:
    def test_registry_order(self):
        registry = ProviderRegistry.from_configs()
        assert [config.id for config in registry] == ["pickup", "local_delivery", "doordash", "uber_eats", "grubhub"]

    def test_stock_adapters(self):
        registry = ProviderRegistry.from_configs()
        assert registry.adapter("pickup") is None
        assert isinstance(registry.adapter("local_delivery"), LocalFleetAdapter)
        assert isinstance(registry.adapter("doordash"), DoorDashAdapter)
        assert isinstance(registry.adapter("uber_eats"), UberEatsAdapter)
        assert isinstance(registry.adapter("grubhub"), GrubhubAdapter)

    def test_at_least_two_couriers(self):
        assert len(ProviderRegistry.from_configs().third_party) >= 2

    def test_pickup_is_free(self):
        assert ProviderRegistry.from_configs().pickup.fee == 0

    def test_local_delivery_defaults(self):
        local = ProviderRegistry.from_configs().local_delivery
        assert local.fee == 8.99
        assert local.max_distance_miles == 15.0

    def test_courier_fees(self):
        fees = {config.id: config.fee for config in ProviderRegistry.from_configs().third_party}
        assert fees == {"doordash": 4.99, "uber_eats": 3.99, "grubhub": 5.99}

    def test_unknown_provider(self):
        registry = ProviderRegistry.from_configs()
        assert registry.config("not_a_real_provider") is None
        assert registry.adapter("not_a_real_provider") is None
        assert "not_a_real_provider" not in registry


class TestRegistryConstruction:
    def test_adapter_factory_applies_to_delivering_providers(self):
        registry = ProviderRegistry.from_configs(adapter_factory=FakeProvider)
        assert registry.adapter("pickup") is None
        assert all(isinstance(registry.adapter(c.id), FakeProvider) for c in registry if c.id != "pickup")

    def test_requires_a_pickup_provider(self):
        with pytest.raises(ValueError):
            ProviderRegistry.from_configs([_config("doordash")])

    def test_rejects_two_pickup_providers(self):
        with pytest.raises(ValueError):
            ProviderRegistry.from_configs(
                [_config("pickup", DeliveryKind.PICKUP, 0.0), _config("stall", DeliveryKind.PICKUP, 0.0)]
            )

    def test_rejects_duplicate_ids(self):
        with pytest.raises(ValueError):
            ProviderRegistry.from_configs(
                [_config("pickup", DeliveryKind.PICKUP, 0.0), _config("doordash"), _config("doordash")]
            )

    def test_negative_fee_rejected(self):
        with pytest.raises(ValueError):
            _config("doordash", fee=-1.0)

    def test_replace_adapter(self):
        registry = ProviderRegistry.from_configs()
        fake = FakeProvider(registry.config("doordash"))
        registry.replace_adapter("doordash", fake)
        assert registry.adapter("doordash") is fake

    def test_replace_adapter_for_unknown_provider(self):
        registry = ProviderRegistry.from_configs()
        with pytest.raises(KeyError):
            registry.replace_adapter("nope", FakeProvider(_config("nope")))

    def test_default_providers_is_static(self):
        assert isinstance(DEFAULT_PROVIDERS, tuple)


class TestProviderExecutors:
    def test_each_provider_has_its_own_pool(self):
        registry = ProviderRegistry.from_configs()
        assert registry.executor("doordash") is registry.executor("doordash")
        assert registry.executor("doordash") is not registry.executor("grubhub")
        registry.shutdown()

    def test_unknown_provider_has_no_pool(self):
        with pytest.raises(KeyError):
            ProviderRegistry.from_configs().executor("postmates")

    def test_max_workers(self):
        registry = ProviderRegistry.from_configs(max_workers=2)
        assert registry.executor("uber_eats")._max_workers == 2
        registry.shutdown()

    def test_shutdown_replaces_pools(self):
        registry = ProviderRegistry.from_configs()
        before = registry.executor("doordash")
        registry.shutdown()
        assert registry.executor("doordash") is not before
        registry.shutdown()
