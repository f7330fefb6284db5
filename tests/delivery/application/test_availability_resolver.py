import pytest
from delivery.availability.resolver import ProviderAvailabilityResolver
from delivery.shared.postal import StaticPostalCodeLocator


@pytest.fixture()
def resolver():
    return ProviderAvailabilityResolver()


class TestIsServiceable:
    def test_pickup_is_always_serviceable(self, resolver):
        assert resolver.is_serviceable("pickup", "10001") is True
        assert resolver.is_serviceable("pickup", "not a zip") is True

    def test_unknown_provider(self, resolver):
        assert resolver.is_serviceable("postmates", "94102") is False
        assert resolver.is_serviceable(None, "94102") is False

    @pytest.mark.parametrize("provider_id", ["local_delivery", "doordash", "uber_eats", "grubhub"])
    def test_california_coverage(self, resolver, provider_id):
        assert resolver.is_serviceable(provider_id, "94102") is True
        assert resolver.is_serviceable(provider_id, "10001") is False

    @pytest.mark.parametrize("postal_code", ["", "9410", "94102-12", "ABCDE", None])
    def test_malformed_zip(self, resolver, postal_code):
        assert resolver.is_serviceable("doordash", postal_code) is False

    def test_zip_plus_four(self, resolver):
        assert resolver.is_serviceable("doordash", "94102-4011") is True

    def test_adapter_error_is_not_serviceable(self, fake_registry):
        fake_registry.adapter("doordash").configure(raise_errors=True)
        resolver = ProviderAvailabilityResolver()
        assert resolver.is_serviceable("doordash", "94102") is False
        assert resolver.is_serviceable("uber_eats", "94102") is True

    def test_slow_adapter_is_not_serviceable(self, fake_registry):
        fake_registry.adapter("grubhub").configure(delay_seconds=1.5)
        resolver = ProviderAvailabilityResolver()
        assert resolver.is_serviceable("grubhub", "94102") is False

    def test_uses_active_registry(self, fake_registry):
        fake_registry.adapter("uber_eats").configure(available=False)
        assert ProviderAvailabilityResolver().is_serviceable("uber_eats", "94102") is False


class TestLocalRadius:
    @pytest.mark.parametrize("postal_code", ["94102", "94601", "94704"])
    def test_within_radius(self, resolver, farm_location, postal_code):
        assert resolver.is_within_local_radius(postal_code, farm_location) is True

    @pytest.mark.parametrize("postal_code", ["94301", "90012", "95814"])
    def test_outside_radius(self, resolver, farm_location, postal_code):
        assert resolver.is_within_local_radius(postal_code, farm_location) is False

    def test_sectional_center_fallback(self, resolver, farm_location):
        # 94199 has no exact centroid; the 941 sectional center is downtown SF
        assert resolver.is_within_local_radius("94199", farm_location) is True

    def test_unlocatable_zip_is_out_of_range(self, resolver, farm_location):
        assert resolver.is_within_local_radius("93999", farm_location) is False

    def test_destination_coordinates_override_zip(self, resolver, farm_location):
        los_angeles = {"lat": 34.0522, "lng": -118.2437}
        assert resolver.is_within_local_radius("94102", farm_location, destination=los_angeles) is False

    def test_invalid_farm_location(self, resolver):
        assert resolver.is_within_local_radius("94102", {"lat": "north"}) is False

    def test_custom_radius(self, settings, farm_location):
        from dataclasses import replace

        narrow = ProviderAvailabilityResolver(settings=replace(settings, local_delivery_radius_miles=5.0))
        assert narrow.is_within_local_radius("94102", farm_location) is True
        assert narrow.is_within_local_radius("94601", farm_location) is False

    def test_custom_locator(self, farm_location):
        locator = StaticPostalCodeLocator(zip_centroids={"99999": (37.78, -122.42)}, scf_centroids={})
        resolver = ProviderAvailabilityResolver(locator=locator)
        assert resolver.is_within_local_radius("99999", farm_location) is True
        assert resolver.is_within_local_radius("94102", farm_location) is False


class TestLocalDeliveryAvailability:
    def test_covered_and_near(self, resolver, farm_location):
        assert resolver.is_local_delivery_available("94102", farm_location) is True

    def test_covered_but_far(self, resolver, farm_location):
        assert resolver.is_local_delivery_available("90012", farm_location) is False

    def test_not_covered(self, resolver, farm_location):
        assert resolver.is_local_delivery_available("10001", farm_location) is False

    def test_distance_to_destination(self, resolver, farm_location):
        assert resolver.distance_to_destination("94102", farm_location) < 1.0
        assert resolver.distance_to_destination("93999", farm_location) is None
