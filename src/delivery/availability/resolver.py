"""ProviderAvailabilityResolver — which providers can serve a destination.

Coverage is delegated to each provider adapter's ``check_availability``.
Local delivery is additionally gated on the great-circle distance between
the farm and the destination. Every failure mode answers ``False``.
"""

from concurrent.futures import Future

from protean.exceptions import ValidationError

from delivery.config import DeliverySettings, get_settings
from delivery.provider import get_registry
from delivery.provider.port import DeliveryKind
from delivery.provider.registry import ProviderRegistry
from delivery.shared.geo import coordinates_from, haversine_miles
from delivery.shared.postal import PostalCodeLocator, StaticPostalCodeLocator, normalize_postal_code
from delivery.utils.concurrency import completed
from delivery.utils.logging import get_logger

logger = get_logger(__name__)


class ProviderAvailabilityResolver:
    def __init__(
        self,
        registry: ProviderRegistry | None = None,
        locator: PostalCodeLocator | None = None,
        settings: DeliverySettings | None = None,
    ) -> None:
        settings = settings or get_settings()
        self.registry = registry or get_registry()
        self.locator = locator or StaticPostalCodeLocator()
        self.local_radius_miles = settings.local_delivery_radius_miles
        self.timeout_seconds = settings.provider_timeout_seconds

    def submit_availability(self, provider_id: str, postal_code: str) -> Future:
        """Start a coverage check on the provider's own pool.

        Checks that need no upstream call come back already completed.
        """
        config = self.registry.config(provider_id) if isinstance(provider_id, str) else None
        if config is None:
            return completed(False)
        if config.kind is DeliveryKind.PICKUP:
            return completed(True)

        adapter = self.registry.adapter(provider_id)
        if adapter is None or normalize_postal_code(postal_code) is None:
            return completed(False)
        try:
            return self.registry.executor(provider_id).submit(adapter.check_availability, postal_code)
        except RuntimeError as exc:
            # Pool already shut down by a registry reset
            logger.warning("Provider availability check not started", provider_id=provider_id, error=str(exc))
            return completed(False)

    def is_serviceable(self, provider_id: str, postal_code: str) -> bool:
        """Coverage check for one provider; unknown providers are never serviceable."""
        future = self.submit_availability(provider_id, postal_code)
        try:
            return bool(future.result(timeout=self.timeout_seconds))
        except TimeoutError:
            future.cancel()
            logger.warning(
                "Provider availability check timed out",
                provider_id=provider_id,
                timeout_seconds=self.timeout_seconds,
            )
        except Exception as exc:
            logger.warning(
                "Provider availability check failed",
                provider_id=provider_id,
                error=str(exc),
                error_type=type(exc).__name__,
            )
        return False

    def distance_to_destination(self, postal_code: str, farm_location, destination=None) -> float | None:
        """Miles from the farm to the destination, or None when either end is unknown."""
        try:
            farm = coordinates_from(farm_location)
            target = coordinates_from(destination) if destination is not None else self.locator.locate(postal_code)
        except ValidationError:
            return None
        if target is None:
            return None
        return haversine_miles(farm, target)

    def is_within_local_radius(self, postal_code: str, farm_location, destination=None) -> bool:
        """Distance gate for local delivery.

        ``destination`` coordinates win over the ZIP centroid when both are
        available. A destination that cannot be placed is out of range.
        """
        distance = self.distance_to_destination(postal_code, farm_location, destination)
        if distance is None:
            logger.debug("Local delivery destination could not be located", postal_code=postal_code)
            return False
        return distance <= self.local_radius_miles

    def is_local_delivery_available(self, postal_code: str, farm_location, destination=None) -> bool:
        local = self.registry.local_delivery
        if local is None:
            return False
        return self.is_serviceable(local.id, postal_code) and self.is_within_local_radius(
            postal_code, farm_location, destination
        )
