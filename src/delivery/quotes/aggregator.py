"""DeliveryQuoteAggregator — the ordered list of fulfillment options for checkout.

Output order is fixed: Farm Pickup, Local Delivery, then couriers in
registry order. Pickup is always present and available; local delivery is
always listed with its computed availability; couriers appear only when
they cover the destination. Availability checks run concurrently, each on
its provider's own pool.
"""

from concurrent.futures import Future

from delivery.availability.resolver import ProviderAvailabilityResolver
from delivery.config import DeliverySettings, get_settings
from delivery.quotes.options import DeliveryEstimate, DeliveryOption
from delivery.utils.concurrency import gather
from delivery.utils.logging import get_logger

logger = get_logger(__name__)


class DeliveryQuoteAggregator:
    def __init__(
        self,
        resolver: ProviderAvailabilityResolver | None = None,
        settings: DeliverySettings | None = None,
    ) -> None:
        settings = settings or get_settings()
        self.resolver = resolver or ProviderAvailabilityResolver(settings=settings)
        self.timeout_seconds = settings.provider_timeout_seconds

    @property
    def registry(self):
        return self.resolver.registry

    def _availability(self, provider_ids, postal_code: str) -> dict[str, bool]:
        futures = gather(
            {provider_id: self.resolver.submit_availability(provider_id, postal_code) for provider_id in provider_ids},
            timeout=self.timeout_seconds,
        )
        return {provider_id: self._outcome(provider_id, future) for provider_id, future in futures.items()}

    def _outcome(self, provider_id: str, future: Future) -> bool:
        if future.cancelled() or not future.done():
            logger.warning("Availability check did not finish in time", provider_id=provider_id)
            return False
        exc = future.exception()
        if exc is not None:
            logger.warning("Availability check failed", provider_id=provider_id, error=str(exc))
            return False
        return bool(future.result())

    def get_options(
        self,
        postal_code: str,
        farm_location,
        destination=None,
        sort_by_fee: bool = False,
    ) -> list[DeliveryOption]:
        """Offerable delivery options for a destination ZIP and a farm location.

        With ``sort_by_fee`` the options after Pickup are ordered by fee,
        ties keeping registry order.
        """
        local = self.registry.local_delivery
        couriers = self.registry.third_party

        provider_ids = [config.id for config in couriers]
        if local is not None:
            provider_ids.insert(0, local.id)
        availability = self._availability(provider_ids, postal_code)
        if local is not None:
            availability[local.id] = availability[local.id] and self.resolver.is_within_local_radius(
                postal_code, farm_location, destination
            )

        pickup = self.registry.pickup
        options = [
            DeliveryOption(
                id=pickup.id,
                name=pickup.name,
                kind=pickup.kind.value,
                estimated_time=pickup.estimated_time,
                fee=0.0,
                description=pickup.description,
                is_available=True,
            )
        ]

        others = []
        if local is not None:
            others.append(DeliveryOption.for_provider(local, availability[local.id]))
        others.extend(
            DeliveryOption.for_provider(config, True) for config in couriers if availability[config.id]
        )
        if sort_by_fee:
            others.sort(key=lambda option: option.fee)

        options.extend(others)
        logger.debug(
            "Delivery options computed",
            postal_code=postal_code,
            option_ids=[option.id for option in options],
        )
        return options

    def get_estimates(self, postal_code: str, farm_location) -> list[DeliveryEstimate]:
        """Courier estimates for every courier that covers the destination."""
        couriers = self.registry.third_party
        availability = self._availability([config.id for config in couriers], postal_code)
        distance = self.resolver.distance_to_destination(postal_code, farm_location)

        return [
            DeliveryEstimate(
                provider_id=config.id,
                provider_name=config.name,
                estimated_fee=config.fee,
                estimated_minutes=config.estimated_minutes,
                max_distance_miles=config.max_distance_miles,
                distance_miles=round(distance, 1) if distance is not None else None,
                is_available=True,
            )
            for config in couriers
            if availability[config.id]
        ]
