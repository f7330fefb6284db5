"""Provider registry — the static catalogue of fulfillment channels.

Registry order is presentation order: the quote aggregator lists options in
the order providers are registered here.
"""

import threading
from collections.abc import Callable, Iterable, Iterator
from concurrent.futures import ThreadPoolExecutor

from delivery.provider.couriers import DoorDashAdapter, GrubhubAdapter, UberEatsAdapter
from delivery.provider.local_fleet import LocalFleetAdapter
from delivery.provider.port import DeliveryKind, ProviderAdapter, ProviderConfig
from delivery.utils.concurrency import PROVIDER_WORKERS, provider_executor

PICKUP = "pickup"
LOCAL_DELIVERY = "local_delivery"

# California ZIP sectional prefixes
CALIFORNIA_PREFIXES = ("90", "91", "92", "93", "94", "95", "96")

DEFAULT_PROVIDERS = (
    ProviderConfig(
        id=PICKUP,
        name="Farm Pickup",
        kind=DeliveryKind.PICKUP,
        fee=0.0,
        estimated_time="Available now",
        estimated_minutes=0,
        description="Pick up your flowers directly from the farm. Show your order QR code.",
        tracking_prefix="PICKUP",
    ),
    ProviderConfig(
        id=LOCAL_DELIVERY,
        name="Local Delivery",
        kind=DeliveryKind.LOCAL_DELIVERY,
        fee=8.99,
        estimated_time="1-2 hours",
        estimated_minutes=90,
        description="Same-day delivery within 15 miles of the farm.",
        max_distance_miles=15.0,
        postal_prefixes=CALIFORNIA_PREFIXES,
        tracking_prefix="LOCAL",
    ),
    ProviderConfig(
        id="doordash",
        name="DoorDash",
        kind=DeliveryKind.THIRD_PARTY,
        fee=4.99,
        estimated_time="30-45 minutes",
        estimated_minutes=35,
        description="Professional delivery through DoorDash network.",
        max_distance_miles=10.0,
        postal_prefixes=CALIFORNIA_PREFIXES,
        tracking_prefix="DD",
    ),
    ProviderConfig(
        id="uber_eats",
        name="Uber Eats",
        kind=DeliveryKind.THIRD_PARTY,
        fee=3.99,
        estimated_time="25-40 minutes",
        estimated_minutes=30,
        description="Fast delivery through Uber Eats platform.",
        max_distance_miles=8.0,
        postal_prefixes=CALIFORNIA_PREFIXES,
        tracking_prefix="UE",
    ),
    ProviderConfig(
        id="grubhub",
        name="Grubhub",
        kind=DeliveryKind.THIRD_PARTY,
        fee=5.99,
        estimated_time="35-50 minutes",
        estimated_minutes=40,
        description="Reliable delivery through the Grubhub courier network.",
        max_distance_miles=12.0,
        postal_prefixes=CALIFORNIA_PREFIXES,
        tracking_prefix="GH",
    ),
)

ADAPTER_CLASSES: dict[str, type[ProviderAdapter]] = {
    LOCAL_DELIVERY: LocalFleetAdapter,
    "doordash": DoorDashAdapter,
    "uber_eats": UberEatsAdapter,
    "grubhub": GrubhubAdapter,
}


class ProviderRegistry:
    """Ordered provider configs with the adapter serving each one.

    Pickup has a config but no adapter; it is fulfilled by the pickup token
    service. Every provider with an adapter gets its own thread pool of
    ``max_workers`` for upstream calls.
    """

    def __init__(
        self,
        providers: Iterable[tuple[ProviderConfig, ProviderAdapter | None]],
        max_workers: int = PROVIDER_WORKERS,
    ) -> None:
        self._configs: dict[str, ProviderConfig] = {}
        self._adapters: dict[str, ProviderAdapter] = {}
        self._executors: dict[str, ThreadPoolExecutor] = {}
        self._executors_lock = threading.Lock()
        self.max_workers = max_workers

        for config, adapter in providers:
            if config.id in self._configs:
                raise ValueError(f"Duplicate provider: {config.id}")
            self._configs[config.id] = config
            if adapter is not None:
                self._adapters[config.id] = adapter

        pickups = [c for c in self._configs.values() if c.kind is DeliveryKind.PICKUP]
        if len(pickups) != 1:
            raise ValueError("Registry must contain exactly one pickup provider")
        locals_ = [c for c in self._configs.values() if c.kind is DeliveryKind.LOCAL_DELIVERY]
        if len(locals_) > 1:
            raise ValueError("Registry must contain at most one local delivery provider")

    @classmethod
    def from_configs(
        cls,
        configs: Iterable[ProviderConfig] = DEFAULT_PROVIDERS,
        adapter_factory: Callable[[ProviderConfig], ProviderAdapter] | None = None,
        max_workers: int = PROVIDER_WORKERS,
    ) -> "ProviderRegistry":
        """Build a registry from provider configs.

        Each non-pickup provider gets ``adapter_factory(config)`` when a
        factory is given, otherwise the stock adapter class for its id.
        """
        entries = []
        for config in configs:
            if config.kind is DeliveryKind.PICKUP:
                entries.append((config, None))
            elif adapter_factory is not None:
                entries.append((config, adapter_factory(config)))
            else:
                adapter_cls = ADAPTER_CLASSES.get(config.id)
                entries.append((config, adapter_cls(config) if adapter_cls else None))
        return cls(entries, max_workers=max_workers)

    def __iter__(self) -> Iterator[ProviderConfig]:
        return iter(self._configs.values())

    def __contains__(self, provider_id) -> bool:
        return provider_id in self._configs

    def config(self, provider_id: str) -> ProviderConfig | None:
        return self._configs.get(provider_id)

    def adapter(self, provider_id: str) -> ProviderAdapter | None:
        return self._adapters.get(provider_id)

    def replace_adapter(self, provider_id: str, adapter: ProviderAdapter) -> None:
        if provider_id not in self._configs:
            raise KeyError(provider_id)
        self._adapters[provider_id] = adapter

    def executor(self, provider_id: str) -> ThreadPoolExecutor:
        """The thread pool that runs calls to ``provider_id``, created on first use."""
        if provider_id not in self._configs:
            raise KeyError(provider_id)
        with self._executors_lock:
            if provider_id not in self._executors:
                self._executors[provider_id] = provider_executor(provider_id, self.max_workers)
            return self._executors[provider_id]

    def shutdown(self) -> None:
        """Stop every provider pool without waiting; queued calls are cancelled."""
        with self._executors_lock:
            executors, self._executors = list(self._executors.values()), {}
        for executor in executors:
            executor.shutdown(wait=False, cancel_futures=True)

    @property
    def pickup(self) -> ProviderConfig:
        return next(c for c in self._configs.values() if c.kind is DeliveryKind.PICKUP)

    @property
    def local_delivery(self) -> ProviderConfig | None:
        return next((c for c in self._configs.values() if c.kind is DeliveryKind.LOCAL_DELIVERY), None)

    @property
    def third_party(self) -> list[ProviderConfig]:
        return [c for c in self._configs.values() if c.kind is DeliveryKind.THIRD_PARTY]
