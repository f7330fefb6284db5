"""Provider port — abstract interface for delivery provider integrations.

Every fulfillment channel (local fleet, courier networks) is reached through
a ``ProviderAdapter``. The quote aggregator and dispatcher program against
the port; concrete adapters are swapped via the provider registry.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class DeliveryKind(Enum):
    """Enumeration of fulfillment channel types."""

    PICKUP = "pickup"
    LOCAL_DELIVERY = "local_delivery"
    THIRD_PARTY = "third_party"


@dataclass(frozen=True)
class ProviderConfig:
    """Static registry entry describing a provider's offer and coverage."""

    id: str
    name: str
    kind: DeliveryKind
    fee: float
    estimated_time: str
    estimated_minutes: int
    description: str
    max_distance_miles: float | None = None
    postal_prefixes: tuple[str, ...] = ()
    tracking_prefix: str = ""

    def __post_init__(self):
        if self.fee < 0:
            raise ValueError(f"Provider {self.id!r} has a negative fee")


@dataclass(frozen=True)
class LineItem:
    name: str
    quantity: int
    price: float


@dataclass(frozen=True)
class ContactInfo:
    name: str
    phone: str | None = None
    address: str | None = None


@dataclass(frozen=True)
class OrderContext:
    """Everything a provider needs to move one order."""

    order_id: int
    total_amount: float
    customer: ContactInfo
    farm: ContactInfo
    items: tuple[LineItem, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ProviderAdapterResult:
    """Outcome of dispatching an order to a provider."""

    success: bool
    provider_id: str | None = None
    tracking_id: str | None = None
    estimated_delivery: datetime | None = None
    error: str | None = None
    pickup_code: str | None = None


class ProviderAdapter(ABC):
    """Abstract interface for provider adapters."""

    def __init__(self, config: ProviderConfig) -> None:
        self.config = config

    @property
    def provider_id(self) -> str:
        return self.config.id

    @abstractmethod
    def check_availability(self, postal_code: str) -> bool:
        """Whether the provider covers the given postal code."""
        ...

    @abstractmethod
    def create_delivery(self, order: OrderContext) -> ProviderAdapterResult:
        """Create a delivery with the provider.

        Returns:
            ProviderAdapterResult with tracking_id and estimated_delivery on success,
            or success=False and an error message.
        """
        ...
