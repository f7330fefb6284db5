"""Value objects returned to the checkout flow."""

from protean.fields import Boolean, Float, Integer, String, Text

from delivery.domain import delivery
from delivery.provider.port import DeliveryKind, ProviderConfig


@delivery.value_object
class DeliveryOption:
    """An offerable fulfillment choice, computed per request and never cached."""

    id: String(required=True, max_length=50)
    name: String(required=True, max_length=100)
    kind: String(required=True, choices=DeliveryKind)
    estimated_time: String(max_length=50)
    fee: Float(required=True, min_value=0.0)
    description: Text()
    is_available: Boolean(default=False)

    @classmethod
    def for_provider(cls, config: ProviderConfig, is_available: bool) -> "DeliveryOption":
        return cls(
            id=config.id,
            name=config.name,
            kind=config.kind.value,
            estimated_time=config.estimated_time,
            fee=config.fee,
            description=config.description,
            is_available=is_available,
        )


@delivery.value_object
class DeliveryEstimate:
    """Courier quote detail: fee, minutes to deliver, and reach."""

    provider_id: String(required=True, max_length=50)
    provider_name: String(required=True, max_length=100)
    estimated_fee: Float(required=True, min_value=0.0)
    estimated_minutes: Integer(min_value=0)
    max_distance_miles: Float(min_value=0.0)
    distance_miles: Float(min_value=0.0)
    is_available: Boolean(default=False)
