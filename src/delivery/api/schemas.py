"""Pydantic API schemas for the Delivery domain.

These are the external API contracts consumed by the checkout UI. Field
names are camelCase on the wire; the API layer translates them into domain
objects and back.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------
class LatLng(CamelModel):
    lat: float = Field(ge=-90.0, le=90.0)
    lng: float = Field(ge=-180.0, le=180.0)


class DeliveryOptionsRequest(CamelModel):
    zip_code: str
    farm_location: LatLng
    destination: LatLng | None = None
    sort_by_fee: bool = False


class DeliveryEstimatesRequest(CamelModel):
    zip_code: str
    farm_location: LatLng


class PickupQRRequest(CamelModel):
    order_id: int
    order_total: float


class PickupVerifyRequest(CamelModel):
    qr_data: str
    order_id: int


class LineItemRequest(CamelModel):
    name: str
    quantity: int = Field(ge=1)
    price: float = Field(ge=0.0)


class ContactRequest(CamelModel):
    name: str
    phone: str | None = None
    address: str | None = None


class OrderContextRequest(CamelModel):
    order_id: int
    total_amount: float
    customer_info: ContactRequest
    farm_info: ContactRequest
    items: list[LineItemRequest] = []


class DispatchRequest(CamelModel):
    provider_id: str
    order_context: OrderContextRequest


class ConfigureProviderRequest(CamelModel):
    available: bool = True
    should_succeed: bool = True
    failure_reason: str = "Provider unavailable"
    raise_errors: bool = False
    delay_seconds: float = Field(default=0.0, ge=0.0, le=30.0)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------
class DeliveryOptionResponse(CamelModel):
    id: str
    name: str
    type: str
    estimated_time: str | None = None
    fee: float
    description: str | None = None
    is_available: bool


class DeliveryEstimateResponse(CamelModel):
    provider_id: str
    provider_name: str
    estimated_fee: float
    estimated_time: int | None = None
    max_distance: float | None = None
    distance: float | None = None
    is_available: bool


class PickupQRResponse(CamelModel):
    qr_code: str
    payload: str
    expires_at: datetime


class VerifyResponse(CamelModel):
    success: bool


class DispatchResponse(CamelModel):
    success: bool
    provider_id: str | None = None
    tracking_id: str | None = None
    estimated_delivery: datetime | None = None
    error: str | None = None
    pickup_code: str | None = None


class ProviderResponse(CamelModel):
    id: str
    name: str
    type: str
    fee: float
    estimated_time: str
    estimated_minutes: int
    max_distance: float | None = None
    postal_prefixes: list[str]
    adapter: str | None = None


class ProviderConfigResponse(CamelModel):
    provider_id: str
    adapter: str
    available: bool
    should_succeed: bool
    failure_reason: str
