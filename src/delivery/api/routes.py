"""FastAPI routes for the Delivery domain."""

from fastapi import APIRouter, HTTPException

from delivery.api.schemas import (
    ConfigureProviderRequest,
    DeliveryEstimateResponse,
    DeliveryEstimatesRequest,
    DeliveryOptionResponse,
    DeliveryOptionsRequest,
    DispatchRequest,
    DispatchResponse,
    PickupQRRequest,
    PickupQRResponse,
    PickupVerifyRequest,
    ProviderConfigResponse,
    ProviderResponse,
    VerifyResponse,
)
from delivery.dispatch.dispatcher import DeliveryOrderDispatcher
from delivery.pickup.service import PickupTokenService
from delivery.provider import get_registry
from delivery.provider.fake_adapter import FakeProvider
from delivery.provider.port import ContactInfo, LineItem, OrderContext
from delivery.quotes.aggregator import DeliveryQuoteAggregator
from delivery.utils.logging import get_environment, get_logger

logger = get_logger(__name__)

# ---------------------------------------------------------------------------
# Delivery Router
# ---------------------------------------------------------------------------
delivery_router = APIRouter(prefix="/delivery", tags=["delivery"])


@delivery_router.post("/options", response_model=list[DeliveryOptionResponse])
def get_delivery_options(body: DeliveryOptionsRequest) -> list[DeliveryOptionResponse]:
    """List delivery options for a destination ZIP, Farm Pickup first."""
    options = DeliveryQuoteAggregator().get_options(
        body.zip_code,
        body.farm_location.model_dump(),
        destination=body.destination.model_dump() if body.destination else None,
        sort_by_fee=body.sort_by_fee,
    )
    return [
        DeliveryOptionResponse(
            id=option.id,
            name=option.name,
            type=option.kind,
            estimated_time=option.estimated_time,
            fee=option.fee,
            description=option.description,
            is_available=option.is_available,
        )
        for option in options
    ]


@delivery_router.post("/estimates", response_model=list[DeliveryEstimateResponse])
def get_delivery_estimates(body: DeliveryEstimatesRequest) -> list[DeliveryEstimateResponse]:
    """Courier fee and time estimates for couriers that cover the ZIP."""
    estimates = DeliveryQuoteAggregator().get_estimates(body.zip_code, body.farm_location.model_dump())
    return [
        DeliveryEstimateResponse(
            provider_id=estimate.provider_id,
            provider_name=estimate.provider_name,
            estimated_fee=estimate.estimated_fee,
            estimated_time=estimate.estimated_minutes,
            max_distance=estimate.max_distance_miles,
            distance=estimate.distance_miles,
            is_available=estimate.is_available,
        )
        for estimate in estimates
    ]


@delivery_router.post("/pickup-qr", response_model=PickupQRResponse)
async def generate_pickup_qr(body: PickupQRRequest) -> PickupQRResponse:
    """Issue a signed pickup token and render it as a QR code."""
    service = PickupTokenService()
    token, qr_code = service.issue_pickup_code(body.order_id, body.order_total)
    return PickupQRResponse(
        qr_code=qr_code,
        payload=service.encode(token),
        expires_at=service.expires_at(token),
    )


@delivery_router.post("/pickup/verify", response_model=VerifyResponse)
async def verify_pickup_qr(body: PickupVerifyRequest) -> VerifyResponse:
    """Verify a scanned pickup QR payload for an order.

    Marking the order delivered is left to the order-fulfillment flow.
    """
    success = PickupTokenService().verify_token(body.qr_data, body.order_id)
    return VerifyResponse(success=success)


@delivery_router.post("/dispatch", response_model=DispatchResponse)
def dispatch_delivery(body: DispatchRequest) -> DispatchResponse:
    """Create the delivery artifact for the option the buyer chose."""
    ctx = body.order_context
    order = OrderContext(
        order_id=ctx.order_id,
        total_amount=ctx.total_amount,
        customer=ContactInfo(
            name=ctx.customer_info.name,
            phone=ctx.customer_info.phone,
            address=ctx.customer_info.address,
        ),
        farm=ContactInfo(
            name=ctx.farm_info.name,
            phone=ctx.farm_info.phone,
            address=ctx.farm_info.address,
        ),
        items=tuple(LineItem(name=item.name, quantity=item.quantity, price=item.price) for item in ctx.items),
    )
    result = DeliveryOrderDispatcher().dispatch(body.provider_id, order)
    return DispatchResponse(
        success=result.success,
        provider_id=result.provider_id,
        tracking_id=result.tracking_id,
        estimated_delivery=result.estimated_delivery,
        error=result.error,
        pickup_code=result.pickup_code,
    )


@delivery_router.get("/providers", response_model=list[ProviderResponse])
async def list_providers() -> list[ProviderResponse]:
    """List configured providers in presentation order."""
    registry = get_registry()
    providers = []
    for config in registry:
        adapter = registry.adapter(config.id)
        providers.append(
            ProviderResponse(
                id=config.id,
                name=config.name,
                type=config.kind.value,
                fee=config.fee,
                estimated_time=config.estimated_time,
                estimated_minutes=config.estimated_minutes,
                max_distance=config.max_distance_miles,
                postal_prefixes=list(config.postal_prefixes),
                adapter=type(adapter).__name__ if adapter is not None else None,
            )
        )
    return providers


@delivery_router.post("/providers/{provider_id}/configure", response_model=ProviderConfigResponse)
async def configure_provider(provider_id: str, body: ConfigureProviderRequest) -> ProviderConfigResponse:
    """Configure a FakeProvider's behavior (non-production only)."""
    if get_environment() == "production":
        raise HTTPException(status_code=403, detail="Provider configuration not available in production")

    registry = get_registry()
    if provider_id not in registry:
        raise HTTPException(status_code=404, detail=f"Unknown provider: {provider_id}")

    adapter = registry.adapter(provider_id)
    if not isinstance(adapter, FakeProvider):
        raise HTTPException(status_code=400, detail="Provider configuration only available for FakeProvider")

    adapter.configure(
        available=body.available,
        should_succeed=body.should_succeed,
        failure_reason=body.failure_reason,
        raise_errors=body.raise_errors,
        delay_seconds=body.delay_seconds,
    )
    logger.info("Fake provider reconfigured", provider_id=provider_id, **body.model_dump())
    return ProviderConfigResponse(
        provider_id=provider_id,
        adapter=type(adapter).__name__,
        available=adapter.available,
        should_succeed=adapter.should_succeed,
        failure_reason=adapter.failure_reason,
    )
