"""DeliveryOrderDispatcher — turns a chosen option into a tracked artifact.

Pickup mints a signed QR token, local delivery and couriers go through
their provider adapter. Nothing here raises into the checkout flow: every
failure comes back as ``ProviderAdapterResult(success=False, error=...)``.
"""

from protean.exceptions import ValidationError

from delivery.config import DeliverySettings, get_settings
from delivery.pickup.service import PickupTokenService
from delivery.provider import get_registry
from delivery.provider.port import DeliveryKind, OrderContext, ProviderAdapterResult
from delivery.provider.registry import ProviderRegistry
from delivery.utils.concurrency import call_with_timeout
from delivery.utils.logging import get_logger

logger = get_logger(__name__)

UNKNOWN_PROVIDER = "unknown provider"


class DeliveryOrderDispatcher:
    def __init__(
        self,
        registry: ProviderRegistry | None = None,
        token_service: PickupTokenService | None = None,
        settings: DeliverySettings | None = None,
    ) -> None:
        settings = settings or get_settings()
        self.registry = registry or get_registry()
        self.token_service = token_service or PickupTokenService(settings=settings)
        self.timeout_seconds = settings.provider_timeout_seconds

    def dispatch(self, provider_id: str, order: OrderContext) -> ProviderAdapterResult:
        config = self.registry.config(provider_id) if isinstance(provider_id, str) else None
        if config is None:
            logger.warning("Dispatch requested for unknown provider", provider_id=provider_id)
            return ProviderAdapterResult(success=False, provider_id=provider_id, error=UNKNOWN_PROVIDER)

        if config.kind is DeliveryKind.PICKUP:
            return self._dispatch_pickup(provider_id, order)
        return self._dispatch_to_adapter(provider_id, order)

    def _dispatch_pickup(self, provider_id: str, order: OrderContext) -> ProviderAdapterResult:
        try:
            token, qr_code = self.token_service.issue_pickup_code(order.order_id, order.total_amount)
        except ValidationError as exc:
            logger.warning("Pickup code could not be issued", order_id=order.order_id, error=str(exc))
            return ProviderAdapterResult(success=False, provider_id=provider_id, error=f"invalid order: {exc}")

        logger.info("Pickup code dispatched", order_id=order.order_id)
        return ProviderAdapterResult(
            success=True,
            provider_id=provider_id,
            tracking_id=f"{self.registry.pickup.tracking_prefix}-{order.order_id}",
            estimated_delivery=self.token_service.expires_at(token),
            pickup_code=qr_code,
        )

    def _dispatch_to_adapter(self, provider_id: str, order: OrderContext) -> ProviderAdapterResult:
        adapter = self.registry.adapter(provider_id)
        if adapter is None:
            logger.error("Provider has no adapter configured", provider_id=provider_id)
            return ProviderAdapterResult(success=False, provider_id=provider_id, error="provider not configured")

        try:
            result = call_with_timeout(
                self.registry.executor(provider_id), adapter.create_delivery, order, timeout=self.timeout_seconds
            )
        except TimeoutError:
            logger.warning(
                "Provider dispatch timed out",
                provider_id=provider_id,
                order_id=order.order_id,
                timeout_seconds=self.timeout_seconds,
            )
            return ProviderAdapterResult(success=False, provider_id=provider_id, error="provider timed out")
        except Exception as exc:
            logger.error(
                "Provider dispatch failed",
                provider_id=provider_id,
                order_id=order.order_id,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            return ProviderAdapterResult(success=False, provider_id=provider_id, error=str(exc) or type(exc).__name__)

        if result.success:
            logger.info(
                "Delivery dispatched",
                provider_id=provider_id,
                order_id=order.order_id,
                tracking_id=result.tracking_id,
            )
        else:
            logger.warning(
                "Provider rejected delivery",
                provider_id=provider_id,
                order_id=order.order_id,
                error=result.error,
            )
        return result
