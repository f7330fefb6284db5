"""Provider registry factory.

Provides get_registry() / set_registry() to swap implementations:
- stock adapters (local fleet, stubbed couriers) by default
- FakeProvider adapters for development and manual API testing,
  selected with DELIVERY_PROVIDER_ADAPTER=fake
"""

import os

from delivery.provider.registry import ProviderRegistry

_current_registry: ProviderRegistry | None = None


def get_registry() -> ProviderRegistry:
    """Return the current provider registry (singleton)."""
    global _current_registry
    if _current_registry is None:
        adapter = os.environ.get("DELIVERY_PROVIDER_ADAPTER", "stock")
        if adapter == "stock":
            _current_registry = ProviderRegistry.from_configs()
        elif adapter == "fake":
            from delivery.provider.fake_adapter import FakeProvider

            _current_registry = ProviderRegistry.from_configs(adapter_factory=FakeProvider)
        else:
            raise ValueError(f"Unknown provider adapter: {adapter}")
    return _current_registry


def set_registry(registry: ProviderRegistry) -> None:
    """Override the active provider registry (useful for tests)."""
    global _current_registry
    _current_registry = registry


def reset_registry() -> None:
    """Reset the registry singleton (useful for testing)."""
    global _current_registry
    if _current_registry is not None:
        _current_registry.shutdown()
    _current_registry = None
