"""Runtime settings for the Delivery domain.

Settings come from environment variables and are read once per process by
``get_settings()``. Tests build ``DeliverySettings`` directly or call
``reset_settings()`` after patching the environment.
"""

import os
from dataclasses import dataclass

from delivery.utils.logging import get_environment, get_logger

logger = get_logger(__name__)

# Only ever used where a missing secret is tolerated (development and test)
DEVELOPMENT_SECRET = "dev-pickup-secret-change-in-production"

_LENIENT_ENVIRONMENTS = frozenset({"development", "test"})


class ConfigurationError(RuntimeError):
    """Raised when the service cannot start with the given configuration."""


@dataclass(frozen=True)
class DeliverySettings:
    """Process-wide knobs for pickup tokens and provider calls."""

    pickup_token_secret: str
    environment: str = "development"
    pickup_token_ttl_hours: float = 24.0
    local_delivery_radius_miles: float = 15.0
    provider_timeout_seconds: float = 3.0

    def __post_init__(self):
        if not self.pickup_token_secret:
            raise ConfigurationError("pickup_token_secret must not be empty")
        if self.pickup_token_ttl_hours <= 0:
            raise ConfigurationError("pickup_token_ttl_hours must be positive")
        if self.local_delivery_radius_miles < 0:
            raise ConfigurationError("local_delivery_radius_miles must not be negative")
        if self.provider_timeout_seconds <= 0:
            raise ConfigurationError("provider_timeout_seconds must be positive")


def _float_env(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from exc


def load_settings() -> DeliverySettings:
    """Build settings from the environment.

    Outside development and test a missing secret is fatal: the service
    refuses to start rather than sign tokens with a well-known key.
    """
    environment = get_environment()
    secret = os.environ.get("PICKUP_TOKEN_SECRET") or os.environ.get("QR_SECRET")

    if not secret:
        if environment not in _LENIENT_ENVIRONMENTS:
            raise ConfigurationError(f"PICKUP_TOKEN_SECRET is required in the {environment!r} environment")
        logger.warning("Pickup token secret not configured, using development secret", environment=environment)
        secret = DEVELOPMENT_SECRET

    return DeliverySettings(
        pickup_token_secret=secret,
        environment=environment,
        pickup_token_ttl_hours=_float_env("PICKUP_TOKEN_TTL_HOURS", 24.0),
        local_delivery_radius_miles=_float_env("LOCAL_DELIVERY_RADIUS_MILES", 15.0),
        provider_timeout_seconds=_float_env("PROVIDER_TIMEOUT_SECONDS", 3.0),
    )


_settings: DeliverySettings | None = None


def get_settings() -> DeliverySettings:
    """Return the process settings, loading them on first use."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def set_settings(settings: DeliverySettings) -> None:
    """Override the active settings (useful for tests)."""
    global _settings
    _settings = settings


def reset_settings() -> None:
    """Forget cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
