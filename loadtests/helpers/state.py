"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance maintains its own state, nothing is shared across
users.
"""

from dataclasses import dataclass, field


@dataclass
class CheckoutState:
    """Tracks one simulated checkout from quote to handoff."""

    order_id: int | None = None
    order_total: float = 0.0
    zip_code: str | None = None
    farm_location: dict = field(default_factory=dict)
    option_ids: list[str] = field(default_factory=list)
    chosen_provider: str | None = None
    tracking_id: str | None = None
    pickup_payload: str | None = None
