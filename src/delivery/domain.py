"""Delivery bounded context — pickup verification and courier fulfillment.

Decides how a paid order reaches the buyer: farm pickup with a signed QR
token, the farm's local delivery fleet, or a third-party courier. The
context is stateless; order records and their state transitions belong to
the Ordering domain.
"""

from protean.domain import Domain

from delivery.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

delivery = Domain(name="delivery")
