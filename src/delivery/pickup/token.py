"""PickupToken value object and its wire payload.

The payload is compact JSON shown to the buyer as a QR code:

    {"orderId": 1042, "orderTotal": 37.5, "timestamp": 1760790000000, "hash": "<hex>"}

``timestamp`` is the issue time in epoch milliseconds and ``hash`` the
HMAC-SHA256 signature over ``"{orderId}-{orderTotal}-{timestamp}"``.
"""

import json
import math
from collections.abc import Mapping
from datetime import UTC, datetime
from decimal import Decimal

from protean.fields import DateTime, Float, Integer, String

from delivery.domain import delivery


def format_amount(amount) -> str:
    """Canonical text for a monetary amount: ``25``, ``25.5``, ``0.99``.

    Floats and ints that compare equal render identically, so a total that
    went through JSON as ``25.0`` signs the same as ``25``.
    """
    return format(Decimal(str(amount)).normalize(), "f")


def as_utc(moment: datetime) -> datetime:
    return moment if moment.tzinfo is not None else moment.replace(tzinfo=UTC)


def to_epoch_ms(moment: datetime) -> int:
    return int(round(as_utc(moment).timestamp() * 1000))


def from_epoch_ms(value: int) -> datetime:
    return datetime.fromtimestamp(value / 1000, tz=UTC)


def signing_message(order_id: int, order_total, issued_at_ms: int) -> str:
    """The exact text that gets signed for a token."""
    return f"{order_id}-{format_amount(order_total)}-{issued_at_ms}"


@delivery.value_object
class PickupToken:
    """Signed proof that an order with a given total may be released at pickup.

    Self-contained: verifying it needs only the server secret, never a lookup.
    """

    order_id: Integer(required=True, min_value=1)
    order_total: Float(required=True, min_value=0.0)
    issued_at: DateTime(required=True)
    signature: String(required=True, max_length=64)

    @property
    def issued_at_ms(self) -> int:
        return to_epoch_ms(self.issued_at)

    def to_payload(self) -> str:
        """Serialize to the JSON text embedded in the QR code."""
        return json.dumps(
            {
                "orderId": self.order_id,
                "orderTotal": self.order_total,
                "timestamp": self.issued_at_ms,
                "hash": self.signature,
            },
            separators=(",", ":"),
        )


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def parse_payload(payload) -> PickupToken:
    """Parse QR payload text (or an already-decoded mapping) into a PickupToken.

    Raises ``ValueError`` for anything that is not a well-formed payload and
    lets Protean's ``ValidationError`` through for out-of-range values.
    """
    data = payload if isinstance(payload, Mapping) else json.loads(payload)
    if not isinstance(data, Mapping):
        raise ValueError("payload must be a JSON object")

    order_id = data.get("orderId")
    order_total = data.get("orderTotal")
    timestamp = data.get("timestamp")
    signature = data.get("hash")

    if not isinstance(order_id, int) or isinstance(order_id, bool):
        raise ValueError("orderId must be an integer")
    if not _is_number(order_total):
        raise ValueError("orderTotal must be a number")
    if not _is_number(timestamp) or timestamp != int(timestamp):
        raise ValueError("timestamp must be an integer number of milliseconds")
    if not isinstance(signature, str):
        raise ValueError("hash must be a string")

    return PickupToken(
        order_id=order_id,
        order_total=float(order_total),
        issued_at=from_epoch_ms(int(timestamp)),
        signature=signature,
    )
