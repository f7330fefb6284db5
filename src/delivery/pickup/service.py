"""PickupTokenService — issues and verifies signed pickup tokens.

Verification is stateless: a token stays valid for every presentation within
its lifetime. Single-use release is enforced by the order state machine that
owns the order record (``ready_for_pickup -> delivered`` happens once), not
here.
"""

import hashlib
import hmac
import math
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from decimal import Decimal

from protean.exceptions import ValidationError

from delivery.config import DeliverySettings, get_settings
from delivery.pickup.qr import render_qr_data_uri
from delivery.pickup.token import (
    PickupToken,
    as_utc,
    from_epoch_ms,
    parse_payload,
    signing_message,
    to_epoch_ms,
)
from delivery.utils.logging import get_logger

logger = get_logger(__name__)

# Tolerated clock drift between the issuing and the scanning host
MAX_CLOCK_SKEW = timedelta(minutes=5)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _as_amount(value) -> float | None:
    """``value`` as a finite float, or None when it is not a usable amount."""
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        return None
    try:
        amount = float(value)
    except (ValueError, OverflowError):
        return None
    return amount if math.isfinite(amount) else None


class PickupTokenService:
    def __init__(
        self,
        secret: str | None = None,
        ttl: timedelta | None = None,
        clock: Callable[[], datetime] = _utcnow,
        settings: DeliverySettings | None = None,
    ) -> None:
        if secret is None or ttl is None:
            settings = settings or get_settings()
            secret = secret or settings.pickup_token_secret
            ttl = ttl or timedelta(hours=settings.pickup_token_ttl_hours)

        self._secret = secret.encode("utf-8")
        self.ttl = ttl
        self._clock = clock

    def _sign(self, order_id: int, order_total, issued_at_ms: int) -> str:
        message = signing_message(order_id, order_total, issued_at_ms)
        return hmac.new(self._secret, message.encode("utf-8"), hashlib.sha256).hexdigest()

    def issue_token(self, order_id: int, order_total: float) -> PickupToken:
        """Mint a token for an order that is ready for pickup.

        ``order_total`` may be an int, float or Decimal; it is carried and
        signed as a float. Raises ValidationError when ``order_id`` is not a
        positive integer or ``order_total`` is not a finite non-negative
        amount.
        """
        errors = {}
        if not isinstance(order_id, int) or isinstance(order_id, bool) or order_id <= 0:
            errors["order_id"] = ["Order ID must be a positive integer"]
        total = _as_amount(order_total)
        if total is None or total < 0:
            errors["order_total"] = ["Order total must be a non-negative amount"]
        if errors:
            raise ValidationError(errors)

        issued_at_ms = to_epoch_ms(self._clock())
        token = PickupToken(
            order_id=order_id,
            order_total=total,
            issued_at=from_epoch_ms(issued_at_ms),
            signature=self._sign(order_id, total, issued_at_ms),
        )
        logger.info("Pickup token issued", order_id=order_id)
        return token

    def expires_at(self, token: PickupToken) -> datetime:
        return as_utc(token.issued_at) + self.ttl

    def encode(self, token: PickupToken) -> str:
        return token.to_payload()

    def render_qr(self, token: PickupToken) -> str:
        """PNG data URI of the token's QR code."""
        return render_qr_data_uri(token.to_payload())

    def issue_pickup_code(self, order_id: int, order_total: float) -> tuple[PickupToken, str]:
        """Issue a token and render it in one step."""
        token = self.issue_token(order_id, order_total)
        return token, self.render_qr(token)

    def verify_token(self, payload, expected_order_id: int) -> bool:
        """Check a scanned payload against the order being released.

        Returns False for malformed, mismatched, expired, or tampered
        payloads. Never raises.
        """
        try:
            token = parse_payload(payload)
        except (ValueError, TypeError, OverflowError, OSError, RecursionError, ValidationError) as exc:
            logger.info("Pickup token rejected", reason="malformed", detail=str(exc))
            return False

        if isinstance(expected_order_id, bool) or token.order_id != expected_order_id:
            logger.info(
                "Pickup token rejected",
                reason="order_mismatch",
                order_id=token.order_id,
                expected_order_id=expected_order_id,
            )
            return False

        age = self._clock() - as_utc(token.issued_at)
        if age > self.ttl:
            logger.info("Pickup token rejected", reason="expired", order_id=token.order_id)
            return False
        if age < -MAX_CLOCK_SKEW:
            logger.info("Pickup token rejected", reason="issued_in_future", order_id=token.order_id)
            return False

        expected = self._sign(token.order_id, token.order_total, token.issued_at_ms)
        if not hmac.compare_digest(expected.encode("utf-8"), token.signature.encode("utf-8")):
            logger.info("Pickup token rejected", reason="bad_signature", order_id=token.order_id)
            return False

        return True
