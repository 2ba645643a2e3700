"""
Checkout Service

Coupon redemption, checkout and gift coupon purchase on top of the
backend client. Backend answers are applied to the cart only after they
resolve successfully; a failed call leaves the cart untouched.
"""

import math
import logging
from typing import Optional

from ..core.cart import CartState
from ..core.errors import EmptyCartError, GiftAmountError, InvalidCouponError
from ..core.pricing import coupon_label, format_currency
from ..models.cart import CouponInfo
from ..models.checkout import InvalidCoupon, ValidCoupon
from .backend_client import BackendClient

logger = logging.getLogger(__name__)

MSG_CODE_REQUIRED = "Bitte geben Sie einen Gutscheincode ein."
MSG_COUPON_INVALID = "Dieser Gutschein ist nicht gültig oder wurde bereits verwendet."
MSG_COUPON_NO_DISCOUNT = "Dieser Gutschein hat keinen verfügbaren Rabatt."
MSG_AMOUNT_APPLIED = "Gutschein erfolgreich angewendet."
MSG_PERCENT_APPLIED = "Rabattcode erfolgreich angewendet."
MSG_CHECK_INVALID = (
    "Dieser Gutschein ist nicht gültig, bereits verbraucht oder benötigt ein höheres Guthaben."
)
MSG_EMPTY_CART = "Ihr Warenkorb ist leer."
MSG_GIFT_AMOUNT = "Der Mindestbetrag für Geschenkgutscheine beträgt {minimum} €."


class CheckoutService:
    """Turns customer actions into backend calls and cart updates"""

    def __init__(
        self,
        backend: BackendClient,
        currency: str = "EUR",
        gift_amount_min: int = 10,
        gift_amount_max: int = 500,
    ):
        self.backend = backend
        self.currency = currency
        self.gift_amount_min = gift_amount_min
        self.gift_amount_max = gift_amount_max

    async def apply_coupon_code(self, cart: CartState, code: str) -> tuple[CouponInfo, str]:
        """
        Validate a code against the backend and attach it to the cart.

        Returns the applied coupon and the message to show. Raises
        InvalidCouponError without touching the cart when the backend
        rejects the code, and lets BackendUnavailableError propagate.
        """
        code = (code or "").strip()
        if not code:
            raise InvalidCouponError(MSG_CODE_REQUIRED)

        result = await self.backend.apply_coupon(code, cart.items)

        if isinstance(result, InvalidCoupon):
            logger.info(f"Coupon {code!r} rejected ({result.reason})")
            if result.reason == "invalid":
                raise InvalidCouponError(MSG_COUPON_INVALID)
            raise InvalidCouponError(MSG_COUPON_NO_DISCOUNT)

        label = coupon_label(
            amount_off=result.amount_off if result.is_amount_off else None,
            percent_off=None if result.is_amount_off else result.percent_off,
            currency=self.currency,
        )
        info = result.to_coupon_info(code, label)
        cart.apply_coupon(info)
        logger.info(f"Coupon {code!r} applied: {label}")

        return info, MSG_AMOUNT_APPLIED if result.is_amount_off else MSG_PERCENT_APPLIED

    async def check_coupon(self, cart: CartState, code: str) -> tuple[bool, str]:
        """Describe what a code would do for the current cart, without applying it"""
        code = (code or "").strip()
        if not code:
            return False, "Bitte geben Sie einen Code ein."

        result = await self.backend.apply_coupon(code, cart.items)
        if not isinstance(result, ValidCoupon):
            return False, MSG_CHECK_INVALID

        if result.is_amount_off:
            return True, (
                "Dieser Code reduziert Ihren aktuellen Warenkorb um "
                f"{format_currency(result.amount_off, self.currency)}."
            )
        return True, f"Dieser Code gewährt {result.percent_off}% Rabatt auf Ihre Bestellung."

    async def checkout(self, cart: CartState, email: Optional[str] = None) -> str:
        """Create a payment session for the cart and return the redirect URL"""
        if cart.is_empty:
            raise EmptyCartError(MSG_EMPTY_CART)

        coupon = cart.coupon
        url = await self.backend.create_checkout(
            cart=cart.items,
            coupon=coupon.code if coupon else None,
            email=(email or "").strip() or None,
        )
        logger.info(f"Checkout session created for {cart.item_count} item(s), total {cart.total}")
        return url

    def normalize_gift_amount(self, amount: Optional[float]) -> int:
        """Round to whole euros and clamp into the allowed range"""
        if amount is None or not math.isfinite(amount):
            raise GiftAmountError(MSG_GIFT_AMOUNT.format(minimum=self.gift_amount_min))
        return max(self.gift_amount_min, min(self.gift_amount_max, math.floor(amount + 0.5)))

    async def buy_gift_coupon(self, amount_eur: Optional[float], email: Optional[str] = None) -> str:
        """Start a gift coupon purchase and return the payment redirect URL"""
        amount = self.normalize_gift_amount(amount_eur)
        return await self.backend.buy_gift_coupon(amount, (email or "").strip() or None)
