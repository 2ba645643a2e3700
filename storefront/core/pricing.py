"""
Cart pricing helpers.

All amounts are integers in minor currency units (cents).
"""

from typing import Optional

from ..models.cart import CouponInfo

CURRENCY_SYMBOLS = {
    "EUR": "€",
    "USD": "$",
    "GBP": "£",
    "VND": "₫",
}


def _round_half_up(numerator: int, denominator: int) -> int:
    """Integer division rounded to nearest, halves away from zero (non-negative inputs)"""
    return (2 * numerator + denominator) // (2 * denominator)


def calculate_discount(subtotal: int, coupon: Optional[CouponInfo]) -> int:
    """
    Discount a coupon grants on a subtotal.

    A fixed amount takes precedence over a percentage; the result never
    exceeds the subtotal and is never negative.
    """
    if coupon is None or subtotal <= 0:
        return 0

    if coupon.amount_off and coupon.amount_off > 0:
        return min(subtotal, coupon.amount_off)

    if coupon.percent_off and coupon.percent_off > 0:
        return min(subtotal, _round_half_up(subtotal * coupon.percent_off, 100))

    return 0


def calculate_total(subtotal: int, discount: int) -> int:
    return max(0, subtotal - discount)


def format_currency(amount: int, currency: str = "EUR") -> str:
    """Format minor units German style, e.g. 145000 -> '1.450,00 €'"""
    sign = "-" if amount < 0 else ""
    text = f"{abs(amount) / 100:,.2f}".replace(",", " ").replace(".", ",").replace(" ", ".")
    symbol = CURRENCY_SYMBOLS.get(currency.upper(), currency.upper())
    return f"{sign}{text} {symbol}"


def coupon_label(amount_off: Optional[int] = None, percent_off: Optional[int] = None,
                 currency: str = "EUR") -> str:
    """Display label for an applied coupon"""
    if amount_off and amount_off > 0:
        return f"Gutschein – {format_currency(amount_off, currency)}"
    if percent_off and percent_off > 0:
        return f"Rabatt – {percent_off}%"
    return "Gutschein"
