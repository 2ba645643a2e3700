"""Checkout and coupon models for the storefront"""

from dataclasses import dataclass
from pydantic import BaseModel
from typing import Optional, Union

from .cart import CartItem, CouponInfo


# ==================== Backend wire models ====================

class ApplyCouponRequest(BaseModel):
    """Body of POST /coupons/apply"""
    code: str
    cart: list[CartItem]


class ApplyCouponResponse(BaseModel):
    """Raw answer of POST /coupons/apply"""
    valid: bool = False
    amount_off: Optional[int] = None
    percent_off: Optional[int] = None


class CheckoutRequest(BaseModel):
    """Body of POST /checkout"""
    cart: list[CartItem]
    coupon: Optional[str] = None
    email: Optional[str] = None


class CheckoutResponse(BaseModel):
    """Payment redirect returned by the backend"""
    url: str


class GiftCouponRequest(BaseModel):
    """Body of POST /gift-coupons/buy"""
    amount_eur: int
    email: Optional[str] = None


# ==================== Coupon validation results ====================

@dataclass(frozen=True)
class ValidCoupon:
    """Coupon accepted by the backend with at least one positive discount"""
    amount_off: Optional[int] = None
    percent_off: Optional[int] = None

    @property
    def is_amount_off(self) -> bool:
        # Amount-off wins when the backend sends both
        return bool(self.amount_off and self.amount_off > 0)

    def to_coupon_info(self, code: str, label: str) -> CouponInfo:
        if self.is_amount_off:
            return CouponInfo(code=code, amount_off=self.amount_off, label=label)
        return CouponInfo(code=code, percent_off=self.percent_off, label=label)


@dataclass(frozen=True)
class InvalidCoupon:
    """Coupon rejected by the backend or carrying no usable discount"""
    reason: str = "invalid"


CouponResult = Union[ValidCoupon, InvalidCoupon]


def coupon_result_from_response(response: ApplyCouponResponse) -> CouponResult:
    """Classify a backend coupon answer"""
    if not response.valid:
        return InvalidCoupon()

    amount_off = response.amount_off if response.amount_off and response.amount_off > 0 else None
    percent_off = response.percent_off if response.percent_off and response.percent_off > 0 else None

    if percent_off is not None and percent_off > 100:
        if amount_off is None:
            return InvalidCoupon(reason="malformed")
        percent_off = None

    if amount_off is None and percent_off is None:
        return InvalidCoupon(reason="no_discount")

    return ValidCoupon(amount_off=amount_off, percent_off=percent_off)


# ==================== Storefront API models ====================

class CouponCodeRequest(BaseModel):
    """Coupon code entered by the customer"""
    code: str


class CouponCheckResponse(BaseModel):
    """Result of checking a code without applying it"""
    valid: bool
    message: str


class StartCheckoutRequest(BaseModel):
    """Checkout form submitted by the customer"""
    email: Optional[str] = None


class BuyGiftCouponRequest(BaseModel):
    """Gift coupon purchase form"""
    amount_eur: Optional[float] = None
    email: Optional[str] = None


class RedirectResponse(BaseModel):
    """Payment provider URL the browser should follow"""
    url: str
