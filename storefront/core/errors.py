"""Storefront exceptions"""

from typing import Optional


class StorefrontError(Exception):
    """Base exception for storefront errors. `message` is safe to show to customers."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BackendUnavailableError(StorefrontError):
    """Backend unreachable, timed out, or answered with an error status"""

    def __init__(self, message: str, status_code: Optional[int] = None, detail: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


class InvalidCouponError(StorefrontError):
    """Coupon code rejected by the backend or without usable discount"""
    pass


class EmptyCartError(StorefrontError):
    """Checkout attempted with nothing in the cart"""
    pass


class GiftAmountError(StorefrontError):
    """Gift coupon amount could not be interpreted"""
    pass


class AdminAuthError(StorefrontError):
    """Backend rejected the admin credentials or token"""
    pass
