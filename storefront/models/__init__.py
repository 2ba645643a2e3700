# Storefront Models

from .cart import (
    CartItem,
    CouponInfo,
    CartSnapshot,
    AddToCartRequest,
    UpdateCartItemRequest,
    CartView,
    CartResponse,
)
from .product import Product, ProductsResponse
from .admin import (
    AdminLoginRequest,
    AdminSession,
    AdminOrder,
    AdminUser,
    AdminCoupon,
    NewUserRequest,
    UpdateUserRequest,
    NewCouponRequest,
)
from .checkout import (
    ApplyCouponResponse,
    CheckoutResponse,
    ValidCoupon,
    InvalidCoupon,
    CouponResult,
    coupon_result_from_response,
)

__all__ = [
    "CartItem",
    "CouponInfo",
    "CartSnapshot",
    "AddToCartRequest",
    "UpdateCartItemRequest",
    "CartView",
    "CartResponse",
    "Product",
    "ProductsResponse",
    "AdminLoginRequest",
    "AdminSession",
    "AdminOrder",
    "AdminUser",
    "AdminCoupon",
    "NewUserRequest",
    "UpdateUserRequest",
    "NewCouponRequest",
    "ApplyCouponResponse",
    "CheckoutResponse",
    "ValidCoupon",
    "InvalidCoupon",
    "CouponResult",
    "coupon_result_from_response",
]
