# Storefront Routes

from .pages import router as pages_router
from .cart import router as cart_router
from .gift_coupons import router as gift_coupons_router
from .admin import router as admin_router
from .proxy import router as proxy_router

__all__ = ["pages_router", "cart_router", "gift_coupons_router", "admin_router", "proxy_router"]
