"""Restaurant storefront: menu, cart, coupons and checkout."""

__version__ = "1.0.0"
