# Storefront services

from .backend_client import BackendClient
from .checkout import CheckoutService

__all__ = ["BackendClient", "CheckoutService"]
