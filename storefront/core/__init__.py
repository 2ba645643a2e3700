# Core modules

from .config import settings, get_settings, Settings
from .cart import CartState, MAX_QUANTITY
from .pricing import calculate_discount, format_currency
from .storage import CartStore, MemoryStorage, FileStorage
from .session import CartSessionManager, CartSession

__all__ = [
    "settings",
    "get_settings",
    "Settings",
    "CartState",
    "MAX_QUANTITY",
    "calculate_discount",
    "format_currency",
    "CartStore",
    "MemoryStorage",
    "FileStorage",
    "CartSessionManager",
    "CartSession",
]
