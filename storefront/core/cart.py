"""
Cart state container.

Holds the line items and the applied coupon of one visitor's cart. Totals
are derived on every read. Every mutation is written through to the
CartStore when one is attached.
"""

import logging
from typing import Optional

from ..models.cart import CartItem, CouponInfo, CartSnapshot, CartView
from .pricing import calculate_discount, calculate_total
from .storage import CartStore

logger = logging.getLogger(__name__)

MAX_QUANTITY = 999


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


class CartState:
    """
    Shopping cart of a single visitor.

    Mutations never raise: out-of-range quantities are clamped, unknown
    product ids are ignored. Coupons are not validated here; callers apply
    them once the backend has accepted the code.
    """

    def __init__(self, store: Optional[CartStore] = None):
        self._store = store
        self._items: list[CartItem] = []
        self._coupon: Optional[CouponInfo] = None
        # Drawer visibility is UI state and is never persisted
        self.is_open = False

        if store is not None:
            self._hydrate(store.load())

    def _hydrate(self, snapshot: CartSnapshot) -> None:
        for item in snapshot.items:
            if item.quantity <= 0:
                continue
            existing = self._find(item.product_id)
            if existing:
                existing.quantity = _clamp(existing.quantity + item.quantity, 1, MAX_QUANTITY)
            else:
                self._items.append(
                    item.model_copy(update={"quantity": _clamp(item.quantity, 1, MAX_QUANTITY)})
                )
        self._coupon = snapshot.coupon

    def _find(self, product_id: str) -> Optional[CartItem]:
        return next((item for item in self._items if item.product_id == product_id), None)

    def _persist(self) -> None:
        if self._store is not None:
            self._store.save(self.snapshot())

    # ==================== Reads ====================

    @property
    def items(self) -> list[CartItem]:
        return [item.model_copy() for item in self._items]

    @property
    def coupon(self) -> Optional[CouponInfo]:
        return self._coupon.model_copy() if self._coupon else None

    @property
    def subtotal(self) -> int:
        return sum(item.line_total for item in self._items)

    @property
    def discount(self) -> int:
        return calculate_discount(self.subtotal, self._coupon)

    @property
    def total(self) -> int:
        return calculate_total(self.subtotal, self.discount)

    @property
    def item_count(self) -> int:
        """Number of units, shown on the cart badge"""
        return sum(item.quantity for item in self._items)

    @property
    def is_empty(self) -> bool:
        return not self._items

    def get_item(self, product_id: str) -> Optional[CartItem]:
        item = self._find(product_id)
        return item.model_copy() if item else None

    def snapshot(self) -> CartSnapshot:
        """Copy of the persistable state"""
        return CartSnapshot(items=self.items, coupon=self.coupon)

    def to_view(self) -> CartView:
        subtotal = self.subtotal
        discount = calculate_discount(subtotal, self._coupon)
        return CartView(
            items=self.items,
            coupon=self.coupon,
            subtotal=subtotal,
            discount=discount,
            total=calculate_total(subtotal, discount),
            item_count=self.item_count,
            is_open=self.is_open,
        )

    # ==================== Mutations ====================

    def add_item(self, item: CartItem) -> None:
        """Add a line, merging quantities with an existing line for the same product"""
        existing = self._find(item.product_id)
        if existing:
            existing.quantity = _clamp(existing.quantity + item.quantity, 1, MAX_QUANTITY)
        else:
            self._items.append(
                item.model_copy(update={"quantity": _clamp(item.quantity, 1, MAX_QUANTITY)})
            )
        self._persist()

    def update_quantity(self, product_id: str, quantity: int) -> None:
        """Set a line's quantity; zero or less removes the line"""
        item = self._find(product_id)
        if not item:
            return

        quantity = _clamp(quantity, 0, MAX_QUANTITY)
        if quantity == 0:
            self._items = [i for i in self._items if i.product_id != product_id]
        else:
            item.quantity = quantity
        self._persist()

    def remove_item(self, product_id: str) -> None:
        if not self._find(product_id):
            return
        self._items = [i for i in self._items if i.product_id != product_id]
        self._persist()

    def clear_cart(self) -> None:
        """Remove all items and the coupon"""
        self._items = []
        self._coupon = None
        self._persist()

    def apply_coupon(self, info: CouponInfo) -> None:
        """Attach a coupon, replacing any previous one"""
        self._coupon = info.model_copy()
        self._persist()

    def remove_coupon(self) -> None:
        self._coupon = None
        self._persist()

    # ==================== Drawer ====================

    def open_cart(self) -> None:
        self.is_open = True

    def close_cart(self) -> None:
        self.is_open = False

    def toggle_cart(self) -> None:
        self.is_open = not self.is_open
