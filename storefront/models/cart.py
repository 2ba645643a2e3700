"""Cart models for the storefront"""

from pydantic import BaseModel, Field
from typing import Optional


class CartItem(BaseModel):
    """Line item in a shopping cart. Amounts are in minor currency units."""
    product_id: str = Field(alias="productId")
    name: str
    unit_amount: int = Field(alias="unitAmount", ge=0)
    # Range is enforced by the cart container, not here
    quantity: int = 1
    currency: str = Field(default="EUR", min_length=3, max_length=3)

    class Config:
        populate_by_name = True

    @property
    def line_total(self) -> int:
        return self.unit_amount * max(self.quantity, 0)


class CouponInfo(BaseModel):
    """Coupon attached to a cart, already validated by the backend"""
    code: str
    amount_off: Optional[int] = Field(default=None, alias="amountOff", ge=0)
    percent_off: Optional[int] = Field(default=None, alias="percentOff", ge=0, le=100)
    label: str = ""

    class Config:
        populate_by_name = True


class CartSnapshot(BaseModel):
    """Complete persisted state of a cart"""
    items: list[CartItem] = []
    coupon: Optional[CouponInfo] = None

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True)


class AddToCartRequest(BaseModel):
    """Request to add a menu product to the cart"""
    product_id: str
    quantity: int = 1


class UpdateCartItemRequest(BaseModel):
    """Request to set an item quantity (0 or less removes it)"""
    quantity: int


class CartView(BaseModel):
    """Cart as shown to the UI, with derived totals"""
    items: list[CartItem]
    coupon: Optional[CouponInfo] = None
    subtotal: int
    discount: int
    total: int
    item_count: int = Field(alias="itemCount")
    is_open: bool = Field(alias="isOpen")

    class Config:
        populate_by_name = True


class CartResponse(BaseModel):
    """Cart API response"""
    cart: CartView
    message: Optional[str] = None
