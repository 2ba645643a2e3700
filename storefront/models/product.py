"""Menu product models"""

from pydantic import BaseModel, Field
from typing import Optional

from .cart import CartItem


class Product(BaseModel):
    """Dish on the restaurant menu, as returned by the backend"""
    id: str
    name: str
    unit_amount: int = Field(ge=0)
    currency: str = "EUR"
    image_url: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    allergens: Optional[str] = None
    additives: Optional[str] = None
    spice_level: Optional[str] = None
    serving_size: Optional[str] = None
    dietary_tags: Optional[str] = None
    ingredients: Optional[str] = None

    def to_cart_item(self, quantity: int = 1) -> CartItem:
        """Build a cart line for this product"""
        return CartItem(
            product_id=self.id,
            name=self.name,
            unit_amount=self.unit_amount,
            quantity=quantity,
            currency=self.currency,
        )


class ProductsResponse(BaseModel):
    """Response from GET /products"""
    products: list[Product] = []
