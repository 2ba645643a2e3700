"""Cart API routes for the storefront"""

import logging
from typing import Literal
from fastapi import APIRouter, HTTPException, Depends

from ..core.errors import (
    BackendUnavailableError,
    EmptyCartError,
    InvalidCouponError,
)
from ..core.session import CartSession
from ..models.cart import AddToCartRequest, UpdateCartItemRequest, CartResponse
from ..models.checkout import (
    CouponCodeRequest,
    CouponCheckResponse,
    StartCheckoutRequest,
    RedirectResponse,
)
from ..services.backend_client import BackendClient
from ..services.checkout import CheckoutService
from .dependencies import get_backend_client, get_cart_session, get_checkout_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/storefront/cart", tags=["Cart"])


@router.get("", response_model=CartResponse)
async def get_cart(session: CartSession = Depends(get_cart_session)):
    """Get the visitor's cart"""
    return CartResponse(cart=session.cart.to_view())


@router.post("/items", response_model=CartResponse)
async def add_to_cart(
    request: AddToCartRequest,
    session: CartSession = Depends(get_cart_session),
    backend: BackendClient = Depends(get_backend_client),
):
    """Add a menu product to the cart"""
    try:
        product = await backend.get_product(request.product_id)
    except BackendUnavailableError as e:
        raise HTTPException(status_code=502, detail=e.message)

    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    session.cart.add_item(product.to_cart_item(request.quantity))
    return CartResponse(
        cart=session.cart.to_view(),
        message=f"Added {max(request.quantity, 1)}x {product.name} to cart",
    )


@router.put("/items/{product_id}", response_model=CartResponse)
async def update_cart_item(
    product_id: str,
    request: UpdateCartItemRequest,
    session: CartSession = Depends(get_cart_session),
):
    """Update item quantity in cart (0 removes the item)"""
    session.cart.update_quantity(product_id, request.quantity)
    return CartResponse(cart=session.cart.to_view(), message="Cart updated")


@router.delete("/items/{product_id}", response_model=CartResponse)
async def remove_from_cart(
    product_id: str,
    session: CartSession = Depends(get_cart_session),
):
    """Remove an item from the cart"""
    session.cart.remove_item(product_id)
    return CartResponse(cart=session.cart.to_view(), message="Item removed")


@router.delete("", response_model=CartResponse)
async def clear_cart(session: CartSession = Depends(get_cart_session)):
    """Clear all items and the coupon"""
    session.cart.clear_cart()
    return CartResponse(cart=session.cart.to_view(), message="Cart cleared")


@router.post("/coupon", response_model=CartResponse)
async def apply_coupon(
    request: CouponCodeRequest,
    session: CartSession = Depends(get_cart_session),
    service: CheckoutService = Depends(get_checkout_service),
):
    """Validate a coupon code with the backend and apply it"""
    try:
        _, message = await service.apply_coupon_code(session.cart, request.code)
    except InvalidCouponError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except BackendUnavailableError:
        raise HTTPException(
            status_code=502,
            detail="Beim Prüfen des Gutscheins ist ein Fehler aufgetreten.",
        )

    return CartResponse(cart=session.cart.to_view(), message=message)


@router.post("/coupon/check", response_model=CouponCheckResponse)
async def check_coupon(
    request: CouponCodeRequest,
    session: CartSession = Depends(get_cart_session),
    service: CheckoutService = Depends(get_checkout_service),
):
    """Check what a code is worth for the current cart without applying it"""
    try:
        valid, message = await service.check_coupon(session.cart, request.code)
    except BackendUnavailableError:
        raise HTTPException(
            status_code=502,
            detail="Beim Prüfen des Codes ist ein Fehler aufgetreten.",
        )
    return CouponCheckResponse(valid=valid, message=message)


@router.delete("/coupon", response_model=CartResponse)
async def remove_coupon(session: CartSession = Depends(get_cart_session)):
    """Remove the applied coupon"""
    session.cart.remove_coupon()
    return CartResponse(cart=session.cart.to_view(), message="Coupon removed")


@router.post("/checkout", response_model=RedirectResponse)
async def checkout(
    request: StartCheckoutRequest,
    session: CartSession = Depends(get_cart_session),
    service: CheckoutService = Depends(get_checkout_service),
):
    """
    Create a payment session.

    The cart is kept until the customer lands on the thank-you page.
    """
    try:
        url = await service.checkout(session.cart, request.email)
    except EmptyCartError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except BackendUnavailableError as e:
        raise HTTPException(status_code=502, detail=e.message)

    return RedirectResponse(url=url)


@router.post("/drawer/{action}", response_model=CartResponse)
async def drawer(
    action: Literal["open", "close", "toggle"],
    session: CartSession = Depends(get_cart_session),
):
    """Open, close or toggle the cart drawer"""
    if action == "open":
        session.cart.open_cart()
    elif action == "close":
        session.cart.close_cart()
    else:
        session.cart.toggle_cart()
    return CartResponse(cart=session.cart.to_view())
