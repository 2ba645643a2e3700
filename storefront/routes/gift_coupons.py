"""Gift coupon purchase routes"""

from fastapi import APIRouter, HTTPException, Depends

from ..core.errors import BackendUnavailableError, GiftAmountError
from ..models.checkout import BuyGiftCouponRequest, RedirectResponse
from ..services.checkout import CheckoutService
from .dependencies import get_checkout_service

router = APIRouter(prefix="/storefront/gift-coupons", tags=["Gift Coupons"])


@router.post("", response_model=RedirectResponse)
async def buy_gift_coupon(
    request: BuyGiftCouponRequest,
    service: CheckoutService = Depends(get_checkout_service),
):
    """Start a gift coupon purchase and return the payment URL"""
    try:
        url = await service.buy_gift_coupon(request.amount_eur, request.email)
    except GiftAmountError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except BackendUnavailableError:
        raise HTTPException(
            status_code=502,
            detail="Der Gutschein konnte nicht erstellt werden. Bitte versuchen Sie es erneut.",
        )
    return RedirectResponse(url=url)
