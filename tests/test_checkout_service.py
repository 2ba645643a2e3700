"""Tests for coupon redemption, checkout and gift coupons."""

import asyncio
from unittest.mock import AsyncMock, Mock

import pytest

from storefront.core.cart import CartState
from storefront.core.errors import (
    BackendUnavailableError,
    EmptyCartError,
    GiftAmountError,
    InvalidCouponError,
)
from storefront.models.cart import CartItem, CouponInfo
from storefront.models.checkout import InvalidCoupon, ValidCoupon
from storefront.services.backend_client import BackendClient
from storefront.services.checkout import CheckoutService


@pytest.fixture
def cart():
    cart = CartState()
    cart.add_item(CartItem(product_id="pho", name="Phở Bò", unit_amount=1450, quantity=3, currency="EUR"))
    return cart


@pytest.fixture
def service(backend_client):
    return CheckoutService(backend_client)


class TestApplyCouponCode:

    @pytest.mark.asyncio
    async def test_amount_off_coupon(self, service, cart):
        info, message = await service.apply_coupon_code(cart, "  FIVE ")

        assert info == CouponInfo(code="FIVE", amount_off=500, label="Gutschein – 5,00 €")
        assert message == "Gutschein erfolgreich angewendet."
        assert cart.coupon == info
        assert cart.total == 3850

    @pytest.mark.asyncio
    async def test_percent_off_coupon(self, service, cart):
        info, message = await service.apply_coupon_code(cart, "TEN")

        assert info.percent_off == 10
        assert info.label == "Rabatt – 10%"
        assert message == "Rabattcode erfolgreich angewendet."
        assert cart.total == 3915

    @pytest.mark.asyncio
    async def test_invalid_coupon_leaves_cart_unchanged(self, service, cart):
        await service.apply_coupon_code(cart, "FIVE")

        with pytest.raises(InvalidCouponError) as exc_info:
            await service.apply_coupon_code(cart, "NOPE")

        assert "nicht gültig" in exc_info.value.message
        assert cart.coupon.code == "FIVE"

    @pytest.mark.asyncio
    async def test_coupon_without_discount(self, service, cart):
        with pytest.raises(InvalidCouponError) as exc_info:
            await service.apply_coupon_code(cart, "EMPTY")

        assert exc_info.value.message == "Dieser Gutschein hat keinen verfügbaren Rabatt."
        assert cart.coupon is None

    @pytest.mark.asyncio
    async def test_blank_code_does_not_call_backend(self, cart):
        backend = Mock(spec=BackendClient)
        backend.apply_coupon = AsyncMock()
        service = CheckoutService(backend)

        with pytest.raises(InvalidCouponError):
            await service.apply_coupon_code(cart, "   ")
        backend.apply_coupon.assert_not_called()

    @pytest.mark.asyncio
    async def test_backend_failure_leaves_cart_unchanged(self, service, cart, fake_backend):
        fake_backend.down = True
        with pytest.raises(BackendUnavailableError):
            await service.apply_coupon_code(cart, "FIVE")
        assert cart.coupon is None

    @pytest.mark.asyncio
    async def test_concurrent_applications_resolve_in_completion_order(self, cart):
        """Stale answers are not discarded: whichever call finishes last wins."""
        slow_release = asyncio.Event()

        async def apply_coupon(code, items):
            if code == "SLOW":
                await slow_release.wait()
                return ValidCoupon(amount_off=100)
            return ValidCoupon(percent_off=10)

        backend = Mock(spec=BackendClient)
        backend.apply_coupon = AsyncMock(side_effect=apply_coupon)
        service = CheckoutService(backend)

        slow = asyncio.create_task(service.apply_coupon_code(cart, "SLOW"))
        await asyncio.sleep(0)
        await service.apply_coupon_code(cart, "FAST")
        assert cart.coupon.code == "FAST"

        slow_release.set()
        await slow
        assert cart.coupon.code == "SLOW"


class TestCheckCoupon:

    @pytest.mark.asyncio
    async def test_amount_message(self, service, cart):
        valid, message = await service.check_coupon(cart, "FIVE")
        assert valid
        assert message == "Dieser Code reduziert Ihren aktuellen Warenkorb um 5,00 €."
        assert cart.coupon is None

    @pytest.mark.asyncio
    async def test_percent_message(self, service, cart):
        valid, message = await service.check_coupon(cart, "TEN")
        assert valid
        assert "10% Rabatt" in message

    @pytest.mark.asyncio
    async def test_invalid(self, service, cart):
        valid, _ = await service.check_coupon(cart, "NOPE")
        assert not valid

    @pytest.mark.asyncio
    async def test_blank(self, service, cart):
        assert await service.check_coupon(cart, "") == (False, "Bitte geben Sie einen Code ein.")


class TestCheckout:

    @pytest.mark.asyncio
    async def test_returns_payment_url(self, service, cart, fake_backend):
        await service.apply_coupon_code(cart, "TEN")
        url = await service.checkout(cart, " gast@example.com ")

        assert url == "https://pay.example/session/cs_123"
        body = fake_backend.last_json()
        assert body["coupon"] == "TEN"
        assert body["email"] == "gast@example.com"
        # The cart stays intact until the thank-you page
        assert not cart.is_empty

    @pytest.mark.asyncio
    async def test_empty_cart(self, service, fake_backend):
        with pytest.raises(EmptyCartError):
            await service.checkout(CartState())
        assert fake_backend.requests == []

    @pytest.mark.asyncio
    async def test_backend_failure(self, service, cart, fake_backend):
        fake_backend.down = True
        with pytest.raises(BackendUnavailableError):
            await service.checkout(cart)
        assert cart.item_count == 3


class TestGiftCoupons:

    @pytest.mark.parametrize(
        "amount, expected",
        [(50, 50), (3, 10), (10, 10), (24.5, 25), (24.4, 24), (900, 500)],
    )
    def test_normalize_amount(self, service, amount, expected):
        assert service.normalize_gift_amount(amount) == expected

    @pytest.mark.parametrize("amount", [None, float("nan"), float("inf")])
    def test_rejects_non_numbers(self, service, amount):
        with pytest.raises(GiftAmountError):
            service.normalize_gift_amount(amount)

    @pytest.mark.asyncio
    async def test_buy(self, service, fake_backend):
        url = await service.buy_gift_coupon(42.0, "")
        assert url == "https://pay.example/session/gift_1"
        assert fake_backend.last_json() == {"amount_eur": 42}
