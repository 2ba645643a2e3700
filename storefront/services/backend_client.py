"""
Restaurant Backend Client

HTTP client for the restaurant backend: menu products, coupon
validation, checkout sessions, gift coupons and the admin API.
"""

import json
import logging
from typing import Optional, Any, Mapping
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from ..core.config import normalize_backend_url
from ..core.errors import AdminAuthError, BackendUnavailableError
from ..models.cart import CartItem
from ..models.admin import (
    AdminCoupon,
    AdminLoginRequest,
    AdminLoginResponse,
    AdminOrder,
    AdminUser,
    NewCouponRequest,
    NewUserRequest,
)
from ..models.product import Product, ProductsResponse
from ..models.checkout import (
    ApplyCouponRequest,
    ApplyCouponResponse,
    CheckoutRequest,
    CheckoutResponse,
    GiftCouponRequest,
    CouponResult,
    coupon_result_from_response,
)

logger = logging.getLogger(__name__)

GENERIC_ERROR = "Der Server ist momentan nicht erreichbar. Bitte versuchen Sie es erneut."
MSG_ADMIN_LOGIN_FAILED = "E-Mail oder Passwort ist falsch."
MSG_ADMIN_SESSION_EXPIRED = "Ihre Anmeldung ist abgelaufen. Bitte melden Sie sich erneut an."


class BackendClient:
    """
    Client for the restaurant backend API.

    Transport failures and error statuses are raised as
    BackendUnavailableError; nothing is retried.
    """

    def __init__(
        self,
        backend_url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize backend client.

        Args:
            backend_url: Backend base URL, with or without the /api suffix
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = normalize_backend_url(backend_url)
        self._http_client = httpx.AsyncClient(timeout=timeout, transport=transport)
        logger.info(f"Backend client initialized for {self.base_url}")

    async def close(self) -> None:
        """Close HTTP client"""
        await self._http_client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        body: Optional[dict] = None,
        token: Optional[str] = None,
    ) -> Any:
        """Make a JSON request and return the decoded body (None when empty)"""
        url = f"{self.base_url}{path}"
        body_str = json.dumps(body) if body is not None else None
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"

        try:
            response = await self._http_client.request(
                method=method,
                url=url,
                headers=headers,
                content=body_str,
            )
        except httpx.HTTPError as e:
            logger.error(f"Request to {method} {url} failed: {e!r}")
            raise BackendUnavailableError(GENERIC_ERROR, detail=str(e)) from e

        if token and response.status_code in (401, 403):
            logger.warning(f"Admin token rejected for {method} {path}")
            raise AdminAuthError(MSG_ADMIN_SESSION_EXPIRED)

        if response.status_code >= 400:
            logger.error(f"Request failed: {response.status_code} - {response.text}")
            raise BackendUnavailableError(
                GENERIC_ERROR,
                status_code=response.status_code,
                detail=response.text or f"Request failed with {response.status_code}",
            )

        if not response.content:
            return None

        try:
            return response.json()
        except ValueError as e:
            logger.error(f"Invalid JSON from {method} {url}: {response.text[:200]}")
            raise BackendUnavailableError(GENERIC_ERROR, status_code=response.status_code) from e

    def _parse(self, model, data: Any):
        try:
            return model.model_validate(data)
        except ValidationError as e:
            logger.error(f"Unexpected {model.__name__} payload: {e}")
            raise BackendUnavailableError(GENERIC_ERROR, detail=str(e)) from e

    # ==================== Product APIs ====================

    async def list_products(self) -> list[Product]:
        """Get the menu"""
        data = await self._request("GET", "/products")
        return self._parse(ProductsResponse, data).products

    async def get_product(self, product_id: str) -> Optional[Product]:
        """Find a menu product by id"""
        products = await self.list_products()
        return next((p for p in products if p.id == product_id), None)

    # ==================== Coupon APIs ====================

    async def apply_coupon(self, code: str, cart: list[CartItem]) -> CouponResult:
        """Ask the backend whether a code applies to the given cart"""
        request = ApplyCouponRequest(code=code, cart=cart)
        data = await self._request(
            "POST",
            "/coupons/apply",
            body=request.model_dump(by_alias=True),
        )
        return coupon_result_from_response(self._parse(ApplyCouponResponse, data))

    async def buy_gift_coupon(self, amount_eur: int, email: Optional[str] = None) -> str:
        """Start a gift coupon purchase, returns the payment redirect URL"""
        request = GiftCouponRequest(amount_eur=amount_eur, email=email)
        data = await self._request(
            "POST",
            "/gift-coupons/buy",
            body=request.model_dump(exclude_none=True),
        )
        return self._parse(CheckoutResponse, data).url

    # ==================== Checkout APIs ====================

    async def create_checkout(
        self,
        cart: list[CartItem],
        coupon: Optional[str] = None,
        email: Optional[str] = None,
    ) -> str:
        """Create a payment session, returns the payment redirect URL"""
        request = CheckoutRequest(cart=cart, coupon=coupon, email=email)
        data = await self._request(
            "POST",
            "/checkout",
            body=request.model_dump(by_alias=True, exclude_none=True),
        )
        return self._parse(CheckoutResponse, data).url

    # ==================== Admin APIs ====================

    async def admin_login(self, email: str, password: str) -> str:
        """Exchange admin credentials for a backend token"""
        request = AdminLoginRequest(email=email, password=password)
        try:
            data = await self._request("POST", "/auth/login", body=request.model_dump())
        except BackendUnavailableError as e:
            if e.status_code in (401, 403, 404):
                raise AdminAuthError(MSG_ADMIN_LOGIN_FAILED) from e
            raise
        return self._parse(AdminLoginResponse, data).token

    async def list_orders(self, token: str) -> list[AdminOrder]:
        data = await self._request("GET", "/admin/orders", token=token)
        return [self._parse(AdminOrder, row) for row in _rows(data, "orders")]

    async def list_users(self, token: str) -> list[AdminUser]:
        data = await self._request("GET", "/admin/users", token=token)
        return [self._parse(AdminUser, row) for row in _rows(data, "users")]

    async def create_user(self, request: NewUserRequest, token: str) -> None:
        await self._request("POST", "/admin/users", body=request.model_dump(), token=token)

    async def update_user_role(self, email: str, role: str, token: str) -> None:
        await self._request(
            "PATCH",
            f"/admin/users/{quote(email, safe='')}",
            body={"role": role},
            token=token,
        )

    async def delete_user(self, email: str, token: str) -> None:
        await self._request("DELETE", f"/admin/users/{quote(email, safe='')}", token=token)

    async def list_coupons(self, token: str) -> list[AdminCoupon]:
        data = await self._request("GET", "/admin/coupons", token=token)
        return [self._parse(AdminCoupon, row) for row in _rows(data, "coupons")]

    async def create_coupon(self, request: NewCouponRequest, token: str) -> None:
        await self._request("POST", "/admin/coupons", body=request.model_dump(), token=token)

    async def delete_coupon(self, code: str, token: str) -> None:
        await self._request("DELETE", f"/admin/coupons/{quote(code, safe='')}", token=token)

    # ==================== Pass-through ====================

    async def forward(
        self,
        method: str,
        path: str,
        query: str = "",
        headers: Optional[Mapping[str, str]] = None,
        body: Optional[bytes] = None,
    ) -> httpx.Response:
        """Relay a raw request to the backend without interpreting the answer"""
        url = f"{self.base_url}/{path.lstrip('/')}"
        if query:
            url = f"{url}?{query}"

        try:
            return await self._http_client.request(
                method=method,
                url=url,
                headers=dict(headers or {}),
                content=body or None,
            )
        except httpx.HTTPError as e:
            logger.warning(f"Proxy request {method} {url} failed: {e!r}")
            raise BackendUnavailableError(GENERIC_ERROR, detail=str(e)) from e
        finally:
            # Cookies set by the backend belong to the visitor, not to this shared client
            self._http_client.cookies.clear()


def _rows(data: Any, key: str) -> list:
    """List under `key` of an admin listing; missing or malformed lists are empty"""
    rows = data.get(key) if isinstance(data, dict) else None
    return rows if isinstance(rows, list) else []
