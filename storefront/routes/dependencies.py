"""
Shared route dependencies.

The providers are coroutines so they run on the event loop: two requests
for the same visitor can never open two separate carts in parallel.
"""

from typing import Optional
from fastapi import Depends, HTTPException, Request, Response

from ..core.config import settings
from ..core.session import CartSession, CartSessionManager
from ..core.storage import create_storage
from ..services.backend_client import BackendClient
from ..services.checkout import CheckoutService

# Initialize services lazily (overridden in tests)
backend_client: Optional[BackendClient] = None
session_manager: Optional[CartSessionManager] = None

MSG_ADMIN_LOGIN_REQUIRED = "Bitte melden Sie sich als Administrator an."


async def get_backend_client() -> BackendClient:
    """Get or create backend client"""
    global backend_client
    if backend_client is None:
        backend_client = BackendClient(
            backend_url=settings.backend_url,
            timeout=settings.backend_timeout,
        )
    return backend_client


async def get_session_manager() -> CartSessionManager:
    """Get or create the cart session manager"""
    global session_manager
    if session_manager is None:
        session_manager = CartSessionManager(
            storage=create_storage(settings.cart_storage, settings.cart_storage_dir),
            storage_key=settings.cart_storage_key,
            max_age_hours=settings.session_max_age_hours,
            max_sessions=settings.max_live_sessions,
            cleanup_interval_seconds=settings.session_cleanup_interval_seconds,
        )
    return session_manager


async def get_checkout_service(
    backend: BackendClient = Depends(get_backend_client),
) -> CheckoutService:
    return CheckoutService(
        backend=backend,
        currency=settings.default_currency,
        gift_amount_min=settings.gift_amount_min_eur,
        gift_amount_max=settings.gift_amount_max_eur,
    )


def remember_session(response: Response, session: CartSession) -> None:
    """Set the session cookie identifying the visitor's cart"""
    response.set_cookie(
        key=settings.session_cookie_name,
        value=session.session_id,
        max_age=settings.session_max_age_hours * 3600,
        httponly=True,
        samesite="lax",
        secure=settings.tls_configured,
    )


async def get_cart_session(
    request: Request,
    response: Response,
    manager: CartSessionManager = Depends(get_session_manager),
) -> CartSession:
    """Resolve the visitor's cart from the session cookie"""
    session = manager.get_or_create_session(request.cookies.get(settings.session_cookie_name))
    remember_session(response, session)
    return session


def remember_admin(response: Response, token: str) -> None:
    """Keep the backend admin token in a cookie the page scripts cannot read"""
    response.set_cookie(
        key=settings.admin_cookie_name,
        value=token,
        max_age=settings.admin_session_hours * 3600,
        httponly=True,
        samesite="strict",
        secure=settings.tls_configured,
    )


def forget_admin(response: Response) -> None:
    response.delete_cookie(settings.admin_cookie_name)


async def get_admin_token(request: Request) -> str:
    """Backend token of the logged-in administrator"""
    token = request.cookies.get(settings.admin_cookie_name)
    if not token:
        raise HTTPException(status_code=401, detail=MSG_ADMIN_LOGIN_REQUIRED)
    return token
