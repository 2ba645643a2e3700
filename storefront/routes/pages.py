"""HTML pages of the public site"""

import os
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse, Response
from fastapi.templating import Jinja2Templates

from ..core.config import settings
from ..core.errors import AdminAuthError, BackendUnavailableError
from ..core.pricing import format_currency
from ..core.session import CartSessionManager
from ..models.product import Product
from ..services.backend_client import BackendClient
from .dependencies import forget_admin, get_backend_client, get_session_manager, remember_session

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Pages"], include_in_schema=False)

templates_dir = os.path.join(os.path.dirname(__file__), "..", "templates")
templates = Jinja2Templates(directory=templates_dir)
templates.env.filters["money"] = format_currency

LANGUAGES = ("de", "en", "vi")

HOME_COPY = {
    "de": {
        "title": "Vietnamesische Küche",
        "tagline": "Frisch gekocht, mit Liebe serviert.",
        "menu_cta": "Zur Speisekarte",
        "preview": "Aus unserer Küche",
        "visit": "Besuchen Sie uns",
    },
    "en": {
        "title": "Vietnamese Kitchen",
        "tagline": "Freshly cooked, served with love.",
        "menu_cta": "See the menu",
        "preview": "From our kitchen",
        "visit": "Visit us",
    },
    "vi": {
        "title": "Ẩm thực Việt Nam",
        "tagline": "Nấu tươi mỗi ngày, phục vụ bằng cả tấm lòng.",
        "menu_cta": "Xem thực đơn",
        "preview": "Món ngon của chúng tôi",
        "visit": "Ghé thăm chúng tôi",
    },
}

PUBLIC_PAGES = ["/", "/en", "/vi", "/menu", "/coupon"]


async def _load_products(backend: BackendClient) -> tuple[list[Product], Optional[str]]:
    """Menu products, or an error message when the backend is down"""
    try:
        return await backend.list_products(), None
    except BackendUnavailableError as e:
        logger.warning(f"Menu unavailable: {e.detail or e.message}")
        return [], "Die Speisekarte konnte nicht geladen werden."


def _render(request: Request, manager: CartSessionManager, name: str, context: dict):
    """Render a template with the visitor's cart and keep the session cookie"""
    session = manager.get_or_create_session(request.cookies.get(settings.session_cookie_name))
    response = templates.TemplateResponse(
        request,
        name,
        {"cart": session.cart, "app_name": settings.app_name, **context},
    )
    remember_session(response, session)
    return response


async def _home(request: Request, lang: str, backend: BackendClient, manager: CartSessionManager):
    products, _ = await _load_products(backend)
    return _render(request, manager, "index.html", {
        "lang": lang,
        "copy": HOME_COPY[lang],
        "preview_products": products[:6],
    })


@router.get("/")
async def home(
    request: Request,
    backend: BackendClient = Depends(get_backend_client),
    manager: CartSessionManager = Depends(get_session_manager),
):
    """German home page"""
    return await _home(request, "de", backend, manager)


@router.get("/en")
async def home_en(
    request: Request,
    backend: BackendClient = Depends(get_backend_client),
    manager: CartSessionManager = Depends(get_session_manager),
):
    return await _home(request, "en", backend, manager)


@router.get("/vi")
async def home_vi(
    request: Request,
    backend: BackendClient = Depends(get_backend_client),
    manager: CartSessionManager = Depends(get_session_manager),
):
    return await _home(request, "vi", backend, manager)


@router.get("/menu")
async def menu(
    request: Request,
    backend: BackendClient = Depends(get_backend_client),
    manager: CartSessionManager = Depends(get_session_manager),
):
    """Full menu grouped by category"""
    products, error = await _load_products(backend)

    categories: dict[str, list[Product]] = {}
    for product in products:
        categories.setdefault(product.category or "Weitere Gerichte", []).append(product)

    return _render(request, manager, "menu.html", {
        "lang": "de",
        "categories": categories,
        "error": error,
    })


@router.get("/coupon")
async def coupon(
    request: Request,
    manager: CartSessionManager = Depends(get_session_manager),
):
    """Coupon check and gift coupon purchase"""
    return _render(request, manager, "coupon.html", {
        "lang": "de",
        "gift_amounts": [20, 30, 50, 100],
        "gift_min": settings.gift_amount_min_eur,
        "gift_max": settings.gift_amount_max_eur,
    })


@router.get("/checkout")
async def checkout(
    request: Request,
    manager: CartSessionManager = Depends(get_session_manager),
):
    """Cart summary, coupon form and checkout button"""
    return _render(request, manager, "checkout.html", {"lang": "de"})


@router.get("/thank-you")
@router.get("/thank-you/{order_id}")
async def thank_you(
    request: Request,
    order_id: Optional[str] = None,
    manager: CartSessionManager = Depends(get_session_manager),
):
    """Landing page after payment; the paid cart is cleared here"""
    session = manager.get_or_create_session(request.cookies.get(settings.session_cookie_name))
    if not session.cart.is_empty:
        logger.info(f"Clearing cart of session {session.session_id} after checkout")
        session.cart.clear_cart()
    return _render(request, manager, "thank_you.html", {"lang": "de", "order_id": order_id})


@router.get("/admin/login")
async def admin_login(
    request: Request,
    manager: CartSessionManager = Depends(get_session_manager),
):
    """Admin login form"""
    return _render(request, manager, "admin_login.html", {"lang": "de"})


@router.get("/admin")
async def admin(
    request: Request,
    backend: BackendClient = Depends(get_backend_client),
    manager: CartSessionManager = Depends(get_session_manager),
):
    """Dashboard with orders, users and coupons of the backend"""
    token = request.cookies.get(settings.admin_cookie_name)
    if not token:
        return RedirectResponse("/admin/login", status_code=303)

    try:
        orders = await backend.list_orders(token)
        users = await backend.list_users(token)
        coupons = await backend.list_coupons(token)
        error = None
    except AdminAuthError:
        response = RedirectResponse("/admin/login", status_code=303)
        forget_admin(response)
        return response
    except BackendUnavailableError as e:
        logger.warning(f"Admin dashboard data unavailable: {e.detail or e.message}")
        orders, users, coupons, error = [], [], [], e.message

    return _render(request, manager, "admin.html", {
        "lang": "de",
        "orders": orders,
        "users": users,
        "coupons": coupons,
        "error": error,
    })


@router.get("/sitemap.xml")
async def sitemap(request: Request):
    base = str(request.base_url).rstrip("/")
    body = templates.get_template("sitemap.xml").render(urls=[f"{base}{page}" for page in PUBLIC_PAGES])
    return Response(content=body, media_type="application/xml")
