"""
Admin dashboard API.

Login exchanges the credentials for a backend token, which is kept in an
httponly cookie and attached as a Bearer token to every admin call.
"""

import logging
from contextlib import contextmanager
from fastapi import APIRouter, Depends, HTTPException, Response

from ..core.config import settings
from ..core.errors import AdminAuthError, BackendUnavailableError
from ..models.admin import (
    AdminCoupon,
    AdminLoginRequest,
    AdminOrder,
    AdminSession,
    AdminUser,
    NewCouponRequest,
    NewUserRequest,
    UpdateUserRequest,
)
from ..services.backend_client import BackendClient
from .dependencies import get_admin_token, get_backend_client, forget_admin, remember_admin

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/storefront/admin", tags=["Admin"])

MSG_ADMIN_ACTION_FAILED = "Die Aktion wurde vom Server abgelehnt."

# Backend client errors passed through with their own status
PASS_THROUGH_STATUSES = {400, 404, 409, 422}


@contextmanager
def backend_errors():
    """Translate backend client errors into HTTP errors for the dashboard"""
    try:
        yield
    except AdminAuthError as e:
        raise HTTPException(
            status_code=401,
            detail=e.message,
            headers={"set-cookie": f"{settings.admin_cookie_name}=; Max-Age=0; Path=/"},
        ) from e
    except BackendUnavailableError as e:
        if e.status_code in PASS_THROUGH_STATUSES:
            raise HTTPException(status_code=e.status_code, detail=MSG_ADMIN_ACTION_FAILED) from e
        raise HTTPException(status_code=502, detail=e.message) from e


@router.post("/login", response_model=AdminSession)
async def login(
    request: AdminLoginRequest,
    response: Response,
    backend: BackendClient = Depends(get_backend_client),
):
    """Log in to the dashboard"""
    with backend_errors():
        token = await backend.admin_login(request.email, request.password)
    remember_admin(response, token)
    logger.info(f"Admin {request.email} logged in")
    return AdminSession(email=request.email)


@router.post("/logout")
async def logout(response: Response):
    forget_admin(response)
    return {"ok": True}


# ==================== Orders ====================

@router.get("/orders", response_model=list[AdminOrder])
async def list_orders(
    token: str = Depends(get_admin_token),
    backend: BackendClient = Depends(get_backend_client),
):
    with backend_errors():
        return await backend.list_orders(token)


# ==================== Users ====================

@router.get("/users", response_model=list[AdminUser])
async def list_users(
    token: str = Depends(get_admin_token),
    backend: BackendClient = Depends(get_backend_client),
):
    with backend_errors():
        return await backend.list_users(token)


@router.post("/users", response_model=list[AdminUser])
async def create_user(
    request: NewUserRequest,
    token: str = Depends(get_admin_token),
    backend: BackendClient = Depends(get_backend_client),
):
    """Add a user, returns the updated user list"""
    with backend_errors():
        await backend.create_user(request, token)
        return await backend.list_users(token)


@router.patch("/users/{email}", response_model=list[AdminUser])
async def update_user(
    email: str,
    request: UpdateUserRequest,
    token: str = Depends(get_admin_token),
    backend: BackendClient = Depends(get_backend_client),
):
    """Change a user's role, returns the updated user list"""
    with backend_errors():
        await backend.update_user_role(email, request.role, token)
        return await backend.list_users(token)


@router.delete("/users/{email}", response_model=list[AdminUser])
async def delete_user(
    email: str,
    token: str = Depends(get_admin_token),
    backend: BackendClient = Depends(get_backend_client),
):
    with backend_errors():
        await backend.delete_user(email, token)
        return await backend.list_users(token)


# ==================== Coupons ====================

@router.get("/coupons", response_model=list[AdminCoupon])
async def list_coupons(
    token: str = Depends(get_admin_token),
    backend: BackendClient = Depends(get_backend_client),
):
    with backend_errors():
        return await backend.list_coupons(token)


@router.post("/coupons", response_model=list[AdminCoupon])
async def create_coupon(
    request: NewCouponRequest,
    token: str = Depends(get_admin_token),
    backend: BackendClient = Depends(get_backend_client),
):
    """Add a coupon, returns the updated coupon list"""
    with backend_errors():
        await backend.create_coupon(request, token)
        return await backend.list_coupons(token)


@router.delete("/coupons/{code}", response_model=list[AdminCoupon])
async def delete_coupon(
    code: str,
    token: str = Depends(get_admin_token),
    backend: BackendClient = Depends(get_backend_client),
):
    with backend_errors():
        await backend.delete_coupon(code, token)
        return await backend.list_coupons(token)
