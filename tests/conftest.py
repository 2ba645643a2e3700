"""Shared fixtures: an in-memory cart store and a fake restaurant backend."""

import json
from typing import Optional
from urllib.parse import unquote

import httpx
import pytest
from fastapi.testclient import TestClient

from storefront.core.session import CartSessionManager
from storefront.core.storage import MemoryStorage
from storefront.main import app
from storefront.routes.dependencies import get_backend_client, get_session_manager
from storefront.services.backend_client import BackendClient

BACKEND_URL = "http://backend.test"

MENU = [
    {"id": "pho", "name": "Phở Bò", "unit_amount": 1450, "currency": "EUR", "category": "Suppen"},
    {"id": "bun", "name": "Bún Chả", "unit_amount": 1290, "currency": "EUR", "category": "Nudeln"},
    {"id": "tea", "name": "Trà Đá", "unit_amount": 350, "currency": "EUR"},
]

COUPONS = {
    "FIVE": {"valid": True, "amount_off": 500, "percent_off": None},
    "TEN": {"valid": True, "amount_off": None, "percent_off": 10},
    "EMPTY": {"valid": True, "amount_off": 0, "percent_off": 0},
}


ADMIN_EMAIL = "chef@restaurant.test"
ADMIN_PASSWORD = "geheim"
ADMIN_TOKEN = "tok_admin"

USERS = [
    {"id": "1", "email": ADMIN_EMAIL, "role": "admin", "created_at": "2026-01-05T10:00:00Z"},
    {"id": "2", "email": "gast@example.com", "role": "customer", "created_at": "2026-02-01T18:30:00Z"},
]

ADMIN_COUPONS = [
    {"code": "FIVE", "percent_off": None, "amount_off": 500, "remaining_uses": 10},
]


class FakeBackend:
    """Answers the backend endpoints the storefront calls and records requests."""

    def __init__(self):
        self.products = list(MENU)
        self.coupons = dict(COUPONS)
        self.orders: list[dict] = []
        self.users = [dict(u) for u in USERS]
        self.admin_coupons = [dict(c) for c in ADMIN_COUPONS]
        self.requests: list[httpx.Request] = []
        self.down = False
        self.set_cookie: Optional[str] = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.down:
            raise httpx.ConnectError("connection refused", request=request)

        path = unquote(request.url.path)
        if path == "/api/products" and request.method == "GET":
            headers = {"set-cookie": self.set_cookie} if self.set_cookie else {}
            return httpx.Response(200, json={"products": self.products}, headers=headers)
        if path == "/api/coupons/apply":
            code = json.loads(request.content)["code"]
            return httpx.Response(200, json=self.coupons.get(code, {"valid": False}))
        if path == "/api/checkout":
            return httpx.Response(200, json={"url": "https://pay.example/session/cs_123"})
        if path == "/api/gift-coupons/buy":
            return httpx.Response(200, json={"url": "https://pay.example/session/gift_1"})
        if path == "/api/auth/login":
            body = json.loads(request.content)
            if body == {"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD}:
                return httpx.Response(200, json={"token": ADMIN_TOKEN})
            return httpx.Response(401)
        if path.startswith("/api/admin/"):
            if request.headers.get("authorization") != f"Bearer {ADMIN_TOKEN}":
                return httpx.Response(401)
            return self._admin(request, path[len("/api/admin/"):])
        return httpx.Response(404, text="not found")

    def _admin(self, request: httpx.Request, path: str) -> httpx.Response:
        resource, _, key = path.partition("/")
        if resource == "orders":
            return httpx.Response(
                200,
                json={"orders": self.orders},
                headers={"X-Total": str(len(self.orders))},
            )

        if resource == "users":
            if request.method == "GET":
                return httpx.Response(200, json={"users": self.users})
            if request.method == "POST":
                body = json.loads(request.content)
                if any(u["email"] == body["email"] for u in self.users):
                    return httpx.Response(409)
                self.users.append({"id": str(len(self.users) + 1), "email": body["email"], "role": body["role"]})
                return httpx.Response(201, json={"ok": True})
            user = next((u for u in self.users if u["email"] == key), None)
            if user is None:
                return httpx.Response(404)
            if request.method == "PATCH":
                user["role"] = json.loads(request.content)["role"]
                return httpx.Response(200, json={"ok": True})
            if request.method == "DELETE":
                self.users.remove(user)
                return httpx.Response(204)

        if resource == "coupons":
            if request.method == "GET":
                return httpx.Response(200, json={"coupons": self.admin_coupons})
            if request.method == "POST":
                self.admin_coupons.append(json.loads(request.content))
                return httpx.Response(201, json={"ok": True})
            if request.method == "DELETE":
                before = len(self.admin_coupons)
                self.admin_coupons = [c for c in self.admin_coupons if c["code"] != key]
                return httpx.Response(204 if len(self.admin_coupons) < before else 404)

        return httpx.Response(404, text="not found")

    def last_json(self) -> dict:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def fake_backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def backend_client(fake_backend: FakeBackend) -> BackendClient:
    return BackendClient(BACKEND_URL, transport=httpx.MockTransport(fake_backend.handler))


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def session_manager(storage: MemoryStorage) -> CartSessionManager:
    return CartSessionManager(storage)


@pytest.fixture
def test_client(backend_client: BackendClient, session_manager: CartSessionManager):
    app.dependency_overrides[get_backend_client] = lambda: backend_client
    app.dependency_overrides[get_session_manager] = lambda: session_manager
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def admin_client(test_client: TestClient) -> TestClient:
    """Test client logged in to the admin dashboard"""
    response = test_client.post(
        "/storefront/admin/login",
        json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD},
    )
    assert response.status_code == 200
    return test_client
