"""Storefront Configuration"""

import os
from typing import Optional
from pydantic_settings import BaseSettings
from functools import lru_cache


PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))
DEFAULT_BACKEND_URL = "http://127.0.0.1:8080"


def normalize_backend_url(base: Optional[str]) -> str:
    """Strip trailing slashes and make sure the URL ends with /api"""
    base = (base or DEFAULT_BACKEND_URL).rstrip("/")
    if not base.endswith("/api"):
        base = f"{base}/api"
    return base


class Settings(BaseSettings):
    """Application settings loaded from environment"""

    # Application
    app_name: str = "Restaurant Storefront"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 5173

    # Restaurant backend
    backend_url: str = DEFAULT_BACKEND_URL
    backend_timeout: float = 30.0

    # Cart persistence
    cart_storage: str = "memory"  # "memory" or "file"
    cart_storage_dir: str = os.path.join(PROJECT_ROOT, "data", "carts")
    cart_storage_key: str = "restaurant_cart_v1"
    session_cookie_name: str = "storefront_session"
    session_max_age_hours: int = 24 * 30
    max_live_sessions: int = 10000
    session_cleanup_interval_seconds: float = 300.0

    # Admin dashboard
    admin_cookie_name: str = "storefront_admin"
    admin_session_hours: int = 12

    # Shop
    default_currency: str = "EUR"
    gift_amount_min_eur: int = 10
    gift_amount_max_eur: int = 500

    # TLS
    frontend_https: bool = False
    frontend_ssl_cert_path: Optional[str] = None
    frontend_ssl_key_path: Optional[str] = None

    class Config:
        env_file = os.path.join(PROJECT_ROOT, "config", ".env")
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"

    @property
    def backend_api_url(self) -> str:
        """Backend base URL including the /api prefix"""
        return normalize_backend_url(self.backend_url)

    @property
    def tls_configured(self) -> bool:
        """Check if HTTPS was requested and both certificate files exist"""
        return bool(
            self.frontend_https
            and self.frontend_ssl_cert_path
            and self.frontend_ssl_key_path
            and os.path.exists(self.frontend_ssl_cert_path)
            and os.path.exists(self.frontend_ssl_key_path)
        )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
