"""
Storefront Application

Public website and online ordering front-end of the restaurant.
Serves the pages, owns the visitors' carts and proxies /api to the backend.
"""

import os
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

from .core.config import PROJECT_ROOT, settings
from .routes import pages_router, cart_router, gift_coupons_router, admin_router, proxy_router
from .routes import dependencies

# Load environment variables
load_dotenv(os.path.join(PROJECT_ROOT, "config", ".env"))

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info("Storefront starting up...")
    logger.info(f"Proxying /api -> {settings.backend_api_url}")
    logger.info(f"Cart storage: {settings.cart_storage}")

    yield

    logger.info("Storefront shutting down...")
    if dependencies.backend_client:
        await dependencies.backend_client.close()
        dependencies.backend_client = None


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Restaurant website with menu, cart, coupons and checkout",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Static files
static_dir = os.path.join(os.path.dirname(__file__), "static")
if os.path.exists(static_dir):
    app.mount("/static", StaticFiles(directory=static_dir), name="static")


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"ok": True}


# Include routers
app.include_router(cart_router)
app.include_router(gift_coupons_router)
app.include_router(admin_router)
app.include_router(proxy_router)
app.include_router(pages_router)


def run() -> None:
    """Start uvicorn, with TLS when certificate and key are configured"""
    import uvicorn

    ssl_options = {}
    if settings.tls_configured:
        ssl_options = {
            "ssl_certfile": settings.frontend_ssl_cert_path,
            "ssl_keyfile": settings.frontend_ssl_key_path,
        }
    elif settings.frontend_https:
        logger.warning("HTTPS requested but cert or key missing; falling back to HTTP")

    scheme = "https" if ssl_options else "http"
    logger.info(f"Storefront running on {scheme}://{settings.host}:{settings.port}")

    uvicorn.run(
        "storefront.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        **ssl_options,
    )


if __name__ == "__main__":
    run()
