"""Reverse proxy forwarding /api/* to the restaurant backend"""

import logging
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, Response

from ..core.config import settings
from ..core.errors import BackendUnavailableError
from ..services.backend_client import BackendClient
from .dependencies import get_backend_client

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Proxy"])

HOP_BY_HOP_HEADERS = {
    "connection",
    "keep-alive",
    "proxy-authenticate",
    "proxy-authorization",
    "te",
    "trailers",
    "transfer-encoding",
    "upgrade",
}

# Recomputed by the client/server on each side of the proxy
REQUEST_SKIP_HEADERS = HOP_BY_HOP_HEADERS | {"host", "content-length"}
RESPONSE_SKIP_HEADERS = HOP_BY_HOP_HEADERS | {"content-length", "content-encoding"}


def _backend_cookie_header(header: str) -> str:
    """Cookie header without the storefront's own session and admin cookies"""
    own = {settings.session_cookie_name, settings.admin_cookie_name}
    kept = [
        part.strip()
        for part in header.split(";")
        if part.strip() and part.split("=", 1)[0].strip() not in own
    ]
    return "; ".join(kept)


@router.api_route(
    "/api/{path:path}",
    methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"],
    include_in_schema=False,
)
async def proxy_api(
    path: str,
    request: Request,
    backend: BackendClient = Depends(get_backend_client),
):
    """Forward the request to the backend and relay its answer"""
    headers = {
        name: value
        for name, value in request.headers.items()
        if name.lower() not in REQUEST_SKIP_HEADERS
    }
    if "cookie" in headers:
        cookie = _backend_cookie_header(headers.pop("cookie"))
        if cookie:
            headers["cookie"] = cookie
    body = await request.body()

    try:
        upstream = await backend.forward(
            method=request.method,
            path=path,
            query=request.url.query,
            headers=headers,
            body=body,
        )
    except BackendUnavailableError as e:
        return JSONResponse(status_code=502, content={"detail": e.message})

    if upstream.status_code >= 500:
        logger.warning(f"Backend answered {upstream.status_code} for {request.method} /api/{path}")

    response = Response(content=upstream.content, status_code=upstream.status_code)
    for name, value in upstream.headers.multi_items():
        if name.lower() not in RESPONSE_SKIP_HEADERS:
            # append keeps repeated headers such as Set-Cookie
            response.headers.append(name, value)
    return response
