"""
Proxy Routes - Flutterwave Transfer Forwarding
==============================================

A single catch-all route that dispatches on the HTTP method:

- OPTIONS: CORS preflight (no auth)
- GET:     health probe for deployment warm-up (no auth)
- POST:    authenticated transfer forwarding
- other:   405

Security Model:
---------------
1. Callers authenticate with `Authorization: Bearer <PROXY_AUTH_TOKEN>`
2. The caller's Authorization header is never forwarded
3. The proxy adds `Authorization: Bearer <FLUTTERWAVE_SECRET_KEY>` upstream
4. The Flutterwave secret never appears in responses or logs
"""

import logging
from typing import Optional

import httpx
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse, Response

from ..config import Settings
from ..models import ErrorResponse, HealthResponse
from .cors import preflight_headers, resolve_allow_origin
from .upstream import UpstreamFailure, forward_transfer

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "

ROUTED_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

# Create router
proxy_router = APIRouter()


# ============================================================================
# Dependencies
# ============================================================================

def get_app_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    return request.app.state.settings


def get_upstream_client(request: Request) -> Optional[httpx.AsyncClient]:
    """HTTP client for Flutterwave, created by the lifespan or injected."""
    return getattr(request.app.state, "upstream_client", None)


# ============================================================================
# Response Helpers
# ============================================================================

def error_response(
    status_code: int,
    error: str,
    message: Optional[str] = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=error, message=message).to_content(),
    )


def extract_bearer_token(auth_header: Optional[str]) -> Optional[str]:
    """
    Return the token from a `Bearer <token>` header value.

    The prefix is case-sensitive and must include the trailing space.
    Returns None when the header is absent or uses another scheme.
    """
    if not auth_header or not auth_header.startswith(BEARER_PREFIX):
        return None
    return auth_header[len(BEARER_PREFIX):]


# ============================================================================
# Proxy Endpoint
# ============================================================================

@proxy_router.api_route("/{path:path}", methods=ROUTED_METHODS)
async def handle_request(
    request: Request,
    path: str,
    settings: Settings = Depends(get_app_settings),
) -> Response:
    """
    Dispatch an inbound request by method.

    Args:
        request: Inbound request
        path: Ignored; every path behaves the same
        settings: Process configuration

    Returns:
        Response for the caller
    """
    origin = request.headers.get("Origin")

    if request.method == "OPTIONS":
        return Response(
            status_code=status.HTTP_204_NO_CONTENT,
            headers=preflight_headers(settings.allowed_origins_list, origin),
        )

    if request.method == "GET":
        return JSONResponse(
            status_code=status.HTTP_200_OK,
            content=HealthResponse().model_dump(),
        )

    if request.method != "POST":
        return error_response(status.HTTP_405_METHOD_NOT_ALLOWED, "Method not allowed")

    return await proxy_transfer(request, settings, origin)


async def proxy_transfer(
    request: Request,
    settings: Settings,
    origin: Optional[str],
) -> Response:
    """
    Authenticate the caller and relay the body to Flutterwave.

    Flow:
    1. Require `Authorization: Bearer <token>` (401 otherwise)
    2. Compare the token to PROXY_AUTH_TOKEN (403 on mismatch)
    3. Read the raw body (400 if unreadable)
    4. Require FLUTTERWAVE_SECRET_KEY (500 if missing, nothing sent)
    5. Forward and relay Flutterwave's status and body unchanged
    6. Transport failure -> 500 with the error message
    """
    provided_token = extract_bearer_token(request.headers.get("Authorization"))
    if provided_token is None:
        logger.error("Missing or invalid authorization header")
        return error_response(
            status.HTTP_401_UNAUTHORIZED,
            "Missing or invalid authorization header",
        )

    if not settings.has_proxy_token or provided_token != settings.PROXY_AUTH_TOKEN:
        logger.error("Invalid authentication token")
        return error_response(status.HTTP_403_FORBIDDEN, "Invalid authentication token")

    logger.info("Authentication successful")

    try:
        body = await request.body()
    except Exception as e:
        logger.error(f"Error reading request body: {e}", extra={"exception_type": type(e).__name__})
        return error_response(status.HTTP_400_BAD_REQUEST, "Invalid request body")

    logger.debug(
        "Received request body: %s...",
        body[:200].decode("utf-8", errors="replace"),
    )

    if not settings.has_upstream_secret:
        logger.error("Flutterwave secret key not configured")
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Server misconfiguration: missing Flutterwave secret key",
        )

    client = get_upstream_client(request)
    if client is None:
        logger.error("Upstream client not initialized")
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Proxy server error",
            "Upstream client not initialized",
        )

    result = await forward_transfer(client, settings.FLUTTERWAVE_SECRET_KEY, body)

    if isinstance(result, UpstreamFailure):
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Proxy server error",
            result.message,
        )

    return Response(
        content=result.content,
        status_code=result.status_code,
        media_type="application/json",
        headers={
            "Access-Control-Allow-Origin": resolve_allow_origin(
                settings.allowed_origins_list, origin
            ),
        },
    )
