"""
FastAPI Proxy Application Factory
=================================

Main entry point for the Flutterwave transfer proxy. The proxy runs on a
host with a static egress IP that Flutterwave allow-lists, and holds the
Flutterwave secret so callers never have to.

Architecture:
    Caller (e.g. edge function) → Proxy (this service) → Flutterwave /v3/transfers

Routes:
    - OPTIONS any path : CORS preflight
    - GET any path     : health check
    - POST any path    : authenticated transfer forwarding

Environment Variables:
    - FLUTTERWAVE_SECRET_KEY: Flutterwave secret key (POSTs fail with 500 if unset)
    - PROXY_AUTH_TOKEN: Bearer token callers must present (POSTs fail with 403 if unset)
    - ALLOWED_ORIGINS: Comma-separated CORS origins (default: "*")
    - UPSTREAM_TIMEOUT_SECONDS: Outbound call timeout (default: 30)
    - PROXY_HOST / PROXY_PORT: Bind address (default: 0.0.0.0:8080)
    - LOG_LEVEL: Logging level (default: INFO)

Running the Service:
    Development:
        uvicorn proxy_server.app.main:app --reload --host 0.0.0.0 --port 8080

    Production:
        uvicorn proxy_server.app.main:app --host 0.0.0.0 --port 8080 --workers 4

    Console script:
        flutterwave-proxy
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

import httpx
import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import Settings, get_settings, validate_configuration
from .models import ErrorResponse
from .proxy.routes import proxy_router
from .proxy.upstream import create_upstream_client


# Configure structured JSON logging
def setup_logging(log_level: str = "INFO") -> None:
    """
    Configure structured logging for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format='{"timestamp": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s", "module": "%(module)s", "function": "%(funcName)s"}',
        handlers=[logging.StreamHandler(sys.stdout)]
    )


# Lifespan context manager for startup/shutdown
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup tasks:
        - Configure logging
        - Log the configuration report (secrets are reported as set/unset only)
        - Create the Flutterwave HTTP client unless one was injected

    Shutdown tasks:
        - Close the HTTP client if the lifespan created it
    """
    settings: Settings = app.state.settings

    setup_logging(settings.LOG_LEVEL)
    logger = logging.getLogger("proxy_server.main")

    report = validate_configuration(settings)
    for error in report["errors"]:
        logger.error(f"Configuration error: {error}")
    for warning in report["warnings"]:
        logger.warning(f"Configuration warning: {warning}")

    owns_client = app.state.upstream_client is None
    if owns_client:
        app.state.upstream_client = create_upstream_client(settings.UPSTREAM_TIMEOUT_SECONDS)
        logger.info("Initialized Flutterwave HTTP client")

    logger.info(
        "Flutterwave proxy started",
        extra={
            "allowed_origins": report["allowed_origins"],
            "upstream_timeout_seconds": report["upstream_timeout_seconds"],
            "log_level": settings.LOG_LEVEL,
        }
    )

    yield

    logger.info("Shutting down Flutterwave proxy")

    if owns_client:
        await app.state.upstream_client.aclose()
        app.state.upstream_client = None
        logger.info("Closed Flutterwave HTTP client")


# Create FastAPI application
def create_app(
    settings: Optional[Settings] = None,
    upstream_client: Optional[httpx.AsyncClient] = None,
) -> FastAPI:
    """
    Application factory function.

    Args:
        settings: Configuration to use (defaults to get_settings())
        upstream_client: HTTP client for Flutterwave; when given, the
            caller owns it and the lifespan leaves it open

    Returns:
        FastAPI: Configured application instance
    """
    if settings is None:
        settings = get_settings()

    # Docs routes are disabled: every GET path is the health probe
    app = FastAPI(
        title="Flutterwave Transfer Proxy",
        description="Authenticated forwarding proxy for the Flutterwave transfers API",
        version="1.0.0",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    app.state.settings = settings
    app.state.upstream_client = upstream_client

    app.include_router(proxy_router)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        """
        Render framework-raised HTTP errors with the proxy's error body.

        Methods the router does not list (e.g. PROPFIND) end up here as 405.
        """
        if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
            error = ErrorResponse(error="Method not allowed")
        else:
            error = ErrorResponse(error=str(exc.detail))

        return JSONResponse(
            status_code=exc.status_code,
            content=error.to_content(),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """
        Global exception handler for unhandled errors.

        Logs the error and returns a generic 500 body.
        """
        logger = logging.getLogger("proxy_server.main")
        logger.error(
            f"Unhandled exception: {str(exc)}",
            extra={
                "path": request.url.path,
                "method": request.method,
                "exception_type": type(exc).__name__
            },
            exc_info=True
        )

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorResponse(error="Internal server error").to_content(),
        )

    return app


# Create app instance for uvicorn
app = create_app()


def main() -> None:
    """Run the proxy with uvicorn using PROXY_HOST / PROXY_PORT."""
    settings = get_settings()

    uvicorn.run(
        "proxy_server.app.main:app",
        host=settings.PROXY_HOST,
        port=settings.PROXY_PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
