"""
Proxy Package
=============

This package implements the authenticated endpoint that forwards transfer
requests to the Flutterwave API.

Main Components:
----------------
- routes.py: catch-all FastAPI router (preflight, health, transfer forwarding)
- upstream.py: outbound Flutterwave call returning an explicit result
- cors.py: Access-Control-* header computation

Usage:
------
    from proxy_server.app.proxy import proxy_router
    app.include_router(proxy_router)
"""

from .routes import proxy_router

__all__ = ["proxy_router"]
