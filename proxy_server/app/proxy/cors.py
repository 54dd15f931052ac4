"""
CORS header computation for the proxy.

CORS is answered by the proxy handler itself rather than by Starlette's
CORSMiddleware, so preflight and transfer responses share one origin rule.
"""

from typing import Dict, Optional, Sequence

ALLOW_METHODS = "POST, OPTIONS"
ALLOW_HEADERS = "Content-Type, Authorization"
MAX_AGE_SECONDS = "86400"


def resolve_allow_origin(allowed_origins: Sequence[str], origin: Optional[str]) -> str:
    """
    Pick the Access-Control-Allow-Origin value for a request.

    Rules, in order:
        1. '*' is configured -> '*'
        2. the request Origin is configured -> echo it
        3. otherwise -> the first configured origin

    Args:
        allowed_origins: Configured origins (never empty)
        origin: Value of the request's Origin header, if any

    Returns:
        Header value to send back
    """
    if "*" in allowed_origins:
        return "*"

    # A missing Origin header never matches a configured origin
    request_origin = origin or "*"
    if request_origin in allowed_origins:
        return request_origin

    return allowed_origins[0]


def preflight_headers(allowed_origins: Sequence[str], origin: Optional[str]) -> Dict[str, str]:
    """Headers for an OPTIONS preflight response."""
    return {
        "Access-Control-Allow-Origin": resolve_allow_origin(allowed_origins, origin),
        "Access-Control-Allow-Methods": ALLOW_METHODS,
        "Access-Control-Allow-Headers": ALLOW_HEADERS,
        "Access-Control-Max-Age": MAX_AGE_SECONDS,
    }
