"""
Upstream Client - Flutterwave Transfer Forwarding
=================================================

Sends the caller's body to the Flutterwave transfers endpoint and reports
the outcome as a value instead of raising:

- UpstreamSuccess: Flutterwave answered (any status code)
- UpstreamFailure: the call itself failed (DNS, connect, timeout, protocol)

There is no retry. Every outcome is final for the request.
"""

import logging
from typing import Union

import httpx
from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)

FLUTTERWAVE_TRANSFERS_URL = "https://api.flutterwave.com/v3/transfers"


# ============================================================================
# Result Types
# ============================================================================

class UpstreamSuccess(BaseModel):
    """Flutterwave responded; status and body are relayed untouched."""

    model_config = ConfigDict(frozen=True)

    status_code: int
    content: bytes


class UpstreamFailure(BaseModel):
    """The outbound call did not produce a response."""

    model_config = ConfigDict(frozen=True)

    message: str


UpstreamResult = Union[UpstreamSuccess, UpstreamFailure]


# ============================================================================
# Client Construction
# ============================================================================

def create_upstream_client(timeout_seconds: float) -> httpx.AsyncClient:
    """
    Build the pooled HTTP client used for all Flutterwave calls.

    Args:
        timeout_seconds: Total timeout per call (connect is capped at 10s)

    Returns:
        httpx.AsyncClient owned by the application lifespan
    """
    timeout = httpx.Timeout(timeout_seconds, connect=min(10.0, timeout_seconds))
    return httpx.AsyncClient(timeout=timeout)


def build_upstream_headers(secret: str) -> dict:
    """Headers for the Flutterwave request. Nothing from the caller is copied."""
    return {
        "Content-Type": "application/json",
        "Authorization": f"Bearer {secret}",
    }


def _error_message(exc: Exception) -> str:
    return str(exc) or type(exc).__name__


# ============================================================================
# Forwarding
# ============================================================================

async def forward_transfer(
    client: httpx.AsyncClient,
    secret: str,
    body: bytes,
) -> UpstreamResult:
    """
    POST the raw body to Flutterwave.

    Args:
        client: HTTP client used for the call
        secret: Flutterwave secret key
        body: Exact bytes received from the caller

    Returns:
        UpstreamSuccess with Flutterwave's status and body, or
        UpstreamFailure describing why no response was obtained
    """
    logger.info("Forwarding request to Flutterwave API")

    try:
        response = await client.post(
            FLUTTERWAVE_TRANSFERS_URL,
            content=body,
            headers=build_upstream_headers(secret),
        )
        content = response.content

    except httpx.HTTPError as e:
        logger.error(
            f"Flutterwave request failed: {e}",
            extra={"exception_type": type(e).__name__},
        )
        return UpstreamFailure(message=_error_message(e))

    except Exception as e:
        logger.error(
            f"Unexpected error calling Flutterwave: {e}",
            exc_info=True,
            extra={"exception_type": type(e).__name__},
        )
        return UpstreamFailure(message=_error_message(e))

    logger.info(
        f"Flutterwave response status: {response.status_code}",
        extra={"status_code": response.status_code, "response_length": len(content)},
    )
    logger.debug(
        "Flutterwave response: %s...",
        content[:200].decode("utf-8", errors="replace"),
    )

    return UpstreamSuccess(status_code=response.status_code, content=content)
