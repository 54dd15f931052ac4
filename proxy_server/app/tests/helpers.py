"""
Builders shared by the proxy tests.
"""

from unittest.mock import Mock

import httpx

from proxy_server.app.config import Settings


TEST_FLUTTERWAVE_SECRET = "FLWSECK_TEST-0123456789abcdef0123456789abcdef-X"
TEST_PROXY_TOKEN = "proxy-token-for-tests"


def make_settings(**overrides) -> Settings:
    """Build Settings without reading .env; explicit values beat the environment."""
    values = {
        "FLUTTERWAVE_SECRET_KEY": TEST_FLUTTERWAVE_SECRET,
        "PROXY_AUTH_TOKEN": TEST_PROXY_TOKEN,
        "ALLOWED_ORIGINS": None,
        "UPSTREAM_TIMEOUT_SECONDS": 30.0,
        "LOG_LEVEL": "DEBUG",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def make_upstream_response(status_code: int = 200, content: bytes = b'{"status":"success"}'):
    """Mock httpx.Response carrying a Flutterwave answer."""
    response = Mock(spec=httpx.Response)
    response.status_code = status_code
    response.content = content
    return response
