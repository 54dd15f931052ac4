"""
Shared fixtures for the proxy test suite.
"""

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from proxy_server.app.main import create_app

from .helpers import TEST_PROXY_TOKEN, make_settings, make_upstream_response


@pytest.fixture
def mock_settings():
    return make_settings()


@pytest.fixture
def mock_upstream_client():
    """Mock Flutterwave HTTP client answering 200 by default"""
    client = AsyncMock()
    client.post = AsyncMock(return_value=make_upstream_response())
    return client


@pytest.fixture
def app(mock_settings, mock_upstream_client):
    return create_app(settings=mock_settings, upstream_client=mock_upstream_client)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def auth_headers():
    return {
        "Authorization": f"Bearer {TEST_PROXY_TOKEN}",
        "Content-Type": "application/json",
    }
