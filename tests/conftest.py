"""
Shared pytest fixtures and configuration for all tests.

The remote Kirha API is never contacted: clients are built on top of
``httpx.MockTransport`` with a handler supplied by each test.
"""

import os
from collections.abc import Callable

import httpx
import pytest

from kirha_gateway.clients import KirhaClient
from kirha_gateway.config import reset_settings

# Keep a developer's real configuration out of the tests
for _var in (
    "KIRHA_API_KEY",
    "KIRHA_VERTICAL",
    "KIRHA_BASE_URL",
    "KIRHA_TIMEOUT",
    "MCP_PORT",
    "MCP_HOST",
    "MCP_HTTP_PATH",
    "MCP_TOOL_CALL_TIMEOUT_SECONDS",
    "MCP_SHUTDOWN_TIMEOUT_SECONDS",
    "MCP_DEBUG",
    "ENABLE_LOGS",
):
    os.environ.pop(_var, None)

TEST_BASE_URL = "https://api.kirha.test"
TEST_API_KEY = "test-api-key"
TEST_VERTICAL = "crypto"


@pytest.fixture(autouse=True)
def fresh_settings():
    """Drop the cached settings singleton around every test."""
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def make_client() -> Callable[..., KirhaClient]:
    """Factory building a KirhaClient whose requests go to ``handler``."""

    def _make_client(handler: Callable[[httpx.Request], httpx.Response]) -> KirhaClient:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return KirhaClient(
            api_key=TEST_API_KEY,
            vertical_id=TEST_VERTICAL,
            base_url=TEST_BASE_URL,
            timeout=5,
            http_client=http_client,
        )

    return _make_client


@pytest.fixture
def sample_tools_payload() -> dict:
    """Catalog listing as returned by the Kirha API."""
    return {
        "tools": [
            {
                "id": "tool-1",
                "identifier": "weather",
                "name": "Weather",
                "description": "Gets weather",
                "mcp_id": "mcp-1",
                "vertical_ids": ["crypto"],
                "parameters": {
                    "type": "object",
                    "properties": {"city": {"type": "string"}},
                    "required": ["city"],
                },
                "outputs": {"type": "object"},
            },
            {
                "id": "tool-2",
                "identifier": "",
                "name": "Price Feed",
                "description": "Latest prices",
                "vertical_ids": None,
                "parameters": None,
            },
        ],
        "next_cursor": None,
    }
