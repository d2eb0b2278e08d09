"""
Unit tests for the Kirha API client (kirha_gateway/clients/kirha.py).

This module tests:
- list_tools() - request shape, decoding and status mapping
- execute_tool() - request shape, status mapping and partial results
- Transport failures and malformed bodies
- Connection pool ownership
"""

import json
from unittest.mock import AsyncMock

import httpx
import pytest

from kirha_gateway.clients import KirhaClient, KirhaToolClient
from kirha_gateway.config import Settings
from kirha_gateway.core.exceptions import (
    InternalServerError,
    InvalidArgumentsError,
    InvalidResponseError,
    NetworkTimeoutError,
    ToolExecutionFailedError,
    ToolNotFoundError,
    UnauthorizedError,
)

TEST_API_KEY = "test-api-key"
TEST_BASE_URL = "https://api.kirha.test"
TEST_VERTICAL = "crypto"


def _respond(status: int, body=None, *, content: bytes | None = None):
    def handler(request: httpx.Request) -> httpx.Response:
        if content is not None:
            return httpx.Response(status, content=content)
        return httpx.Response(status, json=body)

    return handler


# ========================================
# list_tools
# ========================================


class TestListTools:
    """Test catalog listing."""

    @pytest.mark.asyncio
    async def test_request_shape(self, make_client):
        """Test that the listing is a GET with bearer auth, limit and vertical."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"tools": []})

        client = make_client(handler)
        await client.list_tools()

        request = seen[0]
        assert request.method == "GET"
        assert request.url.path == "/mcp/v1/tools"
        assert request.url.host == "api.kirha.test"
        assert request.url.params["limit"] == "99"
        assert request.url.params["vertical_id"] == TEST_VERTICAL
        assert request.headers["Authorization"] == f"Bearer {TEST_API_KEY}"
        assert request.headers["Content-Type"] == "application/json"

    @pytest.mark.asyncio
    async def test_decodes_tools_in_order(self, make_client, sample_tools_payload):
        """Test that every entry becomes a Tool, keeping the API order."""
        client = make_client(_respond(200, sample_tools_payload))

        tools = await client.list_tools()

        assert [tool.id for tool in tools] == ["tool-1", "tool-2"]
        weather = tools[0]
        assert weather.identifier == "weather"
        assert weather.name == "Weather"
        assert weather.description == "Gets weather"
        assert weather.mcp_id == "mcp-1"
        assert weather.vertical_ids == ("crypto",)
        assert weather.parameters["required"] == ["city"]
        assert weather.outputs == {"type": "object"}

    @pytest.mark.asyncio
    async def test_null_fields_are_tolerated(self, make_client, sample_tools_payload):
        """Test that null vertical_ids and parameters decode to empty values."""
        client = make_client(_respond(200, sample_tools_payload))

        price_feed = (await client.list_tools())[1]

        assert price_feed.vertical_ids == ()
        assert price_feed.parameters is None
        assert price_feed.public_name == "Price Feed"

    @pytest.mark.asyncio
    async def test_empty_and_null_catalogs(self, make_client):
        """Test that an empty or null tool list yields no tools."""
        assert await make_client(_respond(200, {"tools": []})).list_tools() == []
        assert await make_client(_respond(200, {"tools": None})).list_tools() == []

    @pytest.mark.asyncio
    async def test_cursor_is_not_followed(self, make_client):
        """Test that a next_cursor does not trigger another request."""
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, json={"tools": [], "next_cursor": "abc"})

        await make_client(handler).list_tools()

        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_unauthorized(self, make_client):
        """Test that a 401 maps to UnauthorizedError."""
        client = make_client(_respond(401, {"error": "bad key"}))

        with pytest.raises(UnauthorizedError):
            await client.list_tools()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [400, 403, 404, 500, 503])
    async def test_other_errors_are_internal(self, make_client, status):
        """Test that any other status >= 400 maps to InternalServerError."""
        client = make_client(_respond(status, {"error": "boom"}))

        with pytest.raises(InternalServerError):
            await client.list_tools()

    @pytest.mark.asyncio
    async def test_malformed_body(self, make_client):
        """Test that a 2xx body that is not JSON maps to InvalidResponseError."""
        client = make_client(_respond(200, content=b"<html>oops</html>"))

        with pytest.raises(InvalidResponseError):
            await client.list_tools()

    @pytest.mark.asyncio
    async def test_wrong_shape(self, make_client):
        """Test that a 2xx JSON body of the wrong shape maps to InvalidResponseError."""
        client = make_client(_respond(200, {"tools": "not-a-list"}))

        with pytest.raises(InvalidResponseError):
            await client.list_tools()

    @pytest.mark.asyncio
    async def test_network_failure(self, make_client):
        """Test that a transport failure maps to NetworkTimeoutError."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(NetworkTimeoutError) as exc_info:
            await make_client(handler).list_tools()

        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)


# ========================================
# execute_tool
# ========================================


class TestExecuteTool:
    """Test tool execution."""

    @pytest.mark.asyncio
    async def test_request_shape(self, make_client):
        """Test that execution POSTs the wrapped arguments to the tool URL."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"result": {"content": []}})

        await make_client(handler).execute_tool("weather", {"city": "Paris"})

        request = seen[0]
        assert request.method == "POST"
        assert str(request.url) == f"{TEST_BASE_URL}/mcp/v1/tools/weather/execute"
        assert json.loads(request.content) == {"arguments": {"city": "Paris"}}
        assert request.headers["Authorization"] == f"Bearer {TEST_API_KEY}"

    @pytest.mark.asyncio
    async def test_tool_name_is_quoted(self, make_client):
        """Test that a tool name is escaped into a single path segment."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"result": None})

        await make_client(handler).execute_tool("a/b c", {})

        assert seen[0].url.raw_path == b"/mcp/v1/tools/a%2Fb%20c/execute"

    @pytest.mark.asyncio
    async def test_none_arguments_are_sent_as_empty(self, make_client):
        """Test that missing arguments are sent as an empty object."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"result": None})

        await make_client(handler).execute_tool("weather", None)

        assert json.loads(seen[0].content) == {"arguments": {}}

    @pytest.mark.asyncio
    async def test_success(self, make_client):
        """Test that a 2xx body yields a successful result with the payload."""
        payload = {"content": [{"type": "text", "text": "Sunny"}]}
        client = make_client(_respond(200, {"result": payload}))

        result = await client.execute_tool("weather", {"city": "Paris"})

        assert result.success is True
        assert result.error == ""
        assert result.tool_name == "weather"
        assert result.result == payload
        assert result.duration >= 0
        assert result.timestamp.tzinfo is not None

    @pytest.mark.asyncio
    async def test_null_result(self, make_client):
        """Test that a null result payload is still a success."""
        result = await make_client(_respond(200, {"result": None})).execute_tool("weather", {})

        assert result.success is True
        assert result.result is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("status", "error_type", "message"),
        [
            (401, UnauthorizedError, "unauthorized"),
            (404, ToolNotFoundError, "tool not found"),
            (400, ToolExecutionFailedError, "API error: 400"),
            (500, ToolExecutionFailedError, "API error: 500"),
        ],
    )
    async def test_status_mapping_with_partial_result(
        self, make_client, status, error_type, message,
    ):
        """Test that each error status maps to one kind and carries a failed result."""
        client = make_client(_respond(status, {"error": "x"}))

        with pytest.raises(error_type) as exc_info:
            await client.execute_tool("weather", {"city": "Paris"})

        result = exc_info.value.result
        assert result is not None
        assert result.success is False
        assert result.error == message
        assert result.tool_name == "weather"
        assert result.duration >= 0

    @pytest.mark.asyncio
    async def test_non_json_body(self, make_client):
        """Test that a 200 non-JSON body maps to InvalidResponseError with a partial result."""
        client = make_client(_respond(200, content=b"not json"))

        with pytest.raises(InvalidResponseError) as exc_info:
            await client.execute_tool("weather", {})

        result = exc_info.value.result
        assert result.success is False
        assert result.error == "invalid response"
        assert result.tool_name == "weather"

    @pytest.mark.asyncio
    async def test_network_failure_carries_result(self, make_client):
        """Test that a transport failure carries the error text in the partial result."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(NetworkTimeoutError) as exc_info:
            await make_client(handler).execute_tool("weather", {})

        result = exc_info.value.result
        assert result.success is False
        assert result.error == "timed out"
        assert result.tool_name == "weather"

    @pytest.mark.asyncio
    async def test_unserializable_arguments(self, make_client):
        """Test that arguments that cannot be encoded fail before any request."""
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, json={"result": None})

        with pytest.raises(InvalidArgumentsError) as exc_info:
            await make_client(handler).execute_tool("weather", {"when": object()})

        assert exc_info.value.result is None
        assert calls == []

    @pytest.mark.asyncio
    async def test_success_and_error_are_exclusive(self, make_client):
        """Test that no outcome reports both success and an error."""
        outcomes = []
        for status in (200, 401, 404, 500):
            client = make_client(_respond(status, {"result": {"content": []}}))
            try:
                outcomes.append(await client.execute_tool("weather", {}))
            except (UnauthorizedError, ToolNotFoundError, ToolExecutionFailedError) as e:
                outcomes.append(e.result)

        for result in outcomes:
            assert result.success != bool(result.error)


# ========================================
# Construction and lifecycle
# ========================================


class TestClientLifecycle:
    """Test construction helpers and connection pool ownership."""

    def test_satisfies_capability_interface(self, make_client):
        """Test that the client satisfies the KirhaToolClient protocol."""
        client = make_client(_respond(200, {"tools": []}))

        assert isinstance(client, KirhaToolClient)

    def test_from_settings(self):
        """Test that a client is built from the Kirha settings."""
        settings = Settings(
            _env_file=None,
            KIRHA_API_KEY="key",
            KIRHA_VERTICAL="crypto",
            KIRHA_BASE_URL="https://example.test/",
            KIRHA_TIMEOUT="30s",
        )

        client = KirhaClient.from_settings(settings)

        assert client.api_key == "key"
        assert client.vertical_id == "crypto"
        assert client.base_url == "https://example.test"
        assert client.timeout == 30.0

    @pytest.mark.asyncio
    async def test_does_not_close_borrowed_http_client(self):
        """Test that aclose leaves a caller-provided HTTP client open."""
        http_client = AsyncMock(spec=httpx.AsyncClient)
        client = KirhaClient("key", "crypto", http_client=http_client)

        await client.aclose()

        http_client.aclose.assert_not_called()

    @pytest.mark.asyncio
    async def test_context_manager_closes_owned_http_client(self):
        """Test that leaving the context closes the client's own pool."""
        async with KirhaClient("key", "crypto") as client:
            http_client = client._http

        assert http_client.is_closed
