"""
HTTP client for the Kirha tools API.

This is the only component that talks to the remote tool provider. It maps
every transport and HTTP outcome onto exactly one error kind of the gateway
taxonomy, and for executions it always reports the attempt's metadata:

    try:
        result = await client.execute_tool("weather", {"city": "Paris"})
    except KirhaGatewayError as e:
        e.result  # tool name, duration and timestamp of the failed attempt
"""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from kirha_gateway.clients.schemas import ExecuteToolResponse, ListToolsResponse
from kirha_gateway.core.constants import (
    HTTP_BAD_REQUEST,
    HTTP_NOT_FOUND,
    HTTP_UNAUTHORIZED,
    KIRHA_BASE_URL_DEFAULT,
    KIRHA_TIMEOUT_DEFAULT,
    TOOLS_ENDPOINT,
    TOOLS_PAGE_LIMIT,
)
from kirha_gateway.core.exceptions import (
    InternalServerError,
    InvalidArgumentsError,
    InvalidResponseError,
    NetworkTimeoutError,
    ToolExecutionFailedError,
    ToolNotFoundError,
    UnauthorizedError,
)
from kirha_gateway.core.logging import get_logger
from kirha_gateway.models import Tool, ToolExecutionResult

if TYPE_CHECKING:
    from kirha_gateway.config import Settings


class KirhaClient:
    """
    Async client for the Kirha tools API.

    One instance owns one ``httpx.AsyncClient`` connection pool, shared by
    all in-flight requests. The client holds no other mutable state.
    """

    def __init__(
        self,
        api_key: str,
        vertical_id: str,
        base_url: str = KIRHA_BASE_URL_DEFAULT,
        timeout: float = KIRHA_TIMEOUT_DEFAULT,
        *,
        http_client: httpx.AsyncClient | None = None,
        logger: logging.Logger | None = None,
    ):
        """
        Args:
            api_key: Bearer token for the Kirha API
            vertical_id: Vertical whose tools are listed
            base_url: Base URL of the Kirha API
            timeout: Per-request timeout in seconds
            http_client: Pre-built HTTP client (the caller keeps ownership)
            logger: Logger for this component
        """
        self.api_key = api_key
        self.vertical_id = vertical_id
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._owns_http_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=timeout)
        self._logger = logger or get_logger("kirha_client")

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> KirhaClient:
        """Build a client from validated settings."""
        return cls(
            api_key=settings.kirha_api_key,
            vertical_id=settings.kirha_vertical,
            base_url=settings.kirha_base_url,
            timeout=settings.kirha_timeout,
            **kwargs,
        )

    async def __aenter__(self) -> KirhaClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the connection pool if this client created it."""
        if self._owns_http_client:
            await self._http.aclose()

    @property
    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    async def list_tools(self) -> list[Tool]:
        """
        Retrieve the tools of the configured vertical.

        Returns:
            Tools in the order returned by the API

        Raises:
            UnauthorizedError: If the API key is rejected (401)
            InternalServerError: For any other HTTP status >= 400
            NetworkTimeoutError: If the request fails at the transport level
            InvalidResponseError: If a 2xx body cannot be decoded
        """
        url = f"{self.base_url}{TOOLS_ENDPOINT}"
        params = {"limit": TOOLS_PAGE_LIMIT, "vertical_id": self.vertical_id}

        try:
            request = self._http.build_request(
                "GET", url, params=params, headers=self._headers,
            )
        except httpx.InvalidURL as e:
            self._logger.error("Failed to create request: %s", e)
            raise

        try:
            response = await self._http.send(request, stream=True)
        except httpx.TransportError as e:
            self._logger.error("Failed to execute request: %s", e)
            raise NetworkTimeoutError from e

        try:
            if response.status_code == HTTP_UNAUTHORIZED:
                self._logger.error("Unauthorized request (status_code=%d)", response.status_code)
                raise UnauthorizedError

            if response.status_code >= HTTP_BAD_REQUEST:
                self._logger.error("API error (status_code=%d)", response.status_code)
                raise InternalServerError

            try:
                body = await response.aread()
                payload = ListToolsResponse.model_validate_json(body)
            except (httpx.HTTPError, ValidationError) as e:
                self._logger.error("Failed to decode response: %s", e)
                raise InvalidResponseError from e
        finally:
            await response.aclose()

        if payload.next_cursor:
            self._logger.debug("More tools available after cursor %s", payload.next_cursor)

        tools = [
            Tool(
                id=tool.id,
                identifier=tool.identifier,
                name=tool.name,
                description=tool.description,
                mcp_id=tool.mcp_id,
                vertical_ids=tuple(tool.vertical_ids),
                parameters=tool.parameters,
                outputs=tool.outputs,
            )
            for tool in payload.tools
        ]

        self._logger.info("Successfully listed tools (count=%d)", len(tools))
        return tools

    async def execute_tool(
        self,
        name: str,
        arguments: Mapping[str, Any] | None,
    ) -> ToolExecutionResult:
        """
        Execute a tool by name.

        Every error raised after the request was built carries a failed
        ``ToolExecutionResult`` in ``error.result`` with the tool name,
        the elapsed duration and a timestamp.

        Args:
            name: Tool name
            arguments: Keyed tool arguments

        Returns:
            A successful execution result

        Raises:
            InvalidArgumentsError: If the arguments cannot be serialized (no result)
            UnauthorizedError: If the API key is rejected (401)
            ToolNotFoundError: If the tool does not exist (404)
            ToolExecutionFailedError: For any other HTTP status >= 400
            NetworkTimeoutError: If the request fails at the transport level
            InvalidResponseError: If a 2xx body cannot be decoded
        """
        start_time = time.perf_counter()

        url = f"{self.base_url}{TOOLS_ENDPOINT}/{quote(name, safe='')}/execute"

        try:
            body = json.dumps({"arguments": dict(arguments or {})}, allow_nan=False)
        except (TypeError, ValueError) as e:
            self._logger.error("Failed to marshal request body for %s: %s", name, e)
            msg = f"cannot serialize arguments: {e}"
            raise InvalidArgumentsError(msg) from e

        try:
            request = self._http.build_request(
                "POST", url, content=body, headers=self._headers,
            )
        except httpx.InvalidURL as e:
            self._logger.error("Failed to create request for %s: %s", name, e)
            raise

        try:
            response = await self._http.send(request, stream=True)
        except httpx.TransportError as e:
            self._logger.error("Failed to execute request for %s: %s", name, e)
            result = ToolExecutionResult.failed(
                name, str(e) or type(e).__name__, time.perf_counter() - start_time,
            )
            raise NetworkTimeoutError(result=result) from e

        duration = time.perf_counter() - start_time

        try:
            status = response.status_code

            if status == HTTP_UNAUTHORIZED:
                self._logger.error("Unauthorized request (status_code=%d, tool=%s)", status, name)
                raise UnauthorizedError(
                    result=ToolExecutionResult.failed(name, "unauthorized", duration),
                )

            if status == HTTP_NOT_FOUND:
                self._logger.error("Tool not found: %s", name)
                raise ToolNotFoundError(
                    result=ToolExecutionResult.failed(name, "tool not found", duration),
                )

            if status >= HTTP_BAD_REQUEST:
                self._logger.error("API error (status_code=%d, tool=%s)", status, name)
                raise ToolExecutionFailedError(
                    result=ToolExecutionResult.failed(name, f"API error: {status}", duration),
                )

            try:
                payload = ExecuteToolResponse.model_validate_json(await response.aread())
            except (httpx.HTTPError, ValidationError) as e:
                self._logger.error("Failed to decode response for %s: %s", name, e)
                raise InvalidResponseError(
                    result=ToolExecutionResult.failed(name, "invalid response", duration),
                ) from e
        finally:
            await response.aclose()

        self._logger.info("Successfully executed tool %s in %.3fs", name, duration)
        return ToolExecutionResult.succeeded(name, payload.result, duration)
