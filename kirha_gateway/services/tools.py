"""
Tool service: the use cases behind the MCP handlers.

Adds one business rule on top of the remote client: an execution the remote
side reports as unsuccessful is never handed to a caller as a result.
"""

import logging
from collections.abc import Mapping
from typing import Any

from kirha_gateway.clients.base import KirhaToolClient
from kirha_gateway.core.exceptions import KirhaGatewayError, ToolExecutionFailedError
from kirha_gateway.core.logging import get_logger
from kirha_gateway.models import Tool, ToolExecutionResult


class ToolService:
    """Lists and executes tools through a ``KirhaToolClient``."""

    def __init__(self, client: KirhaToolClient, logger: logging.Logger | None = None):
        self.client = client
        self._logger = logger or get_logger("tool_service")

    async def list_tools(self) -> list[Tool]:
        """
        Retrieve all available tools.

        Raises:
            KirhaGatewayError: The client's error kind, annotated with
                "failed to list tools"
        """
        self._logger.info("Listing tools from Kirha API")

        try:
            tools = await self.client.list_tools()
        except KirhaGatewayError as e:
            self._logger.error("Failed to list tools from Kirha API: %s", e)
            raise e.wrap("failed to list tools") from e

        self._logger.info("Successfully listed tools from Kirha API (count=%d)", len(tools))
        return tools

    async def execute_tool(
        self,
        name: str,
        arguments: Mapping[str, Any] | None,
    ) -> ToolExecutionResult:
        """
        Execute a tool and enforce that only successful results come back.

        Raises:
            KirhaGatewayError: The client's error, unchanged
            ToolExecutionFailedError: If the client reports ``success=False``
        """
        self._logger.info("Executing tool %s", name)

        try:
            result = await self.client.execute_tool(name, arguments)
        except KirhaGatewayError as e:
            self._logger.error("Failed to execute tool %s: %s", name, e)
            raise

        if not result.success:
            self._logger.error("Tool execution failed for %s: %s", name, result.error)
            raise ToolExecutionFailedError()

        self._logger.info("Tool %s executed successfully in %.3fs", name, result.duration)
        return result

    async def aclose(self) -> None:
        """Release the underlying client when it holds resources."""
        close = getattr(self.client, "aclose", None)
        if close is not None:
            await close()
