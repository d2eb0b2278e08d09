"""
MCP tools handler.

Translates between the MCP protocol and the tool service:
- tools/list: fetch the catalog and map it to wire descriptors
- tools/call: execute a tool and map its payload to content blocks

Listing failures abort the call with a protocol error. A result payload
that does not fit the content-block shape degrades to an error block
instead, so the protocol-level call still completes.
"""

import asyncio
import logging
from collections.abc import Mapping
from typing import Any

from mcp import types

from kirha_gateway.core import MCPToolError, track_request
from kirha_gateway.core.exceptions import (
    InvalidArgumentsError,
    KirhaGatewayError,
    NetworkTimeoutError,
)
from kirha_gateway.core.logging import get_logger
from kirha_gateway.models import ToolExecutionResult
from kirha_gateway.services.tools import ToolService
from kirha_gateway.tools.parser import to_wire_result, to_wire_tools


class ToolsHandler:
    """Protocol adapter bound to a ``ToolService``."""

    def __init__(
        self,
        service: ToolService,
        *,
        call_timeout: float | None = None,
        logger: logging.Logger | None = None,
    ):
        """
        Args:
            service: Tool service handling the use cases
            call_timeout: Response timeout in seconds for one tool call
            logger: Logger for this component
        """
        self.service = service
        self.call_timeout = call_timeout
        self._logger = logger or get_logger("mcp_handler")

    @track_request("tools/list")
    async def list_tools(self) -> list[types.Tool]:
        self._logger.info("Handling list tools request")

        try:
            tools = await self.service.list_tools()
        except KirhaGatewayError as e:
            self._logger.error("Failed to list tools: %s", e)
            msg = "failed to list tools"
            raise MCPToolError(msg, cause=e) from e
        except Exception as e:
            self._logger.exception("Unexpected error while listing tools")
            msg = "failed to list tools"
            raise MCPToolError(msg, cause=e) from e

        self._logger.info("Successfully handled list tools request (count=%d)", len(tools))
        return to_wire_tools(tools)

    @track_request("tools/call")
    async def execute_tool(
        self,
        name: str,
        arguments: Mapping[str, Any] | None,
    ) -> types.CallToolResult:
        self._logger.info("Handling execute tool request for %s", name)

        if arguments is None:
            arguments = {}
        if not isinstance(arguments, Mapping):
            error = InvalidArgumentsError("arguments must be an object")
            self._logger.error("Rejected call to %s: %s", name, error)
            msg = "failed to execute tool"
            raise MCPToolError(msg, code=types.INVALID_PARAMS, cause=error)

        try:
            result = await self._execute(name, arguments)
        except KirhaGatewayError as e:
            self._logger.error("Failed to execute tool %s: %s", name, e)
            msg = "failed to execute tool"
            raise MCPToolError(msg, cause=e) from e
        except Exception as e:
            self._logger.exception("Unexpected error while executing tool %s", name)
            msg = "failed to execute tool"
            raise MCPToolError(msg, cause=e) from e

        self._logger.info("Successfully handled execute tool request for %s", name)
        return to_wire_result(result.result)

    async def _execute(self, name: str, arguments: Mapping[str, Any]) -> ToolExecutionResult:
        if self.call_timeout is None:
            return await self.service.execute_tool(name, arguments)

        try:
            async with asyncio.timeout(self.call_timeout):
                return await self.service.execute_tool(name, arguments)
        except TimeoutError as e:
            msg = f"tool call exceeded {self.call_timeout}s"
            raise NetworkTimeoutError(msg) from e
