"""
MCP Tools Package.

This package exposes the remote Kirha catalog as MCP tools:
- handler: protocol adapter between MCP requests and the tool service
- parser: translation between domain tools and the MCP wire schema

register_tools() binds a handler to a low-level MCP server.
"""

from typing import TYPE_CHECKING, Any

from mcp import types

from kirha_gateway.core.logging import get_logger
from kirha_gateway.tools.handler import ToolsHandler
from kirha_gateway.tools.parser import (
    to_domain_tool,
    to_input_schema,
    to_wire_result,
    to_wire_tool,
    to_wire_tools,
)

if TYPE_CHECKING:
    from mcp.server.lowlevel import Server

logger = get_logger("tools")


def register_tools(server: "Server", handler: ToolsHandler) -> None:
    """
    Register the tools/list and tools/call handlers on a low-level MCP server.

    Input validation by the SDK is disabled: the catalog is fetched on every
    listing and arguments are forwarded to the remote API as-is.

    Args:
        server: Low-level MCP server to register on
        handler: Protocol adapter answering the requests
    """
    logger.info("Registering MCP tool handlers...")

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return await handler.list_tools()

    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: dict[str, Any]) -> types.CallToolResult:
        return await handler.execute_tool(name, arguments)

    logger.info("MCP tool handlers registered successfully")


__all__ = [
    "ToolsHandler",
    "register_tools",
    "to_domain_tool",
    "to_input_schema",
    "to_wire_result",
    "to_wire_tool",
    "to_wire_tools",
]
