"""
Kirha MCP Gateway - a Model Context Protocol server for the Kirha tool API.

The gateway lists the tools of one Kirha vertical to MCP clients and
forwards their tool calls to the remote API, over stdio or streamable HTTP.
"""

from kirha_gateway.core.constants import SERVER_VERSION as __version__

# Re-export commonly used entry points
from kirha_gateway.clients import KirhaClient, KirhaToolClient
from kirha_gateway.config import Settings, get_settings, reset_settings
from kirha_gateway.core.exceptions import (
    KirhaGatewayError,
    MCPToolError,
    NetworkTimeoutError,
    ToolExecutionFailedError,
    ToolNotFoundError,
    UnauthorizedError,
)
from kirha_gateway.models import Tool, ToolExecutionResult
from kirha_gateway.server import GatewayServer, create_http_server, create_stdio_server
from kirha_gateway.services import ToolService

__all__ = [
    "GatewayServer",
    "KirhaClient",
    "KirhaGatewayError",
    "KirhaToolClient",
    "MCPToolError",
    "NetworkTimeoutError",
    "Settings",
    "Tool",
    "ToolExecutionFailedError",
    "ToolExecutionResult",
    "ToolNotFoundError",
    "ToolService",
    "UnauthorizedError",
    "__version__",
    "create_http_server",
    "create_stdio_server",
    "get_settings",
    "reset_settings",
]
