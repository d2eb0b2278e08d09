"""MCP server lifecycle and transports."""

from .factory import create_http_server, create_stdio_server
from .lifecycle import GatewayServer, ServerState
from .transports import StdioTransport, StreamableHTTPTransport, Transport

__all__ = [
    "GatewayServer",
    "ServerState",
    "StdioTransport",
    "StreamableHTTPTransport",
    "Transport",
    "create_http_server",
    "create_stdio_server",
]
