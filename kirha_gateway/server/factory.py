"""Construct gateway servers for each transport."""

import logging

from kirha_gateway.config import Settings
from kirha_gateway.server.lifecycle import GatewayServer
from kirha_gateway.server.transports import StdioTransport, StreamableHTTPTransport
from kirha_gateway.services.tools import ToolService


def create_stdio_server(
    service: ToolService,
    *,
    logger: logging.Logger | None = None,
) -> GatewayServer:
    """Gateway served over stdin/stdout."""
    return GatewayServer(service, StdioTransport(), logger=logger)


def create_http_server(
    service: ToolService,
    settings: Settings,
    *,
    logger: logging.Logger | None = None,
) -> GatewayServer:
    """
    Gateway served over streamable HTTP.

    Listens on ``settings.host:settings.port`` at ``settings.http_path``;
    each tool call is bounded by ``settings.tool_call_timeout``.
    """
    transport = StreamableHTTPTransport(
        host=settings.host,
        port=settings.port,
        path=settings.http_path,
        response_timeout=float(settings.tool_call_timeout),
    )
    return GatewayServer(service, transport, logger=logger)
