"""
Command-line entry point for the Kirha MCP gateway.

    kirha-mcp-gateway stdio     # MCP over stdin/stdout
    kirha-mcp-gateway http      # MCP over streamable HTTP
    kirha-mcp-gateway version

Configuration comes from the environment (see ``kirha_gateway.config``).
SIGINT/SIGTERM stop the server gracefully within the shutdown deadline.
"""

import argparse
import asyncio
import logging
import signal
import sys

from kirha_gateway.clients import KirhaClient
from kirha_gateway.config import Settings, get_settings
from kirha_gateway.core import KirhaGatewayError, configure_logging, get_logger
from kirha_gateway.core.constants import SERVER_VERSION
from kirha_gateway.server import GatewayServer, create_http_server, create_stdio_server
from kirha_gateway.services import ToolService

VERSION_TEXT = f"Kirha MCP Gateway version {SERVER_VERSION}"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kirha-mcp-gateway",
        description="Kirha MCP Gateway - Connect to Kirha AI tools via MCP protocol",
    )
    parser.add_argument(
        "-v",
        "--version",
        action="store_true",
        help="display version information",
    )

    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("http", help="Run the gateway as an HTTP server")
    subparsers.add_parser("stdio", help="Run the gateway using standard input/output")
    subparsers.add_parser("version", help="Print the version number")
    return parser


def create_server(command: str, service: ToolService, settings: Settings) -> GatewayServer:
    if command == "http":
        return create_http_server(service, settings)
    return create_stdio_server(service)


async def shutdown(server: GatewayServer, timeout: float, logger: logging.Logger) -> None:
    try:
        await server.stop(timeout)
    except TimeoutError as e:
        logger.error("Failed to shutdown server gracefully: %s", e)
    logger.info("Server shutdown complete")


async def run(command: str, settings: Settings) -> None:
    """Serve until a shutdown signal arrives or the transport ends."""
    logger = get_logger(f"cli_{command}")
    logger.info("Starting %s MCP server...", command)

    async with KirhaClient.from_settings(settings) as client:
        server = create_server(command, ToolService(client), settings)

        loop = asyncio.get_running_loop()
        stop_task: asyncio.Task | None = None

        def request_stop() -> None:
            nonlocal stop_task
            if stop_task is None:
                logger.info("Received shutdown signal")
                stop_task = loop.create_task(
                    shutdown(server, settings.shutdown_timeout, logger),
                )

        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, request_stop)

        try:
            await server.start()
        finally:
            for sig in (signal.SIGINT, signal.SIGTERM):
                loop.remove_signal_handler(sig)
            if stop_task is not None:
                await stop_task

    logger.info("Server stopped")


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version or args.command == "version":
        print(VERSION_TEXT)
        return 0
    if args.command is None:
        parser.print_help()
        return 0

    settings = get_settings()
    logger = configure_logging(enabled=settings.enable_logs, debug=settings.debug)

    try:
        settings.validate_kirha()
    except KirhaGatewayError as e:
        logger.error("Failed to initialize server: %s", e)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        asyncio.run(run(args.command, settings))
    except Exception as e:
        logger.exception("Server error: %s", e)
        return 1
    return 0


def cli() -> None:
    sys.exit(main())


if __name__ == "__main__":
    cli()
