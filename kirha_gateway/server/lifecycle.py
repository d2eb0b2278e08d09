"""
Gateway server lifecycle.

A ``GatewayServer`` builds the MCP server (identity, instructions and tool
handlers), serves it on one transport and coordinates stopping it:

    IDLE -> STARTING -> SERVING -> STOPPING -> STOPPED
                            \\-> FAILED

``start()`` returns normally when the server was stopped on request and
raises when the transport fails. ``stop()`` waits for ``start()`` to
return, up to a deadline, then aborts the transport.
"""

import asyncio
import logging
from enum import Enum

from mcp.server.lowlevel import Server

from kirha_gateway.core.constants import (
    SERVER_INSTRUCTIONS,
    SERVER_NAME,
    SERVER_VERSION,
    SHUTDOWN_TIMEOUT_DEFAULT,
)
from kirha_gateway.core.logging import get_logger
from kirha_gateway.server.transports import Transport
from kirha_gateway.services.tools import ToolService
from kirha_gateway.tools import ToolsHandler, register_tools


class ServerState(str, Enum):
    """Lifecycle states of a gateway server."""

    IDLE = "idle"
    STARTING = "starting"
    SERVING = "serving"
    STOPPING = "stopping"
    STOPPED = "stopped"
    FAILED = "failed"


class GatewayServer:
    """MCP server bound to a tool service and a transport."""

    def __init__(
        self,
        service: ToolService,
        transport: Transport,
        *,
        name: str = SERVER_NAME,
        version: str = SERVER_VERSION,
        instructions: str = SERVER_INSTRUCTIONS,
        logger: logging.Logger | None = None,
    ):
        self.service = service
        self.transport = transport
        self.name = name
        self.version = version
        self.instructions = instructions
        self._logger = logger or get_logger("server")
        self._state = ServerState.IDLE
        self._server: Server | None = None
        self._done = asyncio.Event()

    @property
    def state(self) -> ServerState:
        return self._state

    @property
    def mcp_server(self) -> Server | None:
        """The underlying MCP server, once ``start()`` has built it."""
        return self._server

    def build(self) -> Server:
        """Create the MCP server and register the tool handlers on it."""
        handler = ToolsHandler(self.service, call_timeout=self.transport.response_timeout)
        server = Server(self.name, version=self.version, instructions=self.instructions)
        register_tools(server, handler)
        return server

    async def start(self) -> None:
        """
        Serve until stopped.

        Raises:
            RuntimeError: If the server was already started
            Exception: Whatever the transport raised when it failed
        """
        if self._state is not ServerState.IDLE:
            msg = f"server cannot start from state {self._state.value}"
            raise RuntimeError(msg)

        self._state = ServerState.STARTING
        try:
            self._server = self.build()
            self._state = ServerState.SERVING
            self._logger.info("Starting %s %s", self.name, self.version)
            await self.transport.serve(self._server)
        except Exception as e:
            self._state = ServerState.FAILED
            self._logger.error("MCP server failed: %s", e)
            raise
        finally:
            if self._state is not ServerState.FAILED:
                self._state = ServerState.STOPPED
            self._done.set()

        self._logger.info("MCP server stopped")

    async def stop(self, timeout: float | None = SHUTDOWN_TIMEOUT_DEFAULT) -> None:
        """
        Stop serving and wait for ``start()`` to return.

        Stopping a server that was never started, or that has already
        stopped, does nothing. Concurrent calls share the same wait.

        Args:
            timeout: Deadline in seconds (None waits indefinitely)

        Raises:
            TimeoutError: If the deadline passed; the transport is aborted
        """
        if self._server is None or self._done.is_set():
            return

        if self._state is ServerState.SERVING:
            self._state = ServerState.STOPPING
            self._logger.info("Stopping MCP server")
            await self.transport.shutdown()

        try:
            await asyncio.wait_for(self._done.wait(), timeout)
        except TimeoutError as e:
            self._logger.error("MCP server did not stop within %ss, aborting", timeout)
            self.transport.abort()
            msg = f"server did not stop within {timeout}s"
            raise TimeoutError(msg) from e

        self._logger.info("MCP server stopped successfully")
