"""
Transport layer for serving the MCP server.

Implements:
  - StdioTransport: MCP over stdin/stdout (the client launches the gateway)
  - StreamableHTTPTransport: MCP over streamable HTTP, served by uvicorn

Both serve a low-level MCP server until stopped. Message framing and
session handling come from the MCP SDK.
"""

from __future__ import annotations

import contextlib
import io
import logging
import sys
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from typing import TYPE_CHECKING, TextIO

import anyio
import uvicorn
from mcp.server.stdio import stdio_server
from mcp.server.streamable_http_manager import StreamableHTTPSessionManager
from starlette.applications import Starlette
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse
from starlette.routing import Route

from kirha_gateway.core.constants import (
    HTTP_HOST_DEFAULT,
    HTTP_PATH_DEFAULT,
    HTTP_PORT_DEFAULT,
    SERVER_NAME,
)
from kirha_gateway.core.exceptions import TransportError
from kirha_gateway.core.logging import get_logger

if TYPE_CHECKING:
    from mcp.server.lowlevel import Server
    from starlette.requests import Request
    from starlette.types import Receive, Scope, Send


class Transport(ABC):
    """Abstract transport serving an MCP server until stopped."""

    #: Response timeout in seconds applied to each tool call, if any
    response_timeout: float | None = None

    @abstractmethod
    async def serve(self, server: Server) -> None:
        """Serve ``server``; returns once the transport has stopped."""
        ...

    @abstractmethod
    async def shutdown(self) -> None:
        """Stop accepting new work and let in-flight work finish."""
        ...

    @abstractmethod
    def abort(self) -> None:
        """Stop immediately, dropping in-flight work."""
        ...


class _AbandoningStdin:
    """
    Async line iterator over a text stream.

    Each blocking ``readline`` runs in a worker thread that is abandoned on
    cancellation, so stopping never waits for the next line of input.
    """

    def __init__(self, stream: TextIO):
        self._stream = stream

    def __aiter__(self) -> _AbandoningStdin:
        return self

    async def __anext__(self) -> str:
        line = await anyio.to_thread.run_sync(self._stream.readline, abandon_on_cancel=True)
        if not line:
            raise StopAsyncIteration
        return line


class StdioTransport(Transport):
    """
    MCP over stdin/stdout.

    This is MCP's native local transport: the client runs the gateway as a
    child process and exchanges one JSON-RPC message per line.
    """

    def __init__(
        self,
        stdin: TextIO | None = None,
        stdout: anyio.AsyncFile[str] | None = None,
        logger: logging.Logger | None = None,
    ):
        self._stdin = stdin
        self._stdout = stdout
        self._scope: anyio.CancelScope | None = None
        self._stop_requested = False
        self._logger = logger or get_logger("stdio_transport")

    async def serve(self, server: Server) -> None:
        stream = self._stdin or io.TextIOWrapper(sys.stdin.buffer, encoding="utf-8")

        with anyio.CancelScope() as scope:
            self._scope = scope
            if self._stop_requested:
                scope.cancel()

            self._logger.info("Serving MCP over stdio")
            stdin = _AbandoningStdin(stream)
            async with stdio_server(stdin=stdin, stdout=self._stdout) as (read_stream, write_stream):
                await server.run(
                    read_stream,
                    write_stream,
                    server.create_initialization_options(),
                )

        self._scope = None
        self._logger.info("Stdio transport stopped")

    async def shutdown(self) -> None:
        # A stdio session has a single peer; stopping ends it
        self.abort()

    def abort(self) -> None:
        self._stop_requested = True
        if self._scope is not None:
            self._scope.cancel()


class _StreamableHTTPApp:
    """ASGI endpoint delegating to the SDK session manager."""

    def __init__(self, session_manager: StreamableHTTPSessionManager):
        self.session_manager = session_manager

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        await self.session_manager.handle_request(scope, receive, send)


class _UvicornServer(uvicorn.Server):
    """uvicorn server that leaves signal handling to the process entry point."""

    def install_signal_handlers(self) -> None:
        pass

    @contextlib.contextmanager
    def capture_signals(self):
        yield


class StreamableHTTPTransport(Transport):
    """
    MCP over streamable HTTP.

    Exposes the MCP endpoint on ``path`` and a public ``/health`` route.
    Stopping lets uvicorn drain open connections; aborting forces it out.
    """

    def __init__(
        self,
        host: str = HTTP_HOST_DEFAULT,
        port: int = HTTP_PORT_DEFAULT,
        path: str = HTTP_PATH_DEFAULT,
        *,
        response_timeout: float | None = None,
        allowed_origins: list[str] | None = None,
        logger: logging.Logger | None = None,
    ):
        """
        Args:
            host: Bind address
            port: Port number
            path: Path of the MCP endpoint
            response_timeout: Response timeout in seconds for one tool call
            allowed_origins: CORS origins (default: any)
            logger: Logger for this component
        """
        self.host = host
        self.port = port
        self.path = path
        self.response_timeout = response_timeout
        self.allowed_origins = allowed_origins or ["*"]
        self._server: _UvicornServer | None = None
        self._stop_requested = False
        self._logger = logger or get_logger("http_transport")

    def build_app(self, session_manager: StreamableHTTPSessionManager) -> Starlette:
        """Create the Starlette ASGI application."""

        @contextlib.asynccontextmanager
        async def lifespan(app: Starlette) -> AsyncIterator[None]:
            async with session_manager.run():
                self._logger.info("HTTP transport started")
                yield
            self._logger.info("HTTP transport shutting down")

        app = Starlette(
            routes=[
                Route("/health", endpoint=self._health, methods=["GET"]),
                Route(self.path, endpoint=_StreamableHTTPApp(session_manager)),
            ],
            lifespan=lifespan,
        )
        app.add_middleware(
            CORSMiddleware,
            allow_origins=self.allowed_origins,
            allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
            allow_headers=["*"],
            expose_headers=["Mcp-Session-Id"],
        )
        return app

    async def _health(self, request: Request) -> JSONResponse:
        """Health check endpoint."""
        return JSONResponse({"status": "ok", "transport": "http", "server": SERVER_NAME})

    async def serve(self, server: Server) -> None:
        session_manager = StreamableHTTPSessionManager(app=server)
        config = uvicorn.Config(
            self.build_app(session_manager),
            host=self.host,
            port=self.port,
            log_config=None,
            access_log=False,
            lifespan="on",
        )
        self._server = _UvicornServer(config)
        if self._stop_requested:
            return

        self._logger.info("Serving MCP over HTTP on %s:%d%s", self.host, self.port, self.path)
        try:
            await self._server.serve()
        except SystemExit as e:
            # uvicorn exits when it cannot bind its socket
            msg = f"HTTP transport failed to start on {self.host}:{self.port}"
            raise TransportError(msg) from e

        if not self._server.started and not self._stop_requested:
            msg = f"HTTP transport failed to start on {self.host}:{self.port}"
            raise TransportError(msg)

    async def shutdown(self) -> None:
        self._stop_requested = True
        if self._server is not None:
            self._server.should_exit = True

    def abort(self) -> None:
        self._stop_requested = True
        if self._server is not None:
            self._server.should_exit = True
            self._server.force_exit = True
