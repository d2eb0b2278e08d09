"""Custom exceptions for the Kirha MCP gateway."""

from __future__ import annotations

from typing import TYPE_CHECKING

from mcp.shared.exceptions import McpError
from mcp.types import INTERNAL_ERROR, ErrorData

if TYPE_CHECKING:
    from kirha_gateway.models import ToolExecutionResult


class MCPToolError(McpError):
    """Protocol-level error returned to MCP clients as a JSON-RPC error.

    The message is always a fixed description; the underlying cause only
    travels in the ``data`` field.
    """

    def __init__(
        self,
        message: str,
        code: int = INTERNAL_ERROR,
        cause: BaseException | None = None,
    ):
        self.message = message
        self.code = code
        self.cause = cause
        super().__init__(
            ErrorData(
                code=code,
                message=message,
                data=str(cause) if cause is not None else None,
            ),
        )


# ========================================
# Base Exceptions
# ========================================


class KirhaGatewayError(Exception):
    """Base exception for every failure kind of the gateway.

    Execution failures carry the partial ``result`` so callers can still
    report the tool name, duration and timestamp of the failed attempt.
    """

    default_message = "gateway error"

    def __init__(
        self,
        message: str | None = None,
        *,
        result: ToolExecutionResult | None = None,
    ):
        self.message = message or self.default_message
        self.result = result
        super().__init__(self.message)

    def wrap(self, context: str) -> KirhaGatewayError:
        """Return an error of the same kind annotated with ``context``."""
        return type(self)(f"{context}: {self.message}", result=self.result)


# ========================================
# Remote API Exceptions
# ========================================


class UnauthorizedError(KirhaGatewayError):
    """The remote API rejected the credentials."""

    default_message = "unauthorized"


class ToolNotFoundError(KirhaGatewayError):
    """The requested tool does not exist."""

    default_message = "tool not found"


class ToolExecutionFailedError(KirhaGatewayError):
    """The tool execution failed."""

    default_message = "tool execution failed"


class InvalidArgumentsError(KirhaGatewayError):
    """The arguments provided for a tool are invalid."""

    default_message = "invalid arguments"


class InternalServerError(KirhaGatewayError):
    """The remote API answered with a server-side error."""

    default_message = "internal server error"


class NetworkTimeoutError(KirhaGatewayError):
    """The remote API could not be reached in time."""

    default_message = "network timeout"


class InvalidResponseError(KirhaGatewayError):
    """The remote API answered with a malformed body."""

    default_message = "invalid response from API"


# ========================================
# Configuration Exceptions
# ========================================


class InvalidTimeoutError(KirhaGatewayError):
    """The configured request timeout is not positive."""

    default_message = "invalid timeout configuration"


class APIKeyMissingError(KirhaGatewayError):
    """No API key was configured."""

    default_message = "API key is missing"


class VerticalMissingError(KirhaGatewayError):
    """No vertical was configured."""

    default_message = "vertical ID is missing"


# ========================================
# Server Exceptions
# ========================================


class TransportError(Exception):
    """The transport failed to start or died while serving."""
