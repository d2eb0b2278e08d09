"""Core functionality for the Kirha MCP gateway."""

from .constants import (
    HTTP_BAD_REQUEST,
    HTTP_NOT_FOUND,
    HTTP_OK,
    HTTP_UNAUTHORIZED,
    RESULT_PARSE_ERROR_TEXT,
    SERVER_INSTRUCTIONS,
    SERVER_NAME,
    SERVER_VERSION,
)
from .decorators import track_request
from .exceptions import (
    APIKeyMissingError,
    InternalServerError,
    InvalidArgumentsError,
    InvalidResponseError,
    InvalidTimeoutError,
    KirhaGatewayError,
    MCPToolError,
    NetworkTimeoutError,
    ToolExecutionFailedError,
    ToolNotFoundError,
    TransportError,
    UnauthorizedError,
    VerticalMissingError,
)
from .logging import configure_logging, get_logger, request_id_ctx

__all__ = [
    # Core
    "configure_logging",
    "get_logger",
    "request_id_ctx",
    "track_request",
    # Errors
    "APIKeyMissingError",
    "InternalServerError",
    "InvalidArgumentsError",
    "InvalidResponseError",
    "InvalidTimeoutError",
    "KirhaGatewayError",
    "MCPToolError",
    "NetworkTimeoutError",
    "ToolExecutionFailedError",
    "ToolNotFoundError",
    "TransportError",
    "UnauthorizedError",
    "VerticalMissingError",
    # Constants - most commonly used
    "HTTP_BAD_REQUEST",
    "HTTP_NOT_FOUND",
    "HTTP_OK",
    "HTTP_UNAUTHORIZED",
    "RESULT_PARSE_ERROR_TEXT",
    "SERVER_INSTRUCTIONS",
    "SERVER_NAME",
    "SERVER_VERSION",
]
