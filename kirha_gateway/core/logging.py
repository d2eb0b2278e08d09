"""Logging configuration for the Kirha MCP gateway."""

import logging
import sys
from contextvars import ContextVar

APP_LOGGER_NAME = "kirha-mcp-gateway"

# Context variable to store request_id across async calls
request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)


class RequestIdFilter(logging.Filter):
    """Logging filter that adds request_id to log records."""

    def filter(self, record):
        """Add request_id to the log record if available."""
        request_id = request_id_ctx.get()
        record.request_id = f"[{request_id}] " if request_id else ""
        return True


def get_logger(component: str | None = None) -> logging.Logger:
    """Return the application logger, or its child for ``component``."""
    logger = logging.getLogger(APP_LOGGER_NAME)
    if component:
        return logger.getChild(component)
    return logger


def configure_logging(*, enabled: bool = False, debug: bool = False) -> logging.Logger:
    """Configure and return the application logger.

    Logs go to stderr so they never mix with the stdio transport. When
    ``enabled`` is false the application logger drops every record.
    """
    logger = get_logger()
    logger.handlers.clear()
    logger.propagate = False

    if not enabled:
        # uvicorn logs through its own loggers; silence them too
        for target in (logger, logging.getLogger("uvicorn"), logging.getLogger("uvicorn.error")):
            target.handlers = [logging.NullHandler()]
            target.propagate = False
            target.setLevel(logging.CRITICAL + 1)
        return logger

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s [%(levelname)s] [%(name)s] %(request_id)s%(message)s",
        ),
    )
    handler.addFilter(RequestIdFilter())
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if debug else logging.INFO)

    # uvicorn logs through its own loggers; route them the same way
    for name in ("uvicorn", "uvicorn.error"):
        server_logger = logging.getLogger(name)
        server_logger.handlers = [handler]
        server_logger.propagate = False

    if debug:
        logger.debug("Debug mode enabled")

    return logger
