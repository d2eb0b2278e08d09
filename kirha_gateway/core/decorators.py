"""Decorators for the Kirha MCP gateway."""

import functools
import logging
import time
import traceback
import uuid
from collections.abc import Awaitable, Callable
from typing import ParamSpec, TypeVar

from .logging import get_logger, request_id_ctx

P = ParamSpec("P")
R = TypeVar("R")


def track_request(
    operation: str,
    logger: logging.Logger | None = None,
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """Decorator to track MCP requests with timing and error logging.

    Args:
        operation: Name of the protocol operation being tracked
        logger: Logger to report on (defaults to the ``requests`` logger)

    Returns:
        Decorated coroutine function with request tracking
    """
    log = logger or get_logger("requests")

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        @functools.wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            request_id = str(uuid.uuid4())[:8]
            start_time = time.perf_counter()

            # Store request_id in ContextVar for automatic logging
            token = request_id_ctx.set(request_id)

            log.info("Starting %s request", operation)
            if log.isEnabledFor(logging.DEBUG):
                log.debug("Arguments: %s", args[1:] if args else kwargs)

            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                duration = time.perf_counter() - start_time
                log.error("Failed %s after %.2fs: %s", operation, duration, str(e))
                log.debug("Traceback: %s", traceback.format_exc())
                raise
            else:
                duration = time.perf_counter() - start_time
                log.info("Completed %s in %.2fs", operation, duration)
            finally:
                request_id_ctx.reset(token)

            return result

        return wrapper

    return decorator
