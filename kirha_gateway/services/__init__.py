"""Application services of the Kirha MCP gateway."""

from .tools import ToolService

__all__ = ["ToolService"]
