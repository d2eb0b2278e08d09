"""Utility helpers for the Kirha MCP gateway."""

from .coercion import coerce

__all__ = ["coerce"]
