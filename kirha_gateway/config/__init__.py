"""Configuration for the Kirha MCP gateway."""

from .settings import Settings, get_settings, parse_duration, reset_settings

__all__ = ["Settings", "get_settings", "parse_duration", "reset_settings"]
