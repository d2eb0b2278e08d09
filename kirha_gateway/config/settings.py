"""Configuration settings for the Kirha MCP gateway using Pydantic Settings.

Settings are loaded from environment variables (and an optional ``.env``
file) once at process start and treated as immutable afterwards.
"""

import logging
import re
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from kirha_gateway.core.constants import (
    HTTP_HOST_DEFAULT,
    HTTP_PATH_DEFAULT,
    HTTP_PORT_DEFAULT,
    KIRHA_BASE_URL_DEFAULT,
    KIRHA_TIMEOUT_DEFAULT,
    SHUTDOWN_TIMEOUT_DEFAULT,
    TOOL_CALL_TIMEOUT_DEFAULT,
)
from kirha_gateway.core.exceptions import (
    APIKeyMissingError,
    InvalidTimeoutError,
    VerticalMissingError,
)

logger = logging.getLogger(__name__)

_DURATION_RE = re.compile(r"^\s*(-?\d+(?:\.\d+)?)\s*(ms|s|m|h)?\s*$")
_DURATION_UNITS = {"ms": 0.001, "s": 1.0, "m": 60.0, "h": 3600.0}


def parse_duration(value: Any) -> float:
    """Parse ``120``, ``"120"``, ``"120s"``, ``"500ms"`` or ``"2m"`` into seconds."""
    if isinstance(value, bool):
        msg = f"invalid duration: {value!r}"
        raise ValueError(msg)
    if isinstance(value, int | float):
        return float(value)
    match = _DURATION_RE.match(str(value))
    if not match:
        msg = f"invalid duration: {value!r}"
        raise ValueError(msg)
    amount, unit = match.groups()
    return float(amount) * _DURATION_UNITS[unit or "s"]


class Settings(BaseSettings):
    """Central configuration management with Pydantic validation.

    Required Kirha values default to empty strings so that a missing value is
    reported through the gateway's own error kinds by ``validate_kirha``.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra env vars
        populate_by_name=True,
    )

    # ========================================
    # Debug Settings
    # ========================================
    debug: bool = Field(
        default=False,
        alias="MCP_DEBUG",
        description="Enable debug mode with verbose logging",
    )

    enable_logs: bool = Field(
        default=False,
        alias="ENABLE_LOGS",
        description="Enable logging (disabled by default to keep stdio clean)",
    )

    # ========================================
    # Kirha API Settings
    # ========================================
    kirha_api_key: str = Field(
        default="",
        alias="KIRHA_API_KEY",
        description="API key for authenticating with the Kirha API",
    )

    kirha_vertical: str = Field(
        default="",
        alias="KIRHA_VERTICAL",
        description="Vertical whose tools are exposed",
    )

    kirha_base_url: str = Field(
        default=KIRHA_BASE_URL_DEFAULT,
        alias="KIRHA_BASE_URL",
        description="Base URL of the Kirha API",
    )

    kirha_timeout: float = Field(
        default=float(KIRHA_TIMEOUT_DEFAULT),
        alias="KIRHA_TIMEOUT",
        description="Timeout in seconds for requests to the Kirha API (accepts '120s')",
    )

    # ========================================
    # HTTP Transport Settings
    # ========================================
    host: str = Field(
        default=HTTP_HOST_DEFAULT,
        alias="MCP_HOST",
        description="HTTP server host address",
    )

    port: int = Field(
        default=HTTP_PORT_DEFAULT,
        ge=1,
        le=65535,
        alias="MCP_PORT",
        description="HTTP server port number",
    )

    http_path: str = Field(
        default=HTTP_PATH_DEFAULT,
        alias="MCP_HTTP_PATH",
        description="Path of the MCP endpoint",
    )

    tool_call_timeout: int = Field(
        default=TOOL_CALL_TIMEOUT_DEFAULT,
        ge=1,
        alias="MCP_TOOL_CALL_TIMEOUT_SECONDS",
        description="Response timeout in seconds for a tool call over HTTP",
    )

    shutdown_timeout: float = Field(
        default=float(SHUTDOWN_TIMEOUT_DEFAULT),
        gt=0,
        alias="MCP_SHUTDOWN_TIMEOUT_SECONDS",
        description="Deadline in seconds for a graceful shutdown",
    )

    # ========================================
    # Validators
    # ========================================
    @field_validator("kirha_timeout", mode="before")
    @classmethod
    def parse_kirha_timeout(cls, v: Any) -> float:
        """Accept plain seconds as well as Go-style durations."""
        return parse_duration(v)

    @field_validator("kirha_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("http_path")
    @classmethod
    def ensure_leading_slash(cls, v: str) -> str:
        return v if v.startswith("/") else f"/{v}"

    # ========================================
    # Helper Methods
    # ========================================
    def validate_kirha(self) -> None:
        """Check the Kirha client configuration.

        Raises:
            APIKeyMissingError: If no API key is configured
            VerticalMissingError: If no vertical is configured
            InvalidTimeoutError: If the timeout is not positive
        """
        if not self.kirha_api_key:
            raise APIKeyMissingError
        if not self.kirha_vertical:
            raise VerticalMissingError
        if self.kirha_timeout <= 0:
            raise InvalidTimeoutError

    def to_dict(self) -> dict[str, Any]:
        """Export settings as a dictionary (safe version without secrets)."""
        return {
            "debug": self.debug,
            "enable_logs": self.enable_logs,
            "has_api_key": bool(self.kirha_api_key),
            "kirha_vertical": self.kirha_vertical,
            "kirha_base_url": self.kirha_base_url,
            "kirha_timeout": self.kirha_timeout,
            "host": self.host,
            "port": self.port,
            "http_path": self.http_path,
            "tool_call_timeout": self.tool_call_timeout,
            "shutdown_timeout": self.shutdown_timeout,
        }


# Singleton pattern with proper typing
_settings_instance: Settings | None = None


def get_settings() -> Settings:
    """Get cached settings instance (singleton pattern)."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
        logger.info("Settings initialized from environment")
        logger.debug("Kirha base URL: %s", _settings_instance.kirha_base_url)
    return _settings_instance


def reset_settings() -> None:
    """Reset settings instance (useful for testing)."""
    global _settings_instance
    _settings_instance = None
