"""Domain models shared by every layer of the gateway."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any


@dataclass(frozen=True)
class Tool:
    """A catalog entry describing a remotely invocable tool."""

    id: str
    identifier: str
    name: str
    description: str = ""
    mcp_id: str = ""
    vertical_ids: tuple[str, ...] = ()
    parameters: Any = None
    outputs: Any = None

    @property
    def public_name(self) -> str:
        """Externally visible name: the slug, or the display name without one."""
        return self.identifier or self.name


@dataclass(frozen=True)
class ToolExecutionResult:
    """Outcome of one tool execution attempt.

    ``success`` and a non-empty ``error`` are mutually exclusive. Failed
    attempts still carry the tool name, duration and timestamp.
    """

    tool_name: str
    success: bool
    duration: float
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    result: dict[str, Any] | None = None
    error: str = ""

    def __post_init__(self) -> None:
        if self.success and self.error:
            msg = "a successful execution cannot carry an error"
            raise ValueError(msg)

    @classmethod
    def succeeded(
        cls,
        tool_name: str,
        result: dict[str, Any] | None,
        duration: float,
    ) -> ToolExecutionResult:
        return cls(tool_name=tool_name, success=True, duration=duration, result=result)

    @classmethod
    def failed(cls, tool_name: str, error: str, duration: float) -> ToolExecutionResult:
        return cls(tool_name=tool_name, success=False, duration=duration, error=error)
