"""Wire models of the Kirha tools API."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ToolResponse(BaseModel):
    """One tool entry of the catalog listing."""

    model_config = ConfigDict(extra="ignore")

    id: str = ""
    identifier: str = ""
    name: str = ""
    description: str = ""
    mcp_id: str = ""
    vertical_ids: list[str] = Field(default_factory=list)
    parameters: Any = None
    outputs: Any = None

    @field_validator("id", "identifier", "name", "description", "mcp_id", mode="before")
    @classmethod
    def null_as_blank(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("vertical_ids", mode="before")
    @classmethod
    def null_as_empty(cls, v: Any) -> Any:
        return [] if v is None else v


class ListToolsResponse(BaseModel):
    """Body of ``GET /mcp/v1/tools``."""

    model_config = ConfigDict(extra="ignore")

    tools: list[ToolResponse] = Field(default_factory=list)
    next_cursor: str | None = None

    @field_validator("tools", mode="before")
    @classmethod
    def null_as_empty(cls, v: Any) -> Any:
        return [] if v is None else v


class ExecuteToolResponse(BaseModel):
    """Response of a tool execution."""

    model_config = ConfigDict(extra="ignore")

    result: dict[str, Any] | None = None
