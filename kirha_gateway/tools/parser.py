"""Translation between domain tools and the MCP wire schema."""

from typing import Any

from mcp import types
from pydantic import BaseModel, ConfigDict, Field, StrictBool

from kirha_gateway.core.constants import RESULT_PARSE_ERROR_TEXT
from kirha_gateway.models import Tool
from kirha_gateway.utils.coercion import coerce


class InputSchema(BaseModel):
    """Typed shape of a tool input schema; unknown keywords are kept."""

    model_config = ConfigDict(extra="allow")

    type: str = "object"
    properties: dict[str, Any] | None = None
    required: list[str] | None = None


EMPTY_INPUT_SCHEMA = InputSchema()


def to_input_schema(parameters: Any) -> dict[str, Any]:
    """Reshape opaque tool parameters into an input schema, or the empty one."""
    schema = coerce(InputSchema, parameters, EMPTY_INPUT_SCHEMA)
    return schema.model_dump(exclude_none=True)


def to_wire_tool(tool: Tool) -> types.Tool:
    return types.Tool(
        name=tool.public_name,
        description=tool.description,
        inputSchema=to_input_schema(tool.parameters),
    )


def to_wire_tools(tools: list[Tool] | None) -> list[types.Tool]:
    if not tools:
        return []
    return [to_wire_tool(tool) for tool in tools]


def to_domain_tool(wire: types.Tool) -> Tool:
    """Map a wire descriptor back to a domain tool (name and description only)."""
    return Tool(
        id="",
        identifier=wire.name,
        name=wire.name,
        description=wire.description or "",
        parameters=wire.inputSchema,
    )


class ToolResultShape(BaseModel):
    """Lenient shape of an execution payload; unknown keys are dropped."""

    model_config = ConfigDict(extra="ignore")

    content: list[types.ContentBlock] = Field(default_factory=list)
    isError: StrictBool = False


# Returned by coerce() when a payload field has the wrong type
_UNPARSEABLE = ToolResultShape(isError=True)


def parse_error_result() -> types.CallToolResult:
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=RESULT_PARSE_ERROR_TEXT)],
        isError=True,
    )


def to_wire_result(payload: dict[str, Any] | None) -> types.CallToolResult:
    """
    Reshape an execution payload into a tool result.

    Missing ``content`` means no content and unknown keys are ignored, so
    plain data payloads come back as empty, non-error results. Only a field
    of the wrong type (``content`` that is not a list of content blocks, a
    non-boolean ``isError``) becomes a single "Error parsing tool result"
    text block flagged as an error; the call itself still succeeds.
    """
    shape = coerce(ToolResultShape, payload, _UNPARSEABLE)
    if shape is _UNPARSEABLE:
        return parse_error_result()
    return types.CallToolResult(content=shape.content, isError=shape.isError)
