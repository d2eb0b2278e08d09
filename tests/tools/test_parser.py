"""
Unit tests for wire translation (kirha_gateway/tools/parser.py).

This module tests:
- Domain tool -> wire descriptor mapping
- Input schema fallback for opaque parameters
- Execution payload -> tool result, including degradation
"""

import pytest
from mcp import types

from kirha_gateway.models import Tool
from kirha_gateway.tools import (
    to_domain_tool,
    to_input_schema,
    to_wire_result,
    to_wire_tool,
    to_wire_tools,
)
from kirha_gateway.tools.parser import parse_error_result


class TestToolMapping:
    """Test mapping catalog entries to wire descriptors."""

    def test_single_tool(self):
        """Test that the slug becomes the public name."""
        tool = Tool(id="1", identifier="weather", name="Weather", description="Gets weather")

        wire = to_wire_tools([tool])

        assert len(wire) == 1
        assert wire[0].name == "weather"
        assert wire[0].description == "Gets weather"
        assert wire[0].inputSchema == {"type": "object"}

    def test_display_name_fallback(self):
        """Test that the display name is used when the slug is empty."""
        tool = Tool(id="2", identifier="", name="Price Feed")

        assert to_wire_tool(tool).name == "Price Feed"

    @pytest.mark.parametrize("tools", [None, []])
    def test_empty_catalog(self, tools):
        """Test that no tools map to an empty list."""
        assert to_wire_tools(tools) == []

    def test_order_is_preserved(self):
        """Test that descriptors come out in catalog order."""
        tools = [Tool(id=str(i), identifier=f"tool-{i}", name=f"Tool {i}") for i in range(5)]

        assert [t.name for t in to_wire_tools(tools)] == [f"tool-{i}" for i in range(5)]

    def test_round_trip_keeps_name_and_description(self):
        """Test that mapping back from the wire keeps name and description."""
        tool = Tool(id="1", identifier="weather", name="Weather", description="Gets weather")

        back = to_domain_tool(to_wire_tool(tool))

        assert back.public_name == tool.public_name
        assert back.description == tool.description


class TestInputSchema:
    """Test reshaping of opaque tool parameters."""

    def test_schema_is_kept(self):
        """Test that a JSON schema passes through with its extra keywords."""
        parameters = {
            "type": "object",
            "properties": {"city": {"type": "string"}},
            "required": ["city"],
            "additionalProperties": False,
        }

        assert to_input_schema(parameters) == parameters

    def test_missing_type_defaults_to_object(self):
        """Test that a schema without a type is typed as an object."""
        schema = to_input_schema({"properties": {"q": {"type": "string"}}})

        assert schema["type"] == "object"
        assert schema["properties"] == {"q": {"type": "string"}}

    @pytest.mark.parametrize(
        "parameters",
        [None, "not a schema", 42, ["a", "b"], {"properties": "nope"}],
    )
    def test_fallback_to_empty_schema(self, parameters):
        """Test that parameters of the wrong shape give the empty schema."""
        assert to_input_schema(parameters) == {"type": "object"}


class TestResultMapping:
    """Test reshaping of execution payloads into tool results."""

    def test_text_content(self):
        """Test that content blocks are kept."""
        payload = {"content": [{"type": "text", "text": "Sunny, 21C"}]}

        result = to_wire_result(payload)

        assert result.isError is False
        assert isinstance(result.content[0], types.TextContent)
        assert result.content[0].text == "Sunny, 21C"

    def test_error_flag_is_kept(self):
        """Test that a payload flagged as an error stays flagged."""
        payload = {"content": [{"type": "text", "text": "quota exceeded"}], "isError": True}

        assert to_wire_result(payload).isError is True

    def test_none_payload(self):
        """Test that a missing payload gives an empty, non-error result."""
        result = to_wire_result(None)

        assert result.content == []
        assert result.isError is False

    @pytest.mark.parametrize(
        "payload",
        [
            {"temperature": 20},
            {"output": "Sunny"},
            {"text": "Sunny", "data": {"temp": 21}},
            {"status": "ok"},
            {},
        ],
    )
    def test_data_payload_without_content(self, payload):
        """Test that plain data payloads give an empty, non-error result."""
        result = to_wire_result(payload)

        assert result.content == []
        assert result.isError is False

    def test_unknown_keys_next_to_content_are_ignored(self):
        """Test that extra keys do not spoil valid content blocks."""
        payload = {"content": [{"type": "text", "text": "Sunny"}], "meta": {"source": "x"}}

        result = to_wire_result(payload)

        assert result.isError is False
        assert result.content[0].text == "Sunny"

    @pytest.mark.parametrize(
        "payload",
        [
            {"content": "just text"},
            {"content": {"type": "text", "text": "not a list"}},
            {"content": [{"type": "unknown-block"}]},
            {"content": [], "isError": "yes"},
        ],
    )
    def test_degrades_to_parse_error(self, payload):
        """Test that a field of the wrong type becomes an error block."""
        result = to_wire_result(payload)

        assert result == parse_error_result()
        assert result.isError is True
        assert result.content[0].text == "Error parsing tool result"
