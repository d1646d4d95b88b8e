"""Tests for tool discovery helpers."""

import pytest

from lunarcrush_mcp.discovery import describe_tool, extract_parameter_info, find_tool
from shared.models import ToolDescriptor


class TestExtractParameterInfo:
    """Tests for parameter summaries derived from input schemas."""

    def test_required_optional_types_and_enums(self):
        """Test the full summary for a schema with an enum union."""
        schema = {
            "type": "object",
            "required": ["topic"],
            "properties": {
                "topic": {"type": "string"},
                "metrics": {"anyOf": [{"enum": ["price", "volume"]}]},
            },
        }

        info = extract_parameter_info(schema)

        assert info.required == ["topic"]
        assert info.optional == ["metrics"]
        assert info.types == {"topic": "string", "metrics": "enum"}
        assert info.enums == {"metrics": ["price", "volume"]}

    def test_enum_variant_found_among_other_variants(self):
        """Test that the enum variant is found anywhere in anyOf."""
        schema = {
            "properties": {
                "interval": {"anyOf": [{"type": "null"}, {"enum": ["1d", "1w"]}]},
            },
        }

        info = extract_parameter_info(schema)

        assert info.types == {"interval": "enum"}
        assert info.enums == {"interval": ["1d", "1w"]}

    def test_empty_enum_variant_is_reported(self):
        """Test that an empty enum variant still marks the property as enum."""
        info = extract_parameter_info({"properties": {"sort": {"anyOf": [{"enum": []}]}}})

        assert info.types == {"sort": "enum"}
        assert info.enums == {"sort": []}

    def test_declared_type_wins_over_any_of(self):
        """Test that an explicit type is used even when anyOf is present."""
        schema = {
            "properties": {
                "limit": {"type": "integer", "anyOf": [{"enum": [10, 20]}]},
            },
        }

        info = extract_parameter_info(schema)

        assert info.types == {"limit": "integer"}
        assert info.enums == {}

    def test_type_list_is_joined(self):
        """Test that multi-type declarations are rendered as a union."""
        info = extract_parameter_info({"properties": {"q": {"type": ["string", "null"]}}})

        assert info.types == {"q": "string | null"}

    def test_untyped_property_has_no_type(self):
        """Test that properties without type or enum are listed but untyped."""
        info = extract_parameter_info({"properties": {"extra": {"description": "free form"}}})

        assert info.optional == ["extra"]
        assert info.types == {}

    @pytest.mark.parametrize("schema", [
        None,
        {},
        {"properties": "not-a-dict", "required": "topic"},
        {"properties": {"topic": "string"}, "required": [1, None]},
        {"properties": {"x": {"anyOf": "bad"}}},
    ])
    def test_malformed_schema_degrades_gracefully(self, schema):
        """Test that missing or malformed fields are treated as absent."""
        info = extract_parameter_info(schema)

        assert info.required == []
        assert info.types == {}
        assert info.enums == {}


class TestDescribeTool:
    """Tests for detailed tool descriptions."""

    def test_description_default(self):
        """Test the fallback description for undocumented tools."""
        detail = describe_tool(ToolDescriptor(name="Creators"))

        assert detail.description == "Call Creators tool"
        assert detail.input_schema == {}
        assert detail.parameter_info.required == []

    def test_description_kept(self):
        """Test that an advertised description is used as-is."""
        tool = ToolDescriptor(
            name="Topic",
            description="Topic metrics",
            input_schema={"properties": {"topic": {"type": "string"}}, "required": ["topic"]},
        )

        detail = describe_tool(tool)

        assert detail.description == "Topic metrics"
        assert detail.input_schema == tool.input_schema
        assert detail.parameter_info.required == ["topic"]


class TestFindTool:
    """Tests for tool lookup."""

    def test_exact_match_first_wins(self):
        """Test case-sensitive lookup returning the first match."""
        tools = [
            ToolDescriptor(name="Topic", description="first"),
            ToolDescriptor(name="Topic", description="second"),
        ]

        assert find_tool(tools, "Topic").description == "first"
        assert find_tool(tools, "topic") is None
        assert find_tool([], "Topic") is None
