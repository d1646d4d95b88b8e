"""Tool discovery helpers.

Pure functions over cached tool descriptors: lookup by name and
parameter summaries derived from each tool's JSON Schema.
"""

from typing import Any, Iterable, Optional

from shared.models import ParameterInfo, ToolDescriptor, ToolDetail


def find_tool(tools: Iterable[ToolDescriptor], name: str) -> Optional[ToolDescriptor]:
    """Return the first tool whose name matches exactly, or None."""
    for tool in tools:
        if tool.name == name:
            return tool
    return None


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def _describe_type(declared: Any) -> Optional[str]:
    """Render a JSON Schema ``type`` keyword as a single string."""
    if isinstance(declared, str) and declared:
        return declared
    if isinstance(declared, list):
        names = [t for t in declared if isinstance(t, str)]
        return " | ".join(names) if names else None
    return None


def _find_enum_variant(prop: dict[str, Any]) -> Optional[list[Any]]:
    for variant in _as_list(prop.get("anyOf")):
        values = _as_dict(variant).get("enum")
        if isinstance(values, list):
            return values
    return None


def extract_parameter_info(schema: Optional[dict[str, Any]]) -> ParameterInfo:
    """
    Summarize the parameters declared by a tool input schema.

    Only the well-known subset of JSON Schema is inspected
    (``properties``, ``required``, ``type``, ``anyOf``, ``enum``).
    Missing or malformed fields are treated as absent.

    Args:
        schema: Tool input schema, possibly None

    Returns:
        Required and optional parameter names plus type and enum maps
    """
    schema = _as_dict(schema)
    properties = _as_dict(schema.get("properties"))
    required = [name for name in _as_list(schema.get("required")) if isinstance(name, str)]

    info = ParameterInfo(
        required=required,
        optional=[name for name in properties if name not in required],
    )

    for name, prop in properties.items():
        prop = _as_dict(prop)
        declared = _describe_type(prop.get("type"))
        if declared:
            info.types[name] = declared
            continue

        enum_values = _find_enum_variant(prop)
        if enum_values is not None:
            info.types[name] = "enum"
            info.enums[name] = enum_values

    return info


def describe_tool(tool: ToolDescriptor) -> ToolDetail:
    """Build a detailed view of a tool for LLM prompts."""
    schema = tool.input_schema or {}
    return ToolDetail(
        name=tool.name,
        description=tool.description or f"Call {tool.name} tool",
        input_schema=schema,
        parameter_info=extract_parameter_info(schema),
    )
