"""Core data models for the LunarCrush MCP SDK.

Tool schemas and results vary per remote tool, so schema payloads are kept
as plain JSON-like dictionaries and results as the MCP SDK's own types.
"""

from typing import Any, Optional

from mcp import types
from pydantic import AliasChoices, BaseModel, Field, field_validator


class ToolDescriptor(BaseModel):
    """A tool advertised by the MCP endpoint."""
    name: str = Field(..., description="Tool name, unique within a session")
    description: Optional[str] = None
    input_schema: Optional[dict[str, Any]] = Field(
        default=None,
        description="JSON Schema for the tool arguments"
    )

    @classmethod
    def from_mcp_tool(cls, tool: types.Tool) -> "ToolDescriptor":
        """Create a descriptor from the MCP SDK tool type."""
        return cls(
            name=tool.name,
            description=tool.description,
            input_schema=tool.inputSchema,
        )


class ParameterInfo(BaseModel):
    """Summary of a tool's parameters derived from its input schema."""
    required: list[str] = Field(default_factory=list)
    optional: list[str] = Field(default_factory=list)
    types: dict[str, str] = Field(default_factory=dict)
    enums: dict[str, list[Any]] = Field(default_factory=dict)


class ToolDetail(BaseModel):
    """A tool descriptor enriched with a parameter summary for LLM prompts."""
    name: str
    description: str
    input_schema: dict[str, Any] = Field(default_factory=dict)
    parameter_info: ParameterInfo = Field(default_factory=ParameterInfo)


class ToolCallRequest(BaseModel):
    """A single tool invocation in a batch."""
    name: str
    arguments: dict[str, Any] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("arguments", "args")
    )

    @field_validator("arguments", mode="before")
    @classmethod
    def _none_means_no_arguments(cls, value: Any) -> Any:
        return {} if value is None else value


class ToolCallOutcome(BaseModel):
    """
    Result of one invocation in a batch.

    Exactly one of ``result`` and ``error`` is set.
    """
    tool: str
    result: Optional[types.CallToolResult] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        """Whether the invocation completed without raising."""
        return self.error is None


class SessionStatus(BaseModel):
    """Snapshot of the session adapter state."""
    connected: bool
    tool_count: int
    tools: list[str] = Field(default_factory=list)
