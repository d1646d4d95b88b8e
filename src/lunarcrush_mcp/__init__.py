"""LunarCrush MCP SDK - tool discovery and execution.

A thin session adapter over the official MCP client: it discovers the
tools advertised by the LunarCrush MCP server and forwards calls to them.
"""

from lunarcrush_mcp.client import LunarCrushMCP
from lunarcrush_mcp.discovery import describe_tool, extract_parameter_info, find_tool
from lunarcrush_mcp.errors import (
    ArgumentParseError,
    InvalidCredentialError,
    LunarCrushMCPError,
    MCPConnectionError,
    NotConnectedError,
    NotInitializedError,
    ToolInvocationError,
    ToolListError,
    UnknownToolError,
)

__all__ = [
    "LunarCrushMCP",
    "describe_tool",
    "extract_parameter_info",
    "find_tool",
    "ArgumentParseError",
    "InvalidCredentialError",
    "LunarCrushMCPError",
    "MCPConnectionError",
    "NotConnectedError",
    "NotInitializedError",
    "ToolInvocationError",
    "ToolListError",
    "UnknownToolError",
]
