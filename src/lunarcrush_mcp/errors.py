"""Exceptions raised by the LunarCrush MCP session adapter."""

from typing import Iterable


class LunarCrushMCPError(Exception):
    """Base exception for LunarCrush MCP errors."""
    pass


class InvalidCredentialError(LunarCrushMCPError, ValueError):
    """The API key is missing or blank."""

    def __init__(self) -> None:
        super().__init__(
            "LunarCrush API key is required. "
            "Get one at https://lunarcrush.com/developers/api"
        )


class MCPConnectionError(LunarCrushMCPError):
    """Transport setup, handshake or initial tool fetch failed."""
    pass


class NotConnectedError(LunarCrushMCPError):
    """Operation requires an open MCP session."""
    pass


# Refreshing before the handshake completes and using a closed session are
# the same condition: there is no active transport.
NotInitializedError = NotConnectedError


class ToolListError(LunarCrushMCPError):
    """Listing tools from the endpoint failed."""
    pass


class UnknownToolError(LunarCrushMCPError, LookupError):
    """The requested tool is not in the cached tool list."""

    def __init__(self, name: str, available: Iterable[str]) -> None:
        self.name = name
        self.available = list(available)
        super().__init__(
            f"Tool '{name}' not found. Available tools: {', '.join(self.available)}"
        )


class ArgumentParseError(LunarCrushMCPError, ValueError):
    """Tool arguments given as JSON could not be decoded."""
    pass


class ToolInvocationError(LunarCrushMCPError):
    """The endpoint rejected or failed a tool call.

    The message is the endpoint's own, unmodified.
    """

    def __init__(self, tool_name: str, message: str) -> None:
        self.tool_name = tool_name
        super().__init__(message)
