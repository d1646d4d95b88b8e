"""LunarCrush MCP session adapter.

Connects to the LunarCrush MCP endpoint over SSE, caches the tools it
advertises and forwards tool calls unchanged. Tool schemas are discovered
at runtime; nothing about individual tools is hardcoded here.
"""

import asyncio
import json
from contextlib import AsyncExitStack
from datetime import timedelta
from typing import Any, Mapping, Optional, Sequence, Union

import httpx
from mcp import ClientSession, types
from mcp.client.sse import sse_client

from shared.config import LunarCrushSettings, get_settings
from shared.logging import REDACTED, get_logger, redact_url
from shared.models import (
    SessionStatus,
    ToolCallOutcome,
    ToolCallRequest,
    ToolDescriptor,
    ToolDetail,
)
from lunarcrush_mcp.discovery import describe_tool, find_tool
from lunarcrush_mcp.errors import (
    ArgumentParseError,
    InvalidCredentialError,
    MCPConnectionError,
    NotConnectedError,
    ToolInvocationError,
    ToolListError,
    UnknownToolError,
)

logger = get_logger(__name__)

ToolCallSpec = Union[ToolCallRequest, Mapping[str, Any], tuple]


def _root_cause(error: BaseException) -> BaseException:
    """Unwrap single-member exception groups raised by anyio task groups."""
    while isinstance(error, BaseExceptionGroup) and len(error.exceptions) == 1:
        error = error.exceptions[0]
    return error


def _as_request(call: ToolCallSpec) -> ToolCallRequest:
    if isinstance(call, ToolCallRequest):
        return call
    if isinstance(call, tuple):
        name, *rest = call
        return ToolCallRequest(name=name, arguments=rest[0] if rest else {})
    return ToolCallRequest.model_validate(call)


def _requested_name(call: ToolCallSpec) -> str:
    """Best-effort tool name for reporting a request that failed validation."""
    if isinstance(call, ToolCallRequest):
        return call.name
    if isinstance(call, tuple):
        name = call[0] if call else None
    elif isinstance(call, Mapping):
        name = call.get("name")
    else:
        name = None
    return name if isinstance(name, str) else ""


class LunarCrushMCP:
    """
    Session adapter for the LunarCrush MCP server.

    Lifecycle is Disconnected -> Connected (via ``connect``) -> Disconnected
    (via ``disconnect``). Instances are not safe for concurrent use by
    multiple callers; ``call_tools`` is the only operation that fans out.

    Example:
        async with LunarCrushMCP(api_key) as mcp:
            result = await mcp.call_tool("Topic", {"topic": "bitcoin"})
    """

    def __init__(
        self,
        api_key: str,
        settings: Optional[LunarCrushSettings] = None
    ) -> None:
        """
        Initialize the adapter. No network activity happens here.

        Args:
            api_key: LunarCrush API key
            settings: Optional settings; defaults to ``get_settings()``

        Raises:
            InvalidCredentialError: If the key is empty or whitespace
        """
        if not isinstance(api_key, str) or not api_key.strip():
            raise InvalidCredentialError()

        self._api_key = api_key.strip()
        self.settings = settings or get_settings()

        self._session: Optional[ClientSession] = None
        self._exit_stack = AsyncExitStack()
        self._connected = False
        self._tools: list[ToolDescriptor] = []

    @classmethod
    def from_settings(cls, settings: Optional[LunarCrushSettings] = None) -> "LunarCrushMCP":
        """Create an adapter using the API key from configuration."""
        settings = settings or get_settings()
        return cls(settings.api_key or "", settings=settings)

    @property
    def api_key(self) -> str:
        return self._api_key

    @property
    def endpoint_url(self) -> httpx.URL:
        """SSE endpoint URL carrying the API key as the ``key`` parameter."""
        return httpx.URL(self.settings.endpoint, params={"key": self._api_key})

    @property
    def is_connected(self) -> bool:
        """Check if connected to the MCP server."""
        return self._connected and self._session is not None

    async def __aenter__(self) -> "LunarCrushMCP":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.disconnect()

    def _scrub(self, message: str) -> str:
        return message.replace(self._api_key, REDACTED)

    async def _open_session(self) -> ClientSession:
        """Open the SSE transport and perform the MCP handshake."""
        read_stream, write_stream = await self._exit_stack.enter_async_context(
            sse_client(
                str(self.endpoint_url),
                timeout=self.settings.connect_timeout,
                sse_read_timeout=self.settings.sse_read_timeout,
            )
        )

        read_timeout = None
        if self.settings.request_timeout is not None:
            read_timeout = timedelta(seconds=self.settings.request_timeout)

        session = await self._exit_stack.enter_async_context(
            ClientSession(
                read_stream,
                write_stream,
                read_timeout_seconds=read_timeout,
                client_info=types.Implementation(
                    name=self.settings.client_name,
                    version=self.settings.client_version,
                ),
            )
        )

        result = await session.initialize()
        logger.debug(
            "MCP handshake complete",
            server=result.serverInfo.name,
            server_version=result.serverInfo.version,
        )
        return session

    async def connect(self) -> None:
        """
        Connect to the MCP server and discover available tools.

        The adapter only becomes connected once the handshake and the
        initial tool fetch have both succeeded.

        Raises:
            MCPConnectionError: If transport setup, handshake or tool fetch fails
        """
        if self._session is not None:
            await self.disconnect()

        endpoint = redact_url(self.endpoint_url)
        logger.info("Connecting to LunarCrush MCP", endpoint=endpoint)

        try:
            self._session = await self._open_session()
            await self.refresh_tools()
        except Exception as e:
            cause = self._scrub(str(_root_cause(e)) or type(e).__name__)
            logger.error("MCP connection failed", endpoint=endpoint, error=cause)
            await self.disconnect()
            raise MCPConnectionError(f"Failed to connect to LunarCrush MCP: {cause}") from e
        except BaseException:
            # Cancellation must not leave a half-open transport behind
            await self.disconnect()
            raise

        self._connected = True
        logger.info("Connected to LunarCrush MCP", tool_count=len(self._tools))

    async def refresh_tools(self) -> list[ToolDescriptor]:
        """
        Refresh the tool list from the MCP server.

        The cache is replaced only when the full list was fetched.

        Returns:
            The new tool list

        Raises:
            NotConnectedError: If no session is open
            ToolListError: If listing fails
        """
        if self._session is None:
            raise NotConnectedError("MCP client not initialized")

        try:
            result = await self._session.list_tools()
            listed = list(result.tools)
            while result.nextCursor:
                result = await self._session.list_tools(cursor=result.nextCursor)
                listed.extend(result.tools)
            tools = [ToolDescriptor.from_mcp_tool(tool) for tool in listed]
        except Exception as e:
            cause = self._scrub(str(_root_cause(e)) or type(e).__name__)
            logger.error("Tool refresh failed", error=cause)
            raise ToolListError(f"Failed to refresh tools: {cause}") from e

        self._tools = tools
        logger.info("Tool cache refreshed", tool_count=len(tools))
        return list(tools)

    def _require_session(self) -> ClientSession:
        if not self._connected or self._session is None:
            raise NotConnectedError("Not connected to LunarCrush MCP. Call connect() first.")
        return self._session

    def get_tools(self) -> list[ToolDescriptor]:
        """Get a copy of all cached tools with their schemas."""
        self._require_session()
        return list(self._tools)

    def get_tool(self, name: str) -> Optional[ToolDescriptor]:
        """Get a cached tool by exact name, or None if not found."""
        self._require_session()
        return find_tool(self._tools, name)

    def get_tools_with_details(self) -> list[ToolDetail]:
        """Describe cached tools with required/optional parameters, types and enums."""
        return [describe_tool(tool) for tool in self._tools]

    async def call_tool(
        self,
        name: str,
        arguments: Optional[Mapping[str, Any]] = None
    ) -> types.CallToolResult:
        """
        Call a tool by name.

        Arguments are not validated locally; the server's validation
        errors are passed through.

        Args:
            name: Tool name
            arguments: Tool arguments

        Returns:
            The server's result, unmodified

        Raises:
            NotConnectedError: If not connected
            UnknownToolError: If the tool is not in the cached list
            ToolInvocationError: If the server reports a failure
        """
        session = self._require_session()

        if find_tool(self._tools, name) is None:
            raise UnknownToolError(name, (tool.name for tool in self._tools))

        arguments = dict(arguments) if arguments is not None else {}
        logger.debug("Calling tool", tool=name, arguments=sorted(arguments))

        try:
            return await session.call_tool(name, arguments)
        except Exception as e:
            logger.warning("Tool call failed", tool=name, error=str(e))
            raise ToolInvocationError(name, str(_root_cause(e))) from e

    async def execute_function(
        self,
        name: str,
        arguments: Union[str, bytes, Mapping[str, Any], None]
    ) -> types.CallToolResult:
        """
        Execute a function call emitted by an LLM.

        Args:
            name: Tool name
            arguments: Arguments as a mapping or a JSON object string

        Raises:
            ArgumentParseError: If the JSON string is malformed or not an object
        """
        if isinstance(arguments, (str, bytes)):
            if not arguments.strip():
                arguments = {}
            else:
                try:
                    arguments = json.loads(arguments)
                except json.JSONDecodeError as e:
                    raise ArgumentParseError(
                        f"Invalid JSON arguments for tool '{name}': {e}"
                    ) from e
                if not isinstance(arguments, dict):
                    raise ArgumentParseError(
                        f"Arguments for tool '{name}' must be a JSON object, "
                        f"got {type(arguments).__name__}"
                    )

        return await self.call_tool(name, arguments)

    async def _call_one(self, call: ToolCallSpec) -> ToolCallOutcome:
        name = _requested_name(call)
        try:
            request = _as_request(call)
            result = await self.call_tool(request.name, request.arguments)
        except Exception as e:
            return ToolCallOutcome(tool=name, error=str(e) or "Unknown error")
        return ToolCallOutcome(tool=request.name, result=result)

    async def call_tools(self, calls: Sequence[ToolCallSpec]) -> list[ToolCallOutcome]:
        """
        Call several tools concurrently.

        Each call succeeds or fails on its own; failures are reported in
        the returned outcomes instead of being raised.

        Args:
            calls: ToolCallRequest objects, ``{"name", "args"}`` mappings
                or ``(name, arguments)`` tuples; a missing or None
                ``args`` means no arguments

        Returns:
            One outcome per call, in input order
        """
        self._require_session()

        outcomes = await asyncio.gather(*(self._call_one(call) for call in calls))

        failed = sum(1 for outcome in outcomes if not outcome.ok)
        logger.debug("Batch tool call finished", total=len(outcomes), failed=failed)
        return list(outcomes)

    def get_status(self) -> SessionStatus:
        """Get connection status and cached tool names."""
        return SessionStatus(
            connected=self._connected,
            tool_count=len(self._tools),
            tools=[tool.name for tool in self._tools],
        )

    async def disconnect(self) -> None:
        """
        Disconnect from the MCP server and clear the tool cache.

        Safe to call repeatedly. Errors raised while closing the transport
        are logged and ignored.
        """
        had_session = self._session is not None
        exit_stack, self._exit_stack = self._exit_stack, AsyncExitStack()

        self._session = None
        self._connected = False
        self._tools = []

        try:
            await exit_stack.aclose()
        except Exception as e:
            logger.warning("Ignoring error while closing MCP session", error=self._scrub(str(e)))

        if had_session:
            logger.info("Disconnected from LunarCrush MCP")
