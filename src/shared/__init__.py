"""Shared configuration, logging and models for the LunarCrush MCP SDK."""

from shared.models import (
    ParameterInfo,
    SessionStatus,
    ToolCallOutcome,
    ToolCallRequest,
    ToolDescriptor,
    ToolDetail,
)
from shared.config import LunarCrushSettings, get_settings
from shared.logging import get_logger, redact_url, setup_logging

__all__ = [
    "ParameterInfo",
    "SessionStatus",
    "ToolCallOutcome",
    "ToolCallRequest",
    "ToolDescriptor",
    "ToolDetail",
    "LunarCrushSettings",
    "get_settings",
    "get_logger",
    "redact_url",
    "setup_logging",
]
