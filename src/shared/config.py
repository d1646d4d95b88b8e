"""Configuration management for the LunarCrush MCP SDK.

Supports YAML configuration files and environment variable overrides.
Configuration is loaded once and cached for performance.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from shared.logging import setup_logging

DEFAULT_ENDPOINT = "https://lunarcrush.ai/sse"


class LunarCrushSettings(BaseSettings):
    """Connection and logging settings for the MCP session adapter."""
    api_key: Optional[str] = Field(default=None, description="LunarCrush API key")
    endpoint: str = Field(default=DEFAULT_ENDPOINT, description="SSE endpoint URL")

    # Timeouts (seconds)
    connect_timeout: float = Field(default=5.0, gt=0, description="HTTP timeout for the SSE transport")
    sse_read_timeout: float = Field(default=300.0, gt=0, description="How long to wait for a new SSE event")
    request_timeout: Optional[float] = Field(
        default=None,
        gt=0,
        description="Per-request MCP read timeout; None waits indefinitely"
    )

    # Client identity sent during the MCP handshake
    client_name: str = Field(default="lunarcrush-mcp-sdk")
    client_version: str = Field(default="1.0.0")

    # Logging
    log_level: str = Field(default="INFO")
    json_logs: bool = Field(default=False)

    model_config = SettingsConfigDict(
        env_prefix="LUNARCRUSH_",
        env_file=".env",
        extra="ignore"
    )

    @classmethod
    def from_yaml(cls, path: str | Path) -> "LunarCrushSettings":
        """Load settings from a YAML file, falling back to env/defaults."""
        return cls(**load_yaml_config(path))

    def configure_logging(self) -> None:
        """Apply ``log_level`` and ``json_logs`` to structlog.

        Applications call this once at startup; the SDK never configures
        logging on its own.
        """
        setup_logging(self.log_level, json_output=self.json_logs)


def load_yaml_config(path: str | Path) -> dict[str, Any]:
    """Load a YAML configuration file."""
    path = Path(path)
    if not path.exists():
        return {}

    with open(path) as f:
        return yaml.safe_load(f) or {}


@lru_cache
def get_settings() -> LunarCrushSettings:
    """Get cached SDK settings."""
    config_path = os.environ.get("LUNARCRUSH_CONFIG_PATH", "config/lunarcrush.yaml")
    return LunarCrushSettings.from_yaml(config_path)
