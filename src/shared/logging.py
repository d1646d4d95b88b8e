"""Structured logging setup for the LunarCrush MCP SDK.

Uses structlog for consistent, machine-parseable log output.
"""

import logging
import sys
from typing import Any

import httpx
import structlog
from structlog.types import Processor

REDACTED = "REDACTED"
SENSITIVE_PARAMS = ("key", "api_key", "token")


def setup_logging(log_level: str = "INFO", json_output: bool = False) -> None:
    """
    Configure structured logging for the SDK.

    Args:
        log_level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: If True, output JSON; otherwise, use colored console output
    """
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if json_output:
        processors: list[Processor] = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(colors=True),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, log_level.upper())
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    # The MCP SDK and httpx log through the standard library
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, log_level.upper()),
    )


def get_logger(name: str | None = None, **initial_context: Any) -> structlog.BoundLogger:
    """
    Get a configured logger instance.

    Args:
        name: Logger name (typically module name)
        **initial_context: Initial context values to bind to logger

    Returns:
        A bound structlog logger instance
    """
    logger = structlog.get_logger(name)
    if initial_context:
        logger = logger.bind(**initial_context)
    return logger


def redact_url(url: str | httpx.URL) -> str:
    """Return the URL as a string with credential query parameters masked."""
    url = httpx.URL(str(url))
    params = [
        (name, REDACTED if name.lower() in SENSITIVE_PARAMS else value)
        for name, value in url.params.multi_items()
    ]
    if not params:
        return str(url)
    return str(url.copy_with(params=httpx.QueryParams(params)))
