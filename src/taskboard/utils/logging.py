"""Structured logging configuration using structlog."""

import logging
import sys
from functools import lru_cache
from typing import Any

import structlog
from structlog.types import Processor

from taskboard.config import Settings, get_settings

REDACTED = "***REDACTED***"

# Substrings of event keys whose values never reach the log output verbatim
SENSITIVE_KEYS = (
    "password",
    "passwd",
    "token",
    "jwt",
    "secret",
    "authorization",
    "credential",
)

QUIET_LOGGERS = ("uvicorn.access", "aiosqlite", "httpx")


def _redact(key: str, value: Any) -> Any:
    key_lower = key.lower()
    if any(sensitive in key_lower for sensitive in SENSITIVE_KEYS):
        # passwords and their hashes are hidden entirely; tokens keep a recognizable prefix and suffix
        if isinstance(value, str) and len(value) > 8 and "password" not in key_lower:
            return f"{value[:4]}...{value[-4:]}"
        return REDACTED
    if isinstance(value, dict):
        return {k: _redact(k, v) for k, v in value.items()}
    return value


def sanitize_for_logging(
    logger: logging.Logger,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Redact passwords, password hashes, bearer tokens and signing keys from log events."""
    return {k: _redact(k, v) for k, v in event_dict.items()}


def _formatter(renderer: Processor, pre_chain: list[Processor]) -> structlog.stdlib.ProcessorFormatter:
    return structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=pre_chain)


def setup_logging(settings: Settings | None = None) -> None:
    """Route structlog and stdlib logging through one set of handlers.

    Console output goes to stdout as JSON or colored text depending on
    ``log_format``; ``log_file``, when set, always receives JSON.

    Args:
        settings: Settings to read log options from (defaults to get_settings())
    """
    settings = settings or get_settings()

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        sanitize_for_logging,
    ]

    structlog.configure(
        processors=[*shared_processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    if settings.log_format == "json":
        console_renderer: Processor = structlog.processors.JSONRenderer()
    else:
        console_renderer = structlog.dev.ConsoleRenderer(colors=True)

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(_formatter(console_renderer, shared_processors))

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(console)
    root_logger.setLevel(getattr(logging, settings.log_level))

    if settings.log_file:
        file_handler = logging.FileHandler(settings.log_file)
        file_handler.setFormatter(_formatter(structlog.processors.JSONRenderer(), shared_processors))
        root_logger.addHandler(file_handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


@lru_cache(maxsize=128)
def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a cached structured logger by name.

    Args:
        name: Logger name, typically __name__
    """
    return structlog.get_logger(name)
