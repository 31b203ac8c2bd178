"""Structured JSON logging for the SDK."""

from __future__ import annotations

import sys
from typing import Any

import logging

import structlog

_LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

_REDACTED_KEYS = {"authorization", "api_key", "api_secret", "bearer_token", "token"}


def _redact_credentials(_logger: Any, _method: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    for key in list(event_dict):
        if key.lower() in _REDACTED_KEYS:
            event_dict[key] = "***"
    return event_dict


def configure_logging(log_level: str = "INFO") -> None:
    """Configure structured JSON logging for applications using the SDK."""
    level = _LEVEL_MAP.get(log_level.upper(), logging.INFO)
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            _redact_credentials,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        # module-level loggers must follow later reconfiguration
        cache_logger_on_first_use=False,
    )


def get_logger(**initial_context: Any) -> structlog.stdlib.BoundLogger:
    """Get a logger with optional initial context bindings."""
    return structlog.get_logger(**initial_context)
