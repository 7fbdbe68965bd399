"""Structured logging configuration with structlog."""

import logging
from collections.abc import MutableMapping
from typing import Any

import structlog

from moneyglow.config import Settings

# Anything that would let a log reader sign in as someone else.
_SECRET_KEYS = frozenset({"token", "raw_token", "magic_url", "cookie", "session"})
_ADDRESS_KEYS = frozenset({"to", "email"})


def mask_address(address: str) -> str:
    """``bea@example.com`` -> ``b***@example.com``."""
    local, sep, domain = address.partition("@")
    if not sep:
        return "***"
    return f"{local[:1]}***@{domain}"


def redact_secrets(
    _logger: Any,  # noqa: ANN401
    _method: str,
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    """Drop login secrets and mask recipient addresses before rendering."""
    for key in _SECRET_KEYS & event_dict.keys():
        event_dict[key] = "[redacted]"
    for key in _ADDRESS_KEYS & event_dict.keys():
        if isinstance(event_dict[key], str):
            event_dict[key] = mask_address(event_dict[key])
    return event_dict


def setup_logging(settings: Settings) -> None:
    """Configure structlog for JSON or console output."""
    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer() if settings.log_format == "json" else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            redact_secrets,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
