"""Structured logging for the compliance engine."""

from blueprint_compliance.observability.logging import (
    LoggingConfig,
    LoggingHandle,
    configure_logging,
    get_logger,
    redact_event_dict,
)

__all__ = [
    "LoggingConfig",
    "LoggingHandle",
    "configure_logging",
    "get_logger",
    "redact_event_dict",
]
