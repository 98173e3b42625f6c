"""Structured logging setup: structlog on top of stdlib logging, with redaction."""

from __future__ import annotations

import logging
import re
import sys
from collections.abc import Mapping, MutableMapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final

import structlog

JSONScalar = str | int | float | bool | None
JSONValue = JSONScalar | list["JSONValue"] | dict[str, "JSONValue"]

_REDACTED_VALUE: Final[str] = "***REDACTED***"
_DEFAULT_LOGGER_NAME: Final[str] = "blueprint_compliance"

_SENSITIVE_KEY_TERMS: Final[tuple[str, ...]] = (
    "secret",
    "token",
    "password",
    "passphrase",
    "api_key",
    "apikey",
    "authorization",
    "credential",
    "cookie",
    "private_key",
    "client_secret",
)

_SENSITIVE_ASSIGNMENT_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"(?i)\b(api[_-]?key|token|password|secret|client_secret|authorization)\b\s*([:=])\s*([^\s,;]+)"
)
_BEARER_TOKEN_PATTERN: Final[re.Pattern[str]] = re.compile(r"(?i)\bbearer\s+[A-Za-z0-9._~+/-]+=*")

# Event-dict keys structlog itself owns; never redacted by key name.
_RESERVED_EVENT_KEYS: Final[frozenset[str]] = frozenset(
    {"event", "level", "logger", "timestamp", "exc_info", "stack_info"}
)


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    level: int | str = "INFO"
    log_format: str = "json"
    log_file: Path | str | None = None
    redact_secrets: bool = True
    logger_name: str = _DEFAULT_LOGGER_NAME

    @classmethod
    def from_observability(cls, section: Mapping[str, object] | None) -> LoggingConfig:
        """Build from an ``[observability]`` config section."""

        cfg = dict(section or {})
        raw_level = cfg.get("log_level", "INFO")
        raw_file = cfg.get("log_file")
        to_file = bool(cfg.get("log_to_file", False))
        return cls(
            level=raw_level if isinstance(raw_level, (int, str)) else "INFO",
            log_format=str(cfg.get("log_format", "json")),
            log_file=raw_file if to_file and isinstance(raw_file, (str, Path)) else None,
            redact_secrets=bool(cfg.get("redact_secrets", True)),
        )


class LoggingHandle:
    """Owns the handlers installed by ``configure_logging``."""

    def __init__(self, logger: logging.Logger, handlers: list[logging.Handler]) -> None:
        self._logger = logger
        self._handlers = handlers

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def close(self) -> None:
        for handler in self._handlers:
            handler.flush()
            self._logger.removeHandler(handler)
            handler.close()
        self._handlers = []


def configure_logging(
    config: LoggingConfig | Mapping[str, object] | None = None,
    *,
    stream: Any | None = None,
) -> LoggingHandle:
    """Route structlog events through stdlib logging as JSON lines (or console text).

    Replaces any handlers previously installed on the package logger.
    """

    cfg = config if isinstance(config, LoggingConfig) else LoggingConfig.from_observability(config)
    level = _parse_log_level(cfg.level)

    shared: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if cfg.redact_secrets:
        shared.append(redact_event_dict)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    renderer: Any
    if cfg.log_format == "json":
        renderer = structlog.processors.JSONRenderer(sort_keys=True)
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared,
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
    )

    logger = logging.getLogger(cfg.logger_name)
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
        existing.close()

    handlers: list[logging.Handler] = [logging.StreamHandler(stream if stream is not None else sys.stderr)]
    if cfg.log_file is not None:
        log_path = Path(cfg.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.setLevel(level)
        logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return LoggingHandle(logger, handlers)


def get_logger(name: str | None = None) -> Any:
    return structlog.get_logger(name or _DEFAULT_LOGGER_NAME)


def redact_event_dict(
    logger: object, method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """structlog processor: mask secret-looking keys and inline ``key=value`` secrets."""

    for key in list(event_dict):
        value = event_dict[key]
        if key not in _RESERVED_EVENT_KEYS and requires_redaction_for_key(key):
            event_dict[key] = _REDACTED_VALUE
        else:
            event_dict[key] = redact_value(value)
    return event_dict


def redact_value(value: Any) -> Any:
    if isinstance(value, str):
        return redact_string(value)
    if isinstance(value, list):
        return [redact_value(item) for item in value]
    if isinstance(value, tuple):
        return tuple(redact_value(item) for item in value)
    if isinstance(value, dict):
        return {
            key: _REDACTED_VALUE
            if isinstance(key, str) and requires_redaction_for_key(key)
            else redact_value(item)
            for key, item in value.items()
        }
    return value


def requires_redaction_for_key(key: str) -> bool:
    key_lower = key.lower()
    return any(term in key_lower for term in _SENSITIVE_KEY_TERMS)


def redact_string(text: str) -> str:
    redacted = _SENSITIVE_ASSIGNMENT_PATTERN.sub(
        lambda match: f"{match.group(1)}{match.group(2)}{_REDACTED_VALUE}", text
    )
    return _BEARER_TOKEN_PATTERN.sub(f"Bearer {_REDACTED_VALUE}", redacted)


def _parse_log_level(value: int | str) -> int:
    if isinstance(value, int):
        return value
    parsed = logging.getLevelName(value.strip().upper())
    if not isinstance(parsed, int):
        raise ValueError(f"unknown log level: {value!r}")
    return parsed


__all__ = [
    "JSONScalar",
    "JSONValue",
    "LoggingConfig",
    "LoggingHandle",
    "configure_logging",
    "get_logger",
    "redact_event_dict",
    "redact_string",
    "redact_value",
    "requires_redaction_for_key",
]
