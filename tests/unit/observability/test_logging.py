"""
blueprint-compliance — unit tests for structured logging

File: tests/unit/observability/test_logging.py

Purpose
- Validate structlog configuration, JSON output, level filtering, file output,
  and secret redaction.

What this test file should cover
- JSON lines carry event, level, logger name, and UTC timestamp.
- Sensitive keys and inline ``key=value`` / bearer secrets never reach output.
- ``[observability]`` config maps onto ``LoggingConfig``.
"""

from __future__ import annotations

import io
import json
from collections.abc import Iterator
from pathlib import Path

import pytest
import structlog

from blueprint_compliance.observability import (
    LoggingConfig,
    configure_logging,
    get_logger,
    redact_event_dict,
)
from blueprint_compliance.observability.logging import (
    redact_string,
    redact_value,
    requires_redaction_for_key,
)


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    yield
    structlog.reset_defaults()


def _json_lines(text: str) -> list[dict[str, object]]:
    return [json.loads(line) for line in text.splitlines() if line.strip()]


def test_json_output_is_structured_and_redacted() -> None:
    stream = io.StringIO()
    handle = configure_logging(LoggingConfig(level="DEBUG"), stream=stream)
    try:
        get_logger("blueprint_compliance.tests").info(
            "scan_completed",
            files=3,
            api_token="abc",
            note="password=hunter2",
        )
    finally:
        handle.close()

    [record] = _json_lines(stream.getvalue())
    assert record["event"] == "scan_completed"
    assert record["level"] == "info"
    assert record["logger"] == "blueprint_compliance.tests"
    assert record["files"] == 3
    assert record["api_token"] == "***REDACTED***"
    assert record["note"] == "password=***REDACTED***"
    assert str(record["timestamp"]).endswith("Z")


def test_level_filtering() -> None:
    stream = io.StringIO()
    handle = configure_logging({"log_level": "WARNING"}, stream=stream)
    try:
        logger = get_logger("blueprint_compliance.tests")
        logger.info("quiet_event")
        logger.warning("loud_event")
    finally:
        handle.close()

    assert [record["event"] for record in _json_lines(stream.getvalue())] == ["loud_event"]


def test_text_format_renders_console_lines() -> None:
    stream = io.StringIO()
    handle = configure_logging(LoggingConfig(log_format="text"), stream=stream)
    try:
        get_logger("blueprint_compliance.tests").info("compliance_report", valid=True)
    finally:
        handle.close()

    output = stream.getvalue()
    assert "compliance_report" in output
    assert "valid=True" in output


def test_log_file_is_created(tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "run.jsonl"
    handle = configure_logging(LoggingConfig(log_file=log_file), stream=io.StringIO())
    try:
        get_logger("blueprint_compliance.tests").info("written_to_file", count=1)
    finally:
        handle.close()

    [record] = _json_lines(log_file.read_text(encoding="utf-8"))
    assert record["event"] == "written_to_file"


def test_close_detaches_handlers() -> None:
    handle = configure_logging(stream=io.StringIO())

    assert handle.logger.name == "blueprint_compliance"
    assert handle.logger.handlers
    handle.close()
    assert handle.logger.handlers == []


def test_unknown_log_level_is_rejected() -> None:
    with pytest.raises(ValueError, match="unknown log level"):
        configure_logging(LoggingConfig(level="LOUD"), stream=io.StringIO())


def test_config_from_observability_section() -> None:
    section = {
        "log_level": "DEBUG",
        "log_format": "text",
        "log_to_file": False,
        "log_file": "logs/compliance.jsonl",
        "redact_secrets": False,
    }

    disabled = LoggingConfig.from_observability(section)
    enabled = LoggingConfig.from_observability({**section, "log_to_file": True})

    assert disabled == LoggingConfig(level="DEBUG", log_format="text", redact_secrets=False)
    assert enabled.log_file == "logs/compliance.jsonl"
    assert LoggingConfig.from_observability(None) == LoggingConfig()


def test_redact_event_dict_keeps_reserved_keys() -> None:
    event_dict = {
        "event": "token=abc",
        "logger": "blueprint_compliance",
        "password": "x",
        "nested": {"client_secret": 1, "items": ["api_key=zz", 5]},
    }

    redacted = redact_event_dict(None, "info", event_dict)

    assert redacted == {
        "event": "token=***REDACTED***",
        "logger": "blueprint_compliance",
        "password": "***REDACTED***",
        "nested": {"client_secret": "***REDACTED***", "items": ["api_key=***REDACTED***", 5]},
    }


def test_redaction_helpers() -> None:
    assert redact_string("Bearer abc.def-123") == "Bearer ***REDACTED***"
    assert redact_string("token = xyz, other") == "token=***REDACTED***, other"
    assert redact_string("no secrets here") == "no secrets here"
    assert redact_value(("secret:1", 2)) == ("secret:***REDACTED***", 2)
    assert requires_redaction_for_key("GithubToken")
    assert not requires_redaction_for_key("project")
