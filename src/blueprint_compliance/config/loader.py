"""
blueprint-compliance — runtime config loader.

File: src/blueprint_compliance/config/loader.py

Purpose
- Resolve the effective ``compliance.toml`` settings for one CLI invocation.

Functional requirements
- Precedence: CLI > env (``BLUEPRINT_<SECTION>_<FIELD>``) > file > defaults.
- Only the settings listed in ``ENV_FIELDS`` are read from the environment;
  ``meta`` and list-valued settings are file-only.
- ``paths.project_root`` and ``observability.log_file`` resolve against the
  directory holding the config file.
"""

from __future__ import annotations

import json
import os
import tomllib
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any, Final

from blueprint_compliance.config.schema import (
    PATH_FIELDS,
    assert_valid_config,
    default_config,
    merge_config,
    redact_config,
)
from blueprint_compliance.constants import DEFAULT_CONFIG_FILENAME

ENV_PREFIX: Final[str] = "BLUEPRINT_"

_TRUTHY: Final[frozenset[str]] = frozenset({"1", "true", "yes", "on"})
_FALSY: Final[frozenset[str]] = frozenset({"0", "false", "no", "off"})


class ConfigLoadError(ValueError):
    """Raised when config cannot be loaded or overrides cannot be coerced."""


def _text(raw: str) -> str:
    return raw.strip()


def _integer(raw: str) -> int:
    try:
        return int(raw.strip())
    except ValueError as exc:
        raise ValueError("must be an integer") from exc


def _number(raw: str) -> float:
    try:
        return float(raw.strip())
    except ValueError as exc:
        raise ValueError("must be a number") from exc


def _flag(raw: str) -> bool:
    lowered = raw.strip().lower()
    if lowered in _TRUTHY:
        return True
    if lowered in _FALSY:
        return False
    raise ValueError("must be a boolean (true/false/1/0/yes/no/on/off)")


ENV_FIELDS: Final[Mapping[str, tuple[tuple[str, Callable[[str], object]], ...]]] = {
    "engine": (
        ("mode", _text),
        ("validator_timeout_seconds", _number),
        ("max_concurrency", _integer),
    ),
    "scanner": (
        ("max_concurrency", _integer),
        ("follow_symlinks", _flag),
    ),
    "paths": (("project_root", _text),),
    "observability": (
        ("log_level", _text),
        ("log_format", _text),
        ("log_to_file", _flag),
        ("log_file", _text),
        ("redact_secrets", _flag),
    ),
}


def env_bindings() -> dict[str, tuple[str, str]]:
    """Environment variable name -> ``(section, field)`` it overrides."""

    return {
        f"{ENV_PREFIX}{section.upper()}_{field.upper()}": (section, field)
        for section, fields in ENV_FIELDS.items()
        for field, _ in fields
    }


def load_config(
    config_path: str | Path | None = None,
    *,
    cli_overrides: Mapping[str, object] | None = None,
    environ: Mapping[str, str] | None = None,
) -> dict[str, Any]:
    """Load effective config; an explicit ``config_path`` must exist."""

    path = Path(config_path or Path.cwd() / DEFAULT_CONFIG_FILENAME).expanduser().resolve()
    file_payload = _read_toml(path, required=config_path is not None)
    merged = assert_valid_config(merge_config(default_config(), file_payload))

    merged = merge_config(merged, _env_overrides(os.environ if environ is None else environ))
    merged = merge_config(merged, _cli_payload(cli_overrides or {}))
    return _anchor_paths(assert_valid_config(merged), path.parent)


def dump_effective_config(config: Mapping[str, object]) -> str:
    """Deterministic JSON of the redacted config."""

    return json.dumps(
        redact_config(config), sort_keys=True, separators=(",", ":"), ensure_ascii=False
    )


def _read_toml(path: Path, *, required: bool) -> dict[str, Any]:
    if not path.exists():
        if required:
            raise ConfigLoadError(f"config file not found: {path}")
        return {}
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigLoadError(f"invalid TOML in {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigLoadError(f"unable to read config file {path}: {exc}") from exc


def _env_overrides(environ: Mapping[str, str]) -> dict[str, dict[str, object]]:
    overrides: dict[str, dict[str, object]] = {}
    for section, fields in ENV_FIELDS.items():
        for field, coerce in fields:
            name = f"{ENV_PREFIX}{section.upper()}_{field.upper()}"
            raw = environ.get(name)
            if raw is None:
                continue
            try:
                value = coerce(raw)
            except ValueError as exc:
                raise ConfigLoadError(f"{name} -> {section}.{field} {exc}") from exc
            overrides.setdefault(section, {})[field] = value
    return overrides


def _cli_payload(overrides: Mapping[str, object]) -> dict[str, dict[str, object]]:
    payload: dict[str, dict[str, object]] = {}
    for key in sorted(overrides):
        value = overrides[key]
        if value is None:
            continue
        section, _, field = key.partition(".")
        if not section or not field:
            raise ConfigLoadError(f"invalid CLI override key {key!r}: expected SECTION.FIELD")
        payload.setdefault(section, {})[field] = value
    return payload


def _anchor_paths(config: dict[str, Any], base_dir: Path) -> dict[str, Any]:
    anchored = merge_config({}, config)
    for section, field in PATH_FIELDS:
        candidate = Path(os.path.expandvars(anchored[section][field])).expanduser()
        if not candidate.is_absolute():
            candidate = base_dir / candidate
        anchored[section][field] = Path(os.path.normpath(candidate)).as_posix()
    return anchored


__all__ = [
    "ConfigLoadError",
    "ENV_FIELDS",
    "ENV_PREFIX",
    "dump_effective_config",
    "env_bindings",
    "load_config",
]
