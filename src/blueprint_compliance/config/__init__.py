"""
blueprint-compliance config package public API.

File: src/blueprint_compliance/config/__init__.py

Purpose
- Export config loading/validation entrypoints and public error types.

Functional requirements
- Support loading from ``compliance.toml`` + ``BLUEPRINT_`` env overrides.
- Fail fast with clear structured validation/load errors.
"""

from blueprint_compliance.config.loader import (
    ENV_FIELDS,
    ENV_PREFIX,
    ConfigLoadError,
    dump_effective_config,
    env_bindings,
    load_config,
)
from blueprint_compliance.config.schema import (
    DEFAULT_CONFIG,
    ComplianceConfig,
    ConfigValidationError,
    ConfigValidationIssue,
    ConfigValidationResult,
    assert_valid_config,
    default_config,
    merge_config,
    redact_config,
    validate_config,
)

__all__ = [
    "DEFAULT_CONFIG",
    "ENV_FIELDS",
    "ENV_PREFIX",
    "ComplianceConfig",
    "ConfigLoadError",
    "ConfigValidationError",
    "ConfigValidationIssue",
    "ConfigValidationResult",
    "assert_valid_config",
    "default_config",
    "dump_effective_config",
    "env_bindings",
    "load_config",
    "merge_config",
    "redact_config",
    "validate_config",
]
