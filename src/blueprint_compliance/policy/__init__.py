"""Strictness profiles, severity policy, and multi-component resolution."""

from blueprint_compliance.policy.profiles import (
    ALL_PROFILES,
    STRICTNESS_PROFILES,
    StrictnessProfile,
    format_profile,
    is_stricter_than,
    profile_for,
    severity_for,
    should_block,
    strictest_mode,
)
from blueprint_compliance.policy.resolver import (
    ResolvedStrictness,
    StrictnessResolutionError,
    format_resolved,
    resolve_strictness,
    simulate_resolution,
    upgrade_warnings,
    validate_component_compatibility,
    would_upgrade_project,
)

__all__ = [
    "ALL_PROFILES",
    "STRICTNESS_PROFILES",
    "ResolvedStrictness",
    "StrictnessProfile",
    "StrictnessResolutionError",
    "format_profile",
    "format_resolved",
    "is_stricter_than",
    "profile_for",
    "resolve_strictness",
    "severity_for",
    "should_block",
    "simulate_resolution",
    "strictest_mode",
    "upgrade_warnings",
    "validate_component_compatibility",
    "would_upgrade_project",
]
