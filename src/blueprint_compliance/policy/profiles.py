"""
blueprint-compliance — strictness profiles and severity policy

File: src/blueprint_compliance/policy/profiles.py

Purpose
- Hold the three fixed strictness profiles and the two policy functions every
  validator consults: ``severity_for`` and ``should_block``.

Functional requirements
- ``profile_for`` is total over ``ProjectMode``.
- Moving prototype -> mvp -> production never lowers a severity or unblocks a finding.

Non-functional requirements
- Pure lookups; profiles are never mutated at runtime.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from types import MappingProxyType
from typing import Final

from blueprint_compliance.domain.models import (
    NamingTier,
    PlatformValidation,
    ProjectMode,
    Severity,
    ViolationType,
    mode_rank,
)


@dataclass(frozen=True, slots=True)
class StrictnessProfile:
    mode: ProjectMode
    description: str
    max_lines_per_file: int
    structure_required: bool
    allow_extra_files: bool
    allow_missing_files: bool
    require_exact_imports: bool
    detect_circular_deps: bool
    enforce_layering: bool
    require_test_coverage: bool
    security_linting: bool
    platform_validation: PlatformValidation
    naming: NamingTier


PROTOTYPE_PROFILE: Final[StrictnessProfile] = StrictnessProfile(
    mode=ProjectMode.PROTOTYPE,
    description="Loose validation for rapid prototyping. 400 line limit, optional structure.",
    max_lines_per_file=400,
    structure_required=False,
    allow_extra_files=True,
    allow_missing_files=True,
    require_exact_imports=False,
    detect_circular_deps=False,
    enforce_layering=False,
    require_test_coverage=False,
    security_linting=False,
    platform_validation=PlatformValidation.WARNINGS,
    naming=NamingTier.LOOSE,
)

MVP_PROFILE: Final[StrictnessProfile] = StrictnessProfile(
    mode=ProjectMode.MVP,
    description="Strict validation for MVP. 300 line limit, exact structure required.",
    max_lines_per_file=300,
    structure_required=True,
    allow_extra_files=False,
    allow_missing_files=False,
    require_exact_imports=True,
    detect_circular_deps=True,
    enforce_layering=False,
    require_test_coverage=False,
    security_linting=True,
    platform_validation=PlatformValidation.STRICT,
    naming=NamingTier.MODERATE,
)

PRODUCTION_PROFILE: Final[StrictnessProfile] = StrictnessProfile(
    mode=ProjectMode.PRODUCTION,
    description="Maximum validation for production. All rules enforced.",
    max_lines_per_file=300,
    structure_required=True,
    allow_extra_files=False,
    allow_missing_files=False,
    require_exact_imports=True,
    detect_circular_deps=True,
    enforce_layering=True,
    require_test_coverage=True,
    security_linting=True,
    platform_validation=PlatformValidation.STRICT,
    naming=NamingTier.STRICT,
)

STRICTNESS_PROFILES: Final = MappingProxyType(
    {
        ProjectMode.PROTOTYPE: PROTOTYPE_PROFILE,
        ProjectMode.MVP: MVP_PROFILE,
        ProjectMode.PRODUCTION: PRODUCTION_PROFILE,
    }
)

ALL_PROFILES: Final[tuple[StrictnessProfile, ...]] = (
    PROTOTYPE_PROFILE,
    MVP_PROFILE,
    PRODUCTION_PROFILE,
)

# Findings that indicate a broken contract rather than a style issue.
CRITICAL_CLASS: Final[frozenset[ViolationType]] = frozenset(
    {
        ViolationType.MISSING_REQUIRED_FILE,
        ViolationType.MISSING_REQUIRED_FOLDER,
        ViolationType.CIRCULAR_DEPENDENCY,
        ViolationType.SECURITY_ISSUE,
    }
)

STRUCTURAL_CLASS: Final[frozenset[ViolationType]] = frozenset(
    {
        ViolationType.EXTRA_FILE,
        ViolationType.WRONG_FOLDER,
        ViolationType.NAMING_VIOLATION,
    }
)

_STRUCTURAL_SEVERITY: Final[dict[ProjectMode, Severity]] = {
    ProjectMode.PROTOTYPE: Severity.INFO,
    ProjectMode.MVP: Severity.WARNING,
    ProjectMode.PRODUCTION: Severity.ERROR,
}


def profile_for(mode: ProjectMode | str) -> StrictnessProfile:
    return STRICTNESS_PROFILES[ProjectMode(mode)]


def severity_for(violation_type: ViolationType, profile: StrictnessProfile) -> Severity:
    """Map a violation type to its severity under ``profile``."""

    prototype = profile.mode is ProjectMode.PROTOTYPE
    if violation_type in CRITICAL_CLASS:
        return Severity.WARNING if prototype else Severity.ERROR
    if violation_type in STRUCTURAL_CLASS:
        return _STRUCTURAL_SEVERITY[profile.mode]
    if violation_type is ViolationType.LINE_COUNT_EXCEEDED:
        return Severity.WARNING if prototype else Severity.ERROR
    return Severity.INFO if prototype else Severity.WARNING


def should_block(severity: Severity, profile: StrictnessProfile) -> bool:
    """Whether a finding of ``severity`` must stop downstream file writing."""

    if profile.mode is ProjectMode.PROTOTYPE:
        return severity is Severity.CRITICAL
    return severity in (Severity.ERROR, Severity.CRITICAL)


def is_stricter_than(first: ProjectMode, second: ProjectMode) -> bool:
    return mode_rank(first) > mode_rank(second)


def strictest_mode(modes: Iterable[ProjectMode]) -> ProjectMode:
    """Max-reduction over the strictness order; an empty input yields prototype."""

    return max(modes, key=mode_rank, default=ProjectMode.PROTOTYPE)


def format_profile(profile: StrictnessProfile) -> str:
    return f"{profile.mode.value.upper()} Mode - {profile.description}"


__all__ = [
    "ALL_PROFILES",
    "CRITICAL_CLASS",
    "MVP_PROFILE",
    "PROTOTYPE_PROFILE",
    "PRODUCTION_PROFILE",
    "STRICTNESS_PROFILES",
    "STRUCTURAL_CLASS",
    "StrictnessProfile",
    "format_profile",
    "is_stricter_than",
    "profile_for",
    "severity_for",
    "should_block",
    "strictest_mode",
]
