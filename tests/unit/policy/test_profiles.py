"""
blueprint-compliance — unit tests for strictness profiles

File: tests/unit/policy/test_profiles.py

Purpose
- Validate the fixed profile table and the severity/blocking policy.

What this test file should cover
- Profile lookup and the documented per-mode knobs.
- Severity monotonicity: stricter modes never lower a severity.
- Blocking monotonicity: stricter modes never unblock a severity.
- The fixed severity table per violation class.
"""

from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from blueprint_compliance.domain.models import (
    NamingTier,
    PlatformValidation,
    ProjectMode,
    Severity,
    ViolationType,
    mode_rank,
    severity_rank,
)
from blueprint_compliance.policy.profiles import (
    ALL_PROFILES,
    MVP_PROFILE,
    PRODUCTION_PROFILE,
    PROTOTYPE_PROFILE,
    format_profile,
    is_stricter_than,
    profile_for,
    severity_for,
    should_block,
    strictest_mode,
)

_modes = st.sampled_from(list(ProjectMode))


def test_profile_for_accepts_enum_and_string() -> None:
    assert profile_for(ProjectMode.MVP) is MVP_PROFILE
    assert profile_for("production") is PRODUCTION_PROFILE
    with pytest.raises(ValueError):
        profile_for("enterprise")


def test_profile_knobs_match_documented_table() -> None:
    assert PROTOTYPE_PROFILE.max_lines_per_file == 400
    assert MVP_PROFILE.max_lines_per_file == 300
    assert PRODUCTION_PROFILE.max_lines_per_file == 300
    assert PROTOTYPE_PROFILE.allow_extra_files is True
    assert MVP_PROFILE.allow_extra_files is False
    assert PROTOTYPE_PROFILE.detect_circular_deps is False
    assert MVP_PROFILE.detect_circular_deps is True
    assert PROTOTYPE_PROFILE.platform_validation is PlatformValidation.WARNINGS
    assert PRODUCTION_PROFILE.platform_validation is PlatformValidation.STRICT
    assert [profile.naming for profile in ALL_PROFILES] == [
        NamingTier.LOOSE,
        NamingTier.MODERATE,
        NamingTier.STRICT,
    ]


@pytest.mark.parametrize(
    ("violation_type", "mode", "expected"),
    [
        (ViolationType.MISSING_REQUIRED_FILE, ProjectMode.PROTOTYPE, Severity.WARNING),
        (ViolationType.MISSING_REQUIRED_FILE, ProjectMode.MVP, Severity.ERROR),
        (ViolationType.CIRCULAR_DEPENDENCY, ProjectMode.PRODUCTION, Severity.ERROR),
        (ViolationType.EXTRA_FILE, ProjectMode.PROTOTYPE, Severity.INFO),
        (ViolationType.EXTRA_FILE, ProjectMode.MVP, Severity.WARNING),
        (ViolationType.NAMING_VIOLATION, ProjectMode.PRODUCTION, Severity.ERROR),
        (ViolationType.LINE_COUNT_EXCEEDED, ProjectMode.PROTOTYPE, Severity.WARNING),
        (ViolationType.LINE_COUNT_EXCEEDED, ProjectMode.MVP, Severity.ERROR),
        (ViolationType.TOO_MANY_FILES, ProjectMode.PROTOTYPE, Severity.INFO),
        (ViolationType.TOO_MANY_FILES, ProjectMode.PRODUCTION, Severity.WARNING),
    ],
)
def test_severity_table(violation_type: ViolationType, mode: ProjectMode, expected: Severity) -> None:
    assert severity_for(violation_type, profile_for(mode)) is expected


@given(st.sampled_from(list(ViolationType)), _modes, _modes)
def test_severity_is_monotonic_in_mode(
    violation_type: ViolationType, first: ProjectMode, second: ProjectMode
) -> None:
    loose, strict = sorted((first, second), key=mode_rank)

    assert severity_rank(severity_for(violation_type, profile_for(strict))) >= severity_rank(
        severity_for(violation_type, profile_for(loose))
    )


@given(st.sampled_from(list(Severity)), _modes, _modes)
def test_blocking_is_monotonic_in_mode(severity: Severity, first: ProjectMode, second: ProjectMode) -> None:
    loose, strict = sorted((first, second), key=mode_rank)

    if should_block(severity, profile_for(loose)):
        assert should_block(severity, profile_for(strict))


def test_prototype_only_blocks_critical() -> None:
    assert should_block(Severity.CRITICAL, PROTOTYPE_PROFILE) is True
    assert should_block(Severity.ERROR, PROTOTYPE_PROFILE) is False
    assert should_block(Severity.ERROR, MVP_PROFILE) is True
    assert should_block(Severity.WARNING, PRODUCTION_PROFILE) is False


def test_strictest_mode_and_ordering() -> None:
    assert strictest_mode([ProjectMode.MVP, ProjectMode.PROTOTYPE]) is ProjectMode.MVP
    assert strictest_mode([]) is ProjectMode.PROTOTYPE
    assert is_stricter_than(ProjectMode.PRODUCTION, ProjectMode.MVP)
    assert not is_stricter_than(ProjectMode.MVP, ProjectMode.MVP)


def test_format_profile() -> None:
    assert format_profile(MVP_PROFILE).startswith("MVP Mode - ")
