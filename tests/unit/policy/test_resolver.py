"""
blueprint-compliance — unit tests for strictness resolution

File: tests/unit/policy/test_resolver.py

Purpose
- Validate multi-component strictness resolution and upgrade previews.

What this test file should cover
- Empty input raises; a single component passes through.
- Order independence and idempotence of the resolved mode.
- Deterministic strictest-component tie-break.
- Upgrade warnings and compatibility issues.
"""

from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from blueprint_compliance.domain.models import ComponentStrictness, ProjectMode
from blueprint_compliance.policy.resolver import (
    StrictnessResolutionError,
    format_resolved,
    resolve_strictness,
    simulate_resolution,
    upgrade_warnings,
    validate_component_compatibility,
    would_upgrade_project,
)


def _component(name: str, mode: ProjectMode, path: str | None = None) -> ComponentStrictness:
    return ComponentStrictness(component_name=name, component_path=path or f"src/{name}", mode=mode)


_components = st.lists(
    st.builds(
        _component,
        st.text(alphabet="abcdefgh", min_size=1, max_size=6),
        st.sampled_from(list(ProjectMode)),
    ),
    min_size=1,
    max_size=8,
)


def test_empty_components_raise() -> None:
    with pytest.raises(StrictnessResolutionError, match="No components provided"):
        resolve_strictness([])


def test_single_component_passes_through() -> None:
    resolved = resolve_strictness([_component("ui", ProjectMode.PROTOTYPE)])

    assert resolved.mode is ProjectMode.PROTOTYPE
    assert resolved.strictest_component == "ui"
    assert resolved.upgraded_from is None
    assert resolved.reason == "Single component project using prototype mode"


def test_mixed_components_upgrade_to_strictest() -> None:
    resolved = resolve_strictness(
        [
            _component("ui", ProjectMode.PROTOTYPE),
            _component("billing", ProjectMode.PRODUCTION),
            _component("api", ProjectMode.MVP),
        ]
    )

    assert resolved.mode is ProjectMode.PRODUCTION
    assert resolved.strictest_component == "billing"
    assert resolved.upgraded_from is ProjectMode.PROTOTYPE
    assert resolved.reason == "Upgraded from prototype to production due to billing"
    assert resolved.profile.mode is ProjectMode.PRODUCTION


def test_uniform_components_do_not_report_upgrade() -> None:
    resolved = resolve_strictness(
        [_component("a", ProjectMode.MVP), _component("b", ProjectMode.MVP)]
    )

    assert resolved.upgraded_from is None
    assert resolved.reason == "All components use mvp mode"
    assert resolved.strictest_component == "a"


@given(_components, st.randoms(use_true_random=False))
def test_resolution_is_order_independent(components: list[ComponentStrictness], rng: object) -> None:
    shuffled = list(components)
    rng.shuffle(shuffled)  # type: ignore[attr-defined]

    first = resolve_strictness(components)
    second = resolve_strictness(shuffled)

    assert first.mode is second.mode
    assert first.strictest_component == second.strictest_component


@given(_components)
def test_resolution_is_idempotent(components: list[ComponentStrictness]) -> None:
    once = resolve_strictness(components)
    twice = resolve_strictness([*components, *components])

    assert once.mode is twice.mode


def test_upgrade_warnings_for_prototype_to_mvp() -> None:
    warnings = upgrade_warnings(ProjectMode.PROTOTYPE, ProjectMode.MVP)

    assert warnings[0] == "Project strictness will be upgraded from prototype to mvp"
    assert "Line limit will decrease from 400 to 300 lines per file" in warnings
    assert upgrade_warnings(ProjectMode.MVP, ProjectMode.PROTOTYPE) == []


def test_would_upgrade_project() -> None:
    assert would_upgrade_project(ProjectMode.MVP, ProjectMode.PRODUCTION)
    assert not would_upgrade_project(ProjectMode.MVP, ProjectMode.MVP)


def test_compatibility_flags_prototype_components_under_stricter_mode() -> None:
    result = validate_component_compatibility(
        [_component("ui", ProjectMode.PROTOTYPE), _component("api", ProjectMode.MVP)]
    )

    assert result.compatible is False
    assert result.issues[0] == 'Component "ui" is marked as prototype but project uses mvp mode'


def test_simulate_resolution_previews_upgrade() -> None:
    preview = simulate_resolution(
        [_component("ui", ProjectMode.PROTOTYPE)],
        _component("billing", ProjectMode.PRODUCTION),
    )

    assert preview.resolved.mode is ProjectMode.PRODUCTION
    assert preview.upgrade_warnings[0] == (
        "Project strictness will be upgraded from prototype to production"
    )
    assert preview.compatibility.compatible is False


def test_format_resolved_marks_strictest_component() -> None:
    text = format_resolved(
        resolve_strictness(
            [_component("ui", ProjectMode.PROTOTYPE), _component("api", ProjectMode.MVP)]
        )
    )

    assert text.splitlines()[0] == "Resolved Strictness: MVP"
    assert "→ api: mvp" in text
