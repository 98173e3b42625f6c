"""Project-wide strictness resolution for hybrid projects.

A project adopts the strictest mode declared by any of its components. When
several components share that mode, the one with the lexically smallest name is
reported as the cause so the result does not depend on declaration order.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from blueprint_compliance.domain.models import ComponentStrictness, ProjectMode, mode_rank
from blueprint_compliance.policy.profiles import (
    StrictnessProfile,
    is_stricter_than,
    profile_for,
    strictest_mode,
)


class StrictnessResolutionError(ValueError):
    """Raised when strictness resolution is called with no components."""


@dataclass(frozen=True, slots=True)
class ResolvedStrictness:
    mode: ProjectMode
    components: tuple[ComponentStrictness, ...]
    strictest_component: str
    reason: str
    upgraded_from: ProjectMode | None = None

    @property
    def profile(self) -> StrictnessProfile:
        return profile_for(self.mode)

    def to_dict(self) -> dict[str, object]:
        return {
            "mode": self.mode.value,
            "strictest_component": self.strictest_component,
            "reason": self.reason,
            "upgraded_from": None if self.upgraded_from is None else self.upgraded_from.value,
            "components": [
                {
                    "component_name": item.component_name,
                    "component_path": item.component_path,
                    "mode": item.mode.value,
                    "reason": item.reason,
                }
                for item in self.components
            ],
        }


@dataclass(frozen=True, slots=True)
class CompatibilityResult:
    compatible: bool
    issues: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class ResolutionPreview:
    resolved: ResolvedStrictness
    upgrade_warnings: tuple[str, ...]
    compatibility: CompatibilityResult


def resolve_strictness(components: Sequence[ComponentStrictness]) -> ResolvedStrictness:
    if not components:
        raise StrictnessResolutionError("Cannot resolve strictness: No components provided")

    declared = tuple(components)
    if len(declared) == 1:
        only = declared[0]
        return ResolvedStrictness(
            mode=only.mode,
            components=declared,
            strictest_component=only.component_name,
            reason=f"Single component project using {only.mode.value} mode",
        )

    resolved_mode = strictest_mode(item.mode for item in declared)
    cause = min(
        (item for item in declared if item.mode is resolved_mode),
        key=lambda item: (item.component_name, item.component_path),
    )
    lowest_mode = min((item.mode for item in declared), key=mode_rank)
    upgraded_from = lowest_mode if lowest_mode is not resolved_mode else None

    if upgraded_from is not None:
        reason = (
            f"Upgraded from {upgraded_from.value} to {resolved_mode.value} "
            f"due to {cause.component_name}"
        )
    else:
        reason = f"All components use {resolved_mode.value} mode"

    return ResolvedStrictness(
        mode=resolved_mode,
        components=declared,
        strictest_component=cause.component_name,
        reason=reason,
        upgraded_from=upgraded_from,
    )


def would_upgrade_project(current_mode: ProjectMode, new_component_mode: ProjectMode) -> bool:
    return is_stricter_than(new_component_mode, current_mode)


def upgrade_warnings(from_mode: ProjectMode, to_mode: ProjectMode) -> list[str]:
    """Human-readable consequences of moving a project from ``from_mode`` to ``to_mode``."""

    if not is_stricter_than(to_mode, from_mode):
        return []

    warnings = [f"Project strictness will be upgraded from {from_mode.value} to {to_mode.value}"]
    transition = (from_mode, to_mode)
    if transition == (ProjectMode.PROTOTYPE, ProjectMode.MVP):
        warnings.extend(
            (
                "Line limit will decrease from 400 to 300 lines per file",
                "Folder structure will become required",
                "Extra files will no longer be allowed",
                "Roblox validation will become strict",
            )
        )
    elif transition == (ProjectMode.PROTOTYPE, ProjectMode.PRODUCTION):
        warnings.extend(
            (
                "Line limit will decrease from 400 to 300 lines per file",
                "Folder structure will become required",
                "Test coverage will be required",
                "Security linting will be enabled",
                "Layering rules will be enforced",
            )
        )
    elif transition == (ProjectMode.MVP, ProjectMode.PRODUCTION):
        warnings.extend(
            (
                "Test coverage will be required",
                "Layering rules will be enforced",
            )
        )
    return warnings


def validate_component_compatibility(
    components: Sequence[ComponentStrictness],
) -> CompatibilityResult:
    """Flag every prototype component that now lives under a stricter project mode."""

    resolved = resolve_strictness(components)
    issues: list[str] = []
    if resolved.mode is not ProjectMode.PROTOTYPE:
        for component in components:
            if component.mode is not ProjectMode.PROTOTYPE:
                continue
            issues.append(
                f'Component "{component.component_name}" is marked as prototype '
                f"but project uses {resolved.mode.value} mode"
            )
            issues.append(f"  → This component must adhere to {resolved.mode.value} strictness rules")
    return CompatibilityResult(compatible=not issues, issues=tuple(issues))


def simulate_resolution(
    existing: Sequence[ComponentStrictness],
    new_component: ComponentStrictness,
) -> ResolutionPreview:
    """Preview the effect of adding ``new_component`` without committing to it."""

    combined = [*existing, new_component]
    resolved = resolve_strictness(combined)
    warnings: tuple[str, ...] = ()
    if existing:
        current = resolve_strictness(existing)
        warnings = tuple(upgrade_warnings(current.mode, resolved.mode))
    return ResolutionPreview(
        resolved=resolved,
        upgrade_warnings=warnings,
        compatibility=validate_component_compatibility(combined),
    )


def format_resolved(result: ResolvedStrictness) -> str:
    lines = [
        f"Resolved Strictness: {result.mode.value.upper()}",
        f"Reason: {result.reason}",
    ]
    if result.upgraded_from is not None:
        lines.append(f"Upgraded from: {result.upgraded_from.value}")
        lines.append(f"Strictest component: {result.strictest_component}")
    lines.append("")
    lines.append("Components:")
    for component in result.components:
        marker = "→" if component.component_name == result.strictest_component else " "
        suffix = f" ({component.reason})" if component.reason else ""
        lines.append(f"{marker} {component.component_name}: {component.mode.value}{suffix}")
    return "\n".join(lines)


__all__ = [
    "CompatibilityResult",
    "ResolutionPreview",
    "ResolvedStrictness",
    "StrictnessResolutionError",
    "format_resolved",
    "resolve_strictness",
    "simulate_resolution",
    "upgrade_warnings",
    "validate_component_compatibility",
    "would_upgrade_project",
]
