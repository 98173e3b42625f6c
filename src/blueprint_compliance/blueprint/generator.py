"""
blueprint-compliance — blueprint generator

File: src/blueprint_compliance/blueprint/generator.py

Purpose
- Derive a ``Blueprint`` from an ``ArchitectSpec`` and its declared mode's strictness
  profile, and persist it at a deterministic path.

Functional requirements
- Generation never raises for data problems: any internal failure degrades to
  a minimal prototype fallback blueprint, reported through ``GenerationResult``.
- A failed save is reported but does not invalidate the returned blueprint.

Non-functional requirements
- Stateless service value; the clock is injectable for deterministic tests.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import structlog

from blueprint_compliance.blueprint.serialization import blueprint_path, save_blueprint
from blueprint_compliance.blueprint.spec import ArchitectSpec
from blueprint_compliance.blueprint.tree import build_folder_tree
from blueprint_compliance.constants import (
    BLUEPRINT_VERSION,
    DEFAULT_FORBIDDEN_IMPORTS,
    FALLBACK_BLUEPRINT_VERSION,
    FALLBACK_GENERATED_BY,
    GENERATED_BY,
)
from blueprint_compliance.domain.models import (
    Blueprint,
    DependencyRules,
    EntryKind,
    FolderNode,
    NamingConvention,
    NamingRules,
    NamingTier,
    PlatformValidation,
    ProjectMode,
    RobloxRules,
    SecurityRules,
    TestingRules,
)
from blueprint_compliance.policy.profiles import PROTOTYPE_PROFILE, StrictnessProfile, profile_for

Clock = Callable[[], datetime]

_ROBLOX_TAGS = ("roblox", "game")
_FALLBACK_DESCRIPTION = "Fallback blueprint due to generation error"


@dataclass(slots=True)
class GenerationResult:
    blueprint: Blueprint
    success: bool = True
    errors: list[str] = field(default_factory=list)
    saved_to: Path | None = None

    @property
    def is_fallback(self) -> bool:
        return self.blueprint.version == FALLBACK_BLUEPRINT_VERSION


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


class BlueprintGenerator:
    """Build blueprints for projects rooted at ``project_root``."""

    def __init__(
        self,
        project_root: str | Path,
        *,
        clock: Clock | None = None,
        logger: Any | None = None,
    ) -> None:
        self._project_root = Path(project_root)
        self._clock = clock or _utc_now
        self._logger = logger if logger is not None else structlog.get_logger(__name__)

    @property
    def project_root(self) -> Path:
        return self._project_root

    def save_path(self, project_name: str) -> Path:
        return blueprint_path(self._project_root, project_name)

    def generate(self, spec: ArchitectSpec) -> GenerationResult:
        try:
            blueprint = self._build_blueprint(spec, profile_for(spec.project_mode))
        except Exception as exc:  # noqa: BLE001
            message = str(exc) or exc.__class__.__name__
            self._logger.warning(
                "blueprint_generation_fallback",
                project_name=spec.project_name,
                mode=str(spec.project_mode),
                error=message,
            )
            return GenerationResult(
                blueprint=self.fallback_blueprint(spec.project_name),
                success=False,
                errors=[message],
            )

        self._logger.info(
            "blueprint_generated",
            project_name=blueprint.project_name,
            mode=blueprint.mode.value,
            required_files=len(blueprint.required_files),
            is_roblox_project=blueprint.is_roblox_project,
        )
        return GenerationResult(blueprint=blueprint)

    def generate_and_save(self, spec: ArchitectSpec) -> GenerationResult:
        """Generate and persist; only a successful generation is written."""

        result = self.generate(spec)
        if not result.success:
            return result

        try:
            destination = save_blueprint(result.blueprint, self.save_path(spec.project_name))
        except (OSError, ValueError) as exc:
            result.success = False
            result.errors.append(f"Failed to save: {exc}")
            self._logger.error(
                "blueprint_save_failed",
                project_name=spec.project_name,
                error=str(exc),
            )
            return result

        result.saved_to = destination
        self._logger.info("blueprint_saved", project_name=spec.project_name, path=str(destination))
        return result

    def fallback_blueprint(self, project_name: str) -> Blueprint:
        """Minimal, always-valid blueprint used when generation fails."""

        name = project_name.strip() or "project"
        return Blueprint(
            project_name=name,
            mode=ProjectMode.PROTOTYPE,
            structure=FolderNode(name=name, kind=EntryKind.FOLDER, path="/"),
            max_lines_per_file=PROTOTYPE_PROFILE.max_lines_per_file,
            generated_at=self._clock(),
            version=FALLBACK_BLUEPRINT_VERSION,
            generated_by=FALLBACK_GENERATED_BY,
            dependency_rules=DependencyRules(),
            naming_rules=NamingRules(),
            description=_FALLBACK_DESCRIPTION,
        )

    def _build_blueprint(self, spec: ArchitectSpec, profile: StrictnessProfile) -> Blueprint:
        return Blueprint(
            project_name=spec.project_name,
            mode=profile.mode,
            structure=build_folder_tree(spec.project_name, spec.folders, spec.files),
            max_lines_per_file=profile.max_lines_per_file,
            generated_at=self._clock(),
            version=BLUEPRINT_VERSION,
            generated_by=GENERATED_BY,
            required_files=spec.files if profile.structure_required else (),
            dependency_rules=build_dependency_rules(spec),
            naming_rules=build_naming_rules(profile.naming),
            roblox_rules=build_roblox_rules(profile) if spec.is_roblox_project else None,
            testing_rules=TestingRules(require_tests=True) if profile.require_test_coverage else None,
            security_rules=SecurityRules(
                forbid_eval=True,
                forbid_dangerous_apis=True,
                require_input_validation=profile.mode is ProjectMode.PRODUCTION,
                scan_for_secrets=profile.security_linting,
            ),
            is_roblox_project=spec.is_roblox_project,
            description=spec.description,
            tags=_ROBLOX_TAGS if spec.is_roblox_project else (),
        )


def build_dependency_rules(spec: ArchitectSpec) -> DependencyRules:
    """Defaults forbid ``eval``, ``Function`` and ``require.cache``.

    Custom rules replace individual fields of the defaults and take precedence
    over the declared dependency list.
    """

    defaults = DependencyRules(forbidden_imports=DEFAULT_FORBIDDEN_IMPORTS)
    if spec.custom_rules:
        return dataclasses.replace(defaults, **_coerce_rule_overrides(spec.custom_rules))
    if spec.dependencies:
        return dataclasses.replace(defaults, allowed_dependencies=tuple(spec.dependencies))
    return defaults


def build_naming_rules(tier: NamingTier) -> NamingRules:
    if tier is NamingTier.LOOSE:
        return NamingRules()
    if tier is NamingTier.MODERATE:
        return NamingRules(
            files=NamingConvention.CAMEL_CASE,
            folders=NamingConvention.KEBAB_CASE,
            variables=NamingConvention.CAMEL_CASE,
        )
    return NamingRules(
        files=NamingConvention.CAMEL_CASE,
        folders=NamingConvention.KEBAB_CASE,
        variables=NamingConvention.CAMEL_CASE,
        constants=NamingConvention.SCREAMING_SNAKE_CASE,
        components=NamingConvention.PASCAL_CASE,
    )


def build_roblox_rules(profile: StrictnessProfile) -> RobloxRules:
    strict_layout = profile.mode is not ProjectMode.PROTOTYPE
    production = profile.mode is ProjectMode.PRODUCTION
    return RobloxRules(
        require_client_folder=strict_layout,
        require_server_folder=strict_layout,
        require_shared_folder=False,
        module_suffix=".lua",
        rojo_mapping_validation=PlatformValidation(profile.platform_validation),
        forbid_server_in_client=strict_layout,
        require_module_script=production,
        luau_strict_mode=production,
    )


def _coerce_rule_overrides(overrides: Mapping[str, object]) -> dict[str, object]:
    known = {item.name for item in dataclasses.fields(DependencyRules)}
    unknown = sorted(key for key in overrides if key not in known)
    if unknown:
        raise ValueError(f"unknown dependency rule fields: {unknown}")

    coerced: dict[str, object] = {}
    for key, value in overrides.items():
        if key.startswith("allow_"):
            if not isinstance(value, bool):
                raise ValueError(f"custom_rules.{key}: expected boolean")
            coerced[key] = value
            continue
        if isinstance(value, str) or not isinstance(value, (list, tuple)):
            raise ValueError(f"custom_rules.{key}: expected a list of strings")
        coerced[key] = tuple(str(item) for item in value)
    return coerced


__all__ = [
    "BlueprintGenerator",
    "Clock",
    "GenerationResult",
    "build_dependency_rules",
    "build_naming_rules",
    "build_roblox_rules",
]
