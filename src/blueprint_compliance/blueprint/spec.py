"""
blueprint-compliance — structural specification input

File: src/blueprint_compliance/blueprint/spec.py

Purpose
- Define the drafting stage's structural specification (``ArchitectSpec``),
  the generator's sole input.

What should be included in this file
- Strict mapping parsing with field-path errors.
- YAML/JSON file loading via ``yaml.safe_load`` (JSON is accepted as YAML).
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import cast

import yaml

from blueprint_compliance.domain.models import (
    ProjectMode,
    _as_bool,
    _as_enum,
    _as_mapping,
    _as_optional_str,
    _as_str,
    _as_str_tuple,
    _expect_object,
)


class SpecLoadError(ValueError):
    """Raised when a structural specification file cannot be read or parsed."""


@dataclass(frozen=True, slots=True)
class ArchitectSpec:
    project_name: str
    project_mode: ProjectMode
    folders: tuple[str, ...] = ()
    files: tuple[str, ...] = ()
    description: str | None = None
    dependencies: tuple[str, ...] | None = None
    is_roblox_project: bool = False
    custom_rules: Mapping[str, object] | None = field(default=None, hash=False, compare=False)

    @classmethod
    def from_mapping(cls, data: Mapping[str, object]) -> ArchitectSpec:
        path = "ArchitectSpec"
        parsed = _expect_object(
            data,
            path,
            required={"project_name", "project_mode"},
            optional={
                "folders",
                "files",
                "description",
                "dependencies",
                "is_roblox_project",
                "custom_rules",
            },
        )
        dependencies = parsed.get("dependencies")
        custom_rules = parsed.get("custom_rules")
        return cls(
            project_name=_as_str(parsed["project_name"], f"{path}.project_name"),
            project_mode=_as_enum(ProjectMode, parsed["project_mode"], f"{path}.project_mode"),
            folders=_as_str_tuple(parsed.get("folders", ()), f"{path}.folders"),
            files=_as_str_tuple(parsed.get("files", ()), f"{path}.files"),
            description=_as_optional_str(parsed.get("description"), f"{path}.description"),
            dependencies=(
                None
                if dependencies is None
                else _as_str_tuple(dependencies, f"{path}.dependencies")
            ),
            is_roblox_project=_as_bool(
                parsed.get("is_roblox_project", False), f"{path}.is_roblox_project"
            ),
            custom_rules=(
                None if custom_rules is None else _as_mapping(custom_rules, f"{path}.custom_rules")
            ),
        )

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "project_name": self.project_name,
            "project_mode": self.project_mode.value,
            "folders": list(self.folders),
            "files": list(self.files),
            "is_roblox_project": self.is_roblox_project,
        }
        if self.description is not None:
            payload["description"] = self.description
        if self.dependencies is not None:
            payload["dependencies"] = list(self.dependencies)
        if self.custom_rules is not None:
            payload["custom_rules"] = dict(self.custom_rules)
        return payload


def load_architect_spec(path: str | Path) -> ArchitectSpec:
    """Load an ``ArchitectSpec`` from a YAML or JSON document."""

    source = Path(path)
    try:
        with source.open("r", encoding="utf-8") as handle:
            loaded = cast("object", yaml.safe_load(handle))
    except OSError as exc:
        raise SpecLoadError(f"{source}: unable to read specification ({exc})") from exc
    except yaml.YAMLError as exc:
        raise SpecLoadError(f"{source}: invalid YAML ({exc})") from exc

    if not isinstance(loaded, Mapping):
        raise SpecLoadError(f"{source}: expected a mapping at the document root")
    try:
        return ArchitectSpec.from_mapping(loaded)
    except ValueError as exc:
        raise SpecLoadError(f"{source}: {exc}") from exc


def dump_architect_spec(spec: ArchitectSpec) -> str:
    return yaml.safe_dump(spec.to_dict(), sort_keys=False, default_flow_style=False, width=120)


__all__ = [
    "ArchitectSpec",
    "SpecLoadError",
    "dump_architect_spec",
    "load_architect_spec",
]
