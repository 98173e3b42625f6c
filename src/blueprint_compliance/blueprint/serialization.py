"""Stable JSON persistence for blueprints."""

from __future__ import annotations

import json
from pathlib import Path

from blueprint_compliance.constants import BLUEPRINTS_DIR
from blueprint_compliance.domain.models import Blueprint
from blueprint_compliance.utils.fs import atomic_write


class BlueprintLoadError(ValueError):
    """Raised when a persisted blueprint is missing, unreadable, or malformed."""


def serialize_blueprint(blueprint: Blueprint) -> str:
    return json.dumps(blueprint.to_dict(), indent=2, sort_keys=True, ensure_ascii=False) + "\n"


def parse_blueprint(raw: str, *, source: str = "<string>") -> Blueprint:
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise BlueprintLoadError(f"{source}: invalid JSON ({exc})") from exc
    if not isinstance(payload, dict):
        raise BlueprintLoadError(f"{source}: blueprint root must be an object")
    try:
        return Blueprint.from_dict(payload)
    except ValueError as exc:
        raise BlueprintLoadError(f"{source}: {exc}") from exc


def blueprint_path(project_root: str | Path, project_name: str) -> Path:
    """Deterministic location ``<project_root>/blueprints/<project_name>.json``."""

    name = project_name.strip()
    if not name or "/" in name or "\\" in name or name in {".", ".."}:
        raise ValueError(f"project name {project_name!r} cannot be used as a file name")
    return Path(project_root) / Path(BLUEPRINTS_DIR) / f"{name}.json"


def save_blueprint(blueprint: Blueprint, destination: str | Path) -> Path:
    return atomic_write(destination, serialize_blueprint(blueprint))


def load_blueprint(source: str | Path) -> Blueprint:
    path = Path(source)
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise BlueprintLoadError(f"{path}: blueprint not found") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise BlueprintLoadError(f"{path}: unable to read blueprint ({exc})") from exc
    return parse_blueprint(raw, source=str(path))


__all__ = [
    "BlueprintLoadError",
    "blueprint_path",
    "load_blueprint",
    "parse_blueprint",
    "save_blueprint",
    "serialize_blueprint",
]
