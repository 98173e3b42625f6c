"""Rojo ``default.project.json`` checks for Roblox projects."""

from __future__ import annotations

import json
import posixpath
from collections.abc import Iterator, Mapping
from typing import Final

from blueprint_compliance.constants import ROJO_PROJECT_FILE
from blueprint_compliance.domain.models import (
    EntryKind,
    PlatformValidation,
    ProjectMode,
    Severity,
    ViolationType,
)
from blueprint_compliance.domain.report import ValidationViolation
from blueprint_compliance.validators.base import SyncValidator, ValidationContext
from blueprint_compliance.validators.roblox_structure import platform_enabled

ROBLOX_CLASS_NAMES: Final[frozenset[str]] = frozenset(
    {
        "Folder",
        "ModuleScript",
        "Script",
        "LocalScript",
        "ServerScriptService",
        "ReplicatedStorage",
        "StarterPlayer",
        "StarterGui",
        "Workspace",
        "Players",
        "Lighting",
        "SoundService",
        "Configuration",
        "IntValue",
        "StringValue",
        "BoolValue",
        "ObjectValue",
        "NumberValue",
        "Model",
        "Part",
        "MeshPart",
        "Tool",
        "ScreenGui",
        "Frame",
        "TextLabel",
        "TextButton",
        "ImageLabel",
        "ScrollingFrame",
    }
)


def iter_tree_nodes(node: Mapping[str, object]) -> Iterator[Mapping[str, object]]:
    """Pre-order walk of a Rojo tree; ``$``-prefixed keys are properties, not children."""

    stack: list[Mapping[str, object]] = [node]
    while stack:
        current = stack.pop()
        yield current
        children = [
            value
            for key, value in current.items()
            if not key.startswith("$") and isinstance(value, Mapping)
        ]
        stack.extend(reversed(children))


def rojo_target(raw: str) -> str:
    """Project-relative form of a ``$path`` value; ``"."`` maps to the root (``""``)."""

    normalized = posixpath.normpath(raw.replace("\\", "/"))
    return "" if normalized == "." else normalized


class RojoProjectValidator(SyncValidator):
    name = "rojo_project"

    def applies(self, context: ValidationContext) -> bool:
        rules = context.blueprint.roblox_rules
        if rules is not None and rules.rojo_mapping_validation is PlatformValidation.OFF:
            return False
        return platform_enabled(context)

    def evaluate(self, context: ValidationContext) -> list[ValidationViolation]:
        mode = context.mode
        if not context.inventory.contains(ROJO_PROJECT_FILE, kind=EntryKind.FILE):
            if mode is ProjectMode.PROTOTYPE:
                return []
            return [
                context.finding(
                    ViolationType.MISSING_ROJO_CONFIG,
                    f"Missing {ROJO_PROJECT_FILE} for Roblox project",
                    suggestion=f"Create a {ROJO_PROJECT_FILE} file in project root",
                    severity=Severity.ERROR if mode is ProjectMode.PRODUCTION else Severity.WARNING,
                )
            ]

        content = context.inventory.read_text(ROJO_PROJECT_FILE)
        if content is None:
            return []
        try:
            config = json.loads(content)
        except json.JSONDecodeError as exc:
            return [self._invalid(context, str(exc))]
        if not isinstance(config, dict):
            return [self._invalid(context, "top-level value must be an object")]

        found = self._required_fields(context, config)
        tree = config.get("tree")
        if isinstance(tree, Mapping):
            found.extend(self._tree_paths(context, tree))
            found.extend(self._class_names(context, tree))
        return found

    def _invalid(self, context: ValidationContext, detail: str) -> ValidationViolation:
        return context.finding(
            ViolationType.INVALID_ROJO_CONFIG,
            f"Failed to parse {ROJO_PROJECT_FILE}: {detail}",
            file=ROJO_PROJECT_FILE,
            suggestion="Fix JSON syntax errors",
            severity=Severity.ERROR,
        )

    def _required_fields(
        self, context: ValidationContext, config: Mapping[str, object]
    ) -> list[ValidationViolation]:
        hints = {"name": "with your project name", "tree": "with your project structure"}
        return [
            context.finding(
                ViolationType.MISSING_ROJO_FIELD,
                f'Missing required "{field}" field in {ROJO_PROJECT_FILE}',
                file=ROJO_PROJECT_FILE,
                suggestion=f'Add a "{field}" field {hint}',
                severity=Severity.ERROR,
            )
            for field, hint in hints.items()
            if not config.get(field)
        ]

    def _tree_paths(
        self, context: ValidationContext, tree: Mapping[str, object]
    ) -> list[ValidationViolation]:
        severity = Severity.WARNING if context.mode is ProjectMode.PROTOTYPE else Severity.ERROR
        found: list[ValidationViolation] = []
        for node in iter_tree_nodes(tree):
            target = node.get("$path")
            if not isinstance(target, str) or not target:
                continue
            if context.inventory.contains(rojo_target(target)):
                continue
            found.append(
                context.finding(
                    ViolationType.MISSING_ROJO_PATH,
                    f"Rojo $path reference not found: {target}",
                    file=ROJO_PROJECT_FILE,
                    suggestion=f"Create the folder/file at {target}",
                    severity=severity,
                )
            )
        return found

    def _class_names(
        self, context: ValidationContext, tree: Mapping[str, object]
    ) -> list[ValidationViolation]:
        severity = Severity.ERROR if context.mode is ProjectMode.PRODUCTION else Severity.WARNING
        found: list[ValidationViolation] = []
        for node in iter_tree_nodes(tree):
            class_name = node.get("$className")
            if not isinstance(class_name, str) or class_name in ROBLOX_CLASS_NAMES:
                continue
            found.append(
                context.finding(
                    ViolationType.INVALID_ROJO_CLASSNAME,
                    f"Unknown Roblox className: {class_name}",
                    file=ROJO_PROJECT_FILE,
                    suggestion=f"Verify {class_name} is a valid Roblox Instance class",
                    severity=severity,
                )
            )
        return found


__all__ = ["ROBLOX_CLASS_NAMES", "RojoProjectValidator", "iter_tree_nodes", "rojo_target"]
