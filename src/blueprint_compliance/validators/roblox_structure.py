"""
blueprint-compliance — Roblox project layout validator

File: src/blueprint_compliance/validators/roblox_structure.py

Purpose
- Check the client/server/shared split, ModuleScript naming, and script
  placement that Roblox projects rely on.

Functional requirements
- Runs only for Roblox projects whose profile enables platform validation,
  and never under prototype.
- Folder requirements and the server-in-client check follow ``RobloxRules``;
  a Roblox Blueprint without rules uses the rule defaults.
"""

from __future__ import annotations

import re
from typing import Final

from blueprint_compliance.constants import SCRIPT_SOURCE_EXTENSIONS
from blueprint_compliance.domain.models import (
    EntryKind,
    PlatformValidation,
    ProjectMode,
    RobloxRules,
    Severity,
    ViolationType,
)
from blueprint_compliance.domain.report import ValidationViolation
from blueprint_compliance.validators.base import SyncValidator, ValidationContext

SERVER_NAME_PATTERNS: Final[tuple[str, ...]] = ("server", "Server", "ServerScript", "ServerStorage")
SPECIAL_SCRIPT_NAMES: Final[frozenset[str]] = frozenset({"init", "server", "client"})
ROBLOX_TOOLING_FILES: Final[frozenset[str]] = frozenset(
    {"default.project.json", "wally.toml", "aftman.toml"}
)

_PASCAL: Final = re.compile(r"^[A-Z][a-zA-Z0-9]*$")
_SEPARATED: Final = re.compile(r"[-_](.)")


def to_pascal_case(name: str) -> str:
    joined = _SEPARATED.sub(lambda match: match.group(1).upper(), name)
    return joined[:1].upper() + joined[1:]


def platform_enabled(context: ValidationContext) -> bool:
    return (
        context.blueprint.is_roblox_project
        and context.profile.platform_validation is not PlatformValidation.OFF
    )


class RobloxStructureValidator(SyncValidator):
    name = "roblox_structure"

    def applies(self, context: ValidationContext) -> bool:
        return platform_enabled(context) and context.mode is not ProjectMode.PROTOTYPE

    def evaluate(self, context: ValidationContext) -> list[ValidationViolation]:
        rules = context.blueprint.roblox_rules or RobloxRules()
        severe = Severity.ERROR if context.mode is ProjectMode.PRODUCTION else Severity.WARNING

        found: list[ValidationViolation] = []
        found.extend(self._folders(context, rules, severe))
        found.extend(self._module_naming(context, rules, severe))
        if rules.forbid_server_in_client:
            found.extend(self._server_in_client(context))
        found.extend(self._extensions(context))
        return found

    def _folders(
        self, context: ValidationContext, rules: RobloxRules, severe: Severity
    ) -> list[ValidationViolation]:
        folder_paths = [entry.path.lower() for entry in context.inventory.folders]

        def present(marker: str) -> bool:
            return any(marker in path for path in folder_paths)

        found: list[ValidationViolation] = []
        for required, marker in (
            (rules.require_client_folder, "client"),
            (rules.require_server_folder, "server"),
        ):
            if required and not present(marker):
                found.append(
                    context.finding(
                        ViolationType.MISSING_ROBLOX_FOLDER,
                        f"Missing required {marker} folder for Roblox project",
                        suggestion=f"Create a {marker}/ or src/{marker}/ folder",
                        severity=severe,
                    )
                )
        if rules.require_shared_folder and not present("shared"):
            found.append(
                context.finding(
                    ViolationType.MISSING_ROBLOX_FOLDER,
                    "Consider adding a shared folder for common modules",
                    suggestion="Create a shared/ or src/shared/ folder",
                    severity=Severity.WARNING,
                )
            )
        return found

    def _module_naming(
        self, context: ValidationContext, rules: RobloxRules, severe: Severity
    ) -> list[ValidationViolation]:
        suffix = rules.module_suffix
        found: list[ValidationViolation] = []
        for entry in context.inventory.files:
            if not entry.name.endswith(suffix):
                continue
            base = entry.name[: -len(suffix)]
            if _PASCAL.match(base) or base.lower() in SPECIAL_SCRIPT_NAMES:
                continue
            found.append(
                context.finding(
                    ViolationType.ROBLOX_NAMING_VIOLATION,
                    f"Roblox ModuleScript should use PascalCase: {entry.name}",
                    file=entry.path,
                    suggestion=f"Rename to {to_pascal_case(base)}{suffix}",
                    severity=severe,
                )
            )
        return found

    def _server_in_client(self, context: ValidationContext) -> list[ValidationViolation]:
        return [
            context.finding(
                ViolationType.ROBLOX_SERVER_IN_CLIENT,
                f"Server-side code detected in client folder: {entry.path}",
                file=entry.path,
                suggestion="Move server logic to server/ folder",
                severity=Severity.ERROR,
            )
            for entry in context.inventory.files
            if entry.name.endswith(SCRIPT_SOURCE_EXTENSIONS)
            and "client" in entry.path.lower()
            and any(pattern in entry.name for pattern in SERVER_NAME_PATTERNS)
        ]

    def _extensions(self, context: ValidationContext) -> list[ValidationViolation]:
        return [
            context.finding(
                ViolationType.ROBLOX_INVALID_EXTENSION,
                f"Non-Luau file in Roblox folder: {entry.path}",
                file=entry.path,
                suggestion="Roblox folders should contain .lua or .luau files",
                severity=Severity.WARNING,
            )
            for entry in context.inventory.entries
            if entry.kind is EntryKind.FILE
            and any(marker in entry.path for marker in ("client", "server", "shared"))
            and not entry.name.endswith(SCRIPT_SOURCE_EXTENSIONS)
            and entry.name not in ROBLOX_TOOLING_FILES
        ]


__all__ = [
    "ROBLOX_TOOLING_FILES",
    "RobloxStructureValidator",
    "SERVER_NAME_PATTERNS",
    "SPECIAL_SCRIPT_NAMES",
    "platform_enabled",
    "to_pascal_case",
]
