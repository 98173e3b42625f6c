"""
blueprint-compliance — structure validator

File: src/blueprint_compliance/validators/structure.py

Purpose
- Compare the scanned inventory against the Blueprint's declared tree and
  structural limits.

Functional requirements
- Required folders and files must exist (case-insensitive path match).
- Unexpected files and folders are reported only when the profile disallows
  extra files; config files on the allowed-extras list are never reported.
- Forbidden files, misplaced files, line counts, folder depth, and per-folder
  file ceilings are enforced whenever configured.
"""

from __future__ import annotations

from collections import Counter
from pathlib import PurePosixPath

from blueprint_compliance.analysis.dependency_graph import folder_of
from blueprint_compliance.blueprint.tree import extract_files, extract_folders, relative_tree_path
from blueprint_compliance.constants import (
    ALLOWED_EXTRA_FILES,
    PLACEMENT_EXEMPT_FILES,
    SKIP_DIRECTORIES,
)
from blueprint_compliance.domain.models import (
    EntryKind,
    FileEntry,
    FolderNode,
    Severity,
    ViolationType,
)
from blueprint_compliance.domain.report import ValidationViolation
from blueprint_compliance.scanning.inventory import path_key
from blueprint_compliance.validators.base import SyncValidator, ValidationContext


def is_allowed_extra(path: str) -> bool:
    return any(path.endswith(allowed) for allowed in ALLOWED_EXTRA_FILES)


def is_allowed_folder(path: str) -> bool:
    return any(part in SKIP_DIRECTORIES for part in PurePosixPath(path).parts)


def folder_depth(path: str) -> int:
    return len([part for part in path.split("/") if part])


class StructureValidator(SyncValidator):
    name = "structure"

    def evaluate(self, context: ValidationContext) -> list[ValidationViolation]:
        blueprint = context.blueprint
        expected_folders = [node for node in extract_folders(blueprint.structure) if node.path != "/"]
        expected_files = extract_files(blueprint.structure)

        violations: list[ValidationViolation] = []
        violations.extend(self._missing_folders(context, expected_folders))
        violations.extend(self._missing_files(context))
        violations.extend(self._unexpected_entries(context, expected_folders, expected_files))
        violations.extend(self._forbidden_files(context))
        violations.extend(self._misplaced_files(context, expected_files))
        violations.extend(self._line_counts(context, expected_files))
        if blueprint.max_folder_depth is not None:
            violations.extend(self._folder_depth(context, blueprint.max_folder_depth))
        if blueprint.max_files_per_folder is not None:
            violations.extend(self._files_per_folder(context, blueprint.max_files_per_folder))
        return violations

    def _missing_folders(
        self, context: ValidationContext, expected: list[FolderNode]
    ) -> list[ValidationViolation]:
        found: list[ValidationViolation] = []
        for node in expected:
            if not node.required:
                continue
            relative = relative_tree_path(node)
            if context.inventory.contains(relative, kind=EntryKind.FOLDER):
                continue
            found.append(
                context.finding(
                    ViolationType.MISSING_REQUIRED_FOLDER,
                    f"Required folder missing: {node.path}",
                    suggestion=f"Create folder: mkdir -p {relative}",
                )
            )
        return found

    def _missing_files(self, context: ValidationContext) -> list[ValidationViolation]:
        return [
            context.finding(
                ViolationType.MISSING_REQUIRED_FILE,
                f"Required file missing: {required}",
                file=required,
                suggestion="Create this file as specified in the blueprint",
            )
            for required in context.blueprint.required_files
            if not context.inventory.contains(required, kind=EntryKind.FILE)
        ]

    def _unexpected_entries(
        self,
        context: ValidationContext,
        expected_folders: list[FolderNode],
        expected_files: list[FolderNode],
    ) -> list[ValidationViolation]:
        if context.profile.allow_extra_files:
            return []
        blueprint = context.blueprint
        file_keys = _declared_file_keys(context, expected_files)
        folder_keys = {path_key(relative_tree_path(node)) for node in expected_folders}
        for key in file_keys:
            folder_keys.update(parent.as_posix() for parent in PurePosixPath(key).parents)

        found: list[ValidationViolation] = []
        for entry in context.inventory.entries:
            key = path_key(entry.path)
            if entry.kind is EntryKind.FOLDER:
                if key in folder_keys or is_allowed_folder(entry.path):
                    continue
                found.append(
                    context.finding(
                        ViolationType.UNEXPECTED_FOLDER,
                        f"Unexpected folder: {entry.path}",
                        suggestion="Remove folder or add to blueprint",
                    )
                )
            elif not (
                key in file_keys
                or is_allowed_extra(entry.path)
                or any(_matches_forbidden(entry, pattern) for pattern in blueprint.forbidden_files)
            ):
                found.append(
                    context.finding(
                        ViolationType.EXTRA_FILE,
                        f"Unexpected file: {entry.path}",
                        file=entry.path,
                        suggestion="Remove this file or add it to the blueprint",
                    )
                )
        return found

    def _forbidden_files(self, context: ValidationContext) -> list[ValidationViolation]:
        patterns = context.blueprint.forbidden_files
        if not patterns:
            return []
        return [
            context.finding(
                ViolationType.FORBIDDEN_FILE,
                f"Forbidden file exists: {entry.path}",
                file=entry.path,
                suggestion="Remove this file immediately",
                severity=Severity.ERROR,
            )
            for entry in context.inventory.files
            if any(_matches_forbidden(entry, pattern) for pattern in patterns)
        ]

    def _misplaced_files(
        self, context: ValidationContext, expected_files: list[FolderNode]
    ) -> list[ValidationViolation]:
        file_keys = _declared_file_keys(context, expected_files)
        by_name: dict[str, str] = {}
        for node in expected_files:
            by_name.setdefault(node.name, relative_tree_path(node))

        found: list[ValidationViolation] = []
        for entry in context.inventory.files:
            if path_key(entry.path) in file_keys or entry.name in PLACEMENT_EXEMPT_FILES:
                continue
            expected_path = by_name.get(entry.name)
            if expected_path is None:
                continue
            found.append(
                context.finding(
                    ViolationType.WRONG_FOLDER,
                    f"File may be in wrong folder: {entry.path}",
                    file=entry.path,
                    suggestion=f"Consider moving to {expected_path}",
                )
            )
        return found

    def _line_counts(
        self, context: ValidationContext, expected_files: list[FolderNode]
    ) -> list[ValidationViolation]:
        limits = {
            path_key(relative_tree_path(node)): node.max_lines
            for node in expected_files
            if node.max_lines is not None
        }
        default_limit = context.blueprint.max_lines_per_file

        found: list[ValidationViolation] = []
        for entry in context.inventory.files:
            if entry.line_count is None:
                continue
            limit = limits.get(path_key(entry.path), default_limit)
            if entry.line_count <= limit:
                continue
            found.append(
                context.finding(
                    ViolationType.LINE_COUNT_EXCEEDED,
                    f"File exceeds {limit} line limit: {entry.path} ({entry.line_count} lines)",
                    file=entry.path,
                    suggestion="Refactor into helper modules to reduce file size",
                )
            )
        return found

    def _folder_depth(self, context: ValidationContext, max_depth: int) -> list[ValidationViolation]:
        found: list[ValidationViolation] = []
        for entry in context.inventory.folders:
            depth = folder_depth(entry.path)
            if depth <= max_depth:
                continue
            found.append(
                context.finding(
                    ViolationType.FOLDER_DEPTH_EXCEEDED,
                    f"Folder depth exceeds {max_depth}: {entry.path} (depth: {depth})",
                    file=entry.path,
                    suggestion="Flatten folder structure",
                )
            )
        return found

    def _files_per_folder(self, context: ValidationContext, max_files: int) -> list[ValidationViolation]:
        counts = Counter(folder_of(entry.path) for entry in context.inventory.files)
        return [
            context.finding(
                ViolationType.TOO_MANY_FILES,
                f"Folder has too many files: {folder} ({count} files, max: {max_files})",
                suggestion="Split into subfolders or modules",
            )
            for folder, count in sorted(counts.items())
            if count > max_files
        ]


def _declared_file_keys(context: ValidationContext, expected_files: list[FolderNode]) -> set[str]:
    blueprint = context.blueprint
    keys = {path_key(relative_tree_path(node)) for node in expected_files}
    keys.update(path_key(path) for path in blueprint.required_files)
    keys.update(path_key(path) for path in blueprint.optional_files)
    return keys


def _matches_forbidden(entry: FileEntry, pattern: str) -> bool:
    # Bare names match in any folder; paths match exactly.
    if "/" not in pattern.strip("/"):
        return entry.name.lower() == pattern.strip("/").lower()
    return path_key(entry.path) == path_key(pattern)


__all__ = [
    "StructureValidator",
    "folder_depth",
    "is_allowed_extra",
    "is_allowed_folder",
]
