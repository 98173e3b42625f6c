"""
blueprint-compliance — dependency validator

File: src/blueprint_compliance/validators/dependency.py

Purpose
- Apply the Blueprint's import rules to every module source file and report
  import cycles between project files.

Functional requirements
- Forbidden substrings anywhere in an import specifier are errors.
- A non-empty allowlist flags non-relative imports that match no allowed prefix.
- Relative and cross-folder imports are flagged only when the rules forbid them.
- Cycle detection runs only when the profile enables it.
"""

from __future__ import annotations

from blueprint_compliance.analysis.dependency_graph import (
    DependencyGraph,
    folder_of,
    is_relative_import,
    resolve_import,
)
from blueprint_compliance.analysis.heuristics import ImportExtractor
from blueprint_compliance.constants import MODULE_SOURCE_EXTENSIONS
from blueprint_compliance.domain.models import DependencyNode, DependencyRules, Severity, ViolationType
from blueprint_compliance.domain.report import ValidationViolation
from blueprint_compliance.validators.base import SyncValidator, ValidationContext


def is_module_source(name: str) -> bool:
    return name.endswith(MODULE_SOURCE_EXTENSIONS)


class DependencyValidator(SyncValidator):
    name = "dependency"

    def __init__(self, extractor: ImportExtractor | None = None) -> None:
        self._extractor = extractor if extractor is not None else ImportExtractor()

    def build_nodes(self, context: ValidationContext) -> list[DependencyNode]:
        """One node per readable module source file; unreadable files are skipped."""

        nodes: list[DependencyNode] = []
        for entry in context.inventory.files:
            if not is_module_source(entry.name):
                continue
            content = context.inventory.read_text(entry.path)
            if not content:
                continue
            nodes.append(DependencyNode(path=entry.path, imports=self._extractor.extract(content)))
        return nodes

    def evaluate(self, context: ValidationContext) -> list[ValidationViolation]:
        nodes = self.build_nodes(context)
        rules = context.blueprint.dependency_rules

        found: list[ValidationViolation] = []
        for node in nodes:
            found.extend(self._import_rules(context, rules, node))
        if not rules.allow_cross_folder_imports:
            for node in nodes:
                found.extend(self._cross_folder(context, node))
        if context.profile.detect_circular_deps:
            found.extend(self._cycles(context, nodes))
        return found

    def _import_rules(
        self,
        context: ValidationContext,
        rules: DependencyRules,
        node: DependencyNode,
    ) -> list[ValidationViolation]:
        forbidden = tuple(dict.fromkeys(rules.forbidden_imports + rules.forbidden_dependencies))
        found: list[ValidationViolation] = []
        for specifier in node.imports:
            relative = is_relative_import(specifier)
            if any(item in specifier for item in forbidden):
                found.append(
                    context.finding(
                        ViolationType.FORBIDDEN_IMPORT,
                        f"Forbidden import in {node.path}: {specifier}",
                        file=node.path,
                        suggestion="Remove forbidden import",
                        severity=Severity.ERROR,
                    )
                )
            if (
                rules.allowed_imports
                and not relative
                and not any(specifier.startswith(allowed) for allowed in rules.allowed_imports)
            ):
                found.append(
                    context.finding(
                        ViolationType.DISALLOWED_IMPORT,
                        f"Import not in allowlist: {specifier} in {node.path}",
                        file=node.path,
                        suggestion="Use only allowed dependencies",
                        severity=Severity.WARNING,
                    )
                )
            if relative and not rules.allow_relative_imports:
                found.append(
                    context.finding(
                        ViolationType.RELATIVE_IMPORT_FORBIDDEN,
                        f"Relative import forbidden: {specifier} in {node.path}",
                        file=node.path,
                        suggestion="Use absolute imports",
                        severity=Severity.WARNING,
                    )
                )
        return found

    def _cross_folder(self, context: ValidationContext, node: DependencyNode) -> list[ValidationViolation]:
        importer_folder = folder_of(node.path)
        return [
            context.finding(
                ViolationType.CROSS_FOLDER_IMPORT,
                f"Cross-folder import in {node.path}: {specifier}",
                file=node.path,
                suggestion="Avoid cross-folder imports",
                severity=Severity.WARNING,
            )
            for specifier in node.imports
            if is_relative_import(specifier)
            and folder_of(resolve_import(node.path, specifier)) != importer_folder
        ]

    def _cycles(self, context: ValidationContext, nodes: list[DependencyNode]) -> list[ValidationViolation]:
        graph = DependencyGraph.from_nodes(nodes)
        return [
            context.finding(
                ViolationType.CIRCULAR_DEPENDENCY,
                f"Circular dependency detected: {cycle.describe()}",
                file=cycle.members[0],
                suggestion="Break circular dependency by refactoring",
            )
            for cycle in graph.find_cycles()
        ]


__all__ = ["DependencyValidator", "is_module_source"]
