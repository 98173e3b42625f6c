"""Shallow lexical checks over code file contents."""

from __future__ import annotations

from blueprint_compliance.analysis.heuristics import (
    BracketBalance,
    DangerousApiScan,
    SecretLiteralScan,
    UnusedImportHeuristic,
)
from blueprint_compliance.constants import CODE_SOURCE_EXTENSIONS
from blueprint_compliance.domain.models import ProjectMode, Severity, ViolationType
from blueprint_compliance.domain.report import ValidationViolation
from blueprint_compliance.validators.base import SyncValidator, ValidationContext


def is_code_file(name: str) -> bool:
    return name.endswith(CODE_SOURCE_EXTENSIONS)


class CodeHeuristicsValidator(SyncValidator):
    """Bracket parity, dangerous APIs, secret literals, and unused imports.

    Severities here are fixed by the check, not by the profile: imbalance is an
    error, dangerous APIs and secrets are critical, unused imports a warning.
    """

    name = "code"

    def __init__(self) -> None:
        self._brackets = BracketBalance()
        self._apis = DangerousApiScan()
        self._secrets = SecretLiteralScan()
        self._unused = UnusedImportHeuristic()

    def evaluate(self, context: ValidationContext) -> list[ValidationViolation]:
        security = context.blueprint.security_rules
        scan_apis = security is None or security.forbid_dangerous_apis
        scan_secrets = security is not None and security.scan_for_secrets
        check_unused = context.mode is not ProjectMode.PROTOTYPE

        found: list[ValidationViolation] = []
        for entry in context.inventory.files:
            if not is_code_file(entry.name):
                continue
            content = context.inventory.read_text(entry.path)
            if content is None:
                continue
            found.extend(self._syntax(context, entry.path, content))
            if scan_apis:
                found.extend(self._dangerous_apis(context, entry.path, content))
            if scan_secrets:
                found.extend(self._secret_literals(context, entry.path, content))
            if check_unused:
                found.extend(self._unused_imports(context, entry.path, content))
        return found

    def _syntax(self, context: ValidationContext, path: str, content: str) -> list[ValidationViolation]:
        return [
            context.finding(
                ViolationType.SYNTAX_ERROR,
                f"Syntax issue in {path}: {match.label}",
                file=path,
                suggestion="Fix syntax errors",
                severity=Severity.ERROR,
            )
            for match in self._brackets.scan(content)
        ]

    def _dangerous_apis(
        self, context: ValidationContext, path: str, content: str
    ) -> list[ValidationViolation]:
        return [
            context.finding(
                ViolationType.SECURITY_ISSUE,
                f"Forbidden API usage in {path}: {match.label}",
                file=path,
                line=match.line,
                suggestion=f"Remove {match.label} usage - security risk",
                severity=Severity.CRITICAL,
            )
            for match in self._apis.scan(content)
        ]

    def _secret_literals(
        self, context: ValidationContext, path: str, content: str
    ) -> list[ValidationViolation]:
        return [
            context.finding(
                ViolationType.SECURITY_ISSUE,
                f"Potential {match.label} hardcoded in {path}",
                file=path,
                line=match.line,
                suggestion="Move secrets to environment variables",
                severity=Severity.CRITICAL,
            )
            for match in self._secrets.scan(content)
        ]

    def _unused_imports(
        self, context: ValidationContext, path: str, content: str
    ) -> list[ValidationViolation]:
        return [
            context.finding(
                ViolationType.UNUSED_IMPORT,
                f"Potentially unused import in {path}: {match.label}",
                file=path,
                line=match.line,
                suggestion=f"Remove unused import: {match.label}",
                severity=Severity.WARNING,
            )
            for match in self._unused.scan(content)
        ]


__all__ = ["CodeHeuristicsValidator", "is_code_file"]
