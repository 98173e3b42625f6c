"""File and folder basename conventions."""

from __future__ import annotations

import re
from typing import Final

from blueprint_compliance.domain.models import EntryKind, NamingConvention, ViolationType
from blueprint_compliance.domain.report import ValidationViolation
from blueprint_compliance.validators.base import SyncValidator, ValidationContext

_EXTENSION: Final = re.compile(r"\.[^.]+$")

NAMING_PATTERNS: Final[dict[NamingConvention, re.Pattern[str]]] = {
    NamingConvention.CAMEL_CASE: re.compile(r"^[a-z][a-zA-Z0-9]*$"),
    NamingConvention.PASCAL_CASE: re.compile(r"^[A-Z][a-zA-Z0-9]*$"),
    NamingConvention.KEBAB_CASE: re.compile(r"^[a-z][a-z0-9-]*$"),
    NamingConvention.SNAKE_CASE: re.compile(r"^[a-z][a-z0-9_]*$"),
    NamingConvention.SCREAMING_SNAKE_CASE: re.compile(r"^[A-Z][A-Z0-9_]*$"),
}


def matches_naming_convention(name: str, convention: NamingConvention) -> bool:
    """Match ``name`` with its last extension stripped; ``any`` always matches."""

    pattern = NAMING_PATTERNS.get(convention)
    if pattern is None:
        return True
    return pattern.match(_EXTENSION.sub("", name)) is not None


class NamingValidator(SyncValidator):
    name = "naming"

    def applies(self, context: ValidationContext) -> bool:
        rules = context.blueprint.naming_rules
        return not (rules.files is NamingConvention.ANY and rules.folders is NamingConvention.ANY)

    def evaluate(self, context: ValidationContext) -> list[ValidationViolation]:
        rules = context.blueprint.naming_rules
        found: list[ValidationViolation] = []
        for entry in context.inventory.entries:
            convention = rules.files if entry.kind is EntryKind.FILE else rules.folders
            if matches_naming_convention(entry.name, convention):
                continue
            found.append(
                context.finding(
                    ViolationType.NAMING_VIOLATION,
                    f"{entry.kind.value} name doesn't match {convention.value}: {entry.name}",
                    file=entry.path,
                    suggestion=f"Rename to follow {convention.value} convention",
                )
            )
        return found


__all__ = ["NAMING_PATTERNS", "NamingValidator", "matches_naming_convention"]
