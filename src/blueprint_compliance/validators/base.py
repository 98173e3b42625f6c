"""
blueprint-compliance — validator interface and registry

File: src/blueprint_compliance/validators/base.py

Purpose
- Define the immutable ``ValidationContext`` every validator receives and the
  ``Validator`` protocol the orchestrator drives.

Functional requirements
- Validators are caller-constructed values; there are no module-level instances.
- Policy severities always come from ``severity_for`` via the context.

Non-functional requirements
- Validators hold no mutable state between invocations.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import NoReturn, Protocol, runtime_checkable

from blueprint_compliance.domain.models import Blueprint, ProjectMode, Severity, ViolationType
from blueprint_compliance.domain.report import ValidationViolation
from blueprint_compliance.policy.profiles import StrictnessProfile, profile_for, severity_for
from blueprint_compliance.scanning.inventory import FileInventory


@dataclass(frozen=True, slots=True)
class ValidationContext:
    blueprint: Blueprint
    inventory: FileInventory
    profile: StrictnessProfile
    project_root: Path | None = None

    @classmethod
    def create(
        cls,
        blueprint: Blueprint,
        inventory: FileInventory,
        *,
        mode: ProjectMode | None = None,
        project_root: Path | None = None,
    ) -> ValidationContext:
        """Context under ``mode`` when given (e.g. a resolved hybrid mode), else the blueprint's."""

        return cls(
            blueprint=blueprint,
            inventory=inventory,
            profile=profile_for(mode or blueprint.mode),
            project_root=project_root if project_root is not None else inventory.root,
        )

    @property
    def mode(self) -> ProjectMode:
        return self.profile.mode

    def severity(self, violation_type: ViolationType) -> Severity:
        return severity_for(violation_type, self.profile)

    def finding(
        self,
        violation_type: ViolationType,
        message: str,
        *,
        file: str | None = None,
        suggestion: str | None = None,
        line: int | None = None,
        severity: Severity | None = None,
    ) -> ValidationViolation:
        """Build a violation; severity defaults to the profile policy for its type."""

        return ValidationViolation(
            type=violation_type,
            severity=severity if severity is not None else self.severity(violation_type),
            message=message,
            file=file,
            suggestion=suggestion,
            line=line,
        )


@dataclass(frozen=True, slots=True)
class ReportFragment:
    validator: str
    violations: tuple[ValidationViolation, ...] = ()


@runtime_checkable
class Validator(Protocol):
    """Validator protocol implemented by built-ins and external extensions."""

    name: str

    def applies(self, context: ValidationContext) -> bool: ...

    async def validate(self, context: ValidationContext) -> ReportFragment: ...


class SyncValidator:
    """Base for validators whose work is a pure, possibly I/O-reading, function.

    ``evaluate`` runs in a worker thread so disk-backed content reads never
    block the event loop.
    """

    name: str = "validator"

    def applies(self, context: ValidationContext) -> bool:
        return True

    def evaluate(self, context: ValidationContext) -> list[ValidationViolation]:
        raise NotImplementedError

    async def validate(self, context: ValidationContext) -> ReportFragment:
        violations = await asyncio.to_thread(self.evaluate, context)
        return ReportFragment(validator=self.name, violations=tuple(violations))


ValidatorFactory = Callable[[], Validator]


@dataclass(frozen=True, slots=True)
class ValidatorRegistration:
    name: str
    factory: ValidatorFactory = field(compare=False)


class ValidatorRegistry:
    """Deterministic validator factory registry; every ``create`` builds a new value."""

    def __init__(self) -> None:
        self._registrations: dict[str, ValidatorRegistration] = {}

    def register(self, name: str, factory: ValidatorFactory) -> None:
        normalized = name.strip()
        if not normalized:
            _fail("name", "must not be empty")
        if not callable(factory):
            _fail("factory", "must be callable")
        if normalized in self._registrations:
            _fail("name", f"validator {normalized!r} is already registered")
        self._registrations[normalized] = ValidatorRegistration(name=normalized, factory=factory)

    def register_all(self, factories: Mapping[str, ValidatorFactory]) -> None:
        for name in factories:
            self.register(name, factories[name])

    def contains(self, name: str) -> bool:
        return name in self._registrations

    def names(self) -> tuple[str, ...]:
        return tuple(self._registrations)

    def create(self, name: str) -> Validator:
        registration = self._registrations.get(name)
        if registration is None:
            known = ", ".join(self.names())
            _fail("name", f"unknown validator {name!r}; registered: [{known}]")
        validator = registration.factory()
        if not isinstance(validator, Validator):
            _fail("factory", f"{name!r} factory did not return a Validator")
        return validator

    def create_all(self) -> tuple[Validator, ...]:
        return tuple(self.create(name) for name in self.names())


def _fail(path: str, message: str) -> NoReturn:
    raise ValueError(f"{path}: {message}")


__all__ = [
    "ReportFragment",
    "SyncValidator",
    "ValidationContext",
    "Validator",
    "ValidatorFactory",
    "ValidatorRegistration",
    "ValidatorRegistry",
]
