"""
blueprint-compliance — validator set

File: src/blueprint_compliance/validators/__init__.py

Purpose
- Built-in validators and the registry used to assemble them.

Functional requirements
- ``default_validators`` builds fresh instances on every call; platform
  validators decide for themselves whether a project needs them.
"""

from blueprint_compliance.validators.base import (
    ReportFragment,
    SyncValidator,
    ValidationContext,
    Validator,
    ValidatorFactory,
    ValidatorRegistration,
    ValidatorRegistry,
)
from blueprint_compliance.validators.code import CodeHeuristicsValidator
from blueprint_compliance.validators.dependency import DependencyValidator
from blueprint_compliance.validators.naming import NamingValidator, matches_naming_convention
from blueprint_compliance.validators.roblox_structure import RobloxStructureValidator
from blueprint_compliance.validators.rojo_project import RojoProjectValidator
from blueprint_compliance.validators.structure import StructureValidator


def default_registry() -> ValidatorRegistry:
    registry = ValidatorRegistry()
    registry.register_all(
        {
            StructureValidator.name: StructureValidator,
            NamingValidator.name: NamingValidator,
            DependencyValidator.name: DependencyValidator,
            CodeHeuristicsValidator.name: CodeHeuristicsValidator,
            RobloxStructureValidator.name: RobloxStructureValidator,
            RojoProjectValidator.name: RojoProjectValidator,
        }
    )
    return registry


def default_validators() -> tuple[Validator, ...]:
    return default_registry().create_all()


__all__ = [
    "CodeHeuristicsValidator",
    "DependencyValidator",
    "NamingValidator",
    "ReportFragment",
    "RobloxStructureValidator",
    "RojoProjectValidator",
    "StructureValidator",
    "SyncValidator",
    "ValidationContext",
    "Validator",
    "ValidatorFactory",
    "ValidatorRegistration",
    "ValidatorRegistry",
    "default_registry",
    "default_validators",
    "matches_naming_convention",
]
