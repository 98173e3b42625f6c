"""
blueprint-compliance — domain layer

File: src/blueprint_compliance/domain/__init__.py

Purpose
- Blueprint contract, scan entries, and report values shared by every layer.

Non-functional requirements
- No I/O; standard library only.
"""

from blueprint_compliance.domain.models import (
    Blueprint,
    ComponentStrictness,
    DependencyNode,
    DependencyRules,
    EntryKind,
    FileEntry,
    FolderNode,
    LayeringRules,
    NamingConvention,
    NamingRules,
    NamingTier,
    PlatformValidation,
    ProjectMode,
    RobloxRules,
    SecurityRules,
    Severity,
    TestingRules,
    TestLocation,
    ViolationType,
    mode_rank,
    severity_rank,
)
from blueprint_compliance.domain.report import (
    BlueprintValidationReport,
    ReportSummary,
    ValidationViolation,
    create_validation_report,
    normalize_violations,
)

__all__ = [
    "Blueprint",
    "BlueprintValidationReport",
    "ComponentStrictness",
    "DependencyNode",
    "DependencyRules",
    "EntryKind",
    "FileEntry",
    "FolderNode",
    "LayeringRules",
    "NamingConvention",
    "NamingRules",
    "NamingTier",
    "PlatformValidation",
    "ProjectMode",
    "ReportSummary",
    "RobloxRules",
    "SecurityRules",
    "Severity",
    "TestLocation",
    "TestingRules",
    "ValidationViolation",
    "ViolationType",
    "create_validation_report",
    "mode_rank",
    "normalize_violations",
    "severity_rank",
]
