"""Validation findings and the severity-partitioned compliance report."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import UTC, datetime

from blueprint_compliance.domain.models import (
    JSONValue,
    ProjectMode,
    Severity,
    ViolationType,
    _as_enum,
    _as_int,
    _as_mapping,
    _as_optional_int,
    _as_optional_str,
    _as_sequence,
    _as_str,
    _expect_object,
    as_datetime,
    datetime_to_iso8601z,
    severity_rank,
)


@dataclass(frozen=True, slots=True)
class ValidationViolation:
    """A single immutable finding produced by a validator."""

    type: ViolationType
    severity: Severity
    message: str
    file: str | None = None
    suggestion: str | None = None
    line: int | None = None

    def sort_key(self) -> tuple[int, str, str, int, str]:
        return (
            -severity_rank(self.severity),
            self.type.value,
            self.file or "",
            self.line or 0,
            self.message,
        )

    def to_dict(self) -> dict[str, JSONValue]:
        payload: dict[str, JSONValue] = {
            "type": self.type.value,
            "severity": self.severity.value,
            "message": self.message,
        }
        if self.file is not None:
            payload["file"] = self.file
        if self.line is not None:
            payload["line"] = self.line
        if self.suggestion is not None:
            payload["suggestion"] = self.suggestion
        return payload

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> ValidationViolation:
        path = "ValidationViolation"
        parsed = _expect_object(
            data,
            path,
            required={"type", "severity", "message"},
            optional={"file", "line", "suggestion"},
        )
        return cls(
            type=_as_enum(ViolationType, parsed["type"], f"{path}.type"),
            severity=_as_enum(Severity, parsed["severity"], f"{path}.severity"),
            message=_as_str(parsed["message"], f"{path}.message"),
            file=_as_optional_str(parsed.get("file"), f"{path}.file"),
            line=_as_optional_int(parsed.get("line"), f"{path}.line", minimum=1),
            suggestion=_as_optional_str(parsed.get("suggestion"), f"{path}.suggestion"),
        )


@dataclass(frozen=True, slots=True)
class ReportSummary:
    total_violations: int
    critical: int
    errors: int
    warnings: int
    info: int

    @classmethod
    def of(cls, violations: Iterable[ValidationViolation]) -> ReportSummary:
        counts = dict.fromkeys(Severity, 0)
        for violation in violations:
            counts[violation.severity] += 1
        return cls(
            total_violations=sum(counts.values()),
            critical=counts[Severity.CRITICAL],
            errors=counts[Severity.ERROR],
            warnings=counts[Severity.WARNING],
            info=counts[Severity.INFO],
        )

    def to_dict(self) -> dict[str, JSONValue]:
        return {
            "total_violations": self.total_violations,
            "critical": self.critical,
            "errors": self.errors,
            "warnings": self.warnings,
            "info": self.info,
        }


@dataclass(frozen=True, slots=True)
class BlueprintValidationReport:
    """Merged compliance report.

    ``violations`` holds critical and error findings, ``warnings`` and ``info``
    hold the rest. Counts and validity are derived from the findings so they can
    never drift from the partition.
    """

    violations: tuple[ValidationViolation, ...]
    warnings: tuple[ValidationViolation, ...]
    info: tuple[ValidationViolation, ...]
    profile: ProjectMode
    tested_at: datetime

    @property
    def all_findings(self) -> tuple[ValidationViolation, ...]:
        return self.violations + self.warnings + self.info

    @property
    def summary(self) -> ReportSummary:
        return ReportSummary.of(self.all_findings)

    @property
    def valid(self) -> bool:
        summary = self.summary
        return summary.critical == 0 and summary.errors == 0

    def of_type(self, violation_type: ViolationType) -> tuple[ValidationViolation, ...]:
        return tuple(item for item in self.all_findings if item.type is violation_type)

    def to_dict(self) -> dict[str, JSONValue]:
        return {
            "valid": self.valid,
            "profile": self.profile.value,
            "tested_at": datetime_to_iso8601z(self.tested_at),
            "summary": self.summary.to_dict(),
            "violations": [item.to_dict() for item in self.violations],
            "warnings": [item.to_dict() for item in self.warnings],
            "info": [item.to_dict() for item in self.info],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> BlueprintValidationReport:
        path = "BlueprintValidationReport"
        parsed = _expect_object(
            data,
            path,
            required={"profile", "tested_at", "violations", "warnings", "info"},
            optional={"valid", "summary"},
        )
        findings: list[ValidationViolation] = []
        for key in ("violations", "warnings", "info"):
            for item in _as_sequence(parsed[key], f"{path}.{key}"):
                findings.append(ValidationViolation.from_dict(_as_mapping(item, f"{path}.{key}")))
        report = create_validation_report(
            findings,
            _as_enum(ProjectMode, parsed["profile"], f"{path}.profile"),
            tested_at=as_datetime(parsed["tested_at"], f"{path}.tested_at"),
        )
        summary = parsed.get("summary")
        if summary is not None:
            total = _as_mapping(summary, f"{path}.summary").get("total_violations")
            if total is not None and _as_int(total, f"{path}.summary.total_violations") != len(
                findings
            ):
                raise ValueError(f"{path}.summary: counts do not match the violation list")
        return report


def create_validation_report(
    violations: Iterable[ValidationViolation],
    profile: ProjectMode,
    *,
    tested_at: datetime | None = None,
) -> BlueprintValidationReport:
    """Partition ``violations`` by severity, preserving input order within each bucket."""

    buckets: dict[Severity, list[ValidationViolation]] = {severity: [] for severity in Severity}
    for violation in violations:
        buckets[violation.severity].append(violation)
    return BlueprintValidationReport(
        violations=tuple(buckets[Severity.CRITICAL] + buckets[Severity.ERROR]),
        warnings=tuple(buckets[Severity.WARNING]),
        info=tuple(buckets[Severity.INFO]),
        profile=profile,
        tested_at=tested_at or datetime.now(tz=UTC),
    )


def normalize_violations(violations: Iterable[ValidationViolation]) -> tuple[ValidationViolation, ...]:
    """Drop exact duplicates and return findings in deterministic order."""

    unique = dict.fromkeys(violations)
    return tuple(sorted(unique, key=lambda item: item.sort_key()))


__all__ = [
    "BlueprintValidationReport",
    "ReportSummary",
    "ValidationViolation",
    "create_validation_report",
    "normalize_violations",
]
