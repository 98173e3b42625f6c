"""
blueprint-compliance — compliance engine

File: src/blueprint_compliance/orchestration/engine.py

Purpose
- Run every applicable validator against one Blueprint/inventory snapshot,
  merge their fragments into a single report, and decide whether downstream
  file writing may proceed.

Normative behavior
- Validators run concurrently under a bounded worker pool, each with its own
  timeout.
- A validator that times out or raises contributes zero findings; the pass
  itself never aborts because of one validator.
- Identical findings reported by several validators are merged once.
- The gate blocks when any finding's severity blocks under the profile, and
  surfaces the literal violation messages and suggestions.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum
from pathlib import Path
from typing import Any, Final

import structlog

from blueprint_compliance.blueprint.serialization import (
    BlueprintLoadError,
    blueprint_path,
    load_blueprint,
)
from blueprint_compliance.constants import SKIP_DIRECTORIES
from blueprint_compliance.domain.models import Blueprint, ProjectMode
from blueprint_compliance.domain.report import (
    BlueprintValidationReport,
    ValidationViolation,
    create_validation_report,
    normalize_violations,
)
from blueprint_compliance.policy.profiles import StrictnessProfile, profile_for, should_block
from blueprint_compliance.scanning.inventory import FileInventory
from blueprint_compliance.scanning.scanner import DEFAULT_SCAN_CONCURRENCY, FileSystemScanner
from blueprint_compliance.utils.concurrency import WorkerPool, run_with_timeout
from blueprint_compliance.validators import ReportFragment, ValidationContext, Validator, default_validators

DEFAULT_VALIDATOR_TIMEOUT_SECONDS: Final[float] = 30.0
DEFAULT_MAX_CONCURRENCY: Final[int] = 4


class ValidatorStatus(StrEnum):
    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"
    TIMEOUT = "timeout"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class ValidatorOutcome:
    validator: str
    status: ValidatorStatus
    findings: int = 0
    duration_ms: int = 0
    detail: str | None = None


@dataclass(frozen=True, slots=True)
class ComplianceRun:
    report: BlueprintValidationReport
    outcomes: tuple[ValidatorOutcome, ...]


@dataclass(frozen=True, slots=True)
class GateDecision:
    """Outcome of applying ``should_block`` to every finding in a report."""

    blocked: bool
    messages: tuple[str, ...]
    suggestions: tuple[str, ...]
    blocking: tuple[ValidationViolation, ...]

    def to_dict(self) -> dict[str, object]:
        return {
            "blocked": self.blocked,
            "messages": list(self.messages),
            "suggestions": list(self.suggestions),
            "blocking": [item.to_dict() for item in self.blocking],
        }


def merge_fragments(fragments: Iterable[ReportFragment]) -> tuple[ValidationViolation, ...]:
    """Concatenate fragment findings, drop exact duplicates, and order them deterministically."""

    return normalize_violations(
        violation for fragment in fragments for violation in fragment.violations
    )


def evaluate_gate(report: BlueprintValidationReport, profile: StrictnessProfile) -> GateDecision:
    blocking = tuple(item for item in report.all_findings if should_block(item.severity, profile))
    suggestions = tuple(
        dict.fromkeys(item.suggestion for item in blocking if item.suggestion is not None)
    )
    return GateDecision(
        blocked=bool(blocking),
        messages=tuple(item.message for item in blocking),
        suggestions=suggestions,
        blocking=blocking,
    )


class ComplianceEngine:
    """Caller-constructed orchestrator over an explicit validator set."""

    def __init__(
        self,
        validators: Sequence[Validator] | None = None,
        *,
        timeout_seconds: float = DEFAULT_VALIDATOR_TIMEOUT_SECONDS,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
        scanner: FileSystemScanner | None = None,
        clock: Callable[[], datetime] | None = None,
        logger: Any | None = None,
    ) -> None:
        if timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be > 0")
        if max_concurrency <= 0:
            raise ValueError("max_concurrency must be > 0")
        self._validators = tuple(validators) if validators is not None else default_validators()
        names = [validator.name for validator in self._validators]
        if len(set(names)) != len(names):
            raise ValueError(f"validator names must be unique: {names}")
        self._timeout_seconds = timeout_seconds
        self._max_concurrency = max_concurrency
        self._scanner = scanner if scanner is not None else FileSystemScanner()
        self._clock = clock if clock is not None else _utc_now
        self._logger = logger if logger is not None else structlog.get_logger(__name__)

    @classmethod
    def from_config(cls, config: Mapping[str, Any], *, logger: Any | None = None) -> ComplianceEngine:
        """Build an engine from the ``[engine]`` and ``[scanner]`` config sections."""

        engine_cfg = config.get("engine", {})
        scanner_cfg = config.get("scanner", {})
        scanner = FileSystemScanner(
            max_concurrency=int(scanner_cfg.get("max_concurrency", DEFAULT_SCAN_CONCURRENCY)),
            skip_directories=scanner_cfg.get("skip_dirs", SKIP_DIRECTORIES),
            follow_symlinks=bool(scanner_cfg.get("follow_symlinks", False)),
            logger=logger,
        )
        return cls(
            timeout_seconds=float(
                engine_cfg.get("validator_timeout_seconds", DEFAULT_VALIDATOR_TIMEOUT_SECONDS)
            ),
            max_concurrency=int(engine_cfg.get("max_concurrency", DEFAULT_MAX_CONCURRENCY)),
            scanner=scanner,
            logger=logger,
        )

    @property
    def validators(self) -> tuple[Validator, ...]:
        return self._validators

    async def evaluate(
        self,
        blueprint: Blueprint,
        inventory: FileInventory,
        *,
        mode: ProjectMode | None = None,
    ) -> BlueprintValidationReport:
        run = await self.run(blueprint, inventory, mode=mode)
        return run.report

    async def run(
        self,
        blueprint: Blueprint,
        inventory: FileInventory,
        *,
        mode: ProjectMode | None = None,
    ) -> ComplianceRun:
        context = ValidationContext.create(blueprint, inventory, mode=mode)
        pool: WorkerPool[tuple[ReportFragment, ValidatorOutcome]] = WorkerPool(self._max_concurrency)
        results = await pool.gather(self._run_validator(validator, context) for validator in self._validators)

        fragments = [fragment for fragment, _ in results]
        outcomes = tuple(outcome for _, outcome in results)
        report = create_validation_report(
            merge_fragments(fragments),
            context.mode,
            tested_at=self._clock(),
        )
        summary = report.summary
        self._logger.info(
            "compliance_report",
            project=blueprint.project_name,
            mode=context.mode.value,
            valid=report.valid,
            total=summary.total_violations,
            critical=summary.critical,
            errors=summary.errors,
            warnings=summary.warnings,
            info=summary.info,
            peak_concurrency=pool.peak_concurrency,
        )
        return ComplianceRun(report=report, outcomes=outcomes)

    async def validate_project(
        self,
        project_root: str | Path,
        project_name: str,
        *,
        mode: ProjectMode | None = None,
    ) -> BlueprintValidationReport | None:
        """Validate the tree at ``project_root`` against its persisted Blueprint.

        Returns ``None`` when no usable Blueprint exists; validation is then
        disabled for this run instead of failing the caller.
        """

        run = await self.run_project(project_root, project_name, mode=mode)
        return None if run is None else run.report

    async def run_project(
        self,
        project_root: str | Path,
        project_name: str,
        *,
        mode: ProjectMode | None = None,
    ) -> ComplianceRun | None:
        root = Path(project_root)
        try:
            blueprint = await asyncio.to_thread(load_blueprint, blueprint_path(root, project_name))
        except (BlueprintLoadError, ValueError) as exc:
            self._logger.warning(
                "compliance_blueprint_unavailable",
                project=project_name,
                root=str(root),
                error=str(exc),
            )
            return None
        inventory = await self._scanner.inventory(root)
        return await self.run(blueprint, inventory, mode=mode)

    async def validate_candidate(
        self,
        blueprint: Blueprint,
        files: Mapping[str, str],
        *,
        mode: ProjectMode | None = None,
    ) -> BlueprintValidationReport:
        """Validate in-memory content keyed by relative path before it is written."""

        return await self.evaluate(blueprint, FileInventory.from_mapping(files), mode=mode)

    def gate(self, report: BlueprintValidationReport) -> GateDecision:
        return evaluate_gate(report, profile_for(report.profile))

    async def _run_validator(
        self, validator: Validator, context: ValidationContext
    ) -> tuple[ReportFragment, ValidatorOutcome]:
        empty = ReportFragment(validator=validator.name)
        start = time.perf_counter()
        try:
            if not validator.applies(context):
                return empty, ValidatorOutcome(validator.name, ValidatorStatus.SKIPPED)
            fragment = await run_with_timeout(validator.validate(context), self._timeout_seconds)
        except TimeoutError:
            self._logger.warning(
                "compliance_validator_timeout",
                validator=validator.name,
                timeout_seconds=self._timeout_seconds,
            )
            return empty, ValidatorOutcome(
                validator.name,
                ValidatorStatus.TIMEOUT,
                duration_ms=_duration_ms(start),
                detail=f"validator timed out after {self._timeout_seconds:.3f}s",
            )
        except asyncio.CancelledError:
            raise
        except Exception as exc:  # noqa: BLE001
            self._logger.warning(
                "compliance_validator_failed",
                validator=validator.name,
                error=f"{type(exc).__name__}: {exc}",
            )
            return empty, ValidatorOutcome(
                validator.name,
                ValidatorStatus.ERROR,
                duration_ms=_duration_ms(start),
                detail=f"{type(exc).__name__}: {exc}",
            )

        count = len(fragment.violations)
        self._logger.debug("compliance_validator_completed", validator=validator.name, findings=count)
        return fragment, ValidatorOutcome(
            validator.name,
            ValidatorStatus.FAILED if count else ValidatorStatus.PASSED,
            findings=count,
            duration_ms=_duration_ms(start),
        )


def configured_mode(config: Mapping[str, Any]) -> ProjectMode | None:
    """Mode override from ``engine.mode``; ``auto`` defers to the Blueprint."""

    raw = config.get("engine", {}).get("mode", "auto")
    if raw == "auto":
        return None
    return ProjectMode(raw)


def _duration_ms(start: float) -> int:
    return max(0, int((time.perf_counter() - start) * 1000))


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


__all__ = [
    "DEFAULT_MAX_CONCURRENCY",
    "DEFAULT_VALIDATOR_TIMEOUT_SECONDS",
    "ComplianceEngine",
    "ComplianceRun",
    "GateDecision",
    "ValidatorOutcome",
    "ValidatorStatus",
    "configured_mode",
    "evaluate_gate",
    "merge_fragments",
]
