"""Output rendering for the blueprint-compliance CLI.

File: src/blueprint_compliance/ui/render.py

Purpose
- Provide a thin rendering layer for CLI output.
- Respect NO_COLOR environment variable and --no-color CLI flag.

What should be included in this file
- CLIRenderer class with methods for common output patterns.
- Report and gate rendering shared by ``validate`` style commands.

Functional requirements
- Plain-text rendering must always work without external dependencies.
- Output ordering follows report ordering; rendering never re-sorts findings.
"""

from __future__ import annotations

import os
import sys
from typing import TYPE_CHECKING, Final

from blueprint_compliance.domain.models import Severity

if TYPE_CHECKING:
    from collections.abc import Sequence

    from blueprint_compliance.domain.report import BlueprintValidationReport, ValidationViolation
    from blueprint_compliance.orchestration.engine import GateDecision, ValidatorOutcome

_SEVERITY_COLORS: Final[dict[Severity, str]] = {
    Severity.CRITICAL: "\033[1;31m",
    Severity.ERROR: "\033[31m",
    Severity.WARNING: "\033[33m",
    Severity.INFO: "\033[36m",
}
_RESET: Final[str] = "\033[0m"


def _color_allowed(no_color_flag: bool) -> bool:
    """Check whether color output should be attempted."""

    if no_color_flag:
        return False
    if os.environ.get("NO_COLOR", ""):
        return False
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


class CLIRenderer:
    """Thin CLI output renderer.

    Produces clean, deterministic plain-text output.
    Respects ``NO_COLOR`` env var and ``--no-color`` flag.
    """

    def __init__(self, *, no_color: bool = False, verbose: bool = False) -> None:
        self.verbose = verbose
        self._color = _color_allowed(no_color)

    @property
    def color(self) -> bool:
        return self._color

    def heading(self, text: str) -> None:
        print(text)

    def kv(self, key: str, value: object) -> None:
        print(f"{key}: {value}")

    def text(self, line: str) -> None:
        print(line)

    def blank(self) -> None:
        print()

    def section(self, title: str) -> None:
        """Print a section header with a preceding blank line."""

        print(f"\n{title}")

    def warning(self, text: str) -> None:
        print(f"  Warning: {text}")

    def items(self, entries: Sequence[str], *, prefix: str = "- ") -> None:
        for entry in entries:
            print(f"  {prefix}{entry}")

    def table(
        self,
        headers: Sequence[str],
        rows: Sequence[Sequence[str]],
        *,
        title: str | None = None,
    ) -> None:
        """Print a formatted ASCII table."""

        if not rows:
            return

        col_count = len(headers)
        widths = [len(h) for h in headers]
        for row in rows:
            for i in range(min(len(row), col_count)):
                widths[i] = max(widths[i], len(str(row[i])))

        def _pad(cells: Sequence[str]) -> str:
            parts: list[str] = []
            for i in range(col_count):
                cell = str(cells[i]) if i < len(cells) else ""
                parts.append(cell.ljust(widths[i]))
            return "  ".join(parts).rstrip()

        if title:
            self.section(title)
        print(f"  {_pad(list(headers))}")
        print(f"  {'  '.join('-' * w for w in widths)}")
        for row in rows:
            print(f"  {_pad(list(row))}")

    def severity_label(self, severity: Severity) -> str:
        label = severity.value.upper()
        if not self._color:
            return label
        return f"{_SEVERITY_COLORS[severity]}{label}{_RESET}"

    def violation(self, item: ValidationViolation) -> None:
        location = item.file or "<project>"
        if item.line is not None:
            location = f"{location}:{item.line}"
        print(f"  [{self.severity_label(item.severity)}] {location}: {item.message}")
        if item.suggestion is not None:
            print(f"      -> {item.suggestion}")

    def ok(self, label: str) -> None:
        print(f"  OK  {label}")

    def fail(self, label: str) -> None:
        print(f"  FAIL  {label}")


def render_report(
    renderer: CLIRenderer,
    report: BlueprintValidationReport,
    *,
    gate: GateDecision | None = None,
    outcomes: Sequence[ValidatorOutcome] = (),
) -> None:
    """Render a validation report in severity order, then the gate verdict."""

    summary = report.summary
    renderer.heading(f"Blueprint compliance ({report.profile.value})")
    renderer.kv("Valid", "yes" if report.valid else "no")
    renderer.kv(
        "Findings",
        f"{summary.total_violations} "
        f"(critical={summary.critical}, errors={summary.errors}, "
        f"warnings={summary.warnings}, info={summary.info})",
    )

    for title, findings in (
        ("Violations:", report.violations),
        ("Warnings:", report.warnings),
        ("Info:", report.info),
    ):
        if not findings:
            continue
        renderer.section(title)
        for item in findings:
            renderer.violation(item)

    if renderer.verbose and outcomes:
        renderer.table(
            ("validator", "status", "findings", "ms"),
            [
                (item.validator, item.status.value, str(item.findings), str(item.duration_ms))
                for item in outcomes
            ],
            title="Validators:",
        )

    if gate is None:
        return
    renderer.blank()
    if gate.blocked:
        renderer.fail(f"write blocked by {len(gate.blocking)} finding(s)")
    else:
        renderer.ok("write allowed")


def create_renderer(*, no_color: bool = False, verbose: bool = False) -> CLIRenderer:
    return CLIRenderer(no_color=no_color, verbose=verbose)


__all__ = ["CLIRenderer", "create_renderer", "render_report"]
