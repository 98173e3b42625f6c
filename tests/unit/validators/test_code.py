"""
blueprint-compliance — unit tests for code heuristics validation

File: tests/unit/validators/test_code.py

Purpose
- Validate how the lexical heuristics are wired into findings, gating, and fixed severities.
"""

from __future__ import annotations

from datetime import UTC, datetime

from blueprint_compliance.blueprint.tree import build_folder_tree
from blueprint_compliance.domain.models import (
    Blueprint,
    ProjectMode,
    SecurityRules,
    Severity,
    ViolationType,
)
from blueprint_compliance.domain.report import ValidationViolation
from blueprint_compliance.scanning.inventory import FileInventory
from blueprint_compliance.validators.base import ValidationContext
from blueprint_compliance.validators.code import CodeHeuristicsValidator, is_code_file

FIXED_NOW = datetime(2026, 4, 1, 9, 0, 0, tzinfo=UTC)

APP_SOURCE = (
    "import { useState, useEffect } from 'react';\n"
    "const total = eval('1 + 1');\n"
    "export const state = useState(total);\n"
)


def _run(
    files: dict[str, str],
    *,
    mode: ProjectMode = ProjectMode.MVP,
    security: SecurityRules | None = None,
) -> list[ValidationViolation]:
    blueprint = Blueprint(
        project_name="demo",
        mode=mode,
        structure=build_folder_tree("demo", (), ()),
        max_lines_per_file=300,
        generated_at=FIXED_NOW,
        security_rules=security,
    )
    context = ValidationContext.create(blueprint, FileInventory.from_mapping(files))
    return CodeHeuristicsValidator().evaluate(context)


def test_dangerous_api_and_unused_import() -> None:
    findings = _run({"src/app.ts": APP_SOURCE})

    assert [(item.type, item.severity, item.line) for item in findings] == [
        (ViolationType.SECURITY_ISSUE, Severity.CRITICAL, 2),
        (ViolationType.UNUSED_IMPORT, Severity.WARNING, 1),
    ]
    assert findings[0].message == "Forbidden API usage in src/app.ts: eval()"
    assert findings[0].suggestion == "Remove eval() usage - security risk"
    assert findings[1].message == "Potentially unused import in src/app.ts: useEffect"


def test_prototype_skips_unused_imports() -> None:
    findings = _run({"src/app.ts": APP_SOURCE}, mode=ProjectMode.PROTOTYPE)

    assert [item.type for item in findings] == [ViolationType.SECURITY_ISSUE]


def test_dangerous_api_scan_can_be_disabled() -> None:
    findings = _run(
        {"src/app.ts": APP_SOURCE},
        security=SecurityRules(forbid_dangerous_apis=False),
    )

    assert [item.type for item in findings] == [ViolationType.UNUSED_IMPORT]


def test_secret_literals_only_when_enabled() -> None:
    files = {"src/config.ts": 'export const apiKey = "abc123";\n'}

    assert _run(files) == []

    findings = _run(files, security=SecurityRules(scan_for_secrets=True))
    assert len(findings) == 1
    assert findings[0].message == "Potential API key hardcoded in src/config.ts"
    assert findings[0].severity is Severity.CRITICAL
    assert findings[0].suggestion == "Move secrets to environment variables"


def test_bracket_imbalance_is_a_syntax_error() -> None:
    findings = _run({"src/broken.ts": "export function f() {\n  return 1;\n", "src/init.lua": "print((1)\n"})

    assert sorted((item.file, item.message) for item in findings) == [
        ("src/broken.ts", "Syntax issue in src/broken.ts: Mismatched curly braces"),
        ("src/init.lua", "Syntax issue in src/init.lua: Mismatched parentheses"),
    ]
    assert {item.severity for item in findings} == {Severity.ERROR}


def test_non_code_files_are_ignored() -> None:
    assert _run({"README.md": "eval( {", "data.json": '{"token": "x"'}) == []
    assert is_code_file("module.luau")
    assert not is_code_file("style.css")
