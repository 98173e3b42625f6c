"""
blueprint-compliance — unit tests for the dependency validator

File: tests/unit/validators/test_dependency.py

Purpose
- Validate import rules, cross-folder detection, and profile-gated cycle reporting.

What this test file should cover
- Forbidden substrings from both forbidden imports and forbidden dependencies.
- Allowlist, relative-import, and cross-folder findings with fixed warning severity.
- Cycles are reported once, only when the profile enables detection.
"""

from __future__ import annotations

from datetime import UTC, datetime

from blueprint_compliance.blueprint.tree import build_folder_tree
from blueprint_compliance.domain.models import (
    Blueprint,
    DependencyRules,
    ProjectMode,
    Severity,
    ViolationType,
)
from blueprint_compliance.domain.report import ValidationViolation
from blueprint_compliance.scanning.inventory import FileInventory
from blueprint_compliance.validators.base import ValidationContext
from blueprint_compliance.validators.dependency import DependencyValidator, is_module_source

FIXED_NOW = datetime(2026, 4, 1, 9, 0, 0, tzinfo=UTC)

CYCLIC_FILES = {
    "src/a.ts": "import { b } from './b';\nexport const a = () => b;\n",
    "src/b.ts": "import { a } from './a';\nexport const b = () => a;\n",
}


def _run(
    files: dict[str, str],
    *,
    mode: ProjectMode = ProjectMode.MVP,
    rules: DependencyRules | None = None,
) -> list[ValidationViolation]:
    blueprint = Blueprint(
        project_name="demo",
        mode=mode,
        structure=build_folder_tree("demo", ("src",), ()),
        max_lines_per_file=300,
        generated_at=FIXED_NOW,
        dependency_rules=rules or DependencyRules(),
    )
    context = ValidationContext.create(blueprint, FileInventory.from_mapping(files))
    return DependencyValidator().evaluate(context)


def test_cycle_reported_once_in_mvp() -> None:
    findings = _run(CYCLIC_FILES)

    assert len(findings) == 1
    finding = findings[0]
    assert finding.type is ViolationType.CIRCULAR_DEPENDENCY
    assert finding.severity is Severity.ERROR
    assert finding.file == "src/a.ts"
    assert finding.message == "Circular dependency detected: src/a.ts → src/b.ts → src/a.ts"


def test_prototype_skips_cycle_detection() -> None:
    assert _run(CYCLIC_FILES, mode=ProjectMode.PROTOTYPE) == []


def test_forbidden_substrings_include_forbidden_dependencies() -> None:
    files = {
        "src/run.ts": (
            "import helper from 'eval-helpers';\n"
            "const cp = require('child_process');\n"
            "export default helper(cp);\n"
        )
    }
    rules = DependencyRules(forbidden_imports=("eval",), forbidden_dependencies=("child_process",))

    findings = _run(files, rules=rules)

    assert [item.message for item in findings] == [
        "Forbidden import in src/run.ts: eval-helpers",
        "Forbidden import in src/run.ts: child_process",
    ]
    assert {item.severity for item in findings} == {Severity.ERROR}


def test_allowlist_ignores_relative_imports() -> None:
    files = {
        "src/app.ts": "import React from 'react';\nimport _ from 'lodash';\nimport { x } from './x';\n",
        "src/x.ts": "export const x = 1;\n",
    }

    findings = _run(files, rules=DependencyRules(allowed_imports=("react",)))

    assert [item.type for item in findings] == [ViolationType.DISALLOWED_IMPORT]
    assert findings[0].message == "Import not in allowlist: lodash in src/app.ts"
    assert findings[0].severity is Severity.WARNING


def test_relative_imports_forbidden() -> None:
    files = {"src/app.ts": "import { x } from './x';\n", "src/x.ts": "export const x = 1;\n"}

    findings = _run(files, rules=DependencyRules(allow_relative_imports=False))

    assert [item.message for item in findings] == ["Relative import forbidden: ./x in src/app.ts"]
    assert findings[0].type is ViolationType.RELATIVE_IMPORT_FORBIDDEN


def test_cross_folder_imports() -> None:
    files = {
        "src/ui/view.ts": "import { model } from '../core/model';\nimport { style } from './style';\n",
        "src/ui/style.ts": "export const style = {};\n",
        "src/core/model.ts": "export const model = {};\n",
    }

    findings = _run(files, rules=DependencyRules(allow_cross_folder_imports=False))

    assert [item.message for item in findings] == ["Cross-folder import in src/ui/view.ts: ../core/model"]
    assert findings[0].severity is Severity.WARNING


def test_non_module_and_empty_files_are_skipped() -> None:
    validator = DependencyValidator()
    blueprint = Blueprint(
        project_name="demo",
        mode=ProjectMode.MVP,
        structure=build_folder_tree("demo", (), ()),
        max_lines_per_file=300,
        generated_at=FIXED_NOW,
    )
    inventory = FileInventory.from_mapping(
        {"README.md": "import x from 'y'", "src/empty.ts": "", "src/main.tsx": "import a from 'b';"}
    )

    nodes = validator.build_nodes(ValidationContext.create(blueprint, inventory))

    assert [(node.path, node.imports) for node in nodes] == [("src/main.tsx", ("b",))]
    assert is_module_source("index.jsx")
    assert not is_module_source("init.lua")
