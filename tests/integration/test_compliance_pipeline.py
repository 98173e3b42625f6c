"""
blueprint-compliance — integration tests for the generate → scan → validate → gate pipeline

File: tests/integration/test_compliance_pipeline.py

Purpose
- Drive the library API end to end against a real Roblox project tree on disk.

What this test file should cover
- A generated Blueprint round-trips through disk and drives every Roblox validator.
- Non-blocking warnings leave the gate open; a server script under the client
  folder closes it.
- A Blueprint written by hand with a foreign mode still loads and validates.
"""

from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path

from blueprint_compliance.blueprint.generator import BlueprintGenerator
from blueprint_compliance.blueprint.serialization import load_blueprint
from blueprint_compliance.blueprint.spec import ArchitectSpec
from blueprint_compliance.blueprint.spec_parser import parse_architect_output
from blueprint_compliance.domain.models import ProjectMode, Severity, ViolationType
from blueprint_compliance.orchestration import ComplianceEngine, ValidatorStatus

FIXED_NOW = datetime(2026, 5, 2, 12, 0, 0, tzinfo=UTC)

ROJO_PROJECT = {
    "name": "obby",
    "tree": {
        "ReplicatedStorage": {
            "$className": "ReplicatedStorage",
            "Shared": {"$path": "src/shared"},
        },
        "ServerScriptService": {
            "$className": "ServerScriptService",
            "Server": {"$path": "./src/server"},
        },
    },
}


def _write(path: Path, contents: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(contents, encoding="utf-8")


def _seed_roblox_tree(root: Path) -> None:
    _write(root / "default.project.json", json.dumps(ROJO_PROJECT, indent=2))
    _write(root / "src" / "shared" / "Inventory.lua", "local Inventory = {}\nreturn Inventory\n")
    _write(root / "src" / "server" / "Spawner.lua", "local Spawner = {}\nreturn Spawner\n")
    _write(root / "src" / "client" / "Hud.lua", "local Hud = {}\nreturn Hud\n")


def _roblox_spec() -> ArchitectSpec:
    return ArchitectSpec(
        project_name="obby",
        project_mode=ProjectMode.MVP,
        folders=("src", "src/client", "src/server", "src/shared"),
        files=("default.project.json", "src/shared/Inventory.lua"),
        is_roblox_project=True,
    )


async def test_roblox_pipeline_gates_on_server_code_in_client(tmp_path: Path) -> None:
    _seed_roblox_tree(tmp_path)
    generator = BlueprintGenerator(tmp_path, clock=lambda: FIXED_NOW)

    generated = generator.generate_and_save(_roblox_spec())

    assert generated.success
    assert generated.saved_to == tmp_path / "blueprints" / "obby.json"
    assert load_blueprint(generated.saved_to) == generated.blueprint

    engine = ComplianceEngine(clock=lambda: FIXED_NOW)
    run = await engine.run_project(tmp_path, "obby")

    assert run is not None
    assert run.report.profile is ProjectMode.MVP
    assert run.report.summary.errors == 0
    assert run.report.summary.critical == 0
    assert engine.gate(run.report).blocked is False
    statuses = {item.validator: item.status for item in run.outcomes}
    assert statuses["roblox_structure"] is ValidatorStatus.PASSED
    assert statuses["rojo_project"] is ValidatorStatus.PASSED

    _write(tmp_path / "src" / "client" / "ServerBridge.lua", "return {}\n")
    blocked = await engine.run_project(tmp_path, "obby")

    assert blocked is not None
    decision = engine.gate(blocked.report)
    assert decision.blocked is True
    assert decision.messages == (
        "Server-side code detected in client folder: src/client/ServerBridge.lua",
    )
    assert {item.type for item in blocked.report.warnings} >= {
        ViolationType.EXTRA_FILE,
        ViolationType.NAMING_VIOLATION,
    }


async def test_prototype_override_relaxes_roblox_checks(tmp_path: Path) -> None:
    _seed_roblox_tree(tmp_path)
    (tmp_path / "default.project.json").unlink()
    _write(tmp_path / "src" / "client" / "ServerBridge.lua", "return {}\n")
    BlueprintGenerator(tmp_path, clock=lambda: FIXED_NOW).generate_and_save(_roblox_spec())

    engine = ComplianceEngine(clock=lambda: FIXED_NOW)
    run = await engine.run_project(tmp_path, "obby", mode=ProjectMode.PROTOTYPE)

    assert run is not None
    statuses = {item.validator: item.status for item in run.outcomes}
    assert statuses["roblox_structure"] is ValidatorStatus.SKIPPED
    assert all(item.severity is not Severity.ERROR for item in run.report.all_findings)
    assert engine.gate(run.report).blocked is False


async def test_parsed_architect_output_drives_validation(tmp_path: Path) -> None:
    answer = (
        "Folder: src/api\n"
        "File: src/api/server.ts\n"
        "dependencies: express\n"
    )
    spec = parse_architect_output(answer, "service", "build an API")
    generated = BlueprintGenerator(tmp_path, clock=lambda: FIXED_NOW).generate_and_save(spec)
    assert generated.success
    assert generated.blueprint.description == "Generated from user prompt: build an API"

    _write(
        tmp_path / "src" / "api" / "server.ts",
        "import express from 'express';\nimport { readFile } from 'fs';\nexport const app = express();\n",
    )

    report = await ComplianceEngine(clock=lambda: FIXED_NOW).validate_project(tmp_path, "service")

    assert report is not None
    assert report.profile is ProjectMode.MVP
    assert [item.message for item in report.warnings] == [
        "Potentially unused import in src/api/server.ts: readFile",
    ]
    assert report.valid is True
