"""
blueprint-compliance — unit tests for the CLI router

File: tests/unit/ui/test_cli.py

Purpose
- Exercise each subcommand in-process through ``run_cli`` and assert on exit codes,
  stdout payloads, and filesystem side effects.

What this test file should cover
- ``generate`` persists ``blueprints/<name>.json`` and reports where.
- ``validate`` exits 0 on a compliant tree, 1 when the gate blocks, 2 without a blueprint.
- ``resolve``/``profiles``/``parse-spec``/``config`` JSON payload shape.
- Invalid arguments map to exit code 2 with an ``error:`` line on stderr.
"""

from __future__ import annotations

import json
from collections.abc import Iterator
from pathlib import Path

import pytest
import structlog

from blueprint_compliance.ui.cli import run_cli

SPEC_YAML = """\
project_name: demo
project_mode: mvp
folders:
  - src
files:
  - src/index.ts
"""


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    monkeypatch.chdir(tmp_path)
    for name in ("BLUEPRINT_ENGINE_MODE", "BLUEPRINT_PATHS_PROJECT_ROOT", "NO_COLOR"):
        monkeypatch.delenv(name, raising=False)
    yield
    structlog.reset_defaults()


def _write(path: Path, contents: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(contents, encoding="utf-8")


def _json_stdout(capsys: pytest.CaptureFixture[str]) -> dict[str, object]:
    out = capsys.readouterr().out
    return json.loads(out.strip().splitlines()[-1])


def _generated_project(tmp_path: Path) -> Path:
    project = tmp_path / "game"
    project.mkdir()
    _write(tmp_path / "spec.yaml", SPEC_YAML)
    assert run_cli(["generate", str(tmp_path / "spec.yaml"), "--project-root", str(project)]) == 0
    _write(project / "src" / "index.ts", "export const answer = 42;\n")
    return project


def test_profiles_json_lists_modes_in_strictness_order(capsys: pytest.CaptureFixture[str]) -> None:
    assert run_cli(["profiles", "--json"]) == 0

    payload = _json_stdout(capsys)
    profiles = payload["profiles"]
    assert isinstance(profiles, list)
    assert [item["mode"] for item in profiles] == ["prototype", "mvp", "production"]
    assert [item["max_lines_per_file"] for item in profiles] == [400, 300, 300]


def test_profiles_table(capsys: pytest.CaptureFixture[str]) -> None:
    assert run_cli(["profiles", "--no-color"]) == 0

    out = capsys.readouterr().out
    assert "Strictness profiles:" in out
    assert "production" in out


def test_resolve_picks_strictest_component(capsys: pytest.CaptureFixture[str]) -> None:
    assert run_cli(["resolve", "ui:prototype", "billing:production:src/billing", "--json"]) == 0

    resolved = _json_stdout(capsys)["resolved"]
    assert isinstance(resolved, dict)
    assert resolved["mode"] == "production"
    assert resolved["strictest_component"] == "billing"
    assert resolved["upgraded_from"] == "prototype"


def test_resolve_preview_reports_upgrade_warnings(capsys: pytest.CaptureFixture[str]) -> None:
    assert run_cli(["resolve", "ui:mvp", "--add", "billing:production", "--json"]) == 0

    payload = _json_stdout(capsys)
    assert payload["upgrade_warnings"] == [
        "Project strictness will be upgraded from mvp to production",
        "Test coverage will be required",
        "Layering rules will be enforced",
    ]
    assert payload["compatibility_issues"] == []


@pytest.mark.parametrize("component", ["ui", "ui:strict", ":mvp"])
def test_resolve_rejects_invalid_components(
    component: str, capsys: pytest.CaptureFixture[str]
) -> None:
    assert run_cli(["resolve", component]) == 2

    assert capsys.readouterr().err.startswith("error: invalid component")


def test_generate_persists_blueprint(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _write(tmp_path / "spec.yaml", SPEC_YAML)

    assert run_cli(["generate", "spec.yaml", "--project-root", str(tmp_path), "--json"]) == 0

    payload = _json_stdout(capsys)
    assert payload["success"] is True
    assert payload["fallback"] is False
    assert str(payload["saved_to"]).endswith("blueprints/demo.json")
    assert (tmp_path / "blueprints" / "demo.json").is_file()
    blueprint = payload["blueprint"]
    assert isinstance(blueprint, dict)
    assert blueprint["mode"] == "mvp"
    assert blueprint["required_files"] == ["src/index.ts"]


def test_generate_dry_run_writes_nothing(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _write(tmp_path / "spec.yaml", SPEC_YAML)

    assert run_cli(["generate", "spec.yaml", "--dry-run", "--json"]) == 0

    assert _json_stdout(capsys)["saved_to"] is None
    assert not (tmp_path / "blueprints").exists()


def test_generate_rejects_malformed_spec(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _write(tmp_path / "spec.yaml", "project_name: demo\n")

    assert run_cli(["generate", "spec.yaml"]) == 2

    assert "project_mode" in capsys.readouterr().err


def test_validate_compliant_project(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    project = _generated_project(tmp_path)
    capsys.readouterr()

    assert run_cli(["validate", "demo", "--project-root", str(project), "--no-color"]) == 0

    out = capsys.readouterr().out
    assert "Blueprint compliance (mvp)" in out
    assert "write allowed" in out


def test_validate_blocks_on_line_limit(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    project = _generated_project(tmp_path)
    _write(project / "src" / "index.ts", "\n".join(["export const x = 1;"] * 305))
    capsys.readouterr()

    assert run_cli(["validate", "demo", "--project-root", str(project), "--json"]) == 1

    payload = _json_stdout(capsys)
    gate = payload["gate"]
    assert isinstance(gate, dict)
    assert gate["blocked"] is True
    assert gate["messages"] == ["File exceeds 300 line limit: src/index.ts (305 lines)"]
    validators = payload["validators"]
    assert isinstance(validators, list)
    assert [item["validator"] for item in validators][:2] == ["structure", "naming"]


def test_validate_mode_override_relaxes_gate(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    project = _generated_project(tmp_path)
    _write(project / "src" / "index.ts", "\n".join(["export const x = 1;"] * 305))
    capsys.readouterr()

    code = run_cli(
        ["validate", "demo", "--project-root", str(project), "--mode", "prototype", "--json"]
    )

    assert code == 0
    report = _json_stdout(capsys)["report"]
    assert isinstance(report, dict)
    assert report["profile"] == "prototype"


def test_validate_without_blueprint(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert run_cli(["validate", "missing", "--project-root", str(tmp_path)]) == 2

    assert "no usable blueprint for project 'missing'" in capsys.readouterr().err


def test_validate_rejects_missing_project_root(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert run_cli(["validate", "demo", "--project-root", str(tmp_path / "nowhere")]) == 2

    assert "project root is not a directory" in capsys.readouterr().err


def test_parse_spec_extracts_structure(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _write(
        tmp_path / "answer.md",
        "Folder: src/services\n"
        "File: src/services/auth.ts\n"
        "This is an enterprise app.\n"
        "dependencies: express, zod\n",
    )

    assert run_cli(["parse-spec", "answer.md", "--project-name", "demo", "--json"]) == 0

    spec = _json_stdout(capsys)["spec"]
    assert spec == {
        "project_name": "demo",
        "project_mode": "production",
        "folders": ["src/services"],
        "files": ["src/services/auth.ts"],
        "is_roblox_project": False,
        "dependencies": ["express", "zod"],
    }


def test_parse_spec_yaml_output_round_trips_into_generate(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    _write(tmp_path / "answer.md", "Build a quick Roblox game with ModuleScripts.\n")

    assert run_cli(["parse-spec", "answer.md", "--project-name", "obby"]) == 0
    _write(tmp_path / "obby.yaml", capsys.readouterr().out)

    assert run_cli(["generate", "obby.yaml", "--dry-run", "--json"]) == 0
    blueprint = _json_stdout(capsys)["blueprint"]
    assert isinstance(blueprint, dict)
    assert blueprint["mode"] == "prototype"
    assert blueprint["is_roblox_project"] is True


def test_parse_spec_requires_readable_input(capsys: pytest.CaptureFixture[str]) -> None:
    assert run_cli(["parse-spec", "absent.md", "--project-name", "demo"]) == 2

    assert capsys.readouterr().err.startswith("error: unable to read")


def test_config_json_reflects_file_and_defaults(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _write(tmp_path / "compliance.toml", "[engine]\nmode = \"production\"\n")

    assert run_cli(["config", "--json"]) == 0

    config = _json_stdout(capsys)["config"]
    assert isinstance(config, dict)
    assert config["engine"]["mode"] == "production"
    assert config["engine"]["max_concurrency"] == 4


def test_missing_explicit_config_is_a_usage_error(capsys: pytest.CaptureFixture[str]) -> None:
    assert run_cli(["config", "--config", "missing.toml"]) == 2

    assert "config file not found" in capsys.readouterr().err
