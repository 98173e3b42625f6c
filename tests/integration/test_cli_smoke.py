"""
blueprint-compliance — CLI subprocess smoke contracts

File: tests/integration/test_cli_smoke.py

Purpose
- Enforce end-to-end CLI behavior for `python -m blueprint_compliance` generate/validate.
- Verify exit codes, stdout payloads, stderr log routing, and the persisted blueprint file.
"""

from __future__ import annotations

import json
import os
import subprocess
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[2]
SRC_PATH = PROJECT_ROOT / "src"


def _run_cli(cwd: Path, *args: str) -> subprocess.CompletedProcess[str]:
    env = os.environ.copy()
    existing_pythonpath = env.get("PYTHONPATH")
    src_pythonpath = str(SRC_PATH)
    env["PYTHONPATH"] = (
        src_pythonpath if not existing_pythonpath else f"{src_pythonpath}:{existing_pythonpath}"
    )
    env["NO_COLOR"] = "1"
    return subprocess.run(
        [sys.executable, "-m", "blueprint_compliance", *args],
        cwd=cwd,
        text=True,
        capture_output=True,
        check=False,
        env=env,
    )


def _write(path: Path, contents: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(contents, encoding="utf-8")


def test_generate_then_validate_round_trip(tmp_path: Path) -> None:
    _write(
        tmp_path / "spec.yaml",
        "project_name: shop\n"
        "project_mode: production\n"
        "folders: [src, src/services]\n"
        "files: [src/index.ts, src/services/cart.ts]\n",
    )
    project = tmp_path / "shop"
    _write(project / "src" / "index.ts", "import { cart } from './services/cart';\nexport { cart };\n")
    _write(project / "src" / "services" / "cart.ts", "export const cart = [];\n")

    generated = _run_cli(tmp_path, "generate", "spec.yaml", "--project-root", "shop", "--json")
    assert generated.returncode == 0, generated.stderr
    payload = json.loads(generated.stdout)
    assert payload["success"] is True
    assert (project / "blueprints" / "shop.json").is_file()
    assert "blueprint_saved" in generated.stderr

    validated = _run_cli(tmp_path, "validate", "shop", "--project-root", "shop", "--json")
    assert validated.returncode == 0, validated.stdout + validated.stderr
    report = json.loads(validated.stdout)["report"]
    assert report["valid"] is True
    assert report["profile"] == "production"

    _write(project / "src" / "services" / "cart.ts", "export const cart = eval('[]');\n")
    blocked = _run_cli(tmp_path, "validate", "shop", "--project-root", "shop")
    assert blocked.returncode == 1
    assert "Forbidden API usage in src/services/cart.ts: eval()" in blocked.stdout
    assert "write blocked" in blocked.stdout


def test_usage_errors_exit_with_code_two(tmp_path: Path) -> None:
    missing = _run_cli(tmp_path, "validate", "ghost")
    assert missing.returncode == 2
    assert "no usable blueprint" in missing.stderr

    no_command = _run_cli(tmp_path)
    assert no_command.returncode == 2

    bad_config = _run_cli(tmp_path, "config", "--config", "absent.toml")
    assert bad_config.returncode == 2
    assert "config file not found" in bad_config.stderr
