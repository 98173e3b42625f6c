"""Command-line interface router for blueprint-compliance."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from blueprint_compliance.blueprint.generator import BlueprintGenerator
from blueprint_compliance.blueprint.spec import (
    SpecLoadError,
    dump_architect_spec,
    load_architect_spec,
)
from blueprint_compliance.blueprint.spec_parser import parse_architect_output
from blueprint_compliance.config import (
    ConfigLoadError,
    ConfigValidationError,
    load_config,
    redact_config,
)
from blueprint_compliance.domain.models import ComponentStrictness, ProjectMode
from blueprint_compliance.observability import configure_logging
from blueprint_compliance.orchestration import ComplianceEngine, configured_mode
from blueprint_compliance.policy import (
    ALL_PROFILES,
    StrictnessResolutionError,
    format_resolved,
    resolve_strictness,
    simulate_resolution,
)
from blueprint_compliance.ui.render import CLIRenderer, create_renderer, render_report

_MODE_CHOICES = tuple(mode.value for mode in ProjectMode)


@dataclass(frozen=True, slots=True)
class CLIError(RuntimeError):
    """Typed CLI failure with an explicit process exit code."""

    message: str
    exit_code: int = 1

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse command router for all supported CLI workflows."""

    parser = argparse.ArgumentParser(
        prog="blueprint-compliance",
        description=(
            "blueprint-compliance — blueprint generation and structural compliance checks.\n\n"
            "Common workflows:\n"
            "  blueprint-compliance generate spec.yaml     Build and persist a blueprint\n"
            "  blueprint-compliance validate my-game       Check a project against its blueprint\n"
            "  blueprint-compliance profiles               Show strictness profiles\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--project-root",
        default=None,
        help="Project root directory (default: paths.project_root from config).",
    )
    common.add_argument(
        "--config",
        dest="config_path",
        default=None,
        help="Path to compliance TOML config (default: ./compliance.toml if present).",
    )
    common.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Emit machine-readable JSON on stdout.",
    )
    common.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        default=False,
        help="Show detailed output.",
    )
    common.add_argument(
        "--no-color",
        action="store_true",
        default=False,
        help="Disable colored output (also respects NO_COLOR env var).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # generate ------------------------------------------------------------
    generate_parser = subparsers.add_parser(
        "generate",
        parents=[common],
        help="Generate a blueprint from a structural specification",
        description=(
            "Build a blueprint from a YAML/JSON structural specification and persist it\n"
            "under <project-root>/blueprints/<project_name>.json.\n\n"
            "Examples:\n"
            "  blueprint-compliance generate spec.yaml\n"
            "  blueprint-compliance generate spec.yaml --dry-run --json\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    generate_parser.add_argument("spec_path", help="Structural specification file (YAML or JSON).")
    generate_parser.add_argument(
        "--dry-run",
        action="store_true",
        default=False,
        help="Generate without writing the blueprint file.",
    )
    generate_parser.set_defaults(handler=_cmd_generate)

    # parse-spec ----------------------------------------------------------
    parse_parser = subparsers.add_parser(
        "parse-spec",
        parents=[common],
        help="Extract a structural specification from architect prose",
        description=(
            "Scan free-form architect output for folders, files, dependencies and mode\n"
            "keywords, and print the resulting structural specification as YAML.\n\n"
            "Examples:\n"
            "  blueprint-compliance parse-spec answer.md --project-name my-game\n"
            "  cat answer.md | blueprint-compliance parse-spec - --project-name my-game\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parse_parser.add_argument("input_path", help="Architect output file, or '-' for stdin.")
    parse_parser.add_argument("--project-name", required=True, help="Project name to assign.")
    parse_parser.add_argument("--prompt", default="", help="Original user prompt text.")
    parse_parser.set_defaults(handler=_cmd_parse_spec)

    # validate ------------------------------------------------------------
    validate_parser = subparsers.add_parser(
        "validate",
        parents=[common],
        help="Validate a project tree against its persisted blueprint",
        description=(
            "Scan the project tree, run every applicable validator, and report findings.\n"
            "Exits 1 when a finding blocks under the active strictness profile.\n\n"
            "Examples:\n"
            "  blueprint-compliance validate my-game\n"
            "  blueprint-compliance validate my-game --mode production --json\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    validate_parser.add_argument("project_name", help="Name of the persisted blueprint.")
    validate_parser.add_argument(
        "--mode",
        choices=_MODE_CHOICES,
        default=None,
        help="Override the blueprint's strictness mode.",
    )
    validate_parser.set_defaults(handler=_cmd_validate)

    # resolve -------------------------------------------------------------
    resolve_parser = subparsers.add_parser(
        "resolve",
        parents=[common],
        help="Resolve project strictness from component modes",
        description=(
            "Combine component strictness declarations into one project mode.\n"
            "Components are given as NAME:MODE[:PATH].\n\n"
            "Examples:\n"
            "  blueprint-compliance resolve ui:prototype api:production\n"
            "  blueprint-compliance resolve ui:mvp --add billing:production:src/billing\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    resolve_parser.add_argument("components", nargs="+", help="Component declarations.")
    resolve_parser.add_argument(
        "--add",
        dest="add_component",
        default=None,
        help="Preview the effect of adding one more component.",
    )
    resolve_parser.set_defaults(handler=_cmd_resolve)

    # profiles ------------------------------------------------------------
    profiles_parser = subparsers.add_parser(
        "profiles",
        parents=[common],
        help="Show the strictness profiles",
    )
    profiles_parser.set_defaults(handler=_cmd_profiles)

    # config --------------------------------------------------------------
    config_parser = subparsers.add_parser(
        "config",
        parents=[common],
        help="Show the effective (redacted) configuration",
    )
    config_parser.set_defaults(handler=_cmd_config)

    return parser


# ---------------------------------------------------------------------------
# Entrypoints
# ---------------------------------------------------------------------------


def run_cli(argv: Sequence[str] | None = None) -> int:
    """Parse argv, route to a command handler, and return process exit code."""

    parser = build_parser()
    namespace = parser.parse_args(list(argv) if argv is not None else None)
    handler = getattr(namespace, "handler", None)
    if not callable(handler):
        parser.print_help(sys.stderr)
        return 2

    try:
        result = handler(namespace)
    except CLIError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return exc.exit_code
    return int(result)


# ---------------------------------------------------------------------------
# Command handlers
# ---------------------------------------------------------------------------


def _cmd_generate(args: argparse.Namespace) -> int:
    config = _load_effective_config(args)
    project_root = _project_root(args, config)
    spec_path = _resolve_input_path(args.spec_path, project_root)

    try:
        spec = load_architect_spec(spec_path)
    except SpecLoadError as exc:
        raise CLIError(str(exc), exit_code=2) from exc

    handle = configure_logging(config.get("observability"))
    try:
        generator = BlueprintGenerator(project_root)
        result = generator.generate(spec) if args.dry_run else generator.generate_and_save(spec)
    finally:
        handle.close()

    payload: dict[str, object] = {
        "command": "generate",
        "success": result.success,
        "fallback": result.is_fallback,
        "errors": list(result.errors),
        "saved_to": None if result.saved_to is None else result.saved_to.as_posix(),
        "blueprint": result.blueprint.to_dict(),
    }
    if args.json:
        _emit_json(payload)
        return 0 if result.success else 1

    renderer = _get_renderer(args)
    blueprint = result.blueprint
    renderer.heading(f"Blueprint: {blueprint.project_name}")
    renderer.kv("Mode", blueprint.mode.value)
    renderer.kv("Version", blueprint.version)
    renderer.kv("Max lines per file", blueprint.max_lines_per_file)
    renderer.kv("Required files", len(blueprint.required_files))
    renderer.kv("Roblox project", "yes" if blueprint.is_roblox_project else "no")
    if result.saved_to is not None:
        renderer.kv("Saved to", result.saved_to.as_posix())
    if result.errors:
        renderer.section("Errors:")
        renderer.items(result.errors)
    return 0 if result.success else 1


def _cmd_parse_spec(args: argparse.Namespace) -> int:
    raw_input = args.input_path
    if raw_input == "-":
        text = sys.stdin.read()
    else:
        source = Path(raw_input).expanduser()
        try:
            text = source.read_text(encoding="utf-8")
        except OSError as exc:
            raise CLIError(f"unable to read {source}: {exc}", exit_code=2) from exc

    project_name = args.project_name.strip()
    if not project_name:
        raise CLIError("invalid project_name: value cannot be empty", exit_code=2)

    spec = parse_architect_output(text, project_name, args.prompt)
    if args.json:
        _emit_json({"command": "parse-spec", "spec": spec.to_dict()})
        return 0
    sys.stdout.write(dump_architect_spec(spec))
    return 0


def _cmd_validate(args: argparse.Namespace) -> int:
    config = _load_effective_config(args)
    project_root = _project_root(args, config)
    mode = ProjectMode(args.mode) if args.mode is not None else configured_mode(config)

    handle = configure_logging(config.get("observability"))
    try:
        engine = ComplianceEngine.from_config(config)
        run = asyncio.run(engine.run_project(project_root, args.project_name, mode=mode))
    finally:
        handle.close()

    if run is None:
        raise CLIError(
            f"no usable blueprint for project {args.project_name!r} under {project_root}",
            exit_code=2,
        )

    decision = engine.gate(run.report)
    if args.json:
        _emit_json(
            {
                "command": "validate",
                "project_name": args.project_name,
                "report": run.report.to_dict(),
                "gate": decision.to_dict(),
                "validators": [
                    {
                        "validator": item.validator,
                        "status": item.status.value,
                        "findings": item.findings,
                        "duration_ms": item.duration_ms,
                        "detail": item.detail,
                    }
                    for item in run.outcomes
                ],
            }
        )
    else:
        render_report(_get_renderer(args), run.report, gate=decision, outcomes=run.outcomes)
    return 1 if decision.blocked else 0


def _cmd_resolve(args: argparse.Namespace) -> int:
    components = [_parse_component(item) for item in args.components]
    try:
        if args.add_component is None:
            resolved = resolve_strictness(components)
            warnings: tuple[str, ...] = ()
            issues: tuple[str, ...] = ()
        else:
            preview = simulate_resolution(components, _parse_component(args.add_component))
            resolved = preview.resolved
            warnings = preview.upgrade_warnings
            issues = preview.compatibility.issues
    except StrictnessResolutionError as exc:
        raise CLIError(str(exc), exit_code=2) from exc

    if args.json:
        _emit_json(
            {
                "command": "resolve",
                "resolved": resolved.to_dict(),
                "upgrade_warnings": list(warnings),
                "compatibility_issues": list(issues),
            }
        )
        return 0

    renderer = _get_renderer(args)
    renderer.text(format_resolved(resolved))
    if warnings:
        renderer.section("Upgrade warnings:")
        renderer.items(warnings)
    if issues:
        renderer.section("Compatibility:")
        renderer.items(issues)
    return 0


def _cmd_profiles(args: argparse.Namespace) -> int:
    if args.json:
        _emit_json(
            {
                "command": "profiles",
                "profiles": [
                    {
                        "mode": profile.mode.value,
                        "description": profile.description,
                        "max_lines_per_file": profile.max_lines_per_file,
                        "structure_required": profile.structure_required,
                        "allow_extra_files": profile.allow_extra_files,
                        "detect_circular_deps": profile.detect_circular_deps,
                        "security_linting": profile.security_linting,
                        "platform_validation": profile.platform_validation.value,
                        "naming": profile.naming.value,
                    }
                    for profile in ALL_PROFILES
                ],
            }
        )
        return 0

    renderer = _get_renderer(args)
    renderer.table(
        ("mode", "max lines", "extra files", "cycles", "security", "platform", "naming"),
        [
            (
                profile.mode.value,
                str(profile.max_lines_per_file),
                "allowed" if profile.allow_extra_files else "reported",
                "on" if profile.detect_circular_deps else "off",
                "on" if profile.security_linting else "off",
                profile.platform_validation.value,
                profile.naming.value,
            )
            for profile in ALL_PROFILES
        ],
        title="Strictness profiles:",
    )
    return 0


def _cmd_config(args: argparse.Namespace) -> int:
    config = _load_effective_config(args)
    redacted = redact_config(config)

    if args.json:
        _emit_json({"command": "config", "config": redacted})
        return 0

    renderer = _get_renderer(args)
    renderer.kv("Config file", args.config_path or "(default)")
    renderer.text(json.dumps(redacted, indent=2, sort_keys=True, ensure_ascii=False))
    return 0


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _emit_json(payload: Mapping[str, object]) -> None:
    """Emit a JSON payload to stdout with deterministic formatting."""

    print(json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False))


def _get_renderer(args: argparse.Namespace) -> CLIRenderer:
    return create_renderer(
        no_color=bool(getattr(args, "no_color", False)),
        verbose=bool(getattr(args, "verbose", False)),
    )


def _load_effective_config(args: argparse.Namespace) -> dict[str, Any]:
    try:
        return load_config(getattr(args, "config_path", None))
    except (ConfigLoadError, ConfigValidationError) as exc:
        raise CLIError(str(exc), exit_code=2) from exc


def _project_root(args: argparse.Namespace, config: Mapping[str, Any]) -> Path:
    raw = getattr(args, "project_root", None) or config["paths"]["project_root"]
    candidate = Path(raw).expanduser().resolve()
    if not candidate.is_dir():
        raise CLIError(f"project root is not a directory: {candidate}", exit_code=2)
    return candidate


def _resolve_input_path(raw: str, project_root: Path) -> Path:
    candidate = Path(raw).expanduser()
    if candidate.is_absolute() or candidate.exists():
        return candidate.resolve()
    return (project_root / candidate).resolve()


def _parse_component(raw: str) -> ComponentStrictness:
    parts = raw.split(":", 2)
    if len(parts) < 2 or not parts[0].strip():
        raise CLIError(f"invalid component {raw!r}: expected NAME:MODE[:PATH]", exit_code=2)
    name = parts[0].strip()
    mode_text = parts[1].strip().lower()
    if mode_text not in _MODE_CHOICES:
        raise CLIError(
            f"invalid component {raw!r}: mode must be one of {', '.join(_MODE_CHOICES)}",
            exit_code=2,
        )
    path = parts[2].strip() if len(parts) == 3 and parts[2].strip() else name
    return ComponentStrictness(component_name=name, component_path=path, mode=ProjectMode(mode_text))


__all__ = [
    "CLIError",
    "build_parser",
    "run_cli",
]
