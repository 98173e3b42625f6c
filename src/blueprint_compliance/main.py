"""Process entrypoint for ``blueprint-compliance`` and ``python -m blueprint_compliance``."""

from __future__ import annotations

import sys
import traceback
from enum import IntEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence


class ExitCode(IntEnum):
    """Process exit codes: pass, gate blocked, bad input, unexpected failure."""

    SUCCESS = 0
    REJECTED = 1
    CONFIG_ERROR = 2
    INTERNAL_ERROR = 4


# Load, parse and validation errors all derive from ValueError.
_INPUT_ERRORS: tuple[type[BaseException], ...] = (
    ValueError,
    FileNotFoundError,
    NotADirectoryError,
    PermissionError,
)


def cli_entrypoint(argv: Sequence[str] | None = None) -> int:
    try:
        from blueprint_compliance.ui.cli import run_cli

        code: object = run_cli(argv)
    except SystemExit as exc:
        code = exc.code
    except Exception as exc:  # noqa: BLE001
        return int(_report_failure(exc))
    return int(_exit_code(code))


def _exit_code(raw: object) -> ExitCode:
    if raw is None:
        return ExitCode.SUCCESS
    if isinstance(raw, int) and raw in {code.value for code in ExitCode}:
        return ExitCode(raw)
    if isinstance(raw, str) and raw.strip():
        sys.stderr.write(raw.strip() + "\n")
    return ExitCode.INTERNAL_ERROR


def _report_failure(exc: Exception) -> ExitCode:
    cause: BaseException | None = exc
    while cause is not None:
        if isinstance(cause, _INPUT_ERRORS):
            sys.stderr.write(f"error: {str(exc).strip() or type(exc).__name__}\n")
            return ExitCode.CONFIG_ERROR
        cause = cause.__cause__
    traceback.print_exception(type(exc), exc, exc.__traceback__, file=sys.stderr)
    return ExitCode.INTERNAL_ERROR


__all__ = ["ExitCode", "cli_entrypoint"]
