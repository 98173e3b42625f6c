"""Derive an ``ArchitectSpec`` from free-form drafting-stage text.

Keyword heuristics only: the first matching mode keyword wins (prototype
keywords take precedence over production ones), and the default mode is mvp.
"""

from __future__ import annotations

import re
from typing import Final

from blueprint_compliance.blueprint.spec import ArchitectSpec
from blueprint_compliance.domain.models import ProjectMode

_PROTOTYPE_KEYWORDS: Final[tuple[str, ...]] = ("prototype", "quick", "rapid")
_PRODUCTION_KEYWORDS: Final[tuple[str, ...]] = ("production", "enterprise")
_ROBLOX_KEYWORDS: Final[tuple[str, ...]] = ("roblox", "rojo", ".lua", "modulescript")

_FOLDER_PATTERNS: Final[tuple[re.Pattern[str], ...]] = (
    re.compile(r"(?:create|make)\s+(?:folder|directory):\s*([^\n]+)", re.IGNORECASE),
    re.compile(r"(?:folder|directory|dir):\s*([^\n]+)", re.IGNORECASE),
    re.compile(r"\b(src/[a-z_-]+)(?=/|\s|$|[,;)])", re.IGNORECASE),
)
_FILE_PATTERNS: Final[tuple[re.Pattern[str], ...]] = (
    re.compile(r"file:\s*(\S+\.[a-z]+)", re.IGNORECASE),
    re.compile(r"create\s+(\S+\.[a-z]+)", re.IGNORECASE),
    re.compile(r"((?:[\w-]+/)*[\w-]+\.(?:tsx|ts|jsx|js|luau|lua))\b", re.IGNORECASE),
)
_DEPENDENCY_PATTERNS: Final[tuple[re.Pattern[str], ...]] = (
    re.compile(r"(?:dependency|dependencies|package):\s*([^\n]+)", re.IGNORECASE),
    re.compile(r"npm install\s+([^\n]+)", re.IGNORECASE),
)
_EDGE_PUNCTUATION: Final[str] = "`'\".,;:()[] "


def detect_mode(text: str) -> ProjectMode:
    lowered = text.lower()
    if any(keyword in lowered for keyword in _PROTOTYPE_KEYWORDS):
        return ProjectMode.PROTOTYPE
    if any(keyword in lowered for keyword in _PRODUCTION_KEYWORDS):
        return ProjectMode.PRODUCTION
    return ProjectMode.MVP


def detect_roblox(text: str) -> bool:
    lowered = text.lower()
    return any(keyword in lowered for keyword in _ROBLOX_KEYWORDS)


def parse_architect_output(
    architect_output: str,
    project_name: str,
    user_prompt: str = "",
) -> ArchitectSpec:
    """Build a structural specification from an architect's prose answer."""

    mode = detect_mode(architect_output)
    if mode is ProjectMode.MVP and "prototype" in user_prompt.lower():
        mode = ProjectMode.PROTOTYPE
    is_roblox = detect_roblox(architect_output)

    folders = _collect(architect_output, _FOLDER_PATTERNS)
    if not folders:
        folders = ["src"]
        if is_roblox:
            folders.extend(("src/client", "src/server", "src/shared"))

    files = _collect(architect_output, _FILE_PATTERNS)
    files = [item for item in files if not any(other.endswith(f"/{item}") for other in files)]

    dependencies: list[str] = []
    for pattern in _DEPENDENCY_PATTERNS:
        for match in pattern.finditer(architect_output):
            for token in re.split(r"[\s,]+", match.group(1)):
                if token and not token.startswith("-") and token not in dependencies:
                    dependencies.append(token)

    prompt_excerpt = user_prompt[:100]
    return ArchitectSpec(
        project_name=project_name,
        project_mode=mode,
        folders=tuple(folders),
        files=tuple(files),
        description=f"Generated from user prompt: {prompt_excerpt}" if prompt_excerpt else None,
        dependencies=tuple(dependencies) or None,
        is_roblox_project=is_roblox,
    )


def _collect(text: str, patterns: tuple[re.Pattern[str], ...]) -> list[str]:
    found: list[str] = []
    for pattern in patterns:
        for match in pattern.finditer(text):
            value = match.group(1).strip(_EDGE_PUNCTUATION).strip("/")
            if value and value not in found:
                found.append(value)
    return found


__all__ = [
    "detect_mode",
    "detect_roblox",
    "parse_architect_output",
]
