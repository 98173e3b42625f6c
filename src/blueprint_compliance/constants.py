"""Stable constants shared across the compliance engine."""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Final

# Schema versions for persisted contracts.
CONFIG_SCHEMA_VERSION: Final[int] = 1
BLUEPRINT_SCHEMA_VERSION: Final[int] = 1

# Blueprint identity.
BLUEPRINT_VERSION: Final[str] = "1.0.0"
FALLBACK_BLUEPRINT_VERSION: Final[str] = "1.0.0-fallback"
GENERATED_BY: Final[str] = "ArchitectAgent"
FALLBACK_GENERATED_BY: Final[str] = "ArchitectAgent (fallback)"

# Default runtime paths (relative to the project root unless overridden by config).
BLUEPRINTS_DIR: Final[PurePosixPath] = PurePosixPath("blueprints")
DEFAULT_CONFIG_FILENAME: Final[str] = "compliance.toml"

# Directories never descended into by the scanner.
SKIP_DIRECTORIES: Final[tuple[str, ...]] = (
    "node_modules",
    ".git",
    "dist",
    "build",
    ".next",
    "coverage",
    "blueprints",
    "generated",
)

# Project files tolerated even when the blueprint does not declare them.
ALLOWED_EXTRA_FILES: Final[tuple[str, ...]] = (
    ".gitignore",
    ".env",
    ".env.example",
    "package.json",
    "tsconfig.json",
    "README.md",
    ".npmrc",
    "jest.config.js",
)

# Config files that may legitimately share a basename across folders.
PLACEMENT_EXEMPT_FILES: Final[tuple[str, ...]] = (
    "package.json",
    "tsconfig.json",
    ".gitignore",
    ".env",
    "README.md",
    "default.project.json",
)

DEFAULT_FORBIDDEN_IMPORTS: Final[tuple[str, ...]] = ("eval", "Function", "require.cache")

# Source extensions.
MODULE_SOURCE_EXTENSIONS: Final[tuple[str, ...]] = (".ts", ".tsx", ".js", ".jsx")
SCRIPT_SOURCE_EXTENSIONS: Final[tuple[str, ...]] = (".lua", ".luau")
CODE_SOURCE_EXTENSIONS: Final[tuple[str, ...]] = MODULE_SOURCE_EXTENSIONS + SCRIPT_SOURCE_EXTENSIONS
DEFAULT_RESOLVED_EXTENSION: Final[str] = ".ts"

ROJO_PROJECT_FILE: Final[str] = "default.project.json"

__all__ = [
    "ALLOWED_EXTRA_FILES",
    "BLUEPRINTS_DIR",
    "BLUEPRINT_SCHEMA_VERSION",
    "BLUEPRINT_VERSION",
    "CODE_SOURCE_EXTENSIONS",
    "CONFIG_SCHEMA_VERSION",
    "DEFAULT_CONFIG_FILENAME",
    "DEFAULT_FORBIDDEN_IMPORTS",
    "DEFAULT_RESOLVED_EXTENSION",
    "FALLBACK_BLUEPRINT_VERSION",
    "FALLBACK_GENERATED_BY",
    "GENERATED_BY",
    "MODULE_SOURCE_EXTENSIONS",
    "PLACEMENT_EXEMPT_FILES",
    "ROJO_PROJECT_FILE",
    "SCRIPT_SOURCE_EXTENSIONS",
    "SKIP_DIRECTORIES",
]
