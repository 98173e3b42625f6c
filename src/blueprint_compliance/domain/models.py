"""
blueprint-compliance — domain models

File: src/blueprint_compliance/domain/models.py

Purpose
- Define the durable structural contract (Blueprint) and the transient values
  exchanged between scanner, validators, and resolver.

What should be included in this file
- Closed vocabularies (modes, severities, violation types, naming conventions).
- Immutable rule sets with named defaults per field.
- Strict ``from_dict`` parsing with field-path error messages.

Functional requirements
- Blueprint JSON must round-trip, including ``generated_at`` at microsecond precision.

Non-functional requirements
- Standard library only; no I/O.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Final, NoReturn, TypeVar

from blueprint_compliance.constants import (
    BLUEPRINT_SCHEMA_VERSION,
    BLUEPRINT_VERSION,
    GENERATED_BY,
)

TEnum = TypeVar("TEnum", bound=StrEnum)

JSONScalar = str | int | float | bool | None
JSONValue = JSONScalar | list["JSONValue"] | dict[str, "JSONValue"]


class ProjectMode(StrEnum):
    """Project strictness mode, ordered prototype < mvp < production."""

    PROTOTYPE = "prototype"
    MVP = "mvp"
    PRODUCTION = "production"


class Severity(StrEnum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ViolationType(StrEnum):
    """Stable type tags that external consumers may switch on."""

    MISSING_REQUIRED_FILE = "missing_required_file"
    MISSING_REQUIRED_FOLDER = "missing_required_folder"
    EXTRA_FILE = "extra_file"
    UNEXPECTED_FOLDER = "unexpected_folder"
    FORBIDDEN_FILE = "forbidden_file"
    WRONG_FOLDER = "wrong_folder"
    NAMING_VIOLATION = "naming_violation"
    LINE_COUNT_EXCEEDED = "line_count_exceeded"
    FOLDER_DEPTH_EXCEEDED = "folder_depth_exceeded"
    TOO_MANY_FILES = "too_many_files"
    CIRCULAR_DEPENDENCY = "circular_dependency"
    FORBIDDEN_IMPORT = "forbidden_import"
    DISALLOWED_IMPORT = "disallowed_import"
    RELATIVE_IMPORT_FORBIDDEN = "relative_import_forbidden"
    CROSS_FOLDER_IMPORT = "cross_folder_import"
    SECURITY_ISSUE = "security_issue"
    SYNTAX_ERROR = "syntax_error"
    UNUSED_IMPORT = "unused_import"
    MISSING_ROBLOX_FOLDER = "missing_roblox_folder"
    ROBLOX_NAMING_VIOLATION = "roblox_naming_violation"
    ROBLOX_SERVER_IN_CLIENT = "roblox_server_in_client"
    ROBLOX_INVALID_EXTENSION = "roblox_invalid_extension"
    MISSING_ROJO_CONFIG = "missing_rojo_config"
    INVALID_ROJO_CONFIG = "invalid_rojo_config"
    MISSING_ROJO_FIELD = "missing_rojo_field"
    MISSING_ROJO_PATH = "missing_rojo_path"
    INVALID_ROJO_CLASSNAME = "invalid_rojo_classname"


class EntryKind(StrEnum):
    FILE = "file"
    FOLDER = "folder"


class NamingConvention(StrEnum):
    CAMEL_CASE = "camelCase"
    PASCAL_CASE = "PascalCase"
    KEBAB_CASE = "kebab-case"
    SNAKE_CASE = "snake_case"
    SCREAMING_SNAKE_CASE = "SCREAMING_SNAKE_CASE"
    ANY = "any"


class NamingTier(StrEnum):
    LOOSE = "loose"
    MODERATE = "moderate"
    STRICT = "strict"


class PlatformValidation(StrEnum):
    OFF = "off"
    WARNINGS = "warnings"
    STRICT = "strict"


class TestLocation(StrEnum):
    __test__ = False

    ALONGSIDE = "alongside"
    SEPARATE = "separate"


_MODE_RANK: Final[dict[ProjectMode, int]] = {
    ProjectMode.PROTOTYPE: 0,
    ProjectMode.MVP: 1,
    ProjectMode.PRODUCTION: 2,
}

_SEVERITY_RANK: Final[dict[Severity, int]] = {
    Severity.INFO: 0,
    Severity.WARNING: 1,
    Severity.ERROR: 2,
    Severity.CRITICAL: 3,
}


def mode_rank(mode: ProjectMode) -> int:
    """Position of ``mode`` in the strictness order (higher is stricter)."""

    return _MODE_RANK[mode]


def severity_rank(severity: Severity) -> int:
    return _SEVERITY_RANK[severity]


@dataclass(frozen=True, slots=True)
class FolderNode:
    """One node of the declared project tree; the root has path ``/``."""

    name: str
    kind: EntryKind
    path: str
    required: bool = True
    children: tuple[FolderNode, ...] = ()
    max_lines: int | None = None
    file_type: str | None = None
    description: str | None = None

    def to_dict(self) -> dict[str, JSONValue]:
        payload: dict[str, JSONValue] = {
            "name": self.name,
            "kind": self.kind.value,
            "path": self.path,
            "required": self.required,
        }
        if self.kind is EntryKind.FOLDER:
            payload["children"] = [child.to_dict() for child in self.children]
        if self.max_lines is not None:
            payload["max_lines"] = self.max_lines
        if self.file_type is not None:
            payload["file_type"] = self.file_type
        if self.description is not None:
            payload["description"] = self.description
        return payload

    @classmethod
    def from_dict(cls, data: Mapping[str, object], path: str = "FolderNode") -> FolderNode:
        parsed = _expect_object(
            data,
            path,
            required={"name", "kind", "path"},
            optional={"required", "children", "max_lines", "file_type", "description"},
        )
        children = tuple(
            cls.from_dict(_as_mapping(item, f"{path}.children[{index}]"), f"{path}.children[{index}]")
            for index, item in enumerate(_as_sequence(parsed.get("children", []), f"{path}.children"))
        )
        return cls(
            name=_as_str(parsed["name"], f"{path}.name"),
            kind=_as_enum(EntryKind, parsed["kind"], f"{path}.kind"),
            path=_as_str(parsed["path"], f"{path}.path"),
            required=_as_bool(parsed.get("required", True), f"{path}.required"),
            children=children,
            max_lines=_as_optional_int(parsed.get("max_lines"), f"{path}.max_lines", minimum=1),
            file_type=_as_optional_str(parsed.get("file_type"), f"{path}.file_type"),
            description=_as_optional_str(parsed.get("description"), f"{path}.description"),
        )


@dataclass(frozen=True, slots=True)
class DependencyRules:
    allowed_imports: tuple[str, ...] = ()
    forbidden_imports: tuple[str, ...] = ()
    allowed_dependencies: tuple[str, ...] = ()
    forbidden_dependencies: tuple[str, ...] = ()
    allow_relative_imports: bool = True
    allow_cross_folder_imports: bool = True

    def to_dict(self) -> dict[str, JSONValue]:
        return {
            "allowed_imports": list(self.allowed_imports),
            "forbidden_imports": list(self.forbidden_imports),
            "allowed_dependencies": list(self.allowed_dependencies),
            "forbidden_dependencies": list(self.forbidden_dependencies),
            "allow_relative_imports": self.allow_relative_imports,
            "allow_cross_folder_imports": self.allow_cross_folder_imports,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> DependencyRules:
        path = "DependencyRules"
        parsed = _expect_object(
            data,
            path,
            required=set(),
            optional={
                "allowed_imports",
                "forbidden_imports",
                "allowed_dependencies",
                "forbidden_dependencies",
                "allow_relative_imports",
                "allow_cross_folder_imports",
            },
        )
        return cls(
            allowed_imports=_as_str_tuple(parsed.get("allowed_imports", ()), f"{path}.allowed_imports"),
            forbidden_imports=_as_str_tuple(
                parsed.get("forbidden_imports", ()), f"{path}.forbidden_imports"
            ),
            allowed_dependencies=_as_str_tuple(
                parsed.get("allowed_dependencies", ()), f"{path}.allowed_dependencies"
            ),
            forbidden_dependencies=_as_str_tuple(
                parsed.get("forbidden_dependencies", ()), f"{path}.forbidden_dependencies"
            ),
            allow_relative_imports=_as_bool(
                parsed.get("allow_relative_imports", True), f"{path}.allow_relative_imports"
            ),
            allow_cross_folder_imports=_as_bool(
                parsed.get("allow_cross_folder_imports", True), f"{path}.allow_cross_folder_imports"
            ),
        )


@dataclass(frozen=True, slots=True)
class NamingRules:
    files: NamingConvention = NamingConvention.ANY
    folders: NamingConvention = NamingConvention.ANY
    variables: NamingConvention = NamingConvention.ANY
    constants: NamingConvention = NamingConvention.ANY
    components: NamingConvention = NamingConvention.ANY

    def to_dict(self) -> dict[str, JSONValue]:
        return {
            "files": self.files.value,
            "folders": self.folders.value,
            "variables": self.variables.value,
            "constants": self.constants.value,
            "components": self.components.value,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> NamingRules:
        keys = ("files", "folders", "variables", "constants", "components")
        parsed = _expect_object(data, "NamingRules", required=set(), optional=set(keys))
        values = {
            key: _as_enum(NamingConvention, parsed.get(key, "any"), f"NamingRules.{key}")
            for key in keys
        }
        return cls(**values)


@dataclass(frozen=True, slots=True)
class RobloxRules:
    require_client_folder: bool = True
    require_server_folder: bool = True
    require_shared_folder: bool = False
    module_suffix: str = ".lua"
    rojo_mapping_validation: PlatformValidation = PlatformValidation.WARNINGS
    forbid_server_in_client: bool = True
    require_module_script: bool = False
    luau_strict_mode: bool = False

    def to_dict(self) -> dict[str, JSONValue]:
        return {
            "require_client_folder": self.require_client_folder,
            "require_server_folder": self.require_server_folder,
            "require_shared_folder": self.require_shared_folder,
            "module_suffix": self.module_suffix,
            "rojo_mapping_validation": self.rojo_mapping_validation.value,
            "forbid_server_in_client": self.forbid_server_in_client,
            "require_module_script": self.require_module_script,
            "luau_strict_mode": self.luau_strict_mode,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> RobloxRules:
        path = "RobloxRules"
        bool_keys = (
            "require_client_folder",
            "require_server_folder",
            "require_shared_folder",
            "forbid_server_in_client",
            "require_module_script",
            "luau_strict_mode",
        )
        parsed = _expect_object(
            data,
            path,
            required=set(),
            optional={*bool_keys, "module_suffix", "rojo_mapping_validation"},
        )
        defaults = cls()
        flags = {
            key: _as_bool(parsed.get(key, getattr(defaults, key)), f"{path}.{key}")
            for key in bool_keys
        }
        return cls(
            module_suffix=_as_str(parsed.get("module_suffix", ".lua"), f"{path}.module_suffix"),
            rojo_mapping_validation=_as_enum(
                PlatformValidation,
                parsed.get("rojo_mapping_validation", defaults.rojo_mapping_validation.value),
                f"{path}.rojo_mapping_validation",
            ),
            **flags,
        )


@dataclass(frozen=True, slots=True)
class TestingRules:
    __test__ = False

    require_tests: bool = False
    min_coverage: int | None = None
    test_file_pattern: str | None = None
    test_location: TestLocation | None = None

    def to_dict(self) -> dict[str, JSONValue]:
        payload: dict[str, JSONValue] = {"require_tests": self.require_tests}
        if self.min_coverage is not None:
            payload["min_coverage"] = self.min_coverage
        if self.test_file_pattern is not None:
            payload["test_file_pattern"] = self.test_file_pattern
        if self.test_location is not None:
            payload["test_location"] = self.test_location.value
        return payload

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> TestingRules:
        path = "TestingRules"
        parsed = _expect_object(
            data,
            path,
            required={"require_tests"},
            optional={"min_coverage", "test_file_pattern", "test_location"},
        )
        location = parsed.get("test_location")
        return cls(
            require_tests=_as_bool(parsed["require_tests"], f"{path}.require_tests"),
            min_coverage=_as_optional_int(parsed.get("min_coverage"), f"{path}.min_coverage", minimum=0),
            test_file_pattern=_as_optional_str(
                parsed.get("test_file_pattern"), f"{path}.test_file_pattern"
            ),
            test_location=(
                None if location is None else _as_enum(TestLocation, location, f"{path}.test_location")
            ),
        )


@dataclass(frozen=True, slots=True)
class SecurityRules:
    forbid_eval: bool = True
    forbid_dangerous_apis: bool = True
    require_input_validation: bool = False
    scan_for_secrets: bool = False

    def to_dict(self) -> dict[str, JSONValue]:
        return {
            "forbid_eval": self.forbid_eval,
            "forbid_dangerous_apis": self.forbid_dangerous_apis,
            "require_input_validation": self.require_input_validation,
            "scan_for_secrets": self.scan_for_secrets,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> SecurityRules:
        keys = ("forbid_eval", "forbid_dangerous_apis", "require_input_validation", "scan_for_secrets")
        parsed = _expect_object(data, "SecurityRules", required=set(), optional=set(keys))
        defaults = cls()
        return cls(
            **{
                key: _as_bool(parsed.get(key, getattr(defaults, key)), f"SecurityRules.{key}")
                for key in keys
            }
        )


@dataclass(frozen=True, slots=True)
class LayeringRules:
    layers: tuple[str, ...] = ()
    allowed_dependencies: tuple[tuple[str, tuple[str, ...]], ...] = ()
    forbid_cyclic_dependencies: bool = True

    def allowed_for(self, layer: str) -> tuple[str, ...]:
        for name, targets in self.allowed_dependencies:
            if name == layer:
                return targets
        return ()

    def to_dict(self) -> dict[str, JSONValue]:
        return {
            "layers": list(self.layers),
            "allowed_dependencies": {
                name: list(targets) for name, targets in self.allowed_dependencies
            },
            "forbid_cyclic_dependencies": self.forbid_cyclic_dependencies,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> LayeringRules:
        path = "LayeringRules"
        parsed = _expect_object(
            data,
            path,
            required={"layers"},
            optional={"allowed_dependencies", "forbid_cyclic_dependencies"},
        )
        raw_allowed = _as_mapping(parsed.get("allowed_dependencies", {}), f"{path}.allowed_dependencies")
        allowed = tuple(
            (name, _as_str_tuple(raw_allowed[name], f"{path}.allowed_dependencies.{name}"))
            for name in sorted(raw_allowed)
        )
        return cls(
            layers=_as_str_tuple(parsed["layers"], f"{path}.layers"),
            allowed_dependencies=allowed,
            forbid_cyclic_dependencies=_as_bool(
                parsed.get("forbid_cyclic_dependencies", True), f"{path}.forbid_cyclic_dependencies"
            ),
        )


@dataclass(frozen=True, slots=True)
class Blueprint:
    """Persisted structural contract for one project; never mutated once built."""

    project_name: str
    mode: ProjectMode
    structure: FolderNode
    max_lines_per_file: int
    generated_at: datetime
    version: str = BLUEPRINT_VERSION
    generated_by: str = GENERATED_BY
    required_files: tuple[str, ...] = ()
    optional_files: tuple[str, ...] = ()
    forbidden_files: tuple[str, ...] = ()
    max_files_per_folder: int | None = None
    max_folder_depth: int | None = None
    dependency_rules: DependencyRules = field(default_factory=DependencyRules)
    naming_rules: NamingRules = field(default_factory=NamingRules)
    roblox_rules: RobloxRules | None = None
    testing_rules: TestingRules | None = None
    security_rules: SecurityRules | None = None
    layering_rules: LayeringRules | None = None
    is_roblox_project: bool = False
    description: str | None = None
    tags: tuple[str, ...] = ()
    author: str | None = None
    schema_version: int = BLUEPRINT_SCHEMA_VERSION

    def __post_init__(self) -> None:
        if not self.project_name.strip():
            _fail("Blueprint.project_name", "must not be empty")
        if self.max_lines_per_file < 1:
            _fail("Blueprint.max_lines_per_file", "must be >= 1")
        if self.generated_at.tzinfo is None or self.generated_at.utcoffset() is None:
            _fail("Blueprint.generated_at", "datetime must be timezone-aware UTC")

    def to_dict(self) -> dict[str, JSONValue]:
        payload: dict[str, JSONValue] = {
            "schema_version": self.schema_version,
            "project_name": self.project_name,
            "mode": self.mode.value,
            "version": self.version,
            "generated_at": datetime_to_iso8601z(self.generated_at),
            "generated_by": self.generated_by,
            "structure": self.structure.to_dict(),
            "required_files": list(self.required_files),
            "optional_files": list(self.optional_files),
            "forbidden_files": list(self.forbidden_files),
            "max_lines_per_file": self.max_lines_per_file,
            "dependency_rules": self.dependency_rules.to_dict(),
            "naming_rules": self.naming_rules.to_dict(),
            "is_roblox_project": self.is_roblox_project,
            "tags": list(self.tags),
        }
        if self.max_files_per_folder is not None:
            payload["max_files_per_folder"] = self.max_files_per_folder
        if self.max_folder_depth is not None:
            payload["max_folder_depth"] = self.max_folder_depth
        if self.roblox_rules is not None:
            payload["roblox_rules"] = self.roblox_rules.to_dict()
        if self.testing_rules is not None:
            payload["testing_rules"] = self.testing_rules.to_dict()
        if self.security_rules is not None:
            payload["security_rules"] = self.security_rules.to_dict()
        if self.layering_rules is not None:
            payload["layering_rules"] = self.layering_rules.to_dict()
        if self.description is not None:
            payload["description"] = self.description
        if self.author is not None:
            payload["author"] = self.author
        return payload

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Blueprint:
        path = "Blueprint"
        parsed = _expect_object(
            data,
            path,
            required={"project_name", "mode", "generated_at", "structure", "max_lines_per_file"},
            optional={
                "schema_version",
                "version",
                "generated_by",
                "required_files",
                "optional_files",
                "forbidden_files",
                "max_files_per_folder",
                "max_folder_depth",
                "dependency_rules",
                "naming_rules",
                "roblox_rules",
                "testing_rules",
                "security_rules",
                "layering_rules",
                "is_roblox_project",
                "description",
                "tags",
                "author",
            },
        )
        schema_version = _as_optional_int(parsed.get("schema_version"), f"{path}.schema_version", minimum=1)
        if schema_version is not None and schema_version > BLUEPRINT_SCHEMA_VERSION:
            _fail(
                f"{path}.schema_version",
                f"schema version {schema_version} is newer than supported {BLUEPRINT_SCHEMA_VERSION}",
            )

        def optional_rules(key: str, parser: type) -> object:
            raw = parsed.get(key)
            if raw is None:
                return None
            return parser.from_dict(_as_mapping(raw, f"{path}.{key}"))

        return cls(
            project_name=_as_str(parsed["project_name"], f"{path}.project_name"),
            mode=_as_enum(ProjectMode, parsed["mode"], f"{path}.mode"),
            structure=FolderNode.from_dict(
                _as_mapping(parsed["structure"], f"{path}.structure"), f"{path}.structure"
            ),
            max_lines_per_file=_as_int(parsed["max_lines_per_file"], f"{path}.max_lines_per_file", minimum=1),
            generated_at=as_datetime(parsed["generated_at"], f"{path}.generated_at"),
            version=_as_str(parsed.get("version", BLUEPRINT_VERSION), f"{path}.version"),
            generated_by=_as_str(parsed.get("generated_by", GENERATED_BY), f"{path}.generated_by"),
            required_files=_as_str_tuple(parsed.get("required_files", ()), f"{path}.required_files"),
            optional_files=_as_str_tuple(parsed.get("optional_files", ()), f"{path}.optional_files"),
            forbidden_files=_as_str_tuple(parsed.get("forbidden_files", ()), f"{path}.forbidden_files"),
            max_files_per_folder=_as_optional_int(
                parsed.get("max_files_per_folder"), f"{path}.max_files_per_folder", minimum=1
            ),
            max_folder_depth=_as_optional_int(
                parsed.get("max_folder_depth"), f"{path}.max_folder_depth", minimum=1
            ),
            dependency_rules=DependencyRules.from_dict(
                _as_mapping(parsed.get("dependency_rules", {}), f"{path}.dependency_rules")
            ),
            naming_rules=NamingRules.from_dict(
                _as_mapping(parsed.get("naming_rules", {}), f"{path}.naming_rules")
            ),
            roblox_rules=optional_rules("roblox_rules", RobloxRules),  # type: ignore[arg-type]
            testing_rules=optional_rules("testing_rules", TestingRules),  # type: ignore[arg-type]
            security_rules=optional_rules("security_rules", SecurityRules),  # type: ignore[arg-type]
            layering_rules=optional_rules("layering_rules", LayeringRules),  # type: ignore[arg-type]
            is_roblox_project=_as_bool(parsed.get("is_roblox_project", False), f"{path}.is_roblox_project"),
            description=_as_optional_str(parsed.get("description"), f"{path}.description"),
            tags=_as_str_tuple(parsed.get("tags", ()), f"{path}.tags"),
            author=_as_optional_str(parsed.get("author"), f"{path}.author"),
            schema_version=schema_version or BLUEPRINT_SCHEMA_VERSION,
        )


@dataclass(frozen=True, slots=True)
class FileEntry:
    """Transient scan result; ``path`` is posix and relative to the scanned root."""

    path: str
    name: str
    kind: EntryKind
    line_count: int | None = None

    @property
    def is_file(self) -> bool:
        return self.kind is EntryKind.FILE

    @property
    def extension(self) -> str:
        dot = self.name.rfind(".")
        return self.name[dot:] if dot > 0 else ""

    def to_dict(self) -> dict[str, JSONValue]:
        payload: dict[str, JSONValue] = {"path": self.path, "name": self.name, "kind": self.kind.value}
        if self.line_count is not None:
            payload["line_count"] = self.line_count
        return payload


@dataclass(frozen=True, slots=True)
class DependencyNode:
    path: str
    imports: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ComponentStrictness:
    """A sub-component's declared mode, consumed only by the strictness resolver."""

    component_name: str
    component_path: str
    mode: ProjectMode
    reason: str | None = None


def as_datetime(value: object, path: str) -> datetime:
    """Parse an aware datetime or ISO-8601 string into a UTC datetime."""

    parsed: datetime
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value[:-1] + "+00:00" if value.endswith("Z") else value
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as exc:
            _fail(path, f"invalid ISO-8601 datetime: {value!r} ({exc})")
    else:
        _fail(path, f"expected datetime or ISO-8601 string, got {type(value).__name__}")

    if parsed.tzinfo is None or parsed.utcoffset() is None:
        _fail(path, "datetime must be timezone-aware UTC")
    return parsed.astimezone(UTC)


def datetime_to_iso8601z(value: datetime) -> str:
    normalized = as_datetime(value, "datetime")
    return normalized.isoformat(timespec="microseconds").replace("+00:00", "Z")


def _fail(path: str, message: str) -> NoReturn:
    raise ValueError(f"{path}: {message}")


def _expect_object(
    value: object,
    path: str,
    *,
    required: set[str],
    optional: set[str] | None = None,
) -> dict[str, object]:
    parsed = _as_mapping(value, path)

    allowed = required | (optional or set())
    unknown = sorted(key for key in parsed if key not in allowed)
    if unknown:
        _fail(path, f"unexpected fields: {unknown}")

    missing = sorted(key for key in required if key not in parsed)
    if missing:
        _fail(path, f"missing required fields: {missing}")

    return parsed


def _as_mapping(value: object, path: str) -> dict[str, object]:
    if not isinstance(value, Mapping):
        _fail(path, f"expected object, got {type(value).__name__}")
    parsed: dict[str, object] = {}
    for key, item in value.items():
        if not isinstance(key, str):
            _fail(path, f"object keys must be strings, got {type(key).__name__}")
        parsed[key] = item
    return parsed


def _as_sequence(value: object, path: str) -> list[object]:
    if isinstance(value, (list, tuple)):
        return list(value)
    _fail(path, f"expected array, got {type(value).__name__}")


def _as_str(value: object, path: str) -> str:
    if not isinstance(value, str):
        _fail(path, f"expected string, got {type(value).__name__}")
    normalized = value.strip()
    if not normalized:
        _fail(path, "must not be empty")
    return normalized


def _as_optional_str(value: object, path: str) -> str | None:
    if value is None:
        return None
    return _as_str(value, path)


def _as_bool(value: object, path: str) -> bool:
    if isinstance(value, bool):
        return value
    _fail(path, f"expected boolean, got {type(value).__name__}")


def _as_int(value: object, path: str, *, minimum: int | None = None) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        _fail(path, f"expected integer, got {type(value).__name__}")
    if minimum is not None and value < minimum:
        _fail(path, f"must be >= {minimum}")
    return value


def _as_optional_int(value: object, path: str, *, minimum: int | None = None) -> int | None:
    if value is None:
        return None
    return _as_int(value, path, minimum=minimum)


def _as_str_tuple(value: object, path: str) -> tuple[str, ...]:
    items = _as_sequence(value, path)
    return tuple(_as_str(item, f"{path}[{index}]") for index, item in enumerate(items))


def _as_enum(enum_type: type[TEnum], value: object, path: str) -> TEnum:
    if isinstance(value, enum_type):
        return value
    if not isinstance(value, str):
        _fail(path, f"expected string enum value, got {type(value).__name__}")
    try:
        return enum_type(value)
    except ValueError:
        allowed = ", ".join(sorted(item.value for item in enum_type))
        _fail(path, f"invalid value {value!r}; expected one of: {allowed}")


__all__ = [
    "Blueprint",
    "ComponentStrictness",
    "DependencyNode",
    "DependencyRules",
    "EntryKind",
    "FileEntry",
    "FolderNode",
    "JSONScalar",
    "JSONValue",
    "LayeringRules",
    "NamingConvention",
    "NamingRules",
    "NamingTier",
    "PlatformValidation",
    "ProjectMode",
    "RobloxRules",
    "SecurityRules",
    "Severity",
    "TestLocation",
    "TestingRules",
    "ViolationType",
    "as_datetime",
    "datetime_to_iso8601z",
    "mode_rank",
    "severity_rank",
]
