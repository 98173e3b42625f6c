"""
blueprint-compliance — lexical heuristics

File: src/blueprint_compliance/analysis/heuristics.py

Purpose
- Isolate every regex/count-based source check behind ``LexicalHeuristic`` so
  a real parser can replace one without touching validator orchestration.

Functional requirements
- Import extraction covers ES module ``import ... from '...'`` and ``require('...')``.
- Bracket parity, dangerous-API, secret-literal, and unused-import checks are
  shallow on purpose and must keep their current matching behavior.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Final, Protocol, runtime_checkable


@dataclass(frozen=True, slots=True)
class LexicalMatch:
    """One heuristic hit; ``label`` is the human-facing name of what matched."""

    label: str
    line: int | None = None


@runtime_checkable
class LexicalHeuristic(Protocol):
    name: str

    def scan(self, content: str) -> tuple[LexicalMatch, ...]: ...


_ES_IMPORT: Final = re.compile(r"""import\s+(?:\{[^}]+\}|\w+|\*\s+as\s+\w+)\s+from\s+['"]([^'"]+)['"]""")
_REQUIRE: Final = re.compile(r"""require\s*\(\s*['"]([^'"]+)['"]\s*\)""")
_NAMED_IMPORT: Final = re.compile(r"""import\s+(?:\{[^}]+\}|\w+)\s+from\s+['"][^'"]+['"]""")
_NAMED_BINDINGS: Final = re.compile(r"import\s+(?:\{([^}]+)\}|(\w+))")
_ALIAS: Final = re.compile(r"\s+as\s+\w+")


def _line_of(content: str, offset: int) -> int:
    return content.count("\n", 0, offset) + 1


class ImportExtractor:
    """Raw import specifiers in source order (module imports, then requires)."""

    name = "imports"

    def scan(self, content: str) -> tuple[LexicalMatch, ...]:
        found = [
            LexicalMatch(match.group(1), _line_of(content, match.start()))
            for match in _ES_IMPORT.finditer(content)
        ]
        found.extend(
            LexicalMatch(match.group(1), _line_of(content, match.start()))
            for match in _REQUIRE.finditer(content)
        )
        return tuple(found)

    def extract(self, content: str) -> tuple[str, ...]:
        return tuple(item.label for item in self.scan(content))


class BracketBalance:
    """Reports each bracket family whose open and close counts differ."""

    name = "bracket_balance"

    _PAIRS: Final[tuple[tuple[str, str, str], ...]] = (
        ("{", "}", "Mismatched curly braces"),
        ("[", "]", "Mismatched square brackets"),
        ("(", ")", "Mismatched parentheses"),
    )

    def scan(self, content: str) -> tuple[LexicalMatch, ...]:
        return tuple(
            LexicalMatch(label)
            for opening, closing, label in self._PAIRS
            if content.count(opening) != content.count(closing)
        )


@dataclass(frozen=True, slots=True)
class _NamedPattern:
    pattern: re.Pattern[str]
    label: str


class _PatternScan:
    patterns: tuple[_NamedPattern, ...] = ()

    def scan(self, content: str) -> tuple[LexicalMatch, ...]:
        found: list[LexicalMatch] = []
        for item in self.patterns:
            match = item.pattern.search(content)
            if match is not None:
                found.append(LexicalMatch(item.label, _line_of(content, match.start())))
        return tuple(found)


class DangerousApiScan(_PatternScan):
    """At most one hit per API per file."""

    name = "dangerous_apis"
    patterns = (
        _NamedPattern(re.compile(r"\beval\s*\("), "eval()"),
        _NamedPattern(re.compile(r"new\s+Function\s*\("), "new Function()"),
        _NamedPattern(re.compile(r"require\.cache"), "require.cache"),
        _NamedPattern(re.compile(r"process\.env\["), "dynamic process.env access"),
        _NamedPattern(re.compile(r"dangerouslySetInnerHTML"), "dangerouslySetInnerHTML"),
    )


class SecretLiteralScan(_PatternScan):
    name = "secret_literals"
    patterns = (
        _NamedPattern(re.compile(r"""api[_-]?key\s*=\s*['"][^'"]+['"]""", re.IGNORECASE), "API key"),
        _NamedPattern(
            re.compile(r"""password\s*=\s*['"][^'"]+['"]""", re.IGNORECASE), "hardcoded password"
        ),
        _NamedPattern(re.compile(r"""secret\s*=\s*['"][^'"]+['"]""", re.IGNORECASE), "hardcoded secret"),
        _NamedPattern(re.compile(r"""token\s*=\s*['"][^'"]+['"]""", re.IGNORECASE), "hardcoded token"),
    )


class UnusedImportHeuristic:
    """Flags brace-imported names whose whole-word occurrence count is exactly one.

    Only ``import { a, b as c } from '...'`` bindings are inspected; default
    imports are never flagged.
    """

    name = "unused_imports"

    def scan(self, content: str) -> tuple[LexicalMatch, ...]:
        found: list[LexicalMatch] = []
        for statement in _NAMED_IMPORT.finditer(content):
            bindings = _NAMED_BINDINGS.match(statement.group(0))
            if bindings is None or not bindings.group(1):
                continue
            for raw_name in bindings.group(1).split(","):
                name = _ALIAS.sub("", raw_name.strip()).strip()
                if not name:
                    continue
                usages = re.findall(rf"\b{re.escape(name)}\b", content)
                if len(usages) == 1:
                    found.append(LexicalMatch(name, _line_of(content, statement.start())))
        return tuple(found)


__all__ = [
    "BracketBalance",
    "DangerousApiScan",
    "ImportExtractor",
    "LexicalHeuristic",
    "LexicalMatch",
    "SecretLiteralScan",
    "UnusedImportHeuristic",
]
