"""Intra-project import graph and cycle detection."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import PurePosixPath

from blueprint_compliance.constants import DEFAULT_RESOLVED_EXTENSION, MODULE_SOURCE_EXTENSIONS
from blueprint_compliance.domain.models import DependencyNode

_KEPT_EXTENSIONS = (".ts", ".js")


def is_relative_import(specifier: str) -> bool:
    return specifier.startswith("./") or specifier.startswith("../")


def resolve_import(importer: str, specifier: str) -> str:
    """Resolve a relative ``specifier`` against the importing file's directory.

    ``..`` pops a segment (never above the root), ``.`` is ignored, and
    ``.ts`` is appended unless the result already ends in ``.ts`` or ``.js``.
    """

    segments = [part for part in importer.split("/")[:-1] if part]
    for part in specifier.split("/"):
        if part == "..":
            if segments:
                segments.pop()
        elif part and part != ".":
            segments.append(part)
    resolved = "/".join(segments)
    if not resolved.endswith(_KEPT_EXTENSIONS):
        resolved += DEFAULT_RESOLVED_EXTENSION
    return resolved


def folder_of(path: str) -> str:
    """Containing folder of ``path``; ``/`` for files at the project root."""

    parent = PurePosixPath(path).parent.as_posix()
    return "/" if parent in {".", ""} else parent


@dataclass(frozen=True, slots=True)
class Cycle:
    """A closed import path in traversal order: ``path[0] == path[-1]``."""

    path: tuple[str, ...]

    @property
    def members(self) -> tuple[str, ...]:
        return self.path[:-1]

    def describe(self) -> str:
        return " → ".join(self.path)


@dataclass(slots=True)
class DependencyGraph:
    nodes: dict[str, DependencyNode] = field(default_factory=dict)
    _edges: dict[str, tuple[str, ...]] = field(default_factory=dict, repr=False)

    @classmethod
    def from_nodes(cls, nodes: Iterable[DependencyNode]) -> DependencyGraph:
        graph = cls()
        for node in nodes:
            graph.nodes[node.path] = node
        for path, node in graph.nodes.items():
            targets: dict[str, None] = {}
            for specifier in node.imports:
                target = graph.resolve_target(path, specifier)
                if target is not None:
                    targets.setdefault(target, None)
            graph._edges[path] = tuple(targets)
        return graph

    def resolve_target(self, importer: str, specifier: str) -> str | None:
        """Graph node a relative import points at, or ``None`` for external imports."""

        if not is_relative_import(specifier):
            return None
        resolved = resolve_import(importer, specifier)
        if resolved in self.nodes:
            return resolved
        # Extensionless imports may target any module source extension.
        if PurePosixPath(specifier).suffix == "":
            stem = resolved[: -len(DEFAULT_RESOLVED_EXTENSION)]
            for extension in MODULE_SOURCE_EXTENSIONS:
                if f"{stem}{extension}" in self.nodes:
                    return f"{stem}{extension}"
        return None

    def edges_from(self, path: str) -> tuple[str, ...]:
        return self._edges.get(path, ())

    def find_cycles(self) -> tuple[Cycle, ...]:
        """Depth-first search with an explicit recursion stack.

        Nodes are marked visited globally, so each node is expanded once and
        the walk is linear in nodes plus edges. Each distinct cycle (up to
        rotation) is reported once, in the order it was traversed.
        """

        visited: set[str] = set()
        on_stack: dict[str, int] = {}
        stack: list[str] = []
        seen: set[tuple[str, ...]] = set()
        cycles: list[Cycle] = []

        for start in sorted(self.nodes):
            if start in visited:
                continue
            visited.add(start)
            on_stack[start] = 0
            stack.append(start)
            frames: list[tuple[str, Iterator[str]]] = [(start, iter(self.edges_from(start)))]

            while frames:
                node, children = frames[-1]
                child = next(children, None)
                if child is None:
                    frames.pop()
                    stack.pop()
                    del on_stack[node]
                    continue

                if child in on_stack:
                    members = tuple(stack[on_stack[child] :])
                    key = _rotation_key(members)
                    if key not in seen:
                        seen.add(key)
                        cycles.append(Cycle(path=(*members, child)))
                    continue

                if child in visited:
                    continue
                visited.add(child)
                on_stack[child] = len(stack)
                stack.append(child)
                frames.append((child, iter(self.edges_from(child))))

        return tuple(cycles)


def _rotation_key(members: tuple[str, ...]) -> tuple[str, ...]:
    pivot = members.index(min(members))
    return members[pivot:] + members[:pivot]


__all__ = [
    "Cycle",
    "DependencyGraph",
    "folder_of",
    "is_relative_import",
    "resolve_import",
]
