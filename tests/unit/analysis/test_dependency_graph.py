"""
blueprint-compliance — unit tests for the import graph

File: tests/unit/analysis/test_dependency_graph.py

Purpose
- Validate relative import resolution and cycle detection.

What this test file should cover
- ``resolve_import`` segment handling and default extension.
- A -> B -> C -> A yields exactly one cycle; a DAG yields none.
- Independent cycles are each reported once; external imports are ignored.
"""

from __future__ import annotations

from blueprint_compliance.analysis.dependency_graph import (
    Cycle,
    DependencyGraph,
    folder_of,
    is_relative_import,
    resolve_import,
)
from blueprint_compliance.domain.models import DependencyNode


def _graph(edges: dict[str, tuple[str, ...]]) -> DependencyGraph:
    return DependencyGraph.from_nodes(
        DependencyNode(path=path, imports=imports) for path, imports in edges.items()
    )


def test_resolve_import_handles_dots_and_extensions() -> None:
    assert resolve_import("src/a.ts", "./b") == "src/b.ts"
    assert resolve_import("src/ui/a.ts", "../core/b") == "src/core/b.ts"
    assert resolve_import("src/a.ts", "./util.js") == "src/util.js"
    assert resolve_import("src/a/b.ts", "../../../x") == "x.ts"
    assert resolve_import("a.ts", "./././b.ts") == "b.ts"


def test_relative_import_detection() -> None:
    assert is_relative_import("./a")
    assert is_relative_import("../a")
    assert not is_relative_import("react")
    assert not is_relative_import("/abs/path")


def test_folder_of() -> None:
    assert folder_of("src/ui/button.ts") == "src/ui"
    assert folder_of("index.ts") == "/"


def test_three_node_cycle_is_reported_once() -> None:
    graph = _graph(
        {
            "src/a.ts": ("./b",),
            "src/b.ts": ("./c",),
            "src/c.ts": ("./a",),
        }
    )

    cycles = graph.find_cycles()

    assert cycles == (Cycle(path=("src/a.ts", "src/b.ts", "src/c.ts", "src/a.ts")),)
    assert cycles[0].members == ("src/a.ts", "src/b.ts", "src/c.ts")
    assert cycles[0].describe() == "src/a.ts → src/b.ts → src/c.ts → src/a.ts"


def test_dag_has_no_cycles() -> None:
    graph = _graph(
        {
            "src/a.ts": ("./b", "./c"),
            "src/b.ts": ("./c",),
            "src/c.ts": ("react",),
        }
    )

    assert graph.find_cycles() == ()
    assert graph.edges_from("src/a.ts") == ("src/b.ts", "src/c.ts")
    assert graph.edges_from("src/c.ts") == ()


def test_independent_cycles_are_each_reported() -> None:
    graph = _graph(
        {
            "src/a.ts": ("./b",),
            "src/b.ts": ("./a",),
            "src/c.ts": ("./d",),
            "src/d.ts": ("./c",),
        }
    )

    cycles = graph.find_cycles()

    assert [cycle.members for cycle in cycles] == [
        ("src/a.ts", "src/b.ts"),
        ("src/c.ts", "src/d.ts"),
    ]


def test_self_import_is_a_cycle() -> None:
    graph = _graph({"src/a.ts": ("./a",)})

    assert graph.find_cycles() == (Cycle(path=("src/a.ts", "src/a.ts")),)


def test_extensionless_import_matches_other_module_extensions() -> None:
    graph = _graph(
        {
            "src/app.ts": ("./Button",),
            "src/Button.tsx": ("./app",),
        }
    )

    assert graph.resolve_target("src/app.ts", "./Button") == "src/Button.tsx"
    assert graph.resolve_target("src/app.ts", "./missing") is None
    assert graph.resolve_target("src/app.ts", "lodash") is None
    assert len(graph.find_cycles()) == 1
