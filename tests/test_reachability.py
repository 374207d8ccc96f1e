from __future__ import annotations

from deadsweep.node_types import DependencyGraph, EntrypointSet, FileRecord
from deadsweep.reachability import compute_reachable_set


def _graph(edges: dict[str, list[str]]) -> DependencyGraph:
    g = DependencyGraph()
    for path, imports in edges.items():
        g.files[path] = FileRecord(path=path, imports=list(imports))
    return g


def test_chain_is_reachable_and_isolated_file_is_not():
    g = _graph({"A.js": ["B.js"], "B.js": ["C.js"], "C.js": [], "D.js": []})
    reachable = compute_reachable_set(EntrypointSet(nextjs_pages=["A.js"]), g)
    assert reachable == {"A.js", "B.js", "C.js"}


def test_cycles_terminate():
    g = _graph({"a": ["b"], "b": ["c"], "c": ["a"], "x": ["a"]})
    assert compute_reachable_set(["a"], g) == {"a", "b", "c"}


def test_entrypoint_missing_from_graph_is_a_root_without_edges():
    g = _graph({"a": ["b"], "b": []})
    reachable = compute_reachable_set(EntrypointSet(middleware=["middleware.ts"], api_routes=["a"]), g)
    assert reachable == {"middleware.ts", "a", "b"}


def test_import_target_missing_from_graph_is_visited_but_dead_end():
    g = _graph({"a": ["filtered/out.js"]})
    assert compute_reachable_set(["a"], g) == {"a", "filtered/out.js"}


def test_imported_by_is_not_used_for_traversal():
    g = _graph({"a": [], "b": []})
    g.files["a"].imported_by = ["b"]
    g.files["b"].imported_by = ["a"]
    assert compute_reachable_set(["a"], g) == {"a"}


def test_closure_over_every_category():
    g = _graph({f"f{i}": [f"dep{i}"] for i in range(8)})
    for i in range(8):
        g.files[f"dep{i}"] = FileRecord(path=f"dep{i}")
    eps = EntrypointSet(
        nextjs_pages=["f0"],
        nextjs_layouts=["f1"],
        nextjs_error_pages=["f2"],
        api_routes=["f3"],
        cli_scripts=["f4"],
        dynamic_imports=["f5"],
        middleware=["f6"],
        special_files=["f7"],
    )
    reachable = compute_reachable_set(eps, g)
    assert reachable == set(g.files)


def test_duplicate_entrypoints_are_deduplicated():
    eps = EntrypointSet(nextjs_pages=["a", "b"], nextjs_layouts=["a"], special_files=["b", "c"])
    assert eps.all_paths() == ["a", "b", "c"]


def test_diamond_visits_shared_dependency_once():
    g = _graph({"root": ["l", "r"], "l": ["shared"], "r": ["shared"], "shared": ["leaf"], "leaf": []})
    assert compute_reachable_set(["root"], g) == {"root", "l", "r", "shared", "leaf"}
