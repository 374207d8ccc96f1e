from __future__ import annotations

import posixpath
from typing import Dict, Iterable, Optional, Set, Tuple

from graphviz import Digraph
from graphviz.backend import ExecutableNotFound

from .node_types import DependencyGraph, Finding, Status

_STATUS_COLORS = {
    Status.USED: "#4CAF50",  # green
    Status.UNUSED: "#F44336",  # red
    Status.LEGACY: "#FFC107",  # amber
    Status.DEPRECATED: "#9C27B0",  # purple
}
_ENTRYPOINT_COLOR = "#2196F3"  # blue


def _get_short_name(path: str) -> str:
    """Display name for a file - only the base name."""
    if not path:
        return "root"
    return posixpath.basename(path)


def build_reachability_graph(
    graph: DependencyGraph,
    reachable: Set[str],
    findings: Iterable[Finding],
    entrypoints: Optional[Set[str]] = None,
) -> Digraph:
    """Dependency graph with nodes filled by status and edges styled by reachability."""
    dot = Digraph(
        "deadsweep",
        graph_attr={"rankdir": "LR", "splines": "spline", "label": "Entrypoint Reachability", "labelloc": "t"},
        node_attr={"shape": "box", "style": "rounded,filled", "fontname": "Helvetica"},
        edge_attr={"arrowhead": "vee"},
    )

    by_file: Dict[str, Finding] = {f.file: f for f in findings}
    entries = entrypoints or set()

    for path in sorted(graph.files):
        finding = by_file.get(path)
        status = finding.status if finding else Status.USED
        if path in entries:
            color = _ENTRYPOINT_COLOR
        else:
            color = _STATUS_COLORS[status]
        label = f"{_get_short_name(path)}\n{status.value}"
        if finding is not None:
            label += f"\n{finding.suggested_action.value}"
        dot.node(path, label=label, fillcolor=color, tooltip=path)

    edges: Set[Tuple[str, str]] = set()
    for path, record in graph.files.items():
        for target in record.imports:
            if target in graph.files:
                edges.add((path, target))

    for src, dst in sorted(edges):
        if src in reachable and dst in reachable:
            dot.edge(src, dst, color="black", style="solid")
        else:
            dot.edge(src, dst, color="#9E9E9E", style="dashed")

    return dot


def render_reachability_graph(
    graph: DependencyGraph,
    reachable: Set[str],
    findings: Iterable[Finding],
    output_base: str,
    fmt: str = "svg",
    entrypoints: Optional[Set[str]] = None,
) -> Tuple[str, str]:
    dot = build_reachability_graph(graph, reachable, findings, entrypoints)

    dot_path = f"{output_base}.dot"
    out_path = f"{output_base}.{fmt}"
    dot.save(dot_path)

    try:
        dot.render(output_base, format=fmt, cleanup=True)
    except ExecutableNotFound:
        # Only DOT written; caller should inform user
        out_path = ""
    return dot_path, out_path
