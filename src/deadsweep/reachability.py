"""Entrypoint reachability over the file-level import graph."""
from __future__ import annotations

from collections import deque
from typing import Iterable, Set, Union

from .node_types import DependencyGraph, EntrypointSet


def compute_reachable_set(
    entrypoints: Union[EntrypointSet, Iterable[str]], graph: DependencyGraph
) -> Set[str]:
    """BFS from every entrypoint at once; only ``imports`` edges are walked.

    Paths without a FileRecord (filtered out upstream, or entrypoints the
    builder never saw) are still reachable; they just have no outgoing edges.
    """
    roots = entrypoints.all_paths() if isinstance(entrypoints, EntrypointSet) else list(entrypoints)

    visited: Set[str] = set(roots)
    queue = deque(visited)
    while queue:
        current = queue.popleft()
        record = graph.get(current)
        if record is None:
            continue
        for target in record.imports:
            if target not in visited:
                visited.add(target)
                queue.append(target)
    return visited
