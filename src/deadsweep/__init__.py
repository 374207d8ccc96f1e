"""
deadsweep - dead code and legacy component sweep over a file dependency graph

Simple API:

    from deadsweep import analyze_workspace

    result = analyze_workspace("path/to/workspace")
    print(f"Unused files: {result.summary.unused_files}")
    for finding in result.findings:
        print(finding.file, finding.status.value, finding.suggested_action.value)
"""

from importlib.metadata import PackageNotFoundError, version

from .errors import (
    DeadsweepError,
    InvalidEntrypointDocument,
    InvalidFindingsDocument,
    InvalidGraphDocument,
)

try:
    __version__ = version("deadsweep")
except PackageNotFoundError:
    # Fallback for development/uninstalled package
    __version__ = "unknown"


def analyze_workspace(root=".", graph=None, entrypoints=None, **kwargs):
    """Load the graph and entrypoint documents under ``root`` and run the sweep.

    ``graph_root`` and ``reader`` are taken from kwargs; the rest go to
    ``analyze_dead_code`` (``heuristics``, ``workers``, ``cache``).
    """
    from pathlib import Path

    from .content import FileSystemReader
    from .dead_code import analyze_dead_code
    from .documents import load_entrypoints, load_graph

    base = Path(root)
    graph_doc = load_graph(Path(graph) if graph else base / "analysis" / "dep-graph.json",
                           root=kwargs.pop("graph_root", None))
    entry_doc = load_entrypoints(Path(entrypoints) if entrypoints else base / "analysis" / "entrypoints.json",
                                 root=graph_doc.root)
    reader = kwargs.pop("reader", None) or FileSystemReader(base)
    return analyze_dead_code(graph_doc, entry_doc, reader, **kwargs)


__all__ = [
    "analyze_workspace",
    "DeadsweepError",
    "InvalidGraphDocument",
    "InvalidEntrypointDocument",
    "InvalidFindingsDocument",
    "__version__",
]
