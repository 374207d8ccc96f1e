"""
Dead code analysis over a precomputed file-level dependency graph.

Implements the sweep:
 - Roots: the union of every entrypoint category (pages, layouts, error pages,
   API routes, CLI scripts, dynamic imports, middleware, special files).
 - Reachability: BFS over ``imports`` edges only; ``importedBy`` is display data.
 - Classification, applied as an ordered rule sequence on one status:
     unreachable -> unused, legacy name -> legacy, deprecation marker -> deprecated;
   feature-flag references only add a reason and never change the status.
 - Disposition: remove | inline-small-bits | keep | needs_manual_review.

A file becomes a finding when its status is not ``used`` or it has any reason,
so a reachable file that merely reads env flags is still reported.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Set, Tuple

from .config_loader import DeadsweepConfig, HeuristicsConfig
from .content import ContentCache, ContentReader, FileSystemReader, ScanResult, scan_files
from .documents import load_entrypoints, load_graph
from .heuristics import LEGACY_INDICATORS, find_similar_files, has_legacy_indicators
from .node_types import (
    REASON_DEPRECATED,
    REASON_FEATURE_FLAGS,
    REASON_LEGACY,
    REASON_UNREACHABLE,
    Action,
    AnalysisResult,
    DependencyGraph,
    DeprecatedAnnotation,
    EntrypointSet,
    FeatureFlag,
    FileRecord,
    Finding,
    Status,
    Summary,
)
from .reachability import compute_reachable_set


@dataclass(frozen=True)
class _Facts:
    reachable: bool
    legacy: bool
    annotations: Sequence[DeprecatedAnnotation]
    flags: Sequence[FeatureFlag]


# (predicate, new status or None to leave it, reason). Order is the precedence.
_STATUS_RULES: Tuple[Tuple[Callable[[_Facts], bool], Optional[Status], str], ...] = (
    (lambda f: not f.reachable, Status.UNUSED, REASON_UNREACHABLE),
    (lambda f: f.legacy, Status.LEGACY, REASON_LEGACY),
    (lambda f: bool(f.annotations), Status.DEPRECATED, REASON_DEPRECATED),
    (lambda f: bool(f.flags), None, REASON_FEATURE_FLAGS),
)


@dataclass
class Classification:
    status: Status = Status.USED
    reasons: List[str] = field(default_factory=list)

    @property
    def is_finding(self) -> bool:
        return self.status != Status.USED or bool(self.reasons)


def classify(
    path: str,
    reachable: Set[str],
    annotations: Sequence[DeprecatedAnnotation] = (),
    flags: Sequence[FeatureFlag] = (),
    legacy_indicators: Sequence[str] = LEGACY_INDICATORS,
) -> Classification:
    facts = _Facts(
        reachable=path in reachable,
        legacy=has_legacy_indicators(path, legacy_indicators),
        annotations=annotations,
        flags=flags,
    )
    result = Classification()
    for applies, status, reason in _STATUS_RULES:
        if not applies(facts):
            continue
        if status is not None:
            result.status = status
        if reason not in result.reasons:
            result.reasons.append(reason)
    return result


def suggest_action(
    record: FileRecord,
    is_reachable: bool,
    has_legacy: bool,
    annotations: Sequence[DeprecatedAnnotation],
    flags: Sequence[FeatureFlag],
    heuristics: Optional[HeuristicsConfig] = None,
) -> Action:
    h = heuristics or HeuristicsConfig()
    if not is_reachable:
        # checked first: small helpers are inlined even when otherwise removable
        if (
            record.size.lines <= h.inline_max_lines
            and len(record.exports) <= h.inline_max_exports
            and len(record.imported_by) <= h.inline_max_importers
        ):
            return Action.INLINE
        if not record.imports and not record.exports:
            return Action.REMOVE
        if has_legacy:
            return Action.REMOVE
        if annotations:
            return Action.REMOVE
        if flags:
            # whether the flag is ever switched on needs a human
            return Action.KEEP
        return Action.REMOVE

    if has_legacy or annotations:
        return Action.REVIEW
    return Action.KEEP


def analyze_dead_code(
    graph: DependencyGraph,
    entrypoints: EntrypointSet,
    reader: ContentReader,
    heuristics: Optional[HeuristicsConfig] = None,
    workers: int = 8,
    cache: Optional[ContentCache] = None,
) -> AnalysisResult:
    h = heuristics or HeuristicsConfig()
    reachable = compute_reachable_set(entrypoints, graph)
    all_files = graph.paths()
    scans = scan_files(all_files, reader, h.deprecated_patterns, workers=workers, cache=cache)

    findings: List[Finding] = []
    for path in all_files:
        record = graph.files[path]
        scan = scans.get(path) or ScanResult(readable=False)
        verdict = classify(path, reachable, scan.annotations, scan.flags, h.legacy_indicators)
        if not verdict.is_finding:
            continue

        is_reachable = path in reachable
        legacy = has_legacy_indicators(path, h.legacy_indicators)
        similar = find_similar_files(path, all_files, h.similarity_threshold)
        findings.append(
            Finding(
                file=path,
                status=verdict.status,
                reasons=verdict.reasons,
                exported_symbols=list(record.exports),
                replaced_by=[p for p in similar if p in reachable],
                suggested_action=suggest_action(
                    record, is_reachable, legacy, scan.annotations, scan.flags, h
                ),
                size=record.size,
                imports=len(record.imports),
                imported_by=len(record.imported_by),
                deprecated_annotations=list(scan.annotations),
                feature_flags=list(scan.flags),
                similar_files=similar,
            )
        )

    skipped = sum(1 for s in scans.values() if not s.readable)
    summary = Summary.from_findings(
        findings,
        total_files=len(graph),
        reachable_files=len(reachable),
        skipped_files=skipped,
    )
    return AnalysisResult(findings=findings, summary=summary, reachable=frozenset(reachable))


def save_dead_code_report(
    config: DeadsweepConfig,
    reader: Optional[ContentReader] = None,
    cache: Optional[ContentCache] = None,
) -> Tuple[int, Path]:
    """Run the sweep described by ``config`` and write ``dead-code-findings.json``."""
    graph = load_graph(config.graph_path(), root=config.graph_root)
    entrypoints = load_entrypoints(config.entrypoints_path(), root=graph.root)
    print(f"Found {len(entrypoints.all_paths())} entrypoints")

    result = analyze_dead_code(
        graph,
        entrypoints,
        reader or FileSystemReader(config.root),
        heuristics=config.heuristics,
        workers=config.workers,
        cache=cache,
    )
    s = result.summary
    print(f"Found {s.reachable_files} reachable files")
    if s.skipped_files:
        print(f"⚠ {s.skipped_files} files could not be read; scanned as empty")

    output_dir = config.output_dir()
    output_dir.mkdir(parents=True, exist_ok=True)
    out = output_dir / "dead-code-findings.json"
    out.write_text(json.dumps(result.to_dict(), ensure_ascii=False, indent=2), encoding="utf-8")

    print(f"✓ Dead code analysis written to {out}")
    print("Summary:")
    print(f"- Total files: {s.total_files}")
    print(f"- Reachable files: {s.reachable_files}")
    print(f"- Unused files: {s.unused_files}")
    print(f"- Legacy files: {s.legacy_files}")
    print(f"- Deprecated files: {s.deprecated_files}")
    print(f"- Safe to remove: {s.safe_to_remove}")
    print(f"- Need manual review: {s.needs_manual_review}")
    print(f"- Can inline: {s.can_inline}")

    if config.render_graph:
        _render_graph(graph, result, entrypoints, output_dir, config.graph_format)

    return len(result.findings), out


def _render_graph(
    graph: DependencyGraph,
    result: AnalysisResult,
    entrypoints: EntrypointSet,
    output_dir: Path,
    fmt: str,
) -> None:
    try:
        from .graphviz_render import render_reachability_graph
    except ImportError as e:
        print(f"⚠ Cannot render dependency graph, missing dependency: {e}")
        return

    dot_path, rendered = render_reachability_graph(
        graph,
        set(result.reachable),
        result.findings,
        str(output_dir / "dead-code-graph"),
        fmt=fmt,
        entrypoints=set(entrypoints.all_paths()),
    )
    print(f"✓ Dependency graph DOT written to {dot_path}")
    if rendered:
        print(f"✓ Dependency graph rendered to {rendered}")
    else:
        print("⚠ Graphviz executable not found; only the DOT file was written")
