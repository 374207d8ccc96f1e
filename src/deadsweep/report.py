"""
Report projection - turns findings into the tables of the dead-code report.

Every function here is a pure function of the findings list, so a report is
reproducible from a saved findings document alone. Display caps only limit
what is shown; counts and totals always cover the whole filtered set.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from .config_loader import ReportConfig
from .node_types import Action, EntrypointSet, Finding, Status, Summary


@dataclass
class SafeDeletionSet:
    entries: List[Finding] = field(default_factory=list)
    display_limit: int = 20
    total_bytes: int = 0
    total_lines: int = 0

    @property
    def displayed(self) -> List[Finding]:
        return self.entries[: self.display_limit]

    @property
    def hidden_count(self) -> int:
        return max(0, len(self.entries) - self.display_limit)

    def __len__(self) -> int:
        return len(self.entries)


@dataclass
class CappedSet:
    entries: List[Finding] = field(default_factory=list)
    display_limit: int = 15

    @property
    def displayed(self) -> List[Finding]:
        return self.entries[: self.display_limit]

    @property
    def total(self) -> int:
        return len(self.entries)

    @property
    def hidden_count(self) -> int:
        return max(0, len(self.entries) - self.display_limit)

    def __len__(self) -> int:
        return len(self.entries)


@dataclass
class DeadCodeReport:
    summary: Summary
    safe_deletion: SafeDeletionSet
    inline: CappedSet
    blocked: CappedSet
    legacy: List[Finding]
    deprecated: List[Finding]
    largest_unused: List[Finding]
    git_preview_limit: int = 10

    def to_dict(self) -> Dict[str, Any]:
        return {
            "summary": self.summary.to_dict(),
            "safeDeletion": {
                "files": [f.file for f in self.safe_deletion.entries],
                "totalBytes": self.safe_deletion.total_bytes,
                "totalLines": self.safe_deletion.total_lines,
            },
            "inline": [f.file for f in self.inline.entries],
            "blocked": [f.file for f in self.blocked.entries],
            "legacy": [f.file for f in self.legacy],
            "deprecated": [f.file for f in self.deprecated],
            "largestUnused": [f.file for f in self.largest_unused],
        }


def _by_size_desc(findings: List[Finding]) -> List[Finding]:
    # sorted() is stable: equal sizes keep their original relative order
    return sorted(findings, key=lambda f: f.size.bytes, reverse=True)


def is_safe_to_remove(finding: Finding) -> bool:
    return finding.action == Action.REMOVE and not finding.has_critical_references


def build_safe_deletion_set(findings: List[Finding], display_limit: int = 20) -> SafeDeletionSet:
    entries = _by_size_desc([f for f in findings if is_safe_to_remove(f)])
    return SafeDeletionSet(
        entries=entries,
        display_limit=display_limit,
        total_bytes=sum(f.size.bytes for f in entries),
        total_lines=sum(f.size.lines for f in entries),
    )


def build_inline_set(findings: List[Finding], display_limit: int = 15) -> CappedSet:
    return CappedSet(
        entries=[f for f in findings if f.action == Action.INLINE],
        display_limit=display_limit,
    )


def build_blocked_set(findings: List[Finding], display_limit: int = 20) -> CappedSet:
    return CappedSet(
        entries=[
            f
            for f in findings
            if f.has_critical_references or f.suggested_action == Action.REVIEW
        ],
        display_limit=display_limit,
    )


def build_legacy_table(findings: List[Finding]) -> List[Finding]:
    return [f for f in findings if f.status == Status.LEGACY]


def build_deprecated_table(findings: List[Finding]) -> List[Finding]:
    return [f for f in findings if f.status == Status.DEPRECATED]


def rank_largest_unused(findings: List[Finding], n: int = 20) -> List[Finding]:
    return _by_size_desc([f for f in findings if f.status == Status.UNUSED])[:n]


def project_report(
    findings: List[Finding],
    summary: Summary,
    config: Optional[ReportConfig] = None,
) -> DeadCodeReport:
    cfg = config or ReportConfig()
    return DeadCodeReport(
        summary=summary,
        safe_deletion=build_safe_deletion_set(findings, cfg.safe_deletion_display),
        inline=build_inline_set(findings, cfg.inline_display),
        blocked=build_blocked_set(findings, cfg.blocked_display),
        legacy=build_legacy_table(findings),
        deprecated=build_deprecated_table(findings),
        largest_unused=rank_largest_unused(findings, cfg.largest_unused),
        git_preview_limit=cfg.git_preview,
    )


def build_summary_document(report: DeadCodeReport, timestamp: str) -> Dict[str, Any]:
    """Machine-readable counterpart of the Markdown report (``summary.json``)."""
    return {
        "timestamp": timestamp,
        "summary": report.summary.to_dict(),
        "safeToRemove": [f.file for f in report.safe_deletion.entries],
        "canInline": [f.file for f in report.inline.entries],
        "needsReview": [f.file for f in report.blocked.entries],
    }


def save_report(
    findings: List[Finding],
    summary: Summary,
    entrypoints: Optional[EntrypointSet],
    output_dir: Path,
    config: Optional[ReportConfig] = None,
    generated_at: Optional[str] = None,
) -> tuple[Path, Path]:
    """
    Write ``dead-code-report.md`` and ``summary.json``

    Returns:
        (markdown path, summary path)
    """
    from .markdown_render import render_markdown

    timestamp = generated_at or datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
    report = project_report(findings, summary, config)

    output_dir.mkdir(parents=True, exist_ok=True)
    md_path = output_dir / "dead-code-report.md"
    markdown = render_markdown(report, entrypoints, generated_at=timestamp)
    md_path.write_text(markdown, encoding="utf-8")

    summary_path = output_dir / "summary.json"
    with summary_path.open("w", encoding="utf-8") as f:
        json.dump(build_summary_document(report, timestamp), f, indent=2, ensure_ascii=False)

    print(f"✓ Dead code report generated: {md_path}")
    print(f"  Report contains {len(markdown.splitlines())} lines")
    print(f"✓ Summary JSON written to {summary_path}")
    return md_path, summary_path
