"""
Markdown rendering of a DeadCodeReport.

Output is deterministic for a fixed ``generated_at``; nothing here reads files.
"""
from __future__ import annotations

from typing import List, Optional

from .node_types import ENTRYPOINT_CATEGORIES, EntrypointSet, Finding
from .report import DeadCodeReport

_UNITS = ("B", "KB", "MB")

_CATEGORY_TITLES = {
    "nextjs_pages": "Next.js Pages",
    "nextjs_layouts": "Next.js Layouts",
    "nextjs_error_pages": "Next.js Error Pages",
    "api_routes": "API Routes",
    "cli_scripts": "CLI Scripts",
    "dynamic_imports": "Dynamic Imports",
    "middleware": "Middleware",
    "special_files": "Special Files",
}


def format_bytes(n: int) -> str:
    """1024-based size with one decimal, trailing ``.0`` dropped (``1.5 KB``, ``2 MB``)."""
    if n <= 0:
        return "0 B"
    i = 0
    while i < len(_UNITS) - 1 and n >= 1024 ** (i + 1):
        i += 1
    text = f"{n / 1024 ** i:.1f}"
    if text.endswith(".0"):
        text = text[:-2]
    return f"{text} {_UNITS[i]}"


def _cell(text: str) -> str:
    return str(text).replace("|", "\\|").replace("\n", " ")


def _exports(f: Finding) -> str:
    return _cell(", ".join(f.exported_symbols) or "none")


def _safe_deletion(report: DeadCodeReport, out: List[str]) -> None:
    sd = report.safe_deletion
    if not sd.entries:
        return
    out += [
        "## Safe Deletion Set",
        "",
        f"The following **{len(sd)}** files have zero inbound edges from entrypoints "
        "and no critical references. They are safe to delete:",
        "",
        "| File | Size | Lines | Reason | Exports |",
        "|------|------|-------|--------|---------|",
    ]
    for f in sd.displayed:
        out.append(
            f"| `{f.file}` | {format_bytes(f.size.bytes)} | {f.size.lines} | "
            f"{_cell(', '.join(f.reasons))} | {_exports(f)} |"
        )
    if sd.hidden_count:
        out.append(f"| ... and {sd.hidden_count} more files | | | | |")
    out += [
        "",
        f"**Total potential savings:** {format_bytes(sd.total_bytes)} ({sd.total_lines} lines)",
        "",
    ]


def _inline(report: DeadCodeReport, out: List[str]) -> None:
    inline = report.inline
    if not inline.entries:
        return
    out += [
        "## Inline Migration Set",
        "",
        f"The following **{inline.total}** files are small helpers that could be inlined into their consumers:",
        "",
        "| File | Size | Lines | Imported By | Exports |",
        "|------|------|-------|-------------|---------|",
    ]
    for f in inline.displayed:
        importers = f"{f.imported_by} file(s)" if f.imported_by > 0 else "none"
        out.append(
            f"| `{f.file}` | {format_bytes(f.size.bytes)} | {f.size.lines} | {importers} | {_exports(f)} |"
        )
    if inline.hidden_count:
        out.append(f"| ... and {inline.hidden_count} more files | | | | |")
    out.append("")


def _blocked(report: DeadCodeReport, out: List[str]) -> None:
    blocked = report.blocked
    if not blocked.entries:
        return
    out += [
        "## Blocked Set (Needs Manual Review)",
        "",
        f"The following **{blocked.total}** files require manual review before removal:",
        "",
        "| File | Status | Reason | Critical References |",
        "|------|--------|--------|---------------------|",
    ]
    for f in blocked.displayed:
        count = f.safety_check.critical_reference_count if f.safety_check else 0
        refs = f"{count} references" if count > 0 else "Manual review needed"
        out.append(f"| `{f.file}` | {f.status.value} | {_cell(', '.join(f.reasons))} | {refs} |")
    if blocked.hidden_count:
        out.append(f"| ... and {blocked.hidden_count} more files | | | |")
    out.append("")


def _legacy(report: DeadCodeReport, out: List[str]) -> None:
    if not report.legacy:
        return
    out += [
        "## Legacy Components Analysis",
        "",
        f"Found **{len(report.legacy)}** files with legacy indicators:",
        "",
        "| File | Replaced By | Size | Action |",
        "|------|-------------|------|--------|",
    ]
    for f in report.legacy:
        replacements = ", ".join(f.replaced_by) if f.replaced_by else "Unknown"
        out.append(
            f"| `{f.file}` | {_cell(replacements)} | {format_bytes(f.size.bytes)} | {f.action.value} |"
        )
    out.append("")


def _deprecated(report: DeadCodeReport, out: List[str]) -> None:
    if not report.deprecated:
        return
    out += [
        "## Deprecated Components Analysis",
        "",
        f"Found **{len(report.deprecated)}** files with deprecation annotations:",
        "",
        "| File | Deprecation Notes | Size | Action |",
        "|------|-------------------|------|--------|",
    ]
    for f in report.deprecated:
        notes = "; ".join(f"Line {a.line}: {a.context}" for a in f.deprecated_annotations) or "See file"
        out.append(
            f"| `{f.file}` | {_cell(notes)} | {format_bytes(f.size.bytes)} | {f.action.value} |"
        )
    out.append("")


def _git_preview(report: DeadCodeReport, out: List[str]) -> None:
    entries = report.safe_deletion.entries
    limit = report.git_preview_limit
    out += [
        "## Git Commands Preview (DO NOT EXECUTE)",
        "",
        "The following commands would remove the safe deletion set:",
        "",
        "```bash",
        "# PREVIEW ONLY - DO NOT EXECUTE",
    ]
    for f in entries[:limit]:
        out.append(f'git rm "{f.file}"')
    if len(entries) > limit:
        out.append(f"# ... and {len(entries) - limit} more files")
    out += ["```", ""]


def _largest_unused(report: DeadCodeReport, out: List[str]) -> None:
    if not report.largest_unused:
        return
    out += [
        f"## Top {len(report.largest_unused)} Largest Unused Modules",
        "",
        "| File | Size | Lines | Exports | Action |",
        "|------|------|-------|---------|--------|",
    ]
    for f in report.largest_unused:
        out.append(
            f"| `{f.file}` | {format_bytes(f.size.bytes)} | {f.size.lines} | "
            f"{len(f.exported_symbols)} | {f.action.value} |"
        )
    out.append("")


def render_markdown(
    report: DeadCodeReport,
    entrypoints: Optional[EntrypointSet] = None,
    generated_at: str = "",
) -> str:
    s = report.summary
    out: List[str] = [
        "# Dead Code & Legacy Component Analysis Report",
        "",
        f"**Generated:** {generated_at}",
        "",
        "## Executive Summary",
        "",
        f"This analysis identified **{s.unused_files + s.legacy_files + s.deprecated_files}** "
        f"potentially problematic files out of **{s.total_files}** total source files.",
        "",
        "### Summary Statistics",
        "",
        "| Metric | Count |",
        "|--------|-------|",
        f"| Total Files Analyzed | {s.total_files} |",
        f"| Reachable from Entrypoints | {s.reachable_files} |",
        f"| Unused Files | {s.unused_files} |",
        f"| Legacy Files | {s.legacy_files} |",
        f"| Deprecated Files | {s.deprecated_files} |",
        f"| Safe to Remove | {len(report.safe_deletion)} |",
        f"| Need Manual Review | {report.blocked.total} |",
        f"| Can Inline | {report.inline.total} |",
        "",
    ]

    if entrypoints is not None:
        counts = entrypoints.counts()
        out += ["### Entrypoints Summary", "", "| Type | Count |", "|------|-------|"]
        for name in ENTRYPOINT_CATEGORIES:
            out.append(f"| {_CATEGORY_TITLES[name]} | {counts[name]} |")
        out.append("")

    _safe_deletion(report, out)
    _inline(report, out)
    _blocked(report, out)
    _legacy(report, out)
    _deprecated(report, out)
    _git_preview(report, out)
    _largest_unused(report, out)

    out += [
        "## Recommendations",
        "",
        "### Phase 1: Safe Removals",
        f'1. Remove the {len(report.safe_deletion)} files in the "Safe Deletion Set"',
        "2. Run the full test suite to verify no breakage",
        "",
        "### Phase 2: Inline Migrations",
        f"1. Inline the {report.inline.total} small helper files",
        "2. Update imports in consuming files",
        "",
        "### Phase 3: Manual Review",
        f"1. Review the {report.blocked.total} blocked files manually",
        "2. Verify dynamic references are not critical",
        "",
        "## Analysis Metadata",
        "",
        f"- **Analysis Date:** {generated_at}",
        f"- **Total Files Processed:** {s.total_files}",
    ]
    if entrypoints is not None:
        out.append(f"- **Entrypoints Identified:** {len(entrypoints.all_paths())}")
    if s.skipped_files:
        out.append(f"- **Unreadable Files (scanned as empty):** {s.skipped_files}")
    out.append("")

    return "\n".join(out)
