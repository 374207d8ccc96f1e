from __future__ import annotations

import pytest

from deadsweep.markdown_render import format_bytes, render_markdown
from deadsweep.node_types import (
    Action,
    DeprecatedAnnotation,
    EntrypointSet,
    FileSize,
    Finding,
    SafetyCheck,
    Status,
    Summary,
)
from deadsweep.report import project_report


def _f(path, status=Status.UNUSED, action=Action.REMOVE, size=100, **kw):
    return Finding(
        file=path,
        status=status,
        reasons=kw.pop("reasons", ["no inbound edges from entrypoints"]),
        exported_symbols=kw.pop("exports", ["x"]),
        replaced_by=kw.pop("replaced_by", []),
        suggested_action=action,
        size=FileSize(bytes=size, lines=kw.pop("lines", 10)),
        imports=0,
        imported_by=kw.pop("imported_by", 0),
        **kw,
    )


@pytest.mark.parametrize(
    "n,expected",
    [
        (0, "0 B"),
        (512, "512 B"),
        (1024, "1 KB"),
        (1536, "1.5 KB"),
        (1024 * 1024, "1 MB"),
        (5 * 1024 ** 3, "5120 MB"),
    ],
)
def test_format_bytes(n, expected):
    assert format_bytes(n) == expected


def test_empty_report_still_has_summary_git_preview_and_recommendations():
    report = project_report([], Summary(total_files=4, reachable_files=4))
    md = render_markdown(report, generated_at="T")
    assert md.startswith("# Dead Code & Legacy Component Analysis Report")
    assert "| Total Files Analyzed | 4 |" in md
    assert "## Safe Deletion Set" not in md
    assert "## Inline Migration Set" not in md
    assert "## Git Commands Preview (DO NOT EXECUTE)" in md
    assert "## Recommendations" in md
    assert "- **Analysis Date:** T" in md


def test_safe_deletion_overflow_line_and_totals():
    findings = [_f(f"lib/f{i:02d}.ts", size=1024) for i in range(23)]
    md = render_markdown(project_report(findings, Summary(total_files=23)))
    assert "The following **23** files" in md
    assert "| ... and 3 more files | | | | |" in md
    assert "**Total potential savings:** 23 KB (230 lines)" in md


def test_git_preview_limits_commands():
    findings = [_f(f"f{i}.js", size=100 - i) for i in range(12)]
    md = render_markdown(project_report(findings, Summary()))
    assert md.count('git rm "') == 10
    assert "# ... and 2 more files" in md
    assert 'git rm "f0.js"' in md


def test_legacy_and_deprecated_tables():
    findings = [
        _f("widgets/CardOld.js", status=Status.LEGACY, replaced_by=["widgets/Card.js"]),
        _f(
            "lib/dep.ts",
            status=Status.DEPRECATED,
            deprecated_annotations=[DeprecatedAnnotation("@deprecated", 5, "/** @deprecated use x */")],
        ),
    ]
    md = render_markdown(project_report(findings, Summary()))
    assert "| `widgets/CardOld.js` | widgets/Card.js | 100 B | remove |" in md
    assert "Line 5: /** @deprecated use x */" in md


def test_blocked_section_shows_reference_counts():
    findings = [
        _f("a.ts", status=Status.LEGACY, action=Action.REVIEW, reasons=["legacy"]),
        _f("b.ts", safety_check=SafetyCheck(has_critical_references=True, critical_reference_count=4)),
    ]
    md = render_markdown(project_report(findings, Summary()))
    assert "| `a.ts` | legacy | legacy | Manual review needed |" in md
    assert "| `b.ts` | unused | no inbound edges from entrypoints | 4 references |" in md


def test_pipes_in_cells_are_escaped():
    findings = [_f("x.ts", reasons=["a | b"])]
    md = render_markdown(project_report(findings, Summary()))
    assert "a \\| b" in md


def test_entrypoint_summary_table():
    eps = EntrypointSet(nextjs_pages=["a", "b"], middleware=["middleware.ts"])
    md = render_markdown(project_report([], Summary()), eps)
    assert "| Next.js Pages | 2 |" in md
    assert "| Middleware | 1 |" in md
    assert "- **Entrypoints Identified:** 3" in md
