from __future__ import annotations

import json
from pathlib import Path

from deadsweep.config_loader import ReportConfig
from deadsweep.node_types import (
    Action,
    EntrypointSet,
    FileSize,
    Finding,
    SafetyCheck,
    Status,
    Summary,
)
from deadsweep.report import (
    build_blocked_set,
    build_deprecated_table,
    build_inline_set,
    build_legacy_table,
    build_safe_deletion_set,
    build_summary_document,
    project_report,
    rank_largest_unused,
    save_report,
)


def _f(path, status=Status.UNUSED, action=Action.REMOVE, size=100, lines=10, safety=None):
    return Finding(
        file=path,
        status=status,
        reasons=["no inbound edges from entrypoints"],
        exported_symbols=["x"],
        replaced_by=[],
        suggested_action=action,
        size=FileSize(bytes=size, lines=lines),
        imports=0,
        imported_by=0,
        safety_check=safety,
    )


def test_safe_deletion_sorted_by_size_with_stable_ties():
    findings = [_f("a", size=10), _f("b", size=300), _f("c", size=10), _f("d", size=50)]
    sd = build_safe_deletion_set(findings)
    assert [f.file for f in sd.entries] == ["b", "d", "a", "c"]


def test_safe_deletion_totals_cover_whole_set():
    findings = [_f(f"f{i}", size=100, lines=5) for i in range(30)]
    sd = build_safe_deletion_set(findings, display_limit=20)
    assert len(sd.displayed) == 20
    assert sd.hidden_count == 10
    assert sd.total_bytes == 3000
    assert sd.total_lines == 150


def test_safe_deletion_excludes_other_actions_and_critical_references():
    findings = [
        _f("keep", action=Action.KEEP),
        _f("inline", action=Action.INLINE),
        _f("crit", safety=SafetyCheck(has_critical_references=True, critical_reference_count=1)),
        _f("ok", safety=SafetyCheck(has_critical_references=False, updated_action=Action.REMOVE)),
        _f("plain"),
    ]
    assert [f.file for f in build_safe_deletion_set(findings).entries] == ["ok", "plain"]


def test_safety_check_updated_action_changes_membership():
    downgraded = _f(
        "x",
        safety=SafetyCheck(has_critical_references=True, critical_reference_count=3, updated_action=Action.REVIEW),
    )
    assert build_safe_deletion_set([downgraded]).entries == []
    assert [f.file for f in build_blocked_set([downgraded]).entries] == ["x"]


def test_inline_set_keeps_input_order_and_caps_display():
    findings = [_f(f"i{i}", action=Action.INLINE, size=i) for i in range(18)]
    inline = build_inline_set(findings, display_limit=15)
    assert [f.file for f in inline.entries] == [f"i{i}" for i in range(18)]
    assert inline.total == 18
    assert len(inline.displayed) == 15
    assert inline.hidden_count == 3


def test_blocked_set_uses_base_review_action_or_critical_references():
    findings = [
        _f("review", status=Status.LEGACY, action=Action.REVIEW),
        _f("crit", safety=SafetyCheck(has_critical_references=True)),
        _f("remove"),
    ]
    assert [f.file for f in build_blocked_set(findings).entries] == ["review", "crit"]


def test_legacy_and_deprecated_tables_filter_by_status():
    findings = [
        _f("l1", status=Status.LEGACY),
        _f("d1", status=Status.DEPRECATED),
        _f("u1"),
        _f("l2", status=Status.LEGACY),
        _f("used", status=Status.USED, action=Action.KEEP),
    ]
    assert [f.file for f in build_legacy_table(findings)] == ["l1", "l2"]
    assert [f.file for f in build_deprecated_table(findings)] == ["d1"]


def test_rank_largest_unused_only_counts_unused_status():
    findings = [
        _f("big-legacy", status=Status.LEGACY, size=10_000),
        _f("small", size=10),
        _f("mid", size=500, action=Action.KEEP),
        _f("large", size=2_000),
    ]
    assert [f.file for f in rank_largest_unused(findings)] == ["large", "mid", "small"]
    assert [f.file for f in rank_largest_unused(findings, n=1)] == ["large"]


def test_project_report_honours_display_config():
    findings = [_f(f"r{i}") for i in range(5)] + [_f(f"i{i}", action=Action.INLINE) for i in range(4)]
    cfg = ReportConfig(safe_deletion_display=2, inline_display=1, git_preview=3)
    report = project_report(findings, Summary(total_files=9), cfg)
    assert len(report.safe_deletion.displayed) == 2
    assert len(report.safe_deletion) == 5
    assert report.inline.hidden_count == 3
    assert report.git_preview_limit == 3


def test_summary_document_lists_whole_sets():
    findings = [
        _f("r"),
        _f("i", action=Action.INLINE),
        _f("v", status=Status.LEGACY, action=Action.REVIEW),
    ]
    report = project_report(findings, Summary(total_files=10, reachable_files=7))
    doc = build_summary_document(report, "2024-01-01T00:00:00Z")
    assert doc["timestamp"] == "2024-01-01T00:00:00Z"
    assert doc["summary"]["totalFiles"] == 10
    assert doc["safeToRemove"] == ["r"]
    assert doc["canInline"] == ["i"]
    assert doc["needsReview"] == ["v"]


def test_save_report_writes_markdown_and_summary(tmp_path: Path):
    findings = [_f("lib/dead.ts", size=2048)]
    md_path, summary_path = save_report(
        findings,
        Summary(total_files=3, reachable_files=2, unused_files=1, safe_to_remove=1),
        EntrypointSet(nextjs_pages=["app/page.tsx"]),
        tmp_path / "out",
        generated_at="2024-01-01T00:00:00Z",
    )
    text = md_path.read_text(encoding="utf-8")
    assert "`lib/dead.ts`" in text
    assert 'git rm "lib/dead.ts"' in text
    data = json.loads(summary_path.read_text(encoding="utf-8"))
    assert data["safeToRemove"] == ["lib/dead.ts"]
    assert data["timestamp"] == "2024-01-01T00:00:00Z"
