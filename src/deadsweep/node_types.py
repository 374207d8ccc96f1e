"""
Core data types for the dead-code sweep: graph records, entrypoints, findings.

Attribute names are snake_case; the JSON wire form keeps the camelCase keys
emitted by the graph builder and consumed by downstream tooling.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class Status(str, Enum):
    USED = "used"
    UNUSED = "unused"
    LEGACY = "legacy"
    DEPRECATED = "deprecated"


class Action(str, Enum):
    REMOVE = "remove"
    INLINE = "inline-small-bits"
    KEEP = "keep"
    REVIEW = "needs_manual_review"


REASON_UNREACHABLE = "no inbound edges from entrypoints"
REASON_LEGACY = "filename contains legacy indicators"
REASON_DEPRECATED = "contains @deprecated annotations"
REASON_FEATURE_FLAGS = "gated by feature flags"

ENTRYPOINT_CATEGORIES: Tuple[str, ...] = (
    "nextjs_pages",
    "nextjs_layouts",
    "nextjs_error_pages",
    "api_routes",
    "cli_scripts",
    "dynamic_imports",
    "middleware",
    "special_files",
)


@dataclass(frozen=True)
class FileSize:
    bytes: int = 0
    lines: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {"bytes": self.bytes, "lines": self.lines}


@dataclass
class FileRecord:
    """One node of the dependency graph (owned by the graph builder)."""

    path: str
    imports: List[str] = field(default_factory=list)  # resolved targets, graph-key form
    exports: List[str] = field(default_factory=list)
    imported_by: List[str] = field(default_factory=list)  # display only
    size: FileSize = field(default_factory=FileSize)


@dataclass
class DependencyGraph:
    files: Dict[str, FileRecord] = field(default_factory=dict)
    root: Optional[str] = None  # workspace root the graph was built against

    def __contains__(self, path: object) -> bool:
        return path in self.files

    def __len__(self) -> int:
        return len(self.files)

    def get(self, path: str) -> Optional[FileRecord]:
        return self.files.get(path)

    def paths(self) -> List[str]:
        return list(self.files.keys())


@dataclass
class EntrypointSet:
    nextjs_pages: List[str] = field(default_factory=list)
    nextjs_layouts: List[str] = field(default_factory=list)
    nextjs_error_pages: List[str] = field(default_factory=list)
    api_routes: List[str] = field(default_factory=list)
    cli_scripts: List[str] = field(default_factory=list)
    dynamic_imports: List[str] = field(default_factory=list)
    middleware: List[str] = field(default_factory=list)
    special_files: List[str] = field(default_factory=list)

    def category(self, name: str) -> List[str]:
        return list(getattr(self, name))

    def all_paths(self) -> List[str]:
        """Deduplicated union of every category, in first-seen order."""
        seen: Dict[str, None] = {}
        for name in ENTRYPOINT_CATEGORIES:
            for p in getattr(self, name):
                seen.setdefault(p, None)
        return list(seen)

    def counts(self) -> Dict[str, int]:
        return {name: len(getattr(self, name)) for name in ENTRYPOINT_CATEGORIES}


@dataclass(frozen=True)
class DeprecatedAnnotation:
    pattern: str
    line: int
    context: str

    def to_dict(self) -> Dict[str, Any]:
        return {"pattern": self.pattern, "line": self.line, "context": self.context}


@dataclass(frozen=True)
class FeatureFlag:
    flag: str
    line: int

    def to_dict(self) -> Dict[str, Any]:
        return {"flag": self.flag, "line": self.line}


@dataclass(frozen=True)
class SafetyCheck:
    """Opaque verdict attached by the external safety-check tool."""

    has_critical_references: Optional[bool] = None  # None = not checked
    critical_reference_count: int = 0
    updated_action: Optional[Action] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hasCriticalReferences": self.has_critical_references,
            "criticalReferenceCount": self.critical_reference_count,
            "updatedAction": self.updated_action.value if self.updated_action else None,
        }


@dataclass
class Finding:
    file: str
    status: Status
    reasons: List[str]
    exported_symbols: List[str]
    replaced_by: List[str]
    suggested_action: Action
    size: FileSize
    imports: int
    imported_by: int
    deprecated_annotations: List[DeprecatedAnnotation] = field(default_factory=list)
    feature_flags: List[FeatureFlag] = field(default_factory=list)
    similar_files: List[str] = field(default_factory=list)
    safety_check: Optional[SafetyCheck] = None

    @property
    def action(self) -> Action:
        """Effective action: the safety check's verdict when one is attached."""
        if self.safety_check is not None and self.safety_check.updated_action is not None:
            return self.safety_check.updated_action
        return self.suggested_action

    @property
    def has_critical_references(self) -> bool:
        return bool(self.safety_check and self.safety_check.has_critical_references)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "file": self.file,
            "status": self.status.value,
            "reasons": list(self.reasons),
            "exportedSymbols": list(self.exported_symbols),
            "replacedBy": list(self.replaced_by),
            "suggestedAction": self.suggested_action.value,
            "size": self.size.to_dict(),
            "imports": self.imports,
            "importedBy": self.imported_by,
            "deprecatedAnnotations": [a.to_dict() for a in self.deprecated_annotations],
            "featureFlags": [f.to_dict() for f in self.feature_flags],
            "similarFiles": list(self.similar_files),
        }
        if self.safety_check is not None:
            data["safetyCheck"] = self.safety_check.to_dict()
        return data


@dataclass(frozen=True)
class Summary:
    total_files: int = 0
    reachable_files: int = 0
    unused_files: int = 0
    legacy_files: int = 0
    deprecated_files: int = 0
    safe_to_remove: int = 0
    needs_manual_review: int = 0
    can_inline: int = 0
    skipped_files: int = 0  # unreadable during content scan; diagnostic only

    @classmethod
    def from_findings(
        cls,
        findings: List[Finding],
        total_files: int,
        reachable_files: int,
        skipped_files: int = 0,
    ) -> "Summary":
        return cls(
            total_files=total_files,
            reachable_files=reachable_files,
            unused_files=sum(1 for f in findings if f.status == Status.UNUSED),
            legacy_files=sum(1 for f in findings if f.status == Status.LEGACY),
            deprecated_files=sum(1 for f in findings if f.status == Status.DEPRECATED),
            safe_to_remove=sum(1 for f in findings if f.suggested_action == Action.REMOVE),
            needs_manual_review=sum(
                1 for f in findings if f.suggested_action == Action.REVIEW
            ),
            can_inline=sum(1 for f in findings if f.suggested_action == Action.INLINE),
            skipped_files=skipped_files,
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Summary":
        def _n(key: str) -> int:
            value = data.get(key, 0)
            return int(value) if isinstance(value, (int, float)) and not isinstance(value, bool) else 0

        return cls(
            total_files=_n("totalFiles"),
            reachable_files=_n("reachableFiles"),
            unused_files=_n("unusedFiles"),
            legacy_files=_n("legacyFiles"),
            deprecated_files=_n("deprecatedFiles"),
            safe_to_remove=_n("safeToRemove"),
            needs_manual_review=_n("needsManualReview"),
            can_inline=_n("canInline"),
            skipped_files=_n("skippedFiles"),
        )

    def to_dict(self) -> Dict[str, int]:
        return {
            "totalFiles": self.total_files,
            "reachableFiles": self.reachable_files,
            "unusedFiles": self.unused_files,
            "legacyFiles": self.legacy_files,
            "deprecatedFiles": self.deprecated_files,
            "safeToRemove": self.safe_to_remove,
            "needsManualReview": self.needs_manual_review,
            "canInline": self.can_inline,
            "skippedFiles": self.skipped_files,
        }


@dataclass
class AnalysisResult:
    findings: List[Finding]
    summary: Summary
    reachable: frozenset = frozenset()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "findings": [f.to_dict() for f in self.findings],
            "summary": self.summary.to_dict(),
        }
