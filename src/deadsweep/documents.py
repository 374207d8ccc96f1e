"""
Loading of the JSON documents exchanged with the external graph builder,
entrypoint discovery and safety-check tools.

Every structural problem raises one of the errors in ``deadsweep.errors``;
there is no partial result without a valid graph.
"""
from __future__ import annotations

import json
import posixpath
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from .errors import InvalidEntrypointDocument, InvalidFindingsDocument, InvalidGraphDocument
from .node_types import (
    ENTRYPOINT_CATEGORIES,
    Action,
    DependencyGraph,
    DeprecatedAnnotation,
    EntrypointSet,
    FeatureFlag,
    FileRecord,
    FileSize,
    Finding,
    SafetyCheck,
    Status,
    Summary,
)

# The graph builder resolves imports to absolute paths under this root
DEFAULT_WORKSPACE_ROOT = "/workspace"


def normalize_path(path: str, root: Optional[str] = None) -> str:
    """Bring an import target to the graph-key convention (relative, posix)."""
    p = str(path).replace("\\", "/")
    if posixpath.isabs(p):
        base = (root or DEFAULT_WORKSPACE_ROOT).replace("\\", "/")
        return posixpath.relpath(p, base)
    p = posixpath.normpath(p)
    return "" if p == "." else p


def _read_json(path: Path, error_cls) -> Any:
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise error_cls(str(path), f"cannot read file: {e}") from e
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise error_cls(str(path), f"malformed JSON: {e}") from e


def _int_or_zero(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return int(value)
    return 0


def _parse_record(key: str, raw: Any, root: Optional[str], source: str) -> FileRecord:
    if not isinstance(raw, dict):
        raise InvalidGraphDocument(source, f"record for {key!r} is not an object")

    for list_key in ("imports", "exports", "importedBy"):
        if raw.get(list_key) is not None and not isinstance(raw[list_key], list):
            raise InvalidGraphDocument(source, f"'{list_key}' of {key!r} is not a list")

    imports: List[str] = []
    for item in raw.get("imports") or []:
        if isinstance(item, str):
            target = item
        elif isinstance(item, dict):
            target = item.get("resolved")
            if not target:
                continue
        else:
            raise InvalidGraphDocument(source, f"import entry of {key!r} is not an object")
        imports.append(normalize_path(target, root))

    exports: List[str] = []
    for item in raw.get("exports") or []:
        if isinstance(item, dict):
            name = item.get("name")
            if name is not None:
                exports.append(str(name))
        elif isinstance(item, str):
            exports.append(item)

    imported_by: List[str] = []
    for item in raw.get("importedBy") or []:
        if isinstance(item, dict):
            imported_by.append(str(item.get("file", "")))
        else:
            imported_by.append(str(item))

    size_raw = raw.get("size") or {}
    if not isinstance(size_raw, dict):
        raise InvalidGraphDocument(source, f"size of {key!r} is not an object")
    size = FileSize(bytes=_int_or_zero(size_raw.get("bytes")), lines=_int_or_zero(size_raw.get("lines")))

    return FileRecord(path=key, imports=imports, exports=exports, imported_by=imported_by, size=size)


def parse_graph_document(
    data: Any, root: Optional[str] = None, source: str = "<memory>"
) -> DependencyGraph:
    """Build a DependencyGraph from a decoded ``dep-graph.json`` payload.

    ``root`` overrides the workspace root used to relativize absolute import
    targets; otherwise ``metadata.root`` of the document, then the
    conventional ``/workspace``.
    """
    if not isinstance(data, dict):
        raise InvalidGraphDocument(source, "document is not an object")
    files = data.get("files")
    if files is None:
        raise InvalidGraphDocument(source, "missing 'files' key")
    if not isinstance(files, dict):
        raise InvalidGraphDocument(source, "'files' is not an object")

    meta = data.get("metadata")
    if root is None and isinstance(meta, dict) and isinstance(meta.get("root"), str):
        root = meta["root"]

    graph = DependencyGraph(root=root)
    for key, raw in files.items():
        graph.files[str(key)] = _parse_record(str(key), raw, root, source)
    return graph


def load_graph(path: Path, root: Optional[str] = None) -> DependencyGraph:
    return parse_graph_document(_read_json(path, InvalidGraphDocument), root=root, source=str(path))


def parse_entrypoints_document(
    data: Any, root: Optional[str] = None, source: str = "<memory>"
) -> EntrypointSet:
    """Decode ``entrypoints.json``; absolute paths are relativized against ``root`` like graph imports."""
    if not isinstance(data, dict):
        raise InvalidEntrypointDocument(source, "document is not an object")
    values: Dict[str, List[str]] = {}
    for name in ENTRYPOINT_CATEGORIES:
        raw = data.get(name)
        if raw is None:
            values[name] = []
            continue
        if not isinstance(raw, list) or not all(isinstance(p, str) for p in raw):
            raise InvalidEntrypointDocument(source, f"'{name}' is not a list of paths")
        values[name] = [normalize_path(p, root) for p in raw]
    return EntrypointSet(**values)


def load_entrypoints(path: Path, root: Optional[str] = None) -> EntrypointSet:
    return parse_entrypoints_document(
        _read_json(path, InvalidEntrypointDocument), root=root, source=str(path)
    )


def _enum(cls, value: Any, what: str, source: str):
    try:
        return cls(value)
    except ValueError:
        raise InvalidFindingsDocument(source, f"unknown {what}: {value!r}") from None


def _parse_safety_check(raw: Any, source: str) -> Optional[SafetyCheck]:
    if not isinstance(raw, dict):
        return None
    updated = raw.get("updatedAction")
    return SafetyCheck(
        has_critical_references=raw.get("hasCriticalReferences"),
        critical_reference_count=_int_or_zero(raw.get("criticalReferenceCount")),
        updated_action=_enum(Action, updated, "action", source) if updated else None,
    )


def _objects(raw: Dict[str, Any], key: str, source: str) -> List[Dict[str, Any]]:
    items = raw.get(key) or []
    if not isinstance(items, list) or not all(isinstance(i, dict) for i in items):
        raise InvalidFindingsDocument(source, f"'{key}' of {raw.get('file')!r} is not a list of objects")
    return items


def _strings(raw: Dict[str, Any], key: str, source: str) -> List[str]:
    items = raw.get(key) or []
    if not isinstance(items, list):
        raise InvalidFindingsDocument(source, f"'{key}' of {raw.get('file')!r} is not a list")
    return [str(i) for i in items]


def finding_from_dict(raw: Dict[str, Any], source: str = "<memory>") -> Finding:
    if not isinstance(raw, dict) or "file" not in raw:
        raise InvalidFindingsDocument(source, "finding is not an object with a 'file' key")
    size_raw = raw.get("size") or {}
    if not isinstance(size_raw, dict):
        raise InvalidFindingsDocument(source, f"size of {raw['file']!r} is not an object")
    return Finding(
        file=str(raw["file"]),
        status=_enum(Status, raw.get("status"), "status", source),
        reasons=_strings(raw, "reasons", source),
        exported_symbols=_strings(raw, "exportedSymbols", source),
        replaced_by=_strings(raw, "replacedBy", source),
        suggested_action=_enum(Action, raw.get("suggestedAction"), "action", source),
        size=FileSize(bytes=_int_or_zero(size_raw.get("bytes")), lines=_int_or_zero(size_raw.get("lines"))),
        imports=_int_or_zero(raw.get("imports")),
        imported_by=_int_or_zero(raw.get("importedBy")),
        deprecated_annotations=[
            DeprecatedAnnotation(
                pattern=str(a.get("pattern", "")),
                line=_int_or_zero(a.get("line")),
                context=str(a.get("context") or ""),
            )
            for a in _objects(raw, "deprecatedAnnotations", source)
        ],
        feature_flags=[
            FeatureFlag(flag=str(f.get("flag", "")), line=_int_or_zero(f.get("line")))
            for f in _objects(raw, "featureFlags", source)
        ],
        similar_files=_strings(raw, "similarFiles", source),
        safety_check=_parse_safety_check(raw.get("safetyCheck"), source),
    )


def parse_findings_document(
    data: Any, source: str = "<memory>"
) -> Tuple[List[Finding], Summary]:
    """Decode a findings document, optionally enriched with ``safetyCheck`` entries."""
    if not isinstance(data, dict):
        raise InvalidFindingsDocument(source, "document is not an object")
    raw_findings = data.get("findings")
    if not isinstance(raw_findings, list):
        raise InvalidFindingsDocument(source, "'findings' is not a list")
    summary = data.get("summary") or {}
    if not isinstance(summary, dict):
        raise InvalidFindingsDocument(source, "'summary' is not an object")
    return [finding_from_dict(f, source) for f in raw_findings], Summary.from_dict(summary)


def load_findings_document(path: Path) -> Tuple[List[Finding], Summary]:
    return parse_findings_document(_read_json(path, InvalidFindingsDocument), source=str(path))
