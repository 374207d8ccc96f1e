"""
File-content access for the annotation / feature-flag scans.

Readers are injected so the analysis runs against a real workspace or an
in-memory fixture. A read failure only affects the file being read: it is
reported as an empty scan and never raised to the caller.
"""
from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from .heuristics import DEPRECATED_PATTERNS, scan_deprecated_annotations, scan_feature_flags
from .node_types import DeprecatedAnnotation, FeatureFlag


class ContentUnavailable(OSError):
    """Content exists but is not scannable text (e.g. binary)."""


class ContentReader:
    def read(self, path: str) -> str:  # pragma: no cover - interface
        raise NotImplementedError


class FileSystemReader(ContentReader):
    """Reads repo-relative paths under a workspace root as UTF-8 text."""

    def __init__(self, root: Path | str = "."):
        self.root = Path(root)

    def read(self, path: str) -> str:
        data = (self.root / path).read_bytes()
        if b"\x00" in data:
            raise ContentUnavailable(f"binary file: {path}")
        return data.decode("utf-8")


class MappingReader(ContentReader):
    """In-memory reader; unknown paths behave like missing files."""

    def __init__(self, contents: Mapping[str, str]):
        self.contents = dict(contents)

    def read(self, path: str) -> str:
        try:
            return self.contents[path]
        except KeyError:
            raise FileNotFoundError(path) from None


class ContentCache:
    """Explicit memo for file text, shared between runs only when passed in."""

    def __init__(self) -> None:
        self._entries: Dict[str, str] = {}
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def get(self, path: str) -> Optional[str]:
        with self._lock:
            text = self._entries.get(path)
            if text is None:
                self.misses += 1
            else:
                self.hits += 1
            return text

    def put(self, path: str, text: str) -> None:
        with self._lock:
            self._entries[path] = text

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


@dataclass
class ScanResult:
    annotations: List[DeprecatedAnnotation] = field(default_factory=list)
    flags: List[FeatureFlag] = field(default_factory=list)
    readable: bool = True


def _read(path: str, reader: ContentReader, cache: Optional[ContentCache]) -> Optional[str]:
    if cache is not None:
        cached = cache.get(path)
        if cached is not None:
            return cached
    try:
        text = reader.read(path)
    except (OSError, ValueError):
        # missing, unreadable, binary or not UTF-8
        return None
    if cache is not None:
        cache.put(path, text)
    return text


def scan_file(
    path: str,
    reader: ContentReader,
    deprecated_patterns: Sequence[str] = DEPRECATED_PATTERNS,
    cache: Optional[ContentCache] = None,
) -> ScanResult:
    text = _read(path, reader, cache)
    if text is None:
        return ScanResult(readable=False)
    return ScanResult(
        annotations=scan_deprecated_annotations(text, deprecated_patterns),
        flags=scan_feature_flags(text),
    )


def scan_files(
    paths: Iterable[str],
    reader: ContentReader,
    deprecated_patterns: Sequence[str] = DEPRECATED_PATTERNS,
    workers: int = 8,
    cache: Optional[ContentCache] = None,
) -> Dict[str, ScanResult]:
    """Scan every path; results are keyed by path, never by completion order."""
    ordered = list(dict.fromkeys(paths))
    if workers <= 1 or len(ordered) <= 1:
        return {p: scan_file(p, reader, deprecated_patterns, cache) for p in ordered}

    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures = {
            p: pool.submit(scan_file, p, reader, deprecated_patterns, cache) for p in ordered
        }
        return {p: futures[p].result() for p in ordered}
