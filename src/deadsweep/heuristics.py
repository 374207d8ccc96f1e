"""
String heuristics used to classify files beyond plain reachability.

 - legacy-looking file names (vocabulary match on the path)
 - deprecation markers in file text
 - feature-flag / environment references in file text
 - fuzzy base-name similarity (Levenshtein) to spot likely replacements

The thresholds and vocabularies are part of the output contract; the
defaults here are what ``HeuristicsConfig`` starts from.
"""
from __future__ import annotations

import posixpath
import re
from typing import Iterable, List, Pattern, Sequence, Tuple

from .node_types import DeprecatedAnnotation, FeatureFlag

LEGACY_INDICATORS: Tuple[str, ...] = (
    "legacy",
    "old",
    "v1",
    "deprecated",
    "archive",
    "__old__",
    "backup",
    "temp",
    "tmp",
    "unused",
    "disabled",
)

DEPRECATED_PATTERNS: Tuple[str, ...] = (
    "@deprecated",
    "DEPRECATED:",
    "MIGRATE:",
    "TODO: remove",
    "FIXME: remove",
)

# \w is ASCII-only for identifiers, as in the JS sources being scanned
FEATURE_FLAG_PATTERNS: Tuple[Pattern[str], ...] = (
    re.compile(r"NEXT_PUBLIC_(\w+)", re.ASCII),
    re.compile(r"process\.env\.(\w+)", re.ASCII),
    re.compile(r"getFeatureFlag\(['\"`](\w+)['\"`]\)", re.ASCII),
)

SIMILARITY_THRESHOLD = 0.6


def has_legacy_indicators(path: str, indicators: Iterable[str] = LEGACY_INDICATORS) -> bool:
    # bare substring: also matches inside words ("disabledFeatureX")
    lower = path.lower()
    for ind in indicators:
        ind = ind.lower()
        if (
            ind in lower
            or f"/{ind}/" in lower
            or f"-{ind}-" in lower
            or f"_{ind}_" in lower
        ):
            return True
    return False


def _line_of(text: str, offset: int) -> int:
    return text.count("\n", 0, offset) + 1


def scan_deprecated_annotations(
    text: str, patterns: Sequence[str] = DEPRECATED_PATTERNS
) -> List[DeprecatedAnnotation]:
    """All case-insensitive occurrences of each literal pattern, pattern by pattern."""
    lines = text.split("\n")
    found: List[DeprecatedAnnotation] = []
    for pattern in patterns:
        regex = re.compile(re.escape(pattern), re.IGNORECASE)
        for m in regex.finditer(text):
            line = _line_of(text, m.start())
            found.append(DeprecatedAnnotation(pattern=pattern, line=line, context=lines[line - 1].strip()))
    return found


def scan_feature_flags(text: str) -> List[FeatureFlag]:
    """Every flag reference, not deduplicated (one env var can match two patterns)."""
    flags: List[FeatureFlag] = []
    for regex in FEATURE_FLAG_PATTERNS:
        for m in regex.finditer(text):
            flags.append(FeatureFlag(flag=m.group(1), line=_line_of(text, m.start())))
    return flags


def levenshtein_distance(a: str, b: str) -> int:
    if len(a) < len(b):
        a, b = b, a
    prev = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        cur = [i]
        for j, cb in enumerate(b, start=1):
            if ca == cb:
                cur.append(prev[j - 1])
            else:
                cur.append(min(prev[j - 1], cur[j - 1], prev[j]) + 1)
        prev = cur
    return prev[len(b)]


def name_similarity(a: str, b: str) -> float:
    """(longer - edit distance) / longer; two empty names are identical."""
    longer = max(len(a), len(b))
    if longer == 0:
        return 1.0
    return (longer - levenshtein_distance(a, b)) / longer


def _base_name(path: str) -> str:
    return posixpath.splitext(posixpath.basename(path))[0]


def find_similar_files(
    path: str, all_paths: Iterable[str], threshold: float = SIMILARITY_THRESHOLD
) -> List[str]:
    """Files that look like ``path``: same-directory substring names, or close base names anywhere."""
    base = _base_name(path)
    directory = posixpath.dirname(path)
    similar: List[str] = []
    for other in all_paths:
        if other == path:
            continue
        other_base = _base_name(other)
        same_dir_match = posixpath.dirname(other) == directory and (
            base in other_base or other_base in base
        )
        if same_dir_match or name_similarity(base, other_base) > threshold:
            similar.append(other)
    return similar
