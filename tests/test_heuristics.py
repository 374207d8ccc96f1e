from __future__ import annotations

import pytest

from deadsweep.heuristics import (
    find_similar_files,
    has_legacy_indicators,
    levenshtein_distance,
    name_similarity,
    scan_deprecated_annotations,
    scan_feature_flags,
)


@pytest.mark.parametrize(
    "path",
    [
        "legacy/old-util.js",
        "components/ButtonV1.tsx",
        "lib/__old__/helpers.ts",
        "scripts/BACKUP_db.js",
        "app/tmp/page.tsx",
        "src/features/disabledFeatureX.ts",
        "app/Holder.tsx",  # bare substring inside an unrelated word still counts
    ],
)
def test_legacy_indicators_match(path):
    assert has_legacy_indicators(path)


@pytest.mark.parametrize("path", ["components/Button.tsx", "app/api/agents/route.ts", "lib/stripe.ts"])
def test_legacy_indicators_no_match(path):
    assert not has_legacy_indicators(path)


def test_legacy_indicators_custom_vocabulary():
    assert has_legacy_indicators("src/retired/thing.js", ["retired"])
    assert not has_legacy_indicators("src/legacy/thing.js", ["retired"])


def test_deprecated_annotation_line_and_context():
    text = "a\nb\nc\nd\n  // @deprecated use NewWidget instead  \nexport const x = 1;\n"
    found = scan_deprecated_annotations(text)
    assert len(found) == 1
    assert found[0].pattern == "@deprecated"
    assert found[0].line == 5
    assert found[0].context == "// @deprecated use NewWidget instead"


def test_deprecated_patterns_are_case_insensitive():
    found = scan_deprecated_annotations("// todo: Remove once v2 ships\n")
    assert [(a.pattern, a.line) for a in found] == [("TODO: remove", 1)]


def test_deprecated_matches_are_grouped_by_pattern():
    text = "@Deprecated\nMIGRATE: to hooks\n@deprecated again\n"
    found = scan_deprecated_annotations(text)
    assert [(a.pattern, a.line) for a in found] == [
        ("@deprecated", 1),
        ("@deprecated", 3),
        ("MIGRATE:", 2),
    ]


def test_no_annotations_in_clean_text():
    assert scan_deprecated_annotations("export default function Page() {}\n") == []


def test_feature_flags_record_every_occurrence():
    text = "const a = process.env.NEXT_PUBLIC_FOO;\nif (getFeatureFlag('beta')) {}\n"
    flags = scan_feature_flags(text)
    assert [(f.flag, f.line) for f in flags] == [
        ("FOO", 1),
        ("NEXT_PUBLIC_FOO", 1),
        ("beta", 2),
    ]


def test_feature_flag_call_accepts_backticks_and_double_quotes():
    text = 'getFeatureFlag("darkMode")\ngetFeatureFlag(`newNav`)\n'
    assert [f.flag for f in scan_feature_flags(text)] == ["darkMode", "newNav"]


def test_repeated_flag_is_not_deduplicated():
    text = "process.env.STRIPE_KEY\nprocess.env.STRIPE_KEY\n"
    assert [(f.flag, f.line) for f in scan_feature_flags(text)] == [("STRIPE_KEY", 1), ("STRIPE_KEY", 2)]


def test_levenshtein_distance():
    assert levenshtein_distance("kitten", "sitting") == 3
    assert levenshtein_distance("", "abc") == 3
    assert levenshtein_distance("same", "same") == 0
    assert levenshtein_distance("abc", "") == 3


def test_name_similarity():
    assert name_similarity("", "") == 1.0
    assert name_similarity("Button", "Buttons") == pytest.approx(6 / 7)
    assert name_similarity("Card", "CardOld") == pytest.approx(4 / 7)


def test_similar_files_same_directory_substring():
    paths = ["widgets/Card.js", "widgets/CardOld.js", "other/Cart.js", "other/Zebra.js"]
    assert find_similar_files("widgets/CardOld.js", paths) == ["widgets/Card.js"]


def test_similar_files_across_directories_by_edit_distance():
    paths = ["a/Button.tsx", "b/Buttons.tsx", "c/Modal.tsx"]
    assert find_similar_files("a/Button.tsx", paths) == ["b/Buttons.tsx"]


def test_similarity_threshold_is_strict():
    # 3/5 == 0.6 exactly, which is not enough
    assert find_similar_files("x/abcde.js", ["y/abcxy.js"]) == []


def test_similar_file_matching_both_rules_appears_once():
    paths = ["w/Card.js", "w/Cards.js"]
    assert find_similar_files("w/Card.js", paths) == ["w/Cards.js"]


def test_similar_files_exclude_self():
    assert find_similar_files("a/x.js", ["a/x.js"]) == []
