"""Tests for Maven version expression classification and range matching."""

import pytest

from versioning import RequirementKind, classify, is_bracketed, matching_versions, pick_highest
from versioning.parser import parse_range, split_ranges
from versioning.ranges import in_range


class TestClassify:
    """Soft / hard / range classification."""

    def test_plain_version_is_soft(self):
        req = classify("1.7.30")
        assert req.kind == RequirementKind.SOFT
        assert req.version == "1.7.30"
        assert req.is_soft

    def test_single_bracket_is_hard(self):
        req = classify("[1.2.4]")
        assert req.kind == RequirementKind.HARD
        assert req.version == "1.2.4"
        assert not req.is_soft

    def test_whitespace_is_trimmed(self):
        assert classify("  [2.0.0] ").version == "2.0.0"

    def test_interval_is_range(self):
        req = classify("[1.0,2.0)")
        assert req.kind == RequirementKind.RANGE
        assert req.version == "1.0"
        assert len(req.ranges) == 1
        assert req.ranges[0].lower.inclusive is True
        assert req.ranges[0].upper.inclusive is False

    def test_open_lower_range_falls_back_to_upper_bound(self):
        req = classify("(,1.0]")
        assert req.kind == RequirementKind.RANGE
        assert req.version == "1.0"

    def test_exclusive_lower_bound_is_not_used_as_fallback(self):
        req = classify("(1.0,2.0]")
        assert req.kind == RequirementKind.RANGE
        assert req.version == "2.0"

    def test_exclusive_bounds_keep_raw_text(self):
        req = classify("(1.0,2.0)")
        assert req.kind == RequirementKind.RANGE
        assert req.version == "(1.0,2.0)"
        assert not in_range(req.version, req.ranges[0])
        assert pick_highest(req, []) is None

    def test_union_of_ranges(self):
        req = classify("[1.0,2.0),[3.0,4.0]")
        assert req.kind == RequirementKind.RANGE
        assert len(req.ranges) == 2

    @pytest.mark.parametrize("spec", [None, "", "   "])
    def test_missing_version(self, spec):
        assert classify(spec) is None

    def test_unbalanced_brackets_keep_stripped_text(self):
        req = classify("[1.0,[2.0]")
        assert req.kind == RequirementKind.HARD
        assert req.version == "1.0,[2.0"


def test_is_bracketed():
    assert is_bracketed("[1.0]")
    assert is_bracketed("(1.0,2.0]")
    assert not is_bracketed("1.0")
    assert not is_bracketed("${x}")


def test_split_ranges():
    assert split_ranges("[1.0,2.0),[3.0,)") == ["[1.0,2.0)", "[3.0,)"]


def test_parse_range_rejects_plain_text():
    with pytest.raises(ValueError):
        parse_range("1.0")


class TestRangeMatching:
    """Matching ranges against published versions."""

    CANDIDATES = ["1.0", "1.5", "1.7.30", "2.0.0", "2.1-SNAPSHOT", "3.0"]

    def test_exclusive_upper_bound(self):
        req = classify("[1.0,2.0)")
        assert matching_versions(req, self.CANDIDATES) == ["1.0", "1.5", "1.7.30"]
        assert pick_highest(req, self.CANDIDATES) == "1.7.30"

    def test_exclusive_lower_bound(self):
        req = classify("(1.0,2.0.0]")
        assert matching_versions(req, self.CANDIDATES) == ["1.5", "1.7.30", "2.0.0"]

    def test_open_upper_bound(self):
        assert pick_highest(classify("[1.5,)"), self.CANDIDATES) == "3.0"

    def test_union(self):
        req = classify("[1.0,1.5],[3.0,)")
        assert matching_versions(req, self.CANDIDATES) == ["1.0", "1.5", "3.0"]

    def test_unparseable_candidates_are_skipped(self):
        assert "2.1-SNAPSHOT" not in matching_versions(classify("[2.0,)"), self.CANDIDATES)

    def test_no_match(self):
        assert pick_highest(classify("[5.0,)"), self.CANDIDATES) is None
