"""
Unit tests for issue normalization and merging.

Tests:
- normalize_issue / normalize_issues
- merge_issues (dedup priority, ordering, determinism)
"""

import pytest

from ocrreview.exceptions import MalformedIssue
from ocrreview.issues import merge_issues, normalize_issue, normalize_issues
from ocrreview.models import Issue, IssueKind, IssueSource


def dict_issue(original, suggested, position, kind=IssueKind.SPELLING):
    return Issue(
        kind=kind,
        original=original,
        suggested=suggested,
        source=IssueSource.DICTIONARY,
        position=position,
    )


def ai_issue(original, suggested, kind=IssueKind.SPELLING, position=None):
    return Issue(
        kind=kind,
        original=original,
        suggested=suggested,
        source=IssueSource.MODEL,
        position=position,
    )


# =============================================================================
# Issue model Tests
# =============================================================================


class TestIssue:
    """Tests for the Issue dataclass."""

    def test_empty_original_rejected(self):
        with pytest.raises(MalformedIssue):
            Issue(kind=IssueKind.SPELLING, original="", suggested="x")

    def test_empty_suggested_rejected(self):
        with pytest.raises(MalformedIssue):
            Issue(kind=IssueKind.SPELLING, original="x", suggested="")

    def test_negative_position_rejected(self):
        with pytest.raises(MalformedIssue):
            Issue(kind=IssueKind.SPELLING, original="x", suggested="y", position=-1)

    def test_dedup_key_is_case_insensitive(self):
        a = ai_issue("Recieve", "Receive")
        b = dict_issue("recieve", "receive", 3)
        assert a.dedup_key == b.dedup_key

    def test_to_dict_wire_shape(self, decimal_issue):
        data = decimal_issue.to_dict()
        assert data == {
            "type": "decimal",
            "original": "1,5",
            "suggested": "1.5",
            "description": "decimal comma should be decimal point",
            "source": "AI",
        }

    def test_to_dict_includes_position_when_set(self):
        assert dict_issue("teh", "the", 4).to_dict()["position"] == 4


# =============================================================================
# Normalizer Tests
# =============================================================================


class TestNormalizeIssue:
    """Tests for normalize_issue."""

    def test_full_record(self):
        issue = normalize_issue(
            {
                "type": "spelling",
                "original": "recieve",
                "suggested": "receive",
                "description": "i before e",
                "source": "AI",
            },
            IssueSource.MODEL,
        )
        assert issue.kind is IssueKind.SPELLING
        assert issue.original == "recieve"
        assert issue.suggested == "receive"
        assert issue.description == "i before e"
        assert issue.source is IssueSource.MODEL
        assert issue.position is None

    def test_missing_description_defaults_to_empty(self):
        issue = normalize_issue(
            {"type": "decimal", "original": "1,5", "suggested": "1.5"},
            IssueSource.MODEL,
        )
        assert issue.description == ""

    def test_missing_source_defaults_to_origin(self):
        raw = {"type": "spelling", "original": "teh", "suggested": "the"}
        assert normalize_issue(raw, IssueSource.MODEL).source is IssueSource.MODEL
        assert normalize_issue(raw, IssueSource.DICTIONARY).source is IssueSource.DICTIONARY

    def test_source_aliases(self):
        raw = {"type": "spelling", "original": "teh", "suggested": "the", "source": "Typo.js"}
        assert normalize_issue(raw, IssueSource.MODEL).source is IssueSource.DICTIONARY

    def test_unknown_source_uses_origin(self):
        raw = {"type": "spelling", "original": "teh", "suggested": "the", "source": "magic"}
        assert normalize_issue(raw, IssueSource.MODEL).source is IssueSource.MODEL

    def test_kind_is_case_insensitive(self):
        raw = {"type": "Decimal", "original": "1,5", "suggested": "1.5"}
        assert normalize_issue(raw, IssueSource.MODEL).kind is IssueKind.DECIMAL

    @pytest.mark.parametrize("missing", ["original", "suggested", "type"])
    def test_missing_required_field_raises(self, missing):
        raw = {"type": "spelling", "original": "teh", "suggested": "the"}
        del raw[missing]
        with pytest.raises(MalformedIssue):
            normalize_issue(raw, IssueSource.MODEL)

    def test_blank_original_raises(self):
        with pytest.raises(MalformedIssue):
            normalize_issue(
                {"type": "spelling", "original": "   ", "suggested": "the"},
                IssueSource.MODEL,
            )

    def test_unknown_kind_raises(self):
        with pytest.raises(MalformedIssue):
            normalize_issue(
                {"type": "grammar", "original": "a", "suggested": "b"},
                IssueSource.MODEL,
            )

    def test_non_mapping_raises(self):
        with pytest.raises(MalformedIssue):
            normalize_issue("recieve -> receive", IssueSource.MODEL)

    def test_position_kept_when_valid(self):
        raw = {"type": "spelling", "original": "teh", "suggested": "the", "position": 2}
        assert normalize_issue(raw, IssueSource.MODEL).position == 2

    @pytest.mark.parametrize("bad", [-1, "3", True, 1.5])
    def test_invalid_position_dropped(self, bad):
        raw = {"type": "spelling", "original": "teh", "suggested": "the", "position": bad}
        assert normalize_issue(raw, IssueSource.MODEL).position is None

    def test_issue_passes_through(self, spelling_issue):
        assert normalize_issue(spelling_issue, IssueSource.DICTIONARY) is spelling_issue


class TestNormalizeIssues:
    """Tests for batch normalization."""

    def test_malformed_records_dropped(self):
        raws = [
            {"type": "spelling", "original": "teh", "suggested": "the"},
            {"type": "spelling", "original": "recieve"},  # no suggestion
            None,
            {"type": "decimal", "original": "1,5", "suggested": "1.5"},
        ]
        issues = normalize_issues(raws, IssueSource.MODEL)
        assert [i.original for i in issues] == ["teh", "1,5"]

    def test_empty_batch(self):
        assert normalize_issues([], IssueSource.MODEL) == []


# =============================================================================
# Merger Tests
# =============================================================================


class TestMergeIssues:
    """Tests for merge_issues."""

    def test_dictionary_only(self):
        """A lone dictionary issue survives with its position."""
        merged = merge_issues([], [dict_issue("recieve", "receive", 3)])

        assert len(merged) == 1
        assert merged[0].kind is IssueKind.SPELLING
        assert merged[0].source is IssueSource.DICTIONARY
        assert merged[0].position == 3

    def test_ai_wins_duplicate(self):
        """Same original and kind from both sources keeps only the AI entry."""
        ai = [ai_issue("recieve", "receive")]
        typo = [dict_issue("recieve", "receive", 3)]

        merged = merge_issues(ai, typo)

        assert len(merged) == 1
        assert merged[0].source is IssueSource.MODEL

    def test_duplicate_match_ignores_case(self):
        merged = merge_issues(
            [ai_issue("Recieve", "Receive")], [dict_issue("recieve,", "receive,", 1)]
        )
        # Trailing punctuation makes the originals differ
        assert len(merged) == 2

        merged = merge_issues(
            [ai_issue("RECIEVE", "RECEIVE")], [dict_issue("recieve", "receive", 1)]
        )
        assert len(merged) == 1

    def test_same_original_different_kind_not_duplicate(self):
        ai = [ai_issue("1,5", "1.5", kind=IssueKind.DECIMAL)]
        typo = [dict_issue("1,5", "1.5", 0, kind=IssueKind.SPELLING)]
        assert len(merge_issues(ai, typo)) == 2

    def test_decimal_issue_with_clean_dictionary(self, decimal_issue):
        """'Total: 1,5 kg' with one model decimal issue and no typos."""
        merged = merge_issues([decimal_issue], [])
        assert merged == (decimal_issue,)

    def test_positioned_sorted_ascending(self):
        typo = [
            dict_issue("wrld", "world", 9),
            dict_issue("teh", "the", 2),
            dict_issue("recieve", "receive", 5),
        ]
        merged = merge_issues([], typo)
        assert [i.position for i in merged] == [2, 5, 9]

    def test_positionless_after_positioned_by_kind(self):
        ai = [
            ai_issue("recieve", "receive"),
            ai_issue("1,5", "1.5", kind=IssueKind.DECIMAL),
        ]
        typo = [dict_issue("teh", "the", 7), dict_issue("wrld", "world", 1)]

        merged = merge_issues(ai, typo)

        assert [i.original for i in merged] == ["wrld", "teh", "1,5", "recieve"]

    def test_positionless_same_kind_keep_input_order(self):
        ai = [ai_issue("b", "bb"), ai_issue("a", "aa")]
        merged = merge_issues(ai, [])
        assert [i.original for i in merged] == ["b", "a"]

    def test_duplicate_misspellings_in_one_source_kept(self):
        """Known approximation: dedup only runs across sources."""
        typo = [dict_issue("teh", "the", 1), dict_issue("teh", "the", 8)]
        assert len(merge_issues([], typo)) == 2

    def test_unrelated_identical_misspellings_collapse_across_sources(self):
        """Known approximation: one AI 'teh' hides every dictionary 'teh'."""
        ai = [ai_issue("teh", "the")]
        typo = [dict_issue("teh", "the", 1), dict_issue("teh", "the", 8)]
        merged = merge_issues(ai, typo)
        assert len(merged) == 1
        assert merged[0].source is IssueSource.MODEL

    def test_result_is_immutable_tuple(self):
        assert isinstance(merge_issues([], []), tuple)

    def test_deterministic(self):
        ai = [ai_issue("recieve", "receive"), ai_issue("1,5", "1.5", kind=IssueKind.DECIMAL)]
        typo = [dict_issue("teh", "the", 4), dict_issue("recieve", "receive", 2)]
        assert merge_issues(ai, typo) == merge_issues(list(ai), list(typo))

    def test_inputs_not_mutated(self):
        ai = [ai_issue("b", "bb", position=5), ai_issue("a", "aa", position=1)]
        typo = [dict_issue("c", "cc", 0)]
        merge_issues(ai, typo)
        assert [i.original for i in ai] == ["b", "a"]
        assert len(typo) == 1

    def test_adjacent_positions_non_decreasing(self):
        ai = [ai_issue("x", "y", position=4), ai_issue("q", "r")]
        typo = [dict_issue(f"w{i}", f"v{i}", p) for i, p in enumerate([9, 0, 4, 2])]
        merged = merge_issues(ai, typo)
        positions = [i.position for i in merged if i.position is not None]
        assert positions == sorted(positions)
        assert merged[-1].position is None
