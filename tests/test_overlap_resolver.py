"""
Tests for span value types and overlap pruning.
"""

import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import pytest

from nerc.resolver import MalformedSpanError, OverlapResolver, Span, SpanSource


def no_overlaps(spans):
    return all(
        not a.overlaps(b) for i, a in enumerate(spans) for j, b in enumerate(spans) if i != j
    )


class TestSpan:
    """Span invariants and relations."""

    def test_invalid_interval_rejected(self):
        with pytest.raises(MalformedSpanError):
            Span(3, 3, "PER")
        with pytest.raises(MalformedSpanError):
            Span(4, 2, "PER")
        with pytest.raises(MalformedSpanError):
            Span(-1, 2, "PER")

    def test_malformed_span_is_value_error(self):
        with pytest.raises(ValueError):
            Span(2, 1, "PER")

    def test_check_bounds(self):
        assert Span(0, 2, "PER").check_bounds(2).end == 2
        with pytest.raises(MalformedSpanError):
            Span(1, 4, "PER").check_bounds(3)

    def test_overlaps_is_half_open(self):
        assert Span(0, 3, "A").overlaps(Span(2, 4, "B"))
        assert not Span(0, 2, "A").overlaps(Span(2, 4, "B"))

    def test_contains_includes_equal_endpoints(self):
        outer = Span(0, 3, "MISC")
        assert outer.contains(Span(0, 3, "ORG"))
        assert outer.contains(Span(1, 2, "ORG"))
        assert not outer.contains(Span(2, 4, "ORG"))

    def test_default_source_is_statistical(self):
        assert Span(0, 1, "PER").source is SpanSource.STATISTICAL


class TestPruneOverlaps:
    """Overlap pruning priority rules."""

    def test_empty(self):
        assert OverlapResolver.prune_overlaps([]) == []

    def test_earlier_longer_span_wins_on_equal_priority(self):
        spans = [Span(1, 2, "PER"), Span(0, 3, "ORG")]
        assert OverlapResolver.prune_overlaps(spans) == [Span(0, 3, "ORG")]

    def test_longer_span_wins_at_same_start(self):
        spans = [Span(0, 1, "PER"), Span(0, 2, "PER")]
        assert OverlapResolver.prune_overlaps(spans) == [Span(0, 2, "PER")]

    def test_higher_probability_wins(self):
        spans = [Span(0, 3, "ORG", prob=0.4), Span(2, 4, "LOC", prob=0.9)]
        assert OverlapResolver.prune_overlaps(spans) == [Span(2, 4, "LOC", prob=0.9)]

    def test_label_breaks_remaining_ties(self):
        spans = [Span(0, 2, "PER"), Span(0, 2, "LOC")]
        assert OverlapResolver.prune_overlaps(spans) == [Span(0, 2, "LOC")]

    def test_disjoint_spans_kept_in_start_order(self):
        spans = [Span(5, 6, "LOC"), Span(0, 1, "PER"), Span(2, 4, "ORG")]
        assert OverlapResolver.prune_overlaps(spans) == [
            Span(0, 1, "PER"),
            Span(2, 4, "ORG"),
            Span(5, 6, "LOC"),
        ]

    def test_kept_span_between_neighbours(self):
        # The high-probability middle span blocks both of its neighbours.
        spans = [
            Span(0, 3, "A", prob=0.1),
            Span(2, 6, "B", prob=0.9),
            Span(5, 8, "C", prob=0.2),
            Span(8, 9, "D", prob=0.3),
        ]
        result = OverlapResolver.prune_overlaps(spans)
        assert result == [Span(2, 6, "B", prob=0.9), Span(8, 9, "D", prob=0.3)]

    def test_result_has_no_overlaps_and_is_maximal(self):
        spans = [
            Span(0, 4, "A"),
            Span(1, 2, "B"),
            Span(3, 7, "C"),
            Span(5, 6, "D"),
            Span(6, 9, "E", prob=0.5),
            Span(9, 10, "F"),
        ]
        result = OverlapResolver.prune_overlaps(spans)
        assert no_overlaps(result)
        for span in spans:
            assert span in result or any(span.overlaps(kept) for kept in result)

    def test_idempotent(self):
        spans = [
            Span(0, 3, "ORG"),
            Span(1, 2, "PER"),
            Span(2, 5, "LOC", prob=0.7),
            Span(4, 6, "MISC"),
            Span(4, 6, "MISC"),
        ]
        once = OverlapResolver.prune_overlaps(spans)
        assert OverlapResolver.prune_overlaps(once) == once
