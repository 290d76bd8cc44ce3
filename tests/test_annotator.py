"""
Tests for the name finders and the annotator, end to end with a stub
sequence tagger in place of a trained model.
"""

import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import pytest

from nerc.annotator import Annotator
from nerc.resolver import (
    FusionPolicy,
    Gazetteer,
    GazetteerMatcher,
    GazetteerNameFinder,
    HybridNameFinder,
    Name,
    Span,
    SpanSource,
    StatisticalNameFinder,
)

TOKENS = ["Bank", "of", "America", "reported", "profit"]


class StubTagger:
    """Returns canned spans, like a decoder would."""

    def __init__(self, spans):
        self.spans = list(spans)
        self.cleared = 0

    def decode(self, tokens):
        return list(self.spans)

    def clear_adaptive_data(self):
        self.cleared += 1


@pytest.fixture
def org_matcher():
    with GazetteerMatcher(Gazetteer.from_mapping({"ORG": ["Bank of America"]})) as matcher:
        yield matcher


@pytest.fixture
def empty_matcher():
    with GazetteerMatcher(Gazetteer()) as matcher:
        yield matcher


class TestNameFinders:
    """The three name finder variants."""

    def test_dictionary_wins_inside_statistical_span(self, org_matcher):
        finder = HybridNameFinder(StubTagger([Span(0, 3, "MISC")]), org_matcher)
        names = finder.find_names(TOKENS)
        assert names == [
            Name(
                text="Bank of America",
                type="ORG",
                span=Span(0, 3, "ORG", SpanSource.GAZETTEER),
            )
        ]

    def test_empty_gazetteer_keeps_statistical_names(self, empty_matcher):
        tagger = StubTagger([Span(0, 1, "PER"), Span(2, 4, "LOC")])
        names = HybridNameFinder(tagger, empty_matcher).find_names(TOKENS)
        assert [(n.text, n.type, n.span) for n in names] == [
            ("Bank", "PER", Span(0, 1, "PER")),
            ("America reported", "LOC", Span(2, 4, "LOC")),
        ]

    def test_statistical_spans_pruned(self):
        tagger = StubTagger([Span(1, 2, "PER"), Span(0, 3, "ORG")])
        names = StatisticalNameFinder(tagger).find_names(TOKENS)
        assert [n.span for n in names] == [Span(0, 3, "ORG")]

    def test_statistical_empty_sentence(self):
        assert StatisticalNameFinder(StubTagger([Span(0, 1, "PER")])).find_names([]) == []

    def test_gazetteer_only(self, org_matcher):
        names = GazetteerNameFinder(org_matcher).find_names(TOKENS)
        assert [(n.text, n.type) for n in names] == [("Bank of America", "ORG")]

    def test_gazetteer_overlaps_pruned(self):
        gazetteer = Gazetteer.from_mapping({"ORG": ["Bank of America"], "LOC": ["America"]})
        with GazetteerMatcher(gazetteer) as matcher:
            names = GazetteerNameFinder(matcher).find_names(TOKENS)
        assert [(n.text, n.type) for n in names] == [("Bank of America", "ORG")]

    def test_out_of_bounds_tagger_span(self, org_matcher):
        finder = HybridNameFinder(StubTagger([Span(3, 9, "MISC")]), org_matcher)
        with pytest.raises(ValueError):
            finder.find_names(TOKENS)

    def test_every_dictionary_span_reaches_fusion(self):
        # ORG and LOC overlap each other; only LOC lies inside the tagger span.
        tokens = ["a", "b", "c", "d", "e"]
        gazetteer = Gazetteer.from_mapping({"ORG": ["a b c"], "LOC": ["c d"]})
        with GazetteerMatcher(gazetteer) as matcher:
            finder = HybridNameFinder(StubTagger([Span(2, 5, "MISC")]), matcher)
            spans = finder.find_spans(tokens)
        assert spans == [Span(2, 4, "LOC", SpanSource.GAZETTEER)]

    def test_pairwise_policy(self, org_matcher):
        tagger = StubTagger([Span(0, 3, "MISC")])
        finder = HybridNameFinder(tagger, org_matcher, FusionPolicy.PAIRWISE)
        assert [n.type for n in finder.find_names(TOKENS)] == ["ORG"]

    def test_clear_adaptive_data_reaches_tagger(self, org_matcher):
        tagger = StubTagger([])
        HybridNameFinder(tagger, org_matcher).clear_adaptive_data()
        assert tagger.cleared == 1


class TestAnnotator:
    """Finder selection and type filtering."""

    def test_option_selects_finder(self, org_matcher):
        tagger = StubTagger([])
        assert isinstance(Annotator(tagger=tagger).name_finder, StatisticalNameFinder)
        assert isinstance(
            Annotator(matcher=org_matcher, dictionaries="tag").name_finder, GazetteerNameFinder
        )
        assert isinstance(
            Annotator(tagger=tagger, matcher=org_matcher, dictionaries="post").name_finder,
            HybridNameFinder,
        )

    def test_invalid_options(self, org_matcher):
        with pytest.raises(ValueError):
            Annotator(tagger=StubTagger([]), dictionaries="pre")
        with pytest.raises(ValueError):
            Annotator(dictionaries="tag")
        with pytest.raises(ValueError):
            Annotator(matcher=org_matcher, dictionaries="post")
        with pytest.raises(ValueError):
            Annotator()

    def test_ne_types_filter(self):
        tagger = StubTagger([Span(0, 1, "PER"), Span(2, 3, "LOC")])
        annotator = Annotator(tagger=tagger, ne_types=["LOC"])
        assert [n.type for n in annotator.annotate(TOKENS)] == ["LOC"]

    def test_annotate_document(self, org_matcher):
        tagger = StubTagger([Span(0, 3, "MISC")])
        annotator = Annotator(tagger=tagger, matcher=org_matcher, dictionaries="post")
        results = annotator.annotate_document([TOKENS, ["Bank", "of", "America"]])
        assert [[n.type for n in names] for names in results] == [["ORG"], ["ORG"]]
        assert tagger.cleared == 1
