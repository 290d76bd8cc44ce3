"""
Name finders: the statistical, gazetteer and hybrid entity detectors.

All variants share the NameFinder interface; the hybrid variant composes
the other two through the SpanReconciler.
"""

import logging
from abc import ABC, abstractmethod
from typing import List, Protocol, Sequence

from .core import Name, Span
from .gazetteer_matcher import GazetteerMatcher
from .overlap_resolver import OverlapResolver
from .span_reconciler import FusionPolicy, NameFactory, SpanReconciler

logger = logging.getLogger(__name__)


class SequenceTagger(Protocol):
    """The external statistical tagger, seen through its decoding call."""

    def decode(self, tokens: Sequence[str]) -> List[Span]:
        ...


class NameFinder(ABC):
    """Detects named entities in one tokenized sentence."""

    @abstractmethod
    def find_spans(self, tokens: Sequence[str]) -> List[Span]:
        """Return the final, non-overlapping spans for tokens."""

    def find_names(self, tokens: Sequence[str]) -> List[Name]:
        return NameFactory.create_names(self.find_spans(tokens), tokens)

    def clear_adaptive_data(self):
        """Forget document-level state; the default finders keep none."""


class StatisticalNameFinder(NameFinder):
    """Names from the statistical tagger only."""

    def __init__(self, tagger: SequenceTagger):
        self.tagger = tagger

    def find_spans(self, tokens: Sequence[str]) -> List[Span]:
        if not tokens:
            return []
        return OverlapResolver.prune_overlaps(self.tagger.decode(tokens))

    def clear_adaptive_data(self):
        clear = getattr(self.tagger, "clear_adaptive_data", None)
        if clear is not None:
            clear()


class GazetteerNameFinder(NameFinder):
    """Names from exact dictionary matches only."""

    def __init__(self, matcher: GazetteerMatcher):
        self.matcher = matcher

    def find_spans(self, tokens: Sequence[str]) -> List[Span]:
        return OverlapResolver.prune_overlaps(self.matcher.match(tokens))


class HybridNameFinder(NameFinder):
    """
    Statistical names post-processed with the gazetteer.

    Dictionary spans found inside a statistical span replace it.
    """

    def __init__(
        self,
        tagger: SequenceTagger,
        matcher: GazetteerMatcher,
        policy: FusionPolicy = FusionPolicy.PER_SPAN,
    ):
        self.statistical = StatisticalNameFinder(tagger)
        self.gazetteer = GazetteerNameFinder(matcher)
        self.reconciler = SpanReconciler(policy)

    def find_spans(self, tokens: Sequence[str]) -> List[Span]:
        pre_list = self.statistical.find_spans(tokens)
        post_list = self.gazetteer.matcher.match(tokens)
        return self.reconciler.reconcile(pre_list, post_list, tokens)

    def clear_adaptive_data(self):
        self.statistical.clear_adaptive_data()
