"""
Span reconciliation: fuses statistical spans with gazetteer spans and turns
the surviving spans into Name objects.
"""

import logging
from enum import Enum
from typing import List, Optional, Sequence

from .core import Name, Span, span_text
from .overlap_resolver import OverlapResolver

logger = logging.getLogger(__name__)


class FusionPolicy(Enum):
    """How a statistical span is compared against the gazetteer spans."""

    # One decision per statistical span: replaced by the gazetteer spans it
    # contains, kept otherwise.
    PER_SPAN = "per-span"
    # One output entry per (statistical, gazetteer) pair, the nested-loop
    # fusion of earlier releases. Can emit the same statistical span repeatedly.
    PAIRWISE = "pairwise"


def concatenate(first: Sequence[Span], second: Sequence[Span]) -> List[Span]:
    """Append the spans of second to those of first, without dedup."""
    all_spans = list(first)
    all_spans.extend(second)
    return all_spans


def check_spans(spans: Sequence[Span], tokens: Sequence[str]) -> None:
    """Raise MalformedSpanError if any span falls outside the token sequence."""
    for span in spans:
        span.check_bounds(len(tokens))


class SpanReconciler:
    """Dictionary-precedence fusion of statistical and gazetteer spans."""

    def __init__(self, policy: FusionPolicy = FusionPolicy.PER_SPAN):
        self.policy = policy

    @staticmethod
    def prune_overlaps(spans: Sequence[Span]) -> List[Span]:
        return OverlapResolver.prune_overlaps(spans)

    def reconcile(
        self,
        pre_list: Sequence[Span],
        post_list: Sequence[Span],
        tokens: Optional[Sequence[str]] = None,
    ) -> List[Span]:
        """
        Fuse statistical spans (pre_list) with gazetteer spans (post_list).

        A statistical span containing a gazetteer span is replaced by it.
        Gazetteer spans outside every statistical span are not added.

        Args:
            pre_list: Pruned spans produced by the statistical tagger
            post_list: Spans produced by the gazetteer matcher
            tokens: When given, every span is checked against its bounds

        Returns:
            The fused span list
        """
        if tokens is not None:
            check_spans(pre_list, tokens)
            check_spans(post_list, tokens)

        if not post_list:
            logger.debug("No dictionary spans in this sentence, keeping statistical spans")
            return list(pre_list)

        if self.policy is FusionPolicy.PAIRWISE:
            return self._fuse_pairwise(pre_list, post_list)
        return self._fuse_per_span(pre_list, post_list)

    @staticmethod
    def _fuse_pairwise(pre_list: Sequence[Span], post_list: Sequence[Span]) -> List[Span]:
        all_spans = []
        for stat_span in pre_list:
            for dict_span in post_list:
                if stat_span.contains(dict_span):
                    logger.debug("Dictionary replacement of %s with %s", stat_span, dict_span)
                    all_spans.append(dict_span)
                else:
                    all_spans.append(stat_span)
        return all_spans

    @staticmethod
    def _fuse_per_span(pre_list: Sequence[Span], post_list: Sequence[Span]) -> List[Span]:
        all_spans: List[Span] = []
        seen = set()
        for stat_span in pre_list:
            inside = [g for g in post_list if stat_span.contains(g)]
            if inside:
                replacements = OverlapResolver.prune_overlaps(inside)
                logger.debug(
                    "Dictionary replacement of %s with %s",
                    stat_span,
                    ", ".join(str(g) for g in replacements),
                )
            else:
                replacements = [stat_span]
            for span in replacements:
                if span not in seen:
                    seen.add(span)
                    all_spans.append(span)
        return all_spans


class NameFactory:
    """Creates Name objects from final spans."""

    @staticmethod
    def create_name(span: Span, tokens: Sequence[str]) -> Name:
        span.check_bounds(len(tokens))
        return Name(text=span_text(span, tokens), type=span.label, span=span)

    @staticmethod
    def create_names(spans: Sequence[Span], tokens: Sequence[str]) -> List[Name]:
        """One Name per span, in ascending start order."""
        ordered = sorted(spans, key=lambda s: s.start)
        return [NameFactory.create_name(span, tokens) for span in ordered]
