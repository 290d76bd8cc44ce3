"""
Overlap resolution for the NERC resolver.

Selects a maximal subset of non-overlapping spans from a set of candidates,
the same non-overlap selection the sequence tagger applies to its own raw
candidate spans.
"""

import bisect
import logging
from typing import List, Sequence

from .core import Span

logger = logging.getLogger(__name__)


class OverlapResolver:
    """Handles overlap pruning of candidate spans."""

    @staticmethod
    def priority_key(span: Span):
        """
        Sort key implementing the priority rules (highest first).

        1. Probability (higher wins; spans without one rank equal)
        2. Start index (earlier wins)
        3. Span length (longer wins)
        4. Alphabetical label
        """
        prob = span.prob if span.prob is not None else 0.0
        return (-prob, span.start, -span.length, span.label)

    @staticmethod
    def prune_overlaps(spans: Sequence[Span]) -> List[Span]:
        """
        Resolve overlapping spans using the priority rules.

        Spans are visited in priority order and kept unless they overlap a
        span already kept. Every dropped span overlaps a kept one, so the
        result is maximal, and applying the pruning again is a no-op.

        Args:
            spans: Candidate spans, possibly overlapping

        Returns:
            Non-overlapping spans ordered by start index
        """
        if not spans:
            return []

        kept_starts: List[int] = []
        kept: List[Span] = []
        for span in sorted(spans, key=OverlapResolver.priority_key):
            i = bisect.bisect_left(kept_starts, span.start)
            # Kept spans are disjoint, so only the neighbours can overlap.
            if i > 0 and kept[i - 1].overlaps(span):
                continue
            if i < len(kept) and kept[i].overlaps(span):
                continue
            kept_starts.insert(i, span.start)
            kept.insert(i, span)

        logger.info("Overlap pruning: %s -> %s spans", len(spans), len(kept))
        return kept
