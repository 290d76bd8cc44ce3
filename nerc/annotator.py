"""
Annotator: assembles the name finder for a dictionaries option and tags
tokenized sentences with it.

Dictionaries options:
- off: statistical tagging only
- tag: gazetteer tagging only
- post: statistical tagging post-processed with the gazetteer
"""

import logging
from typing import Iterable, List, Optional, Sequence

from nerc.resolver import (
    FusionPolicy,
    GazetteerMatcher,
    GazetteerNameFinder,
    HybridNameFinder,
    Name,
    NameFinder,
    SequenceTagger,
    StatisticalNameFinder,
)

logger = logging.getLogger(__name__)

DICTIONARY_OPTIONS = ("off", "tag", "post")


class Annotator:
    """Tags sentences with the name finder selected by the options."""

    def __init__(
        self,
        tagger: Optional[SequenceTagger] = None,
        matcher: Optional[GazetteerMatcher] = None,
        dictionaries: str = "off",
        ne_types: Optional[Iterable[str]] = None,
        policy: FusionPolicy = FusionPolicy.PER_SPAN,
    ):
        if dictionaries not in DICTIONARY_OPTIONS:
            raise ValueError(
                f"Unknown dictionaries option '{dictionaries}', expected one of {DICTIONARY_OPTIONS}"
            )
        if dictionaries in ("tag", "post") and matcher is None:
            raise ValueError(f"Dictionaries option '{dictionaries}' requires a gazetteer")
        if dictionaries in ("off", "post") and tagger is None:
            raise ValueError(f"Dictionaries option '{dictionaries}' requires a tagger")

        self.ne_types = frozenset(ne_types) if ne_types is not None else None
        self.name_finder: NameFinder
        if dictionaries == "tag":
            self.name_finder = GazetteerNameFinder(matcher)
        elif dictionaries == "post":
            self.name_finder = HybridNameFinder(tagger, matcher, policy)
        else:
            self.name_finder = StatisticalNameFinder(tagger)
        logger.info(
            "Using %s (dictionaries=%s)", type(self.name_finder).__name__, dictionaries
        )

    def annotate(self, tokens: Sequence[str]) -> List[Name]:
        """Names found in one sentence, filtered by the allowed types."""
        names = self.name_finder.find_names(tokens)
        if self.ne_types is not None:
            names = [n for n in names if n.type in self.ne_types]
        return names

    def annotate_document(self, sentences: Iterable[Sequence[str]]) -> List[List[Name]]:
        """Tag every sentence of a document, then forget document state."""
        results = [self.annotate(tokens) for tokens in sentences]
        self.name_finder.clear_adaptive_data()
        logger.info(
            "Annotated %s sentences, %s names",
            len(results),
            sum(len(r) for r in results),
        )
        return results
