"""
NERC resolver package - span level entity detection components.

- core: Span and Name value types, error kinds
- dictionary: Dictionary and Gazetteer stores
- gazetteer_matcher: exact token matching with omega_match
- overlap_resolver: overlap pruning
- span_reconciler: dictionary-precedence fusion and Name creation
- name_finder: statistical, gazetteer and hybrid name finders
"""

from .core import (
    ConfigurationError,
    MalformedSpanError,
    MissingDictionary,
    Name,
    NercError,
    Span,
    SpanSource,
)
from .dictionary import Dictionary, Gazetteer
from .gazetteer_matcher import GazetteerMatcher
from .name_finder import (
    GazetteerNameFinder,
    HybridNameFinder,
    NameFinder,
    SequenceTagger,
    StatisticalNameFinder,
)
from .overlap_resolver import OverlapResolver
from .span_reconciler import FusionPolicy, NameFactory, SpanReconciler, concatenate

__all__ = [
    "ConfigurationError",
    "MalformedSpanError",
    "MissingDictionary",
    "NercError",
    "Name",
    "Span",
    "SpanSource",
    "Dictionary",
    "Gazetteer",
    "GazetteerMatcher",
    "OverlapResolver",
    "FusionPolicy",
    "NameFactory",
    "SpanReconciler",
    "concatenate",
    "NameFinder",
    "SequenceTagger",
    "StatisticalNameFinder",
    "GazetteerNameFinder",
    "HybridNameFinder",
]
