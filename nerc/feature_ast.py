from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Mapping, Tuple, Union

from nerc.params_ast import DEFAULT_FEATURE_FLAG, Range, TrainingParams, parse_range

DEFAULT_WINDOW = "2:2"
CHAR_NGRAM_RANGE = "2:5"

# Package holding the feature generator classes of the sequence tagger.
GENERATOR_PACKAGE = "es.ehu.si.ixa.pipe.nerc.features"

# === Feature generator kinds ===


class FeatureKind(Enum):
    """Feature generator families, in descriptor order."""

    TOKEN = "TokenFeatureGenerator"
    TOKEN_CLASS = "TokenClassFeatureGenerator"
    OUTCOME_PRIOR = "OutcomePriorFeatureGenerator"
    PREVIOUS_MAP = "PreviousMapFeatureGenerator"
    SENTENCE = "SentenceFeatureGenerator"
    PREFIX = "Prefix34FeatureGenerator"
    SUFFIX = "SuffixFeatureGenerator"
    BIGRAM_CLASS = "BigramClassFeatureGenerator"
    TRIGRAM_CLASS = "TrigramClassFeatureGenerator"
    FOURGRAM_CLASS = "FourgramClassFeatureGenerator"
    FIVEGRAM_CLASS = "FivegramClassFeatureGenerator"
    CHAR_NGRAM = "CharacterNgramFeatureGenerator"

    @property
    def class_name(self) -> str:
        return f"{GENERATOR_PACKAGE}.{self.value}"


# === Pipeline description nodes ===


class Node:
    """Base class for all pipeline description nodes."""

    pass


@dataclass(frozen=True)
class Custom(Node):
    """Leaf feature generator with its static attributes."""

    kind: FeatureKind
    attributes: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Window(Node):
    """Applies its child generator to the surrounding tokens too."""

    child: Node
    prev_length: int
    next_length: int


@dataclass(frozen=True)
class Generators(Node):
    """Ordered aggregate of generator nodes."""

    children: Tuple[Node, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Cache(Node):
    """Caches the features produced by its child."""

    child: Node


# === Feature toggle set ===

# Parameters file key and camelCase name of every toggle.
TOGGLE_KEYS = {
    "token": ("TokenFeatures", "tokenFeature"),
    "token_class": ("TokenClassFeatures", "tokenClassFeature"),
    "outcome_prior": ("OutcomePriorFeatures", "outcomePriorFeature"),
    "previous_map": ("PreviousMapFeatures", "previousMapFeature"),
    "sentence": ("SentenceFeatures", "sentenceFeature"),
    "prefix": ("PrefixFeatures", "prefixFeature"),
    "suffix": ("SuffixFeatures", "suffixFeature"),
    "bigram_class": ("BigramClassFeatures", "bigramClassFeature"),
    "trigram_class": ("TrigramClassFeatures", "trigramClassFeature"),
    "fourgram_class": ("FourgramClassFeatures", "fourgramClassFeature"),
    "fivegram_class": ("FivegramClassFeatures", "fivegramClassFeature"),
    "char_ngram": ("CharNgramFeatures", "charNgramFeature"),
}
WINDOW_KEYS = ("Window", "window")
CHAR_NGRAM_RANGE_KEYS = ("CharNgramFeaturesRange", "charNgramRange")


def is_enabled(value: Union[str, bool, None]) -> bool:
    """A toggle is enabled unless absent, False or the "no" sentinel."""
    if value is None or value is False:
        return False
    if value is True:
        return True
    return str(value).strip().lower() != DEFAULT_FEATURE_FLAG


def _lookup(mapping: Mapping, keys, default=None):
    for key in keys:
        if key in mapping:
            return mapping[key]
    return default


@dataclass(frozen=True)
class FeatureConfig:
    """
    Feature toggles with their window and character n-gram ranges.

    Both ranges are parsed when the config is created, so a malformed range
    fails at configuration time and the builder never re-parses them.
    """

    token: bool = False
    token_class: bool = False
    outcome_prior: bool = False
    previous_map: bool = False
    sentence: bool = False
    prefix: bool = False
    suffix: bool = False
    bigram_class: bool = False
    trigram_class: bool = False
    fourgram_class: bool = False
    fivegram_class: bool = False
    char_ngram: bool = False
    window: Range = field(default_factory=lambda: parse_range(DEFAULT_WINDOW))
    char_ngram_range: Range = field(
        default_factory=lambda: parse_range(CHAR_NGRAM_RANGE, ordered=True)
    )

    @classmethod
    def from_mapping(cls, mapping: Mapping) -> "FeatureConfig":
        """
        Build a config from a mapping of toggles.

        Keys may be the parameters file names ("TokenFeatures", "Window") or
        the camelCase names ("tokenFeature", "window").

        Raises:
            ConfigurationError: If the window or the n-gram range is malformed.
        """
        toggles = {
            name: is_enabled(_lookup(mapping, keys)) for name, keys in TOGGLE_KEYS.items()
        }
        window = parse_range(str(_lookup(mapping, WINDOW_KEYS, DEFAULT_WINDOW)))
        char_ngram_range = parse_range(
            str(_lookup(mapping, CHAR_NGRAM_RANGE_KEYS, CHAR_NGRAM_RANGE)), ordered=True
        )
        return cls(window=window, char_ngram_range=char_ngram_range, **toggles)

    @classmethod
    def from_params(cls, params: TrainingParams) -> "FeatureConfig":
        return cls.from_mapping(params.settings)

    def enabled(self) -> Tuple[str, ...]:
        """Names of the enabled toggles, in descriptor order."""
        return tuple(
            f.name for f in fields(self) if f.name in TOGGLE_KEYS and getattr(self, f.name)
        )
