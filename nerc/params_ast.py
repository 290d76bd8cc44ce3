import re
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Dict, Optional, Tuple

from nerc.resolver.core import ConfigurationError

# Sentinel value that disables a feature or an option.
DEFAULT_FEATURE_FLAG = "no"
DEFAULT_OPTION = "off"
DEFAULT_BEAM_SIZE = 3

# Two integer fields separated by one space, colon or hyphen.
RE_RANGE = re.compile(r"^(\d+)[ :\-](\d+)$")


@dataclass(frozen=True)
class Range:
    """A pair of integers parsed from a "<lo>:<hi>" string."""

    lo: int
    hi: int

    def __str__(self) -> str:
        return f"{self.lo}:{self.hi}"


@lru_cache(maxsize=64)
def parse_range(text: str, *, ordered: bool = False) -> Range:
    """
    Parse a range string such as "2:2", "3 1" or "2-5".

    Args:
        text: The range string
        ordered: Require lo <= hi

    Raises:
        ConfigurationError: If the string does not hold exactly two integer
            fields, or the fields are out of order when ordered is set.
    """
    m = RE_RANGE.match(text.strip()) if isinstance(text, str) else None
    if not m:
        raise ConfigurationError(
            f"Invalid range '{text}': expected two integers separated by ' ', ':' or '-'"
        )
    value = Range(int(m.group(1)), int(m.group(2)))
    if ordered and value.lo > value.hi:
        raise ConfigurationError(f"Invalid range '{text}': {value.lo} > {value.hi}")
    return value


@dataclass(frozen=True)
class TrainingParams:
    """Settings read from a training-parameters file."""

    settings: Dict[str, str] = field(default_factory=dict)
    path: Optional[str] = None

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self.settings.get(key, default)

    def feature_value(self, key: str) -> str:
        """Value of a feature toggle; an absent toggle reads as disabled."""
        return self.settings.get(key, DEFAULT_FEATURE_FLAG)

    @property
    def language(self) -> Optional[str]:
        return self.settings.get("Language")

    @property
    def corpus_format(self) -> Optional[str]:
        return self.settings.get("Corpus")

    @property
    def ne_types(self) -> Optional[Tuple[str, ...]]:
        """Entity types to keep, or None when every type is kept."""
        value = self.settings.get("Types", DEFAULT_OPTION)
        if value.lower() == DEFAULT_OPTION:
            return None
        return tuple(t.strip() for t in value.split(",") if t.strip())

    @property
    def beam_size(self) -> int:
        value = self.settings.get("Beamsize")
        if value is None:
            return DEFAULT_BEAM_SIZE
        try:
            return int(value)
        except ValueError as e:
            raise ConfigurationError(f"Invalid Beamsize '{value}'") from e

    @property
    def cross_eval(self) -> Optional[Range]:
        value = self.settings.get("CrossEval")
        if value is None or value.lower() in (DEFAULT_OPTION, DEFAULT_FEATURE_FLAG):
            return None
        return parse_range(value)
