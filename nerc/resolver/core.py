"""
Core data structures for the NERC resolver.

Contains the span and name value types shared by the matcher, the
reconciler and the name finders, together with the error kinds they raise.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence


class NercError(Exception):
    """Base class for all errors raised by the NERC components."""


class ConfigurationError(NercError, ValueError):
    """A parameters file or a range string could not be parsed."""


class MalformedSpanError(NercError, ValueError):
    """A span interval violates 0 <= start < end <= len(tokens)."""


class MissingDictionary(UserWarning):
    """A configured dictionary has no entries and was skipped."""


class SpanSource(Enum):
    """Where a span came from."""

    GAZETTEER = "gazetteer"
    STATISTICAL = "statistical"


@dataclass(frozen=True)
class Span:
    """A half-open token interval [start, end) with a label and provenance."""

    start: int
    end: int
    label: str
    source: SpanSource = SpanSource.STATISTICAL
    prob: Optional[float] = None

    def __post_init__(self):
        if not isinstance(self.start, int) or not isinstance(self.end, int):
            raise MalformedSpanError(
                f"Span bounds must be integers: [{self.start!r}, {self.end!r})"
            )
        if self.start < 0 or self.start >= self.end:
            raise MalformedSpanError(f"Invalid span [{self.start}, {self.end})")

    @property
    def length(self) -> int:
        return self.end - self.start

    def overlaps(self, other: "Span") -> bool:
        return self.start < other.end and other.start < self.end

    def contains(self, other: "Span") -> bool:
        """True if other lies inside this span, equal endpoints included."""
        return self.start <= other.start and other.end <= self.end

    def check_bounds(self, num_tokens: int) -> "Span":
        if self.end > num_tokens:
            raise MalformedSpanError(
                f"Span [{self.start}, {self.end}) exceeds sentence of {num_tokens} tokens"
            )
        return self

    def __str__(self) -> str:
        return f"[{self.start}..{self.end}) {self.label}"


@dataclass(frozen=True)
class Name:
    """A named entity mention: surface text, entity type and its span."""

    text: str
    type: str
    span: Span

    def to_dict(self) -> dict:
        return {
            "text": self.text,
            "type": self.type,
            "start": self.span.start,
            "end": self.span.end,
        }


def span_text(span: Span, tokens: Sequence[str]) -> str:
    """Surface form of a span: its tokens joined by single spaces."""
    return " ".join(tokens[span.start : span.end])
