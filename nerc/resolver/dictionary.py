"""
Dictionary store for gazetteer based entity detection.

A Dictionary is an immutable set of token sequences sharing one entity
label. A Gazetteer is an ordered collection of dictionaries; the order is
significant because the matcher walks the dictionaries in this order.
"""

import logging
import warnings
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, FrozenSet, Iterable, Optional, Tuple

from .core import MissingDictionary

logger = logging.getLogger(__name__)

DEFAULT_TYPE = "MISC"


def _tokenize_entry(entry: str) -> Tuple[str, ...]:
    return tuple(entry.split())


@dataclass(frozen=True)
class Dictionary:
    """A labeled word list; each entry is a tuple of tokens."""

    label: str
    entries: FrozenSet[Tuple[str, ...]]

    @classmethod
    def from_entries(
        cls, entries: Iterable[str], label: str = DEFAULT_TYPE
    ) -> "Dictionary":
        """Build a dictionary from whitespace-tokenized entry strings."""
        tokenized = frozenset(
            tokens for tokens in (_tokenize_entry(e) for e in entries) if tokens
        )
        return cls(label=label, entries=tokenized)

    @classmethod
    def from_file(cls, path, label: Optional[str] = None) -> "Dictionary":
        """
        Load a dictionary file, one entry per line.

        Blank lines and lines starting with '#' are skipped. The label
        defaults to the upper-cased file stem.
        """
        path = Path(path)
        with open(path, "r", encoding="utf-8") as f:
            lines = [
                line.strip()
                for line in f
                if line.strip() and not line.lstrip().startswith("#")
            ]
        dictionary = cls.from_entries(lines, label or path.stem.upper())
        logger.debug(
            "Loaded dictionary %s from %s (%s entries)",
            dictionary.label,
            path,
            len(dictionary),
        )
        return dictionary

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, tokens) -> bool:
        return tuple(tokens) in self.entries


class Gazetteer:
    """Ordered collection of dictionaries used for exact-match detection."""

    def __init__(self, dictionaries: Iterable[Dictionary] = ()):
        kept = []
        for dictionary in dictionaries:
            if not dictionary.entries:
                message = f"Dictionary '{dictionary.label}' has no entries; skipping it"
                logger.warning("%s", message)
                warnings.warn(message, MissingDictionary, stacklevel=2)
                continue
            kept.append(dictionary)
        self.gazetteer_list: Tuple[Dictionary, ...] = tuple(kept)

    @classmethod
    def from_mapping(cls, mapping: Dict[str, Iterable[str]]) -> "Gazetteer":
        """Build a gazetteer from {label: entries}, keeping mapping order."""
        return cls(
            Dictionary.from_entries(entries, label) for label, entries in mapping.items()
        )

    @classmethod
    def from_directory(cls, path) -> "Gazetteer":
        """Load every *.txt file of a directory as one dictionary, in name order."""
        directory = Path(path)
        if not directory.is_dir():
            raise FileNotFoundError(f"Dictionary directory not found: {directory}")
        files = sorted(directory.glob("*.txt"))
        if not files:
            message = f"No dictionary files found in {directory}"
            logger.warning("%s", message)
            warnings.warn(message, MissingDictionary, stacklevel=2)
        return cls(Dictionary.from_file(p) for p in files)

    @property
    def labels(self) -> Tuple[str, ...]:
        return tuple(d.label for d in self.gazetteer_list)

    def __iter__(self):
        return iter(self.gazetteer_list)

    def __len__(self) -> int:
        return len(self.gazetteer_list)
