"""
Gazetteer matching over token sequences.

Each dictionary of a gazetteer is compiled into an omega_match pattern file.
A token sequence is matched as its space-joined UTF-8 text and the hits are
mapped back to token indices; hits that do not start and end on token
boundaries, or whose tokens differ from the entry, are discarded, so entries
only match by exact token equality.
"""

import logging
import os
import shutil
import tempfile
from contextlib import ExitStack
from typing import Dict, List, Optional, Sequence, Tuple

from omega_match.omega_match import Compiler, Matcher

from .core import Span, SpanSource
from .dictionary import Dictionary, Gazetteer

logger = logging.getLogger(__name__)


def _token_offsets(tokens: Sequence[str]) -> Tuple[bytes, Dict[int, int], Dict[int, int]]:
    """
    Encode tokens as one haystack and index the token boundaries.

    Returns:
        The haystack, a map from byte offset of a token start to the token
        index, and a map from byte offset of a token end to the exclusive
        token index.
    """
    starts: Dict[int, int] = {}
    ends: Dict[int, int] = {}
    encoded = [token.encode("utf-8") for token in tokens]
    offset = 0
    for i, token in enumerate(encoded):
        starts[offset] = i
        offset += len(token)
        ends[offset] = i + 1
        offset += 1  # separator
    return b" ".join(encoded), starts, ends


class GazetteerMatcher:
    """
    Finds dictionary entries in token sequences.

    The matcher owns the compiled pattern files of its gazetteer; use it as a
    context manager or call close() to release them.
    """

    def __init__(self, gazetteer: Gazetteer):
        self.gazetteer = gazetteer
        self._workdir = tempfile.mkdtemp(prefix="nerc-gazetteer-")
        self._stack = ExitStack()
        self._matchers: List[Tuple[Dictionary, object]] = []
        try:
            for index, dictionary in enumerate(gazetteer):
                self._matchers.append(
                    (dictionary, self._compile_dictionary(index, dictionary))
                )
        except Exception:
            self.close()
            raise
        logger.info("Compiled %s dictionaries for gazetteer matching", len(self._matchers))

    def _compile_dictionary(self, index: int, dictionary: Dictionary):
        patterns_path = os.path.join(self._workdir, f"{index}.txt")
        compiled_path = os.path.join(self._workdir, f"{index}.omg")
        with open(patterns_path, "w", encoding="utf-8", newline="\n") as f:
            for entry in sorted(dictionary.entries):
                f.write(" ".join(entry))
                f.write("\n")
        try:
            Compiler.compile_from_filename(
                compiled_file=compiled_path,
                patterns_file=patterns_path,
                case_insensitive=False,
                ignore_punctuation=False,
                elide_whitespace=False,
            )
        except Exception as e:
            raise RuntimeError(
                f"Failed to compile dictionary '{dictionary.label}': {e}"
            ) from e
        return self._stack.enter_context(
            Matcher(
                compiled_path,
                case_insensitive=False,
                ignore_punctuation=False,
                elide_whitespace=False,
            )
        )

    def match(self, tokens: Sequence[str]) -> List[Span]:
        """
        Detect gazetteer entities in a token sequence.

        Every dictionary contributes at most one span: the lowest-start
        occurrence of any of its entries, the longer entry winning at equal
        start.

        Args:
            tokens: The tokens of one sentence

        Returns:
            Spans labeled with their dictionary label, in dictionary order
        """
        if not tokens:
            return []

        haystack, starts, ends = _token_offsets(tokens)
        spans = []
        for dictionary, matcher in self._matchers:
            best = self._first_token_match(
                matcher, dictionary, tokens, haystack, starts, ends
            )
            if best is not None:
                span = Span(best[0], best[1], dictionary.label, SpanSource.GAZETTEER)
                logger.debug("Dictionary %s matched %s", dictionary.label, span)
                spans.append(span)
        return spans

    @staticmethod
    def _first_token_match(
        matcher,
        dictionary: Dictionary,
        tokens: Sequence[str],
        haystack: bytes,
        starts: Dict[int, int],
        ends: Dict[int, int],
    ) -> Optional[Tuple[int, int]]:
        best: Optional[Tuple[int, int]] = None
        results = matcher.match(
            haystack,
            no_overlap=False,
            longest_only=False,
            word_boundary=False,
        )
        for result in results:
            start = starts.get(result.offset)
            end = ends.get(result.offset + len(result.match))
            if start is None or end is None:
                continue
            # Byte hits can cross a space inside a token
            if tuple(tokens[start:end]) not in dictionary.entries:
                continue
            if best is None or (start, -end) < (best[0], -best[1]):
                best = (start, end)
        return best

    def close(self):
        self._stack.close()
        self._matchers = []
        shutil.rmtree(self._workdir, ignore_errors=True)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
