"""Hamming distance and distance-ordered ranking of fingerprints."""

from __future__ import annotations

import heapq
from typing import Iterable, Sequence

from ..errors import ConfigurationError, LengthMismatchError
from ..io.models import CorpusEntry, Fingerprint, RankedResult

DEFAULT_TOP_K: int = 12
DEFAULT_MATCH_THRESHOLD: int = 10


def hamming_distance(a: Fingerprint, b: Fingerprint) -> int:
    """Return the number of bit positions at which *a* and *b* differ."""
    if len(a) != len(b):
        raise LengthMismatchError(len(a), len(b))
    xor = a.to_int() ^ b.to_int()
    return xor.bit_count()


def is_match(a: Fingerprint, b: Fingerprint, threshold: int = DEFAULT_MATCH_THRESHOLD) -> bool:
    """Return True when *a* and *b* are within *threshold* differing bits."""
    return hamming_distance(a, b) <= threshold


def check_unique_identifiers(corpus: Iterable[CorpusEntry]) -> None:
    """Raise ConfigurationError if any identifier appears more than once."""
    seen: set[str] = set()
    for entry in corpus:
        if entry.identifier in seen:
            raise ConfigurationError(f"Duplicate corpus identifier: {entry.identifier!r}")
        seen.add(entry.identifier)


def score_corpus(query: Fingerprint, corpus: Sequence[CorpusEntry]) -> list[RankedResult]:
    """Return one result per corpus entry, in corpus order."""
    check_unique_identifiers(corpus)
    return [
        RankedResult(entry.identifier, entry.fingerprint, hamming_distance(query, entry.fingerprint))
        for entry in corpus
    ]


def rank(
    query: Fingerprint,
    corpus: Sequence[CorpusEntry],
    k: int | None = None,
) -> list[RankedResult]:
    """Return corpus entries ordered by ascending distance to *query*.

    Ties keep their corpus order. With *k* only the first *k* results are
    returned; ``heapq.nsmallest`` is equivalent to ``sorted(...)[:k]`` for a
    key function, so the truncated order matches the full stable sort.
    """
    if k is not None and k < 0:
        raise ValueError("k must be a non-negative integer")

    scored = score_corpus(query, corpus)
    if k is None or k >= len(scored):
        return sorted(scored, key=lambda result: result.distance)
    return heapq.nsmallest(k, scored, key=lambda result: result.distance)


def within_distance(
    query: Fingerprint,
    corpus: Sequence[CorpusEntry],
    max_distance: int,
) -> list[RankedResult]:
    """Return ranked results no further than *max_distance* from *query*."""
    if max_distance < 0:
        return []
    return [result for result in rank(query, corpus) if result.distance <= max_distance]
