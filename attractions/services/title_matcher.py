"""
Approximate duplicate lookup over cached attraction titles.

Similarity is the Dice coefficient over character bigrams:

    2 * |bigrams(a) ∩ bigrams(b)| / (|bigrams(a)| + |bigrams(b)|)

where the intersection is taken over multisets, so a bigram repeated in
one string only matches as many times as it occurs in the other.

Inputs are expected to be normalized ids (see normalizer.to_id); the
comparison itself is case- and accent-sensitive.
"""

import logging
from collections import Counter
from typing import Iterable

from ..config import Config
from ..models.records import Title

logger = logging.getLogger(__name__)


def _bigrams(value: str) -> list[str]:
    """All length-2 substrings in order; empty for inputs shorter than 2."""
    return [value[i:i + 2] for i in range(len(value) - 1)]


def similarity(a: str, b: str) -> float:
    """
    Similarity between two ids in [0, 1].

    Identical strings score 1.0. Strings without enough bigrams to
    compare (a non-positive denominator) score 0.0.
    """
    if a == b:
        return 1.0

    denominator = len(a) + len(b) - 2
    if denominator <= 0:
        return 0.0

    remaining = Counter(_bigrams(a))
    intersection = 0
    for bigram in _bigrams(b):
        if remaining[bigram] > 0:
            remaining[bigram] -= 1
            intersection += 1

    return 2.0 * intersection / denominator


def find_similar(
    query_id: str,
    titles: Iterable[Title],
    threshold: float = Config.MATCH_THRESHOLD,
) -> list[str]:
    """
    Display names of titles similar enough to the query id.

    Args:
        query_id: Normalized id of the name being checked
        titles: Cached titles, matched in their stored order
        threshold: Minimum similarity to count as a match

    Returns:
        Matching display names, in title order
    """
    matches = [
        title.display
        for title in titles
        if similarity(query_id, title.compare) >= threshold
    ]
    logger.debug(f"Title lookup '{query_id}': {len(matches)} match(es)")
    return matches
