# @TASK S1-T1.1 - Trigram similarity scorer
# @TEST tests/test_similarity.py

"""Typo-tolerant string similarity.

Trigram extraction mirrors PostgreSQL ``pg_trgm``: the text is lowercased,
split into words on non-alphanumeric characters, and every word is padded
with two spaces in front and one behind before 3-character shingles are
taken. Similarity is the Jaccard ratio of the two trigram sets, so
``"typescirpt"`` still scores close to ``"typescript"``.

Trigram ratios are unstable for very short strings (``"job"`` against a
paragraph mentioning "job" scores near zero), so when either side is at or
below ``short_length`` characters a case-insensitive substring containment
of the query in the target scores a full match.
"""

from __future__ import annotations

import re

SHORT_STRING_LENGTH = 10

_WORD_RE = re.compile(r"[^\W_]+")


def trigrams(text: str) -> frozenset[str]:
    """Return the pg_trgm-style trigram set of *text*."""
    grams: set[str] = set()
    for word in _WORD_RE.findall(text.lower()):
        padded = f"  {word} "
        grams.update(padded[i : i + 3] for i in range(len(padded) - 2))
    return frozenset(grams)


def trigram_similarity(left: str, right: str) -> float:
    """Jaccard similarity of the trigram sets of *left* and *right*."""
    left_grams = trigrams(left)
    right_grams = trigrams(right)
    if not left_grams or not right_grams:
        return 0.0
    union = left_grams | right_grams
    return len(left_grams & right_grams) / len(union)


def similarity(query: str | None, target: str | None, short_length: int = SHORT_STRING_LENGTH) -> float:
    """Score how well *target* matches *query*, in ``[0.0, 1.0]``.

    Returns 0.0 when either side is missing or blank. When either stripped
    string is ``short_length`` characters or shorter, containment of the
    query in the target scores 1.0; otherwise (and for short strings that
    are not contained) the trigram ratio is returned.
    """
    if not query or not target:
        return 0.0
    needle = query.strip().lower()
    haystack = target.strip().lower()
    if not needle or not haystack:
        return 0.0

    if (len(needle) <= short_length or len(haystack) <= short_length) and needle in haystack:
        return 1.0

    score = trigram_similarity(needle, haystack)
    return min(1.0, max(0.0, score))
