# ============================================================================
# src/medicine_resolver/matching/similarity.py
# ============================================================================
"""
String similarity scoring.

`similarity` ranks fuzzy brand-name candidates and gates acceptance.
`trigram_similarity` reproduces PostgreSQL pg_trgm semantics and backs the
"approximately equal" operator used for composition lookups.
"""

import re
from functools import lru_cache
from typing import FrozenSet, Optional


def levenshtein_distance(s1: str, s2: str) -> int:
    """Calculate Levenshtein edit distance between two strings."""
    if len(s1) < len(s2):
        return levenshtein_distance(s2, s1)

    if len(s2) == 0:
        return len(s1)

    previous_row = range(len(s2) + 1)
    for i, c1 in enumerate(s1):
        current_row = [i + 1]
        for j, c2 in enumerate(s2):
            insertions = previous_row[j + 1] + 1
            deletions = current_row[j] + 1
            substitutions = previous_row[j] + (c1 != c2)
            current_row.append(min(insertions, deletions, substitutions))
        previous_row = current_row

    return previous_row[-1]


def similarity(str1: Optional[str], str2: Optional[str]) -> float:
    """
    Case-insensitive similarity between two names, in [0, 1].

    Rules, first applicable wins:
    - equal -> 1.0
    - one contains the other -> 0.8 * len(shorter) / len(longer)
    - otherwise -> 1 - levenshtein / max length, floored at 0

    Args:
        str1: First name
        str2: Second name

    Returns:
        Similarity score
    """
    s1 = (str1 or '').lower().strip()
    s2 = (str2 or '').lower().strip()

    if s1 == s2:
        return 1.0

    if s1 in s2 or s2 in s1:
        shorter, longer = sorted((s1, s2), key=len)
        return 0.8 * (len(shorter) / len(longer))

    max_length = max(len(s1), len(s2))
    distance = levenshtein_distance(s1, s2)
    return max(0.0, 1 - (distance / max_length))


_WORD_SPLIT = re.compile(r'[^0-9a-z]+')


@lru_cache(maxsize=4096)
def trigrams(text: str) -> FrozenSet[str]:
    """
    pg_trgm trigram set: each alphanumeric word, lowercased, is padded with
    two leading spaces and one trailing space before slicing.
    """
    result = set()
    for word in _WORD_SPLIT.split(text.lower()):
        if not word:
            continue
        padded = f"  {word} "
        for i in range(len(padded) - 2):
            result.add(padded[i:i + 3])
    return frozenset(result)


def trigram_similarity(str1: Optional[str], str2: Optional[str]) -> float:
    """Shared trigrams over the union of both trigram sets; 0.0 if either is empty."""
    t1 = trigrams(str1 or '')
    t2 = trigrams(str2 or '')
    if not t1 or not t2:
        return 0.0
    return len(t1 & t2) / len(t1 | t2)


def is_trigram_similar(str1: Optional[str], str2: Optional[str], threshold: float) -> bool:
    """The `%` operator: trigram similarity at or above the threshold."""
    if not str1 or not str2:
        return False
    return trigram_similarity(str1, str2) >= threshold
