"""
Text Similarity
===============

Character-level edit similarity for paragraph-sized text, with a cheap
word-set fallback for long paragraphs.
"""

import re

# Above this length the quadratic edit distance is replaced by Jaccard
LEVENSHTEIN_MAX_LENGTH = 1000

_WHITESPACE = re.compile(r"\s+")


def normalize_whitespace(text: str) -> str:
    """Collapse whitespace runs to a single space and strip the ends."""
    return _WHITESPACE.sub(" ", text).strip()


def levenshtein_distance(a: str, b: str) -> int:
    """Edit distance with unit insert/delete/substitute costs (two-row DP)."""
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)
    if len(a) < len(b):
        a, b = b, a

    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i] + [0] * len(b)
        for j, char_b in enumerate(b, start=1):
            cost = 0 if char_a == char_b else 1
            current[j] = min(
                previous[j] + 1,        # deletion
                current[j - 1] + 1,     # insertion
                previous[j - 1] + cost,  # substitution
            )
        previous = current
    return previous[len(b)]


def jaccard_similarity(a: str, b: str) -> float:
    """Jaccard index of the lowercased whitespace-split word sets."""
    words_a = set(a.lower().split())
    words_b = set(b.lower().split())
    if not words_a and not words_b:
        return 1.0
    union = words_a | words_b
    return len(words_a & words_b) / len(union)


def similarity(a: str, b: str) -> float:
    """
    Similarity in [0, 1]; 1.0 for identical strings (including two empties).
    """
    if a == b:
        return 1.0
    max_len = max(len(a), len(b))
    if max_len == 0:
        return 1.0
    if not a or not b:
        return 0.0
    if max_len <= LEVENSHTEIN_MAX_LENGTH:
        return 1.0 - levenshtein_distance(a, b) / max_len
    return jaccard_similarity(a, b)
