"""Edit-distance similarity used for fuzzy label matching."""

from rapidfuzz.distance import Levenshtein


def levenshtein_distance(s1: str, s2: str) -> int:
    """Unit-cost insert/delete/substitute edit distance."""
    return Levenshtein.distance(s1, s2)


def fuzzy_ratio(s1: str, s2: str) -> float:
    """
    Case-insensitive similarity on a 0-100 scale.

    Computed as ``(1 - distance / max(len1, len2)) * 100``; either string
    being empty scores 0.
    """
    if not s1 or not s2:
        return 0.0
    distance = levenshtein_distance(s1.lower(), s2.lower())
    max_len = max(len(s1), len(s2))
    return (1 - distance / max_len) * 100
