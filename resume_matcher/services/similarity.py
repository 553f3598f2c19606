from typing import Iterable

from rapidfuzz.distance import Levenshtein


def levenshtein_distance(a: str, b: str) -> int:
    """Classic edit distance (insert, delete and substitute all cost 1)."""
    return Levenshtein.distance(a, b)


def fuzzy_match(a: str, b: str, threshold: float = 0.8) -> bool:
    # callers lower-case both sides
    if a in b or b in a:
        return True
    longer, shorter = (a, b) if len(a) > len(b) else (b, a)
    if not longer:
        return True
    similarity = (len(longer) - levenshtein_distance(longer, shorter)) / len(longer)
    return similarity >= threshold


def keyword_similarity(a: Iterable[str], b: Iterable[str]) -> float:
    sa, sb = set(a), set(b)
    if not sa or not sb:
        return 0.0
    return len(sa & sb) / len(sa | sb) * 100
