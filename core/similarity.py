# core/similarity.py
from typing import List


def levenshtein_distance(a: str, b: str) -> int:
    """
    Edit distance with unit-cost insertion, deletion and substitution.
    Two-row DP, O(len(a) * len(b)) time.
    """
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)

    prev: List[int] = list(range(len(a) + 1))
    for j, cb in enumerate(b, start=1):
        cur = [j] + [0] * len(a)
        for i, ca in enumerate(a, start=1):
            cost = 0 if ca == cb else 1
            cur[i] = min(
                cur[i - 1] + 1,  # deletion
                prev[i] + 1,  # insertion
                prev[i - 1] + cost,  # substitution
            )
        prev = cur
    return prev[-1]


def similarity(a: str, b: str) -> float:
    """
    Case-insensitive normalized similarity in [0, 1]:
    (max_len - distance) / max_len. Two empty strings are a perfect match.
    """
    max_len = max(len(a), len(b))
    if max_len == 0:
        return 1.0
    distance = levenshtein_distance(a.lower(), b.lower())
    return (max_len - distance) / max_len
