"""
Levenshtein distance between strings.

Used by the text tracker on whole-frame text, on individual blocks,
and for normalizing both into relative distances.
"""

from __future__ import annotations


def distance(s: str, t: str) -> int:
    """
    Minimum number of single-character inserts, deletes and substitutions
    turning `s` into `t`.

    Classic dynamic programming over two rolling rows of length len(t) + 1.
    """
    if s == t:
        return 0
    if not s:
        return len(t)
    if not t:
        return len(s)

    previous = list(range(len(t) + 1))
    for i, sc in enumerate(s, start=1):
        current = [i] + [0] * len(t)
        for j, tc in enumerate(t, start=1):
            cost = 0 if sc == tc else 1
            current[j] = min(
                previous[j] + 1,  # delete
                current[j - 1] + 1,  # insert
                previous[j - 1] + cost,  # substitute
            )
        previous = current
    return previous[-1]


def relative_distance(s: str, t: str) -> float:
    """
    Distance normalized as 2 * distance / (len(s) + len(t)).

    0.0 for identical strings (including two empty ones). Reaches 2.0
    when exactly one of them is empty.
    """
    total = len(s) + len(t)
    if total == 0:
        return 0.0
    return 2 * distance(s, t) / total
