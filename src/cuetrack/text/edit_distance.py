"""Levenshtein distance with a single DP row (unit costs)."""

from __future__ import annotations


def edit_distance(a: str, b: str) -> int:
    """Number of single-character insertions, deletions or substitutions
    turning `a` into `b`. Symmetric.
    """
    if not a:
        return len(b)
    if not b:
        return len(a)
    row = list(range(len(b) + 1))
    for i in range(1, len(a) + 1):
        prev = row[0]
        row[0] = i
        ca = a[i - 1]
        for j in range(1, len(b) + 1):
            temp = row[j]
            if ca == b[j - 1]:
                row[j] = prev
            else:
                row[j] = min(prev, row[j], row[j - 1]) + 1
            prev = temp
    return row[len(b)]
