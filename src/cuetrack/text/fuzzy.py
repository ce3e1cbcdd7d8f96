"""Word-level fuzzy equality tolerant of recognizer substitutions.

Inputs are expected lowercase and stripped to letters/digits
(see normalize.strip_to_alnum). Rules are tried in order; any hit wins:

1. exact equality
2. prefix of the other ("not" ~ "notch")
3. substring of the other
4. shared leading run >= max(2, 60% of the shorter word), shorter >= 2
5. edit distance within a length-scaled budget
"""

from __future__ import annotations

from cuetrack.text.edit_distance import edit_distance


def shared_prefix_length(a: str, b: str) -> int:
    n = 0
    for ca, cb in zip(a, b):
        if ca != cb:
            break
        n += 1
    return n


def distance_budget(a: str, b: str) -> int:
    """Max edit distance still counted as the same word."""
    shorter = min(len(a), len(b))
    if shorter <= 4:
        return 1
    if shorter <= 8:
        return 2
    return max(len(a), len(b)) // 3


def is_fuzzy_match(a: str, b: str) -> bool:
    """True if two stripped, lowercased tokens count as the same word."""
    if not a or not b:
        return False
    if a == b:
        return True
    if a.startswith(b) or b.startswith(a):
        return True
    if a in b or b in a:
        return True
    shorter = min(len(a), len(b))
    if shorter >= 2 and shared_prefix_length(a, b) >= max(2, shorter * 3 // 5):
        return True
    return edit_distance(a, b) <= distance_budget(a, b)


def words_match(reference_word: str, spoken_word: str) -> bool:
    """Exact-or-fuzzy comparison used by the word aligner."""
    return reference_word == spoken_word or is_fuzzy_match(reference_word, spoken_word)
