"""Normalization, edit distance and fuzzy word matching."""

from cuetrack.text.edit_distance import edit_distance
from cuetrack.text.fuzzy import is_fuzzy_match, words_match
from cuetrack.text.normalize import (
    Token,
    collapse_whitespace,
    fold_case,
    is_annotation,
    normalize,
    normalize_for_tokens,
    split_words,
    strip_to_alnum,
    tokenize,
)

__all__ = [
    "Token",
    "collapse_whitespace",
    "edit_distance",
    "fold_case",
    "is_annotation",
    "is_fuzzy_match",
    "normalize",
    "normalize_for_tokens",
    "split_words",
    "strip_to_alnum",
    "tokenize",
    "words_match",
]
