"""Text canonicalization for alignment and segmentation.

Two flavours:
- normalize(): lowercase, letters/digits/whitespace only (comparison form)
- collapse_whitespace(): single spaces, case and punctuation kept (display form)

Annotation tokens ([pause], emoji, bare punctuation) are never expected
to be spoken, so they are detected here for both aligners.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

# Trailing characters that close a sentence or clause for commit purposes
TERMINAL_PUNCTUATION = ".!?;:"


@dataclass(frozen=True)
class Token:
    """One whitespace-delimited unit of text and where it starts."""

    text: str
    offset: int
    is_annotation: bool


def _keep(ch: str) -> bool:
    return ch.isalpha() or ch.isdigit()


def normalize(text: str) -> str:
    """Lowercase and drop everything that is not a letter, digit or whitespace.

    Idempotent: normalize(normalize(x)) == normalize(x).
    """
    if not text:
        return ""
    return "".join(ch for ch in text.lower() if _keep(ch) or ch.isspace())


def normalize_for_tokens(text: str) -> str:
    """normalize() with runs of whitespace collapsed to single spaces."""
    return " ".join(normalize(text).split())


def collapse_whitespace(text: str) -> str:
    """Collapse any whitespace run to one space; keep case and punctuation."""
    if not text:
        return ""
    return " ".join(text.split())


def fold_case(text: str) -> str:
    """Lowercase per character without changing the string length.

    Characters whose lowercase form expands (e.g. 'İ') are kept as-is so
    offsets computed on the folded text index the original.
    """
    out = []
    for ch in text:
        low = ch.lower()
        out.append(low if len(low) == 1 else ch)
    return "".join(out)


def strip_to_alnum(word: str) -> str:
    """Keep only letters and digits."""
    return "".join(ch for ch in word if _keep(ch))


def is_annotation(word: str) -> bool:
    """Bracketed cue like [pause], or a token with no letters or digits."""
    if len(word) >= 2 and word.startswith("[") and word.endswith("]"):
        return True
    return not strip_to_alnum(word)


def ends_with_terminal_punctuation(word: str) -> bool:
    return bool(word) and word[-1] in TERMINAL_PUNCTUATION


def tokenize(text: str) -> List[Token]:
    """Split on whitespace, recording each token's start offset in `text`."""
    tokens: List[Token] = []
    i = 0
    n = len(text)
    while i < n:
        if text[i].isspace():
            i += 1
            continue
        start = i
        while i < n and not text[i].isspace():
            i += 1
        word = text[start:i]
        tokens.append(Token(text=word, offset=start, is_annotation=is_annotation(word)))
    return tokens


def split_words(text: str) -> List[str]:
    """Whitespace tokenization without offsets (captioning mode)."""
    return text.split()
