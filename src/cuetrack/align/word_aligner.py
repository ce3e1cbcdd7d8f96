"""Token-level aligner with skip-ahead and annotation skipping.

Compares reference tokens (from the match offset on) with recognized
words. Annotation tokens in the reference are always counted as passed.
The returned value is a character count into the reference window, so it
is directly comparable with align_characters().
"""

from __future__ import annotations

from typing import List

from cuetrack.text.fuzzy import words_match
from cuetrack.text.normalize import Token, normalize_for_tokens, strip_to_alnum, tokenize

MAX_WORD_SKIP = 3


def _clean(word: str) -> str:
    return strip_to_alnum(word.lower())


def align_words(reference_window: str, spoken: str) -> int:
    """Return the character count of `reference_window` covered by `spoken`.

    Mismatch handling, in order:
      a) skip up to 3 spoken words looking for the current reference word
      b) skip up to 3 reference words looking for the current spoken word
         (the skipped words are counted as passed)
      otherwise only the spoken index advances. Punctuation-only and
      bracketed tokens are annotations and never need to be spoken.
    """
    tokens: List[Token] = tokenize(reference_window)
    ref_words = [_clean(t.text) for t in tokens]
    spk_words = normalize_for_tokens(spoken).split()
    last = len(tokens) - 1

    def passed(index: int) -> int:
        # end of the token plus the following space, except for the final token
        token = tokens[index]
        return token.offset + len(token.text) + (1 if index < last else 0)

    si = 0
    ri = 0
    matched = 0
    while si < len(tokens) and ri < len(spk_words):
        if tokens[si].is_annotation:
            matched = passed(si)
            si += 1
            continue

        ref = ref_words[si]
        spk = spk_words[ri]
        if words_match(ref, spk):
            matched = passed(si)
            si += 1
            ri += 1
            continue

        max_spk_skip = min(MAX_WORD_SKIP, len(spk_words) - ri - 1)
        found = False
        for skip in range(1, max_spk_skip + 1):
            if words_match(ref, spk_words[ri + skip]):
                ri += skip
                found = True
                break
        if found:
            continue

        max_ref_skip = min(MAX_WORD_SKIP, len(tokens) - si - 1)
        for skip in range(1, max_ref_skip + 1):
            if words_match(ref_words[si + skip], spk):
                matched = passed(si + skip - 1)
                si += skip
                found = True
                break
        if found:
            continue

        ri += 1

    while si < len(tokens) and tokens[si].is_annotation:
        matched = passed(si)
        si += 1

    return matched
