"""Two-pointer character aligner with short-range resynchronization.

Walks the reference window and the spoken text together. Non-alphanumeric
characters on either side are stepped over without consuming the other
side. On a mismatch it first looks up to 3 characters ahead in the spoken
stream (recognizer inserted characters), then up to 3 ahead in the
reference (recognizer dropped characters); a hit only realigns one
pointer. Otherwise the pair is taken as a substitution and counted.

Deliberately forgiving: precision is traded for robustness to noise.
"""

from __future__ import annotations

from cuetrack.text.normalize import fold_case, normalize

MAX_LOOKAHEAD = 3


def _is_alnum(ch: str) -> bool:
    return ch.isalpha() or ch.isdigit()


def _lookahead(seq: str, start: int, target: str) -> int:
    """Index of `target` within the next MAX_LOOKAHEAD positions after `start`, or -1."""
    max_skip = min(MAX_LOOKAHEAD, len(seq) - start - 1)
    for skip in range(1, max_skip + 1):
        if seq[start + skip] == target:
            return start + skip
    return -1


def align_characters(reference_window: str, spoken: str) -> int:
    """Return how many characters of `reference_window` the spoken text reached.

    Args:
        reference_window: Whitespace-collapsed reference text starting at
            the current match offset (original case and punctuation).
        spoken: Raw recognizer transcript.

    Returns:
        Character count into `reference_window`; never below the best
        position recorded during this call.
    """
    src = fold_case(reference_window)
    spk = normalize(spoken)

    si = 0
    ri = 0
    last_good = 0
    while si < len(src) and ri < len(spk):
        sc = src[si]
        rc = spk[ri]
        if not _is_alnum(sc):
            si += 1
            continue
        if not _is_alnum(rc):
            ri += 1
            continue

        if sc == rc:
            si += 1
            ri += 1
            last_good = si
            continue

        nxt = _lookahead(spk, ri, sc)
        if nxt >= 0:
            ri = nxt
            continue
        nxt = _lookahead(src, si, rc)
        if nxt >= 0:
            si = nxt
            continue

        # substitution
        si += 1
        ri += 1
        last_good = si

    return last_good
