"""Source-language resolution for committed caption text."""

from __future__ import annotations

from typing import Optional

AUTO = "auto"

_TURKISH_CHARS = set("ğüşöçıİ")
_TURKISH_HINTS = {"bir", "ve", "için", "de", "bu", "şu", "çok", "ama", "çünkü", "ile"}


def language_root(code: Optional[str]) -> Optional[str]:
    """'en-US' -> 'en'; None stays None."""
    if not code:
        return None
    return code.split("-")[0].split("_")[0].lower() or None


def heuristic_language(text: str) -> Optional[str]:
    lowered = text.lower()
    if any(ch in _TURKISH_CHARS for ch in lowered):
        return "tr"
    hits = sum(1 for word in lowered.split() if word in _TURKISH_HINTS)
    if hits >= 2:
        return "tr"
    return None


def resolve_source_language(text: str, configured: str, speech_locale: str) -> Optional[str]:
    """Configured code unless 'auto'; then text heuristics; then the locale root."""
    if configured and configured != AUTO:
        return configured
    return heuristic_language(text) or language_root(speech_locale)
