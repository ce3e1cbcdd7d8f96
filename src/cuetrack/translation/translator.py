"""Translator collaborators and the fire-and-forget dispatcher.

The real translation engine is external; these are the fallbacks used
when none is configured, plus the worker pool that calls whichever
translator is in use exactly once per committed segment.
"""

from __future__ import annotations

import logging
import re
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from typing import Callable, Dict, Optional

from cuetrack.interfaces import Translator
from cuetrack.translation.language import language_root

logger = logging.getLogger(__name__)

TURKISH_TO_ENGLISH: Dict[str, str] = {
    "merhaba": "hello",
    "selam": "hi",
    "evet": "yes",
    "hayır": "no",
    "teşekkürler": "thanks",
    "teşekkür": "thanks",
    "günaydın": "good morning",
    "iyi": "good",
    "akşamlar": "evening",
    "nasılsın": "how are you",
    "bugün": "today",
    "yarın": "tomorrow",
    "dün": "yesterday",
    "toplantı": "meeting",
    "başlıyoruz": "we are starting",
    "başladı": "started",
    "tamam": "okay",
    "oldu": "done",
    "tekrar": "again",
    "lütfen": "please",
    "bekleyin": "wait",
    "harika": "great",
    "mükemmel": "excellent",
    "çalışıyor": "it works",
    "çalışmıyor": "it does not work",
    "mikrofon": "microphone",
    "çeviri": "translation",
    "altyazı": "caption",
    "başarı": "success",
}

_TOKEN_RE = re.compile(r"^(\W*)(.*?)(\W*)$", re.UNICODE)


class PassthroughTranslator:
    """Returns the text unchanged."""

    def translate(self, text: str, source_language: Optional[str], target_language: str) -> str:
        return text.strip()


class GlossaryTranslator:
    """Word-for-word substitution for one language pair.

    Keeps leading/trailing punctuation and an initial capital. Any other
    pair is passed through untouched.
    """

    def __init__(self, glossary: Optional[Dict[str, str]] = None, source: str = "tr", target: str = "en"):
        self.glossary = glossary if glossary is not None else TURKISH_TO_ENGLISH
        self.source = source
        self.target = target

    def translate(self, text: str, source_language: Optional[str], target_language: str) -> str:
        text = text.strip()
        if language_root(source_language) != self.source or language_root(target_language) != self.target:
            return text
        out = " ".join(self._replace(token) for token in text.split())
        return out or text

    def _replace(self, token: str) -> str:
        m = _TOKEN_RE.match(token)
        if not m or not m.group(2):
            return token
        leading, core, trailing = m.groups()
        translated = self.glossary.get(core.lower())
        if translated is None:
            return token
        if core[0].isupper():
            translated = translated[:1].upper() + translated[1:]
        return leading + translated + trailing


def translate_or_fallback(
    translator: Translator, text: str, source_language: Optional[str], target_language: str
) -> str:
    """Call the translator; on same-language or failure return the source text."""
    normalized = text.strip()
    if not normalized:
        return ""
    if language_root(source_language) == language_root(target_language):
        return normalized
    try:
        translated = translator.translate(normalized, source_language, target_language)
    except Exception as exc:  # noqa: BLE001 - collaborator boundary
        logger.warning("translation failed, keeping source text: %s", exc)
        return normalized
    return translated.strip() or normalized


DoneCallback = Callable[[int, str], None]

DEFAULT_TIMEOUT_SEC = 1.4


class TranslationDispatcher:
    """Run translations off the event thread; report (sequence, text) back.

    The primary translator gets `timeout_sec` per segment. On timeout,
    error or an empty answer the fallback translator is tried, and if
    that fails too the source text is used. A timed-out call keeps its
    worker until it returns; its result is discarded.

    Interface:
      dispatcher = TranslationDispatcher(translator, timeout_sec=1.4)
      dispatcher.submit(seq, "merhaba", "tr", "en", on_done)
      dispatcher.shutdown()
    """

    def __init__(
        self,
        translator: Optional[Translator] = None,
        fallback: Optional[Translator] = None,
        timeout_sec: Optional[float] = DEFAULT_TIMEOUT_SEC,
        max_workers: int = 2,
    ):
        if timeout_sec is not None and timeout_sec <= 0:
            raise ValueError("timeout_sec must be > 0")
        self.translator: Translator = translator or PassthroughTranslator()
        self.fallback: Translator = fallback or GlossaryTranslator()
        self.timeout_sec = timeout_sec
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="cuetrack-translate")
        self._primary = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="cuetrack-primary")

    def translate(self, text: str, source_language: Optional[str], target_language: str) -> str:
        """Blocking: primary with timeout, then fallback, then the source text."""
        normalized = text.strip()
        if not normalized:
            return ""
        if language_root(source_language) == language_root(target_language):
            return normalized
        future = self._primary.submit(self.translator.translate, normalized, source_language, target_language)
        try:
            translated = future.result(timeout=self.timeout_sec).strip()
        except FutureTimeout:
            future.cancel()
            logger.warning("translation timed out after %.1fs, using fallback", self.timeout_sec)
            translated = ""
        except Exception as exc:  # noqa: BLE001 - collaborator boundary
            logger.warning("translation failed, using fallback: %s", exc)
            translated = ""
        if translated:
            return translated
        return translate_or_fallback(self.fallback, normalized, source_language, target_language)

    def submit(
        self,
        sequence: int,
        text: str,
        source_language: Optional[str],
        target_language: str,
        on_done: DoneCallback,
    ) -> Future:
        def work() -> None:
            on_done(sequence, self.translate(text, source_language, target_language))

        return self._executor.submit(work)

    def shutdown(self, wait: bool = False) -> None:
        self._executor.shutdown(wait=wait)
        self._primary.shutdown(wait=wait)
