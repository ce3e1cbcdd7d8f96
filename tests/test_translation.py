"""Unit tests for language resolution, fallback translators and dispatch."""

from __future__ import annotations

import threading
import unittest
from typing import List, Optional, Tuple

from cuetrack.translation import (
    GlossaryTranslator,
    PassthroughTranslator,
    TranslationDispatcher,
    heuristic_language,
    language_root,
    resolve_source_language,
    translate_or_fallback,
)


class BlockingTranslator:
    """Never answers until released."""

    def __init__(self) -> None:
        self.release = threading.Event()

    def translate(self, text: str, source_language: Optional[str], target_language: str) -> str:
        self.release.wait(timeout=5)
        return "too late"


class EmptyTranslator:
    def translate(self, text: str, source_language: Optional[str], target_language: str) -> str:
        return "   "


class RecordingTranslator:
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.calls: List[Tuple[str, Optional[str], str]] = []

    def translate(self, text: str, source_language: Optional[str], target_language: str) -> str:
        self.calls.append((text, source_language, target_language))
        if self.fail:
            raise RuntimeError("engine offline")
        return text.upper()


class TestLanguage(unittest.TestCase):
    def test_language_root(self) -> None:
        self.assertEqual(language_root("en-US"), "en")
        self.assertEqual(language_root("pt_BR"), "pt")
        self.assertIsNone(language_root(None))
        self.assertIsNone(language_root(""))

    def test_heuristic(self) -> None:
        self.assertEqual(heuristic_language("Bugün çok güzel"), "tr")
        self.assertEqual(heuristic_language("bu bir deneme"), "tr")
        self.assertIsNone(heuristic_language("good evening everyone"))

    def test_resolve(self) -> None:
        self.assertEqual(resolve_source_language("anything", "de", "en-US"), "de")
        self.assertEqual(resolve_source_language("teşekkürler", "auto", "en-US"), "tr")
        self.assertEqual(resolve_source_language("hello there", "auto", "en-GB"), "en")


class TestTranslators(unittest.TestCase):
    """Tests for fallback translators and translate_or_fallback."""

    def test_glossary_keeps_punctuation_and_capital(self) -> None:
        translator = GlossaryTranslator()
        self.assertEqual(translator.translate("Merhaba, toplantı başlıyoruz!", "tr", "en"), "Hello, meeting we are starting!")

    def test_glossary_other_pair_passthrough(self) -> None:
        translator = GlossaryTranslator()
        self.assertEqual(translator.translate("merhaba", "de", "en"), "merhaba")

    def test_passthrough(self) -> None:
        self.assertEqual(PassthroughTranslator().translate("  hi  ", None, "en"), "hi")

    def test_same_language_skips_translator(self) -> None:
        translator = RecordingTranslator()
        self.assertEqual(translate_or_fallback(translator, "hello", "en", "en-US"), "hello")
        self.assertEqual(translator.calls, [])

    def test_failure_falls_back_to_source(self) -> None:
        translator = RecordingTranslator(fail=True)
        with self.assertLogs("cuetrack.translation.translator", level="WARNING"):
            self.assertEqual(translate_or_fallback(translator, "merhaba", "tr", "en"), "merhaba")

    def test_empty_text(self) -> None:
        translator = RecordingTranslator()
        self.assertEqual(translate_or_fallback(translator, "   ", "tr", "en"), "")
        self.assertEqual(translator.calls, [])


class TestTranslationDispatcher(unittest.TestCase):
    def test_calls_translator_once_per_submit(self) -> None:
        translator = RecordingTranslator()
        dispatcher = TranslationDispatcher(translator)
        results = {}
        done = threading.Event()

        def on_done(sequence: int, text: str) -> None:
            results[sequence] = text
            if len(results) == 3:
                done.set()

        for seq, text in enumerate(["bir", "iki", "üç"]):
            dispatcher.submit(seq, text, "tr", "en", on_done)
        self.assertTrue(done.wait(timeout=5))
        dispatcher.shutdown(wait=True)
        self.assertEqual(results, {0: "BIR", 1: "IKI", 2: "ÜÇ"})
        self.assertEqual(len(translator.calls), 3)

    def test_timeout_uses_fallback(self) -> None:
        """A primary that does not answer in time is replaced by the glossary."""
        primary = BlockingTranslator()
        dispatcher = TranslationDispatcher(primary, timeout_sec=0.05)
        try:
            with self.assertLogs("cuetrack.translation.translator", level="WARNING"):
                self.assertEqual(dispatcher.translate("Merhaba!", "tr", "en"), "Hello!")
        finally:
            primary.release.set()
            dispatcher.shutdown(wait=True)

    def test_failure_uses_fallback(self) -> None:
        dispatcher = TranslationDispatcher(RecordingTranslator(fail=True))
        try:
            with self.assertLogs("cuetrack.translation.translator", level="WARNING"):
                self.assertEqual(dispatcher.translate("tamam lütfen", "tr", "en"), "okay please")
        finally:
            dispatcher.shutdown(wait=True)

    def test_empty_answer_uses_fallback(self) -> None:
        dispatcher = TranslationDispatcher(EmptyTranslator())
        try:
            self.assertEqual(dispatcher.translate("evet", "tr", "en"), "yes")
        finally:
            dispatcher.shutdown(wait=True)

    def test_fallback_failure_keeps_source(self) -> None:
        """Both translators failing leaves the source text."""
        dispatcher = TranslationDispatcher(RecordingTranslator(fail=True), fallback=RecordingTranslator(fail=True))
        try:
            with self.assertLogs("cuetrack.translation.translator", level="WARNING"):
                self.assertEqual(dispatcher.translate("merhaba", "tr", "en"), "merhaba")
        finally:
            dispatcher.shutdown(wait=True)

    def test_same_language_skips_primary(self) -> None:
        translator = RecordingTranslator()
        dispatcher = TranslationDispatcher(translator)
        try:
            self.assertEqual(dispatcher.translate("hello", "en", "en"), "hello")
        finally:
            dispatcher.shutdown(wait=True)
        self.assertEqual(translator.calls, [])

    def test_submit_reports_fallback_result(self) -> None:
        primary = BlockingTranslator()
        dispatcher = TranslationDispatcher(primary, timeout_sec=0.05)
        done = threading.Event()
        results = []

        def on_done(sequence: int, text: str) -> None:
            results.append((sequence, text))
            done.set()

        try:
            dispatcher.submit(4, "günaydın", "tr", "en", on_done)
            self.assertTrue(done.wait(timeout=5))
        finally:
            primary.release.set()
            dispatcher.shutdown(wait=True)
        self.assertEqual(results, [(4, "good morning")])

    def test_invalid_timeout(self) -> None:
        with self.assertRaises(ValueError):
            TranslationDispatcher(timeout_sec=0)


if __name__ == "__main__":
    unittest.main()
