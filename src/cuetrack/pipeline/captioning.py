"""Caption session: transcript source -> segmenter -> store -> translator -> sink.

Interface:
  session = CaptionSession(source, CaptionConfig(target_language="en"),
                           translator=my_translator)
  session.start_background()
  session.start_listening()
  session.segments                  # most recent N committed segments
  session.stop_listening()          # force-commits what is left
  session.clear_output()
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Callable, List, Optional

from cuetrack.config import CaptionConfig
from cuetrack.interfaces import TextSink, TranscriptSource, Translator
from cuetrack.models import CaptionSegment, TranscriptEvent
from cuetrack.pipeline.actor import Clock, ErrorCallback, RecognizerSession
from cuetrack.pipeline.timers import SILENCE
from cuetrack.sink import PlainTextSink
from cuetrack.stabilizer.segment_store import SegmentStore
from cuetrack.stabilizer.stream_segmenter import StreamSegmenter
from cuetrack.text.normalize import collapse_whitespace
from cuetrack.translation.language import resolve_source_language
from cuetrack.translation.translator import TranslationDispatcher

logger = logging.getLogger(__name__)

TRANSLATED = "translated"

SegmentsCallback = Callable[[List[CaptionSegment]], None]


class CaptionSession(RecognizerSession):
    """Segment a live utterance stream into ordered, translated captions."""

    def __init__(
        self,
        source: TranscriptSource,
        config: Optional[CaptionConfig] = None,
        translator: Optional[Translator] = None,
        fallback_translator: Optional[Translator] = None,
        sink: Optional[TextSink] = None,
        clock: Optional[Clock] = None,
        dispatcher: Optional[TranslationDispatcher] = None,
        on_segments: Optional[SegmentsCallback] = None,
        on_error: Optional[ErrorCallback] = None,
    ):
        self.config = config or CaptionConfig()
        super().__init__(
            source,
            locale=self.config.speech_locale,
            recovery=self.config.recovery,
            levels=self.config.levels,
            clock=clock,
            on_error=on_error,
        )
        self.segmenter = StreamSegmenter(target_word_count=self.config.buffer_word_count)
        self.store = SegmentStore(max_visible=self.config.max_visible_lines)
        self.dispatcher = dispatcher or TranslationDispatcher(
            translator, fallback=fallback_translator, timeout_sec=self.config.translation_timeout_sec
        )
        self._owned_sink: Optional[PlainTextSink] = None
        if sink is None and self.config.output_path:
            self._owned_sink = PlainTextSink(self.config.output_path)
        self.sink: Optional[TextSink] = sink if sink is not None else self._owned_sink
        self.on_segments = on_segments
        self._recognized_text = ""
        self._translated_preview = ""
        self._detected_language: Optional[str] = None
        # bumped by clear_output so late translations of cleared segments are dropped
        self._output_epoch = 0

    @property
    def segments(self) -> List[CaptionSegment]:
        with self._lock:
            return self.store.visible()

    @property
    def recognized_text(self) -> str:
        return self._recognized_text

    @property
    def translated_preview(self) -> str:
        return self._translated_preview

    @property
    def detected_source_language(self) -> Optional[str]:
        return self._detected_language

    def start_listening(self) -> None:
        with self._lock:
            if self._active:
                return
            self._error = None
            self._error_code = None
            self._recognized_text = ""
            self._translated_preview = ""
            self._recovery.reset()
            self._meter.clear()
            self.segmenter.reset(self.now())
            self._active = True
            logger.info("captioning start (%s -> %s)", self.config.source_language, self.config.target_language)
            self._begin()

    def stop_listening(self) -> None:
        """Cancel timers, commit whatever is left, then tear down."""
        with self._lock:
            self._timers.cancel_all()
            self._interrupt_utterance()
            self._shutdown()

    def clear_output(self) -> None:
        with self._lock:
            self._recognized_text = ""
            self._translated_preview = ""
            self.store.clear()
            self.segmenter.restart_sequence()
            self._output_epoch += 1
            if self.sink is not None:
                self.sink.clear()
            self._notify()

    def close(self, timeout: float = 1.0) -> None:
        super().close(timeout)
        self.dispatcher.shutdown()
        if self._owned_sink is not None:
            self._owned_sink.close()

    # -- events -----------------------------------------------------------

    def _on_transcript(self, event: TranscriptEvent) -> None:
        transcript = collapse_whitespace(event.text)
        if not transcript:
            return
        self._recognized_text = transcript
        now = self.now()
        update = self.segmenter.on_transcript(transcript, event.is_final, now)
        for segment in update.commits:
            self._commit(segment)
        if update.silence_transcript is None:
            self._timers.cancel(SILENCE)
        else:
            self._timers.schedule(SILENCE, now + self.config.silence_finalize_sec, update.silence_transcript)

    def _interrupt_utterance(self) -> None:
        # the next recognizer starts a new transcript; keep what was already heard
        self._timers.cancel(SILENCE)
        segment = self.segmenter.interrupt(self.now())
        if segment is not None:
            logger.debug("recognizer interrupted; committed #%d", segment.sequence)
            self._commit(segment)

    def _on_timer(self, role: str, payload: Any) -> None:
        if role == SILENCE:
            if self._is_listening:
                segment = self.segmenter.on_silence(payload, self.now())
                if segment is not None:
                    logger.debug("silence finalize #%d", segment.sequence)
                    self._commit(segment)
            return
        super()._on_timer(role, payload)

    def _handle(self, kind: str, payload: Any) -> None:
        if kind == TRANSLATED:
            epoch, sequence, translated = payload
            self._apply_translation(epoch, sequence, translated)
            return
        super()._handle(kind, payload)

    # -- commit / translation -------------------------------------------

    def _commit(self, segment: CaptionSegment) -> None:
        language = resolve_source_language(
            segment.source_text, self.config.source_language, self.config.speech_locale
        )
        self._detected_language = language
        segment = replace(segment, source_language=language)
        self.store.stage(segment)
        self._publish()
        epoch = self._output_epoch

        def on_done(sequence: int, translated: str) -> None:
            self.submit(TRANSLATED, (epoch, sequence, translated))

        self.dispatcher.submit(
            segment.sequence, segment.source_text, language, self.config.target_language, on_done
        )

    def _apply_translation(self, epoch: int, sequence: int, translated: str) -> None:
        if epoch != self._output_epoch or not self.store.update_translation(sequence, translated):
            return
        visible = self.store.visible()
        if visible and visible[-1].translated_text:
            self._translated_preview = visible[-1].translated_text
        self._publish()

    def _publish(self) -> None:
        if self.sink is not None:
            lines = [s.translated_text for s in self.store.visible() if s.translated_text]
            try:
                self.sink.publish(lines)
            except Exception as exc:  # noqa: BLE001 - sink is best-effort
                logger.warning("caption sink publish failed: %s", exc)
        self._notify()

    def _notify(self) -> None:
        if self.on_segments:
            self.on_segments(self.store.visible())
