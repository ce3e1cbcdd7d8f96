"""Protocol interfaces for the collaborators a session talks to."""

from __future__ import annotations

from typing import Callable, Optional, Protocol, Sequence

from cuetrack.models import TranscriptEvent

EventCallback = Callable[[TranscriptEvent], None]
LevelCallback = Callable[[float], None]


class TranscriptSource(Protocol):
    """Black-box recognizer producing partial/final/failure events.

    start() may raise a cuetrack.errors.RecognizerError subclass for
    failures detected before any audio flows.
    """

    def start(self, locale: str, on_event: EventCallback, on_level: LevelCallback) -> None: ...

    def stop(self) -> None: ...


class Translator(Protocol):
    def translate(self, text: str, source_language: Optional[str], target_language: str) -> str: ...


class TextSink(Protocol):
    def publish(self, lines: Sequence[str]) -> None: ...

    def clear(self) -> None: ...
