"""Scripted transcript source for replay and tests.

Events come from a JSON-lines file, one object per line:

  {"t": 0.4, "kind": "partial", "text": "good evening"}
  {"t": 1.2, "kind": "final", "text": "good evening and welcome"}
  {"t": 1.5, "kind": "failure", "failure": "RECOGNITION_STREAM_ERROR"}
  {"t": 2.0, "kind": "configuration_changed"}
  {"t": 2.1, "level": 0.3}

`t` is seconds since the start of the replay (optional, defaults to the
previous step's time). A line may carry only a level.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, List, Optional

from cuetrack.errors import FailureKind, RecognizerError
from cuetrack.interfaces import EventCallback, LevelCallback
from cuetrack.models import TranscriptEvent, TranscriptEventKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReplayStep:
    at: float
    event: Optional[TranscriptEvent] = None
    level: Optional[float] = None


class ManualClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> float:
        self.now += seconds
        return self.now

    def advance_to(self, when: float) -> float:
        self.now = max(self.now, when)
        return self.now


class ReplayTranscriptSource:
    """TranscriptSource that hands scripted events to the session.

    Callbacks from the most recent start() are kept after stop(), so
    emit() can also simulate a late event from a recognizer that has
    already been torn down. `start_failures` are raised by successive
    start() calls (None entries start normally).
    """

    def __init__(
        self,
        steps: Optional[Iterable[ReplayStep]] = None,
        start_failures: Optional[Iterable[Optional[RecognizerError]]] = None,
    ) -> None:
        self.steps: List[ReplayStep] = list(steps or [])
        self._start_failures = list(start_failures or [])
        self.start_calls = 0
        self.stop_calls = 0
        self.locales: List[str] = []
        self.running = False
        self._on_event: Optional[EventCallback] = None
        self._on_level: Optional[LevelCallback] = None

    def start(self, locale: str, on_event: EventCallback, on_level: LevelCallback) -> None:
        self.start_calls += 1
        self.locales.append(locale)
        if self._start_failures:
            failure = self._start_failures.pop(0)
            if failure is not None:
                raise failure
        self._on_event = on_event
        self._on_level = on_level
        self.running = True

    def stop(self) -> None:
        self.stop_calls += 1
        self.running = False

    def emit(self, event: TranscriptEvent) -> None:
        if self._on_event is None:
            raise RuntimeError("source was never started")
        self._on_event(event)

    def emit_level(self, level: float) -> None:
        if self._on_level is not None:
            self._on_level(level)

    def play(self, step: ReplayStep) -> None:
        if step.level is not None:
            self.emit_level(step.level)
        if step.event is not None:
            self.emit(step.event)


def parse_step(record: dict, default_at: float = 0.0) -> ReplayStep:
    """Build a ReplayStep from one decoded JSON object."""
    at = float(record.get("t", default_at))
    level = record.get("level")
    kind = record.get("kind")
    event = None
    if kind is not None:
        kind = TranscriptEventKind(kind)
        if kind == TranscriptEventKind.FAILURE:
            failure = FailureKind(record.get("failure", FailureKind.RECOGNITION_STREAM_ERROR.value))
            event = TranscriptEvent.error(failure, record.get("message", ""))
        elif kind == TranscriptEventKind.CONFIGURATION_CHANGED:
            event = TranscriptEvent.configuration_changed()
        else:
            event = TranscriptEvent(kind=kind, text=str(record.get("text", "")))
    return ReplayStep(at=at, event=event, level=None if level is None else float(level))


def iter_steps(lines: Iterable[str]) -> Iterator[ReplayStep]:
    at = 0.0
    for lineno, line in enumerate(lines, 1):
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        try:
            record = json.loads(line)
        except json.JSONDecodeError as exc:
            raise ValueError(f"line {lineno}: invalid JSON ({exc.msg})") from exc
        if not isinstance(record, dict):
            raise ValueError(f"line {lineno}: expected a JSON object")
        step = parse_step(record, default_at=at)
        at = step.at
        yield step


def load_steps(path: str | Path) -> List[ReplayStep]:
    with open(path, encoding="utf-8") as handle:
        steps = list(iter_steps(handle))
    logger.debug("loaded %d replay steps from %s", len(steps), path)
    return steps
