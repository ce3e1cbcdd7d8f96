"""Single-owner event loop shared by the teleprompter and caption sessions.

All session state is mutated on one consumer, one event at a time:
recognizer events, translation completions and timer expiries all go
through the same queue and the same lock that guards the public control
methods. Recognizer callbacks are tagged with the session generation
current when recognition was started; events from an older generation
(an intentionally stopped recognizer) are dropped.

Drive it either with run()/start_background() (live) or pump() (tests,
replay) - never both at once.
"""

from __future__ import annotations

import logging
import queue
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

from cuetrack.audio.levels import AudioLevelMeter
from cuetrack.config import LevelConfig, RecoveryConfig
from cuetrack.errors import FailureKind, RecognizerError
from cuetrack.interfaces import TranscriptSource
from cuetrack.models import TranscriptEvent, TranscriptEventKind
from cuetrack.pipeline.timers import RESTART, DeadlineTimers
from cuetrack.recovery.scheduler import RecoveryAction, RecoveryDecision, RecoveryScheduler

logger = logging.getLogger(__name__)

Clock = Callable[[], float]
ErrorCallback = Callable[[str, str], None]

TRANSCRIPT = "transcript"


@dataclass(frozen=True)
class _Envelope:
    kind: str
    payload: Any
    generation: Optional[int] = None


class SessionActor:
    """Queue + lock + coalesced timers; subclasses implement the handlers."""

    def __init__(self, clock: Optional[Clock] = None, poll_interval_sec: float = 0.05):
        self._clock: Clock = clock or time.monotonic
        self._poll_interval_sec = poll_interval_sec
        self._queue: "queue.Queue[Optional[_Envelope]]" = queue.Queue()
        self._lock = threading.RLock()
        self._timers = DeadlineTimers()
        self._generation = 0
        self._closed = False
        self._thread: Optional[threading.Thread] = None

    def now(self) -> float:
        return self._clock()

    @property
    def timers(self) -> DeadlineTimers:
        return self._timers

    def submit(self, kind: str, payload: Any, generation: Optional[int] = None) -> None:
        """Thread-safe: enqueue one event for the consumer."""
        self._queue.put(_Envelope(kind, payload, generation))

    def pump(self) -> int:
        """Process everything queued plus any expired timers; return the count."""
        handled = 0
        while True:
            try:
                envelope = self._queue.get_nowait()
            except queue.Empty:
                envelope = None
            if envelope is not None:
                self._dispatch(envelope)
                handled += 1
                continue
            fired = self._fire_due()
            handled += fired
            if not fired:
                return handled

    def run(self) -> None:
        """Consume events until close(); blocks."""
        while not self._closed:
            timeout = self._poll_interval_sec
            with self._lock:
                deadline = self._timers.next_deadline()
            if deadline is not None:
                timeout = max(0.0, min(timeout, deadline - self.now()))
            try:
                envelope = self._queue.get(timeout=timeout)
            except queue.Empty:
                envelope = None
            if envelope is not None:
                self._dispatch(envelope)
            self._fire_due()

    def start_background(self) -> threading.Thread:
        if self._thread is None or not self._thread.is_alive():
            self._closed = False
            self._thread = threading.Thread(target=self.run, name=type(self).__name__, daemon=True)
            self._thread.start()
        return self._thread

    def close(self, timeout: float = 1.0) -> None:
        self._closed = True
        self._queue.put(None)
        if self._thread is not None and self._thread.is_alive():
            self._thread.join(timeout=timeout)

    def _dispatch(self, envelope: Optional[_Envelope]) -> None:
        if envelope is None:
            return
        with self._lock:
            if envelope.generation is not None and envelope.generation != self._generation:
                logger.debug("dropping stale %s event (generation %d)", envelope.kind, envelope.generation)
                return
            try:
                self._handle(envelope.kind, envelope.payload)
            except Exception:
                # a failing callback must not take the consumer down with it
                logger.exception("error handling %s event", envelope.kind)

    def _fire_due(self) -> int:
        with self._lock:
            due = self._timers.pop_due(self.now())
            for role, payload in due:
                try:
                    self._on_timer(role, payload)
                except Exception:
                    logger.exception("error handling %s timer", role)
        return len(due)

    def _handle(self, kind: str, payload: Any) -> None:
        raise NotImplementedError

    def _on_timer(self, role: str, payload: Any) -> None:
        raise NotImplementedError


class RecognizerSession(SessionActor):
    """SessionActor bound to a TranscriptSource with restart/backoff.

    Subclasses implement _on_transcript() and may override _can_restart().
    """

    def __init__(
        self,
        source: TranscriptSource,
        locale: str,
        recovery: Optional[RecoveryConfig] = None,
        levels: Optional[LevelConfig] = None,
        clock: Optional[Clock] = None,
        on_error: Optional[ErrorCallback] = None,
    ):
        super().__init__(clock=clock)
        self._source = source
        self._locale = locale
        self._recovery = RecoveryScheduler(recovery)
        self._meter = AudioLevelMeter(levels)
        self._on_error = on_error
        self._active = False
        self._is_listening = False
        self._error: Optional[str] = None
        self._error_code: Optional[str] = None

    @property
    def is_listening(self) -> bool:
        return self._is_listening

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def error_code(self) -> Optional[str]:
        return self._error_code

    @property
    def retry_count(self) -> int:
        return self._recovery.retry_count

    @property
    def meter(self) -> AudioLevelMeter:
        return self._meter

    @property
    def is_speaking(self) -> bool:
        return self._meter.is_speaking

    # -- recognizer lifecycle -------------------------------------------

    def _begin(self) -> None:
        """(Re)start recognition with a fresh generation."""
        self._cleanup()
        generation = self._generation

        def on_event(event: TranscriptEvent) -> None:
            self.submit(TRANSCRIPT, event, generation)

        try:
            self._source.start(self._locale, on_event, self._meter.push)
        except RecognizerError as exc:
            self._apply_decision(self._recovery.on_failure(exc.kind, str(exc), active=self._active))
            return
        self._is_listening = True
        logger.info("recognition started (generation %d, locale %s)", generation, self._locale)

    def _cleanup(self) -> None:
        """Cancel timers synchronously, then detach and stop the recognizer."""
        self._timers.cancel_all()
        self._generation += 1
        try:
            self._source.stop()
        except Exception as exc:  # noqa: BLE001 - collaborator boundary
            logger.warning("transcript source stop failed: %s", exc)

    def _restart(self) -> None:
        """Device/configuration change: fresh retry budget, longer settle delay."""
        self._is_listening = True
        self._interrupt_utterance()
        self._cleanup()
        self._apply_decision(self._recovery.on_configuration_change())

    def _shutdown(self) -> None:
        self._active = False
        self._is_listening = False
        self._cleanup()

    def _can_restart(self) -> bool:
        return self._active

    def _apply_decision(self, decision: RecoveryDecision) -> None:
        if decision.action == RecoveryAction.RESTART:
            self._timers.schedule(RESTART, self.now() + decision.delay)
        elif decision.action == RecoveryAction.SURFACE:
            self._error = decision.message
            self._error_code = decision.code
            self._shutdown()
            if self._on_error:
                self._on_error(decision.code, decision.message)

    # -- event handling ---------------------------------------------------

    def _handle(self, kind: str, payload: Any) -> None:
        if kind != TRANSCRIPT:
            return
        event: TranscriptEvent = payload
        if event.kind in (TranscriptEventKind.PARTIAL, TranscriptEventKind.FINAL):
            self._recovery.reset()
            self._on_transcript(event)
        elif event.kind == TranscriptEventKind.FAILURE:
            failure = event.failure or FailureKind.RECOGNITION_STREAM_ERROR
            active = self._can_restart() and self._is_listening
            decision = self._recovery.on_failure(failure, event.message, active=active)
            if decision.action == RecoveryAction.IGNORE:
                self._is_listening = False
            else:
                self._interrupt_utterance()
            if decision.action == RecoveryAction.RESTART:
                # detach the failed recognizer now; the restart timer starts a new one
                self._cleanup()
            self._apply_decision(decision)
        elif event.kind == TranscriptEventKind.CONFIGURATION_CHANGED:
            if self._can_restart():
                self._restart()

    def _on_timer(self, role: str, payload: Any) -> None:
        if role == RESTART and self._active:
            self._begin()

    def _interrupt_utterance(self) -> None:
        """Called before the recognizer is torn down for a restart or a surfaced error."""

    def _on_transcript(self, event: TranscriptEvent) -> None:
        raise NotImplementedError
