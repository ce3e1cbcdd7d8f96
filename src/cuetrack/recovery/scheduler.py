"""Capped, coalesced restart policy for the upstream recognizer.

The scheduler only decides; the owning session keeps the single pending
restart deadline (see pipeline.timers.DeadlineTimers), so a newly
scheduled restart always replaces the previous one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from cuetrack.config import RecoveryConfig
from cuetrack.errors import RETRIES_EXHAUSTED, FailureKind, user_message

logger = logging.getLogger(__name__)


class RecoveryAction(str, Enum):
    RESTART = "restart"
    SURFACE = "surface"
    IGNORE = "ignore"


@dataclass(frozen=True)
class RecoveryDecision:
    action: RecoveryAction
    delay: float = 0.0
    code: str = ""
    message: str = ""

    @property
    def terminal(self) -> bool:
        return self.action == RecoveryAction.SURFACE


@dataclass
class RecoveryState:
    retry_count: int = 0
    last_failure: Optional[FailureKind] = None


class RecoveryScheduler:
    """Decide whether and when to restart recognition after a failure.

    Interface:
      scheduler = RecoveryScheduler(RecoveryConfig(max_retries=3))
      decision = scheduler.on_failure(FailureKind.RECOGNITION_STREAM_ERROR)
      if decision.action is RecoveryAction.RESTART: schedule(decision.delay)
      scheduler.reset()            # on a recognized result or a jump
    """

    def __init__(self, config: Optional[RecoveryConfig] = None):
        self.config = config or RecoveryConfig()
        self.state = RecoveryState()

    @property
    def retry_count(self) -> int:
        return self.state.retry_count

    @property
    def exhausted(self) -> bool:
        return self.state.retry_count >= self.config.max_retries

    def reset(self) -> None:
        self.state.retry_count = 0
        self.state.last_failure = None

    def exhaust(self) -> None:
        """Spend the whole budget so nothing restarts (forced stop)."""
        self.state.retry_count = self.config.max_retries

    def on_failure(self, kind: FailureKind, detail: str = "", active: bool = True) -> RecoveryDecision:
        """Classify a failure.

        Args:
            kind: Failure class reported by the transcript source.
            detail: Optional recognizer message, appended to surfaced errors.
            active: False when the session was torn down on purpose; such
                failures are ignored and never retried.
        """
        if not active:
            return RecoveryDecision(RecoveryAction.IGNORE)

        self.state.last_failure = kind
        if kind.fatal:
            logger.warning("fatal recognizer failure: %s %s", kind.value, detail)
            return RecoveryDecision(
                RecoveryAction.SURFACE,
                code=kind.value,
                message=user_message(kind.value, detail),
            )

        if self.exhausted:
            logger.warning(
                "retries exhausted after %d attempts (last: %s)", self.state.retry_count, kind.value
            )
            return RecoveryDecision(
                RecoveryAction.SURFACE,
                code=RETRIES_EXHAUSTED,
                message=user_message(RETRIES_EXHAUSTED, detail or user_message(kind.value)),
            )

        self.state.retry_count += 1
        if kind == FailureKind.RECOGNITION_STREAM_ERROR:
            delay = self.config.error_delay(self.state.retry_count)
        else:
            delay = self.config.audio_format_delay_sec
        logger.debug("restart %d/%d in %.2fs after %s", self.state.retry_count, self.config.max_retries, delay, kind.value)
        return RecoveryDecision(RecoveryAction.RESTART, delay=delay, code=kind.value)

    def on_configuration_change(self) -> RecoveryDecision:
        """Audio device changed: fresh retry budget and a longer settle delay."""
        self.reset()
        return RecoveryDecision(
            RecoveryAction.RESTART, delay=self.config.configuration_change_delay_sec
        )
