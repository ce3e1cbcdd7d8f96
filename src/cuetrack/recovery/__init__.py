"""Recognizer restart/backoff policy."""

from cuetrack.recovery.scheduler import (
    RecoveryAction,
    RecoveryDecision,
    RecoveryScheduler,
    RecoveryState,
)

__all__ = ["RecoveryAction", "RecoveryDecision", "RecoveryScheduler", "RecoveryState"]
