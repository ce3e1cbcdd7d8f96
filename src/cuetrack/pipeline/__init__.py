"""Event-driven teleprompter and caption sessions."""

from cuetrack.pipeline.actor import RecognizerSession, SessionActor
from cuetrack.pipeline.captioning import CaptionSession
from cuetrack.pipeline.teleprompter import TeleprompterSession
from cuetrack.pipeline.timers import DeadlineTimers

__all__ = [
    "CaptionSession",
    "DeadlineTimers",
    "RecognizerSession",
    "SessionActor",
    "TeleprompterSession",
]
