"""Core event and segment data models."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from cuetrack.errors import FailureKind


class TranscriptEventKind(str, Enum):
    PARTIAL = "partial"
    FINAL = "final"
    FAILURE = "failure"
    CONFIGURATION_CHANGED = "configuration_changed"


@dataclass(frozen=True)
class TranscriptEvent:
    """One event from the recognizer collaborator."""

    kind: TranscriptEventKind
    text: str = ""
    failure: Optional[FailureKind] = None
    message: str = ""

    @classmethod
    def partial(cls, text: str) -> "TranscriptEvent":
        return cls(kind=TranscriptEventKind.PARTIAL, text=text)

    @classmethod
    def final(cls, text: str) -> "TranscriptEvent":
        return cls(kind=TranscriptEventKind.FINAL, text=text)

    @classmethod
    def error(cls, failure: FailureKind, message: str = "") -> "TranscriptEvent":
        return cls(kind=TranscriptEventKind.FAILURE, failure=failure, message=message)

    @classmethod
    def configuration_changed(cls) -> "TranscriptEvent":
        return cls(kind=TranscriptEventKind.CONFIGURATION_CHANGED)

    @property
    def is_final(self) -> bool:
        return self.kind == TranscriptEventKind.FINAL


@dataclass(frozen=True)
class CaptionSegment:
    """A committed span of recognized text.

    `sequence` is assigned at commit time and orders segments regardless
    of when their translation completes.
    """

    sequence: int
    source_text: str
    created_at: float
    translated_text: str = ""
    source_language: Optional[str] = None

    def with_translation(self, translated_text: str) -> "CaptionSegment":
        return replace(self, translated_text=translated_text)
