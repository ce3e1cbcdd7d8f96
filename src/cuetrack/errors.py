"""Error codes, user-facing messages and the exception hierarchy.

Only PERMISSION_DENIED, RECOGNIZER_UNAVAILABLE and RETRIES_EXHAUSTED are
ever shown to the user. Transient audio / stream failures stay internal
unless they exhaust the retry budget; downstream (translation, sink)
failures are logged and dropped.
"""

from __future__ import annotations

from enum import Enum

PERMISSION_DENIED = "PERMISSION_DENIED"
RECOGNIZER_UNAVAILABLE = "RECOGNIZER_UNAVAILABLE"
TRANSIENT_AUDIO_FORMAT = "TRANSIENT_AUDIO_FORMAT"
AUDIO_ENGINE_FAILED = "AUDIO_ENGINE_FAILED"
RECOGNITION_STREAM_ERROR = "RECOGNITION_STREAM_ERROR"
RETRIES_EXHAUSTED = "RETRIES_EXHAUSTED"
DOWNSTREAM_WRITE_FAILURE = "DOWNSTREAM_WRITE_FAILURE"

ERROR_MESSAGES = {
    PERMISSION_DENIED: "Speech or microphone permission denied.",
    RECOGNIZER_UNAVAILABLE: "Speech recognizer not available.",
    TRANSIENT_AUDIO_FORMAT: "Audio input unavailable.",
    AUDIO_ENGINE_FAILED: "Audio engine failed.",
    RECOGNITION_STREAM_ERROR: "Speech recognition stopped unexpectedly.",
    RETRIES_EXHAUSTED: "Speech recognition could not be restarted.",
    DOWNSTREAM_WRITE_FAILURE: "Caption output could not be written.",
}


class FailureKind(str, Enum):
    """Classes of recognizer-side failure, keyed by error code."""

    PERMISSION_DENIED = PERMISSION_DENIED
    RECOGNIZER_UNAVAILABLE = RECOGNIZER_UNAVAILABLE
    TRANSIENT_AUDIO_FORMAT = TRANSIENT_AUDIO_FORMAT
    AUDIO_ENGINE_FAILED = AUDIO_ENGINE_FAILED
    RECOGNITION_STREAM_ERROR = RECOGNITION_STREAM_ERROR

    @property
    def fatal(self) -> bool:
        return self in (FailureKind.PERMISSION_DENIED, FailureKind.RECOGNIZER_UNAVAILABLE)


class CuetrackError(Exception):
    """Base class; `code` is one of the module-level error codes."""

    code = RECOGNITION_STREAM_ERROR

    def __init__(self, message: str = "") -> None:
        super().__init__(message or ERROR_MESSAGES.get(self.code, self.code))

    @property
    def message(self) -> str:
        return str(self)


class RecognizerError(CuetrackError):
    """Raised by a transcript source; carries the matching FailureKind."""

    kind = FailureKind.RECOGNITION_STREAM_ERROR

    @property
    def code(self) -> str:  # type: ignore[override]
        return self.kind.value


class PermissionDeniedError(RecognizerError):
    kind = FailureKind.PERMISSION_DENIED


class RecognizerUnavailableError(RecognizerError):
    kind = FailureKind.RECOGNIZER_UNAVAILABLE


class TransientAudioFormatError(RecognizerError):
    kind = FailureKind.TRANSIENT_AUDIO_FORMAT


class AudioEngineError(RecognizerError):
    kind = FailureKind.AUDIO_ENGINE_FAILED


class RecognitionStreamError(RecognizerError):
    kind = FailureKind.RECOGNITION_STREAM_ERROR


def user_message(code: str, detail: str = "") -> str:
    base = ERROR_MESSAGES.get(code, code)
    return f"{base} ({detail})" if detail and detail != base else base
