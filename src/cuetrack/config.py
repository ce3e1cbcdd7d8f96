"""Session configuration.

Every session receives its configuration explicitly; nothing is read
from process-wide state after construction. from_env() helpers read
CUETRACK_* variables and fall back to defaults on blank/invalid values.

Defaults:
- Recovery: 10 retries, 0.5 s step capped at 1.5 s after stream errors,
  0.3 s after audio format / engine failures, 0.5 s after device changes
- Levels: teleprompter 30 samples, last 10 averaged, speaking > 0.08;
  captions 24 samples, last 6 averaged, speaking > 0.04
- Captions: commit after ~6 words, 4 visible lines, 1.1 s silence,
  1.4 s for the primary translator before the fallback is used
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional

ENV_PREFIX = "CUETRACK_"


def read_float_env(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def read_int_env(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def read_str_env(name: str, default: str) -> str:
    raw = (os.getenv(name) or "").strip()
    return raw or default


@dataclass(frozen=True)
class RecoveryConfig:
    """Restart policy for the upstream recognizer."""

    max_retries: int = 10
    error_delay_step_sec: float = 0.5
    error_delay_cap_sec: float = 1.5
    audio_format_delay_sec: float = 0.3
    configuration_change_delay_sec: float = 0.5

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")

    def error_delay(self, retry_count: int) -> float:
        """Delay before restart number `retry_count` after a stream error."""
        return min(retry_count * self.error_delay_step_sec, self.error_delay_cap_sec)

    @classmethod
    def from_env(cls) -> "RecoveryConfig":
        return cls(
            max_retries=read_int_env(ENV_PREFIX + "MAX_RETRIES", cls.max_retries),
            error_delay_step_sec=read_float_env(ENV_PREFIX + "RETRY_STEP_SEC", cls.error_delay_step_sec),
            error_delay_cap_sec=read_float_env(ENV_PREFIX + "RETRY_CAP_SEC", cls.error_delay_cap_sec),
        )


@dataclass(frozen=True)
class LevelConfig:
    """Audio level ring buffer and speech-detection threshold."""

    capacity: int = 30
    window: int = 10
    threshold: float = 0.08
    gain: float = 5.0

    def __post_init__(self) -> None:
        if self.capacity < 1:
            raise ValueError("capacity must be >= 1")
        if not 1 <= self.window <= self.capacity:
            raise ValueError("window must be in 1..capacity")

    @classmethod
    def for_captions(cls) -> "LevelConfig":
        return cls(capacity=24, window=6, threshold=0.04)


@dataclass(frozen=True)
class TeleprompterConfig:
    speech_locale: str = "en-US"
    recovery: RecoveryConfig = field(default_factory=RecoveryConfig)
    levels: LevelConfig = field(default_factory=LevelConfig)

    @classmethod
    def from_env(cls) -> "TeleprompterConfig":
        return cls(
            speech_locale=read_str_env(ENV_PREFIX + "SPEECH_LOCALE", cls.speech_locale),
            recovery=RecoveryConfig.from_env(),
        )


@dataclass(frozen=True)
class CaptionConfig:
    """Captioning session settings.

    buffer_word_count is clamped to >= 3 and max_visible_lines to 2..8.
    """

    speech_locale: str = "en-US"
    source_language: str = "auto"
    target_language: str = "en"
    buffer_word_count: int = 6
    max_visible_lines: int = 4
    silence_finalize_sec: float = 1.1
    translation_timeout_sec: float = 1.4
    output_path: Optional[str] = None
    recovery: RecoveryConfig = field(default_factory=RecoveryConfig)
    levels: LevelConfig = field(default_factory=LevelConfig.for_captions)

    def __post_init__(self) -> None:
        # frozen: go through object.__setattr__ for the clamps
        object.__setattr__(self, "buffer_word_count", max(3, int(self.buffer_word_count)))
        object.__setattr__(self, "max_visible_lines", min(8, max(2, int(self.max_visible_lines))))
        if self.silence_finalize_sec <= 0:
            raise ValueError("silence_finalize_sec must be > 0")
        if self.translation_timeout_sec <= 0:
            raise ValueError("translation_timeout_sec must be > 0")

    @classmethod
    def from_env(cls) -> "CaptionConfig":
        output_path = (os.getenv(ENV_PREFIX + "OUTPUT_PATH") or "").strip() or None
        return cls(
            speech_locale=read_str_env(ENV_PREFIX + "SPEECH_LOCALE", cls.speech_locale),
            source_language=read_str_env(ENV_PREFIX + "SOURCE_LANGUAGE", cls.source_language),
            target_language=read_str_env(ENV_PREFIX + "TARGET_LANGUAGE", cls.target_language),
            buffer_word_count=read_int_env(ENV_PREFIX + "BUFFER_WORDS", cls.buffer_word_count),
            max_visible_lines=read_int_env(ENV_PREFIX + "VISIBLE_LINES", cls.max_visible_lines),
            silence_finalize_sec=read_float_env(ENV_PREFIX + "SILENCE_SEC", cls.silence_finalize_sec),
            translation_timeout_sec=read_float_env(
                ENV_PREFIX + "TRANSLATION_TIMEOUT_SEC", cls.translation_timeout_sec
            ),
            output_path=output_path,
            recovery=RecoveryConfig.from_env(),
        )
