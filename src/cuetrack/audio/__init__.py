"""Audio level ring buffer, speech detection and microphone sampling."""

from cuetrack.audio.collector import MicrophoneLevelSampler, list_devices
from cuetrack.audio.levels import AudioLevelMeter, LevelRing, rms_level

__all__ = [
    "AudioLevelMeter",
    "MicrophoneLevelSampler",
    "LevelRing",
    "list_devices",
    "rms_level",
]
