"""Audio pre-processing (silence trimming)."""

from .silence_trimmer import (
    AudioFileNotFound,
    AudioReadError,
    AudioWriteError,
    SilenceRemovalError,
    SilenceTrimmer,
    trim,
)
from .types import AudioBuffer, NonSilentSpan, SilenceConfig

__all__ = [
    "AudioBuffer",
    "AudioFileNotFound",
    "AudioReadError",
    "AudioWriteError",
    "NonSilentSpan",
    "SilenceConfig",
    "SilenceRemovalError",
    "SilenceTrimmer",
    "trim",
]
