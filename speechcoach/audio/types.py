"""Dataclasses shared across audio helpers."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass(slots=True)
class AudioBuffer:
    """Decoded mono PCM samples (float32, nominally in [-1, 1])."""

    samples: np.ndarray
    sample_rate: int

    @property
    def frame_count(self) -> int:
        return int(len(self.samples))

    @property
    def duration(self) -> float:
        if self.sample_rate <= 0:
            return 0.0
        return self.frame_count / float(self.sample_rate)


@dataclass(frozen=True, slots=True)
class SilenceConfig:
    threshold_db: float = -55.0
    window_duration_ms: float = 50.0
    minimum_output_duration: float = 1.0


@dataclass(frozen=True, slots=True)
class NonSilentSpan:
    """Maximal run of consecutive non-silent windows (frame offsets)."""

    start_frame: int
    length_frames: int

    @property
    def end_frame(self) -> int:
        return self.start_frame + self.length_frames
