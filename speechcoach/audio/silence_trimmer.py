"""Windowed RMS silence detection and splicing applied before cloud upload."""

from __future__ import annotations

import logging
import math
import tempfile
import time
import uuid
from pathlib import Path
from typing import Callable, Optional

import numpy as np
import soundfile as sf

from ..metrics import SILENCE_TRIM_COUNTER, SILENCE_TRIM_DURATION
from .types import AudioBuffer, NonSilentSpan, SilenceConfig

LOGGER = logging.getLogger("speechcoach.silence")

ProgressCallback = Callable[[float], None]

SCAN_SHARE = 0.8


class SilenceRemovalError(Exception):
    pass


class AudioFileNotFound(SilenceRemovalError):
    def __init__(self, path: Path) -> None:
        super().__init__(f"Audio file not found: {path}")
        self.path = path


class AudioReadError(SilenceRemovalError):
    def __init__(self, detail: str) -> None:
        super().__init__(f"Failed to read audio file: {detail}")
        self.detail = detail


class AudioWriteError(SilenceRemovalError):
    def __init__(self, detail: str) -> None:
        super().__init__(f"Failed to write processed audio: {detail}")
        self.detail = detail


class SilenceTrimmer:
    """Drop silent windows from a buffer, keeping non-silent runs in order."""

    def __init__(self, config: SilenceConfig | None = None) -> None:
        self.config = config or SilenceConfig()

    def trim(self, buffer: AudioBuffer, progress: Optional[ProgressCallback] = None) -> AudioBuffer:
        """Return the spliced buffer, or ``buffer`` itself when nothing should change."""
        started = time.perf_counter()
        result = self._trim(buffer, progress)
        SILENCE_TRIM_DURATION.observe(time.perf_counter() - started)
        SILENCE_TRIM_COUNTER.labels(result="passthrough" if result is buffer else "trimmed").inc()
        return result

    def _trim(self, buffer: AudioBuffer, progress: Optional[ProgressCallback]) -> AudioBuffer:
        window_len = self._window_frames(buffer.sample_rate)
        if window_len <= 0:
            LOGGER.debug("Window length is zero frames; returning input unchanged")
            return self._passthrough(buffer, progress)

        samples = self._ensure_mono(buffer.samples)
        total = len(samples)
        window_count = math.ceil(total / window_len) if total else 0
        flags = self._classify_windows(samples, window_len, progress)
        spans = self._collect_spans(flags, window_len, total)

        if not spans:
            LOGGER.info("No speech above %.1f dB; keeping original audio", self.config.threshold_db)
            return self._passthrough(buffer, progress)

        kept_frames = sum(span.length_frames for span in spans)
        if kept_frames / buffer.sample_rate < self.config.minimum_output_duration:
            LOGGER.info(
                "Trimmed audio would be %.2fs (< %.2fs); keeping original",
                kept_frames / buffer.sample_rate,
                self.config.minimum_output_duration,
            )
            return self._passthrough(buffer, progress)

        if sum(flags) == window_count:
            LOGGER.debug("No silent windows found; keeping original audio")
            return self._passthrough(buffer, progress)

        trimmed = self._splice(samples, spans, progress)
        if progress:
            progress(1.0)
        LOGGER.info(
            "Removed %.2fs of silence across %d span(s)",
            (total - kept_frames) / buffer.sample_rate,
            len(spans),
        )
        return AudioBuffer(samples=trimmed, sample_rate=buffer.sample_rate)

    def detect_spans(self, buffer: AudioBuffer) -> list[NonSilentSpan]:
        window_len = self._window_frames(buffer.sample_rate)
        if window_len <= 0:
            return []
        samples = self._ensure_mono(buffer.samples)
        flags = self._classify_windows(samples, window_len, None)
        return self._collect_spans(flags, window_len, len(samples))

    def trim_file(
        self,
        path: Path | str,
        progress: Optional[ProgressCallback] = None,
        *,
        output_dir: Path | str | None = None,
    ) -> Path:
        """Trim an audio file; returns ``path`` untouched when no splice happened."""
        source = Path(path)
        if not source.exists():
            raise AudioFileNotFound(source)
        try:
            info = sf.info(str(source))
            audio, sample_rate = sf.read(str(source), dtype="float32")
        except (RuntimeError, OSError) as exc:
            raise AudioReadError(str(exc)) from exc
        if audio.ndim > 1:
            audio = audio.mean(axis=1).astype(np.float32, copy=False)

        original = AudioBuffer(samples=audio, sample_rate=int(sample_rate))
        result = self.trim(original, progress)
        if result is original:
            return source

        target_dir = Path(output_dir) if output_dir else Path(tempfile.gettempdir())
        target = target_dir / f"silence-removed-{uuid.uuid4().hex}{source.suffix}"
        try:
            target_dir.mkdir(parents=True, exist_ok=True)
            sf.write(str(target), result.samples, result.sample_rate, format=info.format, subtype=info.subtype)
        except (RuntimeError, OSError, ValueError) as exc:
            target.unlink(missing_ok=True)
            raise AudioWriteError(str(exc)) from exc
        return target

    def _window_frames(self, sample_rate: int) -> int:
        frames = sample_rate * self.config.window_duration_ms / 1000.0
        if not math.isfinite(frames):
            return 0
        return int(frames)

    def _classify_windows(
        self, samples: np.ndarray, window_len: int, progress: Optional[ProgressCallback]
    ) -> list[bool]:
        total = len(samples)
        flags: list[bool] = []
        for offset in range(0, total, window_len):
            window = samples[offset : offset + window_len]
            flags.append(self._rms_db(window) > self.config.threshold_db)
            if progress:
                progress(min(offset + window_len, total) / total * SCAN_SHARE)
        return flags

    def _collect_spans(self, flags: list[bool], window_len: int, total: int) -> list[NonSilentSpan]:
        spans: list[NonSilentSpan] = []
        start: int | None = None
        for idx, speech in enumerate(flags):
            offset = idx * window_len
            if speech:
                if start is None:
                    start = offset
            elif start is not None:
                spans.append(NonSilentSpan(start_frame=start, length_frames=offset - start))
                start = None
        if start is not None:
            spans.append(NonSilentSpan(start_frame=start, length_frames=total - start))
        return spans

    def _splice(
        self, samples: np.ndarray, spans: list[NonSilentSpan], progress: Optional[ProgressCallback]
    ) -> np.ndarray:
        chunks = []
        for idx, span in enumerate(spans):
            chunks.append(samples[span.start_frame : span.end_frame])
            if progress:
                progress(SCAN_SHARE + (1.0 - SCAN_SHARE) * (idx + 1) / len(spans))
        return np.concatenate(chunks).astype(samples.dtype, copy=False)

    @staticmethod
    def _rms_db(window: np.ndarray) -> float:
        if window.size == 0:
            return -math.inf
        rms = math.sqrt(float(np.mean(np.square(window, dtype=np.float64))))
        if rms <= 0:
            return -math.inf
        return 20.0 * math.log10(rms)

    @staticmethod
    def _passthrough(buffer: AudioBuffer, progress: Optional[ProgressCallback]) -> AudioBuffer:
        if progress:
            progress(1.0)
        return buffer

    @staticmethod
    def _ensure_mono(samples: np.ndarray) -> np.ndarray:
        data = np.asarray(samples)
        if data.ndim == 1:
            return data
        return data[:, 0]


def trim(
    buffer: AudioBuffer,
    config: SilenceConfig | None = None,
    progress: Optional[ProgressCallback] = None,
) -> AudioBuffer:
    return SilenceTrimmer(config).trim(buffer, progress)


__all__ = [
    "AudioFileNotFound",
    "AudioReadError",
    "AudioWriteError",
    "SilenceRemovalError",
    "SilenceTrimmer",
    "trim",
]
