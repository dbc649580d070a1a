"""Sequence silence trimming, transcription and transcript analytics."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Callable, Optional

import soundfile as sf

from ..analytics.lexicon import load_lexicon
from ..analytics.stats import StatsEngine
from ..audio.silence_trimmer import AudioReadError, SilenceTrimmer
from ..schemas import PipelineResult
from ..settings import PipelineSettings, SecretProvider
from .coaching import CoachingClient
from .transcription import TranscriptionClient

LOGGER = logging.getLogger("speechcoach.pipeline")


class SpeechPipeline:
    """Trim -> transcribe -> stats (-> coach) for one recording at a time."""

    def __init__(
        self,
        settings: PipelineSettings,
        *,
        secrets: SecretProvider | None = None,
        trimmer: SilenceTrimmer | None = None,
        transcriber: TranscriptionClient | None = None,
        stats: StatsEngine | None = None,
        coach: CoachingClient | None = None,
    ) -> None:
        self.settings = settings
        self.trimmer = trimmer or SilenceTrimmer(settings.silence_config())
        self.transcriber = transcriber or TranscriptionClient(settings, secrets=secrets)
        self.stats = stats or StatsEngine(load_lexicon(settings.stop_words_path, settings.filler_words_path))
        self.coach = coach or CoachingClient(settings, secrets=secrets)

    async def process(
        self,
        audio_path: Path | str,
        *,
        duration: Optional[float] = None,
        coach: bool = False,
        progress: Optional[Callable[[float], None]] = None,
        output_dir: Path | str | None = None,
    ) -> PipelineResult:
        """Run the pipeline for one recording.

        With ``output_dir`` the trimmed copy is kept there and reported as
        ``audio_path``. Without it the copy goes to the temp dir and is deleted
        once transcription finishes; ``audio_path`` is then the source file.
        """
        source = Path(audio_path)
        upload_path = await asyncio.to_thread(self.trimmer.trim_file, source, progress, output_dir=output_dir)
        trimmed = upload_path != source
        keep_upload = output_dir is not None
        try:
            if duration is None:
                duration = await asyncio.to_thread(_recording_duration, source)
            transcript = await self.transcriber.transcribe(upload_path)
        finally:
            if trimmed and not keep_upload:
                upload_path.unlink(missing_ok=True)

        stats = self.stats.calculate_stats(transcript, duration)
        LOGGER.info("Transcript analysed: %d words, %d filler(s)", stats.total_words, stats.filler_word_count)

        coaching = None
        if coach:
            coaching = await self.coach.analyze(transcript, duration_seconds=duration)
        return PipelineResult(
            audio_path=str(upload_path if trimmed and keep_upload else source),
            trimmed=trimmed,
            transcript=transcript,
            stats=stats,
            coaching=coaching,
        )

    async def aclose(self) -> None:
        await self.transcriber.aclose()
        await self.coach.aclose()


def _recording_duration(path: Path) -> float:
    try:
        return float(sf.info(str(path)).duration)
    except (RuntimeError, OSError) as exc:
        raise AudioReadError(str(exc)) from exc


__all__ = ["SpeechPipeline"]
