"""Command line entry point for the SpeechCoach pipeline."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from .analytics.lexicon import load_lexicon
from .analytics.stats import StatsEngine
from .audio.silence_trimmer import SilenceRemovalError, SilenceTrimmer
from .schemas import CoachingStyle
from .services.coaching import CoachingClient
from .services.network import ApiError
from .services.pipeline import SpeechPipeline
from .services.transcription import TranscriptionClient
from .settings import SettingsError, load_settings

LOGGER = logging.getLogger("speechcoach.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Trim, transcribe and analyse speech recordings.")
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO).")
    sub = parser.add_subparsers(dest="command", required=True)

    trim = sub.add_parser("trim", help="Remove silent stretches from an audio file.")
    trim.add_argument("audio", type=Path)
    trim.add_argument("--output-dir", type=Path, default=None)
    trim.add_argument("--threshold-db", type=float, default=None)

    stats = sub.add_parser("stats", help="Compute transcript statistics.")
    stats.add_argument("transcript", type=Path, help="Plain-text transcript file ('-' for stdin).")
    stats.add_argument("--duration", type=float, default=None, help="Recording length in seconds.")

    transcribe = sub.add_parser("transcribe", help="Transcribe an audio file with OpenAI.")
    transcribe.add_argument("audio", type=Path)

    coach = sub.add_parser("coach", help="Request coaching feedback for a transcript.")
    coach.add_argument("transcript", type=Path)
    coach.add_argument("--style", default=None, choices=[style.value for style in CoachingStyle])
    coach.add_argument("--duration", type=float, default=None)

    process = sub.add_parser("process", help="Trim, transcribe and analyse a recording.")
    process.add_argument("audio", type=Path)
    process.add_argument("--coach", action="store_true", help="Also request coaching feedback.")
    process.add_argument("--output-dir", type=Path, default=None)
    return parser


def _read_text(path: Path) -> str:
    if str(path) == "-":
        return sys.stdin.read()
    return path.read_text(encoding="utf-8")


async def _run(args: argparse.Namespace) -> dict:
    overrides = {}
    if getattr(args, "threshold_db", None) is not None:
        overrides["silence_threshold_db"] = args.threshold_db
    settings = load_settings(**overrides)

    if args.command == "trim":
        result = SilenceTrimmer(settings.silence_config()).trim_file(args.audio, output_dir=args.output_dir)
        return {"audio_path": str(result), "trimmed": result != args.audio}
    if args.command == "stats":
        engine = StatsEngine(load_lexicon(settings.stop_words_path, settings.filler_words_path))
        return engine.calculate_stats(_read_text(args.transcript), args.duration).model_dump(mode="json")
    if args.command == "transcribe":
        client = TranscriptionClient(settings)
        try:
            return {"text": await client.transcribe(args.audio)}
        finally:
            await client.aclose()
    if args.command == "coach":
        client = CoachingClient(settings)
        try:
            result = await client.analyze(
                _read_text(args.transcript), style=args.style, duration_seconds=args.duration
            )
        finally:
            await client.aclose()
        return result.model_dump(mode="json", by_alias=True, exclude={"raw"})

    pipeline = SpeechPipeline(settings)
    try:
        result = await pipeline.process(args.audio, coach=args.coach, output_dir=args.output_dir)
    finally:
        await pipeline.aclose()
    return result.model_dump(mode="json")


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        output = asyncio.run(_run(args))
    except (SilenceRemovalError, ApiError, SettingsError, OSError) as exc:
        LOGGER.error("%s", exc)
        return 1
    print(json.dumps(output, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
