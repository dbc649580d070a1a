"""OpenAI speech-to-text client."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import httpx

from ..schemas import TranscriptionModel
from ..settings import OPENAI_API_KEY, EnvSecretProvider, PipelineSettings, SecretProvider
from .network import ApiError, send
from .retry import ErrorKind, RequestExecutor, RequestOutcome, Success, TerminalFailure

LOGGER = logging.getLogger("speechcoach.transcription")

MAX_FILE_SIZE = 25 * 1024 * 1024


class TranscriptionError(ApiError):
    pass


class TranscriptionClient:
    def __init__(
        self,
        settings: PipelineSettings,
        *,
        secrets: SecretProvider | None = None,
        client: Optional[httpx.AsyncClient] = None,
        executor: RequestExecutor | None = None,
    ) -> None:
        self.settings = settings
        self.secrets = secrets or EnvSecretProvider()
        self.model = settings.transcription_model
        self._client = client or httpx.AsyncClient(timeout=settings.transcription_timeout_sec)
        self._executor = executor or RequestExecutor(settings.retry_policy(), name="transcription")

    @property
    def url(self) -> str:
        return f"{self.settings.openai_base_url.rstrip('/')}/audio/transcriptions"

    async def transcribe(self, audio_path: Path | str) -> str:
        path = Path(audio_path)
        if not path.exists():
            raise TranscriptionError(ErrorKind.AUDIO_NOT_FOUND, "Audio file not found at the specified location.")
        size = path.stat().st_size
        if size > MAX_FILE_SIZE:
            raise TranscriptionError(
                ErrorKind.FILE_TOO_LARGE,
                f"Audio file is too large ({size / (1024 * 1024):.1f} MB). Maximum is 25 MB.",
            )
        api_key = self.secrets.get_secret(OPENAI_API_KEY)
        if not api_key:
            raise TranscriptionError(
                ErrorKind.MISSING_API_KEY,
                "OpenAI API key not configured. Please set your API key in Settings.",
            )

        audio = path.read_bytes()
        headers = {"Authorization": f"Bearer {api_key}"}
        data = {"model": self.model.value, "response_format": "json"}

        async def attempt() -> RequestOutcome:
            files = {"file": (path.name, audio, _mime_type(path))}
            return await send(
                lambda: self._client.post(self.url, headers=headers, data=data, files=files),
                _parse_transcription,
            )

        LOGGER.info("Transcribing %s (%d bytes) with %s", path.name, size, self.model.value)
        outcome = await self._executor.execute(attempt)
        if not isinstance(outcome, Success):
            raise TranscriptionError.from_outcome(outcome)

        text = outcome.payload.strip()
        if not text:
            raise TranscriptionError(ErrorKind.EMPTY_TRANSCRIPT, "No speech detected in the audio.")
        return text

    async def aclose(self) -> None:
        await self._client.aclose()


def _parse_transcription(response: httpx.Response) -> RequestOutcome:
    try:
        body = response.json()
    except ValueError:
        body = None
    if not isinstance(body, dict) or not isinstance(body.get("text"), str):
        return TerminalFailure(ErrorKind.MALFORMED_RESPONSE, "Failed to parse the transcription response.")
    return Success(body["text"])


def _mime_type(path: Path) -> str:
    suffix = path.suffix.lower()
    if suffix == ".flac":
        return "audio/flac"
    if suffix == ".mp3":
        return "audio/mpeg"
    if suffix in (".m4a", ".mp4"):
        return "audio/m4a"
    return "audio/wav"


__all__ = ["MAX_FILE_SIZE", "TranscriptionClient", "TranscriptionError", "TranscriptionModel"]
