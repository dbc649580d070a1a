"""Speech coaching via the OpenAI Responses API."""

from __future__ import annotations

import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from ..schemas import CoachingModel, CoachingResult, CoachingStyle
from ..settings import OPENAI_API_KEY, EnvSecretProvider, PipelineSettings, SecretProvider
from .network import ApiError, send
from .retry import ErrorKind, RequestExecutor, RequestOutcome, Success, TerminalFailure

LOGGER = logging.getLogger("speechcoach.coaching")


RESULT_SCHEMA = """{
  "scores": {
    "clarity": <1-10>,
    "confidence": <1-10>,
    "conciseness": <1-10>,
    "structure": <1-10>,
    "persuasion": <1-10>
  },
  "metrics": {
    "durationSeconds": <number or null>,
    "estimatedWPM": <number or null>,
    "fillerWords": {"word": count} or null,
    "repeatPhrases": ["phrase"] or null
  },
  "highlights": [
    {"type": "strength", "text": "..."},
    {"type": "improvement", "text": "..."}
  ],
  "actionPlan": ["Step 1...", "Step 2...", "Step 3..."],
  "rewrite": {"version": "improved", "text": "..."} or null
}"""


class CoachingError(ApiError):
    pass


def build_system_prompt(style: CoachingStyle) -> str:
    return (
        f"{style.system_prompt_fragment}\n\n"
        "Analyze the speech transcript provided and output ONLY valid JSON matching this exact schema "
        "(no markdown, no extra text):\n\n"
        f"{RESULT_SCHEMA}"
    )


def build_user_prompt(
    transcript: str,
    speech_goal: Optional[str] = None,
    target_audience: Optional[str] = None,
    duration_seconds: Optional[float] = None,
) -> str:
    prompt = f"Please analyze this speech transcript:\n\n{transcript}"
    context = []
    if speech_goal:
        context.append(f"Speech goal: {speech_goal}")
    if target_audience:
        context.append(f"Target audience: {target_audience}")
    if duration_seconds is not None and duration_seconds > 0:
        context.append(f"Duration: {duration_seconds:.0f} seconds")
    if context:
        prompt += "\n\nContext:\n" + "\n".join(context)
    return prompt


def extract_output_text(body: object) -> Optional[str]:
    """First non-empty ``output_text`` inside a ``message`` output item."""
    if not isinstance(body, dict) or not isinstance(body.get("output"), list):
        return None
    for item in body["output"]:
        if not isinstance(item, dict) or item.get("type") != "message":
            continue
        for content in item.get("content") or []:
            if isinstance(content, dict) and content.get("type") == "output_text" and content.get("text"):
                return content["text"]
    return None


def parse_coaching_result(raw_text: str) -> CoachingResult:
    cleaned = raw_text.replace("```json", "").replace("```", "").strip()
    try:
        result = CoachingResult.model_validate_json(cleaned)
    except ValidationError as exc:
        raise CoachingError(
            ErrorKind.MALFORMED_RESPONSE,
            f"Failed to parse coaching response: {exc.error_count()} validation error(s)",
        ) from exc
    return result.model_copy(update={"raw": raw_text})


class CoachingClient:
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
        self._client = client or httpx.AsyncClient(timeout=settings.coaching_timeout_sec)
        self._executor = executor or RequestExecutor(settings.retry_policy(), name="coaching")

    @property
    def url(self) -> str:
        return f"{self.settings.openai_base_url.rstrip('/')}/responses"

    async def analyze(
        self,
        transcript: str,
        *,
        model: CoachingModel | str | None = None,
        style: CoachingStyle | str | None = None,
        speech_goal: Optional[str] = None,
        target_audience: Optional[str] = None,
        duration_seconds: Optional[float] = None,
    ) -> CoachingResult:
        trimmed = transcript.strip()
        if not trimmed:
            raise CoachingError(
                ErrorKind.EMPTY_TRANSCRIPT,
                "No transcript to analyze. Please transcribe the session first.",
            )
        api_key = self.secrets.get_secret(OPENAI_API_KEY)
        if not api_key:
            raise CoachingError(
                ErrorKind.MISSING_API_KEY,
                "OpenAI API key not configured. Please set your API key in Settings.",
            )

        model = _choose(CoachingModel, model or self.settings.coaching_model, "coaching model")
        style = _choose(CoachingStyle, style or self.settings.coaching_style, "coaching style")
        payload = {
            "model": model.value,
            "instructions": build_system_prompt(style),
            "input": build_user_prompt(
                trimmed,
                speech_goal if speech_goal is not None else self.settings.speech_goal,
                target_audience if target_audience is not None else self.settings.target_audience,
                duration_seconds,
            ),
        }
        headers = {"Authorization": f"Bearer {api_key}"}

        async def attempt() -> RequestOutcome:
            return await send(
                lambda: self._client.post(self.url, headers=headers, json=payload),
                _parse_responses_body,
            )

        LOGGER.info("Requesting %s coaching with %s", style.value, model.value)
        outcome = await self._executor.execute(attempt)
        if not isinstance(outcome, Success):
            raise CoachingError.from_outcome(outcome)
        return parse_coaching_result(outcome.payload)

    async def aclose(self) -> None:
        await self._client.aclose()


def _choose(options, value, label: str):
    try:
        return options(value)
    except ValueError:
        allowed = ", ".join(option.value for option in options)
        raise CoachingError(ErrorKind.INVALID_OPTION, f"Unknown {label} '{value}' (expected one of: {allowed})") from None


def _parse_responses_body(response: httpx.Response) -> RequestOutcome:
    try:
        body = response.json()
    except ValueError:
        return TerminalFailure(ErrorKind.MALFORMED_RESPONSE, "Could not decode API response")
    text = extract_output_text(body)
    if text is None:
        return TerminalFailure(ErrorKind.MALFORMED_RESPONSE, "No text content in API response")
    return Success(text)


__all__ = [
    "CoachingClient",
    "CoachingError",
    "CoachingModel",
    "CoachingStyle",
    "build_system_prompt",
    "build_user_prompt",
    "extract_output_text",
    "parse_coaching_result",
]
