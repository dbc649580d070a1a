"""Pipeline settings resolved from the environment."""

from __future__ import annotations

import os
from typing import Dict, Optional, Protocol

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .audio.types import SilenceConfig
from .schemas import CoachingModel, CoachingStyle, TranscriptionModel
from .services.retry import RetryPolicy


def _env(name: str, default: str) -> str:
    return os.getenv(name, default)


def _env_optional(name: str) -> Optional[str]:
    return os.getenv(name) or None


class PipelineSettings(BaseModel):
    # environment defaults arrive as strings and go through field validation
    model_config = ConfigDict(validate_default=True)

    openai_base_url: str = Field(default_factory=lambda: _env("OPENAI_BASE_URL", "https://api.openai.com/v1"))
    transcription_model: TranscriptionModel = Field(
        default_factory=lambda: _env("OPENAI_TRANSCRIPTION_MODEL", "gpt-4o-transcribe")
    )
    coaching_model: CoachingModel = Field(default_factory=lambda: _env("OPENAI_COACHING_MODEL", "gpt-4.1"))
    coaching_style: CoachingStyle = Field(default_factory=lambda: _env("COACHING_STYLE", "supportive"))
    speech_goal: Optional[str] = Field(default_factory=lambda: _env_optional("SPEECH_GOAL"))
    target_audience: Optional[str] = Field(default_factory=lambda: _env_optional("TARGET_AUDIENCE"))
    transcription_timeout_sec: float = Field(
        default_factory=lambda: _env("TRANSCRIPTION_TIMEOUT_SEC", "120")
    )
    coaching_timeout_sec: float = Field(default_factory=lambda: _env("COACHING_TIMEOUT_SEC", "60"))
    request_max_retries: int = Field(default_factory=lambda: _env("REQUEST_MAX_RETRIES", "1"))
    rate_limit_default_wait_sec: float = Field(
        default_factory=lambda: _env("RATE_LIMIT_DEFAULT_WAIT_SEC", "5")
    )
    silence_threshold_db: float = Field(default_factory=lambda: _env("SILENCE_THRESHOLD_DB", "-55"))
    silence_window_ms: float = Field(default_factory=lambda: _env("SILENCE_WINDOW_MS", "50"))
    silence_min_output_sec: float = Field(default_factory=lambda: _env("SILENCE_MIN_OUTPUT_SEC", "1.0"))
    stop_words_path: Optional[str] = Field(default_factory=lambda: _env_optional("LEXICON_STOP_WORDS_PATH"))
    filler_words_path: Optional[str] = Field(default_factory=lambda: _env_optional("LEXICON_FILLER_WORDS_PATH"))

    def silence_config(self) -> SilenceConfig:
        return SilenceConfig(
            threshold_db=self.silence_threshold_db,
            window_duration_ms=self.silence_window_ms,
            minimum_output_duration=self.silence_min_output_sec,
        )

    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(
            max_retries=self.request_max_retries,
            default_retry_after=self.rate_limit_default_wait_sec,
        )


class SettingsError(ValueError):
    """Raised when configured values cannot be parsed."""


def load_settings(**overrides) -> PipelineSettings:
    try:
        return PipelineSettings(**overrides)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()
        )
        raise SettingsError(f"Invalid settings: {problems}") from exc


class SecretProvider(Protocol):
    def get_secret(self, name: str) -> Optional[str]: ...


OPENAI_API_KEY = "OPENAI_API_KEY"


class EnvSecretProvider:
    """Reads secrets from environment variables."""

    def get_secret(self, name: str) -> Optional[str]:
        value = os.getenv(name, "").strip()
        return value or None


class StaticSecretProvider:
    def __init__(self, secrets: Dict[str, str] | None = None) -> None:
        self._secrets = dict(secrets or {})

    def get_secret(self, name: str) -> Optional[str]:
        return self._secrets.get(name) or None


__all__ = [
    "EnvSecretProvider",
    "OPENAI_API_KEY",
    "PipelineSettings",
    "SecretProvider",
    "SettingsError",
    "StaticSecretProvider",
    "load_settings",
]
