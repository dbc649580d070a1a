"""Pydantic schemas for analytics and coaching results."""

from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class TranscriptionModel(str, Enum):
    GPT_4O_TRANSCRIBE = "gpt-4o-transcribe"
    GPT_4O_MINI_TRANSCRIBE = "gpt-4o-mini-transcribe"


class CoachingModel(str, Enum):
    GPT_4_1 = "gpt-4.1"
    GPT_4O = "gpt-4o"
    GPT_4_1_MINI = "gpt-4.1-mini"


class CoachingStyle(str, Enum):
    SUPPORTIVE = "supportive"
    DIRECT = "direct"
    DETAILED = "detailed"

    @property
    def system_prompt_fragment(self) -> str:
        return STYLE_PROMPTS[self]


STYLE_PROMPTS = {
    CoachingStyle.SUPPORTIVE: (
        "You are a supportive and encouraging speech coach. "
        "Lead with strengths, then gently suggest improvements."
    ),
    CoachingStyle.DIRECT: (
        "You are a direct and no-nonsense speech coach. "
        "Be concise and focus on the most impactful improvements."
    ),
    CoachingStyle.DETAILED: (
        "You are a thorough and analytical speech coach. "
        "Provide detailed analysis with specific examples from the transcript."
    ),
}


class WordCount(BaseModel):
    model_config = ConfigDict(frozen=True)

    word: str
    count: int = Field(ge=1)


class TranscriptStats(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_words: int = Field(default=0, ge=0)
    unique_words: int = Field(default=0, ge=0)
    filler_word_count: int = Field(default=0, ge=0)
    filler_word_breakdown: Dict[str, int] = Field(default_factory=dict)
    top_words: List[WordCount] = Field(default_factory=list)
    words_per_minute: float | None = None


class CoachingScores(BaseModel):
    """Speech quality scores on a 1-10 scale."""

    clarity: int = Field(ge=1, le=10)
    confidence: int = Field(ge=1, le=10)
    conciseness: int = Field(ge=1, le=10)
    structure: int = Field(ge=1, le=10)
    persuasion: int = Field(ge=1, le=10)

    @property
    def overall(self) -> float:
        return (self.clarity + self.confidence + self.conciseness + self.structure + self.persuasion) / 5.0


class CoachingMetrics(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    duration_seconds: float | None = Field(default=None, alias="durationSeconds")
    estimated_wpm: float | None = Field(default=None, alias="estimatedWPM")
    filler_words: Optional[Dict[str, int]] = Field(default=None, alias="fillerWords")
    repeat_phrases: Optional[List[str]] = Field(default=None, alias="repeatPhrases")


class HighlightType(str, Enum):
    STRENGTH = "strength"
    IMPROVEMENT = "improvement"


class CoachingHighlight(BaseModel):
    type: HighlightType
    text: str


class CoachingRewrite(BaseModel):
    version: str
    text: str


class CoachingResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    scores: CoachingScores
    metrics: CoachingMetrics
    highlights: List[CoachingHighlight] = Field(default_factory=list)
    action_plan: List[str] = Field(default_factory=list, alias="actionPlan")
    rewrite: CoachingRewrite | None = None
    raw: str | None = None


class PipelineResult(BaseModel):
    audio_path: str
    trimmed: bool
    transcript: str
    stats: TranscriptStats
    coaching: CoachingResult | None = None
