from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class MoodMessageCreate(BaseModel):
    text: str = Field(..., min_length=1, max_length=4000)
    sentiment_hint: Literal["positive", "negative", "neutral"] | None = None
    ai_response: str | None = Field(default=None, max_length=8000)


class ClassificationModel(BaseModel):
    mood_tag: str
    mood_name: str
    sentiment: str
    confidence: float = Field(ge=0.0, le=1.0)
    detection_method: str
    matched_keywords: list[str] = Field(default_factory=list)

    model_config = {
        "from_attributes": True,
    }


class CurrentMoodModel(BaseModel):
    mood_tag: str
    mood_name: str
    sentiment: str
    wellness_score: int = Field(ge=0, le=100)
    confidence: float
    interpretation: str | None = None
    last_message: str | None = None
    ai_response: str | None = None
    updated_at: datetime

    model_config = {
        "from_attributes": True,
    }


class MoodMessageResponse(BaseModel):
    classification: ClassificationModel
    updated: bool
    previous_score: int
    current: CurrentMoodModel | None = None


class CurrentMoodResponse(BaseModel):
    current: CurrentMoodModel | None = None


__all__ = [
    "ClassificationModel",
    "CurrentMoodModel",
    "CurrentMoodResponse",
    "MoodMessageCreate",
    "MoodMessageResponse",
]
