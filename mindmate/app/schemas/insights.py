from __future__ import annotations

import datetime as dt
from typing import Literal

from pydantic import BaseModel, Field


class MoodPointModel(BaseModel):
    date: dt.date
    mood_tag: str
    mood_name: str
    sentiment: str
    wellness_score: int | None = Field(default=None, ge=0, le=100)
    message_count: int = Field(ge=0)
    timestamp: dt.datetime | None = None

    model_config = {
        "from_attributes": True,
    }


class WeeklyTrendModel(BaseModel):
    week_start: dt.date
    week_end: dt.date
    average_wellness: int
    dominant_mood: str
    total_messages: int = Field(ge=0)
    positive_ratio: float = Field(ge=0.0, le=1.0)
    improvement_from_previous_week: float

    model_config = {
        "from_attributes": True,
    }


class InsightModel(BaseModel):
    kind: Literal["improvement", "concern", "achievement", "pattern"]
    title: str
    description: str
    actionable_hint: str | None = None

    model_config = {
        "from_attributes": True,
    }


class DashboardStatsModel(BaseModel):
    current_wellness: int
    wellness_change: int
    weekly_messages: int
    messages_change: int
    streak_days: int
    positive_ratio_percent: int
    positive_ratio_change: int
    tracked_days: int

    model_config = {
        "from_attributes": True,
    }


class TrendsResponse(BaseModel):
    range: str
    start: dt.date
    end: dt.date
    series: list[MoodPointModel]
    weekly_trends: list[WeeklyTrendModel]
    insights: list[InsightModel] = Field(max_length=4)
    stats: DashboardStatsModel


class StreakResponse(BaseModel):
    today: dt.date
    current: int = Field(ge=0)
    longest: int = Field(ge=0)
    login_days: int = Field(ge=0)

    model_config = {
        "from_attributes": True,
    }


class DailyResetResponse(BaseModel):
    reset: bool
    day: dt.date


__all__ = [
    "DailyResetResponse",
    "DashboardStatsModel",
    "InsightModel",
    "MoodPointModel",
    "StreakResponse",
    "TrendsResponse",
    "WeeklyTrendModel",
]
