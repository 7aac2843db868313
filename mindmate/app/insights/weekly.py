from __future__ import annotations

import math
from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, timedelta

from .daily import MoodSnapshot


@dataclass(frozen=True)
class WeeklyTrend:
    week_start: date
    average_wellness: int
    dominant_mood: str
    total_messages: int
    positive_ratio: float
    improvement_from_previous_week: float

    @property
    def week_end(self) -> date:
        return self.week_start + timedelta(days=6)


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def week_start_of(value: date) -> date:
    """Monday of the calendar week containing ``value``."""

    return value - timedelta(days=value.weekday())


def dominant_mood(points: Sequence[MoodSnapshot]) -> str | None:
    counter = Counter(point.mood_name for point in points)
    if not counter:
        return None
    # most_common keeps first-seen order among equal counts
    return counter.most_common(1)[0][0]


def compute_weekly_trends(series: Sequence[MoodSnapshot]) -> list[WeeklyTrend]:
    """Bucket a daily series into Monday-based weeks.

    Gap-filled days carry no score and are left out of every bucket, so a week
    made only of gap-filled days produces no trend at all.
    """

    buckets: dict[date, list[MoodSnapshot]] = {}
    for point in series:
        if point.wellness_score is None:
            continue
        buckets.setdefault(week_start_of(point.date), []).append(point)

    trends: list[WeeklyTrend] = []
    previous_average: float | None = None
    for week_start in sorted(buckets):
        points = buckets[week_start]
        scores = [point.wellness_score for point in points if point.wellness_score is not None]
        average = sum(scores) / len(scores)
        positive = sum(1 for point in points if point.sentiment == "positive")
        improvement = 0.0 if previous_average is None else average - previous_average
        trends.append(
            WeeklyTrend(
                week_start=week_start,
                average_wellness=round_half_up(average),
                dominant_mood=dominant_mood(points) or "neutral",
                total_messages=sum(point.message_count for point in points),
                positive_ratio=positive / len(points),
                improvement_from_previous_week=improvement,
            )
        )
        previous_average = average
    return trends


__all__ = [
    "WeeklyTrend",
    "compute_weekly_trends",
    "dominant_mood",
    "round_half_up",
    "week_start_of",
]
