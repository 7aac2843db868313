from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from .daily import MoodSnapshot
from .weekly import WeeklyTrend, round_half_up


@dataclass(frozen=True)
class DashboardStats:
    current_wellness: int
    wellness_change: int
    weekly_messages: int
    messages_change: int
    streak_days: int
    positive_ratio_percent: int
    positive_ratio_change: int
    tracked_days: int


def compute_dashboard_stats(
    series: Sequence[MoodSnapshot],
    weekly_trends: Sequence[WeeklyTrend],
    streak_days: int,
) -> DashboardStats:
    """Headline dashboard figures.

    Figures come from the latest week when one exists; otherwise the whole
    series is used and the change values are 0.
    """

    scores = [point.wellness_score for point in series if point.wellness_score is not None]
    latest = weekly_trends[-1] if weekly_trends else None
    previous = weekly_trends[-2] if len(weekly_trends) > 1 else None

    if latest is not None:
        current_wellness = latest.average_wellness
        wellness_change = round_half_up(latest.improvement_from_previous_week)
        weekly_messages = latest.total_messages
        positive_ratio = latest.positive_ratio
    else:
        current_wellness = round_half_up(sum(scores) / len(scores)) if scores else 0
        wellness_change = 0
        weekly_messages = sum(point.message_count for point in series)
        positive = sum(1 for point in series if point.has_score and point.sentiment == "positive")
        positive_ratio = positive / len(scores) if scores else 0.0

    messages_change = 0
    positive_ratio_change = 0
    if latest is not None and previous is not None:
        messages_change = latest.total_messages - previous.total_messages
        positive_ratio_change = round_half_up(
            (latest.positive_ratio - previous.positive_ratio) * 100
        )

    return DashboardStats(
        current_wellness=current_wellness,
        wellness_change=wellness_change,
        weekly_messages=weekly_messages,
        messages_change=messages_change,
        streak_days=streak_days,
        positive_ratio_percent=round_half_up(positive_ratio * 100),
        positive_ratio_change=positive_ratio_change,
        tracked_days=len(scores),
    )


__all__ = ["DashboardStats", "compute_dashboard_stats"]
