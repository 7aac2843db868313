from __future__ import annotations

from datetime import date, timedelta

from mindmate.app.insights.daily import MoodSnapshot
from mindmate.app.insights.stats import compute_dashboard_stats
from mindmate.app.insights.weekly import compute_weekly_trends

MONDAY = date(2024, 1, 1)


def _point(day: date, score: int | None, sentiment: str, messages: int) -> MoodSnapshot:
    return MoodSnapshot(
        date=day,
        mood_tag="😊",
        mood_name="happy",
        sentiment=sentiment,
        wellness_score=score,
        message_count=messages,
    )


def test_stats_without_data() -> None:
    stats = compute_dashboard_stats([], [], streak_days=0)

    assert stats.current_wellness == 0
    assert stats.wellness_change == 0
    assert stats.weekly_messages == 0
    assert stats.positive_ratio_percent == 0
    assert stats.tracked_days == 0


def test_stats_compare_latest_week_with_previous() -> None:
    series = [
        _point(MONDAY, 60, "negative", 2),
        _point(MONDAY + timedelta(days=1), 70, "positive", 2),
        _point(MONDAY + timedelta(days=7), 80, "positive", 5),
        _point(MONDAY + timedelta(days=8), 81, "positive", 4),
    ]
    trends = compute_weekly_trends(series)

    stats = compute_dashboard_stats(series, trends, streak_days=4)

    assert stats.current_wellness == 81
    assert stats.wellness_change == 16
    assert stats.weekly_messages == 9
    assert stats.messages_change == 5
    assert stats.positive_ratio_percent == 100
    assert stats.positive_ratio_change == 50
    assert stats.streak_days == 4
    assert stats.tracked_days == 4


def test_stats_fall_back_to_whole_series_without_trends() -> None:
    series = [
        _point(MONDAY, 70, "positive", 1),
        _point(MONDAY + timedelta(days=1), None, "neutral", 0),
        _point(MONDAY + timedelta(days=2), 75, "negative", 2),
    ]

    stats = compute_dashboard_stats(series, [], streak_days=1)

    assert stats.current_wellness == 73
    assert stats.weekly_messages == 3
    assert stats.positive_ratio_percent == 50
    assert stats.messages_change == 0
    assert stats.tracked_days == 2
