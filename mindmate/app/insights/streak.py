from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date, timedelta
from itertools import pairwise

from .daily import MoodSnapshot


def current_streak(login_dates: Iterable[date], today: date) -> int:
    """Consecutive days with a login, counted backwards from ``today``.

    Returns 0 when there is no login for ``today``.
    """

    days = set(login_dates)
    if today not in days:
        return 0
    streak = 0
    cursor = today
    while cursor in days:
        streak += 1
        cursor -= timedelta(days=1)
    return streak


def series_streak(series: Sequence[MoodSnapshot], today: date) -> int:
    """Streak derived from scored days of a mood series.

    Only used when no login log exists. The newest scored day has to be today
    or yesterday for the streak to count.
    """

    days = sorted({point.date for point in series if point.wellness_score is not None}, reverse=True)
    if not days or (today - days[0]).days > 1:
        return 0
    streak = 1
    for newer, older in pairwise(days):
        if newer - older != timedelta(days=1):
            break
        streak += 1
    return streak


def longest_streak(dates: Iterable[date]) -> int:
    sorted_dates = sorted(set(dates))
    if not sorted_dates:
        return 0
    streak = 1
    longest = 1
    for previous, current in pairwise(sorted_dates):
        if current == previous + timedelta(days=1):
            streak += 1
            longest = max(longest, streak)
        else:
            streak = 1
    return longest


def resolve_streak(
    login_dates: Iterable[date] | None,
    series: Sequence[MoodSnapshot],
    today: date,
) -> int:
    if login_dates is None:
        return series_streak(series, today)
    return current_streak(login_dates, today)


__all__ = ["current_streak", "longest_streak", "resolve_streak", "series_streak"]
