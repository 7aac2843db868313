from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace
from datetime import date, datetime, time, timedelta

from ..mood.lexicon import NEUTRAL_NAME, NEUTRAL_TAG


@dataclass(frozen=True)
class MoodSnapshot:
    """Mood state of one user on one calendar day."""

    date: date
    mood_tag: str
    mood_name: str
    sentiment: str
    wellness_score: int | None
    message_count: int = 0
    timestamp: datetime | None = None

    @property
    def has_score(self) -> bool:
        return self.wellness_score is not None


@dataclass(frozen=True)
class MessageCount:
    date: date
    count: int


def placeholder_snapshot(
    day: date,
    *,
    wellness_score: int | None = None,
    message_count: int = 0,
) -> MoodSnapshot:
    return MoodSnapshot(
        date=day,
        mood_tag=NEUTRAL_TAG,
        mood_name=NEUTRAL_NAME,
        sentiment="neutral",
        wellness_score=wellness_score,
        message_count=message_count,
        timestamp=datetime.combine(day, time.min),
    )


def _sort_key(snapshot: MoodSnapshot) -> datetime:
    return snapshot.timestamp or datetime.combine(snapshot.date, time.min)


class DailyAggregator:
    """Merge stored snapshots and message counts into one contiguous daily series."""

    def __init__(self, placeholder_score: int = 60) -> None:
        self._placeholder_score = placeholder_score

    def aggregate(
        self,
        history: Iterable[MoodSnapshot],
        message_log: Iterable[MessageCount],
        *,
        start: date | None = None,
        end: date | None = None,
    ) -> list[MoodSnapshot]:
        by_day: dict[date, MoodSnapshot] = {}

        for snapshot in history:
            if not _within(snapshot.date, start, end):
                continue
            existing = by_day.get(snapshot.date)
            if existing is None or _sort_key(snapshot) >= _sort_key(existing):
                by_day[snapshot.date] = snapshot

        for entry in message_log:
            if entry.count <= 0 or not _within(entry.date, start, end):
                continue
            existing = by_day.get(entry.date)
            if existing is None:
                by_day[entry.date] = placeholder_snapshot(
                    entry.date,
                    wellness_score=self._placeholder_score,
                    message_count=entry.count,
                )
            else:
                by_day[entry.date] = replace(
                    existing, message_count=existing.message_count + entry.count
                )

        if by_day:
            first = min(by_day) if start is None else start
            last = max(by_day) if end is None else end
        elif start is not None and end is not None:
            first, last = start, end
        else:
            return []

        series: list[MoodSnapshot] = []
        current = first
        while current <= last:
            series.append(by_day.get(current) or placeholder_snapshot(current))
            current += timedelta(days=1)
        return series


def _within(day: date, start: date | None, end: date | None) -> bool:
    if start is not None and day < start:
        return False
    if end is not None and day > end:
        return False
    return True


__all__ = ["DailyAggregator", "MessageCount", "MoodSnapshot", "placeholder_snapshot"]
