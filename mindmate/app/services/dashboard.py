from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, timedelta

from ..core.config import TREND_RANGES
from ..insights.daily import DailyAggregator, MoodSnapshot
from ..insights.generator import Insight, InsightGenerator
from ..insights.stats import DashboardStats, compute_dashboard_stats
from ..insights.streak import current_streak, longest_streak, resolve_streak
from ..insights.weekly import WeeklyTrend, compute_weekly_trends
from .daily_reset import utc_today
from .storage import StorageService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrendReport:
    range: str
    start: date
    end: date
    series: list[MoodSnapshot]
    weekly_trends: list[WeeklyTrend]
    insights: list[Insight]
    stats: DashboardStats


@dataclass(frozen=True)
class StreakReport:
    today: date
    current: int
    longest: int
    login_days: int


class DashboardService:
    """Read history for a time range and run it through the insight pipeline."""

    def __init__(
        self,
        storage: StorageService,
        *,
        aggregator: DailyAggregator | None = None,
        generator: InsightGenerator | None = None,
        clock: Callable[[], date] = utc_today,
    ) -> None:
        self._storage = storage
        self._aggregator = aggregator or DailyAggregator()
        self._generator = generator or InsightGenerator()
        self._clock = clock

    async def trends(self, user_id: int, range_name: str = "week") -> TrendReport:
        if range_name not in TREND_RANGES:
            raise ValueError(f"Unknown trend range: {range_name}")
        end = self._clock()
        start = end - timedelta(days=TREND_RANGES[range_name] - 1)

        history = await self._storage.fetch_history(user_id, start=start, end=end)
        counts = await self._storage.message_counts(user_id, start=start, end=end)
        series = self._aggregator.aggregate(history, counts, start=start, end=end)
        weekly_trends = compute_weekly_trends(series)
        insights = self._generator.generate(series, weekly_trends)

        login_days = await self._storage.list_login_days(user_id)
        # no login rows yet means there is no login log to read from
        streak = resolve_streak(login_days or None, series, end)
        stats = compute_dashboard_stats(series, weekly_trends, streak)

        logger.debug(
            "trend report built",
            extra={
                "user": user_id,
                "extra_fields": {
                    "range": range_name,
                    "days": len(series),
                    "weeks": len(weekly_trends),
                    "insights": len(insights),
                },
            },
        )
        return TrendReport(
            range=range_name,
            start=start,
            end=end,
            series=series,
            weekly_trends=weekly_trends,
            insights=insights,
            stats=stats,
        )

    async def streak(self, user_id: int) -> StreakReport:
        today = self._clock()
        login_days = await self._storage.list_login_days(user_id)
        return StreakReport(
            today=today,
            current=current_streak(login_days, today),
            longest=longest_streak(login_days),
            login_days=len(login_days),
        )


__all__ = ["DashboardService", "StreakReport", "TrendReport"]
