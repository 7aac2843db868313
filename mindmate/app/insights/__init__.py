"""Daily aggregation, weekly trends, insights and streaks over mood history."""

from .daily import DailyAggregator, MessageCount, MoodSnapshot
from .generator import Insight, InsightGenerator
from .stats import DashboardStats, compute_dashboard_stats
from .streak import current_streak, longest_streak, resolve_streak, series_streak
from .weekly import WeeklyTrend, compute_weekly_trends

__all__ = [
    "DailyAggregator",
    "DashboardStats",
    "Insight",
    "InsightGenerator",
    "MessageCount",
    "MoodSnapshot",
    "WeeklyTrend",
    "compute_dashboard_stats",
    "compute_weekly_trends",
    "current_streak",
    "longest_streak",
    "resolve_streak",
    "series_streak",
]
