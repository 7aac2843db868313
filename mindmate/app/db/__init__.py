"""Database utilities for MindMate."""

from .models import (
    Addiction,
    Base,
    CurrentMood,
    CustomGoal,
    DailyState,
    GoalCompletion,
    LoginDay,
    MessageLogEntry,
    MoodHistoryEntry,
    SettingEntry,
    User,
)

__all__ = [
    "Addiction",
    "Base",
    "CurrentMood",
    "CustomGoal",
    "DailyState",
    "GoalCompletion",
    "LoginDay",
    "MessageLogEntry",
    "MoodHistoryEntry",
    "SettingEntry",
    "User",
]
