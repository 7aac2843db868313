from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Literal, Protocol

from ..mood.lexicon import NEUTRAL_TAG
from .storage import StorageService

logger = logging.getLogger(__name__)

GoalCategory = Literal["base", "ai", "general", "custom", "addiction"]

CUSTOM_GOAL_PREFIX = "custom-"
EARLY_RECOVERY_DAYS = 7
BUILDING_HABITS_DAYS = 30


@dataclass(frozen=True)
class Goal:
    id: str
    text: str
    points_value: int
    category: GoalCategory
    completed: bool = False
    created_at: datetime | None = None


@dataclass(frozen=True)
class AddictionProgress:
    id: int
    name: str
    days_clean: int


class MoodState(Protocol):
    mood_tag: str
    mood_name: str
    sentiment: str
    wellness_score: int
    last_message: str | None
    updated_at: datetime


class GoalNotFoundError(LookupError):
    """Raised when a goal id is not part of the user's goals for today."""


BASE_GOALS: tuple[Goal, ...] = (
    Goal("daily-chat", "Daily wellness chat", 8, "base"),
    Goal("mood-tracking", "Mood tracking", 6, "base"),
    Goal("emotional-checkin", "Emotional check-in", 7, "base"),
)

GENERAL_GOALS: tuple[Goal, ...] = (
    Goal("evening-reflection", "Evening reflection", 5, "general"),
    Goal("gratitude-practice", "Gratitude practice", 4, "general"),
)

# (key, text, points) per recovery stage
_EARLY_RECOVERY = (
    ("affirmation", "Start day with recovery affirmation", 8),
    ("hydration", "Drink water to support healing", 5),
    ("support_check", "Connect with support person", 10),
)
_BUILDING_HABITS = (
    ("morning_routine", "Complete healthy morning routine", 7),
    ("trigger_awareness", "Identify and manage triggers", 8),
    ("physical_activity", "Engage in physical exercise", 6),
    ("gratitude", "Practice gratitude for recovery", 5),
)
_ESTABLISHED_RECOVERY = (
    ("mindfulness", "Practice mindfulness meditation", 7),
    ("help_others", "Support someone else in recovery", 10),
    ("skill_building", "Learn new healthy coping skill", 8),
    ("reflection", "Reflect on recovery progress", 6),
)


class GoalPlanner:
    """Build the daily goal list and work out which goals are already done."""

    def base_goals(self) -> list[Goal]:
        return list(BASE_GOALS)

    def general_goals(self) -> list[Goal]:
        return list(GENERAL_GOALS)

    def mood_goals(self, mood: MoodState | None) -> list[Goal]:
        if mood is None:
            return []
        score = mood.wellness_score
        negative = mood.sentiment == "negative"
        goals: list[Goal] = []
        if score < 60:
            goals.append(Goal("ai_mood_boost", "Practice 5 minutes of mindful breathing", 8, "ai"))
        if negative:
            goals.append(
                Goal("ai_gratitude", "Write down 3 things you're grateful for today", 6, "ai")
            )
        if score < 70:
            goals.append(Goal("ai_physical_activity", "Take a 15-minute walk outdoors", 7, "ai"))
        if negative or score < 60:
            goals.append(
                Goal("ai_social_connection", "Reach out to a friend or family member", 9, "ai")
            )
        if mood.mood_name == "anxious":
            goals.append(
                Goal(
                    "ai_worry_time",
                    'Set aside 10 minutes of "worry time" to process concerns',
                    7,
                    "ai",
                )
            )
        return goals

    def addiction_goals(self, addictions: Iterable[AddictionProgress]) -> list[Goal]:
        goals: list[Goal] = []
        for addiction in addictions:
            if addiction.days_clean < EARLY_RECOVERY_DAYS:
                stage = _EARLY_RECOVERY
            elif addiction.days_clean < BUILDING_HABITS_DAYS:
                stage = _BUILDING_HABITS
            else:
                stage = _ESTABLISHED_RECOVERY
            goals.extend(
                Goal(f"addiction_{addiction.id}_{key}", text, points, "addiction")
                for key, text, points in stage
            )
        return goals

    def custom_goals(self, rows: Iterable) -> list[Goal]:
        return [
            Goal(
                f"{CUSTOM_GOAL_PREFIX}{row.id}",
                row.text,
                row.points_value,
                "custom",
                created_at=row.created_at,
            )
            for row in rows
        ]

    def auto_completed(self, mood: MoodState | None, today: date | None = None) -> set[str]:
        """Goals the current snapshot already satisfies.

        A snapshot last updated before ``today`` belongs to an earlier day and
        completes nothing.
        """

        if mood is None:
            return set()
        if today is not None and mood.updated_at.date() != today:
            return set()
        done: set[str] = set()
        if mood.last_message:
            done.add("daily-chat")
        if mood.mood_tag != NEUTRAL_TAG:
            done.add("mood-tracking")
        if mood.sentiment != "neutral":
            done.add("emotional-checkin")
        return done

    def build(
        self,
        *,
        mood: MoodState | None,
        custom: Iterable = (),
        addictions: Iterable[AddictionProgress] = (),
        completed: Mapping[str, int] | None = None,
        today: date | None = None,
    ) -> list[Goal]:
        goals = [
            *self.base_goals(),
            *self.mood_goals(mood),
            *self.general_goals(),
            *self.addiction_goals(addictions),
            *self.custom_goals(custom),
        ]
        done = set(completed or {}) | self.auto_completed(mood, today)
        return [replace(goal, completed=goal.id in done) for goal in goals]

    @staticmethod
    def total_points(goals: Sequence[Goal]) -> int:
        return sum(goal.points_value for goal in goals if goal.completed)


class GoalService:
    """Goal operations for one user backed by :class:`StorageService`."""

    def __init__(self, storage: StorageService, planner: GoalPlanner | None = None) -> None:
        self._storage = storage
        self._planner = planner or GoalPlanner()

    @property
    def planner(self) -> GoalPlanner:
        return self._planner

    async def list_goals(self, user_id: int, today: date) -> list[Goal]:
        mood = await self._storage.get_current_mood(user_id)
        custom = await self._storage.list_custom_goals(user_id)
        addictions = [
            AddictionProgress(
                id=row.id,
                name=row.name,
                days_clean=max(0, (today - row.quit_date).days),
            )
            for row in await self._storage.list_addictions(user_id)
        ]
        completed = await self._storage.list_completed_goals(user_id, today)
        return self._planner.build(
            mood=mood,
            custom=custom,
            addictions=addictions,
            completed=completed,
            today=today,
        )

    async def add_custom_goal(self, user_id: int, text: str, points_value: int) -> Goal:
        row = await self._storage.add_custom_goal(user_id, text, points_value)
        logger.info(
            "custom goal added",
            extra={"extra_fields": {"user_id": user_id, "goal_id": row.id}},
        )
        return self._planner.custom_goals([row])[0]

    async def remove_custom_goal(self, user_id: int, goal_id: str) -> None:
        raw_id = goal_id.removeprefix(CUSTOM_GOAL_PREFIX)
        if raw_id == goal_id or not raw_id.isdigit():
            raise GoalNotFoundError(goal_id)
        if not await self._storage.delete_custom_goal(
            user_id, int(raw_id)
        ):
            raise GoalNotFoundError(goal_id)

    async def complete_goal(self, user_id: int, goal_id: str, today: date) -> Goal:
        goals = await self.list_goals(user_id, today)
        goal = next((item for item in goals if item.id == goal_id), None)
        if goal is None:
            raise GoalNotFoundError(goal_id)
        await self._storage.complete_goal(user_id, goal.id, goal.points_value, today)
        return replace(goal, completed=True)


__all__ = [
    "AddictionProgress",
    "BASE_GOALS",
    "GENERAL_GOALS",
    "Goal",
    "GoalCategory",
    "GoalNotFoundError",
    "GoalPlanner",
    "GoalService",
]
