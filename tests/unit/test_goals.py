from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta

import pytest

from mindmate.app.services.goals import (
    AddictionProgress,
    GoalNotFoundError,
    GoalPlanner,
    GoalService,
)
from mindmate.app.services.storage import StorageService

TODAY = date(2024, 6, 10)


@dataclass
class _Mood:
    mood_tag: str = "😐"
    mood_name: str = "neutral"
    sentiment: str = "neutral"
    wellness_score: int = 75
    last_message: str | None = None
    updated_at: datetime = datetime(2024, 6, 10, 9)


def _ids(goals) -> list[str]:
    return [goal.id for goal in goals]


def test_default_goals_without_mood() -> None:
    goals = GoalPlanner().build(mood=None)

    assert _ids(goals) == [
        "daily-chat",
        "mood-tracking",
        "emotional-checkin",
        "evening-reflection",
        "gratitude-practice",
    ]
    assert not any(goal.completed for goal in goals)
    assert GoalPlanner.total_points(goals) == 0


def test_low_anxious_mood_adds_targeted_goals() -> None:
    mood = _Mood("😰", "anxious", "negative", 45, "I am worried")

    goals = GoalPlanner().mood_goals(mood)

    assert _ids(goals) == [
        "ai_mood_boost",
        "ai_gratitude",
        "ai_physical_activity",
        "ai_social_connection",
        "ai_worry_time",
    ]


def test_mid_score_only_suggests_activity() -> None:
    assert _ids(GoalPlanner().mood_goals(_Mood(wellness_score=65))) == ["ai_physical_activity"]
    assert GoalPlanner().mood_goals(_Mood(wellness_score=80)) == []


def test_auto_completion_from_snapshot() -> None:
    planner = GoalPlanner()

    assert planner.auto_completed(_Mood()) == set()
    assert planner.auto_completed(_Mood("😊", "happy", "positive", 80, "hi")) == {
        "daily-chat",
        "mood-tracking",
        "emotional-checkin",
    }


def test_snapshot_from_earlier_day_completes_nothing() -> None:
    planner = GoalPlanner()
    yesterday = _Mood("😊", "happy", "positive", 80, "hi", datetime(2024, 6, 9, 23, 50))

    assert planner.auto_completed(yesterday, TODAY) == set()
    assert planner.auto_completed(_Mood("😊", "happy", "positive", 80, "hi"), TODAY) == {
        "daily-chat",
        "mood-tracking",
        "emotional-checkin",
    }
    goals = planner.build(mood=yesterday, today=TODAY)
    assert GoalPlanner.total_points(goals) == 0


def test_addiction_goals_follow_recovery_stage() -> None:
    planner = GoalPlanner()

    early = planner.addiction_goals([AddictionProgress(1, "Smoking", 3)])
    building = planner.addiction_goals([AddictionProgress(2, "Sugar", 7)])
    established = planner.addiction_goals([AddictionProgress(3, "Alcohol", 30)])

    assert _ids(early) == [
        "addiction_1_affirmation",
        "addiction_1_hydration",
        "addiction_1_support_check",
    ]
    assert "addiction_2_trigger_awareness" in _ids(building)
    assert "addiction_3_help_others" in _ids(established)
    assert all(goal.category == "addiction" for goal in early + building + established)


def test_total_points_counts_completed_goals() -> None:
    mood = _Mood("😊", "happy", "positive", 82, "great day")

    goals = GoalPlanner().build(mood=mood, completed={"gratitude-practice": 4})

    assert GoalPlanner.total_points(goals) == 8 + 6 + 7 + 4


@pytest.mark.anyio
async def test_goal_service_flow(temp_session_factory) -> None:
    storage = StorageService(temp_session_factory)
    service = GoalService(storage)
    user = await storage.ensure_user("goal-user")

    custom = await service.add_custom_goal(user.id, "Call grandma", 9)
    await storage.add_addiction(user.id, "Smoking", TODAY - timedelta(days=40))
    completed = await service.complete_goal(user.id, custom.id, TODAY)
    goals = await service.list_goals(user.id, TODAY)

    assert custom.id.startswith("custom-")
    assert completed.completed is True
    assert goals[-1].id == custom.id
    assert goals[-1].completed is True
    assert "addiction_1_mindfulness" in _ids(goals)
    assert GoalPlanner.total_points(goals) == 9


@pytest.mark.anyio
async def test_goal_service_unknown_ids(temp_session_factory) -> None:
    storage = StorageService(temp_session_factory)
    service = GoalService(storage)
    user = await storage.ensure_user("goal-user-2")

    with pytest.raises(GoalNotFoundError):
        await service.complete_goal(user.id, "ai_worry_time", TODAY)
    with pytest.raises(GoalNotFoundError):
        await service.remove_custom_goal(user.id, "custom-99")
    with pytest.raises(GoalNotFoundError):
        await service.remove_custom_goal(user.id, "daily-chat")


@pytest.mark.anyio
async def test_remove_custom_goal(temp_session_factory) -> None:
    storage = StorageService(temp_session_factory)
    service = GoalService(storage)
    user = await storage.ensure_user("goal-user-3")
    goal = await service.add_custom_goal(user.id, "Journal", 5)

    await service.remove_custom_goal(user.id, goal.id)

    assert goal.id not in _ids(await service.list_goals(user.id, TODAY))


@pytest.mark.anyio
async def test_completions_do_not_carry_into_next_day(temp_session_factory) -> None:
    storage = StorageService(temp_session_factory)
    service = GoalService(storage)
    user = await storage.ensure_user("goal-user-4")
    await storage.record_mood_update(
        user.id,
        mood_tag="😊",
        mood_name="happy",
        sentiment="positive",
        wellness_score=82,
        confidence=0.95,
        detection_method="direct_statement",
        last_message="I feel happy",
        created_at=datetime(2024, 6, 10, 18),
    )

    await service.complete_goal(user.id, "evening-reflection", TODAY)
    today_goals = await service.list_goals(user.id, TODAY)
    tomorrow_goals = await service.list_goals(user.id, TODAY + timedelta(days=1))

    assert GoalPlanner.total_points(today_goals) == 8 + 6 + 7 + 5
    assert not any(goal.completed for goal in tomorrow_goals)
    assert GoalPlanner.total_points(tomorrow_goals) == 0
