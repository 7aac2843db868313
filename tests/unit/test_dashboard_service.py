from __future__ import annotations

from datetime import date, datetime, time, timedelta

import pytest

from mindmate.app.insights.generator import ONBOARDING_INSIGHT
from mindmate.app.services.dashboard import DashboardService
from mindmate.app.services.storage import StorageService

TODAY = date(2024, 9, 18)


def _at(day: date, hour: int = 12) -> datetime:
    return datetime.combine(day, time(hour))


async def _record(storage: StorageService, user_id: int, day: date, score: int, hour: int = 12) -> None:
    await storage.record_mood_update(
        user_id,
        mood_tag="😊",
        mood_name="happy",
        sentiment="positive",
        wellness_score=score,
        confidence=0.9,
        detection_method="direct_statement",
        created_at=_at(day, hour),
    )


@pytest.mark.anyio
async def test_week_range_is_gap_filled(temp_session_factory) -> None:
    storage = StorageService(temp_session_factory)
    service = DashboardService(storage, clock=lambda: TODAY)
    user = await storage.ensure_user("dash-1")
    await _record(storage, user.id, TODAY - timedelta(days=2), 70)
    await _record(storage, user.id, TODAY - timedelta(days=2), 80, hour=18)
    await _record(storage, user.id, TODAY - timedelta(days=30), 20)
    await storage.log_message(user.id, _at(TODAY - timedelta(days=1)))

    report = await service.trends(user.id, "week")

    assert report.start == TODAY - timedelta(days=6)
    assert report.end == TODAY
    assert [point.date for point in report.series] == [
        TODAY - timedelta(days=offset) for offset in range(6, -1, -1)
    ]
    by_day = {point.date: point for point in report.series}
    assert by_day[TODAY - timedelta(days=2)].wellness_score == 80
    assert by_day[TODAY - timedelta(days=1)].wellness_score == 60
    assert by_day[TODAY - timedelta(days=1)].message_count == 1
    assert by_day[TODAY].wellness_score is None
    assert 1 <= len(report.insights) <= 4


@pytest.mark.anyio
async def test_new_user_gets_onboarding(temp_session_factory) -> None:
    storage = StorageService(temp_session_factory)
    service = DashboardService(storage, clock=lambda: TODAY)
    user = await storage.ensure_user("dash-2")

    report = await service.trends(user.id, "month")

    assert len(report.series) == 30
    assert report.weekly_trends == []
    assert report.insights == [ONBOARDING_INSIGHT]
    assert report.stats.current_wellness == 0
    assert report.stats.streak_days == 0


@pytest.mark.anyio
async def test_streak_uses_login_log_when_present(temp_session_factory) -> None:
    storage = StorageService(temp_session_factory)
    service = DashboardService(storage, clock=lambda: TODAY)
    user = await storage.ensure_user("dash-3")
    for offset in (0, 1, 2, 5):
        await storage.record_login(user.id, TODAY - timedelta(days=offset))
    await _record(storage, user.id, TODAY, 70)

    report = await service.trends(user.id)
    streak = await service.streak(user.id)

    assert report.stats.streak_days == 3
    assert streak.current == 3
    assert streak.longest == 3
    assert streak.login_days == 4
    assert streak.today == TODAY


@pytest.mark.anyio
async def test_streak_falls_back_to_series_without_logins(temp_session_factory) -> None:
    storage = StorageService(temp_session_factory)
    service = DashboardService(storage, clock=lambda: TODAY)
    user = await storage.ensure_user("dash-4")
    await _record(storage, user.id, TODAY - timedelta(days=1), 70)
    await _record(storage, user.id, TODAY - timedelta(days=2), 72)

    report = await service.trends(user.id)

    assert report.stats.streak_days == 2


@pytest.mark.anyio
async def test_unknown_range_is_rejected(temp_session_factory) -> None:
    service = DashboardService(StorageService(temp_session_factory), clock=lambda: TODAY)

    with pytest.raises(ValueError):
        await service.trends(1, "decade")
