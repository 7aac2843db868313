from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from datetime import date, datetime, time, timedelta
from typing import Any

from sqlalchemy import delete, or_, select, text, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..db.models import (
    Addiction,
    CurrentMood,
    CustomGoal,
    DailyState,
    GoalCompletion,
    LoginDay,
    MessageLogEntry,
    MoodHistoryEntry,
    User,
)
from ..insights.daily import MessageCount, MoodSnapshot

_DIALECT_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}

_CURRENT_MOOD_FIELDS = (
    "mood_tag",
    "mood_name",
    "sentiment",
    "wellness_score",
    "confidence",
    "interpretation",
    "last_message",
    "ai_response",
    "updated_at",
)


def _dialect_insert(session: AsyncSession, model: type) -> Any:
    dialect = session.bind.dialect.name
    try:
        insert_fn = _DIALECT_INSERTS[dialect]
    except KeyError as exc:
        raise RuntimeError(f"Unsupported database dialect: {dialect}") from exc
    return insert_fn(model)


def _day_bounds(start: date | None, end: date | None) -> tuple[datetime | None, datetime | None]:
    lower = datetime.combine(start, time.min) if start else None
    upper = datetime.combine(end + timedelta(days=1), time.min) if end else None
    return lower, upper


class StorageService:
    """Persist users, mood snapshots, logs and daily goal state."""

    def __init__(self, session_factory: async_sessionmaker) -> None:
        self._session_factory = session_factory

    async def healthcheck(self) -> None:
        async with self._session_factory() as session:
            await session.execute(text("SELECT 1"))

    # -- user management -------------------------------------------------
    async def ensure_user(self, external_id: str) -> User:
        async with self._session_factory() as session:
            user = await session.scalar(select(User).where(User.external_id == external_id))
            if user:
                return user
            stmt = (
                _dialect_insert(session, User)
                .values(external_id=external_id, created_at=datetime.utcnow())
                .on_conflict_do_nothing(index_elements=["external_id"])
            )
            await session.execute(stmt)
            await session.commit()
            return await session.scalar(select(User).where(User.external_id == external_id))

    # -- current mood ----------------------------------------------------
    async def get_current_mood(self, user_id: int) -> CurrentMood | None:
        async with self._session_factory() as session:
            return await session.scalar(
                select(CurrentMood).where(CurrentMood.user_id == user_id)
            )

    async def record_mood_update(
        self,
        user_id: int,
        *,
        mood_tag: str,
        mood_name: str,
        sentiment: str,
        wellness_score: int,
        confidence: float,
        detection_method: str,
        interpretation: str | None = None,
        last_message: str | None = None,
        ai_response: str | None = None,
        created_at: datetime | None = None,
    ) -> CurrentMood:
        """Upsert the current snapshot and append it to history in one transaction."""

        timestamp = created_at or datetime.utcnow()
        async with self._session_factory() as session:
            async with session.begin():
                await self._upsert_current_mood(
                    session,
                    user_id,
                    {
                        "mood_tag": mood_tag,
                        "mood_name": mood_name,
                        "sentiment": sentiment,
                        "wellness_score": wellness_score,
                        "confidence": confidence,
                        "interpretation": interpretation,
                        "last_message": last_message,
                        "ai_response": ai_response,
                        "updated_at": timestamp,
                    },
                )
                session.add(
                    MoodHistoryEntry(
                        user_id=user_id,
                        mood_tag=mood_tag,
                        mood_name=mood_name,
                        sentiment=sentiment,
                        wellness_score=wellness_score,
                        confidence=confidence,
                        detection_method=detection_method,
                        created_at=timestamp,
                    )
                )
            return await session.scalar(
                select(CurrentMood).where(CurrentMood.user_id == user_id)
            )

    async def _upsert_current_mood(
        self, session: AsyncSession, user_id: int, values: dict[str, Any]
    ) -> None:
        stmt = _dialect_insert(session, CurrentMood).values(user_id=user_id, **values)
        stmt = stmt.on_conflict_do_update(
            index_elements=["user_id"],
            set_={field: stmt.excluded[field] for field in _CURRENT_MOOD_FIELDS},
        )
        await session.execute(stmt)

    # -- history and message log -----------------------------------------
    async def fetch_history(
        self,
        user_id: int,
        *,
        start: date | None = None,
        end: date | None = None,
    ) -> list[MoodSnapshot]:
        lower, upper = _day_bounds(start, end)
        query = select(MoodHistoryEntry).where(MoodHistoryEntry.user_id == user_id)
        if lower is not None:
            query = query.where(MoodHistoryEntry.created_at >= lower)
        if upper is not None:
            query = query.where(MoodHistoryEntry.created_at < upper)
        async with self._session_factory() as session:
            result = await session.execute(query.order_by(MoodHistoryEntry.created_at))
            rows: Sequence[MoodHistoryEntry] = result.scalars().all()
        return [
            MoodSnapshot(
                date=row.created_at.date(),
                mood_tag=row.mood_tag,
                mood_name=row.mood_name,
                sentiment=row.sentiment,
                wellness_score=row.wellness_score,
                timestamp=row.created_at,
            )
            for row in rows
        ]

    async def log_message(self, user_id: int, created_at: datetime | None = None) -> None:
        async with self._session_factory() as session:
            session.add(
                MessageLogEntry(user_id=user_id, created_at=created_at or datetime.utcnow())
            )
            await session.commit()

    async def message_counts(
        self,
        user_id: int,
        *,
        start: date | None = None,
        end: date | None = None,
    ) -> list[MessageCount]:
        lower, upper = _day_bounds(start, end)
        query = select(MessageLogEntry.created_at).where(MessageLogEntry.user_id == user_id)
        if lower is not None:
            query = query.where(MessageLogEntry.created_at >= lower)
        if upper is not None:
            query = query.where(MessageLogEntry.created_at < upper)
        async with self._session_factory() as session:
            result = await session.execute(query)
            counts = Counter(created_at.date() for created_at in result.scalars().all())
        return [MessageCount(date=day, count=counts[day]) for day in sorted(counts)]

    # -- login log -------------------------------------------------------
    async def record_login(self, user_id: int, day: date) -> None:
        async with self._session_factory() as session:
            stmt = (
                _dialect_insert(session, LoginDay)
                .values(user_id=user_id, day=day)
                .on_conflict_do_nothing(index_elements=["user_id", "day"])
            )
            await session.execute(stmt)
            await session.commit()

    async def list_login_days(self, user_id: int) -> list[date]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(LoginDay.day).where(LoginDay.user_id == user_id).order_by(LoginDay.day)
            )
            return list(result.scalars().all())

    # -- daily reset -----------------------------------------------------
    async def get_last_reset_date(self, user_id: int) -> date | None:
        async with self._session_factory() as session:
            return await session.scalar(
                select(DailyState.last_reset_date).where(DailyState.user_id == user_id)
            )

    async def apply_daily_reset(
        self,
        user_id: int,
        today: date,
        *,
        mood_tag: str,
        mood_name: str,
        sentiment: str,
        wellness_score: int,
        interpretation: str | None,
        force: bool = False,
    ) -> bool:
        """Move the user's day to ``today`` and reset the per-day state.

        The ``last_reset_date`` update is conditional on the day being stale
        unless ``force`` is set. The snapshot reset and the completion wipe run
        in the same transaction, so either all of them happen or none do.

        A rollover check keeps whatever the user already did on ``today``: a
        snapshot updated today is not reset and only completions of earlier
        days are removed. A forced reset clears both unconditionally.
        Returns whether a reset took place.
        """

        now = datetime.utcnow()
        day_start = datetime.combine(today, time.min)
        async with self._session_factory() as session:
            async with session.begin():
                await session.execute(
                    _dialect_insert(session, DailyState)
                    .values(user_id=user_id, last_reset_date=None, updated_at=now)
                    .on_conflict_do_nothing(index_elements=["user_id"])
                )
                stmt = update(DailyState).where(DailyState.user_id == user_id)
                if not force:
                    stmt = stmt.where(
                        or_(
                            DailyState.last_reset_date.is_(None),
                            DailyState.last_reset_date != today,
                        )
                    )
                result = await session.execute(
                    stmt.values(last_reset_date=today, updated_at=now).execution_options(
                        synchronize_session=False
                    )
                )
                if result.rowcount == 0:
                    return False
                updated_today = await session.scalar(
                    select(CurrentMood.id).where(
                        CurrentMood.user_id == user_id,
                        CurrentMood.updated_at >= day_start,
                    )
                )
                if force or updated_today is None:
                    await self._upsert_current_mood(
                        session,
                        user_id,
                        {
                            "mood_tag": mood_tag,
                            "mood_name": mood_name,
                            "sentiment": sentiment,
                            "wellness_score": wellness_score,
                            "confidence": 0.0,
                            "interpretation": interpretation,
                            "last_message": None,
                            "ai_response": None,
                            "updated_at": now,
                        },
                    )
                stale = delete(GoalCompletion).where(GoalCompletion.user_id == user_id)
                if not force:
                    stale = stale.where(GoalCompletion.day < today)
                await session.execute(stale)
        return True

    # -- goals -----------------------------------------------------------
    async def add_custom_goal(self, user_id: int, text: str, points_value: int = 5) -> CustomGoal:
        async with self._session_factory() as session:
            goal = CustomGoal(user_id=user_id, text=text, points_value=points_value)
            session.add(goal)
            await session.commit()
            await session.refresh(goal)
            return goal

    async def list_custom_goals(self, user_id: int) -> list[CustomGoal]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(CustomGoal).where(CustomGoal.user_id == user_id).order_by(CustomGoal.id)
            )
            return list(result.scalars().all())

    async def delete_custom_goal(self, user_id: int, goal_id: int) -> bool:
        async with self._session_factory() as session:
            async with session.begin():
                result = await session.execute(
                    delete(CustomGoal).where(
                        CustomGoal.user_id == user_id, CustomGoal.id == goal_id
                    )
                )
                if result.rowcount == 0:
                    return False
                await session.execute(
                    delete(GoalCompletion).where(
                        GoalCompletion.user_id == user_id,
                        GoalCompletion.goal_id == f"custom-{goal_id}",
                    )
                )
        return True

    async def complete_goal(
        self, user_id: int, goal_id: str, points_value: int, day: date
    ) -> None:
        async with self._session_factory() as session:
            stmt = (
                _dialect_insert(session, GoalCompletion)
                .values(
                    user_id=user_id,
                    goal_id=goal_id,
                    day=day,
                    points_value=points_value,
                    completed_at=datetime.utcnow(),
                )
                .on_conflict_do_nothing(index_elements=["user_id", "goal_id", "day"])
            )
            await session.execute(stmt)
            await session.commit()

    async def list_completed_goals(self, user_id: int, day: date) -> dict[str, int]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(GoalCompletion.goal_id, GoalCompletion.points_value).where(
                    GoalCompletion.user_id == user_id,
                    GoalCompletion.day == day,
                )
            )
            return {goal_id: points for goal_id, points in result.all()}

    # -- addictions ------------------------------------------------------
    async def add_addiction(self, user_id: int, name: str, quit_date: date) -> Addiction:
        async with self._session_factory() as session:
            entry = Addiction(user_id=user_id, name=name, quit_date=quit_date)
            session.add(entry)
            await session.commit()
            await session.refresh(entry)
            return entry

    async def list_addictions(self, user_id: int) -> list[Addiction]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(Addiction).where(Addiction.user_id == user_id).order_by(Addiction.id)
            )
            return list(result.scalars().all())


__all__ = ["StorageService"]
