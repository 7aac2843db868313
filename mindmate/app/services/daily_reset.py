from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date, datetime

from sqlalchemy.exc import SQLAlchemyError

from ..metrics import DAILY_RESETS
from ..mood.interpretation import RESET_INTERPRETATION
from ..mood.lexicon import NEUTRAL_NAME, NEUTRAL_TAG
from .storage import StorageService

logger = logging.getLogger(__name__)

DEFAULT_RESET_SCORE = 75


def utc_today() -> date:
    return datetime.utcnow().date()


class DailyResetScheduler:
    """Moves a user from a stale day to a fresh one.

    A day is fresh once ``last_reset_date`` equals today. The transition and
    the reset actions are applied by :meth:`StorageService.apply_daily_reset`
    in one transaction, so concurrent checks reset at most once.
    """

    def __init__(
        self,
        storage: StorageService,
        *,
        reset_wellness_score: int = DEFAULT_RESET_SCORE,
        clock: Callable[[], date] = utc_today,
    ) -> None:
        self._storage = storage
        self._reset_wellness_score = reset_wellness_score
        self._clock = clock

    def today(self) -> date:
        return self._clock()

    async def is_fresh(self, user_id: int) -> bool:
        return await self._storage.get_last_reset_date(user_id) == self._clock()

    async def check(self, user_id: int) -> bool:
        """Record today's login and reset the day if it is stale.

        Returns ``True`` when a reset was performed. Store failures during the
        reset are logged and reported as ``False``; the day stays stale and the
        next check retries.
        """

        today = self._clock()
        await self._storage.record_login(user_id, today)
        try:
            performed = await self._apply(user_id, today, force=False)
        except SQLAlchemyError:
            DAILY_RESETS.labels(result="error").inc()
            logger.exception(
                "daily reset failed",
                extra={"user": user_id, "extra_fields": {"day": today.isoformat()}},
            )
            return False
        DAILY_RESETS.labels(result="reset" if performed else "fresh").inc()
        if performed:
            logger.info(
                "daily reset applied",
                extra={"user": user_id, "extra_fields": {"day": today.isoformat()}},
            )
        return performed

    async def trigger_manual_reset(self, user_id: int) -> None:
        today = self._clock()
        await self._apply(user_id, today, force=True)
        DAILY_RESETS.labels(result="manual").inc()
        logger.info(
            "manual daily reset applied",
            extra={"user": user_id, "extra_fields": {"day": today.isoformat()}},
        )

    async def _apply(self, user_id: int, today: date, *, force: bool) -> bool:
        return await self._storage.apply_daily_reset(
            user_id,
            today,
            mood_tag=NEUTRAL_TAG,
            mood_name=NEUTRAL_NAME,
            sentiment="neutral",
            wellness_score=self._reset_wellness_score,
            interpretation=RESET_INTERPRETATION,
            force=force,
        )


__all__ = ["DailyResetScheduler", "utc_today"]
