from __future__ import annotations

import asyncio
import logging
import random
import weakref
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from ..db.models import CurrentMood
from ..metrics import MOOD_CLASSIFICATIONS, MOOD_UPDATES
from ..mood.classifier import ClassificationResult, MessageClassifier
from ..mood.interpretation import interpret_mood
from ..mood.wellness import WellnessScoreUpdater
from .storage import StorageService

logger = logging.getLogger(__name__)

DEFAULT_INITIAL_SCORE = 75


@dataclass(frozen=True)
class TrackingResult:
    classification: ClassificationResult
    updated: bool
    previous_score: int
    current: CurrentMood | None


class MoodTracker:
    """Per-message pipeline: classify, rescore and persist the current mood.

    Messages of one user are processed one at a time so the score update
    never works from a stale snapshot.
    """

    def __init__(
        self,
        storage: StorageService,
        classifier: MessageClassifier,
        updater: WellnessScoreUpdater,
        *,
        initial_score: int = DEFAULT_INITIAL_SCORE,
        rng: random.Random | None = None,
        clock: Callable[[], datetime] = datetime.utcnow,
    ) -> None:
        self._storage = storage
        self._classifier = classifier
        self._updater = updater
        self._initial_score = initial_score
        self._rng = rng or random.Random()
        self._clock = clock
        # entries vanish once no task holds or waits on the lock
        self._locks: weakref.WeakValueDictionary[int, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    def _user_lock(self, user_id: int) -> asyncio.Lock:
        lock = self._locks.get(user_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[user_id] = lock
        return lock

    async def process_message(
        self,
        user_id: int,
        text: str,
        sentiment_hint: str | None = None,
        ai_response: str | None = None,
    ) -> TrackingResult:
        classification = self._classifier.classify(text, sentiment_hint)
        MOOD_CLASSIFICATIONS.labels(
            method=classification.detection_method, mood=classification.mood_name
        ).inc()

        async with self._user_lock(user_id):
            now = self._clock()
            await self._storage.log_message(user_id, now)
            current = await self._storage.get_current_mood(user_id)
            previous_score = current.wellness_score if current else self._initial_score

            if not self._classifier.should_update(classification):
                MOOD_UPDATES.labels(result="skipped").inc()
                logger.debug(
                    "classification below threshold",
                    extra={
                        "user": user_id,
                        "mood": classification.mood_name,
                        "detection_method": classification.detection_method,
                        "extra_fields": {"confidence": classification.confidence},
                    },
                )
                return TrackingResult(classification, False, previous_score, current)

            score = self._updater.update(previous_score, classification.sentiment)
            current = await self._storage.record_mood_update(
                user_id,
                mood_tag=classification.mood_tag,
                mood_name=classification.mood_name,
                sentiment=classification.sentiment,
                wellness_score=score,
                confidence=classification.confidence,
                detection_method=classification.detection_method,
                interpretation=interpret_mood(classification.mood_name, self._rng),
                last_message=text,
                ai_response=ai_response,
                created_at=now,
            )

        MOOD_UPDATES.labels(result="updated").inc()
        logger.info(
            "mood updated",
            extra={
                "user": user_id,
                "mood": classification.mood_name,
                "detection_method": classification.detection_method,
                "extra_fields": {"wellness_score": score, "previous_score": previous_score},
            },
        )
        return TrackingResult(classification, True, previous_score, current)


__all__ = ["MoodTracker", "TrackingResult"]
