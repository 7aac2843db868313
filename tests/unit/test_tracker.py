from __future__ import annotations

import asyncio
import gc
import random
from datetime import datetime

import pytest

from mindmate.app.mood.classifier import MessageClassifier
from mindmate.app.mood.wellness import WellnessScoreUpdater
from mindmate.app.services.storage import StorageService
from mindmate.app.services.tracker import MoodTracker

NOW = datetime(2024, 8, 5, 9, 0)


def _tracker(storage: StorageService, seed: int = 3) -> MoodTracker:
    return MoodTracker(
        storage,
        MessageClassifier(),
        WellnessScoreUpdater(rng=random.Random(seed)),
        rng=random.Random(seed),
        clock=lambda: NOW,
    )


@pytest.mark.anyio
async def test_confident_message_updates_snapshot(temp_session_factory) -> None:
    storage = StorageService(temp_session_factory)
    user = await storage.ensure_user("tracker-1")

    result = await _tracker(storage).process_message(
        user.id, "I feel really happy today", ai_response="That's lovely to hear"
    )

    assert result.updated is True
    assert result.previous_score == 75
    assert result.classification.mood_name == "happy"
    assert result.current.mood_tag == "😊"
    assert 75 < result.current.wellness_score <= 100
    assert result.current.last_message == "I feel really happy today"
    assert result.current.ai_response == "That's lovely to hear"
    assert result.current.interpretation
    history = await storage.fetch_history(user.id)
    assert len(history) == 1
    assert history[0].timestamp == NOW


@pytest.mark.anyio
async def test_low_confidence_message_is_counted_but_ignored(temp_session_factory) -> None:
    storage = StorageService(temp_session_factory)
    user = await storage.ensure_user("tracker-2")

    result = await _tracker(storage).process_message(user.id, "qwerty asdf")

    assert result.updated is False
    assert result.current is None
    assert result.classification.confidence == 0.0
    assert await storage.get_current_mood(user.id) is None
    assert await storage.fetch_history(user.id) == []
    counts = await storage.message_counts(user.id)
    assert [(entry.date, entry.count) for entry in counts] == [(NOW.date(), 1)]


@pytest.mark.anyio
async def test_concurrent_messages_apply_every_update(temp_session_factory) -> None:
    storage = StorageService(temp_session_factory)
    user = await storage.ensure_user("tracker-3")
    tracker = _tracker(storage, seed=3)

    results = await asyncio.gather(
        *(tracker.process_message(user.id, "I feel so sad") for _ in range(4))
    )

    reference = WellnessScoreUpdater(rng=random.Random(3))
    expected = 75
    for _ in range(4):
        expected = reference.update(expected, "negative")

    assert all(result.updated for result in results)
    assert (await storage.get_current_mood(user.id)).wellness_score == expected
    assert len(await storage.fetch_history(user.id)) == 4
    assert sorted(result.previous_score for result in results)[-1] == 75


@pytest.mark.anyio
async def test_score_stays_within_bounds(temp_session_factory) -> None:
    storage = StorageService(temp_session_factory)
    user = await storage.ensure_user("tracker-4")
    await storage.record_mood_update(
        user.id,
        mood_tag="😊",
        mood_name="happy",
        sentiment="positive",
        wellness_score=99,
        confidence=0.95,
        detection_method="direct_statement",
        created_at=NOW,
    )

    result = await _tracker(storage).process_message(user.id, "I feel happy")

    assert result.previous_score == 99
    assert result.current.wellness_score == 100


@pytest.mark.anyio
async def test_user_locks_are_released_after_processing(temp_session_factory) -> None:
    storage = StorageService(temp_session_factory)
    tracker = _tracker(storage)
    users = [await storage.ensure_user(f"tracker-lock-{index}") for index in range(5)]

    await asyncio.gather(
        *(tracker.process_message(user.id, "I feel calm") for user in users),
        tracker.process_message(users[0].id, "I feel calm"),
    )
    gc.collect()

    assert len(tracker._locks) == 0
    assert len(await storage.fetch_history(users[0].id)) == 2
