from __future__ import annotations

import random
from dataclasses import dataclass, field

from ..core.config import Settings


@dataclass
class WellnessScoreUpdater:
    """Nudge a wellness score by the sentiment of the latest message.

    Positive messages raise the score by a random step, negative ones lower it,
    neutral ones jitter it slightly. Results always stay within floor..ceiling.
    """

    floor: int = 0
    ceiling: int = 100
    positive_range: tuple[int, int] = (3, 14)
    negative_range: tuple[int, int] = (3, 14)
    neutral_jitter: int = 2
    rng: random.Random = field(default_factory=random.Random)

    @classmethod
    def from_settings(
        cls, settings: Settings, rng: random.Random | None = None
    ) -> WellnessScoreUpdater:
        return cls(
            floor=settings.wellness_floor,
            ceiling=settings.wellness_ceiling,
            positive_range=(settings.wellness_positive_min, settings.wellness_positive_max),
            negative_range=(settings.wellness_negative_min, settings.wellness_negative_max),
            neutral_jitter=settings.wellness_neutral_jitter,
            rng=rng or random.Random(),
        )

    def clamp(self, score: int | float) -> int:
        return int(max(self.floor, min(self.ceiling, round(score))))

    def update(self, previous_score: int | float, sentiment: str | None) -> int:
        current = self.clamp(previous_score)
        if sentiment == "positive":
            delta = self.rng.randint(*self.positive_range)
        elif sentiment == "negative":
            delta = -self.rng.randint(*self.negative_range)
        else:
            delta = self.rng.randint(-self.neutral_jitter, self.neutral_jitter)
        return self.clamp(current + delta)


__all__ = ["WellnessScoreUpdater"]
