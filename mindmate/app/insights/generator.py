from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal

from .daily import MoodSnapshot
from .weekly import WeeklyTrend, dominant_mood, round_half_up

logger = logging.getLogger(__name__)

InsightKind = Literal["improvement", "concern", "achievement", "pattern"]

MAX_INSIGHTS = 4
IMPROVEMENT_THRESHOLD = 5
POSITIVE_RATIO_THRESHOLD = 0.7
CONSISTENCY_WINDOW = 7
CONSISTENCY_MIN_DAYS = 5
ENGAGED_MESSAGES_PER_DAY = 3
THRIVING_SCORE = 80
STEADY_SCORE = 60


@dataclass(frozen=True)
class Insight:
    kind: InsightKind
    title: str
    description: str
    actionable_hint: str | None = None


ONBOARDING_INSIGHT = Insight(
    kind="pattern",
    title="Start Your Journey",
    description="Begin tracking your mood by chatting to see personalized insights here.",
    actionable_hint="Start a conversation in the chat to begin mood tracking",
)


class InsightGenerator:
    """Rule engine turning a daily series and its weekly trends into insights.

    Rules are evaluated in a fixed priority order and each contributes at most
    one insight. The result is truncated to ``max_insights``.
    """

    def __init__(self, max_insights: int = MAX_INSIGHTS) -> None:
        self._max_insights = max_insights

    def generate(
        self,
        series: Sequence[MoodSnapshot],
        weekly_trends: Sequence[WeeklyTrend],
    ) -> list[Insight]:
        scored = [point for point in series if point.wellness_score is not None]
        if not scored:
            return [ONBOARDING_INSIGHT]

        insights: list[Insight] = []
        latest_trend = weekly_trends[-1] if weekly_trends else None

        if latest_trend is not None:
            trend_insight = self._trend_insight(latest_trend)
            if trend_insight is not None:
                insights.append(trend_insight)
            if latest_trend.positive_ratio > POSITIVE_RATIO_THRESHOLD:
                percent = round_half_up(latest_trend.positive_ratio * 100)
                insights.append(
                    Insight(
                        kind="achievement",
                        title="Positivity Champion!",
                        description=(
                            f"{percent}% of your recent interactions were positive. "
                            "Your mindset is thriving!"
                        ),
                    )
                )

        recent = series[-CONSISTENCY_WINDOW:]
        active_days = sum(1 for point in recent if point.wellness_score is not None)
        if active_days >= CONSISTENCY_MIN_DAYS:
            insights.append(
                Insight(
                    kind="achievement",
                    title="Consistency Streak!",
                    description=(
                        f"You tracked your mood on {active_days} of the last "
                        f"{len(recent)} days. Consistency is key to wellness!"
                    ),
                    actionable_hint="Keep your daily check-ins going to maintain momentum",
                )
            )

        mood_insight = self._mood_pattern_insight(scored)
        if mood_insight is not None:
            insights.append(mood_insight)

        total_messages = sum(point.message_count for point in series)
        per_day = total_messages / len(series)
        if per_day >= ENGAGED_MESSAGES_PER_DAY:
            insights.append(
                Insight(
                    kind="achievement",
                    title="Highly Engaged!",
                    description=(
                        f"You average {round_half_up(per_day)} messages per day. "
                        "Your commitment to wellness is inspiring!"
                    ),
                )
            )

        score_insight = self._score_insight(scored[-1].wellness_score or 0)
        if score_insight is not None:
            insights.append(score_insight)

        logger.debug("generated %d insights for %d days", len(insights), len(series))
        return insights[: self._max_insights]

    @staticmethod
    def _trend_insight(trend: WeeklyTrend) -> Insight | None:
        change = trend.improvement_from_previous_week
        if change > IMPROVEMENT_THRESHOLD:
            return Insight(
                kind="improvement",
                title="Significant Progress!",
                description=(
                    f"Your wellness score improved by {round_half_up(change)} points "
                    "this week. You're on a positive trajectory!"
                ),
                actionable_hint="Keep up the great work with your current wellness practices",
            )
        if change < -IMPROVEMENT_THRESHOLD:
            return Insight(
                kind="concern",
                title="Wellness Dip Detected",
                description=(
                    f"Your wellness score decreased by {abs(round_half_up(change))} points. "
                    "Dips like this are normal, so let's focus on self-care."
                ),
                actionable_hint=(
                    "Consider practicing mindfulness or reaching out to someone you trust"
                ),
            )
        return None

    @staticmethod
    def _mood_pattern_insight(scored: Sequence[MoodSnapshot]) -> Insight | None:
        mood = dominant_mood(scored)
        if mood in {"happy", "excited"}:
            return Insight(
                kind="pattern",
                title="Joyful Spirit Detected!",
                description=(
                    f'Your most common mood is "{mood}". You\'re radiating positive energy!'
                ),
            )
        if mood == "calm":
            return Insight(
                kind="pattern",
                title="Zen Master Mode",
                description=(
                    "You frequently experience calmness. This balanced state is excellent "
                    "for mental clarity and decision-making."
                ),
            )
        return None

    @staticmethod
    def _score_insight(score: int) -> Insight | None:
        if score >= THRIVING_SCORE:
            return Insight(
                kind="achievement",
                title="Wellness Superstar!",
                description=(
                    f"Your current wellness score of {score} indicates excellent "
                    "mental health. You're thriving!"
                ),
            )
        if score >= STEADY_SCORE:
            return Insight(
                kind="improvement",
                title="Steady Progress",
                description=(
                    f"Your wellness score of {score} shows you're on a good path. "
                    "Small improvements compound over time."
                ),
                actionable_hint="Focus on one small wellness habit to boost your score further",
            )
        return None


__all__ = ["Insight", "InsightGenerator", "InsightKind", "MAX_INSIGHTS", "ONBOARDING_INSIGHT"]
