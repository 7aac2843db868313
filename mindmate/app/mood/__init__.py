"""Mood inference: keyword lexicon, message classifier and wellness score rules."""

from .classifier import NEUTRAL_RESULT, ClassificationResult, MessageClassifier
from .interpretation import interpret_mood
from .wellness import WellnessScoreUpdater

__all__ = [
    "ClassificationResult",
    "MessageClassifier",
    "NEUTRAL_RESULT",
    "WellnessScoreUpdater",
    "interpret_mood",
]
