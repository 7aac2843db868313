"""Static mood vocabulary used by the message classifier.

Categories are listed in priority order: when two categories tie, the one
that appears first wins. Extending the engine with a new mood only requires a
new ``MoodCategory`` entry here.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

Sentiment = Literal["positive", "negative", "neutral"]

NEUTRAL_TAG = "😐"
NEUTRAL_NAME = "neutral"


@dataclass(frozen=True)
class MoodCategory:
    name: str
    emoji: str
    sentiment: Sentiment
    weight: float
    primary: tuple[str, ...]
    secondary: tuple[str, ...]
    expressions: tuple[str, ...]
    phrases: tuple[str, ...]


MOOD_CATEGORIES: tuple[MoodCategory, ...] = (
    MoodCategory(
        name="happy",
        emoji="😊",
        sentiment="positive",
        weight=1.0,
        primary=("happy", "joyful", "glad", "cheerful", "delighted", "content"),
        secondary=("great", "good", "wonderful", "fantastic", "awesome", "amazing", "lovely"),
        expressions=("yay", "woohoo", ":)", "haha", "lol"),
        phrases=(
            "on top of the world",
            "on cloud nine",
            "best day ever",
            "made my day",
            "couldn't be better",
            "in a good mood",
        ),
    ),
    MoodCategory(
        name="excited",
        emoji="🤩",
        sentiment="positive",
        weight=0.9,
        primary=("excited", "thrilled", "ecstatic", "pumped", "elated"),
        secondary=("eager", "energized", "hyped", "motivated", "inspired"),
        expressions=("wow", "omg", "can't wait", "let's go"),
        phrases=(
            "looking forward to",
            "can hardly wait",
            "so much energy",
            "over the moon",
        ),
    ),
    MoodCategory(
        name="sad",
        emoji="😢",
        sentiment="negative",
        weight=1.0,
        primary=("sad", "depressed", "unhappy", "miserable", "heartbroken"),
        secondary=("lonely", "hurt", "empty", "disappointed", "hopeless", "upset", "crying"),
        expressions=("sigh", ":(", "meh"),
        phrases=(
            "feel like crying",
            "nobody cares",
            "want to give up",
            "lost all hope",
            "feeling low",
            "feeling down",
            "feel down",
            "broke my heart",
        ),
    ),
    MoodCategory(
        name="angry",
        emoji="😠",
        sentiment="negative",
        weight=0.95,
        primary=("angry", "furious", "mad", "enraged", "livid"),
        secondary=("frustrated", "annoyed", "irritated", "hate", "resentful", "rage"),
        expressions=("ugh", "argh", "grr", "wtf"),
        phrases=(
            "fed up",
            "sick of",
            "drives me crazy",
            "pissed off",
            "had enough",
            "so unfair",
        ),
    ),
    MoodCategory(
        name="anxious",
        emoji="😰",
        sentiment="negative",
        weight=0.9,
        primary=("anxious", "worried", "nervous", "panicking", "scared", "afraid"),
        secondary=("stressed", "overwhelmed", "tense", "uneasy", "panic", "restless", "fear"),
        expressions=("freaking out", "oh no", "yikes"),
        phrases=(
            "can't stop thinking",
            "what if",
            "heart is racing",
            "can't breathe",
            "on edge",
            "butterflies in my stomach",
        ),
    ),
    MoodCategory(
        name="calm",
        emoji="😌",
        sentiment="positive",
        weight=0.85,
        primary=("calm", "peaceful", "relaxed", "serene", "tranquil"),
        secondary=("centered", "balanced", "grounded", "content", "rested", "okay"),
        expressions=("ahh", "phew", "chill"),
        phrases=(
            "at peace",
            "taking it easy",
            "everything is fine",
            "feel at ease",
            "deep breath",
        ),
    ),
    MoodCategory(
        name="tired",
        emoji="😴",
        sentiment="neutral",
        weight=0.8,
        primary=("tired", "exhausted", "drained", "sleepy", "fatigued", "weary"),
        secondary=("worn", "burnt", "burned", "sluggish", "fatigue", "sleep"),
        expressions=("yawn", "zzz"),
        phrases=(
            "can't sleep",
            "no energy",
            "worn out",
            "burnt out",
            "burned out",
            "need a nap",
            "running on empty",
        ),
    ),
    MoodCategory(
        name="confused",
        emoji="🤔",
        sentiment="neutral",
        weight=0.7,
        primary=("confused", "lost", "uncertain", "puzzled", "unsure"),
        secondary=("unclear", "torn", "conflicted", "mixed", "doubtful"),
        expressions=("huh", "hmm", "idk"),
        phrases=(
            "don't know what to do",
            "mixed up",
            "mixed feelings",
            "doesn't make sense",
            "not sure what",
        ),
    ),
)

CATEGORIES_BY_NAME: dict[str, MoodCategory] = {
    category.name: category for category in MOOD_CATEGORIES
}

# Each pattern captures the phrase that follows a statement about the
# speaker's own state. Patterns are tried in order.
DIRECT_STATEMENT_PATTERNS: tuple[str, ...] = (
    r"\bright now i feel (.+)",
    r"\btoday i (?:am|feel) (.+)",
    r"\blately i(?:'ve| have) been (.+)",
    r"\bi(?:'ve| have) been feeling (.+)",
    r"\bi feel (.+)",
    r"\bi(?:'m| am) so (.+)",
    r"\bi(?:'m| am) (.+)",
    r"\bfeeling (.+)",
    r"\bmakes me feel (.+)",
)

# (tier attribute, base confidence of a direct statement hit)
DIRECT_TIER_CONFIDENCE: tuple[tuple[str, float], ...] = (
    ("primary", 0.95),
    ("secondary", 0.85),
    ("expressions", 0.80),
)

PHRASE_CONFIDENCE = 0.75

# Per-keyword contribution to a category score during the full-text scan.
SCAN_TIER_WEIGHTS: tuple[tuple[str, float], ...] = (
    ("primary", 0.8),
    ("secondary", 0.6),
    ("expressions", 0.7),
)
SCAN_MIN_SCORE = 0.2
SCAN_CONFIDENCE_BONUS = 0.2
SCAN_MAX_CONFIDENCE = 0.85

# Sentiment hint -> (mood name, confidence)
HINT_FALLBACKS: dict[str, tuple[str, float]] = {
    "positive": ("happy", 0.45),
    "negative": ("sad", 0.45),
    "neutral": ("calm", 0.25),
}

__all__ = [
    "CATEGORIES_BY_NAME",
    "DIRECT_STATEMENT_PATTERNS",
    "DIRECT_TIER_CONFIDENCE",
    "HINT_FALLBACKS",
    "MOOD_CATEGORIES",
    "MoodCategory",
    "NEUTRAL_NAME",
    "NEUTRAL_TAG",
    "PHRASE_CONFIDENCE",
    "SCAN_CONFIDENCE_BONUS",
    "SCAN_MAX_CONFIDENCE",
    "SCAN_MIN_SCORE",
    "SCAN_TIER_WEIGHTS",
    "Sentiment",
]
