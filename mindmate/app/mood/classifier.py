from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from functools import lru_cache

from .lexicon import (
    CATEGORIES_BY_NAME,
    DIRECT_STATEMENT_PATTERNS,
    DIRECT_TIER_CONFIDENCE,
    HINT_FALLBACKS,
    MOOD_CATEGORIES,
    NEUTRAL_NAME,
    NEUTRAL_TAG,
    PHRASE_CONFIDENCE,
    SCAN_CONFIDENCE_BONUS,
    SCAN_MAX_CONFIDENCE,
    SCAN_MIN_SCORE,
    SCAN_TIER_WEIGHTS,
    MoodCategory,
)

logger = logging.getLogger(__name__)

DEFAULT_UPDATE_THRESHOLD = 0.15

_APOSTROPHES = str.maketrans({"’": "'", "‘": "'", "`": "'"})


@dataclass(frozen=True)
class ClassificationResult:
    mood_tag: str
    mood_name: str
    sentiment: str
    confidence: float
    detection_method: str
    matched_keywords: tuple[str, ...] = field(default_factory=tuple)


NEUTRAL_RESULT = ClassificationResult(
    mood_tag=NEUTRAL_TAG,
    mood_name=NEUTRAL_NAME,
    sentiment="neutral",
    confidence=0.0,
    detection_method="fallback",
)


@lru_cache(maxsize=1024)
def _keyword_pattern(keyword: str) -> re.Pattern[str]:
    # Lookarounds instead of \b so keywords such as ":)" still match.
    return re.compile(rf"(?<!\w){re.escape(keyword)}(?!\w)")


def _contains_keyword(text: str, keyword: str) -> bool:
    return _keyword_pattern(keyword).search(text) is not None


def _normalize(text: str) -> str:
    return " ".join(text.translate(_APOSTROPHES).lower().split())


class MessageClassifier:
    """Infer a mood from a free-text message.

    Detection runs as a cascade and the first tier that produces a match wins:
    direct statements ("i feel ..."), literal phrases, a weighted keyword scan,
    and finally the upstream sentiment hint. The classifier never raises; any
    input it cannot read yields the neutral result.
    """

    def __init__(
        self,
        *,
        categories: Sequence[MoodCategory] = MOOD_CATEGORIES,
        threshold: float = DEFAULT_UPDATE_THRESHOLD,
    ) -> None:
        self._categories = tuple(categories)
        self._by_name = {category.name: category for category in self._categories}
        self._threshold = threshold
        self._direct_patterns = tuple(re.compile(p) for p in DIRECT_STATEMENT_PATTERNS)

    @property
    def threshold(self) -> float:
        return self._threshold

    def should_update(self, result: ClassificationResult) -> bool:
        return result.confidence > self._threshold

    def classify(self, text: str | None, sentiment_hint: str | None = None) -> ClassificationResult:
        normalized = _normalize(text) if isinstance(text, str) else ""
        if normalized:
            for detector in (self._direct_statement, self._phrase_match, self._keyword_scan):
                result = detector(normalized)
                if result is not None:
                    logger.debug(
                        "mood classified",
                        extra={"mood": result.mood_name, "detection_method": result.detection_method},
                    )
                    return result
        return self._from_hint(sentiment_hint)

    def _direct_statement(self, text: str) -> ClassificationResult | None:
        for pattern in self._direct_patterns:
            match = pattern.search(text)
            if not match:
                continue
            phrase = match.group(1)
            for tier, base_confidence in DIRECT_TIER_CONFIDENCE:
                for category in self._categories:
                    for keyword in getattr(category, tier):
                        if _contains_keyword(phrase, keyword):
                            return self._result(
                                category,
                                confidence=base_confidence * category.weight,
                                method="direct_statement",
                                matched=(keyword,),
                            )
        return None

    def _phrase_match(self, text: str) -> ClassificationResult | None:
        for category in self._categories:
            for phrase in category.phrases:
                if phrase in text:
                    return self._result(
                        category,
                        confidence=PHRASE_CONFIDENCE * category.weight,
                        method="phrase_pattern",
                        matched=(phrase,),
                    )
        return None

    def _keyword_scan(self, text: str) -> ClassificationResult | None:
        best: MoodCategory | None = None
        best_score = 0.0
        best_matches: list[str] = []
        for category in self._categories:
            score = 0.0
            matches: list[str] = []
            for tier, tier_weight in SCAN_TIER_WEIGHTS:
                for keyword in getattr(category, tier):
                    if _contains_keyword(text, keyword):
                        score += tier_weight * category.weight
                        matches.append(keyword)
            # strict comparison keeps the earliest category on ties
            if score > best_score:
                best, best_score, best_matches = category, score, matches

        if best is None or best_score <= SCAN_MIN_SCORE:
            return None
        return self._result(
            best,
            confidence=min(best_score + SCAN_CONFIDENCE_BONUS, SCAN_MAX_CONFIDENCE),
            method="keyword_scan",
            matched=tuple(best_matches),
        )

    def _from_hint(self, sentiment_hint: str | None) -> ClassificationResult:
        if not sentiment_hint or not isinstance(sentiment_hint, str):
            return NEUTRAL_RESULT
        polarity = sentiment_hint.strip().lower()
        if polarity not in HINT_FALLBACKS:
            polarity = "neutral"
        mood_name, confidence = HINT_FALLBACKS[polarity]
        category = self._by_name.get(mood_name) or CATEGORIES_BY_NAME[mood_name]
        return ClassificationResult(
            mood_tag=category.emoji,
            mood_name=category.name,
            sentiment=polarity,
            confidence=confidence,
            detection_method="sentiment_hint",
        )

    @staticmethod
    def _result(
        category: MoodCategory,
        *,
        confidence: float,
        method: str,
        matched: tuple[str, ...],
    ) -> ClassificationResult:
        return ClassificationResult(
            mood_tag=category.emoji,
            mood_name=category.name,
            sentiment=category.sentiment,
            confidence=round(confidence, 4),
            detection_method=method,
            matched_keywords=matched,
        )


__all__ = ["ClassificationResult", "MessageClassifier", "NEUTRAL_RESULT"]
