from __future__ import annotations

import pytest

from mindmate.app.mood.classifier import NEUTRAL_RESULT, ClassificationResult, MessageClassifier
from mindmate.app.mood.lexicon import MoodCategory


@pytest.fixture()
def classifier() -> MessageClassifier:
    return MessageClassifier()


def test_direct_statement_primary_keyword(classifier: MessageClassifier) -> None:
    result = classifier.classify("I feel really anxious about my exam")

    assert result.mood_name == "anxious"
    assert result.mood_tag == "😰"
    assert result.sentiment == "negative"
    assert result.detection_method == "direct_statement"
    assert result.confidence == pytest.approx(0.95 * 0.9)
    assert result.matched_keywords == ("anxious",)


def test_direct_statement_uses_first_matching_pattern(classifier: MessageClassifier) -> None:
    result = classifier.classify("I hate this, I'm so angry")

    assert result.mood_name == "angry"
    assert result.detection_method == "direct_statement"
    assert result.confidence == pytest.approx(0.95 * 0.95)


def test_direct_statement_walks_categories_in_table_order(classifier: MessageClassifier) -> None:
    result = classifier.classify("Right now I feel calm but I'm so tired")

    assert result.mood_name == "calm"
    assert result.confidence == pytest.approx(0.95 * 0.85)


def test_direct_statement_tries_next_pattern_without_keyword(
    classifier: MessageClassifier,
) -> None:
    result = classifier.classify("Feeling happy, I feel it")

    assert result.mood_name == "happy"
    assert result.detection_method == "direct_statement"
    assert result.confidence == pytest.approx(0.95)


def test_typographic_apostrophes_are_normalized(classifier: MessageClassifier) -> None:
    result = classifier.classify("I’m so happy")

    assert result.mood_name == "happy"
    assert result.detection_method == "direct_statement"


def test_phrase_pattern(classifier: MessageClassifier) -> None:
    result = classifier.classify("Today was rough, nobody cares about me")

    assert result.mood_name == "sad"
    assert result.detection_method == "phrase_pattern"
    assert result.confidence == pytest.approx(0.75)
    assert result.matched_keywords == ("nobody cares",)


def test_keyword_scan_adds_bonus(classifier: MessageClassifier) -> None:
    result = classifier.classify("hmm")

    assert result.mood_name == "confused"
    assert result.detection_method == "keyword_scan"
    assert result.confidence == pytest.approx(0.7 * 0.7 + 0.2)


def test_keyword_scan_is_capped(classifier: MessageClassifier) -> None:
    result = classifier.classify("Work was stressful and everyone got stressed and overwhelmed")

    assert result.mood_name == "anxious"
    assert result.detection_method == "keyword_scan"
    assert result.confidence == pytest.approx(0.85)
    assert result.matched_keywords == ("stressed", "overwhelmed")


def test_keyword_scan_tie_keeps_earliest_category() -> None:
    categories = (
        MoodCategory("first", "1️⃣", "positive", 0.8, ("alpha",), (), (), ()),
        MoodCategory("second", "2️⃣", "negative", 0.8, ("beta",), (), (), ()),
    )
    classifier = MessageClassifier(categories=categories)

    result = classifier.classify("beta alpha")

    assert result.mood_name == "first"


def test_keywords_match_whole_words_only(classifier: MessageClassifier) -> None:
    result = classifier.classify("I'm madly in love with this song")

    assert result == NEUTRAL_RESULT


@pytest.mark.parametrize(
    ("hint", "mood", "sentiment", "confidence"),
    [
        ("positive", "happy", "positive", 0.45),
        ("negative", "sad", "negative", 0.45),
        ("neutral", "calm", "neutral", 0.25),
        ("mixed", "calm", "neutral", 0.25),
    ],
)
def test_sentiment_hint_fallback(
    classifier: MessageClassifier,
    hint: str,
    mood: str,
    sentiment: str,
    confidence: float,
) -> None:
    result = classifier.classify("the meeting is at noon", sentiment_hint=hint)

    assert result.mood_name == mood
    assert result.sentiment == sentiment
    assert result.confidence == pytest.approx(confidence)
    assert result.detection_method == "sentiment_hint"


@pytest.mark.parametrize("text", ["", "   ", None, 42])
def test_unreadable_input_yields_neutral(classifier: MessageClassifier, text: object) -> None:
    result = classifier.classify(text)  # type: ignore[arg-type]

    assert result == NEUTRAL_RESULT
    assert result.mood_tag == "😐"
    assert result.confidence == 0.0
    assert result.detection_method == "fallback"


def test_confidence_always_within_unit_interval(classifier: MessageClassifier) -> None:
    samples = [
        "I am so happy and excited and glad and joyful yay haha",
        "ugh argh grr I hate everything, furious and mad",
        "sigh :( meh lonely empty hurt",
        "hmm idk huh",
        "nothing to report",
    ]
    for text in samples:
        result = classifier.classify(text, sentiment_hint="negative")
        assert 0.0 <= result.confidence <= 1.0


def test_should_update_is_strictly_above_threshold() -> None:
    classifier = MessageClassifier(threshold=0.15)

    def _with(confidence: float) -> ClassificationResult:
        return ClassificationResult("😊", "happy", "positive", confidence, "keyword_scan")

    assert classifier.threshold == 0.15
    assert classifier.should_update(_with(0.15)) is False
    assert classifier.should_update(_with(0.16)) is True
    assert classifier.should_update(NEUTRAL_RESULT) is False
