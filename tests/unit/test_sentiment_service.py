"""Tests for the keyword sentiment classifier."""

from __future__ import annotations

import pytest

from app.errors import ClassificationError
from app.services.sentiment_service import (
    KeywordSentimentClassifier,
    Polarity,
    SentimentResult,
)


@pytest.fixture
def classifier() -> KeywordSentimentClassifier:
    return KeywordSentimentClassifier()


class TestPolarityFromScore:
    @pytest.mark.parametrize(
        ("score", "expected"),
        [
            (1.0, Polarity.POSITIVE),
            (0.5, Polarity.POSITIVE),
            (0.1, Polarity.NEUTRAL),
            (0.0, Polarity.NEUTRAL),
            (-0.1, Polarity.NEUTRAL),
            (-0.6, Polarity.NEGATIVE),
        ],
    )
    def test_thresholds(self, score: float, expected: Polarity) -> None:
        assert Polarity.from_score(score) is expected


class TestKeywordSentimentClassifier:
    def test_positive_text(self, classifier: KeywordSentimentClassifier) -> None:
        result = classifier.classify("I love this product")
        assert result.polarity is Polarity.POSITIVE
        assert result.score == 1.0

    def test_negative_text(self, classifier: KeywordSentimentClassifier) -> None:
        result = classifier.classify("This is terrible, it arrived broken")
        assert result.polarity is Polarity.NEGATIVE
        assert result.score < 0

    def test_no_sentiment_words_is_neutral(self, classifier: KeywordSentimentClassifier) -> None:
        assert classifier.classify("What time do you open tomorrow") == SentimentResult.neutral()

    def test_negation_flips_positive(self, classifier: KeywordSentimentClassifier) -> None:
        assert classifier.classify("I did not like it").polarity is Polarity.NEGATIVE

    def test_contraction_negation(self, classifier: KeywordSentimentClassifier) -> None:
        assert classifier.classify("it wasn't good").polarity is Polarity.NEGATIVE

    def test_negated_negative_leans_positive(self, classifier: KeywordSentimentClassifier) -> None:
        assert classifier.classify("not bad at all").polarity is Polarity.POSITIVE

    def test_intensifier_raises_confidence(self, classifier: KeywordSentimentClassifier) -> None:
        plain = classifier.classify("good")
        boosted = classifier.classify("really good")
        assert boosted.confidence > plain.confidence

    def test_non_text_raises(self, classifier: KeywordSentimentClassifier) -> None:
        with pytest.raises(ClassificationError):
            classifier.classify(None)  # type: ignore[arg-type]
