"""
File: app/services/sentiment_service.py

Project: Messenger Sentiment Responder

Purpose:
Sentiment classification capability (text -> polarity).

Design rules:
- Classifiers are long-lived and stateless, built once at startup
- The pipeline only depends on the SentimentClassifier protocol
- Implementation failures surface as ClassificationError
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from app.errors import ClassificationError

POLARITY_THRESHOLD = 0.1


class Polarity(str, Enum):
    NEGATIVE = "negative"
    NEUTRAL = "neutral"
    POSITIVE = "positive"

    @classmethod
    def from_score(cls, score: float, threshold: float = POLARITY_THRESHOLD) -> "Polarity":
        if score > threshold:
            return cls.POSITIVE
        if score < -threshold:
            return cls.NEGATIVE
        return cls.NEUTRAL


@dataclass(frozen=True)
class SentimentResult:
    polarity: Polarity
    score: float  # -1.0 .. 1.0
    confidence: float  # 0.0 .. 1.0

    @staticmethod
    def neutral() -> "SentimentResult":
        return SentimentResult(polarity=Polarity.NEUTRAL, score=0.0, confidence=0.0)


class SentimentClassifier(Protocol):
    def classify(self, text: str) -> SentimentResult:
        """
        Classify English text.
        Raises ClassificationError when the capability is unavailable.
        """
        ...


class KeywordSentimentClassifier:
    """Weighted-lexicon classifier with negation and intensifier handling."""

    POSITIVE_WORDS = {
        # strong
        "love": 2, "loved": 2, "amazing": 2, "excellent": 2, "fantastic": 2,
        "perfect": 2, "wonderful": 2, "outstanding": 2, "brilliant": 2, "best": 2,
        # moderate
        "good": 1, "great": 1, "nice": 1, "happy": 1, "glad": 1, "pleased": 1,
        "like": 1, "liked": 1, "enjoy": 1, "enjoyed": 1, "awesome": 1,
        "helpful": 1, "thanks": 1, "thank": 1, "recommend": 1, "works": 1,
        "reliable": 1, "fast": 1, "easy": 1, "satisfied": 1, "beautiful": 1,
    }

    NEGATIVE_WORDS = {
        # strong
        "hate": 3, "hated": 3, "terrible": 3, "awful": 3, "horrible": 3,
        "worst": 3, "useless": 3, "garbage": 3, "scam": 3,
        # moderate
        "bad": 2, "broken": 2, "disappointed": 2, "disappointing": 2,
        "angry": 2, "annoying": 2, "frustrated": 2, "frustrating": 2,
        "refund": 2, "poor": 2, "waste": 2, "wasted": 2,
        # mild
        "problem": 1, "issue": 1, "slow": 1, "late": 1, "wrong": 1,
        "missing": 1, "damaged": 1, "defective": 1, "unhappy": 1, "sad": 1,
        "sorry": 1, "worse": 1, "fail": 1, "failed": 1, "return": 1,
    }

    NEGATIONS = {"not", "no", "never", "nothing", "hardly", "barely", "without"}

    INTENSIFIERS = {
        "very": 1.5, "really": 1.5, "so": 1.3, "super": 1.5,
        "extremely": 2.0, "absolutely": 2.0, "totally": 1.5,
    }

    _WORD_RE = re.compile(r"[a-z']+")

    def __init__(self, threshold: float = POLARITY_THRESHOLD) -> None:
        self._threshold = threshold

    def classify(self, text: str) -> SentimentResult:
        if not isinstance(text, str):
            raise ClassificationError(f"cannot classify {type(text).__name__}")

        words = self._WORD_RE.findall(text.lower())
        pos = neg = 0.0
        prev = prev_prev = ""

        for word in words:
            multiplier = self.INTENSIFIERS.get(prev, 1.0)
            negated = (
                prev in self.NEGATIONS
                or prev.endswith("n't")
                or prev_prev in self.NEGATIONS
                or prev_prev.endswith("n't")
            )

            if word in self.POSITIVE_WORDS:
                weight = self.POSITIVE_WORDS[word] * multiplier
                if negated:
                    neg += weight * 0.5
                else:
                    pos += weight
            elif word in self.NEGATIVE_WORDS:
                weight = self.NEGATIVE_WORDS[word] * multiplier
                if negated:
                    pos += weight * 0.3
                else:
                    neg += weight

            prev_prev, prev = prev, word

        total = pos + neg
        if total == 0:
            return SentimentResult.neutral()

        score = (pos - neg) / total
        confidence = min(1.0, total / 4.0)
        return SentimentResult(
            polarity=Polarity.from_score(score, self._threshold),
            score=round(score, 3),
            confidence=round(confidence, 3),
        )
