"""Lexicon based sentiment and stress scoring for journal text.

The heuristic counts tokens against three independent word sets. A token may
count toward both the negative and the stress set ("stressed", "anxious"); the
overlap is kept as is.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Mapping
from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any

from ..metrics import ENHANCER_FALLBACKS
from ..schemas.entries import Mood, Sentiment

if TYPE_CHECKING:  # pragma: no cover - typing only
    from ..ai.enhancer import TextEnhancer

logger = logging.getLogger(__name__)

_NON_WORD_RE = re.compile(r"[^\w\s]", flags=re.ASCII)

POSITIVE_THRESHOLD = 0.05
NEGATIVE_THRESHOLD = -0.05

POSITIVE_WORDS = frozenset(
    {
        "happy",
        "joy",
        "great",
        "wonderful",
        "excited",
        "good",
        "amazing",
        "fantastic",
        "love",
        "loved",
        "peaceful",
        "calm",
        "grateful",
        "thankful",
        "blessed",
        "hopeful",
        "optimistic",
        "content",
        "satisfied",
        "proud",
        "confident",
        "energetic",
        "motivated",
        "inspired",
        "relieved",
        "relaxed",
    }
)

NEGATIVE_WORDS = frozenset(
    {
        "sad",
        "depressed",
        "angry",
        "anxious",
        "worried",
        "stressed",
        "tired",
        "exhausted",
        "frustrated",
        "upset",
        "disappointed",
        "lonely",
        "scared",
        "afraid",
        "hurt",
        "pain",
        "suffering",
        "hopeless",
        "helpless",
        "overwhelmed",
        "nervous",
        "panic",
        "fear",
        "dread",
        "terrible",
        "awful",
        "horrible",
        "miserable",
        "unhappy",
        "down",
        "low",
        "empty",
        "numb",
    }
)

STRESS_WORDS = frozenset(
    {
        "stress",
        "stressed",
        "pressure",
        "overwhelmed",
        "burden",
        "deadline",
        "rush",
        "urgent",
        "worry",
        "worried",
        "anxious",
        "anxiety",
        "tense",
        "tension",
        "strain",
        "exhausted",
        "drained",
    }
)


@dataclass(frozen=True)
class TextAnalysis:
    sentiment: Sentiment
    score: int
    stress_level: int


@dataclass(frozen=True)
class MoodAnalysis:
    sentiment: Sentiment
    score: int
    stress_level: int
    mood: Mood

    def as_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["sentiment"] = self.sentiment.value
        payload["mood"] = self.mood.value
        return payload


def round_half_up(value: float) -> int:
    """Round halves toward positive infinity, matching browser ``Math.round``."""

    return math.floor(value + 0.5)


def tokenize(text: str) -> list[str]:
    return _NON_WORD_RE.sub(" ", text.lower()).split()


def analyze(text: str | None) -> TextAnalysis:
    """Score ``text`` with the local lexicons."""

    if not text or not text.strip():
        return TextAnalysis(Sentiment.NEUTRAL, 0, 0)

    words = tokenize(text)
    positive_count = sum(1 for word in words if word in POSITIVE_WORDS)
    negative_count = sum(1 for word in words if word in NEGATIVE_WORDS)
    stress_count = sum(1 for word in words if word in STRESS_WORDS)

    total = max(len(words), 1)
    ratio = (positive_count - negative_count) / total
    stress_score = min(stress_count / total * 100, 100)

    sentiment = Sentiment.NEUTRAL
    if ratio > POSITIVE_THRESHOLD:
        sentiment = Sentiment.POSITIVE
    elif ratio < NEGATIVE_THRESHOLD:
        sentiment = Sentiment.NEGATIVE

    return TextAnalysis(
        sentiment=sentiment,
        score=round_half_up(ratio * 100),
        stress_level=round_half_up(stress_score),
    )


def infer_mood(sentiment: Sentiment, score: int) -> Mood:
    if sentiment == Sentiment.POSITIVE:
        return Mood.VERY_HAPPY if score > 50 else Mood.HAPPY
    if sentiment == Sentiment.NEGATIVE:
        return Mood.VERY_SAD if score < -50 else Mood.SAD
    return Mood.NEUTRAL


def _coerce_enhanced(payload: Mapping[str, Any], user_mood: Mood | None) -> MoodAnalysis:
    return MoodAnalysis(
        sentiment=Sentiment(payload.get("sentiment") or Sentiment.NEUTRAL.value),
        score=int(payload.get("score") or 0),
        stress_level=int(payload.get("stressLevel") or 0),
        mood=user_mood or Mood(payload["mood"]),
    )


class SentimentScorer:
    """Resolve sentiment, stress and mood for a journal entry.

    An optional enhancer may supply the whole analysis; any failure on its side
    falls back to the lexicon heuristic without retrying.
    """

    def __init__(self, enhancer: TextEnhancer | None = None) -> None:
        self._enhancer = enhancer

    @property
    def enhanced(self) -> bool:
        return self._enhancer is not None

    def analyze(self, text: str | None) -> TextAnalysis:
        return analyze(text)

    async def analyze_mood(
        self,
        text: str | None,
        user_mood: Mood | str | None = None,
    ) -> MoodAnalysis:
        selected = Mood(user_mood) if user_mood else None

        if self._enhancer is not None and text and text.strip():
            enhanced = await self._try_enhancer(self._enhancer, text, selected)
            if enhanced is not None:
                return enhanced

        analysis = analyze(text)
        mood = selected or infer_mood(analysis.sentiment, analysis.score)
        return MoodAnalysis(
            sentiment=analysis.sentiment,
            score=analysis.score,
            stress_level=analysis.stress_level,
            mood=mood,
        )

    async def _try_enhancer(
        self, enhancer: TextEnhancer, text: str, user_mood: Mood | None
    ) -> MoodAnalysis | None:
        try:
            payload = await enhancer.analyze_sentiment(text)
        except Exception as exc:
            logger.warning("enhancer analysis failed, using local scoring: %s", exc)
            ENHANCER_FALLBACKS.labels(operation="analyze_sentiment").inc()
            return None

        if not isinstance(payload, Mapping) or not payload.get("mood"):
            ENHANCER_FALLBACKS.labels(operation="analyze_sentiment").inc()
            return None

        try:
            return _coerce_enhanced(payload, user_mood)
        except (TypeError, ValueError) as exc:
            logger.warning("enhancer returned malformed analysis: %s", exc)
            ENHANCER_FALLBACKS.labels(operation="analyze_sentiment").inc()
            return None


__all__ = [
    "MoodAnalysis",
    "NEGATIVE_WORDS",
    "POSITIVE_WORDS",
    "STRESS_WORDS",
    "SentimentScorer",
    "TextAnalysis",
    "analyze",
    "infer_mood",
    "round_half_up",
    "tokenize",
]
