from __future__ import annotations

from typing import Any

import pytest

from backend.app.insights.sentiment import (
    SentimentScorer,
    analyze,
    infer_mood,
    round_half_up,
    tokenize,
)
from backend.app.schemas.entries import Mood, Sentiment


class _StubEnhancer:
    def __init__(self, payload: Any = None, error: Exception | None = None) -> None:
        self.payload = payload
        self.error = error
        self.calls: list[str] = []

    async def analyze_sentiment(self, text: str) -> dict[str, Any] | None:
        self.calls.append(text)
        if self.error is not None:
            raise self.error
        return self.payload


@pytest.mark.parametrize("text", ["", "   ", "\n\t ", None])
def test_blank_text_is_neutral(text: str | None) -> None:
    result = analyze(text)
    assert result.sentiment == Sentiment.NEUTRAL
    assert result.score == 0
    assert result.stress_level == 0


def test_happy_and_grateful_scores_forty() -> None:
    result = analyze("I am happy and grateful")
    assert result.sentiment == Sentiment.POSITIVE
    assert result.score == 40
    assert result.stress_level == 0
    assert infer_mood(result.sentiment, result.score) == Mood.HAPPY


def test_punctuation_is_stripped_before_matching() -> None:
    assert tokenize("Great, GREAT... great!") == ["great", "great", "great"]
    result = analyze("Great, GREAT... great!")
    assert result.score == 100
    assert infer_mood(result.sentiment, result.score) == Mood.VERY_HAPPY


def test_words_in_negative_and_stress_sets_count_for_both() -> None:
    result = analyze("stressed")
    assert result.sentiment == Sentiment.NEGATIVE
    assert result.score == -100
    assert result.stress_level == 100


def test_anxious_deadline_text_scores_exactly() -> None:
    # 8 tokens: 2 negative words, 3 stress words
    result = analyze("I feel anxious and stressed about the deadline")
    assert result.sentiment == Sentiment.NEGATIVE
    assert result.score == -25
    assert result.stress_level == 38


def test_small_ratio_stays_neutral() -> None:
    # 1 positive word in 25 tokens is a ratio of exactly 0.04
    text = "good " + " ".join(["today"] * 24)
    result = analyze(text)
    assert result.sentiment == Sentiment.NEUTRAL
    assert result.score == 4


def test_round_half_up_matches_browser_rounding() -> None:
    assert round_half_up(2.5) == 3
    assert round_half_up(-2.5) == -2
    assert round_half_up(-0.4) == 0


def test_output_stays_in_range_for_mixed_text() -> None:
    result = analyze("sad sad sad but happy, deadline pressure and rush")
    assert -100 <= result.score <= 100
    assert 0 <= result.stress_level <= 100


@pytest.mark.parametrize(
    ("sentiment", "score", "expected"),
    [
        (Sentiment.POSITIVE, 51, Mood.VERY_HAPPY),
        (Sentiment.POSITIVE, 50, Mood.HAPPY),
        (Sentiment.NEGATIVE, -51, Mood.VERY_SAD),
        (Sentiment.NEGATIVE, -50, Mood.SAD),
        (Sentiment.NEUTRAL, 3, Mood.NEUTRAL),
    ],
)
def test_infer_mood_thresholds(sentiment: Sentiment, score: int, expected: Mood) -> None:
    assert infer_mood(sentiment, score) == expected


@pytest.mark.anyio
async def test_user_mood_wins_over_text() -> None:
    scorer = SentimentScorer()
    result = await scorer.analyze_mood("sad awful terrible miserable", Mood.HAPPY)
    assert result.mood == Mood.HAPPY
    assert result.sentiment == Sentiment.NEGATIVE
    assert result.score < 0


@pytest.mark.anyio
async def test_enhancer_replaces_local_analysis() -> None:
    enhancer = _StubEnhancer(
        {"sentiment": "positive", "score": 70, "stressLevel": 12, "mood": "very-happy"}
    )
    scorer = SentimentScorer(enhancer)
    result = await scorer.analyze_mood("sad day")
    assert scorer.enhanced
    assert enhancer.calls == ["sad day"]
    assert result.as_dict() == {
        "sentiment": "positive",
        "score": 70,
        "stress_level": 12,
        "mood": "very-happy",
    }


@pytest.mark.anyio
async def test_user_mood_overrides_enhancer_mood() -> None:
    enhancer = _StubEnhancer(
        {"sentiment": "positive", "score": 70, "stressLevel": 12, "mood": "very-happy"}
    )
    result = await SentimentScorer(enhancer).analyze_mood("fine", "sad")
    assert result.mood == Mood.SAD
    assert result.score == 70


@pytest.mark.anyio
@pytest.mark.parametrize(
    "enhancer",
    [
        _StubEnhancer(error=TimeoutError("slow")),
        _StubEnhancer(payload=None),
        _StubEnhancer(payload={"sentiment": "positive", "mood": ""}),
        _StubEnhancer(payload={"sentiment": "ecstatic", "mood": "happy"}),
        _StubEnhancer(payload=["not", "a", "mapping"]),
    ],
)
async def test_enhancer_failures_fall_back_to_local(enhancer: _StubEnhancer) -> None:
    result = await SentimentScorer(enhancer).analyze_mood("I am happy and grateful")
    assert result.sentiment == Sentiment.POSITIVE
    assert result.score == 40
    assert result.mood == Mood.HAPPY


@pytest.mark.anyio
async def test_enhancer_not_called_for_blank_text() -> None:
    enhancer = _StubEnhancer({"mood": "happy"})
    result = await SentimentScorer(enhancer).analyze_mood("   ")
    assert enhancer.calls == []
    assert result.mood == Mood.NEUTRAL
