"""Scoring, crisis detection and trend aggregation over journal entries."""

from .distress import CRISIS_RESOURCES, detect_extreme_distress
from .sentiment import MoodAnalysis, SentimentScorer, TextAnalysis, analyze
from .trends import DayBucket, MoodPoint, bucket_by_day, period_to_days, score_to_mood_curve

__all__ = [
    "CRISIS_RESOURCES",
    "DayBucket",
    "MoodAnalysis",
    "MoodPoint",
    "SentimentScorer",
    "TextAnalysis",
    "analyze",
    "bucket_by_day",
    "detect_extreme_distress",
    "period_to_days",
    "score_to_mood_curve",
]
