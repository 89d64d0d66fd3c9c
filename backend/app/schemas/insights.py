from __future__ import annotations

from datetime import date, datetime
from typing import Literal

from pydantic import Field

from .entries import CamelModel, Mood, Sentiment


class AnalyzeRequest(CamelModel):
    text: str = Field(default="", max_length=10000)
    mood: Mood | None = None


class AnalyzeResponse(CamelModel):
    sentiment: Sentiment
    score: int
    stress_level: int
    mood: Mood


class DistressRequest(CamelModel):
    text: str = Field(..., max_length=10000)


class DistressResponse(CamelModel):
    distress: bool
    resources: list[str] = Field(default_factory=list)


class DayBucketModel(CamelModel):
    date: date
    label: str
    average_mood: float | None = None
    average_stress: float | None = None
    entries_count: int = 0


class DailyTrendsResponse(CamelModel):
    days: int
    items: list[DayBucketModel]


class MoodPointModel(CamelModel):
    label: str
    score: int = Field(ge=0, le=100)
    date: datetime


class MoodCurveResponse(CamelModel):
    period: Literal["week", "month"]
    items: list[MoodPointModel]


__all__ = [
    "AnalyzeRequest",
    "AnalyzeResponse",
    "DailyTrendsResponse",
    "DayBucketModel",
    "DistressRequest",
    "DistressResponse",
    "MoodCurveResponse",
    "MoodPointModel",
]
