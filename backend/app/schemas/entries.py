from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Mood(str, Enum):
    VERY_SAD = "very-sad"
    SAD = "sad"
    NEUTRAL = "neutral"
    HAPPY = "happy"
    VERY_HAPPY = "very-happy"


class Sentiment(str, Enum):
    NEGATIVE = "negative"
    NEUTRAL = "neutral"
    POSITIVE = "positive"


class CamelModel(BaseModel):
    """Models exchanged with clients use camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class EntryCreate(CamelModel):
    text: str = Field(..., min_length=1, max_length=10000)
    mood: Mood | None = None


class CheckinCreate(CamelModel):
    mood: Mood
    stress_level: int = Field(default=0, ge=0, le=100)


class JournalEntryModel(CamelModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    id: int | None = None
    text: str = ""
    mood: Mood = Mood.NEUTRAL
    sentiment: Sentiment = Sentiment.NEUTRAL
    sentiment_score: int = Field(default=0, ge=-100, le=100)
    stress_level: int | None = Field(default=0, ge=0, le=100)
    date: datetime
    is_quick_checkin: bool = False


class EntryCreateResponse(CamelModel):
    ok: bool = True
    entry: JournalEntryModel
    distress: bool = False


class EntryListResponse(BaseModel):
    items: list[JournalEntryModel]


__all__ = [
    "CamelModel",
    "CheckinCreate",
    "EntryCreate",
    "EntryCreateResponse",
    "EntryListResponse",
    "JournalEntryModel",
    "Mood",
    "Sentiment",
]
