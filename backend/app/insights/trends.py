from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any, Protocol

from ..schemas.entries import Mood

# 1-5 scale used by the daily mood chart
MOOD_VALUES: dict[str, int] = {
    Mood.VERY_SAD.value: 1,
    Mood.SAD.value: 2,
    Mood.NEUTRAL.value: 3,
    Mood.HAPPY.value: 4,
    Mood.VERY_HAPPY.value: 5,
}
DEFAULT_MOOD_VALUE = 3
DEFAULT_STRESS_VALUE = 5

# 0-100 scale used by the per-entry mood curve
MOOD_SCORES: dict[str, int] = {
    Mood.VERY_SAD.value: 0,
    Mood.SAD.value: 25,
    Mood.NEUTRAL.value: 50,
    Mood.HAPPY.value: 75,
    Mood.VERY_HAPPY.value: 100,
}
DEFAULT_MOOD_SCORE = 50

PERIOD_DAYS: dict[str, int] = {"week": 7, "month": 30}


class EntryLike(Protocol):
    date: datetime
    mood: Any
    stress_level: int | None


@dataclass
class DayBucket:
    date: date
    label: str
    average_mood: float | None = None
    average_stress: float | None = None
    entries: list[Any] = field(default_factory=list, repr=False)

    @property
    def entries_count(self) -> int:
        return len(self.entries)


@dataclass(frozen=True)
class MoodPoint:
    label: str
    score: int
    date: datetime


def _local_naive(value: datetime) -> datetime:
    if value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


def _mood_key(mood: Any) -> str | None:
    if mood is None:
        return None
    return getattr(mood, "value", mood)


def mood_value(mood: Any) -> int:
    return MOOD_VALUES.get(_mood_key(mood), DEFAULT_MOOD_VALUE)


def mood_score(mood: Any) -> int:
    return MOOD_SCORES.get(_mood_key(mood), DEFAULT_MOOD_SCORE)


def day_label(day: date, offset: int) -> str:
    if offset == 0:
        return "Today"
    if offset == 1:
        return "Yesterday"
    return f"{day:%b} {day.day}"


def curve_label(value: datetime) -> str:
    return f"{value.month}/{value.day}/{value.year}"


def period_to_days(period: str) -> int:
    try:
        return PERIOD_DAYS[period]
    except KeyError as exc:
        raise ValueError(f"unsupported period: {period}") from exc


def bucket_by_day(
    entries: Iterable[EntryLike],
    window_days: int = 30,
    *,
    today: date | None = None,
) -> list[DayBucket]:
    """Average mood and stress per calendar day over a dense trailing window.

    Returns exactly ``window_days`` buckets, oldest first, the last one being
    ``today``. Days without entries keep ``None`` averages.
    """

    if window_days < 1:
        raise ValueError("window_days must be positive")
    current = today or date.today()

    by_day: dict[date, list[EntryLike]] = defaultdict(list)
    for entry in entries:
        by_day[_local_naive(entry.date).date()].append(entry)

    buckets: list[DayBucket] = []
    for offset in range(window_days - 1, -1, -1):
        day = current - timedelta(days=offset)
        day_entries = by_day.get(day, [])
        bucket = DayBucket(date=day, label=day_label(day, offset), entries=list(day_entries))
        if day_entries:
            bucket.average_mood = sum(mood_value(e.mood) for e in day_entries) / len(day_entries)
            bucket.average_stress = sum(
                e.stress_level if e.stress_level is not None else DEFAULT_STRESS_VALUE
                for e in day_entries
            ) / len(day_entries)
        buckets.append(bucket)
    return buckets


def score_to_mood_curve(
    entries: Iterable[EntryLike],
    window_days: int = 7,
    *,
    now: datetime | None = None,
) -> list[MoodPoint]:
    """One mood point per entry since ``now - window_days``, oldest first."""

    if window_days < 1:
        raise ValueError("window_days must be positive")
    current = _local_naive(now) if now else datetime.now()
    start = current - timedelta(days=window_days)

    selected: Sequence[EntryLike] = sorted(
        (entry for entry in entries if _local_naive(entry.date) >= start),
        key=lambda entry: _local_naive(entry.date),
    )
    return [
        MoodPoint(
            label=curve_label(_local_naive(entry.date)),
            score=mood_score(entry.mood),
            date=_local_naive(entry.date),
        )
        for entry in selected
    ]


__all__ = [
    "DEFAULT_MOOD_SCORE",
    "DEFAULT_MOOD_VALUE",
    "DEFAULT_STRESS_VALUE",
    "DayBucket",
    "MOOD_SCORES",
    "MOOD_VALUES",
    "MoodPoint",
    "PERIOD_DAYS",
    "bucket_by_day",
    "curve_label",
    "day_label",
    "mood_score",
    "mood_value",
    "period_to_days",
    "score_to_mood_curve",
]
