from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone

import pytest

from backend.app.insights.trends import (
    bucket_by_day,
    curve_label,
    day_label,
    period_to_days,
    score_to_mood_curve,
)

TODAY = date(2026, 10, 17)
NOW = datetime(2026, 10, 17, 15, 30)


@dataclass
class _Entry:
    date: datetime
    mood: str | None
    stress_level: int | None = None


def _at(days_ago: int, hour: int = 9) -> datetime:
    return datetime.combine(TODAY - timedelta(days=days_ago), datetime.min.time()).replace(hour=hour)


def test_empty_window_has_one_bucket_per_day() -> None:
    buckets = bucket_by_day([], 30, today=TODAY)
    assert len(buckets) == 30
    assert buckets[-1].label == "Today"
    assert buckets[-1].date == TODAY
    assert buckets[-2].label == "Yesterday"
    assert buckets[-1].date - buckets[0].date == timedelta(days=29)
    assert all(b.average_mood is None and b.average_stress is None for b in buckets)


def test_two_entries_same_day_are_averaged() -> None:
    entries = [
        _Entry(_at(0, 8), "happy", 20),
        _Entry(_at(0, 20), "sad", 60),
    ]
    today_bucket = bucket_by_day(entries, 7, today=TODAY)[-1]
    assert today_bucket.average_mood == pytest.approx(3.0)
    assert today_bucket.average_stress == pytest.approx(40.0)
    assert today_bucket.entries_count == 2


def test_missing_mood_and_stress_use_defaults() -> None:
    entries = [_Entry(_at(1), None, None), _Entry(_at(1), "unknown", 0)]
    bucket = bucket_by_day(entries, 7, today=TODAY)[-2]
    assert bucket.average_mood == pytest.approx(3.0)
    # stress 0 is a real value, only a missing one defaults to 5
    assert bucket.average_stress == pytest.approx(2.5)


def test_entries_outside_window_are_ignored() -> None:
    entries = [_Entry(_at(7), "very-happy", 10), _Entry(_at(-1), "very-happy", 10)]
    buckets = bucket_by_day(entries, 7, today=TODAY)
    assert all(b.entries_count == 0 for b in buckets)


def test_bucket_is_calendar_day_not_rolling() -> None:
    entries = [_Entry(_at(1, 23), "happy", 10), _Entry(_at(0, 0), "sad", 30)]
    buckets = bucket_by_day(entries, 2, today=TODAY)
    assert [b.entries_count for b in buckets] == [1, 1]
    assert buckets[0].average_mood == pytest.approx(4.0)
    assert buckets[1].average_mood == pytest.approx(2.0)


def test_invalid_window_is_rejected() -> None:
    with pytest.raises(ValueError):
        bucket_by_day([], 0, today=TODAY)
    with pytest.raises(ValueError):
        score_to_mood_curve([], 0, now=NOW)


def test_day_label_uses_short_month() -> None:
    assert day_label(date(2026, 10, 3), 14) == "Oct 3"


def test_curve_keeps_entries_inside_rolling_window_only() -> None:
    entries = [
        _Entry(NOW - timedelta(days=10), "very-sad"),
        _Entry(NOW - timedelta(days=2), "very-happy"),
    ]
    points = score_to_mood_curve(entries, 7, now=NOW)
    assert len(points) == 1
    assert points[0].score == 100
    assert points[0].label == "10/15/2026"


def test_curve_is_sorted_and_maps_mood_scale() -> None:
    entries = [
        _Entry(NOW - timedelta(hours=1), "sad"),
        _Entry(NOW - timedelta(days=1), "very-sad"),
        _Entry(NOW - timedelta(days=3), None),
    ]
    points = score_to_mood_curve(entries, 7, now=NOW)
    assert [p.score for p in points] == [50, 0, 25]


def test_curve_accepts_aware_timestamps() -> None:
    aware = (NOW - timedelta(days=1)).astimezone(timezone.utc)
    points = score_to_mood_curve([_Entry(aware, "happy")], 7, now=NOW)
    assert [p.score for p in points] == [75]


def test_curve_label_format() -> None:
    assert curve_label(datetime(2026, 1, 5, 12, 0)) == "1/5/2026"


def test_period_to_days() -> None:
    assert period_to_days("week") == 7
    assert period_to_days("month") == 30
    with pytest.raises(ValueError):
        period_to_days("year")
