from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, TypeVar

from ..ai.enhancer import TextEnhancer
from ..ai.local_llm import generate_local_response
from ..db.models import JournalEntry
from ..insights.distress import CRISIS_RESOURCES, detect_extreme_distress
from ..insights.sentiment import MoodAnalysis, SentimentScorer
from ..insights.trends import DayBucket, MoodPoint, bucket_by_day, period_to_days, score_to_mood_curve
from ..metrics import DISTRESS_DETECTIONS, ENHANCER_FALLBACKS, ENTRIES_SAVED
from ..schemas.entries import Mood, Sentiment
from .reminders import (
    MINDFULNESS_ENABLED_KEY,
    NOTIFICATIONS_ENABLED_KEY,
    REMINDER_TIME_KEY,
    ReminderStatus,
    reminder_status,
)
from .storage import DEFAULT_EXPORT_SETTING_KEYS, RESERVED_SETTING_KEYS, StorageService

logger = logging.getLogger(__name__)

T = TypeVar("T")


class EmptyEntryError(ValueError):
    """Raised when a journal entry has no text to save."""


@dataclass
class SavedEntry:
    entry: JournalEntry
    analysis: MoodAnalysis
    distress: bool


@dataclass
class AdviceResult:
    text: str | None
    source: str
    crisis: bool = False
    resources: list[str] = field(default_factory=list)


@dataclass
class Reflection:
    entry_id: int
    summary: str | None
    suggestions: str
    stress_level: int | None
    source: str


class JournalService:
    """Save, review and chart journal entries."""

    def __init__(
        self,
        storage: StorageService,
        scorer: SentimentScorer,
        *,
        enhancer: TextEnhancer | None = None,
        recent_limit: int = 5,
        export_setting_keys: Sequence[str] = DEFAULT_EXPORT_SETTING_KEYS,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._storage = storage
        self._scorer = scorer
        self._enhancer = enhancer
        self._recent_limit = recent_limit
        self._export_setting_keys = tuple(export_setting_keys)
        self._clock = clock or datetime.now

    # -- writing ---------------------------------------------------------
    async def save_entry(self, text: str, mood: Mood | str | None = None) -> SavedEntry:
        cleaned = text.strip() if text else ""
        if not cleaned:
            raise EmptyEntryError("entry text is required")

        distress = detect_extreme_distress(cleaned)
        if distress:
            DISTRESS_DETECTIONS.labels(origin="entry").inc()
            logger.warning("distress phrase detected in entry", extra={"kind": "entry"})

        analysis = await self._scorer.analyze_mood(cleaned, mood)
        entry = await self._storage.add_entry(
            text=cleaned,
            mood=analysis.mood.value,
            sentiment=analysis.sentiment.value,
            sentiment_score=analysis.score,
            stress_level=analysis.stress_level,
            date=self._clock(),
        )
        ENTRIES_SAVED.labels(kind="journal").inc()
        return SavedEntry(entry=entry, analysis=analysis, distress=distress)

    async def save_quick_checkin(self, mood: Mood | str, stress_level: int = 0) -> JournalEntry:
        selected = Mood(mood)
        entry = await self._storage.add_entry(
            text=f"Quick check-in: {selected.value}",
            mood=selected.value,
            sentiment=Sentiment.NEUTRAL.value,
            sentiment_score=0,
            stress_level=stress_level,
            date=self._clock(),
            is_quick_checkin=True,
        )
        ENTRIES_SAVED.labels(kind="checkin").inc()
        return entry

    async def delete_entry(self, entry_id: int) -> bool:
        return await self._storage.delete_entry(entry_id)

    async def clear_entries(self) -> int:
        return await self._storage.clear_entries()

    # -- reading ---------------------------------------------------------
    async def recent_entries(self, limit: int | None = None) -> Sequence[JournalEntry]:
        return await self._storage.list_entries(limit or self._recent_limit)

    async def today_timeline(self) -> Sequence[JournalEntry]:
        start = self._clock().replace(hour=0, minute=0, second=0, microsecond=0)
        return await self._storage.list_entries_by_date_range(start, start + timedelta(days=1))

    async def daily_trends(self, days: int = 30) -> list[DayBucket]:
        entries = await self._storage.list_all_entries()
        return bucket_by_day(entries, days, today=self._clock().date())

    async def mood_curve(self, period: str = "week") -> list[MoodPoint]:
        window = period_to_days(period)
        entries = await self._storage.list_all_entries()
        return score_to_mood_curve(entries, window, now=self._clock())

    # -- enhancer backed helpers -----------------------------------------
    async def _ask_enhancer(
        self,
        operation: str,
        call: Callable[[TextEnhancer], Awaitable[T | None]],
    ) -> T | None:
        if self._enhancer is None:
            return None
        try:
            result = await call(self._enhancer)
        except Exception as exc:
            logger.warning("enhancer %s failed: %s", operation, exc, extra={"kind": operation})
            result = None
        if result is None:
            ENHANCER_FALLBACKS.labels(operation=operation).inc()
        return result

    async def get_advice(self, question: str) -> AdviceResult:
        cleaned = question.strip()
        if detect_extreme_distress(cleaned):
            DISTRESS_DETECTIONS.labels(origin="advice").inc()
            return AdviceResult(
                text=None,
                source="crisis",
                crisis=True,
                resources=list(CRISIS_RESOURCES),
            )

        recent = await self._storage.list_entries(3)
        context = ""
        if recent:
            latest = recent[0]
            context = f"Recent mood: {latest.mood}, Stress level: {latest.stress_level}%"

        advice = await self._ask_enhancer(
            "get_advice",
            lambda enhancer: enhancer.get_advice(cleaned, context),
        )
        if advice:
            return AdviceResult(text=advice, source="ai")
        return AdviceResult(text=generate_local_response("advice", cleaned), source="local")

    async def reflect(self, entry_id: int) -> Reflection | None:
        entry = await self._storage.get_entry(entry_id)
        if entry is None:
            return None
        if entry.is_quick_checkin or not entry.text.strip():
            return Reflection(
                entry_id=entry.id,
                summary=None,
                suggestions=generate_local_response("reflection"),
                stress_level=entry.stress_level,
                source="local",
            )

        summary = await self._ask_enhancer(
            "summarize_entry",
            lambda enhancer: enhancer.summarize_entry(entry.text),
        )
        suggestions = await self._ask_enhancer(
            "suggest_improvements",
            lambda enhancer: enhancer.suggest_improvements(entry.text),
        )
        stress = await self._ask_enhancer(
            "enhance_stress_analysis",
            lambda enhancer: enhancer.enhance_stress_analysis(entry.text),
        )
        return Reflection(
            entry_id=entry.id,
            summary=summary,
            suggestions=suggestions or generate_local_response("reflection", entry.text),
            stress_level=stress if stress is not None else entry.stress_level,
            source="ai" if suggestions else "local",
        )

    # -- settings, reminders, export -------------------------------------
    async def get_settings(self) -> dict[str, Any]:
        keys = (*self._export_setting_keys, MINDFULNESS_ENABLED_KEY)
        return await self._storage.get_settings(dict.fromkeys(keys))

    async def update_setting(self, key: str, value: Any) -> None:
        if key in RESERVED_SETTING_KEYS:
            raise ValueError(f"{key} is managed by the server")
        await self._storage.set_setting(key, value)

    async def reminder_status(self) -> ReminderStatus:
        enabled = bool(await self._storage.get_setting(NOTIFICATIONS_ENABLED_KEY))
        reminder_time = await self._storage.get_setting(REMINDER_TIME_KEY)
        mindfulness = bool(await self._storage.get_setting(MINDFULNESS_ENABLED_KEY))
        try:
            return reminder_status(
                enabled=enabled,
                reminder_time=reminder_time,
                mindfulness_enabled=mindfulness,
                now=self._clock(),
            )
        except ValueError as exc:
            logger.warning("stored reminder time ignored: %s", exc)
            return reminder_status(
                enabled=enabled,
                reminder_time=None,
                mindfulness_enabled=mindfulness,
                now=self._clock(),
            )

    async def export_data(self) -> dict[str, Any]:
        return await self._storage.export_data(self._export_setting_keys)

    async def import_data(self, payload: Mapping[str, Any]) -> int:
        return await self._storage.import_data(payload)


__all__ = [
    "AdviceResult",
    "EmptyEntryError",
    "JournalService",
    "Reflection",
    "SavedEntry",
]
