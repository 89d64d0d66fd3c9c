from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterator, Iterable, Mapping, Sequence
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import delete, func, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from backend.db import SCHEMA_VERSION_KEY

from ..db.models import JournalEntry, SettingEntry
from ..schemas.entries import JournalEntryModel

logger = logging.getLogger(__name__)

DEFAULT_EXPORT_SETTING_KEYS = ("notificationsEnabled", "reminderTime")
# Written by init_db only
RESERVED_SETTING_KEYS = frozenset({SCHEMA_VERSION_KEY})


class StorageError(RuntimeError):
    """A persistence operation failed; never retried."""


def _local_naive(value: datetime) -> datetime:
    if value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


def serialize_entry(entry: JournalEntry) -> dict[str, Any]:
    return JournalEntryModel.model_validate(entry, from_attributes=True).model_dump(
        mode="json",
        by_alias=True,
    )


class StorageService:
    """Persist journal entries and settings in the local database."""

    def __init__(self, session_factory: async_sessionmaker) -> None:
        self._session_factory = session_factory

    @asynccontextmanager
    async def _session(self, operation: str) -> AsyncIterator[AsyncSession]:
        try:
            async with self._session_factory() as session:
                yield session
        except SQLAlchemyError as exc:
            logger.error("storage %s failed: %s", operation, exc, exc_info=True)
            raise StorageError(f"{operation} failed") from exc

    async def healthcheck(self) -> None:
        async with self._session("healthcheck") as session:
            await session.execute(text("SELECT 1"))

    # -- settings helpers ------------------------------------------------
    async def get_setting(self, key: str) -> Any | None:
        async with self._session("get_setting") as session:
            result = await session.execute(
                select(SettingEntry).where(SettingEntry.key == key)
            )
            entry = result.scalar_one_or_none()
        if entry is None:
            return None
        try:
            return json.loads(entry.value)
        except json.JSONDecodeError:
            return entry.value

    async def set_setting(self, key: str, value: Any) -> None:
        encoded = json.dumps(value)
        async with self._session("set_setting") as session:
            result = await session.execute(
                select(SettingEntry).where(SettingEntry.key == key)
            )
            entry = result.scalar_one_or_none()
            if entry is None:
                entry = SettingEntry(key=key, value=encoded)
                session.add(entry)
            else:
                entry.value = encoded
            await session.commit()

    async def get_settings(self, keys: Iterable[str]) -> dict[str, Any]:
        return {key: await self.get_setting(key) for key in keys}

    # -- entries ---------------------------------------------------------
    async def add_entry(
        self,
        *,
        text: str,
        mood: str,
        sentiment: str,
        sentiment_score: int,
        stress_level: int | None,
        date: datetime | None = None,
        is_quick_checkin: bool = False,
        entry_id: int | None = None,
    ) -> JournalEntry:
        async with self._session("add_entry") as session:
            entry = JournalEntry(
                text=text,
                mood=mood,
                sentiment=sentiment,
                sentiment_score=sentiment_score,
                stress_level=stress_level,
                date=_local_naive(date) if date else datetime.now(),
                is_quick_checkin=is_quick_checkin,
            )
            if entry_id is not None:
                entry.id = entry_id
            session.add(entry)
            await session.commit()
            await session.refresh(entry)
        logger.info("entry stored", extra={"entry_id": entry.id})
        return entry

    async def get_entry(self, entry_id: int) -> JournalEntry | None:
        async with self._session("get_entry") as session:
            return await session.get(JournalEntry, entry_id)

    async def list_entries(self, limit: int = 10) -> Sequence[JournalEntry]:
        """Most recent entries first."""

        async with self._session("list_entries") as session:
            result = await session.execute(
                select(JournalEntry)
                .order_by(JournalEntry.date.desc(), JournalEntry.id.desc())
                .limit(limit)
            )
            return list(result.scalars().all())

    async def list_all_entries(self) -> Sequence[JournalEntry]:
        async with self._session("list_all_entries") as session:
            result = await session.execute(select(JournalEntry).order_by(JournalEntry.id))
            return list(result.scalars().all())

    async def list_entries_by_date_range(
        self,
        start: datetime,
        end: datetime,
    ) -> Sequence[JournalEntry]:
        """Entries with ``start <= date <= end``, oldest first."""

        async with self._session("list_entries_by_date_range") as session:
            result = await session.execute(
                select(JournalEntry)
                .where(
                    JournalEntry.date >= _local_naive(start),
                    JournalEntry.date <= _local_naive(end),
                )
                .order_by(JournalEntry.date, JournalEntry.id)
            )
            return list(result.scalars().all())

    async def count_entries(self) -> int:
        async with self._session("count_entries") as session:
            total = await session.scalar(select(func.count(JournalEntry.id)))
            return int(total or 0)

    async def delete_entry(self, entry_id: int) -> bool:
        async with self._session("delete_entry") as session:
            result = await session.execute(
                delete(JournalEntry).where(JournalEntry.id == entry_id)
            )
            await session.commit()
            return (result.rowcount or 0) > 0

    async def clear_entries(self) -> int:
        async with self._session("clear_entries") as session:
            result = await session.execute(delete(JournalEntry))
            await session.commit()
            removed = result.rowcount or 0
        logger.info("entries cleared", extra={"extra_fields": {"removed": removed}})
        return removed

    # -- export / import -------------------------------------------------
    async def export_data(
        self,
        setting_keys: Iterable[str] = DEFAULT_EXPORT_SETTING_KEYS,
    ) -> dict[str, Any]:
        entries = await self.list_all_entries()
        settings = await self.get_settings(setting_keys)
        return {
            "entries": [serialize_entry(entry) for entry in entries],
            "settings": settings,
            "exportDate": datetime.now(UTC).isoformat(),
        }

    async def import_data(self, payload: Mapping[str, Any]) -> int:
        """Replace all entries with an ``export_data`` payload and upsert its settings.

        Returns the number of entries stored. Invalid payloads raise before
        anything is written.
        """

        items = [JournalEntryModel.model_validate(item) for item in payload.get("entries") or []]
        settings = payload.get("settings") or {}
        if not isinstance(settings, Mapping):
            raise ValueError("settings must be an object")
        reserved = RESERVED_SETTING_KEYS.intersection(settings)
        if reserved:
            raise ValueError(f"settings may not include {', '.join(sorted(reserved))}")
        ids = [item.id for item in items if item.id is not None]
        if len(ids) != len(set(ids)):
            raise ValueError("entry ids must be unique")

        async with self._session("import_data") as session:
            await session.execute(delete(JournalEntry))
            for item in items:
                entry = JournalEntry(
                    text=item.text,
                    mood=item.mood.value,
                    sentiment=item.sentiment.value,
                    sentiment_score=item.sentiment_score,
                    stress_level=item.stress_level,
                    date=_local_naive(item.date),
                    is_quick_checkin=item.is_quick_checkin,
                )
                if item.id is not None:
                    entry.id = item.id
                session.add(entry)
            await session.commit()

        for key, value in settings.items():
            await self.set_setting(str(key), value)
        logger.info("import complete", extra={"extra_fields": {"entries": len(items)}})
        return len(items)


__all__ = ["RESERVED_SETTING_KEYS", "StorageError", "StorageService", "serialize_entry"]
