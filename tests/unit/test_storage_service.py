from __future__ import annotations

from datetime import datetime, timedelta

import pytest
from pydantic import ValidationError

from backend.app.services.storage import StorageError, StorageService
from backend.db import create_engine, create_session_factory


async def _add(storage: StorageService, text: str, when: datetime, mood: str = "neutral", **kwargs):
    return await storage.add_entry(
        text=text,
        mood=mood,
        sentiment=kwargs.pop("sentiment", "neutral"),
        sentiment_score=kwargs.pop("sentiment_score", 0),
        stress_level=kwargs.pop("stress_level", 0),
        date=when,
        **kwargs,
    )


@pytest.mark.anyio
async def test_entry_crud(storage: StorageService) -> None:
    base = datetime(2026, 10, 1, 9, 0)
    first = await _add(storage, "first", base, mood="happy", stress_level=None)
    second = await _add(storage, "second", base + timedelta(hours=2))

    assert first.id > 0 and second.id > first.id
    assert (await storage.get_entry(first.id)).text == "first"
    assert (await storage.get_entry(first.id)).stress_level is None
    assert [e.text for e in await storage.list_entries(10)] == ["second", "first"]
    assert [e.text for e in await storage.list_entries(1)] == ["second"]
    assert await storage.count_entries() == 2

    assert await storage.delete_entry(first.id) is True
    assert await storage.delete_entry(first.id) is False
    assert await storage.get_entry(first.id) is None
    assert await storage.clear_entries() == 1
    assert await storage.list_all_entries() == []


@pytest.mark.anyio
async def test_date_range_is_inclusive_and_ascending(storage: StorageService) -> None:
    start = datetime(2026, 10, 5)
    await _add(storage, "before", start - timedelta(seconds=1))
    await _add(storage, "late", start + timedelta(hours=20))
    await _add(storage, "start", start)
    await _add(storage, "end", start + timedelta(days=1))

    found = await storage.list_entries_by_date_range(start, start + timedelta(days=1))
    assert [e.text for e in found] == ["start", "late", "end"]


@pytest.mark.anyio
async def test_settings_round_trip_json_values(storage: StorageService) -> None:
    assert await storage.get_setting("reminderTime") is None
    await storage.set_setting("reminderTime", "20:30")
    await storage.set_setting("notificationsEnabled", True)
    await storage.set_setting("notificationsEnabled", False)

    assert await storage.get_settings(["reminderTime", "notificationsEnabled", "missing"]) == {
        "reminderTime": "20:30",
        "notificationsEnabled": False,
        "missing": None,
    }


@pytest.mark.anyio
async def test_export_then_import_restores_entries(storage: StorageService) -> None:
    when = datetime(2026, 10, 3, 18, 15)
    saved = await _add(storage, "kept", when, mood="sad", is_quick_checkin=True, stress_level=35)
    await storage.set_setting("reminderTime", "21:00")

    exported = await storage.export_data(["reminderTime"])
    assert exported["settings"] == {"reminderTime": "21:00"}
    assert exported["exportDate"]
    item = exported["entries"][0]
    assert item["isQuickCheckin"] is True
    assert item["stressLevel"] == 35

    await storage.clear_entries()
    await storage.set_setting("reminderTime", "07:00")

    assert await storage.import_data(exported) == 1
    restored = await storage.get_entry(saved.id)
    assert restored is not None
    assert restored.text == "kept"
    assert restored.date == when
    assert restored.mood == "sad"
    assert await storage.get_setting("reminderTime") == "21:00"


@pytest.mark.anyio
async def test_import_rejects_bad_payload(storage: StorageService) -> None:
    with pytest.raises(ValidationError):
        await storage.import_data({"entries": [{"text": "no date"}]})
    with pytest.raises(ValueError):
        await storage.import_data({"entries": [], "settings": ["x"]})


@pytest.mark.anyio
async def test_import_validates_entry_fields(storage: StorageService) -> None:
    when = "2026-10-03T18:15:00"
    with pytest.raises(ValidationError):
        await storage.import_data({"entries": [{"text": "x", "date": when, "mood": "ecstatic"}]})
    with pytest.raises(ValidationError):
        await storage.import_data({"entries": [{"text": "x", "date": when, "stressLevel": 9999}]})
    with pytest.raises(ValidationError):
        await storage.import_data({"entries": [{"text": "x", "date": when, "sentimentScore": -101}]})


@pytest.mark.anyio
async def test_import_rejects_duplicate_ids_without_writing(storage: StorageService) -> None:
    kept = await _add(storage, "kept", datetime(2026, 10, 1, 9, 0))
    entries = [
        {"id": 5, "text": "one", "date": "2026-10-02T10:00:00"},
        {"id": 5, "text": "two", "date": "2026-10-02T11:00:00"},
    ]

    with pytest.raises(ValueError, match="unique"):
        await storage.import_data({"entries": entries})

    assert [e.id for e in await storage.list_all_entries()] == [kept.id]


@pytest.mark.anyio
async def test_import_rejects_reserved_settings(storage: StorageService) -> None:
    with pytest.raises(ValueError, match="schema_version"):
        await storage.import_data({"entries": [], "settings": {"schema_version": "0"}})
    assert await storage.get_setting("schema_version") == "test"


@pytest.mark.anyio
async def test_import_stores_enum_values(storage: StorageService) -> None:
    payload = {
        "entries": [
            {
                "text": "calm",
                "date": "2026-10-02T10:00:00",
                "mood": "very-happy",
                "sentiment": "positive",
                "sentimentScore": 50,
            }
        ]
    }
    assert await storage.import_data(payload) == 1

    restored = (await storage.list_all_entries())[0]
    assert restored.mood == "very-happy"
    assert restored.sentiment == "positive"


@pytest.mark.anyio
async def test_failures_surface_as_storage_error(tmp_path, anyio_backend) -> None:
    # no tables were created for this database
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}")
    storage = StorageService(create_session_factory(engine))
    try:
        with pytest.raises(StorageError):
            await storage.list_entries()
        with pytest.raises(StorageError):
            await storage.set_setting("reminderTime", "09:00")
        await storage.healthcheck()
    finally:
        await engine.dispose()
