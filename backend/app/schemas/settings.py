from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from .entries import CamelModel, JournalEntryModel


class SettingUpdate(BaseModel):
    value: Any = None


class SettingsResponse(BaseModel):
    items: dict[str, Any]


class ReminderStatusModel(CamelModel):
    enabled: bool
    reminder_time: str | None = None
    due: bool
    title: str | None = None
    body: str | None = None
    mindfulness_message: str | None = None


class ExportPayload(CamelModel):
    entries: list[JournalEntryModel] = Field(default_factory=list)
    settings: dict[str, Any] = Field(default_factory=dict)
    export_date: str | None = None


class ImportResponse(BaseModel):
    ok: bool = True
    imported: int
