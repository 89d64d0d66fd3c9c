"""Database models for MoodJournal."""

from .models import (
    Base,
    JournalEntry,
    SettingEntry,
)

__all__ = [
    "Base",
    "JournalEntry",
    "SettingEntry",
]
