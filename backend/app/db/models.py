from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base declarative model."""


class JournalEntry(Base):
    """Journal entries and quick check-ins, stored in local time."""

    __tablename__ = "entries"
    __table_args__ = (
        Index("ix_entries_mood", "mood"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    text: Mapped[str] = mapped_column(Text, nullable=False, default="")
    mood: Mapped[str] = mapped_column(String(20), nullable=False, default="neutral")
    sentiment: Mapped[str] = mapped_column(String(20), nullable=False, default="neutral")
    sentiment_score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    stress_level: Mapped[int | None] = mapped_column(Integer, nullable=True, default=0)
    date: Mapped[datetime] = mapped_column(DateTime, default=datetime.now, index=True)
    is_quick_checkin: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)


class SettingEntry(Base):
    """Key-value settings; values are JSON encoded."""

    __tablename__ = "settings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    key: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.now,
        onupdate=datetime.now,
    )
