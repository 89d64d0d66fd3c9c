from __future__ import annotations

import random
from dataclasses import dataclass
from datetime import datetime, time

NOTIFICATIONS_ENABLED_KEY = "notificationsEnabled"
REMINDER_TIME_KEY = "reminderTime"
MINDFULNESS_ENABLED_KEY = "mindfulnessEnabled"

JOURNAL_REMINDER_TITLE = "Time to Journal!"
JOURNAL_REMINDER_BODY = "Take a moment to reflect on your day and write in your journal."
MINDFULNESS_TITLE = "Mindfulness Reminder"

MINDFULNESS_MESSAGES: tuple[str, ...] = (
    "Take a deep breath. You're doing great!",
    "Remember to be kind to yourself today.",
    "Take a moment to appreciate something positive.",
    "You've got this! Keep going.",
    "It's okay to take breaks. Your well-being matters.",
)


@dataclass(frozen=True)
class ReminderStatus:
    enabled: bool
    reminder_time: str | None
    due: bool
    title: str | None = None
    body: str | None = None
    mindfulness_message: str | None = None


def parse_reminder_time(value: str) -> time:
    """Parse an ``HH:MM`` reminder time."""

    try:
        hours, minutes = (int(part) for part in value.split(":", maxsplit=1))
        return time(hour=hours, minute=minutes)
    except (AttributeError, TypeError, ValueError) as exc:
        raise ValueError(f"invalid reminder time: {value!r}") from exc


def is_reminder_due(now: datetime, reminder_time: str) -> bool:
    target = parse_reminder_time(reminder_time)
    return now.hour == target.hour and now.minute == target.minute


def pick_mindfulness_message(rng: random.Random | None = None) -> str:
    chooser = rng or random
    return chooser.choice(MINDFULNESS_MESSAGES)


def reminder_status(
    *,
    enabled: bool,
    reminder_time: str | None,
    mindfulness_enabled: bool,
    now: datetime,
    rng: random.Random | None = None,
) -> ReminderStatus:
    due = bool(enabled and reminder_time and is_reminder_due(now, reminder_time))
    return ReminderStatus(
        enabled=enabled,
        reminder_time=reminder_time,
        due=due,
        title=JOURNAL_REMINDER_TITLE if due else None,
        body=JOURNAL_REMINDER_BODY if due else None,
        mindfulness_message=pick_mindfulness_message(rng) if mindfulness_enabled else None,
    )
