"""Status, notification, and rejection text builders for runtime flows."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Optional

from guides import MOTIVATIONAL_QUOTES
from pomodoro import PomodoroSnapshot
from pomodoro.constants import (
    ACTION_START,
    ACTION_STOP,
    PHASE_BREAK,
    PHASE_WORK,
    REASON_ALREADY_ACTIVE,
    REASON_NOT_ACTIVE,
)
from reminders.constants import REASON_INVALID_FREQUENCY, REASON_UNKNOWN_REMINDER

RESET_REMINDERS_TITLE = "Reminders reset"
RESET_REMINDERS_DESCRIPTION = "All reminder timers start counting from now."


@dataclass(frozen=True)
class NotificationText:
    title: str
    description: str
    spoken_text: str


def format_duration(seconds: int) -> str:
    """Format a duration in seconds as `MM:SS`."""
    minutes, remainder = divmod(max(0, int(seconds)), 60)
    return f"{minutes:02d}:{remainder:02d}"


def pick_quote(rng: random.Random) -> str:
    return rng.choice(MOTIVATIONAL_QUOTES)


def pomodoro_status_message(snapshot: PomodoroSnapshot) -> str:
    """Build status text for the current pomodoro snapshot."""
    remaining = format_duration(snapshot.remaining_seconds)
    if snapshot.phase == PHASE_WORK:
        return f"Focus session running ({remaining} remaining)"
    if snapshot.phase == PHASE_BREAK:
        return f"Break running ({remaining} remaining)"
    return "Ready"


def focus_notification(snapshot: PomodoroSnapshot, quote: Optional[str] = None) -> NotificationText:
    minutes = snapshot.duration_seconds // 60
    description = f"Time to focus for {minutes} minutes."
    if quote:
        description = f"{description} {quote}"
    return NotificationText(
        title="Focus time! 🎯",
        description=description,
        spoken_text=f"Time to focus for {minutes} minutes." + (f" {quote}" if quote else ""),
    )


def break_notification(snapshot: PomodoroSnapshot, quote: str) -> NotificationText:
    minutes = snapshot.duration_seconds // 60
    return NotificationText(
        title="Break time! ☕",
        description=f"Step away for {minutes} minutes. {quote}",
        spoken_text=f"Great work. Take a {minutes} minute break. {quote}",
    )


def pomodoro_rejection_text(action: str, reason: str) -> str:
    """Return rejection text for pomodoro actions not possible right now."""
    if reason == REASON_ALREADY_ACTIVE and action == ACTION_START:
        return "A pomodoro session is already running."
    if reason == REASON_NOT_ACTIVE and action == ACTION_STOP:
        return "There is no active pomodoro session."
    return "That pomodoro action is not possible right now."


def reminder_rejection_text(key: Optional[str], reason: str) -> str:
    if reason == REASON_UNKNOWN_REMINDER:
        return f"Unknown reminder: {key}"
    if reason == REASON_INVALID_FREQUENCY:
        return f"Unsupported frequency for reminder: {key}"
    return "That reminder change is not possible right now."
