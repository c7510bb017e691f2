"""Action and reason constants used by reminder registry logic."""

from __future__ import annotations

REMINDER_EYE = "eye"
REMINDER_MICRO = "micro"
REMINDER_HYDRATION = "hydration"
REMINDER_SNACK = "snack"

PROGRESS_MIN = 0.0
PROGRESS_MAX = 100.0
SECONDS_PER_MINUTE = 60

ACTION_SET_ENABLED = "set_enabled"
ACTION_SET_FREQUENCY = "set_frequency"
ACTION_RESET_ALL = "reset_all"

ACTION_SYNC = "sync"
ACTION_TICK = "tick"
ACTION_TRIGGERED = "triggered"

REASON_ENABLED = "enabled"
REASON_DISABLED = "disabled"
REASON_FREQUENCY_CHANGED = "frequency_changed"
REASON_RESET = "reset"
REASON_UNKNOWN_REMINDER = "unknown_reminder"
REASON_INVALID_FREQUENCY = "invalid_frequency"
REASON_TICK = "tick"
REASON_STARTUP = "startup"
