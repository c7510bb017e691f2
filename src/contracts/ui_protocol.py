"""Dashboard websocket event, command, and state constants."""

from __future__ import annotations

# Websocket event types (server -> UI)
EVENT_HELLO = "hello"
EVENT_CATALOG = "catalog"
EVENT_STATE_UPDATE = "state_update"
EVENT_REMINDERS = "reminders"
EVENT_POMODORO = "pomodoro"
EVENT_TOAST = "toast"
EVENT_ALERT = "alert"
EVENT_POSTURE = "posture"
EVENT_ERROR = "error"

# Websocket command types (UI -> server)
COMMAND_SET_REMINDER_ENABLED = "set_reminder_enabled"
COMMAND_SET_REMINDER_FREQUENCY = "set_reminder_frequency"
COMMAND_RESET_REMINDERS = "reset_reminders"
COMMAND_SET_SPOKEN_ALERTS = "set_spoken_alerts"
COMMAND_POMODORO = "pomodoro"
COMMAND_ANALYZE_POSTURE = "analyze_posture"
COMMAND_RESET_POSTURE = "reset_posture"

COMMAND_TYPES: frozenset[str] = frozenset(
    {
        COMMAND_SET_REMINDER_ENABLED,
        COMMAND_SET_REMINDER_FREQUENCY,
        COMMAND_RESET_REMINDERS,
        COMMAND_SET_SPOKEN_ALERTS,
        COMMAND_POMODORO,
        COMMAND_ANALYZE_POSTURE,
        COMMAND_RESET_POSTURE,
    }
)

# Runtime states
STATE_IDLE = "idle"
STATE_RUNNING = "running"
STATE_ERROR = "error"

# Posture widget states
POSTURE_ANALYZING = "analyzing"
POSTURE_COMPLETED = "completed"
POSTURE_FAILED = "failed"
POSTURE_RESET = "reset"

# Alert playback kinds
ALERT_SPEECH = "speech"
ALERT_SOUND = "sound"

# Largest decoded photo accepted by analyze_posture
MAX_PHOTO_BYTES = 6 * 1024 * 1024

STICKY_EVENT_TYPES: frozenset[str] = frozenset(
    {
        EVENT_CATALOG,
        EVENT_STATE_UPDATE,
        EVENT_REMINDERS,
        EVENT_POMODORO,
        EVENT_POSTURE,
    }
)

STICKY_EVENT_ORDER: tuple[str, ...] = (
    EVENT_CATALOG,
    EVENT_REMINDERS,
    EVENT_POMODORO,
    EVENT_POSTURE,
    EVENT_STATE_UPDATE,
)
