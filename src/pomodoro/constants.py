"""State, action, and reason constants used by pomodoro runtime logic."""

from __future__ import annotations

WORK_DURATION_SECONDS = 25 * 60
BREAK_DURATION_SECONDS = 5 * 60

PHASE_IDLE = "idle"
PHASE_WORK = "work"
PHASE_BREAK = "break"

ACTIVE_PHASES: frozenset[str] = frozenset({PHASE_WORK, PHASE_BREAK})

ACTION_START = "start"
ACTION_STOP = "stop"
ACTION_RESET = "reset"

ACTION_SYNC = "sync"
ACTION_TICK = "tick"
ACTION_PHASE_CHANGED = "phase_changed"

REASON_STARTED = "started"
REASON_STOPPED = "stopped"
REASON_RESET = "reset"
REASON_ALREADY_ACTIVE = "already_active"
REASON_NOT_ACTIVE = "not_active"
REASON_UNSUPPORTED_ACTION = "unsupported_action"

REASON_TICK = "tick"
REASON_WORK_COMPLETED = "work_completed"
REASON_BREAK_COMPLETED = "break_completed"
REASON_STARTUP = "startup"
