from .constants import BREAK_DURATION_SECONDS, WORK_DURATION_SECONDS
from .service import (
    PomodoroAction,
    PomodoroActionResult,
    PomodoroPhase,
    PomodoroSnapshot,
    PomodoroTick,
    PomodoroTimer,
)

__all__ = [
    "BREAK_DURATION_SECONDS",
    "WORK_DURATION_SECONDS",
    "PomodoroAction",
    "PomodoroActionResult",
    "PomodoroPhase",
    "PomodoroSnapshot",
    "PomodoroTick",
    "PomodoroTimer",
]
