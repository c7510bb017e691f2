from .catalog import DEFAULT_REMINDERS, ReminderDefinition, definitions_by_key
from .service import (
    ReminderAction,
    ReminderActionResult,
    ReminderRegistry,
    ReminderTick,
)
from .state import Reminder, ReminderBoard, ReminderOverride, TickResult

__all__ = [
    "DEFAULT_REMINDERS",
    "Reminder",
    "ReminderAction",
    "ReminderActionResult",
    "ReminderBoard",
    "ReminderDefinition",
    "ReminderOverride",
    "ReminderRegistry",
    "ReminderTick",
    "TickResult",
    "definitions_by_key",
]
