"""Built-in wellness reminder definitions."""

from __future__ import annotations

from dataclasses import dataclass

from .constants import (
    REMINDER_EYE,
    REMINDER_HYDRATION,
    REMINDER_MICRO,
    REMINDER_SNACK,
)


@dataclass(frozen=True)
class ReminderDefinition:
    """Static description of a periodic reminder and its allowed frequencies."""
    key: str
    title: str
    description: str
    toast_title: str
    toast_description: str
    spoken_text: str
    frequencies: tuple[int, ...]
    default_frequency: int
    default_enabled: bool = True

    def __post_init__(self) -> None:
        if not self.frequencies:
            raise ValueError(f"Reminder {self.key} needs at least one frequency")
        if any(minutes <= 0 for minutes in self.frequencies):
            raise ValueError(f"Reminder {self.key} frequencies must be positive")
        if self.default_frequency not in self.frequencies:
            raise ValueError(
                f"Reminder {self.key} default frequency {self.default_frequency} "
                f"is not one of {self.frequencies}"
            )

    def allows(self, minutes: int) -> bool:
        return minutes in self.frequencies


DEFAULT_REMINDERS: tuple[ReminderDefinition, ...] = (
    ReminderDefinition(
        key=REMINDER_EYE,
        title="Eye Break",
        description="Follow the 20-20-20 rule to reduce eye strain.",
        toast_title="Time for an eye break! 👀",
        toast_description="Look at something 20 feet away for 20 seconds.",
        spoken_text="Time for an eye break. Look at something twenty feet away for twenty seconds.",
        frequencies=(15, 20, 25, 30),
        default_frequency=20,
    ),
    ReminderDefinition(
        key=REMINDER_MICRO,
        title="Micro-Break",
        description="Stand up, stretch, and move around for a minute.",
        toast_title="Move your body! 🏃",
        toast_description="Take a short micro-break to stretch and recharge.",
        spoken_text="Time to move your body. Take a short break to stretch and recharge.",
        frequencies=(30, 45, 60),
        default_frequency=30,
    ),
    ReminderDefinition(
        key=REMINDER_HYDRATION,
        title="Hydration",
        description="Drink some water to stay hydrated and focused.",
        toast_title="Stay hydrated! 💧",
        toast_description="Time to drink some water.",
        spoken_text="Stay hydrated. Time to drink some water.",
        frequencies=(45, 60, 90),
        default_frequency=60,
    ),
    ReminderDefinition(
        key=REMINDER_SNACK,
        title="Healthy Snack",
        description="Refuel with a piece of fruit or a handful of nuts.",
        toast_title="Snack time! 🍎",
        toast_description="Grab a healthy snack to keep your energy up.",
        spoken_text="Snack time. Grab something healthy to keep your energy up.",
        frequencies=(90, 120, 180),
        default_frequency=120,
        default_enabled=False,
    ),
)


def definitions_by_key(
    definitions: tuple[ReminderDefinition, ...] = DEFAULT_REMINDERS,
) -> dict[str, ReminderDefinition]:
    """Index reminder definitions by key, rejecting duplicates."""
    indexed: dict[str, ReminderDefinition] = {}
    for definition in definitions:
        if definition.key in indexed:
            raise ValueError(f"Duplicate reminder key: {definition.key}")
        indexed[definition.key] = definition
    return indexed
