"""Immutable reminder board and the pure reducers that advance it.

Every function here takes a board plus the current clock reading and returns a
new board. Nothing reads the clock, sleeps, or performs side effects, so the
whole reminder lifecycle can be exercised with plain numbers.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterator, Mapping, Optional

from .catalog import ReminderDefinition
from .constants import PROGRESS_MAX, PROGRESS_MIN, SECONDS_PER_MINUTE


@dataclass(frozen=True)
class Reminder:
    """Live countdown state of one reminder."""
    definition: ReminderDefinition
    enabled: bool
    frequency_minutes: int
    progress: float
    last_triggered: float

    @property
    def key(self) -> str:
        return self.definition.key

    @property
    def period_seconds(self) -> float:
        return float(self.frequency_minutes * SECONDS_PER_MINUTE)

    def seconds_until_due(self, now: float) -> Optional[float]:
        if not self.enabled:
            return None
        return max(0.0, self.period_seconds - _elapsed(self, now))


@dataclass(frozen=True)
class ReminderBoard:
    """Ordered, uniquely keyed collection of reminders."""
    reminders: tuple[Reminder, ...]

    def __iter__(self) -> Iterator[Reminder]:
        return iter(self.reminders)

    def __len__(self) -> int:
        return len(self.reminders)

    @property
    def keys(self) -> tuple[str, ...]:
        return tuple(reminder.key for reminder in self.reminders)

    def get(self, key: str) -> Optional[Reminder]:
        for reminder in self.reminders:
            if reminder.key == key:
                return reminder
        return None


@dataclass(frozen=True)
class ReminderOverride:
    """Start-up override of a reminder's default enabled flag or frequency."""
    enabled: Optional[bool] = None
    frequency_minutes: Optional[int] = None


@dataclass(frozen=True)
class TickResult:
    """Board committed by a tick together with the reminders that fired."""
    board: ReminderBoard
    fired: tuple[Reminder, ...] = ()


def initial_board(
    definitions: tuple[ReminderDefinition, ...],
    now: float,
    overrides: Optional[Mapping[str, ReminderOverride]] = None,
) -> ReminderBoard:
    overrides = overrides or {}
    reminders: list[Reminder] = []
    seen: set[str] = set()
    for definition in definitions:
        if definition.key in seen:
            raise ValueError(f"Duplicate reminder key: {definition.key}")
        seen.add(definition.key)

        override = overrides.get(definition.key, ReminderOverride())
        enabled = definition.default_enabled if override.enabled is None else override.enabled
        frequency = definition.default_frequency
        if override.frequency_minutes is not None:
            if not definition.allows(override.frequency_minutes):
                raise ValueError(
                    f"Reminder {definition.key} does not allow "
                    f"{override.frequency_minutes} minutes"
                )
            frequency = override.frequency_minutes

        reminders.append(
            Reminder(
                definition=definition,
                enabled=enabled,
                frequency_minutes=frequency,
                progress=PROGRESS_MIN,
                last_triggered=now,
            )
        )
    return ReminderBoard(reminders=tuple(reminders))


def set_enabled(board: ReminderBoard, key: str, enabled: bool, now: float) -> ReminderBoard:
    """Toggle a reminder and restart its countdown. Unknown keys are ignored."""
    return _update(
        board,
        key,
        lambda reminder: _restart(replace(reminder, enabled=bool(enabled)), now),
    )


def set_frequency(board: ReminderBoard, key: str, minutes: int, now: float) -> ReminderBoard:
    """Change a reminder's period and restart its countdown.

    Raises ValueError when ``minutes`` is outside the reminder's allowed set.
    Unknown keys are ignored.
    """
    reminder = board.get(key)
    if reminder is None:
        return board
    if not reminder.definition.allows(minutes):
        raise ValueError(
            f"Reminder {key} does not allow {minutes} minutes; "
            f"choose one of {reminder.definition.frequencies}"
        )
    return _update(
        board,
        key,
        lambda current: _restart(replace(current, frequency_minutes=minutes), now),
    )


def reset_all(board: ReminderBoard, now: float) -> ReminderBoard:
    """Restart every countdown, enabled or not."""
    return ReminderBoard(reminders=tuple(_restart(reminder, now) for reminder in board))


def trigger(board: ReminderBoard, key: str, now: float) -> tuple[ReminderBoard, Optional[Reminder]]:
    """Fire a reminder: reset its countdown and return the post-reset reminder.

    Returns the board unchanged and ``None`` when the key is unknown or the
    reminder is disabled.
    """
    reminder = board.get(key)
    if reminder is None or not reminder.enabled:
        return board, None
    fired = _restart(reminder, now)
    return _update(board, key, lambda _: fired), fired


def tick(board: ReminderBoard, now: float) -> TickResult:
    """Recompute progress for every reminder and fire the ones that are due.

    Ordering rule: a due reminder is handed to :func:`trigger` before its
    recomputed progress is committed. The committed progress of a firing
    reminder is therefore the post-reset value 0, never the pre-fire 100.
    The trigger looks the reminder up in the recomputed board, which already
    reflects every command applied before this tick.
    """
    recomputed: list[Reminder] = []
    due: list[str] = []
    for reminder in board:
        if not reminder.enabled:
            recomputed.append(replace(reminder, progress=PROGRESS_MIN))
            continue

        elapsed = _elapsed(reminder, now)
        progress = min(PROGRESS_MAX, elapsed / reminder.period_seconds * PROGRESS_MAX)
        if elapsed >= reminder.period_seconds:
            due.append(reminder.key)
        recomputed.append(replace(reminder, progress=progress))

    committed = ReminderBoard(reminders=tuple(recomputed))
    fired: list[Reminder] = []
    for key in due:
        committed, reminder = trigger(committed, key, now)
        if reminder is not None:
            fired.append(reminder)

    return TickResult(board=committed, fired=tuple(fired))


def _elapsed(reminder: Reminder, now: float) -> float:
    return max(0.0, now - reminder.last_triggered)


def _restart(reminder: Reminder, now: float) -> Reminder:
    return replace(reminder, progress=PROGRESS_MIN, last_triggered=now)


def _update(board: ReminderBoard, key: str, change) -> ReminderBoard:
    if board.get(key) is None:
        return board
    return ReminderBoard(
        reminders=tuple(
            change(reminder) if reminder.key == key else reminder
            for reminder in board
        )
    )
