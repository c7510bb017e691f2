"""Tick handlers that publish reminder and pomodoro updates and raise alerts."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Optional, Protocol

from pomodoro import PomodoroSnapshot, PomodoroTick
from pomodoro.constants import (
    ACTION_PHASE_CHANGED,
    ACTION_TICK,
    PHASE_WORK,
    REASON_BREAK_COMPLETED,
    REASON_TICK,
    REASON_WORK_COMPLETED,
)
from reminders import Reminder, ReminderTick
from reminders.constants import ACTION_TICK as REMINDER_ACTION_TICK
from reminders.constants import ACTION_TRIGGERED

from .messages import break_notification, focus_notification, pick_quote
from .ui import RuntimeUIPublisher


class NotificationSinkLike(Protocol):
    def notify(
        self,
        title: str,
        description: str,
        *,
        spoken_text: Optional[str] = None,
        kind: str = "reminder",
        key: Optional[str] = None,
    ) -> str:
        ...


@dataclass(frozen=True)
class TickDependencies:
    """Dependencies required for processing reminder and pomodoro ticks."""
    sink: NotificationSinkLike
    ui: RuntimeUIPublisher
    rng: random.Random
    logger: logging.Logger


class TickProcessor:
    """Handles tick side effects: UI updates, toasts, and audio alerts."""
    def __init__(self, dependencies: TickDependencies):
        self._dependencies = dependencies

    def handle_reminder_tick(self, tick: ReminderTick) -> None:
        deps = self._dependencies
        for fired in tick.fired:
            self.trigger_reminder(tick, fired.key)

        deps.ui.publish_reminders(
            tick.board,
            now=tick.now,
            action=ACTION_TRIGGERED if tick.fired else REMINDER_ACTION_TICK,
            accepted=True,
        )

    def trigger_reminder(self, tick: ReminderTick, key: str) -> bool:
        """Alert for ``key`` if it is known and enabled in the latest board.

        The board in ``tick`` already carries the reset for fired reminders,
        so only the side effects happen here.
        """
        deps = self._dependencies
        reminder: Optional[Reminder] = tick.board.get(key)
        if reminder is None or not reminder.enabled:
            deps.logger.debug("Skipping trigger for %s: unknown or disabled", key)
            return False

        definition = reminder.definition
        try:
            deps.sink.notify(
                definition.toast_title,
                definition.toast_description,
                spoken_text=definition.spoken_text,
                kind="reminder",
                key=key,
            )
        except Exception as error:
            deps.logger.error("Reminder notification failed for %s: %s", key, error)
        return True

    def handle_pomodoro_tick(self, tick: PomodoroTick) -> None:
        deps = self._dependencies
        if not tick.phase_changed:
            deps.ui.publish_pomodoro_update(
                tick.snapshot,
                action=ACTION_TICK,
                accepted=True,
                reason=REASON_TICK,
            )
            return

        quote = pick_quote(deps.rng)
        if tick.completed_phase == PHASE_WORK:
            text = break_notification(tick.snapshot, quote)
            reason = REASON_WORK_COMPLETED
        else:
            text = focus_notification(tick.snapshot, quote)
            reason = REASON_BREAK_COMPLETED

        deps.ui.publish_pomodoro_update(
            tick.snapshot,
            action=ACTION_PHASE_CHANGED,
            accepted=True,
            reason=reason,
            message=quote,
        )
        self._notify_pomodoro(text.title, text.description, text.spoken_text)

    def announce_focus(self, snapshot: PomodoroSnapshot) -> None:
        text = focus_notification(snapshot)
        self._notify_pomodoro(text.title, text.description, text.spoken_text)

    def _notify_pomodoro(self, title: str, description: str, spoken_text: str) -> None:
        deps = self._dependencies
        try:
            deps.sink.notify(title, description, spoken_text=spoken_text, kind="pomodoro")
        except Exception as error:
            deps.logger.error("Pomodoro notification failed: %s", error)
