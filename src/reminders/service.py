"""Thread-safe in-memory reminder registry."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Literal, Mapping, Optional

from . import state
from .catalog import DEFAULT_REMINDERS, ReminderDefinition
from .constants import (
    ACTION_RESET_ALL,
    ACTION_SET_ENABLED,
    ACTION_SET_FREQUENCY,
    REASON_DISABLED,
    REASON_ENABLED,
    REASON_FREQUENCY_CHANGED,
    REASON_INVALID_FREQUENCY,
    REASON_RESET,
    REASON_UNKNOWN_REMINDER,
)
from .state import Reminder, ReminderBoard, ReminderOverride

ReminderAction = Literal["set_enabled", "set_frequency", "reset_all"]


@dataclass(frozen=True)
class ReminderActionResult:
    """Result envelope returned after applying a registry action."""
    action: ReminderAction
    accepted: bool
    reason: str
    board: ReminderBoard
    key: Optional[str] = None


@dataclass(frozen=True)
class ReminderTick:
    """Tick payload emitted once per scheduler tick."""
    board: ReminderBoard
    fired: tuple[Reminder, ...] = ()
    now: float = 0.0


class ReminderRegistry:
    """Holds the reminder board and applies reducers under a lock."""

    def __init__(
        self,
        definitions: tuple[ReminderDefinition, ...] = DEFAULT_REMINDERS,
        *,
        overrides: Optional[Mapping[str, ReminderOverride]] = None,
        clock: Callable[[], float] = time.time,
        logger: Optional[logging.Logger] = None,
    ):
        self._clock = clock
        self._logger = logger or logging.getLogger("reminders")
        self._lock = threading.Lock()
        self._board = state.initial_board(definitions, clock(), overrides)

    def now(self) -> float:
        return self._clock()

    def snapshot(self) -> ReminderBoard:
        with self._lock:
            return self._board

    def set_enabled(self, key: str, enabled: bool) -> ReminderActionResult:
        with self._lock:
            if self._board.get(key) is None:
                return self._rejected_locked(ACTION_SET_ENABLED, key, REASON_UNKNOWN_REMINDER)

            self._board = state.set_enabled(self._board, key, enabled, self._clock())
            self._logger.info("Reminder %s %s", key, "enabled" if enabled else "disabled")
            return ReminderActionResult(
                action=ACTION_SET_ENABLED,
                accepted=True,
                reason=REASON_ENABLED if enabled else REASON_DISABLED,
                board=self._board,
                key=key,
            )

    def set_frequency(self, key: str, minutes: int) -> ReminderActionResult:
        with self._lock:
            if self._board.get(key) is None:
                return self._rejected_locked(ACTION_SET_FREQUENCY, key, REASON_UNKNOWN_REMINDER)

            try:
                self._board = state.set_frequency(self._board, key, minutes, self._clock())
            except ValueError as error:
                self._logger.warning("Rejected frequency change: %s", error)
                return self._rejected_locked(ACTION_SET_FREQUENCY, key, REASON_INVALID_FREQUENCY)

            self._logger.info("Reminder %s frequency set to %d minutes", key, minutes)
            return ReminderActionResult(
                action=ACTION_SET_FREQUENCY,
                accepted=True,
                reason=REASON_FREQUENCY_CHANGED,
                board=self._board,
                key=key,
            )

    def reset_all(self) -> ReminderActionResult:
        with self._lock:
            self._board = state.reset_all(self._board, self._clock())
            self._logger.info("All reminders reset")
            return ReminderActionResult(
                action=ACTION_RESET_ALL,
                accepted=True,
                reason=REASON_RESET,
                board=self._board,
            )

    def tick(self) -> ReminderTick:
        with self._lock:
            now = self._clock()
            result = state.tick(self._board, now)
            self._board = result.board
            for reminder in result.fired:
                self._logger.info(
                    "Reminder %s fired (every %d minutes)",
                    reminder.key,
                    reminder.frequency_minutes,
                )
            return ReminderTick(board=result.board, fired=result.fired, now=now)

    def _rejected_locked(
        self,
        action: ReminderAction,
        key: str,
        reason: str,
    ) -> ReminderActionResult:
        return ReminderActionResult(
            action=action,
            accepted=False,
            reason=reason,
            board=self._board,
            key=key,
        )
