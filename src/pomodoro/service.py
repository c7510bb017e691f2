"""Thread-safe in-memory work/break pomodoro state machine."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Literal, Optional

from .constants import (
    ACTION_RESET,
    ACTION_START,
    ACTION_STOP,
    ACTIVE_PHASES,
    BREAK_DURATION_SECONDS,
    PHASE_BREAK,
    PHASE_IDLE,
    PHASE_WORK,
    REASON_ALREADY_ACTIVE,
    REASON_NOT_ACTIVE,
    REASON_RESET,
    REASON_STARTED,
    REASON_STOPPED,
    REASON_UNSUPPORTED_ACTION,
    WORK_DURATION_SECONDS,
)

PomodoroPhase = Literal["idle", "work", "break"]
PomodoroAction = Literal["start", "stop", "reset"]


@dataclass(frozen=True)
class PomodoroSnapshot:
    """Immutable timer snapshot exposed to runtime and UI publishers."""
    phase: PomodoroPhase
    duration_seconds: int
    remaining_seconds: int

    @property
    def is_active(self) -> bool:
        return self.phase in ACTIVE_PHASES

    @property
    def progress_percent(self) -> float:
        if self.duration_seconds <= 0:
            return 0.0
        elapsed = self.duration_seconds - self.remaining_seconds
        return elapsed / self.duration_seconds * 100.0


@dataclass(frozen=True)
class PomodoroActionResult:
    """Result envelope returned after applying a pomodoro action."""
    action: PomodoroAction
    accepted: bool
    reason: str
    snapshot: PomodoroSnapshot


@dataclass(frozen=True)
class PomodoroTick:
    """Tick payload emitted while the pomodoro is running.

    ``completed_phase`` is set on the tick that flipped work to break or
    break to work.
    """
    snapshot: PomodoroSnapshot
    completed_phase: Optional[PomodoroPhase] = None

    @property
    def phase_changed(self) -> bool:
        return self.completed_phase is not None


class PomodoroTimer:
    """Tick-driven pomodoro: the runtime calls :meth:`tick` once per second."""

    def __init__(
        self,
        *,
        work_seconds: int = WORK_DURATION_SECONDS,
        break_seconds: int = BREAK_DURATION_SECONDS,
        logger: Optional[logging.Logger] = None,
    ):
        if work_seconds <= 0:
            raise ValueError("work_seconds must be greater than zero")
        if break_seconds <= 0:
            raise ValueError("break_seconds must be greater than zero")

        self._work_seconds = int(work_seconds)
        self._break_seconds = int(break_seconds)
        self._logger = logger or logging.getLogger("pomodoro")
        self._lock = threading.Lock()

        self._phase: PomodoroPhase = PHASE_IDLE
        self._remaining_seconds = self._work_seconds

    def snapshot(self) -> PomodoroSnapshot:
        with self._lock:
            return self._snapshot_locked()

    def apply(self, action: PomodoroAction) -> PomodoroActionResult:
        with self._lock:
            if action == ACTION_START:
                if self._phase in ACTIVE_PHASES:
                    return self._result_locked(action, False, REASON_ALREADY_ACTIVE)
                self._enter_locked(PHASE_WORK)
                self._logger.info("Pomodoro started: work for %ss", self._work_seconds)
                return self._result_locked(action, True, REASON_STARTED)

            if action == ACTION_STOP:
                if self._phase not in ACTIVE_PHASES:
                    return self._result_locked(action, False, REASON_NOT_ACTIVE)
                self._logger.info(
                    "Pomodoro stopped during %s with %ss remaining",
                    self._phase,
                    self._remaining_seconds,
                )
                self._enter_locked(PHASE_IDLE)
                return self._result_locked(action, True, REASON_STOPPED)

            if action == ACTION_RESET:
                self._enter_locked(PHASE_IDLE)
                self._logger.info("Pomodoro reset")
                return self._result_locked(action, True, REASON_RESET)

            return self._result_locked(action, False, REASON_UNSUPPORTED_ACTION)

    def tick(self) -> Optional[PomodoroTick]:
        """Advance the countdown by one second; ``None`` while idle."""
        with self._lock:
            if self._phase == PHASE_IDLE:
                return None

            self._remaining_seconds = max(0, self._remaining_seconds - 1)
            if self._remaining_seconds > 0:
                return PomodoroTick(snapshot=self._snapshot_locked())

            completed: PomodoroPhase = self._phase
            self._enter_locked(PHASE_BREAK if completed == PHASE_WORK else PHASE_WORK)
            self._logger.info("Pomodoro %s completed, switching to %s", completed, self._phase)
            return PomodoroTick(snapshot=self._snapshot_locked(), completed_phase=completed)

    def _enter_locked(self, phase: PomodoroPhase) -> None:
        self._phase = phase
        self._remaining_seconds = self._duration_locked()

    def _duration_locked(self) -> int:
        if self._phase == PHASE_BREAK:
            return self._break_seconds
        return self._work_seconds

    def _result_locked(
        self,
        action: PomodoroAction,
        accepted: bool,
        reason: str,
    ) -> PomodoroActionResult:
        return PomodoroActionResult(
            action=action,
            accepted=accepted,
            reason=reason,
            snapshot=self._snapshot_locked(),
        )

    def _snapshot_locked(self) -> PomodoroSnapshot:
        return PomodoroSnapshot(
            phase=self._phase,
            duration_seconds=self._duration_locked(),
            remaining_seconds=self._remaining_seconds,
        )
