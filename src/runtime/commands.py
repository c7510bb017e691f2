"""Dispatcher that applies dashboard commands to the runtime services."""

from __future__ import annotations

import logging
from typing import Any, Callable

from contracts.ui_protocol import (
    COMMAND_ANALYZE_POSTURE,
    COMMAND_POMODORO,
    COMMAND_RESET_POSTURE,
    COMMAND_RESET_REMINDERS,
    COMMAND_SET_REMINDER_ENABLED,
    COMMAND_SET_REMINDER_FREQUENCY,
    COMMAND_SET_SPOKEN_ALERTS,
    EVENT_ERROR,
    STATE_ERROR,
)
from notifications import NotificationSink
from pomodoro import PomodoroTimer
from pomodoro.constants import ACTION_RESET, ACTION_START, ACTION_STOP
from reminders import ReminderActionResult, ReminderRegistry

from .contracts import UICommand
from .messages import (
    RESET_REMINDERS_DESCRIPTION,
    RESET_REMINDERS_TITLE,
    pomodoro_rejection_text,
    reminder_rejection_text,
)
from .posture_requests import PostureRequests
from .ticks import TickProcessor
from .ui import RuntimeUIPublisher

POMODORO_ACTIONS = (ACTION_START, ACTION_STOP, ACTION_RESET)


class CommandError(ValueError):
    """Raised for a dashboard command with a missing or malformed field."""


class RuntimeCommandDispatcher:
    """Routes UI commands to reminder, pomodoro, alert, and posture handlers."""
    def __init__(
        self,
        *,
        logger: logging.Logger,
        registry: ReminderRegistry,
        pomodoro_timer: PomodoroTimer,
        sink: NotificationSink,
        posture: PostureRequests,
        tick_processor: TickProcessor,
        ui: RuntimeUIPublisher,
        publish_running_state: Callable[[], None],
    ):
        self._logger = logger
        self._registry = registry
        self._pomodoro_timer = pomodoro_timer
        self._sink = sink
        self._posture = posture
        self._tick_processor = tick_processor
        self._ui = ui
        self._publish_running_state = publish_running_state
        self._handlers: dict[str, Callable[[dict[str, Any]], None]] = {
            COMMAND_SET_REMINDER_ENABLED: self._handle_set_reminder_enabled,
            COMMAND_SET_REMINDER_FREQUENCY: self._handle_set_reminder_frequency,
            COMMAND_RESET_REMINDERS: self._handle_reset_reminders,
            COMMAND_SET_SPOKEN_ALERTS: self._handle_set_spoken_alerts,
            COMMAND_POMODORO: self._handle_pomodoro,
            COMMAND_ANALYZE_POSTURE: self._handle_analyze_posture,
            COMMAND_RESET_POSTURE: self._handle_reset_posture,
        }

    def handle(self, command: UICommand) -> bool:
        """Apply one command. Malformed commands are reported, never raised."""
        handler = self._handlers.get(command.type)
        try:
            if handler is None:
                raise CommandError(f"Unsupported command: {command.type}")
            handler(command.payload)
        except CommandError as error:
            self._logger.warning("Rejected UI command %s: %s", command.type, error)
            self._ui.publish(
                EVENT_ERROR,
                state=STATE_ERROR,
                message=str(error),
                command=command.type,
            )
            return False
        return True

    def _handle_set_reminder_enabled(self, payload: dict[str, Any]) -> None:
        key = _require_str(payload, "key")
        enabled = _require_bool(payload, "enabled")
        self._publish_reminder_result(self._registry.set_enabled(key, enabled))

    def _handle_set_reminder_frequency(self, payload: dict[str, Any]) -> None:
        key = _require_str(payload, "key")
        minutes = _require_int(payload, "minutes")
        self._publish_reminder_result(self._registry.set_frequency(key, minutes))

    def _handle_reset_reminders(self, payload: dict[str, Any]) -> None:
        del payload
        self._publish_reminder_result(self._registry.reset_all())
        self._sink.toast(RESET_REMINDERS_TITLE, RESET_REMINDERS_DESCRIPTION, kind="info")

    def _handle_set_spoken_alerts(self, payload: dict[str, Any]) -> None:
        enabled = _require_bool(payload, "enabled")
        if enabled and not self._sink.speech_available:
            self._logger.warning("Spoken alerts requested but text-to-speech is disabled")
        self._sink.set_spoken_alerts(enabled)
        self._publish_running_state()

    def _handle_pomodoro(self, payload: dict[str, Any]) -> None:
        action = _require_str(payload, "action")
        if action not in POMODORO_ACTIONS:
            raise CommandError(
                f"pomodoro action must be one of: {', '.join(POMODORO_ACTIONS)}"
            )

        result = self._pomodoro_timer.apply(action)
        message = None if result.accepted else pomodoro_rejection_text(action, result.reason)
        self._ui.publish_pomodoro_update(
            result.snapshot,
            action=action,
            accepted=result.accepted,
            reason=result.reason,
            message=message,
        )
        if result.accepted and action == ACTION_START:
            self._tick_processor.announce_focus(result.snapshot)
        self._publish_running_state()

    def _handle_analyze_posture(self, payload: dict[str, Any]) -> None:
        photo_data_uri = _require_str(payload, "photo_data_uri")
        self._posture.submit(photo_data_uri)

    def _handle_reset_posture(self, payload: dict[str, Any]) -> None:
        del payload
        self._posture.reset()

    def _publish_reminder_result(self, result: ReminderActionResult) -> None:
        message = None
        if not result.accepted:
            message = reminder_rejection_text(result.key, result.reason)
        self._ui.publish_reminders(
            result.board,
            now=self._registry.now(),
            action=result.action,
            accepted=result.accepted,
            reason=result.reason,
            key=result.key,
            message=message,
        )


def _require_str(payload: dict[str, Any], name: str) -> str:
    value = payload.get(name)
    if not isinstance(value, str) or not value.strip():
        raise CommandError(f"{name} must be a non-empty string")
    return value.strip()


def _require_bool(payload: dict[str, Any], name: str) -> bool:
    value = payload.get(name)
    if not isinstance(value, bool):
        raise CommandError(f"{name} must be a boolean")
    return value


def _require_int(payload: dict[str, Any], name: str) -> int:
    value = payload.get(name)
    if isinstance(value, bool):
        raise CommandError(f"{name} must be an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    raise CommandError(f"{name} must be an integer")
