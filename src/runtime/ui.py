from __future__ import annotations

from typing import Any, Iterable, Optional, Protocol

from contracts.ui_protocol import (
    EVENT_CATALOG,
    EVENT_POMODORO,
    EVENT_POSTURE,
    EVENT_REMINDERS,
)
from guides import DESK_STRETCHES, POSTURE_TIPS
from pomodoro import PomodoroSnapshot
from posture import PostureAnalysis
from reminders import Reminder, ReminderBoard, ReminderDefinition


class UIServerLike(Protocol):
    def publish(self, event_type: str, **payload: Any) -> None:
        ...

    def publish_state(
        self,
        state: str,
        *,
        message: Optional[str] = None,
        **payload: Any,
    ) -> None:
        ...

    def stop(self, timeout_seconds: float = 5.0) -> None:
        ...


def reminder_payload(reminder: Reminder, now: float) -> dict[str, Any]:
    seconds_until_due = reminder.seconds_until_due(now)
    return {
        "key": reminder.key,
        "title": reminder.definition.title,
        "description": reminder.definition.description,
        "enabled": reminder.enabled,
        "frequency_minutes": reminder.frequency_minutes,
        "frequencies": list(reminder.definition.frequencies),
        "progress": round(reminder.progress, 2),
        "seconds_until_due": (
            None if seconds_until_due is None else int(round(seconds_until_due))
        ),
    }


def catalog_payload(definitions: Iterable[ReminderDefinition]) -> dict[str, Any]:
    return {
        "reminders": [
            {
                "key": definition.key,
                "title": definition.title,
                "description": definition.description,
                "frequencies": list(definition.frequencies),
                "default_frequency": definition.default_frequency,
            }
            for definition in definitions
        ],
        "stretches": [stretch.to_payload() for stretch in DESK_STRETCHES],
        "tips": [tip.to_payload() for tip in POSTURE_TIPS],
    }


class RuntimeUIPublisher:
    def __init__(self, ui_server: Optional[UIServerLike]):
        self._ui_server = ui_server

    def publish(self, event_type: str, **payload: Any) -> None:
        if self._ui_server:
            self._ui_server.publish(event_type, **payload)

    def publish_state(
        self,
        state: str,
        *,
        message: Optional[str] = None,
        **payload: Any,
    ) -> None:
        if self._ui_server:
            self._ui_server.publish_state(state, message=message, **payload)

    def publish_catalog(
        self,
        definitions: Iterable[ReminderDefinition],
        *,
        spoken_alerts: bool,
        speech_available: bool,
        posture_available: bool,
    ) -> None:
        self.publish(
            EVENT_CATALOG,
            spoken_alerts=spoken_alerts,
            speech_available=speech_available,
            posture_available=posture_available,
            **catalog_payload(definitions),
        )

    def publish_reminders(
        self,
        board: ReminderBoard,
        *,
        now: float,
        action: str,
        accepted: Optional[bool] = None,
        reason: str = "",
        key: Optional[str] = None,
        message: Optional[str] = None,
    ) -> None:
        payload: dict[str, Any] = {
            "action": action,
            "reminders": [reminder_payload(reminder, now) for reminder in board],
        }
        if accepted is not None:
            payload["accepted"] = accepted
        if reason:
            payload["reason"] = reason
        if key:
            payload["key"] = key
        if message:
            payload["message"] = message
        self.publish(EVENT_REMINDERS, **payload)

    def publish_pomodoro_update(
        self,
        snapshot: PomodoroSnapshot,
        *,
        action: str,
        accepted: Optional[bool] = None,
        reason: str = "",
        message: Optional[str] = None,
    ) -> None:
        payload: dict[str, Any] = {
            "action": action,
            "phase": snapshot.phase,
            "duration_seconds": snapshot.duration_seconds,
            "remaining_seconds": snapshot.remaining_seconds,
            "progress": round(snapshot.progress_percent, 2),
        }
        if accepted is not None:
            payload["accepted"] = accepted
        if reason:
            payload["reason"] = reason
        if message:
            payload["message"] = message
        self.publish(EVENT_POMODORO, **payload)

    def publish_posture(
        self,
        status: str,
        *,
        request_id: Optional[int] = None,
        analysis: Optional[PostureAnalysis] = None,
        error: Optional[str] = None,
    ) -> None:
        payload: dict[str, Any] = {"status": status}
        if request_id is not None:
            payload["request_id"] = request_id
        if analysis is not None:
            payload["result"] = analysis.to_payload()
        if error:
            payload["error"] = error
        self.publish(EVENT_POSTURE, **payload)
