"""Notification sink: toast events, spoken alerts, and the fallback chime."""

from __future__ import annotations

import logging
from typing import Any, Optional, Protocol

from actions import ActionError, text_to_speech_action
from actions.speech import SpeechServiceLike
from contracts.ui_protocol import ALERT_SOUND, ALERT_SPEECH, EVENT_ALERT, EVENT_TOAST

from .sounds import notification_chime_data_uri


class EventPublisherLike(Protocol):
    def publish(self, event_type: str, **payload: Any) -> None:
        ...


class SpeakerLike(Protocol):
    def play(self, audio_data_uri: str) -> Any:
        ...


class NotificationSink:
    """Delivers toasts and audio alerts; never raises into the caller."""

    def __init__(
        self,
        publisher: EventPublisherLike,
        *,
        speech_service: Optional[SpeechServiceLike] = None,
        speaker: Optional[SpeakerLike] = None,
        spoken_alerts: bool = False,
        logger: Optional[logging.Logger] = None,
    ):
        self._publisher = publisher
        self._speech_service = speech_service
        self._speaker = speaker
        self._spoken_alerts = bool(spoken_alerts)
        self._logger = logger or logging.getLogger("notifications")

    @property
    def spoken_alerts(self) -> bool:
        return self._spoken_alerts

    @property
    def speech_available(self) -> bool:
        return self._speech_service is not None

    def set_spoken_alerts(self, enabled: bool) -> None:
        self._spoken_alerts = bool(enabled)
        self._logger.info("Spoken alerts %s", "enabled" if enabled else "disabled")

    def notify(
        self,
        title: str,
        description: str,
        *,
        spoken_text: Optional[str] = None,
        kind: str = "reminder",
        key: Optional[str] = None,
    ) -> str:
        """Raise a toast and play an alert. Returns the alert kind played."""
        self.toast(title, description, kind=kind, key=key)
        return self.alert(spoken_text or f"{title}. {description}")

    def toast(
        self,
        title: str,
        description: str,
        *,
        kind: str = "info",
        key: Optional[str] = None,
    ) -> None:
        payload: dict[str, Any] = {"title": title, "description": description, "kind": kind}
        if key:
            payload["key"] = key
        try:
            self._publisher.publish(EVENT_TOAST, **payload)
        except Exception as error:
            self._logger.error("Toast delivery failed: %s", error)

    def alert(self, spoken_text: Optional[str] = None) -> str:
        """Speak ``spoken_text`` when spoken alerts are on, else play the chime.

        A failed synthesis degrades to the chime and is only logged.
        """
        if spoken_text and self._spoken_alerts and self._speech_service is not None:
            try:
                audio = text_to_speech_action(
                    self._speech_service,
                    spoken_text,
                    logger=self._logger,
                )
            except ActionError as error:
                self._logger.warning(
                    "Spoken alert unavailable (%s); playing notification sound",
                    error.message,
                )
            else:
                return self._deliver(ALERT_SPEECH, audio.audio_data_uri, text=spoken_text)

        return self._deliver(ALERT_SOUND, notification_chime_data_uri())

    def _deliver(self, kind: str, audio_data_uri: str, *, text: Optional[str] = None) -> str:
        try:
            if self._speaker is not None:
                self._speaker.play(audio_data_uri)
            else:
                payload: dict[str, Any] = {"kind": kind, "audio_data_uri": audio_data_uri}
                if text:
                    payload["text"] = text
                self._publisher.publish(EVENT_ALERT, **payload)
        except Exception as error:
            self._logger.error("Alert delivery failed (%s): %s", kind, error)
        return kind
