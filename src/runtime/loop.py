"""Runtime orchestration loop for reminder ticks, pomodoro ticks, and UI commands."""

from __future__ import annotations

import logging
import random
import threading
import time
from dataclasses import dataclass, field
from queue import Empty, Queue
from typing import Any, Callable, Optional

from actions.posture import PostureAnalyzerLike
from actions.speech import SpeechServiceLike
from contracts.ui_protocol import EVENT_ERROR, STATE_ERROR, STATE_RUNNING
from notifications import NotificationSink, SpeakerPlayback
from pomodoro import PomodoroTimer
from pomodoro.constants import ACTION_SYNC, REASON_STARTUP
from reminders import ReminderRegistry
from reminders.constants import ACTION_SYNC as REMINDER_ACTION_SYNC
from reminders.constants import REASON_STARTUP as REMINDER_REASON_STARTUP

from .commands import RuntimeCommandDispatcher
from .contracts import UICommand
from .messages import pomodoro_status_message
from .posture_requests import PostureRequests
from .ticks import TickDependencies, TickProcessor
from .ui import RuntimeUIPublisher, UIServerLike

TICK_INTERVAL_SECONDS = 1.0
_COMMAND_POLL_SECONDS = 0.25


@dataclass(frozen=True)
class RuntimeHooks:
    """Injectable lifecycle hooks used by runtime startup and shutdown flow."""
    setup_signal_handlers: Callable[[threading.Event], None]


@dataclass(frozen=True)
class RuntimeBootstrap:
    """Dependency bundle required to construct the runtime engine."""
    logger: logging.Logger
    registry: ReminderRegistry
    command_queue: Queue[Any]
    speech_service: Optional[SpeechServiceLike]
    posture_analyzer: Optional[PostureAnalyzerLike]
    ui_server: Optional[UIServerLike]
    hooks: RuntimeHooks
    speaker: Optional[SpeakerPlayback] = None
    spoken_alerts: bool = False
    rng: random.Random = field(default_factory=random.Random)
    clock: Callable[[], float] = time.monotonic
    sleep_fn: Callable[[float], None] = time.sleep
    tick_interval_seconds: float = TICK_INTERVAL_SECONDS


class RuntimeEngine:
    """Main runtime loop: the only writer of reminder and pomodoro state."""
    def __init__(self, bootstrap: RuntimeBootstrap):
        self._bootstrap = bootstrap
        self._logger = bootstrap.logger
        self._stop_event = threading.Event()

        self._ui = RuntimeUIPublisher(bootstrap.ui_server)
        self._registry = bootstrap.registry
        self._pomodoro_timer = PomodoroTimer(logger=logging.getLogger("pomodoro"))
        self._sink = NotificationSink(
            self._ui,
            speech_service=bootstrap.speech_service,
            speaker=bootstrap.speaker,
            spoken_alerts=bootstrap.spoken_alerts,
            logger=logging.getLogger("notifications"),
        )
        self._posture = PostureRequests(
            bootstrap.posture_analyzer,
            self._ui,
            sleep_fn=bootstrap.sleep_fn,
            logger=logging.getLogger("posture"),
        )
        self._tick_processor = TickProcessor(
            TickDependencies(
                sink=self._sink,
                ui=self._ui,
                rng=bootstrap.rng,
                logger=self._logger,
            )
        )
        self._dispatcher = RuntimeCommandDispatcher(
            logger=self._logger,
            registry=self._registry,
            pomodoro_timer=self._pomodoro_timer,
            sink=self._sink,
            posture=self._posture,
            tick_processor=self._tick_processor,
            ui=self._ui,
            publish_running_state=self._publish_running_state,
        )

    @property
    def pomodoro_timer(self) -> PomodoroTimer:
        return self._pomodoro_timer

    @property
    def sink(self) -> NotificationSink:
        return self._sink

    def stop(self) -> None:
        self._stop_event.set()

    def run(self) -> int:
        self.publish_startup_sync()

        try:
            self._bootstrap.hooks.setup_signal_handlers(self._stop_event)
            self._logger.info("Ready! Reminders are running.")

            clock = self._bootstrap.clock
            interval = self._bootstrap.tick_interval_seconds
            next_tick = clock() + interval
            while not self._stop_event.is_set():
                self._posture.finalize()

                now = clock()
                if now >= next_tick:
                    self.tick()
                    next_tick += interval
                    if next_tick <= now:
                        self._logger.debug("Tick loop fell behind; resynchronizing")
                        next_tick = now + interval
                    continue

                command = self._poll_command(min(next_tick - now, _COMMAND_POLL_SECONDS))
                if command is not None:
                    self.handle_command(command)
                    self.drain_commands()

            self._logger.info("Shutdown requested.")
            return 0

        except KeyboardInterrupt:
            self._logger.info("Shutdown requested by keyboard interrupt.")
            return 0
        except Exception as error:
            self._logger.error("Unexpected error: %s", error, exc_info=True)
            self._ui.publish(
                EVENT_ERROR,
                state=STATE_ERROR,
                message=f"Runtime stopped unexpectedly: {error}",
            )
            return 1
        finally:
            self._shutdown()

    def tick(self) -> None:
        """Advance reminders then the pomodoro by one scheduler tick."""
        self._tick_processor.handle_reminder_tick(self._registry.tick())

        pomodoro_tick = self._pomodoro_timer.tick()
        if pomodoro_tick is not None:
            self._tick_processor.handle_pomodoro_tick(pomodoro_tick)
            if pomodoro_tick.phase_changed:
                self._publish_running_state()

    def handle_command(self, command: Any) -> None:
        if not isinstance(command, UICommand):
            self._logger.warning("Ignoring unknown queue item: %s", type(command).__name__)
            return
        self._dispatcher.handle(command)

    def drain_commands(self) -> int:
        """Apply every command already queued without blocking; returns the count."""
        handled = 0
        while True:
            try:
                command = self._bootstrap.command_queue.get_nowait()
            except Empty:
                return handled
            self.handle_command(command)
            handled += 1

    def publish_startup_sync(self) -> None:
        self._ui.publish_catalog(
            [reminder.definition for reminder in self._registry.snapshot()],
            spoken_alerts=self._sink.spoken_alerts,
            speech_available=self._sink.speech_available,
            posture_available=self._posture.available,
        )
        self._ui.publish_reminders(
            self._registry.snapshot(),
            now=self._registry.now(),
            action=REMINDER_ACTION_SYNC,
            accepted=True,
            reason=REMINDER_REASON_STARTUP,
        )
        self._ui.publish_pomodoro_update(
            self._pomodoro_timer.snapshot(),
            action=ACTION_SYNC,
            accepted=True,
            reason=REASON_STARTUP,
        )
        self._publish_running_state()

    def _publish_running_state(self) -> None:
        self._ui.publish_state(
            STATE_RUNNING,
            message=pomodoro_status_message(self._pomodoro_timer.snapshot()),
            spoken_alerts=self._sink.spoken_alerts,
            speech_available=self._sink.speech_available,
            posture_available=self._posture.available,
        )

    def _poll_command(self, timeout: float) -> Optional[Any]:
        try:
            return self._bootstrap.command_queue.get(timeout=max(0.0, timeout))
        except Empty:
            return None

    def _shutdown(self) -> None:
        self._logger.info("Stopping posture executor...")
        self._posture.shutdown()

        speaker = self._bootstrap.speaker
        if speaker is not None:
            self._logger.info("Stopping alert playback...")
            speaker.shutdown()

        ui_server = self._bootstrap.ui_server
        if ui_server is not None:
            self._logger.info("Stopping UI server...")
            try:
                ui_server.stop(timeout_seconds=5.0)
            except Exception as error:
                self._logger.error("Error stopping UI server: %s", error, exc_info=True)
