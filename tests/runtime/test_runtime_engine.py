import logging
import random
import threading
import unittest
from queue import Queue
from typing import Any, Optional

from reminders import ReminderRegistry
from runtime import CommandQueuePublisher, RuntimeBootstrap, RuntimeEngine, RuntimeHooks


class _RecordingServer:
    def __init__(self):
        self.events: list[tuple[str, dict[str, Any]]] = []
        self.stopped = False

    def publish(self, event_type: str, **payload: Any) -> None:
        self.events.append((event_type, payload))

    def publish_state(self, state: str, *, message: Optional[str] = None, **payload: Any) -> None:
        self.events.append(("state_update", {"state": state, "message": message, **payload}))

    def stop(self, timeout_seconds: float = 5.0) -> None:
        del timeout_seconds
        self.stopped = True

    def of_type(self, event_type: str) -> list[dict[str, Any]]:
        return [payload for name, payload in self.events if name == event_type]


class _Clock:
    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def _engine(server: _RecordingServer, clock: _Clock, queue: Queue, **overrides: Any) -> RuntimeEngine:
    options: dict[str, Any] = {
        "logger": logging.getLogger("test.runtime"),
        "registry": ReminderRegistry(clock=clock),
        "command_queue": queue,
        "speech_service": None,
        "posture_analyzer": None,
        "ui_server": server,
        "hooks": RuntimeHooks(setup_signal_handlers=lambda stop_event: None),
        "rng": random.Random(3),
        "clock": clock,
    }
    options.update(overrides)
    return RuntimeEngine(RuntimeBootstrap(**options))


class RuntimeEngineTests(unittest.TestCase):
    def test_startup_sync_publishes_catalog_boards_and_state(self) -> None:
        server = _RecordingServer()
        engine = _engine(server, _Clock(), Queue())

        engine.publish_startup_sync()

        self.assertEqual(
            ["catalog", "reminders", "pomodoro", "state_update"],
            [name for name, _ in server.events],
        )
        catalog = server.of_type("catalog")[0]
        self.assertEqual(
            ["eye", "micro", "hydration", "snack"],
            [item["key"] for item in catalog["reminders"]],
        )
        self.assertFalse(catalog["speech_available"])
        self.assertFalse(catalog["posture_available"])
        self.assertEqual(4, len(catalog["stretches"]))
        self.assertEqual("sync", server.of_type("reminders")[0]["action"])
        state = server.of_type("state_update")[0]
        self.assertEqual("running", state["state"])
        self.assertEqual("Ready", state["message"])

    def test_tick_advances_reminders_and_pomodoro(self) -> None:
        server = _RecordingServer()
        clock = _Clock()
        engine = _engine(server, clock, Queue())
        engine.pomodoro_timer.apply("start")

        clock.now = 20 * 60
        engine.tick()

        self.assertEqual("triggered", server.of_type("reminders")[-1]["action"])
        self.assertEqual("eye", server.of_type("toast")[-1]["key"])
        self.assertEqual(1499, server.of_type("pomodoro")[-1]["remaining_seconds"])

    def test_phase_change_refreshes_running_state(self) -> None:
        server = _RecordingServer()
        engine = _engine(server, _Clock(), Queue())
        engine.pomodoro_timer.apply("start")

        for _ in range(1500):
            engine.tick()

        self.assertEqual("phase_changed", server.of_type("pomodoro")[-1]["action"])
        state = server.of_type("state_update")[-1]
        self.assertEqual("Break running (05:00 remaining)", state["message"])

    def test_drain_commands_applies_queued_ui_commands_in_order(self) -> None:
        server = _RecordingServer()
        queue: Queue = Queue()
        engine = _engine(server, _Clock(), queue)
        publisher = CommandQueuePublisher(queue)

        publisher.publish("set_reminder_enabled", {"key": "eye", "enabled": False}, client="a")
        publisher.publish("pomodoro", {"action": "start"}, client="b")
        queue.put("not a command")

        with self.assertLogs("test.runtime", level="WARNING"):
            self.assertEqual(3, engine.drain_commands())

        self.assertEqual("set_enabled", server.of_type("reminders")[-1]["action"])
        self.assertEqual("work", engine.pomodoro_timer.snapshot().phase)

    def test_run_stops_on_signal_and_shuts_down(self) -> None:
        server = _RecordingServer()

        def stop_immediately(stop_event: threading.Event) -> None:
            stop_event.set()

        engine = _engine(
            server,
            _Clock(),
            Queue(),
            hooks=RuntimeHooks(setup_signal_handlers=stop_immediately),
        )

        self.assertEqual(0, engine.run())
        self.assertTrue(server.stopped)
        self.assertEqual("catalog", server.events[0][0])

    def test_run_applies_a_burst_of_commands_before_checking_stop(self) -> None:
        engine: Optional[RuntimeEngine] = None

        class _StopOnFirstCommand(_RecordingServer):
            def publish(self, event_type: str, **payload: Any) -> None:
                super().publish(event_type, **payload)
                if payload.get("action") == "set_enabled":
                    engine.stop()

        server = _StopOnFirstCommand()
        queue: Queue = Queue()
        publisher = CommandQueuePublisher(queue)
        publisher.publish("set_reminder_enabled", {"key": "eye", "enabled": False}, client="a")
        publisher.publish("pomodoro", {"action": "start"}, client="a")
        engine = _engine(server, _Clock(), queue)

        self.assertEqual(0, engine.run())

        self.assertTrue(queue.empty())
        self.assertEqual("work", engine.pomodoro_timer.snapshot().phase)
        self.assertTrue(server.stopped)


if __name__ == "__main__":
    unittest.main()
