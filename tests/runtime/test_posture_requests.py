import concurrent.futures
import logging
import unittest
from typing import Any, Callable, Optional

from posture import PostureAnalysis, PostureAnalysisError
from runtime.posture_requests import PostureRequests
from runtime.ui import RuntimeUIPublisher

PHOTO = "data:image/jpeg;base64,/9j/AAAA"


class _RecordingServer:
    def __init__(self):
        self.events: list[tuple[str, dict[str, Any]]] = []

    def publish(self, event_type: str, **payload: Any) -> None:
        self.events.append((event_type, payload))

    def publish_state(self, state: str, *, message: Optional[str] = None, **payload: Any) -> None:
        self.events.append(("state_update", {"state": state, "message": message, **payload}))

    def stop(self, timeout_seconds: float = 5.0) -> None:
        del timeout_seconds

    def posture(self) -> list[dict[str, Any]]:
        return [payload for name, payload in self.events if name == "posture"]


class _DeferredExecutor(concurrent.futures.Executor):
    """Holds submitted calls until the test runs them."""

    def __init__(self):
        self.calls: list[tuple[concurrent.futures.Future, Callable[[], Any]]] = []

    def submit(self, fn, /, *args, **kwargs):
        future: concurrent.futures.Future = concurrent.futures.Future()
        self.calls.append((future, lambda: fn(*args, **kwargs)))
        return future

    def run(self, index: int) -> None:
        future, call = self.calls[index]
        try:
            future.set_result(call())
        except Exception as error:
            future.set_exception(error)

    def shutdown(self, wait=True, *, cancel_futures=False):
        del wait, cancel_futures


class _Analyzer:
    def __init__(self, result: Optional[PostureAnalysis] = None, error: Optional[Exception] = None):
        self.result = result or PostureAnalysis(
            posture_analysis="Shoulders are rounded forward.",
            stretch_recommendations="Try chest openers.",
        )
        self.error = error
        self.photos: list[str] = []

    def analyze(self, photo_data_uri: str) -> PostureAnalysis:
        self.photos.append(photo_data_uri)
        if self.error is not None:
            raise self.error
        return self.result


def _requests(analyzer, server: _RecordingServer, executor: _DeferredExecutor, sleeps: list[float]):
    return PostureRequests(
        analyzer,
        RuntimeUIPublisher(server),
        sleep_fn=sleeps.append,
        logger=logging.getLogger("test.posture"),
        executor=executor,
    )


class PostureRequestsTests(unittest.TestCase):
    def test_successful_request_publishes_analyzing_then_completed(self) -> None:
        server = _RecordingServer()
        executor = _DeferredExecutor()
        sleeps: list[float] = []
        requests = _requests(_Analyzer(), server, executor, sleeps)

        request_id = requests.submit(PHOTO)
        self.assertEqual(1, request_id)
        self.assertEqual([{"status": "analyzing", "request_id": 1}], server.posture())
        self.assertTrue(requests.has_pending)

        executor.run(0)
        requests.finalize()

        self.assertEqual([1.5], sleeps)
        self.assertFalse(requests.has_pending)
        completed = server.posture()[-1]
        self.assertEqual("completed", completed["status"])
        self.assertEqual(
            {
                "posture_analysis": "Shoulders are rounded forward.",
                "stretch_recommendations": "Try chest openers.",
            },
            completed["result"],
        )

    def test_unfinished_request_stays_pending(self) -> None:
        server = _RecordingServer()
        requests = _requests(_Analyzer(), server, _DeferredExecutor(), [])

        requests.submit(PHOTO)
        requests.finalize()

        self.assertTrue(requests.has_pending)
        self.assertEqual(1, len(server.posture()))

    def test_failure_publishes_sanitized_message(self) -> None:
        server = _RecordingServer()
        executor = _DeferredExecutor()
        analyzer = _Analyzer(error=PostureAnalysisError("model exploded at layer 12"))
        requests = _requests(analyzer, server, executor, [])

        requests.submit(PHOTO)
        with self.assertLogs("test.posture", level="ERROR"):
            executor.run(0)
        requests.finalize()

        failed = server.posture()[-1]
        self.assertEqual("failed", failed["status"])
        self.assertEqual("Failed to analyze posture. Please try again.", failed["error"])
        self.assertNotIn("layer 12", failed["error"])

    def test_newer_request_wins_over_older_result(self) -> None:
        server = _RecordingServer()
        executor = _DeferredExecutor()
        requests = _requests(_Analyzer(), server, executor, [])

        first = requests.submit(PHOTO)
        second = requests.submit(PHOTO)
        executor.run(0)
        requests.finalize()

        self.assertEqual((1, 2), (first, second))
        self.assertNotIn("completed", [event["status"] for event in server.posture()])

        executor.run(1)
        requests.finalize()
        completed = server.posture()[-1]
        self.assertEqual("completed", completed["status"])
        self.assertEqual(2, completed["request_id"])

    def test_reset_discards_in_flight_result(self) -> None:
        server = _RecordingServer()
        executor = _DeferredExecutor()
        requests = _requests(_Analyzer(), server, executor, [])

        requests.submit(PHOTO)
        requests.reset()
        executor.run(0)
        requests.finalize()

        self.assertEqual(["analyzing", "reset"], [event["status"] for event in server.posture()])
        self.assertEqual(2, requests.generation)

    def test_unavailable_analyzer_fails_without_generation_bump(self) -> None:
        server = _RecordingServer()
        requests = _requests(None, server, _DeferredExecutor(), [])

        self.assertIsNone(requests.submit(PHOTO))
        self.assertFalse(requests.available)
        self.assertEqual(0, requests.generation)
        self.assertEqual("failed", server.posture()[-1]["status"])


if __name__ == "__main__":
    unittest.main()
