import logging
import unittest

from actions import (
    ANALYZE_POSTURE_DELAY_SECONDS,
    ActionError,
    analyze_posture_action,
    text_to_speech_action,
)
from posture import PostureAnalysis
from tts import SpeechAudio


class _Analyzer:
    def __init__(self, error: Exception | None = None):
        self.error = error
        self.calls: list[str] = []

    def analyze(self, photo_data_uri: str) -> PostureAnalysis:
        self.calls.append(photo_data_uri)
        if self.error is not None:
            raise self.error
        return PostureAnalysis(
            posture_analysis="Neutral spine.",
            stretch_recommendations="Keep it up.",
        )


class _Speech:
    def __init__(self, audio: SpeechAudio | None = None, error: Exception | None = None):
        self.audio = audio
        self.error = error

    def text_to_speech(self, text: str) -> SpeechAudio:
        del text
        if self.error is not None:
            raise self.error
        return self.audio  # type: ignore[return-value]


class AnalyzePostureActionTests(unittest.TestCase):
    def test_sleeps_before_analyzing(self) -> None:
        order: list[str] = []
        analyzer = _Analyzer()

        def sleep_fn(seconds: float) -> None:
            order.append(f"sleep:{seconds}")

        original_analyze = analyzer.analyze

        def analyze(uri: str) -> PostureAnalysis:
            order.append("analyze")
            return original_analyze(uri)

        analyzer.analyze = analyze  # type: ignore[method-assign]

        result = analyze_posture_action(analyzer, "data:image/png;base64,AAAA", sleep_fn=sleep_fn)

        self.assertEqual(1.5, ANALYZE_POSTURE_DELAY_SECONDS)
        self.assertEqual(["sleep:1.5", "analyze"], order)
        self.assertEqual("Neutral spine.", result.posture_analysis)

    def test_failure_is_logged_and_sanitized(self) -> None:
        analyzer = _Analyzer(error=RuntimeError("CUDA out of memory"))

        with self.assertLogs("test.actions", level="ERROR") as logs:
            with self.assertRaises(ActionError) as raised:
                analyze_posture_action(
                    analyzer,
                    "data:image/png;base64,AAAA",
                    sleep_fn=lambda seconds: None,
                    logger=logging.getLogger("test.actions"),
                )

        self.assertEqual("Failed to analyze posture. Please try again.", raised.exception.message)
        self.assertEqual({"message": raised.exception.message}, raised.exception.to_payload())
        self.assertIsNone(raised.exception.__cause__)
        self.assertIn("CUDA out of memory", "\n".join(logs.output))


class TextToSpeechActionTests(unittest.TestCase):
    def test_returns_audio(self) -> None:
        audio = SpeechAudio(audio_data_uri="data:audio/wav;base64,UklGRg==")
        self.assertIs(audio, text_to_speech_action(_Speech(audio=audio), "Hello"))

    def test_failure_is_sanitized(self) -> None:
        with self.assertLogs("test.actions", level="ERROR"):
            with self.assertRaises(ActionError) as raised:
                text_to_speech_action(
                    _Speech(error=OSError("voice file missing")),
                    "Hello",
                    logger=logging.getLogger("test.actions"),
                )
        self.assertEqual("Failed to generate speech", raised.exception.message)

    def test_missing_audio_is_a_failure(self) -> None:
        with self.assertLogs("test.actions", level="ERROR"):
            with self.assertRaises(ActionError):
                text_to_speech_action(
                    _Speech(audio=SpeechAudio(audio_data_uri="")),
                    "Hello",
                    logger=logging.getLogger("test.actions"),
                )


if __name__ == "__main__":
    unittest.main()
