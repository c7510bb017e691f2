import base64
import json
import unittest
from typing import Any

from posture import PostureAnalysisError, PostureAnalyzer, parse_analysis, parse_image_data_uri
from posture.data_uri import MAX_PHOTO_BYTES


def _photo(data: bytes = b"\xff\xd8\xff\xe0jpeg", mime: str = "image/jpeg") -> str:
    return f"data:{mime};base64,{base64.b64encode(data).decode('ascii')}"


class ImageDataUriTests(unittest.TestCase):
    def test_parses_image_data_uri(self) -> None:
        photo = parse_image_data_uri(_photo())

        self.assertEqual("image/jpeg", photo.mime_type)
        self.assertEqual(b"\xff\xd8\xff\xe0jpeg", photo.data)
        self.assertTrue(photo.uri.startswith("data:image/jpeg;base64,"))

    def test_rejects_non_image_mime(self) -> None:
        with self.assertRaisesRegex(PostureAnalysisError, "image/"):
            parse_image_data_uri(_photo(mime="text/plain"))

    def test_rejects_malformed_uri(self) -> None:
        for value in ("", "   ", "not-a-uri", "data:image/png,abc"):
            with self.subTest(value=value):
                with self.assertRaises(PostureAnalysisError):
                    parse_image_data_uri(value)

    def test_rejects_invalid_base64(self) -> None:
        with self.assertRaisesRegex(PostureAnalysisError, "base64"):
            parse_image_data_uri("data:image/png;base64,abc")

    def test_rejects_oversized_photo(self) -> None:
        with self.assertRaisesRegex(PostureAnalysisError, "too large"):
            parse_image_data_uri(_photo(b"\x00" * (MAX_PHOTO_BYTES + 1)))


class ParseAnalysisTests(unittest.TestCase):
    def test_parses_model_json(self) -> None:
        analysis = parse_analysis(
            json.dumps(
                {
                    "postureAnalysis": "  Head is tilted forward. ",
                    "stretchRecommendations": "Chin tucks, ten reps.",
                }
            )
        )

        self.assertEqual("Head is tilted forward.", analysis.posture_analysis)
        self.assertEqual("Chin tucks, ten reps.", analysis.stretch_recommendations)

    def test_rejects_invalid_or_incomplete_output(self) -> None:
        cases = (
            "not json",
            "[]",
            json.dumps({"postureAnalysis": "ok"}),
            json.dumps({"postureAnalysis": "", "stretchRecommendations": "x"}),
        )
        for content in cases:
            with self.subTest(content=content):
                with self.assertRaises(PostureAnalysisError):
                    parse_analysis(content)


class _Backend:
    def __init__(self, content: str = "", error: Exception | None = None):
        self.content = content
        self.error = error
        self.messages: list[list[dict[str, Any]]] = []

    def complete(self, messages: list[dict[str, Any]], max_tokens: int) -> str:
        del max_tokens
        self.messages.append(messages)
        if self.error is not None:
            raise self.error
        return self.content


class PostureAnalyzerTests(unittest.TestCase):
    def test_sends_photo_and_parses_reply(self) -> None:
        backend = _Backend(
            json.dumps({"postureAnalysis": "Good.", "stretchRecommendations": "Wrist circles."})
        )
        photo = _photo()

        analysis = PostureAnalyzer(backend).analyze(photo)

        self.assertEqual("Good.", analysis.posture_analysis)
        user_content = backend.messages[0][1]["content"]
        self.assertEqual(photo, user_content[0]["image_url"]["url"])

    def test_backend_failure_becomes_analysis_error(self) -> None:
        backend = _Backend(error=RuntimeError("llama crashed"))

        with self.assertRaises(PostureAnalysisError):
            PostureAnalyzer(backend).analyze(_photo())

    def test_invalid_photo_never_reaches_backend(self) -> None:
        backend = _Backend()

        with self.assertRaises(PostureAnalysisError):
            PostureAnalyzer(backend).analyze("data:text/plain;base64,aGk=")
        self.assertEqual([], backend.messages)


if __name__ == "__main__":
    unittest.main()
