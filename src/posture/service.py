"""Posture analysis over a captured photo using a local multimodal model."""

import json
import logging
from typing import Any, Optional, Protocol

from .config import PostureConfig
from .data_uri import parse_image_data_uri
from .errors import PostureAnalysisError
from .types import PostureAnalysis

SYSTEM_PROMPT = (
    "You are an AI posture analysis assistant for people who work at a desk.\n"
    "Analyze the user's posture in the provided photo and give personalized "
    "stretch recommendations.\n"
    "Reply ONLY with JSON of the form "
    '{"postureAnalysis": string, "stretchRecommendations": string}.\n'
    "Rules:\n"
    "- Keep each field under 120 words, plain sentences, no markdown.\n"
    "- Describe what you can see: head, neck, shoulders, back and wrists.\n"
    "- If the person is not clearly visible, say so in postureAnalysis and "
    "recommend general desk stretches.\n"
)

USER_PROMPT = "Analyze my posture and recommend stretches."


class CompletionBackend(Protocol):
    def complete(self, messages: list[dict[str, Any]], max_tokens: int) -> str:
        ...


class PostureAnalyzer:
    """Turns a photo data URI into a :class:`PostureAnalysis`."""

    def __init__(
        self,
        backend: CompletionBackend,
        *,
        max_tokens: int = 512,
        logger: Optional[logging.Logger] = None,
    ):
        self._backend = backend
        self._max_tokens = max_tokens
        self._logger = logger or logging.getLogger("posture")

    @classmethod
    def from_config(
        cls,
        config: PostureConfig,
        *,
        logger: Optional[logging.Logger] = None,
    ) -> "PostureAnalyzer":
        from .backend import LlavaBackend

        return cls(LlavaBackend(config), max_tokens=config.max_tokens, logger=logger)

    def analyze(self, photo_data_uri: str) -> PostureAnalysis:
        photo = parse_image_data_uri(photo_data_uri)
        messages = [
            {"role": "system", "content": SYSTEM_PROMPT},
            {
                "role": "user",
                "content": [
                    {"type": "image_url", "image_url": {"url": photo.uri}},
                    {"type": "text", "text": USER_PROMPT},
                ],
            },
        ]

        self._logger.info(
            "Analyzing posture photo (%s, %s bytes)",
            photo.mime_type,
            f"{len(photo.data):,}",
        )
        try:
            content = self._backend.complete(messages, max_tokens=self._max_tokens)
        except Exception as error:
            raise PostureAnalysisError(f"Posture model call failed: {error}") from error

        self._logger.debug("Posture model output: %s", content)
        return parse_analysis(content)


def parse_analysis(content: str) -> PostureAnalysis:
    """Parse the model's JSON reply into a :class:`PostureAnalysis`."""
    try:
        payload = json.loads(content)
    except (TypeError, json.JSONDecodeError) as error:
        raise PostureAnalysisError(f"Posture model returned invalid JSON: {error}") from error

    if not isinstance(payload, dict):
        raise PostureAnalysisError("Posture model output must be a JSON object")

    analysis = payload.get("postureAnalysis")
    recommendations = payload.get("stretchRecommendations")
    if not isinstance(analysis, str) or not analysis.strip():
        raise PostureAnalysisError("Posture model output is missing postureAnalysis")
    if not isinstance(recommendations, str) or not recommendations.strip():
        raise PostureAnalysisError("Posture model output is missing stretchRecommendations")

    return PostureAnalysis(
        posture_analysis=analysis.strip(),
        stretch_recommendations=recommendations.strip(),
    )
