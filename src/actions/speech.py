from __future__ import annotations

import logging
from typing import Optional, Protocol

from tts import SpeechAudio

from .errors import ActionError

TEXT_TO_SPEECH_ERROR_MESSAGE = "Failed to generate speech"


class SpeechServiceLike(Protocol):
    def text_to_speech(self, text: str) -> SpeechAudio:
        ...


def text_to_speech_action(
    speech_service: SpeechServiceLike,
    text: str,
    *,
    logger: Optional[logging.Logger] = None,
) -> SpeechAudio:
    """Synthesize ``text``; any failure or empty audio becomes one generic error."""
    logger = logger or logging.getLogger("actions")
    try:
        audio = speech_service.text_to_speech(text)
    except Exception as error:
        logger.error("Error in text_to_speech_action: %s", error, exc_info=True)
        raise ActionError(TEXT_TO_SPEECH_ERROR_MESSAGE) from None

    if audio is None or not audio.audio_data_uri:
        logger.error("Error in text_to_speech_action: no audio returned")
        raise ActionError(TEXT_TO_SPEECH_ERROR_MESSAGE)
    return audio
