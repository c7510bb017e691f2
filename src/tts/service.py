"""High-level speech service producing playable audio for spoken alerts."""

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

import numpy as np

from .engine import TTSError
from .wav import encode_wav_data_uri


class SpeechEngineLike(Protocol):
    def synthesize(self, text: str) -> tuple[np.ndarray, int]:
        ...


@dataclass(frozen=True)
class SpeechAudio:
    """Synthesized speech as a playable ``data:audio/wav;base64,...`` URI."""
    audio_data_uri: str


class SpeechService:
    """Turns text into a WAV data URI with the configured engine."""
    def __init__(
        self,
        engine: SpeechEngineLike,
        logger: Optional[logging.Logger] = None,
    ):
        self._engine = engine
        self._logger = logger or logging.getLogger(__name__)

    def text_to_speech(self, text: str) -> SpeechAudio:
        wav, sample_rate_hz = self._engine.synthesize(text)
        if wav.size == 0:
            raise TTSError("Speech synthesis returned no audio")
        self._logger.debug(
            "Synthesized %d samples at %d Hz for %d characters",
            len(wav),
            sample_rate_hz,
            len(text),
        )
        return SpeechAudio(audio_data_uri=encode_wav_data_uri(wav, sample_rate_hz))
