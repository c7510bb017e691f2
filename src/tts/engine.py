import logging
from pathlib import Path
from typing import Any, Optional

import numpy as np

from model_store import HFModelSpec, ModelDownloadError, ensure_model_downloaded

from .config import TTSConfig


class TTSError(Exception):
    """Raised when text-to-speech processing fails."""


class PiperTTSEngine:
    """Synthesizes mono float32 PCM with a local Piper voice."""

    def __init__(
        self,
        config: TTSConfig,
        logger: Optional[logging.Logger] = None,
    ):
        self._config = config
        self._logger = logger or logging.getLogger(__name__)
        voice_path = self._ensure_voice_files()

        try:
            from piper.voice import PiperVoice

            self._voice = PiperVoice.load(str(voice_path))
            self._sample_rate_hz = int(self._voice.config.sample_rate)
        except Exception as error:
            raise TTSError(f"Failed to initialize Piper TTS engine: {error}") from error

    @property
    def sample_rate_hz(self) -> int:
        return self._sample_rate_hz

    def _ensure_voice_files(self) -> Path:
        voice_path = self._config.voice_path
        voice_config_path = self._config.voice_config_path
        if voice_path.is_file() and voice_config_path.is_file():
            return voice_path

        repo_id = self._config.hf_repo_id.strip()
        if not repo_id:
            missing = [
                path.name for path in (voice_path, voice_config_path) if not path.is_file()
            ]
            raise TTSError(
                "Piper voice files are missing: "
                f"{', '.join(missing)}. "
                "Provide them in tts.model_path or set tts.hf_repo_id for auto-download."
            )

        self._logger.info("Piper voice not found locally, fetching from %s", repo_id)
        voice_filename = self._config.voice_filename
        for filename in (voice_filename, f"{voice_filename}.json"):
            try:
                ensure_model_downloaded(
                    HFModelSpec(
                        repo_id=repo_id,
                        filename=filename,
                        revision=self._config.hf_revision,
                    ),
                    models_dir=self._config.model_dir,
                    logger=self._logger,
                )
            except (ModelDownloadError, ValueError) as error:
                raise TTSError(f"Failed to fetch Piper asset {filename}: {error}") from error

        return voice_path

    def synthesize(self, text: str) -> tuple[np.ndarray, int]:
        if not text.strip():
            raise TTSError("Text to synthesize cannot be empty")

        try:
            audio_chunks = [
                self._extract_chunk_bytes(chunk) for chunk in self._voice.synthesize(text)
            ]
            if not audio_chunks:
                raise TTSError("Piper synthesis produced an empty audio stream")

            pcm_int16 = np.frombuffer(b"".join(audio_chunks), dtype=np.int16)
            if pcm_int16.size == 0:
                raise TTSError("Piper synthesis produced an empty audio buffer")

            return pcm_int16.astype(np.float32) / 32768.0, self._sample_rate_hz
        except TTSError:
            raise
        except Exception as error:
            raise TTSError(f"TTS synthesis failed: {error}") from error

    @staticmethod
    def _extract_chunk_bytes(chunk: Any) -> bytes:
        if hasattr(chunk, "audio_int16_bytes"):
            raw_audio = chunk.audio_int16_bytes
        elif hasattr(chunk, "audio_data"):
            raw_audio = chunk.audio_data
        else:
            raw_audio = chunk

        if isinstance(raw_audio, np.ndarray):
            return raw_audio.astype(np.int16, copy=False).tobytes()
        if isinstance(raw_audio, (bytes, bytearray, memoryview)):
            return bytes(raw_audio)
        if isinstance(raw_audio, (list, tuple)):
            return np.asarray(raw_audio, dtype=np.int16).tobytes()

        raise TTSError(f"Unsupported Piper chunk audio type: {type(raw_audio).__name__}")
