"""WAV data-URI encoding for synthesized speech and alert sounds."""

from __future__ import annotations

import base64
import binascii
import io
import wave

import numpy as np

from .engine import TTSError

WAV_MIME_TYPE = "audio/wav"
_DATA_URI_PREFIX = f"data:{WAV_MIME_TYPE};base64,"


def encode_wav_data_uri(wav: np.ndarray, sample_rate_hz: int) -> str:
    """Encode mono float PCM in [-1, 1] as a 16-bit WAV data URI."""
    if wav.ndim != 1:
        raise TTSError("Expected mono PCM array for WAV encoding")
    if len(wav) == 0:
        raise TTSError("Cannot encode an empty audio buffer")
    if sample_rate_hz <= 0:
        raise TTSError(f"Invalid sample rate: {sample_rate_hz}")

    pcm = (np.clip(wav, -1.0, 1.0) * 32767.0).astype("<i2")
    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as writer:
        writer.setnchannels(1)
        writer.setsampwidth(2)
        writer.setframerate(int(sample_rate_hz))
        writer.writeframes(pcm.tobytes())
    return _DATA_URI_PREFIX + base64.b64encode(buffer.getvalue()).decode("ascii")


def decode_wav_data_uri(data_uri: str) -> tuple[np.ndarray, int]:
    """Decode a data URI produced by :func:`encode_wav_data_uri`."""
    if not data_uri.startswith(_DATA_URI_PREFIX):
        raise TTSError("Not a base64 WAV data URI")

    try:
        raw = base64.b64decode(data_uri[len(_DATA_URI_PREFIX):], validate=True)
        with wave.open(io.BytesIO(raw), "rb") as reader:
            if reader.getnchannels() != 1 or reader.getsampwidth() != 2:
                raise TTSError("Only 16-bit mono WAV audio is supported")
            sample_rate_hz = reader.getframerate()
            frames = reader.readframes(reader.getnframes())
    except (binascii.Error, wave.Error, EOFError) as error:
        raise TTSError(f"Invalid WAV data URI: {error}") from error

    pcm = np.frombuffer(frames, dtype="<i2")
    return pcm.astype(np.float32) / 32768.0, sample_rate_hz
