"""Generated notification chime used when speech is off or unavailable."""

from __future__ import annotations

from functools import lru_cache

import numpy as np

from tts import encode_wav_data_uri

CHIME_SAMPLE_RATE_HZ = 22050
_CHIME_NOTES_HZ = (880.0, 1318.5)
_NOTE_SECONDS = 0.18
_VOLUME = 0.35


def notification_chime() -> tuple[np.ndarray, int]:
    """Two short rising sine notes with a fast decay envelope."""
    samples_per_note = int(CHIME_SAMPLE_RATE_HZ * _NOTE_SECONDS)
    t = np.arange(samples_per_note, dtype=np.float32) / CHIME_SAMPLE_RATE_HZ
    envelope = np.exp(-t * 14.0).astype(np.float32)
    notes = [
        (np.sin(2.0 * np.pi * frequency * t) * envelope).astype(np.float32)
        for frequency in _CHIME_NOTES_HZ
    ]
    return np.concatenate(notes) * _VOLUME, CHIME_SAMPLE_RATE_HZ


@lru_cache(maxsize=1)
def notification_chime_data_uri() -> str:
    wav, sample_rate_hz = notification_chime()
    return encode_wav_data_uri(wav, sample_rate_hz)
