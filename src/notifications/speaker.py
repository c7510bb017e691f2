"""Fire-and-forget local playback of alert audio."""

from __future__ import annotations

import concurrent.futures
import logging
from typing import Optional, Protocol

import numpy as np

from tts import decode_wav_data_uri


class AudioOutputLike(Protocol):
    def play(self, wav: np.ndarray, sample_rate_hz: int) -> None:
        ...


class SpeakerPlayback:
    """Plays alert data URIs on a local output device from a worker thread."""

    def __init__(
        self,
        output: AudioOutputLike,
        logger: Optional[logging.Logger] = None,
    ):
        self._output = output
        self._logger = logger or logging.getLogger("notifications.speaker")
        self._executor = concurrent.futures.ThreadPoolExecutor(
            max_workers=1,
            thread_name_prefix="alert-playback",
        )

    def play(self, audio_data_uri: str) -> concurrent.futures.Future[None]:
        future = self._executor.submit(self._play_now, audio_data_uri)
        future.add_done_callback(self._log_failure)
        return future

    def shutdown(self) -> None:
        self._executor.shutdown(wait=False, cancel_futures=True)

    def _play_now(self, audio_data_uri: str) -> None:
        wav, sample_rate_hz = decode_wav_data_uri(audio_data_uri)
        self._output.play(wav, sample_rate_hz)

    def _log_failure(self, future: concurrent.futures.Future[None]) -> None:
        if future.cancelled():
            return
        error = future.exception()
        if error is not None:
            self._logger.error("Alert playback failed: %s", error)
