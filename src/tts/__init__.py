"""Public exports for text-to-speech components."""

from .config import TTSConfig, TTSConfigurationError
from .engine import PiperTTSEngine, TTSError
from .output import SoundDeviceAudioOutput
from .service import SpeechAudio, SpeechService
from .wav import decode_wav_data_uri, encode_wav_data_uri

__all__ = [
    "TTSConfig",
    "TTSConfigurationError",
    "TTSError",
    "PiperTTSEngine",
    "SoundDeviceAudioOutput",
    "SpeechAudio",
    "SpeechService",
    "decode_wav_data_uri",
    "encode_wav_data_uri",
]
