"""Configuration model for Piper-based TTS assets and output selection."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


class TTSConfigurationError(Exception):
    """Raised when TTS configuration is invalid."""


@dataclass(frozen=True)
class TTSConfig:
    """Resolved Piper voice location, optional Hub source and output device."""
    model_dir: str
    voice_filename: str
    hf_repo_id: str = ""
    hf_revision: str = "main"
    output_device_index: Optional[int] = None

    def __post_init__(self) -> None:
        if not self.model_dir.strip():
            raise TTSConfigurationError("TTS model_path cannot be empty")
        if Path(self.voice_filename).suffix.lower() != ".onnx":
            raise TTSConfigurationError(
                f"TTS voice must be a Piper .onnx file, got: {self.voice_filename!r}"
            )
        if self.output_device_index is not None and self.output_device_index < 0:
            raise TTSConfigurationError(
                f"TTS output_device must be >= 0, got: {self.output_device_index}"
            )

    @property
    def voice_path(self) -> Path:
        return Path(self.model_dir).expanduser() / self.voice_filename

    @property
    def voice_config_path(self) -> Path:
        return Path(self.model_dir).expanduser() / f"{self.voice_filename}.json"

    @classmethod
    def from_settings(cls, settings) -> "TTSConfig":
        model_path = (settings.model_path or "").strip()
        hf_filename = (settings.hf_filename or "").strip()

        if not model_path:
            raise TTSConfigurationError("TTS model_path cannot be empty")
        if not hf_filename:
            # model_path may point straight at the voice file.
            voice_file = Path(model_path)
            if voice_file.suffix.lower() != ".onnx":
                raise TTSConfigurationError("TTS hf_filename cannot be empty")
            hf_filename = voice_file.name
            model_path = str(voice_file.parent)

        return cls(
            model_dir=model_path,
            voice_filename=hf_filename,
            hf_repo_id=(settings.hf_repo_id or "").strip(),
            hf_revision=(settings.hf_revision or "main").strip() or "main",
            output_device_index=settings.output_device,
        )
