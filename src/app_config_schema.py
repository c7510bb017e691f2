"""Dataclass schema objects used by runtime configuration loading."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

DEFAULT_CONFIG_FILE = "config.toml"

ALERT_OUTPUT_BROWSER = "browser"
ALERT_OUTPUT_SPEAKER = "speaker"


class AppConfigurationError(Exception):
    """Raised when application configuration fails."""


@dataclass(frozen=True)
class ReminderItemSettings:
    """Start-up override for one reminder from `[reminders.<key>]`."""
    key: str
    enabled: Optional[bool] = None
    frequency_minutes: Optional[int] = None


@dataclass(frozen=True)
class ReminderSettings:
    """Reminder defaults from `[reminders]`."""
    spoken_alerts: bool = False
    items: tuple[ReminderItemSettings, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class AlertSettings:
    """Where alert audio is played, from `[alerts]`."""
    output: str = ALERT_OUTPUT_BROWSER
    output_device: Optional[int] = None


@dataclass(frozen=True)
class TTSSettings:
    """Text-to-speech settings from `[tts]`."""
    enabled: bool = False
    model_path: str = ""
    hf_filename: str = ""
    hf_repo_id: str = ""
    hf_revision: str = "main"
    output_device: Optional[int] = None


@dataclass(frozen=True)
class PostureSettings:
    """Local posture model settings from `[posture]`."""
    enabled: bool = False
    model_path: str = ""
    hf_filename: str = ""
    clip_filename: str = ""
    hf_repo_id: str = ""
    hf_revision: str = ""
    n_threads: int = 4
    n_ctx: int = 4096
    n_batch: int = 512
    temperature: float = 0.2
    top_p: float = 0.9
    max_tokens: int = 512
    verbose: bool = False


@dataclass(frozen=True)
class UIServerSettings:
    """Built-in UI server settings from `[ui_server]`."""
    enabled: bool = True
    host: str = "127.0.0.1"
    port: int = 8765
    index_file: str = ""


@dataclass(frozen=True)
class AppConfig:
    """Complete typed runtime configuration loaded from `config.toml`."""
    reminders: ReminderSettings
    alerts: AlertSettings
    tts: TTSSettings
    posture: PostureSettings
    ui_server: UIServerSettings
    source_file: str


@dataclass(frozen=True)
class SecretConfig:
    """Environment-provided secrets kept out of `config.toml`."""
    hf_token: Optional[str]
