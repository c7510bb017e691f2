"""Typed parser for config.toml sections into immutable app settings."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Optional

from app_config_schema import (
    ALERT_OUTPUT_BROWSER,
    ALERT_OUTPUT_SPEAKER,
    AlertSettings,
    AppConfig,
    AppConfigurationError,
    PostureSettings,
    ReminderItemSettings,
    ReminderSettings,
    TTSSettings,
    UIServerSettings,
)
from reminders import DEFAULT_REMINDERS, definitions_by_key

_ALERT_OUTPUTS = {ALERT_OUTPUT_BROWSER, ALERT_OUTPUT_SPEAKER}
_SECRET_FIELDS = ("hf_token", "token", "api_key")


def parse_app_config(
    raw: Mapping[str, Any],
    *,
    base_dir: Path,
    source_file: str,
) -> AppConfig:
    """Parse raw TOML mappings into strongly typed application settings."""
    reminders = _parse_reminder_settings(_section(raw, "reminders"))
    alerts = _parse_alert_settings(_section(raw, "alerts"))
    tts = _parse_tts_settings(_section(raw, "tts"), base_dir=base_dir)
    posture = _parse_posture_settings(_section(raw, "posture"), base_dir=base_dir)
    ui_server = _parse_ui_server_settings(_section(raw, "ui_server"), base_dir=base_dir)

    return AppConfig(
        reminders=reminders,
        alerts=alerts,
        tts=tts,
        posture=posture,
        ui_server=ui_server,
        source_file=source_file,
    )


def _parse_reminder_settings(section: Mapping[str, Any]) -> ReminderSettings:
    definitions = definitions_by_key(DEFAULT_REMINDERS)
    items: list[ReminderItemSettings] = []
    for name, value in section.items():
        if name == "spoken_alerts":
            continue
        if name not in definitions:
            allowed = ", ".join(definitions)
            raise AppConfigurationError(
                f"Unknown reminder [reminders.{name}]; expected one of: {allowed}."
            )
        table = _section(section, name)
        prefix = f"reminders.{name}"

        enabled = (
            _as_bool(table["enabled"], f"{prefix}.enabled")
            if "enabled" in table
            else None
        )
        frequency = (
            _as_int(table["frequency_minutes"], f"{prefix}.frequency_minutes")
            if "frequency_minutes" in table
            else None
        )
        definition = definitions[name]
        if frequency is not None and not definition.allows(frequency):
            allowed = ", ".join(str(minutes) for minutes in definition.frequencies)
            raise AppConfigurationError(
                f"{prefix}.frequency_minutes must be one of: {allowed}."
            )
        items.append(
            ReminderItemSettings(key=name, enabled=enabled, frequency_minutes=frequency)
        )

    return ReminderSettings(
        spoken_alerts=_as_bool(
            section.get("spoken_alerts", False),
            "reminders.spoken_alerts",
        ),
        items=tuple(items),
    )


def _parse_alert_settings(section: Mapping[str, Any]) -> AlertSettings:
    output = _as_str(section.get("output", ALERT_OUTPUT_BROWSER), "alerts.output").lower()
    if output not in _ALERT_OUTPUTS:
        allowed = ", ".join(sorted(_ALERT_OUTPUTS))
        raise AppConfigurationError(f"alerts.output must be one of: {allowed}.")
    return AlertSettings(
        output=output,
        output_device=_optional_int(section, "output_device", "alerts"),
    )


def _parse_tts_settings(
    section: Mapping[str, Any],
    *,
    base_dir: Path,
) -> TTSSettings:
    _forbid_secret_fields(section, "tts", _SECRET_FIELDS)
    return TTSSettings(
        enabled=_as_bool(section.get("enabled", False), "tts.enabled"),
        model_path=_resolve_path(
            base_dir,
            _as_str(section.get("model_path", ""), "tts.model_path"),
        ),
        hf_filename=_as_str(section.get("hf_filename", ""), "tts.hf_filename"),
        hf_repo_id=_as_str(section.get("hf_repo_id", ""), "tts.hf_repo_id"),
        hf_revision=(
            _as_str(section.get("hf_revision", "main"), "tts.hf_revision") or "main"
        ),
        output_device=_optional_int(section, "output_device", "tts"),
    )


def _parse_posture_settings(
    section: Mapping[str, Any],
    *,
    base_dir: Path,
) -> PostureSettings:
    _forbid_secret_fields(section, "posture", _SECRET_FIELDS)
    return PostureSettings(
        enabled=_as_bool(section.get("enabled", False), "posture.enabled"),
        model_path=_resolve_path(
            base_dir,
            _as_str(section.get("model_path", ""), "posture.model_path"),
        ),
        hf_filename=_as_str(section.get("hf_filename", ""), "posture.hf_filename"),
        clip_filename=_as_str(
            section.get("clip_filename", ""),
            "posture.clip_filename",
        ),
        hf_repo_id=_as_str(section.get("hf_repo_id", ""), "posture.hf_repo_id"),
        hf_revision=_as_str(section.get("hf_revision", ""), "posture.hf_revision"),
        n_threads=_as_int(section.get("n_threads", 4), "posture.n_threads"),
        n_ctx=_as_int(section.get("n_ctx", 4096), "posture.n_ctx"),
        n_batch=_as_int(section.get("n_batch", 512), "posture.n_batch"),
        temperature=_as_float(section.get("temperature", 0.2), "posture.temperature"),
        top_p=_as_float(section.get("top_p", 0.9), "posture.top_p"),
        max_tokens=_as_int(section.get("max_tokens", 512), "posture.max_tokens"),
        verbose=_as_bool(section.get("verbose", False), "posture.verbose"),
    )


def _parse_ui_server_settings(
    section: Mapping[str, Any],
    *,
    base_dir: Path,
) -> UIServerSettings:
    index_file = _as_str(section.get("index_file", ""), "ui_server.index_file")
    return UIServerSettings(
        enabled=_as_bool(section.get("enabled", True), "ui_server.enabled"),
        host=_as_str(section.get("host", "127.0.0.1"), "ui_server.host"),
        port=_as_int(section.get("port", 8765), "ui_server.port"),
        index_file=_resolve_path(base_dir, index_file) if index_file else "",
    )


def _section(root: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    raw = root.get(name, {})
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise AppConfigurationError(f"[{name}] must be a table.")
    return raw


def _optional_int(section: Mapping[str, Any], field: str, section_name: str) -> Optional[int]:
    if field not in section:
        return None
    return _as_int(section.get(field), f"{section_name}.{field}")


def _as_str(value: Any, field: str) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    raise AppConfigurationError(f"{field} must be a string.")


def _as_bool(value: Any, field: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "1", "yes", "on"):
            return True
        if lowered in ("false", "0", "no", "off"):
            return False
    raise AppConfigurationError(f"{field} must be a boolean.")


def _as_int(value: Any, field: str) -> int:
    if isinstance(value, bool):
        raise AppConfigurationError(f"{field} must be an integer.")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError as error:
            raise AppConfigurationError(f"{field} must be an integer.") from error
    raise AppConfigurationError(f"{field} must be an integer.")


def _as_float(value: Any, field: str) -> float:
    if isinstance(value, bool):
        raise AppConfigurationError(f"{field} must be a float.")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError as error:
            raise AppConfigurationError(f"{field} must be a float.") from error
    raise AppConfigurationError(f"{field} must be a float.")


def _resolve_path(base_dir: Path, raw: str) -> str:
    if not raw:
        return ""
    path = Path(raw).expanduser()
    if not path.is_absolute():
        path = (base_dir / path).resolve()
    return str(path)


def _forbid_secret_fields(
    section: Mapping[str, Any],
    section_name: str,
    fields: tuple[str, ...],
) -> None:
    present = [field for field in fields if field in section]
    if present:
        joined = ", ".join(f"{section_name}.{field}" for field in present)
        raise AppConfigurationError(
            f"Secret values must not be stored in config.toml: {joined}. "
            "Move them to environment variables."
        )
