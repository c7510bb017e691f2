import os
import sys
import tempfile
import textwrap
import unittest
from pathlib import Path
from unittest.mock import patch

from app_config import (
    AppConfigurationError,
    load_app_config,
    load_secret_config,
    resolve_config_path,
)


def _write_text(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def _write_config(root: Path, content: str) -> Path:
    config_path = root / "config.toml"
    _write_text(config_path, textwrap.dedent(content).strip())
    return config_path


class AppConfigLoadingTests(unittest.TestCase):
    def test_load_app_config_resolves_relative_paths(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir)
            config_path = _write_config(
                root,
                """
                [tts]
                model_path = "models/tts"

                [posture]
                model_path = "models/posture"

                [ui_server]
                index_file = "web/index.html"
                """,
            )

            app_config = load_app_config(str(config_path))

            self.assertEqual(str(config_path), app_config.source_file)
            self.assertEqual(str((root / "models/tts").resolve()), app_config.tts.model_path)
            self.assertEqual(
                str((root / "models/posture").resolve()),
                app_config.posture.model_path,
            )
            self.assertEqual(
                str((root / "web/index.html").resolve()),
                app_config.ui_server.index_file,
            )

    def test_empty_config_uses_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            app_config = load_app_config(str(_write_config(Path(temp_dir), "")))

        self.assertFalse(app_config.reminders.spoken_alerts)
        self.assertEqual((), app_config.reminders.items)
        self.assertEqual("browser", app_config.alerts.output)
        self.assertFalse(app_config.tts.enabled)
        self.assertEqual("main", app_config.tts.hf_revision)
        self.assertFalse(app_config.posture.enabled)
        self.assertTrue(app_config.ui_server.enabled)
        self.assertEqual(8765, app_config.ui_server.port)
        self.assertEqual("", app_config.ui_server.index_file)

    def test_reminder_overrides_are_parsed(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = _write_config(
                Path(temp_dir),
                """
                [reminders]
                spoken_alerts = true

                [reminders.snack]
                enabled = true
                frequency_minutes = 90

                [reminders.eye]
                frequency_minutes = 25
                """,
            )

            app_config = load_app_config(str(config_path))

        self.assertTrue(app_config.reminders.spoken_alerts)
        items = {item.key: item for item in app_config.reminders.items}
        self.assertTrue(items["snack"].enabled)
        self.assertEqual(90, items["snack"].frequency_minutes)
        self.assertIsNone(items["eye"].enabled)
        self.assertEqual(25, items["eye"].frequency_minutes)

    def test_reminder_frequency_must_be_allowed(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = _write_config(
                Path(temp_dir),
                """
                [reminders.eye]
                frequency_minutes = 17
                """,
            )

            with self.assertRaises(AppConfigurationError) as context:
                load_app_config(str(config_path))

        self.assertIn("reminders.eye.frequency_minutes must be one of: 15, 20, 25, 30", str(context.exception))

    def test_unknown_reminder_table_is_rejected(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = _write_config(
                Path(temp_dir),
                """
                [reminders.posture]
                enabled = true
                """,
            )

            with self.assertRaises(AppConfigurationError) as context:
                load_app_config(str(config_path))

        self.assertIn("reminders.posture", str(context.exception))

    def test_alert_output_is_validated(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = _write_config(
                Path(temp_dir),
                """
                [alerts]
                output = "pager"
                """,
            )

            with self.assertRaises(AppConfigurationError):
                load_app_config(str(config_path))

    def test_load_app_config_rejects_secret_fields(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = _write_config(
                Path(temp_dir),
                """
                [posture]
                hf_token = "hf_private"
                """,
            )

            with self.assertRaises(AppConfigurationError) as context:
                load_app_config(str(config_path))

            self.assertIn("posture.hf_token", str(context.exception))

    def test_bool_is_not_accepted_as_integer(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = _write_config(
                Path(temp_dir),
                """
                [ui_server]
                port = true
                """,
            )

            with self.assertRaises(AppConfigurationError) as context:
                load_app_config(str(config_path))

            self.assertIn("ui_server.port", str(context.exception))

    def test_missing_config_file(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            with self.assertRaises(AppConfigurationError):
                load_app_config(str(Path(temp_dir) / "missing.toml"))

    def test_load_secret_config_normalizes_token(self) -> None:
        self.assertIsNone(load_secret_config(environ={}).hf_token)
        self.assertIsNone(load_secret_config(environ={"HF_TOKEN": "  "}).hf_token)
        self.assertEqual("abc", load_secret_config(environ={"HF_TOKEN": " abc "}).hf_token)

    def test_resolve_config_path_uses_executable_dir_fallback_in_frozen_mode(self) -> None:
        with tempfile.TemporaryDirectory() as cwd_dir, tempfile.TemporaryDirectory() as exe_dir:
            cwd = Path(cwd_dir)
            executable_dir_config = Path(exe_dir) / "config.toml"
            _write_text(executable_dir_config, "[reminders]\nspoken_alerts = false\n")
            executable = Path(exe_dir) / "main"

            with patch.dict(os.environ, {}, clear=True):
                with patch("app_config.Path.cwd", return_value=cwd):
                    with patch.object(sys, "frozen", True, create=True):
                        with patch.object(sys, "executable", str(executable), create=True):
                            resolved = resolve_config_path()

            self.assertEqual(executable_dir_config.resolve(), resolved)


if __name__ == "__main__":
    unittest.main()
