import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from model_store import HFModelSpec, ModelDownloadError, ensure_model_downloaded


class ModelStoreDownloadTests(unittest.TestCase):
    def test_existing_symlink_target_is_replaced_with_regular_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            models_dir = root / "models"
            models_dir.mkdir(parents=True, exist_ok=True)

            target = models_dir / "tiny.gguf"
            downloaded_blob = root / "blob.gguf"
            downloaded_blob.write_bytes(b"GGUFtest")
            target.symlink_to(downloaded_blob)

            spec = HFModelSpec(repo_id="fake/repo", filename=target.name)

            with patch("model_store.hf_hub_download", return_value=str(downloaded_blob)):
                resolved = ensure_model_downloaded(spec, models_dir=models_dir)

            self.assertEqual(target, resolved)
            self.assertTrue(resolved.is_file())
            self.assertFalse(resolved.is_symlink())
            self.assertEqual(b"GGUF", resolved.read_bytes()[:4])

    def test_nested_voice_path_is_installed_under_models_dir(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            blob = root / "voice.onnx"
            blob.write_bytes(b"onnx-bytes")
            filename = "en/en_US/lessac/medium/en_US-lessac-medium.onnx"

            with patch("model_store.hf_hub_download", return_value=str(blob)) as download:
                resolved = ensure_model_downloaded(
                    HFModelSpec(repo_id="rhasspy/piper-voices", filename=filename),
                    models_dir=root / "models",
                )

            self.assertEqual(root / "models" / filename, resolved)
            self.assertEqual(b"onnx-bytes", resolved.read_bytes())
            self.assertEqual(filename, download.call_args.kwargs["filename"])

    def test_existing_file_is_reused_without_download(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            models_dir = Path(tmp)
            (models_dir / "model.gguf").write_bytes(b"GGUFready")

            with patch("model_store.hf_hub_download") as download:
                resolved = ensure_model_downloaded(
                    HFModelSpec(repo_id="fake/repo", filename="model.gguf"),
                    models_dir=models_dir,
                )

            download.assert_not_called()
            self.assertEqual(models_dir / "model.gguf", resolved)

    def test_invalid_gguf_download_is_rejected(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            blob = root / "blob.gguf"
            blob.write_bytes(b"HTML error page")

            with patch("model_store.hf_hub_download", return_value=str(blob)):
                with self.assertRaises(ModelDownloadError):
                    ensure_model_downloaded(
                        HFModelSpec(repo_id="fake/repo", filename="model.gguf"),
                        models_dir=root / "models",
                    )

    def test_download_failure_is_wrapped(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with patch("model_store.hf_hub_download", side_effect=OSError("offline")):
                with self.assertRaisesRegex(ModelDownloadError, "offline"):
                    ensure_model_downloaded(
                        HFModelSpec(repo_id="fake/repo", filename="model.gguf"),
                        models_dir=Path(tmp),
                    )

    def test_spec_requires_repo_and_filename(self) -> None:
        with self.assertRaises(ValueError):
            HFModelSpec(repo_id=" ", filename="a.gguf")
        with self.assertRaises(ValueError):
            HFModelSpec(repo_id="a/b", filename="")


if __name__ == "__main__":
    unittest.main()
