"""Hugging Face download helpers for local model assets (GGUF and Piper voices)."""

from __future__ import annotations

import logging
import os
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from huggingface_hub import hf_hub_download
from huggingface_hub.utils import HfHubHTTPError, RepositoryNotFoundError


class ModelDownloadError(Exception):
    """Raised when model download or validation fails."""


@dataclass(frozen=True)
class HFModelSpec:
    """A single file inside a Hugging Face model repository."""

    repo_id: str
    filename: str
    revision: Optional[str] = None

    def __post_init__(self):
        if not self.repo_id or not self.repo_id.strip():
            raise ValueError("repo_id cannot be empty")
        if not self.filename or not self.filename.strip():
            raise ValueError("filename cannot be empty")

    @property
    def is_gguf(self) -> bool:
        return self.filename.endswith(".gguf")


def is_gguf_file(path: Path, logger: Optional[logging.Logger] = None) -> bool:
    """Check the GGUF magic bytes at the start of ``path``."""
    logger = logger or logging.getLogger(__name__)
    try:
        with open(path, "rb") as f:
            magic = f.read(4)
    except OSError as e:
        logger.error("Failed to validate GGUF file %s: %s", path, e)
        return False

    if magic == b"GGUF":
        return True
    logger.warning("File %s does not have GGUF magic bytes: %s", path, magic.hex())
    return False


def ensure_model_downloaded(
    spec: HFModelSpec,
    *,
    models_dir: str | Path = "models",
    hf_token: Optional[str] = None,
    logger: Optional[logging.Logger] = None,
) -> Path:
    """Ensure ``spec.filename`` exists in ``models_dir`` and return its path.

    GGUF files are validated by magic bytes both before reuse and after
    download. Files are installed with a hardlink (copy as fallback) and an
    atomic rename.

    Raises:
        ModelDownloadError: If the directory is unusable, the download fails
            or the downloaded file is invalid.
    """
    logger = logger or logging.getLogger(__name__)

    models_dir = Path(models_dir).expanduser()
    try:
        models_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ModelDownloadError(f"Cannot create models directory {models_dir}: {e}") from e

    target_path = models_dir / spec.filename
    target_path.parent.mkdir(parents=True, exist_ok=True)
    if _reusable(target_path, spec, logger):
        return target_path

    if not os.access(models_dir, os.W_OK):
        raise ModelDownloadError(f"Models directory {models_dir} is not writable")

    logger.info(
        "Downloading %s from %s (revision: %s)",
        spec.filename,
        spec.repo_id,
        spec.revision or "main",
    )
    try:
        downloaded_path = Path(
            hf_hub_download(
                repo_id=spec.repo_id,
                filename=spec.filename,
                revision=spec.revision,
                token=hf_token,
            )
        )
    except RepositoryNotFoundError as e:
        raise ModelDownloadError(
            f"Repository not found: {spec.repo_id}. "
            "Check that the repo exists and you have access."
        ) from e
    except HfHubHTTPError as e:
        if "404" in str(e):
            raise ModelDownloadError(
                f"File not found: {spec.filename} in {spec.repo_id}."
            ) from e
        raise ModelDownloadError(f"HTTP error downloading from {spec.repo_id}: {e}") from e
    except Exception as e:
        raise ModelDownloadError(
            f"Failed to download {spec.filename} from {spec.repo_id}: {e}"
        ) from e

    if not downloaded_path.is_file():
        raise ModelDownloadError(f"Downloaded file does not exist: {downloaded_path}")
    if spec.is_gguf and not is_gguf_file(downloaded_path, logger):
        raise ModelDownloadError(f"Downloaded file {downloaded_path} is not a valid GGUF file")

    install_file(downloaded_path, target_path)
    logger.info("Model asset ready at %s", target_path)
    return target_path


def install_file(source_path: Path, target_path: Path) -> None:
    """Place ``source_path`` at ``target_path`` via a temp file and rename."""
    temp_path = target_path.with_suffix(f"{target_path.suffix}.tmp")
    try:
        if temp_path.exists():
            temp_path.unlink()
        try:
            temp_path.hardlink_to(source_path)
        except (OSError, NotImplementedError):
            shutil.copy2(source_path, temp_path)

        if target_path.exists() or target_path.is_symlink():
            target_path.unlink()
        temp_path.rename(target_path)
    except OSError as e:
        if temp_path.exists():
            try:
                temp_path.unlink()
            except OSError:
                pass
        raise ModelDownloadError(f"Failed to install {target_path.name}: {e}") from e


def _reusable(target_path: Path, spec: HFModelSpec, logger: logging.Logger) -> bool:
    if target_path.is_symlink():
        # Only regular files are trusted; the symlink is replaced on install.
        logger.warning("Model path %s is a symlink; it will be replaced", target_path)
        return False
    if not target_path.exists():
        return False
    if not target_path.is_file():
        raise ModelDownloadError(f"Model path exists but is not a regular file: {target_path}")

    try:
        size = target_path.stat().st_size
    except OSError as e:
        logger.warning("Cannot stat existing file %s: %s", target_path, e)
        return False
    if size <= 0:
        return False
    if spec.is_gguf and not is_gguf_file(target_path, logger):
        logger.warning("Existing file %s failed GGUF validation, re-downloading", target_path)
        return False

    logger.info("Model asset already present: %s (%s bytes)", target_path, f"{size:,}")
    return True
