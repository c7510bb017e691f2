from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from model_store import HFModelSpec, ModelDownloadError, ensure_model_downloaded

from .errors import PostureConfigurationError


@dataclass(frozen=True)
class PostureConfig:
    """Configuration for the local multimodal posture model."""

    model_path: str
    clip_model_path: str
    n_threads: int = 4
    n_ctx: int = 4096
    n_batch: int = 512
    temperature: float = 0.2
    top_p: float = 0.9
    max_tokens: int = 512
    verbose: bool = False

    def __post_init__(self):
        """Validate configuration values."""
        for label, raw_path in (
            ("model_path", self.model_path),
            ("clip_model_path", self.clip_model_path),
        ):
            if not raw_path or not raw_path.strip():
                raise PostureConfigurationError(f"{label} cannot be empty")
            path = Path(raw_path)
            if not path.exists():
                raise PostureConfigurationError(f"Model file does not exist: {raw_path}")
            if not path.is_file():
                raise PostureConfigurationError(f"Model path is not a file: {raw_path}")

        if not 1 <= self.n_threads <= 64:
            raise PostureConfigurationError(
                f"n_threads must be in [1, 64], got: {self.n_threads}"
            )

        # Image embeddings alone take several hundred tokens.
        if self.n_ctx < 1024:
            raise PostureConfigurationError(f"n_ctx must be >= 1024, got: {self.n_ctx}")
        if self.n_ctx > 32768:
            raise PostureConfigurationError(
                f"n_ctx too high ({self.n_ctx}), consider <= 32768"
            )

        if not 1 <= self.n_batch <= self.n_ctx:
            raise PostureConfigurationError(
                f"n_batch must be in [1, n_ctx={self.n_ctx}], got: {self.n_batch}"
            )

        if not 0.0 <= self.temperature <= 2.0:
            raise PostureConfigurationError(
                f"temperature must be in [0.0, 2.0], got: {self.temperature}"
            )

        if not 0.0 <= self.top_p <= 1.0:
            raise PostureConfigurationError(f"top_p must be in [0.0, 1.0], got: {self.top_p}")

        if not 16 <= self.max_tokens <= self.n_ctx:
            raise PostureConfigurationError(
                f"max_tokens must be in [16, n_ctx={self.n_ctx}], got: {self.max_tokens}"
            )

    @classmethod
    def from_settings(
        cls,
        settings,
        *,
        hf_token: Optional[str] = None,
        logger: Optional[logging.Logger] = None,
    ) -> "PostureConfig":
        """Build a config from `[posture]` settings, downloading model files if needed.

        Raises:
            PostureConfigurationError: If settings are incomplete, files are
                missing without a Hub repo to fetch them from, or a download fails.
        """
        logger = logger or logging.getLogger(__name__)

        model_dir = (settings.model_path or "").strip()
        if not model_dir:
            raise PostureConfigurationError("posture.model_path must point to a directory")

        model_path = _resolve_gguf(
            model_dir,
            settings.hf_filename,
            label="posture.hf_filename",
            repo_id=settings.hf_repo_id,
            revision=settings.hf_revision,
            hf_token=hf_token,
            logger=logger,
        )
        clip_model_path = _resolve_gguf(
            model_dir,
            settings.clip_filename,
            label="posture.clip_filename",
            repo_id=settings.hf_repo_id,
            revision=settings.hf_revision,
            hf_token=hf_token,
            logger=logger,
        )

        return cls(
            model_path=model_path,
            clip_model_path=clip_model_path,
            n_threads=settings.n_threads,
            n_ctx=settings.n_ctx,
            n_batch=settings.n_batch,
            temperature=settings.temperature,
            top_p=settings.top_p,
            max_tokens=settings.max_tokens,
            verbose=settings.verbose,
        )


def _resolve_gguf(
    model_dir: str,
    filename: str,
    *,
    label: str,
    repo_id: str,
    revision: str,
    hf_token: Optional[str],
    logger: logging.Logger,
) -> str:
    filename = (filename or "").strip()
    if not filename:
        raise PostureConfigurationError(f"{label} is required")
    if not filename.endswith(".gguf"):
        raise PostureConfigurationError(f"{label} must be a .gguf file, got: {filename}")

    repo_id = (repo_id or "").strip()
    if not repo_id:
        target_path = Path(model_dir).expanduser() / filename
        if not target_path.is_file():
            raise PostureConfigurationError(
                f"Model file not found: {target_path}. "
                "Place it there manually or set posture.hf_repo_id to download it."
            )
        logger.info("Using existing posture model file: %s", target_path)
        return str(target_path.absolute())

    try:
        resolved = ensure_model_downloaded(
            HFModelSpec(repo_id=repo_id, filename=filename, revision=revision or None),
            models_dir=model_dir,
            hf_token=hf_token,
            logger=logger,
        )
    except (ModelDownloadError, ValueError) as error:
        raise PostureConfigurationError(
            f"Failed to download {filename} from {repo_id}: {error}"
        ) from error
    return str(resolved.absolute())
