"""Dashboard asset lookup for the UI server's plain HTTP routes."""

from __future__ import annotations

from pathlib import Path, PurePosixPath
from typing import Optional

# Asset kinds the dashboard page may reference next to index.html.
DASHBOARD_CONTENT_TYPES: dict[str, str] = {
    ".html": "text/html; charset=utf-8",
    ".css": "text/css; charset=utf-8",
    ".js": "text/javascript; charset=utf-8",
    ".json": "application/json; charset=utf-8",
    ".webmanifest": "application/manifest+json; charset=utf-8",
    ".svg": "image/svg+xml",
    ".png": "image/png",
    ".ico": "image/x-icon",
    ".wav": "audio/wav",
}


def resolve_static_file(ui_root: Path, request_path: str) -> Optional[Path]:
    """Map a request path to a servable dashboard asset, or ``None``.

    Hidden segments (``.git``, ``.env``) and suffixes outside
    ``DASHBOARD_CONTENT_TYPES`` are refused before the filesystem is touched.
    """
    parts = PurePosixPath(request_path).parts
    relative = [part for part in parts if part != "/"]
    if not relative:
        return None
    if any(part.startswith(".") for part in relative):
        return None
    if content_type_for(Path(relative[-1])) is None:
        return None

    root = ui_root.resolve()
    candidate = root.joinpath(*relative).resolve()
    if root not in candidate.parents or not candidate.is_file():
        return None
    return candidate


def content_type_for(path: Path) -> Optional[str]:
    return DASHBOARD_CONTENT_TYPES.get(path.suffix.lower())
