"""Validation for captured photos submitted as base64 data URIs."""

from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass

from contracts.ui_protocol import MAX_PHOTO_BYTES

from .errors import PostureAnalysisError

_DATA_URI_RE = re.compile(
    r"^data:(?P<mime>[a-z0-9.+-]+/[a-z0-9.+-]+);base64,(?P<data>[A-Za-z0-9+/=\s]+)$",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class ImageDataUri:
    """A decoded ``data:image/...;base64,...`` photo."""
    mime_type: str
    data: bytes
    uri: str


def parse_image_data_uri(value: str) -> ImageDataUri:
    """Parse and validate a photo data URI with an ``image/*`` MIME type."""
    if not isinstance(value, str) or not value.strip():
        raise PostureAnalysisError("Photo data URI cannot be empty")

    match = _DATA_URI_RE.match(value.strip())
    if match is None:
        raise PostureAnalysisError(
            "Photo must be a data URI of the form data:<mimetype>;base64,<data>"
        )

    mime_type = match.group("mime").lower()
    if not mime_type.startswith("image/"):
        raise PostureAnalysisError(f"Photo MIME type must be image/*, got: {mime_type}")

    payload = "".join(match.group("data").split())
    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as error:
        raise PostureAnalysisError(f"Photo data is not valid base64: {error}") from error

    if not data:
        raise PostureAnalysisError("Photo data is empty")
    if len(data) > MAX_PHOTO_BYTES:
        raise PostureAnalysisError(
            f"Photo is too large ({len(data):,} bytes, limit {MAX_PHOTO_BYTES:,})"
        )

    return ImageDataUri(
        mime_type=mime_type,
        data=data,
        uri=f"data:{mime_type};base64,{payload}",
    )
