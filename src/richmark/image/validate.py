"""Image validation: content-type resolution and size checks.

Browsers do not always declare a content type for dropped or pasted
files, so the type is resolved from, in order, the declared type, the
filename extension and the leading magic bytes.
"""

from __future__ import annotations

import mimetypes

from richmark.config import EditorConfig
from richmark.errors import RichmarkImageSizeError, RichmarkImageTypeError
from richmark.models import CandidateFile

# Map of magic bytes to MIME types for sniffing.
_MAGIC_BYTES: list[tuple[bytes, str]] = [
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
    (b"RIFF", "image/webp"),  # RIFF....WEBP (checked below)
    (b"<svg", "image/svg+xml"),
    (b"<?xml", "image/svg+xml"),
    (b"BM", "image/bmp"),
]


def sniff_mime(data: bytes) -> str | None:
    """Detect an image MIME type from the first bytes of *data*."""
    for magic, mime in _MAGIC_BYTES:
        if data[:len(magic)] == magic:
            if magic == b"RIFF" and data[8:12] != b"WEBP":
                continue
            return mime
    return None


def resolve_content_type(candidate: CandidateFile, data: bytes | None = None) -> str:
    """Best-known content type of *candidate*, or ``""`` if nothing is known."""
    declared = (candidate.content_type or "").split(";")[0].strip().lower()
    if declared:
        return declared
    guessed, _ = mimetypes.guess_type(candidate.filename)
    if guessed:
        return guessed
    if data is None:
        data = candidate.data
    if data:
        return sniff_mime(data) or ""
    return ""


def is_accepted_type(content_type: str, config: EditorConfig) -> bool:
    """Whether *content_type* passes the image filter of *config*."""
    if not content_type.startswith("image/"):
        return False
    allowed = config.image_allowed_mimes
    return allowed is None or content_type in allowed


def validate_image(
    filename: str,
    content_type: str,
    data: bytes,
    config: EditorConfig,
) -> None:
    """Check a fully read image against the configured limits.

    Raises
    ------
    RichmarkImageTypeError
        If *content_type* is not an accepted image type.
    RichmarkImageSizeError
        If *data* exceeds ``config.image_max_size_bytes``.
    """
    if not is_accepted_type(content_type, config):
        raise RichmarkImageTypeError(
            message=f"Not an accepted image type: {content_type or 'unknown'}",
            context={
                "filename": filename,
                "content_type": content_type,
                "allowed_mimes": config.image_allowed_mimes,
            },
        )
    if len(data) > config.image_max_size_bytes:
        raise RichmarkImageSizeError(
            message=(
                f"Image {filename} is {len(data)} bytes, "
                f"limit is {config.image_max_size_bytes}"
            ),
            context={
                "filename": filename,
                "size_bytes": len(data),
                "max_bytes": config.image_max_size_bytes,
            },
        )
