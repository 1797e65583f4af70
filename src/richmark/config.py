"""Editor configuration for richmark.

:class:`EditorConfig` captures every tuneable knob used by the renderer,
the serializer, the edit session and the image pipeline.  A single
instance is usually shared by all of them.

:data:`DEFAULT_IMAGE_MIMES` lists the image types browsers hand over on
drop and paste; pass it as ``image_allowed_mimes`` to restrict uploads to
those types instead of accepting any ``image/*``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

DEFAULT_IMAGE_MIMES: list[str] = [
    "image/jpeg",
    "image/png",
    "image/gif",
    "image/webp",
    "image/svg+xml",
]
"""Common raster and vector image MIME types."""


@dataclass
class EditorConfig:
    """Complete configuration for an editing session.

    Every parameter has a default, so ``EditorConfig()`` is a working
    configuration as long as no :class:`HttpUploader` is used.

    Parameters
    ----------
    debounce_seconds:
        Quiet period after the last user edit before the live document is
        serialized and pushed to the canonical buffer.
    image_alt:
        Alt text written for images, both when an upload completes and when
        the serializer converts an ``<img>`` back to Markdown.
    image_allowed_mimes:
        Optional allowlist of image MIME types.  ``None`` accepts any
        ``image/*`` content type.
    image_max_size_bytes:
        Files larger than this are skipped before upload.  Default 10 MiB.
    image_max_concurrent:
        Maximum number of uploads in flight at once.
    upload_url:
        Endpoint used by :class:`~richmark.image.uploader.HttpUploader`.
        Plain ``http`` is only accepted for local hosts.
    upload_timeout_seconds:
        HTTP timeout for a single upload request.
    upload_headers:
        Extra headers for upload requests.
    metrics:
        Optional :class:`~richmark.observability.MetricsHook` backend.
    debug_dump_html:
        Write every rendered HTML document to *stderr*.
    debug_dump_markdown:
        Write every serialized Markdown document to *stderr*.
    """

    # ── Session ─────────────────────────────────────────────────────────
    debounce_seconds: float = 0.5

    # ── Images ──────────────────────────────────────────────────────────
    image_alt: str = "image"

    image_allowed_mimes: list[str] | None = None

    image_max_size_bytes: int = 10 * 1024 * 1024  # 10 MiB

    image_max_concurrent: int = 4

    # ── Upload transport ────────────────────────────────────────────────
    upload_url: str = ""

    upload_timeout_seconds: float = 30.0

    upload_headers: dict[str, str] = field(default_factory=dict)
    """Extra headers sent with every upload request (e.g. a CSRF token)."""

    # ── Observability ──────────────────────────────────────────────────
    metrics: Any | None = None

    # ── Debug ───────────────────────────────────────────────────────────
    debug_dump_html: bool = False

    debug_dump_markdown: bool = False

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        from urllib.parse import urlparse

        if self.upload_url:
            parsed = urlparse(self.upload_url)
            if parsed.scheme not in ("http", "https"):
                raise ValueError(
                    f"upload_url must be an http(s) URL, got {self.upload_url!r}"
                )
            if parsed.scheme == "http" and parsed.hostname not in (
                "localhost",
                "127.0.0.1",
                "::1",
            ):
                raise ValueError(
                    f"upload_url uses insecure HTTP for non-local host '{parsed.hostname}'. "
                    "Use HTTPS, or target localhost for testing."
                )

        if self.debounce_seconds < 0:
            raise ValueError(f"debounce_seconds must be >= 0, got {self.debounce_seconds}")
        if not self.image_alt:
            raise ValueError("image_alt must be a non-empty string")
        if "]" in self.image_alt or "\n" in self.image_alt:
            raise ValueError(f"image_alt cannot contain ']' or newlines, got {self.image_alt!r}")
        if self.image_max_size_bytes <= 0:
            raise ValueError(f"image_max_size_bytes must be > 0, got {self.image_max_size_bytes}")
        if self.image_max_concurrent < 1:
            raise ValueError(f"image_max_concurrent must be >= 1, got {self.image_max_concurrent}")
        if self.upload_timeout_seconds <= 0:
            raise ValueError(
                f"upload_timeout_seconds must be > 0, got {self.upload_timeout_seconds}"
            )
        if self.image_allowed_mimes is not None:
            bad = [m for m in self.image_allowed_mimes if not m.startswith("image/")]
            if bad:
                raise ValueError(f"image_allowed_mimes must be image/* types, got {bad}")
