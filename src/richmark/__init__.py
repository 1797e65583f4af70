"""richmark: Markdown <-> rich-text editor synchronization.

Public re-exports
-----------------

* **Conversion:** :func:`render`, :func:`serialize`, :func:`parse_blocks`
* **Editor:** :class:`EditSession`, :class:`LiveDocument`
* **Images:** :class:`ImageCapturePipeline`, :class:`HttpUploader`,
  :class:`BridgeUploader`
* **Host signals:** :class:`HostBridge`
* **Configuration:** :class:`EditorConfig`
* **Errors:** Every :class:`RichmarkError` subclass and :class:`ErrorCode`

Usage::

    from richmark import EditSession, render, serialize

    html = render("# Title\\n- [x] done")
    session = EditSession(sink=print, initial_content="Hello **world**")
"""

from __future__ import annotations

# ── Host signals ────────────────────────────────────────────────────────
from richmark.bridge import BridgeUploader, HostBridge

# ── Configuration ───────────────────────────────────────────────────────
from richmark.config import DEFAULT_IMAGE_MIMES, EditorConfig

# ── Conversion ──────────────────────────────────────────────────────────
from richmark.converter import (
    EMPTY_DOCUMENT_HTML,
    MarkdownRenderer,
    MarkdownSerializer,
    format_inline,
    normalize_markdown,
    parse_blocks,
    render,
    serialize,
)

# ── Editor ──────────────────────────────────────────────────────────────
from richmark.editor import EditSession, LiveDocument

# ── Errors ──────────────────────────────────────────────────────────────
from richmark.errors import (
    ErrorCode,
    RichmarkError,
    RichmarkImageError,
    RichmarkImageNotFoundError,
    RichmarkImageSizeError,
    RichmarkImageTypeError,
    RichmarkUploadError,
    RichmarkUploadRejectedError,
    RichmarkUploadTransportError,
    RichmarkValidationError,
)

# ── Images ──────────────────────────────────────────────────────────────
from richmark.image import HttpUploader, ImageCapturePipeline, Uploader

# ── Models ──────────────────────────────────────────────────────────────
from richmark.models import (
    Block,
    BulletItem,
    CandidateFile,
    Heading,
    Image,
    NumberedItem,
    Paragraph,
    PendingUpload,
    SessionState,
    TaskItem,
    UploadRequest,
    UploadResult,
    UploadState,
)

__all__ = [
    "DEFAULT_IMAGE_MIMES",
    "EMPTY_DOCUMENT_HTML",
    "Block",
    "BridgeUploader",
    "BulletItem",
    "CandidateFile",
    "EditSession",
    "EditorConfig",
    "ErrorCode",
    "Heading",
    "HostBridge",
    "HttpUploader",
    "Image",
    "ImageCapturePipeline",
    "LiveDocument",
    "MarkdownRenderer",
    "MarkdownSerializer",
    "NumberedItem",
    "Paragraph",
    "PendingUpload",
    "RichmarkError",
    "RichmarkImageError",
    "RichmarkImageNotFoundError",
    "RichmarkImageSizeError",
    "RichmarkImageTypeError",
    "RichmarkUploadError",
    "RichmarkUploadRejectedError",
    "RichmarkUploadTransportError",
    "RichmarkValidationError",
    "SessionState",
    "TaskItem",
    "UploadRequest",
    "UploadResult",
    "UploadState",
    "Uploader",
    "format_inline",
    "normalize_markdown",
    "parse_blocks",
    "render",
    "serialize",
]
