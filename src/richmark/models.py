"""Public data models for richmark.

Blocks are the flat, positional units of a Markdown document: there is no
list container type, a list is simply a contiguous run of
:class:`BulletItem` or :class:`NumberedItem` blocks.  The remaining types
describe the editor session and the image upload side channel.
"""

from __future__ import annotations

import base64
import mimetypes
import uuid
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Union


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class SessionState(str, Enum):
    """States of an :class:`~richmark.editor.session.EditSession`."""

    IDLE = "idle"
    """Editor mounted, no serialization pending."""

    DEBOUNCING = "debouncing"
    """User changed content; waiting for the quiet period to elapse."""

    SYNCING = "syncing"
    """An external content update is being compared and rendered in."""


class UploadState(str, Enum):
    """Lifecycle states of a single image upload."""

    PENDING = "pending"
    """Accepted by the pipeline, bytes not read yet."""

    READING = "reading"
    """File bytes are being read into memory."""

    UPLOADING = "uploading"
    """Request handed to the upload collaborator."""

    UPLOADED = "uploaded"
    """Collaborator returned a reference; not inserted yet."""

    INSERTED = "inserted"
    """Image Markdown spliced into the live document."""

    FAILED = "failed"
    """Read, validation or upload failed; nothing was inserted."""


# ---------------------------------------------------------------------------
# Blocks
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Heading:
    """``# text`` (level 1) or ``## text`` (level 2)."""

    level: int
    text: str

    def to_markdown(self) -> str:
        return f"{'#' * self.level} {self.text}"


@dataclass(frozen=True)
class Paragraph:
    text: str

    def to_markdown(self) -> str:
        return self.text


@dataclass(frozen=True)
class TaskItem:
    """A checkbox entry, ``- [ ] text`` or ``- [x] text``."""

    checked: bool
    text: str

    def to_markdown(self) -> str:
        mark = "x" if self.checked else " "
        return f"- [{mark}] {self.text}".rstrip()


@dataclass(frozen=True)
class BulletItem:
    text: str

    def to_markdown(self) -> str:
        return f"- {self.text}"


@dataclass(frozen=True)
class NumberedItem:
    """An ordered-list entry.  The number itself is positional and is not kept."""

    text: str

    def to_markdown(self) -> str:
        return f"1. {self.text}"


@dataclass(frozen=True)
class Image:
    alt: str
    url: str

    def to_markdown(self) -> str:
        return f"![{self.alt}]({self.url})"


Block = Union[Heading, Paragraph, TaskItem, BulletItem, NumberedItem, Image]


# ---------------------------------------------------------------------------
# Upload side channel
# ---------------------------------------------------------------------------

@dataclass
class CandidateFile:
    """A file offered by a drop, paste or toolbar selection.

    Exactly one of *data* or *path* is normally set; *path* is read lazily
    by the pipeline.  *content_type* is what the browser declared and may
    be empty.
    """

    filename: str
    content_type: str = ""
    data: bytes | None = None
    path: Path | None = None

    @classmethod
    def from_path(cls, path: str | Path) -> CandidateFile:
        """Build a candidate for a file on disk, guessing its type from the name."""
        p = Path(path)
        content_type, _ = mimetypes.guess_type(p.name)
        return cls(filename=p.name, content_type=content_type or "", path=p)


@dataclass(frozen=True)
class UploadRequest:
    """Outbound request to the upload collaborator."""

    filename: str
    content_type: str
    size: int
    data: bytes

    def to_payload(self) -> dict[str, object]:
        """JSON-safe payload with base64-encoded bytes."""
        return {
            "filename": self.filename,
            "content_type": self.content_type,
            "size": self.size,
            "data": base64.b64encode(self.data).decode("ascii"),
        }


@dataclass(frozen=True)
class UploadResult:
    """Inbound completion: either ``url`` (success) or ``error`` (failure)."""

    url: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return bool(self.url) and self.error is None

    @classmethod
    def from_payload(cls, payload: dict) -> UploadResult:
        """Build a result from a ``{"url": ...}`` or ``{"error": ...}`` dict."""
        error = payload.get("error")
        if error:
            return cls(error=str(error))
        url = payload.get("url")
        if not url:
            return cls(error="upload completion carried no url")
        return cls(url=str(url))


@dataclass
class PendingUpload:
    """An accepted image file travelling through the upload pipeline."""

    filename: str
    content_type: str
    position: int
    size: int = 0
    upload_id: str = field(default_factory=lambda: uuid.uuid4().hex)
