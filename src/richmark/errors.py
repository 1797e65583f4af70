"""Error hierarchy for richmark.

Every public error class inherits from :class:`RichmarkError`, which
carries a machine-readable ``code`` (from :class:`ErrorCode`), a
human-readable ``message``, an optional structured ``context`` dict and an
optional ``cause``.

Conversion never raises: malformed Markdown degrades to paragraphs and
serialization always yields a string.  The errors below come from the
image pipeline, the upload collaborators and the host signal boundary.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

# ---------------------------------------------------------------------------
# Error code enum
# ---------------------------------------------------------------------------

class ErrorCode(str, Enum):
    """Machine-readable error codes for every error richmark can raise."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    IMAGE_ERROR = "IMAGE_ERROR"
    IMAGE_NOT_FOUND = "IMAGE_NOT_FOUND"
    IMAGE_TYPE_ERROR = "IMAGE_TYPE_ERROR"
    IMAGE_SIZE_ERROR = "IMAGE_SIZE_ERROR"
    UPLOAD_ERROR = "UPLOAD_ERROR"
    UPLOAD_TRANSPORT_ERROR = "UPLOAD_TRANSPORT_ERROR"
    UPLOAD_REJECTED = "UPLOAD_REJECTED"


# ---------------------------------------------------------------------------
# Base error
# ---------------------------------------------------------------------------

class RichmarkError(Exception):
    """Base exception for all richmark errors.

    Parameters
    ----------
    code:
        A value from :class:`ErrorCode` identifying the error category.
    message:
        A developer-friendly description of what went wrong.
    context:
        Structured diagnostic data; keys are documented per subclass.
    cause:
        The underlying exception, if this error wraps another.
    """

    def __init__(
        self,
        code: str,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.code: str = code
        self.message: str = message
        self.context: dict[str, Any] = context or {}
        self.cause: Exception | None = cause
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause

    def __repr__(self) -> str:
        ctx = f", context={self.context!r}" if self.context else ""
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r}{ctx})"


class RichmarkValidationError(RichmarkError):
    """A host signal or its payload was malformed.

    Context keys: ``event``, ``payload``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.VALIDATION_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


# ---------------------------------------------------------------------------
# Image errors
# ---------------------------------------------------------------------------

class RichmarkImageError(RichmarkError):
    """Base class for errors raised while capturing an image file."""

    def __init__(
        self,
        code: str = ErrorCode.IMAGE_ERROR,
        message: str = "Image error",
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=code,
            message=message,
            context=context,
            cause=cause,
        )


class RichmarkImageNotFoundError(RichmarkImageError):
    """A selected file could not be read.

    Context keys: ``filename``, ``path``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.IMAGE_NOT_FOUND,
            message=message,
            context=context,
            cause=cause,
        )


class RichmarkImageTypeError(RichmarkImageError):
    """The file's content type is not an accepted image type.

    Context keys: ``filename``, ``content_type``, ``allowed_mimes``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.IMAGE_TYPE_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


class RichmarkImageSizeError(RichmarkImageError):
    """The file exceeds ``image_max_size_bytes``.

    Context keys: ``filename``, ``size_bytes``, ``max_bytes``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.IMAGE_SIZE_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


# ---------------------------------------------------------------------------
# Upload errors
# ---------------------------------------------------------------------------

class RichmarkUploadError(RichmarkError):
    """Base class for upload collaborator errors."""

    def __init__(
        self,
        code: str = ErrorCode.UPLOAD_ERROR,
        message: str = "Upload error",
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=code,
            message=message,
            context=context,
            cause=cause,
        )


class RichmarkUploadTransportError(RichmarkUploadError):
    """The upload request never produced a response (timeout, DNS, reset).

    Context keys: ``url``, ``filename``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.UPLOAD_TRANSPORT_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


class RichmarkUploadRejectedError(RichmarkUploadError):
    """The upload collaborator answered with an ``{error}`` completion.

    Context keys: ``filename``, ``error``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.UPLOAD_REJECTED,
            message=message,
            context=context,
            cause=cause,
        )
